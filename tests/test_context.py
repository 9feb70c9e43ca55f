"""Tests for aegis.context: ScanContext, create_context and node/function counts."""

import dataclasses

import pytest

from aegis.context import ScanContext, count_tree_stats, create_context
from aegis.parser import create_parser, parse_source

SOURCE = """\
pragma solidity ^0.7.6;

contract Vault {
    function a() public {}
    function b() public view returns (uint256) { return 1; }
}
"""


def test_count_tree_stats():
    tree = parse_source(SOURCE, parser=create_parser())
    nodes, funcs = count_tree_stats(tree)
    assert nodes > 3
    assert funcs == 2


def test_create_context_derives_version():
    tree = parse_source(SOURCE)
    ctx = create_context("contracts/Vault.sol", SOURCE, tree)
    assert ctx.path == "contracts/Vault.sol"
    assert ctx.source == SOURCE
    assert ctx.tree is tree
    assert ctx.version == "^0.7.6"
    assert ctx.is_08_plus is False


def test_create_context_without_pragma():
    source = "contract A {}\n"
    ctx = create_context("A.sol", source, parse_source(source))
    assert ctx.version is None
    assert ctx.is_08_plus is False


def test_create_context_08():
    source = "pragma solidity 0.8.19;\ncontract A {}\n"
    ctx = create_context("A.sol", source, parse_source(source))
    assert ctx.version == "0.8.19"
    assert ctx.is_08_plus is True


def test_context_is_immutable():
    ctx = create_context("A.sol", "contract A {}", parse_source("contract A {}"))
    with pytest.raises(dataclasses.FrozenInstanceError):
        ctx.version = "0.8.0"


def test_context_defaults():
    ctx = ScanContext(path="x.sol", source="", tree=parse_source(""))
    assert ctx.version is None
    assert ctx.is_08_plus is False
