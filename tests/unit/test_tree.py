"""Unit tests for Merkle tree construction."""

import logging

import pytest

from merkle_engine.core.errors import EmptyInputError
from merkle_engine.core.hashers import CryptographyHasher, SimpleHasher
from merkle_engine.core.merkle import MerkleTree
from merkle_engine.core.nodes import InternalNode, LeafNode

from tests.helpers import leaf_hash, node_hash


def test_empty_tree() -> None:
    tree = MerkleTree()
    assert tree.size == 0
    assert len(tree) == 0
    assert tree.get_root() is None
    assert tree.get_root_hex() is None
    assert tree.root is None
    assert tree.levels() == []


def test_add_leaf_returns_index() -> None:
    tree = MerkleTree()
    assert tree.add_leaf(b"a") == 0
    assert tree.add_leaf(b"b") == 1
    assert tree.add_leaf(b"c") == 2
    assert tree.size == 3
    assert tree.get_data(1) == b"b"
    assert tree.get_data(3) is None
    assert tree.get_data(-1) is None
    assert tree.get_leaf_hash(2) == leaf_hash(b"c")
    assert tree.get_leaf_hash(5) is None


def test_empty_leaf_rejected() -> None:
    """Empty data fails and leaves the tree untouched."""
    tree = MerkleTree([b"a"])
    root = tree.get_root()
    with pytest.raises(EmptyInputError):
        tree.add_leaf(b"")
    assert tree.size == 1
    assert tree.get_root() == root


def test_empty_leaf_on_empty_tree() -> None:
    tree = MerkleTree()
    with pytest.raises(ValueError):
        tree.add_leaf(bytearray())
    assert tree.size == 0
    assert tree.get_root() is None


def test_text_leaf_rejected() -> None:
    tree = MerkleTree()
    with pytest.raises(TypeError):
        tree.add_leaf("text")
    assert tree.size == 0


def test_extend_is_atomic() -> None:
    tree = MerkleTree([b"a"])
    with pytest.raises(EmptyInputError):
        tree.extend([b"b", b"", b"c"])
    assert tree.size == 1
    assert tree.extend([b"b", b"c"]) == [1, 2]
    assert tree.extend([]) == []
    assert tree.get_root() == MerkleTree([b"a", b"b", b"c"]).get_root()


def test_leaf_data_is_copied() -> None:
    buf = bytearray(b"abc")
    tree = MerkleTree()
    tree.add_leaf(buf)
    buf[:] = b"xyz"
    assert tree.get_data(0) == b"abc"


def test_single_leaf_root() -> None:
    """A lone leaf is its own root."""
    tree = MerkleTree([b"only"])
    assert tree.get_root() == leaf_hash(b"only")
    assert isinstance(tree.root, LeafNode)
    assert tree.get_root_hex() == leaf_hash(b"only").hex()


def test_two_leaves() -> None:
    tree = MerkleTree([b"a", b"b"])
    assert tree.get_root() == node_hash(leaf_hash(b"a"), leaf_hash(b"b"))


def test_four_leaves() -> None:
    tree = MerkleTree([b"a", b"b", b"c", b"d"])
    expected = node_hash(
        node_hash(leaf_hash(b"a"), leaf_hash(b"b")),
        node_hash(leaf_hash(b"c"), leaf_hash(b"d")),
    )
    assert tree.get_root() == expected


def test_three_leaves_duplicate_last(abc_tree: MerkleTree) -> None:
    """An odd level pairs its last node with itself."""
    ha, hb, hc = leaf_hash(b"a"), leaf_hash(b"b"), leaf_hash(b"c")
    levels = abc_tree.levels()
    assert levels[0] == [ha, hb, hc]
    assert levels[1] == [node_hash(ha, hb), node_hash(hc, hc)]
    assert levels[2] == [node_hash(levels[1][0], levels[1][1])]
    assert abc_tree.get_root() == levels[2][0]

    right = abc_tree.root.right
    assert isinstance(right, InternalNode)
    assert right.left is right.right


def test_duplication_applies_at_every_level() -> None:
    """Five leaves leave an odd count at levels 0 and 1."""
    leaves = [b"1", b"2", b"3", b"4", b"5"]
    h = [leaf_hash(x) for x in leaves]
    level1 = [node_hash(h[0], h[1]), node_hash(h[2], h[3]), node_hash(h[4], h[4])]
    level2 = [node_hash(level1[0], level1[1]), node_hash(level1[2], level1[2])]
    root = node_hash(level2[0], level2[1])

    tree = MerkleTree(leaves)
    assert tree.levels() == [h, level1, level2, [root]]
    assert tree.get_root() == root


def test_roots_are_deterministic() -> None:
    leaves = [b"alpha", b"beta", b"gamma", b"delta", b"epsilon"]
    incremental = MerkleTree()
    for leaf in leaves:
        incremental.add_leaf(leaf)
    assert incremental.get_root() == MerkleTree(leaves).get_root()


def test_leaf_order_matters() -> None:
    assert MerkleTree([b"a", b"b"]).get_root() != MerkleTree([b"b", b"a"]).get_root()


def test_root_changes_on_append() -> None:
    tree = MerkleTree([b"a", b"b"])
    before = tree.get_root()
    tree.add_leaf(b"c")
    assert tree.get_root() != before


def test_pluggable_hasher() -> None:
    tree = MerkleTree([b"a", b"b", b"c"], hasher=CryptographyHasher("sha512"))
    assert len(tree.get_root()) == 64
    assert tree.get_root() != MerkleTree([b"a", b"b", b"c"]).get_root()


def test_simple_hasher_tree() -> None:
    tree = MerkleTree([b"a", b"b"], hasher=SimpleHasher())
    assert len(tree.get_root()) == 32
    assert isinstance(tree.hasher, SimpleHasher)


def test_rebuild_is_logged(caplog) -> None:
    with caplog.at_level(logging.DEBUG, logger="merkle_engine.core.merkle"):
        tree = MerkleTree([b"a", b"b"])
    assert "size=2" in caplog.text
    assert tree.get_root_hex() in caplog.text


def test_non_hasher_rejected() -> None:
    """Objects without digest() and digest_size are refused up front."""
    with pytest.raises(TypeError):
        MerkleTree([b"a"], hasher=object())
