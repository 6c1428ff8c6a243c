"""Shared fixtures for the Merkle engine tests."""

import pytest

from merkle_engine.core.merkle import MerkleTree


@pytest.fixture
def abcd_tree() -> MerkleTree:
    """A SHA-256 tree over the leaves a, b, c, d."""
    return MerkleTree([b"a", b"b", b"c", b"d"])


@pytest.fixture
def abc_tree() -> MerkleTree:
    """A SHA-256 tree over three leaves, which forces self-duplication."""
    return MerkleTree([b"a", b"b", b"c"])
