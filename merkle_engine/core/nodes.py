"""
Node model for the Merkle tree.

A node is exactly one of two variants, :class:`LeafNode` or
:class:`InternalNode`, each carrying its cached digest. Digests are
domain-separated so a leaf can never be reinterpreted as an internal node,
and an internal node's digest depends on the order of its children.
"""

from dataclasses import dataclass, field
from typing import Optional, Union

from merkle_engine.core.hashers import Hasher

# Domain separation tags for Merkle tree hashing
LEAF_NODE_PREFIX = b'\x00'  # Prefix for leaf nodes
INTERNAL_NODE_PREFIX = b'\x01'  # Prefix for internal nodes


def hash_leaf(data: bytes, hasher: Hasher) -> bytes:
    """Hash a leaf node with domain separation: H(0x00 || data)."""
    return hasher.digest(LEAF_NODE_PREFIX + bytes(data))


def hash_internal(left: bytes, right: bytes, hasher: Hasher) -> bytes:
    """Hash an internal node with domain separation: H(0x01 || left || right)."""
    return hasher.digest(INTERNAL_NODE_PREFIX + bytes(left) + bytes(right))


@dataclass(frozen=True)
class LeafNode:
    """A leaf holding an owned copy of its data."""
    data: bytes
    digest: bytes = field(repr=False)

    @classmethod
    def create(cls, data: bytes, hasher: Hasher) -> 'LeafNode':
        owned = bytes(data)
        return cls(data=owned, digest=hash_leaf(owned, hasher))

    @property
    def is_leaf(self) -> bool:
        return True


@dataclass(frozen=True)
class InternalNode:
    """
    An internal node over an ordered pair of children.

    When a level has an odd number of nodes the last one is paired with
    itself, so ``left`` and ``right`` may be the very same object.
    """
    left: 'Node' = field(repr=False)
    right: 'Node' = field(repr=False)
    digest: bytes = field(repr=False)

    @classmethod
    def create(cls, left: 'Node', right: 'Node', hasher: Hasher) -> 'InternalNode':
        return cls(
            left=left,
            right=right,
            digest=hash_internal(node_digest(left), node_digest(right), hasher),
        )

    @property
    def is_leaf(self) -> bool:
        return False

    @property
    def data(self) -> None:
        return None

    @property
    def is_self_paired(self) -> bool:
        """True when this node was built by duplicating an unpaired child."""
        return self.left is self.right


Node = Union[LeafNode, InternalNode]


def node_digest(node: Node) -> bytes:
    """Return the cached digest of either node variant."""
    if isinstance(node, LeafNode):
        return node.digest
    if isinstance(node, InternalNode):
        return node.digest
    raise TypeError(f"Expected LeafNode or InternalNode, got {type(node).__name__}")


def node_data(node: Node) -> Optional[bytes]:
    """Return the leaf data of a node, or None for an internal node."""
    if isinstance(node, LeafNode):
        return node.data
    if isinstance(node, InternalNode):
        return None
    raise TypeError(f"Expected LeafNode or InternalNode, got {type(node).__name__}")


__all__ = [
    "LEAF_NODE_PREFIX",
    "INTERNAL_NODE_PREFIX",
    "hash_leaf",
    "hash_internal",
    "LeafNode",
    "InternalNode",
    "Node",
    "node_digest",
    "node_data",
]
