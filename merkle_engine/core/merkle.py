"""
Merkle tree construction, inclusion proofs and proof verification.

Leaves are hashed as H(0x00 || data) and internal nodes as
H(0x01 || left || right). Levels with an odd number of nodes pair the last
node with itself, at every level of the tree.
"""

import logging
from typing import Iterable, List, Optional, Sequence

from merkle_engine.core.errors import EmptyInputError, InvalidIndexError
from merkle_engine.core.hashers import (
    Hasher,
    Sha256Hasher,
    bytes_to_hex,
    constant_time_equals,
)
from merkle_engine.core.models import Proof, ProofStep, SiblingPosition
from merkle_engine.core.nodes import (
    InternalNode,
    LeafNode,
    Node,
    hash_internal,
    hash_leaf,
    node_data,
    node_digest,
)

logger = logging.getLogger(__name__)

_BYTES_LIKE = (bytes, bytearray, memoryview)


def _check_leaf_data(data) -> bytes:
    if not isinstance(data, _BYTES_LIKE):
        raise TypeError(f"Leaf data must be bytes-like, got {type(data).__name__}")
    owned = bytes(data)
    if not owned:
        raise EmptyInputError()
    return owned


class MerkleTree:
    """
    A binary Merkle tree over an append-only sequence of data blocks.

    Every append rebuilds all internal levels from the leaves. The tree
    does no locking of its own; mutate one instance from a single writer.
    """

    def __init__(self, leaves: Optional[Iterable[bytes]] = None, hasher: Optional[Hasher] = None):
        """Initialize a new Merkle tree with the given hasher and leaves."""
        if hasher is not None and not isinstance(hasher, Hasher):
            raise TypeError(
                f"Expected a hasher with digest() and digest_size, got {type(hasher).__name__}"
            )
        self._hasher: Hasher = hasher if hasher is not None else Sha256Hasher()
        self._leaves: List[LeafNode] = []
        self._levels: List[List[Node]] = []
        if leaves is not None:
            self.extend(leaves)

    @property
    def hasher(self) -> Hasher:
        return self._hasher

    @property
    def size(self) -> int:
        """Number of leaves in the tree."""
        return len(self._leaves)

    def __len__(self) -> int:
        return len(self._leaves)

    @property
    def root(self) -> Optional[Node]:
        """Root node, or None for an empty tree."""
        return self._levels[-1][0] if self._levels else None

    def __repr__(self) -> str:
        return f"MerkleTree(size={self.size}, hasher={self._hasher!r})"

    def add_leaf(self, data: bytes) -> int:
        """
        Append a leaf and rebuild the tree.

        Returns:
            The index assigned to the new leaf.

        Raises:
            EmptyInputError: If data is empty. The tree is left unchanged.
            TypeError: If data is not bytes-like.
        """
        owned = _check_leaf_data(data)
        index = len(self._leaves)
        self._leaves.append(LeafNode.create(owned, self._hasher))
        self._build_tree()
        return index

    def extend(self, items: Iterable[bytes]) -> List[int]:
        """
        Append several leaves with a single rebuild.

        All items are validated before any is appended, so a failure leaves
        the tree unchanged.
        """
        owned = [_check_leaf_data(item) for item in items]
        if not owned:
            return []
        start = len(self._leaves)
        self._leaves.extend(LeafNode.create(data, self._hasher) for data in owned)
        self._build_tree()
        return list(range(start, len(self._leaves)))

    def _build_tree(self) -> None:
        """Rebuild every level of the tree from the current leaves."""
        if not self._leaves:
            self._levels = []
            return

        nodes: List[Node] = list(self._leaves)
        levels = [nodes]
        while len(nodes) > 1:
            new_level: List[Node] = []
            for i in range(0, len(nodes), 2):
                left = nodes[i]
                # An unpaired last node is paired with itself
                right = nodes[i + 1] if i + 1 < len(nodes) else left
                new_level.append(InternalNode.create(left, right, self._hasher))
            nodes = new_level
            levels.append(nodes)

        self._levels = levels
        logger.debug(
            "Rebuilt tree: size=%d depth=%d root=%s",
            len(self._leaves), len(levels) - 1, bytes_to_hex(node_digest(nodes[0])),
        )

    def get_root(self) -> Optional[bytes]:
        """Get the root digest, or None for an empty tree."""
        root = self.root
        return node_digest(root) if root is not None else None

    def get_root_hex(self) -> Optional[str]:
        """Get the root digest as lowercase hex, or None for an empty tree."""
        root = self.get_root()
        return bytes_to_hex(root) if root is not None else None

    def get_data(self, index: int) -> Optional[bytes]:
        """Get the data stored at a leaf index, or None if out of range."""
        if index < 0 or index >= len(self._leaves):
            return None
        return node_data(self._leaves[index])

    def get_leaf_hash(self, index: int) -> Optional[bytes]:
        """Get the digest of a leaf node by its index."""
        if index < 0 or index >= len(self._leaves):
            return None
        return self._leaves[index].digest

    def levels(self) -> List[List[bytes]]:
        """Digests of every level, leaf level first and root level last."""
        return [[node_digest(node) for node in level] for level in self._levels]

    def prove(self, index: int) -> Proof:
        """
        Generate an inclusion proof for a leaf.

        Args:
            index: The index of the leaf to prove inclusion for.

        Returns:
            A proof whose steps run from the leaf level toward the root.

        Raises:
            InvalidIndexError: If the index is out of range or the tree is empty.
        """
        size = len(self._leaves)
        if index < 0 or index >= size:
            raise InvalidIndexError(index, size)

        steps: List[ProofStep] = []
        position = index
        for level in self._levels[:-1]:
            if position % 2 == 0:
                sibling_index = position + 1 if position + 1 < len(level) else position
                side = SiblingPosition.RIGHT
            else:
                sibling_index = position - 1
                side = SiblingPosition.LEFT
            steps.append(ProofStep(sibling=node_digest(level[sibling_index]), position=side))
            position //= 2

        logger.debug("Generated proof for leaf %d of %d with %d steps", index, size, len(steps))
        return Proof(
            leaf_index=index,
            leaf_hash=self._leaves[index].digest,
            steps=tuple(steps),
        )

    def verify(self, data: bytes, proof: Proof) -> bool:
        """Verify that data is included in this tree at the proof's index."""
        root = self.get_root()
        if root is None:
            return False
        return verify_proof(data, proof, root, self._hasher)


def compute_root(leaf_hash: bytes, steps: Sequence[ProofStep], hasher: Hasher) -> bytes:
    """Fold a sibling path onto a leaf digest to recompute the root digest."""
    current = bytes(leaf_hash)
    for step in steps:
        if step.position == SiblingPosition.RIGHT:
            current = hash_internal(current, step.sibling, hasher)
        else:
            current = hash_internal(step.sibling, current, hasher)
    return current


def _path_matches_index(proof: Proof) -> bool:
    """Each step's side must agree with the corresponding bit of the leaf index."""
    position = proof.leaf_index
    for step in proof.steps:
        expected = SiblingPosition.LEFT if position % 2 else SiblingPosition.RIGHT
        if step.position != expected:
            return False
        position //= 2
    return position == 0


def verify_proof(
    data: bytes,
    proof: Proof,
    expected_root: bytes,
    hasher: Optional[Hasher] = None,
) -> bool:
    """
    Verify a Merkle inclusion proof for raw leaf data.

    The leaf digest is always recomputed from data and must match the
    proof's leaf hash. The recomputed root is compared to expected_root in
    constant time.

    Args:
        data: The raw leaf data claimed to be included.
        proof: The inclusion proof.
        expected_root: The trusted root digest.
        hasher: The hasher the tree was built with (SHA-256 by default).

    Returns:
        True if the proof is valid, False otherwise.
    """
    if hasher is None:
        hasher = Sha256Hasher()

    if not isinstance(data, _BYTES_LIKE) or not data:
        return False
    if not isinstance(expected_root, _BYTES_LIKE):
        return False
    if len(proof.leaf_hash) != hasher.digest_size or len(expected_root) != hasher.digest_size:
        return False
    if not _path_matches_index(proof):
        return False

    leaf_hash = hash_leaf(data, hasher)
    if not constant_time_equals(leaf_hash, proof.leaf_hash):
        return False

    computed = compute_root(leaf_hash, proof.steps, hasher)
    return constant_time_equals(computed, expected_root)


__all__ = ["MerkleTree", "compute_root", "verify_proof"]
