"""
Merkle Engine - Merkle trees with compact, portable inclusion proofs.

This package builds binary hash trees over ordered data blocks, produces
O(log n) inclusion proofs and verifies them against a trusted root, with the
hash algorithm supplied by the caller.
"""

from importlib.metadata import PackageNotFoundError, version

# Set up version
__version__ = "0.1.0"

try:
    __version__ = version("merkle-engine")
except PackageNotFoundError:
    pass

# Core components
from merkle_engine.core.codec import decode_proof, encode_proof, proof_from_json, proof_to_json
from merkle_engine.core.errors import (
    EmptyInputError,
    InsufficientDataError,
    InvalidIndexError,
    InvalidPositionError,
    MerkleError,
    ProofDecodeError,
    TrailingDataError,
    UnsupportedAlgorithmError,
)
from merkle_engine.core.hashers import (
    CryptographyHasher,
    FunctionHasher,
    Hasher,
    Sha256Hasher,
    SimpleHasher,
    bytes_to_hex,
    constant_time_equals,
    get_hasher,
)
from merkle_engine.core.merkle import MerkleTree, compute_root, verify_proof
from merkle_engine.core.models import Proof, ProofStep, SiblingPosition
from merkle_engine.core.nodes import InternalNode, LeafNode, Node

__all__ = [
    # Tree and proofs
    "MerkleTree",
    "compute_root",
    "verify_proof",
    "Proof",
    "ProofStep",
    "SiblingPosition",
    "LeafNode",
    "InternalNode",
    "Node",
    # Codec
    "encode_proof",
    "decode_proof",
    "proof_to_json",
    "proof_from_json",
    # Hashers
    "Hasher",
    "Sha256Hasher",
    "CryptographyHasher",
    "SimpleHasher",
    "FunctionHasher",
    "get_hasher",
    "bytes_to_hex",
    "constant_time_equals",
    # Errors
    "MerkleError",
    "EmptyInputError",
    "InvalidIndexError",
    "UnsupportedAlgorithmError",
    "ProofDecodeError",
    "InsufficientDataError",
    "InvalidPositionError",
    "TrailingDataError",
]
