"""
Core functionality for the Merkle engine.

This package contains the node model, tree construction, inclusion proof
generation and verification, and the proof wire format.
"""

from .codec import decode_proof, encode_proof, proof_from_json, proof_to_json
from .errors import (
    EmptyInputError,
    InsufficientDataError,
    InvalidIndexError,
    InvalidPositionError,
    MerkleError,
    ProofDecodeError,
    TrailingDataError,
    UnsupportedAlgorithmError,
)
from .merkle import MerkleTree, compute_root, verify_proof
from .models import Proof, ProofStep, SiblingPosition
from .nodes import InternalNode, LeafNode, Node

__all__ = [
    'MerkleTree', 'compute_root', 'verify_proof',
    'Proof', 'ProofStep', 'SiblingPosition',
    'LeafNode', 'InternalNode', 'Node',
    'encode_proof', 'decode_proof', 'proof_to_json', 'proof_from_json',
    'MerkleError', 'EmptyInputError', 'InvalidIndexError', 'UnsupportedAlgorithmError',
    'ProofDecodeError', 'InsufficientDataError', 'InvalidPositionError', 'TrailingDataError',
]
