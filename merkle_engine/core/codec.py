"""
Binary and JSON encodings of Merkle inclusion proofs.

Binary layout, all integers little-endian::

    leaf_index   u64
    leaf_hash    digest_size bytes
    step_count   u64
    step_count x (sibling digest_size bytes, position u8)

A position byte is 0x00 for a left sibling and 0x01 for a right sibling.
This layout is the interchange format with other implementations and must
stay bit-for-bit stable.
"""

import json
import logging
import struct

from pydantic import ValidationError

from merkle_engine.core.errors import (
    InsufficientDataError,
    InvalidPositionError,
    ProofDecodeError,
    TrailingDataError,
)
from merkle_engine.core.models import Proof, ProofStep, SiblingPosition

logger = logging.getLogger(__name__)

_U64 = struct.Struct('<Q')
_POSITION_BYTES = {SiblingPosition.LEFT: b'\x00', SiblingPosition.RIGHT: b'\x01'}


def header_size(digest_size: int) -> int:
    """Size of the fixed header (index, leaf hash, step count)."""
    return _U64.size + digest_size + _U64.size


def record_size(digest_size: int) -> int:
    """Size of one encoded step."""
    return digest_size + 1


def encoded_size(proof: Proof) -> int:
    """Number of bytes :func:`encode_proof` produces for a proof."""
    return header_size(proof.digest_size) + proof.step_count * record_size(proof.digest_size)


def encode_proof(proof: Proof) -> bytes:
    """Serialize a proof to its binary wire format."""
    parts = [
        _U64.pack(proof.leaf_index),
        proof.leaf_hash,
        _U64.pack(proof.step_count),
    ]
    for step in proof.steps:
        parts.append(step.sibling)
        parts.append(_POSITION_BYTES[step.position])
    return b''.join(parts)


def decode_proof(data: bytes, digest_size: int = 32) -> Proof:
    """
    Deserialize a proof from its binary wire format.

    Args:
        data: The encoded proof.
        digest_size: Digest length of the hasher the proof was built with.

    Returns:
        The decoded proof.

    Raises:
        InsufficientDataError: If the buffer is shorter than the header, or
            than the number of steps the header declares.
        InvalidPositionError: If a position byte is neither 0x00 nor 0x01.
        TrailingDataError: If bytes remain after the last declared step.
        ValueError: If digest_size is not positive.
    """
    if digest_size <= 0:
        raise ValueError("digest_size must be positive")

    buf = memoryview(bytes(data))
    fixed = header_size(digest_size)
    if len(buf) < fixed:
        raise InsufficientDataError(fixed, len(buf))

    (leaf_index,) = _U64.unpack_from(buf, 0)
    leaf_hash = bytes(buf[_U64.size:_U64.size + digest_size])
    (step_count,) = _U64.unpack_from(buf, _U64.size + digest_size)

    record = record_size(digest_size)
    required = fixed + step_count * record
    if len(buf) < required:
        raise InsufficientDataError(required, len(buf))
    if len(buf) > required:
        raise TrailingDataError(len(buf) - required)

    steps = []
    offset = fixed
    for i in range(step_count):
        sibling = bytes(buf[offset:offset + digest_size])
        position_byte = buf[offset + digest_size]
        if position_byte not in (0, 1):
            raise InvalidPositionError(position_byte, i)
        steps.append(ProofStep(sibling=sibling, position=SiblingPosition(position_byte)))
        offset += record

    logger.debug("Decoded proof for leaf %d with %d steps", leaf_index, step_count)
    return Proof(leaf_index=leaf_index, leaf_hash=leaf_hash, steps=tuple(steps))


def proof_to_json(proof: Proof, indent: int = 2) -> str:
    """Render a proof as JSON with hex digests."""
    return json.dumps(proof.model_dump(mode='json'), indent=indent)


def proof_from_json(text: str) -> Proof:
    """
    Parse a proof from its JSON representation.

    Raises:
        ProofDecodeError: If the text is not valid JSON or not a valid proof.
    """
    try:
        return Proof.model_validate(json.loads(text))
    except json.JSONDecodeError as e:
        raise ProofDecodeError(f"Invalid JSON: {e}") from e
    except ValidationError as e:
        raise ProofDecodeError(f"Invalid proof: {e}") from e


__all__ = [
    "header_size",
    "record_size",
    "encoded_size",
    "encode_proof",
    "decode_proof",
    "proof_to_json",
    "proof_from_json",
]
