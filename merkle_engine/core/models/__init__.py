"""Value types for Merkle inclusion proofs."""

from enum import IntEnum
from typing import Any, Tuple

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    field_serializer,
    field_validator,
    model_validator,
)

# Largest leaf index representable in the binary proof header (u64)
MAX_LEAF_INDEX = 2 ** 64 - 1


class SiblingPosition(IntEnum):
    """Side of the running hash on which a proof sibling sits."""
    LEFT = 0
    RIGHT = 1


def _coerce_digest(value: Any) -> Any:
    """Accept hex strings wherever a digest is expected."""
    if isinstance(value, str):
        try:
            return bytes.fromhex(value)
        except ValueError as e:
            raise ValueError(f"Digest is not valid hex: {e}") from e
    if isinstance(value, (bytearray, memoryview)):
        return bytes(value)
    return value


class ProofStep(BaseModel):
    """One level of an inclusion proof's sibling path."""

    model_config = ConfigDict(frozen=True)

    sibling: bytes = Field(
        ...,
        min_length=1,
        description="Digest of the sibling node at this level."
    )
    position: SiblingPosition = Field(
        ...,
        description="Whether the sibling is hashed to the left or right of the running digest."
    )

    @field_validator('sibling', mode='before')
    @classmethod
    def validate_sibling(cls, v):
        return _coerce_digest(v)

    @field_validator('position', mode='before')
    @classmethod
    def validate_position(cls, v):
        """Accept ``"left"``/``"right"`` as well as the wire values 0 and 1."""
        if isinstance(v, str) and v.upper() in SiblingPosition.__members__:
            return SiblingPosition[v.upper()]
        return v

    @field_serializer('sibling', when_used='json')
    def serialize_sibling(self, v: bytes) -> str:
        return v.hex()

    @field_serializer('position', when_used='json')
    def serialize_position(self, v: SiblingPosition) -> str:
        return v.name.lower()


class Proof(BaseModel):
    """
    A standalone Merkle inclusion proof.

    Holds the proved leaf's index, its domain-separated digest and the
    sibling path from the leaf level up to, but excluding, the root. A proof
    owns all of its digests and stays valid after the tree that produced it
    changes or goes away.
    """

    model_config = ConfigDict(frozen=True)

    leaf_index: int = Field(
        ...,
        ge=0,
        le=MAX_LEAF_INDEX,
        description="Position of the proved leaf in insertion order."
    )
    leaf_hash: bytes = Field(
        ...,
        min_length=1,
        description="Domain-separated digest of the proved leaf."
    )
    steps: Tuple[ProofStep, ...] = Field(
        (),
        description="Sibling path ordered from the leaf level toward the root."
    )

    @field_validator('leaf_hash', mode='before')
    @classmethod
    def validate_leaf_hash(cls, v):
        return _coerce_digest(v)

    @field_serializer('leaf_hash', when_used='json')
    def serialize_leaf_hash(self, v: bytes) -> str:
        return v.hex()

    @model_validator(mode='after')
    def check_digest_lengths(self) -> 'Proof':
        """All digests in a proof come from one hasher and share a length."""
        size = len(self.leaf_hash)
        for i, step in enumerate(self.steps):
            if len(step.sibling) != size:
                raise ValueError(
                    f"Step {i} sibling is {len(step.sibling)} bytes, expected {size}"
                )
        return self

    @property
    def digest_size(self) -> int:
        return len(self.leaf_hash)

    @property
    def step_count(self) -> int:
        return len(self.steps)

    def to_bytes(self) -> bytes:
        """Encode this proof in the fixed binary wire format."""
        from merkle_engine.core.codec import encode_proof

        return encode_proof(self)

    @classmethod
    def from_bytes(cls, data: bytes, digest_size: int = 32) -> 'Proof':
        """Decode a proof from the fixed binary wire format."""
        from merkle_engine.core.codec import decode_proof

        return decode_proof(data, digest_size=digest_size)


__all__ = ["MAX_LEAF_INDEX", "SiblingPosition", "ProofStep", "Proof"]
