"""
Error taxonomy for the Merkle engine.

Every error here is a recoverable failure reported to the immediate caller.
Verification mismatches are not errors: verifiers return ``False``.
"""

from typing import Optional


class MerkleError(Exception):
    """Base class for all Merkle engine errors."""

    pass


class EmptyInputError(MerkleError, ValueError):
    """Raised when a leaf is added with zero-length data."""

    def __init__(self, message: str = "Leaf data must not be empty"):
        super().__init__(message)


class InvalidIndexError(MerkleError, IndexError):
    """Raised when a proof is requested for a leaf that does not exist."""

    def __init__(self, index: int, size: int):
        self.index = index
        self.size = size
        super().__init__(f"Leaf index {index} out of range for tree of size {size}")


class UnsupportedAlgorithmError(MerkleError, ValueError):
    """Raised when a hasher is requested by an unknown algorithm name."""

    pass


class ProofDecodeError(MerkleError, ValueError):
    """Base class for structural errors found while decoding a proof."""

    pass


class InsufficientDataError(ProofDecodeError):
    """Raised when a proof buffer is shorter than its header requires."""

    def __init__(self, required: int, available: int, message: Optional[str] = None):
        self.required = required
        self.available = available
        super().__init__(
            message or f"Proof buffer too short: need {required} bytes, got {available}"
        )


class InvalidPositionError(ProofDecodeError):
    """Raised when a step's position byte is neither 0x00 nor 0x01."""

    def __init__(self, position_byte: int, step: int):
        self.position_byte = position_byte
        self.step = step
        super().__init__(
            f"Invalid sibling position byte 0x{position_byte:02x} at step {step}"
        )


class TrailingDataError(ProofDecodeError):
    """Raised when bytes remain after the last declared proof step."""

    def __init__(self, extra: int):
        self.extra = extra
        super().__init__(f"{extra} unexpected trailing bytes after proof")
