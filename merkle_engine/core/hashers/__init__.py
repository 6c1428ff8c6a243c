"""
Hash capabilities for the Merkle engine.

A hasher is a pure, stateless function from bytes to a fixed-length digest.
Trees receive one at construction time; nothing here is selected globally.
This module also provides the hex presentation helper and the constant-time
digest comparison used by proof verification.
"""

import hashlib
import logging
from typing import Callable, Dict, List, Type

from cryptography.hazmat.primitives import constant_time, hashes
from typing_extensions import Protocol, runtime_checkable

from merkle_engine.core.errors import UnsupportedAlgorithmError

logger = logging.getLogger(__name__)

DEFAULT_ALGORITHM = "sha256"


@runtime_checkable
class Hasher(Protocol):
    """Structural interface every hasher satisfies."""

    name: str
    digest_size: int

    def digest(self, data: bytes) -> bytes:
        ...


class Sha256Hasher:
    """SHA-256 reference hasher backed by :mod:`hashlib`."""

    name = "sha256"
    digest_size = 32

    def digest(self, data: bytes) -> bytes:
        """Compute the SHA-256 digest of data."""
        return hashlib.sha256(data).digest()

    def __repr__(self) -> str:
        return "Sha256Hasher()"


# Fixed-length algorithms offered through the cryptography backend
_CRYPTOGRAPHY_ALGORITHMS: Dict[str, Callable[[], hashes.HashAlgorithm]] = {
    "sha224": hashes.SHA224,
    "sha256": hashes.SHA256,
    "sha384": hashes.SHA384,
    "sha512": hashes.SHA512,
    "sha3-256": hashes.SHA3_256,
    "sha3-384": hashes.SHA3_384,
    "sha3-512": hashes.SHA3_512,
    "blake2b": lambda: hashes.BLAKE2b(64),
    "blake2s": lambda: hashes.BLAKE2s(32),
}


class CryptographyHasher:
    """
    Hasher over any fixed-length algorithm of the ``cryptography`` library.

    Args:
        algorithm: Algorithm name, e.g. ``"sha512"`` or ``"blake2b"``.

    Raises:
        UnsupportedAlgorithmError: If the name is not a known algorithm.
    """

    def __init__(self, algorithm: str = DEFAULT_ALGORITHM):
        key = algorithm.lower()
        if key not in _CRYPTOGRAPHY_ALGORITHMS:
            raise UnsupportedAlgorithmError(
                f"Unsupported hash algorithm: {algorithm!r} "
                f"(expected one of {', '.join(sorted(_CRYPTOGRAPHY_ALGORITHMS))})"
            )
        self._factory = _CRYPTOGRAPHY_ALGORITHMS[key]
        self.name = key
        self.digest_size = self._factory().digest_size

    def digest(self, data: bytes) -> bytes:
        ctx = hashes.Hash(self._factory())
        ctx.update(data)
        return ctx.finalize()

    def __repr__(self) -> str:
        return f"CryptographyHasher({self.name!r})"


class SimpleHasher:
    """
    Non-cryptographic hasher for fast tests.

    The digest is the running sum of all input bytes (mod 2**32), stored
    big-endian in the first four bytes of a 32-byte buffer. It ignores byte
    order entirely and offers no integrity guarantee whatsoever.
    """

    name = "simple"
    digest_size = 32

    def __init__(self):
        logger.warning("SimpleHasher is not collision resistant; use it for tests only")

    def digest(self, data: bytes) -> bytes:
        total = sum(data) & 0xFFFFFFFF
        return total.to_bytes(4, "big") + bytes(self.digest_size - 4)

    def __repr__(self) -> str:
        return "SimpleHasher()"


class FunctionHasher:
    """Adapt a plain ``bytes -> bytes`` function into a hasher."""

    def __init__(self, func: Callable[[bytes], bytes], digest_size: int, name: str = "custom"):
        if digest_size <= 0:
            raise ValueError("digest_size must be positive")
        self._func = func
        self.digest_size = digest_size
        self.name = name

    def digest(self, data: bytes) -> bytes:
        result = bytes(self._func(data))
        if len(result) != self.digest_size:
            raise ValueError(
                f"Hash function {self.name!r} returned {len(result)} bytes, "
                f"expected {self.digest_size}"
            )
        return result

    def __repr__(self) -> str:
        return f"FunctionHasher({self.name!r}, digest_size={self.digest_size})"


_NAMED_HASHERS: Dict[str, Type] = {
    "sha256": Sha256Hasher,
    "simple": SimpleHasher,
}


def get_hasher(name: str = DEFAULT_ALGORITHM) -> Hasher:
    """
    Resolve a hasher by algorithm name.

    ``sha256`` maps to the hashlib reference hasher, ``simple`` to the
    test-only hasher, and every other name to :class:`CryptographyHasher`.

    Raises:
        UnsupportedAlgorithmError: If no hasher is known under that name.
    """
    key = name.lower()
    if key in _NAMED_HASHERS:
        return _NAMED_HASHERS[key]()
    return CryptographyHasher(key)


def available_algorithms() -> List[str]:
    """Names accepted by :func:`get_hasher`."""
    return sorted(set(_NAMED_HASHERS) | set(_CRYPTOGRAPHY_ALGORITHMS))


def bytes_to_hex(data: bytes) -> str:
    """Render bytes as lowercase hex, two characters per byte."""
    return bytes(data).hex()


def constant_time_equals(a: bytes, b: bytes) -> bool:
    """Compare two digests without short-circuiting on the first difference."""
    if len(a) != len(b):
        return False
    return constant_time.bytes_eq(bytes(a), bytes(b))


__all__ = [
    "DEFAULT_ALGORITHM",
    "Hasher",
    "Sha256Hasher",
    "CryptographyHasher",
    "SimpleHasher",
    "FunctionHasher",
    "get_hasher",
    "available_algorithms",
    "bytes_to_hex",
    "constant_time_equals",
]
