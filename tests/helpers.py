"""Reference hash helpers computed directly with hashlib."""

import hashlib


def sha256(data: bytes) -> bytes:
    return hashlib.sha256(data).digest()


def leaf_hash(data: bytes) -> bytes:
    return sha256(b'\x00' + data)


def node_hash(left: bytes, right: bytes) -> bytes:
    return sha256(b'\x01' + left + right)
