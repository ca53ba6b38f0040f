"""Hashing utilities."""

import hashlib
from dataclasses import dataclass

FINGERPRINT_BYTES = 8


@dataclass
class HashResult:
    md5: str
    sha1: str
    sha256: str
    size: int


def hash_bytes(data: bytes) -> HashResult:
    return HashResult(
        md5=hashlib.md5(data).hexdigest(),
        sha1=hashlib.sha1(data).hexdigest(),
        sha256=hashlib.sha256(data).hexdigest(),
        size=len(data),
    )


def fingerprint(data: bytes) -> str:
    """Short content-derived identity: the first 8 bytes of SHA-256, hex."""
    return hashlib.sha256(data).digest()[:FINGERPRINT_BYTES].hex()
