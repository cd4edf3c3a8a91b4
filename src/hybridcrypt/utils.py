"""Byte helpers: hex parsing, XOR, big-endian integers and key fingerprints."""

import hashlib


def hex_to_bytes(hex_str: str) -> bytes:
    """
    Convert hex string to bytes. Whitespace is ignored.
    """
    return bytes.fromhex("".join(hex_str.split()))


def xor_bytes(a: bytes, b: bytes) -> bytes:
    """
    XOR two byte sequences of equal length.
    """
    if len(a) != len(b):
        raise ValueError(f"Length mismatch: {len(a)} vs {len(b)}")
    return bytes(x ^ y for x, y in zip(a, b))


def int_to_bytes(value: int, length: int) -> bytes:
    """Big-endian encoding of a non-negative integer into exactly ``length`` bytes."""
    if value < 0:
        raise ValueError("Cannot convert negative integers")
    if value.bit_length() > length * 8:
        raise ValueError(f"Integer too large for {length} bytes")
    return value.to_bytes(length, "big")


def bytes_to_int(data: bytes) -> int:
    return int.from_bytes(data, "big")


def fingerprint(value: bytes | int, length: int = 16) -> str:
    """
    Short SHA-256 fingerprint of key material, safe to log.

    Integers are hashed through their decimal text.
    """
    if isinstance(value, int):
        value = str(value).encode("ascii")
    return hashlib.sha256(value).hexdigest()[:length]
