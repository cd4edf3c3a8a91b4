"""PKCS7 padding."""

from __future__ import annotations

from hybridcrypt.errors import PaddingError

BLOCK_SIZE = 16


def pad(data: bytes, block_size: int = BLOCK_SIZE) -> bytes:
    """Append 1..block_size bytes, each equal to the pad count."""
    if not 1 <= block_size <= 255:
        raise ValueError(f"block_size must be 1..255, got {block_size}")
    count = block_size - len(data) % block_size
    return bytes(data) + bytes([count]) * count


def unpad(data: bytes, block_size: int = BLOCK_SIZE) -> bytes:
    """Strip PKCS7 padding, rejecting anything malformed.

    Raises:
        PaddingError: empty or misaligned input, a pad byte of 0 or
            greater than block_size, or pad bytes that disagree
    """
    if not data or len(data) % block_size:
        raise PaddingError(
            f"Padded data length {len(data)} is not a positive multiple of {block_size}"
        )

    count = data[-1]
    if count == 0 or count > block_size:
        raise PaddingError(f"Invalid padding length byte {count:#04x}")

    # Fold over every pad byte; no early exit on the first mismatch
    diff = 0
    for b in data[-count:]:
        diff |= b ^ count
    if diff:
        raise PaddingError("Padding bytes do not match padding length")

    return bytes(data[:-count])
