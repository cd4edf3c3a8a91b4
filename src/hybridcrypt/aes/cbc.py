"""AES-128 in CBC mode with PKCS7 padding."""

from __future__ import annotations

from hybridcrypt.errors import InvalidInputLengthError
from hybridcrypt.utils import xor_bytes

from . import padding
from .block import BLOCK_SIZE, AESBlockCipher

IV_SIZE = 16


def _check_iv(iv: bytes) -> None:
    if len(iv) != IV_SIZE:
        raise InvalidInputLengthError(
            f"IV must be {IV_SIZE} bytes, got {len(iv)}", engine="aes"
        )


class AESCBCEngine:
    """Chains AES-128 blocks under one key.

    Blocks are processed strictly in order; each ciphertext block feeds
    the next. A fresh engine (and key schedule) is built per key.
    """

    def __init__(self, key: bytes):
        self.cipher = AESBlockCipher(key)

    def encrypt_blocks(self, data: bytes, iv: bytes) -> bytes:
        """CBC-encrypt block-aligned data without padding."""
        _check_iv(iv)
        if len(data) % BLOCK_SIZE:
            raise InvalidInputLengthError(
                f"Data length {len(data)} is not a multiple of {BLOCK_SIZE}",
                engine="aes",
            )

        result = bytearray()
        prev_block = bytes(iv)
        for i in range(0, len(data), BLOCK_SIZE):
            block = xor_bytes(data[i:i + BLOCK_SIZE], prev_block)
            prev_block = self.cipher.encrypt_block(block)
            result.extend(prev_block)
        return bytes(result)

    def decrypt_blocks(self, ciphertext: bytes, iv: bytes) -> bytes:
        """CBC-decrypt block-aligned data without removing padding."""
        _check_iv(iv)
        if len(ciphertext) % BLOCK_SIZE:
            raise InvalidInputLengthError(
                f"Ciphertext length {len(ciphertext)} is not a multiple of {BLOCK_SIZE}",
                engine="aes",
            )

        result = bytearray()
        prev_block = bytes(iv)
        for i in range(0, len(ciphertext), BLOCK_SIZE):
            block = bytes(ciphertext[i:i + BLOCK_SIZE])
            result.extend(xor_bytes(self.cipher.decrypt_block(block), prev_block))
            prev_block = block
        return bytes(result)

    def encrypt(self, plaintext: bytes, iv: bytes) -> bytes:
        """Pad and encrypt; output length is a positive multiple of 16."""
        return self.encrypt_blocks(padding.pad(plaintext, BLOCK_SIZE), iv)

    def decrypt(self, ciphertext: bytes, iv: bytes) -> bytes:
        """Decrypt and strip padding.

        Raises:
            InvalidInputLengthError: ciphertext empty or not block-aligned
            PaddingError: trailing padding is inconsistent
        """
        if not ciphertext:
            raise InvalidInputLengthError("Ciphertext is empty", engine="aes")
        return padding.unpad(self.decrypt_blocks(ciphertext, iv), BLOCK_SIZE)


def encrypt(plaintext: bytes, key: bytes, iv: bytes) -> bytes:
    return AESCBCEngine(key).encrypt(plaintext, iv)


def decrypt(ciphertext: bytes, key: bytes, iv: bytes) -> bytes:
    return AESCBCEngine(key).decrypt(ciphertext, iv)
