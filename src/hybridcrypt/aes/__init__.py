"""AES-128: key schedule, block cipher, PKCS7 and CBC mode."""

from .block import BLOCK_SIZE, AESBlockCipher, decrypt_block, encrypt_block
from .cbc import IV_SIZE, AESCBCEngine
from .key_schedule import KEY_SIZE, AESKeySchedule, expand_key
from .padding import pad, unpad

__all__ = [
    "BLOCK_SIZE",
    "IV_SIZE",
    "KEY_SIZE",
    "AESBlockCipher",
    "AESCBCEngine",
    "AESKeySchedule",
    "expand_key",
    "encrypt_block",
    "decrypt_block",
    "pad",
    "unpad",
]
