"""Golden reference implementations using PyCryptodome, plus known-answer vectors."""

from Crypto.Cipher import AES
from Crypto.Util import number
from Crypto.Util.Padding import pad


def golden_encrypt_block(key: bytes, plaintext: bytes) -> bytes:
    """Encrypt a single block using PyCryptodome as golden reference.

    Args:
        key: 16-byte AES-128 key
        plaintext: 16-byte plaintext block

    Returns:
        16-byte ciphertext block

    Raises:
        ValueError: If key or plaintext is not 16 bytes
    """
    if len(key) != 16:
        raise ValueError(f"Key must be 16 bytes, got {len(key)}")
    if len(plaintext) != 16:
        raise ValueError(f"Plaintext must be 16 bytes, got {len(plaintext)}")

    cipher = AES.new(key, AES.MODE_ECB)
    return cipher.encrypt(plaintext)


def golden_cbc_encrypt(key: bytes, iv: bytes, plaintext: bytes, padded: bool = True) -> bytes:
    """AES-128-CBC through PyCryptodome, PKCS7-padded unless ``padded`` is False."""
    if len(key) != 16:
        raise ValueError(f"Key must be 16 bytes, got {len(key)}")
    data = pad(plaintext, AES.block_size) if padded else plaintext
    return AES.new(key, AES.MODE_CBC, iv).encrypt(data)


def validate_against_golden(
    key: bytes, iv: bytes, plaintext: bytes, candidate_ciphertext: bytes
) -> tuple[bool, str]:
    """Validate a padded CBC ciphertext against the golden reference.

    Returns:
        Tuple of (is_correct, error_detail)
    """
    expected = golden_cbc_encrypt(key, iv, plaintext)
    if candidate_ciphertext == expected:
        return True, ""
    else:
        return False, (
            f"Ciphertext mismatch: expected {expected.hex()}, "
            f"got {candidate_ciphertext.hex()}"
        )


def golden_is_prime(n: int) -> bool:
    return bool(number.isPrime(n))


def golden_mod_inverse(a: int, m: int) -> int:
    return number.inverse(a, m)


# FIPS-197 Appendix C.1 and other single-block AES-128 vectors
FIPS_197_TEST_VECTORS = [
    {
        "name": "FIPS-197 C.1",
        "key": bytes.fromhex("000102030405060708090a0b0c0d0e0f"),
        "plaintext": bytes.fromhex("00112233445566778899aabbccddeeff"),
        "ciphertext": bytes.fromhex("69c4e0d86a7b0430d8cdb78070b4c55a"),
    },
    {
        "name": "FIPS-197 B",
        "key": bytes.fromhex("2b7e151628aed2a6abf7158809cf4f3c"),
        "plaintext": bytes.fromhex("3243f6a8885a308d313198a2e0370734"),
        "ciphertext": bytes.fromhex("3925841d02dc09fbdc118597196a0b32"),
    },
    {
        "name": "all zeros",
        "key": bytes.fromhex("00000000000000000000000000000000"),
        "plaintext": bytes.fromhex("00000000000000000000000000000000"),
        "ciphertext": bytes.fromhex("66e94bd4ef8a2c3b884cfa59ca342b2e"),
    },
    {
        "name": "all ones",
        "key": bytes.fromhex("ffffffffffffffffffffffffffffffff"),
        "plaintext": bytes.fromhex("ffffffffffffffffffffffffffffffff"),
        "ciphertext": bytes.fromhex("bcbf217cb280cf30b2517052193ab979"),
    },
]

# NIST SP 800-38A F.2.1 / F.2.2, CBC-AES128 (no padding)
NIST_CBC_TEST_VECTORS = [
    {
        "name": "SP 800-38A F.2.1",
        "key": bytes.fromhex("2b7e151628aed2a6abf7158809cf4f3c"),
        "iv": bytes.fromhex("000102030405060708090a0b0c0d0e0f"),
        "plaintext": bytes.fromhex(
            "6bc1bee22e409f96e93d7e117393172a"
            "ae2d8a571e03ac9c9eb76fac45af8e51"
            "30c81c46a35ce411e5fbc1191a0a52ef"
            "f69f2445df4f9b17ad2b417be66c3710"
        ),
        "ciphertext": bytes.fromhex(
            "7649abac8119b246cee98e9b12e9197d"
            "5086cb9b507219ee95db113a917678b2"
            "73bed6b8e3c1743b7116e69e22229516"
            "3ff1caa1681fac09120eca307586e1a7"
        ),
    },
]
