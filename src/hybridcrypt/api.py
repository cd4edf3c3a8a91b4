"""Boundary calls exposed to file/CLI collaborators.

Plain bytes and ints in, plain bytes and ints out. The optional ``rng``
argument is the injected random source; it defaults to a fresh
unseeded one. RSA calls use the compact padding of ``HybridConfig``
unless ``min_fill`` is given; pass ``min_fill=8`` on all three for
strict PKCS#1 (payload <= K - 11, modulus of at least 96 bits).
"""

from __future__ import annotations

from .aes import IV_SIZE, KEY_SIZE, AESCBCEngine
from .config import HybridConfig
from .randomness import RandomSource
from .rsa import PrivateKey, PublicKey, RSAEngine, RSAPadding
from .workflow import generate_key_pair

# Shared by keygen, encrypt and decrypt so defaults round-trip on a 64-bit key
DEFAULT_MIN_FILL = HybridConfig.rsa_min_fill


def generate_symmetric_key(rng: RandomSource | None = None) -> bytes:
    """Fresh 16-byte AES key."""
    rng = rng or RandomSource()
    return rng.get_bytes(KEY_SIZE, "symmetric_key")


def aes_encrypt(
    plaintext: bytes, key: bytes, rng: RandomSource | None = None
) -> tuple[bytes, bytes]:
    """Encrypt under a fresh IV; returns ``(iv, ciphertext)``."""
    rng = rng or RandomSource()
    iv = rng.get_bytes(IV_SIZE, "iv")
    return iv, AESCBCEngine(key).encrypt(plaintext, iv)


def aes_decrypt(ciphertext: bytes, key: bytes, iv: bytes) -> bytes:
    return AESCBCEngine(key).decrypt(ciphertext, iv)


def rsa_generate_key_pair(
    bit_width: int = 64,
    rng: RandomSource | None = None,
    min_fill: int = DEFAULT_MIN_FILL,
) -> tuple[int, int, int]:
    """Generate ``(N, E, D)`` for a ``bit_width``-bit modulus."""
    config = HybridConfig(rsa_bits=bit_width, rsa_min_fill=min_fill)
    return generate_key_pair(config, rng).as_tuple()


def rsa_encrypt(
    payload: bytes,
    n: int,
    e: int,
    rng: RandomSource | None = None,
    min_fill: int = DEFAULT_MIN_FILL,
) -> int:
    """Encrypt one padded block; payload must fit ``K - 3 - min_fill`` bytes."""
    engine = RSAEngine(RSAPadding(min_fill=min_fill, rng=rng))
    return engine.encrypt(payload, PublicKey(n, e))


def rsa_decrypt(ciphertext: int, n: int, d: int, min_fill: int = DEFAULT_MIN_FILL) -> bytes:
    engine = RSAEngine(RSAPadding(min_fill=min_fill))
    return engine.decrypt(ciphertext, PrivateKey(n, d))
