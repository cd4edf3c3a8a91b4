"""Textbook RSA: modular arithmetic, primality, key generation and padding."""

from .bigint import extended_gcd, gcd, lcm, mod_exp, mod_inverse
from .engine import RSAEngine
from .keygen import PrivateKey, PublicKey, RSAKeyGenerator, RSAKeyPair
from .padding import PKCS1_MIN_FILL, RSAPadding
from .primality import PrimalityTester, is_probably_prime

__all__ = [
    "extended_gcd",
    "gcd",
    "lcm",
    "mod_exp",
    "mod_inverse",
    "is_probably_prime",
    "PrimalityTester",
    "PublicKey",
    "PrivateKey",
    "RSAKeyPair",
    "RSAKeyGenerator",
    "PKCS1_MIN_FILL",
    "RSAPadding",
    "RSAEngine",
]
