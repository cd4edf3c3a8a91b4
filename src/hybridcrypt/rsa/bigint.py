"""Modular arithmetic: square-and-multiply and extended Euclid."""

from __future__ import annotations

from hybridcrypt.errors import NoInverseError


def mod_exp(base: int, exponent: int, modulus: int) -> int:
    """Compute ``base ** exponent % modulus`` by left-to-right square-and-multiply.

    Exponent bits are scanned from most to least significant; the
    accumulator is squared each step and multiplied by ``base`` when the
    bit is set, reducing after every multiplication.
    """
    if modulus <= 0:
        raise ValueError(f"modulus must be positive, got {modulus}")
    if exponent < 0:
        raise ValueError(f"exponent must be non-negative, got {exponent}")
    if modulus == 1:
        return 0

    base %= modulus
    result = 1
    for i in range(exponent.bit_length() - 1, -1, -1):
        result = (result * result) % modulus
        if (exponent >> i) & 1:
            result = (result * base) % modulus
    return result


def extended_gcd(a: int, b: int) -> tuple[int, int, int]:
    """Return ``(g, x, y)`` with ``a*x + b*y == g == gcd(a, b)``.

    Iterative, so large operands never hit the recursion limit.
    """
    old_r, r = a, b
    old_s, s = 1, 0
    old_t, t = 0, 1

    while r != 0:
        q = old_r // r
        old_r, r = r, old_r - q * r
        old_s, s = s, old_s - q * s
        old_t, t = t, old_t - q * t

    return old_r, old_s, old_t


def gcd(a: int, b: int) -> int:
    return extended_gcd(a, b)[0]


def lcm(a: int, b: int) -> int:
    if a == 0 or b == 0:
        return 0
    return a // gcd(a, b) * b


def mod_inverse(a: int, m: int) -> int:
    """Inverse of ``a`` modulo ``m``.

    Raises:
        NoInverseError: if gcd(a, m) != 1
    """
    if m <= 1:
        raise NoInverseError(f"modulus must be > 1, got {m}")
    g, x, _ = extended_gcd(a % m, m)
    if g != 1:
        raise NoInverseError(f"{a} has no inverse modulo {m} (gcd={g})")
    return x % m
