"""Miller-Rabin probable-prime test with a small-prime pre-filter."""

from __future__ import annotations

from hybridcrypt.randomness import RandomSource

from .bigint import mod_exp

DEFAULT_ROUNDS = 40

SMALL_PRIMES = (2, 3, 5, 7, 11, 13, 17, 19, 23, 29, 31, 37, 41, 43, 47, 53, 59, 61, 67, 71)


def decompose(n_minus_one: int) -> tuple[int, int]:
    """Write ``n - 1`` as ``2**s * d`` with ``d`` odd; returns ``(s, d)``."""
    s = 0
    d = n_minus_one
    while d % 2 == 0:
        d //= 2
        s += 1
    return s, d


def is_witness(a: int, n: int, s: int, d: int) -> bool:
    """True when base ``a`` proves ``n`` composite."""
    x = mod_exp(a, d, n)
    if x == 1 or x == n - 1:
        return False
    for _ in range(s - 1):
        x = (x * x) % n
        if x == n - 1:
            return False
    return True


def is_probably_prime(
    n: int,
    rounds: int = DEFAULT_ROUNDS,
    rng: RandomSource | None = None,
) -> bool:
    """Return ``True`` when ``n`` is probably prime.

    Bases are drawn independently from ``[2, n-2]``. A composite passes
    all rounds with probability at most ``4**-rounds``.
    """
    if n < 2:
        return False

    for p in SMALL_PRIMES:
        if n == p:
            return True
        if n % p == 0:
            return False

    if rng is None:
        rng = RandomSource()

    s, d = decompose(n - 1)
    for _ in range(rounds):
        a = rng.get_int_between(2, n - 2, "witnesses")
        if is_witness(a, n, s, d):
            return False
    return True


class PrimalityTester:
    """Miller-Rabin tester bound to a round count and random source."""

    def __init__(self, rounds: int = DEFAULT_ROUNDS, rng: RandomSource | None = None):
        if rounds < 1:
            raise ValueError(f"rounds must be positive, got {rounds}")
        self.rounds = rounds
        self.rng = rng or RandomSource()

    def is_probably_prime(self, n: int) -> bool:
        return is_probably_prime(n, self.rounds, self.rng)

    def __call__(self, n: int) -> bool:
        return self.is_probably_prime(n)
