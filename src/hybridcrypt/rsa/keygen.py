"""RSA key pair generation."""

from __future__ import annotations

from dataclasses import dataclass

from hybridcrypt.errors import (
    InvalidInputLengthError,
    KeyGenerationExhaustedError,
    NoInverseError,
)
from hybridcrypt.randomness import RandomSource

from .bigint import gcd, lcm, mod_inverse
from .padding import RSAPadding
from .primality import DEFAULT_ROUNDS, PrimalityTester

DEFAULT_BITS = 64
DEFAULT_EXPONENT = 65537
DEFAULT_MAX_ATTEMPTS = 1000


@dataclass(frozen=True)
class PublicKey:
    n: int
    e: int

    @property
    def byte_length(self) -> int:
        return (self.n.bit_length() + 7) // 8


@dataclass(frozen=True)
class PrivateKey:
    n: int
    d: int

    @property
    def byte_length(self) -> int:
        return (self.n.bit_length() + 7) // 8


@dataclass(frozen=True)
class RSAKeyPair:
    """Modulus, exponents and the primes they came from."""

    n: int
    e: int
    d: int
    p: int
    q: int

    @property
    def bits(self) -> int:
        return self.n.bit_length()

    @property
    def lam(self) -> int:
        """Carmichael function lambda(N) = lcm(p-1, q-1)."""
        return lcm(self.p - 1, self.q - 1)

    @property
    def public_key(self) -> PublicKey:
        return PublicKey(self.n, self.e)

    @property
    def private_key(self) -> PrivateKey:
        return PrivateKey(self.n, self.d)

    def validate(self) -> bool:
        """Check N = p*q, gcd(E, lambda) = 1 and E*D = 1 mod lambda."""
        lam = self.lam
        return (
            self.p != self.q
            and self.p * self.q == self.n
            and gcd(self.e, lam) == 1
            and (self.e * self.d) % lam == 1
        )

    def as_tuple(self) -> tuple[int, int, int]:
        return self.n, self.e, self.d

    def __repr__(self) -> str:
        # Keep the private exponent and factors out of logs and tracebacks
        return f"RSAKeyPair(bits={self.bits}, e={self.e})"


class RSAKeyGenerator:
    """Generates key pairs from two random primes of equal bit length.

    Primes are sampled with the top two bits and the low bit forced so
    the modulus has exactly the requested width. Failed attempts
    (p == q, gcd(E, lambda) != 1, no inverse, short modulus) resample
    and count against ``max_attempts``.
    """

    def __init__(
        self,
        public_exponent: int = DEFAULT_EXPONENT,
        rounds: int = DEFAULT_ROUNDS,
        rng: RandomSource | None = None,
        padding: RSAPadding | None = None,
        max_attempts: int = DEFAULT_MAX_ATTEMPTS,
    ):
        if public_exponent < 3 or public_exponent % 2 == 0:
            raise ValueError(f"Public exponent must be odd and >= 3, got {public_exponent}")
        self.public_exponent = public_exponent
        self.rng = rng or RandomSource()
        self.tester = PrimalityTester(rounds, self.rng)
        self.padding = padding or RSAPadding()
        self.max_attempts = max_attempts
        self.attempts = 0

    def generate_prime(self, bits: int) -> int:
        """Random probable prime of exactly ``bits`` bits."""
        if bits < 4:
            raise ValueError(f"Prime size must be at least 4 bits, got {bits}")

        top = 0b11 << (bits - 2)
        # Prime density near 2**bits is about 1/(bits*ln 2); this is generous
        for _ in range(self.max_attempts * bits):
            candidate = self.rng.get_bits(bits, "prime_candidates") | top | 1
            if self.tester(candidate):
                return candidate
        raise KeyGenerationExhaustedError(f"No {bits}-bit prime found")

    def generate(self, bits: int = DEFAULT_BITS) -> RSAKeyPair:
        """Generate a key pair with a ``bits``-bit modulus.

        Raises:
            InvalidInputLengthError: ``bits`` too small for the padding scheme
            KeyGenerationExhaustedError: retry budget spent
        """
        if bits % 2:
            raise ValueError(f"Modulus width must be even, got {bits}")
        min_bits = self.padding.min_modulus_bits
        if bits < min_bits:
            raise InvalidInputLengthError(
                f"{bits}-bit modulus is below the {min_bits}-bit minimum "
                f"for padding with {self.padding.min_fill} filler bytes",
                engine="rsa",
                stage="keygen",
            )

        half = bits // 2
        e = self.public_exponent
        p = self.generate_prime(half)

        for attempt in range(1, self.max_attempts + 1):
            self.attempts = attempt
            if gcd(e, p - 1) != 1:
                # No choice of q can fix lambda; start over with a new p
                p = self.generate_prime(half)
                continue

            q = self.generate_prime(half)
            if q == p:
                continue

            n = p * q
            if n.bit_length() != bits:
                continue

            lam = lcm(p - 1, q - 1)
            if gcd(e, lam) != 1:
                continue

            try:
                d = mod_inverse(e, lam)
            except NoInverseError:
                continue

            return RSAKeyPair(n=n, e=e, d=d, p=p, q=q)

        raise KeyGenerationExhaustedError(
            f"Key generation failed after {self.max_attempts} attempts"
        )
