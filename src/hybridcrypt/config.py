"""Configuration for the hybrid encryption workflow."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass
class HybridConfig:
    """Configuration object for key generation and the hybrid workflow.

    The defaults reproduce the educational setup: a 64-bit RSA modulus
    built from two 32-bit primes, with the compact one-byte-filler
    padding that such a narrow modulus requires.
    """

    # RSA modulus width in bits (product of two bits//2 primes)
    rsa_bits: int = 64

    # Fixed public exponent
    public_exponent: int = 65537

    # Miller-Rabin rounds per candidate (error <= 4^-rounds)
    primality_rounds: int = 40

    # Minimum non-zero filler bytes in the RSA padding block.
    # 8 is strict PKCS#1 v1.5 (overhead 11); 1 fits a 64-bit modulus.
    rsa_min_fill: int = 1

    # Upper bound on prime/exponent resampling before giving up
    max_keygen_attempts: int = 1000

    # Seed for a reproducible (insecure) random stream
    seed: int | None = None

    def __post_init__(self) -> None:
        """Validate configuration parameters."""
        if self.rsa_bits < 16 or self.rsa_bits % 2:
            raise ValueError(f"rsa_bits must be an even number >= 16, got {self.rsa_bits}")
        if self.public_exponent < 3 or self.public_exponent % 2 == 0:
            raise ValueError(
                f"public_exponent must be odd and >= 3, got {self.public_exponent}"
            )
        if self.primality_rounds < 1:
            raise ValueError(f"primality_rounds must be positive, got {self.primality_rounds}")
        if self.rsa_min_fill < 1:
            raise ValueError(f"rsa_min_fill must be at least 1, got {self.rsa_min_fill}")
        if self.max_keygen_attempts < 1:
            raise ValueError(
                f"max_keygen_attempts must be positive, got {self.max_keygen_attempts}"
            )
        if self.rsa_bits < 8 * (self.rsa_overhead + 1):
            raise ValueError(
                f"rsa_bits={self.rsa_bits} leaves no room for payload with "
                f"rsa_min_fill={self.rsa_min_fill}"
            )

    @property
    def rsa_overhead(self) -> int:
        """Padding overhead in bytes: 0x00 0x02, filler, 0x00."""
        return 3 + self.rsa_min_fill

    @property
    def rsa_block_bytes(self) -> int:
        """Modulus byte width K."""
        return (self.rsa_bits + 7) // 8

    @property
    def rsa_capacity(self) -> int:
        """Payload bytes that fit in one RSA block."""
        return self.rsa_block_bytes - self.rsa_overhead
