"""Random source with usage accounting for key, IV, prime and padding draws."""

from __future__ import annotations

import hashlib
import secrets
from typing import Any

CATEGORIES = (
    "symmetric_key",
    "iv",
    "prime_candidates",
    "witnesses",
    "rsa_padding",
    "other",
)


class RandomSource:
    """Injectable source of uniformly distributed random bytes.

    Unseeded, draws come from :mod:`secrets`. Seeded, draws come from a
    deterministic generator so that keys, IVs and padding can be
    reproduced in tests. The seeded stream is NOT cryptographically
    secure, and RSA padding bytes drawn from it are predictable.
    """

    def __init__(self, seed: int | None = None):
        """Initialize random source.

        Args:
            seed: Optional seed for deterministic randomness
        """
        self._seed = seed
        self._rng = self._create_rng(seed)

        self._bits_used: dict[str, int] = {}
        self._bytes_used: dict[str, int] = {}
        self.reset()

    @classmethod
    def for_stream(cls, seed: int | None, label: str) -> RandomSource:
        """Source for one named consumer of a shared seed.

        Each label gets its own seeded stream, so key generation and
        message encryption run with the same seed never share bytes.
        Unseeded, this is a plain ``RandomSource()``.
        """
        if seed is None:
            return cls()
        digest = hashlib.sha256(f"{seed}:{label}".encode("ascii")).digest()
        return cls(seed=int.from_bytes(digest[:8], "big"))

    def _create_rng(self, seed: int | None) -> Any:
        if seed is None:
            return None  # Use secrets
        return _SeededRNG(seed)

    @property
    def seeded(self) -> bool:
        """True when draws are reproducible (and therefore insecure)."""
        return self._seed is not None

    def reset(self) -> None:
        """Reset usage counters and rewind a seeded stream."""
        self._bits_used = {k: 0 for k in CATEGORIES}
        self._bytes_used = {k: 0 for k in CATEGORIES}
        if self._seed is not None:
            self._rng = self._create_rng(self._seed)

    @property
    def total_bits(self) -> int:
        """Total random bits used."""
        return sum(self._bits_used.values())

    @property
    def total_bytes(self) -> int:
        """Total random bytes used."""
        return sum(self._bytes_used.values())

    @property
    def bits_breakdown(self) -> dict[str, int]:
        return self._bits_used.copy()

    @property
    def bytes_breakdown(self) -> dict[str, int]:
        return self._bytes_used.copy()

    def _track(self, category: str, bits: int) -> None:
        if category not in self._bits_used:
            category = "other"
        self._bits_used[category] += bits
        self._bytes_used[category] += (bits + 7) // 8

    def get_bytes(self, count: int, category: str = "other") -> bytes:
        """Get random bytes and track usage.

        Args:
            count: Number of bytes to generate
            category: Category for tracking

        Returns:
            Random bytes
        """
        if count < 0:
            raise ValueError(f"count must be non-negative, got {count}")
        self._track(category, count * 8)

        if self._rng is None:
            return secrets.token_bytes(count)
        return self._rng.get_bytes(count)

    def get_bits(self, count: int, category: str = "other") -> int:
        """Get a random integer of at most ``count`` bits and track usage."""
        if count < 0:
            raise ValueError(f"count must be non-negative, got {count}")
        if count == 0:
            return 0
        self._track(category, count)

        if self._rng is None:
            return secrets.randbits(count)
        return self._rng.get_bits(count)

    def get_int_below(self, upper: int, category: str = "other") -> int:
        """Uniform integer in ``[0, upper)`` by rejection sampling."""
        if upper <= 0:
            raise ValueError(f"upper bound must be positive, got {upper}")
        bits = upper.bit_length()
        while True:
            value = self.get_bits(bits, category)
            if value < upper:
                return value

    def get_int_between(self, low: int, high: int, category: str = "other") -> int:
        """Uniform integer in the closed range ``[low, high]``."""
        if high < low:
            raise ValueError(f"empty range [{low}, {high}]")
        return low + self.get_int_below(high - low + 1, category)

    def get_nonzero_bytes(self, count: int, category: str = "other") -> bytes:
        """Random bytes none of which is 0x00; zero draws are resampled."""
        out = bytearray()
        while len(out) < count:
            for b in self.get_bytes(count - len(out), category):
                if b != 0:
                    out.append(b)
        return bytes(out)

    def get_summary(self) -> dict[str, Any]:
        """Get summary of randomness usage."""
        return {
            "seed": self._seed,
            "total_bits": self.total_bits,
            "total_bytes": self.total_bytes,
            "bits_breakdown": self.bits_breakdown,
            "bytes_breakdown": self.bytes_breakdown,
        }

    def __repr__(self) -> str:
        return f"RandomSource(seed={self._seed!r}, total_bytes={self.total_bytes})"


class _SeededRNG:
    """Seeded 64-bit LCG for reproducibility.

    Output bytes come from the top of the state word; the low bits of a
    power-of-two LCG cycle with a tiny period.
    NOT cryptographically secure - for testing/reproducibility only.
    """

    def __init__(self, seed: int):
        self._state = seed & 0xFFFFFFFFFFFFFFFF
        self._a = 6364136223846793005
        self._c = 1442695040888963407
        self._m = 2**64

    def _next(self) -> int:
        self._state = (self._a * self._state + self._c) % self._m
        return self._state

    def get_bytes(self, count: int) -> bytes:
        result = bytearray(count)
        for i in range(count):
            result[i] = self._next() >> 56
        return bytes(result)

    def get_bits(self, count: int) -> int:
        nbytes = (count + 7) // 8
        value = int.from_bytes(self.get_bytes(nbytes), "big")
        return value >> (nbytes * 8 - count)
