"""PKCS#1 v1.5 style encryption padding: 00 || 02 || PS || 00 || payload."""

from __future__ import annotations

from hybridcrypt.errors import InvalidInputLengthError, InvalidPaddingError
from hybridcrypt.randomness import RandomSource

PKCS1_MIN_FILL = 8


class RSAPadding:
    """Encryption padding with a configurable minimum filler length.

    ``min_fill=8`` is the PKCS#1 v1.5 rule (payload <= K - 11). Smaller
    values exist only so that toy moduli of a few bytes can carry a
    payload at all.

    The filler PS is random and never contains 0x00, which keeps the
    delimiter unambiguous. Its quality is that of the injected
    RandomSource; a seeded source makes it predictable.
    """

    def __init__(self, min_fill: int = PKCS1_MIN_FILL, rng: RandomSource | None = None):
        if min_fill < 1:
            raise ValueError(f"min_fill must be at least 1, got {min_fill}")
        self.min_fill = min_fill
        self.rng = rng or RandomSource()

    @classmethod
    def compact(cls, rng: RandomSource | None = None) -> RSAPadding:
        """One-byte filler: the only layout that fits a 64-bit modulus."""
        return cls(min_fill=1, rng=rng)

    @property
    def overhead(self) -> int:
        return 3 + self.min_fill

    @property
    def min_modulus_bits(self) -> int:
        """Smallest modulus that fits the markers, filler and one payload byte."""
        return 8 * (self.overhead + 1)

    def max_payload(self, k: int) -> int:
        """Largest payload in bytes for a ``k``-byte modulus."""
        return k - self.overhead

    def pad(self, payload: bytes, k: int) -> bytes:
        """Build a ``k``-byte encryption block around ``payload``.

        Raises:
            InvalidInputLengthError: payload longer than ``k - overhead``
        """
        limit = self.max_payload(k)
        if len(payload) > limit:
            raise InvalidInputLengthError(
                f"Payload of {len(payload)} bytes exceeds {limit} bytes "
                f"for a {k}-byte modulus",
                engine="rsa",
            )
        filler = self.rng.get_nonzero_bytes(k - len(payload) - 3, "rsa_padding")
        return b"\x00\x02" + filler + b"\x00" + bytes(payload)

    def unpad(self, block: bytes, k: int) -> bytes:
        """Recover the payload from a ``k``-byte encryption block.

        Raises:
            InvalidPaddingError: wrong length, missing 00 02 markers,
                missing delimiter or a filler shorter than ``min_fill``
        """
        if len(block) != k or k < self.overhead:
            raise InvalidPaddingError(f"Encryption block must be {k} bytes, got {len(block)}")
        if block[0] != 0x00 or block[1] != 0x02:
            raise InvalidPaddingError("Missing 00 02 block markers")

        sep = block.find(b"\x00", 2)
        if sep < 0:
            raise InvalidPaddingError("Missing zero delimiter after filler")
        if sep - 2 < self.min_fill:
            raise InvalidPaddingError(
                f"Filler of {sep - 2} bytes is shorter than {self.min_fill}"
            )
        return bytes(block[sep + 1:])

    def __repr__(self) -> str:
        return f"RSAPadding(min_fill={self.min_fill})"
