"""Textbook RSA over padded payload blocks."""

from __future__ import annotations

from hybridcrypt.errors import InvalidInputLengthError
from hybridcrypt.randomness import RandomSource
from hybridcrypt.utils import bytes_to_int, int_to_bytes

from .bigint import mod_exp
from .keygen import PrivateKey, PublicKey
from .padding import RSAPadding


class RSAEngine:
    """Encrypts short payloads (symmetric keys) under an RSA key.

    A payload that fits ``K - overhead`` bytes travels as one integer.
    ``encrypt_chunked`` splits longer payloads into several padded
    blocks, which is how a 16-byte key crosses a 64-bit modulus.
    """

    def __init__(self, padding: RSAPadding | None = None, rng: RandomSource | None = None):
        if padding is None:
            padding = RSAPadding(rng=rng)
        self.padding = padding

    def encrypt(self, payload: bytes, public_key: PublicKey) -> int:
        """Pad ``payload`` to the modulus width and return ``m**E mod N``."""
        k = public_key.byte_length
        m = bytes_to_int(self.padding.pad(payload, k))
        if not 0 <= m < public_key.n:
            raise InvalidInputLengthError(
                "Message representative out of range", engine="rsa", stage="compute"
            )
        return mod_exp(m, public_key.e, public_key.n)

    def decrypt(self, ciphertext: int, private_key: PrivateKey) -> bytes:
        """Return the payload inside ``ciphertext``.

        Raises:
            InvalidInputLengthError: ciphertext not in ``[0, N)``
            InvalidPaddingError: decrypted block is not a valid encoding
        """
        if not 0 <= ciphertext < private_key.n:
            raise InvalidInputLengthError(
                "Ciphertext representative out of range", engine="rsa"
            )
        k = private_key.byte_length
        m = mod_exp(ciphertext, private_key.d, private_key.n)
        return self.padding.unpad(int_to_bytes(m, k), k)

    def chunk_size(self, key: PublicKey | PrivateKey) -> int:
        return self.padding.max_payload(key.byte_length)

    def encrypt_chunked(self, payload: bytes, public_key: PublicKey) -> list[int]:
        """Encrypt ``payload`` as consecutive blocks of ``chunk_size`` bytes."""
        size = self.chunk_size(public_key)
        if size < 1:
            raise InvalidInputLengthError(
                f"{public_key.n.bit_length()}-bit modulus too small for {self.padding!r}",
                engine="rsa",
            )
        if not payload:
            return [self.encrypt(b"", public_key)]
        return [
            self.encrypt(payload[i:i + size], public_key)
            for i in range(0, len(payload), size)
        ]

    def decrypt_chunked(self, ciphertexts: list[int], private_key: PrivateKey) -> bytes:
        if not ciphertexts:
            raise InvalidInputLengthError("No ciphertext blocks", engine="rsa")
        return b"".join(self.decrypt(c, private_key) for c in ciphertexts)
