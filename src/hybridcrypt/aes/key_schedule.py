"""AES-128 key expansion."""

from __future__ import annotations

from hybridcrypt.errors import InvalidInputLengthError

from .tables import RCON, SBOX

KEY_SIZE = 16
ROUNDS = 10


def expand_key(key: bytes) -> tuple[bytes, ...]:
    """Expand a 16-byte key to 11 round keys of 16 bytes each.

    Words w0..w3 are the key itself. Every fourth word is
    SubWord(RotWord(w[i-1])) ^ Rcon, XORed with the word four back;
    the rest are w[i-1] ^ w[i-4].
    """
    w = [list(key[i:i + 4]) for i in range(0, KEY_SIZE, 4)]

    for i in range(4, 4 * (ROUNDS + 1)):
        temp = w[i - 1][:]
        if i % 4 == 0:
            # RotWord + SubWord + Rcon
            temp = [SBOX[temp[1]], SBOX[temp[2]], SBOX[temp[3]], SBOX[temp[0]]]
            temp[0] ^= RCON[i // 4]
        w.append([w[i - 4][j] ^ temp[j] for j in range(4)])

    return tuple(
        bytes(w[r * 4] + w[r * 4 + 1] + w[r * 4 + 2] + w[r * 4 + 3])
        for r in range(ROUNDS + 1)
    )


class AESKeySchedule:
    """Round keys derived once from a 16-byte key; read-only afterwards."""

    __slots__ = ("_round_keys",)

    def __init__(self, key: bytes):
        if len(key) != KEY_SIZE:
            raise InvalidInputLengthError(
                f"Key must be {KEY_SIZE} bytes, got {len(key)}", engine="aes"
            )
        self._round_keys = expand_key(bytes(key))

    @property
    def round_keys(self) -> tuple[bytes, ...]:
        return self._round_keys

    @property
    def rounds(self) -> int:
        return ROUNDS

    def __getitem__(self, round_num: int) -> bytes:
        return self._round_keys[round_num]

    def __len__(self) -> int:
        return len(self._round_keys)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, AESKeySchedule):
            return NotImplemented
        return self._round_keys == other._round_keys

    def __hash__(self) -> int:
        return hash(self._round_keys)

    def __repr__(self) -> str:
        return f"AESKeySchedule(rounds={ROUNDS})"
