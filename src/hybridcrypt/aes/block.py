"""Single-block AES-128 encryption and decryption.

State is a flat list of 16 ints in column-major order:

    [0, 4, 8, 12]
    [1, 5, 9, 13]
    [2, 6, 10, 14]
    [3, 7, 11, 15]
"""

from __future__ import annotations

from hybridcrypt.errors import InvalidInputLengthError

from .key_schedule import AESKeySchedule
from .tables import INV_SBOX, MUL2, MUL3, MUL9, MUL11, MUL13, MUL14, SBOX

BLOCK_SIZE = 16

# Row r rotates left by r positions
SHIFT_ROWS = (0, 5, 10, 15, 4, 9, 14, 3, 8, 13, 2, 7, 12, 1, 6, 11)
INV_SHIFT_ROWS = (0, 13, 10, 7, 4, 1, 14, 11, 8, 5, 2, 15, 12, 9, 6, 3)


def sub_bytes(state: list[int]) -> list[int]:
    """Apply S-box to each byte."""
    return [SBOX[b] for b in state]


def inv_sub_bytes(state: list[int]) -> list[int]:
    return [INV_SBOX[b] for b in state]


def shift_rows(state: list[int]) -> list[int]:
    return [state[i] for i in SHIFT_ROWS]


def inv_shift_rows(state: list[int]) -> list[int]:
    return [state[i] for i in INV_SHIFT_ROWS]


def mix_columns(state: list[int]) -> list[int]:
    """Multiply each column by the fixed polynomial {03}x^3+{01}x^2+{01}x+{02}."""
    result = []
    for col in range(0, 16, 4):
        a, b, c, d = state[col:col + 4]
        result.extend((
            MUL2[a] ^ MUL3[b] ^ c ^ d,
            a ^ MUL2[b] ^ MUL3[c] ^ d,
            a ^ b ^ MUL2[c] ^ MUL3[d],
            MUL3[a] ^ b ^ c ^ MUL2[d],
        ))
    return result


def inv_mix_columns(state: list[int]) -> list[int]:
    result = []
    for col in range(0, 16, 4):
        a, b, c, d = state[col:col + 4]
        result.extend((
            MUL14[a] ^ MUL11[b] ^ MUL13[c] ^ MUL9[d],
            MUL9[a] ^ MUL14[b] ^ MUL11[c] ^ MUL13[d],
            MUL13[a] ^ MUL9[b] ^ MUL14[c] ^ MUL11[d],
            MUL11[a] ^ MUL13[b] ^ MUL9[c] ^ MUL14[d],
        ))
    return result


def add_round_key(state: list[int], round_key: bytes) -> list[int]:
    """XOR state with round key."""
    return [s ^ k for s, k in zip(state, round_key)]


def _check_block(block: bytes, what: str) -> None:
    if len(block) != BLOCK_SIZE:
        raise InvalidInputLengthError(
            f"{what} block must be {BLOCK_SIZE} bytes, got {len(block)}", engine="aes"
        )


def encrypt_block(block: bytes, schedule: AESKeySchedule) -> bytes:
    """Encrypt one 16-byte block under an expanded key."""
    _check_block(block, "Plaintext")
    rounds = schedule.rounds

    state = add_round_key(list(block), schedule[0])

    for round_num in range(1, rounds):
        state = sub_bytes(state)
        state = shift_rows(state)
        state = mix_columns(state)
        state = add_round_key(state, schedule[round_num])

    # Final round (no MixColumns)
    state = sub_bytes(state)
    state = shift_rows(state)
    state = add_round_key(state, schedule[rounds])

    return bytes(state)


def decrypt_block(block: bytes, schedule: AESKeySchedule) -> bytes:
    """Decrypt one 16-byte block, consuming round keys in reverse."""
    _check_block(block, "Ciphertext")
    rounds = schedule.rounds

    state = add_round_key(list(block), schedule[rounds])

    for round_num in range(rounds - 1, 0, -1):
        state = inv_shift_rows(state)
        state = inv_sub_bytes(state)
        state = add_round_key(state, schedule[round_num])
        state = inv_mix_columns(state)

    state = inv_shift_rows(state)
    state = inv_sub_bytes(state)
    state = add_round_key(state, schedule[0])

    return bytes(state)


class AESBlockCipher:
    """AES-128 block cipher bound to one key schedule."""

    block_size = BLOCK_SIZE

    def __init__(self, key: bytes):
        self.schedule = AESKeySchedule(key)

    def encrypt_block(self, block: bytes) -> bytes:
        return encrypt_block(block, self.schedule)

    def decrypt_block(self, block: bytes) -> bytes:
        return decrypt_block(block, self.schedule)

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(rounds={self.schedule.rounds})"
