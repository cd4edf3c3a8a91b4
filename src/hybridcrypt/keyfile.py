"""
File formats for keys and ciphertexts.

Key files are PEM-like: a BEGIN/END armour around base64 of the ASCII
text ``"<modulus>:<exponent>"``. The public and private files share the
modulus. The symmetric ciphertext file is the 16-byte IV followed by the
CBC ciphertext; the RSA ciphertext file holds one decimal integer per
encrypted key block.
"""

from __future__ import annotations

import base64
import binascii
import textwrap
from pathlib import Path

from .errors import KeyFileError
from .rsa import PrivateKey, PublicKey

PUBLIC = "PUBLIC"
PRIVATE = "PRIVATE"

IV_SIZE = 16
_LINE_WIDTH = 64


def _armour(kind: str) -> tuple[str, str]:
    return (
        f"-----BEGIN HYBRIDCRYPT {kind} KEY-----",
        f"-----END HYBRIDCRYPT {kind} KEY-----",
    )


def dump_key(kind: str, modulus: int, exponent: int) -> str:
    """Serialize a (modulus, exponent) pair to PEM-like text."""
    if kind not in (PUBLIC, PRIVATE):
        raise ValueError(f"kind must be {PUBLIC!r} or {PRIVATE!r}, got {kind!r}")
    body = base64.b64encode(f"{modulus}:{exponent}".encode("ascii")).decode("ascii")
    begin, end = _armour(kind)
    return "\n".join([begin, *textwrap.wrap(body, _LINE_WIDTH), end]) + "\n"


def load_key(text: str, kind: str) -> tuple[int, int]:
    """Parse PEM-like text back into ``(modulus, exponent)``.

    Raises:
        KeyFileError: missing armour, bad base64 or bad integer payload
    """
    begin, end = _armour(kind)
    lines = [line.strip() for line in text.strip().splitlines()]
    if len(lines) < 3 or lines[0] != begin or lines[-1] != end:
        raise KeyFileError(f"Not a {kind.lower()} key: missing {begin!r} armour")

    try:
        decoded = base64.b64decode("".join(lines[1:-1]), validate=True).decode("ascii")
    except (binascii.Error, UnicodeDecodeError) as e:
        raise KeyFileError(f"Corrupt key body: {e}") from e

    modulus_text, sep, exponent_text = decoded.partition(":")
    if not sep or not modulus_text.isdigit() or not exponent_text.isdigit():
        raise KeyFileError("Key body must be '<modulus>:<exponent>'")
    modulus, exponent = int(modulus_text), int(exponent_text)
    if modulus < 2 or exponent < 1:
        raise KeyFileError("Key modulus and exponent must be positive")
    return modulus, exponent


def write_key(path: str | Path, kind: str, modulus: int, exponent: int) -> Path:
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(dump_key(kind, modulus, exponent))
    return path


def read_public_key(path: str | Path) -> PublicKey:
    n, e = load_key(Path(path).read_text(), PUBLIC)
    return PublicKey(n, e)


def read_private_key(path: str | Path) -> PrivateKey:
    n, d = load_key(Path(path).read_text(), PRIVATE)
    return PrivateKey(n, d)


def frame_ciphertext(iv: bytes, ciphertext: bytes) -> bytes:
    if len(iv) != IV_SIZE:
        raise KeyFileError(f"IV must be {IV_SIZE} bytes, got {len(iv)}")
    return bytes(iv) + bytes(ciphertext)


def unframe_ciphertext(data: bytes) -> tuple[bytes, bytes]:
    """Split a symmetric ciphertext file into ``(iv, ciphertext)``."""
    if len(data) <= IV_SIZE:
        raise KeyFileError(f"Ciphertext file too short: {len(data)} bytes")
    return data[:IV_SIZE], data[IV_SIZE:]


def dump_rsa_ciphertext(blocks: list[int]) -> str:
    return "".join(f"{c}\n" for c in blocks)


def load_rsa_ciphertext(text: str) -> list[int]:
    blocks = []
    for lineno, line in enumerate(text.splitlines(), start=1):
        line = line.strip()
        if not line:
            continue
        if not line.isdigit():
            raise KeyFileError(f"Line {lineno}: expected a decimal integer")
        blocks.append(int(line))
    if not blocks:
        raise KeyFileError("RSA ciphertext file is empty")
    return blocks
