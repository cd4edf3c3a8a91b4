"""Tests for key and ciphertext file formats."""

import base64

import pytest

from hybridcrypt.errors import KeyFileError
from hybridcrypt.keyfile import (
    PRIVATE,
    PUBLIC,
    dump_key,
    dump_rsa_ciphertext,
    frame_ciphertext,
    load_key,
    load_rsa_ciphertext,
    read_private_key,
    read_public_key,
    unframe_ciphertext,
    write_key,
)

N = 13407807929942597099574024998205846127479365820592393377723561443721764030073546976801874298166903427690031858186486050853753882811946569946433649006084171
E = 65537


class TestKeyText:
    """Tests for the PEM-like armour."""

    def test_dump_layout(self) -> None:
        text = dump_key(PUBLIC, 3233, 17)
        lines = text.splitlines()

        assert lines[0] == "-----BEGIN HYBRIDCRYPT PUBLIC KEY-----"
        assert lines[-1] == "-----END HYBRIDCRYPT PUBLIC KEY-----"
        assert base64.b64decode(lines[1]) == b"3233:17"

    def test_round_trip(self) -> None:
        assert load_key(dump_key(PRIVATE, N, E), PRIVATE) == (N, E)

    def test_long_body_wraps(self) -> None:
        lines = dump_key(PUBLIC, N, E).splitlines()
        assert len(lines) > 3
        assert all(len(line) <= 64 for line in lines[1:-1])

    def test_surrounding_whitespace_tolerated(self) -> None:
        text = "\n\n  " + dump_key(PUBLIC, 3233, 17) + "\n\n"
        assert load_key(text, PUBLIC) == (3233, 17)

    def test_kind_mismatch(self) -> None:
        with pytest.raises(KeyFileError, match="missing"):
            load_key(dump_key(PUBLIC, 3233, 17), PRIVATE)

    def test_unknown_kind(self) -> None:
        with pytest.raises(ValueError):
            dump_key("SECRET", 3233, 17)

    @pytest.mark.parametrize(
        "body",
        ["!!!not base64!!!", base64.b64encode(b"3233").decode(), base64.b64encode(b"a:b").decode(),
         base64.b64encode(b"1:17").decode()],
        ids=["base64", "no-separator", "non-digit", "modulus-too-small"],
    )
    def test_corrupt_body(self, body: str) -> None:
        text = f"-----BEGIN HYBRIDCRYPT PUBLIC KEY-----\n{body}\n-----END HYBRIDCRYPT PUBLIC KEY-----\n"
        with pytest.raises(KeyFileError):
            load_key(text, PUBLIC)

    def test_empty_file(self) -> None:
        with pytest.raises(KeyFileError):
            load_key("", PUBLIC)

    def test_error_identifies_stage(self) -> None:
        with pytest.raises(KeyFileError) as excinfo:
            load_key("garbage", PUBLIC)
        assert excinfo.value.engine == "keyfile"


class TestKeyFiles:
    """Tests for reading and writing key files."""

    def test_write_and_read(self, tmp_path) -> None:
        pub = write_key(tmp_path / "keys" / "pubKey.pem", PUBLIC, 3233, 17)
        priv = write_key(tmp_path / "keys" / "privKey.pem", PRIVATE, 3233, 413)

        public_key = read_public_key(pub)
        private_key = read_private_key(priv)

        assert (public_key.n, public_key.e) == (3233, 17)
        assert (private_key.n, private_key.d) == (3233, 413)

    def test_private_file_is_not_public(self, tmp_path) -> None:
        priv = write_key(tmp_path / "privKey.pem", PRIVATE, 3233, 413)
        with pytest.raises(KeyFileError):
            read_public_key(priv)


class TestCiphertextFiles:
    """Tests for IV framing and the RSA block list."""

    def test_frame_and_unframe(self) -> None:
        iv = bytes(range(16))
        data = frame_ciphertext(iv, b"\xaa" * 32)

        assert data[:16] == iv
        assert unframe_ciphertext(data) == (iv, b"\xaa" * 32)

    def test_frame_rejects_bad_iv(self) -> None:
        with pytest.raises(KeyFileError, match="IV must be 16 bytes"):
            frame_ciphertext(bytes(8), bytes(16))

    @pytest.mark.parametrize("length", [0, 10, 16])
    def test_unframe_too_short(self, length: int) -> None:
        with pytest.raises(KeyFileError, match="too short"):
            unframe_ciphertext(bytes(length))

    def test_rsa_ciphertext_round_trip(self) -> None:
        blocks = [1, 2**63 + 5, 0, 12345]
        text = dump_rsa_ciphertext(blocks)

        assert text.splitlines() == ["1", str(2**63 + 5), "0", "12345"]
        assert load_rsa_ciphertext(text) == blocks

    def test_rsa_ciphertext_blank_lines_ignored(self) -> None:
        assert load_rsa_ciphertext("\n7\n\n8\n") == [7, 8]

    def test_rsa_ciphertext_rejects_garbage(self) -> None:
        with pytest.raises(KeyFileError, match="Line 2"):
            load_rsa_ciphertext("7\n0x10\n")

    def test_rsa_ciphertext_rejects_empty(self) -> None:
        with pytest.raises(KeyFileError, match="empty"):
            load_rsa_ciphertext("\n")
