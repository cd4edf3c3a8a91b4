"""Tests for the command-line interface."""

import json
from pathlib import Path

import pytest
from click.testing import CliRunner

from hybridcrypt import __version__
from hybridcrypt.cli import main


@pytest.fixture
def runner() -> CliRunner:
    return CliRunner()


class TestKeygenEncryptDecrypt:
    """File-based round trip through the three commands."""

    def test_round_trip(self, runner: CliRunner) -> None:
        with runner.isolated_filesystem():
            Path("message.txt").write_bytes(b"Hybrid encryption from the command line.\n")

            result = runner.invoke(main, ["keygen", "--seed", "1"])
            assert result.exit_code == 0, result.output
            assert "Generated 64-bit RSA key pair" in result.output
            assert Path("keys/pubKey.pem").read_text().startswith(
                "-----BEGIN HYBRIDCRYPT PUBLIC KEY-----"
            )

            result = runner.invoke(main, ["encrypt", "message.txt", "--seed", "2"])
            assert result.exit_code == 0, result.output
            assert Path("ciphertext/msg_enc.aes").stat().st_size == 16 + 48
            assert len(Path("ciphertext/key_enc.bin").read_text().splitlines()) == 4

            result = runner.invoke(main, ["decrypt"])
            assert result.exit_code == 0, result.output
            assert Path("decrypted.txt").read_bytes() == b"Hybrid encryption from the command line.\n"

    def test_custom_paths_and_wide_modulus(self, runner: CliRunner) -> None:
        with runner.isolated_filesystem():
            Path("in.bin").write_bytes(bytes(range(256)))

            assert runner.invoke(
                main, ["keygen", "--bits", "128", "--out-dir", "k", "--seed", "3"]
            ).exit_code == 0
            assert runner.invoke(
                main, ["encrypt", "in.bin", "--pub", "k/pubKey.pem", "--out-dir", "ct"]
            ).exit_code == 0
            result = runner.invoke(main, [
                "decrypt", "--priv", "k/privKey.pem", "--cipher", "ct/msg_enc.aes",
                "--key-cipher", "ct/key_enc.bin", "--out", "out.bin",
            ])

            assert result.exit_code == 0, result.output
            assert Path("out.bin").read_bytes() == bytes(range(256))

    def test_keygen_output_hides_private_exponent(self, runner: CliRunner) -> None:
        with runner.isolated_filesystem():
            result = runner.invoke(main, ["keygen", "--seed", "4"])
            private_text = Path("keys/privKey.pem").read_text()
            assert private_text.splitlines()[1] not in result.output

    def test_encrypt_trace_file(self, runner: CliRunner) -> None:
        with runner.isolated_filesystem():
            Path("m.txt").write_text("traced")
            runner.invoke(main, ["keygen", "--seed", "5"])

            result = runner.invoke(main, ["encrypt", "m.txt", "--seed", "6", "--trace", "t.jsonl"])

            assert result.exit_code == 0, result.output
            events = [json.loads(line)["event"] for line in Path("t.jsonl").read_text().splitlines()]
            assert events == ["symmetric_key_generated", "message_encrypted", "key_encrypted"]

    def test_invalid_bits(self, runner: CliRunner) -> None:
        with runner.isolated_filesystem():
            result = runner.invoke(main, ["keygen", "--bits", "63"])
            assert result.exit_code == 1
            assert "Error:" in result.output

    def test_keygen_unwritable_out_dir(self, runner: CliRunner) -> None:
        with runner.isolated_filesystem():
            Path("blocker").write_text("a file, not a directory")

            result = runner.invoke(main, ["keygen", "--seed", "1", "--out-dir", "blocker/keys"])

            assert result.exit_code == 1
            assert "Error:" in result.output
            assert not isinstance(result.exception, OSError)

    def test_encrypt_and_decrypt_unwritable_outputs(self, runner: CliRunner) -> None:
        with runner.isolated_filesystem():
            Path("m.txt").write_text("x")
            Path("blocker").write_text("a file, not a directory")
            runner.invoke(main, ["keygen", "--seed", "2"])

            result = runner.invoke(main, ["encrypt", "m.txt", "--out-dir", "blocker/ct"])
            assert result.exit_code == 1
            assert "Error:" in result.output

            assert runner.invoke(main, ["encrypt", "m.txt"]).exit_code == 0
            result = runner.invoke(main, ["decrypt", "--out", "blocker/out.txt"])
            assert result.exit_code == 1
            assert "Error:" in result.output

    def test_corrupt_private_key(self, runner: CliRunner) -> None:
        with runner.isolated_filesystem():
            Path("m.txt").write_text("x")
            runner.invoke(main, ["keygen", "--seed", "7"])
            runner.invoke(main, ["encrypt", "m.txt"])
            Path("keys/privKey.pem").write_text("not a key\n")

            result = runner.invoke(main, ["decrypt"])

            assert result.exit_code == 1
            assert "keyfile" in result.output

    def test_missing_public_key(self, runner: CliRunner) -> None:
        with runner.isolated_filesystem():
            Path("m.txt").write_text("x")
            result = runner.invoke(main, ["encrypt", "m.txt"])
            assert result.exit_code != 0


class TestDemo:
    """Tests for the one-shot demo command."""

    def test_text(self, runner: CliRunner) -> None:
        result = runner.invoke(main, ["demo", "--text", "HELLO WORLD", "--seed", "8"])

        assert result.exit_code == 0, result.output
        assert "AES ciphertext bytes: 16" in result.output
        assert "RSA key blocks:       4" in result.output
        assert "IDLE -> SYMMETRIC_KEY_GENERATED" in result.output
        assert "[OK] PASS" in result.output

    def test_verbose(self, runner: CliRunner) -> None:
        result = runner.invoke(main, ["demo", "--text", "hi", "--seed", "9", "-v"])

        assert result.exit_code == 0, result.output
        assert "rsa_keygen" in result.output
        assert "message_decrypted" in result.output

    def test_file_input(self, runner: CliRunner) -> None:
        with runner.isolated_filesystem():
            Path("in.txt").write_text("from a file")
            result = runner.invoke(main, ["demo", "in.txt", "--seed", "10"])
            assert result.exit_code == 0, result.output

    def test_no_input(self, runner: CliRunner) -> None:
        result = runner.invoke(main, ["demo"])
        assert result.exit_code == 1
        assert "INPUT_FILE or --text" in result.output


class TestValidate:
    """Tests for the validate command."""

    def test_passes(self, runner: CliRunner) -> None:
        result = runner.invoke(main, ["validate", "--n", "5", "--seed", "1"])

        assert result.exit_code == 0, result.output
        assert "FIPS-197 C.1" in result.output
        assert "SP 800-38A F.2.1" in result.output
        assert "5/5" in result.output
        assert "VALIDATION PASSED" in result.output


def test_version(runner: CliRunner) -> None:
    result = runner.invoke(main, ["--version"])
    assert __version__ in result.output
