"""Command-line interface for the hybrid encryption engine."""

from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import TextIO

import click
from tabulate import tabulate

from . import __version__
from .aes import AESBlockCipher, AESCBCEngine
from .config import HybridConfig
from .errors import HybridCryptError
from .golden import FIPS_197_TEST_VECTORS, NIST_CBC_TEST_VECTORS, validate_against_golden
from .keyfile import (
    PRIVATE,
    PUBLIC,
    dump_rsa_ciphertext,
    frame_ciphertext,
    load_rsa_ciphertext,
    read_private_key,
    read_public_key,
    unframe_ciphertext,
    write_key,
)
from .randomness import RandomSource
from .trace import TraceRecorder, print_header, print_result
from .utils import fingerprint
from .workflow import (
    HybridEnvelope,
    HybridWorkflow,
    decrypt_envelope,
    encrypt_envelope,
    generate_key_pair,
)


SEED_HELP = (
    "Random seed (reproducible, insecure). Key generation and encryption "
    "never draw the same bytes from it, but anyone who knows the seed can "
    "recompute keys, IVs and padding"
)


def _fail(error: Exception) -> None:
    click.echo(f"Error: {error}", err=True)
    sys.exit(1)


def _config_for(modulus: int, min_fill: int, seed: int | None = None) -> HybridConfig:
    """Config matching an existing key's modulus width."""
    bits = modulus.bit_length()
    return HybridConfig(rsa_bits=bits + bits % 2, rsa_min_fill=min_fill, seed=seed)


def _open_trace(path: str | None) -> TextIO | None:
    if path is None:
        return None
    try:
        return open(path, "w")
    except OSError as e:
        _fail(e)


@click.group()
@click.version_option(version=__version__, prog_name="hybridcrypt")
@click.option("--debug", is_flag=True, help="Log every workflow event to stderr")
def main(debug: bool) -> None:
    """Hybrid AES-128-CBC + textbook RSA encryption.

    Educational implementation; not for protecting real data.
    """
    if debug:
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(asctime)s %(name)s %(levelname)s %(message)s",
        )


@main.command()
@click.option("--bits", type=int, default=64, help="RSA modulus width (default: 64)")
@click.option("--min-fill", type=int, default=1, help="Minimum RSA padding filler bytes (default: 1)")
@click.option(
    "--out-dir",
    type=click.Path(file_okay=False),
    default="keys",
    help="Output directory (default: keys)",
)
@click.option("--seed", type=int, default=None, help=SEED_HELP)
def keygen(bits: int, min_fill: int, out_dir: str, seed: int | None) -> None:
    """Generate an RSA key pair into pubKey.pem and privKey.pem."""
    try:
        config = HybridConfig(rsa_bits=bits, rsa_min_fill=min_fill, seed=seed)
        key_pair = generate_key_pair(config)
        out = Path(out_dir)
        pub_path = write_key(out / "pubKey.pem", PUBLIC, key_pair.n, key_pair.e)
        priv_path = write_key(out / "privKey.pem", PRIVATE, key_pair.n, key_pair.d)
    except (OSError, ValueError, HybridCryptError) as e:
        _fail(e)

    click.echo(f"Generated {key_pair.bits}-bit RSA key pair")
    click.echo(f"  Public key:  {fingerprint(key_pair.n)} -> {pub_path}")
    click.echo(f"  Private key: {fingerprint(key_pair.d)} -> {priv_path}")
    click.echo("  (modulus and private exponent shown as SHA-256 fingerprints)")


@main.command()
@click.argument("input_file", type=click.Path(exists=True, dir_okay=False))
@click.option("--pub", "pub_path", type=click.Path(exists=True), default="keys/pubKey.pem")
@click.option("--min-fill", type=int, default=1, help="Minimum RSA padding filler bytes (default: 1)")
@click.option("--out-dir", type=click.Path(file_okay=False), default="ciphertext")
@click.option("--seed", type=int, default=None, help=SEED_HELP)
@click.option("--trace", "trace_path", type=click.Path(dir_okay=False), default=None,
              help="Write JSON Lines trace to this file")
def encrypt(
    input_file: str,
    pub_path: str,
    min_fill: int,
    out_dir: str,
    seed: int | None,
    trace_path: str | None,
) -> None:
    """Encrypt INPUT_FILE to msg_enc.aes and key_enc.bin."""
    trace_file = _open_trace(trace_path)
    try:
        public_key = read_public_key(pub_path)
        config = _config_for(public_key.n, min_fill, seed)
        recorder = TraceRecorder(trace_file=trace_file)
        envelope = encrypt_envelope(
            Path(input_file).read_bytes(), public_key, config, recorder=recorder
        )

        out = Path(out_dir)
        out.mkdir(parents=True, exist_ok=True)
        msg_path = out / "msg_enc.aes"
        key_path = out / "key_enc.bin"
        msg_path.write_bytes(frame_ciphertext(envelope.iv, envelope.ciphertext))
        key_path.write_text(dump_rsa_ciphertext(envelope.encrypted_key))
    except (OSError, ValueError, HybridCryptError) as e:
        _fail(e)
    finally:
        if trace_file:
            trace_file.close()

    click.echo(f"AES ciphertext written to: {msg_path}")
    click.echo(f"RSA ciphertext (encrypted AES key) written to: {key_path}")


@main.command()
@click.option("--priv", "priv_path", type=click.Path(exists=True), default="keys/privKey.pem")
@click.option("--cipher", "cipher_path", type=click.Path(exists=True),
              default="ciphertext/msg_enc.aes")
@click.option("--key-cipher", "key_cipher_path", type=click.Path(exists=True),
              default="ciphertext/key_enc.bin")
@click.option("--min-fill", type=int, default=1, help="Minimum RSA padding filler bytes (default: 1)")
@click.option("--out", "out_path", type=click.Path(dir_okay=False), default="decrypted.txt")
def decrypt(
    priv_path: str,
    cipher_path: str,
    key_cipher_path: str,
    min_fill: int,
    out_path: str,
) -> None:
    """Recover the AES key with RSA, then decrypt the message."""
    try:
        private_key = read_private_key(priv_path)
        iv, ciphertext = unframe_ciphertext(Path(cipher_path).read_bytes())
        blocks = load_rsa_ciphertext(Path(key_cipher_path).read_text())
        config = _config_for(private_key.n, min_fill)
        plaintext = decrypt_envelope(HybridEnvelope(iv, ciphertext, blocks), private_key, config)
        Path(out_path).write_bytes(plaintext)
    except (OSError, ValueError, HybridCryptError) as e:
        _fail(e)
    click.echo(f"Decrypted message exported to: {out_path}")


@main.command()
@click.argument("input_file", type=click.Path(exists=True, dir_okay=False), required=False)
@click.option("--text", type=str, default=None, help="Plaintext given inline")
@click.option("--bits", type=int, default=64, help="RSA modulus width (default: 64)")
@click.option("--seed", type=int, default=None, help=SEED_HELP)
@click.option("--verbose", "-v", is_flag=True, help="Print every workflow step")
@click.option("--trace", "trace_path", type=click.Path(dir_okay=False), default=None,
              help="Write JSON Lines trace to this file")
def demo(
    input_file: str | None,
    text: str | None,
    bits: int,
    seed: int | None,
    verbose: bool,
    trace_path: str | None,
) -> None:
    """Run the full encrypt-then-decrypt cycle with a fresh key pair."""
    if input_file is not None:
        plaintext = Path(input_file).read_bytes()
    elif text is not None:
        plaintext = text.encode("utf-8")
    else:
        _fail(click.UsageError("give INPUT_FILE or --text"))

    trace_file = _open_trace(trace_path)
    try:
        config = HybridConfig(rsa_bits=bits, seed=seed)
        rng = RandomSource(seed=seed)
        recorder = TraceRecorder(verbose=verbose, trace_file=trace_file)

        print_header(f"Hybrid AES-128-CBC / RSA-{bits}")
        key_pair = generate_key_pair(config, rng, recorder)
        workflow = HybridWorkflow(key_pair, config, rng, recorder)
        result = workflow.run(plaintext)
    except (ValueError, HybridCryptError) as e:
        _fail(e)
    finally:
        if trace_file:
            trace_file.close()

    click.echo(f"Plaintext bytes:      {len(plaintext)}")
    click.echo(f"AES ciphertext bytes: {len(result.envelope.ciphertext)}")
    click.echo(f"RSA key blocks:       {len(result.envelope.encrypted_key)}")
    click.echo(f"States: {' -> '.join(s.name for s in result.states)}")
    print_result("Ciphertext", result.envelope.ciphertext.hex(), result.correct)


@main.command()
@click.option("--n", "num_tests", type=int, default=100,
              help="Number of random CBC tests (default: 100)")
@click.option("--seed", type=int, default=None, help="Random seed for reproducibility")
@click.option("--verbose", "-v", is_flag=True, help="Show every test")
def validate(num_tests: int, seed: int | None, verbose: bool) -> None:
    """Check the AES engines against FIPS-197, NIST CBC and PyCryptodome."""
    rows = []

    for vec in FIPS_197_TEST_VECTORS:
        got = AESBlockCipher(vec["key"]).encrypt_block(vec["plaintext"])
        back = AESBlockCipher(vec["key"]).decrypt_block(got)
        ok = got == vec["ciphertext"] and back == vec["plaintext"]
        rows.append(["block", vec["name"], "PASS" if ok else "FAIL"])

    for vec in NIST_CBC_TEST_VECTORS:
        engine = AESCBCEngine(vec["key"])
        got = engine.encrypt_blocks(vec["plaintext"], vec["iv"])
        back = engine.decrypt_blocks(got, vec["iv"])
        ok = got == vec["ciphertext"] and back == vec["plaintext"]
        rows.append(["cbc", vec["name"], "PASS" if ok else "FAIL"])

    rng = RandomSource(seed=seed)
    random_failed = 0
    for i in range(num_tests):
        key = rng.get_bytes(16)
        iv = rng.get_bytes(16)
        pt = rng.get_bytes(rng.get_int_below(80))
        ct = AESCBCEngine(key).encrypt(pt, iv)
        ok, detail = validate_against_golden(key, iv, pt, ct)
        ok = ok and AESCBCEngine(key).decrypt(ct, iv) == pt
        if not ok:
            random_failed += 1
        if verbose or not ok:
            click.echo(f"  Random test {i + 1}: {'PASS' if ok else 'FAIL ' + detail}")
    rows.append([
        "cbc+pkcs7",
        f"{num_tests} random vs PyCryptodome",
        f"{num_tests - random_failed}/{num_tests}",
    ])

    click.echo(tabulate(rows, headers=["Kind", "Vector", "Result"], tablefmt="simple"))

    failed = sum(1 for r in rows if r[2] == "FAIL") + random_failed
    click.echo("")
    if failed == 0:
        click.echo("VALIDATION PASSED")
        sys.exit(0)
    else:
        click.echo(f"VALIDATION FAILED: {failed} failures")
        sys.exit(1)


if __name__ == "__main__":
    main()
