"""Tests for the hybrid encrypt-then-decrypt workflow."""

import io
import json

import pytest

from hybridcrypt.config import HybridConfig
from hybridcrypt.errors import IntegrityError, WorkflowStateError
from hybridcrypt.golden import golden_cbc_encrypt
from hybridcrypt.randomness import RandomSource
from hybridcrypt.rsa import RSAKeyPair
from hybridcrypt.trace import TraceRecorder
from hybridcrypt.workflow import (
    HybridWorkflow,
    State,
    decrypt_envelope,
    encrypt_envelope,
    generate_key_pair,
)

EXPECTED_STATES = [
    State.IDLE,
    State.SYMMETRIC_KEY_GENERATED,
    State.MESSAGE_ENCRYPTED,
    State.KEY_ENCRYPTED,
    State.KEY_DECRYPTED,
    State.MESSAGE_DECRYPTED,
    State.DONE,
]


@pytest.fixture(scope="module")
def key_pair() -> RSAKeyPair:
    return generate_key_pair(HybridConfig(seed=31337))


class TestGenerateKeyPair:
    """Tests for config-driven key generation."""

    def test_default_is_64_bit(self, key_pair: RSAKeyPair) -> None:
        assert key_pair.bits == 64
        assert key_pair.e == 65537
        assert key_pair.validate()

    def test_seed_reproduces_pair(self, key_pair: RSAKeyPair) -> None:
        assert generate_key_pair(HybridConfig(seed=31337)) == key_pair

    def test_same_seed_keeps_key_and_message_streams_apart(self) -> None:
        """keygen and the workflow run with one seed never reuse bytes."""
        config = HybridConfig(seed=42)
        pair = generate_key_pair(config)
        key = HybridWorkflow(pair, config).generate_symmetric_key()

        assert key == RandomSource.for_stream(42, "workflow").get_bytes(16)
        assert key != RandomSource.for_stream(42, "keygen").get_bytes(16)
        assert key != RandomSource(seed=42).get_bytes(16)

    def test_records_fingerprints_only(self) -> None:
        recorder = TraceRecorder()
        pair = generate_key_pair(HybridConfig(seed=5), recorder=recorder)

        (entry,) = recorder.get_records()
        assert entry["event"] == "rsa_keygen"
        assert entry["bits"] == 64
        assert entry["attempts"] >= 1
        assert str(pair.d) not in json.dumps(entry)


class TestHybridWorkflow:
    """Tests for the state machine."""

    def test_run_round_trip(self, key_pair: RSAKeyPair) -> None:
        workflow = HybridWorkflow(key_pair, rng=RandomSource(seed=1))
        result = workflow.run(b"attack at dawn")

        assert result.plaintext == b"attack at dawn"
        assert result.states == EXPECTED_STATES
        assert result.correct
        assert workflow.state is State.DONE

    @pytest.mark.parametrize("length", [0, 1, 15, 16, 17, 1000])
    def test_run_lengths(self, key_pair: RSAKeyPair, length: int) -> None:
        plaintext = bytes(i % 251 for i in range(length))
        result = HybridWorkflow(key_pair, rng=RandomSource(seed=length)).run(plaintext)

        assert result.plaintext == plaintext
        assert len(result.envelope.ciphertext) == (length // 16 + 1) * 16

    def test_hello_world_single_block(self, key_pair: RSAKeyPair) -> None:
        workflow = HybridWorkflow(key_pair, rng=RandomSource(seed=2))
        key = workflow.generate_symmetric_key()
        ct = workflow.encrypt_message(b"HELLO WORLD")
        envelope = workflow.encrypt_key()

        assert len(key) == 16
        assert len(ct) == 16
        assert ct == golden_cbc_encrypt(key, envelope.iv, b"HELLO WORLD")
        assert len(envelope.encrypted_key) == 4
        assert all(0 <= c < key_pair.n for c in envelope.encrypted_key)

        assert workflow.decrypt_key() == key
        assert workflow.decrypt_message() == b"HELLO WORLD"
        assert workflow.finish() == b"HELLO WORLD"

    def test_fresh_key_and_iv_per_workflow(self, key_pair: RSAKeyPair) -> None:
        rng = RandomSource(seed=3)
        first = HybridWorkflow(key_pair, rng=rng).run(b"same message")
        second = HybridWorkflow(key_pair, rng=rng).run(b"same message")

        assert first.envelope.iv != second.envelope.iv
        assert first.envelope.ciphertext != second.envelope.ciphertext

    def test_out_of_order_rejected(self, key_pair: RSAKeyPair) -> None:
        workflow = HybridWorkflow(key_pair, rng=RandomSource(seed=4))

        with pytest.raises(WorkflowStateError, match="expected SYMMETRIC_KEY_GENERATED"):
            workflow.encrypt_message(b"too early")
        with pytest.raises(WorkflowStateError):
            workflow.decrypt_key()
        with pytest.raises(WorkflowStateError):
            workflow.finish()
        assert workflow.state is State.IDLE

    def test_step_cannot_repeat(self, key_pair: RSAKeyPair) -> None:
        workflow = HybridWorkflow(key_pair, rng=RandomSource(seed=5))
        workflow.generate_symmetric_key()
        with pytest.raises(WorkflowStateError):
            workflow.generate_symmetric_key()

    def test_envelope_before_sealing(self, key_pair: RSAKeyPair) -> None:
        workflow = HybridWorkflow(key_pair)
        with pytest.raises(WorkflowStateError, match="not sealed"):
            workflow.envelope

    def test_public_key_only(self, key_pair: RSAKeyPair) -> None:
        workflow = HybridWorkflow(public_key=key_pair.public_key, rng=RandomSource(seed=6))
        workflow.generate_symmetric_key()
        workflow.encrypt_message(b"for the key holder")
        workflow.encrypt_key()

        with pytest.raises(WorkflowStateError, match="No private key"):
            workflow.decrypt_key()

    def test_no_key_at_all(self) -> None:
        workflow = HybridWorkflow(rng=RandomSource(seed=7))
        workflow.generate_symmetric_key()
        workflow.encrypt_message(b"x")
        with pytest.raises(WorkflowStateError, match="No public key"):
            workflow.encrypt_key()

    def test_integrity_failure(self, key_pair: RSAKeyPair) -> None:
        recorder = TraceRecorder()
        workflow = HybridWorkflow(key_pair, rng=RandomSource(seed=8), recorder=recorder)
        workflow.generate_symmetric_key()
        workflow.encrypt_message(b"original")
        workflow.encrypt_key()
        workflow.decrypt_key()
        workflow.decrypt_message()
        workflow._plaintext = b"something else"

        with pytest.raises(IntegrityError):
            workflow.finish()
        assert recorder.events()[-1] == "integrity_failed"

    def test_strict_padding_with_wide_modulus(self) -> None:
        config = HybridConfig(rsa_bits=256, rsa_min_fill=8, seed=9)
        pair = generate_key_pair(config)
        result = HybridWorkflow(pair, config).run(b"one block key")

        assert result.correct
        assert len(result.envelope.encrypted_key) == 1


class TestTraceEvents:
    """Tests for what the workflow reports."""

    def test_event_sequence(self, key_pair: RSAKeyPair) -> None:
        recorder = TraceRecorder()
        HybridWorkflow(key_pair, rng=RandomSource(seed=10), recorder=recorder).run(b"log me")

        assert recorder.events() == [
            "symmetric_key_generated",
            "message_encrypted",
            "key_encrypted",
            "key_decrypted",
            "message_decrypted",
            "done",
        ]

    def test_key_material_never_recorded(self, key_pair: RSAKeyPair) -> None:
        buf = io.StringIO()
        recorder = TraceRecorder(trace_file=buf)
        workflow = HybridWorkflow(key_pair, rng=RandomSource(seed=11), recorder=recorder)
        key = workflow.generate_symmetric_key()
        workflow.encrypt_message(b"secret")
        workflow.encrypt_key()
        workflow.decrypt_key()
        workflow.decrypt_message()
        workflow.finish()

        trace = buf.getvalue()
        assert key.hex() not in trace
        assert str(key_pair.d) not in trace
        assert "key_fp" in trace


class TestEnvelopeFunctions:
    """Tests for the one-shot sender/recipient helpers."""

    def test_encrypt_then_decrypt(self, key_pair: RSAKeyPair) -> None:
        envelope = encrypt_envelope(
            b"sent separately", key_pair.public_key, rng=RandomSource(seed=12)
        )
        plaintext = decrypt_envelope(envelope, key_pair.private_key)

        assert plaintext == b"sent separately"
        assert len(envelope.iv) == 16

    def test_records_recipient_events(self, key_pair: RSAKeyPair) -> None:
        envelope = encrypt_envelope(b"x", key_pair.public_key, rng=RandomSource(seed=13))
        recorder = TraceRecorder()
        decrypt_envelope(envelope, key_pair.private_key, recorder=recorder)

        assert recorder.events() == ["key_decrypted", "message_decrypted"]
