"""Hybrid encrypt-then-decrypt workflow.

The message is encrypted with AES-128-CBC under a fresh key and IV; the
key is encrypted with RSA. Decryption recovers the key first, then the
message. Each state transition is one engine call:

    IDLE -> SYMMETRIC_KEY_GENERATED -> MESSAGE_ENCRYPTED -> KEY_ENCRYPTED
         -> KEY_DECRYPTED -> MESSAGE_DECRYPTED -> DONE
"""

from __future__ import annotations

import enum
from dataclasses import dataclass, field

from .aes import IV_SIZE, KEY_SIZE, AESCBCEngine
from .config import HybridConfig
from .errors import IntegrityError, WorkflowStateError
from .randomness import RandomSource
from .rsa import PrivateKey, PublicKey, RSAEngine, RSAKeyGenerator, RSAKeyPair, RSAPadding
from .trace import TraceRecorder
from .utils import fingerprint


class State(enum.Enum):
    IDLE = "idle"
    SYMMETRIC_KEY_GENERATED = "symmetric_key_generated"
    MESSAGE_ENCRYPTED = "message_encrypted"
    KEY_ENCRYPTED = "key_encrypted"
    KEY_DECRYPTED = "key_decrypted"
    MESSAGE_DECRYPTED = "message_decrypted"
    DONE = "done"


@dataclass
class HybridEnvelope:
    """What travels to the recipient: IV, AES ciphertext, RSA-encrypted key blocks."""

    iv: bytes
    ciphertext: bytes
    encrypted_key: list[int]


@dataclass
class HybridResult:
    envelope: HybridEnvelope
    plaintext: bytes
    states: list[State] = field(default_factory=list)

    @property
    def correct(self) -> bool:
        return bool(self.states) and self.states[-1] is State.DONE


def build_rsa_engine(config: HybridConfig, rng: RandomSource) -> RSAEngine:
    return RSAEngine(RSAPadding(min_fill=config.rsa_min_fill, rng=rng))


def generate_key_pair(
    config: HybridConfig,
    rng: RandomSource | None = None,
    recorder: TraceRecorder | None = None,
) -> RSAKeyPair:
    """Generate an RSA key pair sized and padded per ``config``."""
    rng = rng or RandomSource.for_stream(config.seed, "keygen")
    generator = RSAKeyGenerator(
        public_exponent=config.public_exponent,
        rounds=config.primality_rounds,
        rng=rng,
        padding=RSAPadding(min_fill=config.rsa_min_fill, rng=rng),
        max_attempts=config.max_keygen_attempts,
    )
    key_pair = generator.generate(config.rsa_bits)
    if recorder is not None:
        recorder.record(
            "rsa_keygen",
            bits=key_pair.bits,
            e=key_pair.e,
            attempts=generator.attempts,
            public_fp=fingerprint(key_pair.n),
            private_fp=fingerprint(key_pair.d),
        )
    return key_pair


def encrypt_envelope(
    plaintext: bytes,
    public_key: PublicKey,
    config: HybridConfig | None = None,
    rng: RandomSource | None = None,
    recorder: TraceRecorder | None = None,
) -> HybridEnvelope:
    """One-shot sender side: fresh key and IV, AES the message, RSA the key."""
    workflow = HybridWorkflow(public_key=public_key, config=config, rng=rng, recorder=recorder)
    workflow.generate_symmetric_key()
    workflow.encrypt_message(plaintext)
    return workflow.encrypt_key()


def decrypt_envelope(
    envelope: HybridEnvelope,
    private_key: PrivateKey,
    config: HybridConfig | None = None,
    recorder: TraceRecorder | None = None,
) -> bytes:
    """One-shot recipient side: RSA the key back, then AES the message."""
    config = config or HybridConfig()
    recorder = recorder or TraceRecorder()
    rsa = RSAEngine(RSAPadding(min_fill=config.rsa_min_fill))

    key = rsa.decrypt_chunked(envelope.encrypted_key, private_key)
    recorder.record("key_decrypted", key_fp=fingerprint(key))

    plaintext = AESCBCEngine(key).decrypt(envelope.ciphertext, envelope.iv)
    recorder.record("message_decrypted", length=len(plaintext))
    return plaintext


class HybridWorkflow:
    """State machine driving one encrypt-then-decrypt cycle.

    Steps must be called in order; calling one from the wrong state
    raises WorkflowStateError. A workflow instance owns its symmetric
    key and is not reused across messages.
    """

    def __init__(
        self,
        key_pair: RSAKeyPair | None = None,
        config: HybridConfig | None = None,
        rng: RandomSource | None = None,
        recorder: TraceRecorder | None = None,
        public_key: PublicKey | None = None,
    ):
        self.config = config or HybridConfig()
        self.rng = rng or RandomSource.for_stream(self.config.seed, "workflow")
        self.recorder = recorder or TraceRecorder()
        self.key_pair = key_pair
        self.public_key = public_key or (key_pair.public_key if key_pair else None)
        self.rsa = build_rsa_engine(self.config, self.rng)

        self.state = State.IDLE
        self.states: list[State] = [State.IDLE]

        self._plaintext: bytes | None = None
        self._key: bytes | None = None
        self._iv: bytes | None = None
        self._ciphertext: bytes | None = None
        self._encrypted_key: list[int] | None = None
        self._recovered_key: bytes | None = None
        self._recovered: bytes | None = None

    def _advance(self, expected: State, new: State) -> None:
        if self.state is not expected:
            raise WorkflowStateError(
                f"Cannot enter {new.name} from {self.state.name}; expected {expected.name}"
            )
        self.state = new
        self.states.append(new)

    # ---- encryption phase ----

    def generate_symmetric_key(self) -> bytes:
        self._advance(State.IDLE, State.SYMMETRIC_KEY_GENERATED)
        self._key = self.rng.get_bytes(KEY_SIZE, "symmetric_key")
        self.recorder.record("symmetric_key_generated", key_fp=fingerprint(self._key))
        return self._key

    def encrypt_message(self, plaintext: bytes) -> bytes:
        self._advance(State.SYMMETRIC_KEY_GENERATED, State.MESSAGE_ENCRYPTED)
        self._plaintext = bytes(plaintext)
        self._iv = self.rng.get_bytes(IV_SIZE, "iv")
        self._ciphertext = AESCBCEngine(self._key).encrypt(self._plaintext, self._iv)
        self.recorder.record(
            "message_encrypted",
            length=len(self._plaintext),
            ciphertext_length=len(self._ciphertext),
            iv=self._iv,
        )
        return self._ciphertext

    def encrypt_key(self) -> HybridEnvelope:
        if self.public_key is None:
            raise WorkflowStateError("No public key to encrypt the symmetric key with")
        self._advance(State.MESSAGE_ENCRYPTED, State.KEY_ENCRYPTED)
        self._encrypted_key = self.rsa.encrypt_chunked(self._key, self.public_key)
        self.recorder.record("key_encrypted", blocks=len(self._encrypted_key))
        return self.envelope

    @property
    def envelope(self) -> HybridEnvelope:
        if self._encrypted_key is None:
            raise WorkflowStateError("Envelope is not sealed yet")
        return HybridEnvelope(self._iv, self._ciphertext, list(self._encrypted_key))

    # ---- decryption phase ----

    def decrypt_key(self) -> bytes:
        if self.key_pair is None:
            raise WorkflowStateError("No private key to recover the symmetric key with")
        self._advance(State.KEY_ENCRYPTED, State.KEY_DECRYPTED)
        self._recovered_key = self.rsa.decrypt_chunked(
            self._encrypted_key, self.key_pair.private_key
        )
        self.recorder.record("key_decrypted", key_fp=fingerprint(self._recovered_key))
        return self._recovered_key

    def decrypt_message(self) -> bytes:
        self._advance(State.KEY_DECRYPTED, State.MESSAGE_DECRYPTED)
        self._recovered = AESCBCEngine(self._recovered_key).decrypt(self._ciphertext, self._iv)
        self.recorder.record("message_decrypted", length=len(self._recovered))
        return self._recovered

    def finish(self) -> bytes:
        """Self-check: the recovered message must equal the original."""
        if self.state is State.MESSAGE_DECRYPTED and self._recovered != self._plaintext:
            self.recorder.record("integrity_failed")
            raise IntegrityError("Recovered plaintext does not match the original")
        self._advance(State.MESSAGE_DECRYPTED, State.DONE)
        self.recorder.record("done", match=True)
        return self._recovered

    def run(self, plaintext: bytes) -> HybridResult:
        """Drive every transition from IDLE to DONE."""
        self.generate_symmetric_key()
        self.encrypt_message(plaintext)
        self.encrypt_key()
        self.decrypt_key()
        self.decrypt_message()
        recovered = self.finish()
        return HybridResult(self.envelope, recovered, list(self.states))
