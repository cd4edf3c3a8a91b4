"""Exception taxonomy for the hybrid encryption engines.

Every error carries the engine that raised it ("aes", "rsa", "workflow",
"keyfile") and the stage that failed ("padding", "compute", "keygen",
"input", "state"), so a caller can report which part of an operation
went wrong without parsing messages.
"""

from __future__ import annotations


class HybridCryptError(Exception):
    """Base class for all hybridcrypt failures."""

    engine: str = "core"
    stage: str = "compute"

    def __init__(
        self,
        message: str,
        engine: str | None = None,
        stage: str | None = None,
    ) -> None:
        super().__init__(message)
        if engine is not None:
            self.engine = engine
        if stage is not None:
            self.stage = stage

    def __str__(self) -> str:
        return f"[{self.engine}/{self.stage}] {super().__str__()}"


class PaddingError(HybridCryptError, ValueError):
    """Malformed PKCS7 padding found while decrypting."""

    engine = "aes"
    stage = "padding"


class InvalidPaddingError(PaddingError):
    """Malformed PKCS#1 v1.5 encryption block found while decrypting."""

    engine = "rsa"


class InvalidInputLengthError(HybridCryptError, ValueError):
    """Input of the wrong size: key, IV, block, ciphertext or RSA payload."""

    stage = "input"


class NoInverseError(HybridCryptError, ArithmeticError):
    """No modular inverse exists (gcd(a, m) != 1)."""

    engine = "rsa"
    stage = "keygen"


class KeyGenerationExhaustedError(HybridCryptError, RuntimeError):
    """The prime/exponent retry loop exceeded its attempt budget."""

    engine = "rsa"
    stage = "keygen"


class WorkflowStateError(HybridCryptError, RuntimeError):
    """A workflow step was called out of order."""

    engine = "workflow"
    stage = "state"


class IntegrityError(HybridCryptError):
    """Recovered plaintext does not match the original."""

    engine = "workflow"
    stage = "compute"


class KeyFileError(HybridCryptError, ValueError):
    """Key or ciphertext file could not be parsed."""

    engine = "keyfile"
    stage = "input"
