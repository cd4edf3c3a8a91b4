"""Hybrid AES-128-CBC + textbook RSA encryption engine (educational)."""

__version__ = "0.1.0"

from .api import (
    aes_decrypt,
    aes_encrypt,
    generate_symmetric_key,
    rsa_decrypt,
    rsa_encrypt,
    rsa_generate_key_pair,
)
from .config import HybridConfig
from .errors import (
    HybridCryptError,
    IntegrityError,
    InvalidInputLengthError,
    InvalidPaddingError,
    KeyFileError,
    KeyGenerationExhaustedError,
    NoInverseError,
    PaddingError,
    WorkflowStateError,
)
from .randomness import RandomSource
from .trace import TraceRecorder
from .workflow import HybridEnvelope, HybridResult, HybridWorkflow, State

__all__ = [
    "HybridConfig",
    "RandomSource",
    "TraceRecorder",
    "HybridWorkflow",
    "HybridEnvelope",
    "HybridResult",
    "State",
    "generate_symmetric_key",
    "aes_encrypt",
    "aes_decrypt",
    "rsa_generate_key_pair",
    "rsa_encrypt",
    "rsa_decrypt",
    "HybridCryptError",
    "PaddingError",
    "InvalidPaddingError",
    "InvalidInputLengthError",
    "NoInverseError",
    "KeyGenerationExhaustedError",
    "WorkflowStateError",
    "IntegrityError",
    "KeyFileError",
]
