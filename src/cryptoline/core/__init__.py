"""
Ядро cryptoline: контракт FixedLine, комбинатор Concat и абстрактные
AEAD / эллиптические возможности, не зависящие от конкретного алгоритма.
"""

from cryptoline.core.concat import Concat
from cryptoline.core.config import ByteOrder, NonceLayout, NonceProfile
from cryptoline.core.elliptic import Curve, Scalar, Signature, SignFlag
from cryptoline.core.exceptions import (
    ContractViolationError,
    CryptoError,
    DecodeError,
    DecryptionFailedError,
    EncryptionError,
    EncryptionFailedError,
    InvalidNonceError,
    OperationNotSupportedError,
    SignatureError,
    SigningFailedError,
    VerificationFailedError,
)
from cryptoline.core.line import ByteLine, FixedLine
from cryptoline.core.symmetric import Key, Tag

__all__ = [
    # Byte layout
    "FixedLine",
    "ByteLine",
    "Concat",
    # Capabilities
    "Key",
    "Tag",
    "Scalar",
    "Curve",
    "Signature",
    "SignFlag",
    # Configuration
    "ByteOrder",
    "NonceLayout",
    "NonceProfile",
    # Errors
    "CryptoError",
    "DecodeError",
    "EncryptionError",
    "EncryptionFailedError",
    "DecryptionFailedError",
    "InvalidNonceError",
    "SignatureError",
    "SigningFailedError",
    "VerificationFailedError",
    "OperationNotSupportedError",
    "ContractViolationError",
]
