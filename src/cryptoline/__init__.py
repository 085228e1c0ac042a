"""
cryptoline: байтово-точные криптографические значения и возможности.

EN: Fixed-length byte encodings (FixedLine, Concat) plus algorithm-independent
AEAD and elliptic-curve capabilities, with AES-256-GCM, ChaCha20-Poly1305 and
secp256k1 backends.

Example:
    >>> from cryptoline import AesGcmKey, Secp256k1Scalar, Secp256k1Point
    >>> key = AesGcmKey.try_from_bytes(b"\\x01" * 32)
    >>> out = bytearray(5)
    >>> tag = key.encrypt(1, b"", b"hello", out)
    >>> sk = Secp256k1Scalar.random()
    >>> Secp256k1Point.from_scalar(sk).compress().LENGTH
    33
"""

from cryptoline.algorithms import (
    AesGcmKey,
    AesGcmTag,
    ChaCha20Poly1305Key,
    ChaCha20Poly1305Tag,
    Secp256k1Coordinate,
    Secp256k1PackedPoint,
    Secp256k1Point,
    Secp256k1Scalar,
    Secp256k1Signature,
)
from cryptoline.core import *  # noqa: F401,F403
from cryptoline.core import __all__ as _core_all

__all__ = [
    *_core_all,
    "AesGcmKey",
    "AesGcmTag",
    "ChaCha20Poly1305Key",
    "ChaCha20Poly1305Tag",
    "Secp256k1Scalar",
    "Secp256k1Coordinate",
    "Secp256k1PackedPoint",
    "Secp256k1Point",
    "Secp256k1Signature",
]

__version__ = "1.0.0"
