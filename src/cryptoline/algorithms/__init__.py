"""
Конкретные бэкенды возможностей ядра.

- symmetric: AES-256-GCM и ChaCha20-Poly1305 (cryptography)
- secp256k1: скаляры, точки и ECDSA подписи (coincurve + cryptography)
"""

from cryptoline.algorithms.secp256k1 import (
    Secp256k1Coordinate,
    Secp256k1PackedPoint,
    Secp256k1Point,
    Secp256k1Scalar,
    Secp256k1Signature,
)
from cryptoline.algorithms.symmetric import (
    AesGcmKey,
    AesGcmTag,
    ChaCha20Poly1305Key,
    ChaCha20Poly1305Tag,
)

__all__ = [
    # AEAD
    "AesGcmKey",
    "AesGcmTag",
    "ChaCha20Poly1305Key",
    "ChaCha20Poly1305Tag",
    # secp256k1
    "Secp256k1Scalar",
    "Secp256k1Coordinate",
    "Secp256k1PackedPoint",
    "Secp256k1Point",
    "Secp256k1Signature",
]
