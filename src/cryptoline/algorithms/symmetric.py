"""
AEAD backends: AES-256-GCM and ChaCha20-Poly1305 with detached tags.

Both ciphers come from the ``cryptography`` library, which returns
``ciphertext || tag``; this module splits the 16-byte tag off on encryption
and re-attaches it on decryption. Tag comparison happens inside the library
in constant time.

**Algorithms:**
- AES-256-GCM (``NAME = "AESGCM"``): 32-byte key, 16-byte tag,
  96-bit nonce with the 64-bit counter written big-endian in the low-order bytes.
- ChaCha20-Poly1305 (``NAME = "ChaChaPoly"``): 32-byte key, 16-byte tag,
  96-bit nonce with the 64-bit counter written little-endian after 4 zero bytes.

Security Guidelines:
    ⚠️  CRITICAL: the counter MUST be unique for each encryption with the same key!
    Nonce reuse = catastrophic failure (plaintext + authentication key recovery).

Example:
    >>> key = ChaCha20Poly1305Key.generate()
    >>> output = bytearray(5)
    >>> tag = key.encrypt(7, b"header", b"hello", output)
    >>> plain = bytearray(5)
    >>> key.decrypt(7, b"header", bytes(output), plain, tag)
    >>> bytes(plain)
    b'hello'

Compliance:
    - NIST SP 800-38D (GCM mode)
    - RFC 8439 (ChaCha20-Poly1305)
"""

from __future__ import annotations

import logging
from typing import Callable, ClassVar, Tuple, Union

from cryptography.exceptions import InvalidTag
from cryptography.hazmat.primitives.ciphers.aead import (
    AESGCM,
    ChaCha20Poly1305 as ChaCha20Poly1305Impl,
)

from cryptoline.core.config import NonceLayout, NonceProfile
from cryptoline.core.exceptions import DecryptionFailedError, EncryptionFailedError
from cryptoline.core.symmetric import Key, Tag

logger = logging.getLogger(__name__)

__all__ = [
    "AesGcmKey",
    "AesGcmTag",
    "ChaCha20Poly1305Key",
    "ChaCha20Poly1305Tag",
]

KEY_SIZE = 32
TAG_SIZE = 16

_Backend = Union[AESGCM, ChaCha20Poly1305Impl]


class _LibraryAeadKey(Key):
    """
    Общая логика ключей поверх ``cryptography.hazmat.primitives.ciphers.aead``.

    Подкласс задаёт ``_BACKEND`` — фабрику AEAD объекта из сырого ключа.
    """

    __slots__ = ()

    LENGTH = KEY_SIZE

    _BACKEND: ClassVar[Callable[[bytes], _Backend]]

    def _seal(
        self, nonce: bytes, associated_data: bytes, plaintext: bytes
    ) -> Tuple[bytes, bytes]:
        try:
            sealed = type(self)._BACKEND(self._data).encrypt(
                nonce, plaintext, associated_data
            )
        except Exception as e:
            raise EncryptionFailedError(
                f"{self.NAME} encryption failed", algorithm=self.NAME
            ) from e

        logger.debug(f"{self.NAME}: Encrypted {len(plaintext)} bytes")
        return sealed[:-TAG_SIZE], sealed[-TAG_SIZE:]

    def _open(
        self, nonce: bytes, associated_data: bytes, ciphertext: bytes, tag: bytes
    ) -> bytes:
        try:
            plaintext = type(self)._BACKEND(self._data).decrypt(
                nonce, ciphertext + tag, associated_data
            )
        except InvalidTag as e:
            logger.debug(f"{self.NAME}: Authentication failed")
            raise DecryptionFailedError(
                "Decryption failed (authentication tag mismatch)", algorithm=self.NAME
            ) from e

        logger.debug(f"{self.NAME}: Decrypted {len(plaintext)} bytes")
        return plaintext


# ==============================================================================
# AES-256-GCM
# ==============================================================================


class AesGcmTag(Tag):
    """AES-256-GCM authentication tag (128 bits)."""

    __slots__ = ()

    LENGTH = TAG_SIZE


class AesGcmKey(_LibraryAeadKey):
    """
    AES-256-GCM key - industry standard AEAD cipher.

    Security Properties:
        - Key: 256 bits (32 bytes)
        - Nonce: 96 bits, built from the 64-bit counter (big-endian)
        - Tag: 128 bits (16 bytes), detached
        - Max data per key: 2^39 - 256 bits (~68 GB)

    Example:
        >>> key = AesGcmKey.try_from_bytes(bytes([1]) * 32)
        >>> out = bytearray(5)
        >>> tag = key.encrypt(1, b"", b"hello", out)
        >>> len(tag.to_bytes())
        16
    """

    __slots__ = ()

    NAME = "AESGCM"
    TAG = AesGcmTag
    NONCE = NonceLayout.from_profile(NonceProfile.AES_GCM)
    _BACKEND = AESGCM


# ==============================================================================
# ChaCha20-Poly1305
# ==============================================================================


class ChaCha20Poly1305Tag(Tag):
    """Poly1305 authentication tag (128 bits)."""

    __slots__ = ()

    LENGTH = TAG_SIZE


class ChaCha20Poly1305Key(_LibraryAeadKey):
    """
    ChaCha20-Poly1305 key - software-optimized AEAD (RFC 8439).

    Constant-time on platforms without AES-NI.

    Security Properties:
        - Key: 256 bits (32 bytes)
        - Nonce: 96 bits, 4 zero bytes then the 64-bit counter (little-endian)
        - Tag: 128 bits (16 bytes), detached
    """

    __slots__ = ()

    NAME = "ChaChaPoly"
    TAG = ChaCha20Poly1305Tag
    NONCE = NonceLayout.from_profile(NonceProfile.CHACHA20_POLY1305)
    _BACKEND = ChaCha20Poly1305Impl
