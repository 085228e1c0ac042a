# -*- coding: utf-8 -*-
"""
RU: Раскладка 64-битного счётчика в полный nonce AEAD алгоритма.
EN: Layout of the 64-bit counter inside an AEAD algorithm's full nonce.
"""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Final

COUNTER_SIZE: Final[int] = 8
COUNTER_LIMIT: Final[int] = 1 << 64


class ByteOrder(str, Enum):
    """Byte order used to write the counter into the nonce."""

    BIG = "big"
    LITTLE = "little"


class NonceProfile(str, Enum):
    """Predefined nonce layouts, one per supported AEAD family."""

    # AES-GCM: 96-bit nonce, counter in the low-order bytes, big-endian
    AES_GCM = "aes-gcm"

    # ChaCha20-Poly1305 (RFC 8439): 96-bit nonce, little-endian counter
    CHACHA20_POLY1305 = "chacha20-poly1305"


@dataclass(frozen=True)
class NonceLayout:
    """
    Nonce layout parameters.

    Attributes:
        size: Full nonce length in bytes.
        counter_offset: Index of the first counter byte; bytes before it stay zero.
        byteorder: Order in which the 8 counter bytes are written.

    Examples:
        >>> layout = NonceLayout.from_profile(NonceProfile.AES_GCM)
        >>> layout.embed(1).hex()
        '000000000000000000000001'

        >>> NonceLayout.from_profile(NonceProfile.CHACHA20_POLY1305).embed(1).hex()
        '000000000100000000000000'
    """

    size: int
    counter_offset: int
    byteorder: ByteOrder

    def __post_init__(self) -> None:
        """Validate parameters."""
        if self.counter_offset < 0:
            raise ValueError("counter_offset must be >= 0")
        if self.size < self.counter_offset + COUNTER_SIZE:
            raise ValueError("size must leave room for the 8-byte counter")
        if not isinstance(self.byteorder, ByteOrder):
            raise ValueError("byteorder must be a ByteOrder")

    def embed(self, counter: int) -> bytes:
        """
        Build the full nonce for a 64-bit counter.

        The caller validates the counter range; this method assumes
        ``0 <= counter < 2**64``.
        """
        return bytes(self.counter_offset) + counter.to_bytes(
            COUNTER_SIZE, self.byteorder.value
        ) + bytes(self.size - self.counter_offset - COUNTER_SIZE)

    @staticmethod
    def from_profile(profile: NonceProfile) -> "NonceLayout":
        """Create layout from predefined profile."""
        return _PROFILE_LAYOUTS[profile]


# Predefined profiles
_PROFILE_LAYOUTS: Final[dict[NonceProfile, NonceLayout]] = {
    NonceProfile.AES_GCM: NonceLayout(
        size=12,
        counter_offset=4,
        byteorder=ByteOrder.BIG,
    ),
    NonceProfile.CHACHA20_POLY1305: NonceLayout(
        size=12,
        counter_offset=4,
        byteorder=ByteOrder.LITTLE,
    ),
}


__all__ = [
    "COUNTER_LIMIT",
    "COUNTER_SIZE",
    "ByteOrder",
    "NonceLayout",
    "NonceProfile",
]
