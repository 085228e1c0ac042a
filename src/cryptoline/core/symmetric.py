"""
Симметричная AEAD возможность: Key и Tag с отделённым тегом.

Key шифрует буфер под 64-битным nonce и associated data и возвращает
отдельный Tag фиксированной длины; расшифровка потребляет этот Tag.

Контракт:
    - ``encrypt(nonce, associated_data, input, output) -> Tag``:
      ``len(output) == len(input)``; ciphertext пишется в ``output``,
      ``input`` не меняется. Никогда не возвращает ошибку как штатный исход.
    - ``decrypt(nonce, associated_data, input, output, tag)``: пишет
      plaintext в ``output`` ТОЛЬКО если тег прошёл проверку, иначе
      поднимает DecryptionFailedError, и ``output`` нельзя читать.
    - Уникальность nonce для ключа обеспечивает вызывающий код;
      история nonce не отслеживается.

Example:
    >>> key = AesGcmKey.try_from_bytes(b"\\x01" * 32)
    >>> data = bytearray(b"hello")
    >>> tag = key.encrypt_in_place(1, b"", data)
    >>> key.decrypt_in_place(1, b"", data, tag)
    >>> bytes(data)
    b'hello'
"""

from __future__ import annotations

import os
from abc import abstractmethod
from typing import Any, ClassVar, Type, TypeVar

from cryptoline.core.config import COUNTER_LIMIT, NonceLayout
from cryptoline.core.exceptions import ContractViolationError, InvalidNonceError
from cryptoline.core.line import ByteLine, BytesLike

__all__ = [
    "Key",
    "Tag",
]

K = TypeVar("K", bound="Key")


def _writable(buffer: Any, name: str) -> memoryview:
    try:
        view = memoryview(buffer)
    except TypeError as exc:
        raise TypeError(
            f"{name} must be a writable buffer, got {type(buffer).__name__}"
        ) from exc
    if view.readonly:
        raise TypeError(f"{name} must be a writable buffer, got read-only memory")
    return view.cast("B")


def _readable(buffer: Any, name: str) -> bytes:
    if not isinstance(buffer, (bytes, bytearray, memoryview)):
        raise TypeError(f"{name} must be bytes-like, got {type(buffer).__name__}")
    return bytes(buffer)


class Tag(ByteLine):
    """Отделённый authentication tag. Любые LENGTH байт — корректный тег."""

    __slots__ = ()


class Key(ByteLine):
    """
    Базовый класс AEAD ключа.

    Subclasses define:
        NAME: Static algorithm name recorded by higher protocol layers
        TAG: Tag subclass produced and consumed by this key
        NONCE: NonceLayout that embeds the 64-bit counter

    and implement ``_seal`` / ``_open`` over immutable bytes. The base class
    owns argument validation, buffer handling and the in-place variants.
    """

    __slots__ = ()

    SECRET = True

    NAME: ClassVar[str]
    TAG: ClassVar[Type[Tag]]
    NONCE: ClassVar[NonceLayout]

    @classmethod
    def generate(cls: Type[K]) -> K:
        """
        Генерировать криптографически стойкий ключ.

        Returns:
            Новый ключ из os.urandom(LENGTH)
        """
        return cls._wrap(os.urandom(cls.LENGTH))

    # ------------------------------------------------------------------
    # Backend hooks
    # ------------------------------------------------------------------

    @abstractmethod
    def _seal(self, nonce: bytes, associated_data: bytes, plaintext: bytes) -> tuple[bytes, bytes]:
        """Return ``(ciphertext, tag_bytes)`` for a full-size nonce."""
        ...

    @abstractmethod
    def _open(
        self, nonce: bytes, associated_data: bytes, ciphertext: bytes, tag: bytes
    ) -> bytes:
        """Return plaintext or raise DecryptionFailedError."""
        ...

    # ------------------------------------------------------------------
    # Validation helpers
    # ------------------------------------------------------------------

    def _nonce(self, nonce: int) -> bytes:
        if isinstance(nonce, bool) or not isinstance(nonce, int):
            raise TypeError(f"Nonce must be int, got {type(nonce).__name__}")
        if not 0 <= nonce < COUNTER_LIMIT:
            raise InvalidNonceError(
                "Nonce must fit in an unsigned 64-bit integer", algorithm=self.NAME
            )
        return self.NONCE.embed(nonce)

    def _tag(self, tag: Tag) -> bytes:
        if not isinstance(tag, self.TAG):
            raise TypeError(
                f"{self.NAME} key requires {self.TAG.__name__}, "
                f"got {type(tag).__name__}"
            )
        return tag.to_bytes()

    @staticmethod
    def _check_lengths(source: bytes, target: memoryview) -> None:
        if target.nbytes != len(source):
            raise ContractViolationError(
                f"output length {target.nbytes} does not match input length {len(source)}"
            )

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def encrypt(
        self,
        nonce: int,
        associated_data: BytesLike,
        input: BytesLike,
        output: Any,
    ) -> Tag:
        """
        Зашифровать ``input`` в ``output`` и вернуть отделённый тег.

        Args:
            nonce: 64-битный счётчик, уникальный для ключа
            associated_data: Аутентифицируемые, но не шифруемые данные
            input: Открытый текст
            output: Записываемый буфер той же длины, что и input

        Raises:
            TypeError: Неверный тип аргумента
            InvalidNonceError: nonce вне [0, 2**64)
            ContractViolationError: len(output) != len(input)
            EncryptionFailedError: Бэкенд отказал (фатально)
        """
        full_nonce = self._nonce(nonce)
        ad = _readable(associated_data, "associated_data")
        plaintext = _readable(input, "input")
        target = _writable(output, "output")
        self._check_lengths(plaintext, target)

        ciphertext, tag = self._seal(full_nonce, ad, plaintext)
        target[:] = ciphertext
        return self.TAG.from_bytes(tag)

    def decrypt(
        self,
        nonce: int,
        associated_data: BytesLike,
        input: BytesLike,
        output: Any,
        tag: Tag,
    ) -> None:
        """
        Проверить тег и расшифровать ``input`` в ``output``.

        Raises:
            TypeError: Неверный тип аргумента или тег чужого алгоритма
            InvalidNonceError: nonce вне [0, 2**64)
            ContractViolationError: len(output) != len(input)
            DecryptionFailedError: Тег не прошёл проверку; output не записан
        """
        full_nonce = self._nonce(nonce)
        tag_bytes = self._tag(tag)
        ad = _readable(associated_data, "associated_data")
        ciphertext = _readable(input, "input")
        target = _writable(output, "output")
        self._check_lengths(ciphertext, target)

        plaintext = self._open(full_nonce, ad, ciphertext, tag_bytes)
        target[:] = plaintext

    def encrypt_in_place(self, nonce: int, associated_data: BytesLike, buffer: Any) -> Tag:
        """Зашифровать ``buffer`` на месте и вернуть тег."""
        return self.encrypt(nonce, associated_data, bytes(_writable(buffer, "buffer")), buffer)

    def decrypt_in_place(
        self, nonce: int, associated_data: BytesLike, buffer: Any, tag: Tag
    ) -> None:
        """Расшифровать ``buffer`` на месте. При ошибке тега buffer не меняется."""
        self.decrypt(nonce, associated_data, bytes(_writable(buffer, "buffer")), buffer, tag)
