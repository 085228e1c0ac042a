"""
Централизованные исключения пакета cryptoline.

Иерархия типизированных исключений для контракта FixedLine, AEAD ключей
и эллиптических примитивов. Разделяет два класса ошибок:

- Восстановимые (ожидаемые при повреждённом или враждебном вводе):
  DecodeError, DecryptionFailedError, VerificationFailedError.
- Фатальные (ошибка программиста или отказ бэкенда на корректном вводе):
  ContractViolationError, EncryptionFailedError, SigningFailedError.

Example:
    >>> from cryptoline.core.exceptions import CryptoError
    >>> try:
    ...     key.decrypt(1, b"", ciphertext, output, tag)
    ... except CryptoError as e:
    ...     logger.error(f"Crypto failed: {e}")
    ...     print(f"Algorithm: {e.algorithm}")

Иерархия:
    CryptoError (базовое)
    ├── DecodeError
    ├── EncryptionError
    │   ├── EncryptionFailedError
    │   ├── DecryptionFailedError
    │   └── InvalidNonceError
    ├── SignatureError
    │   ├── SigningFailedError
    │   └── VerificationFailedError
    ├── OperationNotSupportedError
    └── ContractViolationError

Security Note:
    Все исключения НЕ раскрывают:
    - Ключи или их части
    - Plaintext или ciphertext
    - Nonce значения и authentication tags
"""

from __future__ import annotations

from typing import Any, Dict, Optional

__all__: list[str] = [
    # Base exception
    "CryptoError",
    # Decoding
    "DecodeError",
    # Encryption errors
    "EncryptionError",
    "EncryptionFailedError",
    "DecryptionFailedError",
    "InvalidNonceError",
    # Signature errors
    "SignatureError",
    "SigningFailedError",
    "VerificationFailedError",
    # Capability / contract errors
    "OperationNotSupportedError",
    "ContractViolationError",
]


# ==============================================================================
# BASE EXCEPTION
# ==============================================================================


class CryptoError(Exception):
    """
    Базовое исключение для всех криптографических ошибок.

    Attributes:
        message: Человекочитаемое сообщение об ошибке
        algorithm: Имя алгоритма, вызвавшего ошибку (опционально)
        context: Дополнительный контекст для отладки (опционально)

    Security Note:
        Сообщения ошибок НЕ должны содержать ключи, plaintext,
        ciphertext, nonce или tag.
    """

    def __init__(
        self,
        message: str,
        *,
        algorithm: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ) -> None:
        """
        Инициализация базового исключения.

        Args:
            message: Человекочитаемое описание ошибки
            algorithm: Имя алгоритма (например, "AESGCM")
            context: Дополнительный контекст (без секретов!)
        """
        super().__init__(message)
        self.message = message
        self.algorithm = algorithm
        self.context = context or {}

    def __str__(self) -> str:
        """
        Строковое представление исключения.

        Example:
            >>> str(DecodeError("bad scalar", algorithm="secp256k1"))
            'DecodeError: bad scalar [algorithm=secp256k1]'
        """
        parts = [self.__class__.__name__, ": ", self.message]

        if self.algorithm:
            parts.append(f" [algorithm={self.algorithm}]")

        if self.context:
            ctx_str = ", ".join(f"{k}={v}" for k, v in self.context.items())
            parts.append(f" ({ctx_str})")

        return "".join(parts)

    def __repr__(self) -> str:
        """Представление для отладки."""
        return (
            f"{self.__class__.__name__}("
            f"message={self.message!r}, "
            f"algorithm={self.algorithm!r}, "
            f"context={self.context!r})"
        )


# ==============================================================================
# DECODING
# ==============================================================================


class DecodeError(CryptoError):
    """
    Буфер не является корректным представлением значения.

    Raises когда:
    - Длина буфера не совпадает с LENGTH типа
    - Скаляр вне поля (ноль или >= порядка)
    - Координата не принадлежит кривой
    - Неизвестный байт знака упакованной точки

    Attributes:
        type_name: Имя типа, который не удалось декодировать
        expected_size: Ожидаемая длина (если ошибка в длине)
        actual_size: Фактическая длина (если ошибка в длине)

    Example:
        >>> Secp256k1Scalar.try_from_bytes(bytes(32))
        DecodeError: Secp256k1Scalar: value is not a valid field element
    """

    def __init__(
        self,
        message: str,
        *,
        type_name: Optional[str] = None,
        algorithm: Optional[str] = None,
        expected_size: Optional[int] = None,
        actual_size: Optional[int] = None,
    ) -> None:
        context: Dict[str, Any] = {}
        if expected_size is not None:
            context["expected_size"] = expected_size
        if actual_size is not None:
            context["actual_size"] = actual_size

        if type_name:
            message = f"{type_name}: {message}"

        super().__init__(message, algorithm=algorithm, context=context)
        self.type_name = type_name
        self.expected_size = expected_size
        self.actual_size = actual_size


# ==============================================================================
# ENCRYPTION ERRORS
# ==============================================================================


class EncryptionError(CryptoError):
    """Базовая ошибка операций AEAD."""

    pass


class EncryptionFailedError(EncryptionError):
    """
    Бэкенд отказался шифровать корректный ввод.

    Фатальная ошибка: корректная тройка (ключ, nonce, буфер) не может
    законно не зашифроваться. Не перехватывайте её как штатный исход.
    """

    pass


class DecryptionFailedError(EncryptionError):
    """
    Authentication tag не прошёл проверку.

    Raises когда изменены ciphertext, tag, ключ, nonce или associated data.

    Security Note:
        Причина неудачи НЕ раскрывается, сообщение одинаково для всех
        случаев. Выходной буфер после этой ошибки НЕ содержит доверенного
        plaintext.
    """

    pass


class InvalidNonceError(EncryptionError):
    """
    Nonce вне диапазона 64-битного счётчика.

    Attributes:
        bits: Разрядность допустимого nonce
    """

    def __init__(
        self,
        message: str,
        *,
        algorithm: Optional[str] = None,
        bits: int = 64,
    ) -> None:
        super().__init__(message, algorithm=algorithm, context={"bits": bits})
        self.bits = bits


# ==============================================================================
# SIGNATURE ERRORS
# ==============================================================================


class SignatureError(CryptoError):
    """Базовая ошибка операций с подписями."""

    pass


class SigningFailedError(SignatureError):
    """
    Бэкенд не смог создать подпись для корректных скаляров.

    Фатальная ошибка, аналогичная EncryptionFailedError.
    """

    pass


class VerificationFailedError(SignatureError):
    """
    Неудачная проверка подписи.

    Security Note:
        Сообщение НЕ раскрывает причину сбоя (другой ключ,
        другое сообщение или повреждённая подпись).
    """

    pass


# ==============================================================================
# CAPABILITY / CONTRACT ERRORS
# ==============================================================================


class OperationNotSupportedError(CryptoError, NotImplementedError):
    """
    Операция сознательно не предоставляется данным алгоритмом.

    Используется для пробелов в возможностях (например, инверсия скаляра
    для алгоритма, которому она не нужна) вместо молча неверной математики.

    Attributes:
        operation: Имя неподдерживаемой операции
    """

    def __init__(self, operation: str, *, algorithm: Optional[str] = None) -> None:
        super().__init__(
            f"Operation '{operation}' is not supported",
            algorithm=algorithm,
            context={"operation": operation},
        )
        self.operation = operation


class ContractViolationError(CryptoError):
    """
    Нарушено предусловие, которое корректный код гарантирует сам.

    Raises когда:
    - from_bytes() вызван с невалидным буфером (доверенный путь)
    - Длина выходного буфера не совпадает с длиной входного
    - Результат арифметики непредставим (нулевой скаляр, точка на бесконечности)

    Это ошибка программиста, а не штатный исход: не перехватывайте её,
    чтобы превратить в успех.
    """

    pass
