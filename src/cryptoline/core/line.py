"""
Контракт FixedLine: значения с точно известной длиной байтового представления.

Каждый тип объявляет ``LENGTH`` как атрибут класса. Длина проверяется один
раз при создании класса и никогда не выясняется по ходу декодирования.

Два пути декодирования:
    - ``try_from_bytes`` — валидирующий, всегда безопасен, при некорректном
      вводе поднимает DecodeError.
    - ``from_bytes`` — доверенный, для буферов, уже доказанных корректными
      (например, полученных из ``to_bytes``). Реализация вправе пропустить
      проверку. Неверное использование — ошибка вызывающего кода
      (ContractViolationError), а не штатный исход.

Закон обратимости: ``T.try_from_bytes(x.to_bytes()) == x`` для любого
корректного ``x``.

Example:
    >>> class Blob(ByteLine):
    ...     LENGTH = 4
    >>> Blob.try_from_bytes(b"\\x00\\x01\\x02\\x03").to_bytes()
    b'\\x00\\x01\\x02\\x03'
"""

from __future__ import annotations

import hmac
from abc import ABC, abstractmethod
from typing import Any, ClassVar, Dict, Tuple, Type, TypeVar, Union, cast

from cryptoline.core.exceptions import ContractViolationError, DecodeError

__all__ = [
    "BytesLike",
    "ByteLine",
    "FixedLine",
]

BytesLike = Union[bytes, bytearray, memoryview]

L = TypeVar("L", bound="FixedLine")
B = TypeVar("B", bound="ByteLine")


def _coerce(data: Any, name: str) -> bytes:
    if not isinstance(data, (bytes, bytearray, memoryview)):
        raise TypeError(f"{name} expects bytes-like input, got {type(data).__name__}")
    return bytes(data)


class FixedLine(ABC):
    """
    Базовый класс для значений фиксированной длины.

    Subclasses must define ``LENGTH`` (positive int) and implement
    ``_decode`` and ``to_bytes``. ``_decode_trusted`` defaults to ``_decode``
    and may be overridden to skip redundant validation.

    Значения неизменяемы, сравниваются по типу и представлению
    (в константное время) и хешируемы.
    """

    __slots__ = ()

    LENGTH: ClassVar[int]
    # Redact the encoding in repr() for secret material
    SECRET: ClassVar[bool] = False

    def __init_subclass__(cls, **kwargs: Any) -> None:
        super().__init_subclass__(**kwargs)
        length = cls.__dict__.get("LENGTH")
        if length is None:
            return
        if isinstance(length, bool) or not isinstance(length, int) or length <= 0:
            raise TypeError(
                f"{cls.__name__}.LENGTH must be a positive int, got {length!r}"
            )

    # ------------------------------------------------------------------
    # Decoding
    # ------------------------------------------------------------------

    @classmethod
    def try_from_bytes(cls: Type[L], data: BytesLike) -> L:
        """
        Декодировать буфер с полной валидацией.

        Raises:
            TypeError: data не является bytes-like
            DecodeError: неверная длина или недопустимое значение
        """
        raw = _coerce(data, cls.__name__)
        if len(raw) != cls.LENGTH:
            raise DecodeError(
                "wrong buffer length",
                type_name=cls.__name__,
                expected_size=cls.LENGTH,
                actual_size=len(raw),
            )
        return cls._decode(raw)

    @classmethod
    def from_bytes(cls: Type[L], data: BytesLike) -> L:
        """
        Декодировать буфер, заведомо корректный.

        Raises:
            ContractViolationError: буфер оказался некорректным; это ошибка
                вызывающего кода
        """
        raw = _coerce(data, cls.__name__)
        if len(raw) != cls.LENGTH:
            raise ContractViolationError(
                f"{cls.__name__}.from_bytes() called with {len(raw)} bytes, "
                f"expected {cls.LENGTH}"
            )
        try:
            return cls._decode_trusted(raw)
        except DecodeError as exc:
            raise ContractViolationError(
                f"{cls.__name__}.from_bytes() called with an invalid buffer"
            ) from exc

    @classmethod
    @abstractmethod
    def _decode(cls: Type[L], raw: bytes) -> L:
        """Build an instance from exactly LENGTH bytes, validating them."""
        ...

    @classmethod
    def _decode_trusted(cls: Type[L], raw: bytes) -> L:
        return cls._decode(raw)

    # ------------------------------------------------------------------
    # Encoding
    # ------------------------------------------------------------------

    @abstractmethod
    def to_bytes(self) -> bytes:
        """Вернуть ровно LENGTH байт. Никогда не падает."""
        ...

    # ------------------------------------------------------------------
    # Value semantics
    # ------------------------------------------------------------------

    def __eq__(self, other: object) -> bool:
        if type(other) is not type(self):
            return NotImplemented
        return hmac.compare_digest(self.to_bytes(), cast(FixedLine, other).to_bytes())

    def __hash__(self) -> int:
        return hash((type(self), self.to_bytes()))

    def __bytes__(self) -> bytes:
        return self.to_bytes()

    def __len__(self) -> int:
        return self.LENGTH

    # Values are immutable; pickling goes through the trusted decode
    def __copy__(self: L) -> L:
        return self

    def __deepcopy__(self: L, memo: Dict[int, Any]) -> L:
        return self

    def __reduce__(self) -> Tuple[Any, Tuple[bytes]]:
        return type(self).from_bytes, (self.to_bytes(),)

    def __repr__(self) -> str:
        if self.SECRET:
            return f"{type(self).__name__}(<redacted>)"
        return f"{type(self).__name__}({self.to_bytes().hex()})"


class ByteLine(FixedLine):
    """
    FixedLine поверх одного неизменяемого ``bytes``.

    Подклассы переопределяют ``_validate`` для проверки содержимого;
    доверенный путь ``from_bytes`` её пропускает.
    """

    __slots__ = ("_data",)

    _data: bytes

    @classmethod
    def _wrap(cls: Type[B], raw: bytes) -> B:
        obj = object.__new__(cls)
        object.__setattr__(obj, "_data", raw)
        return obj

    @classmethod
    def _validate(cls, raw: bytes) -> None:
        """Raise DecodeError if ``raw`` is not a legal value. Accepts all by default."""

    @classmethod
    def _decode(cls: Type[B], raw: bytes) -> B:
        cls._validate(raw)
        return cls._wrap(raw)

    @classmethod
    def _decode_trusted(cls: Type[B], raw: bytes) -> B:
        return cls._wrap(raw)

    def to_bytes(self) -> bytes:
        return self._data

    def __setattr__(self, name: str, value: Any) -> None:
        raise AttributeError(f"{type(self).__name__} is immutable")
