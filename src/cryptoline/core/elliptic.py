"""
Эллиптическая возможность: Scalar, Curve, Signature.

- Scalar: элемент конечного поля (секретный ключ, показатель степени)
  с операциями add_ff / mul_ff / inv_ff по модулю порядка поля.
- Curve: точка группы кривой с фиксированной образующей, групповой
  операцией (``mul_ec``, историческое имя), умножением на скаляр
  (``exp_ec``) и канонической упаковкой «байт знака + x-координата».
- Signature: подпись скалярного «сообщения» (готового дайджеста) секретным
  скаляром; проверяется по точке-публичному ключу.

Упаковка точки — ``Concat[SignFlag, <координата>]``: байт 0x02 для чётной
y-координаты, 0x03 для нечётной, затем x-координата. Это соглашение
сжатого формата SEC 1; для кривой с другим каноническим сжатием его нужно
пересмотреть, а не переносить как есть.

Все значения неизменяемы: операции возвращают новые значения.
"""

from __future__ import annotations

from abc import abstractmethod
from typing import ClassVar, Type, TypeVar

from cryptoline.core.concat import Concat
from cryptoline.core.exceptions import DecodeError, OperationNotSupportedError
from cryptoline.core.line import ByteLine, FixedLine

__all__ = [
    "Curve",
    "Scalar",
    "Signature",
    "SignFlag",
]

S = TypeVar("S", bound="Scalar")
P = TypeVar("P", bound="Curve")
G = TypeVar("G", bound="Signature")

_EVEN = 0x02
_ODD = 0x03


class SignFlag(ByteLine):
    """
    Однобайтовый заголовок упакованной точки: 0x02 (чётная y) или 0x03 (нечётная y).

    Example:
        >>> SignFlag.for_parity(odd=True).to_bytes()
        b'\\x03'
    """

    __slots__ = ()

    LENGTH = 1

    @classmethod
    def _validate(cls, raw: bytes) -> None:
        if raw[0] not in (_EVEN, _ODD):
            raise DecodeError("sign byte must be 0x02 or 0x03", type_name=cls.__name__)

    @classmethod
    def for_parity(cls, *, odd: bool) -> "SignFlag":
        return cls._wrap(bytes([_ODD if odd else _EVEN]))

    @property
    def is_odd(self) -> bool:
        return self._data[0] == _ODD


class Scalar(FixedLine):
    """
    Элемент конечного поля скаляров кривой.

    Все операции возвращают корректные элементы поля (приведённые по
    модулю порядка). ``inv_ff`` по умолчанию НЕ поддерживается: алгоритм
    включает её явно, переопределив метод.
    """

    __slots__ = ()

    SECRET = True

    NAME: ClassVar[str]

    @abstractmethod
    def add_ff(self: S, rhs: S) -> S:
        """Сложение в поле."""
        ...

    @abstractmethod
    def mul_ff(self: S, rhs: S) -> S:
        """Умножение в поле."""
        ...

    def inv_ff(self: S) -> S:
        """
        Мультипликативная инверсия.

        Raises:
            OperationNotSupportedError: алгоритм не предоставляет инверсию
        """
        raise OperationNotSupportedError("inv_ff", algorithm=getattr(self, "NAME", None))


class Curve(FixedLine):
    """
    Точка на кривой.

    Subclasses define:
        SCALAR: Scalar type used by ``exp_ec``
        PACKED: ``Concat[SignFlag, <coordinate>]`` type used by compression

    Invariant:
        ``cls.decompress(p.compress()) == p`` для любой корректной точки,
        и у каждой точки ровно одна упакованная форма.
    """

    __slots__ = ()

    SCALAR: ClassVar[Type[Scalar]]
    PACKED: ClassVar[Type[Concat]]

    @classmethod
    @abstractmethod
    def base(cls: Type[P]) -> P:
        """Фиксированная образующая кривой."""
        ...

    @abstractmethod
    def mul_ec(self: P, rhs: P) -> P:
        """Групповая операция: комбинация двух точек по закону группы."""
        ...

    @abstractmethod
    def exp_ec(self: P, scalar: Scalar) -> P:
        """Умножение точки на скаляр."""
        ...

    @abstractmethod
    def compress(self) -> Concat:
        """Каноническая упаковка: байт знака + x-координата."""
        ...

    @classmethod
    @abstractmethod
    def decompress(cls: Type[P], packed: Concat) -> P:
        """
        Восстановить точку из упакованной формы.

        Raises:
            TypeError: packed не является cls.PACKED
            DecodeError: у x-координаты нет точки на кривой
        """
        ...

    @classmethod
    def from_scalar(cls: Type[P], secret_key: Scalar) -> P:
        """Публичный ключ секретного скаляра: ``base() * secret_key``."""
        return cls.base().exp_ec(secret_key)


class Signature(FixedLine):
    """
    Подпись скалярного сообщения (дайджеста) секретным скаляром.

    Хеширование сообщения в дайджест — ответственность вызывающего кода.

    Subclasses define:
        SCALAR: Scalar type of secret keys and messages
        CURVE: Curve type of public keys
    """

    __slots__ = ()

    SCALAR: ClassVar[Type[Scalar]]
    CURVE: ClassVar[Type[Curve]]

    @classmethod
    @abstractmethod
    def sign(cls: Type[G], secret_key: Scalar, message: Scalar) -> G:
        """Подписать дайджест ``message`` секретным ключом."""
        ...

    @abstractmethod
    def verify(self, public_key: Curve, message: Scalar) -> None:
        """
        Проверить подпись.

        Raises:
            VerificationFailedError: подпись не создана секретным ключом
                ``public_key`` над ``message``
        """
        ...
