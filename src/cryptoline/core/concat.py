"""
Комбинатор Concat: склейка двух FixedLine типов в один.

``Concat[U, V]`` — это FixedLine тип длины ``U.LENGTH + V.LENGTH``.
Декодирование режет буфер по статически известной границе: первые
``U.LENGTH`` байт идут в ``U``, остаток в ``V``; каждая половина
декодируется независимо, и ошибка любой из них — ошибка всего значения.

Суммарная длина вычисляется и проверяется один раз, при построении типа,
до любого ввода-вывода. Параметризованные типы кешируются, поэтому
``Concat[A, B] is Concat[A, B]``.

Example:
    >>> Packed = Concat[SignFlag, Secp256k1Coordinate]
    >>> Packed.LENGTH
    33
    >>> Triple = Concat[Concat[A, B], C]
    >>> Triple.LENGTH == A.LENGTH + B.LENGTH + C.LENGTH
    True
"""

from __future__ import annotations

import threading
from typing import Any, ClassVar, Dict, Tuple, Type, TypeVar

from cryptoline.core.line import FixedLine

__all__ = ["Concat"]

C = TypeVar("C", bound="Concat")

_lock = threading.Lock()
_parametrized: Dict[Tuple[type, type, type], Type["Concat"]] = {}


def _parametrize(
    base: Type["Concat"], head: Type[FixedLine], tail: Type[FixedLine]
) -> Type["Concat"]:
    key = (base, head, tail)
    with _lock:
        cached = _parametrized.get(key)
        if cached is not None:
            return cached

        for part in (head, tail):
            if not (isinstance(part, type) and issubclass(part, FixedLine)):
                raise TypeError(f"Concat parts must be FixedLine types, got {part!r}")
            if not isinstance(getattr(part, "LENGTH", None), int):
                raise TypeError(f"Concat part {part.__name__} has no LENGTH")

        name = f"{base.__name__}[{head.__name__}, {tail.__name__}]"
        built = type(base)(
            name,
            (base,),
            {
                "__slots__": (),
                "__module__": base.__module__,
                "HEAD": head,
                "TAIL": tail,
                "LENGTH": head.LENGTH + tail.LENGTH,
            },
        )
        _parametrized[key] = built
        return built


class Concat(FixedLine):
    """
    Пара ``(head, tail)`` с длиной ``len(HEAD) + len(TAIL)``.

    Параметризуется через ``Concat[HEAD, TAIL]``. Полученный тип можно
    наследовать, чтобы добавить доменные методы (см. упакованную точку
    кривой). Вложенность ``Concat[Concat[A, B], C]`` ассоциируется
    корректно: первые ``A.LENGTH + B.LENGTH`` байт декодирует внутренний
    Concat.

    Attributes:
        HEAD: FixedLine тип первой части
        TAIL: FixedLine тип второй части
    """

    __slots__ = ("_head", "_tail")

    HEAD: ClassVar[Type[FixedLine]]
    TAIL: ClassVar[Type[FixedLine]]

    def __class_getitem__(cls, params: Tuple[Type[FixedLine], Type[FixedLine]]) -> Any:
        if getattr(cls, "HEAD", None) is not None:
            raise TypeError(f"{cls.__name__} is already parametrized")
        if not isinstance(params, tuple) or len(params) != 2:
            raise TypeError("Concat takes exactly two FixedLine types")
        return _parametrize(cls, params[0], params[1])

    def __init_subclass__(cls, **kwargs: Any) -> None:
        super().__init_subclass__(**kwargs)
        head = getattr(cls, "HEAD", None)
        tail = getattr(cls, "TAIL", None)
        if head is None or tail is None:
            return
        if cls.LENGTH != head.LENGTH + tail.LENGTH:
            raise TypeError(
                f"{cls.__name__}.LENGTH={cls.LENGTH} does not equal "
                f"{head.__name__}.LENGTH + {tail.__name__}.LENGTH"
            )

    def __init__(self, head: FixedLine, tail: FixedLine) -> None:
        """
        Собрать пару из уже корректных значений.

        Raises:
            TypeError: тип не параметризован или части не тех типов
        """
        cls = type(self)
        if getattr(cls, "HEAD", None) is None:
            raise TypeError("Concat must be parametrized before use")
        if not isinstance(head, cls.HEAD):
            raise TypeError(
                f"head must be {cls.HEAD.__name__}, got {type(head).__name__}"
            )
        if not isinstance(tail, cls.TAIL):
            raise TypeError(
                f"tail must be {cls.TAIL.__name__}, got {type(tail).__name__}"
            )
        object.__setattr__(self, "_head", head)
        object.__setattr__(self, "_tail", tail)

    @property
    def head(self) -> FixedLine:
        return self._head

    @property
    def tail(self) -> FixedLine:
        return self._tail

    @classmethod
    def _split(cls, raw: bytes) -> Tuple[bytes, bytes]:
        boundary = cls.HEAD.LENGTH
        return raw[:boundary], raw[boundary:]

    @classmethod
    def _decode(cls: Type[C], raw: bytes) -> C:
        head_raw, tail_raw = cls._split(raw)
        return cls(cls.HEAD.try_from_bytes(head_raw), cls.TAIL.try_from_bytes(tail_raw))

    @classmethod
    def _decode_trusted(cls: Type[C], raw: bytes) -> C:
        head_raw, tail_raw = cls._split(raw)
        return cls(cls.HEAD.from_bytes(head_raw), cls.TAIL.from_bytes(tail_raw))

    def to_bytes(self) -> bytes:
        return self._head.to_bytes() + self._tail.to_bytes()

    def __setattr__(self, name: str, value: Any) -> None:
        raise AttributeError(f"{type(self).__name__} is immutable")

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self._head!r}, {self._tail!r})"
