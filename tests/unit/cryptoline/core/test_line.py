"""
Unit-тесты для модуля line.py (контракт FixedLine и ByteLine).

Проверяет:
    - Проверку LENGTH при создании класса
    - Валидирующий путь try_from_bytes (длина, тип, содержимое)
    - Доверенный путь from_bytes и его неверное использование
    - Семантику значений: равенство, хеш, неизменяемость, repr
"""

from __future__ import annotations

import copy
import pickle

import pytest

from cryptoline.core.exceptions import ContractViolationError, DecodeError
from cryptoline.core.line import ByteLine, FixedLine


# ==============================================================================
# TEST TYPES
# ==============================================================================


class Blob(ByteLine):
    """Любые 4 байта."""

    __slots__ = ()

    LENGTH = 4


class Nibble(ByteLine):
    """Один байт со значением < 16."""

    __slots__ = ()

    LENGTH = 1

    @classmethod
    def _validate(cls, raw: bytes) -> None:
        if raw[0] >= 16:
            raise DecodeError("value must be < 16", type_name=cls.__name__)


class SecretBlob(ByteLine):
    __slots__ = ()

    LENGTH = 2
    SECRET = True


class Word(FixedLine):
    """Два байта, старший не может быть 0xff; проверяется на обоих путях."""

    __slots__ = ("_raw",)

    LENGTH = 2

    @classmethod
    def _decode(cls, raw: bytes) -> "Word":
        if raw[0] == 0xFF:
            raise DecodeError("reserved prefix", type_name=cls.__name__)
        obj = object.__new__(cls)
        object.__setattr__(obj, "_raw", raw)
        return obj

    def to_bytes(self) -> bytes:
        return self._raw

    def __setattr__(self, name: str, value: object) -> None:
        raise AttributeError("Word is immutable")


# ==============================================================================
# CLASS DEFINITION
# ==============================================================================


class TestLengthDeclaration:
    """Тесты объявления LENGTH."""

    @pytest.mark.parametrize("bad", [0, -1, 1.5, "4", True])
    def test_invalid_length_rejected(self, bad: object) -> None:
        with pytest.raises(TypeError, match="LENGTH"):
            type("Bad", (ByteLine,), {"__slots__": (), "LENGTH": bad})

    def test_abstract_base_has_no_length(self) -> None:
        assert not hasattr(FixedLine, "LENGTH")

    def test_len_reports_static_length(self) -> None:
        assert len(Blob.try_from_bytes(b"abcd")) == 4


# ==============================================================================
# VALIDATING DECODE
# ==============================================================================


class TestTryFromBytes:
    """Тесты валидирующего декодирования."""

    def test_round_trip(self) -> None:
        value = Blob.try_from_bytes(b"\x00\x01\x02\x03")
        assert value.to_bytes() == b"\x00\x01\x02\x03"
        assert Blob.try_from_bytes(value.to_bytes()) == value

    @pytest.mark.parametrize("data", [bytearray(b"wxyz"), memoryview(b"wxyz")])
    def test_accepts_bytes_like(self, data: object) -> None:
        value = Blob.try_from_bytes(data)  # type: ignore[arg-type]
        assert value.to_bytes() == b"wxyz"
        assert isinstance(value.to_bytes(), bytes)

    def test_copies_mutable_input(self) -> None:
        source = bytearray(b"abcd")
        value = Blob.try_from_bytes(source)
        source[0] = 0x7A
        assert value.to_bytes() == b"abcd"

    @pytest.mark.parametrize("data", [b"", b"abc", b"abcde"])
    def test_wrong_length(self, data: bytes) -> None:
        with pytest.raises(DecodeError) as exc_info:
            Blob.try_from_bytes(data)

        assert exc_info.value.expected_size == 4
        assert exc_info.value.actual_size == len(data)
        assert exc_info.value.type_name == "Blob"

    @pytest.mark.parametrize("data", ["abcd", 1234, None, [1, 2, 3, 4]])
    def test_rejects_non_bytes(self, data: object) -> None:
        with pytest.raises(TypeError, match="bytes-like"):
            Blob.try_from_bytes(data)  # type: ignore[arg-type]

    def test_content_validation(self) -> None:
        assert Nibble.try_from_bytes(b"\x0f").to_bytes() == b"\x0f"
        with pytest.raises(DecodeError, match="Nibble"):
            Nibble.try_from_bytes(b"\x10")


# ==============================================================================
# TRUSTED DECODE
# ==============================================================================


class TestFromBytes:
    """Тесты доверенного декодирования."""

    def test_trusted_round_trip(self) -> None:
        value = Nibble.try_from_bytes(b"\x03")
        assert Nibble.from_bytes(value.to_bytes()) == value

    def test_wrong_length_is_contract_violation(self) -> None:
        with pytest.raises(ContractViolationError):
            Blob.from_bytes(b"abc")

    def test_bytelines_skip_validation(self) -> None:
        # ByteLine trusts the caller on the fast path
        value = Nibble.from_bytes(b"\xff")
        assert value.to_bytes() == b"\xff"

    def test_validating_type_reports_misuse(self) -> None:
        assert Word.from_bytes(b"\x01\x02").to_bytes() == b"\x01\x02"

        with pytest.raises(ContractViolationError, match="invalid buffer") as exc_info:
            Word.from_bytes(b"\xff\x00")

        assert isinstance(exc_info.value.__cause__, DecodeError)

    def test_validating_type_try_path(self) -> None:
        with pytest.raises(DecodeError, match="Word"):
            Word.try_from_bytes(b"\xff\x00")


# ==============================================================================
# VALUE SEMANTICS
# ==============================================================================


class TestValueSemantics:
    """Тесты равенства, хеширования и неизменяемости."""

    def test_equality_by_type_and_bytes(self) -> None:
        a = Blob.try_from_bytes(b"abcd")
        b = Blob.try_from_bytes(bytearray(b"abcd"))
        c = Blob.try_from_bytes(b"abce")

        assert a == b
        assert a != c
        assert hash(a) == hash(b)

    def test_different_types_never_equal(self) -> None:
        class OtherBlob(ByteLine):
            __slots__ = ()
            LENGTH = 4

        assert Blob.try_from_bytes(b"abcd") != OtherBlob.try_from_bytes(b"abcd")

    def test_immutable(self) -> None:
        value = Blob.try_from_bytes(b"abcd")
        with pytest.raises(AttributeError):
            value._data = b"zzzz"  # type: ignore[misc]

    def test_bytes_protocol(self) -> None:
        assert bytes(Blob.try_from_bytes(b"abcd")) == b"abcd"

    def test_repr_shows_hex(self) -> None:
        assert repr(Blob.try_from_bytes(b"\x01\x02\x03\x04")) == "Blob(01020304)"

    def test_repr_redacts_secret(self) -> None:
        text = repr(SecretBlob.try_from_bytes(b"\xab\xcd"))
        assert "abcd" not in text
        assert "redacted" in text


# ==============================================================================
# COPY / PICKLE
# ==============================================================================


class TestCopyAndPickle:
    """Тесты копирования и сериализации неизменяемых значений."""

    @pytest.mark.parametrize(
        "value",
        [
            Blob.try_from_bytes(b"abcd"),
            SecretBlob.try_from_bytes(b"\x01\x02"),
            Word.try_from_bytes(b"\x00\x07"),
        ],
        ids=["Blob", "SecretBlob", "Word"],
    )
    def test_copies_share_instance(self, value: FixedLine) -> None:
        assert copy.copy(value) is value
        assert copy.deepcopy(value) is value

    def test_deepcopy_of_container(self) -> None:
        holder = {"blob": Blob.try_from_bytes(b"abcd"), "items": [Word.try_from_bytes(b"\x00\x01")]}

        cloned = copy.deepcopy(holder)

        assert cloned == holder
        assert cloned["items"] is not holder["items"]

    @pytest.mark.parametrize(
        "value",
        [Blob.try_from_bytes(b"wxyz"), Word.try_from_bytes(b"\x10\x20")],
        ids=["Blob", "Word"],
    )
    def test_pickle_round_trip(self, value: FixedLine) -> None:
        restored = pickle.loads(pickle.dumps(value))

        assert restored == value
        assert type(restored) is type(value)
