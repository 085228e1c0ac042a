"""
Unit-тесты для абстракций elliptic.py на игрушечной группе.

Игрушечная «кривая» — аддитивная группа Z_251 с образующей 1: этого
достаточно, чтобы проверить SignFlag, поведение Scalar.inv_ff по умолчанию
и реализацию Curve.from_scalar в базовом классе.
"""

from __future__ import annotations

import pytest

from cryptoline.core.concat import Concat
from cryptoline.core.elliptic import Curve, Scalar, SignFlag
from cryptoline.core.exceptions import DecodeError, OperationNotSupportedError
from cryptoline.core.line import ByteLine

_Q = 251


def _check_range(cls: type, raw: bytes) -> None:
    if not 0 < raw[0] < _Q:
        raise DecodeError("out of range", type_name=cls.__name__)


class ToyScalar(ByteLine, Scalar):
    __slots__ = ()

    LENGTH = 1
    NAME = "toy"

    @classmethod
    def _validate(cls, raw: bytes) -> None:
        _check_range(cls, raw)

    def add_ff(self, rhs: "ToyScalar") -> "ToyScalar":
        return ToyScalar.from_bytes(bytes([(self._data[0] + rhs._data[0]) % _Q]))

    def mul_ff(self, rhs: "ToyScalar") -> "ToyScalar":
        return ToyScalar.from_bytes(bytes([(self._data[0] * rhs._data[0]) % _Q]))


class ToyCoordinate(ByteLine):
    __slots__ = ()

    LENGTH = 1


class ToyPacked(Concat[SignFlag, ToyCoordinate]):
    __slots__ = ()


class ToyPoint(ByteLine, Curve):
    __slots__ = ()

    LENGTH = 1
    SCALAR = ToyScalar
    PACKED = ToyPacked

    @classmethod
    def _validate(cls, raw: bytes) -> None:
        _check_range(cls, raw)

    @classmethod
    def base(cls) -> "ToyPoint":
        return cls.from_bytes(b"\x01")

    def mul_ec(self, rhs: "ToyPoint") -> "ToyPoint":
        return ToyPoint.from_bytes(bytes([(self._data[0] + rhs._data[0]) % _Q]))

    def exp_ec(self, scalar: Scalar) -> "ToyPoint":
        return ToyPoint.from_bytes(bytes([(self._data[0] * scalar.to_bytes()[0]) % _Q]))

    def compress(self) -> ToyPacked:
        return ToyPacked(SignFlag.for_parity(odd=False), ToyCoordinate.from_bytes(self._data))

    @classmethod
    def decompress(cls, packed: Concat) -> "ToyPoint":
        return cls.try_from_bytes(packed.tail.to_bytes())


# ==============================================================================
# SIGN FLAG
# ==============================================================================


class TestSignFlag:
    """Тесты однобайтового заголовка упакованной точки."""

    def test_length(self) -> None:
        assert SignFlag.LENGTH == 1

    @pytest.mark.parametrize("raw, odd", [(b"\x02", False), (b"\x03", True)])
    def test_valid_flags(self, raw: bytes, odd: bool) -> None:
        flag = SignFlag.try_from_bytes(raw)
        assert flag.is_odd is odd
        assert SignFlag.for_parity(odd=odd) == flag

    @pytest.mark.parametrize("raw", [b"\x00", b"\x01", b"\x04", b"\xff"])
    def test_invalid_flags(self, raw: bytes) -> None:
        with pytest.raises(DecodeError, match="0x02 or 0x03"):
            SignFlag.try_from_bytes(raw)


# ==============================================================================
# SCALAR
# ==============================================================================


class TestScalarBase:
    """Тесты базового класса Scalar."""

    def test_inversion_unsupported_by_default(self) -> None:
        scalar = ToyScalar.try_from_bytes(b"\x05")

        with pytest.raises(OperationNotSupportedError) as exc_info:
            scalar.inv_ff()

        assert exc_info.value.operation == "inv_ff"
        assert exc_info.value.algorithm == "toy"

    def test_field_operations(self) -> None:
        a = ToyScalar.try_from_bytes(b"\xfa")
        b = ToyScalar.try_from_bytes(b"\x02")

        assert a.add_ff(b).to_bytes() == b"\x01"
        assert a.mul_ff(b).to_bytes() == bytes([(250 * 2) % _Q])

    def test_scalars_are_secret(self) -> None:
        assert "redacted" in repr(ToyScalar.try_from_bytes(b"\x05"))

    def test_abstract_scalar_cannot_be_decoded(self) -> None:
        class Incomplete(ByteLine, Scalar):
            __slots__ = ()
            LENGTH = 1

        with pytest.raises(TypeError):
            Incomplete.try_from_bytes(b"\x01")


# ==============================================================================
# CURVE
# ==============================================================================


class TestCurveBase:
    """Тесты базового класса Curve."""

    def test_from_scalar_uses_base_point(self) -> None:
        sk = ToyScalar.try_from_bytes(b"\x07")
        assert ToyPoint.from_scalar(sk) == ToyPoint.base().exp_ec(sk)
        assert ToyPoint.from_scalar(sk).to_bytes() == b"\x07"

    def test_compress_round_trip(self) -> None:
        point = ToyPoint.try_from_bytes(b"\x2a")
        packed = point.compress()

        assert packed.LENGTH == 2
        assert ToyPacked.try_from_bytes(packed.to_bytes()) == packed
        assert ToyPoint.decompress(packed) == point

    def test_packed_rejects_bad_sign_byte(self) -> None:
        with pytest.raises(DecodeError):
            ToyPacked.try_from_bytes(b"\x05\x2a")
