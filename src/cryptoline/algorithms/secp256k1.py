"""
secp256k1 backend: scalars, curve points, packed points and ECDSA signatures.

Arithmetic split:
    - Scalar field (Z_n): plain integer arithmetic modulo ``ORDER``.
    - Group operations (point addition, scalar multiplication, SEC 1
      compression): ``coincurve``, bindings to Bitcoin Core's libsecp256k1.
    - ECDSA over a pre-hashed 32-byte digest: ``cryptography`` with
      ``Prehashed(SHA256)``.

Encodings:
    ============================  ======  ==================================
    Type                          Bytes   Layout
    ============================  ======  ==================================
    Secp256k1Scalar                   32  big-endian, 1 <= k < n
    Secp256k1Coordinate               32  big-endian, 0 <= x < p
    Secp256k1PackedPoint              33  SignFlag (0x02/0x03) || x
    Secp256k1Point                    64  x || y (uncompressed, no 0x04)
    Secp256k1Signature                64  r || s, 1 <= r, s < n
    ============================  ======  ==================================

Signatures are normalised to low-s when signing and ``verify`` rejects
high-s encodings, so each (key, digest, nonce) has exactly one signature.

Example:
    >>> sk = Secp256k1Scalar.random()
    >>> pk = Secp256k1Point.from_scalar(sk)
    >>> digest = Secp256k1Scalar.from_int(int.from_bytes(sha256(b"msg").digest(), "big"))
    >>> sig = Secp256k1Signature.sign(sk, digest)
    >>> sig.verify(pk, digest)
    >>> Secp256k1Point.decompress(pk.compress()) == pk
    True

References:
    - SEC 2 v2 §2.4.1  secp256k1 domain parameters
    - SEC 1 v2 §2.3.3  point compression
"""

from __future__ import annotations

import logging
import secrets
from typing import Any, Final, Type

from coincurve import PublicKey as _PK
from cryptography.exceptions import InvalidSignature
from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.asymmetric import ec
from cryptography.hazmat.primitives.asymmetric.utils import (
    Prehashed,
    decode_dss_signature,
    encode_dss_signature,
)

from cryptoline.core.concat import Concat
from cryptoline.core.elliptic import Curve, Scalar, Signature, SignFlag
from cryptoline.core.exceptions import (
    ContractViolationError,
    DecodeError,
    SigningFailedError,
    VerificationFailedError,
)
from cryptoline.core.line import ByteLine

logger = logging.getLogger(__name__)

__all__ = [
    "CURVE_NAME",
    "FIELD_PRIME",
    "ORDER",
    "Secp256k1Coordinate",
    "Secp256k1PackedPoint",
    "Secp256k1Point",
    "Secp256k1Scalar",
    "Secp256k1Signature",
]

# ── secp256k1 constants ─────────────────────────────────────────────────
CURVE_NAME: Final = "secp256k1"
ORDER: Final = 0xFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFEBAAEDCE6AF48A03BBFD25E8CD0364141
FIELD_PRIME: Final = 0xFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFEFFFFFC2F
HALF_ORDER: Final = ORDER >> 1
SCALAR_BYTES: Final = 32

# Generator G, uncompressed (SEC 2 §2.4.1)
_BASE_POINT: Final = bytes.fromhex(
    "04"
    "79BE667EF9DCBBAC55A06295CE870B07029BFCDB2DCE28D959F2815B16F81798"
    "483ADA7726A3C4655DA4FBFC0E1108A8FD17B448A68554199C47D08FFB10D4B8"
)

_ECDSA: Final = ec.ECDSA(Prehashed(hashes.SHA256()))


def _int(raw: bytes) -> int:
    return int.from_bytes(raw, "big")


def _raw(value: int) -> bytes:
    return value.to_bytes(SCALAR_BYTES, "big")


# ==============================================================================
# SCALAR FIELD
# ==============================================================================


class Secp256k1Scalar(ByteLine, Scalar):
    """
    Элемент поля Z_n, где n = ``ORDER``; он же секретный ключ.

    Диапазон — [1, n): ноль не является корректным секретным ключом
    libsecp256k1. Результат арифметики, равный нулю, непредставим и
    считается фатальным (вероятность ~2^-256 для случайных операндов).
    """

    __slots__ = ()

    LENGTH = SCALAR_BYTES
    NAME = CURVE_NAME

    @classmethod
    def _validate(cls, raw: bytes) -> None:
        if not 0 < _int(raw) < ORDER:
            raise DecodeError(
                "value is not a valid field element",
                type_name=cls.__name__,
                algorithm=CURVE_NAME,
            )

    @classmethod
    def from_int(cls, value: int) -> "Secp256k1Scalar":
        """
        Build a scalar from an integer in ``[1, n)``.

        Raises:
            DecodeError: value is zero or not below the order
        """
        if isinstance(value, bool) or not isinstance(value, int):
            raise TypeError(f"value must be int, got {type(value).__name__}")
        if not 0 < value < ORDER:
            raise DecodeError(
                "value is not a valid field element",
                type_name=cls.__name__,
                algorithm=CURVE_NAME,
            )
        return cls._wrap(_raw(value))

    @classmethod
    def random(cls) -> "Secp256k1Scalar":
        """Uniform in [1, n-1] via rejection sampling."""
        while True:
            candidate = _int(secrets.token_bytes(SCALAR_BYTES))
            if 0 < candidate < ORDER:
                return cls._wrap(_raw(candidate))

    @classmethod
    def _reduced(cls, value: int, operation: str) -> "Secp256k1Scalar":
        value %= ORDER
        if value == 0:
            raise ContractViolationError(
                f"{operation} produced the zero scalar"
            )
        return cls._wrap(_raw(value))

    @property
    def value(self) -> int:
        return _int(self._data)

    def _operand(self, rhs: Any) -> int:
        if not isinstance(rhs, Secp256k1Scalar):
            raise TypeError(f"expected Secp256k1Scalar, got {type(rhs).__name__}")
        return rhs.value

    def add_ff(self, rhs: "Secp256k1Scalar") -> "Secp256k1Scalar":
        return self._reduced(self.value + self._operand(rhs), "add_ff")

    def mul_ff(self, rhs: "Secp256k1Scalar") -> "Secp256k1Scalar":
        return self._reduced(self.value * self._operand(rhs), "mul_ff")

    def inv_ff(self) -> "Secp256k1Scalar":
        """Multiplicative inverse via Fermat's little theorem."""
        return self._reduced(pow(self.value, ORDER - 2, ORDER), "inv_ff")


class Secp256k1Coordinate(ByteLine):
    """Координата точки: элемент базового поля F_p, 0 <= x < p."""

    __slots__ = ()

    LENGTH = SCALAR_BYTES

    @classmethod
    def _validate(cls, raw: bytes) -> None:
        if _int(raw) >= FIELD_PRIME:
            raise DecodeError(
                "coordinate is not below the field prime",
                type_name=cls.__name__,
                algorithm=CURVE_NAME,
            )

    @property
    def value(self) -> int:
        return _int(self._data)


class Secp256k1PackedPoint(Concat[SignFlag, Secp256k1Coordinate]):
    """
    Упакованная точка: SignFlag || x, 33 байта (сжатый формат SEC 1).

    Корректность отдельных половин проверяется при декодировании;
    принадлежность x кривой проверяет ``Secp256k1Point.decompress``.
    """

    __slots__ = ()

    @property
    def sign(self) -> SignFlag:
        return self._head

    @property
    def x(self) -> Secp256k1Coordinate:
        return self._tail


# ==============================================================================
# CURVE POINTS
# ==============================================================================


class Secp256k1Point(Curve):
    """
    Точка на secp256k1 (публичный ключ), кодируется как x || y.

    Бесконечно удалённая точка непредставима в 64-байтовой форме, поэтому
    групповая операция, дающая её, поднимает ContractViolationError.
    """

    __slots__ = ("_pk",)

    LENGTH = 2 * SCALAR_BYTES
    SCALAR = Secp256k1Scalar
    PACKED = Secp256k1PackedPoint

    _pk: _PK

    @classmethod
    def _from_public_key(cls, pk: _PK) -> "Secp256k1Point":
        obj = object.__new__(cls)
        object.__setattr__(obj, "_pk", pk)
        return obj

    @classmethod
    def _decode(cls, raw: bytes) -> "Secp256k1Point":
        try:
            pk = _PK(b"\x04" + raw)
        except ValueError as e:
            raise DecodeError(
                "bytes do not encode a point on the curve",
                type_name=cls.__name__,
                algorithm=CURVE_NAME,
            ) from e
        return cls._from_public_key(pk)

    def to_bytes(self) -> bytes:
        return self._pk.format(compressed=False)[1:]

    def __setattr__(self, name: str, value: Any) -> None:
        raise AttributeError(f"{type(self).__name__} is immutable")

    @classmethod
    def base(cls) -> "Secp256k1Point":
        # safe: the generator constant is a valid point
        return cls._from_public_key(_PK(_BASE_POINT))

    def _check_peer(self, rhs: Any) -> "Secp256k1Point":
        if not isinstance(rhs, Secp256k1Point):
            raise TypeError(f"expected Secp256k1Point, got {type(rhs).__name__}")
        return rhs

    def mul_ec(self, rhs: "Secp256k1Point") -> "Secp256k1Point":
        """Point addition P + Q."""
        other = self._check_peer(rhs)
        try:
            combined = _PK.combine_keys([self._pk, other._pk])
        except ValueError as e:
            raise ContractViolationError("mul_ec produced the point at infinity") from e
        return self._from_public_key(combined)

    def exp_ec(self, scalar: Scalar) -> "Secp256k1Point":
        """Scalar multiplication k * P."""
        if not isinstance(scalar, Secp256k1Scalar):
            raise TypeError(f"expected Secp256k1Scalar, got {type(scalar).__name__}")
        try:
            product = self._pk.multiply(scalar.to_bytes())
        except ValueError as e:
            # a zero scalar built through from_bytes
            raise ContractViolationError("exp_ec called with an invalid scalar") from e
        return self._from_public_key(product)

    def compress(self) -> Secp256k1PackedPoint:
        return Secp256k1PackedPoint.from_bytes(self._pk.format(compressed=True))

    @classmethod
    def decompress(cls, packed: Concat) -> "Secp256k1Point":
        if not isinstance(packed, Secp256k1PackedPoint):
            raise TypeError(
                f"expected Secp256k1PackedPoint, got {type(packed).__name__}"
            )
        try:
            pk = _PK(packed.to_bytes())
        except ValueError as e:
            raise DecodeError(
                "x-coordinate has no point on the curve",
                type_name=cls.__name__,
                algorithm=CURVE_NAME,
            ) from e
        return cls._from_public_key(pk)


# ==============================================================================
# ECDSA SIGNATURES
# ==============================================================================


class Secp256k1Signature(ByteLine, Signature):
    """
    ECDSA подпись на secp256k1 в компактной форме r || s (64 байта).

    Сообщение — Secp256k1Scalar, т.е. уже вычисленный 32-байтовый дайджест.

    Note:
        cryptography использует случайный nonce; подпись нормализуется
        к low-s, поэтому её кодировка канонична.
    """

    __slots__ = ()

    LENGTH = 2 * SCALAR_BYTES
    SCALAR = Secp256k1Scalar
    CURVE = Secp256k1Point

    @classmethod
    def _validate(cls, raw: bytes) -> None:
        r, s = _int(raw[:SCALAR_BYTES]), _int(raw[SCALAR_BYTES:])
        if not (0 < r < ORDER and 0 < s < ORDER):
            raise DecodeError(
                "r and s must lie in [1, n)",
                type_name=cls.__name__,
                algorithm=CURVE_NAME,
            )

    @property
    def r(self) -> int:
        return _int(self._data[:SCALAR_BYTES])

    @property
    def s(self) -> int:
        return _int(self._data[SCALAR_BYTES:])

    @classmethod
    def sign(
        cls: Type["Secp256k1Signature"], secret_key: Scalar, message: Scalar
    ) -> "Secp256k1Signature":
        """
        Создать ECDSA подпись над дайджестом ``message``.

        Raises:
            TypeError: Скаляры не secp256k1
            SigningFailedError: Бэкенд отказал (фатально)
        """
        if not isinstance(secret_key, Secp256k1Scalar) or not isinstance(
            message, Secp256k1Scalar
        ):
            raise TypeError("secret_key and message must be Secp256k1Scalar")

        try:
            private_key = ec.derive_private_key(secret_key.value, ec.SECP256K1())
            r, s = decode_dss_signature(private_key.sign(message.to_bytes(), _ECDSA))
        except Exception as e:
            raise SigningFailedError(
                f"{CURVE_NAME} signing failed", algorithm=CURVE_NAME
            ) from e

        if s > HALF_ORDER:
            s = ORDER - s
        logger.debug(f"{CURVE_NAME}: Signed 32-byte digest")
        return cls.from_bytes(_raw(r) + _raw(s))

    def verify(self, public_key: Curve, message: Scalar) -> None:
        """
        Проверить ECDSA подпись.

        Raises:
            TypeError: Аргументы не secp256k1 типов
            VerificationFailedError: Подпись недействительна
        """
        if not isinstance(public_key, Secp256k1Point) or not isinstance(
            message, Secp256k1Scalar
        ):
            raise TypeError("public_key must be Secp256k1Point, message Secp256k1Scalar")

        r, s = self.r, self.s
        try:
            if s > HALF_ORDER:
                raise InvalidSignature("high-s signature")
            key = ec.EllipticCurvePublicKey.from_encoded_point(
                ec.SECP256K1(), b"\x04" + public_key.to_bytes()
            )
            key.verify(encode_dss_signature(r, s), message.to_bytes(), _ECDSA)
        except InvalidSignature as e:
            logger.debug(f"{CURVE_NAME}: Signature verification failed")
            raise VerificationFailedError(
                "Signature verification failed", algorithm=CURVE_NAME
            ) from e
