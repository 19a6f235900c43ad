"""Exact rational numbers with 64-bit numerator and denominator."""

from dataclasses import dataclass
from functools import total_ordering
from math import gcd

INT64_MIN = -(2**63)
INT64_MAX = 2**63 - 1

_DECIMAL_SEPARATOR = "."
_RATIO_SEPARATOR = "/"
_RATIO_PARTS = 2


class RationalError(ValueError):
    """Base class for rational arithmetic and parsing faults."""


class InvalidFractionError(RationalError):
    """Raised when a fraction is built with a zero denominator."""


class DivisionByZeroError(RationalError):
    """Raised when dividing by a zero-valued fraction."""


class MalformedNumberError(RationalError):
    """Raised when text cannot be parsed into a fraction."""


class ArithmeticOverflowError(RationalError):
    """Raised when a result does not fit into 64-bit parts."""


def _check_range(value: int) -> int:
    if value < INT64_MIN or value > INT64_MAX:
        raise ArithmeticOverflowError(f"{value} does not fit into 64 bits")
    return value


def _parse_integer(text: str) -> int:
    digits = text[1:] if text[:1] in {"-", "+"} else text
    if not digits or not (digits.isascii() and digits.isdigit()):
        raise ValueError(f"{text!r} is not an integer")
    return int(text)


@total_ordering
@dataclass(frozen=True, eq=False)
class Rational:
    """Fraction kept in lowest terms with a positive denominator.

    Instances are built through :meth:`create` or the parsers; the
    constructor trusts its arguments to be normalized already.
    """

    numerator: int
    denominator: int

    @classmethod
    def create(cls, numerator: int, denominator: int = 1) -> "Rational":
        """Return the normalized fraction ``numerator / denominator``."""
        if denominator == 0:
            raise InvalidFractionError(
                f"denominator of {numerator}/{denominator} must not be zero"
            )
        if denominator < 0:
            numerator, denominator = -numerator, -denominator
        divisor = gcd(numerator, denominator)
        return cls(
            numerator=_check_range(numerator // divisor),
            denominator=_check_range(denominator // divisor),
        )

    @classmethod
    def zero(cls) -> "Rational":
        return cls(numerator=0, denominator=1)

    @classmethod
    def parse_decimal(cls, text: str) -> "Rational":
        """Parse a signed decimal such as ``-1.28`` or ``.5`` exactly."""
        cleaned = text.strip()
        negative = cleaned.startswith("-")
        if cleaned[:1] in {"-", "+"}:
            cleaned = cleaned[1:]
        if cleaned.count(_DECIMAL_SEPARATOR) > 1:
            raise MalformedNumberError(f"too many decimal separators in {text!r}")
        whole, _, fraction = cleaned.partition(_DECIMAL_SEPARATOR)
        digits = whole + fraction
        if not digits or not (digits.isascii() and digits.isdigit()):
            raise MalformedNumberError(f"{text!r} is not a decimal number")

        denominator = 10 ** len(fraction)
        if denominator > INT64_MAX:
            raise MalformedNumberError(f"too many fractional digits in {text!r}")
        numerator = int(digits)
        if negative:
            numerator = -numerator
        try:
            return cls.create(numerator, denominator)
        except ArithmeticOverflowError as exc:
            raise MalformedNumberError(f"{text!r} is out of range") from exc

    @classmethod
    def parse_ratio(cls, text: str) -> "Rational":
        """Parse the canonical ``N`` or ``N/D`` form."""
        parts = text.strip().split(_RATIO_SEPARATOR)
        if len(parts) > _RATIO_PARTS:
            raise MalformedNumberError(f"too many separators in {text!r}")
        try:
            values = [_parse_integer(part) for part in parts]
        except ValueError as exc:
            raise MalformedNumberError(f"{text!r} is not a fraction") from exc
        if len(values) == 1:
            values.append(1)
        try:
            return cls.create(values[0], values[1])
        except ArithmeticOverflowError as exc:
            raise MalformedNumberError(f"{text!r} is out of range") from exc

    def to_canonical_string(self) -> str:
        """Return ``N`` for whole numbers, ``N/D`` otherwise."""
        if self.denominator == 1:
            return str(self.numerator)
        return f"{self.numerator}/{self.denominator}"

    def to_float(self) -> float:
        """Return an approximation for display purposes."""
        return self.numerator / self.denominator

    def truncate(self) -> int:
        """Return the integer quotient, truncated toward zero."""
        quotient = abs(self.numerator) // self.denominator
        return -quotient if self.numerator < 0 else quotient

    def is_zero(self) -> bool:
        return self.numerator == 0

    def is_positive(self) -> bool:
        return self.numerator > 0

    def is_negative(self) -> bool:
        return self.numerator < 0

    def __str__(self) -> str:
        return self.to_canonical_string()

    def __float__(self) -> float:
        return self.to_float()

    def __lt__(self, other: object) -> bool:
        other_value = _coerce(other)
        if other_value is None:
            return NotImplemented
        return (
            self.numerator * other_value.denominator
            < other_value.numerator * self.denominator
        )

    def __eq__(self, other: object) -> bool:
        other_value = _coerce(other)
        if other_value is None:
            return NotImplemented
        return (
            self.numerator == other_value.numerator
            and self.denominator == other_value.denominator
        )

    def __hash__(self) -> int:
        return hash((self.numerator, self.denominator))

    def __neg__(self) -> "Rational":
        return Rational(
            numerator=_check_range(-self.numerator), denominator=self.denominator
        )

    def __abs__(self) -> "Rational":
        return -self if self.is_negative() else self

    def __add__(self, other: object) -> "Rational":
        other_value = _coerce(other)
        if other_value is None:
            return NotImplemented
        return Rational.create(
            self.numerator * other_value.denominator
            + other_value.numerator * self.denominator,
            self.denominator * other_value.denominator,
        )

    __radd__ = __add__

    def __sub__(self, other: object) -> "Rational":
        other_value = _coerce(other)
        if other_value is None:
            return NotImplemented
        return Rational.create(
            self.numerator * other_value.denominator
            - other_value.numerator * self.denominator,
            self.denominator * other_value.denominator,
        )

    def __rsub__(self, other: object) -> "Rational":
        other_value = _coerce(other)
        if other_value is None:
            return NotImplemented
        return other_value - self

    def __mul__(self, other: object) -> "Rational":
        other_value = _coerce(other)
        if other_value is None:
            return NotImplemented
        return Rational.create(
            self.numerator * other_value.numerator,
            self.denominator * other_value.denominator,
        )

    __rmul__ = __mul__

    def __truediv__(self, other: object) -> "Rational":
        other_value = _coerce(other)
        if other_value is None:
            return NotImplemented
        if other_value.is_zero():
            raise DivisionByZeroError(f"cannot divide {self} by zero")
        return Rational.create(
            self.numerator * other_value.denominator,
            self.denominator * other_value.numerator,
        )

    def __rtruediv__(self, other: object) -> "Rational":
        other_value = _coerce(other)
        if other_value is None:
            return NotImplemented
        return other_value / self


def _coerce(value: object) -> Rational | None:
    if isinstance(value, Rational):
        return value
    if isinstance(value, int) and not isinstance(value, bool):
        return Rational(numerator=_check_range(value), denominator=1)
    return None
