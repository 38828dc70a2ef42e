"""Exact rational numbers with 64-bit components and NumPy interoperability."""
from __future__ import annotations

import math
import numbers
import operator
import re
from fractions import Fraction
from typing import Any, Optional, Tuple, Union

import numpy as np

NumberLike = Union["Rational", Fraction, numbers.Real, str]

DEFAULT_MAX_DENOMINATOR = 10**6

_INT64 = np.iinfo(np.int64)
INT64_MIN = int(_INT64.min)
INT64_MAX = int(_INT64.max)

_RATIONAL_FORMAT = re.compile(
    r"""
    \A\s*
    (?P<num>[-+]?\d+)             # numerator, optionally signed
    (?:/(?P<den>[-+]?\d+))?       # optional denominator, no inner spaces
    \s*\Z
    """,
    re.VERBOSE,
)

_FLOAT_FORMAT_TYPES = "eEfFgGn%"

_NO_DENOMINATOR = object()


def _ensure_int(value: Any, *, name: str) -> int:
    """Convert *value* to ``int`` when it represents an integer."""
    if isinstance(value, numbers.Integral):
        return int(value)
    raise TypeError(f"{name} must be an integer, got {type(value)!r}")


def _check_range(num: int, den: int) -> None:
    if not (INT64_MIN <= num <= INT64_MAX and INT64_MIN <= den <= INT64_MAX):
        raise OverflowError(f"{num}/{den} does not fit in 64-bit components")


class Rational:
    """Exact rational number kept in lowest terms with a positive denominator.

    Both components are bounded to the signed 64-bit range. Arithmetic is
    carried out exactly and the normalized result is range checked, so an
    operation either yields the exact value or raises :class:`OverflowError`.

    Instances are immutable: ``a += b`` rebinds ``a`` to a new value and
    leaves every other reference to the old value untouched.
    """

    __slots__ = ("_numerator", "_denominator")
    __array_priority__ = 1000.0  # Prefer Rational semantics in NumPy expressions.

    def __init__(self, numerator: Any, denominator: Any = _NO_DENOMINATOR) -> None:
        num = _ensure_int(numerator, name="numerator")
        if denominator is _NO_DENOMINATOR:
            den = 1
        else:
            den = _ensure_int(denominator, name="denominator")
            if den == 0:
                raise ValueError("denominator must be non-zero")
            num, den = self._normalize(num, den)

        _check_range(num, den)
        self._numerator = num
        self._denominator = den

    # ------------------------------------------------------------------
    # Constructors
    @classmethod
    def _from_normalized(cls, num: int, den: int) -> "Rational":
        """Wrap a pair that is already in lowest terms with ``den > 0``."""
        _check_range(num, den)
        instance = object.__new__(cls)
        instance._numerator = num
        instance._denominator = den
        return instance

    @classmethod
    def from_float(
        cls, value: float, *, max_denominator: Optional[int] = None
    ) -> "Rational":
        """Return the best rational approximation of *value*."""
        if isinstance(value, bool):  # bool is a subclass of int; treat explicitly.
            return cls(int(value))
        if math.isnan(value) or math.isinf(value):
            raise ValueError("cannot convert NaN or infinity to Rational")
        if max_denominator is None:
            max_denominator = DEFAULT_MAX_DENOMINATOR
        if max_denominator < 1:
            raise ValueError("max_denominator must be >= 1")
        frac = Fraction.from_float(value).limit_denominator(max_denominator)
        return cls(frac.numerator, frac.denominator)

    @classmethod
    def from_fraction(cls, value: Fraction) -> "Rational":
        """Create a :class:`Rational` with exactly the value of *value*."""
        return cls._from_normalized(value.numerator, value.denominator)

    @classmethod
    def from_string(cls, text: str) -> "Rational":
        """Parse the ``"numerator/denominator"`` form produced by :func:`str`.

        The grammar is ``[sign]digits[/[sign]digits]``, so a bare integer such
        as ``"-7"`` and a signed denominator such as ``"4/-6"`` are accepted.
        """
        match = _RATIONAL_FORMAT.match(text)
        if match is None:
            raise ValueError(f"invalid literal for Rational: {text!r}")
        num = int(match.group("num"))
        den = match.group("den")
        if den is None:
            return cls(num)
        return cls(num, int(den))

    @classmethod
    def rationalize(
        cls, value: NumberLike, *, max_denominator: Optional[int] = None
    ) -> "Rational":
        """Coerce a numeric-like value into :class:`Rational`.

        Exact inputs (integers, fractions, strings) are converted exactly
        unless *max_denominator* asks for an approximation; floats are always
        approximated.
        """
        if isinstance(value, Rational):
            if max_denominator is None or value._denominator <= max_denominator:
                return value
            return value.limit_denominator(max_denominator)
        if isinstance(value, Fraction):
            if max_denominator is not None:
                value = value.limit_denominator(max_denominator)
            return cls.from_fraction(value)
        if isinstance(value, numbers.Integral):
            return cls(int(value))
        if isinstance(value, np.generic):
            return cls.rationalize(value.item(), max_denominator=max_denominator)
        if isinstance(value, str):
            return cls.rationalize(cls.from_string(value), max_denominator=max_denominator)
        if isinstance(value, numbers.Real):
            return cls.from_float(float(value), max_denominator=max_denominator)
        raise TypeError(f"Cannot convert {type(value)!r} to Rational")

    # ------------------------------------------------------------------
    # Properties and helpers
    @property
    def numerator(self) -> int:
        return self._numerator

    @property
    def denominator(self) -> int:
        return self._denominator

    @property
    def value(self) -> float:
        """Floating point approximation, for display only."""
        return self._numerator / self._denominator

    def as_fraction(self) -> Fraction:
        """Return a :class:`Fraction` with the same value."""
        return Fraction(self._numerator, self._denominator)

    def limit_denominator(self, max_denominator: int = DEFAULT_MAX_DENOMINATOR) -> "Rational":
        """Return the closest :class:`Rational` whose denominator is at most *max_denominator*."""
        if max_denominator < 1:
            raise ValueError("max_denominator must be >= 1")
        return Rational.from_fraction(self.as_fraction().limit_denominator(max_denominator))

    def increment(self) -> "Rational":
        """Return this value plus one."""
        # n + d shares no factor with d when n/d is in lowest terms.
        return Rational._from_normalized(
            self._numerator + abs(self._denominator), self._denominator
        )

    def decrement(self) -> "Rational":
        """Return this value minus one."""
        return Rational._from_normalized(
            self._numerator - abs(self._denominator), self._denominator
        )

    # ------------------------------------------------------------------
    # Numeric protocol
    def __float__(self) -> float:
        return self.value

    def __int__(self) -> int:
        if self._numerator < 0:
            return -(-self._numerator // self._denominator)
        return self._numerator // self._denominator

    def __bool__(self) -> bool:
        return self._numerator != 0

    def __copy__(self) -> "Rational":
        return self

    def __deepcopy__(self, memo) -> "Rational":
        return self

    # ------------------------------------------------------------------
    # Representation
    def __repr__(self) -> str:
        return f"Rational({self._numerator}, {self._denominator})"

    def __str__(self) -> str:
        return f"{self._numerator}/{self._denominator}"

    def __format__(self, format_spec: str) -> str:
        if format_spec in ("", "r", "R"):
            return str(self)
        if format_spec[-1] in _FLOAT_FORMAT_TYPES:
            return format(float(self), format_spec)
        return format(str(self), format_spec)

    # ------------------------------------------------------------------
    # Internal helpers
    @staticmethod
    def _normalize(num: int, den: int) -> Tuple[int, int]:
        gcd = math.gcd(num, den)
        num //= gcd
        den //= gcd
        if den < 0:
            num, den = -num, -den
        return num, den

    def _coerce_scalar(self, value: Any) -> "Rational":
        if isinstance(value, Rational):
            return value
        if isinstance(value, Fraction):
            return Rational.from_fraction(value)
        if isinstance(value, numbers.Integral):
            return Rational(int(value))
        raise TypeError(f"Cannot interpret {type(value)!r} as Rational")

    def _binary_operation(self, other: Any, op):
        if isinstance(other, np.ndarray):
            vectorised = np.vectorize(
                lambda x: op(self, self._coerce_scalar(x)),
                otypes=[object],
            )
            return vectorised(other)
        try:
            other_rat = self._coerce_scalar(other)
        except TypeError:
            return NotImplemented
        return op(self, other_rat)

    def _is_negative(self) -> bool:
        return (self._numerator < 0) != (self._denominator < 0)

    def _cross_products(self, other: "Rational") -> Tuple[int, int]:
        return (
            abs(self._numerator * other._denominator),
            abs(self._denominator * other._numerator),
        )

    def _coerce_power(self, value: Any) -> int:
        if isinstance(value, numbers.Integral):
            return int(value)
        if isinstance(value, Rational):
            if value._denominator != 1:
                raise ValueError("Exponent must be an integer")
            return value._numerator
        if isinstance(value, np.generic):
            return self._coerce_power(value.item())
        raise TypeError("Unsupported exponent type")

    # ------------------------------------------------------------------
    # Arithmetic operators
    def __add__(self, other: Any) -> Any:
        return self._binary_operation(other, _add)

    def __radd__(self, other: Any) -> Any:
        return self._binary_operation(other, lambda a, b: _add(b, a))

    def __sub__(self, other: Any) -> Any:
        return self._binary_operation(other, _sub)

    def __rsub__(self, other: Any) -> Any:
        return self._binary_operation(other, lambda a, b: _sub(b, a))

    def __mul__(self, other: Any) -> Any:
        return self._binary_operation(other, _mul)

    def __rmul__(self, other: Any) -> Any:
        return self._binary_operation(other, lambda a, b: _mul(b, a))

    def __truediv__(self, other: Any) -> Any:
        return self._binary_operation(other, _truediv)

    def __rtruediv__(self, other: Any) -> Any:
        return self._binary_operation(other, lambda a, b: _truediv(b, a))

    def __pow__(self, exponent: Any) -> Any:
        if isinstance(exponent, np.ndarray):
            vectorised = np.vectorize(lambda x: self.__pow__(x), otypes=[object])
            return vectorised(exponent)
        try:
            power = self._coerce_power(exponent)
        except TypeError:
            return NotImplemented

        num, den = self._numerator, self._denominator
        if power < 0:
            if num == 0:
                raise ZeroDivisionError("0 cannot be raised to a negative power")
            num, den, power = den, num, -power
        # Reject results far outside int64 before building huge integers.
        for base in (num, den):
            if (abs(base).bit_length() - 1) * power > 63:
                raise OverflowError(f"{self} ** {exponent} does not fit in 64-bit components")
        return Rational(num ** power, den ** power)

    def __neg__(self) -> "Rational":
        return Rational._from_normalized(-self._numerator, self._denominator)

    def __pos__(self) -> "Rational":
        # Unary plus yields the magnitude, matching abs().
        return abs(self)

    def __abs__(self) -> "Rational":
        return Rational._from_normalized(abs(self._numerator), abs(self._denominator))

    # ------------------------------------------------------------------
    # Comparisons
    def __eq__(self, other: Any) -> bool:
        try:
            other_rat = self._coerce_scalar(other)
        except TypeError:
            return NotImplemented
        if self._is_negative() != other_rat._is_negative():
            return False
        left, right = self._cross_products(other_rat)
        return left == right

    def __lt__(self, other: Any) -> bool:
        try:
            other_rat = self._coerce_scalar(other)
        except TypeError:
            return NotImplemented
        left_neg = self._is_negative()
        if left_neg != other_rat._is_negative():
            return left_neg
        left, right = self._cross_products(other_rat)
        return left > right if left_neg else left < right

    def __gt__(self, other: Any) -> bool:
        try:
            other_rat = self._coerce_scalar(other)
        except TypeError:
            return NotImplemented
        return other_rat < self

    def __le__(self, other: Any) -> bool:
        greater = self.__gt__(other)
        if greater is NotImplemented:
            return NotImplemented
        return not greater

    def __ge__(self, other: Any) -> bool:
        less = self.__lt__(other)
        if less is NotImplemented:
            return NotImplemented
        return not less

    def __hash__(self) -> int:
        return hash(self.as_fraction())

    # ------------------------------------------------------------------
    # NumPy interoperability
    _UFUNC_DISPATCH = {
        np.add: operator.add,
        np.subtract: operator.sub,
        np.multiply: operator.mul,
        np.divide: operator.truediv,
        np.true_divide: operator.truediv,
        np.negative: operator.neg,
        np.positive: operator.pos,
        np.absolute: abs,
        np.power: operator.pow,
        np.equal: operator.eq,
        np.not_equal: operator.ne,
        np.less: operator.lt,
        np.less_equal: operator.le,
        np.greater: operator.gt,
        np.greater_equal: operator.ge,
    }
    # Results when an operand has no exact Rational form.
    _UFUNC_UNRELATED = {
        np.equal: False,
        np.not_equal: True,
    }

    def __array_ufunc__(self, ufunc, method, *inputs, **kwargs):
        if method != "__call__":
            return NotImplemented
        if kwargs.get("out") is not None:
            raise NotImplementedError("`out` argument is not supported for Rational ufuncs")
        op = self._UFUNC_DISPATCH.get(ufunc)
        if op is None:
            return NotImplemented

        coerced = []
        has_array = False
        try:
            for value in inputs:
                if isinstance(value, Rational):
                    coerced.append(value)
                elif isinstance(value, np.ndarray):
                    vectorised = np.vectorize(lambda x: self._coerce_scalar(x), otypes=[object])
                    coerced.append(vectorised(value))
                    has_array = True
                else:
                    coerced.append(self._coerce_scalar(value))
        except TypeError:
            if ufunc in self._UFUNC_UNRELATED:
                return self._UFUNC_UNRELATED[ufunc]
            raise
        if has_array:
            vectorised = np.vectorize(lambda *args: op(*args), otypes=[object])
            return vectorised(*coerced)
        return op(*coerced)


def _add(a: Rational, b: Rational) -> Rational:
    return Rational(
        a._numerator * b._denominator + a._denominator * b._numerator,
        a._denominator * b._denominator,
    )


def _sub(a: Rational, b: Rational) -> Rational:
    return Rational(
        a._numerator * b._denominator - a._denominator * b._numerator,
        a._denominator * b._denominator,
    )


def _mul(a: Rational, b: Rational) -> Rational:
    return Rational(
        a._numerator * b._numerator,
        a._denominator * b._denominator,
    )


def _truediv(a: Rational, b: Rational) -> Rational:
    if b._numerator == 0:
        raise ZeroDivisionError("division by zero")
    return Rational(
        a._numerator * b._denominator,
        a._denominator * b._numerator,
    )


def rationalize(value: NumberLike, *, max_denominator: Optional[int] = None) -> Rational:
    """Public helper to convert *value* into :class:`Rational`."""

    return Rational.rationalize(value, max_denominator=max_denominator)


def as_rational_array(
    values: Any,
    *,
    max_denominator: Optional[int] = None,
    copy: bool = True,
) -> "np.ndarray":
    """Return a ``numpy.ndarray`` of :class:`Rational` values.

    ``values`` can be any iterable containing numeric-like entries or an existing
    NumPy array. When ``copy`` is ``False`` and ``values`` is already an object
    array holding only :class:`Rational` entries, it is returned unchanged.
    """

    if isinstance(values, np.ndarray):
        array = values.copy() if copy else values
        if array.dtype == object and all(isinstance(item, Rational) for item in array.flat):
            return array
        vectorised = np.vectorize(
            lambda item: Rational.rationalize(item, max_denominator=max_denominator),
            otypes=[object],
        )
        return vectorised(array)

    if isinstance(values, (list, tuple)):
        coerced = [
            Rational.rationalize(item, max_denominator=max_denominator) for item in values
        ]
        return np.array(coerced, dtype=object)

    return as_rational_array(list(values), max_denominator=max_denominator, copy=copy)


def zeros(length: int) -> "np.ndarray":
    """Return a one-dimensional array of length ``length`` filled with zeros."""

    if length < 0:
        raise ValueError("length must be non-negative")
    return as_rational_array([Rational(0) for _ in range(length)])


def zeros_like(values: Any) -> "np.ndarray":
    """Return a zero-filled array that matches the shape of ``values``."""

    shape = np.shape(values)
    array = np.empty(shape, dtype=object)
    for index in np.ndindex(shape):
        array[index] = Rational(0)
    return array


__all__ = [
    "Rational",
    "rationalize",
    "DEFAULT_MAX_DENOMINATOR",
    "INT64_MIN",
    "INT64_MAX",
    "as_rational_array",
    "zeros",
    "zeros_like",
]
