"""Exact 64-bit rational numbers."""

from .rational import (
    DEFAULT_MAX_DENOMINATOR,
    INT64_MAX,
    INT64_MIN,
    Rational,
    as_rational_array,
    rationalize,
    zeros,
    zeros_like,
)
from .series import euler_approximation, zeno_approximation

__all__ = [
    "Rational",
    "rationalize",
    "DEFAULT_MAX_DENOMINATOR",
    "INT64_MIN",
    "INT64_MAX",
    "as_rational_array",
    "zeros",
    "zeros_like",
    "euler_approximation",
    "zeno_approximation",
]
