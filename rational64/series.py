"""Exact partial sums of two classic series."""
from __future__ import annotations

from typing import Iterator

from .rational import Rational

DEFAULT_E_TERMS = 11
DEFAULT_ZENO_TERMS = 19


def _check_terms(terms: int) -> None:
    if terms < 0:
        raise ValueError("terms must be non-negative")


def euler_partial_sums(terms: int = DEFAULT_E_TERMS) -> Iterator[Rational]:
    """Yield ``sum(1/k!)`` for ``k = 0..n`` with ``n`` running from 1 to *terms*.

    Factorials past ``20!`` leave the 64-bit range, so asking for more than
    20 terms ends in :class:`OverflowError`.
    """
    _check_terms(terms)
    approx = Rational(1)
    factorial = 1
    for k in range(1, terms + 1):
        factorial *= k
        approx += Rational(1, factorial)
        yield approx


def euler_approximation(terms: int = DEFAULT_E_TERMS) -> Rational:
    """Approximate Euler's number by its power series truncated after *terms*."""
    approx = Rational(1)
    for approx in euler_partial_sums(terms):
        pass
    return approx


def zeno_partial_sums(terms: int = DEFAULT_ZENO_TERMS) -> Iterator[Rational]:
    """Yield ``1/2 + 1/4 + ... + 1/2**k`` for ``k`` running from 1 to *terms*."""
    _check_terms(terms)
    total = Rational(0)
    for k in range(1, terms + 1):
        total += Rational(1, 1 << k)
        yield total


def zeno_approximation(terms: int = DEFAULT_ZENO_TERMS) -> Rational:
    """Sum the first *terms* halvings of Zeno's series, approaching one."""
    total = Rational(0)
    for total in zeno_partial_sums(terms):
        pass
    return total


__all__ = [
    "DEFAULT_E_TERMS",
    "DEFAULT_ZENO_TERMS",
    "euler_partial_sums",
    "euler_approximation",
    "zeno_partial_sums",
    "zeno_approximation",
]
