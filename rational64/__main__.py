"""Print exact series approximations of e and of Zeno's paradox."""

import argparse
import logging
import sys
import tomllib
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional

from .rational import Rational
from .series import (
    DEFAULT_E_TERMS,
    DEFAULT_ZENO_TERMS,
    euler_partial_sums,
    zeno_partial_sums,
)

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="rational64",
        description="Print exact rational approximations of two classic series.",
    )
    parser.add_argument("--e-terms", type=int, help=f"Factorial terms for e (default {DEFAULT_E_TERMS})")
    parser.add_argument(
        "--zeno-terms", type=int, help=f"Halvings for Zeno's series (default {DEFAULT_ZENO_TERMS})"
    )
    parser.add_argument("--parfile", help="TOML file providing e_terms and zeno_terms")
    parser.add_argument("-v", "--verbose", action="store_true", help="Log every partial sum")
    return parser


def load_parfile(path: str) -> Dict[str, Any]:
    parfile = Path(path).expanduser()
    if not parfile.exists():
        raise FileNotFoundError(f"Parfile not found: {parfile}")
    with parfile.open("rb") as f:
        return tomllib.load(f)


def resolve_terms(option: Optional[int], params: Dict[str, Any], key: str, default: int) -> int:
    if option is not None:
        return option
    value = params.get(key, default)
    if not isinstance(value, int) or isinstance(value, bool):
        raise ValueError(f"{key} must be an integer, got {value!r}")
    return value


def last_partial_sum(name: str, partial_sums: Iterable[Rational], initial: Rational) -> Rational:
    result = initial
    for step, value in enumerate(partial_sums, start=1):
        logger.debug("%s step %d: %s", name, step, value)
        result = value
    return result


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    params: Dict[str, Any] = {}
    if args.parfile is not None:
        try:
            params = load_parfile(args.parfile)
        except (OSError, tomllib.TOMLDecodeError) as exc:
            parser.error(str(exc))
        logger.info("Loaded parameters from %s", args.parfile)

    try:
        e_terms = resolve_terms(args.e_terms, params, "e_terms", DEFAULT_E_TERMS)
        zeno_terms = resolve_terms(args.zeno_terms, params, "zeno_terms", DEFAULT_ZENO_TERMS)
        approx_e = last_partial_sum("e", euler_partial_sums(e_terms), Rational(1))
        zeno = last_partial_sum("zeno", zeno_partial_sums(zeno_terms), Rational(0))
    except (ValueError, OverflowError) as exc:
        parser.error(str(exc))

    print("Approximation of Euler's constant via power series.")
    print(f"\te ≈ {approx_e} ≈ {approx_e.value}")
    print("Exploration of Zeno's paradox approaching 1.")
    print(f"\t1 ≈ {zeno} ≈ {zeno.value}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
