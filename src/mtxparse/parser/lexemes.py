"""Primitive lexemes shared by the shape and entry recognizers."""

from __future__ import annotations

import re

from .errors import MalformedNumber

_DIGITS = "[0-9]"

SIGN = r"[+-]"
EXP = rf"[eE]{SIGN}?{_DIGITS}+"
# Alternatives are ordered so "3.", ".5" and "5" match but a lone "." does not.
NUMBER = rf"(?:{_DIGITS}+\.{_DIGITS}*|{_DIGITS}*\.{_DIGITS}+|{_DIGITS}+)(?:{EXP})?"
# inf / NaN are exact-case whole tokens.
REAL = rf"{SIGN}?(?:inf|NaN|{NUMBER})"

DIMENSION_RE = re.compile(rf"{_DIGITS}+")
REAL_RE = re.compile(REAL)

# Characters that can open a Dimension or Real token.
_ENTRY_START_RE = re.compile(r"[0-9+\-.iN]")


def parse_dimension(token: str) -> int:
    """Parse a non-negative integer token (digits only, no sign)."""
    if not is_dimension(token):
        raise MalformedNumber(f"invalid dimension {token!r}: expected one or more digits")
    try:
        return int(token)
    except ValueError as exc:
        # Digits-only tokens still fail past sys.get_int_max_str_digits().
        raise MalformedNumber(f"dimension {token[:20]!r}... has too many digits to convert") from exc


def parse_real(token: str) -> float:
    """Parse a real-number token.

    Overflow is not an error here: ``1e999`` becomes ``inf``.
    """
    if not is_real(token):
        raise MalformedNumber(f"invalid real number {token!r}")
    return float(token)


def is_dimension(token: str) -> bool:
    return DIMENSION_RE.fullmatch(token) is not None


def is_real(token: str) -> bool:
    return REAL_RE.fullmatch(token) is not None


def can_start_entry(token: str) -> bool:
    return _ENTRY_START_RE.match(token) is not None
