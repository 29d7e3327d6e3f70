"""Common-name range expansion.

Accepted form (whole string, no surrounding whitespace)::

    LETTERS DIGITS "-" LETTERS DIGITS      e.g. YDL0001-YDL0010

LETTERS are ASCII letters, DIGITS ASCII digits. Only the first prefix is
used for output; the second is checked for shape but may differ. The
zero-pad width is the literal length of the first digit run. Endpoints may
be given in either order, output is always ascending.
"""
from __future__ import annotations

import string
from typing import List, Tuple

from ..errors import MalformedRangeExpression, NumericOverflowInRange

_LETTERS = frozenset(string.ascii_letters)
_DIGITS = frozenset(string.digits)

# Numbers are limited to an unsigned 32-bit value
MAX_NUMBER = 2**32 - 1


def _take(expr: str, pos: int, charset: frozenset) -> Tuple[str, int]:
    end = pos
    while end < len(expr) and expr[end] in charset:
        end += 1
    return expr[pos:end], end


def parse_range(expr: str) -> Tuple[str, str, str, str]:
    """Split ``expr`` into (prefix1, digits1, prefix2, digits2) or raise MalformedRangeExpression."""
    pos = 0
    parts: List[str] = []
    for i, charset in enumerate((_LETTERS, _DIGITS, _LETTERS, _DIGITS)):
        token, pos = _take(expr, pos, charset)
        if not token:
            raise MalformedRangeExpression(expr)
        parts.append(token)
        if i == 1:
            if pos >= len(expr) or expr[pos] != "-":
                raise MalformedRangeExpression(expr)
            pos += 1
    if pos != len(expr):
        raise MalformedRangeExpression(expr)
    return parts[0], parts[1], parts[2], parts[3]


def _to_number(expr: str, digits: str) -> int:
    value = int(digits)
    if value > MAX_NUMBER:
        raise NumericOverflowInRange(expr, digits)
    return value


def expand(range_expr: str) -> List[str]:
    prefix, digits1, _prefix2, digits2 = parse_range(range_expr)
    width = len(digits1)
    start = _to_number(range_expr, digits1)
    end = _to_number(range_expr, digits2)
    if start > end:
        start, end = end, start
    return [f"{prefix}{i:0{width}d}" for i in range(start, end + 1)]


__all__ = ["expand", "parse_range", "MAX_NUMBER"]
