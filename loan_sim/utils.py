"""Utility functions for the loan simulator.

This module turns the free-form text typed into the simulator fields into
plain numbers. Parsing is deliberately lenient: a half-typed value such as
``"$1,2"`` or an empty field degrades to zero instead of raising, so the page
can recalculate on every keystroke.
"""

from __future__ import annotations

import math
import re
from typing import Any, Optional

DEFAULT_GROUPING = ","
DEFAULT_DECIMAL = "."

_WHITESPACE_RE = re.compile(r"\s+")
_LEADING_INT_RE = re.compile(r"^[+-]?[0-9]+")
_FLOAT_PATTERN = r"[+-]?(?:[0-9]+\.?[0-9]*|\.[0-9]+)(?:[eE][+-]?[0-9]+)?"
_LEADING_FLOAT_RE = re.compile("^" + _FLOAT_PATTERN)
_DECIMAL_RE = re.compile(_FLOAT_PATTERN)


def check_separators(grouping: str, decimal: str) -> None:
    """Raise ``ValueError`` if the separator pair cannot be told apart."""
    if not grouping or not decimal:
        raise ValueError("Grouping and decimal separators must be non-empty")
    if grouping == decimal:
        raise ValueError(
            f"Grouping and decimal separators must differ; both are {grouping!r}"
        )


def parse_currency_number(
    raw: Optional[Any],
    grouping: str = DEFAULT_GROUPING,
    decimal: str = DEFAULT_DECIMAL,
) -> float:
    """Convert a value like ``"$12,345.67"`` into ``12345.67``.

    Parameters
    ----------
    raw:
        The text to parse. ``None`` yields ``0.0``; other non-string values
        are converted with ``str()`` first.
    grouping:
        Thousands separator to strip. Defaults to a comma.
    decimal:
        Decimal separator. Defaults to a period; any other value is
        translated to a period once grouping separators are gone.

    Returns
    -------
    float
        The parsed number, or ``0.0`` if the cleaned text is empty, is not a
        plain ASCII decimal (``"1_000"`` is rejected) or is not finite.
    """
    if raw is None:
        return 0.0
    check_separators(grouping, decimal)
    text = _WHITESPACE_RE.sub("", str(raw))
    text = text.replace("$", "").replace(grouping, "")
    if decimal != DEFAULT_DECIMAL:
        text = text.replace(decimal, DEFAULT_DECIMAL)
    if not _DECIMAL_RE.fullmatch(text):
        return 0.0
    value = float(text)
    return value if math.isfinite(value) else 0.0


def parse_term(raw: Optional[Any]) -> int:
    """Read the number of periods from a form field.

    Takes the leading integer of the text (``"24 meses"`` gives 24) and
    returns 0 when there is none.
    """
    if raw is None:
        return 0
    match = _LEADING_INT_RE.match(str(raw).strip())
    return int(match.group()) if match else 0


def parse_rate(raw: Optional[Any]) -> float:
    """Read a percentage rate from a form field.

    Takes the leading decimal number of the text (``"1.5%"`` gives 1.5).
    Returns ``nan`` when nothing parses so that callers can tell an empty
    rate apart from an explicit zero.
    """
    if raw is None:
        return math.nan
    if isinstance(raw, (int, float)):
        return float(raw)
    match = _LEADING_FLOAT_RE.match(str(raw).strip())
    return float(match.group()) if match else math.nan
