"""Locale normalizers for Spanish statement exports.

Dates are normalized to ISO ``YYYY-MM-DD`` strings. Amounts have two distinct
rules that must stay separate because each format pipeline relies on its own:

- :func:`parse_plain_amount`: strip everything but digits, ``,``, ``.`` and
  ``-``, turn the first comma into a decimal point, then parse. Used by the
  credit-card statement pipeline whose amount cells are already tidy.
- :func:`parse_spanish_amount`: full Spanish notation, ``.`` is a thousands
  separator and ``,`` the decimal mark. Used by the bank export pipeline.

None of these functions raise on bad input. Dates fall back to the raw value
and amounts to ``Decimal(0)`` so that garbage shows up downstream as a visible
reconciliation mismatch instead of aborting the file.
"""

from __future__ import annotations

import re
from decimal import Decimal, InvalidOperation

# ---------------------------------------------------------------------------
# Dates
# ---------------------------------------------------------------------------

_DATE_NOISE_RE = re.compile(r"[^\d/.\-]")
_DAY_FIRST_RE = re.compile(r"(\d{1,2})[/.\-](\d{1,2})[/.\-](\d{4})")
_YEAR_FIRST_RE = re.compile(r"(\d{4})[/.\-](\d{1,2})[/.\-](\d{1,2})")


def normalize_date(raw: str) -> str:
    """Return ``raw`` as ``YYYY-MM-DD`` when it looks like a date.

    ``DD/MM/YYYY`` is tried first, then ``YYYY/MM/DD``; ``/``, ``-`` and ``.``
    are all accepted as separators and day/month are zero-padded. Anything
    else is returned unchanged.
    """

    clean = _DATE_NOISE_RE.sub("", raw)

    m = _DAY_FIRST_RE.search(clean)
    if m:
        day, month, year = m.groups()
        return f"{year}-{month.zfill(2)}-{day.zfill(2)}"

    m = _YEAR_FIRST_RE.search(clean)
    if m:
        year, month, day = m.groups()
        return f"{year}-{month.zfill(2)}-{day.zfill(2)}"

    return raw


# ---------------------------------------------------------------------------
# Amounts
# ---------------------------------------------------------------------------

_AMOUNT_NOISE_RE = re.compile(r"[^\d,.\-]")
# Longest leading numeric literal, the way a lenient float parser reads it.
_NUMBER_PREFIX_RE = re.compile(r"[+-]?(?:\d+(?:\.\d*)?|\.\d+)")


def _parse_number_prefix(text: str) -> Decimal:
    m = _NUMBER_PREFIX_RE.match(text.strip())
    if not m:
        return Decimal(0)
    try:
        return Decimal(m.group(0))
    except InvalidOperation:  # pragma: no cover - regex only admits valid literals
        return Decimal(0)


def _number_to_decimal(value: int | float) -> Decimal:
    if isinstance(value, float) and value != value:  # NaN
        return Decimal(0)
    return Decimal(str(value))


def clean_amount_text(raw: str) -> str:
    """Keep only digits, ``,``, ``.`` and ``-`` (currency symbols, spaces go)."""

    return _AMOUNT_NOISE_RE.sub("", raw)


def parse_plain_amount(raw: str | int | float | None) -> Decimal:
    """Parse an amount with the generic strip-and-replace rule.

    ``"45,30 €"`` → ``Decimal("45.30")``; unparseable input yields ``0``.
    """

    if raw is None:
        return Decimal(0)
    if isinstance(raw, (int, float)) and not isinstance(raw, bool):
        return _number_to_decimal(raw)
    cleaned = clean_amount_text(str(raw)).replace(",", ".", 1)
    return _parse_number_prefix(cleaned)


def parse_spanish_amount(raw: str | int | float | None) -> Decimal:
    """Parse Spanish notation: ``"1.234,56"`` → ``Decimal("1234.56")``.

    Numeric cells pass through unchanged; empty or unparseable input yields
    ``0``.
    """

    if raw is None:
        return Decimal(0)
    if isinstance(raw, (int, float)) and not isinstance(raw, bool):
        return _number_to_decimal(raw)
    text = str(raw)
    if not text:
        return Decimal(0)
    return _parse_number_prefix(text.replace(".", "").replace(",", ".", 1))


def format_amount(value: Decimal) -> str:
    """Render a ``Decimal`` as a comma-decimal string without rounding."""

    return format(value, "f").replace(".", ",")


__all__ = [
    "normalize_date",
    "clean_amount_text",
    "parse_plain_amount",
    "parse_spanish_amount",
    "format_amount",
]
