"""Adapter for multi-card credit-card statements (Iberia Icon layout).

The statement is a semi-structured sheet: for every card there is a marker
row (column 0 mentions both ``IBERIA`` and ``ICON``, column 2 holds the card
number), followed within a few rows by a transaction table header::

    Nº | FECHA OPERACIÓN | COMERCIO | ... | IMPORTE EUROS

Transaction rows carry a sequence number in column 0, the date in column 1,
the merchant in column 2 and the amount in column 4. Summary rows (``TOTAL``,
``DEUDA``) and blank separators are interleaved and skipped. Somewhere in the
sheet a ``TOTAL ... CARGAR`` row states the amount charged, used only for
reconciliation.

Scanners return empty results/``None`` when nothing is found; the caller
decides what is fatal (:func:`find_card_sections` is the raising wrapper).
"""

from __future__ import annotations

import re
from collections.abc import Iterator
from decimal import Decimal

from ...categorization import categorize_merchant
from ...errors import NoSectionsFoundError
from ...grid import RawGrid
from ...models import CardSection, ExpenseTransaction, ShopRegistry
from ...normalizers import (
    clean_amount_text,
    format_amount,
    normalize_date,
    parse_plain_amount,
)

CARD_MARKER_TOKENS: tuple[str, ...] = ("IBERIA", "ICON")
# "operaci" also matches mis-decoded variants such as "operaciÃ³n".
HEADER_TOKENS: tuple[str, ...] = ("fecha", "operaci", "comercio", "importe", "euros")
HEADER_SCAN_ROWS = 10
SUMMARY_TOKENS: tuple[str, ...] = ("total", "deuda")
CONTROL_TOTAL_TOKENS: tuple[str, ...] = ("TOTAL", "CARGAR")

_SEQUENCE_RE = re.compile(r"^\d+$")
_ZERO_AMOUNTS = frozenset({"", "0", "0.00"})

# Column positions inside a card block.
_COL_SEQUENCE = 0
_COL_DATE = 1
_COL_MERCHANT = 2
_COL_AMOUNT = 4


# ---------------------------------------------------------------------------
# Section and control-total locators
# ---------------------------------------------------------------------------


def is_card_marker(grid: RawGrid, index: int) -> bool:
    if grid.width(index) <= 2:
        return False
    label = grid.text(index, 0).upper()
    if not all(token in label for token in CARD_MARKER_TOKENS):
        return False
    return bool(grid.text(index, 2).strip())


def is_transaction_header(grid: RawGrid, index: int) -> bool:
    if grid.width(index) < 5:
        return False
    joined = "|".join(text.lower() for text in grid.row_texts(index))
    return all(token in joined for token in HEADER_TOKENS)


def find_header_after(grid: RawGrid, marker_index: int) -> int | None:
    """Index of the first transaction header within the rows after a marker."""

    stop = min(marker_index + 1 + HEADER_SCAN_ROWS, len(grid))
    for j in range(marker_index + 1, stop):
        if is_transaction_header(grid, j):
            return j
    return None


def locate_card_sections(grid: RawGrid) -> list[CardSection]:
    """Return every card block in row order (possibly empty)."""

    sections: list[CardSection] = []
    for i in range(len(grid)):
        if not is_card_marker(grid, i):
            continue
        header = find_header_after(grid, i)
        if header is None:
            continue
        # Two markers sharing one header would yield overlapping ranges.
        if sections and header <= sections[-1].header_row_index:
            continue
        sections.append(
            CardSection(card_identifier=grid.text(i, 2).strip(), header_row_index=header)
        )
    return sections


def find_card_sections(grid: RawGrid) -> list[CardSection]:
    sections = locate_card_sections(grid)
    if not sections:
        raise NoSectionsFoundError("Could not find any IBERIA ICON cards in the file")
    return sections


def find_control_total(grid: RawGrid) -> Decimal | None:
    """Return the declared ``TOTAL ... CARGAR`` amount, or ``None`` when absent."""

    for i in range(len(grid)):
        if grid.width(i) <= 2:
            continue
        label = grid.text(i, 2).upper()
        if not all(token in label for token in CONTROL_TOTAL_TOKENS):
            continue
        raw = grid.text(i, 4)
        if raw.strip():
            return parse_plain_amount(raw)
    return None


# ---------------------------------------------------------------------------
# Row mapping
# ---------------------------------------------------------------------------


def section_row_range(
    grid: RawGrid, sections: list[CardSection], position: int
) -> range:
    start = sections[position].header_row_index + 1
    if position + 1 < len(sections):
        return range(start, sections[position + 1].header_row_index)
    return range(start, len(grid))


def _is_skippable(first_cell: str) -> bool:
    if not first_cell:
        return True
    if CARD_MARKER_TOKENS[0] in first_cell.upper():
        return True
    lowered = first_cell.lower()
    return any(token in lowered for token in SUMMARY_TOKENS)


def map_card_row(
    grid: RawGrid, index: int, card_number: str, registry: ShopRegistry
) -> ExpenseTransaction | None:
    """Map one grid row to a transaction, or ``None`` when it is not one."""

    sequence = grid.text(index, _COL_SEQUENCE).strip()
    if _is_skippable(sequence):
        return None

    raw_date = grid.text(index, _COL_DATE).strip()
    merchant = grid.text(index, _COL_MERCHANT).strip()
    raw_amount = grid.text(index, _COL_AMOUNT).strip()

    if not raw_date or not merchant or not raw_amount:
        return None
    if "undefined" in (raw_date, merchant, raw_amount):
        return None
    if not _SEQUENCE_RE.match(sequence):
        return None

    cleaned = clean_amount_text(raw_amount)
    if cleaned in _ZERO_AMOUNTS:
        return None

    return ExpenseTransaction(
        card_number=card_number,
        date=normalize_date(raw_date),
        merchant=merchant,
        amount=format_amount(parse_plain_amount(cleaned)),
        category=categorize_merchant(merchant, registry),
    )


def iter_card_transactions(
    grid: RawGrid, sections: list[CardSection], registry: ShopRegistry
) -> Iterator[ExpenseTransaction]:
    """Yield accepted transactions for every section, in grid order."""

    for position, section in enumerate(sections):
        for i in section_row_range(grid, sections, position):
            tx = map_card_row(grid, i, section.card_identifier, registry)
            if tx is not None:
                yield tx


__all__ = [
    "HEADER_SCAN_ROWS",
    "is_card_marker",
    "is_transaction_header",
    "find_header_after",
    "locate_card_sections",
    "find_card_sections",
    "find_control_total",
    "section_row_range",
    "map_card_row",
    "iter_card_transactions",
]
