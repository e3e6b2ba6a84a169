"""Adapter for single-table bank account exports (ING layout).

The export starts with a short preamble of account metadata (``Número de
cuenta:``, ``Titular:``, ``Fecha exportación:`` with the value in column 3)
followed by one movements table. The table header is located positionally
within the first :data:`HEADER_SCAN_ROWS` rows and the date, amount and
description columns are resolved by name from it, so column order does not
matter. Amounts use Spanish notation (``1.234,56``).
"""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass

from ...categorization import categorize_description
from ...description import split_description
from ...errors import HeaderNotFoundError, MissingColumnsError
from ...grid import RawGrid
from ...models import AccountInfo, BankTransaction, ShopRegistry
from ...normalizers import format_amount, normalize_date, parse_spanish_amount

HEADER_SCAN_ROWS = 10

# Upper-cased substrings that identify each required column.
DATE_TOKENS: tuple[str, ...] = ("FECHA", "F. VALOR")
AMOUNT_TOKENS: tuple[str, ...] = ("IMPORTE",)
DESCRIPTION_TOKENS: tuple[str, ...] = ("DESCRIPCI",)

_ANY_HEADER_TOKENS = DATE_TOKENS + AMOUNT_TOKENS + DESCRIPTION_TOKENS

_ACCOUNT_LABELS: tuple[tuple[str, str], ...] = (
    ("Número de cuenta:", "account_number"),
    ("Titular:", "account_holder"),
    ("Fecha exportación:", "export_date"),
)
_ACCOUNT_VALUE_COL = 3


@dataclass(frozen=True, slots=True)
class ColumnMap:
    """Resolved positions of the required columns in the header row."""

    header_row_index: int
    date: int
    amount: int
    description: int


# ---------------------------------------------------------------------------
# Header location and column resolution
# ---------------------------------------------------------------------------


def _find_column(cells: list[str], tokens: tuple[str, ...]) -> int | None:
    for col, text in enumerate(cells):
        upper = text.upper()
        if any(token in upper for token in tokens):
            return col
    return None


def _looks_like_header(cells: list[str]) -> bool:
    return _find_column(cells, _ANY_HEADER_TOKENS) is not None


_REQUIRED_COLUMNS: tuple[tuple[str, tuple[str, ...]], ...] = (
    ("fecha", DATE_TOKENS),
    ("importe", AMOUNT_TOKENS),
    ("descripción", DESCRIPTION_TOKENS),
)


def resolve_columns(grid: RawGrid, header_row_index: int) -> ColumnMap:
    """Resolve required column indices from the header row.

    Raises :class:`MissingColumnsError` listing every column not found.
    """

    cells = grid.row_texts(header_row_index)
    found: dict[str, int] = {}
    missing: list[str] = []
    for name, tokens in _REQUIRED_COLUMNS:
        col = _find_column(cells, tokens)
        if col is None:
            missing.append(name)
        else:
            found[name] = col
    if missing:
        raise MissingColumnsError(missing)

    return ColumnMap(
        header_row_index=header_row_index,
        date=found["fecha"],
        amount=found["importe"],
        description=found["descripción"],
    )


def find_header_row(grid: RawGrid) -> int | None:
    """Index of the movements header within the scan window, or ``None``.

    Preamble lines such as ``Fecha exportación:`` also mention a header token,
    so a row that resolves all required columns is preferred; otherwise the
    first row mentioning any token is returned.
    """

    first_candidate: int | None = None
    for i in range(min(HEADER_SCAN_ROWS, len(grid))):
        cells = grid.row_texts(i)
        if not _looks_like_header(cells):
            continue
        if first_candidate is None:
            first_candidate = i
        if all(
            _find_column(cells, tokens) is not None
            for tokens in (DATE_TOKENS, AMOUNT_TOKENS, DESCRIPTION_TOKENS)
        ):
            return i
    return first_candidate


def locate_columns(grid: RawGrid) -> ColumnMap:
    header = find_header_row(grid)
    if header is None:
        raise HeaderNotFoundError("No se encontró el encabezado de datos en el archivo ING")
    return resolve_columns(grid, header)


# ---------------------------------------------------------------------------
# Account metadata
# ---------------------------------------------------------------------------


def read_account_info(grid: RawGrid) -> AccountInfo:
    values: dict[str, str] = {}
    for i in range(min(HEADER_SCAN_ROWS, len(grid))):
        joined = " ".join(grid.row_texts(i))
        for label, attr in _ACCOUNT_LABELS:
            if label in joined and attr not in values:
                values[attr] = grid.text(i, _ACCOUNT_VALUE_COL).strip()
    return AccountInfo(**values)


# ---------------------------------------------------------------------------
# Row mapping
# ---------------------------------------------------------------------------


def map_bank_row(
    grid: RawGrid, index: int, columns: ColumnMap, registry: ShopRegistry
) -> BankTransaction | None:
    raw_date = grid.text(index, columns.date).strip()
    raw_amount = grid.cell(index, columns.amount)
    description = " ".join(grid.text(index, columns.description).split())

    if not raw_date and not description and not grid.text(index, columns.amount).strip():
        return None

    amount = parse_spanish_amount(raw_amount)
    if amount == 0:
        return None

    # Keep the emitted record complete: date and title must not be empty.
    if not raw_date or not description:
        return None

    parts = split_description(description)
    category, subcategory = categorize_description(parts, description, registry)
    return BankTransaction(
        date=normalize_date(raw_date),
        amount=format_amount(amount),
        description=description,
        title=parts.title,
        counterparty=parts.counterparty,
        note=parts.note,
        category=category,
        subcategory=subcategory,
    )


def iter_bank_transactions(
    grid: RawGrid, columns: ColumnMap, registry: ShopRegistry
) -> Iterator[BankTransaction]:
    for i in range(columns.header_row_index + 1, len(grid)):
        tx = map_bank_row(grid, i, columns, registry)
        if tx is not None:
            yield tx


__all__ = [
    "HEADER_SCAN_ROWS",
    "ColumnMap",
    "find_header_row",
    "resolve_columns",
    "locate_columns",
    "read_account_info",
    "map_bank_row",
    "iter_bank_transactions",
]
