"""CSV re-export of processed transactions.

Both statement formats export to the same nine-column layout the budgeting
spreadsheet imports::

    Fecha, Cantidad, Moneda, Descripción, Título, Receptor, Uso, Categoría, Subcategoría

Every field is quoted and the text starts with a UTF-8 BOM so spreadsheet
applications pick the right encoding.
"""

from __future__ import annotations

import csv
import io
from collections.abc import Iterable, Iterator, Sequence
from datetime import date

from .models import BankTransaction, ExpenseTransaction

EXPORT_HEADERS: tuple[str, ...] = (
    "Fecha",
    "Cantidad",
    "Moneda",
    "Descripción",
    "Título",
    "Receptor",
    "Uso",
    "Categoría",
    "Subcategoría",
)
CURRENCY = "EUR"
_BOM = "\ufeff"


def _card_label(card_number: str) -> str:
    return f"Iberia Card {card_number[-4:]}"


def expense_rows(transactions: Iterable[ExpenseTransaction]) -> Iterator[list[str]]:
    for t in transactions:
        yield [
            t.date,
            t.amount,
            CURRENCY,
            "",
            _card_label(t.card_number),
            t.merchant,
            "",
            t.category,
            "",
        ]


def bank_rows(transactions: Iterable[BankTransaction]) -> Iterator[list[str]]:
    for t in transactions:
        yield [
            t.date,
            t.amount,
            CURRENCY,
            t.description,
            t.title,
            t.counterparty,
            t.note,
            t.category,
            t.subcategory,
        ]


def rows_to_csv(rows: Iterable[Sequence[str]]) -> str:
    buffer = io.StringIO()
    buffer.write(_BOM)
    writer = csv.writer(buffer, quoting=csv.QUOTE_ALL, lineterminator="\n")
    writer.writerow(EXPORT_HEADERS)
    writer.writerows(rows)
    return buffer.getvalue()


def export_expenses_csv(transactions: Iterable[ExpenseTransaction]) -> str:
    return rows_to_csv(expense_rows(transactions))


def export_bank_csv(transactions: Iterable[BankTransaction]) -> str:
    return rows_to_csv(bank_rows(transactions))


def default_export_filename(prefix: str, *, today: date | None = None) -> str:
    """``<prefix>_YYYY-MM-DD.csv`` for today's date."""

    return f"{prefix}_{(today or date.today()).isoformat()}.csv"


__all__ = [
    "EXPORT_HEADERS",
    "expense_rows",
    "bank_rows",
    "rows_to_csv",
    "export_expenses_csv",
    "export_bank_csv",
    "default_export_filename",
]
