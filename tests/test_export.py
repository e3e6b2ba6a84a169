import csv
import io
from datetime import date

from statement_categorizer.export import (
    EXPORT_HEADERS,
    default_export_filename,
    export_bank_csv,
    export_expenses_csv,
)
from statement_categorizer.models import BankTransaction, ExpenseTransaction


def _read(text: str) -> list[list[str]]:
    assert text.startswith("\ufeff")
    return list(csv.reader(io.StringIO(text[1:])))


def test_expense_export_layout() -> None:
    text = export_expenses_csv(
        [ExpenseTransaction("****1234", "2024-03-01", "MERCADONA", "45,30", "Alimentación")]
    )

    assert text.splitlines()[1] == (
        '"2024-03-01","45,30","EUR","","Iberia Card 1234","MERCADONA","","Alimentación",""'
    )
    header, row = _read(text)
    assert tuple(header) == EXPORT_HEADERS


def test_bank_export_carries_the_split_description() -> None:
    tx = BankTransaction(
        date="2024-03-04",
        amount="-19,99",
        description='PAGO EN FNAC "CALLAO"',
        title="PAGO EN",
        counterparty='FNAC "CALLAO"',
        note="",
        category="Ocio",
        subcategory="Otros gastos (otros)",
    )
    [_header, row] = _read(export_bank_csv([tx]))
    assert row == [
        "2024-03-04",
        "-19,99",
        "EUR",
        'PAGO EN FNAC "CALLAO"',
        "PAGO EN",
        'FNAC "CALLAO"',
        "",
        "Ocio",
        "Otros gastos (otros)",
    ]


def test_empty_export_still_has_header() -> None:
    assert _read(export_expenses_csv([])) == [list(EXPORT_HEADERS)]


def test_default_export_filename() -> None:
    assert default_export_filename("gastos", today=date(2024, 3, 10)) == "gastos_2024-03-10.csv"
