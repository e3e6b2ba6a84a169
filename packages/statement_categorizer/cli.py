"""CLI for the ``statement_categorizer`` package.

Callable command handlers (``cmd_process_expenses``/``cmd_process_ing``)
hold the command logic and return an exit status; the Typer app below wraps
them. ``.env`` is loaded from the working directory with ``python-dotenv``
before any command runs so ``DATABASE_URL`` can live there. Processing logic
lives in ``statement_categorizer.api``.
"""

from __future__ import annotations

import sys
from collections.abc import Sequence
from pathlib import Path

import typer
from dotenv import load_dotenv
from typer.models import OptionInfo

from .logging_setup import configure_logging
from .models import ShopRegistry, UploadedFile


def _read_files(paths: Sequence[Path]) -> list[UploadedFile] | None:
    files: list[UploadedFile] = []
    for path in paths:
        try:
            files.append(UploadedFile.from_path(path))
        except FileNotFoundError:
            print(f"Error: File not found: {path}", file=sys.stderr)
            return None
        except PermissionError:
            print(f"Error: Permission denied: {path}", file=sys.stderr)
            return None
    return files


def _resolve_registry(
    shops_csv: Path | None, database_url: str | None
) -> ShopRegistry | None:
    """Load the registry from ``shops_csv`` or the database; ``None`` on failure."""

    from .registry import load_shop_registry, load_shop_registry_csv

    try:
        if shops_csv is not None:
            return load_shop_registry_csv(shops_csv)
        return load_shop_registry(database_url=database_url)
    except Exception as e:
        print(f"Error: failed to load the shop registry: {e}", file=sys.stderr)
        return None


def _write_export(text: str, output: Path) -> bool:
    try:
        # The export text carries its own BOM.
        output.write_text(text, encoding="utf-8", newline="")
    except OSError as e:
        print(f"Error: could not write {output}: {e}", file=sys.stderr)
        return False
    print(f"Exported to {output}", file=sys.stderr)
    return True


def cmd_process_expenses(
    paths: Sequence[Path],
    *,
    database_url: str | None = None,
    shops_csv: Path | None = None,
    output: Path | None = None,
) -> int:
    """Process credit-card statements and print one line per transaction.

    Lines are ``"<card>\\t<date>\\t<merchant>\\t<amount>\\t<category>"`` in
    file/card/row order, followed by the batch summary. With ``output`` the
    merged transactions are also written as an export CSV.
    """

    from .api import process_multiple_expense_files
    from .errors import StatementProcessingError
    from .export import export_expenses_csv

    files = _read_files(paths)
    if files is None:
        return 1
    registry = _resolve_registry(shops_csv, database_url)
    if registry is None:
        return 1

    try:
        result = process_multiple_expense_files(files, registry=registry)
    except (StatementProcessingError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    for t in result.transactions:
        print(f"{t.card_number}\t{t.date}\t{t.merchant}\t{t.amount}\t{t.category}")
    print(
        f"Total: {result.calculated_total}€ (Expected: {result.expected_total}€) "
        f"- {'OK' if result.totals_match else 'MISMATCH'}"
    )

    if output is not None and not _write_export(
        export_expenses_csv(result.transactions), output
    ):
        return 1
    return 0


def cmd_process_ing(
    paths: Sequence[Path],
    *,
    database_url: str | None = None,
    shops_csv: Path | None = None,
    output: Path | None = None,
) -> int:
    """Process ING exports and print one line per transaction.

    Lines are ``"<date>\\t<amount>\\t<title>\\t<category>\\t<subcategory>"``.
    """

    from .api import process_multiple_bank_files
    from .errors import StatementProcessingError
    from .export import export_bank_csv

    files = _read_files(paths)
    if files is None:
        return 1
    registry = _resolve_registry(shops_csv, database_url)
    if registry is None:
        return 1

    try:
        result = process_multiple_bank_files(files, registry=registry)
    except (StatementProcessingError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    for t in result.transactions:
        print(f"{t.date}\t{t.amount}\t{t.title}\t{t.category}\t{t.subcategory}")
    account = result.account.account_number or "-"
    print(
        f"Cuenta: {account} - {result.total_transactions} transacciones, "
        f"total {result.calculated_total}€"
    )

    if output is not None and not _write_export(export_bank_csv(result.transactions), output):
        return 1
    return 0


# ---- Typer-based console interface -------------------------------------------


app = typer.Typer(
    no_args_is_help=True,
    add_completion=False,
    help=(
        "Parse Iberia Icon card statements and ING account exports, categorize "
        "every movement against the shop registry and reconcile the totals."
    ),
)

# Module-level option objects keep calls out of parameter defaults (ruff B008).
FILES_ARGUMENT = typer.Argument(
    ...,
    help="Statement files (.xls, .xlsx, .csv), processed in the given order.",
    dir_okay=False,
    file_okay=True,
    exists=False,  # the handler reports missing files itself
)
DATABASE_URL_OPTION: OptionInfo = typer.Option(
    None, "--database-url", help="Override DATABASE_URL (falls back to env var)."
)
SHOPS_CSV_OPTION: OptionInfo = typer.Option(
    None,
    "--shops-csv",
    help="Read the shop registry from an exported CSV instead of the database.",
    dir_okay=False,
)
OUTPUT_OPTION: OptionInfo = typer.Option(
    None, "--output", "-o", help="Also write the transactions as an export CSV."
)


@app.command("process-expenses")
def process_expenses_cmd(
    files: list[Path] = FILES_ARGUMENT,
    database_url: str | None = DATABASE_URL_OPTION,
    shops_csv: Path | None = SHOPS_CSV_OPTION,
    output: Path | None = OUTPUT_OPTION,
) -> None:
    """Process one or more Iberia Icon credit-card statements."""

    code = cmd_process_expenses(
        files, database_url=database_url, shops_csv=shops_csv, output=output
    )
    if code:
        raise typer.Exit(code)


@app.command("process-ing")
def process_ing_cmd(
    files: list[Path] = FILES_ARGUMENT,
    database_url: str | None = DATABASE_URL_OPTION,
    shops_csv: Path | None = SHOPS_CSV_OPTION,
    output: Path | None = OUTPUT_OPTION,
) -> None:
    """Process one or more ING account exports."""

    code = cmd_process_ing(files, database_url=database_url, shops_csv=shops_csv, output=output)
    if code:
        raise typer.Exit(code)


@app.callback()
def _root() -> None:
    """Load ``.env`` from the working directory and configure logging."""

    # override=False keeps already-set environment variables
    load_dotenv(dotenv_path=Path.cwd() / ".env", override=False)
    configure_logging()


if __name__ == "__main__":  # pragma: no cover
    # Running as a module: `python -m statement_categorizer.cli`
    app()
