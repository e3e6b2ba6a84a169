"""Public processing API for ``statement_categorizer``.

Pipeline per file: extract the raw grid → locate sections/columns and the
control total → map rows to categorized transactions → sum and reconcile.
Everything after the grid extraction is pure and synchronous.

Batches fetch the shop registry once (unless the caller injects one) so every
file is categorized against the same snapshot, process files strictly in
order, and fail as a whole when any file fails: the aggregate error names
every failing file and no partial results are returned.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable, Sequence
from decimal import Decimal

from .errors import BatchProcessingError, NoTransactionsFoundError, StatementProcessingError
from .grid import RawGrid, extract_grid
from .ingest.adapters import iberia_card_statement as card_adapter
from .ingest.adapters import ing_account_export as bank_adapter
from .logging_setup import get_logger
from .models import (
    BankProcessingResult,
    ProcessingResult,
    ShopRegistry,
    UploadedFile,
)
from .reconcile import merge_bank_results, merge_results, sum_amounts, validate_total
from .registry import load_shop_registry

_logger = get_logger("statement_categorizer.api")

_CARD_BATCH_HINT = (
    "Please ensure all files are valid credit card extracts with the same format."
)
_BANK_BATCH_HINT = "Asegúrate de que todos los archivos son extractos ING válidos."


# ---------------------------------------------------------------------------
# Format A: credit-card statements
# ---------------------------------------------------------------------------


def process_card_grid(grid: RawGrid, registry: ShopRegistry) -> ProcessingResult:
    """Process an already extracted credit-card statement grid.

    Raises ``NoSectionsFoundError`` when no card block exists and
    ``NoTransactionsFoundError`` when every row was rejected.
    """

    sections = card_adapter.find_card_sections(grid)
    expected_total = card_adapter.find_control_total(grid) or Decimal(0)

    transactions = tuple(card_adapter.iter_card_transactions(grid, sections, registry))
    if not transactions:
        raise NoTransactionsFoundError("No valid transactions found in the file")

    calculated_total = sum_amounts(t.amount_value for t in transactions)
    totals_match = validate_total(calculated_total, expected_total)

    _logger.info(
        "Processed %d transactions from %d cards. Total: %s€%s",
        len(transactions),
        len(sections),
        calculated_total,
        f" (Expected: {expected_total}€)" if expected_total > 0 else "",
    )
    return ProcessingResult(
        transactions=transactions,
        calculated_total=calculated_total,
        expected_total=expected_total,
        totals_match=totals_match,
    )


def process_expense_file(
    file: UploadedFile,
    registry: ShopRegistry | None = None,
    *,
    database_url: str | None = None,
) -> ProcessingResult:
    """Process one credit-card statement file.

    When ``registry`` is omitted it is loaded from the database.
    """

    if registry is None:
        registry = load_shop_registry(database_url=database_url)
    return process_card_grid(extract_grid(file), registry)


def process_multiple_expense_files(
    files: Iterable[UploadedFile],
    *,
    registry: ShopRegistry | None = None,
    database_url: str | None = None,
) -> ProcessingResult:
    """Process a batch of credit-card statements and merge the results.

    The merged ``totals_match`` uses the strict batch tolerance (``< 0.01``).
    """

    batch = _require_files(files)
    if registry is None:
        registry = load_shop_registry(database_url=database_url)
    snapshot = registry

    results = _run_batch(
        batch,
        lambda f: process_expense_file(f, snapshot),
        failure_message="Failed to process the following files: {names}. " + _CARD_BATCH_HINT,
    )
    merged = merge_results(results)
    _logger.info(
        "Processed %d files: %d transactions, total %s€ (expected %s€, match=%s)",
        len(results),
        len(merged.transactions),
        merged.calculated_total,
        merged.expected_total,
        merged.totals_match,
    )
    return merged


# ---------------------------------------------------------------------------
# Format B: bank account exports
# ---------------------------------------------------------------------------


def process_bank_grid(grid: RawGrid, registry: ShopRegistry) -> BankProcessingResult:
    """Process an already extracted bank export grid.

    Raises ``HeaderNotFoundError``/``MissingColumnsError`` when the movements
    table cannot be located and ``NoTransactionsFoundError`` when it is empty.
    """

    columns = bank_adapter.locate_columns(grid)
    account = bank_adapter.read_account_info(grid)

    transactions = tuple(bank_adapter.iter_bank_transactions(grid, columns, registry))
    if not transactions:
        raise NoTransactionsFoundError("No se encontraron transacciones válidas en el archivo")

    calculated_total = sum_amounts(t.amount_value for t in transactions)
    _logger.info(
        "Processed %d bank transactions for account %r. Total: %s€",
        len(transactions),
        account.account_number,
        calculated_total,
    )
    return BankProcessingResult(
        transactions=transactions,
        calculated_total=calculated_total,
        account=account,
        totals_match=True,
    )


def process_bank_file(
    file: UploadedFile,
    registry: ShopRegistry | None = None,
    *,
    database_url: str | None = None,
) -> BankProcessingResult:
    if registry is None:
        registry = load_shop_registry(database_url=database_url)
    return process_bank_grid(extract_grid(file), registry)


def process_multiple_bank_files(
    files: Iterable[UploadedFile],
    *,
    registry: ShopRegistry | None = None,
    database_url: str | None = None,
) -> BankProcessingResult:
    batch = _require_files(files)
    if registry is None:
        registry = load_shop_registry(database_url=database_url)
    snapshot = registry

    results = _run_batch(
        batch,
        lambda f: process_bank_file(f, snapshot),
        failure_message="No se pudieron procesar los siguientes archivos: {names}. "
        + _BANK_BATCH_HINT,
    )
    merged = merge_bank_results(results)
    _logger.info(
        "Processed %d files: %d bank transactions, total %s€",
        len(results),
        merged.total_transactions,
        merged.calculated_total,
    )
    return merged


# ---------------------------------------------------------------------------
# Batch helpers
# ---------------------------------------------------------------------------


def _require_files(files: Iterable[UploadedFile]) -> list[UploadedFile]:
    batch = list(files)
    if not batch:
        raise ValueError("No files provided for processing")
    return batch


def _run_batch[R](
    files: Sequence[UploadedFile],
    process_one: Callable[[UploadedFile], R],
    *,
    failure_message: str,
) -> list[R]:
    """Process ``files`` in order; raise one aggregate error if any failed."""

    results: list[R] = []
    failed: list[str] = []
    for file in files:
        try:
            results.append(process_one(file))
        except StatementProcessingError as exc:
            failed.append(file.name)
            _logger.error("Error processing file %s: %s", file.name, exc)

    if failed:
        raise BatchProcessingError(failed, failure_message.format(names=", ".join(failed)))
    return results


__all__ = [
    "process_card_grid",
    "process_expense_file",
    "process_multiple_expense_files",
    "process_bank_grid",
    "process_bank_file",
    "process_multiple_bank_files",
]
