"""Totals and reconciliation.

Per file, the computed sum is checked against the statement's declared
control total with a ``0.10`` tolerance; an unknown control total (``<= 0``)
always matches. Merged batches use the stricter ``< 0.01`` rule, which drives
the batch summary display rather than per-file warnings. Mismatches are
logged, never raised.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from decimal import Decimal

from .logging_setup import get_logger
from .models import AccountInfo, BankProcessingResult, ProcessingResult

PER_FILE_TOLERANCE = Decimal("0.10")
BATCH_TOLERANCE = Decimal("0.01")

_logger = get_logger("statement_categorizer.reconcile")


def sum_amounts(amounts: Iterable[Decimal]) -> Decimal:
    return sum(amounts, Decimal(0))


def validate_total(calculated_total: Decimal, expected_total: Decimal) -> bool:
    """Return ``True`` when the totals reconcile within :data:`PER_FILE_TOLERANCE`."""

    if expected_total <= 0:
        return True
    difference = abs(calculated_total - expected_total)
    if difference > PER_FILE_TOLERANCE:
        _logger.warning(
            "Total mismatch: Expected %s€, calculated %s€ (difference: %s€)",
            expected_total,
            calculated_total,
            difference,
        )
        return False
    return True


def merge_results(results: Sequence[ProcessingResult]) -> ProcessingResult:
    """Concatenate per-file results in order and re-reconcile the sums."""

    transactions = tuple(t for r in results for t in r.transactions)
    calculated = sum_amounts(r.calculated_total for r in results)
    expected = sum_amounts(r.expected_total for r in results)
    return ProcessingResult(
        transactions=transactions,
        calculated_total=calculated,
        expected_total=expected,
        totals_match=abs(calculated - expected) < BATCH_TOLERANCE,
    )


def merge_bank_results(results: Sequence[BankProcessingResult]) -> BankProcessingResult:
    transactions = tuple(t for r in results for t in r.transactions)
    return BankProcessingResult(
        transactions=transactions,
        calculated_total=sum_amounts(r.calculated_total for r in results),
        account=results[0].account if results else AccountInfo(),
        totals_match=True,
    )


__all__ = [
    "PER_FILE_TOLERANCE",
    "BATCH_TOLERANCE",
    "sum_amounts",
    "validate_total",
    "merge_results",
    "merge_bank_results",
]
