"""Data models and type aliases for ``statement_categorizer``.

All records are frozen, slotted dataclasses: once a file is parsed its grid,
sections, transactions and results are never mutated. Amounts on transaction
records are normalized decimal strings that use a comma as the decimal
separator (``"1234,56"``), which is what the re-export and the dashboard
display; :attr:`amount_value` exposes the exact ``Decimal`` behind them.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field
from decimal import Decimal
from os import PathLike
from pathlib import Path

# ---------------------------------------------------------------------------
# Input
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class UploadedFile:
    """An uploaded statement file held fully in memory.

    Attributes
    ----------
    name:
        Declared file name; its extension selects the decoder.
    content:
        Raw bytes as uploaded.
    """

    name: str
    content: bytes

    @property
    def extension(self) -> str:
        return Path(self.name).suffix.lower()

    def text(self) -> str:
        # Undecodable bytes become U+FFFD; header matching tolerates that.
        return self.content.decode("utf-8-sig", errors="replace")

    @classmethod
    def from_path(cls, path: str | PathLike[str]) -> UploadedFile:
        p = Path(path)
        return cls(name=p.name, content=p.read_bytes())


# ---------------------------------------------------------------------------
# Shop registry (read-only collaborator view)
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class ShopRegistryEntry:
    """One flattened row of the shop → category/subcategory mapping."""

    shop_name: str
    category: str
    subcategory: str | None = None


type ShopRegistry = Sequence[ShopRegistryEntry]
"""Registry snapshot. Order is significant: the first positional match wins."""


# ---------------------------------------------------------------------------
# Format A: multi-card credit-card statement
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class CardSection:
    """One card block: its identifier and the row index of its table header.

    The block's transaction rows run from ``header_row_index + 1`` up to the
    next section's header row (exclusive) or the end of the grid.
    """

    card_identifier: str
    header_row_index: int


@dataclass(frozen=True, slots=True)
class ExpenseTransaction:
    """A categorized credit-card movement (format A)."""

    card_number: str
    date: str
    merchant: str
    amount: str
    category: str

    @property
    def amount_value(self) -> Decimal:
        return Decimal(self.amount.replace(",", "."))


@dataclass(frozen=True, slots=True)
class ProcessingResult:
    """Result of processing one or more credit-card statement files.

    Attributes
    ----------
    transactions:
        Accepted transactions in grid order (file order for batches).
    calculated_total:
        Exact sum of every transaction amount.
    expected_total:
        Declared control total; ``0`` when the file does not state one.
    totals_match:
        Reconciliation flag; never an error on its own.
    """

    transactions: tuple[ExpenseTransaction, ...]
    calculated_total: Decimal
    expected_total: Decimal
    totals_match: bool


# ---------------------------------------------------------------------------
# Format B: single-table bank account export
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class DescriptionParts:
    """Structured view of a free-text bank description. Never ``None`` fields."""

    title: str = ""
    counterparty: str = ""
    note: str = ""


@dataclass(frozen=True, slots=True)
class BankTransaction:
    """A categorized bank account movement (format B)."""

    date: str
    amount: str
    description: str
    title: str
    counterparty: str
    note: str
    category: str
    subcategory: str

    @property
    def amount_value(self) -> Decimal:
        return Decimal(self.amount.replace(",", "."))


@dataclass(frozen=True, slots=True)
class AccountInfo:
    """Account metadata printed above the movements table of a bank export."""

    account_number: str = ""
    account_holder: str = ""
    export_date: str = ""


@dataclass(frozen=True, slots=True)
class BankProcessingResult:
    """Result of processing one or more bank account exports.

    There is no control total in this format, so ``totals_match`` is always
    ``True``. Batches report the account metadata of their first file.
    """

    transactions: tuple[BankTransaction, ...]
    calculated_total: Decimal
    account: AccountInfo = field(default_factory=AccountInfo)
    totals_match: bool = True

    @property
    def total_transactions(self) -> int:
        return len(self.transactions)


__all__ = [
    "UploadedFile",
    "ShopRegistryEntry",
    "ShopRegistry",
    "CardSection",
    "ExpenseTransaction",
    "ProcessingResult",
    "DescriptionParts",
    "BankTransaction",
    "AccountInfo",
    "BankProcessingResult",
]
