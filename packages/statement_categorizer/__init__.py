"""Statement parsing and merchant categorization.

Turns Iberia Icon credit-card statements and ING account exports into
normalized, categorized transactions and reconciles them against the totals
the statements declare. See :mod:`statement_categorizer.api`.
"""

from .api import (
    process_bank_file,
    process_bank_grid,
    process_card_grid,
    process_expense_file,
    process_multiple_bank_files,
    process_multiple_expense_files,
)
from .errors import (
    BatchProcessingError,
    FileFormatError,
    HeaderNotFoundError,
    MissingColumnsError,
    NoSectionsFoundError,
    NoTransactionsFoundError,
    StatementProcessingError,
)
from .models import (
    AccountInfo,
    BankProcessingResult,
    BankTransaction,
    ExpenseTransaction,
    ProcessingResult,
    ShopRegistryEntry,
    UploadedFile,
)

__all__ = [
    "process_card_grid",
    "process_expense_file",
    "process_multiple_expense_files",
    "process_bank_grid",
    "process_bank_file",
    "process_multiple_bank_files",
    "StatementProcessingError",
    "FileFormatError",
    "NoSectionsFoundError",
    "HeaderNotFoundError",
    "MissingColumnsError",
    "NoTransactionsFoundError",
    "BatchProcessingError",
    "UploadedFile",
    "ShopRegistryEntry",
    "ExpenseTransaction",
    "ProcessingResult",
    "BankTransaction",
    "AccountInfo",
    "BankProcessingResult",
]
