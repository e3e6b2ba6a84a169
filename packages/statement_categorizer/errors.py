"""Exception taxonomy for statement processing.

Every per-file failure derives from :class:`StatementProcessingError`, itself
a ``ValueError`` so callers that already guard parsing with ``ValueError``
keep working. Reconciliation mismatches and unparseable individual cells are
not errors; they surface as flags and best-effort values instead.
"""

from __future__ import annotations

from collections.abc import Iterable


class StatementProcessingError(ValueError):
    """Base class for errors that abort processing of one statement file."""


class FileFormatError(StatementProcessingError):
    """The file could not be decoded into a grid with a header and a data row."""


class NoSectionsFoundError(StatementProcessingError):
    """No card block (marker plus transaction header) was found in the grid."""


class HeaderNotFoundError(StatementProcessingError):
    """The transaction header row was not found within the scan window."""


class MissingColumnsError(StatementProcessingError):
    """The header row lacks one or more required columns."""

    def __init__(self, missing: Iterable[str], message: str | None = None) -> None:
        self.missing: tuple[str, ...] = tuple(missing)
        super().__init__(
            message
            or "Faltan columnas requeridas en el encabezado: " + ", ".join(self.missing)
        )


class NoTransactionsFoundError(StatementProcessingError):
    """Every candidate row was rejected; the file yields no transactions."""


class BatchProcessingError(StatementProcessingError):
    """One or more files of a batch failed; the whole batch is discarded."""

    def __init__(self, failed_files: Iterable[str], message: str) -> None:
        self.failed_files: tuple[str, ...] = tuple(failed_files)
        super().__init__(message)


__all__ = [
    "StatementProcessingError",
    "FileFormatError",
    "NoSectionsFoundError",
    "HeaderNotFoundError",
    "MissingColumnsError",
    "NoTransactionsFoundError",
    "BatchProcessingError",
]
