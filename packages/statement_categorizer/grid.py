"""Raw cell grids and the tabular-cell extractor.

A :class:`RawGrid` is the rectangular-ish view of one uploaded file: rows of
raw cell values (``str``, ``int``, ``float`` or ``None``) with irregular row
lengths. Access is bounds-checked; out-of-range lookups return ``None`` (or
``""`` for text) instead of raising, so the positional scanners in the format
adapters can probe freely.

Workbooks (``.xls``/``.xlsx``) are decoded with pandas (first sheet, no header
inference); everything else is treated as delimited text split on comma,
semicolon or tab.
"""

from __future__ import annotations

import re
from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from datetime import date, datetime
from io import BytesIO
from typing import Any

import pandas as pd

from .errors import FileFormatError
from .models import UploadedFile

type CellValue = str | int | float | None

WORKBOOK_EXTENSIONS: frozenset[str] = frozenset({".xls", ".xlsx"})

_DELIMITER_RE = re.compile(r"[,;\t]")


def cell_text(value: CellValue) -> str:
    """Render a raw cell as text; integral floats drop their ``.0``."""

    if value is None:
        return ""
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


@dataclass(frozen=True, slots=True)
class RawGrid:
    """Immutable grid of raw cell values indexed by ``(row, column)``."""

    rows: tuple[tuple[CellValue, ...], ...]

    @classmethod
    def from_rows(cls, rows: Iterable[Iterable[CellValue]]) -> RawGrid:
        return cls(rows=tuple(tuple(r) for r in rows))

    def __len__(self) -> int:
        return len(self.rows)

    def row(self, index: int) -> tuple[CellValue, ...]:
        if 0 <= index < len(self.rows):
            return self.rows[index]
        return ()

    def width(self, index: int) -> int:
        return len(self.row(index))

    def cell(self, row: int, col: int) -> CellValue:
        cells = self.row(row)
        if 0 <= col < len(cells):
            return cells[col]
        return None

    def text(self, row: int, col: int) -> str:
        return cell_text(self.cell(row, col))

    def row_texts(self, row: int) -> list[str]:
        return [cell_text(v) for v in self.row(row)]


# ---------------------------------------------------------------------------
# Extraction
# ---------------------------------------------------------------------------


def _coerce_cell(value: Any) -> CellValue:
    if value is None or isinstance(value, str):
        return value
    if pd.isna(value):
        return None
    if isinstance(value, (datetime, date)):
        return value.strftime("%Y-%m-%d")
    if hasattr(value, "item"):
        # numpy scalars → Python scalars
        value = value.item()
    if isinstance(value, bool):
        return str(value)
    if isinstance(value, (int, float)):
        return value
    return str(value)


def _trim_trailing_empty(cells: Sequence[CellValue]) -> list[CellValue]:
    out = list(cells)
    while out and out[-1] is None:
        out.pop()
    return out


def _read_workbook_rows(content: bytes, extension: str) -> list[list[CellValue]]:
    engine = "openpyxl" if extension == ".xlsx" else "xlrd"
    try:
        frame = pd.read_excel(
            BytesIO(content), sheet_name=0, header=None, dtype=object, engine=engine
        )
    except Exception as exc:
        raise FileFormatError(f"Could not read spreadsheet: {exc}") from exc

    return [
        _trim_trailing_empty([_coerce_cell(v) for v in record])
        for record in frame.itertuples(index=False, name=None)
    ]


def _read_delimited_rows(text: str) -> list[list[CellValue]]:
    lines = [line for line in text.split("\n") if line.strip()]
    return [
        [cell.strip().strip('"').strip() for cell in _DELIMITER_RE.split(line)]
        for line in lines
    ]


def extract_grid(file: UploadedFile) -> RawGrid:
    """Decode ``file`` into a :class:`RawGrid`.

    Raises :class:`~statement_categorizer.errors.FileFormatError` when the
    result has fewer than two rows (no room for a header and a data row) or
    when a workbook cannot be decoded.
    """

    if file.extension in WORKBOOK_EXTENSIONS:
        rows = _read_workbook_rows(file.content, file.extension)
    else:
        rows = _read_delimited_rows(file.text())

    if len(rows) < 2:
        raise FileFormatError("File appears to be empty or invalid")

    return RawGrid.from_rows(rows)


__all__ = ["CellValue", "RawGrid", "cell_text", "extract_grid", "WORKBOOK_EXTENSIONS"]
