from datetime import datetime

import pytest

from statement_categorizer.errors import FileFormatError
from statement_categorizer.grid import RawGrid, cell_text, extract_grid
from statement_categorizer.models import UploadedFile

from tests.helpers.grids import xlsx_file


def test_cell_text_renders_integral_floats_without_fraction() -> None:
    assert cell_text(None) == ""
    assert cell_text(3.0) == "3"
    assert cell_text(3.5) == "3.5"
    assert cell_text(12) == "12"


def test_raw_grid_lookups_are_bounds_checked() -> None:
    grid = RawGrid.from_rows([["a", "b"], ["c"]])
    assert len(grid) == 2
    assert grid.cell(1, 5) is None
    assert grid.cell(9, 0) is None
    assert grid.text(-1, 0) == ""
    assert grid.width(1) == 1
    assert grid.width(2) == 0
    assert grid.row_texts(0) == ["a", "b"]


def test_delimited_text_splits_on_any_delimiter_and_trims_quotes() -> None:
    text = 'F. VALOR;"DESCRIPCIÓN"\tIMPORTE\n\n  \n01/03/2024; "COMPRA EN X " \t-4.5\n'
    grid = extract_grid(UploadedFile("export.csv", text.encode("utf-8")))

    assert len(grid) == 2  # blank lines dropped
    assert grid.row_texts(0) == ["F. VALOR", "DESCRIPCIÓN", "IMPORTE"]
    assert grid.row_texts(1) == ["01/03/2024", "COMPRA EN X", "-4.5"]


def test_delimited_text_strips_utf8_bom() -> None:
    content = "\ufeffA,B\n1,2\n".encode()
    grid = extract_grid(UploadedFile("x.txt", content))
    assert grid.text(0, 0) == "A"


def test_comma_is_always_a_delimiter_in_text_files() -> None:
    grid = extract_grid(UploadedFile("x.csv", b"IMPORTE\n45,30\n"))
    assert grid.row_texts(1) == ["45", "30"]


def test_single_row_file_is_rejected() -> None:
    with pytest.raises(FileFormatError, match="empty or invalid"):
        extract_grid(UploadedFile("x.csv", b"only a header\n"))
    with pytest.raises(FileFormatError):
        extract_grid(UploadedFile("x.csv", b""))


def test_xlsx_cells_are_coerced_to_plain_values() -> None:
    file = xlsx_file(
        "statement.xlsx",
        [
            ["Nº", "FECHA", "COMERCIO", "LOCALIDAD", "IMPORTE"],
            [1, datetime(2024, 3, 1), "MERCADONA", None, 45.3],
            ["2", "02/03/2024", "REPSOL"],
        ],
    )
    grid = extract_grid(file)

    assert len(grid) == 3
    assert grid.row_texts(1) == ["1", "2024-03-01", "MERCADONA", "", "45.3"]
    # Trailing empty cells are trimmed per row.
    assert grid.width(2) == 3
    assert grid.cell(1, 3) is None


def test_unreadable_workbook_raises_file_format_error() -> None:
    with pytest.raises(FileFormatError, match="Could not read spreadsheet"):
        extract_grid(UploadedFile("broken.xlsx", b"not a zip archive"))
