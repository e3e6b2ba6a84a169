from pathlib import Path

import pytest
from typer.testing import CliRunner

import statement_categorizer.registry as registry_mod
from statement_categorizer.cli import app

from tests.helpers.grids import card_statement_rows, ing_export_rows, xlsx_bytes

SHOPS_CSV = "Shop Name,Category,Subcategory\nMERCADONA,Alimentación,Supermercado\nFnac,Ocio,Libros\n"


@pytest.fixture
def runner() -> CliRunner:
    return CliRunner()


@pytest.fixture
def shops_csv(tmp_path: Path) -> Path:
    path = tmp_path / "shops.csv"
    path.write_text(SHOPS_CSV, encoding="utf-8")
    return path


def _write(tmp_path: Path, name: str, rows) -> Path:
    path = tmp_path / name
    path.write_bytes(xlsx_bytes(rows))
    return path


def test_process_expenses_prints_transactions_and_summary(
    runner: CliRunner, tmp_path: Path, shops_csv: Path
) -> None:
    statement = _write(tmp_path, "iberia.xlsx", card_statement_rows())
    out_csv = tmp_path / "out.csv"

    result = runner.invoke(
        app,
        ["process-expenses", str(statement), "--shops-csv", str(shops_csv), "--output", str(out_csv)],
    )

    assert result.exit_code == 0, result.output
    lines = result.stdout.splitlines()
    assert lines[0] == "****1234\t2024-03-01\tMERCADONA\t45,30\tAlimentación"
    assert lines[2] == "****5678\t2024-03-05\tREPSOL\t60,00\tOtros gastos (otros)"
    assert "Total: 117.80€ (Expected: 117.80€) - OK" in result.stdout

    exported = out_csv.read_text(encoding="utf-8-sig").splitlines()
    assert len(exported) == 4
    assert exported[1].startswith('"2024-03-01","45,30","EUR","","Iberia Card 1234"')


def test_process_ing_prints_transactions(runner: CliRunner, tmp_path: Path, shops_csv: Path) -> None:
    export = _write(tmp_path, "ing.xlsx", ing_export_rows())

    result = runner.invoke(app, ["process-ing", str(export), "--shops-csv", str(shops_csv)])

    assert result.exit_code == 0, result.output
    lines = result.stdout.splitlines()
    assert lines[0] == "2024-03-01\t-45,30\tCOMPRA EN\tAlimentación\tSupermercado"
    assert lines[2] == "2024-03-04\t-19,99\tPAGO EN\tOcio\tLibros"
    assert lines[3] == "Cuenta: ES12 1465 0100 1234 5678 9012 - 3 transacciones, total 1434.71€"


def test_batch_failure_exits_non_zero(runner: CliRunner, tmp_path: Path, shops_csv: Path) -> None:
    good = _write(tmp_path, "a.xlsx", card_statement_rows())
    bad = tmp_path / "b.csv"
    bad.write_text("nothing here\n", encoding="utf-8")

    result = runner.invoke(app, ["process-expenses", str(good), str(bad), "--shops-csv", str(shops_csv)])

    assert result.exit_code == 1
    assert "Error: Failed to process the following files: b.csv." in result.stderr
    assert "MERCADONA" not in result.stdout


def test_missing_file_exits_non_zero(runner: CliRunner, tmp_path: Path, shops_csv: Path) -> None:
    result = runner.invoke(
        app, ["process-ing", str(tmp_path / "nope.xlsx"), "--shops-csv", str(shops_csv)]
    )
    assert result.exit_code == 1
    assert "Error: File not found" in result.stderr


def test_registry_failure_exits_non_zero(
    runner: CliRunner, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    statement = _write(tmp_path, "iberia.xlsx", card_statement_rows())
    monkeypatch.chdir(tmp_path)  # keep a developer's .env out of the run

    result = runner.invoke(app, ["process-expenses", str(statement)])

    assert result.exit_code == 1
    assert "Error: failed to load the shop registry: DATABASE_URL is not set" in result.stderr


def test_database_url_option_reaches_registry_loader(
    runner: CliRunner, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    seen: list[str | None] = []

    def _load(*, database_url: str | None = None):
        seen.append(database_url)
        return []

    monkeypatch.setattr(registry_mod, "load_shop_registry", _load)
    statement = _write(tmp_path, "iberia.xlsx", card_statement_rows())

    result = runner.invoke(
        app, ["process-expenses", str(statement), "--database-url", "sqlite:///shops.db"]
    )

    assert result.exit_code == 0, result.output
    assert seen == ["sqlite:///shops.db"]
    assert "AMAZON MARKETPLACE\t12,50\tOtros gastos (otros)" in result.stdout
