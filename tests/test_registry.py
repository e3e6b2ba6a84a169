from pathlib import Path

import pytest

from statement_categorizer.models import ShopRegistryEntry
from statement_categorizer.registry import (
    IMPORTED_CATEGORY,
    UNCATEGORIZED,
    load_shop_registry,
    load_shop_registry_csv,
    parse_shop_registry_csv,
)

from tests.helpers.db import bootstrap_sqlite_db, seed_registry


def test_load_shop_registry_flattens_tables_in_id_order(tmp_path: Path) -> None:
    url = bootstrap_sqlite_db(tmp_path / "registry.sqlite")
    seed_registry(
        database_url=url,
        shops=[
            ("MERCADONA", "Alimentación", "Supermercado"),
            ("REPSOL", "Transporte", None),
            ("LIDL", None, "Supermercado"),
            ("HUERFANO", None, None),
        ],
    )

    assert load_shop_registry(database_url=url) == [
        ShopRegistryEntry("MERCADONA", "Alimentación", "Supermercado"),
        ShopRegistryEntry("REPSOL", "Transporte", None),
        # Category inherited through the subcategory.
        ShopRegistryEntry("LIDL", "Alimentación", "Supermercado"),
        ShopRegistryEntry("HUERFANO", UNCATEGORIZED, None),
    ]


def test_load_shop_registry_uses_database_url_env(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    url = bootstrap_sqlite_db(tmp_path / "registry.sqlite")
    seed_registry(database_url=url, shops=[("FNAC", "Ocio", None)])
    monkeypatch.setenv("DATABASE_URL", url)

    assert load_shop_registry() == [ShopRegistryEntry("FNAC", "Ocio", None)]


def test_load_shop_registry_without_database_url_fails() -> None:
    with pytest.raises(RuntimeError, match="DATABASE_URL"):
        load_shop_registry()


def test_parse_csv_with_subcategory_column() -> None:
    text = "\ufeffShop Name,Category,Subcategory\nMERCADONA,Alimentación,Supermercado\n\nFNAC,Ocio,\n"
    assert parse_shop_registry_csv(text) == [
        ShopRegistryEntry("MERCADONA", "Alimentación", "Supermercado"),
        ShopRegistryEntry("FNAC", "Ocio", None),
    ]


def test_parse_csv_without_subcategory_nests_under_imported_category() -> None:
    text = 'shop_name,category\n"EL CORTE INGLES, S.A.",Compras\n'
    assert parse_shop_registry_csv(text) == [
        ShopRegistryEntry("EL CORTE INGLES, S.A.", IMPORTED_CATEGORY, "Compras"),
    ]


def test_parse_csv_reports_every_bad_line() -> None:
    text = "Shop Label,Category\n,Ocio\nFNAC,\nSOLO\n"
    with pytest.raises(ValueError) as info:
        parse_shop_registry_csv(text)
    message = str(info.value)
    assert "Line 2: Shop name is required" in message
    assert "Line 3: Category is required" in message
    assert "Line 4: Missing required columns" in message


@pytest.mark.parametrize(
    ("text", "match"),
    [
        ("", "empty"),
        ("Name,Category\nA,B\n", "shop name column"),
        ("Shop Name,Type\nA,B\n", "category column"),
        ("Shop Name,Category\n", "No valid shop data"),
    ],
)
def test_parse_csv_rejects_unusable_files(text: str, match: str) -> None:
    with pytest.raises(ValueError, match=match):
        parse_shop_registry_csv(text)


def test_load_shop_registry_csv_reads_file(tmp_path: Path) -> None:
    path = tmp_path / "shops.csv"
    path.write_text("Shop Name,Category,Subcategory\nREPSOL,Transporte,Gasolina\n", encoding="utf-8")
    assert load_shop_registry_csv(path) == [ShopRegistryEntry("REPSOL", "Transporte", "Gasolina")]
