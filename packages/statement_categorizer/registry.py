"""Shop registry collaborator: shop name → category/subcategory.

The dashboard keeps the mapping in three tables (``categories``,
``subcategories``, ``shops``; see ``db.models.registry``). Processing only
needs a flattened, read-only snapshot, which :func:`load_shop_registry`
builds with a single joined query. Callers fetch it once per batch and pass
it explicitly to every per-file call.

:func:`parse_shop_registry_csv` reads the dashboard's shop export CSV so a
registry can also be supplied offline.
"""

from __future__ import annotations

import csv
import io
from os import PathLike
from pathlib import Path

from db.client import session_scope
from db.models.registry import Category, Shop, Subcategory
from sqlalchemy import Select, func, select
from sqlalchemy.orm import aliased

from .logging_setup import get_logger
from .models import ShopRegistryEntry

UNCATEGORIZED = "Uncategorized"
IMPORTED_CATEGORY = "Imported Categories"

_logger = get_logger("statement_categorizer.registry")


# ---------------------------------------------------------------------------
# Database snapshot
# ---------------------------------------------------------------------------


def _registry_query() -> Select:
    sub = aliased(Subcategory)
    cat = aliased(Category)
    # A shop without its own category inherits the one of its subcategory.
    return (
        select(Shop.shop_name, cat.name, sub.name)
        .outerjoin(sub, Shop.subcategory_id == sub.id)
        .outerjoin(cat, cat.id == func.coalesce(Shop.category_id, sub.category_id))
        .order_by(Shop.id)
    )


def load_shop_registry(*, database_url: str | None = None) -> list[ShopRegistryEntry]:
    """Return the flattened registry in table order.

    Shops without a resolvable category are reported as ``"Uncategorized"``;
    shops with a blank name are dropped. Database errors propagate.
    """

    with session_scope(database_url=database_url) as session:
        rows = session.execute(_registry_query()).all()

    registry = [
        ShopRegistryEntry(
            shop_name=shop_name.strip(),
            category=(category or "").strip() or UNCATEGORIZED,
            subcategory=(subcategory or "").strip() or None,
        )
        for shop_name, category, subcategory in rows
        if shop_name and shop_name.strip()
    ]
    _logger.info("Fetched %d shops for expense processing", len(registry))
    return registry


# ---------------------------------------------------------------------------
# CSV snapshot
# ---------------------------------------------------------------------------


def _index_of(headers: list[str], predicate) -> int | None:
    for i, h in enumerate(headers):
        if predicate(h):
            return i
    return None


def parse_shop_registry_csv(text: str) -> list[ShopRegistryEntry]:
    """Parse a shop export CSV (``Shop Name, Category[, Subcategory]``).

    Header names are matched loosely (``shop name``/``shop label``/
    ``shop_name``; ``category``; ``subcategory``). Without a subcategory column
    each category becomes the subcategory of ``"Imported Categories"``.

    Raises ``ValueError`` listing every offending line, or when the file holds
    no usable rows.
    """

    reader = csv.reader(io.StringIO(text.lstrip("\ufeff")))
    header: list[str] | None = None
    for row in reader:
        if any(cell.strip() for cell in row):
            header = [cell.strip().lower() for cell in row]
            break
    if header is None:
        raise ValueError("CSV file is empty")

    shop_idx = _index_of(
        header, lambda h: "shop name" in h or "shop label" in h or h == "shop_name"
    )
    category_idx = _index_of(header, lambda h: "category" in h and "subcategory" not in h)
    subcategory_idx = _index_of(header, lambda h: "subcategory" in h)

    if shop_idx is None:
        raise ValueError('Could not find shop name column. Expected: "Shop Name" or "Shop Label"')
    if category_idx is None:
        raise ValueError('Could not find category column. Expected: "Category"')

    entries: list[ShopRegistryEntry] = []
    errors: list[str] = []
    for row in reader:
        if not any(cell.strip() for cell in row):
            continue
        line = reader.line_num
        if len(row) <= max(shop_idx, category_idx):
            errors.append(f"Line {line}: Missing required columns")
            continue
        shop_name = row[shop_idx].strip()
        category = row[category_idx].strip()
        if not shop_name:
            errors.append(f"Line {line}: Shop name is required")
            continue
        if not category:
            errors.append(f"Line {line}: Category is required")
            continue

        if subcategory_idx is None:
            entries.append(ShopRegistryEntry(shop_name, IMPORTED_CATEGORY, category))
        else:
            sub = row[subcategory_idx].strip() if subcategory_idx < len(row) else ""
            entries.append(ShopRegistryEntry(shop_name, category, sub or None))

    if errors:
        raise ValueError("CSV parsing errors:\n" + "\n".join(errors))
    if not entries:
        raise ValueError("No valid shop data found in CSV file")
    return entries


def load_shop_registry_csv(path: str | PathLike[str]) -> list[ShopRegistryEntry]:
    registry = parse_shop_registry_csv(Path(path).read_text(encoding="utf-8-sig"))
    _logger.info("Loaded %d shops from %s", len(registry), path)
    return registry


__all__ = [
    "UNCATEGORIZED",
    "IMPORTED_CATEGORY",
    "load_shop_registry",
    "parse_shop_registry_csv",
    "load_shop_registry_csv",
]
