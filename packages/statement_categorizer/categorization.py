"""Shop-registry categorization for parsed transactions.

Two matching rules co-exist on purpose:

- Credit-card statements (clean merchant column): exact, case-sensitive match
  of the merchant against ``shop_name`` → :func:`categorize_merchant`.
- Bank exports (noisy free text): case-insensitive containment in either
  direction, tried for title, counterparty and full description in that order
  → :func:`categorize_description`.

Unmatched transactions land in :data:`DEFAULT_CATEGORY`. Registry order is
significant: the first positional match wins and the registry is never
re-sorted here.
"""

from __future__ import annotations

from collections.abc import Iterable

from .logging_setup import get_logger
from .models import DescriptionParts, ShopRegistry, ShopRegistryEntry

DEFAULT_CATEGORY = "Otros gastos (otros)"

_logger = get_logger("statement_categorizer.categorization")


def find_exact_shop(merchant: str, registry: ShopRegistry) -> ShopRegistryEntry | None:
    for entry in registry:
        if entry.shop_name == merchant:
            return entry
    return None


def categorize_merchant(merchant: str, registry: ShopRegistry) -> str:
    """Return the category of the shop named exactly ``merchant``."""

    shop = find_exact_shop(merchant, registry)
    if shop is None:
        _logger.debug("No shop match found for merchant: %r", merchant)
        return DEFAULT_CATEGORY
    if not shop.category:
        _logger.debug("Shop found but no category: %r", merchant)
        return DEFAULT_CATEGORY
    return shop.category


def find_fuzzy_shop(candidate: str, registry: ShopRegistry) -> ShopRegistryEntry | None:
    """First registry entry whose name contains, or is contained in, ``candidate``."""

    needle = candidate.strip().lower()
    if not needle:
        return None
    for entry in registry:
        name = entry.shop_name.strip().lower()
        if not name:
            continue
        if name in needle or needle in name:
            return entry
    return None


def _candidates(parts: DescriptionParts, description: str) -> Iterable[str]:
    for value in (parts.title, parts.counterparty, description):
        if value and value.strip():
            yield value


def categorize_description(
    parts: DescriptionParts, description: str, registry: ShopRegistry
) -> tuple[str, str]:
    """Return ``(category, subcategory)`` for a bank movement.

    Candidates are tried in order ``title``, ``counterparty``, full
    ``description``; the first candidate with a registry hit decides.
    """

    for candidate in _candidates(parts, description):
        shop = find_fuzzy_shop(candidate, registry)
        if shop is not None:
            return (shop.category or DEFAULT_CATEGORY, shop.subcategory or DEFAULT_CATEGORY)

    _logger.debug("No shop match found for description: %r", description)
    return DEFAULT_CATEGORY, DEFAULT_CATEGORY


__all__ = [
    "DEFAULT_CATEGORY",
    "categorize_merchant",
    "categorize_description",
    "find_exact_shop",
    "find_fuzzy_shop",
]
