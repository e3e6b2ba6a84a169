"""ORM models for the dashboard database.

Currently the shop registry used by ``statement_categorizer``.
"""

from .registry import Base, Category, Shop, Subcategory

__all__ = [
    "Base",
    "Category",
    "Subcategory",
    "Shop",
]
