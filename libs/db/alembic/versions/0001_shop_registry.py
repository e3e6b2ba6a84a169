# ruff: noqa: I001
"""Shop registry tables and seed categories.

Revision ID: 0001_shop_registry
Revises: None
Create Date: 2025-10-02
"""

from __future__ import annotations

from collections.abc import Sequence

import sqlalchemy as sa
from alembic import op


# revision identifiers, used by Alembic.
revision: str = "0001_shop_registry"
down_revision: str | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


# Category names the dashboard ships with; the last one is the fallback bucket
# used when a merchant has no registry match.
SEED_CATEGORIES: tuple[str, ...] = (
    "Cafeterías y restaurantes",
    "Compras (otros)",
    "Supermercados y alimentación",
    "Deporte y gimnasio",
    "Peajes",
    "Parking y garaje",
    "Transporte público",
    "Hotel y alojamiento",
    "Belleza, peluquería y perfumería",
    "Cine, teatro y espectáculos",
    "Dentista, médico",
    "Loterías y apuestas",
    "Libros, música y videojuegos",
    "Billetes de viaje",
    "Ropa y complementos",
    "Regalos y juguetes",
    "Electrónica",
    "Otros seguros",
    "Ocio y viajes (otros)",
    "Mantenimiento del hogar",
    "Decoración y mobiliario",
    "Gasolina y combustible",
    "Pago de impuestos",
    "Taxis y Carsharing",
    "Otros gastos (otros)",
)


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.text("CURRENT_TIMESTAMP"),
        ),
        sa.Column(
            "modified_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.text("CURRENT_TIMESTAMP"),
        ),
    ]


def upgrade() -> None:
    categories = op.create_table(
        "categories",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("name", sa.String(), nullable=False, unique=True),
        sa.Column("color", sa.String(), nullable=True),
        *_timestamps(),
    )

    op.create_table(
        "subcategories",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("name", sa.String(), nullable=False),
        sa.Column("color", sa.String(), nullable=True),
        sa.Column(
            "category_id",
            sa.Integer(),
            sa.ForeignKey("categories.id", ondelete="CASCADE"),
            nullable=False,
        ),
        *_timestamps(),
        sa.UniqueConstraint("category_id", "name", name="uq_subcategories_parent_name"),
    )

    op.create_table(
        "shops",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("shop_name", sa.String(), nullable=False, unique=True),
        sa.Column(
            "category_id",
            sa.Integer(),
            sa.ForeignKey("categories.id", ondelete="SET NULL"),
            nullable=True,
        ),
        sa.Column(
            "subcategory_id",
            sa.Integer(),
            sa.ForeignKey("subcategories.id", ondelete="SET NULL"),
            nullable=True,
        ),
        *_timestamps(),
    )

    op.bulk_insert(categories, [{"name": name} for name in SEED_CATEGORIES])


def downgrade() -> None:
    op.drop_table("shops")
    op.drop_table("subcategories")
    op.drop_table("categories")
