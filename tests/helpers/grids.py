"""Statement fixtures for tests: raw grid rows, workbooks and delimited text."""

from __future__ import annotations

from collections.abc import Sequence
from io import BytesIO
from typing import Any

from openpyxl import Workbook

from statement_categorizer.models import ShopRegistryEntry, UploadedFile

CARD_HEADER = ["Nº", "FECHA OPERACIÓN", "COMERCIO", "LOCALIDAD", "IMPORTE EUROS"]
ING_HEADER = ["F. VALOR", "CATEGORÍA", "SUBCATEGORÍA", "DESCRIPCIÓN", "COMENTARIO", "IMAGEN", "IMPORTE (€)", "SALDO (€)"]

REGISTRY: tuple[ShopRegistryEntry, ...] = (
    ShopRegistryEntry("MERCADONA", "Alimentación", "Supermercado"),
    ShopRegistryEntry("REPSOL", "Transporte", "Gasolina"),
    ShopRegistryEntry("Fnac", "Ocio", None),
)


def card_statement_rows() -> list[list[Any]]:
    """Two cards, a per-card subtotal and a TOTAL A CARGAR of 117,80."""

    return [
        ["EXTRACTO DE TARJETA DE CRÉDITO"],
        ["IBERIA ICON VISA", None, "****1234"],
        CARD_HEADER,
        ["1", "01/03/2024", "MERCADONA", "VALENCIA", "45,30"],
        ["2", "2/3/2024", "AMAZON MARKETPLACE", "LUXEMBURGO", "12,50"],
        ["TOTAL TARJETA", None, None, None, "57,80"],
        ["IBERIA ICON VISA", None, "****5678"],
        CARD_HEADER,
        ["1", "05.03.2024", "REPSOL", "MADRID", "60,00"],
        [None, None, "TOTAL A CARGAR", None, "117,80"],
    ]


def ing_export_rows() -> list[list[Any]]:
    return [
        ["Movimientos de la Cuenta"],
        ["Número de cuenta:", None, None, "ES12 1465 0100 1234 5678 9012"],
        ["Titular:", None, None, "ANA GARCÍA"],
        ["Fecha exportación:", None, None, "10/03/2024"],
        ING_HEADER,
        ["01/03/2024", "Compras", "Supermercado", "COMPRA EN MERCADONA VALENCIA", "", "", "-45,30", "1.000,00"],
        ["02/03/2024", "Nómina", "", "TRANSFERENCIA RECIBIDA EMPRESA SL", "", "", "1.500,00", "2.500,00"],
        ["03/03/2024", "", "", "CUOTA MANTENIMIENTO", "", "", "0,00", "2.500,00"],
        [None, None, None, None, None, None, None, None],
        ["04/03/2024", "", "", "PAGO EN FNAC CALLAO MADRID", "", "", "-19,99", "2.480,01"],
    ]


def xlsx_bytes(rows: Sequence[Sequence[Any]]) -> bytes:
    wb = Workbook()
    ws = wb.active
    for row in rows:
        ws.append(list(row))
    buf = BytesIO()
    wb.save(buf)
    return buf.getvalue()


def xlsx_file(name: str, rows: Sequence[Sequence[Any]]) -> UploadedFile:
    return UploadedFile(name=name, content=xlsx_bytes(rows))


def tsv_file(name: str, rows: Sequence[Sequence[Any]]) -> UploadedFile:
    """Tab-delimited text file; ``None`` cells become empty fields."""

    lines = ["\t".join("" if v is None else str(v) for v in row) for row in rows]
    return UploadedFile(name=name, content=("\n".join(lines) + "\n").encode("utf-8"))
