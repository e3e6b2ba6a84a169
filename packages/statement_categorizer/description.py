"""Heuristic decomposition of bank movement descriptions.

Bank exports carry one free-text column such as ``"COMPRA EN FNAC MADRID"``.
:func:`split_description` turns it into ``title`` / ``counterparty`` /
``note`` using an ordered rule list where the first match wins. It never
fails: empty input yields empty parts.
"""

from __future__ import annotations

import math

from .models import DescriptionParts

# (marker searched for, title emitted). Order matters.
_KEYWORD_RULES: tuple[tuple[str, str], ...] = (
    ("COMPRA EN ", "COMPRA EN"),
    ("PAGO EN ", "PAGO EN"),
    ("TRANSFERENCIA", "TRANSFERENCIA"),
    ("REINTEGRO", "REINTEGRO"),
    ("CAJERO", "CAJERO"),
)


def _halves(words: list[str]) -> tuple[str, str]:
    mid = math.ceil(len(words) / 2)
    return " ".join(words[:mid]), " ".join(words[mid:])


def _remainder_words(text: str, marker: str) -> list[str]:
    before, _, after = text.partition(marker)
    return f"{before} {after}".split()


def split_description(description: str) -> DescriptionParts:
    """Split ``description`` into title, counterparty and note.

    Keyword rules (``COMPRA EN``, ``PAGO EN``, ``TRANSFERENCIA``,
    ``REINTEGRO``/``CAJERO``) take the keyword as title and share the
    remaining words between counterparty (first half, rounded up) and note.
    Otherwise two words or fewer become title and counterparty, and longer
    texts are cut into thirds (rounded up) for title, counterparty and note.
    """

    text = " ".join(description.split())
    if not text:
        return DescriptionParts()

    for marker, title in _KEYWORD_RULES:
        if marker in text:
            counterparty, note = _halves(_remainder_words(text, marker))
            return DescriptionParts(title=title, counterparty=counterparty, note=note)

    words = text.split(" ")
    if len(words) <= 2:
        return DescriptionParts(
            title=words[0], counterparty=words[1] if len(words) > 1 else "", note=""
        )

    third = math.ceil(len(words) / 3)
    return DescriptionParts(
        title=" ".join(words[:third]),
        counterparty=" ".join(words[third : 2 * third]),
        note=" ".join(words[2 * third :]),
    )


__all__ = ["split_description"]
