# services/api/core/header_mapping.py
"""
Map spreadsheet header text to the game fields the API writes.

The sheet is edited by hand, so columns are found by keyword rather than by
exact title ("Horário", "Horario do jogo", "HORÁRIO" all land on `horario`).
"""
from __future__ import annotations

from typing import Dict, List, Optional, Sequence

# Field slots, in the order they are written
GAME_FIELDS: List[str] = [
    "fase",
    "jogo",
    "confronto",
    "data",
    "dia",
    "horario",
    "quadra",
    "placarVivo",
]


def _field_for_header(header: str) -> Optional[str]:
    """Return the field a single header belongs to, or None."""
    h = (header or "").strip().lower()
    if not h:
        return None

    if "fase" in h:
        return "fase"
    if "jogo" in h and "jogador" not in h:
        return "jogo"
    if "confronto" in h:
        return "confronto"
    # "Data/Hora" style columns are timestamps, not the game date
    if "data" in h and "hora" not in h:
        return "data"
    if "dia" in h:
        return "dia"
    if "horário" in h or "horario" in h:
        return "horario"
    if "quadra" in h:
        return "quadra"
    if "placar" in h and "vivo" in h:
        return "placarVivo"
    return None


def map_headers(headers: Optional[Sequence[str]]) -> Dict[str, int]:
    """
    Build {field: column_index} for the given header row.

    First matching column wins per field. Fields without a column are left
    out of the map; writers must skip them.
    """
    mapping: Dict[str, int] = {}
    if not headers:
        return mapping

    for idx, header in enumerate(headers):
        field = _field_for_header(header)
        if field is not None and field not in mapping:
            mapping[field] = idx
    return mapping


class HeaderMapper:
    """
    Memoizes map_headers() for the last header list seen.

    The cache is keyed by identity: the gateway hands out the same list
    object until it refetches, so an equal-but-new list is recomputed.
    """

    def __init__(self) -> None:
        self._headers: Optional[Sequence[str]] = None
        self._mapping: Dict[str, int] = {}

    def mapping_for(self, headers: Optional[Sequence[str]]) -> Dict[str, int]:
        if headers is not None and headers is self._headers:
            return self._mapping

        self._mapping = map_headers(headers)
        self._headers = headers
        return self._mapping
