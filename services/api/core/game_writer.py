# services/api/core/game_writer.py
from __future__ import annotations

import logging
from typing import Any, Dict, Iterable, List, Mapping

from core.errors import MissingHeaders
from core.gateway import SpreadsheetGateway
from core.header_mapping import GAME_FIELDS, HeaderMapper

logger = logging.getLogger(__name__)

# Live score is only edited on existing games
APPEND_FIELDS = [f for f in GAME_FIELDS if f != "placarVivo"]
UPDATE_FIELDS = list(GAME_FIELDS)


def build_row(
    width: int,
    mapping: Mapping[str, int],
    game: Mapping[str, Any],
    fields: Iterable[str],
) -> List[str]:
    """
    Full-width row for the sheet: mapped fields get their value,
    every other column is "".
    """
    values = [""] * width
    for f in fields:
        idx = mapping.get(f)
        if idx is None or idx >= width:
            continue
        v = game.get(f)
        values[idx] = "" if v is None else str(v)
    return values


class GameWriter:
    """
    Append/update game rows using the live header layout.

    Row indexes are trusted as given: they are absolute 1-based sheet rows
    (header is row 1) and are not checked against current data.
    """

    def __init__(self, gateway: SpreadsheetGateway, mapper: HeaderMapper | None = None) -> None:
        self.gateway = gateway
        self.mapper = mapper or HeaderMapper()

    def _layout(self) -> tuple[List[str], Dict[str, int]]:
        headers = self.gateway.fetch_all().headers
        if not headers:
            raise MissingHeaders()
        return headers, self.mapper.mapping_for(headers)

    def append_row(self, game: Mapping[str, Any]) -> Dict[str, Any]:
        headers, mapping = self._layout()
        values = build_row(len(headers), mapping, game, APPEND_FIELDS)

        updated = self.gateway.backend.append_row(values)
        self.gateway.invalidate()

        logger.info(f"Appended game row ({updated} cells)")
        return {"success": True, "updatedCells": updated}

    def update_row(self, row_index: int, game: Mapping[str, Any]) -> Dict[str, Any]:
        headers, mapping = self._layout()
        values = build_row(len(headers), mapping, game, UPDATE_FIELDS)

        updated = self.gateway.backend.update_row(row_index, values)
        self.gateway.invalidate()

        logger.info(f"Updated sheet row {row_index} ({updated} cells)")
        return {"success": True, "updatedCells": updated}
