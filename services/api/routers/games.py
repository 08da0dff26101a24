# services/api/routers/games.py
"""
Write endpoints: add a game row, edit an existing one.
Both require a bearer token from /api/auth.
"""
from fastapi import APIRouter, Depends, Request
import logging

from core.auth import require_token
from core.game_writer import GameWriter
from schemas.game import GameCreate, GameUpdate, WriteResponse

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api", tags=["games"], dependencies=[Depends(require_token)])


def get_writer(request: Request) -> GameWriter:
    return request.app.state.writer


@router.post("/add", response_model=WriteResponse)
async def add_game(body: GameCreate, writer: GameWriter = Depends(get_writer)):
    """Append a game at the end of the sheet."""
    result = writer.append_row(body.model_dump())
    return {"success": True, "message": "Game added", "data": result}


@router.post("/update", response_model=WriteResponse)
async def update_game(body: GameUpdate, writer: GameWriter = Depends(get_writer)):
    """
    Overwrite one sheet row.

    rowIndex comes from the client (record position + 2) and is trusted
    as-is; a concurrent edit can shift rows under it.
    """
    result = writer.update_row(body.row_index, body.game_fields())
    return {"success": True, "message": "Game updated", "data": result}
