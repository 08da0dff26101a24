# services/api/routers/data.py
"""
Read-side endpoints: sheet data, cache control and health.
"""
from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Annotated

from fastapi import APIRouter, Depends, Request, Response

from core.gateway import SpreadsheetGateway
from core.header_mapping import HeaderMapper
from schemas.game import DataResponse

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api", tags=["data"])

NO_CACHE_HEADERS = {
    "Cache-Control": "no-cache, no-store, must-revalidate",
    "Pragma": "no-cache",
    "Expires": "0",
}


def get_gateway(request: Request) -> SpreadsheetGateway:
    return request.app.state.gateway


def get_mapper(request: Request) -> HeaderMapper:
    return request.app.state.mapper


Gateway = Annotated[SpreadsheetGateway, Depends(get_gateway)]
Mapper = Annotated[HeaderMapper, Depends(get_mapper)]


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat().replace("+00:00", "Z")


@router.get("/data", response_model=DataResponse)
async def get_data(gateway: Gateway, mapper: Mapper, response: Response):
    """
    Every row of the sheet as {header: cell} records.

    Served through the short in-memory cache; browsers are told not to
    cache so each poll reaches the server.

    `fields` is the column index of each game field, so the edit form
    fills its inputs from the same columns the server writes to.
    """
    result = gateway.fetch_all()
    response.headers.update(NO_CACHE_HEADERS)
    return {
        "success": True,
        "data": result.records,
        "headers": result.headers,
        "fields": mapper.mapping_for(result.headers),
        "timestamp": _now_iso(),
        "cached": result.cached,
    }


@router.post("/clear-cache")
async def clear_cache(gateway: Gateway):
    """Drop the cached sheet so the next read goes upstream."""
    gateway.invalidate()
    return {"success": True, "message": "Cache cleared"}


@router.post("/webhook")
async def sheet_changed(request: Request, gateway: Gateway):
    """Change notification from the sheet (e.g. an Apps Script trigger)."""
    try:
        payload = await request.json()
    except ValueError:
        payload = None
    logger.info(f"Webhook received, sheet updated: {payload}")
    gateway.invalidate()
    return {"received": True, "message": "Cache cleared, next request fetches fresh data"}


@router.get("/health")
async def health(gateway: Gateway):
    """Liveness plus cache age."""
    return {
        "status": "online",
        "timestamp": _now_iso(),
        "cache": gateway.cache_snapshot(),
    }
