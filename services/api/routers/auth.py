# services/api/routers/auth.py
from fastapi import APIRouter, Depends
from typing import Annotated
import logging

from core.auth import Authenticator, get_authenticator
from schemas.game import AuthRequest, AuthResponse

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api", tags=["auth"])


@router.post("/auth", response_model=AuthResponse)
async def login(
    auth: Annotated[Authenticator, Depends(get_authenticator)],
    body: AuthRequest,
):
    """Exchange the shared password for a bearer token."""
    token = auth.authenticate(body.password)
    logger.info(f"Issued edit token ({len(auth.store)} active)")
    return {"success": True, "token": token}
