"""
Pydantic schemas for API request/response validation.
"""
from .game import (
    AuthRequest,
    AuthResponse,
    DataResponse,
    GameCreate,
    GameUpdate,
    WriteResponse,
    WriteResult,
)
