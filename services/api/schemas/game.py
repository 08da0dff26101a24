"""
Pydantic schemas for the game endpoints.

Field names follow the sheet's Portuguese columns, which the browser
client sends as-is.
"""
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


def _clean(v: Any) -> str:
    if v is None:
        return ""
    return str(v).strip()


class GameCreate(BaseModel):
    """Schema for adding a game row. Every field is required and non-empty."""
    fase: str = Field(..., description="Tournament phase")
    jogo: str = Field(..., description="Game label")
    confronto: str = Field(..., description="Matchup, e.g. 'A vs B'")
    data: str = Field(..., description="Game date")
    dia: str = Field(..., description="Weekday")
    horario: str = Field(..., description="Start time")
    quadra: str = Field(..., description="Court")

    @field_validator("fase", "jogo", "confronto", "data", "dia", "horario", "quadra", mode="before")
    @classmethod
    def required_text(cls, v: Any) -> str:
        v = _clean(v)
        if not v:
            raise ValueError("must not be empty")
        return v


class GameUpdate(GameCreate):
    """Schema for updating a game row in place."""
    model_config = ConfigDict(populate_by_name=True)

    row_index: int = Field(
        ...,
        alias="rowIndex",
        ge=2,
        description="Absolute 1-based sheet row (row 1 is the header)",
    )
    placar_vivo: str = Field("", alias="placarVivo", description="Live score")

    @field_validator("placar_vivo", mode="before")
    @classmethod
    def optional_text(cls, v: Any) -> str:
        return _clean(v)

    def game_fields(self) -> dict:
        """Values keyed by header-mapping field name."""
        data = self.model_dump(by_alias=True)
        data.pop("rowIndex", None)
        return data


class AuthRequest(BaseModel):
    password: Optional[str] = None


class AuthResponse(BaseModel):
    success: bool = True
    token: str


class WriteResult(BaseModel):
    success: bool = True
    updatedCells: int = 0


class WriteResponse(BaseModel):
    success: bool = True
    message: str
    data: WriteResult


class DataResponse(BaseModel):
    success: bool = True
    data: List[dict]
    headers: List[str]
    fields: Dict[str, int] = Field(default_factory=dict)
    timestamp: str
    cached: bool = False
