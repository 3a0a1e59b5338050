from typing import List, Optional
from datetime import datetime
from urllib.parse import urlparse

from pydantic import BaseModel, Field as PydField, field_validator

from app.db.models.base import GameType


# ---------- IN / UPDATE ----------

class GameplayCreateIn(BaseModel):
    url: str = PydField(..., min_length=1, description="Lien YouTube de la vidéo", examples=["https://www.youtube.com/watch?v=dQw4w9WgXcQ"])
    category: GameType = PydField(..., description="Jeu présent dans la vidéo", examples=["VAL"])

    @field_validator("url")
    @classmethod
    def _http_url(cls, value: str) -> str:
        value = value.strip()
        parsed = urlparse(value)
        if parsed.scheme not in ("http", "https") or not parsed.netloc:
            raise ValueError("url must be an absolute http(s) URL")
        return value


class GameplayUpdateIn(BaseModel):
    # seuls champs modifiables
    category: Optional[GameType] = None
    is_analyzed: Optional[bool] = None


# ---------- OUT ----------

class GameplayOut(BaseModel):
    id: str
    owner_id: str
    url: str
    category: GameType
    video_format: Optional[str] = None
    is_analyzed: bool
    is_game_footage: bool
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = {"from_attributes": True}


class GameplayDashOut(GameplayOut):
    owner_name: Optional[str] = None


class GameplayPageOut(BaseModel):
    items: List[GameplayDashOut]
    total: int
    page: int
    page_size: int


class ClipOut(BaseModel):
    id: int
    footage_id: str
    file_path: str
    start_seconds: Optional[float] = None
    end_seconds: Optional[float] = None

    model_config = {"from_attributes": True}


class MessageOut(BaseModel):
    message: str
