from typing import List, Optional
from datetime import datetime

from pydantic import BaseModel, Field as PydField

from app.db.models.base import GameType
from app.features.gameplay.schemas import GameplayDashOut


class ReviewIn(BaseModel):
    gameplay_id: str = PydField(..., min_length=1)
    is_game: bool = PydField(..., description="La vidéo montre-t-elle vraiment du gameplay ?")
    actual_game: GameType = PydField(..., description="Jeu réellement présent selon le relecteur")


class VoteOut(BaseModel):
    id: int
    footage_id: str
    user_id: str
    is_game: bool
    actual_game: GameType
    created_at: Optional[datetime] = None

    model_config = {"from_attributes": True}


class ReviewItemOut(GameplayDashOut):
    votes: List[VoteOut] = []
