from sqlmodel import Field
from sqlalchemy import UniqueConstraint

from .base import BaseModelDB, GameType


class Vote(BaseModelDB, table=True):
    """Avis d'un relecteur : est-ce bien du gameplay, et de quel jeu ?"""

    __table_args__ = (
        UniqueConstraint("footage_id", "user_id", name="uq_vote_footage_user"),
    )

    footage_id: str = Field(foreign_key="footage.id", index=True)
    user_id: str = Field(foreign_key="user.id", index=True)
    is_game: bool
    actual_game: GameType
