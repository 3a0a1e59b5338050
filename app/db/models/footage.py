from uuid import uuid4
from typing import Optional
from sqlmodel import Field

from .base import GameType, TimestampsMixin


def new_footage_id() -> str:
    return uuid4().hex


class Footage(TimestampsMixin, table=True):
    """Vidéo de gameplay soumise par un utilisateur (lien YouTube)."""

    id: str = Field(default_factory=new_footage_id, primary_key=True)
    owner_id: str = Field(foreign_key="user.id", index=True, description="Auteur de la soumission")

    # Unicité garantie au niveau de la base (pas seulement par un check applicatif)
    url: str = Field(index=True, unique=True, description="URL YouTube soumise")
    category: GameType = Field(index=True, description="Jeu annoncé par l'auteur")
    video_format: Optional[str] = Field(default=None, description="Identifiant d'encodage téléchargé (itag)")

    is_analyzed: bool = Field(default=False, description="Analyse terminée par un modérateur")
    is_game_footage: bool = Field(default=False, description="Confirmé comme vraie vidéo de jeu")
