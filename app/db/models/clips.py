from typing import Optional
from sqlmodel import Field

from .base import BaseModelDB


class Clip(BaseModelDB, table=True):
    """Extrait produit par l'extracteur externe à partir d'une Footage."""

    footage_id: str = Field(foreign_key="footage.id", index=True)
    file_path: str = Field(description="Fichier extrait sur le disque local")
    start_seconds: Optional[float] = Field(default=None)
    end_seconds: Optional[float] = Field(default=None)
