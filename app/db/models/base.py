"""
➡️ But : Définir la structure des tables de la base (ORM).

Contient les classes héritant de SQLModel (ou Base de SQLAlchemy).

Représente les objets persistés. Ici on représente les propriétés communes de toutes les tables
(clé primaire entière + horodatages), ainsi que l'énumération des jeux supportés.

Chaque champ = une colonne SQL (avec type, index, clé primaire...).

🔹 Avantages :

Tu manipules des objets Python, pas du SQL brut.

Facile à migrer vers PostgreSQL ou MySQL plus tard.
"""

from enum import Enum
from sqlmodel import SQLModel, Field
from datetime import datetime, timezone
from typing import Optional


class GameType(str, Enum):
    """Jeux supportés (catégorie d'une vidéo)."""
    VAL = "VAL"
    CSG = "CSG"
    TF2 = "TF2"
    APE = "APE"
    COD = "COD"
    R6S = "R6S"


def utc_now() -> datetime:
    """Horodatage UTC avec fuseau (les colonnes datetime refusent les valeurs naïves)."""
    return datetime.now(timezone.utc)


class TimestampsMixin(SQLModel, table=False):
    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)


class BaseModelDB(TimestampsMixin, table=False):
    id: Optional[int] = Field(default=None, primary_key=True)
