"""
➡️ But : Définir les formats d’entrée/sortie de l’API (couche validation).

UserUpdate → corps PATCH (admin)

UserOut → réponse de l’API
"""

from datetime import datetime
from typing import Optional

from sqlmodel import SQLModel

from app.security.permissions import Role


class UserUpdate(SQLModel):
    role: Optional[Role] = None
    blacklisted: Optional[bool] = None


class UserOut(SQLModel):
    id: str
    name: Optional[str] = None
    role: Role
    blacklisted: bool
    created_at: Optional[datetime] = None
