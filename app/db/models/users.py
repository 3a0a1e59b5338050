"""
➡️ But : Définir la structure des tables de la base (ORM).

Représente les utilisateurs connus du service. L'identité vient du fournisseur
d'authentification externe (id opaque, ex: id Discord) ; on ne stocke ici que
le rôle et le drapeau de blacklist.
"""

from typing import Optional
from sqlmodel import Field

from app.security.permissions import Role
from .base import TimestampsMixin


class User(TimestampsMixin, table=True):
    id: str = Field(primary_key=True, description="Identité fournie par l'auth externe")
    name: Optional[str] = Field(default=None, index=True)
    role: Role = Field(default=Role.USER)
    blacklisted: bool = Field(default=False)
