from dataclasses import dataclass
from typing import Optional

from pydantic import BaseModel

from app.security.permissions import Role


# ---------- Contexte de requête ----------

@dataclass(frozen=True)
class Caller:
    """
    Identité de l'appelant, passée explicitement à chaque service.
    Construite une fois par requête à partir du token (voir AuthService).
    """
    user_id: str
    role: Role = Role.USER
    blacklisted: bool = False
    name: Optional[str] = None
    request_id: Optional[str] = None


# ---------- Outputs ----------

class CallerOut(BaseModel):
    id: str
    name: Optional[str] = None
    role: Role
    blacklisted: bool
