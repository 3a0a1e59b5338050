"""
➡️ But : Évaluer les permissions en un seul endroit.

has_perms() est un prédicat pur : (appelant, rôle, propriétaire, blacklist, niveau requis) -> bool.
Les services traduisent un refus en Unauthorized via require_perms().

Niveaux (du plus permissif au plus strict) :
- IS_OWNER   : l'appelant est le propriétaire, ou a un rôle élevé (MOD/ADMIN)
- ROLE_MOD   : rôle >= MOD
- ROLE_ADMIN : rôle ADMIN
Un appelant blacklisté est toujours refusé.
"""

from enum import Enum
from typing import Optional

from app.core.errors import Unauthorized


class Role(str, Enum):
    USER = "USER"
    MOD = "MOD"
    ADMIN = "ADMIN"

    @property
    def rank(self) -> int:
        return _ROLE_RANK[self]

    def at_least(self, other: "Role") -> bool:
        return self.rank >= other.rank


_ROLE_RANK = {Role.USER: 0, Role.MOD: 1, Role.ADMIN: 2}


class Perms(str, Enum):
    IS_OWNER = "isOwner"
    ROLE_MOD = "roleMod"
    ROLE_ADMIN = "roleAdmin"


def has_perms(
    *,
    user_id: str,
    user_role: Role,
    item_owner_id: Optional[str],
    required: Perms,
    blacklisted: bool,
) -> bool:
    if blacklisted:
        return False
    role = Role(user_role)
    if required is Perms.IS_OWNER:
        return (item_owner_id is not None and user_id == item_owner_id) or role.at_least(Role.MOD)
    if required is Perms.ROLE_MOD:
        return role.at_least(Role.MOD)
    if required is Perms.ROLE_ADMIN:
        return role is Role.ADMIN
    return False


def require_perms(caller, *, item_owner_id: Optional[str], required: Perms) -> None:
    """Lève Unauthorized si `caller` (un Caller) n'a pas le niveau requis."""
    allowed = has_perms(
        user_id=caller.user_id,
        user_role=caller.role,
        item_owner_id=item_owner_id,
        required=required,
        blacklisted=caller.blacklisted,
    )
    if not allowed:
        raise Unauthorized()
