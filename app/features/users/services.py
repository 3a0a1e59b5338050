"""
➡️ But : Contenir la logique métier des utilisateurs : profil courant, gestion des rôles / blacklist.

Seul un ADMIN peut changer le rôle ou la blacklist d'un autre utilisateur.
"""

from app.core.errors import NotFound, BadInput
from app.core.logging import get_logger
from app.db.models.base import utc_now
from app.db.models.users import User
from app.db.repositories.users import UserRepository
from app.features.authentication.schemas import Caller
from app.features.users.schemas import UserUpdate
from app.security.permissions import Perms, require_perms

log = get_logger("users")


class UserService:
    def __init__(self, repo: UserRepository):
        self.repo = repo

    def get(self, user_id: str) -> User:
        user = self.repo.get(user_id)
        if not user:
            raise NotFound("User not found")
        return user

    def me(self, caller: Caller) -> User:
        return self.get(caller.user_id)

    def update(self, caller: Caller, user_id: str, payload: UserUpdate) -> User:
        require_perms(caller, item_owner_id=None, required=Perms.ROLE_ADMIN)
        user = self.get(user_id)
        changes = payload.model_dump(exclude_unset=True, exclude_none=True)
        if not changes:
            raise BadInput("Nothing to update")
        changes["updated_at"] = utc_now()
        log.info("Admin %s updates user %s: %s", caller.user_id, user_id, changes)
        return self.repo.update(user, **changes)
