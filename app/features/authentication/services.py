from typing import Optional

from app.core.errors import Unauthorized, Forbidden
from app.core.logging import get_logger
from app.db.repositories.users import UserRepository
from app.features.authentication.schemas import Caller
from app.security.tokens import JWTSettings, JWTError, decode_token

log = get_logger("auth")


class AuthService:
    """
    Adaptateur vers le fournisseur d'identité externe.
    Les credentials ne sont jamais gérés ici : on valide un access token signé,
    puis on lit (ou provisionne) l'utilisateur pour connaître son rôle et sa blacklist.
    """

    def __init__(self, *, user_repo: UserRepository, jwt_settings: JWTSettings):
        self.user_repo = user_repo
        self.jwt = jwt_settings

    # ---------- Current caller depuis access token ----------
    def get_current_caller(self, *, access_token: str, request_id: Optional[str] = None) -> Caller:
        try:
            decoded = decode_token(access_token, self.jwt)
        except JWTError:
            raise Unauthorized("Invalid token")

        if decoded.get("typ") != "access" or not decoded.get("sub"):
            raise Unauthorized("Invalid token type")

        user = self.user_repo.get_or_create(str(decoded["sub"]), name=decoded.get("name"))
        return Caller(
            user_id=user.id,
            role=user.role,
            blacklisted=user.blacklisted,
            name=user.name,
            request_id=request_id,
        )

    def require_active(self, caller: Caller) -> Caller:
        """Un utilisateur blacklisté ne passe aucune route protégée."""
        if caller.blacklisted:
            log.info("Blacklisted user %s refused", caller.user_id)
            raise Forbidden()
        return caller
