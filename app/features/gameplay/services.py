from typing import Optional, Sequence

from app.core.errors import NotFound, BadInput
from app.core.logging import get_logger
from app.db.models.base import GameType, utc_now
from app.db.models.clips import Clip
from app.db.models.footage import Footage
from app.db.repositories.clips import ClipRepository
from app.db.repositories.footage import FootageRepository
from app.db.repositories.users import UserRepository
from app.db.repositories.votes import VoteRepository
from app.features.authentication.schemas import Caller
from app.features.gameplay.schemas import GameplayCreateIn, GameplayDashOut, GameplayUpdateIn
from app.features.ingestion.services import IngestionService
from app.security.permissions import Perms, has_perms, require_perms
from app.utils.media_files import remove_artifacts

log = get_logger("gameplay")

PAGE_SIZE = 10


def page_offset(page: int, page_size: int = PAGE_SIZE) -> int:
    """page 1 -> 0, page 2 -> 10, ..."""
    if page < 1:
        raise BadInput("page must be >= 1")
    return page * page_size - page_size


class GameplayService:
    """
    Logique métier / contrôles d'accès pour les vidéos de gameplay.
    - Owner : lecture / modification de catégorie / suppression de ses vidéos.
    - Mod   : tout ce que fait un owner sur toutes les vidéos, + clips et flag d'analyse.
    - Admin : idem Mod.
    Un appelant blacklisté est refusé partout (voir security.permissions).
    """

    def __init__(
        self,
        *,
        repo: FootageRepository,
        clip_repo: ClipRepository,
        vote_repo: VoteRepository,
        user_repo: UserRepository,
        ingestion: IngestionService,
    ):
        self.repo = repo
        self.clip_repo = clip_repo
        self.vote_repo = vote_repo
        self.user_repo = user_repo
        self.ingestion = ingestion

    def _get_or_404(self, footage_id: str) -> Footage:
        footage = self.repo.get(footage_id)
        if not footage:
            raise NotFound("Could not find that requested gameplay")
        return footage

    # -------- Writes --------

    def create(self, caller: Caller, payload: GameplayCreateIn) -> Footage:
        return self.ingestion.ingest(caller, payload.url, payload.category)

    def update(self, caller: Caller, footage_id: str, payload: GameplayUpdateIn) -> Footage:
        footage = self._get_or_404(footage_id)
        changes = payload.model_dump(exclude_unset=True, exclude_none=True)
        if not changes:
            raise BadInput("Nothing to update")

        # modifier le flag d'analyse demande au moins le rôle MOD
        analysis_changes = "is_analyzed" in changes and changes["is_analyzed"] != footage.is_analyzed
        required = Perms.ROLE_MOD if analysis_changes else Perms.IS_OWNER
        require_perms(caller, item_owner_id=footage.owner_id, required=required)

        changes["updated_at"] = utc_now()
        return self.repo.update(footage, **changes)

    def delete(self, caller: Caller, footage_id: str) -> None:
        footage = self._get_or_404(footage_id)
        require_perms(caller, item_owner_id=footage.owner_id, required=Perms.IS_OWNER)

        # pas de cascade côté base : votes et clips supprimés explicitement, même transaction
        votes = self.vote_repo.delete_by_footage(footage_id, commit=False)
        clips = self.clip_repo.delete_by_footage(footage_id, commit=False)
        self.repo.delete(footage, commit=False)
        self.repo.commit()

        remove_artifacts(*self.ingestion.artifact_paths(footage_id))
        log.info("Footage %s deleted by %s (%d clips, %d votes)", footage_id, caller.user_id, clips, votes)

    # -------- Reads --------

    def get(self, caller: Caller, footage_id: str) -> Footage:
        footage = self.repo.get(footage_id)
        # introuvable ou pas à l'appelant : même réponse
        if footage is None or not has_perms(
            user_id=caller.user_id,
            user_role=caller.role,
            item_owner_id=footage.owner_id,
            required=Perms.IS_OWNER,
            blacklisted=caller.blacklisted,
        ):
            raise NotFound("Could not find that requested gameplay")
        return footage

    def list_for_user(self, caller: Caller, user_id: Optional[str] = None) -> Sequence[Footage]:
        # sans user_id : les vidéos de l'appelant ; un autre user_id est réservé aux mods/admins
        target = user_id or caller.user_id
        require_perms(caller, item_owner_id=target, required=Perms.IS_OWNER)
        if self.user_repo.get(target) is None:
            raise NotFound("No user found with the provided ID.")
        return self.repo.list_by_owner(target)

    def page(self, page: int, category: Optional[GameType] = None) -> dict:
        offset = page_offset(page)
        rows = self.repo.page(offset=offset, limit=PAGE_SIZE, category=category)
        total = self.repo.count_by_category(category)
        items = [
            GameplayDashOut.model_validate(footage).model_copy(update={"owner_name": owner_name})
            for footage, owner_name in rows
        ]
        return {"items": items, "total": total, "page": page, "page_size": PAGE_SIZE}

    def clips(self, caller: Caller, footage_id: str) -> Sequence[Clip]:
        footage = self._get_or_404(footage_id)
        require_perms(caller, item_owner_id=footage.owner_id, required=Perms.ROLE_MOD)
        return self.clip_repo.list_by_footage(footage_id)
