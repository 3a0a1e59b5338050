from typing import NoReturn, Optional, Sequence
from sqlalchemy.exc import IntegrityError
from sqlmodel import select

from app.core.errors import DuplicateVote, NotFound
from app.db.repositories.base import BaseRepository
from app.db.models.votes import Vote


class VoteRepository(BaseRepository[Vote]):
    """CRUD Votes. Un seul vote par couple (footage, user), garanti par la base."""
    model = Vote

    def get_for(self, footage_id: str, user_id: str) -> Optional[Vote]:
        return self.session.exec(
            select(self.model).where(
                self.model.footage_id == footage_id,
                self.model.user_id == user_id,
            )
        ).first()

    def list_by_footage(self, footage_id: str) -> Sequence[Vote]:
        return self.session.exec(
            select(self.model).where(self.model.footage_id == footage_id)
        ).all()

    def delete_by_footage(self, footage_id: str, *, commit: bool = True) -> int:
        return self.delete_where(self.model.footage_id == footage_id, commit=commit)

    def _integrity_error(self, exc: IntegrityError) -> NoReturn:
        message = str(exc.orig).lower()
        if "unique" in message:
            raise DuplicateVote() from exc
        # vidéo supprimée entre la vérification et l'insertion du vote
        if "foreign key" in message:
            raise NotFound("Could not find that requested gameplay") from exc
        raise exc
