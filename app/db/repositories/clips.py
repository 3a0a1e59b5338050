from typing import Iterable, List, Sequence
from sqlmodel import select, col

from app.db.repositories.base import BaseRepository
from app.db.models.clips import Clip


class ClipRepository(BaseRepository[Clip]):
    """CRUD Clips (extraits d'une Footage)."""
    model = Clip

    def list_by_footage(self, footage_id: str) -> Sequence[Clip]:
        stmt = (
            select(self.model)
            .where(self.model.footage_id == footage_id)
            .order_by(col(self.model.start_seconds).asc(), col(self.model.id).asc())
        )
        return self.session.exec(stmt).all()

    def bulk_create(self, footage_id: str, clips: Iterable[dict], *, commit: bool = True) -> List[Clip]:
        created = [self.model(footage_id=footage_id, **fields) for fields in clips]
        self.session.add_all(created)
        self._flush_or_commit(commit)
        return created

    def delete_by_footage(self, footage_id: str, *, commit: bool = True) -> int:
        return self.delete_where(self.model.footage_id == footage_id, commit=commit)
