from typing import List, NoReturn, Optional, Sequence, Tuple
from sqlalchemy.exc import IntegrityError
from sqlmodel import select, func, col

from app.core.errors import DuplicateSubmission
from app.db.repositories.base import BaseRepository
from app.db.models.base import GameType
from app.db.models.footage import Footage
from app.db.models.users import User
from app.db.models.votes import Vote

# Clés de tri possibles pour la sélection "aléatoire" d'une vidéo à relire
REVIEW_ORDER_KEYS = ("owner_id", "id", "url")


class FootageRepository(BaseRepository[Footage]):
    """CRUD Footage + requêtes spécifiques (URL, propriétaire, pagination, relecture)."""
    model = Footage

    # ---------- GETTERS SPÉCIFIQUES ----------

    def get_by_url(self, url: str) -> Optional[Footage]:
        return self.session.exec(
            select(self.model).where(self.model.url == url)
        ).first()

    def list_by_owner(self, owner_id: str) -> Sequence[Footage]:
        stmt = (
            select(self.model)
            .where(self.model.owner_id == owner_id)
            .order_by(col(self.model.created_at).desc())
        )
        return self.session.exec(stmt).all()

    # ---------- PAGINATION (dashboard) ----------

    def page(
        self,
        *,
        offset: int,
        limit: int,
        category: Optional[GameType] = None,
    ) -> List[Tuple[Footage, Optional[str]]]:
        """Page de vidéos avec le nom de l'auteur joint. Ordre stable : création puis id."""
        stmt = (
            select(self.model, User.name)
            .join(User, User.id == self.model.owner_id, isouter=True)
            .order_by(col(self.model.created_at).asc(), col(self.model.id).asc())
        )
        if category is not None:
            stmt = stmt.where(self.model.category == category)
        stmt = stmt.offset(offset).limit(limit)
        return [(footage, name) for footage, name in self.session.exec(stmt).all()]

    def count_by_category(self, category: Optional[GameType] = None) -> int:
        stmt = select(func.count()).select_from(self.model)
        if category is not None:
            stmt = stmt.where(self.model.category == category)
        return self.session.exec(stmt).one()

    # ---------- RELECTURE ----------

    def _not_voted_by(self, user_id: str):
        voted = select(Vote.footage_id).where(Vote.user_id == user_id)
        return col(self.model.id).not_in(voted)

    def count_not_voted_by(self, user_id: str) -> int:
        stmt = select(func.count()).select_from(self.model).where(self._not_voted_by(user_id))
        return self.session.exec(stmt).one()

    def pick_not_voted_by(
        self,
        user_id: str,
        *,
        order_key: str,
        descending: bool,
        offset: int,
    ) -> Optional[Footage]:
        if order_key not in REVIEW_ORDER_KEYS:
            raise ValueError(f"Unsupported order key: {order_key}")
        order_col = col(getattr(self.model, order_key))
        stmt = (
            select(self.model)
            .where(self._not_voted_by(user_id))
            .order_by(order_col.desc() if descending else order_col.asc())
            .offset(offset)
            .limit(1)
        )
        return self.session.exec(stmt).first()

    # ---------- CONTRAINTES ----------

    def _integrity_error(self, exc: IntegrityError) -> NoReturn:
        message = str(exc.orig).lower()
        if "unique" in message and "url" in message:
            raise DuplicateSubmission() from exc
        raise exc
