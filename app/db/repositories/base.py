from typing import Any, Generic, NoReturn, Optional, Sequence, Type, TypeVar
from sqlalchemy.exc import IntegrityError
from sqlmodel import SQLModel, Session, select, func

# Type générique pour le modèle (Footage, Clip, Vote, etc.)
ModelT = TypeVar("ModelT", bound=SQLModel)

class BaseRepository(Generic[ModelT]):
    """
    Repository de base pour les opérations CRUD standards.

    👉 Ne contient aucune logique métier.
    👉 Gère la persistance générique : create, read, update, delete, count, list.
    👉 Les repositories concrets définissent `model = MaClasseSQLModel`
       et peuvent surcharger `_integrity_error()` pour traduire une violation
       de contrainte (unicité…) en erreur métier.
    """

    model: Type[ModelT]

    def __init__(self, session: Session):
        self.session = session

    # ---------- READ ----------

    def list(self, offset: int = 0, limit: int = 100) -> Sequence[ModelT]:
        """Retourne une liste paginée des enregistrements."""
        statement = select(self.model).offset(offset).limit(limit)
        return self.session.exec(statement).all()

    def count(self) -> int:
        """Retourne le nombre total d’enregistrements."""
        return self.session.exec(select(func.count()).select_from(self.model)).one()

    def get(self, id_: Any) -> Optional[ModelT]:
        """Retourne un enregistrement par son identifiant, ou None."""
        return self.session.get(self.model, id_)

    # ---------- CREATE ----------

    def create(self, *, commit: bool = True, **fields) -> ModelT:
        """
        Crée et persiste un nouvel enregistrement.
        commit=False permet d'orchestrer une transaction globale au niveau service.
        """
        entity = self.model(**fields)
        self.session.add(entity)
        self._flush_or_commit(commit)
        if commit:
            self.session.refresh(entity)
        return entity

    # ---------- UPDATE ----------

    def update(self, entity: ModelT, *, commit: bool = True, **changes) -> ModelT:
        """
        Met à jour un enregistrement existant.
        commit=False permet d'orchestrer une transaction globale au niveau service.
        """
        for key, value in changes.items():
            setattr(entity, key, value)
        self.session.add(entity)
        self._flush_or_commit(commit)
        if commit:
            self.session.refresh(entity)
        return entity

    # ---------- DELETE ----------

    def delete(self, entity: ModelT, *, commit: bool = True) -> None:
        """
        Supprime un enregistrement.
        commit=False permet d'orchestrer une transaction globale au niveau service.
        """
        self.session.delete(entity)
        self._flush_or_commit(commit)

    def delete_where(self, *conditions, commit: bool = True) -> int:
        """Suppression en masse ; retourne le nombre de lignes supprimées."""
        rows = self.session.exec(select(self.model).where(*conditions)).all()
        for row in rows:
            self.session.delete(row)
        self._flush_or_commit(commit)
        return len(rows)

    # ---------- TRANSACTION ----------

    def commit(self) -> None:
        self._flush_or_commit(True)

    def _flush_or_commit(self, commit: bool) -> None:
        try:
            if commit:
                self.session.commit()
            else:
                # flush pour obtenir l'ID sans commit (utile pour FKs)
                self.session.flush()
        except IntegrityError as exc:
            self.session.rollback()
            self._integrity_error(exc)

    def _integrity_error(self, exc: IntegrityError) -> NoReturn:
        raise exc
