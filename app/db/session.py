"""
➡️ But : Construire l'engine SQLModel et fournir les sessions.

Base par défaut : fichier SQLite (settings.SQLITE_PATH), ou DATABASE_URL si défini.

init_db() : création des tables users / footage / clip / vote.

get_session() : une session par requête HTTP, fermée à la fin.

Sous SQLite, les clés étrangères sont activées à chaque connexion : un clip ou
un vote ne peut pas pointer vers une vidéo absente.
"""

from typing import Any, Dict

from sqlalchemy import event
from sqlalchemy.engine import Engine
from sqlmodel import Session, SQLModel, create_engine

# Les tables doivent être déclarées avant create_all
from app.db.models.users import User  # noqa: F401
from app.db.models.footage import Footage  # noqa: F401
from app.db.models.clips import Clip  # noqa: F401
from app.db.models.votes import Vote  # noqa: F401

from app.core.config import settings


def _sqlite_foreign_keys(dbapi_connection, _record) -> None:
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def _build_engine(url: str) -> Engine:
    is_sqlite = url.startswith("sqlite:")

    connect_args: Dict[str, Any] = {}
    if is_sqlite:
        # les ingestions tournent hors du thread de la requête
        connect_args["check_same_thread"] = False

    engine = create_engine(
        url,
        echo=(settings.ENV == "dev" and settings.LOG_LEVEL == "DEBUG"),
        connect_args=connect_args,
        pool_pre_ping=not is_sqlite,
    )
    if is_sqlite:
        event.listen(engine, "connect", _sqlite_foreign_keys)
    return engine


engine: Engine = _build_engine(settings.DATABASE_URL)


def init_db(bind: Engine = engine) -> None:
    """Crée les tables manquantes (pas de migrations pour l'instant)."""
    SQLModel.metadata.create_all(bind)


def get_session():
    with Session(engine) as session:
        yield session
