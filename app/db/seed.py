from pathlib import Path
from typing import Any, Dict, List, Tuple

import yaml
from sqlmodel import Session

from app.db.models.users import User
from app.db.repositories.users import UserRepository
from app.security.permissions import Role
from app.security.tokens import JWTSettings, create_access_token


# -----------------------------
# YAML loader
# -----------------------------
def load_seed_yaml(seed_path: str | Path) -> Dict[str, Any]:
    path = Path(seed_path)
    if not path.exists():
        raise FileNotFoundError(f"Seed YAML introuvable: {path}")

    data = yaml.safe_load(path.read_text(encoding="utf-8"))
    if not isinstance(data, dict):
        raise ValueError("Le YAML de seed doit contenir un objet racine (mapping).")
    return data


# -----------------------------
# Users
# -----------------------------
def seed_users(session: Session, users: List[Dict[str, Any]]) -> List[User]:
    """
    Crée ou met à jour les utilisateurs décrits (id, name, role, blacklisted).
    Idempotent : relancer le seed ne duplique rien.
    """
    repo = UserRepository(session)
    seeded: List[User] = []
    for entry in users:
        if "id" not in entry:
            raise ValueError(f"Utilisateur sans id dans le seed: {entry}")
        fields = {
            "name": entry.get("name"),
            "role": Role(entry.get("role", Role.USER.value)),
            "blacklisted": bool(entry.get("blacklisted", False)),
        }
        user = repo.get(str(entry["id"]))
        if user is None:
            user = repo.create(id=str(entry["id"]), **fields)
        else:
            user = repo.update(user, **fields)
        seeded.append(user)
    return seeded


def seed_all(session: Session, *, seed_path: str | Path, jwt_settings: JWTSettings) -> List[Tuple[User, str]]:
    """Seed complet ; retourne (user, access token de dev) pour chaque utilisateur."""
    data = load_seed_yaml(seed_path)
    users = seed_users(session, data.get("users") or [])
    return [
        (user, create_access_token(user_id=user.id, name=user.name, settings=jwt_settings))
        for user in users
    ]
