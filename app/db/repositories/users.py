"""
➡️ But : Encapsuler toutes les opérations de base de données.

UserRepository : CRUD (create, read, update) sur la table User.

Ne contient aucune logique métier, juste de la persistance.

🔹 Avantages :

Réutilisable (les services n’ont pas à savoir comment la DB fonctionne).

Testable indépendamment (mock du repo sans base réelle).
"""

from __future__ import annotations

from typing import Optional
from sqlalchemy.exc import IntegrityError

from app.db.repositories.base import BaseRepository
from app.db.models.users import User
from app.security.permissions import Role

class UserRepository(BaseRepository[User]):
    """
    Repository pour la table User.
    Hérite du CRUD générique de BaseRepository.
    Contient uniquement les requêtes spécifiques à User.
    """
    model = User

    def get_or_create(self, user_id: str, *, name: Optional[str] = None) -> User:
        """Retourne l'utilisateur, en le créant (rôle USER) à sa première apparition."""
        user = self.get(user_id)
        if user is not None:
            if name and user.name != name:
                user = self.update(user, name=name)
            return user
        try:
            return self.create(id=user_id, name=name, role=Role.USER, blacklisted=False)
        except IntegrityError:
            # créé entre-temps par une requête concurrente
            return self.session.get(self.model, user_id, populate_existing=True)
