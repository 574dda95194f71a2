# app/db/repositories/users.py
from __future__ import annotations

from typing import Optional
from sqlmodel import select

from app.db.repositories.base import BaseRepository
from app.db.models.users import User

class UserRepository(BaseRepository[User]):
    """
    Repository pour la table User (comptes de connexion, flag is_admin).
    Le hash du mot de passe est calculé par AuthService, jamais ici.
    """
    model = User

    def get_by_username(self, username: str) -> Optional[User]:
        return self.session.exec(
            select(self.model).where(self.model.username == username)
        ).first()
