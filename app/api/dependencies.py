"""
➡️ But : Centraliser les dépendances réutilisables des routes.

Exemples :

get_product_service() : crée un ProductService à partir d’une session DB et du file store.

get_current_user() : identifie l'utilisateur via le cookie (ou un header Bearer).

authorize(action) : garde de route basée sur app.security.policies.can().
"""

from typing import Optional

from fastapi import Depends, HTTPException, Request, Security, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlmodel import Session

from app.core.config import settings, jwt_settings
from app.db.models.users import User
from app.db.session import get_session
from app.db.repositories.products import ProductRepository
from app.db.repositories.users import UserRepository
from app.features.authentication.services import AuthService, InvalidToken
from app.features.products.services import ProductService
from app.security.policies import ProductAction, can
from app.utils.storage import FileStore, make_file_store


class LoginRequired(Exception):
    """Levée quand une page exige un utilisateur connecté ; convertie en redirection vers /login."""


# -----------------------------
# Repositories / stockage
# -----------------------------
def get_product_repository(session: Session = Depends(get_session)) -> ProductRepository:
    return ProductRepository(session)

def get_user_repository(session: Session = Depends(get_session)) -> UserRepository:
    return UserRepository(session)

def get_file_store() -> FileStore:
    return make_file_store()


# -----------------------------
# Services
# -----------------------------
def get_auth_service(user_repo: UserRepository = Depends(get_user_repository)) -> AuthService:
    return AuthService(user_repo=user_repo, jwt_settings=jwt_settings)

def get_product_service(
    repo: ProductRepository = Depends(get_product_repository),
    store: FileStore = Depends(get_file_store),
) -> ProductService:
    return ProductService(repo=repo, store=store)


# -----------------------------
# Authentication data
# -----------------------------
bearer_scheme = HTTPBearer(auto_error=False)

def get_access_token(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Security(bearer_scheme),
) -> Optional[str]:
    """Cookie d'abord (navigateur), sinon header Authorization: Bearer (clients HTTP)."""
    token = request.cookies.get(settings.AUTH_COOKIE_NAME)
    if token:
        return token
    if credentials and credentials.scheme.lower() == "bearer":
        return credentials.credentials
    return None

def get_current_user_or_none(
    access_token: Optional[str] = Depends(get_access_token),
    auth_svc: AuthService = Depends(get_auth_service),
) -> Optional[User]:
    if not access_token:
        return None
    try:
        return auth_svc.get_current_user(access_token=access_token)
    except InvalidToken:
        return None

def get_current_user(user: Optional[User] = Depends(get_current_user_or_none)) -> User:
    if user is None:
        raise LoginRequired()
    return user


# -----------------------------
# Authorization
# -----------------------------
def authorize(action: ProductAction):
    """Dépendance : utilisateur connecté (sinon /login) ET autorisé pour `action` (sinon 403)."""
    def _guard(user: User = Depends(get_current_user)) -> User:
        if not can(user, action):
            raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Forbidden")
        return user
    return _guard
