import logging
from typing import Optional

from jose import JWTError

from app.db.models.users import User
from app.db.repositories.users import UserRepository
from app.security.password import verify_password, hash_password
from app.security.tokens import JWTSettings, create_access_token, decode_token
from app.features.authentication.schemas import SignInIn, SignUpIn

logger = logging.getLogger(__name__)


class InvalidToken(Exception):
    """Token absent, illisible, expiré, ou utilisateur disparu."""


class UsernameTaken(Exception):
    pass


class AuthService:
    """
    Service d'authentification : orchestre le repository users + tokens.
    Ne contient pas d'accès SQL direct.
    """

    def __init__(self, *, user_repo: UserRepository, jwt_settings: JWTSettings):
        self.user_repo = user_repo
        self.jwt = jwt_settings

    # ---------- Sign up ----------
    def sign_up(self, payload: SignUpIn) -> User:
        if self.user_repo.get_by_username(payload.username):
            raise UsernameTaken(payload.username)
        user = self.user_repo.create(
            username=payload.username,
            hashed_password=hash_password(payload.password),
            is_admin=payload.is_admin,
        )
        logger.info("Utilisateur créé id=%s admin=%s", user.id, user.is_admin)
        return user

    # ---------- Sign in ----------
    def authenticate(self, payload: SignInIn) -> Optional[User]:
        """Retourne l'utilisateur si les identifiants sont bons, sinon None (sans dire lequel est faux)."""
        user = self.user_repo.get_by_username(payload.username)
        if not user or not verify_password(payload.password, user.hashed_password):
            logger.info("Échec de connexion pour %r", payload.username)
            return None
        return user

    def issue_access_token(self, user: User) -> str:
        return create_access_token(user_id=user.id, username=user.username, settings=self.jwt)

    # ---------- Current user depuis access token ----------
    def get_current_user(self, *, access_token: str) -> User:
        try:
            decoded = decode_token(access_token, self.jwt)
        except JWTError:
            raise InvalidToken("Invalid token")

        if decoded.get("typ") != "access":
            raise InvalidToken("Invalid token type")

        try:
            user_id = int(decoded.get("sub", ""))
        except ValueError:
            raise InvalidToken("Invalid subject")

        user = self.user_repo.get(user_id)
        if not user:
            raise InvalidToken("User not found")
        return user
