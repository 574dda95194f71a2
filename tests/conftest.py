# tests/conftest.py

"""Shared pytest fixtures: in-memory database, local file store, users and clients."""

import os

# Avant tout import de app.* : base en mémoire, pas de fichier app.db
os.environ.setdefault("ENV", "test")
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("LOG_LEVEL", "WARNING")

import random
import uuid
from collections.abc import Callable, Generator

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.pool import StaticPool
from sqlmodel import Session, create_engine

from app.api.dependencies import get_file_store
from app.core.config import jwt_settings, settings
from app.db.models.products import Product
from app.db.models.users import User
from app.db.repositories.products import ProductRepository
from app.db.repositories.users import UserRepository
from app.db.session import get_session, init_db
from app.features.authentication.schemas import SignUpIn
from app.features.authentication.services import AuthService
from app.main import app
from app.security.tokens import create_access_token
from app.utils.storage import LocalFileStore

# Plus petit contenu reconnu comme JPEG par `filetype`
JPEG_BYTES = b"\xff\xd8\xff\xe0" + b"\x00" * 64


@pytest.fixture
def session() -> Generator[Session, None, None]:
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    init_db(engine)
    with Session(engine) as session:
        yield session


@pytest.fixture
def store(tmp_path) -> LocalFileStore:
    """Équivalent d'un stockage factice : disque sous tmp_path."""
    return LocalFileStore(tmp_path / "storage")


@pytest.fixture(autouse=True)
def overrides(session: Session, store: LocalFileStore) -> Generator[None, None, None]:
    app.dependency_overrides[get_session] = lambda: session
    app.dependency_overrides[get_file_store] = lambda: store
    yield
    app.dependency_overrides.clear()


@pytest.fixture
def create_user(session: Session) -> Callable[..., User]:
    auth = AuthService(user_repo=UserRepository(session), jwt_settings=jwt_settings)

    def _create(*, is_admin: bool = False, username: str | None = None, password: str = "secret-password") -> User:
        return auth.sign_up(SignUpIn(
            username=username or f"user-{uuid.uuid4().hex[:8]}",
            password=password,
            is_admin=is_admin,
        ))

    return _create


@pytest.fixture
def user(create_user) -> User:
    return create_user()


@pytest.fixture
def admin(create_user) -> User:
    return create_user(is_admin=True)


@pytest.fixture
def create_product(session: Session) -> Callable[..., Product]:
    repo = ProductRepository(session)

    def _create(**fields) -> Product:
        fields.setdefault("name", f"Product {uuid.uuid4().hex[:8]}")
        fields.setdefault("price", random.randint(1, 999))
        return repo.create(**fields)

    return _create


@pytest.fixture
def create_products(create_product) -> Callable[[int], list[Product]]:
    return lambda count: [create_product() for _ in range(count)]


def _client(user: User | None = None) -> TestClient:
    cookies = {}
    if user is not None:
        token = create_access_token(user_id=user.id, username=user.username, settings=jwt_settings)
        cookies[settings.AUTH_COOKIE_NAME] = token
    return TestClient(app, follow_redirects=False, cookies=cookies)


@pytest.fixture
def guest_client() -> TestClient:
    return _client()


@pytest.fixture
def user_client(user: User) -> TestClient:
    return _client(user)


@pytest.fixture
def admin_client(admin: User) -> TestClient:
    return _client(admin)


@pytest.fixture
def jpeg_bytes() -> bytes:
    return JPEG_BYTES
