"""
➡️ But : Configurer la base SQLite et gérer les sessions de base de données.

engine : connexion à la base (sqlite:///app.db par défaut).

init_db() : crée les tables à partir des modèles SQLModel.

get_session() : dépendance FastAPI qui ouvre une session, la fournit aux routes, puis la ferme proprement.
"""

from typing import Dict, Any
from sqlmodel import SQLModel, create_engine, Session
from sqlalchemy.engine import Engine

# Import all models for creating all tables
from app.db.models.users import User  # noqa: F401
from app.db.models.products import Product  # noqa: F401

from app.core.config import settings

def _build_engine() -> Engine:
    url = settings.DATABASE_URL
    assert url, "DATABASE_URL must be set"

    is_sqlite = url.startswith("sqlite:")

    connect_args: Dict[str, Any] = {}
    if is_sqlite:
        # Requis pour SQLite quand utilisé dans un app serveur (multi-threads)
        connect_args["check_same_thread"] = False

    # echo seulement en dev pour ne pas polluer les logs en prod
    engine = create_engine(
        url,
        echo=(settings.ENV == "dev" and settings.LOG_LEVEL.upper() == "DEBUG"),
        connect_args=connect_args,
        pool_pre_ping=not is_sqlite,  # ping utile pour Postgres/MySQL ; inutile pour SQLite
    )
    return engine

engine: Engine = _build_engine()

def init_db(bind: Engine | None = None) -> None:
    """
    Crée les tables si elles n'existent pas (usage dev/demo).
    """
    SQLModel.metadata.create_all(bind or engine)


def get_session():
    """
    Dépendance FastAPI : fournit une session par requête.
    Utilisation :
        def route(..., session: Session = Depends(get_session)):
            ...
    """
    with Session(engine) as session:
        yield session
