import logging
from pathlib import Path
from typing import Any, Dict, List

import yaml
from sqlmodel import Session

from app.core.config import jwt_settings
from app.db.repositories.products import ProductRepository
from app.db.repositories.users import UserRepository
from app.features.authentication.schemas import SignUpIn
from app.features.authentication.services import AuthService

logger = logging.getLogger(__name__)


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
# Seeders (idempotents)
# -----------------------------
def seed_users(session: Session, data: Dict[str, Any]) -> int:
    """Crée les users absents (clé: username). Retourne le nombre créé."""
    repo = UserRepository(session)
    auth = AuthService(user_repo=repo, jwt_settings=jwt_settings)
    users_yaml: List[Dict[str, Any]] = data.get("users", [])
    created = 0
    for u in users_yaml:
        if repo.get_by_username(u["username"]):
            continue
        auth.sign_up(SignUpIn(
            username=u["username"],
            password=u["password"],
            is_admin=bool(u.get("is_admin", False)),
        ))
        created += 1
    return created


def seed_products(session: Session, data: Dict[str, Any]) -> int:
    """Crée les produits absents (clé: name). Pas de photo au seed."""
    repo = ProductRepository(session)
    products_yaml: List[Dict[str, Any]] = data.get("products", [])
    created = 0
    for p in products_yaml:
        if repo.get_by_name(p["name"]):
            continue
        repo.create(name=p["name"], price=float(p["price"]))
        created += 1
    return created


def seed_all(*, session: Session, seed_path: str | Path) -> Dict[str, int]:
    data = load_seed_yaml(seed_path)
    counts = {
        "users": seed_users(session, data),
        "products": seed_products(session, data),
    }
    logger.info("Seed terminé: %s", counts)
    return counts
