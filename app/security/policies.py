"""
➡️ But : Centraliser les règles d'accès au catalogue.

can(user, action) répond oui/non ; les routes ET les templates passent par là,
ce qui garantit que les boutons affichés correspondent aux routes autorisées.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from app.db.models.users import User


class ProductAction(str, Enum):
    VIEW_ANY = "view_any"
    VIEW = "view"
    CREATE = "create"
    UPDATE = "update"
    DELETE = "delete"


# Actions ouvertes à tout utilisateur authentifié
_READ_ACTIONS = {ProductAction.VIEW_ANY, ProductAction.VIEW}


@dataclass(frozen=True)
class Abilities:
    """Réponses de can() exposées aux templates en attributs (can.update, can.delete...)."""
    view_any: bool
    view: bool
    create: bool
    update: bool
    delete: bool


def can(user: Optional[User], action: ProductAction) -> bool:
    if user is None:
        return False
    if action in _READ_ACTIONS:
        return True
    return bool(user.is_admin)


def abilities(user: Optional[User]) -> Abilities:
    """Toutes les réponses de can() pour un user (contexte des templates)."""
    return Abilities(**{action.value: can(user, action) for action in ProductAction})
