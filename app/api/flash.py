"""
➡️ But : Passer des données d'une requête à la suivante (pattern Post/Redirect/Get).

Après un POST invalide, la route "flashe" les erreurs et la saisie puis redirige
vers le formulaire ; le GET suivant les consomme (pop) une seule fois.
Stockage : la session signée de SessionMiddleware (cookie).
"""

from typing import Any, Dict

from fastapi import Request

_FLASH_KEY = "_flash"
# Saisie renvoyée au formulaire : tronquée pour garder le cookie de session sous ~4 Ko
OLD_INPUT_MAX_LENGTH = 255


def flash(request: Request, key: str, value: Any) -> None:
    request.session.setdefault(_FLASH_KEY, {})[key] = value


def flash_form(request: Request, *, errors: Dict[str, list], old: Dict[str, Any]) -> None:
    flash(request, "errors", errors)
    flash(request, "old", {
        key: value[:OLD_INPUT_MAX_LENGTH] if isinstance(value, str) else value
        for key, value in old.items()
    })


def pop_flash(request: Request) -> Dict[str, Any]:
    """Retourne et efface les données flashées : errors, old, status (dicts vides par défaut)."""
    data = request.session.pop(_FLASH_KEY, None) or {}
    return {
        "errors": data.get("errors", {}),
        "old": data.get("old", {}),
        "status": data.get("status"),
    }
