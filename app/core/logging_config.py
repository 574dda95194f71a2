"""
➡️ But : Configurer les logs de l'application une seule fois au démarrage.

Tous les modules utilisent logging.getLogger(__name__) : ils héritent du logger
racine "app" configuré ici (niveau lu dans settings.LOG_LEVEL).
"""

import logging
import sys

from app.core.config import settings

_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"
CONSOLE_HANDLER_NAME = "app.console"


def setup_logging(level: str | None = None) -> logging.Logger:
    """Initialise le logger racine ``app`` et le retourne."""
    root_logger = logging.getLogger("app")
    root_logger.setLevel((level or settings.LOG_LEVEL).upper())

    # Un seul handler console même si appelée plusieurs fois (tests, reload) ;
    # les handlers posés par d'autres (pytest, APM) ne comptent pas
    if any(h.get_name() == CONSOLE_HANDLER_NAME for h in root_logger.handlers):
        return root_logger

    handler = logging.StreamHandler(sys.stderr)
    handler.set_name(CONSOLE_HANDLER_NAME)
    handler.setFormatter(logging.Formatter(_FORMAT, datefmt=_DATE_FORMAT))
    root_logger.addHandler(handler)
    root_logger.propagate = False

    root_logger.debug("Logging initialisé (niveau %s)", root_logger.level)
    return root_logger
