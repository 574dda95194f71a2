from pathlib import Path

from fastapi.templating import Jinja2Templates

TEMPLATES_DIR = Path(__file__).resolve().parent.parent / "templates"

templates = Jinja2Templates(directory=str(TEMPLATES_DIR))


def format_price(value) -> str:
    """101.0 -> "101", 12.5 -> "12.5" (pas de zéros inutiles à l'affichage)."""
    if value is None:
        return ""
    return f"{float(value):.2f}".rstrip("0").rstrip(".")


templates.env.filters["price"] = format_price
