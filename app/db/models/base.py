"""
➡️ But : Propriétés communes de toutes les tables (clé primaire + horodatage).

Les modèles concrets (User, Product) héritent de BaseModelDB avec table=True.
"""

from sqlmodel import SQLModel, Field
from datetime import datetime, timezone
from typing import Optional


def utcnow() -> datetime:
    """Horodatage UTC avec fuseau (tzinfo=UTC)."""
    return datetime.now(timezone.utc)


class BaseModelDB(SQLModel, table=False):
    id: Optional[int] = Field(default=None, primary_key=True)
    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)
