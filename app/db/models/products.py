"""
➡️ But : Définir la structure des tables de la base (ORM).

Représente les produits du catalogue. La photo est référencée par le nom de
fichier d'origine, stocké sous products/ dans le file store.
"""

from typing import Optional
from sqlmodel import Field

from .base import BaseModelDB

class Product(BaseModelDB, table=True):
    name: str = Field(index=True, max_length=255)
    price: float = Field(ge=0)
    photo: Optional[str] = Field(default=None, description="Nom du fichier dans products/")
