# app/db/repositories/products.py
import math
from typing import Optional, Sequence, Tuple
from sqlmodel import select, func

from app.db.repositories.base import BaseRepository
from app.db.models.products import Product

class ProductRepository(BaseRepository[Product]):
    """CRUD Products + pagination du listing."""
    model = Product

    def paginate(self, *, page: int, size: int) -> Tuple[Sequence[Product], int, int]:
        """
        Retourne (produits de la page, total, page effective).
        La page est ramenée dans [1, dernière page] avant le calcul de l'offset
        (pas d'offset géant pour une page hors bornes).
        """
        total = self.count()
        last_page = max(1, math.ceil(total / size))
        page = min(max(page, 1), last_page)
        return self.list(offset=(page - 1) * size, limit=size), total, page

    def latest(self) -> Optional[Product]:
        """Dernier produit créé (id le plus grand)."""
        return self.session.exec(
            select(self.model).order_by(self.model.id.desc())
        ).first()

    def get_by_name(self, name: str) -> Optional[Product]:
        return self.session.exec(
            select(self.model).where(self.model.name == name)
        ).first()

    def count_by_photo(self, photo: str) -> int:
        """Nombre de produits référençant ce fichier (les noms d'origine peuvent se répéter)."""
        return self.session.exec(
            select(func.count(self.model.id)).where(self.model.photo == photo)
        ).one()
