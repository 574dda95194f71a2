import logging
from dataclasses import dataclass
from pathlib import PurePosixPath
from typing import Any, Mapping, Optional, Tuple

from fastapi import HTTPException, UploadFile, status
from sqlalchemy.exc import SQLAlchemyError

from app.core.config import settings
from app.db.models.products import Product
from app.db.repositories.products import ProductRepository
from app.features.products.schemas import (
    FormResult,
    ProductForm,
    ProductPage,
    validate_product_form,
)
from app.utils.images import validate_image
from app.utils.storage import FileStore, product_photo_key

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PhotoUpload:
    """Photo validée, prête à être écrite dans le file store."""
    key: str
    content: bytes
    mime: str

    @property
    def filename(self) -> str:
        return PurePosixPath(self.key).name


class ProductService:
    """
    Service Produits : orchestre repository + file store.
    Aucune logique SQL directe ici, erreurs en HTTPException propres.
    Les contrôles d'accès sont faits en amont (dépendances de route).
    """

    def __init__(self, *, repo: ProductRepository, store: FileStore, per_page: Optional[int] = None):
        self.repo = repo
        self.store = store
        self.per_page = per_page or settings.PRODUCTS_PER_PAGE

    # ---------- Listing ----------
    def paginate(self, page: int = 1) -> ProductPage:
        items, total, page = self.repo.paginate(page=page, size=self.per_page)
        return ProductPage(items=items, total=total, page=page, size=self.per_page)

    def get(self, product_id: int) -> Product:
        product = self.repo.get(product_id)
        if not product:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Product not found")
        return product

    # ---------- Validation ----------
    async def validate_create(
        self, raw: Mapping[str, Any], photo: Optional[UploadFile]
    ) -> Tuple[FormResult, Optional[PhotoUpload]]:
        """Valide les champs texte puis la photo éventuelle ; erreurs cumulées par champ."""
        result = validate_product_form(raw)
        if photo is None or not photo.filename:
            return result, None

        content = await photo.read()
        try:
            mime, _ = validate_image(content, max_mb=settings.MAX_UPLOAD_MB)
            key = product_photo_key(photo.filename)
        except ValueError as e:
            result.errors.setdefault("photo", []).append(str(e))
            return result, None
        return result, PhotoUpload(key=key, content=content, mime=mime)

    def validate_update(self, raw: Mapping[str, Any]) -> FormResult:
        return validate_product_form(raw)

    # ---------- Create ----------
    def create(self, form: ProductForm, photo: Optional[PhotoUpload] = None) -> Product:
        """
        Écrit la photo (products/<nom d'origine>, écrase un fichier homonyme) puis la ligne.
        Si l'insert échoue, la photo tout juste écrite est retirée et l'erreur remonte.
        """
        if photo is not None:
            self.store.put(photo.key, photo.content, content_type=photo.mime)

        try:
            product = self.repo.create(
                name=form.name,
                price=form.price,
                photo=photo.filename if photo else None,
            )
        except SQLAlchemyError:
            logger.exception("Création du produit %r échouée", form.name)
            self.repo.session.rollback()
            if photo is not None and not self.repo.count_by_photo(photo.filename):
                self.store.delete(photo.key)
            raise

        logger.info("Produit créé id=%s name=%r photo=%r", product.id, product.name, product.photo)
        return product

    # ---------- Update ----------
    def update(self, product_id: int, form: ProductForm) -> Product:
        product = self.get(product_id)
        product = self.repo.update(product, name=form.name, price=form.price)
        logger.info("Produit mis à jour id=%s", product.id)
        return product

    # ---------- Delete ----------
    def delete(self, product_id: int) -> None:
        product = self.get(product_id)
        photo = product.photo
        self.repo.delete(product)
        logger.info("Produit supprimé id=%s", product_id)

        # Une photo homonyme peut être partagée par un autre produit
        if photo and not self.repo.count_by_photo(photo):
            key = product_photo_key(photo)
            try:
                self.store.delete(key)
            except Exception:
                logger.exception("Suppression de %s échouée", key)
                raise
