"""
➡️ But : Définir les formats d’entrée/sortie du catalogue (couche validation).

ProductForm → règles déclaratives des champs du formulaire (name, price).
FormErrors  → erreurs par champ, ex : {"name": ["The name field is required."]}.
ProductPage → une page du listing.

Une saisie invalide ne lève pas d'exception vers le client : validate_product_form()
renvoie les erreurs, la route les flashe puis redirige vers le formulaire.
"""

import math
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional, Sequence

from pydantic import BaseModel, ValidationError, field_validator
from pydantic_core import PydanticCustomError

from app.db.models.products import Product

FormErrors = Dict[str, List[str]]


def _blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


# ---------- Inputs ----------

class ProductForm(BaseModel):
    name: str
    price: float

    @field_validator("name", mode="before")
    @classmethod
    def _name_required(cls, v: Any) -> str:
        if _blank(v):
            raise PydanticCustomError("required", "The name field is required.")
        name = str(v).strip()
        if len(name) > 255:
            raise PydanticCustomError("max", "The name field must not be greater than 255 characters.")
        return name

    @field_validator("price", mode="before")
    @classmethod
    def _price_numeric(cls, v: Any) -> float:
        if _blank(v):
            raise PydanticCustomError("required", "The price field is required.")
        try:
            price = float(str(v).strip())
        except ValueError:
            raise PydanticCustomError("numeric", "The price field must be a number.")
        if not math.isfinite(price):
            raise PydanticCustomError("numeric", "The price field must be a number.")
        if price < 0:
            raise PydanticCustomError("min", "The price field must be at least 0.")
        return price


@dataclass
class FormResult:
    data: Optional[ProductForm] = None
    errors: FormErrors = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return not self.errors


def validate_product_form(raw: Mapping[str, Any]) -> FormResult:
    """Applique ProductForm et convertit une ValidationError en erreurs par champ."""
    try:
        return FormResult(data=ProductForm.model_validate({"name": raw.get("name"), "price": raw.get("price")}))
    except ValidationError as e:
        errors: FormErrors = {}
        for err in e.errors():
            key = str(err["loc"][0]) if err["loc"] else "__all__"
            errors.setdefault(key, []).append(err["msg"])
        return FormResult(errors=errors)


# ---------- Outputs ----------

@dataclass(frozen=True)
class ProductPage:
    items: Sequence[Product]
    total: int
    page: int
    size: int

    @property
    def pages(self) -> int:
        return max(1, math.ceil(self.total / self.size)) if self.size else 1

    @property
    def has_previous(self) -> bool:
        return self.page > 1

    @property
    def has_next(self) -> bool:
        return self.page < self.pages
