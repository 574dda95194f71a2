from typing import Optional

from fastapi import APIRouter, Depends, File, Form, Query, Request, UploadFile, status
from fastapi.responses import HTMLResponse, RedirectResponse

from app.api.dependencies import authorize, get_product_service
from app.api.flash import flash, flash_form, pop_flash
from app.core.templates import templates
from app.db.models.users import User
from app.features.products.services import ProductService
from app.security.policies import ProductAction, abilities

router = APIRouter(
    prefix="/products",
    tags=["products"],
    responses={404: {"description": "Not Found"}},
)

# -------- Helpers --------

def _redirect(url: str) -> RedirectResponse:
    return RedirectResponse(url=url, status_code=status.HTTP_302_FOUND)

def _page_number(raw: Optional[str]) -> int:
    """?page= illisible (abc, vide) → page 1 ; le service ramène ensuite dans les bornes."""
    try:
        return int(raw)
    except (TypeError, ValueError):
        return 1

def _render(request: Request, name: str, user: User, **context) -> HTMLResponse:
    # can.* est calculé par la même policy que les gardes de route
    return templates.TemplateResponse(
        request,
        name,
        {"user": user, "can": abilities(user), **pop_flash(request), **context},
    )

# -----------------------------
# List (any authenticated user)
# -----------------------------
@router.get(
    "",
    name="products_index",
    summary="Lister les produits (10 par page)",
    response_class=HTMLResponse,
)
def index(
    request: Request,
    page: Optional[str] = Query(None),
    user: User = Depends(authorize(ProductAction.VIEW_ANY)),
    svc: ProductService = Depends(get_product_service),
):
    result = svc.paginate(_page_number(page))
    return _render(request, "products/index.html", user, products=result.items, pagination=result)

# -----------------------------
# Create (admin)
# -----------------------------
@router.get(
    "/create",
    name="products_create_form",
    summary="Formulaire de création",
    response_class=HTMLResponse,
    responses={403: {"description": "Forbidden"}},
)
def create_form(
    request: Request,
    user: User = Depends(authorize(ProductAction.CREATE)),
):
    return _render(request, "products/create.html", user, product=None)


@router.post(
    "",
    name="products_store",
    summary="Créer un produit (photo optionnelle)",
    status_code=status.HTTP_302_FOUND,
    responses={403: {"description": "Forbidden"}},
)
async def store(
    request: Request,
    name: str = Form(""),
    price: str = Form(""),
    photo: Optional[UploadFile] = File(None),
    user: User = Depends(authorize(ProductAction.CREATE)),
    svc: ProductService = Depends(get_product_service),
):
    old = {"name": name, "price": price}
    result, upload = await svc.validate_create(old, photo)
    if not result.ok:
        flash_form(request, errors=result.errors, old=old)
        return _redirect(request.url_for("products_create_form").path)

    product = svc.create(result.data, upload)
    flash(request, "status", f"Product \"{product.name}\" created.")
    return _redirect(request.url_for("products_index").path)

# -----------------------------
# Edit / Update (admin)
# -----------------------------
@router.get(
    "/{product_id}/edit",
    name="products_edit",
    summary="Formulaire d'édition prérempli",
    response_class=HTMLResponse,
    responses={403: {"description": "Forbidden"}},
)
def edit(
    request: Request,
    product_id: int,
    user: User = Depends(authorize(ProductAction.UPDATE)),
    svc: ProductService = Depends(get_product_service),
):
    product = svc.get(product_id)
    return _render(request, "products/edit.html", user, product=product)


@router.api_route(
    "/{product_id}",
    methods=["PUT", "POST"],
    name="products_update",
    summary="Mettre à jour un produit",
    status_code=status.HTTP_302_FOUND,
    responses={403: {"description": "Forbidden"}},
)
def update(
    request: Request,
    product_id: int,
    name: str = Form(""),
    price: str = Form(""),
    user: User = Depends(authorize(ProductAction.UPDATE)),
    svc: ProductService = Depends(get_product_service),
):
    # 404 avant la validation : on ne renvoie pas vers le formulaire d'un produit inexistant
    svc.get(product_id)

    old = {"name": name, "price": price}
    result = svc.validate_update(old)
    if not result.ok:
        flash_form(request, errors=result.errors, old=old)
        return _redirect(request.url_for("products_edit", product_id=product_id).path)

    product = svc.update(product_id, result.data)
    flash(request, "status", f"Product \"{product.name}\" updated.")
    return _redirect(request.url_for("products_index").path)

# -----------------------------
# Delete (admin)
# -----------------------------
@router.delete(
    "/{product_id}",
    name="products_destroy",
    summary="Supprimer un produit",
    status_code=status.HTTP_302_FOUND,
    responses={403: {"description": "Forbidden"}},
)
def destroy(
    request: Request,
    product_id: int,
    user: User = Depends(authorize(ProductAction.DELETE)),
    svc: ProductService = Depends(get_product_service),
):
    svc.delete(product_id)
    flash(request, "status", "Product deleted.")
    return _redirect(request.url_for("products_index").path)


# Les formulaires HTML ne savent envoyer que GET/POST
router.add_api_route(
    "/{product_id}/delete",
    destroy,
    methods=["POST"],
    name="products_destroy_form",
    status_code=status.HTTP_302_FOUND,
    include_in_schema=False,
)
