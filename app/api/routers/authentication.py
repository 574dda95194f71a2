from fastapi import APIRouter, Depends, Form, Request, status
from fastapi.responses import HTMLResponse, RedirectResponse
from pydantic import ValidationError

from app.api.dependencies import get_auth_service, get_current_user_or_none
from app.api.flash import flash, pop_flash
from app.core.config import settings
from app.core.templates import templates
from app.features.authentication.schemas import SignInIn
from app.features.authentication.services import AuthService

router = APIRouter(tags=["auth"])

# -----------------------------
# Login
# -----------------------------
@router.get(
    "/login",
    name="login",
    summary="Formulaire de connexion",
    response_class=HTMLResponse,
)
def login_form(request: Request, user=Depends(get_current_user_or_none)):
    if user is not None:
        return RedirectResponse(url=request.url_for("products_index").path, status_code=status.HTTP_302_FOUND)
    return templates.TemplateResponse(request, "auth/login.html", {"user": None, **pop_flash(request)})


@router.post(
    "/login",
    name="login_submit",
    summary="Se connecter",
    description="Pose l'access token en cookie httpOnly puis redirige vers le catalogue.",
    status_code=status.HTTP_302_FOUND,
)
def login(
    request: Request,
    username: str = Form(""),
    password: str = Form(""),
    svc: AuthService = Depends(get_auth_service),
):
    back = RedirectResponse(url=request.url_for("login").path, status_code=status.HTTP_302_FOUND)
    try:
        payload = SignInIn(username=username, password=password)
    except ValidationError:
        payload = None
    user = svc.authenticate(payload) if payload else None
    if user is None:
        flash(request, "errors", {"username": ["These credentials do not match our records."]})
        flash(request, "old", {"username": username})
        return back

    response = RedirectResponse(url=request.url_for("products_index").path, status_code=status.HTTP_302_FOUND)
    response.set_cookie(
        key=settings.AUTH_COOKIE_NAME,
        value=svc.issue_access_token(user),
        httponly=True,
        samesite=settings.AUTH_COOKIE_SAMESITE,
        secure=settings.AUTH_COOKIE_SECURE,
        max_age=settings.ACCESS_TTL_MINUTES * 60,
    )
    return response

# -----------------------------
# Logout
# -----------------------------
@router.post(
    "/logout",
    name="logout",
    summary="Se déconnecter",
    status_code=status.HTTP_302_FOUND,
)
def logout(request: Request):
    response = RedirectResponse(url=request.url_for("login").path, status_code=status.HTTP_302_FOUND)
    response.delete_cookie(key=settings.AUTH_COOKIE_NAME)
    return response
