"""
➡️ But : assembler toutes les pièces du puzzle.

Crée l’instance FastAPI (app).

Configure :

la session signée (flash des erreurs de formulaire)

la redirection vers /login quand une page exige un utilisateur connecté

titre, version, tags, schéma OpenAPI personnalisé

Inclut les routers (/login, /products).

Initialise la base SQLite au démarrage (@app.on_event("startup")).

Point unique d’exécution : uvicorn app.main:app --reload.
"""

from fastapi import FastAPI, Request, status
from fastapi.responses import RedirectResponse
from starlette.middleware.sessions import SessionMiddleware

from app.api.dependencies import LoginRequired
from app.api.routers import authentication, products
from app.core.config import settings
from app.core.logging_config import setup_logging
from app.core.openapi import custom_openapi
from app.db.session import init_db

import uvicorn

setup_logging()

app = FastAPI(
    title=settings.APP_NAME,
    version="0.1.0",
    openapi_tags=[
        {"name": "auth", "description": "Connexion / déconnexion"},
        {"name": "products", "description": "Administration du catalogue produits"},
    ],
)

app.add_middleware(
    SessionMiddleware,
    secret_key=settings.SESSION_SECRET_KEY,
    same_site=settings.AUTH_COOKIE_SAMESITE,
    https_only=bool(settings.AUTH_COOKIE_SECURE),
)

# Routers
app.include_router(authentication.router)
app.include_router(products.router)


@app.exception_handler(LoginRequired)
async def redirect_to_login(request: Request, exc: LoginRequired):
    return RedirectResponse(url=request.url_for("login").path, status_code=status.HTTP_302_FOUND)


@app.get("/", include_in_schema=False)
def home():
    return RedirectResponse(url="/products", status_code=status.HTTP_302_FOUND)


# Génération du schéma OpenAPI custom (facultatif, mais propre)
app.openapi = lambda: custom_openapi(app)

# Démarrage
@app.on_event("startup")
def on_startup():
    init_db()

if __name__ == "__main__":
    uvicorn.run(app, host="127.0.0.1", port=8080, reload=(settings.ENV == "dev")) # http://localhost:8080
