"""
➡️ But : Personnaliser la documentation Swagger/OpenAPI.

custom_openapi(app) complète le schéma généré par FastAPI avec les
conventions de l'application (pages HTML, redirections, pagination).
"""

from fastapi.openapi.utils import get_openapi

def custom_openapi(app):
    if app.openapi_schema:
        return app.openapi_schema
    openapi_schema = get_openapi(
        title=app.title,
        version=app.version,
        description=(
            "Administration du catalogue produits (FastAPI + SQLite).\n\n"
            "### Conventions\n"
            "- Les pages renvoient du HTML ; les actions répondent par une redirection 302.\n"
            "- Non connecté : redirection vers `/login`. Non admin sur une action d'écriture : 403.\n"
            "- Pagination : query param `page`, 10 produits par page.\n"
        ),
        routes=app.routes,
    )
    app.openapi_schema = openapi_schema
    return app.openapi_schema
