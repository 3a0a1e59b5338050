"""
➡️ But : Personnaliser la documentation Swagger/OpenAPI.

custom_openapi(app) modifie le schéma généré par FastAPI pour :

ajouter une description détaillée (conventions, erreurs),

centraliser la personnalisation du Swagger.
"""

from fastapi.openapi.utils import get_openapi

def custom_openapi(app):
    if app.openapi_schema:
        return app.openapi_schema
    openapi_schema = get_openapi(
        title=app.title,
        version=app.version,
        description=(
            "API de soumission et de relecture de vidéos de gameplay.\n\n"
            "### Conventions\n"
            "- Toutes les heures sont en UTC.\n"
            "- Authentification : `Authorization: Bearer <access token>` émis par le fournisseur d'identité.\n"
            "- Pagination du dashboard : query param `page` (1-based), 10 éléments par page.\n"
            "- Erreurs : `{\"detail\": ..., \"code\": ...}` ; les procédures RPC renvoient `{\"error\": {...}}`.\n"
        ),
        routes=app.routes,
    )
    app.openapi_schema = openapi_schema
    return app.openapi_schema
