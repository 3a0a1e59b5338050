"""
➡️ But : assembler toutes les pièces du puzzle.

Crée l’instance FastAPI (app).

Configure :

logs, CORS, middleware de log des requêtes

handlers d'erreurs métier

schéma OpenAPI personnalisé

Inclut les routers (ex : /api/v1/gameplay, /api/v1/rpc).

Initialise la base et les dossiers média au démarrage.

🔹 Point unique d’exécution : uvicorn app.main:app --reload.
"""

from pathlib import Path

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from app.core.config import settings
from app.core.errors import register_error_handlers
from app.core.logging import setup_logging, logger
from app.core.openapi import custom_openapi
from app.api.middleware import RequestLoggingMiddleware
from app.db.session import init_db
from app.features.ingestion.pool import shutdown_ingestion_pool

from app.api.v1.routers import gameplay, users, rpc

import uvicorn

setup_logging(settings.LOG_LEVEL)

app = FastAPI(
    title=settings.APP_NAME,
    version="0.1.0",
    openapi_tags=[
        {"name": "gameplay", "description": "Soumission, consultation et relecture des vidéos"},
        {"name": "users", "description": "Profil et gestion des rôles"},
        {"name": "rpc", "description": "Mêmes opérations en mode procédure"},
    ],
)

# CORS (ajustez selon vos besoins)
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"], allow_credentials=True,
    allow_methods=["*"], allow_headers=["*"],
)
app.add_middleware(RequestLoggingMiddleware)

register_error_handlers(app, debug=(settings.ENV == "dev"))

# Routers
app.include_router(gameplay.router, prefix="/api/v1")
app.include_router(users.router, prefix="/api/v1")
app.include_router(rpc.router, prefix="/api/v1")

# Génération du schéma OpenAPI custom
app.openapi = lambda: custom_openapi(app)


@app.get("/health", tags=["health"], include_in_schema=False)
def health():
    return {"status": "ok"}


# Démarrage / arrêt
@app.on_event("startup")
def on_startup():
    init_db()
    Path(settings.MEDIA_DIR).mkdir(parents=True, exist_ok=True)
    Path(settings.CLIPS_DIR).mkdir(parents=True, exist_ok=True)
    logger.info("%s started (env=%s)", settings.APP_NAME, settings.ENV)

@app.on_event("shutdown")
def on_shutdown():
    shutdown_ingestion_pool()

if __name__ == "__main__":
    uvicorn.run("app.main:app", host="127.0.0.1", port=8080, reload=(settings.ENV == "dev")) # http://localhost:8080
