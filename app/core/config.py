"""
➡️ But : Centraliser tous les paramètres configurables (nom d’app, chemin DB, secrets, stockage vidéo, extracteur…)

Utilise pydantic-settings pour charger automatiquement les variables d’environnement (.env, variables système…).

Fournit un objet settings unique, que tu importes ailleurs :

from app.core.config import settings
print(settings.MEDIA_DIR)


🔹 Avantages :

Plus propre que des constantes éparpillées dans le code.

Facilite le passage entre environnements (dev / prod / test).
"""

from datetime import timedelta
from typing import List, Optional

from pydantic_settings import BaseSettings
from app.security.tokens import JWTSettings


class Settings(BaseSettings):
    # -----------------------------
    # App
    # -----------------------------
    APP_NAME: str = "Gameplay-Review"
    ENV: str = "dev"  # dev | prod | test
    LOG_LEVEL: str = "INFO"

    # -----------------------------
    # DB
    # -----------------------------
    SQLITE_PATH: str = "app.db"  # fichier SQLite
    # Si tu veux forcer une URL différente (ex: Postgres), définis DATABASE_URL dans l'env.
    DATABASE_URL: Optional[str] = None

    # -----------------------------
    # JWT / Auth (tokens émis par le fournisseur d'identité)
    # -----------------------------
    JWT_SECRET_KEY: str = "CHANGE_ME"     # ⚠️ change en prod
    JWT_ISSUER: str = "gameplay-review"
    JWT_ALGORITHM: str = "HS256"
    ACCESS_TTL_MINUTES: int = 60

    # -----------------------------
    # Stockage local des vidéos
    # -----------------------------
    MEDIA_DIR: str = "media/footage"      # vidéos téléchargées (<id>.mp4)
    CLIPS_DIR: str = "media/clips"        # sortie de l'extracteur (<id>/...)
    MEDIA_QUOTA_MB: int = 20_000          # quota disque MEDIA_DIR + CLIPS_DIR

    # -----------------------------
    # Hôte vidéo distant (yt-dlp)
    # -----------------------------
    PREFERRED_FORMAT_IDS: str = "299,298"  # 1080p60 puis 720p60
    FALLBACK_FORMAT_IDS: str = "136"       # 720p
    DOWNLOAD_SOCKET_TIMEOUT_SECONDS: int = 30

    # -----------------------------
    # Extracteur de clips (process externe)
    # -----------------------------
    CLIP_EXTRACTOR_COMMAND: str = "python3 autoClip.py"
    CLIP_EXTRACTOR_TIMEOUT_SECONDS: int = 1800

    # -----------------------------
    # File d'ingestion bornée
    # -----------------------------
    MAX_CONCURRENT_INGESTIONS: int = 2
    MAX_PENDING_INGESTIONS: int = 8
    INGESTION_TIMEOUT_SECONDS: int = 3600  # attente max (téléchargement + extraction) côté requête

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "case_sensitive": True,
    }

    # -----------------------------
    # Post-process values
    # -----------------------------
    def model_post_init(self, __context): # appelée automatiquement
        # DATABASE_URL par défaut depuis SQLITE_PATH si non fourni
        if not self.DATABASE_URL:
            object.__setattr__(self, "DATABASE_URL", f"sqlite:///{self.SQLITE_PATH}")

    @property
    def preferred_formats(self) -> List[str]:
        return _split_ids(self.PREFERRED_FORMAT_IDS)

    @property
    def fallback_formats(self) -> List[str]:
        return _split_ids(self.FALLBACK_FORMAT_IDS)


def _split_ids(raw: str) -> List[str]:
    return [part.strip() for part in raw.split(",") if part.strip()]


# Instance globale importable partout
settings = Settings()

# Objet JWT prêt à l'emploi pour les services
jwt_settings = JWTSettings(
    secret=settings.JWT_SECRET_KEY,
    issuer=settings.JWT_ISSUER,
    algorithm=settings.JWT_ALGORITHM,
    access_ttl=timedelta(minutes=settings.ACCESS_TTL_MINUTES),
)
