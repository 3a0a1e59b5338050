"""
➡️ But : Centraliser les dépendances réutilisables des routes.

Exemples :

get_gameplay_service() : crée un GameplayService à partir d’une session DB.

get_caller() : identité de l'appelant (token Bearer -> Caller), refusée si blacklistée.

🔹 Avantages :

Routes plus propres (pas de code dupliqué).

Facile à injecter dans plusieurs endpoints (Depends()) et à surcharger dans les tests
(app.dependency_overrides).
"""

from pathlib import Path
from typing import Optional

from fastapi import Depends, Request, Security
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlmodel import Session

from app.core.config import settings, jwt_settings
from app.core.errors import Unauthorized
from app.db.session import get_session

from app.db.repositories.users import UserRepository
from app.db.repositories.footage import FootageRepository
from app.db.repositories.clips import ClipRepository
from app.db.repositories.votes import VoteRepository

from app.features.authentication.schemas import Caller
from app.features.authentication.services import AuthService
from app.features.users.services import UserService
from app.features.gameplay.services import GameplayService
from app.features.review.services import ReviewService

from app.features.ingestion.downloader import VideoDownloader
from app.features.ingestion.extractor import ClipExtractor
from app.features.ingestion.pool import IngestionPool, get_ingestion_pool
from app.features.ingestion.resolver import VideoSourceResolver
from app.features.ingestion.services import IngestionService


# -----------------------------
# Repositories
# -----------------------------
def get_user_repository(session: Session = Depends(get_session)) -> UserRepository:
    return UserRepository(session)

def get_footage_repository(session: Session = Depends(get_session)) -> FootageRepository:
    return FootageRepository(session)

def get_clip_repository(session: Session = Depends(get_session)) -> ClipRepository:
    return ClipRepository(session)

def get_vote_repository(session: Session = Depends(get_session)) -> VoteRepository:
    return VoteRepository(session)


# -----------------------------
# Auth
# -----------------------------
bearer_scheme = HTTPBearer(auto_error=False)

def get_auth_service(user_repo: UserRepository = Depends(get_user_repository)) -> AuthService:
    return AuthService(user_repo=user_repo, jwt_settings=jwt_settings)

def get_access_token_from_bearer(
    credentials: Optional[HTTPAuthorizationCredentials] = Security(bearer_scheme),
) -> str:
    if not credentials or credentials.scheme.lower() != "bearer":
        raise Unauthorized("Missing or invalid bearer token")
    return credentials.credentials

def get_caller(
    request: Request,
    access_token: str = Depends(get_access_token_from_bearer),
    auth_svc: AuthService = Depends(get_auth_service),
) -> Caller:
    """Appelant authentifié et non blacklisté (équivalent d'une procédure protégée)."""
    caller = auth_svc.get_current_caller(
        access_token=access_token,
        request_id=getattr(request.state, "request_id", None),
    )
    return auth_svc.require_active(caller)


# -----------------------------
# Ingestion (collaborateurs externes)
# -----------------------------
def get_video_resolver() -> VideoSourceResolver:
    return VideoSourceResolver(
        preferred=settings.preferred_formats,
        fallback=settings.fallback_formats,
    )

def get_video_downloader() -> VideoDownloader:
    return VideoDownloader(socket_timeout=settings.DOWNLOAD_SOCKET_TIMEOUT_SECONDS)

def get_clip_extractor() -> ClipExtractor:
    return ClipExtractor(
        command=settings.CLIP_EXTRACTOR_COMMAND,
        timeout=settings.CLIP_EXTRACTOR_TIMEOUT_SECONDS,
    )

def get_pool() -> IngestionPool:
    return get_ingestion_pool()

def get_ingestion_service(
    footage_repo: FootageRepository = Depends(get_footage_repository),
    clip_repo: ClipRepository = Depends(get_clip_repository),
    resolver: VideoSourceResolver = Depends(get_video_resolver),
    downloader: VideoDownloader = Depends(get_video_downloader),
    extractor: ClipExtractor = Depends(get_clip_extractor),
    pool: IngestionPool = Depends(get_pool),
) -> IngestionService:
    return IngestionService(
        footage_repo=footage_repo,
        clip_repo=clip_repo,
        resolver=resolver,
        downloader=downloader,
        extractor=extractor,
        pool=pool,
        media_dir=Path(settings.MEDIA_DIR),
        clips_dir=Path(settings.CLIPS_DIR),
        quota_mb=settings.MEDIA_QUOTA_MB,
        timeout=settings.INGESTION_TIMEOUT_SECONDS,
    )


# -----------------------------
# Services
# -----------------------------
def get_user_service(user_repo: UserRepository = Depends(get_user_repository)) -> UserService:
    return UserService(user_repo)

def get_gameplay_service(
    footage_repo: FootageRepository = Depends(get_footage_repository),
    clip_repo: ClipRepository = Depends(get_clip_repository),
    vote_repo: VoteRepository = Depends(get_vote_repository),
    user_repo: UserRepository = Depends(get_user_repository),
    ingestion: IngestionService = Depends(get_ingestion_service),
) -> GameplayService:
    return GameplayService(
        repo=footage_repo,
        clip_repo=clip_repo,
        vote_repo=vote_repo,
        user_repo=user_repo,
        ingestion=ingestion,
    )

def get_review_service(
    footage_repo: FootageRepository = Depends(get_footage_repository),
    vote_repo: VoteRepository = Depends(get_vote_repository),
    user_repo: UserRepository = Depends(get_user_repository),
) -> ReviewService:
    return ReviewService(repo=footage_repo, vote_repo=vote_repo, user_repo=user_repo)
