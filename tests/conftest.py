"""Shared fixtures: in-memory database, fake video host / extractor, API client."""

from __future__ import annotations

import os
import sys
from pathlib import Path
from typing import Dict, List, Optional

import pytest

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

os.environ.setdefault("ENV", "test")
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("LOG_LEVEL", "WARNING")
os.environ.setdefault("JWT_SECRET_KEY", "test-secret")

from fastapi import Depends
from fastapi.testclient import TestClient
from sqlalchemy import event
from sqlalchemy.pool import StaticPool
from sqlmodel import Session, SQLModel, create_engine

from app.api.v1.dependencies import get_clip_repository, get_footage_repository, get_ingestion_service
from app.core.config import jwt_settings
from app.core.errors import DownloadFailed, ExtractionFailed, Unacceptable
from app.db.repositories.clips import ClipRepository
from app.db.repositories.footage import FootageRepository
from app.db.repositories.users import UserRepository
from app.db.session import _sqlite_foreign_keys, get_session
from app.features.ingestion.extractor import ExtractionResult, collect_clips
from app.features.ingestion.pool import IngestionPool
from app.features.ingestion.resolver import ResolvedSource
from app.features.ingestion.services import IngestionService
from app.main import app
from app.security.permissions import Role
from app.security.tokens import create_access_token


# ---------- Fakes for the external collaborators ----------

class FakeResolver:
    def __init__(self, format_id: str = "299"):
        self.format_id = format_id
        self.calls: List[str] = []
        self.unacceptable: set = set()

    def resolve(self, url: str) -> ResolvedSource:
        self.calls.append(url)
        if url in self.unacceptable:
            raise Unacceptable(f"URL {url} is not an acceptable video.")
        return ResolvedSource(url=url, format_id=self.format_id, available_formats=(self.format_id,))


class FakeDownloader:
    def __init__(self):
        self.calls: List[str] = []
        self.fail = False

    def download(self, source: ResolvedSource, dest: Path) -> Path:
        self.calls.append(source.url)
        if self.fail:
            raise DownloadFailed("network down")
        dest.parent.mkdir(parents=True, exist_ok=True)
        dest.write_bytes(b"\x00\x00\x00\x18ftypmp42" + b"\x00" * 64)
        return dest


class FakeExtractor:
    def __init__(self, clip_names: Optional[List[str]] = None):
        self.clip_names = clip_names if clip_names is not None else ["0-5.mp4", "12.5-20.mp4"]
        self.calls: List[Path] = []
        self.fail = False

    def run(self, video_path: Path, output_dir: Path) -> ExtractionResult:
        self.calls.append(video_path)
        output_dir.mkdir(parents=True, exist_ok=True)
        for name in self.clip_names:
            (output_dir / name).write_bytes(b"clip")
        if self.fail:
            raise ExtractionFailed("Clip extractor exited with code 1")
        return ExtractionResult(returncode=0, clips=collect_clips(output_dir))


# ---------- Database ----------

@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    event.listen(engine, "connect", _sqlite_foreign_keys)
    SQLModel.metadata.create_all(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session(engine):
    with Session(engine) as session:
        yield session


USER_IDS: Dict[str, tuple] = {
    "owner": ("u-owner", Role.USER, False),
    "other": ("u-other", Role.USER, False),
    "mod": ("u-mod", Role.MOD, False),
    "admin": ("u-admin", Role.ADMIN, False),
    "banned": ("u-banned", Role.USER, True),
}


@pytest.fixture
def users(session):
    repo = UserRepository(session)
    return {
        key: repo.create(id=user_id, name=key, role=role, blacklisted=banned)
        for key, (user_id, role, banned) in USER_IDS.items()
    }


# ---------- Ingestion ----------

@pytest.fixture
def resolver():
    return FakeResolver()


@pytest.fixture
def downloader():
    return FakeDownloader()


@pytest.fixture
def extractor():
    return FakeExtractor()


@pytest.fixture
def pool():
    pool = IngestionPool(max_workers=1, max_pending=2)
    yield pool
    pool.shutdown()


@pytest.fixture
def media_root(tmp_path):
    return tmp_path / "media"


def build_ingestion(session, resolver, downloader, extractor, pool, media_root, quota_mb=1024, timeout=10):
    return IngestionService(
        footage_repo=FootageRepository(session),
        clip_repo=ClipRepository(session),
        resolver=resolver,
        downloader=downloader,
        extractor=extractor,
        pool=pool,
        media_dir=media_root / "footage",
        clips_dir=media_root / "clips",
        quota_mb=quota_mb,
        timeout=timeout,
    )


@pytest.fixture
def ingestion(session, resolver, downloader, extractor, pool, media_root):
    return build_ingestion(session, resolver, downloader, extractor, pool, media_root)


# ---------- HTTP ----------

def auth_headers(user_id: str, name: Optional[str] = None) -> Dict[str, str]:
    token = create_access_token(user_id=user_id, name=name, settings=jwt_settings)
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def client(engine, users, resolver, downloader, extractor, pool, media_root):
    def _session():
        with Session(engine) as s:
            yield s

    def _ingestion(
        footage_repo: FootageRepository = Depends(get_footage_repository),
        clip_repo: ClipRepository = Depends(get_clip_repository),
    ) -> IngestionService:
        return IngestionService(
            footage_repo=footage_repo,
            clip_repo=clip_repo,
            resolver=resolver,
            downloader=downloader,
            extractor=extractor,
            pool=pool,
            media_dir=media_root / "footage",
            clips_dir=media_root / "clips",
            quota_mb=1024,
            timeout=10,
        )

    app.dependency_overrides[get_session] = _session
    app.dependency_overrides[get_ingestion_service] = _ingestion
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()
