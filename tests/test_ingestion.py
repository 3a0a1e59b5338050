"""Tests for the footage ingestion workflow."""

from __future__ import annotations

import threading

import pytest

from app.core.errors import (
    Busy,
    DownloadFailed,
    DuplicateSubmission,
    ExtractionFailed,
    StorageFull,
    Unacceptable,
)
from app.db.models.base import GameType
from app.db.repositories.clips import ClipRepository
from app.db.repositories.footage import FootageRepository
from app.features.authentication.schemas import Caller
from app.features.ingestion.pool import IngestionPool

from conftest import FakeDownloader, build_ingestion

URL = "https://www.youtube.com/watch?v=ace"
CALLER = Caller(user_id="u-owner")


def test_ingest_persists_unanalyzed_footage_with_clips(session, users, ingestion, downloader, extractor) -> None:
    footage = ingestion.ingest(CALLER, URL, GameType.VAL)

    assert footage.owner_id == "u-owner"
    assert footage.url == URL
    assert footage.category == GameType.VAL
    assert footage.video_format == "299"
    assert footage.is_analyzed is False
    assert footage.is_game_footage is False

    video_path, clips_dir = ingestion.artifact_paths(footage.id)
    assert video_path.is_file()
    assert downloader.calls == [URL]
    assert extractor.calls == [video_path]

    clips = ClipRepository(session).list_by_footage(footage.id)
    assert [(c.start_seconds, c.end_seconds) for c in clips] == [(0.0, 5.0), (12.5, 20.0)]
    assert all(str(clips_dir) in c.file_path for c in clips)


def test_duplicate_url_is_rejected_before_download(session, users, ingestion, resolver, downloader) -> None:
    ingestion.ingest(CALLER, URL, GameType.VAL)
    resolver.calls.clear()
    downloader.calls.clear()

    with pytest.raises(DuplicateSubmission):
        ingestion.ingest(Caller(user_id="u-other"), URL, GameType.CSG)

    assert resolver.calls == []
    assert downloader.calls == []
    assert FootageRepository(session).count() == 1


def test_unacceptable_source_downloads_nothing(session, users, ingestion, resolver, downloader) -> None:
    resolver.unacceptable.add(URL)

    with pytest.raises(Unacceptable):
        ingestion.ingest(CALLER, URL, GameType.VAL)

    assert downloader.calls == []
    assert FootageRepository(session).count() == 0


def test_download_failure_leaves_no_record(session, users, ingestion, downloader, media_root) -> None:
    downloader.fail = True

    with pytest.raises(DownloadFailed):
        ingestion.ingest(CALLER, URL, GameType.VAL)

    assert FootageRepository(session).count() == 0
    assert list(media_root.rglob("*.mp4")) == []


def test_extraction_failure_rolls_back_and_cleans_up(session, users, ingestion, extractor, media_root) -> None:
    extractor.fail = True

    with pytest.raises(ExtractionFailed):
        ingestion.ingest(CALLER, URL, GameType.VAL)

    assert FootageRepository(session).count() == 0
    assert list((media_root / "footage").glob("*")) == []
    assert list((media_root / "clips").glob("*")) == []


def test_quota_exceeded_blocks_download(session, users, resolver, downloader, extractor, pool, media_root) -> None:
    (media_root / "footage").mkdir(parents=True)
    (media_root / "footage" / "old.mp4").write_bytes(b"x" * 16)
    ingestion = build_ingestion(session, resolver, downloader, extractor, pool, media_root, quota_mb=0)

    with pytest.raises(StorageFull):
        ingestion.ingest(CALLER, URL, GameType.VAL)

    assert downloader.calls == []


def test_full_queue_is_busy(session, users, resolver, downloader, extractor, media_root) -> None:
    pool = IngestionPool(max_workers=1, max_pending=0)
    release = threading.Event()
    blocker = pool.submit(release.wait)
    try:
        ingestion = build_ingestion(session, resolver, downloader, extractor, pool, media_root)
        with pytest.raises(Busy):
            ingestion.ingest(CALLER, URL, GameType.VAL)
        assert downloader.calls == []
    finally:
        release.set()
        blocker.result(timeout=5)
        pool.shutdown()


def test_concurrent_duplicate_caught_at_commit(session, users, ingestion, media_root, monkeypatch) -> None:
    ingestion.ingest(Caller(user_id="u-other"), URL, GameType.VAL)
    # simule une soumission concurrente qui a passé le check applicatif
    monkeypatch.setattr(ingestion.footage_repo, "get_by_url", lambda url: None)

    with pytest.raises(DuplicateSubmission):
        ingestion.ingest(CALLER, URL, GameType.VAL)

    assert FootageRepository(session).count() == 1
    assert len(list((media_root / "footage").glob("*.mp4"))) == 1
    assert len(list((media_root / "clips").iterdir())) == 1


class SlowDownloader(FakeDownloader):
    """Écrit le fichier puis reste bloqué jusqu'à `release`."""

    def __init__(self):
        super().__init__()
        self.release = threading.Event()

    def download(self, source, dest):
        path = super().download(source, dest)
        self.release.wait(timeout=5)
        return path


def test_slow_ingestion_times_out_and_cleans_up_late(session, users, resolver, extractor, media_root) -> None:
    pool = IngestionPool(max_workers=1, max_pending=0)
    downloader = SlowDownloader()
    ingestion = build_ingestion(session, resolver, downloader, extractor, pool, media_root, timeout=0.2)
    try:
        with pytest.raises(DownloadFailed, match="did not finish"):
            ingestion.ingest(CALLER, URL, GameType.VAL)
        assert FootageRepository(session).count() == 0
    finally:
        downloader.release.set()
        pool.shutdown(wait=True)

    # le worker a fini (extraction comprise) : plus aucun fichier
    assert extractor.calls
    assert list(media_root.rglob("*.mp4")) == []
    assert list((media_root / "clips").iterdir()) == []
