from concurrent.futures import TimeoutError as FutureTimeout
from pathlib import Path
from typing import List, Optional, Tuple

from app.core.errors import DownloadFailed, DuplicateSubmission
from app.core.logging import get_logger
from app.db.models.base import GameType
from app.db.models.footage import Footage, new_footage_id
from app.db.repositories.clips import ClipRepository
from app.db.repositories.footage import FootageRepository
from app.features.authentication.schemas import Caller
from app.features.ingestion.downloader import VideoDownloader
from app.features.ingestion.extractor import ClipExtractor, ExtractedClip
from app.features.ingestion.pool import IngestionPool
from app.features.ingestion.resolver import ResolvedSource, VideoSourceResolver
from app.utils.media_files import ensure_capacity, remove_artifacts

log = get_logger("ingestion")


class IngestionService:
    """
    Soumission d'une vidéo, chaque étape conditionne la suivante :
    1. doublon d'URL ?            -> DuplicateSubmission (aucun téléchargement)
    2. résolution de la source     -> Unacceptable
    3. quota disque + téléchargement -> StorageFull / DownloadFailed
    4. extraction des clips (process externe, attendu) -> ExtractionFailed
    5. persistance Footage + Clips dans une seule transaction
    Tout échec après l'étape 2 supprime les fichiers produits.
    Les étapes 3-4 tournent dans le pool ; au-delà de `timeout` -> DownloadFailed.
    """

    def __init__(
        self,
        *,
        footage_repo: FootageRepository,
        clip_repo: ClipRepository,
        resolver: VideoSourceResolver,
        downloader: VideoDownloader,
        extractor: ClipExtractor,
        pool: IngestionPool,
        media_dir: Path,
        clips_dir: Path,
        quota_mb: int,
        timeout: Optional[float] = None,
    ):
        self.footage_repo = footage_repo
        self.clip_repo = clip_repo
        self.resolver = resolver
        self.downloader = downloader
        self.extractor = extractor
        self.pool = pool
        self.media_dir = Path(media_dir)
        self.clips_dir = Path(clips_dir)
        self.quota_mb = quota_mb
        self.timeout = timeout

    def artifact_paths(self, footage_id: str) -> Tuple[Path, Path]:
        """(vidéo téléchargée, dossier des clips) pour une Footage."""
        return self.media_dir / f"{footage_id}.mp4", self.clips_dir / footage_id

    def ingest(self, caller: Caller, url: str, category: GameType) -> Footage:
        if self.footage_repo.get_by_url(url) is not None:
            raise DuplicateSubmission(f"URL {url} has already been submitted.")

        source = self.resolver.resolve(url)

        footage_id = new_footage_id()
        video_path, clips_dir = self.artifact_paths(footage_id)
        log.info("Ingesting %s as %s for user %s", url, footage_id, caller.user_id)

        future = self.pool.submit(self._download_and_extract, source, video_path, clips_dir)
        try:
            clips = future.result(timeout=self.timeout)
        except FutureTimeout:
            # le worker tourne encore : ses fichiers sont supprimés quand il se termine
            future.cancel()
            future.add_done_callback(lambda _f: remove_artifacts(video_path, clips_dir))
            log.warning("Ingestion of %s exceeded %ss, abandoning %s", url, self.timeout, footage_id)
            raise DownloadFailed(f"Ingestion of {url} did not finish within {self.timeout}s.")
        except Exception:
            self._discard(url, video_path, clips_dir)
            raise

        try:
            footage = self.footage_repo.create(
                commit=False,
                id=footage_id,
                owner_id=caller.user_id,
                url=url,
                category=category,
                video_format=source.format_id,
                is_analyzed=False,
                is_game_footage=False,
            )
            self.clip_repo.bulk_create(
                footage_id,
                [
                    {
                        "file_path": str(clip.path),
                        "start_seconds": clip.start_seconds,
                        "end_seconds": clip.end_seconds,
                    }
                    for clip in clips
                ],
                commit=False,
            )
            self.footage_repo.commit()
        except Exception:
            self._discard(url, video_path, clips_dir)
            raise

        self.footage_repo.session.refresh(footage)
        log.info("Footage %s stored with %d clips", footage_id, len(clips))
        return footage

    def _discard(self, url: str, video_path: Path, clips_dir: Path) -> None:
        log.warning("Ingestion of %s failed, removing %s and %s", url, video_path, clips_dir)
        remove_artifacts(video_path, clips_dir)

    # Exécuté dans un worker du pool : aucun accès à la session DB ici.
    def _download_and_extract(
        self, source: ResolvedSource, video_path: Path, clips_dir: Path
    ) -> List[ExtractedClip]:
        ensure_capacity([self.media_dir, self.clips_dir], quota_mb=self.quota_mb)
        self.downloader.download(source, video_path)
        return self.extractor.run(video_path, clips_dir).clips
