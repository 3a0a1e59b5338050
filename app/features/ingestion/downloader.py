from pathlib import Path
from typing import Any, Callable, Dict

import yt_dlp

from app.core.errors import DownloadFailed
from app.core.logging import get_logger
from app.features.ingestion.resolver import ResolvedSource
from app.utils.media_files import detect_video_mime

log = get_logger("ingestion.downloader")


def _ytdl_download(url: str, options: Dict[str, Any]) -> None:
    with yt_dlp.YoutubeDL(options) as ydl:
        ydl.download([url])


class VideoDownloader:
    """Télécharge l'encodage choisi vers un fichier local, puis vérifie que c'est bien une vidéo."""

    def __init__(
        self,
        *,
        socket_timeout: int,
        download_fn: Callable[[str, Dict[str, Any]], None] = _ytdl_download,
    ):
        self.socket_timeout = socket_timeout
        self._download = download_fn

    def download(self, source: ResolvedSource, dest: Path) -> Path:
        dest.parent.mkdir(parents=True, exist_ok=True)
        options = {
            "format": source.format_id,
            "outtmpl": str(dest),
            "quiet": True,
            "no_warnings": True,
            "noprogress": True,
            "noplaylist": True,
            "socket_timeout": self.socket_timeout,
        }
        try:
            self._download(source.url, options)
        except Exception as exc:
            raise DownloadFailed(f"Download of {source.url} failed: {exc}") from exc

        if not dest.is_file() or dest.stat().st_size == 0:
            raise DownloadFailed(f"Download of {source.url} produced no file.")
        if detect_video_mime(dest) is None:
            raise DownloadFailed(f"Downloaded file for {source.url} is not a video.")

        log.info("Downloaded %s (format %s) to %s", source.url, source.format_id, dest)
        return dest
