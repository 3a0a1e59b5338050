"""
➡️ But : Interroger l'hébergeur vidéo (YouTube via yt-dlp) et choisir l'encodage à télécharger.

choose_format() est une fonction pure et déterministe de la liste d'encodages :
1. premier identifiant "préféré" présent (299 puis 298 : 1080p60 / 720p60),
2. sinon premier identifiant de repli (136 : 720p),
3. sinon Unacceptable.
"""

from dataclasses import dataclass
from typing import Any, Callable, Dict, Optional, Sequence, Tuple

import yt_dlp
from yt_dlp.utils import DownloadError

from app.core.errors import Unacceptable
from app.core.logging import get_logger

log = get_logger("ingestion.resolver")


@dataclass(frozen=True)
class ResolvedSource:
    url: str
    format_id: str
    available_formats: Tuple[str, ...]
    title: Optional[str] = None


def choose_format(
    available: Sequence[str],
    *,
    preferred: Sequence[str],
    fallback: Sequence[str],
) -> str:
    offered = set(available)
    for format_id in (*preferred, *fallback):
        if format_id in offered:
            return format_id
    raise Unacceptable()


def _extract_info(url: str) -> Optional[Dict[str, Any]]:
    ydl_opts = {
        "quiet": True,
        "no_warnings": True,
        "skip_download": True,
        "noplaylist": True,
    }
    with yt_dlp.YoutubeDL(ydl_opts) as ydl:
        return ydl.extract_info(url, download=False)


class VideoSourceResolver:
    """Métadonnées distantes -> ResolvedSource, ou Unacceptable."""

    def __init__(
        self,
        *,
        preferred: Sequence[str],
        fallback: Sequence[str],
        extract_info: Callable[[str], Optional[Dict[str, Any]]] = _extract_info,
    ):
        self.preferred = tuple(preferred)
        self.fallback = tuple(fallback)
        self._extract_info = extract_info

    def resolve(self, url: str) -> ResolvedSource:
        try:
            info = self._extract_info(url)
        except DownloadError as exc:
            log.info("Host rejected %s: %s", url, exc)
            raise Unacceptable(f"URL {url} is not an acceptable video.")

        if not info:
            raise Unacceptable(f"No metadata returned for {url}.")

        formats = tuple(
            str(f["format_id"]) for f in info.get("formats") or [] if f.get("format_id") is not None
        )
        format_id = choose_format(formats, preferred=self.preferred, fallback=self.fallback)
        log.debug("Resolved %s -> format %s (%d offered)", url, format_id, len(formats))
        return ResolvedSource(
            url=url,
            format_id=format_id,
            available_formats=formats,
            title=info.get("title"),
        )
