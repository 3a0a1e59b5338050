import re
import shutil
from pathlib import Path
from typing import Iterable, Optional, Set, Tuple
import filetype

from app.core.errors import StorageFull


ALLOWED_VIDEO_MIME: Set[str] = {
    "video/mp4",
    "video/webm",
    "video/quicktime",   # mov
    "video/x-matroska",  # mkv (selon filetype)
    "video/x-m4v",
}

# Nom de fichier produit par l'extracteur : "<début>-<fin>.mp4" (secondes)
_CLIP_RANGE = re.compile(r"^(?P<start>\d+(?:\.\d+)?)[-_](?P<end>\d+(?:\.\d+)?)$")


def detect_video_mime(path: Path) -> Optional[str]:
    """
    Détecte le type réel via 'filetype' (lecture de l'en-tête seulement).
    Retourne le MIME si c'est une vidéo autorisée, sinon None.
    """
    kind = filetype.guess(str(path))
    if kind is None or kind.mime not in ALLOWED_VIDEO_MIME:
        return None
    return kind.mime


def parse_clip_range(path: Path) -> Tuple[Optional[float], Optional[float]]:
    match = _CLIP_RANGE.match(path.stem)
    if not match:
        return None, None
    start, end = float(match["start"]), float(match["end"])
    if end < start:
        return None, None
    return start, end


def directory_size(path: Path) -> int:
    if not path.exists():
        return 0
    return sum(f.stat().st_size for f in path.rglob("*") if f.is_file())


def ensure_capacity(dirs: Iterable[Path], *, quota_mb: int) -> None:
    """Lève StorageFull si l'espace déjà utilisé dépasse le quota (atteindre le quota reste permis)."""
    used = sum(directory_size(d) for d in dirs)
    if used > quota_mb * 1024 * 1024:
        raise StorageFull(f"Media storage uses {used // (1024 * 1024)} MB (quota {quota_mb} MB)")


def remove_artifacts(*paths: Path) -> None:
    """Supprime fichiers / dossiers produits par une ingestion (absents tolérés)."""
    for path in paths:
        if path.is_dir():
            shutil.rmtree(path, ignore_errors=True)
        else:
            path.unlink(missing_ok=True)
