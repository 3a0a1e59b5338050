"""
➡️ But : Lancer l'extracteur de clips externe et récupérer ce qu'il a produit.

Le process est appelé avec (chemin_video, dossier_sortie) ; stdout et stderr sont
loggés ligne par ligne pendant l'exécution. Son code de sortie
est vérifié : non nul ou dépassement du timeout -> ExtractionFailed.
"""

import shlex
import subprocess
import threading
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional, Sequence

from app.core.errors import ExtractionFailed
from app.core.logging import get_logger
from app.utils.media_files import parse_clip_range

log = get_logger("ingestion.extractor")


@dataclass(frozen=True)
class ExtractedClip:
    path: Path
    start_seconds: Optional[float] = None
    end_seconds: Optional[float] = None


@dataclass(frozen=True)
class ExtractionResult:
    returncode: int
    clips: List[ExtractedClip]


class ClipExtractor:
    def __init__(self, *, command: str | Sequence[str], timeout: Optional[float]):
        self.command = shlex.split(command) if isinstance(command, str) else list(command)
        self.timeout = timeout

    def run(self, video_path: Path, output_dir: Path) -> ExtractionResult:
        output_dir.mkdir(parents=True, exist_ok=True)
        argv = [*self.command, str(video_path), str(output_dir)]
        log.info("Running clip extractor: %s", " ".join(argv))
        try:
            proc = subprocess.Popen(
                argv,
                stdout=subprocess.PIPE,
                stderr=subprocess.STDOUT,
                text=True,
                bufsize=1,
            )
        except OSError as exc:
            raise ExtractionFailed(f"Clip extractor could not start: {exc}")

        timed_out = threading.Event()

        def _kill() -> None:
            timed_out.set()
            proc.kill()

        timer = threading.Timer(self.timeout, _kill) if self.timeout else None
        if timer is not None:
            timer.daemon = True
            timer.start()
        try:
            with proc:
                # relayée au fil de l'eau, pas à la fin du process
                for line in proc.stdout:
                    log.info("[extractor] %s", line.rstrip())
                returncode = proc.wait()
        finally:
            if timer is not None:
                timer.cancel()

        if timed_out.is_set() and returncode != 0:
            raise ExtractionFailed(f"Clip extractor timed out after {self.timeout}s")
        if returncode != 0:
            raise ExtractionFailed(f"Clip extractor exited with code {returncode}")

        return ExtractionResult(returncode=returncode, clips=collect_clips(output_dir))


def collect_clips(output_dir: Path) -> List[ExtractedClip]:
    clips = []
    for path in sorted(p for p in output_dir.iterdir() if p.is_file()):
        start, end = parse_clip_range(path)
        clips.append(ExtractedClip(path=path, start_seconds=start, end_seconds=end))
    return clips
