from __future__ import annotations

import threading
from concurrent.futures import Future, ThreadPoolExecutor
from typing import Callable, TypeVar

from app.core.errors import Busy
from app.core.logging import get_logger

T = TypeVar("T")

log = get_logger("ingestion.pool")


class IngestionPool:
    """File de travail bornée pour les ingestions (téléchargement + extraction).

    ``max_workers`` tâches tournent en parallèle, ``max_pending`` autres peuvent
    attendre ; au-delà, ``submit`` lève :class:`Busy` au lieu d'empiler.
    Le ``Future`` retourné est le canal de complétion / d'échec de la tâche.
    """

    def __init__(self, *, max_workers: int, max_pending: int):
        self._executor = ThreadPoolExecutor(max_workers=max_workers, thread_name_prefix="ingest")
        self._slots = threading.BoundedSemaphore(max_workers + max_pending)

    def submit(self, fn: Callable[..., T], *args, **kwargs) -> Future[T]:
        if not self._slots.acquire(blocking=False):
            raise Busy()
        try:
            future = self._executor.submit(fn, *args, **kwargs)
        except RuntimeError:
            self._slots.release()
            raise
        future.add_done_callback(lambda _f: self._slots.release())
        return future

    def shutdown(self, wait: bool = True) -> None:
        self._executor.shutdown(wait=wait, cancel_futures=True)


_pool: IngestionPool | None = None
_pool_lock = threading.Lock()


def get_ingestion_pool() -> IngestionPool:
    global _pool
    with _pool_lock:
        if _pool is None:
            from app.core.config import settings

            _pool = IngestionPool(
                max_workers=settings.MAX_CONCURRENT_INGESTIONS,
                max_pending=settings.MAX_PENDING_INGESTIONS,
            )
            log.info(
                "Ingestion pool started (workers=%d, pending=%d)",
                settings.MAX_CONCURRENT_INGESTIONS,
                settings.MAX_PENDING_INGESTIONS,
            )
        return _pool


def shutdown_ingestion_pool() -> None:
    global _pool
    with _pool_lock:
        if _pool is not None:
            _pool.shutdown(wait=False)
            _pool = None
