"""
➡️ But : Définir les erreurs métier de l'application et leur traduction HTTP.

Les services lèvent ces exceptions (jamais de HTTPException) ;
les handlers enregistrés dans main.py les transforment en réponses JSON
{"detail": ..., "code": ...} avec le bon status.

🔹 Avantages :

Services testables sans FastAPI.

Un seul endroit pour la correspondance erreur -> status.
"""

from typing import Optional

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from app.core.logging import get_logger

log = get_logger("errors")


class AppError(Exception):
    """Erreur métier de base."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    code: str = "INTERNAL_SERVER_ERROR"
    default_detail: str = "An error occurred in the server"

    def __init__(self, detail: Optional[str] = None):
        self.detail = detail or self.default_detail
        super().__init__(self.detail)


class DuplicateSubmission(AppError):
    status_code = status.HTTP_409_CONFLICT
    code = "CONFLICT"
    default_detail = "This youtube url has already been submitted."


class DuplicateVote(AppError):
    status_code = status.HTTP_409_CONFLICT
    code = "CONFLICT"
    default_detail = "You already voted on this gameplay."


class Unacceptable(AppError):
    status_code = status.HTTP_406_NOT_ACCEPTABLE
    code = "NOT_ACCEPTABLE"
    default_detail = "URL does not provide an acceptable video format."


class DownloadFailed(AppError):
    status_code = status.HTTP_502_BAD_GATEWAY
    code = "BAD_GATEWAY"
    default_detail = "The video could not be downloaded."


class ExtractionFailed(AppError):
    status_code = status.HTTP_502_BAD_GATEWAY
    code = "BAD_GATEWAY"
    default_detail = "Clip extraction failed."


class StorageFull(AppError):
    status_code = status.HTTP_507_INSUFFICIENT_STORAGE
    code = "INSUFFICIENT_STORAGE"
    default_detail = "Local media storage quota exceeded."


class Busy(AppError):
    status_code = status.HTTP_503_SERVICE_UNAVAILABLE
    code = "SERVICE_UNAVAILABLE"
    default_detail = "Too many ingestions in progress, retry later."


class NotFound(AppError):
    status_code = status.HTTP_404_NOT_FOUND
    code = "NOT_FOUND"
    default_detail = "Not Found"


class Unauthorized(AppError):
    status_code = status.HTTP_401_UNAUTHORIZED
    code = "UNAUTHORIZED"
    default_detail = "Unauthorized"


class Forbidden(AppError):
    status_code = status.HTTP_403_FORBIDDEN
    code = "FORBIDDEN"
    default_detail = "Forbidden"


class BadInput(AppError):
    status_code = status.HTTP_400_BAD_REQUEST
    code = "BAD_REQUEST"
    default_detail = "Bad input"


class Internal(AppError):
    pass


def error_body(exc: AppError) -> dict:
    return {"detail": exc.detail, "code": exc.code}


def register_error_handlers(app: FastAPI, *, debug: bool = False) -> None:
    """
    AppError -> status dédié.
    Toute autre exception -> 500, détail masqué hors dev (loggé côté serveur).
    """

    @app.exception_handler(AppError)
    async def _app_error(request: Request, exc: AppError):
        if exc.status_code >= 500:
            log.warning("%s %s -> %s: %s", request.method, request.url.path, exc.code, exc.detail)
        return JSONResponse(status_code=exc.status_code, content=error_body(exc))

    @app.exception_handler(Exception)
    async def _unexpected(request: Request, exc: Exception):
        request_id = getattr(request.state, "request_id", "unknown")
        log.exception("Unhandled exception in request %s: %s", request_id, exc)
        err = Internal(str(exc) if debug else None)
        body = error_body(err)
        body["request_id"] = request_id
        return JSONResponse(status_code=err.status_code, content=body)
