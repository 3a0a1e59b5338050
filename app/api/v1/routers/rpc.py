"""
➡️ But : Exposer les mêmes opérations que /gameplay sous forme de procédures RPC.

POST /api/v1/rpc/{procedure} avec un corps JSON (l'input de la procédure).

Réponse OK     : {"result": {"data": ...}}
Réponse erreur : {"error": {"code": "NOT_FOUND", "message": "...", "httpStatus": 404}}
(le status HTTP de la réponse est aussi httpStatus)
"""

from dataclasses import dataclass
from typing import Any, Callable, Dict, Optional, Tuple, Type

from fastapi import APIRouter, Body, Depends, Path, Request, Security
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse
from fastapi.security import HTTPAuthorizationCredentials
from pydantic import BaseModel, Field as PydField, ValidationError

from app.api.v1.dependencies import (
    bearer_scheme,
    get_access_token_from_bearer,
    get_auth_service,
    get_caller,
    get_gameplay_service,
    get_review_service,
)
from app.core.config import settings
from app.core.errors import AppError, BadInput, Internal, NotFound
from app.core.logging import get_logger
from app.db.models.base import GameType
from app.features.authentication.schemas import Caller
from app.features.authentication.services import AuthService
from app.features.gameplay.schemas import (
    ClipOut,
    GameplayCreateIn,
    GameplayOut,
    GameplayPageOut,
    GameplayUpdateIn,
    MessageOut,
)
from app.features.gameplay.services import GameplayService
from app.features.review.schemas import ReviewIn
from app.features.review.services import ReviewService

log = get_logger("rpc")

router = APIRouter(prefix="/rpc", tags=["rpc"])


# ---------- Inputs spécifiques RPC ----------

class NoInput(BaseModel):
    pass

class GameplayIdIn(BaseModel):
    gameplay_id: str = PydField(..., min_length=1)

class GetManyIn(BaseModel):
    page: int = PydField(1, ge=1)
    filter_games: Optional[GameType] = None

class GetUsersIn(BaseModel):
    user_id: Optional[str] = None

class UpdateIn(GameplayUpdateIn):
    gameplay_id: str = PydField(..., min_length=1)


@dataclass
class RpcServices:
    gameplay: GameplayService
    review: ReviewService


Handler = Callable[[RpcServices, Caller, Any], Any]


def _delete(svc: RpcServices, caller: Caller, inp: GameplayIdIn) -> MessageOut:
    svc.gameplay.delete(caller, inp.gameplay_id)
    return MessageOut(message="Gameplay deleted successfully.")


PROCEDURES: Dict[str, Tuple[Type[BaseModel], Handler]] = {
    "gameplay.get": (
        GameplayIdIn,
        lambda svc, caller, inp: GameplayOut.model_validate(svc.gameplay.get(caller, inp.gameplay_id)),
    ),
    "gameplay.getMany": (
        GetManyIn,
        lambda svc, caller, inp: GameplayPageOut(**svc.gameplay.page(inp.page, inp.filter_games)),
    ),
    "gameplay.create": (
        GameplayCreateIn,
        lambda svc, caller, inp: GameplayOut.model_validate(svc.gameplay.create(caller, inp)),
    ),
    "gameplay.getUsers": (
        GetUsersIn,
        lambda svc, caller, inp: [
            GameplayOut.model_validate(f) for f in svc.gameplay.list_for_user(caller, inp.user_id)
        ],
    ),
    "gameplay.getClips": (
        GameplayIdIn,
        lambda svc, caller, inp: [ClipOut.model_validate(c) for c in svc.gameplay.clips(caller, inp.gameplay_id)],
    ),
    "gameplay.update": (
        UpdateIn,
        lambda svc, caller, inp: GameplayOut.model_validate(
            svc.gameplay.update(
                caller,
                inp.gameplay_id,
                GameplayUpdateIn(**inp.model_dump(exclude={"gameplay_id"}, exclude_unset=True)),
            )
        ),
    ),
    "gameplay.delete": (GameplayIdIn, _delete),
    "gameplay.getReviewItems": (
        NoInput,
        lambda svc, caller, inp: svc.review.pick_review_item(caller),
    ),
    "gameplay.review": (
        ReviewIn,
        lambda svc, caller, inp: MessageOut(**svc.review.submit_vote(caller, inp)),
    ),
}


def rpc_error(exc: AppError) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": {"code": exc.code, "message": exc.detail, "httpStatus": exc.status_code}},
    )


@router.post(
    "/{procedure}",
    summary="Appeler une procédure RPC",
    description="Procédures : " + ", ".join(sorted(PROCEDURES)),
)
def call_procedure(
    request: Request,
    procedure: str = Path(...),
    body: Any = Body(None),
    credentials: Optional[HTTPAuthorizationCredentials] = Security(bearer_scheme),
    auth_svc: AuthService = Depends(get_auth_service),
    gameplay_svc: GameplayService = Depends(get_gameplay_service),
    review_svc: ReviewService = Depends(get_review_service),
):
    try:
        entry = PROCEDURES.get(procedure)
        if entry is None:
            raise NotFound(f'No "{procedure}" procedure found')
        input_model, handler = entry

        caller = get_caller(request, get_access_token_from_bearer(credentials), auth_svc)

        if body is None:
            body = {}
        if not isinstance(body, dict):
            raise BadInput("Procedure input must be a JSON object")
        try:
            payload = input_model.model_validate(body)
        except ValidationError as exc:
            raise BadInput("; ".join(f"{'.'.join(map(str, e['loc']))}: {e['msg']}" for e in exc.errors()))

        result = handler(RpcServices(gameplay=gameplay_svc, review=review_svc), caller, payload)
        data = jsonable_encoder(result)
    except AppError as exc:
        log.debug("RPC %s failed: %s %s", procedure, exc.code, exc.detail)
        return rpc_error(exc)
    except Exception as exc:
        # même enveloppe que les erreurs métier ; détail masqué hors dev
        log.exception("RPC %s crashed", procedure)
        return rpc_error(Internal(str(exc) if settings.ENV == "dev" else None))

    return {"result": {"data": data}}
