"""
➡️ But : Définir les endpoints "gameplay" de l'API.

C’est la couche la plus proche du web :

Réceptionne les requêtes HTTP (GET, POST, PATCH, DELETE…)

Appelle le service correspondant (aucune règle métier ni SQL ici)

Retourne les schémas de sortie (response_model)

Les erreurs métier (NotFound, Unauthorized, DuplicateSubmission…) sont
converties en réponses HTTP par les handlers déclarés dans app.core.errors.
"""

from typing import List, Optional

from fastapi import APIRouter, Depends, Path, Query, status

from app.api.v1.dependencies import get_caller, get_gameplay_service, get_review_service
from app.db.models.base import GameType
from app.features.authentication.schemas import Caller
from app.features.gameplay.schemas import (
    ClipOut,
    GameplayCreateIn,
    GameplayOut,
    GameplayPageOut,
    GameplayUpdateIn,
    MessageOut,
)
from app.features.gameplay.services import GameplayService
from app.features.review.schemas import ReviewIn, ReviewItemOut
from app.features.review.services import ReviewService

router = APIRouter(
    prefix="/gameplay",
    tags=["gameplay"],
    responses={
        401: {"description": "Non authentifié / permissions insuffisantes"},
        403: {"description": "Utilisateur blacklisté"},
        404: {"description": "Not Found"},
    },
)

# -----------------------------
# Create (URL + jeu)
# -----------------------------
@router.post(
    "",
    summary="Soumettre une vidéo YouTube",
    description=(
        "Vérifie que l'URL n'a pas déjà été soumise, télécharge l'encodage choisi, "
        "lance l'extraction des clips puis enregistre la vidéo (is_analyzed=false)."
    ),
    status_code=status.HTTP_201_CREATED,
    response_model=GameplayOut,
    responses={
        406: {"description": "URL sans encodage acceptable"},
        409: {"description": "URL déjà soumise"},
        502: {"description": "Téléchargement ou extraction en échec"},
        503: {"description": "File d'ingestion pleine"},
        507: {"description": "Quota disque atteint"},
    },
)
def create_gameplay(
    payload: GameplayCreateIn,
    caller: Caller = Depends(get_caller),
    svc: GameplayService = Depends(get_gameplay_service),
):
    return svc.create(caller, payload)

# -----------------------------
# Dashboard paginé (10 par page)
# -----------------------------
@router.get(
    "/dash",
    summary="Lister les vidéos (page de 10)",
    response_model=GameplayPageOut,
)
def list_dash(
    page: int = Query(1, ge=1, description="Numéro de page (1 = premiers 10)"),
    category: Optional[GameType] = Query(None, description="Filtrer par jeu"),
    caller: Caller = Depends(get_caller),
    svc: GameplayService = Depends(get_gameplay_service),
):
    return svc.page(page, category)

# -----------------------------
# Vidéos d'un utilisateur
# -----------------------------
@router.get(
    "/user",
    summary="Lister les vidéos d'un utilisateur",
    description="Sans user_id : les vidéos de l'appelant. Un autre user_id est réservé aux modérateurs.",
    response_model=List[GameplayOut],
)
def list_user_gameplay(
    user_id: Optional[str] = Query(None),
    caller: Caller = Depends(get_caller),
    svc: GameplayService = Depends(get_gameplay_service),
):
    return svc.list_for_user(caller, user_id)

# -----------------------------
# Relecture
# -----------------------------
@router.get(
    "/review",
    summary="Obtenir une vidéo à relire",
    description="Une vidéo que l'appelant n'a pas encore notée, tirée au hasard.",
    response_model=ReviewItemOut,
)
def get_review_item(
    caller: Caller = Depends(get_caller),
    svc: ReviewService = Depends(get_review_service),
):
    return svc.pick_review_item(caller)

@router.patch(
    "/review",
    summary="Voter sur une vidéo",
    response_model=MessageOut,
    responses={409: {"description": "Vote déjà enregistré"}},
)
def submit_review(
    payload: ReviewIn,
    caller: Caller = Depends(get_caller),
    svc: ReviewService = Depends(get_review_service),
):
    return svc.submit_vote(caller, payload)

# -----------------------------
# Par id
# -----------------------------
@router.get(
    "/{gameplay_id}",
    summary="Récupérer une vidéo",
    response_model=GameplayOut,
)
def get_gameplay(
    gameplay_id: str = Path(..., min_length=1),
    caller: Caller = Depends(get_caller),
    svc: GameplayService = Depends(get_gameplay_service),
):
    return svc.get(caller, gameplay_id)

@router.get(
    "/{gameplay_id}/clips",
    summary="Lister les clips d'une vidéo (modérateurs)",
    response_model=List[ClipOut],
)
def get_gameplay_clips(
    gameplay_id: str = Path(..., min_length=1),
    caller: Caller = Depends(get_caller),
    svc: GameplayService = Depends(get_gameplay_service),
):
    return svc.clips(caller, gameplay_id)

@router.patch(
    "/{gameplay_id}",
    summary="Modifier la catégorie ou le flag d'analyse",
    description="Changer is_analyzed demande le rôle modérateur.",
    response_model=GameplayOut,
)
def update_gameplay(
    payload: GameplayUpdateIn,
    gameplay_id: str = Path(..., min_length=1),
    caller: Caller = Depends(get_caller),
    svc: GameplayService = Depends(get_gameplay_service),
):
    return svc.update(caller, gameplay_id, payload)

@router.delete(
    "/{gameplay_id}",
    summary="Supprimer une vidéo (et ses clips / votes)",
    status_code=status.HTTP_204_NO_CONTENT,
)
def delete_gameplay(
    gameplay_id: str = Path(..., min_length=1),
    caller: Caller = Depends(get_caller),
    svc: GameplayService = Depends(get_gameplay_service),
):
    svc.delete(caller, gameplay_id)
    return None
