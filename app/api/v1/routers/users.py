from fastapi import APIRouter, Depends, Path

from app.api.v1.dependencies import get_caller, get_user_service
from app.features.authentication.schemas import Caller
from app.features.users.schemas import UserOut, UserUpdate
from app.features.users.services import UserService

router = APIRouter(
    prefix="/users",
    tags=["users"],
    responses={404: {"description": "Not Found"}},
)

@router.get(
    "/me",
    summary="Mon profil (rôle, blacklist)",
    response_model=UserOut,
)
def read_me(
    caller: Caller = Depends(get_caller),
    svc: UserService = Depends(get_user_service),
):
    return svc.me(caller)

@router.patch(
    "/{user_id}",
    summary="Changer le rôle ou la blacklist d'un utilisateur (admin)",
    response_model=UserOut,
)
def update_user(
    payload: UserUpdate,
    user_id: str = Path(..., min_length=1),
    caller: Caller = Depends(get_caller),
    svc: UserService = Depends(get_user_service),
):
    return svc.update(caller, user_id, payload)
