"""
Alpha Tower Backend — Session Route
=====================================

What:  POST /sessions exchanges email + password for a signed access token.
"""

from fastapi import APIRouter, Depends

from alpha_tower.config import Settings
from alpha_tower.dependencies import get_password_hasher, get_settings, get_users_repository
from alpha_tower.repositories import UsersRepository
from alpha_tower.schemas.common import ErrorResponse
from alpha_tower.schemas.user import SessionBody, SessionResponse, UserResponse
from alpha_tower.security import PasswordHasher
from alpha_tower.services.user_service import CreateSessionService

router = APIRouter(prefix="/sessions", tags=["Sessions"])


@router.post(
    "",
    response_model=SessionResponse,
    responses={401: {"description": "Incorrect email/password", "model": ErrorResponse}},
    summary="Log in",
)
async def create(
    body: SessionBody,
    repository: UsersRepository = Depends(get_users_repository),
    hasher: PasswordHasher = Depends(get_password_hasher),
    settings: Settings = Depends(get_settings),
) -> SessionResponse:
    user, token = await CreateSessionService(repository, hasher, settings).execute(
        email=body.email,
        password=body.password,
    )
    return SessionResponse(user=UserResponse.from_user(user, settings), token=token)
