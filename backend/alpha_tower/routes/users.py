"""
Alpha Tower Backend — User Routes
===================================

What:  /users CRUD plus PATCH /users/avatar.
Auth:  POST /users is open (sign-up); every other route requires a token.

Avatar Upload Flow:
    1. No `avatar` part in the multipart body → 400 {"error": ...},
       checked before authentication
    2. Authenticate (401 on missing/invalid token)
    3. FileService validates and stores the upload
    4. UpdateUserAvatarService points the user at the new file and removes
       the previous one; on failure the new file is removed again
"""

import logging
import uuid
from typing import List, Optional

from fastapi import APIRouter, Depends, File, Request, Response, UploadFile, status
from fastapi.responses import JSONResponse

from alpha_tower.config import Settings
from alpha_tower.dependencies import (
    get_current_user_id,
    get_file_service,
    get_optional_user_id,
    get_password_hasher,
    get_settings,
    get_users_repository,
)
from alpha_tower.repositories import UsersRepository
from alpha_tower.schemas.common import ErrorResponse
from alpha_tower.schemas.user import UserBody, UserResponse
from alpha_tower.security import PasswordHasher
from alpha_tower.services.file_service import FileService
from alpha_tower.services.user_service import (
    CreateUserService,
    DeleteUserService,
    ListUserService,
    ShowUserService,
    UpdateUserAvatarService,
    UpdateUserService,
)

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/users",
    tags=["Users"],
    responses={400: {"description": "Invalid input", "model": ErrorResponse}},
)

AVATAR_REQUIRED = "Avatar file is required"


@router.get(
    "",
    response_model=List[UserResponse],
    dependencies=[Depends(get_current_user_id)],
    summary="List users",
)
async def index(
    repository: UsersRepository = Depends(get_users_repository),
    settings: Settings = Depends(get_settings),
) -> List[UserResponse]:
    users = await ListUserService(repository).execute()
    return [UserResponse.from_user(user, settings) for user in users]


@router.get(
    "/{user_id}",
    response_model=UserResponse,
    dependencies=[Depends(get_current_user_id)],
    responses={404: {"description": "User not found", "model": ErrorResponse}},
    summary="Show a user",
)
async def show(
    user_id: uuid.UUID,
    repository: UsersRepository = Depends(get_users_repository),
    settings: Settings = Depends(get_settings),
) -> UserResponse:
    user = await ShowUserService(repository).execute(user_id)
    return UserResponse.from_user(user, settings)


@router.post(
    "",
    status_code=status.HTTP_201_CREATED,
    response_model=UserResponse,
    responses={409: {"description": "Email already used", "model": ErrorResponse}},
    summary="Create a user",
)
async def create(
    body: UserBody,
    repository: UsersRepository = Depends(get_users_repository),
    hasher: PasswordHasher = Depends(get_password_hasher),
    settings: Settings = Depends(get_settings),
) -> UserResponse:
    user = await CreateUserService(repository, hasher).execute(
        name=body.name,
        email=body.email,
        password=body.password,
    )
    return UserResponse.from_user(user, settings)


@router.patch(
    "/avatar",
    response_model=UserResponse,
    responses={
        401: {"description": "Missing or invalid token", "model": ErrorResponse},
        404: {"description": "User not found", "model": ErrorResponse},
    },
    summary="Replace the authenticated user's avatar",
)
async def update_avatar(
    request: Request,
    avatar: Optional[UploadFile] = File(default=None, description="Avatar image file"),
    repository: UsersRepository = Depends(get_users_repository),
    file_service: FileService = Depends(get_file_service),
    settings: Settings = Depends(get_settings),
):
    if avatar is None:
        return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content={"error": AVATAR_REQUIRED})

    try:
        user_id = get_current_user_id(get_optional_user_id(request, settings))
        content = await avatar.read()
        filename = await file_service.validate_and_store(avatar.filename, content)
    finally:
        await avatar.close()

    try:
        user = await UpdateUserAvatarService(repository, file_service).execute(
            user_id=user_id,
            avatar_filename=filename,
        )
    except Exception:
        await file_service.cleanup_file(filename)
        raise

    return UserResponse.from_user(user, settings)


@router.put(
    "/{user_id}",
    response_model=UserResponse,
    dependencies=[Depends(get_current_user_id)],
    responses={
        404: {"description": "User not found", "model": ErrorResponse},
        409: {"description": "Email already used by another user", "model": ErrorResponse},
    },
    summary="Overwrite a user",
)
async def update(
    user_id: uuid.UUID,
    body: UserBody,
    repository: UsersRepository = Depends(get_users_repository),
    hasher: PasswordHasher = Depends(get_password_hasher),
    settings: Settings = Depends(get_settings),
) -> UserResponse:
    user = await UpdateUserService(repository, hasher).execute(
        user_id=user_id,
        name=body.name,
        email=body.email,
        password=body.password,
    )
    return UserResponse.from_user(user, settings)


@router.delete(
    "/{user_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
    dependencies=[Depends(get_current_user_id)],
    responses={404: {"description": "User not found", "model": ErrorResponse}},
    summary="Delete a user",
)
async def delete(
    user_id: uuid.UUID,
    repository: UsersRepository = Depends(get_users_repository),
    file_service: FileService = Depends(get_file_service),
) -> Response:
    await DeleteUserService(repository, file_service).execute(user_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
