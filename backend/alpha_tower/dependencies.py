"""
Alpha Tower Backend — FastAPI Dependencies
============================================

What:  Providers injected into route handlers with `Depends()`: settings,
       repositories, the password hasher, the file service and the
       authentication gate.
How:   Everything is derived from `request.app.state`, which the app
       factory fills from the Settings value it was given.
"""

import logging
import uuid
from typing import Optional

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from alpha_tower.config import Settings
from alpha_tower.database import get_db_session
from alpha_tower.exceptions import UnauthorizedError
from alpha_tower.repositories import SqlAlchemyProductsRepository, SqlAlchemyUsersRepository
from alpha_tower.security import PasswordHasher, decode_access_token
from alpha_tower.services.file_service import FileService

logger = logging.getLogger(__name__)


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_password_hasher(request: Request) -> PasswordHasher:
    return request.app.state.password_hasher


def get_file_service(request: Request) -> FileService:
    return request.app.state.file_service


def get_products_repository(
    session: AsyncSession = Depends(get_db_session),
) -> SqlAlchemyProductsRepository:
    return SqlAlchemyProductsRepository(session)


def get_users_repository(
    session: AsyncSession = Depends(get_db_session),
) -> SqlAlchemyUsersRepository:
    return SqlAlchemyUsersRepository(session)


# ── Authentication Gate ───────────────────────────────────────────────────

def get_optional_user_id(
    request: Request,
    settings: Settings = Depends(get_settings),
) -> Optional[uuid.UUID]:
    """
    User id from `Authorization: Bearer <token>`, or None without a header.

    Raises:
        UnauthorizedError: header present but malformed, or token invalid
    """
    header = request.headers.get("Authorization")
    if not header:
        return None

    scheme, _, token = header.partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        raise UnauthorizedError("Invalid JWT Token.")

    user_id = decode_access_token(token.strip(), settings)
    request.state.user_id = user_id
    return user_id


def get_current_user_id(
    user_id: Optional[uuid.UUID] = Depends(get_optional_user_id),
) -> uuid.UUID:
    """Auth gate for protected routes: 401 unless a valid token is sent."""
    if user_id is None:
        raise UnauthorizedError("JWT Token is missing.")
    return user_id
