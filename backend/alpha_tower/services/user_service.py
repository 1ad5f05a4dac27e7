"""
Alpha Tower Backend — User Services
=====================================

What:  One class per user use case: create, list, show, update, delete,
       avatar update, and session (login) creation.
How:   Services receive a `UsersRepository` and, where passwords or files
       are involved, a `PasswordHasher` or `FileService`.

Invariants:
    - No two live users share an email
    - `User.password` only ever receives output of `PasswordHasher.hash()`,
      on create and on update alike
"""

import logging
import uuid
from typing import List, Optional, Tuple

from alpha_tower.config import Settings
from alpha_tower.exceptions import ConflictError, NotFoundError, UnauthorizedError
from alpha_tower.models.user import User
from alpha_tower.repositories.users import EMAIL_CONFLICT, UsersRepository
from alpha_tower.security import PasswordHasher, create_access_token
from alpha_tower.services.file_service import FileService

logger = logging.getLogger(__name__)

USER_NOT_FOUND = "User not found."
BAD_CREDENTIALS = "Incorrect email/password combination."


async def find_user_or_raise(repository: UsersRepository, user_id: uuid.UUID) -> User:
    user = await repository.find_one(user_id)
    if user is None:
        raise NotFoundError(USER_NOT_FOUND, resource_id=str(user_id))
    return user


async def ensure_email_available(
    repository: UsersRepository,
    email: str,
    user_id: Optional[uuid.UUID] = None,
) -> None:
    """Raise ConflictError if `email` belongs to a user other than `user_id`."""
    owner = await repository.find_by_email(email)
    if owner is not None and owner.id != user_id:
        logger.info("Rejected email %r: already used by %s", email, owner.id)
        raise ConflictError(EMAIL_CONFLICT, context={"field": "email"})


class CreateUserService:
    def __init__(self, repository: UsersRepository, hasher: PasswordHasher):
        self.repository = repository
        self.hasher = hasher

    async def execute(self, name: str, email: str, password: str) -> User:
        """
        Persist a new user with a hashed password.

        Raises:
            ConflictError: the email is already in use
        """
        await ensure_email_available(self.repository, email)

        user = self.repository.create(
            name=name,
            email=email,
            password=await self.hasher.hash(password),
        )
        await self.repository.save(user)

        logger.info("User created: %s", user.id)
        return user


class ListUserService:
    def __init__(self, repository: UsersRepository):
        self.repository = repository

    async def execute(self) -> List[User]:
        return await self.repository.find()


class ShowUserService:
    def __init__(self, repository: UsersRepository):
        self.repository = repository

    async def execute(self, user_id: uuid.UUID) -> User:
        return await find_user_or_raise(self.repository, user_id)


class UpdateUserService:
    """Overwrites name, email and password (re-hashed) of an existing user."""

    def __init__(self, repository: UsersRepository, hasher: PasswordHasher):
        self.repository = repository
        self.hasher = hasher

    async def execute(self, user_id: uuid.UUID, name: str, email: str, password: str) -> User:
        user = await find_user_or_raise(self.repository, user_id)
        await ensure_email_available(self.repository, email, user_id=user.id)

        user.name = name
        user.email = email
        user.password = await self.hasher.hash(password)

        await self.repository.save(user)

        logger.info("User updated: %s", user.id)
        return user


class DeleteUserService:
    def __init__(self, repository: UsersRepository, file_service: FileService):
        self.repository = repository
        self.file_service = file_service

    async def execute(self, user_id: uuid.UUID) -> None:
        user = await find_user_or_raise(self.repository, user_id)
        avatar = user.avatar

        await self.repository.remove(user)
        await self.repository.commit()
        logger.info("User deleted: %s", user_id)

        if avatar:
            await self.file_service.cleanup_file(avatar)


class UpdateUserAvatarService:
    """
    Points a user's avatar at a freshly stored upload.

    The previous avatar file, if any, is removed from the upload directory
    once the new filename is committed; if the commit fails the old file
    stays and the error propagates.
    The caller guarantees `avatar_filename` refers to a stored file.
    """

    def __init__(self, repository: UsersRepository, file_service: FileService):
        self.repository = repository
        self.file_service = file_service

    async def execute(self, user_id: uuid.UUID, avatar_filename: str) -> User:
        user = await find_user_or_raise(self.repository, user_id)

        previous = user.avatar
        user.avatar = avatar_filename
        await self.repository.save(user)
        await self.repository.commit()

        if previous and previous != avatar_filename:
            await self.file_service.cleanup_file(previous)

        logger.info("Avatar updated for user %s: %s", user.id, avatar_filename)
        return user


class CreateSessionService:
    """
    Email/password login.

    Unknown email and wrong password produce the same error so the response
    does not reveal which emails are registered.
    """

    def __init__(self, repository: UsersRepository, hasher: PasswordHasher, settings: Settings):
        self.repository = repository
        self.hasher = hasher
        self.settings = settings

    async def execute(self, email: str, password: str) -> Tuple[User, str]:
        user = await self.repository.find_by_email(email)
        if user is None:
            raise UnauthorizedError(BAD_CREDENTIALS)

        if not await self.hasher.verify(password, user.password):
            logger.info("Failed login for user %s", user.id)
            raise UnauthorizedError(BAD_CREDENTIALS)

        token = create_access_token(user.id, self.settings)
        logger.info("Session created for user %s", user.id)
        return user, token
