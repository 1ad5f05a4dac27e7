"""User repositories: contract plus in-memory and SQLAlchemy variants."""

from abc import abstractmethod
from typing import Optional

from alpha_tower.models.user import User
from alpha_tower.repositories.base import (
    InMemoryRepository,
    Repository,
    SqlAlchemyRepository,
)

EMAIL_CONFLICT = "Email address already used."


class UsersRepository(Repository[User]):

    @abstractmethod
    async def find_by_email(self, email: str) -> Optional[User]:
        ...


class InMemoryUsersRepository(InMemoryRepository[User], UsersRepository):
    model = User
    unique_fields = ("email",)
    conflict_message = EMAIL_CONFLICT

    async def find_by_email(self, email: str) -> Optional[User]:
        return await self._find_by("email", email)


class SqlAlchemyUsersRepository(SqlAlchemyRepository[User], UsersRepository):
    model = User
    conflict_message = EMAIL_CONFLICT

    async def find_by_email(self, email: str) -> Optional[User]:
        return await self._find_by(User.email, email)
