"""
Alpha Tower Backend — User Model
==================================

What:  ORM mapping of the `users` table.

Security Note:
    `password` only ever holds a bcrypt hash. No response schema declares
    the field, so it cannot be serialized by accident.
"""

import uuid
from datetime import datetime
from typing import Optional

from sqlalchemy import DateTime, String, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from alpha_tower.database import Base
from alpha_tower.models.product import utcnow


class User(Base):
    """
    A system user.

    Lifecycle:
        1. Created by CreateUserService (email unique, password hashed)
        2. Updated by UpdateUserService (name, email, password re-hashed)
        3. Avatar filename replaced by UpdateUserAvatarService
        4. Removed by DeleteUserService
    """

    __tablename__ = "users"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        primary_key=True,
        default=uuid.uuid4,
    )

    name: Mapped[str] = mapped_column(String(255), nullable=False)

    email: Mapped[str] = mapped_column(String(255), nullable=False, unique=True)

    password: Mapped[str] = mapped_column(String(255), nullable=False)

    # Filename relative to the upload directory
    avatar: Mapped[Optional[str]] = mapped_column(String(255), nullable=True, default=None)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
    )

    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
        onupdate=utcnow,
    )

    def __repr__(self) -> str:
        return f"<User(id={self.id}, email='{self.email}')>"
