"""
Alpha Tower Backend — Password Hashing and Access Tokens
=========================================================

What:  bcrypt password hashing and HS256 JWT issue/verify.
How:   `PasswordHasher` runs bcrypt in a worker thread so the event loop
       keeps serving other requests while a hash is computed.
       Tokens carry the user id in `sub` and expire after `jwt_expires_in`.
Who:   Hasher used by user/session services; tokens by CreateSessionService
       (issue) and the auth dependency (verify).
"""

import logging
import uuid
from datetime import datetime, timedelta, timezone

import bcrypt
from jose import JWTError, jwt
from starlette.concurrency import run_in_threadpool

from alpha_tower.config import Settings
from alpha_tower.exceptions import UnauthorizedError

logger = logging.getLogger(__name__)


class PasswordHasher:
    """
    One-way bcrypt hashing with a fixed cost factor.

    Args:
        rounds: bcrypt log2 work factor (4-31; settings default 8)
    """

    def __init__(self, rounds: int = 8):
        self.rounds = rounds

    async def hash(self, password: str) -> str:
        return await run_in_threadpool(self._hash_sync, password)

    async def verify(self, password: str, hashed: str) -> bool:
        return await run_in_threadpool(self._verify_sync, password, hashed)

    def _hash_sync(self, password: str) -> str:
        salt = bcrypt.gensalt(rounds=self.rounds)
        return bcrypt.hashpw(password.encode("utf-8"), salt).decode("utf-8")

    @staticmethod
    def _verify_sync(password: str, hashed: str) -> bool:
        try:
            return bcrypt.checkpw(password.encode("utf-8"), hashed.encode("utf-8"))
        except ValueError:
            # Stored value is not a bcrypt hash
            logger.warning("Password verification against a malformed hash")
            return False


def create_access_token(subject: uuid.UUID, settings: Settings) -> str:
    """Sign a JWT whose `sub` is the user id."""
    now = datetime.now(timezone.utc)
    claims = {
        "sub": str(subject),
        "iat": int(now.timestamp()),
        "exp": int((now + timedelta(seconds=settings.jwt_expires_in)).timestamp()),
    }
    return jwt.encode(claims, settings.jwt_secret, algorithm=settings.jwt_algorithm)


def decode_access_token(token: str, settings: Settings) -> uuid.UUID:
    """
    Verify signature and expiry; return the user id from `sub`.

    Raises:
        UnauthorizedError: bad signature, expired, or `sub` not a UUID
    """
    try:
        claims = jwt.decode(token, settings.jwt_secret, algorithms=[settings.jwt_algorithm])
        return uuid.UUID(str(claims["sub"]))
    except (JWTError, KeyError, ValueError) as e:
        logger.info("Rejected access token: %s", type(e).__name__)
        raise UnauthorizedError("Invalid JWT Token.") from e
