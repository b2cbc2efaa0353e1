"""
Session resolution.

Turns a bearer token into the caller identity every service call takes.
The role is read from storage on every call, never trusted from the token,
so role changes and deactivations apply to the very next request.
"""

import logging
from dataclasses import dataclass
from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession

from backend.app.core.config import Settings
from backend.app.core.exceptions import AuthenticationError
from backend.app.core.jwt import decode_access_token
from backend.app.core.token_revocation import TokenRevocationStore
from backend.app.models.enums import UserRole, UserStatus
from backend.app.repositories.user_repository import UserRepository

logger = logging.getLogger("fleet.auth")


@dataclass(frozen=True)
class CallerContext:
    """Who is calling: passed explicitly into every service operation."""
    user_id: int
    role: UserRole
    email: str


class SessionResolver:
    """
    Resolve a token to a CallerContext.

    Security checks:
    1. Validates JWT signature and expiry
    2. Checks if the token has been explicitly revoked (logout)
    3. Checks if all user tokens have been revoked (user deactivated)
    4. Re-reads the user so role and status are current
    """

    def __init__(self, db: AsyncSession, settings: Settings, revocations: TokenRevocationStore):
        self.db = db
        self.settings = settings
        self.revocations = revocations

    async def resolve(self, token: Optional[str]) -> CallerContext:
        if not token:
            raise AuthenticationError()

        payload = decode_access_token(token, self.settings)
        if payload is None:
            raise AuthenticationError()

        user_id = payload.get("user_id")
        if not isinstance(user_id, int):
            raise AuthenticationError()

        if await self.revocations.is_token_revoked(token):
            logger.info("Rejected revoked token for user %s", user_id)
            raise AuthenticationError()

        if await self.revocations.are_user_tokens_revoked(user_id, payload.get("iat")):
            logger.info("Rejected token of user %s: all sessions revoked", user_id)
            raise AuthenticationError()

        user = await UserRepository(self.db).get(user_id)
        if user is None or user.status != UserStatus.ACTIVE:
            logger.info("Rejected token of missing or inactive user %s", user_id)
            raise AuthenticationError()

        return CallerContext(user_id=user.id, role=user.role, email=user.email)
