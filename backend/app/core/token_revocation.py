"""
Token Revocation using Redis.

Blacklists individual tokens on logout and flags every token of a user
when their account is deactivated, suspended or deleted.
"""

import logging
import time
from typing import Optional

from redis.exceptions import RedisError

from backend.app.core.config import Settings

logger = logging.getLogger("fleet.auth")

# Redis key prefix for blacklisted tokens
TOKEN_BLACKLIST_PREFIX = "blacklist:token:"
USER_TOKENS_PREFIX = "user:tokens:"


class TokenRevocationStore:
    """
    Revocation flags kept in Redis with a TTL equal to the token lifetime.

    Lookups fail open when Redis is unreachable: the per-call user status
    check in the session resolver still rejects inactive accounts.
    """

    def __init__(self, redis_client, settings: Settings):
        self.redis = redis_client
        self.ttl_seconds = settings.access_token_expire_minutes * 60

    async def revoke_token(self, token: str, user_id: int) -> bool:
        """
        Revoke a specific JWT token by adding it to the blacklist.

        Args:
            token: The JWT token string to revoke
            user_id: User ID who owns the token

        Returns:
            True if successfully revoked, False otherwise
        """
        try:
            await self.redis.setex(f"{TOKEN_BLACKLIST_PREFIX}{token}", self.ttl_seconds, str(user_id))
            return True
        except RedisError:
            logger.error("Could not revoke token for user %s", user_id, exc_info=True)
            return False

    async def is_token_revoked(self, token: str) -> bool:
        try:
            return await self.redis.exists(f"{TOKEN_BLACKLIST_PREFIX}{token}") > 0
        except RedisError:
            logger.warning("Token revocation lookup failed", exc_info=True)
            return False

    async def revoke_all_user_tokens(self, user_id: int) -> bool:
        """
        Revoke every token issued to the user up to now.

        The flag stores the revocation time, so tokens issued by a later
        login stay valid.
        """
        try:
            await self.redis.setex(
                f"{USER_TOKENS_PREFIX}{user_id}:revoked", self.ttl_seconds, repr(time.time())
            )
            return True
        except RedisError:
            logger.error("Could not revoke tokens for user %s", user_id, exc_info=True)
            return False

    async def are_user_tokens_revoked(self, user_id: int, issued_at: Optional[float] = None) -> bool:
        """True if a token issued at issued_at (epoch seconds) was issued at or before the revocation."""
        try:
            revoked_at = await self.redis.get(f"{USER_TOKENS_PREFIX}{user_id}:revoked")
            if revoked_at is None:
                return False
            if issued_at is None:
                return True
            return float(issued_at) <= float(revoked_at)
        except RedisError:
            logger.warning("User revocation lookup failed for user %s", user_id, exc_info=True)
            return False

    async def clear_user_token_revocation(self, user_id: int) -> bool:
        """Called when a deactivated user is reactivated."""
        try:
            await self.redis.delete(f"{USER_TOKENS_PREFIX}{user_id}:revoked")
            return True
        except RedisError:
            logger.error("Could not clear revocation for user %s", user_id, exc_info=True)
            return False
