"""
FastAPI dependencies.

Builds the per-request ActionContext from app.state and extracts the
bearer token. Routes hand both to the actions, which do the rest.
"""

from typing import Optional

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from backend.app.actions.base import ActionContext
from backend.app.core.session import CallerContext, SessionResolver
from backend.app.core.token_revocation import TokenRevocationStore
from backend.app.db.session import get_db

# HTTP Bearer security scheme; a missing header is the action layer's call
security = HTTPBearer(auto_error=False)


def get_bearer_token(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
) -> Optional[str]:
    return credentials.credentials if credentials else None


def get_revocation_store(request: Request) -> TokenRevocationStore:
    return TokenRevocationStore(request.app.state.redis, request.app.state.settings)


def get_action_context(
    request: Request,
    db: AsyncSession = Depends(get_db),
    revocations: TokenRevocationStore = Depends(get_revocation_store),
) -> ActionContext:
    return ActionContext(db=db, settings=request.app.state.settings, revocations=revocations)


async def get_current_caller(
    token: Optional[str] = Depends(get_bearer_token),
    ctx: ActionContext = Depends(get_action_context),
) -> CallerContext:
    """
    Resolve the caller for routes that sit outside the action envelope.

    Raises:
        AuthenticationError: rendered as 401 by the app exception handler
    """
    return await SessionResolver(ctx.db, ctx.settings, ctx.revocations).resolve(token)
