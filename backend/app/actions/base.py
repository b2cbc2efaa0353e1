"""
Action boundary.

Actions are what the dashboard calls. Each one resolves the session once,
runs a single service operation and wraps the outcome in an ActionResult.
Nothing raises across this boundary: structured failures become their
human-readable message, anything unexpected is logged and reported
generically.
"""

import logging
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Optional

from pydantic import BaseModel
from sqlalchemy.ext.asyncio import AsyncSession

from backend.app.core.config import Settings
from backend.app.core.exceptions import AppException, AuthenticationError, describe_error
from backend.app.core.session import CallerContext, SessionResolver
from backend.app.core.token_revocation import TokenRevocationStore
from backend.app.schemas.common import ActionResult

logger = logging.getLogger("fleet.actions")

NOT_AUTHENTICATED = "Unauthorized: Not authenticated"
UNEXPECTED_FAILURE = "Something went wrong, please try again"


@dataclass
class ActionContext:
    """Per-request collaborators handed to every action."""
    db: AsyncSession
    settings: Settings
    revocations: TokenRevocationStore


def to_data(value: Any) -> Any:
    """JSON-ready representation of a service result."""
    if isinstance(value, BaseModel):
        return value.model_dump(mode="json", by_alias=True)
    if isinstance(value, (list, tuple)):
        return [to_data(item) for item in value]
    return value


def _identity(value: Any) -> Any:
    return value


async def run_action(
    ctx: ActionContext,
    token: Optional[str],
    name: str,
    operation: Callable[[CallerContext], Awaitable[Any]],
    serialize: Callable[[Any], Any] = _identity,
) -> ActionResult:
    """
    Run an operation on behalf of the session owner.

    Args:
        ctx: Database session, settings and revocation store
        token: Raw session token, None when there is no session
        name: Action name for logs
        operation: Service call taking the resolved caller
        serialize: Turns the service result into schemas or plain data

    Returns:
        ActionResult envelope
    """
    try:
        caller = await SessionResolver(ctx.db, ctx.settings, ctx.revocations).resolve(token)
    except AuthenticationError:
        return ActionResult.fail(NOT_AUTHENTICATED)
    except AppException as exc:
        return ActionResult.fail(describe_error(exc))

    return await _invoke(ctx, name, lambda: operation(caller), serialize, caller)


async def run_public_action(
    ctx: ActionContext,
    name: str,
    operation: Callable[[], Awaitable[Any]],
    serialize: Callable[[Any], Any] = _identity,
) -> ActionResult:
    """Run an operation that needs no session (register, login)."""
    return await _invoke(ctx, name, operation, serialize, None)


async def _invoke(ctx, name, operation, serialize, caller: Optional[CallerContext]) -> ActionResult:
    try:
        result = await operation()
        return ActionResult.ok(to_data(serialize(result)))
    except AppException as exc:
        await ctx.db.rollback()
        logger.info(
            "Action %s failed for user %s: %s",
            name, caller.user_id if caller else None, exc.message,
        )
        return ActionResult.fail(describe_error(exc))
    except Exception:
        await ctx.db.rollback()
        logger.exception("Action %s crashed for user %s", name, caller.user_id if caller else None)
        return ActionResult.fail(UNEXPECTED_FAILURE)
