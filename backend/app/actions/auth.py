"""
Authentication actions.
"""

from typing import Any, Optional

from backend.app.actions.base import ActionContext, run_action, run_public_action
from backend.app.schemas.auth import UserResponse
from backend.app.schemas.common import ActionResult
from backend.app.services.auth_service import AuthService


def _service(ctx: ActionContext) -> AuthService:
    return AuthService(ctx.db, ctx.settings, ctx.revocations)


async def register(ctx: ActionContext, payload: Any) -> ActionResult:
    return await run_public_action(ctx, "register", lambda: _service(ctx).register(payload))


async def login(ctx: ActionContext, payload: Any) -> ActionResult:
    return await run_public_action(ctx, "login", lambda: _service(ctx).authenticate(payload))


async def logout(ctx: ActionContext, token: Optional[str]) -> ActionResult:
    return await run_action(ctx, token, "logout", lambda caller: _service(ctx).logout(caller, token))


async def get_current_user(ctx: ActionContext, token: Optional[str]) -> ActionResult:
    return await run_action(ctx, token, "me", lambda caller: _service(ctx).me(caller), UserResponse.model_validate)


async def change_password(ctx: ActionContext, token: Optional[str], payload: Any) -> ActionResult:
    return await run_action(
        ctx, token, "change_password", lambda caller: _service(ctx).change_password(caller, payload)
    )


async def reset_password(ctx: ActionContext, token: Optional[str], user_id: int, payload: Any) -> ActionResult:
    return await run_action(
        ctx, token, "reset_password", lambda caller: _service(ctx).reset_password(caller, user_id, payload)
    )
