"""
User administration actions.
"""

from typing import Any, Optional

from backend.app.actions.base import ActionContext, run_action
from backend.app.models.enums import UserRole
from backend.app.schemas.auth import UserResponse
from backend.app.schemas.common import ActionResult
from backend.app.services.user_service import UserService


def _service(ctx: ActionContext) -> UserService:
    return UserService(ctx.db, ctx.settings, ctx.revocations)


async def list_users(ctx: ActionContext, token: Optional[str], role: Optional[UserRole] = None) -> ActionResult:
    return await run_action(
        ctx, token, "list_users",
        lambda caller: _service(ctx).list(caller, role=role),
        lambda users: [UserResponse.model_validate(u) for u in users],
    )


async def get_user(ctx: ActionContext, token: Optional[str], user_id: int) -> ActionResult:
    return await run_action(
        ctx, token, "get_user", lambda caller: _service(ctx).get(caller, user_id), UserResponse.model_validate
    )


async def create_user(ctx: ActionContext, token: Optional[str], payload: Any) -> ActionResult:
    return await run_action(
        ctx, token, "create_user", lambda caller: _service(ctx).create(caller, payload), UserResponse.model_validate
    )


async def update_user(ctx: ActionContext, token: Optional[str], user_id: int, payload: Any) -> ActionResult:
    return await run_action(
        ctx, token, "update_user",
        lambda caller: _service(ctx).update(caller, user_id, payload),
        UserResponse.model_validate,
    )


async def set_user_status(ctx: ActionContext, token: Optional[str], user_id: int, payload: Any) -> ActionResult:
    return await run_action(
        ctx, token, "set_user_status",
        lambda caller: _service(ctx).set_status(caller, user_id, payload),
        UserResponse.model_validate,
    )


async def delete_user(ctx: ActionContext, token: Optional[str], user_id: int) -> ActionResult:
    return await run_action(ctx, token, "delete_user", lambda caller: _service(ctx).delete(caller, user_id))
