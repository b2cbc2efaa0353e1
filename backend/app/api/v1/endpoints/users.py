"""
User administration API endpoints.

Provides staff user management with role-reach limits and audit logging.
"""

from typing import Any, Dict, Optional

from fastapi import APIRouter, Body, Depends, Query

from backend.app.actions import auth as auth_actions
from backend.app.actions import users as actions
from backend.app.actions.base import ActionContext
from backend.app.core.dependencies import get_action_context, get_bearer_token
from backend.app.models.enums import UserRole
from backend.app.schemas.common import ActionResult

router = APIRouter(prefix="/users", tags=["Users"])


@router.get("", response_model=ActionResult)
async def list_users(
    role: Optional[UserRole] = Query(None, description="Only users with this role"),
    token: Optional[str] = Depends(get_bearer_token),
    ctx: ActionContext = Depends(get_action_context)
):
    return await actions.list_users(ctx, token, role)


@router.get("/{user_id}", response_model=ActionResult)
async def get_user(
    user_id: int,
    token: Optional[str] = Depends(get_bearer_token),
    ctx: ActionContext = Depends(get_action_context)
):
    return await actions.get_user(ctx, token, user_id)


@router.post("", response_model=ActionResult)
async def create_user(
    payload: Dict[str, Any] = Body(...),
    token: Optional[str] = Depends(get_bearer_token),
    ctx: ActionContext = Depends(get_action_context)
):
    """Create a user with a role the caller is allowed to grant."""
    return await actions.create_user(ctx, token, payload)


@router.patch("/{user_id}", response_model=ActionResult)
async def update_user(
    user_id: int,
    payload: Dict[str, Any] = Body(...),
    token: Optional[str] = Depends(get_bearer_token),
    ctx: ActionContext = Depends(get_action_context)
):
    return await actions.update_user(ctx, token, user_id, payload)


@router.post("/{user_id}/status", response_model=ActionResult)
async def set_user_status(
    user_id: int,
    payload: Dict[str, Any] = Body(...),
    token: Optional[str] = Depends(get_bearer_token),
    ctx: ActionContext = Depends(get_action_context)
):
    """
    Activate, deactivate or suspend a user.

    Leaving ACTIVE revokes all of the user's tokens.
    """
    return await actions.set_user_status(ctx, token, user_id, payload)


@router.post("/{user_id}/reset-password", response_model=ActionResult)
async def reset_password(
    user_id: int,
    payload: Dict[str, Any] = Body(...),
    token: Optional[str] = Depends(get_bearer_token),
    ctx: ActionContext = Depends(get_action_context)
):
    return await auth_actions.reset_password(ctx, token, user_id, payload)


@router.delete("/{user_id}", response_model=ActionResult)
async def delete_user(
    user_id: int,
    token: Optional[str] = Depends(get_bearer_token),
    ctx: ActionContext = Depends(get_action_context)
):
    return await actions.delete_user(ctx, token, user_id)
