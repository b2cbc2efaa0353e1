"""
Authentication API endpoints.

Register, login, logout and profile. Every route returns the action
envelope; failures come back as success=false with HTTP 200.
"""

from typing import Any, Dict, Optional

from fastapi import APIRouter, Body, Depends

from backend.app.actions import auth as actions
from backend.app.actions.base import ActionContext
from backend.app.core.dependencies import get_action_context, get_bearer_token
from backend.app.schemas.common import ActionResult

router = APIRouter(prefix="/auth", tags=["Authentication"])


@router.post("/register", response_model=ActionResult)
async def register(
    payload: Dict[str, Any] = Body(...),
    ctx: ActionContext = Depends(get_action_context)
):
    """Self-register as a DRIVER and receive a token."""
    return await actions.register(ctx, payload)


@router.post("/login", response_model=ActionResult)
async def login(
    payload: Dict[str, Any] = Body(...),
    ctx: ActionContext = Depends(get_action_context)
):
    """
    Login with email and password and return a JWT token.

    Successful and failed attempts are audited.
    """
    return await actions.login(ctx, payload)


@router.post("/logout", response_model=ActionResult)
async def logout(
    token: Optional[str] = Depends(get_bearer_token),
    ctx: ActionContext = Depends(get_action_context)
):
    """Revoke the token used for this request."""
    return await actions.logout(ctx, token)


@router.get("/me", response_model=ActionResult)
async def me(
    token: Optional[str] = Depends(get_bearer_token),
    ctx: ActionContext = Depends(get_action_context)
):
    return await actions.get_current_user(ctx, token)


@router.post("/change-password", response_model=ActionResult)
async def change_password(
    payload: Dict[str, Any] = Body(...),
    token: Optional[str] = Depends(get_bearer_token),
    ctx: ActionContext = Depends(get_action_context)
):
    return await actions.change_password(ctx, token, payload)
