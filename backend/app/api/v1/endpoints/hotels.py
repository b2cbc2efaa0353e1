"""
Hotel API endpoints. Staff only.
"""

from typing import Any, Dict, Optional

from fastapi import APIRouter, Body, Depends

from backend.app.actions import locations as actions
from backend.app.actions.base import ActionContext
from backend.app.core.dependencies import get_action_context, get_bearer_token
from backend.app.schemas.common import ActionResult

router = APIRouter(prefix="/hotels", tags=["Hotels"])


@router.get("", response_model=ActionResult)
async def list_hotels(
    token: Optional[str] = Depends(get_bearer_token),
    ctx: ActionContext = Depends(get_action_context)
):
    return await actions.list_hotels(ctx, token)


@router.get("/{hotel_id}", response_model=ActionResult)
async def get_hotel(
    hotel_id: int,
    token: Optional[str] = Depends(get_bearer_token),
    ctx: ActionContext = Depends(get_action_context)
):
    return await actions.get_hotel(ctx, token, hotel_id)


@router.post("", response_model=ActionResult)
async def create_hotel(
    payload: Dict[str, Any] = Body(...),
    token: Optional[str] = Depends(get_bearer_token),
    ctx: ActionContext = Depends(get_action_context)
):
    return await actions.create_hotel(ctx, token, payload)


@router.patch("/{hotel_id}", response_model=ActionResult)
async def update_hotel(
    hotel_id: int,
    payload: Dict[str, Any] = Body(...),
    token: Optional[str] = Depends(get_bearer_token),
    ctx: ActionContext = Depends(get_action_context)
):
    return await actions.update_hotel(ctx, token, hotel_id, payload)


@router.delete("/{hotel_id}", response_model=ActionResult)
async def delete_hotel(
    hotel_id: int,
    token: Optional[str] = Depends(get_bearer_token),
    ctx: ActionContext = Depends(get_action_context)
):
    return await actions.delete_hotel(ctx, token, hotel_id)
