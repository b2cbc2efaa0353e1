"""
Travel agency API endpoints. Staff only.
"""

from typing import Any, Dict, Optional

from fastapi import APIRouter, Body, Depends

from backend.app.actions import locations as actions
from backend.app.actions.base import ActionContext
from backend.app.core.dependencies import get_action_context, get_bearer_token
from backend.app.schemas.common import ActionResult

router = APIRouter(prefix="/agencies", tags=["Agencies"])


@router.get("", response_model=ActionResult)
async def list_agencies(
    token: Optional[str] = Depends(get_bearer_token),
    ctx: ActionContext = Depends(get_action_context)
):
    return await actions.list_agencies(ctx, token)


@router.get("/{agency_id}", response_model=ActionResult)
async def get_agency(
    agency_id: int,
    token: Optional[str] = Depends(get_bearer_token),
    ctx: ActionContext = Depends(get_action_context)
):
    return await actions.get_agency(ctx, token, agency_id)


@router.post("", response_model=ActionResult)
async def create_agency(
    payload: Dict[str, Any] = Body(...),
    token: Optional[str] = Depends(get_bearer_token),
    ctx: ActionContext = Depends(get_action_context)
):
    return await actions.create_agency(ctx, token, payload)


@router.patch("/{agency_id}", response_model=ActionResult)
async def update_agency(
    agency_id: int,
    payload: Dict[str, Any] = Body(...),
    token: Optional[str] = Depends(get_bearer_token),
    ctx: ActionContext = Depends(get_action_context)
):
    return await actions.update_agency(ctx, token, agency_id, payload)


@router.delete("/{agency_id}", response_model=ActionResult)
async def delete_agency(
    agency_id: int,
    token: Optional[str] = Depends(get_bearer_token),
    ctx: ActionContext = Depends(get_action_context)
):
    return await actions.delete_agency(ctx, token, agency_id)
