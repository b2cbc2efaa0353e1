"""
Maintenance record API endpoints. Staff only.
"""

from typing import Any, Dict, Optional

from fastapi import APIRouter, Body, Depends, Query

from backend.app.actions import maintenance as actions
from backend.app.actions.base import ActionContext
from backend.app.core.dependencies import get_action_context, get_bearer_token
from backend.app.schemas.common import ActionResult

router = APIRouter(prefix="/maintenance", tags=["Maintenance"])


@router.get("", response_model=ActionResult)
async def list_records(
    vehicle_id: Optional[int] = Query(None, alias="vehicleId", description="Only this vehicle's records"),
    token: Optional[str] = Depends(get_bearer_token),
    ctx: ActionContext = Depends(get_action_context)
):
    return await actions.list_maintenance_records(ctx, token, vehicle_id)


@router.get("/{record_id}", response_model=ActionResult)
async def get_record(
    record_id: int,
    token: Optional[str] = Depends(get_bearer_token),
    ctx: ActionContext = Depends(get_action_context)
):
    return await actions.get_maintenance_record(ctx, token, record_id)


@router.post("", response_model=ActionResult)
async def create_record(
    payload: Dict[str, Any] = Body(...),
    token: Optional[str] = Depends(get_bearer_token),
    ctx: ActionContext = Depends(get_action_context)
):
    return await actions.create_maintenance_record(ctx, token, payload)


@router.patch("/{record_id}", response_model=ActionResult)
async def update_record(
    record_id: int,
    payload: Dict[str, Any] = Body(...),
    token: Optional[str] = Depends(get_bearer_token),
    ctx: ActionContext = Depends(get_action_context)
):
    return await actions.update_maintenance_record(ctx, token, record_id, payload)


@router.delete("/{record_id}", response_model=ActionResult)
async def delete_record(
    record_id: int,
    token: Optional[str] = Depends(get_bearer_token),
    ctx: ActionContext = Depends(get_action_context)
):
    return await actions.delete_maintenance_record(ctx, token, record_id)
