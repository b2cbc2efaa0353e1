"""
Vehicle API endpoints, including driver assignment.
"""

from typing import Any, Dict, Optional

from fastapi import APIRouter, Body, Depends

from backend.app.actions import vehicles as actions
from backend.app.actions.base import ActionContext
from backend.app.core.dependencies import get_action_context, get_bearer_token
from backend.app.schemas.common import ActionResult

router = APIRouter(prefix="/vehicles", tags=["Vehicles"])


@router.get("", response_model=ActionResult)
async def list_vehicles(
    token: Optional[str] = Depends(get_bearer_token),
    ctx: ActionContext = Depends(get_action_context)
):
    return await actions.list_vehicles(ctx, token)


@router.get("/stats", response_model=ActionResult)
async def vehicle_stats(
    token: Optional[str] = Depends(get_bearer_token),
    ctx: ActionContext = Depends(get_action_context)
):
    return await actions.get_vehicle_stats(ctx, token)


@router.get("/available-drivers", response_model=ActionResult)
async def available_drivers(
    token: Optional[str] = Depends(get_bearer_token),
    ctx: ActionContext = Depends(get_action_context)
):
    return await actions.get_available_drivers(ctx, token)


@router.get("/{vehicle_id}", response_model=ActionResult)
async def get_vehicle(
    vehicle_id: int,
    token: Optional[str] = Depends(get_bearer_token),
    ctx: ActionContext = Depends(get_action_context)
):
    return await actions.get_vehicle(ctx, token, vehicle_id)


@router.post("", response_model=ActionResult)
async def create_vehicle(
    payload: Dict[str, Any] = Body(...),
    token: Optional[str] = Depends(get_bearer_token),
    ctx: ActionContext = Depends(get_action_context)
):
    return await actions.create_vehicle(ctx, token, payload)


@router.patch("/{vehicle_id}", response_model=ActionResult)
async def update_vehicle(
    vehicle_id: int,
    payload: Dict[str, Any] = Body(...),
    token: Optional[str] = Depends(get_bearer_token),
    ctx: ActionContext = Depends(get_action_context)
):
    return await actions.update_vehicle(ctx, token, vehicle_id, payload)


@router.delete("/{vehicle_id}", response_model=ActionResult)
async def delete_vehicle(
    vehicle_id: int,
    token: Optional[str] = Depends(get_bearer_token),
    ctx: ActionContext = Depends(get_action_context)
):
    return await actions.delete_vehicle(ctx, token, vehicle_id)


@router.post("/{vehicle_id}/assignment", response_model=ActionResult)
async def assign_driver(
    vehicle_id: int,
    payload: Dict[str, Any] = Body(...),
    token: Optional[str] = Depends(get_bearer_token),
    ctx: ActionContext = Depends(get_action_context)
):
    """
    Assign a driver to a vehicle.

    Closes the current assignment and opens the new one atomically.
    """
    return await actions.assign_driver(ctx, token, vehicle_id, payload)


@router.delete("/{vehicle_id}/assignment", response_model=ActionResult)
async def unassign_driver(
    vehicle_id: int,
    token: Optional[str] = Depends(get_bearer_token),
    ctx: ActionContext = Depends(get_action_context)
):
    return await actions.unassign_driver(ctx, token, vehicle_id)


@router.get("/{vehicle_id}/assignments", response_model=ActionResult)
async def assignment_history(
    vehicle_id: int,
    token: Optional[str] = Depends(get_bearer_token),
    ctx: ActionContext = Depends(get_action_context)
):
    return await actions.list_vehicle_assignments(ctx, token, vehicle_id)
