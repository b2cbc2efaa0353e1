"""
Trip API endpoints.
"""

from typing import Any, Dict, Optional

from fastapi import APIRouter, Body, Depends

from backend.app.actions import trips as actions
from backend.app.actions.base import ActionContext
from backend.app.core.dependencies import get_action_context, get_bearer_token
from backend.app.schemas.common import ActionResult

router = APIRouter(prefix="/trips", tags=["Trips"])


@router.get("", response_model=ActionResult)
async def list_trips(
    token: Optional[str] = Depends(get_bearer_token),
    ctx: ActionContext = Depends(get_action_context)
):
    """List trips; drivers only get the trips they drive."""
    return await actions.list_trips(ctx, token)


@router.get("/stats", response_model=ActionResult)
async def trip_stats(
    token: Optional[str] = Depends(get_bearer_token),
    ctx: ActionContext = Depends(get_action_context)
):
    return await actions.get_trip_stats(ctx, token)


@router.get("/reference-data", response_model=ActionResult)
async def trip_reference_data(
    token: Optional[str] = Depends(get_bearer_token),
    ctx: ActionContext = Depends(get_action_context)
):
    """Agencies, hotels, drivers and vehicles for the trip form."""
    return await actions.get_trip_reference_data(ctx, token)


@router.get("/{trip_id}", response_model=ActionResult)
async def get_trip(
    trip_id: int,
    token: Optional[str] = Depends(get_bearer_token),
    ctx: ActionContext = Depends(get_action_context)
):
    return await actions.get_trip(ctx, token, trip_id)


@router.post("", response_model=ActionResult)
async def create_trip(
    payload: Dict[str, Any] = Body(...),
    token: Optional[str] = Depends(get_bearer_token),
    ctx: ActionContext = Depends(get_action_context)
):
    return await actions.create_trip(ctx, token, payload)


@router.patch("/{trip_id}", response_model=ActionResult)
async def update_trip(
    trip_id: int,
    payload: Dict[str, Any] = Body(...),
    token: Optional[str] = Depends(get_bearer_token),
    ctx: ActionContext = Depends(get_action_context)
):
    return await actions.update_trip(ctx, token, trip_id, payload)


@router.delete("/{trip_id}", response_model=ActionResult)
async def delete_trip(
    trip_id: int,
    token: Optional[str] = Depends(get_bearer_token),
    ctx: ActionContext = Depends(get_action_context)
):
    return await actions.delete_trip(ctx, token, trip_id)
