"""
Driver API endpoints.
"""

from typing import Any, Dict, Optional

from fastapi import APIRouter, Body, Depends, Query

from backend.app.actions import drivers as actions
from backend.app.actions.base import ActionContext
from backend.app.core.dependencies import get_action_context, get_bearer_token
from backend.app.schemas.common import ActionResult
from backend.app.services.driver_service import DEFAULT_TOP_RATED_LIMIT

router = APIRouter(prefix="/drivers", tags=["Drivers"])


@router.get("", response_model=ActionResult)
async def list_drivers(
    token: Optional[str] = Depends(get_bearer_token),
    ctx: ActionContext = Depends(get_action_context)
):
    return await actions.list_drivers(ctx, token)


@router.get("/stats", response_model=ActionResult)
async def driver_stats(
    token: Optional[str] = Depends(get_bearer_token),
    ctx: ActionContext = Depends(get_action_context)
):
    return await actions.get_driver_stats(ctx, token)


@router.get("/expiring-licenses", response_model=ActionResult)
async def expiring_licenses(
    token: Optional[str] = Depends(get_bearer_token),
    ctx: ActionContext = Depends(get_action_context)
):
    return await actions.get_expiring_licenses(ctx, token)


@router.get("/top-rated", response_model=ActionResult)
async def top_rated(
    limit: int = Query(DEFAULT_TOP_RATED_LIMIT, ge=1, le=50, description="Number of drivers"),
    token: Optional[str] = Depends(get_bearer_token),
    ctx: ActionContext = Depends(get_action_context)
):
    return await actions.get_top_rated_drivers(ctx, token, limit)


@router.get("/{driver_id}", response_model=ActionResult)
async def get_driver(
    driver_id: int,
    token: Optional[str] = Depends(get_bearer_token),
    ctx: ActionContext = Depends(get_action_context)
):
    return await actions.get_driver(ctx, token, driver_id)


@router.post("", response_model=ActionResult)
async def create_driver(
    payload: Dict[str, Any] = Body(...),
    token: Optional[str] = Depends(get_bearer_token),
    ctx: ActionContext = Depends(get_action_context)
):
    return await actions.create_driver(ctx, token, payload)


@router.patch("/{driver_id}", response_model=ActionResult)
async def update_driver(
    driver_id: int,
    payload: Dict[str, Any] = Body(...),
    token: Optional[str] = Depends(get_bearer_token),
    ctx: ActionContext = Depends(get_action_context)
):
    return await actions.update_driver(ctx, token, driver_id, payload)


@router.delete("/{driver_id}", response_model=ActionResult)
async def delete_driver(
    driver_id: int,
    token: Optional[str] = Depends(get_bearer_token),
    ctx: ActionContext = Depends(get_action_context)
):
    return await actions.delete_driver(ctx, token, driver_id)
