"""
Trip actions.
"""

from typing import Any, Optional

from backend.app.actions.base import ActionContext, run_action
from backend.app.schemas.common import ActionResult
from backend.app.schemas.trip import TripStats, trip_response
from backend.app.services.trip_service import TripService


async def list_trips(ctx: ActionContext, token: Optional[str]) -> ActionResult:
    return await run_action(
        ctx, token, "list_trips",
        lambda caller: TripService(ctx.db).list(caller),
        lambda trips: [trip_response(t) for t in trips],
    )


async def get_trip(ctx: ActionContext, token: Optional[str], trip_id: int) -> ActionResult:
    return await run_action(
        ctx, token, "get_trip",
        lambda caller: TripService(ctx.db).get(caller, trip_id),
        trip_response,
    )


async def create_trip(ctx: ActionContext, token: Optional[str], payload: Any) -> ActionResult:
    return await run_action(
        ctx, token, "create_trip",
        lambda caller: TripService(ctx.db).create(caller, payload),
        trip_response,
    )


async def update_trip(ctx: ActionContext, token: Optional[str], trip_id: int, payload: Any) -> ActionResult:
    return await run_action(
        ctx, token, "update_trip",
        lambda caller: TripService(ctx.db).update(caller, trip_id, payload),
        trip_response,
    )


async def delete_trip(ctx: ActionContext, token: Optional[str], trip_id: int) -> ActionResult:
    return await run_action(ctx, token, "delete_trip", lambda caller: TripService(ctx.db).delete(caller, trip_id))


async def get_trip_stats(ctx: ActionContext, token: Optional[str]) -> ActionResult:
    return await run_action(
        ctx, token, "get_trip_stats",
        lambda caller: TripService(ctx.db).stats(caller),
        lambda stats: TripStats(**stats),
    )


async def get_trip_reference_data(ctx: ActionContext, token: Optional[str]) -> ActionResult:
    return await run_action(
        ctx, token, "get_trip_reference_data",
        lambda caller: TripService(ctx.db).reference_data(caller),
    )
