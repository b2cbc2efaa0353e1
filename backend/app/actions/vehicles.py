"""
Vehicle and assignment actions.
"""

from typing import Any, Optional

from backend.app.actions.base import ActionContext, run_action
from backend.app.schemas.common import ActionResult
from backend.app.schemas.driver import DriverResponse
from backend.app.schemas.vehicle import VehicleStats, assignment_response, vehicle_response
from backend.app.services.vehicle_service import VehicleService


async def list_vehicles(ctx: ActionContext, token: Optional[str]) -> ActionResult:
    return await run_action(
        ctx, token, "list_vehicles",
        lambda caller: VehicleService(ctx.db).list(caller),
        lambda vehicles: [vehicle_response(v) for v in vehicles],
    )


async def get_vehicle(ctx: ActionContext, token: Optional[str], vehicle_id: int) -> ActionResult:
    return await run_action(
        ctx, token, "get_vehicle",
        lambda caller: VehicleService(ctx.db).get(caller, vehicle_id),
        vehicle_response,
    )


async def create_vehicle(ctx: ActionContext, token: Optional[str], payload: Any) -> ActionResult:
    return await run_action(
        ctx, token, "create_vehicle",
        lambda caller: VehicleService(ctx.db).create(caller, payload),
        vehicle_response,
    )


async def update_vehicle(ctx: ActionContext, token: Optional[str], vehicle_id: int, payload: Any) -> ActionResult:
    return await run_action(
        ctx, token, "update_vehicle",
        lambda caller: VehicleService(ctx.db).update(caller, vehicle_id, payload),
        vehicle_response,
    )


async def delete_vehicle(ctx: ActionContext, token: Optional[str], vehicle_id: int) -> ActionResult:
    return await run_action(
        ctx, token, "delete_vehicle", lambda caller: VehicleService(ctx.db).delete(caller, vehicle_id)
    )


async def assign_driver(ctx: ActionContext, token: Optional[str], vehicle_id: int, payload: Any) -> ActionResult:
    return await run_action(
        ctx, token, "assign_driver",
        lambda caller: VehicleService(ctx.db).assign_driver(caller, vehicle_id, payload),
        assignment_response,
    )


async def unassign_driver(ctx: ActionContext, token: Optional[str], vehicle_id: int) -> ActionResult:
    return await run_action(
        ctx, token, "unassign_driver", lambda caller: VehicleService(ctx.db).unassign_driver(caller, vehicle_id)
    )


async def list_vehicle_assignments(ctx: ActionContext, token: Optional[str], vehicle_id: int) -> ActionResult:
    return await run_action(
        ctx, token, "list_vehicle_assignments",
        lambda caller: VehicleService(ctx.db).assignments(caller, vehicle_id),
        lambda assignments: [assignment_response(a) for a in assignments],
    )


async def get_available_drivers(ctx: ActionContext, token: Optional[str]) -> ActionResult:
    return await run_action(
        ctx, token, "get_available_drivers",
        lambda caller: VehicleService(ctx.db).available_drivers(caller),
        lambda drivers: [DriverResponse.model_validate(d) for d in drivers],
    )


async def get_vehicle_stats(ctx: ActionContext, token: Optional[str]) -> ActionResult:
    return await run_action(
        ctx, token, "get_vehicle_stats",
        lambda caller: VehicleService(ctx.db).stats(caller),
        lambda stats: VehicleStats(**stats),
    )
