"""
Maintenance record actions.
"""

from typing import Any, Optional

from backend.app.actions.base import ActionContext, run_action
from backend.app.schemas.common import ActionResult
from backend.app.schemas.maintenance import MaintenanceResponse
from backend.app.services.maintenance_service import MaintenanceService


async def list_maintenance_records(
    ctx: ActionContext, token: Optional[str], vehicle_id: Optional[int] = None
) -> ActionResult:
    return await run_action(
        ctx, token, "list_maintenance_records",
        lambda caller: MaintenanceService(ctx.db).list(caller, vehicle_id=vehicle_id),
        lambda records: [MaintenanceResponse.model_validate(r) for r in records],
    )


async def get_maintenance_record(ctx: ActionContext, token: Optional[str], record_id: int) -> ActionResult:
    return await run_action(
        ctx, token, "get_maintenance_record",
        lambda caller: MaintenanceService(ctx.db).get(caller, record_id),
        MaintenanceResponse.model_validate,
    )


async def create_maintenance_record(ctx: ActionContext, token: Optional[str], payload: Any) -> ActionResult:
    return await run_action(
        ctx, token, "create_maintenance_record",
        lambda caller: MaintenanceService(ctx.db).create(caller, payload),
        MaintenanceResponse.model_validate,
    )


async def update_maintenance_record(
    ctx: ActionContext, token: Optional[str], record_id: int, payload: Any
) -> ActionResult:
    return await run_action(
        ctx, token, "update_maintenance_record",
        lambda caller: MaintenanceService(ctx.db).update(caller, record_id, payload),
        MaintenanceResponse.model_validate,
    )


async def delete_maintenance_record(ctx: ActionContext, token: Optional[str], record_id: int) -> ActionResult:
    return await run_action(
        ctx, token, "delete_maintenance_record",
        lambda caller: MaintenanceService(ctx.db).delete(caller, record_id),
    )
