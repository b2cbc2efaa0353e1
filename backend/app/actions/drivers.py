"""
Driver actions.
"""

from typing import Any, Optional

from backend.app.actions.base import ActionContext, run_action
from backend.app.schemas.common import ActionResult
from backend.app.schemas.driver import DriverResponse, DriverStats
from backend.app.services.driver_service import DEFAULT_TOP_RATED_LIMIT, DriverService


def _service(ctx: ActionContext) -> DriverService:
    return DriverService(ctx.db, license_expiry_warning_days=ctx.settings.license_expiry_warning_days)


def _many(drivers):
    return [DriverResponse.model_validate(d) for d in drivers]


async def list_drivers(ctx: ActionContext, token: Optional[str]) -> ActionResult:
    return await run_action(ctx, token, "list_drivers", lambda caller: _service(ctx).list(caller), _many)


async def get_driver(ctx: ActionContext, token: Optional[str], driver_id: int) -> ActionResult:
    return await run_action(
        ctx, token, "get_driver",
        lambda caller: _service(ctx).get(caller, driver_id),
        DriverResponse.model_validate,
    )


async def create_driver(ctx: ActionContext, token: Optional[str], payload: Any) -> ActionResult:
    return await run_action(
        ctx, token, "create_driver",
        lambda caller: _service(ctx).create(caller, payload),
        DriverResponse.model_validate,
    )


async def update_driver(ctx: ActionContext, token: Optional[str], driver_id: int, payload: Any) -> ActionResult:
    return await run_action(
        ctx, token, "update_driver",
        lambda caller: _service(ctx).update(caller, driver_id, payload),
        DriverResponse.model_validate,
    )


async def delete_driver(ctx: ActionContext, token: Optional[str], driver_id: int) -> ActionResult:
    return await run_action(ctx, token, "delete_driver", lambda caller: _service(ctx).delete(caller, driver_id))


async def get_driver_stats(ctx: ActionContext, token: Optional[str]) -> ActionResult:
    return await run_action(
        ctx, token, "get_driver_stats",
        lambda caller: _service(ctx).stats(caller),
        lambda stats: DriverStats(**stats),
    )


async def get_expiring_licenses(ctx: ActionContext, token: Optional[str]) -> ActionResult:
    return await run_action(
        ctx, token, "get_expiring_licenses", lambda caller: _service(ctx).expiring_licenses(caller), _many
    )


async def get_top_rated_drivers(
    ctx: ActionContext, token: Optional[str], limit: int = DEFAULT_TOP_RATED_LIMIT
) -> ActionResult:
    return await run_action(
        ctx, token, "get_top_rated_drivers", lambda caller: _service(ctx).top_rated(caller, limit), _many
    )
