"""
Agency and hotel actions.
"""

from typing import Any, Optional

from backend.app.actions.base import ActionContext, run_action
from backend.app.schemas.common import ActionResult
from backend.app.schemas.location import AgencyResponse, HotelResponse
from backend.app.services.location_service import AgencyService, HotelService


async def list_agencies(ctx: ActionContext, token: Optional[str]) -> ActionResult:
    return await run_action(
        ctx, token, "list_agencies",
        lambda caller: AgencyService(ctx.db).list(caller),
        lambda agencies: [AgencyResponse.model_validate(a) for a in agencies],
    )


async def get_agency(ctx: ActionContext, token: Optional[str], agency_id: int) -> ActionResult:
    return await run_action(
        ctx, token, "get_agency",
        lambda caller: AgencyService(ctx.db).get(caller, agency_id),
        AgencyResponse.model_validate,
    )


async def create_agency(ctx: ActionContext, token: Optional[str], payload: Any) -> ActionResult:
    return await run_action(
        ctx, token, "create_agency",
        lambda caller: AgencyService(ctx.db).create(caller, payload),
        AgencyResponse.model_validate,
    )


async def update_agency(ctx: ActionContext, token: Optional[str], agency_id: int, payload: Any) -> ActionResult:
    return await run_action(
        ctx, token, "update_agency",
        lambda caller: AgencyService(ctx.db).update(caller, agency_id, payload),
        AgencyResponse.model_validate,
    )


async def delete_agency(ctx: ActionContext, token: Optional[str], agency_id: int) -> ActionResult:
    return await run_action(
        ctx, token, "delete_agency", lambda caller: AgencyService(ctx.db).delete(caller, agency_id)
    )


async def list_hotels(ctx: ActionContext, token: Optional[str]) -> ActionResult:
    return await run_action(
        ctx, token, "list_hotels",
        lambda caller: HotelService(ctx.db).list(caller),
        lambda hotels: [HotelResponse.model_validate(h) for h in hotels],
    )


async def get_hotel(ctx: ActionContext, token: Optional[str], hotel_id: int) -> ActionResult:
    return await run_action(
        ctx, token, "get_hotel",
        lambda caller: HotelService(ctx.db).get(caller, hotel_id),
        HotelResponse.model_validate,
    )


async def create_hotel(ctx: ActionContext, token: Optional[str], payload: Any) -> ActionResult:
    return await run_action(
        ctx, token, "create_hotel",
        lambda caller: HotelService(ctx.db).create(caller, payload),
        HotelResponse.model_validate,
    )


async def update_hotel(ctx: ActionContext, token: Optional[str], hotel_id: int, payload: Any) -> ActionResult:
    return await run_action(
        ctx, token, "update_hotel",
        lambda caller: HotelService(ctx.db).update(caller, hotel_id, payload),
        HotelResponse.model_validate,
    )


async def delete_hotel(ctx: ActionContext, token: Optional[str], hotel_id: int) -> ActionResult:
    return await run_action(
        ctx, token, "delete_hotel", lambda caller: HotelService(ctx.db).delete(caller, hotel_id)
    )
