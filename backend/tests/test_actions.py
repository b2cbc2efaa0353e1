"""
Action boundary tests.

Every action returns an ActionResult envelope and never raises.
"""

import pytest
from sqlalchemy.exc import OperationalError

from backend.app.actions import drivers as driver_actions
from backend.app.actions import locations as location_actions
from backend.app.actions import trips as trip_actions
from backend.app.actions import users as user_actions
from backend.app.actions import vehicles as vehicle_actions
from backend.app.actions.base import NOT_AUTHENTICATED, UNEXPECTED_FAILURE, run_action
from backend.app.services.trip_service import TripService


@pytest.mark.asyncio
async def test_no_session_never_reaches_service(ctx, mocker):
    create = mocker.patch.object(TripService, "create")

    result = await trip_actions.create_trip(ctx, None, {"notes": "x"})

    assert result.success is False
    assert result.data is None
    assert result.error == NOT_AUTHENTICATED == "Unauthorized: Not authenticated"
    create.assert_not_called()


@pytest.mark.asyncio
async def test_create_trip_envelope_uses_camel_case(ctx, seed, make_token, trip_payload):
    result = await trip_actions.create_trip(ctx, make_token(seed.users.manager), trip_payload)

    assert result.success is True
    assert result.error is None
    assert result.data["status"] == "SCHEDULED"
    assert result.data["driverId"] == seed.driver.id
    assert result.data["driver"]["name"] == "Driver One"
    assert result.data["hotel"] == {"id": seed.hotel.id, "name": "Palm Resort"}


@pytest.mark.asyncio
async def test_validation_failure_message(ctx, seed, make_token, trip_payload):
    payload = dict(trip_payload)
    del payload["driverId"]

    result = await trip_actions.create_trip(ctx, make_token(seed.users.manager), payload)

    assert result.success is False
    assert result.error == "Validation error: driver_id is required"


@pytest.mark.asyncio
async def test_permission_failure_message(ctx, seed, make_token):
    result = await location_actions.list_agencies(ctx, make_token(seed.users.driver_user))

    assert result.success is False
    assert result.error.startswith("Unauthorized: ")


@pytest.mark.asyncio
async def test_not_found_message(ctx, seed, make_token):
    result = await vehicle_actions.get_vehicle(ctx, make_token(seed.users.manager), 9999)

    assert result.success is False
    assert result.error == "Vehicle with ID 9999 not found"


@pytest.mark.asyncio
async def test_conflict_message(ctx, seed, make_token):
    payload = {"name": "desert tours", "contactPerson": "Omar", "phone": "+97140000009"}

    result = await location_actions.create_agency(ctx, make_token(seed.users.manager), payload)

    assert result.success is False
    assert "already exists" in result.error


@pytest.mark.asyncio
async def test_unexpected_failure_is_generic(ctx, seed, make_token):
    async def explode(caller):
        raise RuntimeError("database exploded")

    result = await run_action(ctx, make_token(seed.users.admin), "explode", explode)

    assert result.success is False
    assert result.error == UNEXPECTED_FAILURE


@pytest.mark.asyncio
async def test_delete_returns_empty_data(ctx, seed, make_token):
    token = make_token(seed.users.manager)

    result = await vehicle_actions.delete_vehicle(ctx, token, seed.other_vehicle.id)
    assert result.success is True
    assert result.data is None

    listed = await vehicle_actions.list_vehicles(ctx, token)
    assert [v["id"] for v in listed.data] == [seed.vehicle.id]


@pytest.mark.asyncio
async def test_assignment_action_shows_driver_on_vehicle(ctx, seed, make_token):
    token = make_token(seed.users.admin)

    assigned = await vehicle_actions.assign_driver(ctx, token, seed.vehicle.id, {"driverId": seed.driver.id})
    assert assigned.success is True
    assert assigned.data["isActive"] is True

    vehicle = await vehicle_actions.get_vehicle(ctx, token, seed.vehicle.id)
    assert vehicle.data["assignedDriver"]["id"] == seed.driver.id


@pytest.mark.asyncio
async def test_driver_stats_and_top_rated(ctx, seed, make_token):
    token = make_token(seed.users.manager)

    stats = await driver_actions.get_driver_stats(ctx, token)
    assert stats.data == {
        "totalDrivers": 2,
        "availableDrivers": 2,
        "onTripDrivers": 0,
        "offDutyDrivers": 0,
    }

    top = await driver_actions.get_top_rated_drivers(ctx, token, limit=1)
    assert [d["id"] for d in top.data] == [seed.other_driver.id]

    expiring = await driver_actions.get_expiring_licenses(ctx, token)
    assert [d["id"] for d in expiring.data] == [seed.other_driver.id]


@pytest.mark.asyncio
async def test_role_escalation_through_action(ctx, seed, make_token):
    payload = {"email": "boss@example.com", "name": "Boss", "password": "Str0ng!pass", "role": "SUPER_ADMIN"}

    result = await user_actions.create_user(ctx, make_token(seed.users.admin), payload)

    assert result.success is False
    assert result.error == "Validation error: role SUPER_ADMIN cannot be assigned by ADMIN"


@pytest.mark.asyncio
async def test_storage_failure_message(ctx, seed, make_token, mocker):
    """Database errors surface as a retryable storage failure, not a crash."""
    real_execute = ctx.db.execute

    async def execute(statement, *args, **kwargs):
        if "FROM trips" in str(statement):
            raise OperationalError(str(statement), {}, Exception("database is locked"))
        return await real_execute(statement, *args, **kwargs)

    mocker.patch.object(ctx.db, "execute", side_effect=execute)

    result = await trip_actions.list_trips(ctx, make_token(seed.users.manager))

    assert result.success is False
    assert result.data is None
    assert result.error == "Storage is temporarily unavailable, please retry"
