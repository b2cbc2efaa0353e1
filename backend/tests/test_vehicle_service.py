"""
Vehicle service tests.

Driver assignment (one active assignment per vehicle), plate/VIN
uniqueness among live vehicles and driver-scoped visibility.
"""

import pytest
from sqlalchemy import func, select
from sqlalchemy.exc import OperationalError

from backend.app.core.exceptions import (
    ConflictError,
    InsufficientPermissionsError,
    ResourceNotFoundError,
    StorageError,
)
from backend.app.models.vehicle_assignment import VehicleAssignment
from backend.app.repositories.vehicle_repository import VehicleRepository
from backend.app.services.driver_service import DriverService
from backend.app.services.vehicle_service import VehicleService

NEW_VEHICLE = {
    "model": "Mercedes Sprinter",
    "plate": "DXB-2001",
    "vin": "VIN2001",
    "capacity": 18,
    "monthlyRent": 5200,
}


@pytest.fixture
def vehicles(db_session):
    return VehicleService(db_session)


async def active_assignment_count(db_session, vehicle_id):
    result = await db_session.execute(
        select(func.count(VehicleAssignment.id)).where(
            VehicleAssignment.vehicle_id == vehicle_id,
            VehicleAssignment.is_active.is_(True),
        )
    )
    return result.scalar()


# Reassignment
@pytest.mark.asyncio
async def test_reassignment_leaves_single_active_assignment(vehicles, seed, db_session):
    manager = seed.callers.manager

    first = await vehicles.assign_driver(manager, seed.vehicle.id, {"driverId": seed.driver.id})
    second = await vehicles.assign_driver(manager, seed.vehicle.id, {"driverId": seed.other_driver.id})

    assert second.driver_id == seed.other_driver.id
    assert second.is_active
    assert await active_assignment_count(db_session, seed.vehicle.id) == 1

    history = await vehicles.assignments(manager, seed.vehicle.id)
    previous = next(a for a in history if a.id == first.id)
    assert previous.is_active is False
    assert previous.unassigned_at is not None


@pytest.mark.asyncio
async def test_repeated_assignments_keep_at_most_one_active(vehicles, seed, db_session):
    drivers = [seed.driver.id, seed.other_driver.id, seed.driver.id, seed.other_driver.id]
    for driver_id in drivers:
        await vehicles.assign_driver(seed.callers.admin, seed.vehicle.id, {"driverId": driver_id})
        assert await active_assignment_count(db_session, seed.vehicle.id) == 1

    await vehicles.unassign_driver(seed.callers.admin, seed.vehicle.id)
    assert await active_assignment_count(db_session, seed.vehicle.id) == 0

    history = await vehicles.assignments(seed.callers.admin, seed.vehicle.id)
    assert len(history) == len(drivers)


@pytest.mark.asyncio
async def test_assigning_same_driver_twice_conflicts(vehicles, seed, db_session):
    await vehicles.assign_driver(seed.callers.manager, seed.vehicle.id, {"driverId": seed.driver.id})

    with pytest.raises(ConflictError):
        await vehicles.assign_driver(seed.callers.manager, seed.vehicle.id, {"driverId": seed.driver.id})
    assert await active_assignment_count(db_session, seed.vehicle.id) == 1


@pytest.mark.asyncio
async def test_assign_unknown_driver_changes_nothing(vehicles, seed, db_session):
    await vehicles.assign_driver(seed.callers.manager, seed.vehicle.id, {"driverId": seed.driver.id})

    with pytest.raises(ResourceNotFoundError):
        await vehicles.assign_driver(seed.callers.manager, seed.vehicle.id, {"driverId": 9999})

    current = await vehicles.vehicles.active_assignment(seed.vehicle.id)
    assert current.driver_id == seed.driver.id


@pytest.mark.asyncio
async def test_failed_swap_keeps_previous_assignment(vehicles, seed, db_session, mocker):
    """The old assignment is closed and the new one created in one transaction."""
    await vehicles.assign_driver(seed.callers.manager, seed.vehicle.id, {"driverId": seed.driver.id})
    mocker.patch.object(
        VehicleRepository,
        "create_assignment",
        side_effect=OperationalError("INSERT INTO vehicle_assignments", {}, Exception("disk I/O error")),
    )

    with pytest.raises(StorageError):
        await vehicles.assign_driver(seed.callers.manager, seed.vehicle.id, {"driverId": seed.other_driver.id})

    assert await active_assignment_count(db_session, seed.vehicle.id) == 1
    current = await vehicles.vehicles.active_assignment(seed.vehicle.id)
    assert current.driver_id == seed.driver.id


@pytest.mark.asyncio
async def test_driver_cannot_assign(vehicles, seed):
    with pytest.raises(InsufficientPermissionsError):
        await vehicles.assign_driver(seed.callers.driver_user, seed.vehicle.id, {"driverId": seed.driver.id})


@pytest.mark.asyncio
async def test_unassign_without_active_assignment_is_not_found(vehicles, seed):
    with pytest.raises(ResourceNotFoundError):
        await vehicles.unassign_driver(seed.callers.manager, seed.vehicle.id)


# Plate and VIN uniqueness
@pytest.mark.asyncio
async def test_duplicate_live_plate_conflicts(vehicles, seed):
    payload = dict(NEW_VEHICLE, plate=seed.vehicle.plate)

    with pytest.raises(ConflictError) as exc_info:
        await vehicles.create(seed.callers.manager, payload)
    assert exc_info.value.details["field"] == "plate"


@pytest.mark.asyncio
async def test_plate_of_deleted_vehicle_can_be_reused(vehicles, seed):
    await vehicles.delete(seed.callers.manager, seed.vehicle.id)

    vehicle = await vehicles.create(
        seed.callers.manager, dict(NEW_VEHICLE, plate=seed.vehicle.plate, vin=seed.vehicle.vin)
    )

    assert vehicle.plate == seed.vehicle.plate
    assert vehicle.id != seed.vehicle.id


@pytest.mark.asyncio
async def test_update_to_taken_vin_conflicts(vehicles, seed):
    with pytest.raises(ConflictError):
        await vehicles.update(seed.callers.manager, seed.vehicle.id, {"vin": seed.other_vehicle.vin})


@pytest.mark.asyncio
async def test_unique_index_catches_plate_race(vehicles, seed, mocker):
    """A duplicate that slips past the pre-check is stopped by the live-row index."""
    mocker.patch.object(VehicleRepository, "plate_taken", return_value=False)

    with pytest.raises(ConflictError) as exc_info:
        await vehicles.create(seed.callers.manager, dict(NEW_VEHICLE, plate=seed.vehicle.plate))
    assert exc_info.value.message == "Vehicle conflicts with an existing record"

    plates = sorted(v.plate for v in await vehicles.list(seed.callers.manager))
    assert plates == ["DXB-1001", "DXB-1002"]


@pytest.mark.asyncio
async def test_driver_cannot_create_vehicle(vehicles, seed):
    with pytest.raises(InsufficientPermissionsError):
        await vehicles.create(seed.callers.driver_user, NEW_VEHICLE)


# Visibility
@pytest.mark.asyncio
async def test_driver_sees_only_assigned_vehicle(vehicles, seed):
    await vehicles.assign_driver(seed.callers.manager, seed.vehicle.id, {"driverId": seed.driver.id})

    visible = await vehicles.list(seed.callers.driver_user)
    assert [v.id for v in visible] == [seed.vehicle.id]
    assert visible[0].active_assignment.driver_id == seed.driver.id

    with pytest.raises(InsufficientPermissionsError):
        await vehicles.get(seed.callers.driver_user, seed.other_vehicle.id)

    assert len(await vehicles.list(seed.callers.manager)) == 2


# Deletes close assignments
@pytest.mark.asyncio
async def test_deleting_vehicle_closes_assignment(vehicles, seed, db_session):
    await vehicles.assign_driver(seed.callers.manager, seed.vehicle.id, {"driverId": seed.driver.id})

    await vehicles.delete(seed.callers.manager, seed.vehicle.id)

    assert await active_assignment_count(db_session, seed.vehicle.id) == 0
    with pytest.raises(ResourceNotFoundError):
        await vehicles.get(seed.callers.manager, seed.vehicle.id)


@pytest.mark.asyncio
async def test_deleting_driver_closes_assignment(vehicles, seed, db_session):
    await vehicles.assign_driver(seed.callers.manager, seed.vehicle.id, {"driverId": seed.driver.id})

    await DriverService(db_session).delete(seed.callers.manager, seed.driver.id)

    assert await active_assignment_count(db_session, seed.vehicle.id) == 0
    available = await vehicles.available_drivers(seed.callers.manager)
    assert [d.id for d in available] == [seed.other_driver.id]


@pytest.mark.asyncio
async def test_vehicle_stats(vehicles, seed):
    await vehicles.update(seed.callers.manager, seed.other_vehicle.id, {"status": "MAINTENANCE"})

    stats = await vehicles.stats(seed.callers.manager)

    assert stats == {
        "total_vehicles": 2,
        "available_vehicles": 1,
        "in_use_vehicles": 0,
        "maintenance_vehicles": 1,
    }
