"""
HTTP API tests.

Routes return the ActionResult envelope with status 200; the audit trail
sits outside the envelope and uses the standard error responses.
"""

import pytest


def bearer(token):
    return {"Authorization": f"Bearer {token}"}


@pytest.mark.asyncio
async def test_health_reports_redis(client):
    response = await client.get("/health")

    assert response.status_code == 200
    assert response.json()["status"] == "healthy"
    assert response.json()["redis"] is True


@pytest.mark.asyncio
async def test_missing_token_returns_failed_envelope(client):
    response = await client.get("/v1/trips")

    assert response.status_code == 200
    assert response.json() == {"success": False, "data": None, "error": "Unauthorized: Not authenticated"}


@pytest.mark.asyncio
async def test_trip_lifecycle_over_http(client, seed, make_token, trip_payload):
    manager = bearer(make_token(seed.users.manager))
    driver = bearer(make_token(seed.users.driver_user))

    created = (await client.post("/v1/trips", json=trip_payload, headers=manager)).json()
    assert created["success"] is True
    trip_id = created["data"]["id"]

    updated = (await client.patch(
        f"/v1/trips/{trip_id}", json={"status": "COMPLETED", "notes": "x"}, headers=driver
    )).json()
    assert updated["data"]["notes"] == "x"
    assert updated["data"]["status"] == "SCHEDULED"

    denied = (await client.delete(f"/v1/trips/{trip_id}", headers=driver)).json()
    assert denied["success"] is False

    deleted = (await client.delete(f"/v1/trips/{trip_id}", headers=manager)).json()
    assert deleted == {"success": True, "data": None, "error": None}

    gone = (await client.get(f"/v1/trips/{trip_id}", headers=manager)).json()
    assert gone["error"] == f"Trip with ID {trip_id} not found"


@pytest.mark.asyncio
async def test_trip_stats_and_reference_data(client, seed, make_token, trip_payload):
    manager = bearer(make_token(seed.users.manager))
    await client.post("/v1/trips", json=trip_payload, headers=manager)

    stats = (await client.get("/v1/trips/stats", headers=manager)).json()
    assert stats["data"]["totalTrips"] == 1
    assert stats["data"]["totalPassengers"] == 4

    reference = (await client.get("/v1/trips/reference-data", headers=manager)).json()
    assert {d["id"] for d in reference["data"]["drivers"]} == {seed.driver.id, seed.other_driver.id}
    assert len(reference["data"]["vehicles"]) == 2


@pytest.mark.asyncio
async def test_vehicle_assignment_over_http(client, seed, make_token):
    admin = bearer(make_token(seed.users.admin))
    path = f"/v1/vehicles/{seed.vehicle.id}/assignment"

    for driver_id in (seed.driver.id, seed.other_driver.id):
        result = (await client.post(path, json={"driverId": driver_id}, headers=admin)).json()
        assert result["success"] is True

    history = (await client.get(f"/v1/vehicles/{seed.vehicle.id}/assignments", headers=admin)).json()
    assert [a["isActive"] for a in history["data"]] == [True, False]
    assert history["data"][1]["unassignedAt"] is not None

    released = (await client.delete(path, headers=admin)).json()
    assert released["success"] is True


@pytest.mark.asyncio
async def test_maintenance_records_filtered_by_vehicle(client, seed, make_token):
    manager = bearer(make_token(seed.users.manager))
    for vehicle_id in (seed.vehicle.id, seed.other_vehicle.id):
        record = {
            "vehicleId": vehicle_id,
            "type": "OIL_CHANGE",
            "scheduledDate": "2026-04-01",
            "description": "Routine oil change",
            "cost": 250,
        }
        created = (await client.post("/v1/maintenance", json=record, headers=manager)).json()
        assert created["success"] is True

    listed = (await client.get(
        "/v1/maintenance", params={"vehicleId": seed.vehicle.id}, headers=manager
    )).json()
    assert [r["vehicle"]["id"] for r in listed["data"]] == [seed.vehicle.id]

    driver = bearer(make_token(seed.users.driver_user))
    denied = (await client.get("/v1/maintenance", headers=driver)).json()
    assert denied["success"] is False


@pytest.mark.asyncio
async def test_hotel_crud_over_http(client, seed, make_token):
    manager = bearer(make_token(seed.users.manager))
    payload = {"name": "Marina Suites", "address": "Dubai Marina", "city": "Dubai", "phone": "+97140000003"}

    created = (await client.post("/v1/hotels", json=payload, headers=manager)).json()
    hotel_id = created["data"]["id"]

    renamed = (await client.patch(f"/v1/hotels/{hotel_id}", json={"name": "Marina Grand"}, headers=manager)).json()
    assert renamed["data"]["name"] == "Marina Grand"

    await client.delete(f"/v1/hotels/{hotel_id}", headers=manager)
    names = [h["name"] for h in (await client.get("/v1/hotels", headers=manager)).json()["data"]]
    assert names == ["Palm Resort"]


# Audit trail
@pytest.mark.asyncio
async def test_audit_requires_token(client):
    response = await client.get("/v1/audit")

    assert response.status_code == 401
    assert response.json()["error_code"] == "ERR_AUTH_001"


@pytest.mark.asyncio
async def test_audit_forbidden_for_manager(client, seed, make_token):
    response = await client.get("/v1/audit", headers=bearer(make_token(seed.users.manager)))

    assert response.status_code == 403
    assert response.json()["error_code"] == "ERR_PERM_001"


@pytest.mark.asyncio
async def test_audit_lists_mutations_for_admin(client, seed, make_token):
    admin = bearer(make_token(seed.users.admin))
    await client.post(f"/v1/vehicles/{seed.vehicle.id}/assignment", json={"driverId": seed.driver.id}, headers=admin)

    response = await client.get(
        "/v1/audit", params={"resourceType": "VEHICLE", "resourceId": seed.vehicle.id}, headers=admin
    )

    assert response.status_code == 200
    body = response.json()
    assert body["total"] == 1
    assert body["logs"][0]["action"] == "DRIVER_ASSIGNED"
    assert body["logs"][0]["actorId"] == seed.users.admin.id
