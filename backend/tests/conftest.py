"""
Centralized Test Configuration.

Every test gets a fresh in-memory SQLite database, an in-memory Redis
double and a small seeded fleet (one user per role, two drivers, two
vehicles, an agency and a hotel).
"""

from datetime import date, timedelta
from types import SimpleNamespace

import pytest
from httpx import AsyncClient, ASGITransport
from sqlalchemy import event

from backend.app.actions.base import ActionContext
from backend.app.core.config import Settings
from backend.app.core.jwt import create_access_token
from backend.app.core.security import get_password_hash
from backend.app.core.session import CallerContext
from backend.app.core.token_revocation import TokenRevocationStore
from backend.app.db.session import Database
from backend.app.main import create_app
from backend.app.models.driver import Driver
from backend.app.models.enums import DriverStatus, UserRole, UserStatus
from backend.app.models.location import Agency, Hotel
from backend.app.models.user import User
from backend.app.models.vehicle import Vehicle

# Setup In-Memory Test Database
TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"
TEST_PASSWORD = "Passw0rd!"


def _enable_sqlite_foreign_keys(dbapi_conn, connection_record):
    """Enable foreign key constraints for SQLite."""
    cursor = dbapi_conn.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


# Mock Redis for reliability in CI/CD
class MockRedis:
    def __init__(self):
        self.store = {}
        self._closed = False

    async def ping(self):
        return not self._closed

    async def get(self, key):
        if self._closed:
            return None
        return self.store.get(key)

    async def set(self, key, value, ex=None):
        if self._closed:
            return False
        self.store[key] = value
        return True

    async def setex(self, key, ttl, value):
        return await self.set(key, value, ex=ttl)

    async def delete(self, key):
        if self._closed:
            return 0
        if key in self.store:
            del self.store[key]
            return 1
        return 0

    async def exists(self, key):
        if self._closed:
            return 0
        return 1 if key in self.store else 0

    async def flushdb(self):
        if not self._closed:
            self.store = {}

    async def aclose(self):
        self._closed = True
        self.store = {}


@pytest.fixture
def settings():
    return Settings(
        database_url=TEST_DATABASE_URL,
        secret_key="test-secret-key-with-at-least-32-characters",
        password_hash_rounds=4,
        redis_url="redis://localhost:6379/15",
    )


@pytest.fixture
async def database(settings):
    """Create tables before each test function and drop after."""
    database = Database(settings)
    event.listen(database.engine.sync_engine, "connect", _enable_sqlite_foreign_keys)
    await database.create_all()
    yield database
    await database.drop_all()
    await database.dispose()


@pytest.fixture
def redis_client():
    return MockRedis()


@pytest.fixture
def revocations(redis_client, settings):
    return TokenRevocationStore(redis_client, settings)


@pytest.fixture
async def db_session(database):
    async with database.session() as session:
        yield session


@pytest.fixture
def ctx(db_session, settings, revocations):
    """ActionContext for calling actions directly."""
    return ActionContext(db=db_session, settings=settings, revocations=revocations)


@pytest.fixture
async def client(settings, database, redis_client):
    """Async client for testing. ASGITransport skips the lifespan, so state is wired here."""
    app = create_app(settings=settings, database=database, redis=redis_client)
    app.state.db = database
    app.state.redis = redis_client
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac


def caller_for(user: User) -> CallerContext:
    return CallerContext(user_id=user.id, role=user.role, email=user.email)


def token_for(user: User, settings: Settings) -> str:
    return create_access_token(
        data={"sub": user.email, "user_id": user.id, "role": user.role.value},
        settings=settings,
    )


@pytest.fixture
def make_token(settings):
    """Mint a session token for a seeded user."""
    return lambda user: token_for(user, settings)


@pytest.fixture
async def seed(db_session, settings):
    """
    Seed a small fleet.

    Returns a namespace with users (super_admin, admin, manager, driver_user,
    other_driver_user), their CallerContexts (callers.<name>), driver profiles
    (driver, other_driver), vehicles, agency and hotel.
    """
    password_hash = get_password_hash(TEST_PASSWORD, settings.password_hash_rounds)

    def make_user(email, name, role):
        return User(
            email=email,
            hashed_password=password_hash,
            name=name,
            phone="+971500000000",
            role=role,
            status=UserStatus.ACTIVE,
        )

    users = SimpleNamespace(
        super_admin=make_user("root@example.com", "Root", UserRole.SUPER_ADMIN),
        admin=make_user("admin@example.com", "Admin", UserRole.ADMIN),
        manager=make_user("manager@example.com", "Manager", UserRole.MANAGER),
        driver_user=make_user("driver1@example.com", "Driver One", UserRole.DRIVER),
        other_driver_user=make_user("driver2@example.com", "Driver Two", UserRole.DRIVER),
    )
    db_session.add_all(vars(users).values())
    await db_session.flush()

    driver = Driver(
        user_id=users.driver_user.id,
        status=DriverStatus.AVAILABLE,
        license_number="LIC-001",
        license_expiry=date.today() + timedelta(days=400),
        average_rating=4.5,
    )
    other_driver = Driver(
        user_id=users.other_driver_user.id,
        status=DriverStatus.AVAILABLE,
        license_number="LIC-002",
        license_expiry=date.today() + timedelta(days=10),
        average_rating=4.9,
    )
    vehicle = Vehicle(model="Toyota Hiace", plate="DXB-1001", vin="VIN0001", capacity=14, monthly_rent=3500.0)
    other_vehicle = Vehicle(model="Nissan Urvan", plate="DXB-1002", vin="VIN0002", capacity=12, monthly_rent=3000.0)
    agency = Agency(name="Desert Tours", contact_person="Sara", phone="+97140000001")
    hotel = Hotel(name="Palm Resort", address="Palm Jumeirah", city="Dubai", phone="+97140000002")
    db_session.add_all([driver, other_driver, vehicle, other_vehicle, agency, hotel])
    await db_session.commit()
    # Detached copies stay readable after a failed call rolls the session back
    db_session.expunge_all()

    return SimpleNamespace(
        users=users,
        callers=SimpleNamespace(**{name: caller_for(user) for name, user in vars(users).items()}),
        driver=driver,
        other_driver=other_driver,
        vehicle=vehicle,
        other_vehicle=other_vehicle,
        agency=agency,
        hotel=hotel,
    )


@pytest.fixture
def trip_payload(seed):
    """A valid camelCase trip create payload for the seeded fleet."""
    return {
        "driverId": seed.driver.id,
        "vehicleId": seed.vehicle.id,
        "agencyId": seed.agency.id,
        "hotelId": seed.hotel.id,
        "passengersCount": 4,
        "kmStart": 100,
        "tripDate": "2026-03-01",
        "departureTime": "08:00",
        "pickupLocation": "Hotel X",
        "destination": "Airport",
    }
