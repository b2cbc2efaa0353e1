"""
User administration tests.

Role escalation limits, role reach for edits and token revocation on
deactivation, deletion and role change.
"""

import pytest

from backend.app.core.exceptions import (
    ConflictError,
    InsufficientPermissionsError,
    ResourceNotFoundError,
    ValidationFailedError,
)
from backend.app.models.enums import UserRole, UserStatus
from backend.app.services.user_service import UserService


def new_user(email="new.user@example.com", role="DRIVER", **extra):
    return dict({"email": email, "name": "New User", "password": "Str0ng!pass", "role": role}, **extra)


@pytest.fixture
def users(db_session, settings, revocations):
    return UserService(db_session, settings, revocations)


# Role escalation
@pytest.mark.asyncio
async def test_admin_cannot_create_super_admin(users, seed):
    with pytest.raises(ValidationFailedError) as exc_info:
        await users.create(seed.callers.admin, new_user(role="SUPER_ADMIN"))
    assert exc_info.value.field == "role"
    assert exc_info.value.message == "role SUPER_ADMIN cannot be assigned by ADMIN"


@pytest.mark.asyncio
async def test_admin_cannot_create_peer_admin(users, seed):
    with pytest.raises(ValidationFailedError):
        await users.create(seed.callers.admin, new_user(role="ADMIN"))


@pytest.mark.asyncio
async def test_super_admin_creates_admin(users, seed):
    user = await users.create(seed.callers.super_admin, new_user(role="ADMIN"))

    assert user.role == UserRole.ADMIN
    assert user.status == UserStatus.ACTIVE
    assert user.hashed_password != "Str0ng!pass"


@pytest.mark.asyncio
async def test_manager_creates_driver_only(users, seed):
    user = await users.create(seed.callers.manager, new_user())
    assert user.role == UserRole.DRIVER

    with pytest.raises(ValidationFailedError):
        await users.create(seed.callers.manager, new_user(email="m2@example.com", role="MANAGER"))


@pytest.mark.asyncio
async def test_driver_cannot_create_users(users, seed):
    with pytest.raises(InsufficientPermissionsError):
        await users.create(seed.callers.driver_user, new_user())


@pytest.mark.asyncio
async def test_create_rejects_weak_password(users, seed):
    with pytest.raises(ValidationFailedError) as exc_info:
        await users.create(seed.callers.admin, new_user(password="weakpass"))
    assert exc_info.value.field == "password"


@pytest.mark.asyncio
async def test_duplicate_email_conflicts_case_insensitively(users, seed):
    with pytest.raises(ConflictError):
        await users.create(seed.callers.admin, new_user(email="Manager@Example.com"))


# Role reach
@pytest.mark.asyncio
async def test_admin_cannot_edit_peer_admin(users, seed):
    peer = await users.create(seed.callers.super_admin, new_user(email="peer@example.com", role="ADMIN"))

    with pytest.raises(InsufficientPermissionsError):
        await users.update(seed.callers.admin, peer.id, {"name": "Renamed"})


@pytest.mark.asyncio
async def test_cannot_edit_own_account(users, seed):
    with pytest.raises(InsufficientPermissionsError):
        await users.update(seed.callers.admin, seed.users.admin.id, {"role": "DRIVER"})


@pytest.mark.asyncio
async def test_admin_promotes_driver_to_manager(users, seed):
    user = await users.update(seed.callers.admin, seed.users.driver_user.id, {"role": "MANAGER"})
    assert user.role == UserRole.MANAGER


@pytest.mark.asyncio
async def test_manager_cannot_promote_driver(users, seed):
    with pytest.raises(ValidationFailedError):
        await users.update(seed.callers.manager, seed.users.driver_user.id, {"role": "MANAGER"})


@pytest.mark.asyncio
async def test_list_filters_by_role(users, seed):
    drivers = await users.list(seed.callers.manager, role=UserRole.DRIVER)
    assert {u.email for u in drivers} == {"driver1@example.com", "driver2@example.com"}


@pytest.mark.asyncio
async def test_driver_cannot_list_users(users, seed):
    with pytest.raises(InsufficientPermissionsError):
        await users.list(seed.callers.driver_user)


# Revocation and soft delete
@pytest.mark.asyncio
async def test_suspending_user_revokes_tokens(users, seed, revocations):
    driver_id = seed.users.driver_user.id

    user = await users.set_status(seed.callers.manager, driver_id, {"status": "SUSPENDED"})
    assert user.status == UserStatus.SUSPENDED
    assert await revocations.are_user_tokens_revoked(driver_id)

    await users.set_status(seed.callers.manager, driver_id, {"status": "ACTIVE"})
    assert not await revocations.are_user_tokens_revoked(driver_id)


@pytest.mark.asyncio
async def test_role_change_revokes_tokens(users, seed, revocations):
    await users.update(seed.callers.admin, seed.users.driver_user.id, {"role": "MANAGER"})
    assert await revocations.are_user_tokens_revoked(seed.users.driver_user.id)


@pytest.mark.asyncio
async def test_rename_keeps_tokens(users, seed, revocations):
    await users.update(seed.callers.admin, seed.users.driver_user.id, {"name": "Driver Uno"})
    assert not await revocations.are_user_tokens_revoked(seed.users.driver_user.id)


@pytest.mark.asyncio
async def test_deleted_user_is_hidden_and_email_stays_taken(users, seed, revocations):
    manager_id = seed.users.manager.id

    await users.delete(seed.callers.admin, manager_id)

    with pytest.raises(ResourceNotFoundError):
        await users.get(seed.callers.admin, manager_id)
    assert manager_id not in [u.id for u in await users.list(seed.callers.admin)]
    assert await revocations.are_user_tokens_revoked(manager_id)

    with pytest.raises(ConflictError):
        await users.create(seed.callers.admin, new_user(email="manager@example.com"))
