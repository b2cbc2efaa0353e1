"""
Session resolution tests.

The role comes from storage on every call; revoked tokens and inactive
accounts are rejected.
"""

from datetime import timedelta

import pytest
from redis.exceptions import ConnectionError as RedisConnectionError

from backend.app.core.exceptions import AuthenticationError
from backend.app.core.jwt import create_access_token
from backend.app.core.session import SessionResolver
from backend.app.models.enums import UserRole, UserStatus
from backend.app.models.user import User


@pytest.fixture
def resolver(db_session, settings, revocations):
    return SessionResolver(db_session, settings, revocations)


async def set_user(db_session, user_id, **values):
    user = await db_session.get(User, user_id)
    for field, value in values.items():
        setattr(user, field, value)
    await db_session.commit()


def claims(user):
    return {"sub": user.email, "user_id": user.id, "role": user.role.value}


@pytest.mark.asyncio
async def test_valid_token_resolves_caller(resolver, seed, make_token):
    caller = await resolver.resolve(make_token(seed.users.manager))

    assert caller.user_id == seed.users.manager.id
    assert caller.role == UserRole.MANAGER
    assert caller.email == "manager@example.com"


@pytest.mark.asyncio
@pytest.mark.parametrize("token", [None, "", "not-a-jwt"])
async def test_missing_or_garbage_token(resolver, token):
    with pytest.raises(AuthenticationError):
        await resolver.resolve(token)


@pytest.mark.asyncio
async def test_expired_token(resolver, seed, settings):
    token = create_access_token(claims(seed.users.manager), settings, expires_delta=timedelta(minutes=-1))

    with pytest.raises(AuthenticationError):
        await resolver.resolve(token)


@pytest.mark.asyncio
async def test_token_signed_with_other_key(resolver, seed, settings):
    other = settings.model_copy(update={"secret_key": "another-secret-key-with-32-characters!"})
    token = create_access_token(claims(seed.users.manager), other)

    with pytest.raises(AuthenticationError):
        await resolver.resolve(token)


@pytest.mark.asyncio
async def test_token_without_user_id(resolver, settings):
    token = create_access_token({"sub": "someone@example.com"}, settings)

    with pytest.raises(AuthenticationError):
        await resolver.resolve(token)


@pytest.mark.asyncio
async def test_role_is_read_from_storage(resolver, seed, make_token, db_session):
    """A token minted while the user was a DRIVER acts with the current role."""
    token = make_token(seed.users.driver_user)
    await set_user(db_session, seed.users.driver_user.id, role=UserRole.MANAGER)

    caller = await resolver.resolve(token)

    assert caller.role == UserRole.MANAGER


@pytest.mark.asyncio
@pytest.mark.parametrize("status", [UserStatus.INACTIVE, UserStatus.SUSPENDED])
async def test_inactive_user_is_rejected(resolver, seed, make_token, db_session, status):
    token = make_token(seed.users.driver_user)
    await set_user(db_session, seed.users.driver_user.id, status=status)

    with pytest.raises(AuthenticationError):
        await resolver.resolve(token)


@pytest.mark.asyncio
async def test_logged_out_token_is_rejected(resolver, seed, make_token, settings, revocations):
    token = make_token(seed.users.admin)
    await revocations.revoke_token(token, seed.users.admin.id)

    with pytest.raises(AuthenticationError):
        await resolver.resolve(token)

    # Other sessions of the same user are unaffected
    other_token = create_access_token(dict(claims(seed.users.admin), jti="second-session"), settings)
    assert (await resolver.resolve(other_token)).user_id == seed.users.admin.id


@pytest.mark.asyncio
async def test_all_user_tokens_revoked(resolver, seed, make_token, revocations):
    token = make_token(seed.users.admin)
    await revocations.revoke_all_user_tokens(seed.users.admin.id)

    with pytest.raises(AuthenticationError):
        await resolver.resolve(token)


@pytest.mark.asyncio
async def test_revocation_store_outage_fails_open(resolver, seed, make_token, redis_client, mocker):
    """With Redis down the storage status check still decides."""
    token = make_token(seed.users.admin)
    mocker.patch.object(redis_client, "exists", side_effect=RedisConnectionError("down"))
    mocker.patch.object(redis_client, "get", side_effect=RedisConnectionError("down"))

    caller = await resolver.resolve(token)

    assert caller.user_id == seed.users.admin.id


@pytest.mark.asyncio
async def test_login_right_after_revocation_is_accepted(resolver, seed, make_token, revocations):
    """Only tokens issued before the revocation are cut off, even within the same second."""
    old_token = make_token(seed.users.admin)
    await revocations.revoke_all_user_tokens(seed.users.admin.id)
    new_token = make_token(seed.users.admin)

    with pytest.raises(AuthenticationError):
        await resolver.resolve(old_token)
    assert (await resolver.resolve(new_token)).user_id == seed.users.admin.id
