"""
Unit tests for the role policy.

Pure functions: no database, no fixtures.
"""

import itertools

import pytest

from backend.app.domain import policy
from backend.app.models.driver import Driver
from backend.app.models.enums import Action, ResourceType, Scope, TripStatus, UserRole
from backend.app.models.location import Agency
from backend.app.models.trip import Trip
from backend.app.models.user import User

ROLES = [UserRole.DRIVER, UserRole.MANAGER, UserRole.ADMIN, UserRole.SUPER_ADMIN]
DRIVER_USER_ID = 10
OTHER_USER_ID = 20


def own_trip():
    return Trip(driver=Driver(user_id=DRIVER_USER_ID))


# TEST 1: Hierarchy
def test_hierarchy_is_strictly_ordered():
    levels = [policy.role_level(role) for role in ROLES]
    assert levels == sorted(levels)
    assert len(set(levels)) == len(levels)


@pytest.mark.parametrize("role,required,expected", [
    (UserRole.ADMIN, UserRole.MANAGER, True),
    (UserRole.MANAGER, UserRole.MANAGER, True),
    (UserRole.DRIVER, UserRole.MANAGER, False),
    (UserRole.MANAGER, [UserRole.DRIVER, UserRole.ADMIN], False),
    (UserRole.SUPER_ADMIN, [UserRole.DRIVER, UserRole.ADMIN], True),
    (UserRole.DRIVER, [], True),
])
def test_has_minimum_role(role, required, expected):
    assert policy.has_minimum_role(role, required) is expected


# TEST 2: Resource access and scoping
def test_driver_resource_access():
    assert policy.can_access_resource(UserRole.DRIVER, ResourceType.TRIP)
    assert policy.can_access_resource(UserRole.DRIVER, ResourceType.VEHICLE)
    assert not policy.can_access_resource(UserRole.DRIVER, ResourceType.AGENCY)
    assert not policy.can_access_resource(UserRole.DRIVER, ResourceType.USER)
    assert not policy.can_access_resource(UserRole.DRIVER, ResourceType.MAINTENANCE_RECORD)


def test_staff_access_everything():
    for role, resource in itertools.product(ROLES[1:], ResourceType):
        assert policy.can_access_resource(role, resource)
        assert policy.scope_for_role(role, resource) == Scope.ALL


def test_driver_scope_is_own_only_for_scoped_resources():
    assert policy.scope_for_role(UserRole.DRIVER, ResourceType.TRIP) == Scope.OWN_ONLY
    assert policy.scope_for_role(UserRole.DRIVER, ResourceType.DRIVER) == Scope.OWN_ONLY


def test_driver_sees_only_own_trip():
    trip = own_trip()
    assert policy.can_view_entity(UserRole.DRIVER, DRIVER_USER_ID, trip)
    assert not policy.can_view_entity(UserRole.DRIVER, OTHER_USER_ID, trip)
    assert policy.can_view_entity(UserRole.MANAGER, OTHER_USER_ID, trip)


def test_driver_cannot_view_unscoped_resource():
    assert not policy.can_view_entity(UserRole.DRIVER, DRIVER_USER_ID, Agency(name="A"))


def test_owner_of_driver_profile():
    assert policy.owner_user_id(Driver(user_id=7)) == 7
    assert policy.owner_user_id(Agency(name="A")) is None


# TEST 3: Mutation rules
def test_trip_mutation_rules_for_driver():
    trip = own_trip()
    assert policy.can_mutate_entity(UserRole.DRIVER, DRIVER_USER_ID, ResourceType.TRIP, Action.CREATE)
    assert policy.can_mutate_entity(UserRole.DRIVER, DRIVER_USER_ID, ResourceType.TRIP, Action.UPDATE, trip)
    assert not policy.can_mutate_entity(UserRole.DRIVER, OTHER_USER_ID, ResourceType.TRIP, Action.UPDATE, trip)
    assert not policy.can_mutate_entity(UserRole.DRIVER, DRIVER_USER_ID, ResourceType.TRIP, Action.DELETE, trip)


def test_non_trip_resources_are_staff_only():
    for resource in (ResourceType.DRIVER, ResourceType.VEHICLE, ResourceType.AGENCY, ResourceType.HOTEL):
        for action in (Action.CREATE, Action.UPDATE, Action.DELETE):
            assert not policy.can_mutate_entity(UserRole.DRIVER, DRIVER_USER_ID, resource, action)
            assert policy.can_mutate_entity(UserRole.MANAGER, DRIVER_USER_ID, resource, action)


def test_role_monotonicity():
    """If a role may do something, every higher role may too."""
    entities = [
        None,
        own_trip(),
        Driver(user_id=DRIVER_USER_ID),
        User(role=UserRole.DRIVER),
        User(role=UserRole.MANAGER),
    ]
    caller_ids = [DRIVER_USER_ID, OTHER_USER_ID]

    for resource, action, entity, caller_id in itertools.product(ResourceType, Action, entities, caller_ids):
        allowed = [
            policy.can_mutate_entity(role, caller_id, resource, action, entity) for role in ROLES
        ]
        first = allowed.index(True) if True in allowed else len(allowed)
        assert all(allowed[first:]), (resource, action, entity, caller_id, allowed)


# TEST 4: Role assignment
@pytest.mark.parametrize("actor,target,expected", [
    (UserRole.SUPER_ADMIN, UserRole.ADMIN, True),
    (UserRole.SUPER_ADMIN, UserRole.SUPER_ADMIN, False),
    (UserRole.ADMIN, UserRole.MANAGER, True),
    (UserRole.ADMIN, UserRole.ADMIN, False),
    (UserRole.ADMIN, UserRole.SUPER_ADMIN, False),
    (UserRole.MANAGER, UserRole.DRIVER, True),
    (UserRole.MANAGER, UserRole.MANAGER, False),
    (UserRole.DRIVER, UserRole.DRIVER, False),
])
def test_can_assign_role(actor, target, expected):
    assert policy.can_assign_role(actor, target) is expected


def test_user_management_follows_role_reach():
    admin_user = User(role=UserRole.ADMIN)
    assert not policy.can_mutate_entity(UserRole.ADMIN, 1, ResourceType.USER, Action.UPDATE, admin_user)
    assert policy.can_mutate_entity(UserRole.SUPER_ADMIN, 1, ResourceType.USER, Action.UPDATE, admin_user)


# TEST 5: Field restriction and transitions
def test_driver_trip_fields_exclude_status_and_references():
    fields = policy.updatable_fields(UserRole.DRIVER, ResourceType.TRIP)
    assert "notes" in fields
    for restricted in ("status", "driver_id", "vehicle_id", "agency_id", "hotel_id"):
        assert restricted not in fields
    assert policy.updatable_fields(UserRole.MANAGER, ResourceType.TRIP) is None


def test_terminal_statuses_are_final():
    for terminal in (TripStatus.COMPLETED, TripStatus.CANCELLED):
        for target in TripStatus:
            assert policy.is_valid_status_transition(terminal, target) is (target == terminal)


def test_open_statuses_move_freely():
    assert policy.is_valid_status_transition(TripStatus.SCHEDULED, TripStatus.IN_PROGRESS)
    assert policy.is_valid_status_transition(TripStatus.IN_PROGRESS, TripStatus.COMPLETED)
    assert policy.is_valid_status_transition(TripStatus.ASSIGNED, TripStatus.CANCELLED)
