"""
Role policy for the back office.

Every allow/deny and row-scoping decision lives here so that no service
implements its own ad hoc role check. All functions are pure: they take
roles, ids and already-loaded entities and return booleans or enums.
They never raise; services turn a False into InsufficientPermissionsError.
"""

from typing import Any, FrozenSet, Iterable, Optional, Union

from backend.app.models.driver import Driver
from backend.app.models.enums import Action, ResourceType, Scope, TripStatus, UserRole
from backend.app.models.location import Agency, Hotel
from backend.app.models.maintenance_record import MaintenanceRecord
from backend.app.models.trip import Trip
from backend.app.models.user import User
from backend.app.models.vehicle import Vehicle

ROLE_HIERARCHY = {
    UserRole.DRIVER: 1,
    UserRole.MANAGER: 2,
    UserRole.ADMIN: 3,
    UserRole.SUPER_ADMIN: 4,
}

# Resources a DRIVER may see, restricted to their own rows
DRIVER_SCOPED_RESOURCES = frozenset({ResourceType.TRIP, ResourceType.DRIVER, ResourceType.VEHICLE})

# Trip fields a DRIVER may change on their own trip; anything else is dropped
DRIVER_TRIP_FIELDS = frozenset({
    "trip_date",
    "departure_time",
    "estimated_arrival_time",
    "actual_arrival_time",
    "pickup_location",
    "dropoff_location",
    "destination",
    "type",
    "passengers_count",
    "km_start",
    "km_end",
    "distance_travelled",
    "trip_price",
    "actual_cost",
    "notes",
})

TERMINAL_TRIP_STATUSES = frozenset({TripStatus.COMPLETED, TripStatus.CANCELLED})

_ASSIGNABLE_ROLES = {
    UserRole.SUPER_ADMIN: (UserRole.DRIVER, UserRole.MANAGER, UserRole.ADMIN),
    UserRole.ADMIN: (UserRole.DRIVER, UserRole.MANAGER),
    UserRole.MANAGER: (UserRole.DRIVER,),
    UserRole.DRIVER: (),
}

_ENTITY_RESOURCE = (
    (Trip, ResourceType.TRIP),
    (Driver, ResourceType.DRIVER),
    (Vehicle, ResourceType.VEHICLE),
    (Agency, ResourceType.AGENCY),
    (Hotel, ResourceType.HOTEL),
    (MaintenanceRecord, ResourceType.MAINTENANCE_RECORD),
    (User, ResourceType.USER),
)


def role_level(role: UserRole) -> int:
    return ROLE_HIERARCHY[role]


def has_minimum_role(role: UserRole, required: Union[UserRole, Iterable[UserRole]]) -> bool:
    """
    True iff the role ranks at least as high as the highest required role.

    Usage:
        has_minimum_role(UserRole.ADMIN, UserRole.MANAGER)  # True
        has_minimum_role(UserRole.MANAGER, [UserRole.DRIVER, UserRole.ADMIN])  # False
    """
    required_roles = [required] if isinstance(required, UserRole) else list(required)
    if not required_roles:
        return True
    return role_level(role) >= max(role_level(r) for r in required_roles)


def is_staff(role: UserRole) -> bool:
    """MANAGER or above."""
    return has_minimum_role(role, UserRole.MANAGER)


def can_access_resource(role: UserRole, resource: ResourceType) -> bool:
    """Base access to a resource type at all (before any row scoping)."""
    if is_staff(role):
        return True
    return resource in DRIVER_SCOPED_RESOURCES


def scope_for_role(role: UserRole, resource: ResourceType) -> Scope:
    if role == UserRole.DRIVER and resource in DRIVER_SCOPED_RESOURCES:
        return Scope.OWN_ONLY
    return Scope.ALL


def resource_type_of(entity: Any) -> Optional[ResourceType]:
    for model, resource in _ENTITY_RESOURCE:
        if isinstance(entity, model):
            return resource
    return None


def owner_user_id(entity: Any) -> Optional[int]:
    """
    Derive the user that owns an entity for visibility purposes.

    Driver -> its user; Trip -> its driver's user; Vehicle -> the user of the
    driver on its active assignment. Relations must already be loaded.
    """
    if isinstance(entity, Driver):
        return entity.user_id
    if isinstance(entity, Trip):
        return entity.driver.user_id if entity.driver is not None else None
    if isinstance(entity, Vehicle):
        assignment = entity.active_assignment
        if assignment is None or assignment.driver is None:
            return None
        return assignment.driver.user_id
    return None


def can_view_entity(role: UserRole, caller_user_id: int, entity: Any) -> bool:
    if is_staff(role):
        return True
    if resource_type_of(entity) not in DRIVER_SCOPED_RESOURCES:
        return False
    owner = owner_user_id(entity)
    return owner is not None and owner == caller_user_id


def assignable_roles(actor_role: UserRole) -> tuple:
    """Roles the actor may grant. Nobody can grant SUPER_ADMIN through the API."""
    return _ASSIGNABLE_ROLES[actor_role]


def can_assign_role(actor_role: UserRole, target_role: UserRole) -> bool:
    return target_role in assignable_roles(actor_role)


def can_manage_user(actor_role: UserRole, target_role: UserRole) -> bool:
    """An actor may only edit users whose current role they could grant."""
    return can_assign_role(actor_role, target_role)


def can_mutate_entity(
    role: UserRole,
    caller_user_id: int,
    resource: ResourceType,
    action: Action,
    entity: Any = None,
) -> bool:
    """
    Decide create/update/delete rights.

    Trips: any role creates (drivers for themselves), a DRIVER updates only
    trips assigned to them and never deletes. Everything else: MANAGER or
    above, and users only within the actor's role-assignment reach.
    """
    if action == Action.VIEW:
        return entity is not None and can_view_entity(role, caller_user_id, entity)

    if resource == ResourceType.TRIP:
        if action == Action.CREATE:
            return True
        if is_staff(role):
            return True
        if action == Action.UPDATE and entity is not None:
            owner = owner_user_id(entity)
            return owner is not None and owner == caller_user_id
        return False

    if not is_staff(role):
        return False

    if resource == ResourceType.USER and isinstance(entity, User):
        return can_manage_user(role, entity.role)

    return True


def updatable_fields(role: UserRole, resource: ResourceType) -> Optional[FrozenSet[str]]:
    """Fields the role may write on update; None means no restriction."""
    if resource == ResourceType.TRIP and not is_staff(role):
        return DRIVER_TRIP_FIELDS
    return None


def is_valid_status_transition(current: TripStatus, new: TripStatus) -> bool:
    """A trip can move anywhere except out of COMPLETED or CANCELLED."""
    if current == new:
        return True
    return current not in TERMINAL_TRIP_STATUSES
