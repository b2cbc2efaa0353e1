"""
Closed enumerations for roles, statuses and resource kinds.

The core never accepts free-text role or status values; everything that
crosses into a service is one of these.
"""

import enum


class UserRole(str, enum.Enum):
    """
    User role enumeration.

    Roles (lowest to highest privilege):
        DRIVER: Sees and edits only the trips, vehicle and profile that are theirs
        MANAGER: Runs day-to-day operations over every trip, driver and vehicle
        ADMIN: Manager rights plus user administration
        SUPER_ADMIN: Full control, may grant ADMIN
    """
    DRIVER = "DRIVER"
    MANAGER = "MANAGER"
    ADMIN = "ADMIN"
    SUPER_ADMIN = "SUPER_ADMIN"


class UserStatus(str, enum.Enum):
    ACTIVE = "ACTIVE"
    INACTIVE = "INACTIVE"
    SUSPENDED = "SUSPENDED"


class DriverStatus(str, enum.Enum):
    AVAILABLE = "AVAILABLE"
    ON_TRIP = "ON_TRIP"
    OFF_DUTY = "OFF_DUTY"


class VehicleStatus(str, enum.Enum):
    AVAILABLE = "AVAILABLE"
    IN_USE = "IN_USE"
    MAINTENANCE = "MAINTENANCE"


class TripStatus(str, enum.Enum):
    """Trip status enumeration."""
    SCHEDULED = "SCHEDULED"  # Created, waiting to be dispatched
    ASSIGNED = "ASSIGNED"  # Dispatched to its driver
    IN_PROGRESS = "IN_PROGRESS"  # Driver has picked up passengers
    COMPLETED = "COMPLETED"  # Passengers dropped off
    CANCELLED = "CANCELLED"  # Trip cancelled


class TripType(str, enum.Enum):
    OUT = "OUT"  # Hotel to destination
    IN = "IN"  # Destination back to hotel


class MaintenanceType(str, enum.Enum):
    OIL_CHANGE = "OIL_CHANGE"
    INSPECTION = "INSPECTION"
    REPAIR = "REPAIR"
    SERVICE = "SERVICE"
    TIRE_REPLACEMENT = "TIRE_REPLACEMENT"
    BRAKE_SERVICE = "BRAKE_SERVICE"


class ResourceType(str, enum.Enum):
    TRIP = "TRIP"
    DRIVER = "DRIVER"
    VEHICLE = "VEHICLE"
    AGENCY = "AGENCY"
    HOTEL = "HOTEL"
    MAINTENANCE_RECORD = "MAINTENANCE_RECORD"
    USER = "USER"


class Action(str, enum.Enum):
    VIEW = "VIEW"
    CREATE = "CREATE"
    UPDATE = "UPDATE"
    DELETE = "DELETE"


class Scope(str, enum.Enum):
    """Row scope a role gets on a resource."""
    ALL = "ALL"
    OWN_ONLY = "OWN_ONLY"
