"""
Model registry.

Importing this module registers every table with Base.metadata.
"""

from backend.app.models.user import User  # noqa: F401
from backend.app.models.driver import Driver  # noqa: F401
from backend.app.models.vehicle import Vehicle  # noqa: F401
from backend.app.models.vehicle_assignment import VehicleAssignment  # noqa: F401
from backend.app.models.location import Agency, Hotel  # noqa: F401
from backend.app.models.trip import Trip  # noqa: F401
from backend.app.models.maintenance_record import MaintenanceRecord  # noqa: F401
from backend.app.models.audit_log import AuditLog  # noqa: F401
