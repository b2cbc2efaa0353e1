"""
Audit Log Database Model.

Tracks every mutation and authentication event for compliance and history views.
"""

from sqlalchemy import Column, Integer, String, DateTime, JSON
from backend.app.db.session import Base, utcnow


class AuditLog(Base):
    """
    Audit log model for tracking mutations and security events.

    Events logged:
    - <RESOURCE>_CREATED / _UPDATED / _DELETED for every resource
    - DRIVER_ASSIGNED / DRIVER_UNASSIGNED on vehicles
    - LOGIN_SUCCESS / LOGIN_FAILED / LOGOUT / PASSWORD_CHANGED
    - ROLE_CHANGED / USER_STATUS_CHANGED (for privilege escalation detection)
    """
    __tablename__ = "audit_logs"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)

    # Who performed the action (None for anonymous actions such as failed logins)
    actor_id = Column(Integer, index=True, nullable=True)
    actor_email = Column(String(255), nullable=True)

    # What action was performed, on which row
    action = Column(String(100), nullable=False, index=True)
    resource_type = Column(String(50), nullable=True, index=True)
    resource_id = Column(Integer, nullable=True, index=True)

    # Additional context (JSON for flexibility)
    meta_data = Column(JSON, nullable=True)

    timestamp = Column(DateTime(timezone=True), default=utcnow, nullable=False, index=True)

    def __repr__(self):
        return (
            f"<AuditLog(id={self.id}, action='{self.action}', "
            f"resource={self.resource_type}:{self.resource_id})>"
        )
