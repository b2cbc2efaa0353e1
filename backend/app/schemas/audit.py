"""
Audit trail schemas.
"""

from datetime import datetime
from typing import List, Optional

from backend.app.schemas.common import CamelModel


class AuditLogResponse(CamelModel):
    """Schema for a single audit log entry."""
    id: int
    actor_id: Optional[int] = None
    actor_email: Optional[str] = None
    action: str
    resource_type: Optional[str] = None
    resource_id: Optional[int] = None
    meta_data: Optional[dict] = None
    timestamp: datetime


class AuditTrailResponse(CamelModel):
    logs: List[AuditLogResponse]
    total: int
