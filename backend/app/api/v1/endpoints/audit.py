"""
Audit trail API endpoint.

ADMIN and above. Sits outside the action envelope: failures use the
standard error responses from the exception handlers.
"""

from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from backend.app.core.guards import require_role
from backend.app.core.session import CallerContext
from backend.app.db.session import get_db
from backend.app.models.enums import ResourceType, UserRole
from backend.app.schemas.audit import AuditLogResponse, AuditTrailResponse
from backend.app.services.audit import get_audit_trail

router = APIRouter(prefix="/audit", tags=["Audit"])


@router.get("", response_model=AuditTrailResponse)
async def audit_trail(
    resource_type: Optional[ResourceType] = Query(None, alias="resourceType", description="Filter by resource kind"),
    resource_id: Optional[int] = Query(None, alias="resourceId", description="Filter by row ID"),
    action: Optional[str] = Query(None, description="Filter by action, e.g. TRIP_UPDATED"),
    limit: int = Query(100, ge=1, le=500, description="Maximum number of entries"),
    caller: CallerContext = Depends(require_role(UserRole.ADMIN, "audit logs")),
    db: AsyncSession = Depends(get_db)
):
    """
    Get the audit trail, most recent first.
    """
    logs = await get_audit_trail(
        db,
        resource_type=resource_type.value if resource_type else None,
        resource_id=resource_id,
        action=action,
        limit=limit,
    )
    return AuditTrailResponse(
        logs=[AuditLogResponse.model_validate(log) for log in logs],
        total=len(logs),
    )
