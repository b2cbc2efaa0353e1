"""
Role guards for routes outside the action layer.
"""

from typing import Union, Iterable

from fastapi import Depends

from backend.app.core.dependencies import get_current_caller
from backend.app.core.exceptions import InsufficientPermissionsError
from backend.app.core.session import CallerContext
from backend.app.domain.policy import has_minimum_role
from backend.app.models.enums import UserRole


def require_role(required: Union[UserRole, Iterable[UserRole]], resource: str = "this resource"):
    """
    Dependency factory for role-based access control.

    Usage:
        @router.get("/audit")
        async def audit_trail(caller: CallerContext = Depends(require_role(UserRole.ADMIN))):
            ...

    Args:
        required: Minimum role (or roles, the highest of which applies)
        resource: Name used in the failure message

    Returns:
        FastAPI dependency that yields the caller

    Raises:
        InsufficientPermissionsError (403) if the caller ranks too low
    """
    async def role_checker(caller: CallerContext = Depends(get_current_caller)) -> CallerContext:
        if not has_minimum_role(caller.role, required):
            raise InsufficientPermissionsError("view", resource)
        return caller

    return role_checker
