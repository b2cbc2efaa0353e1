"""
Shared service plumbing.

Every resource service follows the same order of checks:
caller context -> role policy -> business invariants -> repository.
Failures are raised as structured exceptions; formatting a message for the
user is left to the action boundary.
"""

import logging
from typing import Any, Dict, Iterable, Mapping, Optional, Type, TypeVar

from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError
from sqlalchemy.ext.asyncio import AsyncSession

from backend.app.core.exceptions import InsufficientPermissionsError, ResourceNotFoundError, ValidationFailedError
from backend.app.core.session import CallerContext
from backend.app.domain import policy
from backend.app.models.enums import Action, ResourceType, Scope
from backend.app.services.audit import log_event

logger = logging.getLogger("fleet.services")

SchemaT = TypeVar("SchemaT", bound=BaseModel)


def parse_payload(schema: Type[SchemaT], payload: Any) -> SchemaT:
    """
    Validate a raw payload against a schema.

    Pydantic errors are reduced to the first offending field, reported by
    its snake_case name.
    """
    if isinstance(payload, schema):
        return payload
    if payload is None:
        payload = {}
    if not isinstance(payload, Mapping):
        raise ValidationFailedError("payload", "must be an object")
    try:
        return schema.model_validate(payload)
    except PydanticValidationError as exc:
        error = exc.errors()[0]
        field = _field_name(schema, error.get("loc", ()))
        if error.get("type") == "missing":
            reason = "is required"
        else:
            msg = error.get("msg") or "is invalid"
            reason = msg[:1].lower() + msg[1:]
        raise ValidationFailedError(field, reason) from exc


def restrict_payload(schema: Type[BaseModel], payload: Any, allowed: Iterable[str]):
    """
    Remove the schema fields outside allowed from a raw payload.

    Keys are matched by alias or by field name. Returns the remaining
    payload and the sorted snake_case names of what was removed.
    """
    if isinstance(payload, BaseModel):
        payload = payload.model_dump(exclude_unset=True)
    if not isinstance(payload, Mapping):
        return payload, []
    by_alias = {info.alias: name for name, info in schema.model_fields.items() if info.alias}
    kept, dropped = {}, set()
    for key, value in payload.items():
        name = by_alias.get(key, key)
        if name in schema.model_fields and name not in allowed:
            dropped.add(name)
        else:
            kept[key] = value
    return kept, sorted(dropped)


def _field_name(schema: Type[BaseModel], loc: Iterable[Any]) -> str:
    parts = [str(part) for part in loc]
    if not parts:
        return "payload"
    by_alias = {info.alias: name for name, info in schema.model_fields.items() if info.alias}
    parts[0] = by_alias.get(parts[0], parts[0])
    return ".".join(parts)


class BaseService:
    """
    Base for resource services.

    Subclasses set resource_type and the human name used in failures
    ("trips", "vehicles", ...).
    """

    resource_type: ResourceType = None
    resource_label: str = "records"
    entity_label: str = "Record"

    def __init__(self, db: AsyncSession):
        self.db = db

    # Authorization

    def deny(self, caller: CallerContext, action: Action, reason: Optional[str] = None):
        logger.warning(
            "Denied %s on %s for user %s (%s)",
            action.value, self.resource_type.value, caller.user_id, caller.role.value,
        )
        raise InsufficientPermissionsError(action.value.lower(), self.resource_label, reason)

    def require_access(self, caller: CallerContext, action: Action = Action.VIEW) -> None:
        """Base access to the resource type, before any row is looked at."""
        if not policy.can_access_resource(caller.role, self.resource_type):
            self.deny(caller, action)

    def require_staff(self, caller: CallerContext, action: Action) -> None:
        if not policy.is_staff(caller.role):
            self.deny(caller, action)

    def require_view(self, caller: CallerContext, entity: Any) -> None:
        if not policy.can_view_entity(caller.role, caller.user_id, entity):
            self.deny(caller, Action.VIEW)

    def require_mutation(self, caller: CallerContext, action: Action, entity: Any = None) -> None:
        if not policy.can_mutate_entity(caller.role, caller.user_id, self.resource_type, action, entity):
            self.deny(caller, action)

    def owner_filter(self, caller: CallerContext) -> Optional[int]:
        """User id to scope queries by, or None when the caller sees every row."""
        if policy.scope_for_role(caller.role, self.resource_type) == Scope.OWN_ONLY:
            return caller.user_id
        return None

    # Helpers

    def not_found(self, entity_id: Any) -> ResourceNotFoundError:
        return ResourceNotFoundError(self.entity_label, entity_id)

    @staticmethod
    def reject_nulls(changes: Dict[str, Any], model: Any) -> None:
        """Explicit nulls are only allowed for nullable columns."""
        columns = model.__table__.c
        for field, value in changes.items():
            if value is None and field in columns and not columns[field].nullable:
                raise ValidationFailedError(field, "cannot be null")

    async def audit(
        self,
        caller: Optional[CallerContext],
        action: str,
        resource_id: Optional[int],
        metadata: Optional[Dict[str, Any]] = None,
    ) -> None:
        await log_event(
            self.db,
            action=action,
            actor_id=caller.user_id if caller else None,
            actor_email=caller.email if caller else None,
            resource_type=self.resource_type.value,
            resource_id=resource_id,
            metadata=metadata,
        )
