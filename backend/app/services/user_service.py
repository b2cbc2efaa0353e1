"""
User administration service.

Staff read users; creating and editing users is limited by role reach:
an actor may only touch users whose role they could grant, and may only
grant roles below their own (SUPER_ADMIN excepted, which grants ADMIN).
Deactivating, deleting or re-roling a user revokes their tokens.
"""

import logging
from typing import Any, List, Optional

from backend.app.core.config import Settings
from backend.app.core.exceptions import ConflictError, ValidationFailedError
from backend.app.core.security import get_password_hash, password_strength_error
from backend.app.core.session import CallerContext
from backend.app.core.token_revocation import TokenRevocationStore
from backend.app.db.session import utcnow
from backend.app.domain import policy
from backend.app.models.enums import Action, ResourceType, UserRole, UserStatus
from backend.app.models.user import User
from backend.app.repositories.base import transaction
from backend.app.repositories.user_repository import UserRepository
from backend.app.schemas.user import UserCreate, UserStatusChange, UserUpdate
from backend.app.services.audit import AuditAction
from backend.app.services.base import BaseService, parse_payload

logger = logging.getLogger("fleet.services.users")


class UserService(BaseService):
    resource_type = ResourceType.USER
    resource_label = "users"
    entity_label = "User"

    def __init__(self, db, settings: Settings, revocations: TokenRevocationStore):
        super().__init__(db)
        self.settings = settings
        self.revocations = revocations
        self.users = UserRepository(db)

    async def list(self, caller: CallerContext, role: Optional[UserRole] = None) -> List[User]:
        self.require_access(caller)
        return await self.users.list(roles=[role] if role else None)

    async def get(self, caller: CallerContext, user_id: int) -> User:
        self.require_access(caller)
        user = await self.users.get(user_id)
        if user is None:
            raise self.not_found(user_id)
        return user

    async def create(self, caller: CallerContext, payload: Any) -> User:
        """
        Create a user with a role the caller may grant.

        Raises:
            InsufficientPermissionsError: caller is not staff
            ValidationFailedError: bad field, weak password, or a role the
                caller may not grant
            ConflictError: email already registered
        """
        self.require_mutation(caller, Action.CREATE)
        data = parse_payload(UserCreate, payload)

        self._check_role_grant(caller, data.role)
        reason = password_strength_error(data.password)
        if reason:
            raise ValidationFailedError("password", reason)
        email = data.email.lower()
        if await self.users.email_taken(email):
            raise ConflictError("User", "email")

        user = User(
            email=email,
            hashed_password=get_password_hash(data.password, self.settings.password_hash_rounds),
            name=data.name,
            phone=data.phone,
            department=data.department,
            role=data.role,
            status=data.status,
        )
        async with transaction(self.db, "create user", self.entity_label):
            await self.users.add(user)
            await self.audit(caller, AuditAction.USER_CREATED, user.id, {"role": user.role.value})

        logger.info("User %s created with role %s by user %s", user.id, user.role.value, caller.user_id)
        return user

    async def update(self, caller: CallerContext, user_id: int, payload: Any) -> User:
        user = await self._manageable_user(caller, user_id, Action.UPDATE)

        changes = parse_payload(UserUpdate, payload).model_dump(exclude_unset=True)
        self.reject_nulls(changes, User)

        new_role = changes.get("role")
        if new_role is not None and new_role != user.role:
            self._check_role_grant(caller, new_role)

        email = changes.get("email")
        if email is not None:
            changes["email"] = email = email.lower()
            if email != user.email and await self.users.email_taken(email, exclude_id=user.id):
                raise ConflictError("User", "email")

        previous_role, previous_status = user.role, user.status
        async with transaction(self.db, "update user", self.entity_label):
            await self.users.apply(user, changes)
            await self.audit(caller, AuditAction.USER_UPDATED, user.id, {"fields": sorted(changes)})
            if user.role != previous_role:
                await self.audit(
                    caller, AuditAction.ROLE_CHANGED, user.id,
                    {"from": previous_role.value, "to": user.role.value},
                )
            if user.status != previous_status:
                await self.audit(
                    caller, AuditAction.USER_STATUS_CHANGED, user.id,
                    {"from": previous_status.value, "to": user.status.value},
                )

        logger.info("User %s updated by user %s", user.id, caller.user_id)
        await self._sync_revocation(
            user,
            role_changed=user.role != previous_role,
            status_changed=user.status != previous_status,
        )
        return user

    async def set_status(self, caller: CallerContext, user_id: int, payload: Any) -> User:
        """Activate, deactivate or suspend a user."""
        status = parse_payload(UserStatusChange, payload).status
        return await self.update(caller, user_id, {"status": status})

    async def delete(self, caller: CallerContext, user_id: int) -> None:
        """Users are never removed: status becomes INACTIVE and deleted_at is set."""
        user = await self._manageable_user(caller, user_id, Action.DELETE)

        async with transaction(self.db, "delete user", self.entity_label):
            await self.users.apply(user, {"status": UserStatus.INACTIVE, "deleted_at": utcnow()})
            await self.audit(caller, AuditAction.USER_DELETED, user.id)

        logger.info("User %s deleted by user %s", user_id, caller.user_id)
        await self.revocations.revoke_all_user_tokens(user.id)

    async def _manageable_user(self, caller: CallerContext, user_id: int, action: Action) -> User:
        self.require_access(caller, action)
        if user_id == caller.user_id:
            self.deny(caller, action, f"Cannot {action.value.lower()} your own account here")
        user = await self.users.get(user_id)
        if user is None:
            raise self.not_found(user_id)
        self.require_mutation(caller, action, user)
        return user

    def _check_role_grant(self, caller: CallerContext, role: UserRole) -> None:
        if not policy.can_assign_role(caller.role, role):
            logger.warning("User %s (%s) tried to grant role %s", caller.user_id, caller.role.value, role.value)
            raise ValidationFailedError("role", f"{role.value} cannot be assigned by {caller.role.value}")

    async def _sync_revocation(self, user: User, role_changed: bool, status_changed: bool) -> None:
        if status_changed and user.status == UserStatus.ACTIVE:
            await self.revocations.clear_user_token_revocation(user.id)
        elif user.status != UserStatus.ACTIVE or role_changed:
            await self.revocations.revoke_all_user_tokens(user.id)
