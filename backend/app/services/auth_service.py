"""
Authentication service.

Registration, login, password management and logout. Tokens are JWTs
carrying sub, user_id and role; the role in a token is informational only,
since every call re-reads the user (see core.session).
"""

import logging
from typing import Any

from backend.app.core.config import Settings
from backend.app.core.exceptions import AuthenticationError, ConflictError, ValidationFailedError
from backend.app.core.jwt import create_access_token
from backend.app.core.security import get_password_hash, password_strength_error, verify_password
from backend.app.core.session import CallerContext
from backend.app.core.token_revocation import TokenRevocationStore
from backend.app.db.session import utcnow
from backend.app.domain import policy
from backend.app.models.enums import Action, ResourceType, UserRole, UserStatus
from backend.app.models.user import User
from backend.app.repositories.base import transaction
from backend.app.repositories.user_repository import UserRepository
from backend.app.schemas.auth import PasswordChange, PasswordReset, TokenResponse, UserLogin, UserRegister
from backend.app.services.audit import AuditAction
from backend.app.services.base import BaseService, parse_payload

logger = logging.getLogger("fleet.auth")


class AuthService(BaseService):
    resource_type = ResourceType.USER
    resource_label = "users"
    entity_label = "User"

    def __init__(self, db, settings: Settings, revocations: TokenRevocationStore):
        super().__init__(db)
        self.settings = settings
        self.revocations = revocations
        self.users = UserRepository(db)

    def issue_token(self, user: User) -> TokenResponse:
        token = create_access_token(
            data={"sub": user.email, "user_id": user.id, "role": user.role.value},
            settings=self.settings,
        )
        return TokenResponse(
            access_token=token,
            user_id=user.id,
            email=user.email,
            name=user.name,
            role=user.role,
        )

    async def register(self, payload: Any) -> TokenResponse:
        """
        Self-registration. The new account is always an ACTIVE DRIVER.

        Raises:
            ValidationFailedError: bad email, mismatched or weak password
            ConflictError: email already registered
        """
        data = parse_payload(UserRegister, payload)
        if data.password != data.confirm_password:
            raise ValidationFailedError("confirm_password", "does not match the password")
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
            role=UserRole.DRIVER,
            status=UserStatus.ACTIVE,
        )
        async with transaction(self.db, "register user", self.entity_label):
            await self.users.add(user)
            await self.audit(
                CallerContext(user.id, user.role, user.email), AuditAction.USER_REGISTERED, user.id
            )

        logger.info("User %s registered", user.id)
        return self.issue_token(user)

    async def authenticate(self, payload: Any) -> TokenResponse:
        """
        Log in by email and password.

        Raises:
            AuthenticationError: unknown email, wrong password or an account
                that is not ACTIVE
        """
        data = parse_payload(UserLogin, payload)
        user = await self.users.get_by_email(data.email)

        if user is None or not verify_password(data.password, user.hashed_password):
            async with transaction(self.db, "audit login", self.entity_label):
                await self.audit(
                    None, AuditAction.LOGIN_FAILED, user.id if user else None, {"email": data.email.lower()}
                )
            logger.warning("Failed login for %s", data.email.lower())
            raise AuthenticationError("Invalid email or password")

        if user.status != UserStatus.ACTIVE:
            logger.warning("Login refused for %s account %s", user.status.value, user.id)
            raise AuthenticationError("Account is not active")

        async with transaction(self.db, "login", self.entity_label):
            await self.users.apply(user, {"last_login_at": utcnow()})
            await self.audit(CallerContext(user.id, user.role, user.email), AuditAction.LOGIN_SUCCESS, user.id)

        logger.info("User %s logged in", user.id)
        return self.issue_token(user)

    async def change_password(self, caller: CallerContext, payload: Any) -> None:
        data = parse_payload(PasswordChange, payload)
        user = await self.users.get(caller.user_id)
        if user is None:
            raise AuthenticationError()

        if not verify_password(data.current_password, user.hashed_password):
            raise ValidationFailedError("current_password", "is incorrect")
        if data.new_password != data.confirm_password:
            raise ValidationFailedError("confirm_password", "does not match the password")
        reason = password_strength_error(data.new_password)
        if reason:
            raise ValidationFailedError("new_password", reason)

        async with transaction(self.db, "change password", self.entity_label):
            await self.users.apply(
                user,
                {"hashed_password": get_password_hash(data.new_password, self.settings.password_hash_rounds)},
            )
            await self.audit(caller, AuditAction.PASSWORD_CHANGED, user.id)

        logger.info("User %s changed their password", user.id)

    async def reset_password(self, caller: CallerContext, user_id: int, payload: Any) -> None:
        """Set another user's password. ADMIN or above, within role reach."""
        if not policy.has_minimum_role(caller.role, UserRole.ADMIN):
            self.deny(caller, Action.UPDATE)
        data = parse_payload(PasswordReset, payload)

        user = await self.users.get(user_id)
        if user is None:
            raise self.not_found(user_id)
        if not policy.can_manage_user(caller.role, user.role):
            self.deny(caller, Action.UPDATE)
        reason = password_strength_error(data.new_password)
        if reason:
            raise ValidationFailedError("new_password", reason)

        async with transaction(self.db, "reset password", self.entity_label):
            await self.users.apply(
                user,
                {"hashed_password": get_password_hash(data.new_password, self.settings.password_hash_rounds)},
            )
            await self.audit(caller, AuditAction.PASSWORD_RESET, user.id)

        logger.info("Password of user %s reset by user %s", user.id, caller.user_id)
        await self.revocations.revoke_all_user_tokens(user.id)

    async def logout(self, caller: CallerContext, token: str) -> None:
        """Blacklist the token used for this session."""
        await self.revocations.revoke_token(token, caller.user_id)
        async with transaction(self.db, "logout", self.entity_label):
            await self.audit(caller, AuditAction.LOGOUT, caller.user_id)
        logger.info("User %s logged out", caller.user_id)

    async def me(self, caller: CallerContext) -> User:
        user = await self.users.get(caller.user_id)
        if user is None:
            raise AuthenticationError()
        return user
