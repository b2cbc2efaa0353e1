"""
User repository.

Emails are stored lower-cased; every lookup lower-cases its input.
"""

from typing import List, Optional

from sqlalchemy import func, select

from backend.app.models.enums import UserRole
from backend.app.models.user import User
from backend.app.repositories.base import SoftDeleteRepository


class UserRepository(SoftDeleteRepository[User]):
    model = User
    resource = "User"

    async def list(self, roles: Optional[List[UserRole]] = None) -> List[User]:
        stmt = self.live()
        if roles is not None:
            stmt = stmt.where(User.role.in_(roles))
        return await self.fetch_all(stmt.order_by(User.created_at.desc(), User.id.desc()))

    async def get_by_email(self, email: str, include_deleted: bool = False) -> Optional[User]:
        stmt = select(User) if include_deleted else self.live()
        return await self.fetch_one(stmt.where(User.email == email.strip().lower()))

    async def email_taken(self, email: str, exclude_id: Optional[int] = None) -> bool:
        # Any row counts: the column is globally unique, deleted users included
        stmt = select(func.count(User.id)).where(User.email == email.strip().lower())
        if exclude_id is not None:
            stmt = stmt.where(User.id != exclude_id)
        return (await self.scalar(stmt)) > 0
