"""
Database seeding script for initial users.

Creates one user per role plus a driver profile for the DRIVER user.
Run this script after database is set up but before first use:

    python -m backend.seed_users
"""

import asyncio
from datetime import date, timedelta

from backend.app.core.config import Settings, get_settings
from backend.app.core.security import get_password_hash
from backend.app.db.session import Database
from backend.app.models.driver import Driver
from backend.app.models.enums import DriverStatus, UserRole, UserStatus
from backend.app.models.user import User
from backend.app.repositories.user_repository import UserRepository

SEED_USERS = (
    # email, name, role, password
    ("superadmin@fleet.example.com", "Super Admin", UserRole.SUPER_ADMIN, "SuperAdmin#2024"),
    ("admin@fleet.example.com", "Fleet Admin", UserRole.ADMIN, "Admin#2024"),
    ("manager@fleet.example.com", "Operations Manager", UserRole.MANAGER, "Manager#2024"),
    ("driver@fleet.example.com", "Demo Driver", UserRole.DRIVER, "Driver#2024"),
)


async def seed_users(settings: Settings = None) -> int:
    """
    Seed initial users with different roles.

    Existing emails are skipped, so the script can be re-run safely.

    Returns:
        Number of users created
    """
    settings = settings or get_settings()
    database = Database(settings)
    await database.create_all()
    created = 0

    try:
        async with database.session() as db:
            print("🌱 Starting user seeding...")
            users = UserRepository(db)

            for email, name, role, password in SEED_USERS:
                if await users.get_by_email(email, include_deleted=True) is not None:
                    print(f"ℹ️  {role.value} user {email} already exists, skipping")
                    continue

                user = User(
                    email=email,
                    hashed_password=get_password_hash(password, settings.password_hash_rounds),
                    name=name,
                    phone="",
                    role=role,
                    status=UserStatus.ACTIVE,
                )
                db.add(user)
                await db.flush()

                if role == UserRole.DRIVER:
                    db.add(Driver(
                        user_id=user.id,
                        status=DriverStatus.AVAILABLE,
                        license_number="DEMO-0001",
                        license_expiry=date.today() + timedelta(days=365),
                    ))

                created += 1
                print(f"✅ Created {role.value} user ({email} / {password})")

            await db.commit()
    finally:
        await database.dispose()

    print(f"\n🎉 User seeding completed: {created} user(s) created")
    return created


if __name__ == "__main__":
    asyncio.run(seed_users())
