"""Seed roles, an admin user, default master data and the default hour matrix."""
import asyncio

from sqlalchemy import select

from estimator.auth.jwt import get_password_hash
from estimator.database import async_session_maker, init_db
from estimator.models.hour_mapping import HourMapping
from estimator.models.master import ComplexityLevel, ScreenType
from estimator.models.user import Role, User, UserRole


ROLES = [
    ("admin", "System administrator"),
    ("estimator", "Maintains projects, master data and estimations"),
    ("viewer", "Read-only viewer"),
]

COMPLEXITIES = [
    ("Simple", 4, "Few fields, no business rules"),
    ("Medium", 8, "Validation and moderate business rules"),
    ("Complex", 16, "Heavy business rules or integrations"),
]

SCREEN_TYPES = [
    ("Static", 2, "Content only"),
    ("Partial Dynamic", 4, "Some data-bound sections"),
    ("Dynamic", 8, "Fully data-driven"),
]

HOUR_MATRIX = {
    ("Simple", "Static"): 4,
    ("Simple", "Partial Dynamic"): 6,
    ("Simple", "Dynamic"): 8,
    ("Medium", "Static"): 8,
    ("Medium", "Partial Dynamic"): 10,
    ("Medium", "Dynamic"): 12,
    ("Complex", "Static"): 12,
    ("Complex", "Partial Dynamic"): 16,
    ("Complex", "Dynamic"): 20,
}


async def seed():
    await init_db()
    async with async_session_maker() as db:
        for name, desc in ROLES:
            r = await db.execute(select(Role).where(Role.name == name))
            if not r.scalar_one_or_none():
                db.add(Role(name=name, description=desc))
        for name, hours, desc in COMPLEXITIES:
            r = await db.execute(select(ComplexityLevel).where(ComplexityLevel.name == name))
            if not r.scalar_one_or_none():
                db.add(ComplexityLevel(name=name, hours=hours, description=desc))
        for name, hours, desc in SCREEN_TYPES:
            r = await db.execute(select(ScreenType).where(ScreenType.name == name))
            if not r.scalar_one_or_none():
                db.add(ScreenType(name=name, hours=hours, description=desc))
        for (complexity, screen_type), hours in HOUR_MATRIX.items():
            r = await db.execute(
                select(HourMapping).where(
                    HourMapping.complexity_name == complexity,
                    HourMapping.screen_type_name == screen_type,
                )
            )
            if not r.scalar_one_or_none():
                db.add(HourMapping(complexity_name=complexity, screen_type_name=screen_type, hours=hours))
        await db.commit()

        admin_role = (await db.execute(select(Role).where(Role.name == "admin"))).scalar_one()
        r = await db.execute(select(User).where(User.email == "admin@estimator.local"))
        if not r.scalar_one_or_none():
            user = User(
                email="admin@estimator.local",
                hashed_password=get_password_hash("admin123"),
                full_name="Admin User",
            )
            db.add(user)
            await db.flush()
            db.add(UserRole(user_id=user.id, role_id=admin_role.id))
        await db.commit()
    print("Seeded roles, master data, hour matrix and admin user (admin@estimator.local / admin123)")


if __name__ == "__main__":
    asyncio.run(seed())
