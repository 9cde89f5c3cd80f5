"""Shared fixtures: an isolated SQLite database per test, seeded master data and an API client."""
import os

os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")

from dataclasses import dataclass

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from estimator.auth.jwt import create_access_token
from estimator.database import Base, create_engine, get_db
from estimator.main import app
from estimator.models import ComplexityLevel, HourMapping, Project, Role, Screen, ScreenType, User, UserRole


@dataclass
class SeedData:
    admin_id: int
    estimator_id: int
    viewer_id: int
    project_id: int
    other_project_id: int
    screen_ids: list[int]
    other_screen_id: int
    complexity_ids: dict[str, int]
    screen_type_ids: dict[str, int]
    role_ids: dict[str, int]


HOUR_MATRIX = {
    ("Simple", "Static"): 4,
    ("Simple", "Dynamic"): 8,
    ("Medium", "Static"): 8,
    ("Medium", "Dynamic"): 12,
    ("Complex", "Dynamic"): 20,
}


@pytest.fixture
async def session_maker(tmp_path):
    engine = create_engine(f"sqlite+aiosqlite:///{tmp_path / 'test.db'}")
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    await engine.dispose()


@pytest.fixture
async def db(session_maker):
    async with session_maker() as session:
        yield session


@pytest.fixture
async def seed(session_maker) -> SeedData:
    async with session_maker() as s:
        roles = {name: Role(name=name) for name in ("admin", "estimator", "viewer")}
        s.add_all(roles.values())
        users = {
            name: User(email=f"{name}@example.com", hashed_password="unused", full_name=f"{name.title()} User")
            for name in roles
        }
        s.add_all(users.values())
        await s.flush()
        for name, user in users.items():
            s.add(UserRole(user_id=user.id, role_id=roles[name].id))

        project = Project(name="Portal", description="Customer portal", created_by=users["admin"].id)
        other = Project(name="Back office", created_by=users["admin"].id)
        s.add_all([project, other])
        await s.flush()
        screens = [Screen(project_id=project.id, name=n) for n in ("Login", "Dashboard", "Settings")]
        other_screen = Screen(project_id=other.id, name="Reports")
        s.add_all([*screens, other_screen])

        complexities = [ComplexityLevel(name=n, hours=h) for n, h in (("Simple", 4), ("Medium", 8), ("Complex", 16))]
        screen_types = [ScreenType(name=n, hours=h) for n, h in (("Static", 2), ("Dynamic", 8), ("Legacy", 6))]
        s.add_all([*complexities, *screen_types])
        for (c, st), hours in HOUR_MATRIX.items():
            s.add(HourMapping(complexity_name=c, screen_type_name=st, hours=hours))
        await s.commit()

        return SeedData(
            admin_id=users["admin"].id,
            estimator_id=users["estimator"].id,
            viewer_id=users["viewer"].id,
            project_id=project.id,
            other_project_id=other.id,
            screen_ids=[sc.id for sc in screens],
            other_screen_id=other_screen.id,
            complexity_ids={c.name: c.id for c in complexities},
            screen_type_ids={st.name: st.id for st in screen_types},
            role_ids={name: role.id for name, role in roles.items()},
        )


@pytest.fixture
async def client(session_maker):
    async def override_get_db():
        async with session_maker() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_db] = override_get_db
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()


def auth_headers(user_id: int) -> dict[str, str]:
    return {"Authorization": f"Bearer {create_access_token(user_id)}"}


@pytest.fixture
def admin_headers(seed):
    return auth_headers(seed.admin_id)


@pytest.fixture
def estimator_headers(seed):
    return auth_headers(seed.estimator_id)


@pytest.fixture
def viewer_headers(seed):
    return auth_headers(seed.viewer_id)
