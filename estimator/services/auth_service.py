"""Registration, login and role assignment."""
import logging

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from estimator.auth.jwt import get_password_hash, verify_password
from estimator.auth.rbac import Role as RoleName
from estimator.errors import NotFoundError
from estimator.models.user import Role, User, UserRole
from estimator.schemas.auth import UserCreate, UserLogin, UserResponse

logger = logging.getLogger(__name__)

DEFAULT_ROLE = RoleName.VIEWER.value


async def _get_or_create_role(db: AsyncSession, name: str) -> Role:
    role = (await db.execute(select(Role).where(Role.name == name))).scalar_one_or_none()
    if role is None:
        role = Role(name=name)
        db.add(role)
        await db.flush()
    return role


async def create_user(db: AsyncSession, data: UserCreate) -> User:
    """Create a user holding only the default (read-only) role."""
    user = User(
        email=data.email,
        hashed_password=get_password_hash(data.password),
        full_name=data.full_name,
    )
    db.add(user)
    await db.flush()
    role = await _get_or_create_role(db, DEFAULT_ROLE)
    db.add(UserRole(user_id=user.id, role_id=role.id))
    await db.flush()
    logger.info("Registered user %s with role %s", user.email, DEFAULT_ROLE)
    return await find_user_with_roles(db, user.id, refresh=True)


async def find_user_with_roles(db: AsyncSession, user_id: int, refresh: bool = False) -> User | None:
    """Load a user with roles eagerly. refresh=True overwrites already-loaded instances."""
    stmt = (
        select(User)
        .where(User.id == user_id)
        .options(selectinload(User.user_roles).selectinload(UserRole.role))
    )
    if refresh:
        stmt = stmt.execution_options(populate_existing=True)
    return (await db.execute(stmt)).scalar_one_or_none()


async def authenticate_user(db: AsyncSession, data: UserLogin) -> User | None:
    result = await db.execute(select(User).where(User.email == data.email))
    user = result.scalar_one_or_none()
    if not user or not verify_password(data.password, user.hashed_password):
        return None
    return await find_user_with_roles(db, user.id)


async def list_roles(db: AsyncSession) -> list[Role]:
    result = await db.execute(select(Role).order_by(Role.name))
    return list(result.scalars().all())


async def set_user_roles(db: AsyncSession, user_id: int, role_ids: list[int]) -> User:
    """Replace a user's roles. Every id must name an existing role."""
    user = await db.get(User, user_id)
    if not user:
        raise NotFoundError("User not found")
    wanted = set(role_ids)
    found = await db.execute(select(Role.id).where(Role.id.in_(sorted(wanted))))
    missing = wanted - set(found.scalars().all())
    if missing:
        raise NotFoundError(f"Role(s) not found: {', '.join(str(i) for i in sorted(missing))}")
    await db.execute(delete(UserRole).where(UserRole.user_id == user_id))
    db.add_all(UserRole(user_id=user_id, role_id=rid) for rid in sorted(wanted))
    await db.flush()
    user = await find_user_with_roles(db, user_id, refresh=True)
    logger.info("Roles of user %s set to %s", user.email, user.role_names)
    return user


def user_to_response(user: User) -> UserResponse:
    return UserResponse(
        id=user.id,
        email=user.email,
        full_name=user.full_name,
        is_active=user.is_active,
        roles=user.role_names,
    )
