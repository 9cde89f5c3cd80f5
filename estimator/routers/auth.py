"""Auth API routes."""
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from estimator.auth.deps import get_current_user, get_user_roles
from estimator.auth.jwt import create_access_token
from estimator.auth.rbac import can_manage_users
from estimator.database import get_db
from estimator.models.audit import AuditLog
from estimator.models.user import User
from estimator.schemas.auth import RoleResponse, Token, UserCreate, UserLogin, UserResponse, UserRolesUpdate
from estimator.services import auth_service

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post("/register", response_model=Token)
async def register(
    data: UserCreate,
    db: Annotated[AsyncSession, Depends(get_db)],
):
    result = await db.execute(select(User).where(User.email == data.email))
    if result.scalar_one_or_none():
        raise HTTPException(status_code=400, detail="Email already registered")
    user = await auth_service.create_user(db, data)
    token = create_access_token(user.id)
    return Token(access_token=token, user=auth_service.user_to_response(user))


@router.post("/login", response_model=Token)
async def login(
    data: UserLogin,
    db: Annotated[AsyncSession, Depends(get_db)],
):
    user = await auth_service.authenticate_user(db, data)
    if not user:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid email or password",
        )
    token = create_access_token(user.id)
    return Token(access_token=token, user=auth_service.user_to_response(user))


@router.get("/me", response_model=UserResponse)
async def me(user: Annotated[User, Depends(get_current_user)]):
    return auth_service.user_to_response(user)


@router.get("/roles", response_model=list[RoleResponse])
async def list_roles(
    db: Annotated[AsyncSession, Depends(get_db)],
    roles: Annotated[list[str], Depends(get_user_roles)],
):
    if not can_manage_users(roles):
        raise HTTPException(status_code=403, detail="Cannot manage users")
    return [RoleResponse.model_validate(r) for r in await auth_service.list_roles(db)]


@router.put("/users/{user_id}/roles", response_model=UserResponse)
async def set_user_roles(
    user_id: int,
    data: UserRolesUpdate,
    db: Annotated[AsyncSession, Depends(get_db)],
    user: Annotated[User, Depends(get_current_user)],
    roles: Annotated[list[str], Depends(get_user_roles)],
):
    if not can_manage_users(roles):
        raise HTTPException(status_code=403, detail="Cannot manage users")
    target = await auth_service.set_user_roles(db, user_id, data.role_ids)
    db.add(AuditLog(
        user_id=user.id,
        action="set_roles",
        entity_type="user",
        entity_id=target.id,
        new_value=",".join(target.role_names),
    ))
    return auth_service.user_to_response(target)
