"""Auth dependencies for FastAPI."""
from typing import Annotated

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from estimator.auth.jwt import decode_user_id
from estimator.database import get_db
from estimator.models.user import User
from estimator.services.auth_service import find_user_with_roles

security = HTTPBearer(auto_error=False)


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


async def get_current_user(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(security)],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> User:
    if not credentials:
        raise _unauthorized("Not authenticated")
    user_id = decode_user_id(credentials.credentials)
    if user_id is None:
        raise _unauthorized("Invalid or expired token")
    user = await find_user_with_roles(db, user_id)
    if not user:
        raise _unauthorized("User not found")
    if not user.is_active:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="User inactive")
    return user


async def get_user_roles(user: Annotated[User, Depends(get_current_user)]) -> list[str]:
    return user.role_names
