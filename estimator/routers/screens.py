"""Screen API routes."""
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from estimator.auth.deps import get_current_user, get_user_roles
from estimator.auth.rbac import can_manage_projects
from estimator.database import get_db
from estimator.models.estimation import EstimationDetail
from estimator.models.project import Project, Screen
from estimator.models.user import User
from estimator.schemas.project import ScreenCreate, ScreenResponse, ScreenUpdate

router = APIRouter(prefix="/screens", tags=["screens"])


async def _get_screen(db: AsyncSession, screen_id: int) -> Screen:
    screen = await db.get(Screen, screen_id)
    if not screen:
        raise HTTPException(status_code=404, detail="Screen not found")
    return screen


@router.post("", response_model=ScreenResponse, status_code=201)
async def create_screen(
    data: ScreenCreate,
    db: Annotated[AsyncSession, Depends(get_db)],
    user: Annotated[User, Depends(get_current_user)],
    roles: Annotated[list[str], Depends(get_user_roles)],
):
    if not can_manage_projects(roles):
        raise HTTPException(status_code=403, detail="Cannot edit screens")
    if not await db.get(Project, data.project_id):
        raise HTTPException(status_code=404, detail="Project not found")
    screen = Screen(project_id=data.project_id, name=data.name.strip(), description=data.description)
    db.add(screen)
    await db.flush()
    await db.refresh(screen)
    return ScreenResponse.model_validate(screen)


@router.get("/{screen_id}", response_model=ScreenResponse)
async def get_screen(
    screen_id: int,
    db: Annotated[AsyncSession, Depends(get_db)],
    user: Annotated[User, Depends(get_current_user)],
):
    return ScreenResponse.model_validate(await _get_screen(db, screen_id))


@router.put("/{screen_id}", response_model=ScreenResponse)
async def update_screen(
    screen_id: int,
    data: ScreenUpdate,
    db: Annotated[AsyncSession, Depends(get_db)],
    user: Annotated[User, Depends(get_current_user)],
    roles: Annotated[list[str], Depends(get_user_roles)],
):
    if not can_manage_projects(roles):
        raise HTTPException(status_code=403, detail="Cannot edit screens")
    screen = await _get_screen(db, screen_id)
    if data.name is not None:
        screen.name = data.name.strip()
    if data.description is not None:
        screen.description = data.description
    await db.flush()
    await db.refresh(screen)
    return ScreenResponse.model_validate(screen)


@router.delete("/{screen_id}", status_code=204)
async def delete_screen(
    screen_id: int,
    db: Annotated[AsyncSession, Depends(get_db)],
    user: Annotated[User, Depends(get_current_user)],
    roles: Annotated[list[str], Depends(get_user_roles)],
):
    if not can_manage_projects(roles):
        raise HTTPException(status_code=403, detail="Cannot edit screens")
    screen = await _get_screen(db, screen_id)
    in_use = await db.execute(select(func.count(EstimationDetail.id)).where(EstimationDetail.screen_id == screen_id))
    if in_use.scalar_one() > 0:
        raise HTTPException(status_code=409, detail="Screen is used by existing estimations")
    await db.delete(screen)
