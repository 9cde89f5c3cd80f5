"""Project API routes."""
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from estimator.auth.deps import get_current_user, get_user_roles
from estimator.auth.rbac import can_delete_project, can_manage_projects
from estimator.database import get_db
from estimator.models.audit import AuditLog
from estimator.models.estimation import Estimation
from estimator.models.project import Project, Screen
from estimator.models.user import User
from estimator.schemas.estimation import EstimationResponse
from estimator.schemas.project import ProjectCreate, ProjectResponse, ProjectUpdate, ScreenResponse
from estimator.services.estimation_store import list_estimations

router = APIRouter(prefix="/projects", tags=["projects"])


def _to_response(project: Project) -> ProjectResponse:
    return ProjectResponse(
        id=project.id,
        name=project.name,
        description=project.description,
        created_by=project.created_by,
        created_at=project.created_at.isoformat() if project.created_at else "",
    )


async def _get_project(db: AsyncSession, project_id: int) -> Project:
    project = await db.get(Project, project_id)
    if not project:
        raise HTTPException(status_code=404, detail="Project not found")
    return project


@router.get("", response_model=list[ProjectResponse])
async def list_projects(
    db: Annotated[AsyncSession, Depends(get_db)],
    user: Annotated[User, Depends(get_current_user)],
):
    result = await db.execute(select(Project).order_by(Project.created_at.desc(), Project.id.desc()))
    return [_to_response(p) for p in result.scalars().all()]


@router.post("", response_model=ProjectResponse, status_code=201)
async def create_project(
    data: ProjectCreate,
    db: Annotated[AsyncSession, Depends(get_db)],
    user: Annotated[User, Depends(get_current_user)],
    roles: Annotated[list[str], Depends(get_user_roles)],
):
    if not can_manage_projects(roles):
        raise HTTPException(status_code=403, detail="Cannot create project")
    project = Project(name=data.name.strip(), description=data.description, created_by=user.id)
    db.add(project)
    await db.flush()
    db.add(AuditLog(
        user_id=user.id,
        action="create",
        entity_type="project",
        entity_id=project.id,
        new_value=project.name,
    ))
    await db.refresh(project)
    return _to_response(project)


@router.get("/{project_id}", response_model=ProjectResponse)
async def get_project(
    project_id: int,
    db: Annotated[AsyncSession, Depends(get_db)],
    user: Annotated[User, Depends(get_current_user)],
):
    return _to_response(await _get_project(db, project_id))


@router.put("/{project_id}", response_model=ProjectResponse)
async def update_project(
    project_id: int,
    data: ProjectUpdate,
    db: Annotated[AsyncSession, Depends(get_db)],
    user: Annotated[User, Depends(get_current_user)],
    roles: Annotated[list[str], Depends(get_user_roles)],
):
    if not can_manage_projects(roles):
        raise HTTPException(status_code=403, detail="Cannot edit project")
    project = await _get_project(db, project_id)
    old_name = project.name
    if data.name is not None:
        project.name = data.name.strip()
    if data.description is not None:
        project.description = data.description
    db.add(AuditLog(
        user_id=user.id,
        action="update",
        entity_type="project",
        entity_id=project.id,
        old_value=old_name,
        new_value=project.name,
    ))
    await db.flush()
    await db.refresh(project)
    return _to_response(project)


@router.delete("/{project_id}", status_code=204)
async def delete_project(
    project_id: int,
    db: Annotated[AsyncSession, Depends(get_db)],
    user: Annotated[User, Depends(get_current_user)],
    roles: Annotated[list[str], Depends(get_user_roles)],
):
    if not can_delete_project(roles):
        raise HTTPException(status_code=403, detail="Cannot delete project")
    project = await _get_project(db, project_id)
    count = await db.execute(select(func.count(Estimation.id)).where(Estimation.project_id == project_id))
    if count.scalar_one() > 0:
        raise HTTPException(status_code=409, detail="Cannot delete project: it has estimations")
    db.add(AuditLog(
        user_id=user.id,
        action="delete",
        entity_type="project",
        entity_id=project.id,
        old_value=project.name,
    ))
    await db.delete(project)


@router.get("/{project_id}/screens", response_model=list[ScreenResponse])
async def list_project_screens(
    project_id: int,
    db: Annotated[AsyncSession, Depends(get_db)],
    user: Annotated[User, Depends(get_current_user)],
):
    await _get_project(db, project_id)
    result = await db.execute(select(Screen).where(Screen.project_id == project_id).order_by(Screen.name))
    return [ScreenResponse.model_validate(s) for s in result.scalars().all()]


@router.get("/{project_id}/estimations", response_model=list[EstimationResponse])
async def list_project_estimations(
    project_id: int,
    db: Annotated[AsyncSession, Depends(get_db)],
    user: Annotated[User, Depends(get_current_user)],
):
    await _get_project(db, project_id)
    return await list_estimations(db, project_id=project_id)
