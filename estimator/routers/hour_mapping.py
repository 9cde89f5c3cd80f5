"""Hour mapping API routes - the complexity x screen type matrix."""
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession

from estimator.auth.deps import get_current_user, get_user_roles
from estimator.auth.rbac import can_manage_master_data
from estimator.database import get_db
from estimator.models.audit import AuditLog
from estimator.models.user import User
from estimator.schemas.hour_mapping import HourMappingCreate, HourMappingResponse, HourMappingUpdate
from estimator.services import hour_mapping

router = APIRouter(prefix="/hour-mapping", tags=["hour-mapping"])


@router.get("", response_model=list[HourMappingResponse])
async def list_hour_mappings(
    db: Annotated[AsyncSession, Depends(get_db)],
    user: Annotated[User, Depends(get_current_user)],
):
    return [HourMappingResponse.model_validate(m) for m in await hour_mapping.list_all_mappings(db)]


@router.post("", response_model=HourMappingResponse, status_code=201)
async def create_hour_mapping(
    data: HourMappingCreate,
    db: Annotated[AsyncSession, Depends(get_db)],
    user: Annotated[User, Depends(get_current_user)],
    roles: Annotated[list[str], Depends(get_user_roles)],
):
    if not can_manage_master_data(roles):
        raise HTTPException(status_code=403, detail="Cannot manage hour mappings")
    mapping = await hour_mapping.create_mapping(db, data.complexity_name, data.screen_type_name, data.hours)
    db.add(AuditLog(
        user_id=user.id,
        action="create",
        entity_type="hour_mapping",
        entity_id=mapping.id,
        new_value=str(mapping.hours),
    ))
    return HourMappingResponse.model_validate(mapping)


@router.put("/{complexity_name}/{screen_type_name}", response_model=HourMappingResponse)
async def update_hour_mapping(
    complexity_name: str,
    screen_type_name: str,
    data: HourMappingUpdate,
    db: Annotated[AsyncSession, Depends(get_db)],
    user: Annotated[User, Depends(get_current_user)],
    roles: Annotated[list[str], Depends(get_user_roles)],
):
    """Set hours for a pair, creating the row if needed. Existing estimations keep their hours."""
    if not can_manage_master_data(roles):
        raise HTTPException(status_code=403, detail="Cannot manage hour mappings")
    mapping, previous = await hour_mapping.upsert_mapping(db, complexity_name, screen_type_name, data.hours)
    db.add(AuditLog(
        user_id=user.id,
        action="update",
        entity_type="hour_mapping",
        entity_id=mapping.id,
        old_value=str(previous) if previous is not None else None,
        new_value=str(mapping.hours),
    ))
    return HourMappingResponse.model_validate(mapping)


@router.delete("/{complexity_name}/{screen_type_name}", status_code=204)
async def delete_hour_mapping(
    complexity_name: str,
    screen_type_name: str,
    db: Annotated[AsyncSession, Depends(get_db)],
    user: Annotated[User, Depends(get_current_user)],
    roles: Annotated[list[str], Depends(get_user_roles)],
):
    if not can_manage_master_data(roles):
        raise HTTPException(status_code=403, detail="Cannot manage hour mappings")
    await hour_mapping.delete_mapping(db, complexity_name, screen_type_name)
    db.add(AuditLog(
        user_id=user.id,
        action="delete",
        entity_type="hour_mapping",
        old_value=f"{complexity_name}/{screen_type_name}",
    ))
