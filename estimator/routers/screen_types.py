"""Screen type master API routes."""
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession

from estimator.auth.deps import get_current_user, get_user_roles
from estimator.auth.rbac import can_manage_master_data
from estimator.database import get_db
from estimator.models.audit import AuditLog
from estimator.models.master import ScreenType
from estimator.models.user import User
from estimator.schemas.master import MasterItemCreate, MasterItemResponse, MasterItemUpdate
from estimator.services import master_data

router = APIRouter(prefix="/screen-types", tags=["screen-types"])


@router.get("", response_model=list[MasterItemResponse])
async def list_screen_types(
    db: Annotated[AsyncSession, Depends(get_db)],
    user: Annotated[User, Depends(get_current_user)],
):
    return [MasterItemResponse.model_validate(s) for s in await master_data.list_screen_types(db)]


@router.post("", response_model=MasterItemResponse, status_code=201)
async def create_screen_type(
    data: MasterItemCreate,
    db: Annotated[AsyncSession, Depends(get_db)],
    user: Annotated[User, Depends(get_current_user)],
    roles: Annotated[list[str], Depends(get_user_roles)],
):
    if not can_manage_master_data(roles):
        raise HTTPException(status_code=403, detail="Cannot manage screen types")
    item = await master_data.create_item(db, ScreenType, data)
    db.add(AuditLog(
        user_id=user.id,
        action="create",
        entity_type="screen_type",
        entity_id=item.id,
        new_value=f"{item.name}={item.hours}h",
    ))
    return MasterItemResponse.model_validate(item)


@router.put("/{screen_type_id}", response_model=MasterItemResponse)
async def update_screen_type(
    screen_type_id: int,
    data: MasterItemUpdate,
    db: Annotated[AsyncSession, Depends(get_db)],
    user: Annotated[User, Depends(get_current_user)],
    roles: Annotated[list[str], Depends(get_user_roles)],
):
    if not can_manage_master_data(roles):
        raise HTTPException(status_code=403, detail="Cannot manage screen types")
    before = await master_data.get_item(db, ScreenType, screen_type_id)
    old_value = f"{before.name}={before.hours}h"
    item = await master_data.update_item(db, ScreenType, screen_type_id, data)
    db.add(AuditLog(
        user_id=user.id,
        action="update",
        entity_type="screen_type",
        entity_id=item.id,
        old_value=old_value,
        new_value=f"{item.name}={item.hours}h",
    ))
    return MasterItemResponse.model_validate(item)


@router.delete("/{screen_type_id}", status_code=204)
async def delete_screen_type(
    screen_type_id: int,
    db: Annotated[AsyncSession, Depends(get_db)],
    user: Annotated[User, Depends(get_current_user)],
    roles: Annotated[list[str], Depends(get_user_roles)],
):
    if not can_manage_master_data(roles):
        raise HTTPException(status_code=403, detail="Cannot manage screen types")
    await master_data.delete_item(db, ScreenType, screen_type_id)
    db.add(AuditLog(
        user_id=user.id,
        action="delete",
        entity_type="screen_type",
        entity_id=screen_type_id,
    ))
