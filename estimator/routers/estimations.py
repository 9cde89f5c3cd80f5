"""Estimation API routes."""
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession

from estimator.auth.deps import get_current_user, get_user_roles
from estimator.auth.rbac import can_create_estimation
from estimator.database import get_db
from estimator.engine.aggregator import summarize
from estimator.engine.calculator import EstimationCalculator
from estimator.models.audit import AuditLog
from estimator.models.user import User
from estimator.schemas.estimation import (
    CalculationRequest,
    CalculationResult,
    EstimationCreate,
    EstimationDetailResponse,
    EstimationResponse,
    EstimationWithDetails,
    LineResult,
)
from estimator.services import estimation_store
from estimator.services.hour_mapping import load_hour_mapping_table

router = APIRouter(prefix="/estimations", tags=["estimations"])


@router.get("", response_model=list[EstimationResponse])
async def list_estimations(
    db: Annotated[AsyncSession, Depends(get_db)],
    user: Annotated[User, Depends(get_current_user)],
):
    return await estimation_store.list_estimations(db)


@router.post("", response_model=EstimationWithDetails, status_code=201)
async def create_estimation(
    data: EstimationCreate,
    db: Annotated[AsyncSession, Depends(get_db)],
    user: Annotated[User, Depends(get_current_user)],
    roles: Annotated[list[str], Depends(get_user_roles)],
):
    if not can_create_estimation(roles):
        raise HTTPException(status_code=403, detail="Cannot create estimations")
    estimation = await estimation_store.create_estimation(db, data.estimation, data.details, created_by=user.id)
    db.add(AuditLog(
        user_id=user.id,
        action="create",
        entity_type="estimation",
        entity_id=estimation.id,
        new_value=f"{estimation.name} v{estimation.version_number}: {estimation.total_hours}h",
    ))
    await db.flush()
    return await estimation_store.get_estimation(db, estimation.id)


@router.post("/calculate", response_model=CalculationResult)
async def calculate_estimation(
    data: CalculationRequest,
    db: Annotated[AsyncSession, Depends(get_db)],
    user: Annotated[User, Depends(get_current_user)],
):
    """Live totals for a set of lines, nothing is persisted."""
    calculator = EstimationCalculator(await load_hour_mapping_table(db))
    lines = calculator.calculate_lines((item.complexity_name, item.screen_type_name) for item in data.lines)
    summary = summarize(line.hours for line in lines)
    return CalculationResult(
        lines=[
            LineResult(
                complexity_name=line.complexity_name,
                screen_type_name=line.screen_type_name,
                hours=line.hours,
                mapped=line.mapped,
            )
            for line in lines
        ],
        total_hours=summary.total_hours,
        estimated_days=summary.estimated_days,
        estimated_days_label=summary.estimated_days_label,
    )


@router.get("/{estimation_id}", response_model=EstimationWithDetails)
async def get_estimation(
    estimation_id: int,
    db: Annotated[AsyncSession, Depends(get_db)],
    user: Annotated[User, Depends(get_current_user)],
):
    return await estimation_store.get_estimation(db, estimation_id)


@router.get("/{estimation_id}/details", response_model=list[EstimationDetailResponse])
async def get_estimation_details(
    estimation_id: int,
    db: Annotated[AsyncSession, Depends(get_db)],
    user: Annotated[User, Depends(get_current_user)],
):
    # Raises NotFoundError for unknown ids instead of returning an empty list
    await estimation_store.get_estimation(db, estimation_id)
    return await estimation_store.get_estimation_details(db, estimation_id)
