"""Dashboard and report API routes."""
from typing import Annotated

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from estimator.auth.deps import get_current_user
from estimator.database import get_db
from estimator.models.user import User
from estimator.schemas.dashboard import (
    ComplexityDistribution,
    DashboardStats,
    ProjectHours,
    ReportSummary,
    ScreenTypeDistribution,
)
from estimator.services import reports

router = APIRouter(tags=["dashboard"])


@router.get("/dashboard/stats", response_model=DashboardStats)
async def get_stats(
    db: Annotated[AsyncSession, Depends(get_db)],
    user: Annotated[User, Depends(get_current_user)],
):
    return await reports.dashboard_stats(db)


@router.get("/dashboard/project-hours", response_model=list[ProjectHours])
async def get_project_hours(
    db: Annotated[AsyncSession, Depends(get_db)],
    user: Annotated[User, Depends(get_current_user)],
):
    return await reports.project_hours(db)


@router.get("/dashboard/screen-type-distribution", response_model=list[ScreenTypeDistribution])
async def get_screen_type_distribution(
    db: Annotated[AsyncSession, Depends(get_db)],
    user: Annotated[User, Depends(get_current_user)],
):
    return await reports.screen_type_distribution(db)


@router.get("/dashboard/complexity-distribution", response_model=list[ComplexityDistribution])
async def get_complexity_distribution(
    db: Annotated[AsyncSession, Depends(get_db)],
    user: Annotated[User, Depends(get_current_user)],
):
    return await reports.complexity_distribution(db)


@router.get("/reports/summary", response_model=ReportSummary)
async def get_report_summary(
    db: Annotated[AsyncSession, Depends(get_db)],
    user: Annotated[User, Depends(get_current_user)],
    project_id: int | None = None,
    complexity_id: int | None = None,
):
    return await reports.report_summary(db, project_id=project_id, complexity_id=complexity_id)
