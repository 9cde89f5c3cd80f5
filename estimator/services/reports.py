"""Dashboard aggregates and report summaries."""
from decimal import Decimal, ROUND_HALF_UP

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from estimator.engine.aggregator import estimated_days, format_days
from estimator.models.estimation import Estimation, EstimationDetail
from estimator.models.master import ComplexityLevel, ScreenType
from estimator.models.project import Project, Screen
from estimator.schemas.dashboard import (
    ComplexityDistribution,
    DashboardStats,
    ProjectHours,
    ReportSummary,
    ScreenTypeDistribution,
)


async def _scalar(db: AsyncSession, stmt) -> int:
    return int((await db.execute(stmt)).scalar_one() or 0)


async def dashboard_stats(db: AsyncSession) -> DashboardStats:
    return DashboardStats(
        total_projects=await _scalar(db, select(func.count(Project.id))),
        total_screens=await _scalar(db, select(func.count(Screen.id))),
        total_estimations=await _scalar(db, select(func.count(Estimation.id))),
        total_hours=await _scalar(db, select(func.coalesce(func.sum(Estimation.total_hours), 0))),
    )


async def project_hours(db: AsyncSession, limit: int = 10) -> list[ProjectHours]:
    """Projects ranked by summed estimation hours."""
    hours = func.coalesce(func.sum(Estimation.total_hours), 0).label("total_hours")
    result = await db.execute(
        select(Project.id, Project.name, hours)
        .outerjoin(Estimation, Estimation.project_id == Project.id)
        .group_by(Project.id, Project.name)
        .order_by(hours.desc(), Project.name)
        .limit(limit)
    )
    return [ProjectHours(project_id=pid, project_name=name, total_hours=int(total)) for pid, name, total in result.all()]


async def screen_type_distribution(db: AsyncSession) -> list[ScreenTypeDistribution]:
    count = func.count(EstimationDetail.id).label("detail_count")
    result = await db.execute(
        select(ScreenType.name, count)
        .outerjoin(EstimationDetail, EstimationDetail.screen_type_id == ScreenType.id)
        .group_by(ScreenType.id, ScreenType.name)
        .order_by(count.desc(), ScreenType.name)
    )
    return [ScreenTypeDistribution(screen_type_name=name, count=int(c)) for name, c in result.all()]


async def complexity_distribution(db: AsyncSession) -> list[ComplexityDistribution]:
    count = func.count(EstimationDetail.id).label("detail_count")
    hours = func.coalesce(func.sum(EstimationDetail.calculated_hours), 0).label("total_hours")
    result = await db.execute(
        select(ComplexityLevel.name, count, hours)
        .outerjoin(EstimationDetail, EstimationDetail.complexity_id == ComplexityLevel.id)
        .group_by(ComplexityLevel.id, ComplexityLevel.name)
        .order_by(count.desc(), ComplexityLevel.name)
    )
    return [
        ComplexityDistribution(complexity_name=name, count=int(c), total_hours=int(h))
        for name, c, h in result.all()
    ]


async def report_summary(
    db: AsyncSession,
    project_id: int | None = None,
    complexity_id: int | None = None,
) -> ReportSummary:
    """Totals over the estimations matching the filters."""
    stmt = select(Estimation.id, Estimation.total_hours)
    if project_id is not None:
        stmt = stmt.where(Estimation.project_id == project_id)
    if complexity_id is not None:
        stmt = stmt.where(
            Estimation.id.in_(
                select(EstimationDetail.estimation_id).where(EstimationDetail.complexity_id == complexity_id)
            )
        )
    rows = (await db.execute(stmt)).all()
    ids = [r.id for r in rows]
    total = sum(r.total_hours for r in rows)
    screens = 0
    if ids:
        screens = await _scalar(
            db, select(func.count(EstimationDetail.id)).where(EstimationDetail.estimation_id.in_(ids))
        )
    avg = 0
    if rows:
        avg = int((Decimal(total) / Decimal(len(rows))).quantize(Decimal(1), rounding=ROUND_HALF_UP))
    days = estimated_days(total)
    return ReportSummary(
        total_estimations=len(rows),
        total_hours=total,
        avg_hours=avg,
        total_screens=screens,
        estimated_days=days,
        estimated_days_label=format_days(days),
    )
