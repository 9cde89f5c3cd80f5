"""Estimation record store.

An estimation header and its detail rows are written as one unit: if anything fails
after the header insert, the whole write is rolled back. Line hours are snapshotted,
later hour mapping edits never touch persisted details.
"""
import logging
import re
from collections.abc import Sequence

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from estimator.config import get_settings
from estimator.engine.aggregator import estimated_days, format_days, total_hours
from estimator.engine.calculator import EstimationCalculator
from estimator.errors import NotFoundError, ValidationError
from estimator.models.estimation import Estimation, EstimationDetail
from estimator.models.master import ComplexityLevel, ScreenType
from estimator.models.project import Project, Screen
from estimator.models.user import User
from estimator.schemas.estimation import (
    EstimationDetailCreate,
    EstimationDetailResponse,
    EstimationHeaderCreate,
    EstimationResponse,
    EstimationWithDetails,
)
from estimator.services.hour_mapping import load_hour_mapping_table

logger = logging.getLogger(__name__)

VERSION_PATTERN = re.compile(r"^v?\d+(\.\d+)*$")


def _validate_header(header: EstimationHeaderCreate) -> tuple[int, str, str]:
    if header.project_id is None:
        raise ValidationError("Project is required")
    name = (header.name or "").strip()
    if not name:
        raise ValidationError("Estimation name is required")
    version = (header.version_number or "").strip()
    if not version:
        raise ValidationError("Version number is required")
    if not VERSION_PATTERN.match(version):
        raise ValidationError(f"Invalid version number '{version}', expected a format like v1.0 or 1.0.0")
    if header.total_hours is not None and header.total_hours < 0:
        raise ValidationError("Total hours cannot be negative")
    return header.project_id, name, version


async def _load_by_ids(db: AsyncSession, model, ids: set[int], label: str) -> dict:
    result = await db.execute(select(model).where(model.id.in_(sorted(ids))))
    found = {row.id: row for row in result.scalars().all()}
    missing = sorted(ids - found.keys())
    if missing:
        raise NotFoundError(f"{label} {missing[0]} not found")
    return found


async def _insert_details(db: AsyncSession, estimation_id: int, rows: list[EstimationDetail]) -> None:
    for row in rows:
        row.estimation_id = estimation_id
        db.add(row)
    await db.flush()


async def create_estimation(
    db: AsyncSession,
    header: EstimationHeaderCreate,
    details: Sequence[EstimationDetailCreate],
    created_by: int,
    calculator: EstimationCalculator | None = None,
) -> Estimation:
    """Validate, price and persist an estimation with its line items."""
    settings = get_settings()
    project_id, name, version = _validate_header(header)
    if not details:
        raise ValidationError("An estimation needs at least one screen")

    project = await db.get(Project, project_id)
    if not project:
        raise NotFoundError(f"Project {project_id} not found")
    screens = await _load_by_ids(db, Screen, {d.screen_id for d in details}, "Screen")
    for screen in screens.values():
        if screen.project_id != project_id:
            raise NotFoundError(f"Screen {screen.id} not found in project {project_id}")
    complexities = await _load_by_ids(db, ComplexityLevel, {d.complexity_id for d in details}, "Complexity")
    screen_types = await _load_by_ids(db, ScreenType, {d.screen_type_id for d in details}, "Screen type")

    rows = []
    for d in details:
        if d.calculated_hours is None:
            if calculator is None:
                calculator = EstimationCalculator(await load_hour_mapping_table(db))
            hours = calculator.calculate(complexities[d.complexity_id].name, screen_types[d.screen_type_id].name)
        elif d.calculated_hours < 0:
            raise ValidationError("Calculated hours cannot be negative")
        else:
            hours = d.calculated_hours
        rows.append(EstimationDetail(
            screen_id=d.screen_id,
            complexity_id=d.complexity_id,
            screen_type_id=d.screen_type_id,
            calculated_hours=hours,
        ))

    computed_total = total_hours(r.calculated_hours for r in rows)
    submitted_total = header.total_hours
    if submitted_total is None:
        submitted_total = computed_total
    elif submitted_total != computed_total:
        if settings.verify_submitted_total:
            logger.warning(
                "Rejected estimation %r for project %s: submitted total %dh, details sum to %dh",
                name,
                project_id,
                submitted_total,
                computed_total,
            )
            raise ValidationError(
                f"Total hours {submitted_total} does not match the sum of screen hours {computed_total}"
            )
        logger.warning(
            "Estimation %r total %dh differs from details sum %dh, keeping submitted value",
            name,
            submitted_total,
            computed_total,
        )

    estimation = Estimation(
        project_id=project_id,
        name=name,
        version_number=version,
        total_hours=submitted_total,
        notes=header.notes,
        created_by=created_by,
    )
    try:
        db.add(estimation)
        await db.flush()
        await _insert_details(db, estimation.id, rows)
        await db.refresh(estimation)
    except Exception:
        await db.rollback()
        raise
    logger.info(
        "Created estimation %d %r v%s for project %d: %d screens, %dh",
        estimation.id,
        name,
        version,
        project_id,
        len(rows),
        estimation.total_hours,
    )
    return estimation


def _to_response(estimation: Estimation, project_name: str | None, creator_name: str | None) -> EstimationResponse:
    days = estimated_days(estimation.total_hours)
    return EstimationResponse(
        id=estimation.id,
        project_id=estimation.project_id,
        project_name=project_name,
        name=estimation.name,
        version_number=estimation.version_number,
        total_hours=estimation.total_hours,
        estimated_days=days,
        estimated_days_label=format_days(days),
        notes=estimation.notes,
        created_by=estimation.created_by,
        creator_name=creator_name,
        created_at=estimation.created_at.isoformat() if estimation.created_at else "",
    )


def _header_query():
    return (
        select(Estimation, Project.name, User.full_name)
        .outerjoin(Project, Estimation.project_id == Project.id)
        .outerjoin(User, Estimation.created_by == User.id)
    )


async def list_estimations(db: AsyncSession, project_id: int | None = None) -> list[EstimationResponse]:
    """Headers, newest first."""
    stmt = _header_query().order_by(Estimation.created_at.desc(), Estimation.id.desc())
    if project_id is not None:
        stmt = stmt.where(Estimation.project_id == project_id)
    result = await db.execute(stmt)
    return [_to_response(e, project_name, creator) for e, project_name, creator in result.all()]


async def get_estimation_details(db: AsyncSession, estimation_id: int) -> list[EstimationDetailResponse]:
    result = await db.execute(
        select(
            EstimationDetail,
            Screen.name,
            ComplexityLevel.name,
            ComplexityLevel.hours,
            ScreenType.name,
            ScreenType.hours,
        )
        .outerjoin(Screen, EstimationDetail.screen_id == Screen.id)
        .outerjoin(ComplexityLevel, EstimationDetail.complexity_id == ComplexityLevel.id)
        .outerjoin(ScreenType, EstimationDetail.screen_type_id == ScreenType.id)
        .where(EstimationDetail.estimation_id == estimation_id)
        .order_by(EstimationDetail.id)
    )
    return [
        EstimationDetailResponse(
            id=d.id,
            screen_id=d.screen_id,
            screen_name=screen_name,
            complexity_id=d.complexity_id,
            complexity_name=complexity_name,
            complexity_hours=complexity_hours,
            screen_type_id=d.screen_type_id,
            screen_type_name=screen_type_name,
            screen_type_hours=screen_type_hours,
            calculated_hours=d.calculated_hours,
        )
        for d, screen_name, complexity_name, complexity_hours, screen_type_name, screen_type_hours in result.all()
    ]


async def get_estimation(db: AsyncSession, estimation_id: int) -> EstimationWithDetails:
    result = await db.execute(_header_query().where(Estimation.id == estimation_id))
    row = result.first()
    if row is None:
        raise NotFoundError("Estimation not found")
    estimation, project_name, creator = row
    header = _to_response(estimation, project_name, creator)
    details = await get_estimation_details(db, estimation_id)
    return EstimationWithDetails(**header.model_dump(), details=details)
