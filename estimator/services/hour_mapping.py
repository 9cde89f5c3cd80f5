"""Hour mapping provider backed by the database.

The calculator only ever sees a HourMappingTable snapshot loaded here, so a request
computes every line against one consistent matrix.
"""
import logging

from sqlalchemy import delete, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from estimator.engine.calculator import HourMappingTable
from estimator.errors import ConflictError, NotFoundError, ValidationError
from estimator.models.hour_mapping import HourMapping
from estimator.models.master import ComplexityLevel, ScreenType

logger = logging.getLogger(__name__)


async def list_all_mappings(db: AsyncSession) -> list[HourMapping]:
    result = await db.execute(
        select(HourMapping).order_by(HourMapping.complexity_name, HourMapping.screen_type_name)
    )
    return list(result.scalars().all())


async def load_hour_mapping_table(db: AsyncSession) -> HourMappingTable:
    return HourMappingTable.from_rows(await list_all_mappings(db))


async def get_mapping(db: AsyncSession, complexity_name: str, screen_type_name: str) -> HourMapping | None:
    result = await db.execute(
        select(HourMapping).where(
            HourMapping.complexity_name == complexity_name,
            HourMapping.screen_type_name == screen_type_name,
        )
    )
    return result.scalar_one_or_none()


async def lookup_hours(db: AsyncSession, complexity_name: str, screen_type_name: str) -> int | None:
    mapping = await get_mapping(db, complexity_name.strip(), screen_type_name.strip())
    return mapping.hours if mapping else None


async def _ensure_master_names_exist(db: AsyncSession, complexity_name: str, screen_type_name: str) -> None:
    complexity = await db.execute(select(ComplexityLevel.id).where(ComplexityLevel.name == complexity_name))
    if complexity.scalar_one_or_none() is None:
        raise NotFoundError(f"Complexity '{complexity_name}' not found")
    screen_type = await db.execute(select(ScreenType.id).where(ScreenType.name == screen_type_name))
    if screen_type.scalar_one_or_none() is None:
        raise NotFoundError(f"Screen type '{screen_type_name}' not found")


async def upsert_mapping(
    db: AsyncSession,
    complexity_name: str,
    screen_type_name: str,
    hours: int,
) -> tuple[HourMapping, int | None]:
    """Insert or overwrite the hours for a pair. Returns the row and the previous hours (None if new)."""
    complexity_name = (complexity_name or "").strip()
    screen_type_name = (screen_type_name or "").strip()
    if not complexity_name or not screen_type_name:
        raise ValidationError("Complexity name and screen type name are required")
    if hours is None or hours < 0:
        raise ValidationError("Hours must be zero or greater")
    await _ensure_master_names_exist(db, complexity_name, screen_type_name)

    mapping = await get_mapping(db, complexity_name, screen_type_name)
    previous = mapping.hours if mapping else None
    if mapping:
        mapping.hours = hours
    else:
        mapping = HourMapping(
            complexity_name=complexity_name,
            screen_type_name=screen_type_name,
            hours=hours,
        )
        db.add(mapping)
    await db.flush()
    await db.refresh(mapping)
    logger.info(
        "Hour mapping %s/%s set to %dh (was %s)",
        complexity_name,
        screen_type_name,
        hours,
        previous,
    )
    return mapping, previous


async def create_mapping(db: AsyncSession, complexity_name: str, screen_type_name: str, hours: int) -> HourMapping:
    """Insert a new pair. ConflictError if the pair already has hours."""
    complexity_name = (complexity_name or "").strip()
    screen_type_name = (screen_type_name or "").strip()
    if await get_mapping(db, complexity_name, screen_type_name):
        raise ConflictError("Hour mapping already exists, use PUT to change it")
    try:
        mapping, _ = await upsert_mapping(db, complexity_name, screen_type_name, hours)
    except IntegrityError:
        raise ConflictError("Hour mapping already exists, use PUT to change it") from None
    return mapping


async def delete_mapping(db: AsyncSession, complexity_name: str, screen_type_name: str) -> None:
    mapping = await get_mapping(db, complexity_name.strip(), screen_type_name.strip())
    if not mapping:
        raise NotFoundError("Hour mapping not found")
    await db.delete(mapping)
    await db.flush()


async def rename_complexity(db: AsyncSession, old_name: str, new_name: str) -> None:
    await db.execute(
        update(HourMapping)
        .where(HourMapping.complexity_name == old_name)
        .values(complexity_name=new_name)
        .execution_options(synchronize_session="fetch")
    )


async def rename_screen_type(db: AsyncSession, old_name: str, new_name: str) -> None:
    await db.execute(
        update(HourMapping)
        .where(HourMapping.screen_type_name == old_name)
        .values(screen_type_name=new_name)
        .execution_options(synchronize_session="fetch")
    )


async def delete_mappings_for_complexity(db: AsyncSession, name: str) -> None:
    await db.execute(delete(HourMapping).where(HourMapping.complexity_name == name))


async def delete_mappings_for_screen_type(db: AsyncSession, name: str) -> None:
    await db.execute(delete(HourMapping).where(HourMapping.screen_type_name == name))
