"""Complexity and screen type master data."""
from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from estimator.errors import ConflictError, NotFoundError, ValidationError
from estimator.models.estimation import EstimationDetail
from estimator.models.master import ComplexityLevel, ScreenType
from estimator.schemas.master import MasterItemCreate, MasterItemUpdate
from estimator.services import hour_mapping

MasterModel = type[ComplexityLevel] | type[ScreenType]

_LABELS = {ComplexityLevel: "Complexity", ScreenType: "Screen type"}


def _detail_column(model: MasterModel):
    if model is ComplexityLevel:
        return EstimationDetail.complexity_id
    return EstimationDetail.screen_type_id


async def list_complexity_levels(db: AsyncSession) -> list[ComplexityLevel]:
    result = await db.execute(select(ComplexityLevel).order_by(ComplexityLevel.hours, ComplexityLevel.name))
    return list(result.scalars().all())


async def list_screen_types(db: AsyncSession) -> list[ScreenType]:
    result = await db.execute(select(ScreenType).order_by(ScreenType.hours, ScreenType.name))
    return list(result.scalars().all())


async def get_item(db: AsyncSession, model: MasterModel, item_id: int):
    item = await db.get(model, item_id)
    if not item:
        raise NotFoundError(f"{_LABELS[model]} not found")
    return item


async def _ensure_name_free(db: AsyncSession, model: MasterModel, name: str, exclude_id: int | None = None) -> None:
    stmt = select(model.id).where(model.name == name)
    if exclude_id is not None:
        stmt = stmt.where(model.id != exclude_id)
    if (await db.execute(stmt)).scalar_one_or_none() is not None:
        raise ConflictError(f"{_LABELS[model]} '{name}' already exists")


async def _flush_unique(db: AsyncSession, model: MasterModel, name: str) -> None:
    try:
        await db.flush()
    except IntegrityError:
        raise ConflictError(f"{_LABELS[model]} '{name}' already exists") from None


async def create_item(db: AsyncSession, model: MasterModel, data: MasterItemCreate):
    await _ensure_name_free(db, model, data.name)
    item = model(name=data.name, hours=data.hours, description=data.description)
    db.add(item)
    await _flush_unique(db, model, data.name)
    await db.refresh(item)
    return item


async def update_item(db: AsyncSession, model: MasterModel, item_id: int, data: MasterItemUpdate):
    """Partial update. A rename carries the hour mapping keys along."""
    item = await get_item(db, model, item_id)
    changes = data.model_dump(exclude_unset=True)
    if "hours" in changes and (changes["hours"] is None or changes["hours"] <= 0):
        raise ValidationError("Hours must be a positive integer")
    new_name = changes.pop("name", None)
    if new_name and new_name != item.name:
        await _ensure_name_free(db, model, new_name, exclude_id=item.id)
        if model is ComplexityLevel:
            await hour_mapping.rename_complexity(db, item.name, new_name)
        else:
            await hour_mapping.rename_screen_type(db, item.name, new_name)
        item.name = new_name
    for k, v in changes.items():
        if v is not None or k == "description":
            setattr(item, k, v)
    await _flush_unique(db, model, item.name)
    await db.refresh(item)
    return item


async def delete_item(db: AsyncSession, model: MasterModel, item_id: int) -> None:
    """Refused while any estimation detail references the row. Its hour mappings go with it."""
    item = await get_item(db, model, item_id)
    column = _detail_column(model)
    in_use = await db.execute(select(func.count(EstimationDetail.id)).where(column == item.id))
    if in_use.scalar_one() > 0:
        raise ConflictError(f"{_LABELS[model]} '{item.name}' is used by existing estimations")
    if model is ComplexityLevel:
        await hour_mapping.delete_mappings_for_complexity(db, item.name)
    else:
        await hour_mapping.delete_mappings_for_screen_type(db, item.name)
    await db.delete(item)
    await db.flush()
