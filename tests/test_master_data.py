"""Hour mapping provider and master data service tests."""
import pytest
from pydantic import ValidationError as PydanticValidationError

from estimator.errors import ConflictError, NotFoundError, ValidationError
from estimator.models import ComplexityLevel, ScreenType
from estimator.schemas.estimation import EstimationDetailCreate, EstimationHeaderCreate
from estimator.schemas.master import MasterItemCreate, MasterItemUpdate
from estimator.services import estimation_store, hour_mapping, master_data


class TestHourMappingProvider:
    async def test_lookup_hours(self, db, seed):
        assert await hour_mapping.lookup_hours(db, "Medium", "Dynamic") == 12
        assert await hour_mapping.lookup_hours(db, "Complex", "Legacy") is None

    async def test_list_all_mappings_sorted(self, db, seed):
        rows = await hour_mapping.list_all_mappings(db)
        pairs = [(r.complexity_name, r.screen_type_name) for r in rows]
        assert pairs == sorted(pairs)
        assert len(pairs) == 5

    async def test_load_table_matches_rows(self, db, seed):
        table = await hour_mapping.load_hour_mapping_table(db)
        for row in await hour_mapping.list_all_mappings(db):
            assert table.lookup_hours(row.complexity_name, row.screen_type_name) == row.hours

    async def test_upsert_inserts_new_pair(self, db, seed):
        mapping, previous = await hour_mapping.upsert_mapping(db, "Complex", "Legacy", 24)
        assert previous is None
        assert mapping.id is not None
        assert await hour_mapping.lookup_hours(db, "Complex", "Legacy") == 24

    async def test_upsert_overwrites_existing_pair(self, db, seed):
        mapping, previous = await hour_mapping.upsert_mapping(db, "Medium", "Dynamic", 14)
        assert previous == 12
        assert mapping.hours == 14
        assert len(await hour_mapping.list_all_mappings(db)) == 5

    async def test_upsert_rejects_negative_hours(self, db, seed):
        with pytest.raises(ValidationError):
            await hour_mapping.upsert_mapping(db, "Medium", "Dynamic", -1)

    async def test_upsert_requires_existing_master_names(self, db, seed):
        with pytest.raises(NotFoundError, match="Complexity 'Extreme'"):
            await hour_mapping.upsert_mapping(db, "Extreme", "Dynamic", 40)
        with pytest.raises(NotFoundError, match="Screen type 'Wizard'"):
            await hour_mapping.upsert_mapping(db, "Simple", "Wizard", 5)

    async def test_delete_mapping(self, db, seed):
        await hour_mapping.delete_mapping(db, "Simple", "Static")
        assert await hour_mapping.lookup_hours(db, "Simple", "Static") is None
        with pytest.raises(NotFoundError):
            await hour_mapping.delete_mapping(db, "Simple", "Static")

    async def test_delete_mapping_trims_names(self, db, seed):
        await hour_mapping.delete_mapping(db, "Medium ", " Dynamic")
        assert await hour_mapping.lookup_hours(db, "Medium", "Dynamic") is None

    async def test_create_mapping_existing_pair(self, db, seed):
        with pytest.raises(ConflictError):
            await hour_mapping.create_mapping(db, "Medium", "Dynamic", 10)

    async def test_create_mapping_lost_race_is_conflict(self, db, seed, monkeypatch):
        async def not_found(*args):
            return None

        monkeypatch.setattr(hour_mapping, "get_mapping", not_found)
        with pytest.raises(ConflictError):
            await hour_mapping.create_mapping(db, "Medium", "Dynamic", 10)


class TestMasterData:
    async def test_lists_ordered_by_hours(self, db, seed):
        complexities = await master_data.list_complexity_levels(db)
        assert [c.name for c in complexities] == ["Simple", "Medium", "Complex"]
        screen_types = await master_data.list_screen_types(db)
        assert [s.name for s in screen_types] == ["Static", "Legacy", "Dynamic"]

    async def test_create_duplicate_name(self, db, seed):
        with pytest.raises(ConflictError):
            await master_data.create_item(db, ComplexityLevel, MasterItemCreate(name="Medium", hours=9))

    async def test_create_duplicate_name_lost_race_is_conflict(self, db, seed, monkeypatch):
        async def name_free(*args, **kwargs):
            return None

        monkeypatch.setattr(master_data, "_ensure_name_free", name_free)
        with pytest.raises(ConflictError, match="already exists"):
            await master_data.create_item(db, ScreenType, MasterItemCreate(name="Static", hours=3))

    @pytest.mark.parametrize("name", ["", "   "])
    def test_blank_rename_rejected(self, name):
        with pytest.raises(PydanticValidationError):
            MasterItemUpdate(name=name)

    async def test_rename_carries_hour_mappings(self, db, seed):
        await master_data.update_item(
            db, ComplexityLevel, seed.complexity_ids["Medium"], MasterItemUpdate(name="Moderate")
        )
        assert await hour_mapping.lookup_hours(db, "Moderate", "Dynamic") == 12
        assert await hour_mapping.lookup_hours(db, "Medium", "Dynamic") is None

    async def test_rename_screen_type_carries_hour_mappings(self, db, seed):
        await master_data.update_item(
            db, ScreenType, seed.screen_type_ids["Dynamic"], MasterItemUpdate(name="Interactive", hours=10)
        )
        assert await hour_mapping.lookup_hours(db, "Complex", "Interactive") == 20
        item = await master_data.get_item(db, ScreenType, seed.screen_type_ids["Dynamic"])
        assert item.hours == 10

    async def test_delete_unused_item_drops_its_mappings(self, db, seed):
        await master_data.delete_item(db, ComplexityLevel, seed.complexity_ids["Simple"])
        assert await hour_mapping.lookup_hours(db, "Simple", "Static") is None
        with pytest.raises(NotFoundError):
            await master_data.get_item(db, ComplexityLevel, seed.complexity_ids["Simple"])

    async def test_delete_item_in_use_refused(self, db, seed):
        await estimation_store.create_estimation(
            db,
            EstimationHeaderCreate(project_id=seed.project_id, name="Phase 1", version_number="1.0"),
            [EstimationDetailCreate(
                screen_id=seed.screen_ids[0],
                complexity_id=seed.complexity_ids["Medium"],
                screen_type_id=seed.screen_type_ids["Dynamic"],
            )],
            created_by=seed.admin_id,
        )
        with pytest.raises(ConflictError, match="used by existing estimations"):
            await master_data.delete_item(db, ComplexityLevel, seed.complexity_ids["Medium"])
        with pytest.raises(ConflictError):
            await master_data.delete_item(db, ScreenType, seed.screen_type_ids["Dynamic"])
