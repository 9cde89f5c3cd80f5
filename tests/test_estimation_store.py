"""Record store tests: validation, referential checks, atomicity and hour snapshots."""
import pytest
from sqlalchemy import func, select

from estimator.config import get_settings
from estimator.engine.calculator import EstimationCalculator, HourMappingTable
from estimator.errors import MappingMissingError, NotFoundError, ValidationError
from estimator.models import Estimation, EstimationDetail
from estimator.schemas.estimation import EstimationDetailCreate, EstimationHeaderCreate
from estimator.services import estimation_store, hour_mapping


def _header(seed, **overrides):
    data = {"project_id": seed.project_id, "name": "Phase 1", "version_number": "1.0"}
    data.update(overrides)
    return EstimationHeaderCreate(**data)


def _detail(seed, screen_index=0, complexity="Medium", screen_type="Dynamic", hours=None):
    return EstimationDetailCreate(
        screen_id=seed.screen_ids[screen_index],
        complexity_id=seed.complexity_ids[complexity],
        screen_type_id=seed.screen_type_ids[screen_type],
        calculated_hours=hours,
    )


async def _count(db, model) -> int:
    return (await db.execute(select(func.count(model.id)))).scalar_one()


class TestCreateEstimation:
    async def test_computes_line_hours_from_mapping(self, db, seed):
        details = [_detail(seed, 0), _detail(seed, 1), _detail(seed, 2, "Complex", "Legacy")]
        estimation = await estimation_store.create_estimation(db, _header(seed), details, created_by=seed.admin_id)
        await db.commit()

        assert estimation.id is not None
        assert estimation.total_hours == 24
        stored = await estimation_store.get_estimation_details(db, estimation.id)
        assert [d.calculated_hours for d in stored] == [12, 12, 0]

    async def test_accepts_matching_submitted_total(self, db, seed):
        details = [_detail(seed, 0, hours=12), _detail(seed, 1, hours=5)]
        estimation = await estimation_store.create_estimation(
            db, _header(seed, total_hours=17), details, created_by=seed.admin_id
        )
        assert estimation.total_hours == 17

    async def test_rejects_mismatched_submitted_total(self, db, seed):
        details = [_detail(seed, 0, hours=12), _detail(seed, 1, hours=5)]
        with pytest.raises(ValidationError, match="does not match"):
            await estimation_store.create_estimation(
                db, _header(seed, total_hours=10), details, created_by=seed.admin_id
            )
        assert await _count(db, Estimation) == 0

    async def test_keeps_submitted_total_when_verification_disabled(self, db, seed, monkeypatch):
        monkeypatch.setattr(get_settings(), "verify_submitted_total", False)
        estimation = await estimation_store.create_estimation(
            db, _header(seed, total_hours=10), [_detail(seed, 0, hours=12)], created_by=seed.admin_id
        )
        assert estimation.total_hours == 10

    @pytest.mark.parametrize(
        "overrides,message",
        [
            ({"project_id": None}, "Project is required"),
            ({"name": "  "}, "name is required"),
            ({"version_number": ""}, "Version number is required"),
            ({"version_number": "release-1"}, "Invalid version number"),
            ({"total_hours": -1}, "cannot be negative"),
        ],
    )
    async def test_header_validation(self, db, seed, overrides, message):
        with pytest.raises(ValidationError, match=message):
            await estimation_store.create_estimation(
                db, _header(seed, **overrides), [_detail(seed)], created_by=seed.admin_id
            )

    @pytest.mark.parametrize("version", ["1", "1.0", "v1.0", "2.3.14"])
    async def test_version_formats_accepted(self, db, seed, version):
        estimation = await estimation_store.create_estimation(
            db, _header(seed, version_number=version), [_detail(seed)], created_by=seed.admin_id
        )
        assert estimation.version_number == version

    async def test_requires_at_least_one_detail(self, db, seed):
        with pytest.raises(ValidationError):
            await estimation_store.create_estimation(db, _header(seed), [], created_by=seed.admin_id)

    async def test_negative_line_hours_rejected(self, db, seed):
        with pytest.raises(ValidationError):
            await estimation_store.create_estimation(
                db, _header(seed), [_detail(seed, hours=-3)], created_by=seed.admin_id
            )

    async def test_unknown_project(self, db, seed):
        with pytest.raises(NotFoundError, match="Project"):
            await estimation_store.create_estimation(
                db, _header(seed, project_id=9999), [_detail(seed)], created_by=seed.admin_id
            )

    async def test_unknown_screen(self, db, seed):
        detail = _detail(seed).model_copy(update={"screen_id": 9999})
        with pytest.raises(NotFoundError, match="Screen 9999"):
            await estimation_store.create_estimation(db, _header(seed), [detail], created_by=seed.admin_id)

    async def test_screen_from_another_project(self, db, seed):
        detail = _detail(seed).model_copy(update={"screen_id": seed.other_screen_id})
        with pytest.raises(NotFoundError, match="not found in project"):
            await estimation_store.create_estimation(db, _header(seed), [detail], created_by=seed.admin_id)

    async def test_unknown_complexity_and_screen_type(self, db, seed):
        with pytest.raises(NotFoundError, match="Complexity"):
            await estimation_store.create_estimation(
                db, _header(seed), [_detail(seed).model_copy(update={"complexity_id": 9999})], created_by=seed.admin_id
            )
        with pytest.raises(NotFoundError, match="Screen type"):
            await estimation_store.create_estimation(
                db, _header(seed), [_detail(seed).model_copy(update={"screen_type_id": 9999})], created_by=seed.admin_id
            )

    async def test_reject_policy_refuses_unmapped_line(self, db, seed):
        calculator = EstimationCalculator(await hour_mapping.load_hour_mapping_table(db), "reject")
        with pytest.raises(MappingMissingError):
            await estimation_store.create_estimation(
                db,
                _header(seed),
                [_detail(seed, 0), _detail(seed, 1, "Complex", "Legacy")],
                created_by=seed.admin_id,
                calculator=calculator,
            )

    async def test_injected_calculator_is_used(self, db, seed):
        calculator = EstimationCalculator(HourMappingTable({("Medium", "Dynamic"): 7}))
        estimation = await estimation_store.create_estimation(
            db, _header(seed), [_detail(seed)], created_by=seed.admin_id, calculator=calculator
        )
        assert estimation.total_hours == 7


class TestAtomicity:
    async def test_header_rolled_back_when_detail_insert_fails(self, db, seed, monkeypatch):
        async def failing_insert(session, estimation_id, rows):
            rows[0].estimation_id = estimation_id
            session.add(rows[0])
            await session.flush()
            raise RuntimeError("disk full")

        monkeypatch.setattr(estimation_store, "_insert_details", failing_insert)
        with pytest.raises(RuntimeError):
            await estimation_store.create_estimation(
                db, _header(seed), [_detail(seed, 0), _detail(seed, 1)], created_by=seed.admin_id
            )
        await db.commit()

        assert await _count(db, Estimation) == 0
        assert await _count(db, EstimationDetail) == 0


class TestSnapshot:
    async def test_mapping_change_does_not_alter_persisted_hours(self, db, seed):
        first = await estimation_store.create_estimation(
            db, _header(seed), [_detail(seed, 0)], created_by=seed.admin_id
        )
        await db.commit()

        await hour_mapping.upsert_mapping(db, "Medium", "Dynamic", 30)
        await db.commit()

        details = await estimation_store.get_estimation_details(db, first.id)
        assert details[0].calculated_hours == 12
        fetched = await estimation_store.get_estimation(db, first.id)
        assert fetched.total_hours == 12

        second = await estimation_store.create_estimation(
            db, _header(seed, version_number="1.1"), [_detail(seed, 0)], created_by=seed.admin_id
        )
        assert second.total_hours == 30


class TestReads:
    async def test_get_estimation_joins_names(self, db, seed):
        created = await estimation_store.create_estimation(
            db, _header(seed, notes="first cut"), [_detail(seed, 0), _detail(seed, 1, "Simple", "Static")],
            created_by=seed.estimator_id,
        )
        await db.commit()

        estimation = await estimation_store.get_estimation(db, created.id)
        assert estimation.project_name == "Portal"
        assert estimation.creator_name == "Estimator User"
        assert estimation.total_hours == 16
        assert estimation.estimated_days == 2
        assert estimation.notes == "first cut"
        assert [d.screen_name for d in estimation.details] == ["Login", "Dashboard"]
        assert estimation.details[1].complexity_name == "Simple"
        assert estimation.details[1].screen_type_name == "Static"
        assert estimation.details[1].complexity_hours == 4

    async def test_get_missing_estimation(self, db, seed):
        with pytest.raises(NotFoundError):
            await estimation_store.get_estimation(db, 12345)

    async def test_list_filters_by_project(self, db, seed):
        await estimation_store.create_estimation(db, _header(seed), [_detail(seed)], created_by=seed.admin_id)
        await estimation_store.create_estimation(
            db, _header(seed, name="Phase 2", version_number="2.0"), [_detail(seed)], created_by=seed.admin_id
        )
        await db.commit()

        all_rows = await estimation_store.list_estimations(db)
        assert {e.name for e in all_rows} == {"Phase 1", "Phase 2"}
        assert await estimation_store.list_estimations(db, project_id=seed.other_project_id) == []
