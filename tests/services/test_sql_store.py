# tests/services/test_sql_store.py
import pytest
from sqlalchemy import text

from standards_hub.errors import StoreUnavailable
from standards_hub.resolution.engine import ResolutionEngine
from standards_hub.resolution.gateway import MutationGateway
from standards_hub.schemas.base import ResolvedFrom, Role, StandardSource, Subject
from standards_hub.schemas.query import Caller
from standards_hub.schemas.standards import (
    BaseStandard,
    DistrictAddition,
    SchoolOverride,
    StateStandardOverride,
)
from standards_hub.store.base import DistrictAdditionKey, SchoolOverrideKey
from standards_hub.store.catalog import national_standards, state_standards
from standards_hub.store.sql import SQLStandardStore


@pytest.fixture
def sql_store(tmp_path):
    db_path = tmp_path / "standards.db"
    store = SQLStandardStore(f"sqlite:///{db_path}")
    store.init_db()
    store.seed_base([
        BaseStandard(standard_id="A", framework="CCSS", description="desc-A-nat",
                     subject="Math", grade=5, source="national"),
        BaseStandard(standard_id="A", framework="CA-CCSS", description="desc-A-ca",
                     subject="Math", grade=5, source="state", state_code="CA"),
        BaseStandard(standard_id="B", framework="CA-CCSS", description="desc-B",
                     subject="Math", grade=5, source="state", state_code="CA"),
    ])
    return store


@pytest.mark.asyncio
async def test_fetch_base_by_layer(sql_store):
    national = await sql_store.fetch_base(StandardSource.NATIONAL, Subject.MATH, 5)
    california = await sql_store.fetch_base(StandardSource.STATE, Subject.MATH, 5, "CA")
    texas = await sql_store.fetch_base(StandardSource.STATE, Subject.MATH, 5, "TX")

    assert [s.description for s in national] == ["desc-A-nat"]
    assert [s.standard_id for s in california] == ["A", "B"]
    assert texas == []


@pytest.mark.asyncio
async def test_national_ignores_state_code(sql_store):
    national = await sql_store.fetch_base(StandardSource.NATIONAL, Subject.MATH, 5, "CA")

    assert [s.source for s in national] == [StandardSource.NATIONAL]


@pytest.mark.asyncio
async def test_override_upsert_by_key(sql_store):
    await sql_store.persist(SchoolOverride(school_id="S1", target_standard_id="A", custom_description="first"))
    await sql_store.persist(SchoolOverride(school_id="S1", target_standard_id="A", custom_description="second"))

    overrides = await sql_store.fetch_school_overrides("S1")

    assert len(overrides) == 1
    assert overrides[0].custom_description == "second"
    assert overrides[0].target_standard_id == "A"


@pytest.mark.asyncio
async def test_district_additions_roundtrip_and_delete(sql_store):
    addition = DistrictAddition(standard_id="D1.MATH.5.1", district_id="D1", subject="Math",
                                grade=5, description="local")
    await sql_store.persist(addition)

    stored = await sql_store.fetch_district_additions("D1", Subject.MATH, 5)
    assert [a.standard_id for a in stored] == ["D1.MATH.5.1"]
    assert stored[0].framework == "district-custom"
    assert await sql_store.fetch_district_additions("D1", Subject.MATH, 6) == []

    assert await sql_store.delete(DistrictAdditionKey("D1", "D1.MATH.5.1")) is True
    assert await sql_store.delete(DistrictAdditionKey("D1", "D1.MATH.5.1")) is False
    assert await sql_store.fetch_district_additions("D1", Subject.MATH, 5) == []


@pytest.mark.asyncio
async def test_delete_override(sql_store):
    await sql_store.persist(SchoolOverride(school_id="S1", target_standard_id="A", custom_description="x"))

    assert await sql_store.delete(SchoolOverrideKey("S1", "A")) is True
    assert await sql_store.fetch_school_overrides("S1") == []


@pytest.mark.asyncio
async def test_insert_is_create_only(sql_store):
    first = DistrictAddition(standard_id="D1.MATH.5.1", district_id="D1", subject="Math",
                             grade=5, description="first")
    second = DistrictAddition(standard_id="D1.MATH.5.1", district_id="D1", subject="Math",
                              grade=5, description="second")

    assert await sql_store.insert(first) is True
    assert await sql_store.insert(second) is False

    stored = await sql_store.fetch_district_additions("D1", Subject.MATH, 5)
    assert [a.description for a in stored] == ["first"]


@pytest.mark.asyncio
async def test_state_overrides_seed_and_fetch(sql_store):
    sql_store.seed_state_overrides([
        StateStandardOverride(state_code="CA", subject="Math", grade=5,
                              replaces_standard_id="B", new_standard_id="B2", description="desc-B2"),
    ])

    california = await sql_store.fetch_state_overrides("CA", Subject.MATH, 5)
    assert [(o.replaces_standard_id, o.new_standard_id) for o in california] == [("B", "B2")]
    assert await sql_store.fetch_state_overrides("CA", Subject.MATH, 6) == []
    assert await sql_store.fetch_state_overrides("TX", Subject.MATH, 5) == []

    engine = ResolutionEngine(sql_store, cache_ttl_seconds=0)
    resolved = await engine.resolve("CA", subject="Math", grade=5, school_id="S1")
    assert [s.standard_id for s in resolved] == ["A", "B2"]


@pytest.mark.asyncio
async def test_missing_tables_surface_store_unavailable(tmp_path):
    store = SQLStandardStore(f"sqlite:///{tmp_path / 'empty.db'}")

    with pytest.raises(StoreUnavailable) as exc_info:
        await store.fetch_school_overrides("S1")

    assert exc_info.value.operation == "fetch_school_overrides"


@pytest.mark.asyncio
async def test_engine_and_gateway_over_sql(sql_store):
    engine = ResolutionEngine(sql_store, cache_ttl_seconds=30)
    gateway = MutationGateway(sql_store, engine=engine)
    district = Caller(role=Role.DISTRICT, scope_id="D1")
    school = Caller(role=Role.SCHOOL, scope_id="S1")

    new_id = await gateway.add_district_standard(district, "D1", "Math", 5, "desc-C", state_code="CA")
    await gateway.add_school_override(school, "S1", "A", "desc-A-school", state_code="CA",
                                      subject="Math", grade=5)

    resolved = await engine.resolve("CA", subject="Math", grade=5, district_id="D1", school_id="S1")
    entries = {s.standard_id: s for s in resolved}

    assert list(entries) == ["A", "B", new_id]
    assert entries["A"].description == "desc-A-school"
    assert entries["A"].resolved_from == ResolvedFrom.STATE
    assert entries[new_id].resolved_from == ResolvedFrom.DISTRICT


def test_seed_is_idempotent(sql_store):
    seed = national_standards(Subject.MATH, 5) + state_standards("TX", Subject.MATH, 5)
    sql_store.seed_base(seed)
    sql_store.seed_base(seed)

    with sql_store.engine.connect() as conn:
        count = conn.execute(text("SELECT count(*) FROM base_standards")).scalar()

    assert count == 3 + len(seed)
