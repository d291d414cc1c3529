"""
Shared Fixtures

Standardized layers for engine and gateway tests:
- national Math grade 5: {A}
- California crosswalk: {A, B}
- district D1 addition: {C}
- school S1 override: A -> "desc-A-school"
"""

import pytest

from standards_hub.config import Settings
from standards_hub.resolution.engine import ResolutionEngine
from standards_hub.resolution.gateway import MutationGateway
from standards_hub.schemas.base import Role, StandardSource, Subject
from standards_hub.schemas.query import Caller
from standards_hub.schemas.standards import (
    BaseStandard,
    DistrictAddition,
    SchoolOverride,
)
from standards_hub.store.memory import InMemoryStandardStore

SUBJECT = Subject.MATH
GRADE = 5


def base(standard_id: str, description: str, source: StandardSource, state_code: str = "DEFAULT") -> BaseStandard:
    return BaseStandard(
        standard_id=standard_id,
        framework="CCSS" if source == StandardSource.NATIONAL else f"{state_code}-CCSS",
        description=description,
        subject=SUBJECT,
        grade=GRADE,
        source=source,
        state_code=state_code,
    )


@pytest.fixture
def settings() -> Settings:
    return Settings(database_url="sqlite://", cache_ttl_seconds=60, cache_maxsize=16)


@pytest.fixture
def scenario_store() -> InMemoryStandardStore:
    store = InMemoryStandardStore([
        base("A", "desc-A-nat", StandardSource.NATIONAL),
        base("A", "desc-A-ca", StandardSource.STATE, "CA"),
        base("B", "desc-B", StandardSource.STATE, "CA"),
    ])
    store.load([
        DistrictAddition(
            standard_id="C",
            district_id="D1",
            subject=SUBJECT,
            grade=GRADE,
            description="desc-C",
        ),
        SchoolOverride(
            school_id="S1",
            target_standard_id="A",
            custom_description="desc-A-school",
        ),
    ])
    return store


@pytest.fixture
def engine(scenario_store, settings) -> ResolutionEngine:
    return ResolutionEngine(scenario_store, settings=settings)


@pytest.fixture
def gateway(scenario_store, engine) -> MutationGateway:
    return MutationGateway(scenario_store, engine=engine)


@pytest.fixture
def district_caller() -> Caller:
    return Caller(role=Role.DISTRICT, scope_id="D1")


@pytest.fixture
def school_caller() -> Caller:
    return Caller(role=Role.SCHOOL, scope_id="S1")
