"""
In-Memory Record Store

Dictionary-backed StandardRecordStore. Used for local runs and as the
injected fake in tests; behaves like the document database it stands
in for (keyed upserts, last write wins).
"""

import logging
from collections import defaultdict
from typing import Iterable

from standards_hub.schemas.base import DEFAULT_STATE, StandardSource, Subject
from standards_hub.schemas.standards import (
    BaseStandard,
    DistrictAddition,
    SchoolOverride,
    StateStandardOverride,
)
from standards_hub.store.base import (
    DistrictAdditionKey,
    EntityKey,
    MutableEntity,
    SchoolOverrideKey,
    StandardRecordStore,
    entity_key,
)
from standards_hub.store.catalog import iter_catalog

logger = logging.getLogger(__name__)


class InMemoryStandardStore(StandardRecordStore):
    """Keyed in-memory store for every standards layer."""

    def __init__(self, base_standards: Iterable[BaseStandard] = ()) -> None:
        # (source, state_code, subject, grade) -> {standard_id: BaseStandard}
        self._base: dict[tuple, dict[str, BaseStandard]] = defaultdict(dict)
        self._additions: dict[DistrictAdditionKey, DistrictAddition] = {}
        # (state_code, subject, grade) -> {replaces_standard_id: StateStandardOverride}
        self._state_overrides: dict[tuple, dict[str, StateStandardOverride]] = defaultdict(dict)
        self._overrides: dict[SchoolOverrideKey, SchoolOverride] = {}
        self.add_base(base_standards)

    @classmethod
    def from_catalog(cls) -> "InMemoryStandardStore":
        """Store seeded with the national baseline and every state crosswalk."""
        return cls(iter_catalog())

    def add_base(self, standards: Iterable[BaseStandard]) -> None:
        for standard in standards:
            state_code = DEFAULT_STATE if standard.source == StandardSource.NATIONAL else standard.state_code
            key = (standard.source, state_code, standard.subject, standard.grade)
            self._base[key][standard.standard_id] = standard

    def add_state_overrides(self, overrides: Iterable[StateStandardOverride]) -> None:
        for override in overrides:
            key = (override.state_code, override.subject, override.grade)
            self._state_overrides[key][override.replaces_standard_id] = override

    def load(self, entities: Iterable[MutableEntity]) -> None:
        """Synchronous bulk upsert of additions/overrides (seeding, fixtures)."""
        for entity in entities:
            key = entity_key(entity)
            if isinstance(key, DistrictAdditionKey):
                self._additions[key] = entity
            else:
                self._overrides[key] = entity

    async def fetch_base(
        self,
        source: StandardSource,
        subject: Subject,
        grade: int,
        state_code: str = DEFAULT_STATE,
    ) -> list[BaseStandard]:
        if source == StandardSource.NATIONAL:
            state_code = DEFAULT_STATE
        key = (StandardSource(source), state_code, Subject(subject), grade)
        return list(self._base.get(key, {}).values())

    async def fetch_state_overrides(
        self, state_code: str, subject: Subject, grade: int
    ) -> list[StateStandardOverride]:
        key = (state_code, Subject(subject), grade)
        return list(self._state_overrides.get(key, {}).values())

    async def fetch_district_additions(
        self, district_id: str, subject: Subject, grade: int
    ) -> list[DistrictAddition]:
        subject = Subject(subject)
        return [
            a for a in self._additions.values()
            if a.district_id == district_id and a.subject == subject and a.grade == grade
        ]

    async def fetch_school_overrides(self, school_id: str) -> list[SchoolOverride]:
        return [o for o in self._overrides.values() if o.school_id == school_id]

    async def persist(self, entity: MutableEntity) -> None:
        self.load([entity])
        logger.debug(f"Persisted {type(entity).__name__} {tuple(entity_key(entity))}")

    async def insert(self, entity: MutableEntity) -> bool:
        # check and write with no await in between
        key = entity_key(entity)
        table = self._additions if isinstance(key, DistrictAdditionKey) else self._overrides
        if key in table:
            return False
        table[key] = entity
        logger.debug(f"Inserted {type(entity).__name__} {tuple(key)}")
        return True

    async def delete(self, key: EntityKey) -> bool:
        if isinstance(key, DistrictAdditionKey):
            removed = self._additions.pop(key, None)
        elif isinstance(key, SchoolOverrideKey):
            removed = self._overrides.pop(key, None)
        else:
            raise TypeError(f"Not a standards entity key: {key!r}")
        return removed is not None

    def snapshot(self) -> dict[str, dict]:
        """Copy of the mutable layers, for comparing before/after a write."""
        return {
            "additions": dict(self._additions),
            "overrides": dict(self._overrides),
        }
