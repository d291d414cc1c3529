"""
Standard Record Store Interface

The only boundary the resolver and the gateway talk to. Implementations
are plain keyed document stores: no caching, no transactions.
Failures must surface as StoreUnavailable.
"""

from abc import ABC, abstractmethod
from typing import NamedTuple, Union

from standards_hub.schemas.base import DEFAULT_STATE, StandardSource, Subject
from standards_hub.schemas.standards import (
    BaseStandard,
    DistrictAddition,
    SchoolOverride,
    StateStandardOverride,
)


class DistrictAdditionKey(NamedTuple):
    district_id: str
    standard_id: str


class SchoolOverrideKey(NamedTuple):
    school_id: str
    standard_id: str


MutableEntity = Union[DistrictAddition, SchoolOverride]
EntityKey = Union[DistrictAdditionKey, SchoolOverrideKey]


def entity_key(entity: MutableEntity) -> EntityKey:
    """Primary key of a mutable record."""
    if isinstance(entity, DistrictAddition):
        return DistrictAdditionKey(entity.district_id, entity.standard_id)
    if isinstance(entity, SchoolOverride):
        return SchoolOverrideKey(entity.school_id, entity.target_standard_id)
    raise TypeError(f"Not a mutable standards entity: {type(entity).__name__}")


class StandardRecordStore(ABC):
    """Async document store for the standards layers."""

    @abstractmethod
    async def fetch_base(
        self,
        source: StandardSource,
        subject: Subject,
        grade: int,
        state_code: str = DEFAULT_STATE,
    ) -> list[BaseStandard]:
        """National set (state_code ignored) or one state's crosswalk."""

    @abstractmethod
    async def fetch_state_overrides(
        self, state_code: str, subject: Subject, grade: int
    ) -> list[StateStandardOverride]:
        ...

    @abstractmethod
    async def fetch_district_additions(
        self, district_id: str, subject: Subject, grade: int
    ) -> list[DistrictAddition]:
        ...

    @abstractmethod
    async def fetch_school_overrides(self, school_id: str) -> list[SchoolOverride]:
        ...

    @abstractmethod
    async def persist(self, entity: MutableEntity) -> None:
        """Create-or-replace by entity key."""

    @abstractmethod
    async def insert(self, entity: MutableEntity) -> bool:
        """Create-only write; returns False, writing nothing, when the key exists."""

    @abstractmethod
    async def delete(self, key: EntityKey) -> bool:
        """Remove a record; returns False when nothing matched."""
