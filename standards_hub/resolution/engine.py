"""
Resolution Engine

Merges the standards layers into one deduplicated, provenance-tagged
result set:

    national  ->  state (union-replace by id)
              ->  state overrides (swap one id for another)
              ->  district additions (append, never replace)
              ->  school overrides (re-describe only)

The engine holds no state between calls apart from a short-lived TTL
cache keyed by the full query tuple. Store failures surface as
StoreUnavailable and are never retried here.
"""

import asyncio
import logging
from typing import Iterable

from cachetools import TTLCache

from standards_hub.config import Settings, get_settings
from standards_hub.errors import StandardsError, StoreUnavailable
from standards_hub.resolution.index import OverrideIndex
from standards_hub.schemas.base import DEFAULT_STATE, StandardSource
from standards_hub.schemas.query import ResolveQuery
from standards_hub.schemas.standards import (
    BaseStandard,
    DistrictAddition,
    ResolvedStandard,
    SchoolOverride,
    StateStandardOverride,
)
from standards_hub.store.base import StandardRecordStore
from standards_hub.utils.validation import validate_query

logger = logging.getLogger(__name__)


async def _no_records() -> list:
    return []


def _sort_key(standard: ResolvedStandard) -> tuple[int, str]:
    return (standard.resolved_from.rank, standard.standard_id)


class ResolutionEngine:
    """
    Resolves the effective standards for a school.

    Constructed with its record store injected; one instance per
    deployment (or per test).
    """

    def __init__(
        self,
        store: StandardRecordStore,
        cache_ttl_seconds: float | None = None,
        cache_maxsize: int | None = None,
        settings: Settings | None = None,
    ) -> None:
        settings = settings or get_settings()
        self.store = store
        ttl = settings.cache_ttl_seconds if cache_ttl_seconds is None else cache_ttl_seconds
        maxsize = settings.cache_maxsize if cache_maxsize is None else cache_maxsize
        self._cache: TTLCache | None = TTLCache(maxsize=maxsize, ttl=ttl) if ttl > 0 else None

    async def resolve(
        self,
        state_code: str | None = DEFAULT_STATE,
        *,
        subject: str,
        grade: int,
        district_id: str | None = None,
        school_id: str,
        use_cache: bool = True,
    ) -> list[ResolvedStandard]:
        """
        Resolve standards for one query.

        Args:
            state_code: Two-letter state code, or DEFAULT for national only
            subject: One of the supported subjects
            grade: 0 (K) through 12
            district_id: Scopes district additions; omitted means none visible
            school_id: School whose overrides apply
            use_cache: Set False to bypass the TTL cache (validating reads)

        Returns:
            Standards ordered by (resolved_from, standard_id)

        Raises:
            InvalidQuery: Bad subject/grade/state; raised before any fetch
            StoreUnavailable: The record store failed
        """
        query = validate_query(state_code, subject, grade, district_id, school_id)
        return await self.resolve_query(query, use_cache=use_cache)

    async def resolve_query(self, query: ResolveQuery, use_cache: bool = True) -> list[ResolvedStandard]:
        key = query.cache_key()
        if use_cache and self._cache is not None and key in self._cache:
            logger.debug(f"Resolution cache hit for {key}")
            return list(self._cache[key])

        national, state, state_overrides, additions, overrides = await self._fetch_layers(query)
        resolved = self.merge(query, national, state, additions, overrides, state_overrides)

        if self._cache is not None:
            self._cache[key] = tuple(resolved)
        return resolved

    async def _fetch_layers(
        self, query: ResolveQuery
    ) -> tuple[
        list[BaseStandard],
        list[BaseStandard],
        list[StateStandardOverride],
        list[DistrictAddition],
        list[SchoolOverride],
    ]:
        """Fetch every layer concurrently; no layer depends on another."""
        store = self.store
        try:
            return await asyncio.gather(
                store.fetch_base(StandardSource.NATIONAL, query.subject, query.grade),
                store.fetch_base(StandardSource.STATE, query.subject, query.grade, query.state_code)
                if query.uses_state_crosswalk else _no_records(),
                store.fetch_state_overrides(query.state_code, query.subject, query.grade)
                if query.uses_state_crosswalk else _no_records(),
                store.fetch_district_additions(query.district_id, query.subject, query.grade)
                if query.district_id else _no_records(),
                store.fetch_school_overrides(query.school_id),
            )
        except StandardsError:
            raise
        except Exception as e:
            logger.error(f"Record store failed while resolving {query.cache_key()}: {e}")
            raise StoreUnavailable("resolve", str(e)) from e

    def merge(
        self,
        query: ResolveQuery,
        national: list[BaseStandard],
        state: list[BaseStandard],
        additions: list[DistrictAddition],
        overrides: list[SchoolOverride],
        state_overrides: Iterable[StateStandardOverride] = (),
    ) -> list[ResolvedStandard]:
        """Pure merge of already-fetched layers."""
        merged: dict[str, ResolvedStandard] = {}

        for standard in national:
            merged[standard.standard_id] = ResolvedStandard.from_base(standard)

        # State is more locally authoritative for the same id
        for standard in state:
            merged[standard.standard_id] = ResolvedStandard.from_base(standard)

        for override in sorted(state_overrides, key=lambda o: o.replaces_standard_id):
            replaced = merged.pop(override.replaces_standard_id, None)
            if replaced is None:
                logger.debug(
                    f"State override {override.replaces_standard_id} -> {override.new_standard_id} "
                    f"has no target; ignored"
                )
                continue
            # assigning by new id also collapses an entry already holding that id
            merged[override.new_standard_id] = ResolvedStandard.from_state_override(override, replaced)

        if query.district_id:
            index = OverrideIndex(additions=additions)
            district_layer = sorted(
                index.additions_for(query.district_id, query.subject, query.grade),
                key=lambda a: a.standard_id,
            )
            for addition in district_layer:
                if addition.standard_id in merged:
                    logger.warning(
                        f"District {addition.district_id} addition {addition.standard_id} "
                        f"collides with an existing standard; skipped"
                    )
                    continue
                merged[addition.standard_id] = ResolvedStandard.from_addition(addition)

        index = OverrideIndex(overrides=overrides)
        applied, dangling = index.apply(query.school_id, list(merged.values()))
        if dangling:
            logger.debug(f"Dropped dangling overrides for school {query.school_id}: {dangling}")

        return sorted(applied, key=_sort_key)

    async def standards_for_lesson(
        self,
        subject: str,
        grade: int,
        school_id: str,
        state_code: str | None = DEFAULT_STATE,
        district_id: str | None = None,
    ) -> list[str]:
        """Resolved standards as "<id> — <description>" lines for lesson plans."""
        resolved = await self.resolve(
            state_code=state_code,
            subject=subject,
            grade=grade,
            district_id=district_id,
            school_id=school_id,
        )
        return [s.lesson_line() for s in resolved]

    def invalidate(self) -> None:
        """Drop every cached resolution."""
        if self._cache is not None:
            self._cache.clear()
