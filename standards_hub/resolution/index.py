"""
Override Index

In-memory lookup built from one round of store reads:
- (school_id, standard_id) -> SchoolOverride
- (district_id, subject, grade) -> set of DistrictAddition

Built fresh for every resolution; nothing is shared across calls.
"""

import logging
from collections import defaultdict
from typing import Iterable

from standards_hub.schemas.base import Subject
from standards_hub.schemas.standards import (
    DistrictAddition,
    ResolvedStandard,
    SchoolOverride,
)

logger = logging.getLogger(__name__)


class OverrideIndex:
    """Keyed view over district additions and school overrides."""

    def __init__(
        self,
        additions: Iterable[DistrictAddition] = (),
        overrides: Iterable[SchoolOverride] = (),
    ) -> None:
        self._additions: dict[tuple[str, Subject, int], set[DistrictAddition]] = defaultdict(set)
        self._overrides: dict[str, dict[str, SchoolOverride]] = defaultdict(dict)

        for addition in additions:
            self._additions[(addition.district_id, addition.subject, addition.grade)].add(addition)

        for override in overrides:
            by_standard = self._overrides[override.school_id]
            if override.target_standard_id in by_standard:
                logger.warning(
                    f"School {override.school_id} holds more than one override for "
                    f"{override.target_standard_id}; keeping the last one read"
                )
            by_standard[override.target_standard_id] = override

    def overrides_for(self, school_id: str) -> dict[str, SchoolOverride]:
        """standard_id -> override; at most one entry per standard."""
        return dict(self._overrides.get(school_id, {}))

    def additions_for(self, district_id: str, subject: Subject, grade: int) -> set[DistrictAddition]:
        return set(self._additions.get((district_id, Subject(subject), grade), set()))

    def apply(
        self, school_id: str, standards: list[ResolvedStandard]
    ) -> tuple[list[ResolvedStandard], list[str]]:
        """
        Apply a school's overrides to an accumulated result set.

        Returns the re-described standards and the ids of dangling
        overrides (targets absent from the set). Dangling overrides are
        dropped, never raised: a half-cleaned override must not block
        read access to the rest of the standards.
        """
        overrides = self._overrides.get(school_id, {})
        if not overrides:
            return list(standards), []

        present = {s.standard_id for s in standards}
        applied = [
            s.with_override(overrides[s.standard_id]) if s.standard_id in overrides else s
            for s in standards
        ]
        dangling = sorted(sid for sid in overrides if sid not in present)
        return applied, dangling
