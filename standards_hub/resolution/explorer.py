"""
Explorer Helpers

Filtering over an already-resolved result set: framework, provenance
and free-text search. No store access.
"""

from collections import Counter
from typing import Iterable

from standards_hub.schemas.base import ResolvedFrom
from standards_hub.schemas.standards import ResolvedStandard


def filter_standards(
    standards: Iterable[ResolvedStandard],
    framework: str | None = None,
    resolved_from: ResolvedFrom | str | None = None,
    search: str | None = None,
) -> list[ResolvedStandard]:
    """
    Narrow a resolved set, preserving order.

    search is a case-insensitive substring match on standard_id and
    description; blank search matches everything.
    """
    result = list(standards)
    if framework:
        result = [s for s in result if s.framework == framework]
    if resolved_from:
        origin = ResolvedFrom(resolved_from)
        result = [s for s in result if s.resolved_from == origin]
    query = (search or "").strip().lower()
    if query:
        result = [
            s for s in result
            if query in s.standard_id.lower() or query in s.description.lower()
        ]
    return result


def frameworks_in(standards: Iterable[ResolvedStandard]) -> list[str]:
    """Distinct frameworks, sorted, for building a framework picker."""
    return sorted({s.framework for s in standards})


def summarize_sources(standards: Iterable[ResolvedStandard]) -> dict[str, int]:
    """Entry counts per origin authority, plus how many carry an override."""
    standards = list(standards)
    counts = Counter(s.resolved_from.value for s in standards)
    summary = {origin.value: counts.get(origin.value, 0) for origin in ResolvedFrom if origin != ResolvedFrom.SCHOOL}
    summary["overridden"] = sum(1 for s in standards if s.is_overridden)
    return summary
