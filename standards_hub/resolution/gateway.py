"""
Mutation Gateway

Validates and persists district additions and school overrides under
the same authority rules the resolver relies on:

- DISTRICT callers write DistrictAddition records for their own district
- SCHOOL callers write SchoolOverride records for their own school
- district ids live in the district namespace and never shadow a base id
- overrides must target a standard that resolves for the school

Every check is a read before the write; a failed check leaves the store
untouched. The read-then-write race is accepted for validation only: the
resolver tolerates dangling overrides at read time. District additions
are written create-only, so concurrent adds never overwrite each other.
"""

import asyncio
import logging
from typing import Any

from standards_hub.errors import (
    DuplicateStandard,
    Forbidden,
    StandardsError,
    StoreUnavailable,
    UnknownStandard,
)
from standards_hub.resolution.engine import ResolutionEngine
from standards_hub.schemas.base import (
    DEFAULT_STATE,
    MAX_GRADE,
    MIN_GRADE,
    Role,
    StandardSource,
    Subject,
)
from standards_hub.schemas.query import (
    Caller,
    DistrictStandardRequest,
    SchoolOverrideRequest,
)
from standards_hub.schemas.standards import DistrictAddition, SchoolOverride
from standards_hub.store.base import (
    DistrictAdditionKey,
    SchoolOverrideKey,
    StandardRecordStore,
)
from standards_hub.utils.validation import normalize_id, validate_schema

logger = logging.getLogger(__name__)

# Concurrent subject/grade checks when an override carries no hint
EXISTENCE_CHECK_CONCURRENCY = 8

# Slots tried past the first free one when concurrent writers take it first
MAX_ID_ATTEMPTS = 10


def _subject_token(subject: Subject) -> str:
    return subject.value.upper().replace(" ", "-")


class MutationGateway:
    """Write path for the two mutable standards layers."""

    def __init__(
        self,
        store: StandardRecordStore,
        engine: ResolutionEngine | None = None,
    ) -> None:
        self.store = store
        self.engine = engine

    # =========================================================================
    # AUTHORIZATION
    # =========================================================================

    @staticmethod
    def _authorize(caller: Caller, role: Role, scope_id: str, action: str) -> None:
        if caller.role != role:
            logger.warning(f"Rejected {caller.role.value} caller attempting to {action}")
            raise Forbidden(caller.role.value, action)
        if caller.scope_id != scope_id:
            logger.warning(
                f"Rejected {caller.role.value} caller {caller.scope_id} attempting to "
                f"{action} for {scope_id}"
            )
            raise Forbidden(caller.role.value, f"{action} for {scope_id}")

    # =========================================================================
    # READS
    # =========================================================================

    async def _call_store(self, operation: str, coro: Any) -> Any:
        try:
            return await coro
        except StandardsError:
            raise
        except Exception as e:
            logger.error(f"Record store failed during {operation}: {e}")
            raise StoreUnavailable(operation, str(e)) from e

    async def _base_ids(self, subject: Subject, grade: int, state_code: str) -> set[str]:
        """Ids the base layer resolves to for one subject/grade, state overrides applied."""
        if state_code == DEFAULT_STATE:
            national = await self._call_store(
                "base id lookup", self.store.fetch_base(StandardSource.NATIONAL, subject, grade)
            )
            return {s.standard_id for s in national}

        national, state, state_overrides = await self._call_store("base id lookup", asyncio.gather(
            self.store.fetch_base(StandardSource.NATIONAL, subject, grade),
            self.store.fetch_base(StandardSource.STATE, subject, grade, state_code),
            self.store.fetch_state_overrides(state_code, subject, grade),
        ))
        ids = {s.standard_id for s in national} | {s.standard_id for s in state}
        for override in sorted(state_overrides, key=lambda o: o.replaces_standard_id):
            if override.replaces_standard_id in ids:
                ids.discard(override.replaces_standard_id)
                ids.add(override.new_standard_id)
        return ids

    async def _standard_exists(self, request: SchoolOverrideRequest) -> bool:
        """
        Best-effort check that standard_id resolves for the school's jurisdiction.

        Scans the given subject/grade, or every supported pair when the
        caller does not know where the standard lives. At most
        EXISTENCE_CHECK_CONCURRENCY pairs are checked at once.
        """
        subjects = [request.subject] if request.subject is not None else list(Subject)
        grades = [request.grade] if request.grade is not None else range(MIN_GRADE, MAX_GRADE + 1)
        limit = asyncio.Semaphore(EXISTENCE_CHECK_CONCURRENCY)

        async def check(subject: Subject, grade: int) -> bool:
            async with limit:
                ids = await self._base_ids(subject, grade, request.state_code)
                if request.standard_id in ids:
                    return True
                if request.district_id:
                    additions = await self._call_store(
                        "district addition lookup",
                        self.store.fetch_district_additions(request.district_id, subject, grade),
                    )
                    return any(a.standard_id == request.standard_id for a in additions)
                return False

        results = await asyncio.gather(*(check(s, g) for s in subjects for g in grades))
        return any(results)

    # =========================================================================
    # WRITES
    # =========================================================================

    async def add_district_standard(
        self,
        caller: Caller,
        district_id: str,
        subject: str,
        grade: int,
        description: str,
        state_code: str = DEFAULT_STATE,
    ) -> str:
        """
        Create a district standard and return its generated id.

        Ids take the form <district_id>.<SUBJECT>.<grade>.<n>. Descriptions
        are not a uniqueness key; only ids are. The write is create-only:
        when a concurrent add claims the same slot first, the next free n
        is tried, so no existing addition is ever replaced.

        The base-layer collision check always covers the national ids. The
        state crosswalk (and its state overrides) is only checked when
        state_code names the district's state; with the DEFAULT state_code
        the check is national-only.

        Raises:
            Forbidden: caller is not this district
            InvalidQuery: bad subject/grade/description
            DuplicateStandard: generated id collides with a base id, or no
                free slot was won after MAX_ID_ATTEMPTS tries
        """
        request = validate_schema(DistrictStandardRequest, {
            "district_id": district_id,
            "subject": subject,
            "grade": grade,
            "description": description,
            "state_code": state_code,
        })
        self._authorize(caller, Role.DISTRICT, request.district_id, "add district standards")

        existing = await self._call_store(
            "district addition lookup",
            self.store.fetch_district_additions(request.district_id, request.subject, request.grade),
        )
        taken = {a.standard_id for a in existing}
        base_ids = await self._base_ids(request.subject, request.grade, request.state_code)
        prefix = f"{request.district_id}.{_subject_token(request.subject)}.{request.grade}"

        n = len(taken) + 1
        for _ in range(MAX_ID_ATTEMPTS):
            while f"{prefix}.{n}" in taken:
                n += 1
            standard_id = f"{prefix}.{n}"
            if standard_id in base_ids:
                logger.warning(f"District standard id {standard_id} collides with a base standard")
                raise DuplicateStandard(standard_id)

            addition = DistrictAddition(
                standard_id=standard_id,
                district_id=request.district_id,
                subject=request.subject,
                grade=request.grade,
                description=request.description,
            )
            if await self._call_store("insert", self.store.insert(addition)):
                break
            logger.info(f"District standard id {standard_id} was taken concurrently; trying the next slot")
            taken.add(standard_id)
        else:
            logger.warning(f"District {request.district_id} could not claim a free id under {prefix}")
            raise DuplicateStandard(standard_id)

        self._invalidate()
        logger.info(f"District {request.district_id} added standard {standard_id}")
        return standard_id

    async def add_school_override(
        self,
        caller: Caller,
        school_id: str,
        standard_id: str,
        custom_description: str,
        state_code: str = DEFAULT_STATE,
        district_id: str | None = None,
        subject: str | None = None,
        grade: int | None = None,
    ) -> None:
        """
        Create or replace a school's description for one standard.

        state_code and district_id describe the school's current
        jurisdiction; subject and grade, when known, narrow the
        existence check.

        Raises:
            Forbidden: caller is not this school
            InvalidQuery: bad input
            UnknownStandard: standard_id does not resolve for the school
        """
        request = validate_schema(SchoolOverrideRequest, {
            "school_id": school_id,
            "standard_id": standard_id,
            "custom_description": custom_description,
            "state_code": state_code,
            "district_id": district_id,
            "subject": subject,
            "grade": grade,
        })
        self._authorize(caller, Role.SCHOOL, request.school_id, "add school overrides")

        if not await self._standard_exists(request):
            logger.warning(
                f"School {request.school_id} tried to override unknown standard {request.standard_id}"
            )
            raise UnknownStandard(request.standard_id, f"school {request.school_id}")

        override = SchoolOverride(
            school_id=request.school_id,
            target_standard_id=request.standard_id,
            custom_description=request.custom_description,
        )
        await self._call_store("persist", self.store.persist(override))
        self._invalidate()
        logger.info(f"School {request.school_id} overrode {request.standard_id}")

    async def delete_district_standard(self, caller: Caller, district_id: str, standard_id: str) -> None:
        """Remove one of the caller's own district standards."""
        district_id = normalize_id(district_id)
        standard_id = normalize_id(standard_id)
        self._authorize(caller, Role.DISTRICT, district_id, "delete district standards")

        removed = await self._call_store(
            "delete", self.store.delete(DistrictAdditionKey(district_id, standard_id))
        )
        if not removed:
            raise UnknownStandard(standard_id, f"district {district_id}")
        self._invalidate()
        logger.info(f"District {district_id} deleted standard {standard_id}")

    async def delete_school_override(self, caller: Caller, school_id: str, standard_id: str) -> None:
        """Remove the caller's override for one standard."""
        school_id = normalize_id(school_id)
        standard_id = normalize_id(standard_id)
        self._authorize(caller, Role.SCHOOL, school_id, "delete school overrides")

        removed = await self._call_store(
            "delete", self.store.delete(SchoolOverrideKey(school_id, standard_id))
        )
        if not removed:
            raise UnknownStandard(standard_id, f"school {school_id}")
        self._invalidate()
        logger.info(f"School {school_id} removed override for {standard_id}")

    def _invalidate(self) -> None:
        if self.engine is not None:
            self.engine.invalidate()
