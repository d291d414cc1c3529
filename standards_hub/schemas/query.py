"""
Resolve Query Schema

Normalized input to the resolution engine. Construction goes through
standards_hub.utils.validation.validate_query so pydantic errors surface
as InvalidQuery.
"""

from pydantic import BaseModel, ConfigDict, Field

from standards_hub.schemas.base import (
    DEFAULT_STATE,
    GradeLevel,
    NonEmptyStr,
    Role,
    StandardId,
    StateCode,
    Subject,
)


class ResolveQuery(BaseModel):
    """
    A resolution request.

    - state_code DEFAULT means national baseline only
    - district_id is optional; without it no district additions are visible
    - school_id is required
    """
    model_config = ConfigDict(frozen=True)

    state_code: StateCode = Field(default=DEFAULT_STATE)
    subject: Subject
    grade: GradeLevel
    district_id: NonEmptyStr | None = None
    school_id: NonEmptyStr

    @property
    def uses_state_crosswalk(self) -> bool:
        return self.state_code != DEFAULT_STATE

    def cache_key(self) -> tuple:
        """Full query tuple; two queries share a cache entry only if all fields match."""
        return (
            self.state_code,
            self.subject.value,
            self.grade,
            self.district_id,
            self.school_id,
        )


class Caller(BaseModel):
    """
    Who is writing. Supplied by the caller, enforced by the gateway:
    scope_id is the district_id for DISTRICT callers, school_id for SCHOOL.
    """
    model_config = ConfigDict(frozen=True)

    role: Role
    scope_id: NonEmptyStr


class DistrictStandardRequest(BaseModel):
    """Input to add_district_standard."""
    district_id: NonEmptyStr
    subject: Subject
    grade: GradeLevel
    description: NonEmptyStr
    state_code: StateCode = Field(default=DEFAULT_STATE)


class SchoolOverrideRequest(BaseModel):
    """Input to add_school_override."""
    school_id: NonEmptyStr
    standard_id: StandardId
    custom_description: NonEmptyStr
    state_code: StateCode = Field(default=DEFAULT_STATE)
    district_id: NonEmptyStr | None = None
    subject: Subject | None = None
    grade: GradeLevel | None = None
