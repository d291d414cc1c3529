"""
Standard Records

The record kinds the resolver works with. Base standards and state
overrides are seeded and immutable; district additions and school overrides are written through
the mutation gateway; resolved standards are the engine's output.
"""

from datetime import datetime, timezone

from pydantic import BaseModel, ConfigDict, Field

from standards_hub.schemas.base import (
    DEFAULT_STATE,
    DISTRICT_FRAMEWORK,
    GradeLevel,
    NonEmptyStr,
    ResolvedFrom,
    StandardId,
    StandardSource,
    StateCode,
    Subject,
)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class BaseStandard(BaseModel):
    """
    A national or state standard.

    Never mutated by the app, only superseded (state over national)
    or re-described (school override) during resolution.
    """
    model_config = ConfigDict(frozen=True)

    standard_id: StandardId = Field(description="e.g. CCSS.MATH.5.NBT.1")
    framework: NonEmptyStr = Field(description="CCSS, NGSS, TEKS, ...")
    description: NonEmptyStr
    subject: Subject
    grade: GradeLevel
    source: StandardSource
    state_code: StateCode = Field(
        default=DEFAULT_STATE,
        description="Owning state for crosswalk entries; DEFAULT for national"
    )
    source_name: str | None = Field(
        default=None,
        description="Display name of the publishing framework"
    )


class StateStandardOverride(BaseModel):
    """
    A state's replacement for one base standard.

    Seeded alongside the crosswalk. During resolution the entry whose id is
    replaces_standard_id is swapped for new_standard_id; an override whose
    target is not in the set is ignored.
    """
    model_config = ConfigDict(frozen=True)

    state_code: StateCode
    subject: Subject
    grade: GradeLevel
    replaces_standard_id: StandardId
    new_standard_id: StandardId
    description: NonEmptyStr


class DistrictAddition(BaseModel):
    """A district-owned standard not present in the national/state baselines."""
    model_config = ConfigDict(frozen=True)

    standard_id: StandardId
    district_id: NonEmptyStr
    subject: Subject
    grade: GradeLevel
    description: NonEmptyStr
    framework: str = Field(default=DISTRICT_FRAMEWORK)
    created_at: datetime = Field(default_factory=_utcnow)


class SchoolOverride(BaseModel):
    """
    A school's replacement description for one standard.

    Keyed by (school_id, target_standard_id); a second write for the
    same key replaces the description.
    """
    model_config = ConfigDict(frozen=True)

    school_id: NonEmptyStr
    target_standard_id: StandardId
    custom_description: NonEmptyStr
    created_at: datetime = Field(default_factory=_utcnow)


class ResolvedStandard(BaseModel):
    """
    Output entity of resolution.

    resolved_from is the origin authority (national/state/district);
    is_overridden is independent and set when a school override applied.
    Frozen: the engine caches these instances and hands them to every hit.
    """
    model_config = ConfigDict(frozen=True)

    standard_id: StandardId
    framework: str
    description: str
    subject: Subject
    grade: GradeLevel
    source: str = Field(description="Display name of the authority")
    resolved_from: ResolvedFrom
    is_overridden: bool = False

    @classmethod
    def from_base(cls, standard: BaseStandard) -> "ResolvedStandard":
        return cls(
            standard_id=standard.standard_id,
            framework=standard.framework,
            description=standard.description,
            subject=standard.subject,
            grade=standard.grade,
            source=standard.source_name or standard.framework,
            resolved_from=ResolvedFrom(standard.source.value),
        )

    @classmethod
    def from_state_override(
        cls, override: StateStandardOverride, replaced: "ResolvedStandard"
    ) -> "ResolvedStandard":
        return cls(
            standard_id=override.new_standard_id,
            framework=override.state_code,
            description=override.description,
            subject=replaced.subject,
            grade=replaced.grade,
            source=f"State Override ({override.state_code})",
            resolved_from=ResolvedFrom.STATE,
        )

    @classmethod
    def from_addition(cls, addition: DistrictAddition) -> "ResolvedStandard":
        return cls(
            standard_id=addition.standard_id,
            framework=addition.framework,
            description=addition.description,
            subject=addition.subject,
            grade=addition.grade,
            source="District Custom",
            resolved_from=ResolvedFrom.DISTRICT,
        )

    def with_override(self, override: SchoolOverride) -> "ResolvedStandard":
        """Copy with the school's description; identity and provenance unchanged."""
        return self.model_copy(
            update={
                "description": override.custom_description,
                "is_overridden": True,
            }
        )

    def lesson_line(self) -> str:
        return f"{self.standard_id} — {self.description}"
