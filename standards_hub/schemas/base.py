"""
Base types and constants used across all schemas.

This module defines shared enums, types, and configuration
that keep the resolution engine, the record stores and the
mutation gateway in agreement about what a valid query looks like.
"""

from enum import Enum
from typing import Annotated

from pydantic import Field, StringConstraints


# =============================================================================
# CONSTANTS
# =============================================================================

# Sentinel state code: national baseline only, no state crosswalk
DEFAULT_STATE = "DEFAULT"

# Framework label stamped on every district addition
DISTRICT_FRAMEWORK = "district-custom"

# Grades K-12 encoded as small integers (K = 0)
MIN_GRADE = 0
MAX_GRADE = 12


# =============================================================================
# ENUMS
# =============================================================================

class Subject(str, Enum):
    """Subjects the engine accepts in a query."""
    MATH = "Math"
    ELA = "ELA"
    READING = "Reading"
    WRITING = "Writing"
    SCIENCE = "Science"
    SOCIAL_STUDIES = "Social Studies"
    PE = "PE"
    HEALTH = "Health"
    COMPUTER_SCIENCE = "Computer Science"
    ART = "Art"
    MUSIC = "Music"


class StandardSource(str, Enum):
    """Authority that published a base standard."""
    NATIONAL = "national"
    STATE = "state"


class ResolvedFrom(str, Enum):
    """
    Origin authority of a resolved standard.

    SCHOOL is part of the vocabulary but is never an origin: a school
    override keeps the target's classification and only flips is_overridden.
    """
    NATIONAL = "national"
    STATE = "state"
    DISTRICT = "district"
    SCHOOL = "school"

    @property
    def rank(self) -> int:
        """Presentation order: national < state < district < school."""
        return _RESOLVED_FROM_RANK[self]


_RESOLVED_FROM_RANK = {
    ResolvedFrom.NATIONAL: 0,
    ResolvedFrom.STATE: 1,
    ResolvedFrom.DISTRICT: 2,
    ResolvedFrom.SCHOOL: 3,
}


class Role(str, Enum):
    """Role a caller holds when writing through the mutation gateway."""
    DISTRICT = "district"
    SCHOOL = "school"


# =============================================================================
# ANNOTATED TYPES
# =============================================================================

# Opaque identifier, trimmed, compared case-sensitively
StandardId = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1)]

# Non-empty, trimmed string
NonEmptyStr = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1)]

# Two-letter state code or the DEFAULT sentinel
StateCode = Annotated[
    str,
    StringConstraints(strip_whitespace=True, to_upper=True, pattern=r"^([A-Z]{2}|DEFAULT)$"),
]

# K-12 grade
GradeLevel = Annotated[int, Field(ge=MIN_GRADE, le=MAX_GRADE)]


def grade_label(grade: int) -> str:
    """Human-readable grade label ("K", "1" ... "12")."""
    return "K" if grade == 0 else str(grade)
