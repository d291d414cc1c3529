"""
Standards Hub Schemas Package

Pydantic models for the standards layers, the resolved output and the
engine/gateway inputs. Input that does not match these schemas is
rejected before any store access.
"""

from standards_hub.schemas.base import ResolvedFrom, Role, StandardSource, Subject
from standards_hub.schemas.query import Caller, ResolveQuery
from standards_hub.schemas.standards import (
    BaseStandard,
    DistrictAddition,
    ResolvedStandard,
    SchoolOverride,
    StateStandardOverride,
)

__all__ = [
    "ResolvedFrom",
    "Role",
    "StandardSource",
    "Subject",
    "Caller",
    "ResolveQuery",
    "BaseStandard",
    "DistrictAddition",
    "ResolvedStandard",
    "SchoolOverride",
    "StateStandardOverride",
]
