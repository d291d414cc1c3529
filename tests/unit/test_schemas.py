"""
Unit tests for standards schemas.

Tests verify:
1. Valid data is accepted and normalized
2. Invalid data raises ValidationError / InvalidQuery
3. Override application keeps identity and provenance
"""

import pytest
from pydantic import ValidationError

from standards_hub.errors import InvalidQuery
from standards_hub.schemas.base import ResolvedFrom, StandardSource, Subject, grade_label
from standards_hub.schemas.query import ResolveQuery
from standards_hub.schemas.standards import (
    BaseStandard,
    DistrictAddition,
    ResolvedStandard,
    SchoolOverride,
)
from standards_hub.utils.validation import normalize_id, validate_query


class TestBaseStandard:

    def test_standard_id_trimmed(self) -> None:
        standard = BaseStandard(
            standard_id="  CCSS.MATH.5.NBT.1 ",
            framework="CCSS",
            description="Place value",
            subject="Math",
            grade=5,
            source="national",
        )
        assert standard.standard_id == "CCSS.MATH.5.NBT.1"
        assert standard.state_code == "DEFAULT"

    def test_standard_id_case_sensitive(self) -> None:
        lower = ResolvedStandard(standard_id="ccss.a", framework="CCSS", description="x", subject="Math",
                                 grade=1, source="CCSS", resolved_from="national")
        upper = lower.model_copy(update={"standard_id": "CCSS.A"})
        assert lower != upper

    def test_frozen(self) -> None:
        standard = BaseStandard(standard_id="A", framework="CCSS", description="x", subject="Math",
                                grade=1, source="national")
        with pytest.raises(ValidationError):
            standard.description = "changed"

    @pytest.mark.parametrize("field,value", [
        ("standard_id", "   "),
        ("grade", 13),
        ("subject", "Latin"),
        ("source", "district"),
    ])
    def test_rejects_invalid(self, field, value) -> None:
        data = {
            "standard_id": "A",
            "framework": "CCSS",
            "description": "x",
            "subject": "Math",
            "grade": 1,
            "source": "national",
        }
        data[field] = value
        with pytest.raises(ValidationError):
            BaseStandard(**data)


class TestResolvedStandard:

    def test_from_base_keeps_origin(self) -> None:
        state = BaseStandard(standard_id="A", framework="CA-CCSS", description="ca", subject="Math",
                             grade=5, source=StandardSource.STATE, state_code="CA",
                             source_name="California CCSS")
        resolved = ResolvedStandard.from_base(state)

        assert resolved.resolved_from == ResolvedFrom.STATE
        assert resolved.source == "California CCSS"
        assert resolved.is_overridden is False

    def test_from_addition(self) -> None:
        addition = DistrictAddition(standard_id="D1.MATH.5.1", district_id="D1", subject="Math",
                                    grade=5, description="local")
        resolved = ResolvedStandard.from_addition(addition)

        assert resolved.resolved_from == ResolvedFrom.DISTRICT
        assert resolved.framework == "district-custom"
        assert resolved.source == "District Custom"

    def test_with_override_only_changes_description(self) -> None:
        national = BaseStandard(standard_id="A", framework="CCSS", description="nat", subject="Math",
                                grade=5, source="national")
        override = SchoolOverride(school_id="S1", target_standard_id="A", custom_description="ours")

        original = ResolvedStandard.from_base(national)
        overridden = original.with_override(override)

        assert overridden.description == "ours"
        assert overridden.is_overridden is True
        assert overridden.standard_id == original.standard_id
        assert overridden.framework == original.framework
        assert overridden.source == original.source
        assert overridden.resolved_from == ResolvedFrom.NATIONAL
        assert original.description == "nat"


class TestResolveQuery:

    def test_defaults_to_national(self) -> None:
        query = validate_query(None, "Science", 0, None, "S1")

        assert query.state_code == "DEFAULT"
        assert query.uses_state_crosswalk is False
        assert query.subject == Subject.SCIENCE

    def test_state_code_uppercased(self) -> None:
        query = validate_query("tx", "Math", 3, None, "S1")

        assert query.state_code == "TX"
        assert query.uses_state_crosswalk is True

    def test_cache_key_covers_every_field(self) -> None:
        query = ResolveQuery(state_code="CA", subject="Math", grade=5, district_id="D1", school_id="S1")

        assert query.cache_key() == ("CA", "Math", 5, "D1", "S1")

    def test_invalid_query_carries_errors(self) -> None:
        with pytest.raises(InvalidQuery) as exc_info:
            validate_query("DEFAULT", "Math", 99, None, "S1")

        assert exc_info.value.errors
        assert exc_info.value.errors[0]["loc"] == ("grade",)
        assert "grade" in str(exc_info.value)

    def test_invalid_query_is_value_error(self) -> None:
        with pytest.raises(ValueError):
            validate_query("ZZZ", "Math", 1, None, "S1")


def test_normalize_id() -> None:
    assert normalize_id("  C ") == "C"
    with pytest.raises(InvalidQuery):
        normalize_id("  ")


def test_grade_label() -> None:
    assert grade_label(0) == "K"
    assert grade_label(12) == "12"


def test_resolved_from_rank() -> None:
    ranks = [r.rank for r in (ResolvedFrom.NATIONAL, ResolvedFrom.STATE, ResolvedFrom.DISTRICT, ResolvedFrom.SCHOOL)]
    assert ranks == sorted(ranks)
