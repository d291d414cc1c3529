"""
Validation Helpers

Schema validation that turns pydantic failures into the domain
error taxonomy. Every engine and gateway entry point validates its
input here before touching the record store.
"""

import logging
from typing import Any, TypeVar

from pydantic import BaseModel, ValidationError

from standards_hub.errors import InvalidQuery
from standards_hub.schemas.query import ResolveQuery

logger = logging.getLogger(__name__)

T = TypeVar("T", bound=BaseModel)


def validate_schema(schema_class: type[T], data: dict[str, Any]) -> T:
    """
    Validate data against a Pydantic schema.

    Args:
        schema_class: The Pydantic model class to validate against
        data: The data dictionary to validate

    Returns:
        Validated Pydantic model instance

    Raises:
        InvalidQuery: If validation fails
    """
    try:
        return schema_class.model_validate(data)
    except ValidationError as e:
        errors = e.errors(include_url=False)
        fields = ", ".join(".".join(str(p) for p in err["loc"]) for err in errors)
        logger.warning(f"Rejected {schema_class.__name__} input ({fields})")
        raise InvalidQuery(
            f"Invalid {schema_class.__name__}: {fields}",
            errors=errors,
        ) from e


def validate_query(
    state_code: str | None,
    subject: str,
    grade: int,
    district_id: str | None,
    school_id: str,
) -> ResolveQuery:
    """Build a ResolveQuery, treating a missing state code as DEFAULT."""
    data: dict[str, Any] = {
        "subject": subject,
        "grade": grade,
        "district_id": district_id,
        "school_id": school_id,
    }
    if state_code is not None:
        data["state_code"] = state_code
    return validate_schema(ResolveQuery, data)


def normalize_id(value: str) -> str:
    """Trim an identifier; empty identifiers are rejected."""
    trimmed = (value or "").strip()
    if not trimmed:
        raise InvalidQuery("Identifier must not be empty")
    return trimmed
