"""
Field constraints shared by request schemas and services.

Services re-check these so callers that bypass the HTTP layer still fail
closed with ServiceValidationError.
"""

from typing import Optional

from app.exceptions import ServiceValidationError

RECIPE_NAME_MAX = 120
RECIPE_DESCRIPTION_MAX = 500
INGREDIENT_NAME_MAX = 100
INGREDIENT_UNIT_MAX = 50


def require_text(field: str, value: Optional[str], max_length: int) -> str:
    """Return the trimmed value; reject missing, blank or over-long text."""
    if value is None or not value.strip():
        raise ServiceValidationError(
            f"{field} is required", details={"field": field, "reason": "required"}
        )
    value = value.strip()
    if len(value) > max_length:
        raise ServiceValidationError(
            f"{field} must be at most {max_length} characters",
            details={"field": field, "reason": "max_length", "limit": max_length},
        )
    return value


def optional_text(field: str, value: Optional[str], max_length: int) -> Optional[str]:
    """Return None for missing/blank text, otherwise apply the length limit."""
    if value is None or not value.strip():
        return None
    return require_text(field, value, max_length)
