"""
Validation utilities for the dashboard API.
Turns request validation failures into the API's 400 error shape.
"""
from typing import Any, Dict, Iterable, List

from core.errors import ValidationError


def invalid_fields(errors: Iterable[Dict[str, Any]]) -> List[str]:
    """
    Field names named by pydantic error entries, in order, without repeats.

    A body that is not a JSON object yields an error at the body root,
    reported as "body".
    """
    names: List[str] = []
    for err in errors:
        loc = [p for p in err.get("loc", ()) if p != "body"]
        name = str(loc[0]) if loc else "body"
        if name not in names:
            names.append(name)
    return names


def validation_error_from(errors: Iterable[Dict[str, Any]]) -> ValidationError:
    """
    Build the 400 error for a rejected request body.

    Returns:
        ValidationError whose detail lists the offending fields.
    """
    names = invalid_fields(errors)
    detail = f"Missing or empty: {', '.join(names)}" if names else None
    return ValidationError("All fields are required", detail=detail)
