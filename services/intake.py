"""
Request intake: validate raw customer + loan fields before any entity exists.
Pydantic does the checking; failures are re-raised as the domain ValidationError
with the failing field (snake_case) and the constraint message.
"""
from __future__ import annotations

from typing import Any, Iterable, Mapping

import pydantic
from pydantic.alias_generators import to_snake

from exceptions import ValidationError
from schemas.loan_application import LoanApplicationRequest

_REQUEST_SECTIONS = {"body", "query", "path"}


def describe_error(error: Mapping[str, Any]) -> dict[str, str]:
    """Reduce one pydantic error entry to {"field", "message"}."""
    loc = [str(part) for part in error.get("loc") or () if part not in _REQUEST_SECTIONS]
    field = ".".join(to_snake(part) for part in loc) or "__root__"
    ctx = error.get("ctx") or {}
    # ValueErrors raised by our validators carry the bare message in ctx["error"]
    if error.get("type") == "value_error" and ctx.get("error") is not None:
        message = str(ctx["error"])
    elif error.get("type") == "missing":
        message = f"{field.replace('_', ' ')} is required"
    else:
        message = str(error.get("msg") or "invalid value")
    return {"field": field, "message": message}


def describe_errors(errors: Iterable[Mapping[str, Any]]) -> list[dict[str, str]]:
    return [describe_error(e) for e in errors]


def validate_request(data: Mapping[str, Any]) -> LoanApplicationRequest:
    """Validate and normalize an application payload; raise ValidationError on the first bad field."""
    try:
        return LoanApplicationRequest.model_validate(dict(data))
    except pydantic.ValidationError as e:
        entries = describe_errors(e.errors())
        first = entries[0]
        raise ValidationError(first["field"], first["message"], entries) from e
