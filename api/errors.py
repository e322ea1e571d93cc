"""
Map domain exceptions to JSON responses. All bodies keep FastAPI's "detail"
key so 404s raised via HTTPException and domain errors look alike to clients.
"""
import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic.alias_generators import to_camel

from exceptions import (
    ComputationError,
    InvalidTransitionError,
    StateInconsistencyError,
    ValidationError,
)
from services.intake import describe_errors

logger = logging.getLogger(__name__)


def _camel_field(field: str) -> str:
    if field == "__root__":
        return field
    return ".".join(to_camel(part) for part in field.split("."))


def _error_response(status_code: int, code: str, detail: str, **extra) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"detail": detail, "code": code, **extra})


def _validation_response(field: str, message: str, errors: list[dict[str, str]]) -> JSONResponse:
    camel_errors = [{"field": _camel_field(e["field"]), "message": e["message"]} for e in errors]
    camel_field = _camel_field(field)
    return _error_response(
        422,
        ValidationError.code,
        f"{camel_field}: {message}",
        field=camel_field,
        errors=camel_errors,
    )


async def domain_validation_handler(request: Request, exc: ValidationError) -> JSONResponse:
    logger.info("Rejected %s %s: %s: %s", request.method, request.url.path, exc.field, exc.message)
    return _validation_response(exc.field, exc.message, exc.errors)


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    entries = describe_errors(exc.errors()) or [{"field": "__root__", "message": "Validation failed"}]
    first = entries[0]
    logger.info("Rejected %s %s: %s: %s", request.method, request.url.path, first["field"], first["message"])
    return _validation_response(first["field"], first["message"], entries)


async def invalid_transition_handler(request: Request, exc: InvalidTransitionError) -> JSONResponse:
    logger.info("Refused transition on %s: %s", request.url.path, exc.message)
    return _error_response(409, exc.code, exc.message, current=exc.current, target=exc.target)


async def internal_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.error("%s on %s %s", type(exc).__name__, request.method, request.url.path, exc_info=exc)
    return _error_response(500, getattr(exc, "code", "internal_error"), "Internal server error")


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(ValidationError, domain_validation_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(InvalidTransitionError, invalid_transition_handler)
    app.add_exception_handler(StateInconsistencyError, internal_error_handler)
    app.add_exception_handler(ComputationError, internal_error_handler)
