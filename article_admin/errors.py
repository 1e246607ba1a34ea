"""
Domain exceptions and the FastAPI handlers that turn them into the
``{"detail": ..., ...}`` JSON envelope.

``HTTPException`` already renders as ``{"detail": ...}``; the handlers
here cover request validation (422 with a field-addressable violation
list) and failed references to other entities.
"""
import logging
from typing import Any, Iterable

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import ValidationError

logger = logging.getLogger(__name__)

# Request locations that are not part of the field path.
_LOCATION_PREFIXES = {"body", "query", "path", "header", "cookie"}


class AuthenticationError(Exception):
    """The bearer token is malformed or expired."""


class UnknownReferenceError(Exception):
    """A DTO points at an entity that does not exist."""

    def __init__(self, field: str, value: Any, entity: str = "user") -> None:
        self.field = field
        self.value = value
        self.entity = entity
        super().__init__(f"No {entity} found for id {value}.")


def property_path(loc: Iterable[Any]) -> str:
    """``("body", "shortContent")`` -> ``"shortContent"``."""
    parts = [str(p) for p in loc]
    if parts and parts[0] in _LOCATION_PREFIXES:
        parts = parts[1:]
    return ".".join(parts)


def violations_from(errors: Iterable[dict]) -> list[dict[str, str]]:
    return [
        {"propertyPath": property_path(err.get("loc", ())), "message": err["msg"]}
        for err in errors
    ]


def format_violations(violations: list[dict[str, str]]) -> str:
    """Render violations the way the API reports them in ``detail``."""
    lines = []
    for violation in violations:
        path = violation["propertyPath"]
        lines.append(f"{path}: {violation['message']}" if path else violation["message"])
    return "\n".join(lines)


def detail_from_validation_error(exc: ValidationError) -> str:
    return format_violations(violations_from(exc.errors()))


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    violations = violations_from(exc.errors())
    logger.warning("Validation failed on %s %s: %s", request.method, request.url.path, violations)
    return JSONResponse(
        status_code=422,
        content={
            "type": "validation_error",
            "detail": format_violations(violations),
            "violations": violations,
        },
    )


async def unknown_reference_handler(request: Request, exc: UnknownReferenceError) -> JSONResponse:
    violations = [{"propertyPath": exc.field, "message": str(exc)}]
    logger.warning("Unknown %s reference %r on %s %s", exc.entity, exc.value, request.method, request.url.path)
    return JSONResponse(
        status_code=422,
        content={
            "type": "unknown_reference",
            "detail": format_violations(violations),
            "violations": violations,
        },
    )


def install_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(UnknownReferenceError, unknown_reference_handler)
