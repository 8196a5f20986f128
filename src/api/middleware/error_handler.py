"""
Error handling middleware for API

FastAPI calls these handlers when an exception escapes an endpoint and
turns it into the standard ErrorResponse envelope:
- Validation errors (bad request format)
- Domain errors (unknown component, role not in allow-list)
- Generic errors (unexpected problems)
"""

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError
from datetime import datetime
import uuid
from typing import Optional

from api.schemas.error import ErrorResponse, ErrorDetail, ValidationErrorResponse
from utils.logger import get_logger
from models.enums import LogCategory
import json

log = get_logger().for_category(LogCategory.API)


class DomainError(Exception):
    """Base class for domain-specific errors"""
    def __init__(
        self,
        code: str,
        message: str,
        details: Optional[dict] = None,
        status_code: int = 400
    ):
        self.code = code
        self.message = message
        self.details = details or {}
        self.status_code = status_code
        super().__init__(message)


class ComponentNotFoundError(DomainError):
    """No component is attached to the object"""
    def __init__(self, object_id: str):
        super().__init__(
            code="COMPONENT_NOT_FOUND",
            message=f"No component loaded on object '{object_id}'",
            details={"object_id": object_id},
            status_code=404
        )


class InvalidComponentKindError(DomainError):
    """Component kind filter is not a known kind"""
    def __init__(self, kind: str, valid_kinds: list):
        super().__init__(
            code="INVALID_COMPONENT_KIND",
            message=f"Component kind '{kind}' is not supported",
            details={
                "kind": kind,
                "valid_kinds": valid_kinds
            },
            status_code=422
        )


class InvalidRoleError(DomainError):
    """Role is empty or missing from the allow-list"""
    def __init__(self, role: str, available_roles: list):
        super().__init__(
            code="INVALID_ROLE",
            message=f"Role '{role}' is not in the allow-list",
            details={
                "role": role,
                "available_roles": available_roles
            },
            status_code=422
        )


def _envelope(detail: ErrorDetail, request_id: str) -> dict:
    return json.loads(ErrorResponse(error=detail, request_id=request_id).model_dump_json())


def register_exception_handlers(app: FastAPI) -> None:
    """Register all exception handlers with FastAPI app"""

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        """Handle Pydantic validation errors (bad JSON structure)"""
        request_id = str(uuid.uuid4())
        errors = exc.errors()

        log.warn(f"Validation error: {len(errors)} errors", request_id=request_id, path=request.url.path)

        validation_errors = []
        for error in errors:
            field = ".".join(str(x) for x in error["loc"][1:])  # Skip "body"
            validation_errors.append({
                "field": field,
                "message": error["msg"],
                "type": error["type"]
            })

        response = ValidationErrorResponse(
            error=ErrorDetail(
                code="VALIDATION_ERROR",
                message="Request validation failed",
                details={"error_count": len(errors)},
                timestamp=datetime.utcnow()
            ),
            validation_errors=validation_errors,
            request_id=request_id
        )

        return JSONResponse(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            content=json.loads(response.model_dump_json())
        )

    @app.exception_handler(DomainError)
    async def domain_exception_handler(request: Request, exc: DomainError):
        """Handle domain-specific business logic errors"""
        request_id = str(uuid.uuid4())

        log.warn(f"Domain error: {exc.code} - {exc.message}", request_id=request_id)

        detail = ErrorDetail(
            code=exc.code,
            message=exc.message,
            details=exc.details,
            timestamp=datetime.utcnow()
        )
        return JSONResponse(status_code=exc.status_code, content=_envelope(detail, request_id))

    @app.exception_handler(Exception)
    async def general_exception_handler(request: Request, exc: Exception):
        """Handle unexpected errors"""
        request_id = str(uuid.uuid4())

        log.error(
            f"Unexpected error: {type(exc).__name__}",
            exception=exc,
            request_id=request_id,
            path=request.url.path
        )

        detail = ErrorDetail(
            code="INTERNAL_SERVER_ERROR",
            message="An unexpected error occurred. Please try again.",
            details={"request_id": request_id},
            timestamp=datetime.utcnow()
        )
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content=_envelope(detail, request_id)
        )
