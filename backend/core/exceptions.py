"""
Custom exception handlers for consistent API error responses.

Every rejection raised by the layout and order services is one of the
errors below. None of them is retryable: the same input always produces
the same error, so callers must correct the request instead.
"""

from fastapi import HTTPException, Request, status
from fastapi.responses import JSONResponse
from typing import Any, Dict, List, Optional
import logging

logger = logging.getLogger(__name__)


class APIError(HTTPException):
    """Base API error with consistent structure"""

    def __init__(
        self,
        status_code: int,
        detail: str,
        error_code: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
        headers: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(status_code=status_code, detail=detail, headers=headers)
        self.error_code = error_code
        self.context = context or {}


class NotFoundError(APIError):
    """Resource not found error"""

    def __init__(
        self, detail: str = "Resource not found", error_code: str = "NOT_FOUND"
    ):
        super().__init__(
            status_code=status.HTTP_404_NOT_FOUND, detail=detail, error_code=error_code
        )


class ValidationError(APIError):
    """Validation error"""

    def __init__(
        self,
        detail: str = "Validation failed",
        error_code: str = "VALIDATION_ERROR",
        violations: Optional[List[str]] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        context = dict(context or {})
        if violations:
            context["violations"] = violations
        super().__init__(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=detail,
            error_code=error_code,
            context=context,
        )
        self.violations = violations or []


class InvalidTransitionError(ValidationError):
    """Requested order status is not the legal successor of the current one"""

    def __init__(self, current_status: Optional[str], target_status: str):
        super().__init__(
            detail=f"Invalid status transition from {current_status} to {target_status}",
            error_code="INVALID_TRANSITION",
            context={
                "current_status": current_status,
                "target_status": target_status,
            },
        )
        self.current_status = current_status
        self.target_status = target_status


class ConflictError(APIError):
    """Resource conflict error"""

    def __init__(
        self,
        detail: str = "Resource conflict",
        error_code: str = "CONFLICT",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(
            status_code=status.HTTP_409_CONFLICT,
            detail=detail,
            error_code=error_code,
            context=context,
        )


class ActiveOrderConflictError(ConflictError):
    """A table already holds an order that has not been paid"""

    def __init__(self, table_id: int, existing_order_id: int):
        super().__init__(
            detail="There is already an active order for this table",
            error_code="ACTIVE_ORDER_EXISTS",
            context={"table_id": table_id, "existing_order_id": existing_order_id},
        )
        self.table_id = table_id
        self.existing_order_id = existing_order_id


class LayoutOverflowError(APIError):
    """Requested tables do not fit the floor plan inside the edge clearance"""

    def __init__(
        self,
        table_count: int,
        required_width: int,
        required_height: int,
        floor_plan_id: Optional[int] = None,
    ):
        super().__init__(
            status_code=422,
            detail=(
                f"{table_count} tables need a floor of at least "
                f"{required_width}x{required_height} grid units"
            ),
            error_code="LAYOUT_OVERFLOW",
            context={
                "floor_plan_id": floor_plan_id,
                "table_count": table_count,
                "required_width": required_width,
                "required_height": required_height,
            },
        )
        self.table_count = table_count
        self.required_width = required_width
        self.required_height = required_height
        self.floor_plan_id = floor_plan_id


async def handle_value_error(request: Request, exc: ValueError) -> JSONResponse:
    """Convert ValueError to consistent API response"""
    logger.warning(f"ValueError at {request.url.path}: {str(exc)}")
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={
            "detail": str(exc),
            "error_code": "VALIDATION_ERROR",
            "path": str(request.url.path),
        },
    )


async def handle_api_error(request: Request, exc: APIError) -> JSONResponse:
    """Handle custom API errors"""
    logger.info(f"{exc.error_code} at {request.url.path}: {exc.detail}")
    return JSONResponse(
        status_code=exc.status_code,
        content={
            **exc.context,
            "detail": exc.detail,
            "error_code": exc.error_code,
            "path": str(request.url.path),
        },
        headers=exc.headers,
    )


def register_exception_handlers(app):
    """Register all exception handlers with the FastAPI app"""
    app.add_exception_handler(ValueError, handle_value_error)
    app.add_exception_handler(APIError, handle_api_error)
