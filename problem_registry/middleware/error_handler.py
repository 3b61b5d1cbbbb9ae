from fastapi import Request, status
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException
import traceback
import logging
import sys
from typing import Any, Dict, List, Optional

# Logger dedicated to the error handling layer
logger = logging.getLogger("problem_registry.middleware.error_handler")

ROUTE_NOT_FOUND_MESSAGE = "Route not found"
INTERNAL_ERROR_MESSAGE = "Something went wrong!"
INVALID_BODY_MESSAGE = "Invalid request body"


class ErrorDetail:
    """Standard error envelope: {"success": false, "message": ...}."""

    def __init__(
        self,
        status_code: int,
        message: str,
        error: Optional[str] = None,
        errors: Optional[List[Dict[str, Any]]] = None
    ):
        self.status_code = status_code
        self.message = message
        self.error = error
        self.errors = errors

    def to_dict(self) -> Dict[str, Any]:
        """Convert the error to a dictionary."""
        error_dict = {
            "success": False,
            "message": self.message,
        }

        if self.error is not None:
            error_dict["error"] = self.error

        if self.errors:
            error_dict["errors"] = self.errors

        return error_dict

    def to_response(self) -> JSONResponse:
        return JSONResponse(status_code=self.status_code, content=self.to_dict())


def format_stack_trace(stack_trace: str) -> str:
    """Indent the stack trace so it reads as one block in the log."""
    lines = stack_trace.split('\n')
    formatted_lines = []
    for line in lines:
        if line.strip():
            formatted_lines.append(f"  │ {line}")

    return "\n".join(formatted_lines)


def _show_error_detail(request: Request) -> bool:
    settings = getattr(request.app.state, "settings", None)
    return settings is not None and settings.is_development


async def error_handler_middleware(request: Request, call_next):
    """
    Middleware that catches unhandled exceptions and returns the generic
    500 envelope. The exception message is included only in development.
    """
    try:
        return await call_next(request)
    except Exception as exc:
        exc_type, exc_value, exc_traceback = sys.exc_info()
        stack_trace = "".join(traceback.format_exception(exc_type, exc_value, exc_traceback))
        formatted_trace = format_stack_trace(stack_trace)

        error_msg = f"❌ ERROR: {request.method} {request.url.path} - {exc.__class__.__name__}: {str(exc)}"
        logger.error(f"{error_msg}\n╭─ Stack Trace ─────────────────────────╮\n{formatted_trace}\n╰───────────────────────────────────────╯")

        return ErrorDetail(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            message=INTERNAL_ERROR_MESSAGE,
            error=str(exc) if _show_error_detail(request) else None,
        ).to_response()


def setup_error_handlers(app):
    """
    Register exception handlers that render errors in the standard envelope.
    """
    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request, exc):
        """Handler for HTTP exceptions, including unmatched routes."""
        # Raised by the router itself: unknown path or unsupported verb
        if exc.status_code == status.HTTP_405_METHOD_NOT_ALLOWED or (
            exc.status_code == status.HTTP_404_NOT_FOUND and exc.detail == "Not Found"
        ):
            logger.warning(f"⚠️ {request.method} {request.url.path} - {ROUTE_NOT_FOUND_MESSAGE}")
            return ErrorDetail(
                status_code=status.HTTP_404_NOT_FOUND,
                message=ROUTE_NOT_FOUND_MESSAGE,
            ).to_response()

        if exc.status_code >= 500:
            logger.error(f"❌ HTTP: {request.method} {request.url.path} - {exc.status_code} - {exc.detail}")
        else:
            logger.warning(f"⚠️ HTTP: {exc.status_code} - {exc.detail}")

        return ErrorDetail(
            status_code=exc.status_code,
            message=str(exc.detail),
        ).to_response()

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request, exc):
        """Handler for malformed request bodies and parameters."""
        validation_errors = [
            {"loc": list(error["loc"]), "msg": error["msg"], "type": error["type"]}
            for error in exc.errors()
        ]
        logger.warning(f"⚠️ VALID: {request.method} {request.url.path} - {len(validation_errors)} error(s)")

        return ErrorDetail(
            status_code=status.HTTP_400_BAD_REQUEST,
            message=INVALID_BODY_MESSAGE,
            errors=validation_errors,
        ).to_response()
