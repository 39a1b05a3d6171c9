"""
Error Handling & Sanitization - HIPAA-Compliant
Prevents information leakage through error messages

- Generic error messages for clients
- Detailed errors only in secure logs, keyed by an error id
- Consistent error format
"""

import uuid
from typing import Optional, Dict, Any
from fastapi import Request, HTTPException
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware

from app.core.logging import log_error

GENERIC_ERROR = "An error occurred processing your request"


class ErrorSanitizer:
    """Sanitizes errors to prevent information leakage"""

    SENSITIVE_PATTERNS = [
        'password', 'secret', 'token', 'key', 'credential',
        'database', 'connection', 'sql', 'query', 'stack',
        'traceback', 'file', 'path', 'internal', 'server'
    ]

    @staticmethod
    def sanitize_error(error: Exception, context: Optional[str] = None) -> Dict[str, Any]:
        """
        Sanitize error for client response

        Args:
            error: Exception instance
            context: Additional context (logged only)

        Returns:
            Sanitized error dictionary
        """
        if isinstance(error, HTTPException):
            return {
                "error": error.detail,
                "status_code": error.status_code,
                "type": "http_exception"
            }

        error_lower = str(error).lower()
        if any(pattern in error_lower for pattern in ErrorSanitizer.SENSITIVE_PATTERNS):
            return {
                "error": GENERIC_ERROR,
                "status_code": 500,
                "type": "internal_error",
                "error_id": ErrorSanitizer.generate_error_id()
            }

        if isinstance(error, ValueError):
            return {
                "error": "Validation error",
                "status_code": 400,
                "type": "validation_error"
            }

        if isinstance(error, PermissionError):
            return {
                "error": "Access denied",
                "status_code": 403,
                "type": "access_denied"
            }

        if isinstance(error, FileNotFoundError):
            return {
                "error": "Resource not found",
                "status_code": 404,
                "type": "not_found"
            }

        return {
            "error": GENERIC_ERROR,
            "status_code": 500,
            "type": "internal_error",
            "error_id": ErrorSanitizer.generate_error_id()
        }

    @staticmethod
    def generate_error_id() -> str:
        return str(uuid.uuid4())[:8]


class ErrorHandlingMiddleware(BaseHTTPMiddleware):
    """
    Middleware to catch and sanitize unhandled errors
    """

    async def dispatch(self, request: Request, call_next):
        try:
            return await call_next(request)
        except Exception as e:
            error_id = ErrorSanitizer.generate_error_id()
            log_error(
                f"Unhandled exception [{error_id}] on {request.method} {request.url.path}: "
                f"{type(e).__name__}: {str(e)}",
                logger_name="error_handler",
                exc_info=True
            )

            sanitized = ErrorSanitizer.sanitize_error(e)
            sanitized["error_id"] = error_id

            return JSONResponse(
                status_code=sanitized["status_code"],
                content=sanitized
            )
