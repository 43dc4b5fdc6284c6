"""
Global error handling middleware.
"""
import logging
from fastapi import Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError
from starlette.middleware.base import BaseHTTPMiddleware
from typing import Callable

from farmarea.domain.errors import FarmAreaError, NotFoundError


logger = logging.getLogger(__name__)


def _error_response(status_code: int, error: str, detail=None) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={
            "error": error,
            "detail": detail,
        }
    )


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """
    Reject malformed request bodies and parameters with 400.

    FastAPI answers these with 422 by default; the API contract uses 400.
    """
    errors = [
        {
            "loc": [str(part) for part in error.get("loc", ())],
            "msg": error.get("msg", ""),
            "type": error.get("type", ""),
        }
        for error in exc.errors()
    ]
    logger.warning(
        f"Validation error: {len(errors)} invalid field(s)",
        extra={
            "path": request.url.path,
            "method": request.method,
        }
    )
    return _error_response(status.HTTP_400_BAD_REQUEST, "Invalid request data", errors)


class ErrorHandlerMiddleware(BaseHTTPMiddleware):
    """
    Global error handling middleware.

    Catches exceptions escaping the routers and returns consistent error
    responses. Nothing is retried: every failure is terminal for its request.
    """

    async def dispatch(self, request: Request, call_next: Callable):
        """
        Process the request and handle any exceptions.

        Args:
            request: The incoming request
            call_next: The next middleware or route handler

        Returns:
            Response object
        """
        try:
            response = await call_next(request)
            return response

        except NotFoundError as e:
            logger.info(
                f"Not found: {e.entity} {e.entity_id}",
                extra={
                    "path": request.url.path,
                    "method": request.method,
                }
            )
            return _error_response(status.HTTP_404_NOT_FOUND, e.message)

        except FarmAreaError as e:
            logger.warning(
                f"Domain error: {e.message}",
                extra={
                    "path": request.url.path,
                    "method": request.method,
                    "status_code": e.status_code,
                }
            )
            return _error_response(e.status_code, e.message)

        except ValueError as e:
            logger.warning(
                f"Validation error: {str(e)}",
                extra={
                    "path": request.url.path,
                    "method": request.method,
                }
            )
            return _error_response(status.HTTP_400_BAD_REQUEST, "Invalid request", str(e))

        except SQLAlchemyError as e:
            logger.exception(
                f"Persistence failure: {e.__class__.__name__}",
                extra={
                    "path": request.url.path,
                    "method": request.method,
                }
            )
            return _error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, "Database error")

        except Exception as e:
            logger.exception(
                f"Unhandled exception: {str(e)}",
                extra={
                    "path": request.url.path,
                    "method": request.method,
                }
            )
            return _error_response(
                status.HTTP_500_INTERNAL_SERVER_ERROR,
                "Internal server error",
                "An unexpected error occurred",
            )
