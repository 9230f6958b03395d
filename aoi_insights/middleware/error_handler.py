"""
Global error handling middleware.
"""
import logging
import math
from typing import Any, Callable

from fastapi import Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware

from aoi_insights.domain.exceptions import (
    AOIInsightsError,
    DataUnavailableError,
    InsufficientPointsError,
    InvalidPointError,
    NoRegionError,
)
from aoi_insights.infrastructure.insights_client import ExternalAPIError


logger = logging.getLogger(__name__)


STATUS_BY_ERROR = {
    InsufficientPointsError: status.HTTP_422_UNPROCESSABLE_ENTITY,
    InvalidPointError: status.HTTP_422_UNPROCESSABLE_ENTITY,
    NoRegionError: status.HTTP_409_CONFLICT,
    DataUnavailableError: status.HTTP_503_SERVICE_UNAVAILABLE,
}


def status_for(error: AOIInsightsError) -> int:
    for error_type, status_code in STATUS_BY_ERROR.items():
        if isinstance(error, error_type):
            return status_code
    return status.HTTP_400_BAD_REQUEST


def _json_safe(value: Any) -> Any:
    # JSON has no NaN or Infinity; report them as strings
    if isinstance(value, float) and not math.isfinite(value):
        return str(value)
    if isinstance(value, dict):
        return {k: _json_safe(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [_json_safe(v) for v in value]
    return value


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """
    Return FastAPI's usual 422 body for invalid requests.

    Rejected inputs are echoed back in the body, and a non-finite number
    among them would otherwise make the response itself unserializable.
    """
    errors = _json_safe(jsonable_encoder(exc.errors()))
    logger.warning(
        f"Request validation failed: {len(errors)} error(s)",
        extra={
            "path": request.url.path,
            "method": request.method,
        }
    )
    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content={"detail": errors},
    )


class ErrorHandlerMiddleware(BaseHTTPMiddleware):
    """
    Global error handling middleware.

    Catches unhandled exceptions and returns consistent error responses.
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

        except DataUnavailableError as e:
            # Provider exhausted: surfaced, not fatal
            logger.error(
                f"Data unavailable: {e.message}",
                extra={
                    "path": request.url.path,
                    "method": request.method,
                    "attempts": len(e.failures),
                }
            )
            return JSONResponse(
                status_code=status_for(e),
                content={
                    "error": "Environmental data unavailable",
                    "code": e.code,
                    "detail": e.message,
                    "attempts": e.to_error_dict()["attempts"],
                }
            )

        except AOIInsightsError as e:
            # Caller errors: not retried
            logger.warning(
                f"Request rejected: {e.code} - {e.message}",
                extra={
                    "path": request.url.path,
                    "method": request.method,
                }
            )
            return JSONResponse(
                status_code=status_for(e),
                content={
                    "error": "Invalid request",
                    "code": e.code,
                    "detail": e.message,
                }
            )

        except ExternalAPIError as e:
            logger.error(
                f"External API error: {str(e)}",
                extra={
                    "path": request.url.path,
                    "method": request.method,
                    "status_code": e.status_code,
                }
            )
            return JSONResponse(
                status_code=status.HTTP_502_BAD_GATEWAY,
                content={
                    "error": "External API error",
                    "detail": e.message,
                }
            )

        except ValueError as e:
            # Log validation errors
            logger.warning(
                f"Validation error: {str(e)}",
                extra={
                    "path": request.url.path,
                    "method": request.method,
                }
            )
            return JSONResponse(
                status_code=status.HTTP_400_BAD_REQUEST,
                content={
                    "error": "Invalid request",
                    "detail": str(e),
                }
            )

        except Exception as e:
            # Log unexpected errors
            logger.exception(
                f"Unhandled exception: {str(e)}",
                extra={
                    "path": request.url.path,
                    "method": request.method,
                }
            )
            return JSONResponse(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                content={
                    "error": "Internal server error",
                    "detail": "An unexpected error occurred",
                }
            )
