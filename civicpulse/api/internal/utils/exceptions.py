# Third-party imports
from fastapi import FastAPI, HTTPException, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
import sentry_sdk

# Local application imports
from civicpulse.core.exceptions import CivicPulseError
from civicpulse.core.monitoring.logging import get_logger
from civicpulse.schemas.common import BaseResponse

logger = get_logger(__name__)

# Map HTTP status codes to error codes
ERROR_MAP = {
    400: "bad_request",
    401: "unauthenticated",
    403: "forbidden",
    404: "not_found",
    405: "method_not_allowed",
    409: "conflict",
    422: "unprocessable_entity",
    429: "too_many_requests",
    500: "internal_server_error",
}


def format_validation_errors(exc: RequestValidationError, max_errors: int = 5) -> str:
    error_details = []
    for error in exc.errors():
        message = error.get("msg", "")

        # Drop pydantic's "Value error, " prefix
        val_error_prefix = "Value error, "
        if message.startswith(val_error_prefix):
            message = message[len(val_error_prefix) :]

        location = ".".join(str(part) for part in error.get("loc", ()) if part not in ("body", "query", "path"))
        error_details.append(f"{location}: {message}" if location else message)

    shown = error_details[:max_errors]
    if len(error_details) > max_errors:
        shown.append("…and more errors")
    return "; ".join(shown) if shown else "Invalid request data"


def register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(CivicPulseError)
    async def civicpulse_exception_handler(
        request: Request,
        exc: CivicPulseError,
    ) -> JSONResponse:
        if exc.status_code >= 500:
            logger.error(f"{request.method} {request.url.path} failed: {exc.message}")
        else:
            logger.info(f"{request.method} {request.url.path} rejected ({exc.code}): {exc.message}")
        response = BaseResponse.failure(code=exc.code, message=exc.message, details=exc.details)
        headers = {"WWW-Authenticate": "Bearer"} if exc.status_code == 401 else None
        return JSONResponse(status_code=exc.status_code, content=response.model_dump(), headers=headers)

    @app.exception_handler(HTTPException)
    async def http_exception_handler(
        request: Request,  # noqa
        exc: HTTPException,
    ) -> JSONResponse:
        error_code = ERROR_MAP.get(exc.status_code, "error")
        detail = exc.detail if isinstance(exc.detail, str) else str(exc.detail)
        response = BaseResponse.failure(code=error_code, message=detail)
        return JSONResponse(status_code=exc.status_code, content=response.model_dump(), headers=exc.headers)

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(
        request: Request,  # noqa
        exc: RequestValidationError,
    ) -> JSONResponse:
        response = BaseResponse.failure(code="validation_error", message=format_validation_errors(exc))
        return JSONResponse(status_code=400, content=response.model_dump())

    @app.exception_handler(Exception)
    async def generic_exception_handler(
        request: Request,
        exc: Exception,
    ) -> JSONResponse:
        logger.error(f"Unhandled error on {request.method} {request.url.path}: {exc!r}")
        sentry_sdk.capture_exception(exc)
        response = BaseResponse.failure(
            code="internal_server_error",
            message="An unexpected error occurred. Please try again later.",
        )
        return JSONResponse(status_code=500, content=response.model_dump())
