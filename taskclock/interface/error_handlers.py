"""Translate service errors into JSON responses."""

import logging

from fastapi import FastAPI, HTTPException, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from taskclock.core.config import constants
from taskclock.core.errors import ErrorCode, ErrorResponse, TaskClockError, classify_error_with_response


logger = logging.getLogger(__name__)


def _json(error: ErrorResponse) -> JSONResponse:
    return JSONResponse(
        status_code=error.status_code,
        content={"error": {"code": error.code, "message": error.message}},
    )


async def handle_service_error(request: Request, exc: Exception) -> JSONResponse:
    error = classify_error_with_response(exc)
    logger.info(
        "request_rejected",
        extra={"path": request.url.path, "code": error.code, "status_code": error.status_code},
    )
    return _json(error)


async def handle_request_validation_error(request: Request, exc: Exception) -> JSONResponse:
    errors = exc.errors() if isinstance(exc, RequestValidationError) else []
    message = "; ".join(
        f"{'.'.join(str(part) for part in error['loc'][1:]) or 'body'}: {error['msg']}" for error in errors
    )
    logger.info("request_validation_failed", extra={"path": request.url.path, "error_count": len(errors)})
    return _json(
        ErrorResponse(
            code=ErrorCode.ERR_VALIDATION,
            message=message or "Invalid request",
            status_code=constants.HTTP_BAD_REQUEST,
        )
    )


async def handle_http_exception(_request: Request, exc: HTTPException) -> JSONResponse:
    codes = {
        constants.HTTP_UNAUTHORIZED: ErrorCode.ERR_UNAUTHORIZED,
        constants.HTTP_FORBIDDEN: ErrorCode.ERR_FORBIDDEN,
        constants.HTTP_NOT_FOUND: ErrorCode.ERR_NOT_FOUND,
    }
    return _json(
        ErrorResponse(
            code=codes.get(exc.status_code, ErrorCode.ERR_UNKNOWN),
            message=str(exc.detail),
            status_code=exc.status_code,
        )
    )


async def handle_unexpected_error(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("unhandled_error", extra={"path": request.url.path, "error": str(exc)})
    return _json(classify_error_with_response(exc))


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(TaskClockError, handle_service_error)
    app.add_exception_handler(RequestValidationError, handle_request_validation_error)
    app.add_exception_handler(HTTPException, handle_http_exception)
    app.add_exception_handler(Exception, handle_unexpected_error)
