"""Exception handlers rendering failures as ``{ok: false, error: <code>}``."""

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from protean.exceptions import ExpectedVersionError, ObjectNotFoundError, ValidationError

from pickup.exceptions import PickupError
from pickup.utils.logging import get_logger

logger = get_logger(__name__)


def error_response(status_code: int, error: str, **extra) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"ok": False, "error": error, **extra})


def _first_message(messages: dict) -> str:
    for values in messages.values():
        if isinstance(values, list | tuple) and values:
            return str(values[0])
        if values:
            return str(values)
    return "VALIDATION_ERROR"


async def pickup_error_handler(request: Request, exc: PickupError) -> JSONResponse:
    log = logger.error if exc.status_code >= 500 else logger.info
    log("request_failed", path=request.url.path, status_code=exc.status_code, error=exc.code, detail=exc.message)
    return error_response(exc.status_code, exc.code)


async def validation_error_handler(request: Request, exc: ValidationError) -> JSONResponse:
    logger.info("request_invalid", path=request.url.path, messages=exc.messages)
    return error_response(400, _first_message(exc.messages), details=exc.messages)


async def not_found_handler(request: Request, exc: ObjectNotFoundError) -> JSONResponse:
    logger.info("order_not_found", path=request.url.path)
    return error_response(404, "ORDER_NOT_FOUND")


async def version_conflict_handler(request: Request, exc: ExpectedVersionError) -> JSONResponse:
    logger.warning("order_version_conflict", path=request.url.path, detail=str(exc))
    return error_response(409, "VERSION_CONFLICT")


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    return error_response(400, "INVALID_REQUEST")


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(PickupError, pickup_error_handler)
    app.add_exception_handler(ValidationError, validation_error_handler)
    app.add_exception_handler(ObjectNotFoundError, not_found_handler)
    app.add_exception_handler(ExpectedVersionError, version_conflict_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
