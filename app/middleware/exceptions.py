from fastapi import HTTPException, Request
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException
from app.schemas.response import ErrorResponse, FieldError
import logging

logger = logging.getLogger(__name__)


def _request_id(request: Request) -> str:
    return getattr(request.state, "request_id", "-")


def _field_path(loc) -> str:
    # Drop the "body"/"query" prefix FastAPI puts on every location
    parts = [str(part) for part in loc]
    if parts and parts[0] in ("body", "query", "path", "header", "form"):
        parts = parts[1:]
    return ".".join(parts) or "request"


def validation_errors(errors) -> list:
    return [FieldError(field=_field_path(err.get("loc", ())), message=err.get("msg", "Invalid value")) for err in errors]


async def validation_exception_handler(request: Request, exc: RequestValidationError):
    request_id = _request_id(request)
    error_response = ErrorResponse(error=validation_errors(exc.errors()))
    logger.warning(f"[{request_id}] Validation error: {exc.errors()}", extra={"request_id": request_id})
    return JSONResponse(status_code=400, content=error_response.model_dump())


async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    request_id = _request_id(request)
    message = exc.detail if isinstance(exc.detail, str) else str(exc.detail)
    if exc.status_code >= 500:
        logger.error(f"[{request_id}] HTTP {exc.status_code}: {message}", extra={"request_id": request_id})
    else:
        logger.warning(f"[{request_id}] HTTP {exc.status_code}: {message}", extra={"request_id": request_id})
    return JSONResponse(
        status_code=exc.status_code,
        content=ErrorResponse(error=message).model_dump(),
        headers=getattr(exc, "headers", None),
    )


async def global_exception_handler(request: Request, exc: Exception):
    request_id = _request_id(request)

    if isinstance(exc, HTTPException):
        return await http_exception_handler(request, exc)

    logger.error(f"[{request_id}] Unhandled exception: {exc}", exc_info=True, extra={"request_id": request_id})
    return JSONResponse(status_code=500, content=ErrorResponse(error=str(exc) or type(exc).__name__).model_dump())
