"""
Error handling for the HTTP layer

Validation failures become 400 with a field-level error list, unknown ids
become 404, and anything else becomes 500 with a generic message.
"""

from contextlib import contextmanager

from fastapi import FastAPI, HTTPException, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from ..exceptions import RecordNotFoundError, ValidationError
from ..logging_config import get_logger

logger = get_logger(__name__)


@contextmanager
def failure_message(message: str):
    """
    Turn unexpected failures inside a route into a 500 carrying ``message``.

    ValidationError and RecordNotFoundError pass through to their handlers.
    """
    try:
        yield
    except (ValidationError, RecordNotFoundError, HTTPException):
        raise
    except Exception:
        logger.exception(message)
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=message)


def _pydantic_errors(exc: RequestValidationError):
    errors = []
    for error in exc.errors():
        # Drop the leading "body"/"query" location segment
        path = [part for part in error.get("loc", ())][1:]
        errors.append({
            "path": path,
            "message": error.get("msg"),
            "type": error.get("type"),
        })
    return errors


def register_error_handlers(app: FastAPI) -> None:
    """Install the JSON error shapes on the application"""

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError):
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={"message": "Invalid data", "errors": _pydantic_errors(exc)},
        )

    @app.exception_handler(ValidationError)
    async def validation_handler(request: Request, exc: ValidationError):
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={"message": exc.message, "errors": exc.errors},
        )

    @app.exception_handler(RecordNotFoundError)
    async def not_found_handler(request: Request, exc: RecordNotFoundError):
        return JSONResponse(
            status_code=status.HTTP_404_NOT_FOUND,
            content={"message": f"{exc.entity} not found"},
        )

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        return JSONResponse(
            status_code=exc.status_code,
            content={"message": exc.detail},
            headers=getattr(exc, "headers", None),
        )
