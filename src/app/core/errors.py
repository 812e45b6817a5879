"""Domain errors raised by the catalog services.

Each error carries the HTTP status it maps to; ``register_error_handlers`` renders
all of them (and FastAPI's own request errors) as ``{"message": ...}``.
"""

import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

logger = logging.getLogger(__name__)


class CatalogError(Exception):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class NotFoundError(CatalogError):
    status_code = status.HTTP_404_NOT_FOUND


class ValidationError(CatalogError):
    status_code = status.HTTP_400_BAD_REQUEST


class ConflictError(CatalogError):
    # Duplicate reviews are reported as a plain bad request
    status_code = status.HTTP_400_BAD_REQUEST


class NotAuthenticatedError(CatalogError):
    status_code = status.HTTP_401_UNAUTHORIZED


class NotAuthorizedError(CatalogError):
    status_code = status.HTTP_403_FORBIDDEN


def _format_validation_error(exc: RequestValidationError) -> str:
    parts = []
    for err in exc.errors():
        loc = ".".join(str(p) for p in err.get("loc", ()) if p != "body")
        parts.append(f"{loc}: {err.get('msg')}" if loc else str(err.get("msg")))
    return "; ".join(parts) or "Invalid request"


def register_error_handlers(app: FastAPI) -> None:
    @app.exception_handler(CatalogError)
    async def catalog_error_handler(_: Request, exc: CatalogError):
        return JSONResponse(status_code=exc.status_code, content={"message": exc.message})

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(_: Request, exc: RequestValidationError):
        message = _format_validation_error(exc)
        logger.info("Rejected request: %s", message)
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST, content={"message": message}
        )

    @app.exception_handler(StarletteHTTPException)
    async def http_error_handler(_: Request, exc: StarletteHTTPException):
        return JSONResponse(
            status_code=exc.status_code,
            content={"message": str(exc.detail)},
            headers=getattr(exc, "headers", None),
        )
