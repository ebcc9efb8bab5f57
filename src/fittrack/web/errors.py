"""Map fittrack errors to JSON responses."""

import logging

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from ..errors import (
    FitTrackError,
    NotFoundError,
    OwnershipError,
    PartialCascadeDeleteError,
    StoreError,
    ValidationError,
)

logger = logging.getLogger(__name__)


async def not_found_handler(request: Request, exc: NotFoundError):
    return JSONResponse(status_code=status.HTTP_404_NOT_FOUND, content={"detail": str(exc)})


async def ownership_handler(request: Request, exc: OwnershipError):
    return JSONResponse(status_code=status.HTTP_403_FORBIDDEN, content={"detail": str(exc)})


async def validation_handler(request: Request, exc: ValidationError):
    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, content={"detail": str(exc)}
    )


async def partial_cascade_handler(request: Request, exc: PartialCascadeDeleteError):
    return JSONResponse(
        status_code=status.HTTP_409_CONFLICT,
        content={
            "detail": str(exc),
            "atomic": False,
            "target": exc.target,
            "committed_batches": exc.committed_batches,
            "total_batches": exc.total_batches,
            "deleted_documents": exc.deleted_documents,
        },
    )


async def store_handler(request: Request, exc: StoreError):
    logger.error("Store failure on %s %s: %s", request.method, request.url.path, exc)
    return JSONResponse(
        status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        content={"detail": "Document store unavailable"},
    )


async def fittrack_handler(request: Request, exc: FitTrackError):
    logger.exception("Unhandled fittrack error", exc_info=exc)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, content={"detail": str(exc)}
    )


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(NotFoundError, not_found_handler)  # type: ignore
    app.add_exception_handler(OwnershipError, ownership_handler)  # type: ignore
    app.add_exception_handler(ValidationError, validation_handler)  # type: ignore
    app.add_exception_handler(PartialCascadeDeleteError, partial_cascade_handler)  # type: ignore
    app.add_exception_handler(StoreError, store_handler)  # type: ignore
    app.add_exception_handler(FitTrackError, fittrack_handler)  # type: ignore
