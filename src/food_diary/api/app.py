"""FastAPI application factory."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from food_diary.api.diary import router as diary_router
from food_diary.app_logging import configure_logging
from food_diary.containers import AppContainer
from food_diary.domain.errors import (
    DiaryError,
    InvalidRangeError,
    NotFoundError,
    TransportError,
    ValidationError,
)

_ERROR_STATUS: dict[type[DiaryError], int] = {
    ValidationError: 422,
    NotFoundError: 404,
    InvalidRangeError: 400,
    TransportError: 502,
}


def create_app(container: AppContainer) -> FastAPI:
    """Create a FastAPI app configured with dependencies."""
    configure_logging(container.settings.log_level)
    logger = logging.getLogger(__name__)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        yield
        await app.state.container.close_resources()

    app = FastAPI(lifespan=lifespan)
    app.state.container = container

    app.include_router(diary_router)

    @app.exception_handler(DiaryError)
    async def diary_error_handler(request: Request, exc: DiaryError) -> JSONResponse:
        status_code = _status_for(exc)
        if isinstance(exc, TransportError):
            logger.warning(
                "Entry store unavailable",
                extra={"path": request.url.path, "error": str(exc)},
            )
        content: dict[str, object] = {"error": str(exc)}
        if isinstance(exc, ValidationError):
            content["details"] = exc.errors
        return JSONResponse(status_code=status_code, content=content)

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Simple health check endpoint."""
        return {"status": "ok"}

    return app


def _status_for(exc: DiaryError) -> int:
    for error_type, status_code in _ERROR_STATUS.items():
        if isinstance(exc, error_type):
            return status_code
    return 500
