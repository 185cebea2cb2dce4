"""FastAPI application factory."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from morfi_plan.api.notifications import router as notifications_router
from morfi_plan.api.planner import router as planner_router
from morfi_plan.app_logging import configure_logging
from morfi_plan.containers import AppContainer
from morfi_plan.domain.errors import (
    DeliveryFailedError,
    NotFoundError,
    ValidationFailedError,
)

INTERNAL_ERROR_MESSAGE = "Error interno del servidor"


def create_app(container: AppContainer) -> FastAPI:
    """Create a FastAPI app configured with dependencies."""
    configure_logging(container.settings.log_level)
    logger = logging.getLogger(__name__)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        if not container.store.is_remote_configured:
            logger.warning("JSONBin not configured, running on the local cache")
        if not container.email_service.is_configured():
            logger.warning("Resend not configured, digests cannot be sent")
        await app.state.container.store.ensure_bin()
        yield
        await app.state.container.close_resources()

    app = FastAPI(lifespan=lifespan)
    app.state.container = container

    app.include_router(planner_router)
    app.include_router(notifications_router)

    @app.exception_handler(ValidationFailedError)
    async def validation_failed(
        request: Request, exc: ValidationFailedError
    ) -> JSONResponse:
        return JSONResponse(status_code=400, content={"error": exc.message})

    @app.exception_handler(NotFoundError)
    async def not_found(request: Request, exc: NotFoundError) -> JSONResponse:
        return JSONResponse(status_code=404, content={"error": "Menú no encontrado"})

    @app.exception_handler(DeliveryFailedError)
    async def delivery_failed(
        request: Request, exc: DeliveryFailedError
    ) -> JSONResponse:
        return JSONResponse(status_code=500, content={"error": exc.message})

    @app.exception_handler(Exception)
    async def unexpected_error(request: Request, exc: Exception) -> JSONResponse:
        logger.exception("Unhandled error on %s", request.url.path, exc_info=exc)
        return JSONResponse(status_code=500, content={"error": INTERNAL_ERROR_MESSAGE})

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Simple health check endpoint."""
        return {"status": "ok"}

    return app
