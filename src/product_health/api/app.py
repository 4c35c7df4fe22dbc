"""FastAPI application factory."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, HTTPException, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from product_health.api.additives import router as additives_router
from product_health.api.models import AnalyzeRequest
from product_health.app_logging import configure_logging
from product_health.containers import AppContainer
from product_health.services.products import ProductNotFoundError

UNPROCESSABLE_ENTITY = 422


def create_app(container: AppContainer) -> FastAPI:
    """Create a FastAPI app configured with dependencies."""
    configure_logging(debug=container.settings.debug)
    logger = logging.getLogger(__name__)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        app.state.container.knowledge_base.warm_up()
        yield
        await app.state.container.close_resources()

    app = FastAPI(lifespan=lifespan)
    app.state.container = container

    @app.exception_handler(RequestValidationError)
    async def validation_error(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        """Report invalid payloads without echoing rejected input values."""
        return JSONResponse(
            status_code=UNPROCESSABLE_ENTITY,
            content={
                "detail": jsonable_encoder(
                    [
                        {key: value for key, value in error.items() if key != "input"}
                        for error in exc.errors()
                    ]
                )
            },
        )

    app.include_router(additives_router)

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Simple health check endpoint."""
        return {"status": "ok"}

    @app.post("/analyze")
    async def analyze(payload: AnalyzeRequest, request: Request) -> dict[str, object]:
        """Score product data supplied in the request body."""
        state_container: AppContainer = request.app.state.container
        result = state_container.health_score_service.analyze(payload.to_record())
        return result.to_dict()

    @app.get("/products/{barcode}/health-score")
    async def product_health_score(
        barcode: str, request: Request
    ) -> dict[str, object]:
        """Return the health score for a catalog product."""
        state_container: AppContainer = request.app.state.container
        try:
            result = await state_container.health_score_service.get_health_score(
                barcode
            )
        except ProductNotFoundError as exc:
            logger.info("Product not found: %s", barcode)
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)
            ) from exc
        return result.to_dict()

    return app
