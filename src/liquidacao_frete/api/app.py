"""FastAPI app bootstrap for the freight settlement API."""

from __future__ import annotations

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import Annotated

from fastapi import Depends, FastAPI, HTTPException, status
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from liquidacao_frete.api.error_handlers import register_error_handlers
from liquidacao_frete.api.routes import v1_router
from liquidacao_frete.core.settings import get_settings
from liquidacao_frete.db.session import get_db_session

logger = logging.getLogger(__name__)

OPENAPI_TAGS = [
    {
        "name": "Settlements",
        "description": "Plan and post the freight payment of a route segment.",
    },
    {
        "name": "Cargos",
        "description": "Cargo value, posted extras and settlement progress.",
    },
    {
        "name": "Undo",
        "description": "Revert the most recent settlement while the window is open.",
    },
]


@asynccontextmanager
async def lifespan(_: FastAPI) -> AsyncIterator[None]:
    settings = get_settings()
    logger.info(
        "api_started",
        extra={
            "app_timezone": settings.app_timezone,
            "undo_timeout_seconds": settings.undo_timeout_seconds,
        },
    )
    yield
    logger.info("api_stopped")


def create_app() -> FastAPI:
    """Create and configure FastAPI application instance."""

    logging.basicConfig(
        level=get_settings().log_level,
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )
    app = FastAPI(
        title="Liquidacao de Frete API",
        version="0.1.0",
        openapi_tags=OPENAPI_TAGS,
        lifespan=lifespan,
    )

    @app.get("/health/live", include_in_schema=False)
    def health_live() -> dict[str, str]:
        return {"status": "alive"}

    @app.get("/health/ready", include_in_schema=False)
    def health_ready(
        db_session: Annotated[Session, Depends(get_db_session)],
    ) -> dict[str, str]:
        try:
            db_session.execute(text("SELECT 1"))
        except SQLAlchemyError as exc:
            logger.warning("database_unavailable", extra={"error": str(exc)})
            raise HTTPException(
                status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
                detail="Database is unavailable",
            ) from exc
        return {"status": "ready"}

    register_error_handlers(app)
    app.include_router(v1_router)
    return app


app = create_app()
