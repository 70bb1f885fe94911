from __future__ import annotations

import logging
from typing import List

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from travelflow.shared.config.settings import settings
from travelflow.shared.logging.logger import setup_logging
from travelflow.shared.persistence.mongo import ensure_indexes

from travelflow.shared.api.health import router as health_router
from travelflow.features.itinerary.api.routes import router as itinerary_router

log = logging.getLogger("app")


def _csv_or_any(value: str) -> List[str]:
    if value and value != "*":
        return [v.strip() for v in value.split(",") if v.strip()]
    return ["*"]


def create_app() -> FastAPI:
    setup_logging()
    app = FastAPI(title="travelflow", version="1.0.0")

    # CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=_csv_or_any(settings.CORS_ALLOW_ORIGINS),
        allow_credentials=settings.CORS_ALLOW_CREDENTIALS,
        allow_methods=_csv_or_any(settings.CORS_ALLOW_METHODS),
        allow_headers=_csv_or_any(settings.CORS_ALLOW_HEADERS),
    )

    # Routers
    app.include_router(health_router)
    app.include_router(itinerary_router, prefix="/v1")

    @app.on_event("startup")
    async def _on_startup():
        if not settings.PERSISTENCE_ENABLED:
            return
        try:
            ensure_indexes()
        except Exception as e:
            log.warning(f"ensure_indexes failed: {e}")

    return app

# Uvicorn/Gunicorn entry point
app = create_app()
