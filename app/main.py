"""FastAPI application: generation, study plan and auth endpoints."""

from contextlib import asynccontextmanager
import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.config import settings
from app.db import connection, repository
from app.dependencies import Services, build_services
from app.routes import ai, auth, study_plans

logger = logging.getLogger("uvicorn.error")


def create_app(services: Services | None = None, *, init_db: bool | None = None) -> FastAPI:
    """Build the application around an explicit collaborator graph.

    Passing ``services`` replaces the production wiring (used by tests).
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        should_init = settings.db_auto_init if init_db is None else init_db
        if should_init:
            repository.init_schema()
            logger.info("Database schema ready")
        yield
        # Drain queued audit writes before the pool goes away.
        app.state.services.writer.shutdown()
        connection.close_pool()

    app = FastAPI(title="Learn With AI", version="0.1.0", lifespan=lifespan)
    app.state.services = services or build_services()

    app.add_middleware(
        CORSMiddleware,
        allow_origins=[settings.cors_origin],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(auth.router, prefix="/auth", tags=["auth"])
    app.include_router(ai.router, prefix="/ai", tags=["ai"])
    app.include_router(study_plans.router, prefix="/study-plans", tags=["study-plans"])

    @app.get("/health")
    def health():
        return {"ok": True}

    return app


app = create_app()
