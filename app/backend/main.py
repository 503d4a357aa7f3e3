# app/backend/main.py
import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI
from sqlmodel import text

from app.backend.core.config import Settings, get_settings
from app.backend.core.cors import install_cors
from app.backend.core.errors import StoreError, register_exception_handlers
from app.backend.core.logging_config import setup_logging
from app.db.session import create_all_tables, engine

# 라우터
from app.backend.routers import auth, task, user

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    if app.state.settings.auto_create_tables:
        # idempotent; managed deployments run the alembic revision instead
        create_all_tables()
        logger.info("tables ensured")
    yield


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    settings = settings or get_settings()
    setup_logging(settings.log_level)

    app = FastAPI(
        title="Tasks Backend",
        version=settings.app_version,
        lifespan=lifespan,
    )
    app.state.settings = settings

    register_exception_handlers(app)
    install_cors(app, settings)

    # 라우터 등록
    app.include_router(task.router)
    app.include_router(user.user_router)
    app.include_router(auth.auth_router)

    @app.get("/health")
    def health_app():
        return {"ok": True}

    @app.get("/health/db")
    def health_db():
        try:
            with engine.connect() as conn:
                conn.execute(text("SELECT 1"))
            return {"ok": True}
        except Exception:
            logger.exception("database health check failed")
            raise StoreError("Database connection failed")

    logger.info(
        "tasks backend configured ownership_enforced=%s cors_origin=%s",
        settings.ownership_enforced,
        settings.cors_origin,
    )
    return app


app = create_app()
