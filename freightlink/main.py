# freightlink/main.py
import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI

from freightlink.config.settings import Settings
from freightlink.config.database import build_engine, build_session_factory
from freightlink.core.auth.service import AuthService
from freightlink.core.middleware import setup_middleware
from freightlink.api.v1.router import api_router
from freightlink.shared.database.models import Base

logger = logging.getLogger(__name__)


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """Build the application around one explicitly constructed Settings object"""
    if settings is None:
        settings = Settings()

    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s"
    )

    engine = build_engine(settings)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        # Startup
        logger.info("🚀 FreightLink API starting...")
        logger.info(f"📍 Version: {settings.version}")
        logger.info(f"🌍 Environment: {'Development' if settings.debug else 'Production'}")
        logger.info(f"🗄️  Database: {engine.url.render_as_string(hide_password=True)}")

        if settings.auto_create_tables:
            Base.metadata.create_all(bind=engine)

        yield

        # Shutdown
        engine.dispose()
        logger.info("🛑 FreightLink API shutting down...")

    app = FastAPI(
        title=settings.app_name,
        version=settings.version,
        description="Freight marketplace matching businesses with drivers, with live shipment tracking",
        docs_url="/docs",
        redoc_url="/redoc" if settings.debug else None,
        lifespan=lifespan
    )

    app.state.settings = settings
    app.state.engine = engine
    app.state.session_factory = build_session_factory(engine)
    app.state.auth_service = AuthService(settings)

    setup_middleware(app, settings)
    app.include_router(api_router, prefix="/api/v1")

    @app.get("/")
    async def root():
        return {
            "message": "🚚 FreightLink API",
            "version": settings.version,
            "status": "running",
            "environment": "production" if not settings.debug else "development",
            "docs": "/docs",
            "api": "/api/v1"
        }

    @app.get("/health")
    async def health_check():
        return {
            "status": "healthy",
            "version": settings.version,
            "app": settings.app_name,
            "environment": "production" if not settings.debug else "development"
        }

    return app


if __name__ == "__main__":
    import uvicorn
    settings = Settings()
    uvicorn.run(
        "freightlink.main:create_app",
        factory=True,
        host=settings.host,
        port=settings.port,
        reload=settings.debug
    )
