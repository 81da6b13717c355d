"""
Main FastAPI application for the error monitoring service.
"""

from datetime import datetime
from typing import Dict, Optional
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
import uvicorn

from api.health import router as health_router
from api.monitoring import router as monitoring_router
from configs.settings import get_settings, validate_settings
from error_monitoring import ErrorMonitor, initialize_error_monitor, shutdown_error_monitor
from utils.logging import get_logger, setup_logging, LogConfig

logger = get_logger(__name__)


def create_app(monitor: Optional[ErrorMonitor] = None, configure_logging: bool = True) -> FastAPI:
    """
    Build the API application.

    Args:
        monitor: Monitor to serve; the global monitor is created on startup
            when omitted
        configure_logging: Install log handlers on startup
    """
    settings = monitor.config if monitor is not None else get_settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Application lifespan events."""
        # Startup
        if configure_logging:
            setup_logging(LogConfig.from_settings(settings))

        logger.info(f"Starting {settings.app_name}")

        if not validate_settings(settings):
            logger.error("Configuration validation failed")
            raise RuntimeError("Invalid configuration")

        owns_monitor = monitor is None
        if owns_monitor:
            app.state.monitor = initialize_error_monitor(settings)
        elif not monitor.is_initialized:
            monitor.initialize()

        logger.info(f"Environment: {settings.environment}")
        logger.info(f"Debug mode: {settings.debug}")

        yield

        # Shutdown
        logger.info(f"Shutting down {settings.app_name}")
        if owns_monitor:
            shutdown_error_monitor()

    app = FastAPI(
        title=settings.app_name,
        description="Error monitoring, health scoring and alerting service",
        version=settings.app_version,
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan
    )
    app.state.monitor = monitor

    # CORS middleware
    allowed_origins = ["*"] if settings.debug else ["http://localhost:3000"]
    app.add_middleware(
        CORSMiddleware,
        allow_origins=allowed_origins,
        allow_credentials=True,
        allow_methods=["GET", "POST"],
        allow_headers=["*"],
    )

    # Include routers
    app.include_router(health_router)
    app.include_router(monitoring_router)

    @app.get("/ping")
    async def ping() -> Dict[str, str]:
        """Basic availability check."""
        return {
            "status": "ok",
            "timestamp": datetime.now().isoformat(),
            "service": "revision-error-monitor"
        }

    return app


app = create_app()


if __name__ == "__main__":
    settings = get_settings()
    uvicorn.run("api.main:app", host=settings.api_host, port=settings.api_port, reload=settings.debug)
