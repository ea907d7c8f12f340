"""
FastAPI Application Entry Point
Agenda Backend API Server

Usage:
    # Development with auto-reload
    uvicorn agenda.app:app --reload

    # Production
    uvicorn agenda.app:app --host 127.0.0.1 --port 8000
"""

from contextlib import asynccontextmanager
from datetime import datetime

import uvicorn
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from agenda.config.loader import get_config
from agenda.core.logger import get_logger
from agenda.handlers import register_fastapi_routes
from agenda.system.runtime import start_runtime, stop_runtime

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """FastAPI application lifecycle management

    Any failure while starting is the one top-level recovery boundary: it is
    logged and kept in app.state.boot_error, and the API answers 503 instead
    of the process dying.
    """
    logger.info("========== Agenda Backend Starting ==========")
    app.state.boot_error = None

    try:
        coordinator = await start_runtime(register_exit=False)
        logger.info(f"✓ Reminder coordinator: {coordinator.mode}")
        logger.info("========== Agenda Backend Ready ==========")
    except Exception as e:
        app.state.boot_error = str(e) or e.__class__.__name__
        logger.critical(f"Failed to initialize backend: {e}", exc_info=True)

    yield

    # Shutdown: clean up resources
    logger.info("========== Agenda Backend Shutting Down ==========")
    try:
        await stop_runtime(quiet=True)
        logger.info("✓ Reminder coordinator stopped")
    except Exception as e:
        logger.error(f"Error during shutdown: {e}", exc_info=True)


def create_app() -> FastAPI:
    """Create and configure FastAPI application"""
    app = FastAPI(
        title="Agenda Backend API",
        description="Event calendar with entities, statistics and reminders",
        version="1.0.0",
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )
    app.state.boot_error = None

    # Add CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],  # Local frontend only
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.middleware("http")
    async def fatal_error_boundary(request: Request, call_next):
        """Refuse API calls once start-up has failed"""
        boot_error = getattr(request.app.state, "boot_error", None)
        if boot_error and request.url.path.startswith("/api"):
            return JSONResponse(
                status_code=503,
                content={
                    "success": False,
                    "message": f"Application failed to start: {boot_error}",
                    "error": "fatal",
                    "timestamp": datetime.now().isoformat(),
                },
            )
        return await call_next(request)

    # Register API routes using the @api_handler decorator
    register_fastapi_routes(app, prefix="/api")

    @app.get("/")
    async def root():
        """Root endpoint with API information"""
        return {
            "service": "Agenda Backend API",
            "version": "1.0.0",
            "status": "error" if app.state.boot_error else "running",
            "docs": "/docs",
            "redoc": "/redoc",
        }

    @app.get("/health")
    async def health_check():
        """Health check endpoint"""
        if app.state.boot_error:
            return JSONResponse(
                status_code=503,
                content={
                    "status": "unhealthy",
                    "service": "agenda-backend",
                    "error": app.state.boot_error,
                },
            )

        from agenda.core.db import get_db
        from agenda.core.reminders import get_reminder_coordinator

        return {
            "status": "healthy" if get_db().available else "degraded",
            "service": "agenda-backend",
            "reminders_running": get_reminder_coordinator().is_running,
        }

    logger.info("✓ FastAPI application created with routes")
    return app


# Create application instance
app = create_app()


if __name__ == "__main__":
    # Run with uvicorn when executed directly
    config = get_config()
    host = config.get("server.host", "127.0.0.1")
    port = config.get("server.port", 8000)
    debug = config.get("server.debug", False)

    logger.info(f"Starting server at http://{host}:{port}")

    uvicorn.run(
        "agenda.app:app",
        host=host,
        port=port,
        reload=debug,
        log_level="debug" if debug else "info",
    )
