"""
FastAPI Application Entry Point

Integrates:
  - WhatsApp (Twilio) webhook
  - Health checks
  - Configuration info
  - Middleware for logging & error handling

Run: uvicorn main:app --reload --host 0.0.0.0 --port 3000
"""

import logging
import time
import traceback
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from config import Config
from errors import AppError
from infra import InfraBootstrap, setup_logging
from transport.whatsapp import router as whatsapp_router

logger = logging.getLogger(__name__)

APP_NAME = "Whatstutor AI"
APP_VERSION = "1.0.0"
APP_DESCRIPTION = "WhatsApp language tutor backed by Dialogflow CX and Google speech services"


def _error_body(message: str) -> dict:
    return {"success": False, "message": message}


def create_app(bootstrap: Optional[InfraBootstrap] = None) -> FastAPI:
    """
    Build the FastAPI application.

    Args:
        bootstrap: Pre-built object graph. Built from the environment at
            startup when omitted.
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """
        Application lifespan: startup and shutdown handlers.
        """
        # Startup
        setup_logging(Config.LOG_LEVEL, Config.LOG_DIR, Config.LOG_TO_FILE)
        Config.validate()

        if getattr(app.state, "bootstrap", None) is None:
            app.state.bootstrap = InfraBootstrap.get_instance()
        app.state.bootstrap.dispatcher.start()

        logger.info("=" * 60)
        logger.info(f"{APP_NAME} starting up...")
        logger.info(f"Environment: {Config.ENVIRONMENT}")
        logger.info(f"Backends: {app.state.bootstrap!r}")
        logger.info("=" * 60)

        yield

        # Shutdown
        logger.info(f"{APP_NAME} shutting down...")
        await app.state.bootstrap.aclose()

    app = FastAPI(
        title=APP_NAME,
        description=APP_DESCRIPTION,
        version=APP_VERSION,
        lifespan=lifespan,
    )
    app.state.bootstrap = bootstrap
    app.state.started_at = time.monotonic()

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Middleware for logging
    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        """Log all requests."""
        logger.info(
            f"{request.method} {request.url.path}",
            extra={"client": request.client.host if request.client else None},
        )
        return await call_next(request)

    # ========================================================================
    # ERROR HANDLERS
    # ========================================================================

    @app.exception_handler(AppError)
    async def app_error_handler(request: Request, exc: AppError):
        logger.error(
            f"Operational error: {exc.message}",
            extra={"path": request.url.path, "status_code": exc.status_code},
        )
        return JSONResponse(status_code=exc.status_code, content=_error_body(exc.message))

    @app.exception_handler(StarletteHTTPException)
    async def http_error_handler(request: Request, exc: StarletteHTTPException):
        if exc.status_code == 404:
            return JSONResponse(status_code=404, content=_error_body("Endpoint not found"))
        return JSONResponse(
            status_code=exc.status_code,
            content=_error_body(str(exc.detail)),
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(Exception)
    async def unhandled_error_handler(request: Request, exc: Exception):
        logger.error(
            f"Unhandled error: {exc}",
            exc_info=exc,
            extra={"path": request.url.path},
        )
        body = _error_body("Internal Server Error")
        if Config.ENVIRONMENT == "development":
            body["stack"] = "".join(traceback.format_exception(exc))
        return JSONResponse(status_code=500, content=body)

    # ========================================================================
    # ROUTES
    # ========================================================================

    app.include_router(whatsapp_router)

    @app.get("/health")
    async def health():
        """Liveness check."""
        return {
            "status": "healthy",
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "uptime": round(time.monotonic() - app.state.started_at, 3),
        }

    @app.get("/health/ready")
    async def health_ready():
        """Readiness check (required configuration present)."""
        missing = Config.missing()
        if missing:
            return {"status": "not_ready", "missing": missing}
        return {"status": "ready"}

    @app.get("/")
    async def root():
        """Root endpoint with API info."""
        return {
            "name": APP_NAME,
            "version": APP_VERSION,
            "description": APP_DESCRIPTION,
            "endpoints": {
                "webhook": "POST /webhook",
                "webhook_status": "GET /webhook",
                "health": "GET /health",
                "health_ready": "GET /health/ready",
                "config_info": "GET /config/info",
            },
        }

    @app.get("/config/info")
    async def config_info(request: Request):
        """Get non-sensitive configuration info."""
        bootstrap = request.app.state.bootstrap
        settings = bootstrap.settings
        return {
            "environment": Config.ENVIRONMENT,
            "port": Config.PORT,
            "dialogflow_location": settings.dialogflow_location,
            "speech_language": settings.stt_language,
            "speech_alternate_language": settings.stt_alternate_language,
            "tts_language": settings.tts_language,
            "supported_languages": settings.supported_languages,
            "max_audio_size": settings.max_audio_size,
            "backends": {
                "stt": settings.stt_backend,
                "tts": settings.tts_backend,
                "agent": settings.agent_backend,
                "sender": settings.sender_backend,
            },
            "active_sessions": bootstrap.session_store.count(),
        }

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "main:app",
        host="0.0.0.0",
        port=Config.PORT,
        reload=Config.ENVIRONMENT == "development",
    )
