"""Application entry point and FastAPI app factory."""

from __future__ import annotations

import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path

import uvicorn
from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, Response
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest

from .config.settings import Settings, ensure_credentials, settings
from .controllers import sessions
from .middleware import StructuredLoggingMiddleware, TelemetryMiddleware

_LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"
_STAGE_FORMAT = "%(asctime)s | %(levelname)s | %(message)s"
_NOISY_LOGGERS = ("botocore", "boto3", "urllib3", "httpx", "google_genai")


def _file_handler(path_value: str, max_bytes: int, fmt: str) -> RotatingFileHandler:
    log_path = Path(path_value)
    log_path.parent.mkdir(parents=True, exist_ok=True)
    handler = RotatingFileHandler(log_path, maxBytes=max_bytes, backupCount=5, encoding="utf-8")
    handler.setFormatter(logging.Formatter(fmt))
    return handler


def _dedicated_logger(name: str, handler: logging.Handler, level: int, propagate: bool) -> None:
    dedicated = logging.getLogger(name)
    dedicated.handlers.clear()
    dedicated.addHandler(handler)
    dedicated.setLevel(level)
    dedicated.propagate = propagate


def _configure_logging(config: Settings) -> None:
    """Stream logs to stdout plus the app, pipeline and transcript files.

    Pipeline records also reach the root handlers; transcripts and the
    colored access lines stay out of them.
    """

    level = logging.DEBUG if config.debug else logging.INFO

    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    console = logging.StreamHandler(sys.stdout)
    console.setFormatter(logging.Formatter(_LOG_FORMAT))
    root_logger.addHandler(console)
    root_logger.addHandler(_file_handler(config.log_file, 1_000_000, _LOG_FORMAT))
    root_logger.setLevel(level)

    access = logging.StreamHandler(sys.stdout)
    access.setFormatter(logging.Formatter("%(message)s"))
    _dedicated_logger("audio_processor.middleware.structured", access, level, propagate=False)
    _dedicated_logger(
        "audio_processor.pipeline",
        _file_handler(config.pipeline_log_file, 500_000, _STAGE_FORMAT),
        logging.INFO,
        propagate=True,
    )
    _dedicated_logger(
        "audio_processor.logs.transcript",
        _file_handler(config.transcript_log_file, 500_000, _STAGE_FORMAT),
        logging.INFO,
        propagate=False,
    )

    for name in _NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


def create_app(config: Settings = settings) -> FastAPI:
    """Create and configure the FastAPI application.

    Raises ``ConfigurationMissingError`` when the AI credential is absent;
    the service has no degraded mode.
    """

    ensure_credentials(config)
    _configure_logging(config)

    app = FastAPI(
        title=config.app_name,
        version=config.app_version,
        debug=config.debug,
        description="Transcribe MP3 audio and turn it into structured documents.",
    )

    app.add_middleware(TelemetryMiddleware)
    app.add_middleware(StructuredLoggingMiddleware)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.cors_origins,
        allow_credentials=config.cors_allow_credentials,
        allow_methods=config.cors_allow_methods,
        allow_headers=config.cors_allow_headers,
    )

    app.include_router(sessions.router)

    @app.get("/", include_in_schema=False)
    async def root() -> dict[str, str]:
        """Root endpoint."""

        return {
            "message": f"Welcome to {config.app_name}",
            "version": config.app_version,
            "status": "operational",
        }

    @app.get("/health", include_in_schema=False)
    async def health_check() -> dict[str, str]:
        """Health check endpoint."""

        return {
            "status": "healthy",
            "service": config.app_name,
            "version": config.app_version,
            "ai_provider": config.ai_provider,
        }

    @app.get("/metrics", include_in_schema=False)
    async def metrics() -> Response:
        """Expose application metrics for Prometheus scraping."""

        return Response(generate_latest(), media_type=CONTENT_TYPE_LATEST)

    @app.exception_handler(HTTPException)
    async def http_exception_handler(request, exc):
        return JSONResponse(
            status_code=exc.status_code,
            content={"detail": exc.detail},
        )

    @app.exception_handler(Exception)
    async def general_exception_handler(request, exc):
        logging.getLogger(__name__).exception("Error no controlado", exc_info=exc)
        return JSONResponse(
            status_code=500,
            content={"detail": "Internal server error"},
        )

    return app


app = create_app()


if __name__ == "__main__":
    uvicorn.run(
        "audio_processor.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
    )
