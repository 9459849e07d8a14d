"""Application entry point and FastAPI app factory."""

from __future__ import annotations

import logging
import sys
from datetime import datetime, timezone
from logging.handlers import RotatingFileHandler
from pathlib import Path

import uvicorn
from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, Response
from fastapi.staticfiles import StaticFiles
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest
from starlette.exceptions import HTTPException as StarletteHTTPException

from .config.settings import settings
from .controllers import auth, courses, groups, users
from .database import Database
from .domain.errors import GroupServiceError
from .middleware import (
    SecurityHeadersMiddleware,
    StructuredLoggingMiddleware,
    TelemetryMiddleware,
)

logger = logging.getLogger(__name__)

_LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"
_LOCATION_PREFIXES = {"body", "query", "path", "header"}
_HTTP_METHODS = ("get", "post", "put", "patch", "delete")


def _configure_logging() -> None:
    """Stream application logs to stdout and a rotating file."""

    logging.getLogger().handlers.clear()

    stdout_handler = logging.StreamHandler(sys.stdout)
    stdout_handler.setFormatter(logging.Formatter(_LOG_FORMAT))

    log_path = Path(settings.log_file)
    log_path.parent.mkdir(parents=True, exist_ok=True)
    file_handler = RotatingFileHandler(
        log_path,
        maxBytes=1_000_000,
        backupCount=5,
        encoding="utf-8",
    )
    file_handler.setFormatter(logging.Formatter(_LOG_FORMAT))

    root_logger = logging.getLogger()
    root_logger.addHandler(stdout_handler)
    root_logger.addHandler(file_handler)
    root_logger.setLevel(logging.DEBUG if settings.debug else logging.INFO)

    middleware_logger = logging.getLogger("connexa.middleware.structured")
    middleware_logger.handlers.clear()
    middleware_stdout = logging.StreamHandler(sys.stdout)
    middleware_stdout.setFormatter(logging.Formatter("%(message)s"))
    middleware_logger.addHandler(middleware_stdout)
    middleware_logger.addHandler(file_handler)
    middleware_logger.setLevel(logging.INFO)
    middleware_logger.propagate = False

    for name in ("sqlalchemy.engine", "uvicorn.access"):
        logging.getLogger(name).setLevel(logging.WARNING)


def _error_body(message: str, **extra) -> dict:
    body = {"success": False, "message": message}
    body.update({key: value for key, value in extra.items() if value is not None})
    return body


def _endpoint_catalogue(app: FastAPI) -> dict[str, str]:
    """Map ``METHOD path`` to a one-line summary for every documented route."""

    catalogue: dict[str, str] = {}
    for path, operations in app.openapi().get("paths", {}).items():
        for method in _HTTP_METHODS:
            operation = operations.get(method)
            if operation is None:
                continue
            description = (operation.get("description") or "").strip().split("\n")[0]
            catalogue[f"{method.upper()} {path}"] = description or operation.get("summary", "")
    return catalogue


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""

    _configure_logging()

    app = FastAPI(
        title=settings.app_name,
        version=settings.app_version,
        debug=settings.debug,
        description="Connexa student networking and study group API",
    )

    app.add_middleware(TelemetryMiddleware)
    app.add_middleware(StructuredLoggingMiddleware)
    app.add_middleware(SecurityHeadersMiddleware)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=settings.cors_allow_credentials,
        allow_methods=settings.cors_allow_methods,
        allow_headers=settings.cors_allow_headers,
    )

    app.include_router(auth.router)
    app.include_router(users.router)
    app.include_router(courses.router)
    app.include_router(groups.router)

    @app.get("/health", include_in_schema=False)
    async def health_check() -> dict:
        """Health check endpoint."""

        return {
            "success": True,
            "message": "Server is running",
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "environment": settings.environment,
            "version": settings.app_version,
        }

    @app.get("/api", include_in_schema=False)
    async def api_index() -> dict:
        """List the public endpoints."""

        return {
            "success": True,
            "message": settings.app_name,
            "version": settings.app_version,
            "endpoints": _endpoint_catalogue(app),
        }

    @app.get("/metrics", include_in_schema=False)
    async def metrics() -> Response:
        """Expose application metrics for Prometheus scraping."""

        return Response(generate_latest(), media_type=CONTENT_TYPE_LATEST)

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        if exc.status_code == 404 and exc.detail == "Not Found":
            body = _error_body(
                "Route not found",
                error=f"Cannot {request.method} {request.url.path}",
            )
        else:
            body = _error_body(str(exc.detail))
        return JSONResponse(
            status_code=exc.status_code,
            content=body,
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        errors = [
            {
                "field": ".".join(
                    str(part) for part in error.get("loc", ()) if part not in _LOCATION_PREFIXES
                ),
                "message": error.get("msg", ""),
                "value": error.get("input"),
            }
            for error in exc.errors()
        ]
        return JSONResponse(
            status_code=400,
            content=jsonable_encoder(_error_body("Invalid input data", errors=errors)),
        )

    @app.exception_handler(GroupServiceError)
    async def group_error_handler(request: Request, exc: GroupServiceError):
        if exc.status_code >= 500:
            logger.error("Group operation failed: %s", exc.message, exc_info=exc)
        return JSONResponse(
            status_code=exc.status_code,
            content=_error_body(exc.message, error=type(exc).__name__),
        )

    @app.exception_handler(Exception)
    async def general_exception_handler(request: Request, exc: Exception):
        logger.error("Unhandled error on %s %s", request.method, request.url.path, exc_info=exc)
        return JSONResponse(
            status_code=500,
            content=_error_body(
                "Internal server error",
                error=repr(exc) if settings.debug else None,
            ),
        )

    @app.on_event("startup")
    async def startup_event() -> None:
        database = Database.from_settings(settings)
        await database.init_models()
        app.state.database = database
        logger.info("%s started (%s)", settings.app_name, settings.environment)

    @app.on_event("shutdown")
    async def shutdown_event() -> None:
        database = getattr(app.state, "database", None)
        if database is not None:
            await database.dispose()
        logger.info("%s stopped", settings.app_name)

    frontend_dir = Path(settings.frontend_dir) if settings.frontend_dir else None
    if frontend_dir is not None and frontend_dir.is_dir():
        app.mount("/", StaticFiles(directory=frontend_dir, html=True), name="frontend")
    else:
        @app.get("/", include_in_schema=False)
        async def root() -> dict[str, str]:
            """Root endpoint."""

            return {
                "message": f"Welcome to {settings.app_name}",
                "version": settings.app_version,
                "status": "operational",
            }

    return app


app = create_app()


if __name__ == "__main__":
    uvicorn.run(
        "connexa.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
    )
