import logging

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from campaign_feed.config import settings
from campaign_feed.exceptions import ConfigError, DataSourceError
from campaign_feed.api.middleware import add_request_id, enforce_body_size, log_requests

# Routers
from campaign_feed.api.routers import imports, insights, responses, sync, system

# Configure logging
logging.basicConfig(level=getattr(logging, settings.logging.level.upper(), logging.INFO))
logger = logging.getLogger("campaign_feed.api")


def _error_payload(request: Request, error: str, detail: str) -> dict:
    payload = {"error": error, "detail": detail}
    rid = getattr(request.state, "request_id", None)
    if rid:
        payload["request_id"] = rid
    return payload


def create_app() -> FastAPI:
    """
    Factory to build the FastAPI application.
    Services come from campaign_feed.api.deps; tests swap them via dependency_overrides.
    """
    app = FastAPI(title=f"{settings.app.name} API", version=settings.app.version)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Last registered runs first: the request id wraps everything else.
    app.middleware("http")(enforce_body_size)
    if settings.logging.log_requests:
        app.middleware("http")(log_requests)
    app.middleware("http")(add_request_id)

    app.include_router(system.router)
    app.include_router(responses.router)
    app.include_router(sync.router)
    app.include_router(insights.router)
    app.include_router(imports.router)

    @app.exception_handler(Exception)
    async def unhandled_exception_handler(request: Request, exc: Exception):
        if isinstance(exc, StarletteHTTPException):
            return JSONResponse(status_code=exc.status_code, content={"detail": exc.detail})

        logger.exception("Unhandled error", extra={"path": str(request.url)})
        return JSONResponse(
            status_code=500,
            content=_error_payload(request, "internal_error", "Unexpected server error"),
        )

    @app.exception_handler(DataSourceError)
    async def datasource_exception_handler(request: Request, exc: DataSourceError):
        return JSONResponse(status_code=422, content=_error_payload(request, "invalid_source", str(exc)))

    @app.exception_handler(ConfigError)
    async def config_exception_handler(request: Request, exc: ConfigError):
        return JSONResponse(status_code=400, content=_error_payload(request, "config_error", str(exc)))

    return app

# Module-level app for uvicorn entrypoint
app = create_app()
