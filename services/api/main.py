"""
Tournament Sheet Dashboard - Backend API
FastAPI service mirroring a Google Sheets game schedule, with password-gated edits.

Install dependencies:
pip install -e ".[test]"

Run server (from services/api):
uvicorn main:create_app --factory --host 0.0.0.0 --port 3000
"""

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from pathlib import Path
from typing import Optional
import contextvars
import logging
import os
import time
import uuid

from adapters.base import SpreadsheetBackend
from core.auth import Authenticator, StaticPasswordCheck, TokenStore
from core.errors import DashboardError
from core.game_writer import GameWriter
from core.gateway import SpreadsheetGateway
from core.header_mapping import HeaderMapper
from core.validation import validation_error_from
from settings import Settings, get_settings

# ========== Request Context for Tracing ==========
request_id_var = contextvars.ContextVar('request_id', default=None)

logger = logging.getLogger(__name__)

STATIC_DIR = Path(__file__).resolve().parent / "static"

SECURITY_HEADERS = {
    "X-Content-Type-Options": "nosniff",
    "X-Frame-Options": "SAMEORIGIN",
    "Referrer-Policy": "no-referrer",
    "X-DNS-Prefetch-Control": "off",
}


def configure_logging(level: str = "INFO") -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )


def _error_body(exc: DashboardError) -> dict:
    body = {"success": False, "error": exc.message}
    if exc.detail:
        body["message"] = exc.detail
    return body


def create_app(
    settings: Optional[Settings] = None,
    backend: Optional[SpreadsheetBackend] = None,
) -> FastAPI:
    """
    Build the app and its services.

    Services live on app.state (gateway, writer, authenticator) and are
    reached through dependencies, so tests can pass a fake backend.
    """
    settings = settings or get_settings()
    configure_logging(settings.log_level)

    if backend is None:
        from adapters.sheets import build_backend
        backend = build_backend(settings)

    app = FastAPI(
        title="Tournament Sheet Dashboard API",
        description="Live view and editing of a Google Sheets game schedule",
        version="1.0",
        docs_url="/docs",
        redoc_url="/redoc"
    )

    gateway = SpreadsheetGateway(backend, max_age=settings.cache_max_age_seconds)
    app.state.settings = settings
    app.state.gateway = gateway
    app.state.mapper = HeaderMapper()
    app.state.writer = GameWriter(gateway, app.state.mapper)
    app.state.authenticator = Authenticator(
        StaticPasswordCheck(settings.auth_password),
        TokenStore(ttl_seconds=settings.token_ttl_seconds, maxsize=settings.max_active_tokens),
    )

    # ========== Request Tracing Middleware ==========
    @app.middleware("http")
    async def request_tracing_middleware(request: Request, call_next):
        """Add request_id and timing to all requests."""
        request_id = str(uuid.uuid4())[:8]
        request_id_var.set(request_id)
        started = time.time()

        response = await call_next(request)

        latency = time.time() - started
        logger.info(
            f"{request.method} {request.url.path} -> {response.status_code} "
            f"({round(latency * 1000, 2)} ms) [{request_id}]"
        )
        response.headers["X-Request-ID"] = request_id
        for name, value in SECURITY_HEADERS.items():
            response.headers.setdefault(name, value)
        return response

    # Polls return the whole sheet every time
    app.add_middleware(GZipMiddleware, minimum_size=1000)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.get_origins_list(),
        allow_credentials=False,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # ========== Error handlers ==========
    @app.exception_handler(DashboardError)
    async def dashboard_error_handler(request: Request, exc: DashboardError):
        if exc.status_code >= 500:
            logger.error(f"{request.method} {request.url.path} failed: {exc.message} ({exc.detail})")
        return JSONResponse(status_code=exc.status_code, content=_error_body(exc))

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError):
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content=_error_body(validation_error_from(exc.errors())),
        )

    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception):
        logger.error(f"Unhandled exception: {str(exc)}", exc_info=True)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"success": False, "error": "Internal server error"}
        )

    # ========== Routers ==========
    from routers import auth as auth_router
    app.include_router(auth_router.router)

    from routers import data as data_router
    app.include_router(data_router.router)

    from routers import games as games_router
    app.include_router(games_router.router)

    # Browser client; mounted last so /api/* wins
    if STATIC_DIR.is_dir():
        app.mount("/", StaticFiles(directory=str(STATIC_DIR), html=True), name="static")

    @app.on_event("startup")
    async def startup_event():
        logger.info("Tournament Sheet Dashboard API starting up...")
        if not settings.auth_password:
            logger.warning("AUTH_PASSWORD not set; editing is disabled until a password is configured")
        logger.info(f"Spreadsheet ID: {settings.sheets_spreadsheet_id} (range {settings.sheets_range})")
        logger.info(f"Memory cache: {settings.cache_max_age_seconds}s, token TTL: {settings.token_ttl_seconds}s")
        if not settings.auth_token_secret:
            logger.info("AUTH_TOKEN_SECRET not set; tokens are random per process")
        logger.info(f"Allowed origins: {settings.get_origins_list()}")

    @app.on_event("shutdown")
    async def shutdown_event():
        logger.info("Tournament Sheet Dashboard API shutting down...")

    return app


if __name__ == "__main__":
    import uvicorn
    port = int(os.getenv("PORT", get_settings().port))
    uvicorn.run("main:create_app", factory=True, host="0.0.0.0", port=port)
