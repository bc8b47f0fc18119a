"""FastAPI application for the DriveDoc backend"""

from __future__ import annotations

import asyncio
import os
import signal
import threading
from contextlib import asynccontextmanager
from typing import Any, Dict, Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pymongo.database import Database
from starlette.exceptions import HTTPException as StarletteHTTPException

from drivedoc import db as database
from drivedoc.auth import OAuthClient
from drivedoc.notifications import ExpiryNotifier, PushSender
from drivedoc.payments import PaystackGateway
from drivedoc.utils.config import Settings, config_manager
from drivedoc.utils.exceptions import DriveDocError
from drivedoc.utils.logger import get_logger, setup_logging
from drivedoc.utils.timeutil import Clock, utcnow

from .auth_routes import router as auth_router
from .booking_routes import router as booking_router
from .deps import build_services
from .document_routes import router as document_router
from .notification_routes import router as notification_router
from .payment_routes import router as payment_router

logger = get_logger(__name__)

SERVER_ERROR_MESSAGE = "Server error. Please try again."


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"success": False, "message": message})


def _validation_message(exc: RequestValidationError) -> str:
    errors = exc.errors()
    if not errors:
        return "Invalid request"
    first = errors[0]
    loc = [str(p) for p in first.get("loc", ()) if p not in ("body", "query", "path")]
    field = ".".join(loc)
    msg = first.get("msg", "Invalid value")
    return f"{field}: {msg}" if field else msg


def _shutdown_process(reason: str, **context: Any) -> None:
    """Fail fast: log, then SIGTERM ourselves so uvicorn closes the listener and exits."""
    logger.critical("Unhandled background error, shutting down", reason=reason, **context)
    os.kill(os.getpid(), signal.SIGTERM)


def _install_fail_fast_hooks() -> None:
    loop = asyncio.get_running_loop()

    def _loop_handler(_loop: asyncio.AbstractEventLoop, context: Dict[str, Any]) -> None:
        exc = context.get("exception")
        _shutdown_process(
            "asyncio",
            message=context.get("message"),
            error=repr(exc) if exc else None,
        )

    def _thread_hook(args: threading.ExceptHookArgs) -> None:
        thread_name = args.thread.name if args.thread else None
        _shutdown_process("thread", thread=thread_name, error=repr(args.exc_value))

    loop.set_exception_handler(_loop_handler)
    threading.excepthook = _thread_hook


def register_error_handlers(app: FastAPI, settings: Settings) -> None:
    """Every failure answers with {success: false, message}."""

    @app.exception_handler(DriveDocError)
    async def drivedoc_error_handler(request: Request, exc: DriveDocError) -> JSONResponse:
        if exc.status_code >= 500:
            logger.error("Request failed", path=request.url.path, error=exc.message)
        return _error(exc.status_code, exc.message)

    @app.exception_handler(StarletteHTTPException)
    async def http_error_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
        return _error(exc.status_code, str(exc.detail))

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
        return _error(400, _validation_message(exc))

    @app.exception_handler(Exception)
    async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
        logger.exception("Unhandled request error", path=request.url.path, error=str(exc))
        if settings.app.is_production:
            return _error(500, SERVER_ERROR_MESSAGE)
        return JSONResponse(
            status_code=500,
            content={"success": False, "message": SERVER_ERROR_MESSAGE, "error": str(exc)},
        )


def create_app(
    settings: Optional[Settings] = None,
    db: Optional[Database] = None,
    gateway: Optional[PaystackGateway] = None,
    push_sender: Optional[PushSender] = None,
    oauth: Optional[OAuthClient] = None,
    clock: Clock = utcnow,
    fail_fast: bool = False,
) -> FastAPI:
    """
    Build the application.

    Collaborators are injectable for tests; by default they are created from
    settings (config/settings.yaml + environment).
    """
    settings = settings or config_manager.load_settings()
    setup_logging(
        level=settings.logging.level,
        fmt=settings.logging.format,
        file_path=settings.logging.file_path,
        max_bytes=settings.logging.max_bytes,
        backup_count=settings.logging.backup_count,
    )
    db = db if db is not None else database.connect(settings.database)
    services = build_services(
        settings, db, gateway=gateway, push_sender=push_sender, oauth=oauth, clock=clock
    )
    notifier = ExpiryNotifier(services.scanner, interval_seconds=settings.scan_interval_seconds())

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        if fail_fast:
            _install_fail_fast_hooks()
        database.ensure_indexes(db)
        if not settings.push.configured:
            logger.warning("VAPID keys missing. Push notifications will not be delivered.")
        if settings.notifications.enabled:
            notifier.start()
        logger.info("DriveDoc API started", environment=settings.app.environment)
        try:
            yield
        finally:
            notifier.stop()
            logger.info("DriveDoc API stopped")

    app = FastAPI(
        title="DriveDoc API",
        description="Document expiry tracking, lesson bookings and renewals",
        version=settings.app.version,
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.services = services
    app.state.notifier = notifier

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors.origins(),
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
        allow_headers=["Content-Type", "Authorization", "X-Requested-With"],
    )
    register_error_handlers(app, settings)

    app.include_router(auth_router)
    app.include_router(document_router)
    app.include_router(booking_router)
    app.include_router(payment_router)
    app.include_router(notification_router)

    @app.get("/health")
    def health() -> Dict[str, Any]:
        """Liveness probe"""
        return {
            "success": True,
            "message": "DriveDoc API is running",
            "timestamp": utcnow().isoformat(),
        }

    return app


def create_production_app() -> FastAPI:
    """uvicorn factory: settings from the environment, fail fast on background errors."""
    return create_app(fail_fast=True)
