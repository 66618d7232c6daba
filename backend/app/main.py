"""
VendorBridge Backend — FastAPI Application Factory
=====================================================

What:  Builds the FastAPI application: middleware, exception handlers,
       routers, and the vendor clients it depends on.
How:   create_app() returns a configured instance. Vendor clients are either
       injected (tests, scripts) or built in the lifespan from Settings, and
       always live on `app.state` for the lifetime of the process.
Who:   uvicorn loads the module-level `app` (uvicorn app.main:app).

Application Architecture:
    ┌─────────────────────────────────────────────────────────────┐
    │                        FastAPI App                          │
    │  Middleware:  Request ID → Access Log → GZip → CORS         │
    │  Routes:      /api/create-payment-intent   (Stripe)         │
    │               /api/profile/*               (Supabase)       │
    │               /api/send-email              (Resend)         │
    │               /health                                       │
    │  Errors:      UserInputError→400 │ NotFound→404 │ Provider→500│
    └─────────────────────────────────────────────────────────────┘

Lifecycle:
    Startup:  logging → settings check → build missing vendor clients
    Shutdown: drop vendor clients from app.state
"""

import logging
import sys
from contextlib import asynccontextmanager
from typing import AsyncGenerator, Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import JSONResponse

from app import __version__
from app.config import Settings, settings as default_settings
from app.exceptions import (
    NotFoundError,
    ProviderError,
    UserInputError,
    VendorBridgeError,
)
from app.middleware.logging import RequestLoggingMiddleware
from app.middleware.request_id import REQUEST_ID_HEADER, RequestIDMiddleware, request_id_var
from app.routes import email as email_routes
from app.routes import health as health_routes
from app.routes import payments as payment_routes
from app.routes import profile as profile_routes
from app.services.avatar_keys import AvatarKeys
from app.services.mail_service import MailService
from app.services.payment_service import PaymentService
from app.services.storage_service import StorageService

logger = logging.getLogger(__name__)


# ══════════════════════════════════════════════════════════════════════════
# Logging
# ══════════════════════════════════════════════════════════════════════════

def setup_logging(level: str) -> None:
    """Configure root logging to stdout; called once at startup."""
    logging.basicConfig(
        level=getattr(logging, level, logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S",
        handlers=[logging.StreamHandler(sys.stdout)],
        force=True,
    )
    # Vendor SDKs log every HTTP exchange at INFO
    for noisy in ("uvicorn.access", "httpx", "httpcore", "hpack", "stripe"):
        logging.getLogger(noisy).setLevel(logging.WARNING)


# ══════════════════════════════════════════════════════════════════════════
# Collaborator construction
# ══════════════════════════════════════════════════════════════════════════

def _build(name: str, factory, settings: Settings):
    """Build one vendor client; a failure is logged and leaves it unset."""
    try:
        return factory(settings)
    except VendorBridgeError as e:
        logger.warning("%s client not created: %s", name, e.message)
    except Exception as e:
        logger.error("%s client failed to initialize: %s", name, e, exc_info=True)
    return None


def init_collaborators(app: FastAPI) -> None:
    settings: Settings = app.state.settings
    if app.state.storage is None:
        app.state.storage = _build("Storage", StorageService.from_settings, settings)
    if app.state.payments is None:
        app.state.payments = _build("Payment", PaymentService.from_settings, settings)
    if app.state.mailer is None:
        app.state.mailer = _build("Mail", MailService.from_settings, settings)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    settings: Settings = app.state.settings
    setup_logging(settings.log_level)
    logger.info("VendorBridge Backend %s starting up...", __version__)

    try:
        settings.validate_required_for_production()
    except ValueError as e:
        # Keep serving: /health and the configured endpoints still work
        logger.error("%s", e)

    init_collaborators(app)
    logger.info("Server ready at http://%s:%d", settings.backend_host, settings.backend_port)

    yield

    logger.info("VendorBridge Backend shutting down...")
    app.state.storage = None
    app.state.payments = None
    app.state.mailer = None
    logger.info("Shutdown complete.")


# ══════════════════════════════════════════════════════════════════════════
# Exception Handlers
# ══════════════════════════════════════════════════════════════════════════

def _request_id(request: Request) -> str:
    return getattr(request.state, "request_id", "") or request_id_var.get("")


def _error_body(request: Request, message: str, code: str, details: Optional[dict] = None) -> dict:
    body = {"error": message, "code": code, "request_id": _request_id(request)}
    if details:
        body["details"] = details
    return body


def register_exception_handlers(app: FastAPI) -> None:
    """
    Handler map:
        UserInputError / RequestValidationError → 400
        NotFoundError                           → 404
        ProviderError                           → 500 (provider message surfaced)
        VendorBridgeError (base)                → 500
        Exception (fallback)                    → 500 generic, traceback logged
    """

    @app.exception_handler(UserInputError)
    async def handle_user_input(request: Request, exc: UserInputError):
        logger.warning("[%s] User input error: %s", _request_id(request), exc.message)
        return JSONResponse(
            status_code=400,
            content=_error_body(request, exc.message, exc.code, exc.context),
        )

    @app.exception_handler(RequestValidationError)
    async def handle_request_validation(request: Request, exc: RequestValidationError):
        problems = [
            {"field": ".".join(str(p) for p in err.get("loc", ())[1:]), "problem": err.get("msg")}
            for err in exc.errors()
        ]
        message = "; ".join(f"{p['field'] or 'body'}: {p['problem']}" for p in problems)
        logger.warning("[%s] Invalid request: %s", _request_id(request), message)
        return JSONResponse(
            status_code=400,
            content=_error_body(
                request, message or "Invalid request", UserInputError.code, {"errors": problems}
            ),
        )

    @app.exception_handler(NotFoundError)
    async def handle_not_found(request: Request, exc: NotFoundError):
        return JSONResponse(
            status_code=404,
            content=_error_body(request, exc.message, exc.code, exc.context),
        )

    @app.exception_handler(ProviderError)
    async def handle_provider_error(request: Request, exc: ProviderError):
        logger.error(
            "[%s] %s provider error: %s | Context: %s",
            _request_id(request), exc.provider, exc.message, exc.context,
        )
        return JSONResponse(
            status_code=500,
            content=_error_body(request, exc.message, exc.code, {"provider": exc.provider}),
        )

    @app.exception_handler(VendorBridgeError)
    async def handle_app_error(request: Request, exc: VendorBridgeError):
        logger.error("[%s] Application error: %s", _request_id(request), exc.message)
        return JSONResponse(status_code=500, content=_error_body(request, exc.message, exc.code))

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception):
        rid = _request_id(request)
        logger.error("[%s] Unexpected error: %s", rid, exc, exc_info=True)
        return JSONResponse(
            status_code=500,
            content=_error_body(request, "An unexpected error occurred.", "internal_server_error"),
            headers={REQUEST_ID_HEADER: rid} if rid else None,
        )


# ══════════════════════════════════════════════════════════════════════════
# Application Factory
# ══════════════════════════════════════════════════════════════════════════

def create_app(
    settings: Optional[Settings] = None,
    storage: Optional[StorageService] = None,
    payments: Optional[PaymentService] = None,
    mailer: Optional[MailService] = None,
) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Args:
        settings: Configuration; defaults to the environment-loaded settings
        storage, payments, mailer: Pre-built collaborators. Any left as None
            is built from settings during startup.
    """
    settings = settings or default_settings

    app = FastAPI(
        title="VendorBridge API",
        description=(
            "Backend for the storefront: Stripe payment intents, Supabase-hosted "
            "profile avatars and Resend order confirmation emails."
        ),
        version=__version__,
        lifespan=lifespan,
    )

    app.state.settings = settings
    app.state.avatar_keys = AvatarKeys(folder=settings.avatar_folder)
    app.state.storage = storage
    app.state.payments = payments
    app.state.mailer = mailer

    # Last added runs first: RequestID → Logging → GZip → CORS
    origins = settings.cors_origins_list
    app.add_middleware(
        CORSMiddleware,
        allow_origins=origins,
        allow_credentials="*" not in origins,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=[REQUEST_ID_HEADER],
    )
    app.add_middleware(GZipMiddleware, minimum_size=500)
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(RequestIDMiddleware)

    register_exception_handlers(app)

    app.include_router(payment_routes.router)
    app.include_router(profile_routes.router)
    app.include_router(email_routes.router)
    app.include_router(health_routes.router)

    return app


app = create_app()
