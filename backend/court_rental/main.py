"""
Court Rental API - Main Application Entry Point

Booking service for a sports-court rental business:
- Court catalogue and booking-form defaults for QR reservation links
- Plan-based pricing with promo codes (window, cap and minimum checks)
- Pending reservations reviewed by a single admin, with a live SSE feed
- Admin email notifications relayed through Resend or EmailJS
"""

from contextlib import asynccontextmanager
from fastapi import Depends, FastAPI
from fastapi.middleware.cors import CORSMiddleware

from court_rental.core.config import get_settings
from court_rental.core.context import AppContext, close_context, create_context, get_context
from court_rental.core.logging import setup_logging, get_logger
from court_rental.core.metrics import metrics_endpoint
from court_rental.api.router import api_router, functions_router
from court_rental.api.middleware import RequestLoggingMiddleware
from court_rental.services.auth_service import ensure_admin
from court_rental.services.cache_service import get_cache_stats
from court_rental.services.relay_factory import get_mail_relay
from court_rental.services.interfaces.mail_relay import MailConfigurationError

settings = get_settings()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifecycle: build the context on startup, release it on shutdown."""
    setup_logging(settings)
    logger = get_logger(__name__)

    logger.info(
        "application_starting",
        app=settings.APP_NAME,
        version=settings.APP_VERSION,
        environment=settings.ENVIRONMENT,
    )

    ctx = await create_context(settings)
    app.state.context = ctx

    if settings.ADMIN_LOGIN_EMAIL and settings.ADMIN_LOGIN_PASSWORD:
        async with ctx.session_factory() as session:
            await ensure_admin(session, settings.ADMIN_LOGIN_EMAIL, settings.ADMIN_LOGIN_PASSWORD)
            await session.commit()

    yield

    await close_context(ctx)
    logger.info("application_shutdown")


app = FastAPI(
    title=settings.APP_NAME,
    version=settings.APP_VERSION,
    description="Court rental booking API with promo codes and admin review",
    lifespan=lifespan,
    docs_url="/docs",
    redoc_url="/redoc",
)

# CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],  # the booking site is served from a separate origin
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Custom middleware
app.add_middleware(RequestLoggingMiddleware)

# Routes
app.include_router(api_router)
app.include_router(functions_router)


@app.get("/health", tags=["Health"])
async def health_check(ctx: AppContext = Depends(get_context)):
    """Health check endpoint for Docker and load balancers."""
    relay = get_mail_relay(ctx.settings, ctx.http)
    try:
        relay.ensure_configured()
        mail = "configured"
    except MailConfigurationError:
        mail = "not_configured"
    return {
        "status": "healthy",
        "version": ctx.settings.APP_VERSION,
        "environment": ctx.settings.ENVIRONMENT,
        "cache": await get_cache_stats(ctx.redis),
        "mail": {"provider": relay.provider, "status": mail},
    }


@app.get("/metrics", include_in_schema=False)
async def metrics():
    return metrics_endpoint()


@app.get("/", tags=["Root"])
async def root():
    return {
        "message": f"Welcome to {settings.APP_NAME}",
        "version": settings.APP_VERSION,
        "docs": "/docs",
    }
