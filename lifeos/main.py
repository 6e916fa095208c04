"""
LifeOS API - Main Application
=============================

FastAPI application entry point with middleware configuration
and route registration.
"""

import logging
import time
from contextlib import asynccontextmanager
from typing import AsyncGenerator

import newrelic.agent

# Configure logging for the application (root logger defaults to WARNING)
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from lifeos.config import settings
from lifeos.db.session import init_db, close_db
from lifeos.services.ai_gateway import close_ai_gateway
from lifeos.services.cache import init_redis, close_redis
from lifeos.core.errors import setup_exception_handlers

logger = logging.getLogger(__name__)


# =============================================================================
# New Relic Transaction Enrichment Middleware (Raw ASGI)
# =============================================================================

class NewRelicTransactionMiddleware:
    """
    Raw ASGI middleware that enriches every New Relic transaction with
    custom attributes for filtering and dashboards.

    Raw ASGI rather than BaseHTTPMiddleware: ``call_next()`` runs the
    route in a separate task, which loses New Relic's contextvars-based
    span propagation. It also keeps the coach event stream unbuffered.

    Captures: response status, latency, HTTP method, route pattern, and
    user ID (when authenticated).
    """

    def __init__(self, app):
        self.app = app

    async def __call__(self, scope, receive, send):
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        start = time.perf_counter()
        status_code = 500  # until the real one is seen

        async def send_wrapper(message):
            nonlocal status_code
            if message["type"] == "http.response.start":
                status_code = message["status"]
            await send(message)

        try:
            await self.app(scope, receive, send_wrapper)
        finally:
            duration_ms = (time.perf_counter() - start) * 1000

            txn = newrelic.agent.current_transaction()
            if txn:
                # Route pattern (e.g. "/api/v1/notes/{note_id}") for grouping
                route = scope.get("route")
                route_path = route.path if route else scope.get("path", "unknown")

                newrelic.agent.add_custom_attributes([
                    ("http.method", scope.get("method", "")),
                    ("http.route", route_path),
                    ("http.status_code", status_code),
                    ("http.duration_ms", round(duration_ms, 2)),
                    ("environment", settings.ENVIRONMENT),
                ])

                # Set by the auth dependencies
                state = scope.get("state")
                user_id = state.get("user_id") if isinstance(state, dict) else getattr(state, "user_id", None)
                if user_id:
                    newrelic.agent.add_custom_attribute("enduser.id", str(user_id))


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    Application lifespan manager.

    Handles startup and shutdown of:
    - Database connection
    - Redis connection
    - AI gateway HTTP client
    """
    logger.info("Starting LifeOS API...")

    if settings.auth_disabled:
        logger.warning("Authentication is DISABLED (DEV_AUTH_DISABLED=true)")
        logger.warning("All requests will use the development test user.")

    # Continue startup even if DB fails (for health checks)
    try:
        await init_db()
    except Exception as e:
        logger.error("Database connection failed: %s", e)

    try:
        await init_redis()
    except Exception as e:
        logger.error("Redis connection failed: %s", e)

    if not settings.ai_gateway_configured:
        logger.warning("AI_GATEWAY_API_KEY not set; coach and recall endpoints will fail")

    yield

    logger.info("Shutting down LifeOS API...")
    await close_ai_gateway()
    await close_db()
    await close_redis()


# Create FastAPI application
app = FastAPI(
    title="LifeOS API",
    description="""
## LifeOS Personal Productivity Backend

Tasks, habits, expenses, notes, decisions, learning goals, wellness,
teams, a public profile page and an AI life coach.

### Authentication
Bearer access tokens issued by the hosted auth service (Supabase).

### AI endpoints
`/api/v1/coach/*` and `/api/v1/knowledge/*` answer errors as
`{"error": "..."}`; `/api/v1/coach/chat` streams `text/event-stream`.
    """,
    version="1.0.0",
    docs_url="/docs" if settings.is_development else None,
    redoc_url="/redoc" if settings.is_development else None,
    openapi_url="/openapi.json" if settings.is_development else None,
    lifespan=lifespan,
    responses={
        401: {"description": "Not authenticated"},
        403: {"description": "Not a member of this team"},
        404: {"description": "Resource not found"},
        409: {"description": "Resource conflict"},
        422: {"description": "Validation error"},
        429: {"description": "Rate limit exceeded"},
        500: {"description": "Internal server error"},
    },
)

# Configure CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.allowed_origins_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# New Relic transaction enrichment (adds custom attrs to every transaction)
app.add_middleware(NewRelicTransactionMiddleware)

# Setup exception handlers
setup_exception_handlers(app)


# =============================================================================
# Health Check Endpoints
# =============================================================================

@app.get("/health", tags=["Health"])
async def health_check() -> dict:
    """
    Health check endpoint.

    Returns the current status of the API.
    """
    return {
        "status": "healthy",
        "version": "1.0.0",
        "environment": settings.ENVIRONMENT,
    }


@app.get("/", tags=["Health"])
async def root() -> dict:
    """Root endpoint with API information."""
    return {
        "name": "LifeOS API",
        "version": "1.0.0",
        "docs": "/docs" if settings.is_development else "Disabled in production",
    }


# =============================================================================
# API Routes
# =============================================================================

from lifeos.api.v1 import tasks, habits, expenses
app.include_router(tasks.router, prefix="/api/v1/tasks", tags=["Tasks"])
app.include_router(habits.router, prefix="/api/v1/habits", tags=["Habits"])
app.include_router(expenses.router, prefix="/api/v1/expenses", tags=["Expenses"])

from lifeos.api.v1 import notes, decisions, learning
app.include_router(notes.router, prefix="/api/v1/notes", tags=["Notes"])
app.include_router(decisions.router, prefix="/api/v1/decisions", tags=["Decisions"])
app.include_router(learning.router, prefix="/api/v1/learning", tags=["Learning"])

from lifeos.api.v1 import time_tracking, automation, vision
app.include_router(time_tracking.router, prefix="/api/v1/time", tags=["Time"])
app.include_router(automation.router, prefix="/api/v1/automation", tags=["Automation"])
app.include_router(vision.router, prefix="/api/v1/vision", tags=["Life Vision"])

from lifeos.api.v1 import wellness
app.include_router(wellness.router, prefix="/api/v1/wellness", tags=["Wellness"])

from lifeos.api.v1 import teams
app.include_router(teams.router, prefix="/api/v1/teams", tags=["Teams"])

from lifeos.api.v1 import profile
app.include_router(profile.router, prefix="/api/v1/profile", tags=["Profile"])

from lifeos.api.v1 import analytics
app.include_router(analytics.router, prefix="/api/v1/analytics", tags=["Analytics"])

# AI relay
from lifeos.api.v1 import coach, knowledge
app.include_router(coach.router, prefix="/api/v1/coach", tags=["Life Coach"])
app.include_router(knowledge.router, prefix="/api/v1/knowledge", tags=["Knowledge"])
