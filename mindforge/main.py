"""FastAPI application entry point."""
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from slowapi.errors import RateLimitExceeded
from slowapi.middleware import SlowAPIMiddleware

from mindforge.core.config import settings
from mindforge.core.errors import register_exception_handlers
from mindforge.core.logging import REQUEST_ID_HEADER, RequestLoggingMiddleware, configure_logging
from mindforge.core.rate_limit import limiter, rate_limit_exceeded_handler
from mindforge.db.base import Base
from mindforge.db.session import engine
from mindforge.routers import (
    auth_router,
    bootcamps_router,
    communications_router,
    discussions_router,
    health_router,
    knowledge_streams_router,
    progress_router,
    sessions_router,
    users_router,
)

configure_logging()
logger = logging.getLogger(__name__)

# ============================================================================
# Sentry Integration (optional, for production error tracking)
# ============================================================================

if settings.SENTRY_DSN and settings.ENV != "dev":
    import sentry_sdk
    from sentry_sdk.integrations.fastapi import FastApiIntegration
    from sentry_sdk.integrations.sqlalchemy import SqlalchemyIntegration

    sentry_sdk.init(
        dsn=settings.SENTRY_DSN,
        environment=settings.ENV,
        release=settings.VERSION,
        integrations=[
            FastApiIntegration(transaction_style="endpoint"),
            SqlalchemyIntegration(),
        ],
        traces_sample_rate=settings.SENTRY_TRACES_SAMPLE_RATE,
        send_default_pii=False,  # Don't send PII to Sentry
    )
    logger.info("Sentry initialized for error tracking")


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Tests create and drop their own schema
    if not settings.is_testing:
        Base.metadata.create_all(bind=engine)
    logger.info("MindForge API started (env=%s, version=%s)", settings.ENV, settings.VERSION)
    yield


# ============================================================================
# FastAPI App
# ============================================================================

app = FastAPI(
    title="MindForge API",
    description="Role-based learning management API",
    version=settings.VERSION,
    docs_url="/docs" if settings.ENV == "dev" else None,
    redoc_url="/redoc" if settings.ENV == "dev" else None,
    lifespan=lifespan,
)

# Add rate limiter
app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, rate_limit_exceeded_handler)
app.add_middleware(SlowAPIMiddleware)

register_exception_handlers(app)

app.add_middleware(RequestLoggingMiddleware)

# CORS middleware - added last so it wraps everything else
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"],
    allow_headers=["Content-Type", "Authorization", REQUEST_ID_HEADER],
    expose_headers=[REQUEST_ID_HEADER],
)

# ============================================================================
# Routers
# ============================================================================

app.include_router(health_router, tags=["health"])
app.include_router(auth_router, prefix="/api/auth", tags=["auth"])
app.include_router(users_router, prefix="/api/users", tags=["users"])
app.include_router(bootcamps_router, prefix="/api/bootcamps", tags=["bootcamps"])

# Mixed paths: /bootcamps/{id}/sessions and /sessions/{id}
app.include_router(sessions_router, prefix="/api", tags=["sessions"])
app.include_router(discussions_router, prefix="/api", tags=["discussions"])
app.include_router(progress_router, prefix="/api", tags=["progress"])
app.include_router(knowledge_streams_router, prefix="/api", tags=["knowledge-streams"])

app.include_router(communications_router, prefix="/api/communications", tags=["communications"])
