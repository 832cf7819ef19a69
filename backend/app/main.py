import logging
import warnings
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.config import settings
from app.core.errors import register_error_handlers
from app.core.middleware import RequestIDMiddleware, AccessLogMiddleware
from app.core.rate_limit import RateLimitMiddleware
from app.routers import airtable, passport

# Access codes are cosmetic, but shipping the defaults is still a mistake
if settings.is_production and settings.uses_default_access_codes:
    raise RuntimeError(
        "EMPLOYER_ACCESS_CODE and PRIVATE_ACCESS_CODE must be changed in production."
    )

if not settings.is_production and settings.uses_default_access_codes:
    warnings.warn("Tier access codes are using default values.", stacklevel=1)

logger = logging.getLogger("passport")


@asynccontextmanager
async def lifespan(application: FastAPI):
    """Report whether the proxy can reach Airtable with the configured credentials."""
    if not settings.airtable_base_id or not settings.airtable_pat:
        logger.warning("AIRTABLE_BASE_ID / AIRTABLE_PAT not set: proxy will answer 500")
    logger.info(
        "Serving passport for %s (record source: %s)",
        settings.person_name,
        settings.record_source,
    )
    yield


app = FastAPI(
    title=settings.app_name,
    version="0.1.0",
    docs_url="/docs" if settings.debug else None,
    redoc_url="/redoc" if settings.debug else None,
    lifespan=lifespan,
)

# Middleware: last added = outermost = first to execute.
# CORS outermost so all responses get CORS headers (including 429s)
cors_kwargs = {
    "allow_origins": settings.cors_origins_list,
    "allow_credentials": True,
    "allow_methods": ["*"],
    "allow_headers": ["*"],
    "expose_headers": ["x-request-id"],
}
app.add_middleware(RequestIDMiddleware)
app.add_middleware(AccessLogMiddleware)
app.add_middleware(RateLimitMiddleware)
app.add_middleware(CORSMiddleware, **cors_kwargs)

# Error handlers
register_error_handlers(app)

# Routers
app.include_router(airtable.router)
app.include_router(passport.router)


@app.get("/health")
async def health_check():
    return {"status": "ok", "app": settings.app_name, "version": "0.1.0"}
