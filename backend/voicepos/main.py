"""
VoicePOS Backend: point-of-sale API for small shops.

ARCHITECTURE:
- Catalog: owner-scoped products with stock and low-stock thresholds
- Checkout: one transaction per sale, conditional stock decrements,
  persisted invoice sequence (INV-YYMMDD-NNNN)
- Dashboard: revenue windows, stock summary, chart series
- Voice: "two milk" style till commands resolved against the catalog

Sales are immutable once written. The cart lives on the client.
"""
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.trustedhost import TrustedHostMiddleware
from fastapi.responses import JSONResponse

from voicepos.api.routes import auth, dashboard, products, sales, voice
from voicepos.core.config import settings
from voicepos.core.exceptions import BusinessError, POSError
from voicepos.core.logging import setup_logging
from voicepos.core.rate_limiter import RateLimitMiddleware
from voicepos.db.init_db import init_db

setup_logging()
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Create tables, the invoice counter and (on an empty database) a bootstrap admin."""
    logger.info("Initializing database...")
    try:
        init_db()
    except Exception:
        logger.exception("Database initialization failed")
        raise
    logger.info("Database initialized")
    yield


app = FastAPI(
    title=settings.APP_NAME,
    description="Catalog, checkout, dashboard and voice commands for a small shop till.",
    version="0.1.0",
    lifespan=lifespan,
)

# SECURITY: Trust only specific hosts
app.add_middleware(TrustedHostMiddleware, allowed_hosts=settings.ALLOWED_HOSTS)

# SECURITY: Restrict CORS to specific methods and headers (not wildcards)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
    allow_headers=[
        "Content-Type",
        "Authorization",
        "Accept",
        "Origin",
    ],
    max_age=600,
    expose_headers=["Content-Type"],
)

# SECURITY: Rate limiting to prevent brute force and DoS attacks
app.add_middleware(RateLimitMiddleware)


@app.exception_handler(POSError)
async def pos_error_handler(request: Request, exc: POSError):
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.message})


# Anything not handled above is a server fault: full details in the log, generic reply
@app.middleware("http")
async def catch_server_faults(request: Request, call_next):
    try:
        return await call_next(request)
    except Exception as exc:
        error = BusinessError.server_error(exc)
        return JSONResponse(status_code=error.status_code, content={"detail": error.detail})


# SECURITY: Add security headers middleware
@app.middleware("http")
async def add_security_headers(request: Request, call_next):
    response = await call_next(request)
    response.headers["X-Content-Type-Options"] = "nosniff"
    response.headers["X-Frame-Options"] = "DENY"
    response.headers["Strict-Transport-Security"] = "max-age=31536000; includeSubDomains"
    response.headers["Referrer-Policy"] = "strict-origin-when-cross-origin"
    return response


app.include_router(auth.router, prefix="/auth", tags=["auth"])
app.include_router(products.router, prefix="/products", tags=["products"])
app.include_router(sales.router, prefix="/sales", tags=["sales"])
app.include_router(dashboard.router, prefix="/dashboard", tags=["dashboard"])
app.include_router(voice.router, prefix="/voice", tags=["voice"])


@app.get("/health")
def health():
    return {"status": "ok", "service": settings.APP_NAME, "environment": settings.ENVIRONMENT}
