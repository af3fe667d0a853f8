"""
FastAPI application for quota-gate.

Usage:
    uvicorn app.main:app --reload --port 8081
"""

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from slowapi.errors import RateLimitExceeded
from slowapi.middleware import SlowAPIMiddleware

from app.quota.routes import router as quota_router
from quota_core.config import settings
from quota_core.infrastructure.rate_limiter import _rate_limit_exceeded_handler, limiter
from quota_core.logging import setup_logging

# Initialize logging
setup_logging()

app = FastAPI(
    title="Quota Gate",
    description="Per-caller storage quota accounting and quota-bound upload tokens",
    version="1.0.0",
)

# Rate limiter setup
app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)
app.add_middleware(SlowAPIMiddleware)

# NOTE: CORS must be the last middleware added so it runs FIRST
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(quota_router, tags=["Quota"])


@app.get("/health")
def health():
    """
    Health check endpoint.

    Returns:
        dict: Status and service information.
    """
    return {"status": "ok", "service": settings.SERVICE_NAME, "version": "1.0.0"}
