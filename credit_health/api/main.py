"""FastAPI application factory"""

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from prometheus_client import generate_latest, CONTENT_TYPE_LATEST
from starlette.responses import Response

from credit_health.api.middleware import RequestIDMiddleware, MetricsMiddleware
from credit_health.api.v1 import credit, refresh
from credit_health.domain.exceptions import RateLimitedError
from credit_health.domain.rate_limiter import RefreshRateLimiter
from credit_health.infrastructure.observability.logging import setup_logging
from credit_health.config import settings

# Setup structured logging
setup_logging(settings.log_level, settings.service_name)


def create_app(refresh_limiter: RefreshRateLimiter | None = None) -> FastAPI:
    """Create and configure FastAPI application"""
    app = FastAPI(
        title="Credit Health Gateway",
        description="Credit factor scoring, improvement plans and account refresh admission",
        version="0.1.0",
        docs_url="/docs",
        redoc_url="/redoc",
    )

    # One limiter per process, shared by every request handler
    app.state.refresh_limiter = refresh_limiter or RefreshRateLimiter(
        cooldown_minutes=settings.refresh_cooldown_minutes,
    )

    # Add middleware (order matters: last added = first executed)
    app.add_middleware(MetricsMiddleware)
    app.add_middleware(RequestIDMiddleware)

    @app.exception_handler(RateLimitedError)
    async def rate_limited_handler(request: Request, exc: RateLimitedError):
        return JSONResponse(
            status_code=429,
            content={
                "detail": str(exc),
                "remaining_minutes": exc.remaining_minutes,
            },
            headers={"Retry-After": str(exc.remaining_minutes * 60)},
        )

    # Health check endpoint
    @app.get("/health")
    def health_check():
        return {"status": "ok", "service": settings.service_name}

    # Prometheus metrics endpoint
    @app.get("/metrics")
    def metrics():
        return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)

    # Register API routers
    app.include_router(credit.router, prefix="/v1", tags=["credit"])
    app.include_router(refresh.router, prefix="/v1", tags=["accounts"])

    return app


app = create_app()
