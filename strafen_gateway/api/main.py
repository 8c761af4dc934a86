"""FastAPI application factory"""

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from prometheus_client import generate_latest, CONTENT_TYPE_LATEST
from starlette.responses import Response

from strafen_gateway.api.middleware import RequestIDMiddleware, MetricsMiddleware
from strafen_gateway.api.v1 import interest, late_payment_interest
from strafen_gateway.domain.exceptions import InvalidAmount
from strafen_gateway.infrastructure.observability.logging import setup_logging
from strafen_gateway.config import settings

# Setup structured logging
setup_logging(settings.log_level, settings.service_name)


def create_app() -> FastAPI:
    """Create and configure FastAPI application"""
    app = FastAPI(
        title="Strafen Gateway",
        description="Club fines late payment interest service",
        version="0.1.0",
        docs_url="/docs",
        redoc_url="/redoc",
    )

    # Add middleware (order matters: last added = first executed)
    app.add_middleware(MetricsMiddleware)
    app.add_middleware(RequestIDMiddleware)

    @app.exception_handler(InvalidAmount)
    async def invalid_amount_handler(request: Request, exc: InvalidAmount):
        return JSONResponse(
            status_code=422,
            # raw_value stays out of the body, huge amounts exceed int to str limits
            content={"detail": str(exc)},
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
    app.include_router(interest.router, prefix="/v1", tags=["interest"])
    app.include_router(late_payment_interest.router, prefix="/v1", tags=["late-payment-interest"])

    return app


app = create_app()
