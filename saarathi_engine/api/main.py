"""FastAPI application factory"""

from fastapi import FastAPI
from prometheus_client import generate_latest, CONTENT_TYPE_LATEST
from starlette.responses import Response

from saarathi_engine.api.middleware import RequestIDMiddleware, MetricsMiddleware
from saarathi_engine.api.v1 import health_score, ledger, payments, projection, report
from saarathi_engine.infrastructure.observability.logging import setup_logging
from saarathi_engine.config import settings

# Setup structured logging
setup_logging(settings.log_level)


def create_app() -> FastAPI:
    """Create and configure FastAPI application"""
    app = FastAPI(
        title="Saarathi Engine",
        description="Cash projection, business health and collection tracking for small-business owners",
        version="0.1.0",
        docs_url="/docs",
        redoc_url="/redoc",
    )

    # Add middleware (order matters: last added = first executed)
    app.add_middleware(MetricsMiddleware)
    app.add_middleware(RequestIDMiddleware)

    # Health check endpoint
    @app.get("/health")
    def health_check():
        return {"status": "ok", "service": settings.service_name}

    # Prometheus metrics endpoint
    @app.get("/metrics")
    def metrics():
        return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)

    # Register API routers
    app.include_router(projection.router, prefix="/v1", tags=["projection"])
    app.include_router(health_score.router, prefix="/v1", tags=["health"])
    app.include_router(ledger.router, prefix="/v1", tags=["ledger"])
    app.include_router(report.router, prefix="/v1", tags=["reports"])
    app.include_router(payments.router, prefix="/v1", tags=["receivables"])

    return app


app = create_app()
