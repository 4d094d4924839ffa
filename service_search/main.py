"""Search service main application."""

import time
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI, Request, Response
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
import structlog

from libs.common.config import SearchConfig
from libs.common.logging import configure_logging
from libs.common.metrics import get_metrics_collector
from libs.embeddings.factory import create_embedding_adapter
from .api.routes import router as api_router
from .hybrid.search_manager import SearchManager
from .retrievers.corpus import create_corpus_provider

logger = structlog.get_logger("search_service")

SERVICE_NAME = "search-service"
SERVICE_VERSION = "0.1.0"


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager."""
    # Startup
    config = SearchConfig()
    configure_logging(SERVICE_NAME, config.ml_log_level, config.ml_log_format)
    logger.info("Starting search service", env=config.ml_env)

    app.state.config = config
    app.state.metrics_collector = get_metrics_collector(SERVICE_NAME)
    app.state.embedding_adapter = create_embedding_adapter(
        config, metrics=app.state.metrics_collector
    )
    app.state.search_manager = SearchManager.from_config(
        config,
        corpus_provider=create_corpus_provider(config),
        embed=app.state.embedding_adapter.embed,
        metrics=app.state.metrics_collector,
    )

    logger.info("Search service started successfully")

    yield

    # Shutdown
    logger.info("Shutting down search service")
    await app.state.embedding_adapter.aclose()
    logger.info("Search service shutdown complete")


def create_app() -> FastAPI:
    """Build the FastAPI application with routes and middleware."""
    app = FastAPI(
        title="Intent Search Service",
        description="Hybrid semantic and lexical intent search",
        version=SERVICE_VERSION,
        lifespan=lifespan
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(api_router, prefix="/api/v1")

    @app.middleware("http")
    async def metrics_middleware(request: Request, call_next):
        """Collect metrics and the process-time header for HTTP requests."""
        start_time = time.time()

        try:
            response = await call_next(request)
            status_code = response.status_code
        except Exception as e:
            logger.error("Unhandled request error", path=request.url.path, error=str(e))
            status_code = 500
            response = JSONResponse(
                status_code=500,
                content={"error": "Internal server error", "detail": str(e)}
            )

        duration = time.time() - start_time
        response.headers["X-Process-Time"] = str(duration)

        collector = getattr(request.app.state, "metrics_collector", None)
        if collector is not None:
            collector.record_http_request(
                method=request.method,
                endpoint=request.url.path,
                status=status_code,
                duration=duration
            )

        return response

    @app.get("/health")
    async def health_check(request: Request):
        """Health check endpoint.

        The service stays healthy while embedding providers are down; the
        breaker states are reported for visibility.
        """
        if not hasattr(request.app.state, "search_manager"):
            return JSONResponse(
                status_code=503,
                content={"status": "unhealthy", "service": SERVICE_NAME}
            )

        adapter = getattr(request.app.state, "embedding_adapter", None)
        return {
            "status": "healthy",
            "service": SERVICE_NAME,
            "embedding_providers": adapter.get_stats() if adapter is not None else {},
        }

    @app.get("/metrics")
    async def metrics(request: Request):
        """Prometheus metrics endpoint."""
        collector = getattr(request.app.state, "metrics_collector", None)
        if collector is None:
            return Response(content="# No metrics available\n", media_type="text/plain")
        return Response(content=collector.get_metrics(), media_type="text/plain")

    @app.get("/")
    async def root():
        """Root endpoint."""
        return {
            "service": SERVICE_NAME,
            "version": SERVICE_VERSION,
            "status": "running",
            "endpoints": {
                "health": "/health",
                "metrics": "/metrics",
                "search": "/api/v1/search",
                "intents": "/api/v1/intents"
            }
        }

    return app


app = create_app()


def main() -> None:
    """Run the service with uvicorn."""
    config = SearchConfig()
    uvicorn.run(
        "service_search.main:app",
        host="0.0.0.0",
        port=config.ml_search_port,
        log_level=config.ml_log_level.lower()
    )


if __name__ == "__main__":
    main()
