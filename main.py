"""FastAPI application entry point."""

import logging
import time

import uvicorn
from fastapi import FastAPI, Request

from budgetlens import __version__
from budgetlens.core.config import AppConfig


def create_app(config: AppConfig | None = None) -> FastAPI:
    """Create and configure the FastAPI application."""
    app = FastAPI(
        title="BudgetLens - Financial Analytics & Insights",
        description="Stateless budget analytics, insights and forecasts",
        version=__version__,
    )

    app.state.config = config or AppConfig()

    # Add performance monitoring middleware
    @app.middleware("http")
    async def add_process_time_header(request: Request, call_next):
        start_time = time.time()
        response = await call_next(request)
        process_time = time.time() - start_time
        response.headers["X-Process-Time"] = str(process_time)

        slow = app.state.config.slow_request_seconds
        if process_time > slow:
            logging.warning("SLOW REQUEST: %s %s took %.3fs", request.method, request.url.path, process_time)
        elif process_time > slow / 2:
            logging.info("Request %s %s took %.3fs", request.method, request.url.path, process_time)

        return response

    from api.analytics import router as analytics_router

    app.include_router(analytics_router)

    @app.get("/api/health")
    async def health():
        return {"status": "ok", "version": __version__}

    return app


app = create_app()


if __name__ == "__main__":
    uvicorn.run("main:app", host="0.0.0.0", port=8000, reload=True, log_level="info")
