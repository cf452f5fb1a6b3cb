"""
SkyTrain vehicle database service.

Run locally with:

    python -m uvicorn traindb.main:app --reload

Seed a development database first with `python -m traindb.scripts.seed_data`.
"""
from contextlib import asynccontextmanager
import logging

from fastapi import FastAPI

from traindb.core.db import engine
from traindb.core.logging import setup_logging
from traindb.exceptions import register_exception_handlers
from traindb.middleware.rate_limit import limiter
from traindb.middleware.security_headers import SecurityHeadersMiddleware
from traindb.routers import frontend, health, metrics, train_cars

setup_logging()
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("Train car database service starting")
    try:
        yield
    finally:
        # teardown on shutdown
        await engine.dispose()


def create_app() -> FastAPI:
    app = FastAPI(title="SkyTrain Vehicle Database", lifespan=lifespan)

    app.state.limiter = limiter
    register_exception_handlers(app)
    app.add_middleware(SecurityHeadersMiddleware)

    app.include_router(health.router)
    app.include_router(metrics.router)
    app.include_router(train_cars.router)
    # Catch-all HTML route must stay last
    app.include_router(frontend.router)

    return app


app = create_app()
