"""Daily Trivia API — application object and process lifecycle.

Invariants:
    - Logging is configured before the first request is served
    - The database manager exists for the whole serving lifetime and is disposed on exit
    - Routers are listed explicitly, in URL order

Design Decisions:
    - FastAPI lifespan context manager for startup/shutdown
    - Run with: uvicorn daily_trivia.main:app (from backend/)
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

import daily_trivia.infrastructure.database as database
from daily_trivia.api.error_handlers import register_error_handlers
from daily_trivia.api.routes import admin, answers, health, questions
from daily_trivia.config import get_settings
from daily_trivia.infrastructure.observability import setup_logging

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    settings = get_settings()
    setup_logging(settings.log_level, settings.log_format)
    database.init_db(
        settings.database_url,
        pool_size=settings.database_pool_size,
        max_overflow=settings.database_max_overflow,
    )
    logger.info("Serving Daily Trivia API")
    try:
        yield
    finally:
        if database.db_manager is not None:
            await database.db_manager.dispose()
        logger.info("Daily Trivia API stopped")


app = FastAPI(title="Daily Trivia API", version="1.0.0", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=get_settings().cors_origins,
    allow_methods=["GET", "POST", "OPTIONS"],
    allow_headers=["Content-Type", "X-CRON-KEY"],
)

for router_module in (health, questions, answers, admin):
    app.include_router(router_module.router)

register_error_handlers(app)
