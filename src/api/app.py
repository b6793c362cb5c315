"""FastAPI application factory"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from src.api.error import register_exception_handlers
from src.api.middleware import RequestLoggingMiddleware
from src.api.routes import transactions
from src.depends import init_db

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


@asynccontextmanager
async def lifespan(app: FastAPI):
    await init_db()
    logger.info("Database schema ready")
    yield


def create_app(config) -> FastAPI:
    logging.basicConfig(level=config.LOG_LEVEL, format=LOG_FORMAT)

    app = FastAPI(
        title="Banking Transaction Service",
        description="Create, query, update, delete and list banking transactions.",
        version="1.0.0",
        lifespan=lifespan,
    )

    if config.CORS_ORIGINS:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=config.CORS_ORIGINS,
            allow_credentials=config.CORS_ALLOW_CREDENTIALS,
            allow_methods=["*"],
            allow_headers=["*"],
        )

    if config.ENABLE_LOGGING_MIDDLEWARE:
        app.add_middleware(RequestLoggingMiddleware)

    register_exception_handlers(app)
    app.include_router(transactions.router, prefix=config.API_PREFIX)

    logger.info("Application created with API prefix '%s'", config.API_PREFIX)
    return app
