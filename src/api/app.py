"""FastAPI application factory"""

import logging
from contextlib import asynccontextmanager

import sentry_sdk
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from sqlmodel import SQLModel

from src.api.error import ClientError, client_error_handler
from src.api.middleware import RequestLoggingMiddleware
from src.api.routes import invoices, reports

logger = logging.getLogger(__name__)


def create_app(config) -> FastAPI:
    logging.basicConfig(
        level=config.LOG_LEVEL,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    if config.ENABLE_SENTRY and config.DSN_SENTRY:
        sentry_sdk.init(
            dsn=config.DSN_SENTRY,
            environment=config.SENTRY_ENVIRONMENT,
            traces_sample_rate=0.1,
        )
        logger.info(f"Sentry enabled for environment {config.SENTRY_ENVIRONMENT}")

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        if config.AUTO_CREATE_TABLES:
            from src.depends import engine

            async with engine.begin() as conn:
                await conn.run_sync(SQLModel.metadata.create_all)
        yield

    app = FastAPI(
        title="POS Invoicing Service",
        description="Invoice line math, totals and status lifecycle for point-of-sale tenants",
        version="0.1.0",
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.CORS_ORIGINS,
        allow_credentials=config.CORS_ALLOW_CREDENTIALS,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    if config.ENABLE_LOGGING_MIDDLEWARE:
        app.add_middleware(RequestLoggingMiddleware)

    app.add_exception_handler(ClientError, client_error_handler)

    app.include_router(invoices.router, prefix=config.API_PREFIX)
    app.include_router(reports.router, prefix=config.API_PREFIX)

    @app.get("/health", tags=["Health"])
    async def health():
        return {"status": "ok"}

    return app
