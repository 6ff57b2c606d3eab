from fastapi import FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from contextlib import asynccontextmanager
from sqlalchemy.exc import SQLAlchemyError
import logging
import math
import sys
import uvicorn
from prometheus_client import CollectorRegistry
from prometheus_fastapi_instrumentator import Instrumentator
from ledger.config import Settings, InvalidEnvironmentError, load_settings
from ledger.database.session import init_db, close_db
from ledger.api import transactions

logger = logging.getLogger(__name__)


async def _database_error_handler(request: Request, exc: SQLAlchemyError):
    logger.exception(f"Database error while handling {request.method} {request.url.path}", exc_info=exc)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": "Database error"},
    )


def _json_safe(value):
    """Replace values a UTF-8 JSON body cannot carry: NaN, infinities and lone surrogates."""
    if isinstance(value, float) and not math.isfinite(value):
        return str(value)
    if isinstance(value, str):
        return value.encode("utf-8", "backslashreplace").decode("utf-8")
    if isinstance(value, dict):
        return {_json_safe(key): _json_safe(item) for key, item in value.items()}
    if isinstance(value, (list, tuple)):
        return [_json_safe(item) for item in value]
    return value


async def _validation_error_handler(request: Request, exc: RequestValidationError):
    return JSONResponse(
        status_code=422,
        content={"detail": _json_safe(jsonable_encoder(exc.errors()))},
    )


def create_app(settings: Settings) -> FastAPI:
    """Build the API for the given settings."""

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Handle startup and shutdown events."""
        logger.info(f"Starting Ledger API ({settings.NODE_ENV})")
        logger.info(f"Initializing {settings.DATABASE_CLIENT} database...")
        init_db(settings.database_url)

        yield

        logger.info("Shutting down...")
        close_db()

    app = FastAPI(
        title="Ledger API",
        description="API for recording credit and debit transactions",
        version="1.0.0",
        lifespan=lifespan
    )
    app.state.settings = settings

    app.add_exception_handler(RequestValidationError, _validation_error_handler)
    app.add_exception_handler(SQLAlchemyError, _database_error_handler)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(transactions.router)

    if settings.METRICS_ENABLED:
        Instrumentator(registry=CollectorRegistry()).instrument(app).expose(app)

    @app.get("/")
    async def root():
        return {
            "message": "Ledger API",
            "version": "1.0.0",
            "docs": "/docs"
        }

    @app.get("/health")
    async def health_check():
        return {"status": "healthy"}

    return app


def run():
    """Console entry point: validate the environment, then serve."""
    logging.basicConfig(
        level=logging.INFO,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )

    try:
        settings = load_settings()
    except InvalidEnvironmentError:
        logger.error("Refusing to start with an invalid environment")
        sys.exit(1)

    logging.getLogger().setLevel(settings.LOG_LEVEL)
    logger.info(f"Listening on {settings.API_HOST}:{settings.PORT}")
    uvicorn.run(
        create_app(settings),
        host=settings.API_HOST,
        port=settings.PORT,
        log_level=settings.LOG_LEVEL.lower(),
    )


if __name__ == "__main__":
    run()
