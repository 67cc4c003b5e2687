import uvicorn
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from contextlib import asynccontextmanager
from fastapi.responses import JSONResponse
from sleep_tracker.exceptions.handlers import (
    application_exception_handler,
    http_exception_handler,
    generic_exception_handler
)
from sleep_tracker.exceptions.errors import ApplicationException
from starlette.exceptions import HTTPException as StarletteHTTPException
from fastapi.exceptions import RequestValidationError
from sleep_tracker.database.base import Base
from sleep_tracker.database.connection import engine
from sleep_tracker.services.cache_service import build_cache

from sleep_tracker.api.v1.routes import (
    user_router, clock_router, sleep_record_router, following_router, health_router
)
from sleep_tracker.core.config import settings
from sleep_tracker.core.logger import get_logger

import sleep_tracker.models  # noqa: F401  (register tables on Base.metadata)

logger = get_logger("sleep-tracker")


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("Sleep tracker API is starting...")
    try:
        if settings.IS_DEVELOPMENT:
            # Migrations own the schema outside development
            async with engine.begin() as conn:
                await conn.run_sync(Base.metadata.create_all)
            logger.info("Application database tables ensured.")

        app.state.cache = build_cache()

    except Exception as e:
        logger.error(f"Failed to initialize application: {e}")
        raise e

    yield

    await app.state.cache.close()
    logger.info("Sleep tracker API is shutting down...")


# Custom validation error handler
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    logger.error(f"Validation error on {request.method} {request.url.path}: {exc.errors()}")

    errors = []
    for error in exc.errors():
        errors.append({
            "type": error.get("type"),
            "loc": error.get("loc"),
            "msg": error.get("msg"),
            "input": str(error.get("input")) if error.get("input") is not None else None
        })

    return JSONResponse(
        status_code=422,
        content={
            "error": "Request validation failed",
            "details": errors,
            "url": str(request.url),
            "method": request.method
        }
    )


def create_app() -> FastAPI:
    app = FastAPI(
        title="Sleep Tracker Backend",
        version="1.0.0",
        lifespan=lifespan,
        description="""
        Sleep Tracker API.

        Clock in when going to bed and clock out on waking up, browse your
        sleep history, see how the people you follow slept last week, and get
        quality, consistency and sleep debt statistics for a trailing window.
        """,
        swagger_ui_parameters={
            "deepLinking": True,
            "displayRequestDuration": True,
            "tryItOutEnabled": True,
            "filter": True,
        },
    )

    # CORS configuration
    origins = [
        "http://localhost:3000",
        "http://127.0.0.1:3000",
        "http://localhost:8000",
        "http://127.0.0.1:8000",
    ]

    app.add_middleware(
        CORSMiddleware,
        allow_origins=origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Include API routers
    app.include_router(health_router)
    app.include_router(user_router)
    app.include_router(clock_router)
    app.include_router(sleep_record_router)
    app.include_router(following_router)

    # Exception handlers
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(ApplicationException, application_exception_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(Exception, generic_exception_handler)

    return app


app = create_app()


if __name__ == "__main__":
    uvicorn.run(
        "sleep_tracker.main:app",
        host="127.0.0.1",
        port=8000,
        reload=settings.IS_DEVELOPMENT,
        timeout_keep_alive=30,
        timeout_graceful_shutdown=30
    )
