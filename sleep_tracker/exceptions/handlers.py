from fastapi import Request
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
from sleep_tracker.exceptions.errors import ApplicationException
from sleep_tracker.core.logger import get_logger

logger = get_logger("exception_handlers")


async def application_exception_handler(request: Request, exc: ApplicationException):
    logger.warning(f"Application error on {request.method} {request.url.path}: {exc.message}")
    return exc.to_response()


async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    if exc.status_code == 404 and exc.detail == "Not Found":
        return JSONResponse(
            status_code=404,
            content={"error": "Route not found", "path": str(request.url.path)}
        )
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": exc.detail}
    )


async def generic_exception_handler(request: Request, exc: Exception):
    logger.error(f"Unhandled error: {repr(exc)}")
    return JSONResponse(
        status_code=500,
        content={"error": "An unexpected error occurred"}
    )
