import os
from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
import signal, sys

from shortlinks.core.config import settings
from shortlinks.core.errors import (
    Conflict,
    Exhausted,
    InvalidInput,
    NotFound,
    ShortenerError,
    StorageFailure,
)
from shortlinks.db.Connection import database
from shortlinks.db.Models import models
from shortlinks.api import shortener, admin, dependencies
from shortlinks.core.logging_config import configure_logging

logger = configure_logging()
logger.info(f"Application '{settings.PROJECT_NAME}' starting up.")

models.Base.metadata.create_all(bind=database.engine)
logger.info("Database models initialized/checked.")
database.verify_database_connection()
database.verify_redis_connection()

ERROR_STATUS = {
    InvalidInput: status.HTTP_400_BAD_REQUEST,
    Conflict: status.HTTP_409_CONFLICT,
    NotFound: status.HTTP_404_NOT_FOUND,
    StorageFailure: status.HTTP_503_SERVICE_UNAVAILABLE,
    Exhausted: status.HTTP_503_SERVICE_UNAVAILABLE,
}


app = FastAPI(
    title=settings.PROJECT_NAME,
    description="Short link creation, redirects and daily click statistics"
)

@app.get("/health", tags=["health"])
def health_check():
    return {"status": "healthy", "service": "shortlinks"}

os.makedirs(settings.MEDIA_PATH, exist_ok=True)
app.mount("/media", StaticFiles(directory=settings.MEDIA_PATH), name="media")

app.include_router(admin.router, prefix="/api/v1")
app.include_router(shortener.router, prefix="")

@app.exception_handler(ShortenerError)
async def shortener_exception_handler(request: Request, exc: ShortenerError):
    status_code = ERROR_STATUS.get(type(exc), status.HTTP_500_INTERNAL_SERVER_ERROR)
    if status_code >= 500:
        logger.error(f"{exc.kind} on {request.method} {request.url.path}: {exc.message}")
    return JSONResponse(status_code=status_code, content={"kind": exc.kind, "message": exc.message})

@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    logger.error(f"Unhandled exception: {exc}", exc_info=True)
    return JSONResponse(status_code=500, content={"detail": "Internal server error"})

def _shutdown(signum, frame):
    logger.info("Shutting down gracefully...")
    try:
        database.engine.dispose()
    except Exception:
        logger.debug("Error disposing DB engine")
    try:
        if database.redis_client is not None:
            database.redis_client.close()
    except Exception:
        logger.debug("Error closing Redis client")
    try:
        dependencies.qr_provider.close()
    except Exception:
        logger.debug("Error closing QR HTTP client")
    sys.exit(0)

signal.signal(signal.SIGTERM, _shutdown)
signal.signal(signal.SIGINT, _shutdown)
