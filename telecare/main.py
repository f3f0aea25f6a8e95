import logging
import sys

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from prometheus_fastapi_instrumentator import Instrumentator

from telecare.api.v1.api import api_router
from telecare.core.config import settings
from telecare.core.exceptions import BookingError

# Configure logging
logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    handlers=[logging.StreamHandler(sys.stdout)],
)

logger = logging.getLogger(__name__)


async def booking_error_handler(request: Request, exc: BookingError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc.message}")
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.message})


def create_app() -> FastAPI:
    app = FastAPI(title=settings.PROJECT_NAME, version=settings.VERSION)
    app.add_exception_handler(BookingError, booking_error_handler)
    app.include_router(api_router, prefix=settings.API_V1_STR)
    if settings.METRICS_ENABLED:
        Instrumentator().instrument(app).expose(app, endpoint="/metrics")
    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("telecare.main:app", host="0.0.0.0", port=8000, reload=False)
