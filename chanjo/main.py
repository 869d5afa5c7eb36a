from contextlib import asynccontextmanager
import logging
import sys

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy import inspect

from chanjo.api.v1.api import api_router
from chanjo.core.config import settings
from chanjo.core.exceptions import ConflictError, NotFoundError
from chanjo.db.base import Base
from chanjo.db.session import engine
from chanjo.reminders.config import settings as reminder_settings

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    handlers=[logging.StreamHandler(sys.stdout)],
)

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan events"""
    logger.info(f"Starting up {settings.PROJECT_NAME} backend...")

    # Check database tables
    try:
        existing_tables = inspect(engine).get_table_names()
        missing_tables = [t for t in Base.metadata.tables if t not in existing_tables]
        if missing_tables:
            logger.warning(f"Missing database tables: {missing_tables}")
            logger.warning("Run `python -m chanjo.db.init_db` before starting the server")
        else:
            logger.info("All required database tables exist")
    except Exception as e:
        logger.warning(f"Could not check database tables: {e}")

    yield
    logger.info("Shutting down")


def create_app() -> FastAPI:
    app = FastAPI(
        title=settings.PROJECT_NAME,
        version=settings.VERSION,
        description="Vaccination reminders for mothers",
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.ALLOWED_ORIGINS,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
        allow_headers=["Content-Type", "Authorization"],
    )

    @app.exception_handler(NotFoundError)
    async def not_found_handler(request: Request, exc: NotFoundError):
        return JSONResponse(status_code=404, content={"detail": str(exc)})

    @app.exception_handler(ConflictError)
    async def conflict_handler(request: Request, exc: ConflictError):
        return JSONResponse(status_code=409, content={"detail": str(exc)})

    @app.exception_handler(RequestValidationError)
    async def validation_handler(request: Request, exc: RequestValidationError):
        # Malformed bodies and dates are client errors, reported as 400
        return JSONResponse(status_code=400, content={"detail": jsonable_encoder(exc.errors())})

    app.include_router(api_router, prefix=settings.API_PREFIX)

    @app.get("/health", tags=["health"])
    def health_check():
        return {"status": "ok"}

    if reminder_settings.METRICS_ENABLED:
        from prometheus_fastapi_instrumentator import Instrumentator
        Instrumentator().instrument(app).expose(app, endpoint="/metrics")

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("chanjo.main:app", host="0.0.0.0", port=8000)
