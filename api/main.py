"""
FastAPI Application - AI App Catalog API
"""
from contextlib import asynccontextmanager
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from config import settings
from database import Database
from processor import RankingService
from scheduler import RankingRefreshScheduler
from utils import logger, init_logging
from utils.exceptions import CatalogError
from .routes import router


def create_app(database: Database = None, start_scheduler: bool = None) -> FastAPI:
    """
    Build the API application.

    Args:
        database: Unconnected Database to use (defaults to settings.DATABASE_URL)
        start_scheduler: Run the periodic ranking refresh in-process
            (defaults to RANKING_REFRESH_INTERVAL_MINUTES > 0)
    """
    if start_scheduler is None:
        start_scheduler = settings.RANKING_REFRESH_INTERVAL_MINUTES > 0

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Startup and shutdown events."""
        # Startup
        init_logging("api")
        db = database or Database()
        await db.connect()
        app.state.database = db
        app.state.ranking_service = RankingService(db)

        scheduler = None
        if start_scheduler:
            scheduler = RankingRefreshScheduler(app.state.ranking_service)
            scheduler.start()

        yield

        # Shutdown
        if scheduler is not None:
            scheduler.stop()
        await db.dispose()

    app = FastAPI(
        title="AI App Catalog",
        description="API for browsing and ranking AI applications",
        version="1.0.0",
        lifespan=lifespan
    )

    # CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_exception_handlers(app)

    # Include routes
    app.include_router(router, prefix="/api")

    @app.get("/")
    async def root():
        """Root endpoint."""
        return {
            "name": "AI App Catalog",
            "version": "1.0.0",
            "status": "running"
        }

    return app


def register_exception_handlers(app: FastAPI):
    """Map errors to {success: false, error} bodies."""

    @app.exception_handler(CatalogError)
    async def catalog_error_handler(request: Request, exc: CatalogError):
        if exc.status_code >= 500:
            logger.error(f"{request.method} {request.url.path} failed: {exc}")
        return JSONResponse(
            status_code=exc.status_code,
            content={"success": False, "error": exc.message},
        )

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError):
        errors = exc.errors()
        field = errors[0]["loc"][-1] if errors and errors[0].get("loc") else "request"
        return JSONResponse(
            status_code=400,
            content={"success": False, "error": f"Invalid query parameter: {field}"},
        )

    @app.exception_handler(Exception)
    async def unhandled_error_handler(request: Request, exc: Exception):
        logger.exception(f"Unhandled error on {request.method} {request.url.path}: {exc}")
        return JSONResponse(
            status_code=500,
            content={"success": False, "error": "Internal server error"},
        )


app = create_app()
