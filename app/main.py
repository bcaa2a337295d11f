"""
Waste Watch - FastAPI Application Entry Point

A community waste and animal-welfare reporting backend: citizens submit
reports with a photo, the dashboard reads them back ordered by priority.

DESIGN PRINCIPLES:
- Priority comes from the report type and is fixed at creation
- Status only moves forward: Pending → Acknowledged → In Progress → Resolved
- One report store is the single writer for report state
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles

from app.core.errors import ReportError
from app.core.settings import settings
from app.routes import admin, health, images, reports
from app.services.image_service import UPLOAD_URL_PREFIX
from app.services.priority_classifier import get_report_classifier
from app.services.report_store import get_report_store
from app.services.sweep_scheduler import start_sweep_task, stop_sweep_task

logging.basicConfig(
    level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager"""
    logger.info(f"Starting {settings.APP_NAME} v{settings.APP_VERSION}")

    # Resolve the store up front so a misconfigured backend fails loudly
    store = get_report_store()
    logger.info(f"Report store backend: {store.backend}")
    # Invalid PRIORITY_OVERRIDES labels raise here, not on the first request
    get_report_classifier()

    sweep_task = start_sweep_task(settings.SWEEP_INTERVAL_SECONDS)
    try:
        yield
    finally:
        await stop_sweep_task(sweep_task)
        logger.info(f"Shutting down {settings.APP_NAME}")


# Initialize FastAPI app
app = FastAPI(
    title=settings.APP_NAME,
    version=settings.APP_VERSION,
    description="Community waste and animal-welfare reporting API",
    debug=settings.DEBUG,
    lifespan=lifespan
)


@app.exception_handler(ReportError)
async def report_error_handler(request: Request, exc: ReportError):
    """Map domain errors to their HTTP status."""
    logger.warning(f"{request.method} {request.url.path} -> {exc.status_code}: {exc.message}")
    content = {"success": False, "error": exc.message}
    if exc.details is not None:
        content["details"] = jsonable_encoder(exc.details)
    return JSONResponse(status_code=exc.status_code, content=content)


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Catch Pydantic validation errors and log them."""
    logger.warning(f"Validation error on {request.method} {request.url.path}: {exc.errors()}")
    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content={"success": False, "error": "Invalid request", "details": jsonable_encoder(exc.errors())}
    )


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    """Catch all unhandled exceptions and log them with full traceback."""
    logger.error(f"Unhandled error on {request.method} {request.url.path}: {exc}", exc_info=exc)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"success": False, "error": "Internal server error"}
    )


app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# Include routers
app.include_router(health.router)
app.include_router(reports.router)
app.include_router(admin.router)
app.include_router(images.router)

# Uploaded photos; the directory is created on first upload
app.mount(UPLOAD_URL_PREFIX, StaticFiles(directory=settings.UPLOAD_DIR, check_dir=False), name="uploads")


# Root endpoint
@app.get("/")
async def root():
    """
    Root endpoint - API information.
    """
    return {
        "service": settings.APP_NAME,
        "version": settings.APP_VERSION,
        "status": "running",
        "docs": "/docs",
        "health": "/health",
        "reports": "/api/reports"
    }
