# main.py
from typing import Optional
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from routers import auth, reports, admin
from config import Settings, get_settings
from database import create_engine_with_retry, create_session_factory, create_tables, check_connection
from errors import ReportingError
from services.prediction_client import PredictionClient
from services.report_store import ReportStore
import os
import logging

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)

VERSION = "1.0.0"
GENERIC_ERROR = "Internal server error."


def register_error_handlers(app: FastAPI):
    @app.exception_handler(ReportingError)
    async def reporting_error_handler(request: Request, exc: ReportingError):
        if exc.status_code >= 500:
            logger.error(f"{request.method} {request.url.path} failed: {exc.message}")
            return JSONResponse(status_code=exc.status_code, content={"message": GENERIC_ERROR})
        return JSONResponse(status_code=exc.status_code, content={"message": exc.message})

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError):
        problems = "; ".join(
            f"{'.'.join(str(part) for part in error['loc'])}: {error['msg']}" for error in exc.errors()
        )
        return JSONResponse(status_code=400, content={"message": f"Invalid request: {problems}"})

    @app.exception_handler(Exception)
    async def unhandled_error_handler(request: Request, exc: Exception):
        logger.exception(f"Unhandled error in {request.method} {request.url.path}: {exc}")
        return JSONResponse(status_code=500, content={"message": GENERIC_ERROR})


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """Build the API for one deployment variant"""
    settings = settings or get_settings()

    app = FastAPI(
        title="Disaster Report API",
        description="API for submitting disaster reports and ranking them by urgency",
        version=VERSION
    )

    app.state.settings = settings
    # Users live in the database named by these settings, in memory by default
    app.state.engine = create_engine_with_retry(settings.database_url)
    app.state.session_factory = create_session_factory(app.state.engine)
    app.state.report_store = ReportStore(settings.reports_csv, settings.variant)
    app.state.prediction_client = (
        PredictionClient(settings.prediction_url, timeout=settings.prediction_timeout)
        if settings.predictions_enabled else None
    )

    # CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_error_handlers(app)

    # Serve stored report photos; the directory is created on startup
    app.mount(
        "/uploaded_images",
        StaticFiles(directory=settings.upload_dir, check_dir=False),
        name="uploaded_images"
    )

    @app.on_event("startup")
    async def startup_event():
        """Initialize application on startup"""
        logger.info(f"Starting Disaster Report API ({settings.variant} variant)...")

        os.makedirs(settings.upload_dir, exist_ok=True)
        logger.info(f"Ensured directory exists: {settings.upload_dir}")

        app.state.report_store.initialize()
        logger.info(f"Report store ready at {settings.reports_csv}")

        if settings.predictions_enabled:
            logger.info(f"Predictions served by {settings.prediction_url}")

        if not create_tables(app.state.engine):
            logger.warning("Continuing startup without a user table...")

        logger.info("Startup completed successfully")

    @app.on_event("shutdown")
    async def shutdown_event():
        """Cleanup on application shutdown"""
        if app.state.prediction_client is not None:
            app.state.prediction_client.session.close()
        app.state.engine.dispose()
        logger.info("Shutting down Disaster Report API...")

    # Include routers
    app.include_router(auth.router)
    app.include_router(reports.router)
    if app.state.report_store.supports_status:
        app.include_router(admin.router)

    @app.get("/")
    def read_root():
        return {
            "message": "Disaster Report API",
            "version": VERSION,
            "variant": settings.variant,
            "docs": "/docs",
            "health": "OK",
        }

    @app.get("/health")
    def health_check():
        """Health check endpoint"""
        store_status = os.path.exists(settings.reports_csv)
        db_status = check_connection(app.state.engine)
        healthy = store_status and db_status

        return {
            "status": "healthy" if healthy else "degraded",
            "service": "disaster-report-api",
            "variant": settings.variant,
            "report_store": "available" if store_status else "missing",
            "database": "connected" if db_status else "disconnected",
            "prediction_service": settings.prediction_url if settings.predictions_enabled else "disabled",
            "version": VERSION
        }

    return app


app = create_app()

if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "main:app",
        host="0.0.0.0",
        port=8080,
        reload=True,  # Enable auto-reload during development
        log_level="info"
    )
