"""FastAPI application entry point."""
import structlog
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from workflow_graph import __version__
from workflow_graph.api import workflows
from workflow_graph.config import get_settings
from workflow_graph.logging_config import configure_logging

configure_logging()

logger = structlog.get_logger()

settings = get_settings()

app = FastAPI(
    title=settings.app_name,
    description="Validation, compilation and layout of workflow editor graphs",
    version=__version__,
    docs_url="/docs",
    redoc_url="/redoc",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(workflows.router, prefix="/api/workflows", tags=["workflows"])


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {
        "status": "healthy",
        "version": __version__,
    }


@app.on_event("startup")
async def startup_event():
    """Application startup handler."""
    logger.info(
        "application_startup",
        app_name=settings.app_name,
        debug=settings.debug,
    )
