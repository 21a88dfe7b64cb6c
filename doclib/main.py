"""
Main FastAPI application entry point.
"""
from contextlib import asynccontextmanager
from fastapi import FastAPI

from doclib.core.config import settings
from doclib.core.database import init_db, close_db, AsyncSessionLocal
from doclib.core.logging import setup_logging, get_logger
from doclib.core.middleware import LoggingMiddleware
from doclib.services.root import RootBootstrapper
from doclib.api.health import router as health_router
from doclib.api.folders import router as folders_router
from doclib.api.files import router as files_router
from doclib.api.library import router as library_router

# Setup logging
setup_logging()
logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager."""
    logger.info("Starting Document Library")

    try:
        await init_db()
        logger.info("Database initialized successfully")

        async with AsyncSessionLocal() as session:
            root = await app.state.root_bootstrapper.get_or_create_root(session)
        logger.info("Library root ready", root_id=str(root.id))

    except Exception as e:
        logger.error("Failed to start application", error=str(e))
        raise

    yield

    logger.info("Shutting down Document Library")
    try:
        await close_db()
    except Exception as e:
        logger.error("Error during shutdown", error=str(e))


def create_app() -> FastAPI:
    """Create and configure FastAPI application."""
    app = FastAPI(
        title="Document Library",
        description="Hierarchical folder and file library",
        version="1.0.0",
        docs_url="/api/docs" if settings.DEBUG else None,
        redoc_url="/api/redoc" if settings.DEBUG else None,
        lifespan=lifespan,
    )

    app.state.root_bootstrapper = RootBootstrapper()

    app.add_middleware(LoggingMiddleware)

    app.include_router(health_router, tags=["Health"])
    app.include_router(library_router)
    app.include_router(folders_router)
    app.include_router(files_router)

    return app


app = create_app()
