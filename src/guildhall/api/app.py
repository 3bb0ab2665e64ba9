"""
Main FastAPI application for Guildhall backend
"""

import os
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .. import __version__
from ..config import settings
from ..database import create_all, init_database
from ..logging import configure_logging, get_logger
from ..middleware import LoggingContextMiddleware
from ..storage.images import IMAGES_SUBDIR, get_images_dir

configure_logging(debug=settings.debug, level=settings.log_level)
logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager."""
    logger.info("Starting Guildhall API...")
    init_database()
    await create_all()
    logger.info("Database initialized")

    images_dir = get_images_dir()
    images_dir.mkdir(parents=True, exist_ok=True)
    logger.info("Image directory ready", path=str(images_dir))

    yield

    logger.info("Shutting down Guildhall API...")


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""

    app = FastAPI(
        title="Guildhall API",
        description="GraphQL API for chat servers, channels, invites and members",
        version=__version__,
        lifespan=lifespan,
        debug=settings.debug,
    )

    app.add_middleware(LoggingContextMiddleware)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.get("/health")
    async def health_check():  # pyright: ignore [reportUnusedFunction]
        """Health check endpoint."""
        return {"status": "healthy", "version": __version__}

    # GraphQL endpoint (allow disabling for tests)
    if not os.getenv("GUILDHALL_DISABLE_GRAPHQL"):
        from ..graphql.schema import create_graphql_router, validate_schema

        logger.info("Validating GraphQL schema...")
        validate_schema()

        app.include_router(create_graphql_router(), prefix="")
        logger.info("GraphQL endpoint initialized successfully", endpoint="/graphql")

    # Uploaded server images, served at the URLs handed out by the upload handler
    from .endpoints import images

    app.include_router(images.router, prefix=f"/{IMAGES_SUBDIR}", tags=["Images"])

    return app


app = create_app()

if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "guildhall.api.app:app",
        host=settings.api_host,
        port=settings.api_port,
        reload=settings.api_reload,
        log_level=settings.log_level.lower(),
    )
