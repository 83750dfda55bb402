"""
Storefront Catalog - browsing engine for parts and accessories
FastAPI Application Entry Point
"""

import logging
import logging.handlers
import os
import sys
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Optional

import structlog
from dotenv import load_dotenv
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .api.v1.catalog import get_catalog_snapshot_dep, get_catalog_source_dep
from .api.v1.catalog import router as catalog_router
from .api.v1.health import router as health_router
from .api.v1.search import get_search_dep
from .api.v1.search import router as search_router
from .middleware import LoggingMiddleware, SessionContextMiddleware
from .models.catalog import ItemKind
from .services.catalog import CatalogSource, CatalogSourceError, InMemorySource, RemoteSource
from .services.catalog.http_client import StorefrontHttpClient
from .services.config.config_validator import validate_configs_on_startup

# Load environment variables
load_dotenv()


# Configure structured logging with structlog
def configure_logging():
    """
    Configure structured logging using structlog.

    - Production (ENV=production): JSON output for log aggregation
    - Development (ENV=development): Human-readable console output
    - Includes automatic context: timestamp, level, logger name, correlation_id, session_id
    """
    env = os.getenv("ENV", "development").lower()
    log_level_str = os.getenv("LOG_LEVEL", "INFO").upper()
    log_level = getattr(logging, log_level_str, logging.INFO)

    timestamper = structlog.processors.TimeStamper(fmt="iso")

    # Shared processors for all environments
    shared_processors = [
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.contextvars.merge_contextvars,
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        timestamper,
    ]

    if env == "production":
        renderer = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(
            colors=True,
            exception_formatter=structlog.dev.plain_traceback
        )

    structlog.configure(
        processors=shared_processors + [
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        cache_logger_on_first_use=True,
    )

    # Standard library logging goes through the same renderer
    formatter = structlog.stdlib.ProcessorFormatter(
        foreign_pre_chain=shared_processors,
        processors=[
            structlog.stdlib.ProcessorFormatter.remove_processors_meta,
            renderer,
        ],
    )

    # Default log path at project root (3 levels up from backend/storefront/main.py)
    project_root = Path(__file__).resolve().parent.parent.parent.parent
    default_log_path = project_root / "logs" / "storefront-catalog.log"
    log_file_path = str(Path(os.getenv("LOG_FILE_PATH", str(default_log_path))).resolve())
    log_dir = os.path.dirname(log_file_path)

    if log_dir:
        os.makedirs(log_dir, exist_ok=True)

    stdout_handler = logging.StreamHandler(sys.stdout)
    stdout_handler.setFormatter(formatter)

    file_handler = logging.handlers.RotatingFileHandler(
        filename=log_file_path,
        maxBytes=10 * 1024 * 1024,  # 10MB per file
        backupCount=5,
        encoding='utf-8'
    )
    file_handler.setFormatter(formatter)

    root_logger = logging.getLogger()
    root_logger.addHandler(stdout_handler)
    root_logger.addHandler(file_handler)
    root_logger.setLevel(log_level)

    # Reduce noise from verbose libraries
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)

    return structlog.get_logger(__name__)


# Initialize structured logging
logger = configure_logging()

# Global instances
storefront_client: Optional[StorefrontHttpClient] = None
catalog_snapshot: Optional[InMemorySource] = None
catalog_source: Optional[CatalogSource] = None


def build_catalog_sources(client: StorefrontHttpClient, kind: ItemKind, mode: str):
    """
    Build the (browse source, facet snapshot) pair.

    The snapshot always exists for facet statistics and related searches.
    In "remote" mode listing pages are fetched page by page instead of
    being sliced from the snapshot.
    """
    snapshot = InMemorySource(loader=lambda: client.fetch_catalog(kind))

    if mode == "remote":
        source = RemoteSource(
            fetch_page=lambda params: client.fetch_catalog_page(params, kind),
            kind=kind,
        )
    else:
        source = snapshot

    return source, snapshot


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager - startup and shutdown"""

    global storefront_client, catalog_snapshot, catalog_source

    logger.info("Starting storefront catalog service...")

    # Validate configurations on startup
    logger.info("Validating configurations...")
    try:
        is_valid, report = validate_configs_on_startup()
        if is_valid:
            logger.info("✓ Configuration validation passed")
        else:
            logger.warning("Configuration validation found issues - falling back to built-in defaults where needed")
    except Exception as e:
        logger.error(f"Configuration validation failed: {e}")
        logger.warning("Continuing with startup despite validation errors")

    kind = ItemKind(os.getenv("CATALOG_KIND", ItemKind.ACCESSORY.value))
    mode = os.getenv("CATALOG_SOURCE_MODE", "memory").lower()

    storefront_client = StorefrontHttpClient()
    catalog_source, catalog_snapshot = build_catalog_sources(storefront_client, kind, mode)
    logger.info(f"✓ Catalog source initialized: {catalog_source.get_name()} ({kind.value})")

    try:
        snapshot = await catalog_snapshot.reload()
        logger.info(f"✓ Catalog snapshot loaded with {len(snapshot)} items")
    except CatalogSourceError as e:
        logger.warning(f"Catalog snapshot load failed: {e}. Starting with an empty snapshot.")

    yield

    logger.info("Shutting down storefront catalog service...")

    try:
        await storefront_client.aclose()
        logger.info("✓ Storefront client closed")
    except Exception as e:
        logger.error(f"Error closing storefront client: {e}")

    logger.info("Shutdown complete")


# Create FastAPI application
app = FastAPI(
    title="Storefront Catalog",
    description="Faceted filtering, pagination, live search routing and device navigation for the repair storefront",
    version="1.0.0",
    lifespan=lifespan
)

# Configure CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],  # Update for production
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Middleware is executed in reverse order of addition,
# so SessionContextMiddleware runs inside LoggingMiddleware
app.add_middleware(SessionContextMiddleware)
app.add_middleware(LoggingMiddleware)


# Dependency injection for catalog collaborators
def get_catalog_source() -> CatalogSource:
    """Get browse source instance for dependency injection"""
    return catalog_source


def get_catalog_snapshot() -> InMemorySource:
    """Get facet snapshot instance for dependency injection"""
    return catalog_snapshot


def get_search():
    """Get the live search backend for dependency injection"""
    return storefront_client.search


# Include routers
app.include_router(catalog_router)
app.include_router(search_router)
app.include_router(health_router)

# Override dependencies in app (not router)
app.dependency_overrides[get_catalog_source_dep] = get_catalog_source
app.dependency_overrides[get_catalog_snapshot_dep] = get_catalog_snapshot
app.dependency_overrides[get_search_dep] = get_search


@app.get("/")
async def root():
    """Root endpoint - service description"""
    return {
        "service": "Storefront Catalog",
        "version": "1.0.0",
        "endpoints": {
            "browse": "/api/v1/catalog/browse",
            "facets": "/api/v1/catalog/facets",
            "related": "/api/v1/catalog/related",
            "suggestions": "/api/v1/search/suggestions",
            "destination": "/api/v1/search/destination",
            "health": "/api/v1/health",
            "docs": "/docs"
        }
    }


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "storefront.main:app",
        host="0.0.0.0",
        port=8000,
        reload=True,
        log_level="info"
    )
