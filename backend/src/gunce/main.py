"""
Main FastAPI application for Günce Defteri.

Initializes the FastAPI app with middleware, routes, exception handlers and
the process-wide diary services.
"""

from datetime import datetime, timezone

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .api.routes import auth, backup, entries, monitoring, sentiment, settings, stats, sync, tags
from .core.config import config
from .core.exceptions import GunceError, to_http_exception
from .core.logging import get_logger, setup_logging

# Initialize logging
setup_logging(config)
logger = get_logger(__name__)

# Create FastAPI app
app = FastAPI(
    title=config.APP_NAME,
    description="Personal diary with per-entry encryption, sentiment tagging and local/remote storage",
    version=config.APP_VERSION,
    debug=config.DEBUG,
    docs_url="/docs",
    redoc_url="/redoc",
    openapi_tags=[
        {"name": "Entries", "description": "Create, read, update, delete and search diary entries"},
        {"name": "Tags", "description": "Tag management with usage counts"},
        {"name": "Statistics", "description": "Writing and sentiment statistics"},
        {"name": "Sync", "description": "Reconciliation between the local and remote stores"},
        {"name": "Backup", "description": "Backup export and restore"},
        {"name": "Settings", "description": "User preferences"},
        {"name": "Authentication", "description": "Password protection and unlock"},
        {"name": "Sentiment", "description": "Sentiment analysis"},
        {"name": "System", "description": "System health and status"},
    ],
)

# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=config.cors_origins_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include API routes
app.include_router(entries.router)
app.include_router(tags.router)
app.include_router(stats.router)
app.include_router(sync.router)
app.include_router(backup.router)
app.include_router(settings.router)
app.include_router(sentiment.router)
app.include_router(monitoring.router)
app.include_router(auth.router, prefix="/api/v1/auth", tags=["Authentication"])


# Health check endpoint
@app.get("/health", tags=["System"])
async def health_check():
    """
    Basic health check endpoint.

    For storage and remote health, use /api/v1/health.
    """
    return {
        "status": "healthy",
        "app": config.APP_NAME,
        "version": config.APP_VERSION,
        "environment": config.ENVIRONMENT,
        "storage_mode": config.STORAGE_MODE,
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "detailed_health": "/api/v1/health",
    }


# Root endpoint
@app.get("/", tags=["System"])
async def root():
    return {
        "message": f"{config.APP_NAME} API",
        "version": config.APP_VERSION,
        "docs": "/docs",
        "endpoints": {
            "entries": "/api/v1/entries",
            "tags": "/api/v1/tags",
            "stats": "/api/v1/stats",
            "sync": "/api/v1/sync",
            "backup": "/api/v1/backup",
            "settings": "/api/v1/settings",
            "auth": "/api/v1/auth",
            "sentiment": "/api/v1/sentiment",
        },
    }


# Error handlers
@app.exception_handler(GunceError)
async def gunce_exception_handler(request: Request, exc: GunceError):
    """Map application errors to HTTP statuses."""
    http_exc = to_http_exception(exc)
    if http_exc.status_code >= 500:
        logger.error(f"{exc.code}: {exc.message}")
    else:
        logger.warning(f"{exc.code}: {exc.message}")
    return JSONResponse(status_code=http_exc.status_code, content={"detail": http_exc.detail})


@app.exception_handler(Exception)
async def general_exception_handler(request: Request, exc: Exception):
    """Handle general exceptions."""
    logger.error(f"Unhandled exception: {exc}", exc_info=True)
    return JSONResponse(
        status_code=500,
        content={"detail": "Internal server error"},
    )


# Startup event
@app.on_event("startup")
async def startup_event():
    """Build the settings store, password gate, storage adapter and services."""
    from .core.security import PasswordGate
    from .core.settings_store import SettingsStore
    from .db.session import get_session_factory, init_db
    from .services.sentiment_service import SentimentService
    from .services.storage.factory import StorageAdapterFactory
    from .services.sync_service import SyncService

    logger.info(f"Starting {config.APP_NAME} v{config.APP_VERSION}")
    logger.info(f"Environment: {config.ENVIRONMENT}, storage mode: {config.STORAGE_MODE}")

    store = SettingsStore.load(config.SETTINGS_FILE)
    app.state.settings_store = store
    app.state.gate = PasswordGate(store)

    session_factory = None
    if config.STORAGE_MODE == "local":
        try:
            await init_db()
            session_factory = get_session_factory()
            logger.info("Database initialized")
        except Exception as e:
            logger.error(f"Failed to initialize database: {e}")
            raise

    app.state.adapter = StorageAdapterFactory.get_adapter(session_factory)
    app.state.sentiment = SentimentService()

    remote = StorageAdapterFactory.get_sync_target()
    if remote is not None:
        app.state.sync_service = SyncService(app.state.adapter, remote)
        logger.info("Reconciliation with the remote store enabled")
    else:
        app.state.sync_service = None


# Shutdown event
@app.on_event("shutdown")
async def shutdown_event():
    """Handle shutdown event."""
    logger.info(f"Shutting down {config.APP_NAME}")

    sentiment_service = getattr(app.state, "sentiment", None)
    if sentiment_service is not None:
        sentiment_service.cleanup()

    # Close any remaining database connections
    try:
        from .db.session import close_db

        await close_db()
        logger.info("Database connections closed")
    except Exception as e:
        logger.error(f"Error closing database connections: {e}")


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        app,
        host=config.API_HOST,
        port=config.API_PORT,
        reload=config.DEBUG,
        log_level=config.LOG_LEVEL.lower(),
    )
