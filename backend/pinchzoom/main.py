"""
FastAPI application entry point.
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from pinchzoom import __version__
from pinchzoom.config import settings
from pinchzoom.routes import sessions_router
from pinchzoom.services.sessions import session_registry

# Configure logging
logging.basicConfig(
    level=logging.DEBUG if settings.debug else logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler."""
    # Startup
    logger.info(f"Starting Pinch Zoom Engine v{__version__}")
    logger.info(f"Session TTL: {settings.session_ttl_hours}h, limit: {settings.max_sessions}")

    yield

    # Shutdown
    logger.info(f"Shutting down with {len(session_registry)} live session(s)...")


# Create FastAPI app
app = FastAPI(
    title="Pinch Zoom Engine",
    description="API for driving pinch/pan/double-tap zoom sessions and reading back image transforms",
    version=__version__,
    lifespan=lifespan,
    docs_url=f"{settings.api_v1_prefix}/docs",
    redoc_url=f"{settings.api_v1_prefix}/redoc",
    openapi_url=f"{settings.api_v1_prefix}/openapi.json",
)

# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],  # Configure appropriately for production
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# Global exception handler for consistent error responses
@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    """Handle unexpected exceptions."""
    logger.exception(f"Unhandled exception: {exc}")
    return JSONResponse(
        status_code=500,
        content={
            "error": {
                "code": "INTERNAL_ERROR",
                "message": "An unexpected error occurred",
            }
        },
    )


# Include routers
app.include_router(sessions_router, prefix=settings.api_v1_prefix)


# Health check endpoint
@app.get("/health", tags=["health"])
async def health_check():
    """Health check endpoint."""
    return {
        "ok": True,
        "status": "healthy",
        "version": __version__,
        "sessions": len(session_registry),
    }


# Root info
@app.get("/", include_in_schema=False)
async def root():
    """Point at the API documentation."""
    return {
        "message": "Pinch Zoom Engine API",
        "version": __version__,
        "docs": f"{settings.api_v1_prefix}/docs",
    }


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "pinchzoom.main:app",
        host="0.0.0.0",
        port=8000,
        reload=True,
    )
