"""
Tutor Backend
FastAPI application for student progress, achievements and usage limits
"""

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
import logging
from contextlib import asynccontextmanager
from typing import Optional

from tutor.config import Settings, get_settings
from tutor.database import InMemoryProgressStore, InMemoryUsageStore
from tutor.routes.progress import router as progress_router
from tutor.routes.gamification import router as gamification_router
from tutor.routes.usage import router as usage_router
from tutor.routes.navigation import router as navigation_router
from tutor.services.progress_engine import ProgressEngine
from tutor.services.usage_tracking_service import UsageTrackingService

logger = logging.getLogger(__name__)

VERSION = "1.0.0"


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """Build the application with its own engine and usage service instances"""
    settings = settings or get_settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Handle application startup and shutdown events."""
        logger.info("Starting up Tutor API...")
        yield
        logger.info("Shutting down Tutor API...")

    app = FastAPI(
        title="Tutor API",
        description="Backend API for the exam-preparation tutor",
        version=VERSION,
        lifespan=lifespan,
    )

    # Services live for the lifetime of the app; state is process-local
    app.state.settings = settings
    app.state.progress_engine = ProgressEngine(InMemoryProgressStore())
    app.state.usage_service = UsageTrackingService(InMemoryUsageStore())

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Include routers
    app.include_router(progress_router, prefix="/api/progress", tags=["progress"])
    app.include_router(
        gamification_router, prefix="/api/gamification", tags=["gamification"]
    )
    app.include_router(usage_router, prefix="/api/usage", tags=["usage"])
    app.include_router(
        navigation_router, prefix="/api/navigation", tags=["navigation"]
    )

    @app.get("/")
    async def root():
        """Root endpoint"""
        return {"message": "Tutor API is running", "version": VERSION}

    @app.get("/health")
    async def health_check():
        """Health check endpoint"""
        return {"status": "healthy"}

    return app


app = create_app()
