"""
Studio Onboarding Web - FastAPI application.

Serves the onboarding router to the React frontend.
"""

import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from studio_onboarding import __version__
from studio_onboarding.api import get_dispatcher, router as onboarding_router
from studio_onboarding.config import settings
from studio_onboarding.db.client import get_client, init_client, reset_client

logger = logging.getLogger(__name__)

app = FastAPI(title="Studio Onboarding", version=__version__)


@app.on_event("startup")
async def startup_event():
    """Configure logging and the Supabase client once per process."""
    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    logger.info("Studio onboarding starting up...")
    client = init_client()
    logger.info(f"  Progress recording: {'enabled' if client else 'disabled (degraded mode)'}")


@app.on_event("shutdown")
async def shutdown_event():
    """Let dispatched progress records finish before the client goes away."""
    dispatcher = get_dispatcher()
    if dispatcher.pending:
        logger.info(f"Waiting for {dispatcher.pending} progress record(s) to finish...")
    await dispatcher.drain()
    reset_client()


# CORS middleware for React frontend dev server
app.add_middleware(
    CORSMiddleware,
    allow_origins=[
        "http://localhost:5173",  # Vite dev server
        "http://127.0.0.1:5173",
    ],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(onboarding_router, prefix="/api")


@app.get("/health")
async def health_check():
    return {
        "status": "healthy",
        "progress_recording": get_client() is not None,
    }
