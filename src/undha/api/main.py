"""FastAPI application."""

from __future__ import annotations

import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from undha import __version__
from undha.api.routes import router
from undha.config import Settings
from undha.engine.orchestrator import ResolutionEngine
from undha.lexicon.store import Lexicon, LexiconHandle
from undha.responders.base import ExternalResponder

logger = logging.getLogger(__name__)


def create_app(
    settings: Settings,
    lexicon: Lexicon | LexiconHandle,
    responder: ExternalResponder | None = None,
) -> FastAPI:
    """Build the API around one resolution engine.

    Args:
        settings: Thresholds and timeouts for the engine
        lexicon: Lexicon, or LexiconHandle if the caller reloads it
        responder: External responder for external/hybrid requests

    Returns:
        FastAPI app with routes under /api/v1
    """
    app = FastAPI(
        title="Undha",
        description="Register-aware Indonesian-Javanese translation",
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
    )

    # CORS for development
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.state.settings = settings
    app.state.engine = ResolutionEngine(lexicon, responder=responder, settings=settings)
    app.include_router(router, prefix="/api/v1")

    @app.get("/")
    async def root():
        """Root endpoint with API info."""
        return {
            "name": "Undha",
            "version": __version__,
            "docs": "/docs",
            "api": "/api/v1",
        }

    logger.info(
        f"API ready: {len(app.state.engine.lexicon)} entries, "
        f"responder={type(responder).__name__ if responder else 'none'}"
    )
    return app
