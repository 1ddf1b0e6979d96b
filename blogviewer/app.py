from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

import httpx
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from blogviewer.application import build_orchestrator, build_source
from blogviewer.core.logging_setup import configure_logging
from blogviewer.core.settings import Settings, load_settings
from blogviewer.infrastructure import DocumentSource, PersistentKVStore
from blogviewer.routes import posts, session

logger = logging.getLogger(__name__)


def create_app(
    settings: Settings | None = None,
    *,
    source: DocumentSource | None = None,
    storage: PersistentKVStore | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
) -> FastAPI:
    settings = settings or load_settings()
    configure_logging(settings.log_level)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        document_source = source or build_source(settings, transport=transport)
        orchestrator = build_orchestrator(settings, source=document_source, storage=storage)
        app.state.orchestrator = orchestrator
        view = await orchestrator.start()
        logger.info(
            "Session restored with %d tab(s), active=%s (%s mode)",
            len(view.session.tabs),
            view.active_tab_id,
            settings.runtime_mode,
        )
        try:
            yield
        finally:
            app.state.orchestrator = None
            if source is None:
                await document_source.aclose()

    app = FastAPI(title="Blog Viewer Session API", version="0.1.0", lifespan=lifespan)
    app.state.settings = settings
    app.state.orchestrator = None

    app.add_middleware(
        CORSMiddleware,
        allow_origins=list(settings.cors_origins),
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(session.router, prefix="/api")
    app.include_router(posts.router, prefix="/api")

    @app.get("/", include_in_schema=False)
    async def root() -> JSONResponse:
        """Provide a lightweight landing page for container checks."""
        return JSONResponse(
            {
                "message": "Blog Viewer Session API",
                "docs": "/docs",
                "health": "/api/session",
            }
        )

    return app


app = create_app()
