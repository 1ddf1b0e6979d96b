from __future__ import annotations

from fastapi import HTTPException, Request

from blogviewer.application import Orchestrator


def get_orchestrator(request: Request) -> Orchestrator:
    orchestrator = getattr(request.app.state, "orchestrator", None)
    if orchestrator is None:
        raise HTTPException(status_code=503, detail="service is starting")
    return orchestrator
