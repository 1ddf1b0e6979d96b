from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException

from blogviewer.application import Orchestrator
from blogviewer.routes.dependencies import get_orchestrator

router = APIRouter(prefix="/session", tags=["session"])


def _require_id(payload: dict) -> str:
    tab_id = payload.get("id")
    if not isinstance(tab_id, str) or not tab_id:
        raise HTTPException(status_code=400, detail="id is required")
    return tab_id


@router.get("")
async def get_session(orchestrator: Orchestrator = Depends(get_orchestrator)) -> dict:
    return orchestrator.view().to_record()


@router.post("/tabs")
async def open_tab(payload: dict, orchestrator: Orchestrator = Depends(get_orchestrator)) -> dict:
    """Open a document as a tab and make it active."""
    post_id = _require_id(payload)
    if await orchestrator.loader.get_post_meta(post_id) is None:
        raise HTTPException(status_code=404, detail="document not found")
    view = await orchestrator.open_document(post_id)
    return view.to_record()


@router.put("/active")
async def select_tab(payload: dict, orchestrator: Orchestrator = Depends(get_orchestrator)) -> dict:
    tab_id = _require_id(payload)
    if not orchestrator.sessions.has_tab(tab_id):
        raise HTTPException(status_code=404, detail="tab not open")
    view = await orchestrator.select_tab(tab_id)
    return view.to_record()


@router.delete("/tabs/{tab_id}")
async def close_tab(tab_id: str, orchestrator: Orchestrator = Depends(get_orchestrator)) -> dict:
    view = await orchestrator.close_tab(tab_id)
    return view.to_record()


@router.delete("/tabs")
async def close_all_tabs(orchestrator: Orchestrator = Depends(get_orchestrator)) -> dict:
    view = await orchestrator.close_all()
    return view.to_record()
