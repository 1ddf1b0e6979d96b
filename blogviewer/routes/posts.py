from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Query

from blogviewer.application import Orchestrator, catalog
from blogviewer.domain import ManifestSnapshot
from blogviewer.routes.dependencies import get_orchestrator

router = APIRouter(tags=["posts"])


@router.get("/posts")
async def list_posts(orchestrator: Orchestrator = Depends(get_orchestrator)) -> dict:
    manifest = await orchestrator.cache.get_manifest()
    return {
        "items": [meta.to_record() for meta in manifest.posts.values()],
        "defaults": catalog.default_post_ids(manifest),
    }


@router.get("/posts/{post_id}")
async def get_post(post_id: str, orchestrator: Orchestrator = Depends(get_orchestrator)) -> dict:
    meta = await orchestrator.loader.get_post_meta(post_id)
    if meta is None:
        raise HTTPException(status_code=404, detail="document not found")
    return meta.to_record()


@router.get("/posts/{post_id}/content")
async def get_post_content(post_id: str, orchestrator: Orchestrator = Depends(get_orchestrator)) -> dict:
    content = await orchestrator.loader.get_post_with_content(post_id)
    if content is None:
        raise HTTPException(status_code=404, detail="content not available")
    return content.to_record()


@router.get("/menu")
async def get_menu(orchestrator: Orchestrator = Depends(get_orchestrator)) -> dict:
    manifest = await orchestrator.cache.get_manifest()
    return catalog.menu(manifest)


@router.get("/sidebar")
async def get_sidebar(orchestrator: Orchestrator = Depends(get_orchestrator)) -> dict:
    manifest = await orchestrator.cache.get_manifest()
    return {"items": [item.to_record() for item in catalog.sidebar_tree(manifest)]}


@router.get("/search")
async def search_posts(
    q: str = Query(default=""),
    orchestrator: Orchestrator = Depends(get_orchestrator),
) -> dict:
    manifest = await orchestrator.cache.get_manifest()
    hits = catalog.search(manifest, q)
    return {"query": q, "items": [hit.to_record() for hit in hits]}


@router.get("/recent")
async def get_recent_posts(
    limit: int = Query(default=6, ge=0, le=50),
    orchestrator: Orchestrator = Depends(get_orchestrator),
) -> dict:
    manifest = await orchestrator.cache.get_manifest()
    return {"items": [meta.to_record() for meta in catalog.recent_posts(manifest, limit)]}


@router.post("/manifest/refresh")
async def refresh_manifest(orchestrator: Orchestrator = Depends(get_orchestrator)) -> dict:
    view = await orchestrator.refresh_manifest()
    manifest = orchestrator.cache.snapshot or ManifestSnapshot.empty()
    return {"posts": len(manifest.posts), "lastUpdated": manifest.last_updated, "session": view.to_record()}
