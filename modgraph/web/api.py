"""Display-surface API: analyzer notifications in, tree queries out."""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Depends, HTTPException, Request
from pydantic import BaseModel

from modgraph.exceptions import EnumerationError, StaleReferenceError, UnknownNodeError
from modgraph.explorer import VIEW_MODES, ModulesExplorer, ViewMode
from modgraph.views import TreeNode

router = APIRouter(prefix="/api")


class ViewModeRequest(BaseModel):
    mode: ViewMode


class EnumerateRequest(BaseModel):
    folder_uri: str


def get_explorer(request: Request) -> ModulesExplorer:
    return request.app.state.explorer


def _parse_node(token: str | None) -> TreeNode | None:
    if token is None:
        return None
    try:
        return TreeNode.from_token(token)
    except ValueError as e:
        raise HTTPException(400, str(e))


def _status(explorer: ModulesExplorer) -> dict:
    store = explorer.store
    return {
        "status": store.status.value,
        "reason": store.reason,
        "message": explorer.message,
        "view_mode": explorer.mode.value,
        "description": explorer.description,
        "is_empty": store.is_empty,
        "generation": store.generation,
        "modules": len(store.modules),
        "translation_units": len(store.translation_units),
    }


@router.get("/status")
async def get_status(explorer: ModulesExplorer = Depends(get_explorer)):
    return _status(explorer)


@router.get("/views")
async def list_views(explorer: ModulesExplorer = Depends(get_explorer)):
    return {
        "active": explorer.mode.value,
        "views": [
            {
                "mode": mode.value,
                "display_name": info.display_name,
                "label": info.pick_label,
                "description": info.pick_description,
            }
            for mode, info in VIEW_MODES.items()
        ],
    }


@router.post("/view")
async def set_view(req: ViewModeRequest, explorer: ModulesExplorer = Depends(get_explorer)):
    changed = explorer.activate_view_mode(req.mode)
    return {"changed": changed, **_status(explorer)}


@router.post("/notifications/publish-modules-info")
async def publish_modules_info(
    payload: dict[str, Any],
    explorer: ModulesExplorer = Depends(get_explorer),
):
    result = explorer.publish_modules_info(payload)
    return {"error": result.error, **_status(explorer)}


@router.get("/tree")
async def get_children(node: str | None = None, explorer: ModulesExplorer = Depends(get_explorer)):
    parent = _parse_node(node)
    try:
        children = explorer.router.get_children(parent)
        items = [
            {"node": child.to_token(), **explorer.router.get_node(child).to_dict()}
            for child in children
        ]
    except StaleReferenceError as e:
        raise HTTPException(409, str(e))
    except UnknownNodeError as e:
        raise HTTPException(404, str(e))
    return {"message": explorer.message, "items": items}


@router.get("/tree/item")
async def get_item(node: str, explorer: ModulesExplorer = Depends(get_explorer)):
    parsed = _parse_node(node)
    try:
        item = explorer.router.get_node(parsed)
    except StaleReferenceError as e:
        raise HTTPException(409, str(e))
    except UnknownNodeError as e:
        raise HTTPException(404, str(e))
    return {"node": node, **item.to_dict()}


@router.post("/enumerate")
async def enumerate_folder(req: EnumerateRequest, explorer: ModulesExplorer = Depends(get_explorer)):
    try:
        documents = explorer.enumerate_workspace_folder(req.folder_uri)
    except EnumerationError as e:
        raise HTTPException(404, str(e))
    return {"documents": documents}
