"""
Artiffex - FastAPI Server
REST API for the visual canvas: pipeline graph mutation and queries, node
execution, ImageScript compile/lint, and animation prompt generation.
"""

import base64
import binascii
import logging
import os
from typing import Optional, Dict, Any
from contextlib import asynccontextmanager

from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel, Field

from artiffex import __version__
from artiffex.config.settings import settings
from artiffex.exceptions import (
    FailureKind, GenerationError, NodeBusyError, NodeNotFoundError,
)
from artiffex.executor.executor import NodeExecutor
from artiffex.generation.gemini import GeminiGenerationService
from artiffex.imagescript import compile_script, parse_script, lint_script
from artiffex.recipes import RecipeRegistry, list_kinds
from artiffex.workflow.graph_store import GraphStore
from artiffex.workflow.models import NodeKind

logger = logging.getLogger(__name__)


# ── Global Instances ──────────────────────────────────────────────────────────

graph_store = GraphStore()
recipe_registry = RecipeRegistry()
generation_service = GeminiGenerationService(settings)
executor = NodeExecutor(graph_store, generation_service, recipe_registry)


@asynccontextmanager
async def lifespan(app: FastAPI):
    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    logger.info(f"[ARTIFFEX] Starting v{__version__} (environment={settings.environment})")
    if not settings.google_api_key:
        logger.warning("[ARTIFFEX] GOOGLE_API_KEY is not set; generation requests will fail")
    yield
    pending = await executor.drain()
    if pending:
        logger.info(f"[ARTIFFEX] Drained {len(pending)} in-flight generations")


app = FastAPI(
    title="Artiffex",
    description="Branching image-generation pipelines and the ImageScript prompt language.",
    version=__version__,
    lifespan=lifespan,
    docs_url="/docs",
    redoc_url="/redoc",
)

_cors_origins_raw = os.environ.get("CORS_ALLOWED_ORIGINS", "*")
_cors_origins = ["*"] if _cors_origins_raw.strip() == "*" else [o.strip() for o in _cors_origins_raw.split(",") if o.strip()]

app.add_middleware(
    CORSMiddleware,
    allow_origins=_cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# ── Request Models ────────────────────────────────────────────────────────────

class AddNodeRequest(BaseModel):
    kind: NodeKind
    parent_id: Optional[str] = None
    base_prompt: Optional[str] = None
    prompt: Optional[str] = None
    script: Optional[str] = None
    custom_text: Optional[str] = None
    aspect_ratio: Optional[str] = None
    position: Optional[Dict[str, float]] = None


class RunNodeRequest(BaseModel):
    custom_text: Optional[str] = None
    aspect_ratio: Optional[str] = None
    wait: bool = True


class UploadImageRequest(BaseModel):
    image_base64: str
    mime_type: str = "image/png"


class ScriptRequest(BaseModel):
    script: str = ""


class AnimationPromptsRequest(BaseModel):
    base_prompt: str
    instruction: str
    frame_count: int = Field(default=8, ge=1)


def _require(node_id: str):
    node = graph_store.get(node_id)
    if node is None:
        raise HTTPException(404, f"Node '{node_id}' not found")
    return node


def _generation_http_error(e: GenerationError) -> HTTPException:
    status = 400 if e.kind == FailureKind.EMPTY_PROMPT else 502
    return HTTPException(status, {"kind": e.kind.value, "message": e.message})


# ── System ────────────────────────────────────────────────────────────────────

@app.get("/health", tags=["System"])
async def health():
    return {
        "status": "ok",
        "version": __version__,
        "nodes": len(graph_store),
        "generation_configured": bool(settings.google_api_key),
    }


@app.get("/kinds", tags=["System"])
async def kinds():
    """Node palette: every kind with its title and category."""
    items = list_kinds()
    return {"count": len(items), "kinds": items}


# ── Nodes ─────────────────────────────────────────────────────────────────────

@app.get("/nodes", tags=["Graph"])
async def list_nodes(kind: Optional[NodeKind] = None):
    nodes = graph_store.list_nodes(kind)
    return {"count": len(nodes), "nodes": [n.model_dump(mode="json") for n in nodes]}


@app.post("/nodes", tags=["Graph"])
async def add_node(req: AddNodeRequest):
    """Add a node, optionally as the single child of an existing node."""
    fields = req.model_dump(exclude={"kind", "parent_id"}, exclude_none=True)
    try:
        node = graph_store.add_node(req.kind, req.parent_id, **fields)
    except NodeNotFoundError as e:
        raise HTTPException(404, str(e))
    except ValueError as e:
        raise HTTPException(400, str(e))
    return node.model_dump(mode="json")


@app.get("/nodes/{node_id}", tags=["Graph"])
async def get_node(node_id: str):
    return _require(node_id).model_dump(mode="json")


@app.patch("/nodes/{node_id}", tags=["Graph"])
async def update_node(node_id: str, updates: Dict[str, Any]):
    """Merge user-editable field updates into a node. Execution fields are rejected."""
    try:
        node = graph_store.update_node(node_id, updates)
    except NodeNotFoundError as e:
        raise HTTPException(404, str(e))
    except ValueError as e:
        raise HTTPException(400, str(e))
    return node.model_dump(mode="json")


@app.delete("/nodes/{node_id}", tags=["Graph"])
async def delete_node(node_id: str):
    """Delete a node and its whole subtree."""
    _require(node_id)
    removed = graph_store.delete_subtree(node_id)
    return {"status": "deleted", "removed": sorted(removed)}


@app.get("/nodes/{node_id}/descendants", tags=["Graph"])
async def node_descendants(node_id: str):
    _require(node_id)
    return {"node_id": node_id, "descendants": sorted(graph_store.descendants(node_id))}


@app.get("/nodes/{node_id}/ancestors", tags=["Graph"])
async def node_ancestors(node_id: str):
    _require(node_id)
    return {"node_id": node_id, "ancestors": graph_store.ancestors(node_id)}


@app.post("/nodes/{node_id}/invalidate", tags=["Graph"])
async def invalidate_node(node_id: str):
    """Discard everything downstream of a node."""
    _require(node_id)
    removed = graph_store.invalidate_descendants(node_id)
    return {"status": "invalidated", "removed": sorted(removed)}


# ── Execution ─────────────────────────────────────────────────────────────────

@app.post("/nodes/{node_id}/run", tags=["Execution"])
async def run_node(node_id: str, req: RunNodeRequest):
    """Execute a node. With wait=false the call returns while generation is in flight."""
    try:
        if req.wait:
            node = await executor.run_node(node_id, req.custom_text, req.aspect_ratio)
        else:
            executor.start_node(node_id, req.custom_text, req.aspect_ratio)
            node = graph_store.get(node_id)
    except NodeNotFoundError as e:
        raise HTTPException(404, str(e))
    except NodeBusyError as e:
        raise HTTPException(409, str(e))
    if node is None:
        return {"status": "discarded", "node_id": node_id}
    return node.model_dump(mode="json")


@app.post("/nodes/{node_id}/upload", tags=["Execution"])
async def upload_image(node_id: str, req: UploadImageRequest):
    """Attach an image to an upload node and describe it into a base prompt."""
    try:
        image_bytes = base64.b64decode(req.image_base64, validate=True)
    except (binascii.Error, ValueError):
        raise HTTPException(400, "image_base64 is not valid base64")
    try:
        node = await executor.describe_upload(node_id, image_bytes, req.mime_type)
    except NodeNotFoundError as e:
        raise HTTPException(404, str(e))
    except NodeBusyError as e:
        raise HTTPException(409, str(e))
    except ValueError as e:
        raise HTTPException(400, str(e))
    if node is None:
        return {"status": "discarded", "node_id": node_id}
    return node.model_dump(mode="json")


@app.post("/nodes/{node_id}/enhance", tags=["Execution"])
async def enhance_node_prompt(node_id: str):
    """Creative boost: expand the node's base prompt."""
    try:
        node = await executor.enhance_prompt(node_id)
    except NodeNotFoundError as e:
        raise HTTPException(404, str(e))
    except NodeBusyError as e:
        raise HTTPException(409, str(e))
    except GenerationError as e:
        raise _generation_http_error(e)
    return {"node_id": node.id, "enhanced_prompt": node.enhanced_prompt}


# ── Graph ─────────────────────────────────────────────────────────────────────

@app.get("/edges", tags=["Graph"])
async def list_edges():
    edges = graph_store.edges()
    return {"count": len(edges), "edges": [e.model_dump(mode="json") for e in edges]}


@app.get("/graph/export", tags=["Graph"])
async def export_graph():
    return graph_store.export_graph()


@app.get("/graph/stats", tags=["Graph"])
async def graph_stats():
    return graph_store.get_stats()


@app.post("/graph/validate", tags=["Graph"])
async def validate_graph():
    errors = graph_store.check_integrity()
    return {"valid": len(errors) == 0, "errors": errors}


# ── ImageScript ───────────────────────────────────────────────────────────────

@app.post("/imagescript/compile", tags=["ImageScript"])
async def compile_imagescript(req: ScriptRequest):
    """Compile a script into its prompt, with the parsed structure for the output panel."""
    return {
        "prompt": compile_script(req.script),
        "parsed": parse_script(req.script).model_dump(mode="json"),
    }


@app.post("/imagescript/lint", tags=["ImageScript"])
async def lint_imagescript(req: ScriptRequest):
    errors = lint_script(req.script)
    return {"count": len(errors), "errors": [e.model_dump() for e in errors]}


# ── Animation ─────────────────────────────────────────────────────────────────

@app.post("/animation/prompts", tags=["Animation"])
async def animation_prompts(req: AnimationPromptsRequest):
    """Frame-by-frame prompts animating a scene."""
    try:
        frames = await executor.animation_prompts(req.base_prompt, req.instruction, req.frame_count)
    except GenerationError as e:
        raise _generation_http_error(e)
    return {"count": len(frames), "prompts": frames}


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8080)
