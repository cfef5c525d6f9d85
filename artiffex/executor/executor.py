"""
Node Executor - turns one node into a final prompt and drives its generation.

Every run is split in two:
  1. a synchronous begin step: busy check, cascading invalidation of the
     node's descendants, prompt assembly, generation-id stamp, `running`;
  2. an awaited completion step that applies the service result only if the
     node still exists and still carries the same generation id.
Because invalidation happens before the first await, downstream nodes are
pruned immediately and never race with the pending result. There is no
cancellation: a request runs to completion and a stale result is dropped.
"""

import asyncio
import logging
from typing import Optional, Callable, Set, List

from pydantic import BaseModel

from artiffex.config.settings import settings
from artiffex.exceptions import (
    FailureKind, GenerationError, NodeBusyError,
)
from artiffex.executor.artifacts import to_data_url, from_data_url
from artiffex.generation import prompts
from artiffex.generation.base import GenerationService
from artiffex.generation.errors import classify_generation_error
from artiffex.imagescript.compiler import compile_script
from artiffex.recipes.registry import RecipeRegistry
from artiffex.workflow.graph_store import GraphStore
from artiffex.workflow.models import WorkflowNode, NodeKind, NodeStatus, NodeError

logger = logging.getLogger(__name__)

EMPTY_PROMPT_MESSAGE = "Prompt cannot be empty. Please write a prompt or script."
NO_BASE_PROMPT_MESSAGE = "Cannot generate podcast without a base prompt from an image."
NO_UPLOAD_MESSAGE = "No image has been uploaded to describe."


class GenerationTicket(BaseModel):
    """One in-flight request, bound to the generation id it was issued under."""
    node_id: str
    generation_id: str
    action: str  # image | describe | podcast
    prompt: str = ""
    aspect_ratio: str = "1:1"
    image_bytes: bytes = b""
    mime_type: str = ""


class NodeExecutor:
    """
    Executes pipeline nodes against a GenerationService.
    The graph store, the service and the recipe registry are injected.
    """

    def __init__(
        self,
        store: GraphStore,
        service: GenerationService,
        recipes: Optional[RecipeRegistry] = None,
        compiler: Callable[[str], str] = compile_script,
    ):
        self._store = store
        self._service = service
        self._recipes = recipes or RecipeRegistry()
        self._compile = compiler
        self._tasks: Set[asyncio.Task] = set()

    @property
    def recipes(self) -> RecipeRegistry:
        return self._recipes

    # ── Prompt Assembly ───────────────────────────────────────────────

    def build_prompt(self, node: WorkflowNode, custom_text: Optional[str] = None) -> str:
        """Final prompt for an image-producing node (may be blank)."""
        if node.kind == NodeKind.SOURCE_IMAGESCRIPT:
            return self._compile(node.script or "")

        if node.kind == NodeKind.PROMPT_MAGIC:
            custom = custom_text or node.enhanced_prompt or node.custom_text or node.prompt or ""
        else:
            custom = custom_text or node.custom_text or node.prompt or ""
        return self._recipes.resolve(node.kind, node.base_prompt or "", custom)

    # ── Begin (synchronous) ───────────────────────────────────────────

    def _fail(self, node_id: str, kind: FailureKind, message: str) -> None:
        self._store.set_status(node_id, NodeStatus.FAILED, NodeError(kind=kind, message=message))
        logger.info(f"[EXECUTOR] Node {node_id} failed ({kind.value}): {message}")

    def _begin(
        self,
        node_id: str,
        custom_text: Optional[str] = None,
        aspect_ratio: Optional[str] = None,
    ) -> Optional[GenerationTicket]:
        node = self._store.require(node_id)
        if node.status == NodeStatus.RUNNING:
            raise NodeBusyError(node_id)

        self._store.invalidate_descendants(node_id)

        updates = {}
        if custom_text is not None:
            updates["custom_text"] = custom_text
        if aspect_ratio:
            updates["aspect_ratio"] = aspect_ratio
        if updates:
            self._store.update_node(node_id, updates)
        node = self._store.begin_generation(node_id)

        ticket = GenerationTicket(
            node_id=node_id,
            generation_id=node.generation_id,
            action="image",
            aspect_ratio=node.aspect_ratio,
        )

        if node.kind == NodeKind.VEO_VIDEO:
            # no video backend: completes immediately
            self._store.update_node(node_id, {"video_complete": True})
            self._store.set_status(node_id, NodeStatus.READY)
            return None

        if node.kind == NodeKind.GENERATE_PODCAST:
            if not (node.base_prompt or "").strip():
                self._fail(node_id, FailureKind.EMPTY_PROMPT, NO_BASE_PROMPT_MESSAGE)
                return None
            ticket.action = "podcast"
            ticket.prompt = prompts.PODCAST_SCRIPT.format(base_prompt=node.base_prompt)
            return ticket

        if node.kind == NodeKind.SOURCE_UPLOAD:
            upload = from_data_url(node.input_ref)
            if upload is None:
                self._fail(node_id, FailureKind.EMPTY_PROMPT, NO_UPLOAD_MESSAGE)
                return None
            ticket.action = "describe"
            ticket.image_bytes, ticket.mime_type = upload
            return ticket

        prompt = self.build_prompt(node, custom_text)
        if not prompt or not prompt.strip():
            self._fail(node_id, FailureKind.EMPTY_PROMPT, EMPTY_PROMPT_MESSAGE)
            return None
        ticket.prompt = prompt
        return ticket

    # ── Complete (asynchronous) ───────────────────────────────────────

    def _current(self, ticket: GenerationTicket) -> Optional[WorkflowNode]:
        node = self._store.get(ticket.node_id)
        if (
            node is None
            or node.generation_id != ticket.generation_id
            or node.status != NodeStatus.RUNNING
        ):
            logger.info(f"[EXECUTOR] Discarding stale {ticket.action} result for {ticket.node_id}")
            return None
        return node

    async def _complete(self, ticket: GenerationTicket) -> Optional[WorkflowNode]:
        context = {
            "image": "generate image",
            "describe": "describe image",
            "podcast": "generate podcast script",
        }[ticket.action]
        try:
            if ticket.action == "describe":
                result = await self._service.describe_image(ticket.image_bytes, ticket.mime_type)
            elif ticket.action == "podcast":
                result = await self._service.generate_text(ticket.prompt)
            else:
                result = await self._service.generate_image(ticket.prompt, ticket.aspect_ratio)
        except Exception as e:
            error = classify_generation_error(e, context)
            if self._current(ticket) is None:
                return None
            self._fail(ticket.node_id, error.kind, error.message)
            return self._store.get(ticket.node_id)

        node = self._current(ticket)
        if node is None:
            return None

        if ticket.action == "describe":
            updates = {"base_prompt": result, "output_ref": node.input_ref}
        elif ticket.action == "podcast":
            updates = {"text_output": result}
        else:
            updates = {
                "output_ref": to_data_url(result, settings.image_mime_type),
                "base_prompt": ticket.prompt,
                "enhanced_prompt": ticket.prompt if node.kind == NodeKind.PROMPT_MAGIC else None,
            }
        self._store.update_node(ticket.node_id, updates)
        node = self._store.set_status(ticket.node_id, NodeStatus.READY)
        logger.info(f"[EXECUTOR] Node {ticket.node_id} ready ({ticket.action})")
        return node

    # ── Public API ────────────────────────────────────────────────────

    async def run_node(
        self,
        node_id: str,
        custom_text: Optional[str] = None,
        aspect_ratio: Optional[str] = None,
    ) -> Optional[WorkflowNode]:
        """
        Execute a node and wait for the result.
        Returns the node as left by this run, or None if the node was deleted
        (or re-run) while the request was in flight.
        """
        ticket = self._begin(node_id, custom_text, aspect_ratio)
        if ticket is None:
            return self._store.get(node_id)
        return await self._complete(ticket)

    def start_node(
        self,
        node_id: str,
        custom_text: Optional[str] = None,
        aspect_ratio: Optional[str] = None,
    ) -> Optional[asyncio.Task]:
        """
        Begin a run and schedule its completion without waiting.
        Invalidation has already happened when this returns. Must be called
        from a running event loop. Returns None when nothing was submitted.
        """
        ticket = self._begin(node_id, custom_text, aspect_ratio)
        if ticket is None:
            return None
        task = asyncio.get_running_loop().create_task(self._complete(ticket))
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return task

    async def drain(self) -> List[Optional[WorkflowNode]]:
        """Wait for every scheduled run to finish."""
        if not self._tasks:
            return []
        return list(await asyncio.gather(*list(self._tasks)))

    async def describe_upload(self, node_id: str, image_bytes: bytes, mime_type: str) -> Optional[WorkflowNode]:
        """Attach an uploaded image to a source-upload node and describe it."""
        node = self._store.require(node_id)
        if node.kind != NodeKind.SOURCE_UPLOAD:
            raise ValueError(f"Node '{node_id}' is a {node.kind.value} node, not an upload node")
        if node.status == NodeStatus.RUNNING:
            raise NodeBusyError(node_id)
        self._store.update_node(node_id, {
            "input_ref": to_data_url(image_bytes, mime_type),
            "input_mime_type": mime_type,
        })
        return await self.run_node(node_id)

    async def enhance_prompt(self, node_id: str) -> WorkflowNode:
        """
        Creative boost: expand the node's base prompt into `enhanced_prompt`.
        Does not change the node's status; failures raise GenerationError.
        """
        node = self._store.require(node_id)
        if node.status == NodeStatus.RUNNING:
            raise NodeBusyError(node_id)
        base = (node.base_prompt or "").strip()
        if not base:
            raise GenerationError(FailureKind.EMPTY_PROMPT, "There is no base prompt to boost.")
        try:
            enhanced = await self._service.generate_text(prompts.ENHANCE_PROMPT.format(base_prompt=base))
        except Exception as e:
            raise classify_generation_error(e, "enhance prompt") from e

        if node_id not in self._store:
            logger.info(f"[EXECUTOR] Node {node_id} deleted during prompt boost")
            return node
        return self._store.update_node(node_id, {"enhanced_prompt": enhanced.strip()})

    async def animation_prompts(self, base_prompt: str, instruction: str, frame_count: int) -> List[str]:
        """Frame-by-frame prompts for an animation of a scene."""
        if not (base_prompt or "").strip():
            raise GenerationError(FailureKind.EMPTY_PROMPT, EMPTY_PROMPT_MESSAGE)
        try:
            return await self._service.generate_animation_prompts(base_prompt, instruction, frame_count)
        except Exception as e:
            raise classify_generation_error(e, "generate animation prompts") from e
