"""
Shared fixtures for the Artiffex test suite.
"""
import sys
import os
import asyncio
from typing import List, Optional

import pytest

# Ensure project root is on sys.path
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))

# Set env vars before any imports that read them
os.environ["ENVIRONMENT"] = "test"
os.environ.setdefault("GOOGLE_API_KEY", "test-key")
os.environ.setdefault("ARTIFFEX_STRICT_PARENTS", "false")

from artiffex.generation.base import GenerationService  # noqa: E402


class FakeGenerationService(GenerationService):
    """In-memory GenerationService that records calls and can be held or made to fail."""

    def __init__(self):
        self.image_calls: List[tuple] = []
        self.text_calls: List[str] = []
        self.describe_calls: List[tuple] = []
        self.animation_calls: List[tuple] = []
        self.fail_with: Optional[BaseException] = None
        self.gate: Optional[asyncio.Event] = None
        self.image_bytes = b"\x89PNG fake image"
        self.text_reply = "Welcome to the show! Today we wander through a misty forest."
        self.description = "a tabby cat sitting on a sunny windowsill"
        self.frames = ["frame one", "frame two", "frame three"]

    def hold(self) -> asyncio.Event:
        """Block every call until the returned event is set."""
        self.gate = asyncio.Event()
        return self.gate

    async def _settle(self):
        if self.gate is not None:
            await self.gate.wait()
        if self.fail_with is not None:
            raise self.fail_with

    async def generate_image(self, prompt: str, aspect_ratio: str = "1:1") -> bytes:
        self.image_calls.append((prompt, aspect_ratio))
        await self._settle()
        return self.image_bytes

    async def describe_image(self, image_bytes: bytes, mime_type: str) -> str:
        self.describe_calls.append((image_bytes, mime_type))
        await self._settle()
        return self.description

    async def generate_text(self, prompt: str) -> str:
        self.text_calls.append(prompt)
        await self._settle()
        return self.text_reply

    async def generate_animation_prompts(self, base_prompt: str, instruction: str, frame_count: int) -> List[str]:
        self.animation_calls.append((base_prompt, instruction, frame_count))
        await self._settle()
        return self.frames[:frame_count]


@pytest.fixture
def graph_store():
    """Fresh, empty GraphStore."""
    from artiffex.workflow.graph_store import GraphStore
    return GraphStore(strict_parents=False)


@pytest.fixture
def fake_service():
    return FakeGenerationService()


@pytest.fixture
def executor(graph_store, fake_service):
    """NodeExecutor wired to the fresh store and the fake service."""
    from artiffex.executor.executor import NodeExecutor
    return NodeExecutor(graph_store, fake_service)


def make_ready(store, node_id: str, base_prompt: str, output_ref: str = "data:image/png;base64,AAAA"):
    """Drive a node through idle -> running -> ready with an output."""
    from artiffex.workflow.models import NodeStatus
    store.set_status(node_id, NodeStatus.RUNNING)
    store.update_node(node_id, {"base_prompt": base_prompt, "output_ref": output_ref})
    return store.set_status(node_id, NodeStatus.READY)


@pytest.fixture
def ready(graph_store):
    """Mark a node of the fresh store as ready: ready(node_id, base_prompt)."""
    def _ready(node_id: str, base_prompt: str, output_ref: str = "data:image/png;base64,AAAA"):
        return make_ready(graph_store, node_id, base_prompt, output_ref)
    return _ready
