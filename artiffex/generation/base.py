"""Generation service interface - the only suspending collaborator of the core."""

from abc import ABC, abstractmethod
from typing import List


class GenerationService(ABC):
    """Asynchronous image / text generation backend.

    Implementations raise GenerationError on failure; the executor stores the
    classified failure on the node instead of letting it propagate.
    """

    @abstractmethod
    async def generate_image(self, prompt: str, aspect_ratio: str = "1:1") -> bytes:
        """Render one image for `prompt` and return its raw bytes."""
        ...

    @abstractmethod
    async def describe_image(self, image_bytes: bytes, mime_type: str) -> str:
        """Return a short descriptive prompt for an existing image."""
        ...

    @abstractmethod
    async def generate_text(self, prompt: str) -> str:
        """Free-form text completion."""
        ...

    @abstractmethod
    async def generate_animation_prompts(
        self, base_prompt: str, instruction: str, frame_count: int
    ) -> List[str]:
        """One image prompt per animation frame, first close to the base scene."""
        ...
