"""
Gemini Generation Service - Imagen image rendering and Gemini text/vision
calls through the google-genai SDK's async client.
"""

import logging
from typing import Optional, List, Any
from pydantic import BaseModel, Field
from google import genai
from google.genai import types

from artiffex.config.settings import Settings, settings as default_settings
from artiffex.exceptions import FailureKind, GenerationError
from artiffex.generation import prompts
from artiffex.generation.base import GenerationService
from artiffex.generation.errors import classify_generation_error

logger = logging.getLogger(__name__)


class AnimationPrompts(BaseModel):
    """Structured response schema for animation frame prompts."""
    prompts: List[str] = Field(default_factory=list, description="A detailed prompt for a single animation frame.")


class GeminiGenerationService(GenerationService):
    """
    GenerationService backed by Google Gemini (text, vision) and Imagen (images).
    The SDK client is created lazily so the service can be constructed without
    credentials (e.g. while serving the API in dev mode).
    """

    def __init__(self, settings: Optional[Settings] = None, client: Optional[Any] = None):
        self._settings = settings or default_settings
        self._client = client

    @property
    def client(self) -> Any:
        if self._client is None:
            if not self._settings.google_api_key:
                raise GenerationError(FailureKind.SERVICE_ERROR, "GOOGLE_API_KEY is not set.")
            self._client = genai.Client(api_key=self._settings.google_api_key)
            logger.info("[GEMINI] Client initialized")
        return self._client

    async def generate_image(self, prompt: str, aspect_ratio: str = "1:1") -> bytes:
        try:
            response = await self.client.aio.models.generate_images(
                model=self._settings.image_model,
                prompt=prompt,
                config=types.GenerateImagesConfig(
                    number_of_images=1,
                    output_mime_type=self._settings.image_mime_type,
                    aspect_ratio=aspect_ratio,
                ),
            )
        except Exception as e:
            raise classify_generation_error(e, "generate image") from e

        images = response.generated_images or []
        if not images or images[0].image is None or not images[0].image.image_bytes:
            raise GenerationError(FailureKind.SERVICE_ERROR, "No image was generated.")
        return images[0].image.image_bytes

    async def describe_image(self, image_bytes: bytes, mime_type: str) -> str:
        try:
            response = await self.client.aio.models.generate_content(
                model=self._settings.text_model,
                contents=[
                    types.Part.from_bytes(data=image_bytes, mime_type=mime_type),
                    prompts.DESCRIBE_IMAGE,
                ],
            )
        except Exception as e:
            raise classify_generation_error(e, "describe image") from e
        return (response.text or "").strip()

    async def generate_text(self, prompt: str) -> str:
        try:
            response = await self.client.aio.models.generate_content(
                model=self._settings.text_model,
                contents=prompt,
            )
        except Exception as e:
            raise classify_generation_error(e, "generate text") from e
        return (response.text or "").strip()

    async def generate_animation_prompts(
        self, base_prompt: str, instruction: str, frame_count: int
    ) -> List[str]:
        frame_count = max(1, min(frame_count, self._settings.animation_max_frames))
        try:
            response = await self.client.aio.models.generate_content(
                model=self._settings.text_model,
                contents=prompts.ANIMATION_PROMPTS.format(
                    frame_count=frame_count, base_prompt=base_prompt, instruction=instruction,
                ),
                config=types.GenerateContentConfig(
                    response_mime_type="application/json",
                    response_schema=AnimationPrompts,
                ),
            )
        except Exception as e:
            raise classify_generation_error(e, "generate animation prompts") from e

        parsed = response.parsed
        if not isinstance(parsed, AnimationPrompts):
            try:
                parsed = AnimationPrompts.model_validate_json(response.text or "")
            except ValueError:
                raise GenerationError(
                    FailureKind.SERVICE_ERROR,
                    "Invalid response format from AI. Expected a 'prompts' array.",
                )
        return parsed.prompts
