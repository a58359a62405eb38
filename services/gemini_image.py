"""
Gemini / Imagen image generation service.

Three engine types are supported:
- flash: fast Gemini image model, low thinking
- pro: Gemini 3 Pro image model, high thinking, accepts reference images
- imagen: Imagen 4 Ultra, no thinking, can return up to four samples
"""

import asyncio
import base64
import logging
import re
import time
from collections.abc import Callable
from dataclasses import dataclass, field
from enum import StrEnum
from typing import Any

from google import genai
from google.genai import types

from core.config import Settings, get_settings
from core.exceptions import ConfigurationError

logger = logging.getLogger(__name__)

_DATA_URL_RE = re.compile(r"^data:(image/[\w.+-]+);base64,")

# Network-related error keywords that should trigger retry
RETRYABLE_ERRORS = [
    "server disconnected",
    "connection reset",
    "connection refused",
    "timeout",
    "unavailable",
    "overloaded",
    "503",
    "502",
    "504",
]


def is_retryable_error(error_msg: str) -> bool:
    """Check if an error is retryable based on error message."""
    error_lower = error_msg.lower()
    return any(keyword in error_lower for keyword in RETRYABLE_ERRORS)


class EngineType(StrEnum):
    """Hosted model variant used for generation."""

    FLASH = "flash"
    PRO = "pro"
    IMAGEN = "imagen"


@dataclass(frozen=True)
class EngineConfig:
    """Model id and defaults for one engine."""

    model: str
    thinking_level: str | None = None
    aspect_ratio: str = "1:1"
    accepts_images: bool = False
    max_samples: int = 1


@dataclass
class InlineImage:
    """A reference image sent along with the prompt."""

    data: bytes
    mime_type: str = "image/png"

    @classmethod
    def from_base64(cls, value: str) -> "InlineImage":
        """Build from a base64 string, with or without a data URL prefix."""
        match = _DATA_URL_RE.match(value)
        mime_type = match.group(1) if match else "image/png"
        payload = _DATA_URL_RE.sub("", value)
        return cls(data=base64.b64decode(payload), mime_type=mime_type)


@dataclass
class ImageGenerationResult:
    """Outcome of a generation call. Errors are reported here, not raised."""

    success: bool = False
    images: list[bytes] = field(default_factory=list)
    mime_type: str = "image/png"
    model: str | None = None
    text_response: str | None = None
    error: str | None = None
    safety_blocked: bool = False
    retryable: bool = False
    duration: float = 0.0

    @property
    def images_base64(self) -> list[str]:
        """Images as plain base64 strings."""
        return [base64.b64encode(img).decode("ascii") for img in self.images]

    @property
    def image_base64(self) -> str | None:
        """First image as a plain base64 string."""
        encoded = self.images_base64
        return encoded[0] if encoded else None


def build_engine_configs(settings: Settings) -> dict[EngineType, EngineConfig]:
    """Engine table built from the configured model ids."""
    return {
        EngineType.FLASH: EngineConfig(
            model=settings.flash_image_model,
            thinking_level="low",
        ),
        EngineType.PRO: EngineConfig(
            model=settings.pro_image_model,
            thinking_level="high",
            accepts_images=True,
        ),
        EngineType.IMAGEN: EngineConfig(
            model=settings.imagen_model,
            max_samples=4,
        ),
    }


class GeminiImageService:
    """Thin async wrapper around the google-genai image APIs."""

    RETRY_DELAYS = [2]

    def __init__(self, api_key: str | None = None, settings: Settings | None = None):
        self._settings = settings or get_settings()
        self._api_key = api_key or self._settings.gemini_api_key
        if not self._api_key:
            raise ConfigurationError(message="GEMINI_API_KEY is not configured")

        self._client = genai.Client(
            api_key=self._api_key,
            http_options=types.HttpOptions(api_version="v1beta"),
        )
        self._engines = build_engine_configs(self._settings)

    @property
    def engines(self) -> dict[EngineType, EngineConfig]:
        return self._engines

    def _execute_with_retry(
        self,
        api_call: Callable[[], Any],
        result: ImageGenerationResult,
    ) -> Any:
        """Execute a sync SDK call, retrying transient failures."""
        last_error = None

        for attempt in range(len(self.RETRY_DELAYS) + 1):
            try:
                return api_call()
            except Exception as e:
                error_msg = str(e)
                last_error = error_msg

                if "safety" in error_msg.lower() or "blocked" in error_msg.lower():
                    result.safety_blocked = True
                    result.error = "Content blocked by safety filter"
                    return None

                if is_retryable_error(error_msg) and attempt < len(self.RETRY_DELAYS):
                    delay = self.RETRY_DELAYS[attempt]
                    logger.warning(
                        f"[Gemini] Retryable error on attempt {attempt + 1}: {error_msg}. "
                        f"Retrying in {delay}s..."
                    )
                    time.sleep(delay)
                    continue

                break

        result.error = last_error
        result.retryable = is_retryable_error(last_error) if last_error else False
        return None

    async def _run(self, api_call: Callable[[], Any], result: ImageGenerationResult) -> Any:
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(
            None, lambda: self._execute_with_retry(api_call, result)
        )

    def _process_content_response(self, response: Any, result: ImageGenerationResult) -> None:
        """Extract inline images and text from a generate_content response."""
        if not response.candidates:
            result.error = "No valid response from API"
            return

        candidate = response.candidates[0]

        if str(getattr(candidate, "finish_reason", "")).endswith("SAFETY"):
            result.safety_blocked = True
            result.error = "Content blocked by safety filter"
            return

        if not candidate.content or not candidate.content.parts:
            result.error = "No valid response from API"
            return

        for part in candidate.content.parts:
            inline = getattr(part, "inline_data", None)
            if inline is not None and inline.data:
                data = inline.data
                if isinstance(data, str):
                    data = base64.b64decode(data)
                result.images.append(data)
                result.mime_type = inline.mime_type or result.mime_type
            elif getattr(part, "text", None):
                result.text_response = part.text

        if not result.images:
            result.error = "No image data in response"

    async def _generate_gemini(
        self,
        prompt: str,
        engine: EngineType,
        config: EngineConfig,
        images: list[InlineImage],
        aspect_ratio: str,
        thinking_level: str | None,
        result: ImageGenerationResult,
    ) -> None:
        contents: list[Any] = [prompt]
        if config.accepts_images:
            contents.extend(
                types.Part.from_bytes(data=img.data, mime_type=img.mime_type) for img in images
            )

        config_dict: dict[str, Any] = {
            "response_modalities": ["IMAGE"],
            "image_config": {"aspect_ratio": aspect_ratio},
        }
        level = thinking_level or config.thinking_level
        if engine == EngineType.PRO and level:
            config_dict["thinking_config"] = {"thinking_level": level.upper()}

        generate_config = types.GenerateContentConfig(**config_dict)

        def api_call():
            return self._client.models.generate_content(
                model=config.model,
                contents=contents,
                config=generate_config,
            )

        response = await self._run(api_call, result)
        if response is not None:
            self._process_content_response(response, result)

    async def _generate_imagen(
        self,
        prompt: str,
        config: EngineConfig,
        aspect_ratio: str,
        sample_count: int,
        result: ImageGenerationResult,
    ) -> None:
        count = min(max(sample_count, 1), config.max_samples)

        def api_call():
            return self._client.models.generate_images(
                model=config.model,
                prompt=prompt,
                config=types.GenerateImagesConfig(
                    number_of_images=count,
                    aspect_ratio=aspect_ratio,
                ),
            )

        response = await self._run(api_call, result)
        if response is None:
            return

        for generated in response.generated_images or []:
            if generated.image and generated.image.image_bytes:
                result.images.append(generated.image.image_bytes)
                result.mime_type = generated.image.mime_type or result.mime_type

        if not result.images:
            result.error = "Invalid Imagen response - no predictions"

    async def generate(
        self,
        prompt: str,
        engine: EngineType | str,
        images: list[InlineImage] | None = None,
        aspect_ratio: str | None = None,
        thinking_level: str | None = None,
        sample_count: int = 1,
    ) -> ImageGenerationResult:
        """
        Generate one or more images.

        Args:
            prompt: Final prompt text
            engine: flash, pro or imagen
            images: Reference images (pro only)
            aspect_ratio: Overrides the engine default
            thinking_level: Overrides the engine default (pro only)
            sample_count: Number of images (imagen only, 1-4)

        Returns:
            ImageGenerationResult
        """
        start_time = time.time()
        result = ImageGenerationResult()

        if not prompt or not prompt.strip():
            result.error = "Prompt is required"
            return result

        try:
            engine = EngineType(engine)
        except ValueError:
            result.error = f"Invalid engine type: {engine}. Must be one of: flash, pro, imagen"
            return result

        config = self._engines[engine]
        result.model = config.model
        ratio = aspect_ratio or config.aspect_ratio

        if engine == EngineType.IMAGEN:
            await self._generate_imagen(prompt, config, ratio, sample_count, result)
        else:
            await self._generate_gemini(
                prompt, engine, config, images or [], ratio, thinking_level, result
            )

        result.success = bool(result.images) and result.error is None
        result.duration = time.time() - start_time

        if result.success:
            logger.info(
                f"[Gemini] {engine} produced {len(result.images)} image(s) "
                f"in {result.duration:.2f}s"
            )
        else:
            logger.error(f"[Gemini] Error with {engine}: {result.error}")

        return result
