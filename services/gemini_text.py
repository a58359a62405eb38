"""
Gemini text and vision helpers.

Covers the non-image calls the gallery makes: bilingual prompt analysis
with tagging, art-director enhancement, translation, vision tagging and
description of images, and text embeddings for semantic search.
"""

import asyncio
import json
import logging
from dataclasses import dataclass, field
from typing import Any

from google import genai
from google.genai import types

from core.config import Settings, get_settings
from core.exceptions import ConfigurationError, ExternalServiceError

logger = logging.getLogger(__name__)


# Professional terms kept in English when translating
PRESERVE_TERMS = [
    "bokeh", "HDR", "8K", "4K", "UHD", "RAW", "DSLR", "f/1.4", "f/1.8", "f/2.8",
    "aperture", "ISO", "shutter", "macro", "wide-angle", "telephoto", "tilt-shift",
    "Octane Render", "Unreal Engine", "V-Ray", "Cinema 4D", "Blender", "ZBrush",
    "ray tracing", "global illumination", "ambient occlusion", "subsurface scattering",
    "PBR", "HDRI", "low poly", "voxel", "isometric",
]

ANALYSIS_TEMPLATE = """
You are an expert AI art prompt assistant.
Task 1: Detect the language of the user Input.
Task 2: If Input is Chinese, translate it to high-quality English for Image Generation (enPrompt). Keep the original as zhPrompt.
Task 3: If Input is English, keep it as enPrompt, and translate it to Traditional Chinese for display (zhPrompt).
Task 4: Generate 3-5 concise descriptive tags in Traditional Chinese for categorization.

Return ONLY a JSON object with this structure:
{{
    "enPrompt": "string (optimized for image generation)",
    "zhPrompt": "string (Traditional Chinese)",
    "tags": "string (comma joined tags)"
}}

User Input: {prompt}
"""

ENHANCE_TEMPLATE = """
You are a world-class AI art director and prompt engineer.
Transform the user's concept into a masterpiece-level image prompt.

User's Input: "{prompt}"

Think step by step:
1. Analyze the subject and its mood.
2. Pick a strategy for the category (portrait, landscape, sci-fi, product...).
3. Select camera, lens and lighting that fit the subject.
4. Write a cohesive narrative description, not a list of tags.

Return JSON:
{{
    "enhanced": "Detailed English prompt (80-150 words): subject, environment, lighting/mood, technical specs.",
    "enhancedZH": "Traditional Chinese translation of the enhanced prompt",
    "additions": {{"style": "", "lighting": "", "camera": "", "quality": ""}},
    "promptScore": {{"before": 0, "after": 0, "improvement": ""}},
    "tags": ["up", "to", "five", "tags"]
}}
"""

TRANSLATE_TO_ZH_TEMPLATE = """
You are a professional AI art prompt translator. Translate the following English
image prompt into Traditional Chinese.

{preserve_note}

Source:
"{text}"

Return JSON:
{{"translated": "...", "preservedTerms": ["..."], "summary": "one sentence summary"}}
"""

TRANSLATE_TO_EN_TEMPLATE = """
You are an expert AI art prompt engineer. Translate the following Chinese
description into a professional English image generation prompt.

{preserve_note}

Chinese input: "{text}"

Rules:
- Output a detailed English prompt optimized for image generation
- Include style, mood and technical descriptors
- Keep it under 100 words

Return JSON:
{{"translated": "...", "enhanced": "...", "keywords": ["..."]}}
"""

VISION_TAG_PROMPT = """
Analyze this image and provide 5 to 10 relevant tags.
Focus on:
1. Art style (e.g. Cyberpunk, Oil Painting, Anime)
2. Visual content (e.g. Cat, Rain, Neon Lights)
3. Lighting and mood (e.g. Dark, Cinematic, Vibrant)

Output ONLY a comma-separated list of tags in Traditional Chinese (Taiwan).
"""

IMAGE_DESCRIPTION_PROMPT = """
Analyze this image for an AI art prompt database.

Return JSON:
{
    "promptEN": "Detailed English prompt describing the image (80-120 words, include style, lighting, mood, composition)",
    "promptZH": "Traditional Chinese description",
    "style": "art style (anime, photorealistic, oil painting, etc.)",
    "mood": "mood/atmosphere",
    "tags": ["relevant", "search", "tags", "in", "english"],
    "category": "portrait|landscape|object|abstract|character|scene"
}
"""


def extract_json_object(text: str) -> dict[str, Any] | None:
    """
    Parse the first {...} span in a model reply.

    Models sometimes wrap JSON in prose or code fences; everything outside
    the outermost braces is ignored.
    """
    start = text.find("{")
    end = text.rfind("}")
    if start == -1 or end == -1 or end < start:
        return None
    try:
        data = json.loads(text[start : end + 1])
    except json.JSONDecodeError:
        return None
    return data if isinstance(data, dict) else None


def split_tags(value: str | list[str] | None) -> list[str]:
    """Normalise a comma string or list of tags into a clean list."""
    if not value:
        return []
    items = value if isinstance(value, list) else value.split(",")
    return [str(item).strip() for item in items if str(item).strip()]


@dataclass
class PromptAnalysis:
    """Bilingual prompt plus suggested tags."""

    en_prompt: str
    zh_prompt: str = ""
    tags: list[str] = field(default_factory=list)
    analyzed: bool = False


@dataclass
class EnhancedPrompt:
    original: str
    enhanced: str
    enhanced_zh: str = ""
    additions: dict[str, Any] = field(default_factory=dict)
    prompt_score: dict[str, Any] = field(default_factory=dict)
    tags: list[str] = field(default_factory=list)


@dataclass
class Translation:
    original: str
    translated: str
    enhanced: str = ""
    keywords: list[str] = field(default_factory=list)
    summary: str = ""


@dataclass
class ImageDescription:
    """Prompt reconstructed from an image, with catalogue metadata."""

    prompt_en: str
    prompt_zh: str = ""
    tags: list[str] = field(default_factory=list)
    style: str = ""
    mood: str = ""
    category: str = ""


class GeminiTextService:
    """Text, vision and embedding calls against the Gemini API."""

    def __init__(self, api_key: str | None = None, settings: Settings | None = None):
        self._settings = settings or get_settings()
        self._api_key = api_key or self._settings.gemini_api_key
        if not self._api_key:
            raise ConfigurationError(message="GEMINI_API_KEY is not configured")

        self._client = genai.Client(api_key=self._api_key)

    async def _generate_text(
        self,
        model: str,
        contents: Any,
        json_mode: bool = False,
        temperature: float | None = None,
    ) -> str:
        """Run a generate_content call in the thread pool and return its text."""
        config_dict: dict[str, Any] = {}
        if json_mode:
            config_dict["response_mime_type"] = "application/json"
        if temperature is not None:
            config_dict["temperature"] = temperature

        config = types.GenerateContentConfig(**config_dict) if config_dict else None

        def api_call():
            return self._client.models.generate_content(
                model=model,
                contents=contents,
                config=config,
            )

        loop = asyncio.get_running_loop()
        try:
            response = await loop.run_in_executor(None, api_call)
        except Exception as e:
            logger.error(f"[Gemini] {model} request failed: {e}")
            raise ExternalServiceError(
                message=f"Gemini request failed: {e}",
                details={"model": model},
            ) from e

        return response.text or ""

    async def analyze_prompt(self, prompt: str) -> PromptAnalysis:
        """
        Translate/bilingualise a prompt and suggest tags.

        Never raises: on any failure the original prompt is returned untouched.
        """
        fallback = PromptAnalysis(en_prompt=prompt)

        try:
            text = await self._generate_text(
                self._settings.analysis_model,
                ANALYSIS_TEMPLATE.format(prompt=prompt),
                json_mode=True,
            )
        except ExternalServiceError as e:
            logger.warning(f"Prompt analysis failed, using original prompt: {e.message}")
            return fallback

        data = extract_json_object(text)
        if data is None:
            logger.warning("No JSON object found in prompt analysis response")
            return fallback

        return PromptAnalysis(
            en_prompt=data.get("enPrompt") or prompt,
            zh_prompt=data.get("zhPrompt") or "",
            tags=split_tags(data.get("tags")),
            analyzed=True,
        )

    async def enhance_prompt(self, prompt: str) -> EnhancedPrompt:
        """Rewrite a short concept into a detailed prompt."""
        text = await self._generate_text(
            self._settings.enhance_model,
            ENHANCE_TEMPLATE.format(prompt=prompt),
            json_mode=True,
            temperature=0.75,
        )

        data = extract_json_object(text)
        if data is None:
            return EnhancedPrompt(original=prompt, enhanced=text.strip())

        return EnhancedPrompt(
            original=prompt,
            enhanced=data.get("enhanced") or "",
            enhanced_zh=data.get("enhancedZH") or "",
            additions=data.get("additions") or {},
            prompt_score=data.get("promptScore") or {},
            tags=split_tags(data.get("tags")),
        )

    async def translate(self, text: str, target_lang: str = "en") -> Translation:
        """Translate between English and Traditional Chinese."""
        preserve_note = (
            "IMPORTANT: keep these technical terms in English: "
            + ", ".join(PRESERVE_TERMS)
        )
        to_zh = target_lang in ("zh", "zh-TW")
        template = TRANSLATE_TO_ZH_TEMPLATE if to_zh else TRANSLATE_TO_EN_TEMPLATE

        reply = await self._generate_text(
            self._settings.translate_model,
            template.format(text=text, preserve_note=preserve_note),
            json_mode=True,
            temperature=0.3,
        )

        data = extract_json_object(reply)
        if data is None:
            return Translation(original=text, translated=reply.strip())

        translated = data.get("translated") or ""
        return Translation(
            original=text,
            translated=translated,
            enhanced=data.get("enhanced") or translated,
            keywords=split_tags(data.get("keywords") or data.get("preservedTerms")),
            summary=data.get("summary") or "",
        )

    async def suggest_tags(self, image: bytes, mime_type: str = "image/png") -> list[str]:
        """Ask the vision model for descriptive tags of an image."""
        contents = [
            VISION_TAG_PROMPT,
            types.Part.from_bytes(data=image, mime_type=mime_type),
        ]
        text = await self._generate_text(self._settings.vision_model, contents)
        tags = split_tags(text)
        if not tags:
            raise ExternalServiceError(message="No response from model")
        return tags

    async def describe_image(self, image: bytes, mime_type: str = "image/png") -> ImageDescription:
        """
        Reconstruct a generation prompt from an image.

        A reply that is not JSON is taken as the English prompt itself.
        """
        contents = [
            IMAGE_DESCRIPTION_PROMPT,
            types.Part.from_bytes(data=image, mime_type=mime_type),
        ]
        text = await self._generate_text(self._settings.vision_model, contents, json_mode=True)

        data = extract_json_object(text)
        if data is None:
            if not text.strip():
                raise ExternalServiceError(message="No response from model")
            return ImageDescription(prompt_en=text.strip(), tags=["Imported", "Auto-Caption"])

        prompt_en = data.get("promptEN") or ""
        if not prompt_en:
            raise ExternalServiceError(message="Model returned an empty description")

        return ImageDescription(
            prompt_en=prompt_en,
            prompt_zh=data.get("promptZH") or "",
            tags=split_tags(data.get("tags")),
            style=data.get("style") or "",
            mood=data.get("mood") or "",
            category=data.get("category") or "",
        )

    async def embed(self, text: str) -> list[float]:
        """Return the embedding vector for a piece of text."""
        model = self._settings.embedding_model

        def api_call():
            return self._client.models.embed_content(model=model, contents=text)

        loop = asyncio.get_running_loop()
        try:
            response = await loop.run_in_executor(None, api_call)
        except Exception as e:
            logger.error(f"[Gemini] Embedding failed: {e}")
            raise ExternalServiceError(message="Failed to embed query") from e

        if not response.embeddings or not response.embeddings[0].values:
            raise ExternalServiceError(message="No embedding returned")
        return list(response.embeddings[0].values)
