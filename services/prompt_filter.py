"""
Master prompt filter.

Classifies a free-text prompt into a scene category and splices in the
matching camera, lighting and style phrasing. Everything here is pure and
reads only the module-level tables, so it can be called from any number of
concurrent requests.
"""

import re
from dataclasses import dataclass
from enum import StrEnum


class SceneCategory(StrEnum):
    """Subject-matter category used to pick camera/lighting/style phrasing."""

    MACRO = "macro"
    PORTRAIT = "portrait"
    FULL_BODY = "full_body"
    ARCHITECTURE = "architecture"
    LANDSCAPE = "landscape"
    ACTION = "action"
    FOOD = "food"
    ANIMAL = "animal"
    RENDER_3D = "render_3d"
    DEFAULT = "default"


class EngineMode(StrEnum):
    """How much auto-injected styling the composer adds."""

    FAST = "fast"  # low-latency model, short prompt
    FULL = "full"  # deliberative model, full profile


@dataclass(frozen=True)
class SceneProfile:
    """Camera, lighting and style phrases for one scene category."""

    lens: str
    lighting: str
    style: str


@dataclass(frozen=True)
class FilterResult:
    """Intermediate values of one compose call, for previews."""

    original: str
    scene: SceneCategory
    cleaned: str
    profile: SceneProfile
    engine_mode: EngineMode
    composed: str


# ============ Static Tables ============

REASONING_PREFIX = (
    "Analyze the core emotion and physical attributes of the scene. "
    "Think step-by-step: Prioritize lighting for narrative impact, "
    "and texture for absolute fidelity."
)

QUALITY_SUFFIX_BASE = "Masterpiece, best quality, ultra-detailed, 8k resolution, sharp focus"

RENDER_3D_SUFFIX = (
    "Unreal Engine 5 render, Octane Render, Ray Tracing, Global Illumination, Ambient Occlusion"
)
PHOTO_SUFFIX = "HDR, Studio quality, Award winning photography"
INTERIOR_SUFFIX = "V-Ray render, Architectural visualization, Realistic materials"

# Checked in this order; the first category with a matching keyword wins.
SCENE_KEYWORDS: tuple[tuple[SceneCategory, tuple[str, ...]], ...] = (
    (
        SceneCategory.MACRO,
        ("macro", "closeup", "close-up", "detail", "texture", "jewelry", "watch",
         "insect", "ring", "diamond"),
    ),
    (
        SceneCategory.PORTRAIT,
        ("portrait", "face", "headshot", "expression", "selfie", "bust shot"),
    ),
    (
        SceneCategory.FULL_BODY,
        ("full body", "standing", "environmental portrait", "fashion", "model", "outfit"),
    ),
    (
        SceneCategory.ARCHITECTURE,
        ("architecture", "interior", "room", "building", "structure", "facade", "skyscraper"),
    ),
    (
        SceneCategory.LANDSCAPE,
        ("landscape", "cityscape", "panorama", "vista", "scenery", "mountain", "ocean",
         "sunset", "sunrise"),
    ),
    (
        SceneCategory.ACTION,
        ("action", "dynamic", "motion", "running", "flying", "jump", "explosion", "sport",
         "dance"),
    ),
    (
        SceneCategory.FOOD,
        ("food", "dish", "cuisine", "meal", "dessert", "coffee", "drink", "restaurant",
         "plating"),
    ),
    (
        SceneCategory.ANIMAL,
        ("animal", "wildlife", "bird", "lion", "tiger", "cat", "dog", "horse", "pet"),
    ),
    (
        SceneCategory.RENDER_3D,
        ("3d", "render", "cg", "blender", "game asset", "voxel", "low poly", "isometric",
         "octane", "unreal"),
    ),
)

SCENE_PROFILES: dict[SceneCategory, SceneProfile] = {
    SceneCategory.MACRO: SceneProfile(
        lens="100mm Macro, f/2.8 aperture",
        lighting="Soft diffused lighting, light tent",
        style="professional product photography, luxurious detail",
    ),
    SceneCategory.PORTRAIT: SceneProfile(
        lens="85mm, f/1.8 aperture",
        lighting="Softbox Lighting, Rembrandt Lighting, creamy bokeh",
        style="professional fashion photography, editorial style",
    ),
    SceneCategory.FULL_BODY: SceneProfile(
        lens="35mm, f/2.8 aperture",
        lighting="Natural Lighting, Golden Hour, environmental context",
        style="high-end fashion editorial, clean composition",
    ),
    SceneCategory.ARCHITECTURE: SceneProfile(
        lens="24mm Tilt-Shift, f/8 aperture",
        lighting="Blue Hour, Natural Lighting, balanced exposure",
        style="architectural photography, clean geometric lines",
    ),
    SceneCategory.LANDSCAPE: SceneProfile(
        lens="14mm Ultra Wide, f/11 aperture",
        lighting="Magic Hour, Dramatic Clouds, HDR",
        style="national geographic style, epic cinematic",
    ),
    SceneCategory.ACTION: SceneProfile(
        lens="70-200mm, f/2.8 aperture",
        lighting="High Speed Flash, Rim Light, frozen motion",
        style="sports photography, dynamic energy",
    ),
    SceneCategory.FOOD: SceneProfile(
        lens="50mm, f/2.8 aperture",
        lighting="Side Lighting, Natural Daylight from Window",
        style="professional food photography, appetizing",
    ),
    SceneCategory.ANIMAL: SceneProfile(
        lens="200mm, f/4 aperture",
        lighting="Natural Lighting, soft fill",
        style="wildlife photography, intimate moment",
    ),
    SceneCategory.RENDER_3D: SceneProfile(
        lens="50mm, f/8 aperture",
        lighting="Studio HDRI, Three-point Lighting",
        style="3D visualization, digital art",
    ),
    SceneCategory.DEFAULT: SceneProfile(
        lens="50mm, f/2.8 aperture",
        lighting="Cinematic Lighting, balanced",
        style="professional photography",
    ),
}

SCENE_QUALITY_SUFFIX: dict[SceneCategory, str] = {
    SceneCategory.MACRO: PHOTO_SUFFIX,
    SceneCategory.PORTRAIT: PHOTO_SUFFIX,
    SceneCategory.FULL_BODY: PHOTO_SUFFIX,
    SceneCategory.ARCHITECTURE: INTERIOR_SUFFIX,
    SceneCategory.LANDSCAPE: PHOTO_SUFFIX,
    SceneCategory.ACTION: PHOTO_SUFFIX,
    SceneCategory.FOOD: PHOTO_SUFFIX,
    SceneCategory.ANIMAL: PHOTO_SUFFIX,
    SceneCategory.RENDER_3D: RENDER_3D_SUFFIX,
    SceneCategory.DEFAULT: PHOTO_SUFFIX,
}

# Camera jargon that would clash with the injected lens phrase
CONFLICT_WORDS: tuple[str, ...] = ("lens", "aperture", "mm,", "f/", "shot on")

# Each pattern removes a whole comma-delimited segment containing the word.
# Not anchored to word boundaries: "mm," or "f/" anywhere in a segment removes it.
_CONFLICT_PATTERNS = tuple(
    re.compile(rf"[^,]*{re.escape(word)}[^,]*,?", re.IGNORECASE) for word in CONFLICT_WORDS
)
_REPEATED_COMMAS = re.compile(r",(?:\s*,)+")
_EDGE_COMMAS = re.compile(r"^[\s,]+|[\s,]+$")
_REPEATED_PERIODS = re.compile(r"\.\.+")

# Hosted model variant -> composer mode
ENGINE_MODES: dict[str, EngineMode] = {
    "flash": EngineMode.FAST,
    "pro": EngineMode.FULL,
    "imagen": EngineMode.FULL,
}


# ============ Operations ============


def _require_str(value: object, name: str) -> str:
    if not isinstance(value, str):
        raise TypeError(f"{name} must be a string, got {type(value).__name__}")
    return value


def classify_scene(prompt: str) -> SceneCategory:
    """Return the first scene category whose keywords occur in the prompt."""
    prompt_lower = _require_str(prompt, "prompt").lower()

    for category, keywords in SCENE_KEYWORDS:
        if any(keyword in prompt_lower for keyword in keywords):
            return category

    return SceneCategory.DEFAULT


def strip_conflicts(prompt: str) -> str:
    """
    Remove comma segments that already carry camera/lens jargon.

    Afterwards repeated commas are collapsed and leading/trailing commas
    and whitespace trimmed. Running it on its own output changes nothing.
    """
    cleaned = _require_str(prompt, "prompt")

    for pattern in _CONFLICT_PATTERNS:
        cleaned = pattern.sub("", cleaned)

    cleaned = _REPEATED_COMMAS.sub(",", cleaned)
    return _EDGE_COMMAS.sub("", cleaned)


def get_profile(scene: SceneCategory | str) -> SceneProfile:
    """Look up a scene profile, falling back to the default one."""
    try:
        return SCENE_PROFILES[SceneCategory(scene)]
    except ValueError:
        return SCENE_PROFILES[SceneCategory.DEFAULT]


def get_quality_suffix(scene: SceneCategory | str) -> str:
    """Look up the scene-specific quality suffix, falling back to the default one."""
    try:
        return SCENE_QUALITY_SUFFIX[SceneCategory(scene)]
    except ValueError:
        return SCENE_QUALITY_SUFFIX[SceneCategory.DEFAULT]


def engine_mode_for(engine: str) -> EngineMode:
    """Map a hosted model variant (flash, pro, imagen) to a composer mode."""
    return ENGINE_MODES.get(engine.lower(), EngineMode.FULL)


def _finalize(parts: list[str]) -> str:
    final_prompt = ", ".join(part for part in parts if part).strip()

    final_prompt = final_prompt.replace(", ,", ",")
    final_prompt = _REPEATED_PERIODS.sub(".", final_prompt)
    final_prompt = final_prompt.replace(". ,", ".,").strip()

    if not final_prompt.endswith("."):
        final_prompt += "."
    return final_prompt


def compose_parts(
    cleaned_prompt: str,
    scene: SceneCategory | str,
    engine_mode: EngineMode | str,
) -> str:
    """
    Assemble the final prompt from an already-cleaned prompt and a scene.

    The fast mode only adds the style phrase and base quality suffix; the
    full mode adds the reasoning prefix, lens, lighting and the
    scene-specific suffix as well.
    """
    profile = get_profile(scene)

    if EngineMode(engine_mode) == EngineMode.FAST:
        parts = [cleaned_prompt, profile.style, QUALITY_SUFFIX_BASE]
    else:
        parts = [
            REASONING_PREFIX,
            cleaned_prompt,
            profile.lens,
            profile.lighting,
            profile.style,
            QUALITY_SUFFIX_BASE,
            get_quality_suffix(scene),
        ]

    return _finalize(parts)


def analyze(prompt: str, engine_mode: EngineMode | str = EngineMode.FULL) -> FilterResult:
    """Classify, strip and compose, keeping every intermediate value."""
    mode = EngineMode(engine_mode)
    scene = classify_scene(prompt)
    cleaned = strip_conflicts(prompt)

    return FilterResult(
        original=prompt,
        scene=scene,
        cleaned=cleaned,
        profile=get_profile(scene),
        engine_mode=mode,
        composed=compose_parts(cleaned, scene, mode),
    )


def compose(prompt: str, engine_mode: EngineMode | str = EngineMode.FULL) -> str:
    """Turn a raw user prompt into the final prompt sent to the image model."""
    return analyze(prompt, engine_mode).composed
