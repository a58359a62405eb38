"""
Built-in style templates.

Served by /api/templates when the database has none, and inserted by
scripts/seed_templates.py. "[subject]" marks the placeholder the user fills in.
"""

from dataclasses import asdict, dataclass
from enum import StrEnum


class TemplateCategory(StrEnum):
    COMMERCIAL = "Commercial"
    ART_3D = "3D Art"
    PHOTOGRAPHY = "Photography"
    ILLUSTRATION = "Illustration"
    FINE_ART = "Fine Art"
    TEXTURE_FX = "Texture & FX"


TEMPLATE_CATEGORIES: list[TemplateCategory] = list(TemplateCategory)

PLACEHOLDER = "[subject]"


@dataclass(frozen=True)
class BuiltinTemplate:
    category: TemplateCategory
    name: str
    prompt: str
    description: str

    def render(self, subject: str) -> str:
        """Fill the subject placeholder."""
        return self.prompt.replace(PLACEHOLDER, subject)

    def to_dict(self) -> dict:
        data = asdict(self)
        data["category"] = str(self.category)
        return data


BUILTIN_TEMPLATES: list[BuiltinTemplate] = [
    # ━━━━━━━━━━━━━━━━ Commercial ━━━━━━━━━━━━━━━━
    BuiltinTemplate(
        TemplateCategory.COMMERCIAL,
        "Logo Design",
        "Minimalist vector logo of [subject], flat design, simple geometric shapes, "
        "white background, professional corporate identity.",
        "Clean vector brand mark",
    ),
    BuiltinTemplate(
        TemplateCategory.COMMERCIAL,
        "App Icon",
        "Modern mobile app icon of [subject], rounded corners, gradient background, "
        "minimalist vector, ios style, high quality.",
        "Mobile app icon",
    ),
    BuiltinTemplate(
        TemplateCategory.COMMERCIAL,
        "Die-cut Sticker",
        "Die-cut sticker design of [subject], white border, vector art, vibrant colors, "
        "flat shading, simple background.",
        "Messenger-style sticker",
    ),
    BuiltinTemplate(
        TemplateCategory.COMMERCIAL,
        "Product Shot",
        "A professional product photography of [subject], studio lighting, solid neutral "
        "background, 8k resolution, ultra sharp focus, commercial quality.",
        "Catalog product photo on a clean background",
    ),
    BuiltinTemplate(
        TemplateCategory.COMMERCIAL,
        "Knolling",
        "Knolling photography of [subject] parts, organized neatly at 90 degree angles, "
        "flat lay, overhead view, clean background.",
        "Parts laid out at right angles",
    ),
    BuiltinTemplate(
        TemplateCategory.COMMERCIAL,
        "Exploded View",
        "Photorealistic exploded view of [subject], showing all real components and parts "
        "floating separately in 3D space against a clean white studio background. "
        "Professional product photography style, studio lighting, each part clearly visible "
        "with realistic materials and textures.",
        "Realistic exploded view of any object",
    ),
    # ━━━━━━━━━━━━━━━━ 3D Art ━━━━━━━━━━━━━━━━
    BuiltinTemplate(
        TemplateCategory.ART_3D,
        "Blind Box Toy",
        "Cute 3D blind box toy of [subject], chibi style, soft smooth lighting, pastel colors, "
        "isometric view, plastic material, octane render.",
        "Chibi collectible figure",
    ),
    BuiltinTemplate(
        TemplateCategory.ART_3D,
        "3D Render",
        "High quality 3D render of [subject], unreal engine 5, ray tracing, realistic textures, "
        "cinematic lighting, 8k.",
        "Photoreal 3D render",
    ),
    BuiltinTemplate(
        TemplateCategory.ART_3D,
        "Isometric Miniature",
        "Cute isometric 3D render of [subject], low poly style, soft pastel colors, blender 3d, "
        "orthographic view, minimal background.",
        "Cute isometric diorama",
    ),
    BuiltinTemplate(
        TemplateCategory.ART_3D,
        "Voxel Art",
        "Voxel art of [subject], 3d pixel style, minecraft aesthetic, blocky, vibrant colors, "
        "isometric view.",
        "Blocky voxel style",
    ),
    BuiltinTemplate(
        TemplateCategory.ART_3D,
        "Character Sheet",
        "Character design reference sheet of [subject], showing front view, side view, and back "
        "view, T-pose, full body, neutral expression, consistent design across all views, white "
        "background, clean linework, professional concept art.",
        "Consistent character turnaround",
    ),
    # ━━━━━━━━━━━━━━━━ Photography ━━━━━━━━━━━━━━━━
    BuiltinTemplate(
        TemplateCategory.PHOTOGRAPHY,
        "Editorial Portrait",
        "High-end editorial portrait of [subject], shot on 85mm lens, f/1.8 aperture, soft "
        "cinematic lighting, detailed skin texture, bokeh background.",
        "Professional portrait",
    ),
    BuiltinTemplate(
        TemplateCategory.PHOTOGRAPHY,
        "Architecture",
        "Modern minimalist architecture of [subject], concrete and glass materials, natural "
        "lighting, blue hour, wide angle shot, architectural digest style.",
        "Modern architecture feature",
    ),
    BuiltinTemplate(
        TemplateCategory.PHOTOGRAPHY,
        "Food Photography",
        "Mouth-watering food photography of [subject], macro shot, steam rising, professional "
        "plating, shallow depth of field, 4k.",
        "Appetizing close-up",
    ),
    BuiltinTemplate(
        TemplateCategory.PHOTOGRAPHY,
        "Aerial View",
        "Aerial drone shot of [subject], bird's eye view, high altitude, vast landscape, epic "
        "scale, geometric composition.",
        "Top-down drone perspective",
    ),
    BuiltinTemplate(
        TemplateCategory.PHOTOGRAPHY,
        "Film Noir",
        "Black and white film noir photography of [subject], high contrast, dramatic shadows, "
        "venetian blind shadows, 1940s mystery atmosphere.",
        "Moody noir still",
    ),
    # ━━━━━━━━━━━━━━━━ Illustration ━━━━━━━━━━━━━━━━
    BuiltinTemplate(
        TemplateCategory.ILLUSTRATION,
        "Anime Character",
        "High quality anime character illustration of [subject], vibrant colors, highly "
        "detailed background, beautiful lighting, emotive expression.",
        "Anime key visual",
    ),
    BuiltinTemplate(
        TemplateCategory.ILLUSTRATION,
        "Cyberpunk",
        "Futuristic cyberpunk city street with [subject], neon lights, rain, reflections, high "
        "tech, dystopian atmosphere, cinematic.",
        "Neon sci-fi street",
    ),
    BuiltinTemplate(
        TemplateCategory.ILLUSTRATION,
        "Storybook",
        "Whimsical children's book illustration of [subject], watercolor style, soft pastel "
        "colors, cute characters, magical atmosphere.",
        "Warm picture-book art",
    ),
    BuiltinTemplate(
        TemplateCategory.ILLUSTRATION,
        "Pixel Art",
        "Pixel art of [subject], 16-bit retro game style, detailed sprites, vibrant colors, "
        "nostalgic aesthetic.",
        "Retro game sprite",
    ),
    # ━━━━━━━━━━━━━━━━ Fine Art ━━━━━━━━━━━━━━━━
    BuiltinTemplate(
        TemplateCategory.FINE_ART,
        "Impressionism",
        "Oil painting of [subject] in Claude Monet style, impressionism, visible brush strokes, "
        "dappled light, vibrant colors, plein air.",
        "Monet-style oil painting",
    ),
    BuiltinTemplate(
        TemplateCategory.FINE_ART,
        "Ink Wash",
        "Traditional Chinese ink wash painting of [subject], sumi-e style, black and white, "
        "negative space, artistic brush strokes.",
        "Sumi-e brush painting",
    ),
    BuiltinTemplate(
        TemplateCategory.FINE_ART,
        "Ukiyo-e",
        "Traditional Japanese ukiyo-e woodblock print of [subject], flat perspective, textured "
        "paper, outlined.",
        "Woodblock print",
    ),
    BuiltinTemplate(
        TemplateCategory.FINE_ART,
        "Marble Statue",
        "Classical marble statue of [subject], greek sculpture style, smooth stone texture, "
        "museum lighting, elegant pose.",
        "Classical sculpture",
    ),
    # ━━━━━━━━━━━━━━━━ Texture & FX ━━━━━━━━━━━━━━━━
    BuiltinTemplate(
        TemplateCategory.TEXTURE_FX,
        "Seamless Pattern",
        "Seamless pattern design featuring [subject], repeating motif, fabric print style, "
        "vector illustration, flat colors.",
        "Repeating fabric print",
    ),
    BuiltinTemplate(
        TemplateCategory.TEXTURE_FX,
        "Double Exposure",
        "Double exposure art of [subject], silhouette blended with nature landscape, artistic, "
        "dreamy, high contrast, surreal.",
        "Silhouette blended with landscape",
    ),
]


def get_builtin_templates(category: str | None = None) -> list[BuiltinTemplate]:
    """Built-in templates, optionally restricted to one category."""
    if category is None:
        return list(BUILTIN_TEMPLATES)
    return [t for t in BUILTIN_TEMPLATES if t.category == category]
