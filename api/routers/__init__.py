"""
API routers for different endpoints.
"""

from .backup import router as backup_router
from .collections import router as collections_router
from .generate import router as generate_router
from .health import router as health_router
from .prompts import router as prompts_router
from .stats import router as stats_router
from .tags import router as tags_router
from .templates import router as templates_router
from .tools import router as tools_router
from .uploads import router as uploads_router

__all__ = [
    "health_router",
    "generate_router",
    "prompts_router",
    "tags_router",
    "collections_router",
    "templates_router",
    "tools_router",
    "stats_router",
    "backup_router",
    "uploads_router",
]
