"""
Consistency checks between gallery entries and stored image files.
"""

import logging
from collections.abc import Iterable
from dataclasses import dataclass, field

from database.models import PromptEntry
from services.image_storage import ImageStorage

logger = logging.getLogger(__name__)


@dataclass
class MaintenanceReport:
    ghost_entries: list[PromptEntry] = field(default_factory=list)
    orphan_files: list[str] = field(default_factory=list)


def find_ghost_entries(entries: Iterable[PromptEntry], storage: ImageStorage) -> list[PromptEntry]:
    """Entries pointing at a local image file that no longer exists."""
    ghosts = []
    for entry in entries:
        if storage.is_local_url(entry.image_url) and not storage.exists(entry.image_url):
            ghosts.append(entry)
    return ghosts


def find_orphan_files(entries: Iterable[PromptEntry], storage: ImageStorage) -> list[str]:
    """Files in the upload directory that no entry references."""
    referenced = {entry.image_url for entry in entries if entry.image_url}
    return [url for url in storage.list_files() if url not in referenced]


def check_gallery(entries: list[PromptEntry], storage: ImageStorage) -> MaintenanceReport:
    report = MaintenanceReport(
        ghost_entries=find_ghost_entries(entries, storage),
        orphan_files=find_orphan_files(entries, storage),
    )
    logger.info(
        f"Gallery check: {len(entries)} entries, "
        f"{len(report.ghost_entries)} ghost(s), {len(report.orphan_files)} orphan file(s)"
    )
    return report
