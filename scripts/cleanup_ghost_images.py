"""Maintenance script: reconcile gallery entries with stored image files.

Deletes entries whose local image file is missing and, optionally, turns
unreferenced upload files back into entries.

Usage:
    python scripts/cleanup_ghost_images.py                      # Delete ghost entries
    python scripts/cleanup_ghost_images.py --dry-run            # Report only
    python scripts/cleanup_ghost_images.py --recover-orphans    # Also re-create entries for orphan files
"""

import argparse
import asyncio
import logging
import sys
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from core.exceptions import ValidationError  # noqa: E402
from database import close_database, get_session, init_database  # noqa: E402
from database.repositories import PromptRepository  # noqa: E402
from services.gallery_maintenance import check_gallery  # noqa: E402
from services.image_storage import ImageStorage, inspect_image  # noqa: E402

logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(message)s")
logger = logging.getLogger(__name__)

RECOVERED_PROMPT = "Recovered image"


async def recover_orphans(repo: PromptRepository, storage: ImageStorage, urls: list[str]) -> int:
    recovered = 0
    for url in urls:
        loaded = await storage.load(url)
        if loaded is None:
            continue
        data, _ = loaded
        try:
            width, height, _ = inspect_image(data)
        except ValidationError:
            logger.warning(f"Skipping unreadable file {url}")
            continue
        await repo.create(
            prompt=RECOVERED_PROMPT,
            image_url=url,
            width=width,
            height=height,
            tags="Recovered",
        )
        recovered += 1
    return recovered


async def main(args) -> None:
    await init_database()
    storage = ImageStorage()

    try:
        async for session in get_session():
            repo = PromptRepository(session)
            report = check_gallery(await repo.list_all(), storage)

            for entry in report.ghost_entries:
                print(f"  ghost: {entry.id} -> {entry.image_url}")
            for url in report.orphan_files:
                print(f"  orphan: {url}")

            if args.dry_run:
                print("\nDry run, no changes made.")
                continue

            deleted = await repo.delete_many([e.id for e in report.ghost_entries])
            print(f"\nDeleted {deleted} ghost entries.")

            if args.recover_orphans:
                recovered = await recover_orphans(repo, storage, report.orphan_files)
                print(f"Recovered {recovered} orphan files as entries.")
    finally:
        await close_database()


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Clean up entries whose image file is missing")
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Only report, do not change the database",
    )
    parser.add_argument(
        "--recover-orphans",
        action="store_true",
        help="Create entries for upload files no entry references",
    )
    args = parser.parse_args()

    asyncio.run(main(args))
