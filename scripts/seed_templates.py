"""Seed script: Insert the built-in style templates into the database.

Usage:
    python scripts/seed_templates.py            # Insert templates if the table is empty
    python scripts/seed_templates.py --force    # Clear stored templates, then insert
"""

import argparse
import asyncio
import logging
import sys
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from database import close_database, get_session, init_database  # noqa: E402
from database.repositories import TemplateRepository  # noqa: E402
from services.prompt_templates import BUILTIN_TEMPLATES  # noqa: E402

logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(message)s")
logger = logging.getLogger(__name__)


async def seed_templates(repo: TemplateRepository, *, force: bool = False) -> int:
    """Insert built-in templates. Returns the number inserted."""
    if force:
        cleared = await repo.delete_all()
        if cleared:
            logger.info(f"Force: cleared {cleared} existing templates")
    elif await repo.count() > 0:
        logger.info("Templates already present, nothing to do (use --force to replace)")
        return 0

    for sort_order, template in enumerate(BUILTIN_TEMPLATES):
        await repo.create(
            category=str(template.category),
            name=template.name,
            prompt=template.prompt,
            description=template.description,
            sort_order=sort_order,
        )
    return len(BUILTIN_TEMPLATES)


async def main(args) -> None:
    await init_database()

    try:
        async for session in get_session():
            inserted = await seed_templates(TemplateRepository(session), force=args.force)
            print(f"Seeded {inserted} prompt templates.")
    finally:
        await close_database()


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Seed built-in prompt templates")
    parser.add_argument(
        "--force",
        action="store_true",
        help="Clear ALL stored templates before seeding",
    )
    args = parser.parse_args()

    asyncio.run(main(args))
