"""
Collection repository for albums of gallery entries.
"""

from uuid import UUID

from sqlalchemy import delete, desc, func, insert, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from database.models import Collection, PromptEntry, collection_prompts


class CollectionRepository:
    """Repository for Collection model operations."""

    def __init__(self, session: AsyncSession):
        self.session = session

    # ============ Collections ============

    async def get_by_id(self, collection_id: UUID) -> Collection | None:
        """Get collection by ID."""
        result = await self.session.execute(
            select(Collection).where(Collection.id == collection_id)
        )
        return result.scalar_one_or_none()

    async def get_by_id_with_prompts(self, collection_id: UUID) -> Collection | None:
        """Get collection by ID with its entries loaded."""
        result = await self.session.execute(
            select(Collection)
            .options(selectinload(Collection.prompts))
            .where(Collection.id == collection_id)
            .execution_options(populate_existing=True)
        )
        return result.scalar_one_or_none()

    async def list_with_counts(self) -> list[tuple[Collection, int]]:
        """All collections, newest first, each with its entry count."""
        item_count = func.count(collection_prompts.c.prompt_id)
        query = (
            select(Collection, item_count)
            .outerjoin(collection_prompts, collection_prompts.c.collection_id == Collection.id)
            .group_by(Collection.id)
            .order_by(desc(Collection.created_at))
        )
        result = await self.session.execute(query)
        return [(row[0], row[1]) for row in result.all()]

    async def create(self, name: str, description: str | None = None) -> Collection:
        """Create a new collection."""
        collection = Collection(name=name, description=description)
        self.session.add(collection)
        await self.session.flush()
        return collection

    async def update(
        self,
        collection: Collection,
        name: str | None = None,
        description: str | None = None,
        cover_image: str | None = None,
    ) -> Collection:
        """Update collection fields; None leaves a field unchanged."""
        if name is not None:
            collection.name = name
        if description is not None:
            collection.description = description
        if cover_image is not None:
            collection.cover_image = cover_image
        await self.session.flush()
        return collection

    async def delete(self, collection_id: UUID) -> bool:
        """Delete a collection. Entries are kept."""
        await self.session.execute(
            delete(collection_prompts).where(collection_prompts.c.collection_id == collection_id)
        )
        result = await self.session.execute(
            delete(Collection).where(Collection.id == collection_id)
        )
        await self.session.flush()
        return (result.rowcount or 0) > 0

    # ============ Items ============

    async def count_items(self, collection_id: UUID) -> int:
        result = await self.session.execute(
            select(func.count())
            .select_from(collection_prompts)
            .where(collection_prompts.c.collection_id == collection_id)
        )
        return result.scalar() or 0

    async def add_items(self, collection: Collection, prompt_ids: list[UUID]) -> int:
        """
        Link entries to a collection, skipping unknown and already linked IDs.

        If the collection has no cover yet, the first requested entry's image
        becomes the cover.

        Returns:
            Number of new links
        """
        existing = await self.session.execute(
            select(collection_prompts.c.prompt_id).where(
                collection_prompts.c.collection_id == collection.id
            )
        )
        linked = set(existing.scalars().all())

        known = await self.session.execute(
            select(PromptEntry.id, PromptEntry.image_url).where(PromptEntry.id.in_(prompt_ids))
        )
        image_urls = {row[0]: row[1] for row in known.all()}

        new_ids = [
            pid for pid in dict.fromkeys(prompt_ids) if pid in image_urls and pid not in linked
        ]
        if new_ids:
            await self.session.execute(
                insert(collection_prompts),
                [{"collection_id": collection.id, "prompt_id": pid} for pid in new_ids],
            )

        if not collection.cover_image and prompt_ids:
            first_url = image_urls.get(prompt_ids[0])
            if first_url:
                collection.cover_image = first_url

        await self.session.flush()
        return len(new_ids)

    async def remove_items(self, collection: Collection, prompt_ids: list[UUID]) -> int:
        """Unlink entries from a collection. Returns links removed."""
        if not prompt_ids:
            return 0
        result = await self.session.execute(
            delete(collection_prompts).where(
                collection_prompts.c.collection_id == collection.id,
                collection_prompts.c.prompt_id.in_(prompt_ids),
            )
        )
        await self.session.flush()
        return result.rowcount or 0
