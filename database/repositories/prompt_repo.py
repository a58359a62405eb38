"""
Prompt repository for gallery entry CRUD and search.
"""

from datetime import datetime
from uuid import UUID

from sqlalchemy import delete, desc, func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from database.models import PromptEntry, collection_prompts


class PromptRepository:
    """Repository for PromptEntry model operations."""

    def __init__(self, session: AsyncSession):
        self.session = session

    # ============ Lookups ============

    async def get_by_id(self, prompt_id: UUID) -> PromptEntry | None:
        """Get entry by ID."""
        result = await self.session.execute(
            select(PromptEntry).where(PromptEntry.id == prompt_id)
        )
        return result.scalar_one_or_none()

    async def get_many(self, prompt_ids: list[UUID]) -> list[PromptEntry]:
        """Get entries by ID, in the order given. Unknown IDs are skipped."""
        if not prompt_ids:
            return []
        result = await self.session.execute(
            select(PromptEntry).where(PromptEntry.id.in_(prompt_ids))
        )
        by_id = {entry.id: entry for entry in result.scalars().all()}
        return [by_id[pid] for pid in prompt_ids if pid in by_id]

    # ============ Listing & Search ============

    def _filtered(self, query, search: str | None, favorites_only: bool):
        if search:
            pattern = f"%{search}%"
            query = query.where(
                or_(
                    PromptEntry.prompt.ilike(pattern),
                    PromptEntry.prompt_zh.ilike(pattern),
                    PromptEntry.tags.ilike(pattern),
                    PromptEntry.original_prompt.ilike(pattern),
                )
            )
        if favorites_only:
            query = query.where(PromptEntry.is_favorite.is_(True))
        return query

    async def list_entries(
        self,
        search: str | None = None,
        favorites_only: bool = False,
        limit: int = 20,
        offset: int = 0,
    ) -> list[PromptEntry]:
        """List entries, newest first, with optional keyword search."""
        query = self._filtered(select(PromptEntry), search, favorites_only)
        query = query.order_by(desc(PromptEntry.created_at)).limit(limit).offset(offset)

        result = await self.session.execute(query)
        return list(result.scalars().all())

    async def count(self, search: str | None = None, favorites_only: bool = False) -> int:
        """Count entries matching the same filters as list_entries()."""
        query = self._filtered(
            select(func.count()).select_from(PromptEntry), search, favorites_only
        )
        result = await self.session.execute(query)
        return result.scalar() or 0

    async def list_with_embeddings(self, favorites_only: bool = False) -> list[PromptEntry]:
        """Entries that carry an embedding vector."""
        query = select(PromptEntry).where(PromptEntry.embedding.is_not(None))
        if favorites_only:
            query = query.where(PromptEntry.is_favorite.is_(True))
        result = await self.session.execute(query)
        return list(result.scalars().all())

    async def list_all(self) -> list[PromptEntry]:
        """Every entry, newest first."""
        result = await self.session.execute(
            select(PromptEntry).order_by(desc(PromptEntry.created_at))
        )
        return list(result.scalars().all())

    async def count_since(self, since: datetime) -> int:
        """Number of entries created at or after `since`."""
        result = await self.session.execute(
            select(func.count())
            .select_from(PromptEntry)
            .where(PromptEntry.created_at >= since)
        )
        return result.scalar() or 0

    # ============ Mutations ============

    async def create(
        self,
        prompt: str,
        original_prompt: str | None = None,
        prompt_zh: str | None = None,
        negative_prompt: str | None = None,
        image_url: str | None = None,
        width: int = 1024,
        height: int = 1024,
        sampler: str | None = None,
        seed: int | None = None,
        cfg_scale: float | None = None,
        steps: int | None = None,
        tags: str | None = None,
        is_favorite: bool = False,
        created_at: datetime | None = None,
    ) -> PromptEntry:
        """Create a new entry."""
        entry = PromptEntry(
            prompt=prompt,
            original_prompt=original_prompt,
            prompt_zh=prompt_zh,
            negative_prompt=negative_prompt,
            image_url=image_url,
            width=width,
            height=height,
            sampler=sampler,
            seed=seed,
            cfg_scale=cfg_scale,
            steps=steps,
            tags=tags,
            is_favorite=is_favorite,
        )
        if created_at is not None:
            entry.created_at = created_at
        self.session.add(entry)
        await self.session.flush()
        return entry

    async def update(self, entry: PromptEntry, **fields) -> PromptEntry:
        """Set the given attributes; None values are ignored."""
        for key, value in fields.items():
            if value is not None and hasattr(entry, key):
                setattr(entry, key, value)
        await self.session.flush()
        return entry

    async def set_tags(self, entry: PromptEntry, tags: str) -> PromptEntry:
        entry.tags = tags
        await self.session.flush()
        return entry

    async def set_embedding(self, entry: PromptEntry, embedding: list[float]) -> PromptEntry:
        entry.embedding = embedding
        await self.session.flush()
        return entry

    async def toggle_favorite(self, entry: PromptEntry) -> PromptEntry:
        """Flip the favorite flag."""
        entry.is_favorite = not entry.is_favorite
        await self.session.flush()
        return entry

    async def delete(self, prompt_id: UUID) -> bool:
        """Delete an entry. Returns False if it did not exist."""
        return await self.delete_many([prompt_id]) > 0

    async def delete_many(self, prompt_ids: list[UUID]) -> int:
        """Delete entries and their collection links. Returns rows deleted."""
        if not prompt_ids:
            return 0
        await self.session.execute(
            delete(collection_prompts).where(collection_prompts.c.prompt_id.in_(prompt_ids))
        )
        result = await self.session.execute(
            delete(PromptEntry).where(PromptEntry.id.in_(prompt_ids))
        )
        await self.session.flush()
        return result.rowcount or 0
