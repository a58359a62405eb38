"""
Tag repository for global tag counts.
"""

from sqlalchemy import desc, select
from sqlalchemy.ext.asyncio import AsyncSession

from database.models import Tag
from database.models.base import utc_now


class TagRepository:
    """Repository for Tag model operations."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_by_name(self, name: str) -> Tag | None:
        result = await self.session.execute(select(Tag).where(Tag.name == name))
        return result.scalar_one_or_none()

    async def list_top(self, limit: int = 100) -> list[Tag]:
        """Most used tags first."""
        result = await self.session.execute(
            select(Tag).order_by(desc(Tag.count), Tag.name).limit(limit)
        )
        return list(result.scalars().all())

    async def increment(self, names: list[str]) -> list[Tag]:
        """Bump the count of each tag, creating missing ones with count 1."""
        tags = []
        for name in dict.fromkeys(n.strip() for n in names if n.strip()):
            tag = await self.get_by_name(name)
            if tag is None:
                tag = Tag(name=name, count=1)
                self.session.add(tag)
            else:
                tag.count += 1
                tag.last_used_at = utc_now()
            tags.append(tag)

        await self.session.flush()
        return tags
