"""
Template repository for stored prompt templates.
"""

from sqlalchemy import delete, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from database.models import PromptTemplate


class TemplateRepository:
    """Repository for PromptTemplate model operations."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def list_templates(self, category: str | None = None) -> list[PromptTemplate]:
        """Templates ordered by category, then sort order."""
        query = select(PromptTemplate)
        if category:
            query = query.where(PromptTemplate.category == category)
        query = query.order_by(
            PromptTemplate.category, PromptTemplate.sort_order, PromptTemplate.name
        )
        result = await self.session.execute(query)
        return list(result.scalars().all())

    async def list_categories(self) -> list[str]:
        """Distinct categories, alphabetical."""
        result = await self.session.execute(
            select(PromptTemplate.category).distinct().order_by(PromptTemplate.category)
        )
        return [row[0] for row in result]

    async def count(self) -> int:
        result = await self.session.execute(select(func.count()).select_from(PromptTemplate))
        return result.scalar() or 0

    async def create(
        self,
        category: str,
        name: str,
        prompt: str,
        description: str | None = None,
        sort_order: int = 0,
    ) -> PromptTemplate:
        """Create a new template."""
        template = PromptTemplate(
            category=category,
            name=name,
            prompt=prompt,
            description=description,
            sort_order=sort_order,
        )
        self.session.add(template)
        await self.session.flush()
        return template

    async def delete_all(self) -> int:
        """Remove every stored template. Returns rows deleted."""
        result = await self.session.execute(delete(PromptTemplate))
        await self.session.flush()
        return result.rowcount or 0
