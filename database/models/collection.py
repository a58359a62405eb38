"""
Collections group gallery entries, many-to-many.
"""

from typing import TYPE_CHECKING

from sqlalchemy import Column, ForeignKey, String, Table, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .base import Base, TimestampMixin, UUIDPrimaryKeyMixin

if TYPE_CHECKING:
    from .prompt import PromptEntry


collection_prompts = Table(
    "collection_prompts",
    Base.metadata,
    Column(
        "collection_id",
        Uuid,
        ForeignKey("collections.id", ondelete="CASCADE"),
        primary_key=True,
    ),
    Column(
        "prompt_id",
        Uuid,
        ForeignKey("prompt_entries.id", ondelete="CASCADE"),
        primary_key=True,
    ),
)


class Collection(Base, UUIDPrimaryKeyMixin, TimestampMixin):
    """A named album of gallery entries."""

    __tablename__ = "collections"

    name: Mapped[str] = mapped_column(
        String(200),
        nullable=False,
    )
    description: Mapped[str | None] = mapped_column(
        Text,
        nullable=True,
    )
    cover_image: Mapped[str | None] = mapped_column(
        String(1000),
        nullable=True,
    )

    prompts: Mapped[list["PromptEntry"]] = relationship(
        "PromptEntry",
        secondary=collection_prompts,
        back_populates="collections",
        order_by="desc(PromptEntry.created_at)",
    )

    def __repr__(self) -> str:
        return f"<Collection(id={self.id}, name={self.name})>"
