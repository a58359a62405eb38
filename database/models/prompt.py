"""
Gallery entry model: one generated or uploaded image and the prompt behind it.
"""

from datetime import datetime
from typing import TYPE_CHECKING

from sqlalchemy import JSON, Boolean, DateTime, Float, Index, Integer, String, Text, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .base import Base, UUIDPrimaryKeyMixin, utc_now

if TYPE_CHECKING:
    from .collection import Collection


class PromptEntry(Base, UUIDPrimaryKeyMixin):
    """
    A saved prompt with its generated image.

    `prompt` is the text sent to the model (usually English), `original_prompt`
    what the user typed and `prompt_zh` the Traditional Chinese display text.
    `tags` is a comma-joined string and may start with "Engine:<name>".
    """

    __tablename__ = "prompt_entries"
    __table_args__ = (
        Index("ix_prompt_entries_created_at", "created_at"),
        Index("ix_prompt_entries_is_favorite", "is_favorite"),
    )

    # Prompt text
    prompt: Mapped[str] = mapped_column(
        Text,
        nullable=False,
    )
    original_prompt: Mapped[str | None] = mapped_column(
        Text,
        nullable=True,
    )
    prompt_zh: Mapped[str | None] = mapped_column(
        Text,
        nullable=True,
    )
    negative_prompt: Mapped[str | None] = mapped_column(
        Text,
        nullable=True,
    )

    # Image
    image_url: Mapped[str | None] = mapped_column(
        String(1000),
        nullable=True,
    )
    width: Mapped[int] = mapped_column(
        Integer,
        default=1024,
        nullable=False,
    )
    height: Mapped[int] = mapped_column(
        Integer,
        default=1024,
        nullable=False,
    )

    # Generation parameters
    sampler: Mapped[str | None] = mapped_column(
        String(50),
        nullable=True,
    )
    seed: Mapped[int | None] = mapped_column(
        Integer,
        nullable=True,
    )
    cfg_scale: Mapped[float | None] = mapped_column(
        Float,
        nullable=True,
    )
    steps: Mapped[int | None] = mapped_column(
        Integer,
        nullable=True,
    )

    # Organisation
    tags: Mapped[str | None] = mapped_column(
        Text,
        nullable=True,
    )
    is_favorite: Mapped[bool] = mapped_column(
        Boolean,
        default=False,
        nullable=False,
    )

    # Semantic search vector
    embedding: Mapped[list[float] | None] = mapped_column(
        JSON,
        nullable=True,
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=utc_now,
        server_default=func.now(),
        nullable=False,
    )

    # Relationships
    collections: Mapped[list["Collection"]] = relationship(
        "Collection",
        secondary="collection_prompts",
        back_populates="prompts",
    )

    @property
    def tag_list(self) -> list[str]:
        """Tags as a list, in stored order."""
        if not self.tags:
            return []
        return [t.strip() for t in self.tags.split(",") if t.strip()]

    def __repr__(self) -> str:
        return f"<PromptEntry(id={self.id}, prompt={self.prompt[:30]!r})>"
