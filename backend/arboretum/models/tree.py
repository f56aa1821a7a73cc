"""Database model for catalog tree entries."""
from __future__ import annotations

from datetime import datetime

from sqlalchemy import DateTime, ForeignKey, JSON, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from arboretum.db.base import Base, utcnow
from arboretum.models.user import User


class Tree(Base):
    """Catalog entry owned by the user who submitted it."""

    __tablename__ = "trees"

    id: Mapped[int] = mapped_column(primary_key=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    scientific_name: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False)
    habitat: Mapped[str] = mapped_column(Text, nullable=False)
    image: Mapped[str] = mapped_column(Text, nullable=False)  # URL or data: URI
    facts: Mapped[dict[str, str]] = mapped_column(JSON, default=dict, nullable=False)
    # NULL once the owning user is deleted; the tree itself is kept.
    created_by: Mapped[int | None] = mapped_column(
        ForeignKey("users.id", ondelete="SET NULL"), nullable=True, index=True
    )
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow, index=True)

    creator: Mapped[User | None] = relationship("User", lazy="raise")

    @property
    def creator_name(self) -> str | None:
        return self.creator.username if self.creator is not None else None
