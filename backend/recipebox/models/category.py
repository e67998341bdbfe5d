"""
RecipeBox Backend: Category SQLAlchemy Model
==============================================

What:  ORM model for the `categories` table.
Who:   seed.py (the only writer), RecipeService (existence checks, joins).

A category cannot be deleted while any recipe references it
(ON DELETE RESTRICT on recipes.category_id).
"""

from datetime import datetime, timezone
from typing import TYPE_CHECKING, List, Optional

from sqlalchemy import Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from recipebox.database import Base, UTCDateTime

if TYPE_CHECKING:
    from recipebox.models.recipe import Recipe


class Category(Base):
    __tablename__ = "categories"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    name: Mapped[str] = mapped_column(String(100), nullable=False, unique=True)

    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    created_at: Mapped[datetime] = mapped_column(
        UTCDateTime(),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )

    # passive_deletes="all": the ORM never touches child rows, so deleting a
    # referenced category reaches the database and fails on RESTRICT
    recipes: Mapped[List["Recipe"]] = relationship(
        back_populates="category",
        passive_deletes="all",
    )

    def __repr__(self) -> str:
        return f"<Category(id={self.id}, name='{self.name}')>"
