"""
RecipeBox Backend: Recipe SQLAlchemy Model
============================================

What:  ORM model representing the `recipes` table.
Who:   RecipeService for CRUD, seed.py for sample data, Alembic migration 001.

Table Design:
    - ingredients / instructions: free-text blobs (TEXT, no length limit)
    - prep_time / cook_time: minutes; servings: head count. Positive
      integers, enforced at the API boundary.
    - difficulty: conventionally easy | medium | hard, stored as plain text
      and not constrained by the store
    - favorite: boolean flag, default false
    - user_id: owner, taken from the authenticated identity at creation and
      never changed afterwards. ON DELETE CASCADE.
    - category_id: ON DELETE RESTRICT

Query Patterns:
    - List/search: recipes JOIN users JOIN categories, ordered by id
    - Filters: difficulty = :value, favorite = :flag
"""

from datetime import datetime, timezone
from typing import TYPE_CHECKING

from sqlalchemy import Boolean, ForeignKey, Index, Integer, String, Text, false
from sqlalchemy.orm import Mapped, mapped_column, relationship

from recipebox.database import Base, UTCDateTime

if TYPE_CHECKING:
    from recipebox.models.category import Category
    from recipebox.models.user import User


class Recipe(Base):
    """
    A recipe owned by one user and filed under one category.

    Lifecycle:
        1. Created by an authenticated user (POST /api/recipes)
        2. Partially updated by its owner (PUT), favorite flipped by anyone (PATCH)
        3. Deleted by its owner (DELETE); removal is permanent
    """

    __tablename__ = "recipes"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    title: Mapped[str] = mapped_column(String(255), nullable=False)

    ingredients: Mapped[str] = mapped_column(Text, nullable=False)

    instructions: Mapped[str] = mapped_column(Text, nullable=False)

    prep_time: Mapped[int] = mapped_column(Integer, nullable=False, comment="Minutes")

    cook_time: Mapped[int] = mapped_column(Integer, nullable=False, comment="Minutes")

    servings: Mapped[int] = mapped_column(Integer, nullable=False)

    difficulty: Mapped[str] = mapped_column(
        String(50),
        nullable=False,
        comment="easy, medium or hard (not enforced by the store)",
    )

    favorite: Mapped[bool] = mapped_column(
        Boolean,
        nullable=False,
        default=False,
        server_default=false(),
    )

    user_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
    )

    category_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("categories.id", ondelete="RESTRICT"),
        nullable=False,
    )

    created_at: Mapped[datetime] = mapped_column(
        UTCDateTime(),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )

    user: Mapped["User"] = relationship(back_populates="recipes")
    category: Mapped["Category"] = relationship(back_populates="recipes")

    __table_args__ = (
        Index("idx_recipes_user_id", "user_id"),
        Index("idx_recipes_category_id", "category_id"),
    )

    def __repr__(self) -> str:
        return (
            f"<Recipe(id={self.id}, title='{self.title}', "
            f"user_id={self.user_id}, favorite={self.favorite})>"
        )
