"""
RecipeBox Backend: User SQLAlchemy Model
==========================================

What:  ORM model for the `users` table.
Who:   AuthService (signup/login), seed.py, RecipeService joins (author name).

Table Design:
    - username and email are each UNIQUE; signup checks them separately so
      the client gets a specific message for each.
    - password holds a bcrypt hash, never the plaintext, and is never part
      of any response schema.
    - Deleting a user removes their recipes (ON DELETE CASCADE on
      recipes.user_id). No endpoint deletes users; the cascade is enforced
      by the database for out-of-band deletes.
"""

from datetime import datetime, timezone
from typing import TYPE_CHECKING, List

from sqlalchemy import Integer, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from recipebox.database import Base, UTCDateTime

if TYPE_CHECKING:
    from recipebox.models.recipe import Recipe


class User(Base):
    __tablename__ = "users"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    username: Mapped[str] = mapped_column(String(100), nullable=False, unique=True)

    email: Mapped[str] = mapped_column(String(320), nullable=False, unique=True)

    password: Mapped[str] = mapped_column(
        String(128),
        nullable=False,
        comment="bcrypt hash (cost factor 10)",
    )

    created_at: Mapped[datetime] = mapped_column(
        UTCDateTime(),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )

    # passive_deletes: let the database cascade instead of the ORM
    # nulling out recipes.user_id (which is NOT NULL)
    recipes: Mapped[List["Recipe"]] = relationship(
        back_populates="user",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )

    def __repr__(self) -> str:
        return f"<User(id={self.id}, username='{self.username}')>"
