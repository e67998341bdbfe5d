"""Create users, categories and recipes tables

Revision ID: 001
Revises: None
Create Date: 2026-10-18 00:00:00.000000+00:00

What:  Creates the three RecipeBox tables with their foreign keys.
How:   Portable column types; runs on SQLite (default) and PostgreSQL.
       created_at has no server default; the ORM stamps it in UTC, as it
       does for tables built by Database.create_schema().

Foreign keys:
    recipes.user_id     → users.id       ON DELETE CASCADE
    recipes.category_id → categories.id  ON DELETE RESTRICT

Rollback: downgrade() drops all three tables (destructive).
"""

from typing import Sequence, Union

import sqlalchemy as sa
from alembic import op

# revision identifiers
revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "users",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("username", sa.String(100), nullable=False),
        sa.Column("email", sa.String(320), nullable=False),
        sa.Column("password", sa.String(128), nullable=False, comment="bcrypt hash (cost factor 10)"),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("username"),
        sa.UniqueConstraint("email"),
    )

    op.create_table(
        "categories",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("name", sa.String(100), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("name"),
    )

    op.create_table(
        "recipes",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("title", sa.String(255), nullable=False),
        sa.Column("ingredients", sa.Text(), nullable=False),
        sa.Column("instructions", sa.Text(), nullable=False),
        sa.Column("prep_time", sa.Integer(), nullable=False, comment="Minutes"),
        sa.Column("cook_time", sa.Integer(), nullable=False, comment="Minutes"),
        sa.Column("servings", sa.Integer(), nullable=False),
        sa.Column("difficulty", sa.String(50), nullable=False),
        sa.Column("favorite", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("user_id", sa.Integer(), nullable=False),
        sa.Column("category_id", sa.Integer(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["category_id"], ["categories.id"], ondelete="RESTRICT"),
        sa.PrimaryKeyConstraint("id"),
    )

    # Both foreign keys are join columns on every recipe read
    op.create_index("idx_recipes_user_id", "recipes", ["user_id"])
    op.create_index("idx_recipes_category_id", "recipes", ["category_id"])


def downgrade() -> None:
    op.drop_index("idx_recipes_category_id", table_name="recipes")
    op.drop_index("idx_recipes_user_id", table_name="recipes")
    op.drop_table("recipes")
    op.drop_table("categories")
    op.drop_table("users")
