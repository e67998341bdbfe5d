"""
RecipeBox Backend: Persistence Schema Tests
=============================================

What we test:
    ✅ Deleting a user cascades to their recipes
    ✅ A category referenced by a recipe cannot be deleted
    ✅ Seeding is idempotent and completes partially seeded databases
    ✅ Seeded passwords are stored as bcrypt hashes
    ✅ Timestamps are stored and read back as UTC
    ✅ Migration 001 builds the same columns as the models
"""

import importlib.util
from datetime import datetime, timedelta, timezone
from pathlib import Path

import pytest
import sqlalchemy as sa
from alembic.migration import MigrationContext
from alembic.operations import Operations
from sqlalchemy import delete, func, select
from sqlalchemy.exc import IntegrityError

from recipebox.database import Base, UTCDateTime
from recipebox.models import Category, Recipe, User
from recipebox.seed import seed_database
from recipebox.services.credential_service import CredentialService


async def _count(database, model) -> int:
    async with database.session_factory() as session:
        result = await session.execute(select(func.count()).select_from(model))
        return result.scalar()


class TestForeignKeys:
    @pytest.mark.asyncio
    async def test_user_delete_cascades_to_recipes(self, test_app):
        database = test_app.state.database
        async with database.session_factory() as session:
            async with session.begin():
                await session.execute(delete(User).where(User.username == "john_chef"))

        async with database.session_factory() as session:
            titles = (await session.execute(select(Recipe.title))).scalars().all()
        assert titles == ["Beans"]

    @pytest.mark.asyncio
    async def test_referenced_category_delete_restricted(self, test_app):
        database = test_app.state.database
        with pytest.raises(IntegrityError):
            async with database.session_factory() as session:
                async with session.begin():
                    await session.execute(delete(Category).where(Category.name == "Dinner"))

        assert await _count(database, Category) == 5
        assert await _count(database, Recipe) == 3

    @pytest.mark.asyncio
    async def test_unreferenced_category_delete_allowed(self, test_app):
        database = test_app.state.database
        async with database.session_factory() as session:
            async with session.begin():
                await session.execute(delete(Category).where(Category.name == "Snacks"))

        assert await _count(database, Category) == 4


class TestSeeding:
    @pytest.mark.asyncio
    async def test_seed_is_idempotent(self, test_app):
        database = test_app.state.database

        counts = await seed_database(database, CredentialService(rounds=4))

        assert counts == {"users": 0, "categories": 0, "recipes": 0}
        assert await _count(database, User) == 3
        assert await _count(database, Category) == 5
        assert await _count(database, Recipe) == 3

    @pytest.mark.asyncio
    async def test_empty_table_is_reseeded(self, test_app):
        database = test_app.state.database
        async with database.session_factory() as session:
            async with session.begin():
                await session.execute(delete(Recipe))

        counts = await seed_database(database, CredentialService(rounds=4))

        assert counts == {"users": 0, "categories": 0, "recipes": 3}

    @pytest.mark.asyncio
    async def test_passwords_are_hashed(self, test_app):
        async with test_app.state.database.session_factory() as session:
            passwords = (await session.execute(select(User.password))).scalars().all()

        assert len(passwords) == 3
        assert all(p.startswith("$2b$10$") for p in passwords)
        assert "password123" not in passwords


class TestUTCDateTime:
    def setup_method(self):
        self.column_type = UTCDateTime()

    def test_naive_value_read_back_as_utc(self):
        loaded = self.column_type.process_result_value(datetime(2026, 1, 2, 3, 4, 5), None)
        assert loaded == datetime(2026, 1, 2, 3, 4, 5, tzinfo=timezone.utc)
        assert loaded.utcoffset() == timedelta(0)

    def test_offset_value_normalized_on_write(self):
        local = datetime(2026, 1, 2, 5, 0, tzinfo=timezone(timedelta(hours=2)))
        stored = self.column_type.process_bind_param(local, None)
        assert stored == datetime(2026, 1, 2, 3, 0, tzinfo=timezone.utc)
        assert stored.tzinfo is timezone.utc

    def test_none_passes_through(self):
        assert self.column_type.process_bind_param(None, None) is None
        assert self.column_type.process_result_value(None, None) is None

    @pytest.mark.asyncio
    async def test_stored_rows_are_aware(self, test_app):
        async with test_app.state.database.session_factory() as session:
            stamps = (await session.execute(select(Recipe.created_at))).scalars().all()

        assert stamps
        assert all(s.utcoffset() == timedelta(0) for s in stamps)


def _load_initial_migration():
    path = Path(__file__).resolve().parents[1] / "alembic" / "versions" / "001_create_recipe_tables.py"
    spec = importlib.util.spec_from_file_location("migration_001", path)
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)
    return module


class TestInitialMigration:
    def setup_method(self):
        self.engine = sa.create_engine("sqlite://")

    def teardown_method(self):
        self.engine.dispose()

    def _upgrade(self, conn) -> sa.Inspector:
        migration = _load_initial_migration()
        with Operations.context(MigrationContext.configure(conn)):
            migration.upgrade()
        return sa.inspect(conn)

    def test_columns_match_models(self):
        with self.engine.begin() as conn:
            inspector = self._upgrade(conn)

            for table in Base.metadata.sorted_tables:
                reflected = {c["name"]: c for c in inspector.get_columns(table.name)}
                assert set(reflected) == set(table.columns.keys()), table.name
                for column in table.columns:
                    assert reflected[column.name]["nullable"] == column.nullable, (
                        f"{table.name}.{column.name}"
                    )

    def test_created_at_has_no_server_default(self):
        with self.engine.begin() as conn:
            inspector = self._upgrade(conn)

            for table in ("users", "categories", "recipes"):
                created_at = next(
                    c for c in inspector.get_columns(table) if c["name"] == "created_at"
                )
                assert created_at["default"] is None, table
                assert Base.metadata.tables[table].c.created_at.server_default is None
