"""
RecipeBox Backend: Sample Data Seeding
========================================

What:  Inserts sample users, categories and recipes into empty tables.
How:   Each table is checked and seeded on its own, so restarting the
       service never duplicates rows and a partially seeded database is
       completed rather than skipped.
Who:   Called once from `main.initialize()` after the schema exists.

Sample accounts (all with password `password123`):
    john_chef   john@recipes.com
    maria_cook  maria@recipes.com
    alex_baker  alex@recipes.com

Failure handling:
    Any database error is raised as SeedError. The caller logs it and keeps
    serving; seeding never blocks startup.
"""

import logging
from typing import Dict, Optional

from fastapi.concurrency import run_in_threadpool
from sqlalchemy import func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from recipebox.database import Database
from recipebox.exceptions import SeedError
from recipebox.models import Category, Recipe, User
from recipebox.services.credential_service import CredentialService, credential_service

logger = logging.getLogger(__name__)

SAMPLE_PASSWORD = "password123"

SAMPLE_USERS = [
    ("john_chef", "john@recipes.com"),
    ("maria_cook", "maria@recipes.com"),
    ("alex_baker", "alex@recipes.com"),
]

SAMPLE_CATEGORIES = [
    ("Breakfast", "Morning meals to start your day"),
    ("Lunch", "Midday meals"),
    ("Dinner", "Evening meals"),
    ("Dessert", "Sweet treats and desserts"),
    ("Snacks", "Quick bites and snacks"),
]

# Owners and categories are referenced by name, not by id
SAMPLE_RECIPES = [
    {
        "title": "Rice",
        "ingredients": "water, rice, oil, salt",
        "instructions": "add ingredients, cook",
        "prep_time": 4,
        "cook_time": 20,
        "servings": 4,
        "difficulty": "easy",
        "favorite": True,
        "author": "john_chef",
        "category": "Dinner",
    },
    {
        "title": "Beans",
        "ingredients": "water, beans, oil, salt, seasoning",
        "instructions": "add ingredients, cook",
        "prep_time": 7,
        "cook_time": 30,
        "servings": 6,
        "difficulty": "medium",
        "favorite": False,
        "author": "maria_cook",
        "category": "Dinner",
    },
    {
        "title": "Pork Chops",
        "ingredients": "Pork Chop, seasoning, oil",
        "instructions": "add ingredients, cook",
        "prep_time": 2,
        "cook_time": 10,
        "servings": 2,
        "difficulty": "hard",
        "favorite": False,
        "author": "john_chef",
        "category": "Dinner",
    },
]


async def _count(session: AsyncSession, model) -> int:
    result = await session.execute(select(func.count()).select_from(model))
    return int(result.scalar() or 0)


async def _seed_users(session: AsyncSession, credentials: CredentialService) -> int:
    if await _count(session, User) > 0:
        return 0
    for username, email in SAMPLE_USERS:
        hashed = await run_in_threadpool(credentials.hash, SAMPLE_PASSWORD)
        session.add(User(username=username, email=email, password=hashed))
    await session.flush()
    logger.info("Seeded %d sample users", len(SAMPLE_USERS))
    return len(SAMPLE_USERS)


async def _seed_categories(session: AsyncSession) -> int:
    if await _count(session, Category) > 0:
        return 0
    for name, description in SAMPLE_CATEGORIES:
        session.add(Category(name=name, description=description))
    await session.flush()
    logger.info("Seeded %d categories", len(SAMPLE_CATEGORIES))
    return len(SAMPLE_CATEGORIES)


async def _seed_recipes(session: AsyncSession) -> int:
    if await _count(session, Recipe) > 0:
        return 0

    users: Dict[str, int] = {
        row.username: row.id for row in (await session.execute(select(User.id, User.username))).all()
    }
    categories: Dict[str, int] = {
        row.name: row.id for row in (await session.execute(select(Category.id, Category.name))).all()
    }

    inserted = 0
    for sample in SAMPLE_RECIPES:
        user_id: Optional[int] = users.get(sample["author"])
        category_id: Optional[int] = categories.get(sample["category"])
        if user_id is None or category_id is None:
            logger.warning(
                "Skipping sample recipe %r: owner or category missing", sample["title"]
            )
            continue
        fields = {k: v for k, v in sample.items() if k not in ("author", "category")}
        session.add(Recipe(**fields, user_id=user_id, category_id=category_id))
        inserted += 1
    await session.flush()
    logger.info("Seeded %d sample recipes", inserted)
    return inserted


async def seed_database(
    database: Database, credentials: Optional[CredentialService] = None
) -> Dict[str, int]:
    """
    Fill empty tables with sample data in one transaction.

    Returns:
        Number of rows inserted per table, e.g. {"users": 3, "categories": 5, "recipes": 3}.
        All zeros when every table already had rows.

    Raises:
        SeedError: A database operation failed; nothing was committed.
    """
    credentials = credentials or credential_service
    try:
        async with database.session_factory() as session:
            async with session.begin():
                counts = {
                    "users": await _seed_users(session, credentials),
                    "categories": await _seed_categories(session),
                    "recipes": await _seed_recipes(session),
                }
    except SQLAlchemyError as e:
        logger.error("Seeding failed: %s", str(e), exc_info=True)
        raise SeedError(context={"error_type": type(e).__name__}) from e

    return counts
