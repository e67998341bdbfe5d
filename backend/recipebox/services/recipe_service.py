"""
RecipeBox Backend: Recipe Service (Business Logic)
====================================================

What:  All recipe reads and writes: list/filter, search, get, create,
       update, toggle favorite, delete and aggregate stats.
How:   Builds SQLAlchemy queries against the joined view
       recipes ⋈ users ⋈ categories and returns Pydantic response models.
Who:   Called by the recipe route handlers; never touches HTTP objects.
When:  Once per recipe request, with the request's AsyncSession.

Joined record:
    Every operation that returns a recipe returns it joined with the
    owner's username (`author`) and the category name (`category_name`).

        SELECT recipes.*, users.username AS author, categories.name AS category_name
        FROM recipes
        JOIN users ON recipes.user_id = users.id
        JOIN categories ON recipes.category_id = categories.id

Ownership:
    `user_id` is always the authenticated identity's id. Update and delete
    compare the stored owner with the caller and raise AuthorizationError on
    mismatch, before anything is written.

Error Handling Strategy:
    Application exceptions (ValidationError, NotFoundError,
    AuthorizationError) propagate unchanged. SQLAlchemy failures are logged
    and wrapped in DatabaseError so the client sees a generic 500.

RecipeService is stateless: it receives the db session on every call.
"""

import enum
import logging
from typing import Any, Dict, List, Optional

from sqlalchemy import case, func, or_, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from recipebox.exceptions import (
    AuthorizationError,
    DatabaseError,
    NotFoundError,
    ValidationError,
)
from recipebox.models import Category, Recipe, User
from recipebox.schemas.recipe import (
    RecipeCreate,
    RecipeListResponse,
    RecipeMessageResponse,
    RecipeResponse,
    RecipeSearchResponse,
    RecipeUpdate,
    StatsResponse,
)
from recipebox.services.token_service import TokenClaims

logger = logging.getLogger(__name__)

REQUIRED_RECIPE_FIELDS = (
    "title",
    "ingredients",
    "instructions",
    "prep_time",
    "cook_time",
    "servings",
    "difficulty",
    "favorite",
    "category_id",
)

SEARCH_EXAMPLE = "/api/recipes/search?q=rice"


class RecipeFilter(str, enum.Enum):
    """Closed set of list filters accepted by GET /api/recipes?filter=..."""

    EASY = "easy"
    MEDIUM = "medium"
    HARD = "hard"
    FAVORITE = "favorite"
    NOT_FAVORITE = "notFavorite"

    @classmethod
    def parse(cls, value: Optional[str]) -> Optional["RecipeFilter"]:
        """Unknown or missing values mean "no filter"."""
        if not value:
            return None
        try:
            return cls(value)
        except ValueError:
            return None

    def predicate(self):
        if self is RecipeFilter.FAVORITE:
            return Recipe.favorite.is_(True)
        if self is RecipeFilter.NOT_FAVORITE:
            return Recipe.favorite.is_(False)
        return Recipe.difficulty == self.value


def _joined_select():
    return (
        select(
            Recipe,
            User.username.label("author"),
            Category.name.label("category_name"),
        )
        .join(User, Recipe.user_id == User.id)
        .join(Category, Recipe.category_id == Category.id)
    )


def _to_response(row) -> RecipeResponse:
    recipe, author, category_name = row
    return RecipeResponse(
        id=recipe.id,
        title=recipe.title,
        ingredients=recipe.ingredients,
        instructions=recipe.instructions,
        prep_time=recipe.prep_time,
        cook_time=recipe.cook_time,
        servings=recipe.servings,
        difficulty=recipe.difficulty,
        favorite=bool(recipe.favorite),
        user_id=recipe.user_id,
        category_id=recipe.category_id,
        created_at=recipe.created_at,
        author=author,
        category_name=category_name,
    )


def completion_rate(favorite: int, total: int) -> int:
    """Favorite share as a whole percentage, halves rounded up; 0 for no recipes."""
    if total <= 0:
        return 0
    return (favorite * 200 + total) // (2 * total)


class RecipeService:
    """
    Business logic layer for recipe operations.

    Responsibilities:
        - list_recipes() / search_recipes() / get_recipe(): joined reads
        - create_recipe() / update_recipe() / delete_recipe(): owner writes
        - toggle_favorite(): unauthenticated favorite flip
        - get_stats(): favorite counts and completion rate
    """

    # ── Reads ─────────────────────────────────────────────────────────────

    async def list_recipes(
        self, db: AsyncSession, filter_value: Optional[str] = None
    ) -> RecipeListResponse:
        """
        Return every recipe, optionally narrowed by a RecipeFilter.

        Query plan:
            joined select [WHERE difficulty = :d | favorite IS 1/0] ORDER BY recipes.id
        """
        recipe_filter = RecipeFilter.parse(filter_value)
        query = _joined_select()
        if recipe_filter is not None:
            query = query.where(recipe_filter.predicate())
        query = query.order_by(Recipe.id)

        try:
            result = await db.execute(query)
            recipes = [_to_response(row) for row in result.all()]
        except SQLAlchemyError as e:
            logger.error("Database error listing recipes: %s", str(e), exc_info=True)
            raise DatabaseError(
                message="Could not retrieve recipes.",
                context={"error_type": type(e).__name__},
            )

        return RecipeListResponse(count=len(recipes), recipes=recipes)

    async def search_recipes(self, db: AsyncSession, q: Optional[str]) -> RecipeSearchResponse:
        """
        Case-insensitive substring search over title, ingredients, author
        username and category name.

        `%` and `_` in the query are escaped, so they match literally.

        Raises:
            ValidationError: q is missing or empty
        """
        if not q:
            raise ValidationError(
                message="Search query required",
                context={"example": SEARCH_EXAMPLE},
            )

        query = (
            _joined_select()
            .where(
                or_(
                    Recipe.title.icontains(q, autoescape=True),
                    Recipe.ingredients.icontains(q, autoescape=True),
                    User.username.icontains(q, autoescape=True),
                    Category.name.icontains(q, autoescape=True),
                )
            )
            .order_by(Recipe.id)
        )

        try:
            result = await db.execute(query)
            results = [_to_response(row) for row in result.all()]
        except SQLAlchemyError as e:
            logger.error("Database error searching recipes: %s", str(e), exc_info=True)
            raise DatabaseError(
                message="Could not search recipes.",
                context={"error_type": type(e).__name__},
            )

        return RecipeSearchResponse(query=q, count=len(results), results=results)

    async def get_recipe(self, db: AsyncSession, recipe_id: int) -> RecipeResponse:
        """
        Retrieve one joined recipe by id.

        Raises:
            NotFoundError: No recipe with this id (→ 404, id echoed back)
        """
        recipe = await self._fetch_joined(db, recipe_id)
        if recipe is None:
            raise NotFoundError(resource="Recipe", resource_id=recipe_id)
        return recipe

    async def get_stats(self, db: AsyncSession) -> StatsResponse:
        """Count all and favorite recipes in a single aggregate query."""
        query = select(
            func.count(Recipe.id),
            func.coalesce(func.sum(case((Recipe.favorite.is_(True), 1), else_=0)), 0),
        )
        try:
            result = await db.execute(query)
            total, favorite = result.one()
        except SQLAlchemyError as e:
            logger.error("Database error computing stats: %s", str(e), exc_info=True)
            raise DatabaseError(
                message="Could not compute recipe stats.",
                context={"error_type": type(e).__name__},
            )

        total = int(total or 0)
        favorite = int(favorite or 0)
        return StatsResponse(
            total=total,
            favorite=favorite,
            notFavorite=total - favorite,
            completionRate=completion_rate(favorite, total),
        )

    # ── Writes ────────────────────────────────────────────────────────────

    async def create_recipe(
        self, db: AsyncSession, payload: RecipeCreate, identity: TokenClaims
    ) -> RecipeMessageResponse:
        """
        Insert a recipe owned by the authenticated user.

        Workflow:
            1. Every field in REQUIRED_RECIPE_FIELDS must be present
               (absent, null and "" count as missing; `favorite: false` does not)
            2. category_id must reference an existing category
            3. Insert with user_id = identity.user_id, flush for the id
            4. Re-read through the joined select

        Raises:
            ValidationError: Missing fields, or unknown category (nothing is written)
        """
        data = payload.model_dump()
        missing = [name for name in REQUIRED_RECIPE_FIELDS if _is_missing(data.get(name))]
        if missing:
            raise ValidationError.missing_fields(REQUIRED_RECIPE_FIELDS, missing)

        await self._ensure_category(db, data["category_id"])

        recipe = Recipe(
            title=data["title"],
            ingredients=data["ingredients"],
            instructions=data["instructions"],
            prep_time=data["prep_time"],
            cook_time=data["cook_time"],
            servings=data["servings"],
            difficulty=data["difficulty"],
            favorite=bool(data["favorite"]),
            category_id=data["category_id"],
            user_id=identity.user_id,
        )
        try:
            db.add(recipe)
            await db.flush()
        except SQLAlchemyError as e:
            logger.error("Database error creating recipe: %s", str(e), exc_info=True)
            raise DatabaseError(
                message="Could not create the recipe.",
                context={"error_type": type(e).__name__},
            )

        logger.info("Recipe %d created by user %d", recipe.id, identity.user_id)
        created = await self.get_recipe(db, recipe.id)
        return RecipeMessageResponse(message="Recipe created successfully", recipe=created)

    async def update_recipe(
        self,
        db: AsyncSession,
        recipe_id: int,
        payload: RecipeUpdate,
        identity: TokenClaims,
    ) -> RecipeMessageResponse:
        """
        Partially update a recipe the caller owns.

        Omitted and null fields keep their stored values. Ownership
        (user_id) is never changed.

        Raises:
            NotFoundError:      No recipe with this id
            AuthorizationError: Caller is not the owner (recipe unchanged)
            ValidationError:    Supplied category_id does not exist
        """
        recipe = await self._get_owned(db, recipe_id, identity, action="update")

        changes: Dict[str, Any] = payload.model_dump(exclude_none=True)
        if "category_id" in changes:
            await self._ensure_category(db, changes["category_id"])

        for field, value in changes.items():
            setattr(recipe, field, value)

        try:
            await db.flush()
        except SQLAlchemyError as e:
            logger.error("Database error updating recipe %d: %s", recipe_id, str(e), exc_info=True)
            raise DatabaseError(
                message="Could not update the recipe.",
                context={"recipe_id": recipe_id},
            )

        logger.info("Recipe %d updated (%s)", recipe_id, ", ".join(sorted(changes)) or "no changes")
        updated = await self.get_recipe(db, recipe_id)
        return RecipeMessageResponse(message="Recipe updated successfully", recipe=updated)

    async def toggle_favorite(self, db: AsyncSession, recipe_id: int) -> RecipeMessageResponse:
        """
        Flip the favorite flag. Requires no identity.

        Raises:
            NotFoundError: No recipe with this id
        """
        recipe = await self._get_model(db, recipe_id)
        recipe.favorite = not recipe.favorite
        try:
            await db.flush()
        except SQLAlchemyError as e:
            logger.error("Database error toggling recipe %d: %s", recipe_id, str(e), exc_info=True)
            raise DatabaseError(
                message="Could not toggle the recipe.",
                context={"recipe_id": recipe_id},
            )

        toggled = await self.get_recipe(db, recipe_id)
        return RecipeMessageResponse(message="Recipe toggled", recipe=toggled)

    async def delete_recipe(
        self, db: AsyncSession, recipe_id: int, identity: TokenClaims
    ) -> RecipeMessageResponse:
        """
        Permanently delete a recipe the caller owns.

        Returns the joined record as it was just before deletion.

        Raises:
            NotFoundError:      No recipe with this id
            AuthorizationError: Caller is not the owner (recipe unchanged)
        """
        recipe = await self._get_owned(db, recipe_id, identity, action="delete")
        snapshot = await self.get_recipe(db, recipe_id)

        try:
            await db.delete(recipe)
            await db.flush()
        except SQLAlchemyError as e:
            logger.error("Database error deleting recipe %d: %s", recipe_id, str(e), exc_info=True)
            raise DatabaseError(
                message="Could not delete the recipe.",
                context={"recipe_id": recipe_id},
            )

        logger.info("Recipe %d deleted by user %d", recipe_id, identity.user_id)
        return RecipeMessageResponse(message="Recipe deleted successfully", recipe=snapshot)

    # ── Helpers ───────────────────────────────────────────────────────────

    async def _fetch_joined(self, db: AsyncSession, recipe_id: int) -> Optional[RecipeResponse]:
        try:
            result = await db.execute(_joined_select().where(Recipe.id == recipe_id))
            row = result.one_or_none()
        except SQLAlchemyError as e:
            logger.error("Database error fetching recipe %d: %s", recipe_id, str(e), exc_info=True)
            raise DatabaseError(
                message="Could not retrieve the recipe.",
                context={"recipe_id": recipe_id},
            )
        return _to_response(row) if row is not None else None

    async def _get_model(self, db: AsyncSession, recipe_id: int) -> Recipe:
        try:
            recipe = await db.get(Recipe, recipe_id)
        except SQLAlchemyError as e:
            logger.error("Database error fetching recipe %d: %s", recipe_id, str(e), exc_info=True)
            raise DatabaseError(
                message="Could not retrieve the recipe.",
                context={"recipe_id": recipe_id},
            )
        if recipe is None:
            raise NotFoundError(resource="Recipe", resource_id=recipe_id)
        return recipe

    async def _get_owned(
        self, db: AsyncSession, recipe_id: int, identity: TokenClaims, action: str
    ) -> Recipe:
        recipe = await self._get_model(db, recipe_id)
        if recipe.user_id != identity.user_id:
            logger.warning(
                "User %d tried to %s recipe %d owned by user %d",
                identity.user_id, action, recipe_id, recipe.user_id,
            )
            raise AuthorizationError(
                message=f"Forbidden: You can only {action} your own recipes",
                context={
                    "recipe_owner": recipe.user_id,
                    "your_user_id": identity.user_id,
                },
            )
        return recipe

    async def _ensure_category(self, db: AsyncSession, category_id: int) -> None:
        """Raise ValidationError listing the available categories if category_id is unknown."""
        try:
            category = await db.get(Category, category_id)
            if category is not None:
                return
            result = await db.execute(select(Category.id, Category.name).order_by(Category.id))
            available: List[Dict[str, Any]] = [
                {"id": row.id, "name": row.name} for row in result.all()
            ]
        except SQLAlchemyError as e:
            logger.error("Database error checking category %s: %s", category_id, str(e), exc_info=True)
            raise DatabaseError(
                message="Could not verify the category.",
                context={"category_id": category_id},
            )

        raise ValidationError(
            message="Category not found",
            context={"available_categories": available},
        )


def _is_missing(value: Any) -> bool:
    return value is None or (isinstance(value, str) and value == "")


# ── Singleton Instance ────────────────────────────────────────────────────
recipe_service = RecipeService()
