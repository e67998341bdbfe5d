"""
RecipeBox Backend: Recipe Route Handlers
==========================================

What:  HTTP endpoints for browsing and managing recipes, plus /api/stats.
How:   Extracts path/query/body values, resolves the identity where the
       route is protected, and delegates to RecipeService.

Route Inventory:
    GET    /api/recipes?filter=...       list, optionally filtered
    GET    /api/recipes/search?q=...     substring search
    GET    /api/recipes/{id}             one recipe
    POST   /api/recipes                  create            (bearer token)
    PUT    /api/recipes/{id}             partial update    (bearer token, owner)
    PATCH  /api/recipes/{id}/toggle      flip favorite
    DELETE /api/recipes/{id}             delete            (bearer token, owner)
    GET    /api/stats                    favorite counts

`/recipes/search` is declared before `/recipes/{recipe_id}` so "search" is
never parsed as an id.
"""

from typing import Annotated, Optional

from fastapi import APIRouter, Depends, Path, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from recipebox.database import get_db_session
from recipebox.middleware.auth import require_identity
from recipebox.schemas.common import SQL_INT_MAX, SQL_INT_MIN, ErrorResponse
from recipebox.schemas.recipe import (
    RecipeCreate,
    RecipeListResponse,
    RecipeMessageResponse,
    RecipeResponse,
    RecipeSearchResponse,
    RecipeUpdate,
    StatsResponse,
)
from recipebox.services.recipe_service import recipe_service
from recipebox.services.token_service import TokenClaims

# ── Router Configuration ──────────────────────────────────────────────────
router = APIRouter(prefix="/api", tags=["Recipes"])

_AUTH_ERRORS = {
    401: {"description": "No bearer token", "model": ErrorResponse},
    403: {"description": "Invalid token, or not the recipe owner", "model": ErrorResponse},
}
_NOT_FOUND = {404: {"description": "Recipe not found", "model": ErrorResponse}}

# ids outside the INTEGER range answer 400 instead of reaching the driver
RecipeId = Annotated[int, Path(ge=SQL_INT_MIN, le=SQL_INT_MAX)]


@router.get(
    "/recipes",
    response_model=RecipeListResponse,
    summary="List recipes",
    description=(
        "Returns every recipe joined with its author and category name. "
        "filter may be easy, medium, hard, favorite or notFavorite; any other "
        "value is ignored."
    ),
)
async def list_recipes(
    filter_value: Optional[str] = Query(
        default=None, alias="filter", description="easy | medium | hard | favorite | notFavorite"
    ),
    db: AsyncSession = Depends(get_db_session),
) -> RecipeListResponse:
    return await recipe_service.list_recipes(db, filter_value)


@router.get(
    "/recipes/search",
    response_model=RecipeSearchResponse,
    responses={400: {"description": "Missing query", "model": ErrorResponse}},
    summary="Search recipes",
    description=(
        "Case-insensitive substring match on title, ingredients, author "
        "username and category name."
    ),
)
async def search_recipes(
    q: Optional[str] = Query(default=None, description="Search text, e.g. rice"),
    db: AsyncSession = Depends(get_db_session),
) -> RecipeSearchResponse:
    return await recipe_service.search_recipes(db, q)


@router.get(
    "/recipes/{recipe_id}",
    response_model=RecipeResponse,
    responses=_NOT_FOUND,
    summary="Get a recipe by id",
)
async def get_recipe(
    recipe_id: RecipeId,
    db: AsyncSession = Depends(get_db_session),
) -> RecipeResponse:
    return await recipe_service.get_recipe(db, recipe_id)


@router.post(
    "/recipes",
    response_model=RecipeMessageResponse,
    status_code=status.HTTP_201_CREATED,
    responses={400: {"description": "Missing fields or unknown category", "model": ErrorResponse}, **_AUTH_ERRORS},
    summary="Create a recipe",
    description="The owner is always the authenticated user; a user_id in the body is ignored.",
)
async def create_recipe(
    payload: RecipeCreate,
    identity: TokenClaims = Depends(require_identity),
    db: AsyncSession = Depends(get_db_session),
) -> RecipeMessageResponse:
    return await recipe_service.create_recipe(db, payload, identity)


@router.put(
    "/recipes/{recipe_id}",
    response_model=RecipeMessageResponse,
    responses={**_AUTH_ERRORS, **_NOT_FOUND},
    summary="Update a recipe you own",
    description="Fields that are omitted or null keep their current value.",
)
async def update_recipe(
    recipe_id: RecipeId,
    payload: RecipeUpdate,
    identity: TokenClaims = Depends(require_identity),
    db: AsyncSession = Depends(get_db_session),
) -> RecipeMessageResponse:
    return await recipe_service.update_recipe(db, recipe_id, payload, identity)


@router.patch(
    "/recipes/{recipe_id}/toggle",
    response_model=RecipeMessageResponse,
    responses=_NOT_FOUND,
    summary="Toggle the favorite flag",
)
async def toggle_recipe(
    recipe_id: RecipeId,
    db: AsyncSession = Depends(get_db_session),
) -> RecipeMessageResponse:
    return await recipe_service.toggle_favorite(db, recipe_id)


@router.delete(
    "/recipes/{recipe_id}",
    response_model=RecipeMessageResponse,
    responses={**_AUTH_ERRORS, **_NOT_FOUND},
    summary="Delete a recipe you own",
    description="Returns the recipe as it was before deletion.",
)
async def delete_recipe(
    recipe_id: RecipeId,
    identity: TokenClaims = Depends(require_identity),
    db: AsyncSession = Depends(get_db_session),
) -> RecipeMessageResponse:
    return await recipe_service.delete_recipe(db, recipe_id, identity)


@router.get(
    "/stats",
    response_model=StatsResponse,
    summary="Favorite statistics",
)
async def get_stats(db: AsyncSession = Depends(get_db_session)) -> StatsResponse:
    return await recipe_service.get_stats(db)
