"""
RecipeBox Backend: Recipe Request/Response Schemas
====================================================

What:  Pydantic models defining the recipe API contract.
How:   FastAPI validates request bodies against the request models and
       serializes service results through the response models.

Request model convention:
    Every body field is Optional with a None default. Type and range checks
    (e.g. prep_time must be a positive integer) are done here, but the
    decision "is this required field missing?" is made by RecipeService so
    the client gets the full list of required fields in one 400 response,
    and so `favorite: false` can be told apart from an absent `favorite`.
"""

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field

from recipebox.schemas.common import SQL_INT_MAX, SQL_INT_MIN


# ══════════════════════════════════════════════════════════════════════════
# Request Models
# ══════════════════════════════════════════════════════════════════════════


class RecipeFields(BaseModel):
    """Fields shared by the create and update payloads."""

    title: Optional[str] = Field(default=None, max_length=255, json_schema_extra={"example": "Rice"})
    ingredients: Optional[str] = Field(
        default=None, json_schema_extra={"example": "water, rice, oil, salt"}
    )
    instructions: Optional[str] = Field(
        default=None, json_schema_extra={"example": "add ingredients, cook"}
    )
    prep_time: Optional[int] = Field(default=None, gt=0, le=SQL_INT_MAX, description="Minutes")
    cook_time: Optional[int] = Field(default=None, gt=0, le=SQL_INT_MAX, description="Minutes")
    servings: Optional[int] = Field(default=None, gt=0, le=SQL_INT_MAX)
    difficulty: Optional[str] = Field(
        default=None, max_length=50, description="easy, medium or hard"
    )
    favorite: Optional[bool] = Field(default=None)
    category_id: Optional[int] = Field(default=None, ge=SQL_INT_MIN, le=SQL_INT_MAX)


class RecipeCreate(RecipeFields):
    """POST /api/recipes body. All nine fields are required (checked by the service)."""


class RecipeUpdate(RecipeFields):
    """PUT /api/recipes/{id} body. Omitted or null fields keep their stored value."""


# ══════════════════════════════════════════════════════════════════════════
# Response Models
# ══════════════════════════════════════════════════════════════════════════


class RecipeResponse(BaseModel):
    """
    A recipe joined with its author's username and its category name.

    Returned by every recipe endpoint, alone or wrapped.
    """

    id: int
    title: str
    ingredients: str
    instructions: str
    prep_time: int
    cook_time: int
    servings: int
    difficulty: str
    favorite: bool
    user_id: int
    category_id: int
    created_at: datetime
    author: str = Field(description="Username of the recipe owner")
    category_name: str

    model_config = {"from_attributes": True}


class RecipeListResponse(BaseModel):
    """GET /api/recipes"""

    count: int
    recipes: List[RecipeResponse]


class RecipeSearchResponse(BaseModel):
    """GET /api/recipes/search"""

    query: str
    count: int
    results: List[RecipeResponse]


class RecipeMessageResponse(BaseModel):
    """Create, update, toggle and delete all answer with a message and the record."""

    message: str
    recipe: RecipeResponse


class StatsResponse(BaseModel):
    """
    GET /api/stats

    completionRate is the favorite share of all recipes as a whole-number
    percentage (0 when there are no recipes).
    """

    total: int
    favorite: int
    notFavorite: int
    completionRate: int
