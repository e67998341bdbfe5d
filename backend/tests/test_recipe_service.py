"""
RecipeBox Backend: Recipe Service Unit Tests
==============================================

What:  Business rules checked against a mocked AsyncSession, no database.

What we test:
    ✅ Filter parsing is a closed set; unknown values mean no filter
    ✅ Completion rate rounding
    ✅ Validation happens before any query
    ✅ Ownership is checked before anything is written
    ✅ SQLAlchemy failures surface as DatabaseError
"""

from unittest.mock import MagicMock

import pytest
from sqlalchemy.exc import OperationalError

from recipebox.exceptions import (
    AuthorizationError,
    DatabaseError,
    NotFoundError,
    ValidationError,
)
from recipebox.schemas.recipe import RecipeCreate, RecipeUpdate
from recipebox.services.recipe_service import (
    RecipeFilter,
    RecipeService,
    completion_rate,
)
from recipebox.services.token_service import TokenClaims

JOHN = TokenClaims(user_id=1, username="john_chef")
MARIA = TokenClaims(user_id=2, username="maria_cook")


class TestRecipeFilter:
    @pytest.mark.parametrize("value", ["easy", "medium", "hard", "favorite", "notFavorite"])
    def test_known_values(self, value):
        assert RecipeFilter.parse(value).value == value

    @pytest.mark.parametrize("value", [None, "", "bogus", "EASY", "easy; DROP TABLE recipes"])
    def test_unknown_values_mean_no_filter(self, value):
        assert RecipeFilter.parse(value) is None


class TestCompletionRate:
    @pytest.mark.parametrize(
        "favorite, total, expected",
        [
            (1, 4, 25),
            (0, 0, 0),
            (0, 3, 0),
            (3, 3, 100),
            (1, 3, 33),
            (2, 3, 67),
            (1, 8, 13),
        ],
    )
    def test_rounding(self, favorite, total, expected):
        assert completion_rate(favorite, total) == expected


class TestRecipeServiceValidation:
    def setup_method(self):
        self.service = RecipeService()

    @pytest.mark.asyncio
    @pytest.mark.parametrize("q", [None, ""])
    async def test_search_requires_query(self, mock_db_session, q):
        with pytest.raises(ValidationError) as exc_info:
            await self.service.search_recipes(mock_db_session, q)

        assert exc_info.value.to_body() == {
            "error": "Search query required",
            "example": "/api/recipes/search?q=rice",
        }
        mock_db_session.execute.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_create_missing_fields_touches_nothing(self, mock_db_session):
        payload = RecipeCreate(title="Toast", favorite=False)

        with pytest.raises(ValidationError) as exc_info:
            await self.service.create_recipe(mock_db_session, payload, JOHN)

        assert exc_info.value.context["missing"] == [
            "ingredients", "instructions", "prep_time", "cook_time",
            "servings", "difficulty", "category_id",
        ]
        mock_db_session.add.assert_not_called()
        mock_db_session.execute.assert_not_awaited()


class TestRecipeServiceOwnership:
    def setup_method(self):
        self.service = RecipeService()

    @pytest.mark.asyncio
    async def test_update_by_non_owner(self, mock_db_session):
        recipe = MagicMock(user_id=1, title="Rice")
        mock_db_session.get.return_value = recipe

        with pytest.raises(AuthorizationError) as exc_info:
            await self.service.update_recipe(mock_db_session, 1, RecipeUpdate(title="Mine"), MARIA)

        assert exc_info.value.to_body() == {
            "error": "Forbidden: You can only update your own recipes",
            "recipe_owner": 1,
            "your_user_id": 2,
        }
        assert recipe.title == "Rice"
        mock_db_session.flush.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_delete_by_non_owner(self, mock_db_session):
        mock_db_session.get.return_value = MagicMock(user_id=2)

        with pytest.raises(AuthorizationError):
            await self.service.delete_recipe(mock_db_session, 2, JOHN)

        mock_db_session.delete.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_toggle_missing(self, mock_db_session):
        mock_db_session.get.return_value = None

        with pytest.raises(NotFoundError) as exc_info:
            await self.service.toggle_favorite(mock_db_session, 42)

        assert exc_info.value.to_body() == {"error": "Recipe not found", "id": 42}


class TestRecipeServiceDatabaseErrors:
    def setup_method(self):
        self.service = RecipeService()

    @pytest.mark.asyncio
    async def test_list_wraps_sqlalchemy_error(self, mock_db_session):
        mock_db_session.execute.side_effect = OperationalError("SELECT", {}, Exception("disk I/O error"))

        with pytest.raises(DatabaseError):
            await self.service.list_recipes(mock_db_session)

    @pytest.mark.asyncio
    async def test_stats_wraps_sqlalchemy_error(self, mock_db_session):
        mock_db_session.execute.side_effect = OperationalError("SELECT", {}, Exception("locked"))

        with pytest.raises(DatabaseError):
            await self.service.get_stats(mock_db_session)
