"""
RecipeBox Backend: Shared Response Schemas
============================================

What:  Error and health response shapes used across routers.
"""

from pydantic import BaseModel, Field

# Range of a SQL INTEGER column (64-bit signed). Larger ids and counts are
# rejected as invalid requests before they reach the driver.
SQL_INT_MIN = -(2**63)
SQL_INT_MAX = 2**63 - 1


class ErrorResponse(BaseModel):
    """
    Standardized error response format for all API errors.

    Fields:
        error: Human-readable description
        (extra): Context keys such as `id`, `required`, `recipe_owner`

    Example:
        {
            "error": "Forbidden: You can only update your own recipes",
            "recipe_owner": 1,
            "your_user_id": 2
        }
    """

    error: str = Field(description="Human-readable error description")

    model_config = {"extra": "allow"}


class HealthResponse(BaseModel):
    """Health check response showing service and database status."""

    status: str = Field(description="Overall service status: healthy, unhealthy")
    version: str = Field(description="Application version")
    database: str = Field(description="Database connectivity: connected, disconnected")
    uptime_seconds: float = Field(description="Seconds since service started")
