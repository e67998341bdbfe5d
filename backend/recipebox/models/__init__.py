"""
ORM models. Importing this package registers every table on Base.metadata.
"""

from recipebox.models.user import User
from recipebox.models.category import Category
from recipebox.models.recipe import Recipe

__all__ = ["User", "Category", "Recipe"]
