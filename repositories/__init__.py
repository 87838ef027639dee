"""
Repositories package - Data access layer.
"""

from repositories.base import BaseRepository
from repositories.ingredient_repository import IngredientRepository
from repositories.recipe_repository import RecipeRepository
from repositories.client_repository import ClientRepository
from repositories.plan_repository import PlanRepository, MealRepository

__all__ = [
    "BaseRepository",
    "IngredientRepository",
    "RecipeRepository",
    "ClientRepository",
    "PlanRepository",
    "MealRepository",
]
