"""
Domain models package - SQLAlchemy ORM models.
"""

from domain.models.database import (
    Base,
    engine,
    SessionLocal,
    init_database,
    get_db_session,
)
from domain.models.ingredient import Ingredient
from domain.models.recipe import Recipe, RecipeIngredient
from domain.models.client import Client
from domain.models.meal_plan import Plan, Meal

__all__ = [
    # Database
    "Base",
    "engine",
    "SessionLocal",
    "init_database",
    "get_db_session",
    # Ingredient models
    "Ingredient",
    # Recipe models
    "Recipe",
    "RecipeIngredient",
    # Client models
    "Client",
    # Meal plan models
    "Plan",
    "Meal",
]
