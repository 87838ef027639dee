"""
Domain mappers package.
Handles transformation between ORM models and DTOs (Data Transfer Objects).
"""

from domain.mappers.recipe_mapper import RecipeMapper
from domain.mappers.plan_mapper import PlanMapper

__all__ = ["RecipeMapper", "PlanMapper"]
