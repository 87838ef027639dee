"""Services package - Business logic layer"""

from services.nutrition_service import NutritionService
from services.shopping_service import ShoppingService
from services.ingredient_service import IngredientService
from services.recipe_service import RecipeService
from services.client_service import ClientService
from services.planner_service import PlannerService

# Note: macro_service and export_service contain functions, not classes

__all__ = [
    "NutritionService",
    "ShoppingService",
    "IngredientService",
    "RecipeService",
    "ClientService",
    "PlannerService",
]
