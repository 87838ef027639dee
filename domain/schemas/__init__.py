"""
Domain schemas package - Pydantic models for validation.
"""

from domain.schemas.ingredient_schemas import (
    IngredientCreate,
    IngredientResponse,
    IngredientMatch,
    GramEstimate,
)
from domain.schemas.recipe_schemas import (
    RecipeIngredientRow,
    RecipeCreate,
    RecipeResponse,
    RecipeSummary,
    NutritionResponse,
    ServingScaleResponse,
)
from domain.schemas.client_schemas import (
    ClientDraft,
    ClientResponse,
    HeightUpdate,
    PlanCreate,
)
from domain.schemas.plan_schemas import (
    MealUpsertRequest,
    AutoPopulateRequest,
    MealResponse,
    PlanResponse,
)
from domain.schemas.shopping_schemas import (
    ShoppingListItemResponse,
    ShoppingListResponse,
)
from domain.schemas.macro_schemas import (
    MacroInput,
    MacroTargetsRequest,
    MacroTargetsResponse,
)

__all__ = [
    # Ingredient schemas
    "IngredientCreate",
    "IngredientResponse",
    "IngredientMatch",
    "GramEstimate",
    # Recipe schemas
    "RecipeIngredientRow",
    "RecipeCreate",
    "RecipeResponse",
    "RecipeSummary",
    "NutritionResponse",
    "ServingScaleResponse",
    # Client schemas
    "ClientDraft",
    "ClientResponse",
    "HeightUpdate",
    "PlanCreate",
    # Plan schemas
    "MealUpsertRequest",
    "AutoPopulateRequest",
    "MealResponse",
    "PlanResponse",
    # Shopping schemas
    "ShoppingListItemResponse",
    "ShoppingListResponse",
    # Macro schemas
    "MacroInput",
    "MacroTargetsRequest",
    "MacroTargetsResponse",
]
