"""
Recipe domain mappers.
Handles transformation between ORM recipes and their response DTOs.
"""

from domain.models import Recipe
from domain.schemas.recipe_schemas import (
    NutritionResponse,
    RecipeIngredientResponse,
    RecipeResponse,
)
from services.nutrition_service import calc_recipe_per_serving


class RecipeMapper:
    """Mapper for recipe transformations."""

    @staticmethod
    def to_response(recipe: Recipe) -> RecipeResponse:
        """
        Convert ORM Recipe to RecipeResponse DTO.

        Args:
            recipe: Recipe ORM instance with ingredient rows loaded

        Returns:
            RecipeResponse with unrounded per-serving nutrition
        """
        rows = [
            RecipeIngredientResponse(
                ingredient_id=row.ingredient_id,
                ingredient_name=row.ingredient.name,
                grams_per_base=row.grams_per_base,
                kcal_per_100g=row.ingredient.kcal_per_100g,
                protein_per_100g=row.ingredient.protein_per_100g,
                carbs_per_100g=row.ingredient.carbs_per_100g,
                fat_per_100g=row.ingredient.fat_per_100g,
            )
            for row in recipe.ingredients
        ]

        return RecipeResponse(
            recipe_id=recipe.recipe_id,
            name=recipe.name,
            cuisine=recipe.cuisine,
            difficulty=recipe.difficulty,
            utensils=list(recipe.utensils or []),
            base_servings=recipe.base_servings,
            instructions=recipe.instructions,
            ingredients=rows,
            per_serving=NutritionResponse(**calc_recipe_per_serving(recipe).to_dict()),
            created_at=recipe.created_at,
        )
