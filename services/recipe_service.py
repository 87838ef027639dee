"""Recipe service - recipe library management."""

from typing import Any, Dict, List, Optional, Tuple
from uuid import UUID
import logging

from sqlalchemy.orm import Session

from app.config import settings
from app.exceptions import NotFoundError
from domain.models import Recipe, RecipeIngredient
from domain.schemas.recipe_schemas import RecipeCreate, RecipeIngredientRow
from repositories.ingredient_repository import IngredientRepository
from repositories.recipe_repository import RecipeRepository
from services.nutrition_service import calc_nutrition, calc_recipe_per_serving, clamp, format_macros

logger = logging.getLogger("macroplan.recipe")


def clamp_grams(grams: float) -> float:
    """Recipe ingredient grams always sit inside the configured bounds."""
    return clamp(grams, settings.min_grams_per_base, settings.max_grams_per_base)


def recipe_summary(recipe: Recipe) -> Dict[str, Any]:
    """List-view dict with whole-number per-serving nutrition"""
    per_serving = format_macros(calc_recipe_per_serving(recipe))
    return {
        "recipe_id": recipe.recipe_id,
        "name": recipe.name,
        "cuisine": recipe.cuisine,
        "difficulty": recipe.difficulty,
        "base_servings": recipe.base_servings,
        "ingredient_count": len(recipe.ingredients),
        "kcal_per_serving": per_serving["kcal"],
        "protein_per_serving": per_serving["protein"],
        "carbs_per_serving": per_serving["carbs"],
        "fat_per_serving": per_serving["fat"],
    }


class RecipeService:
    """Business logic for recipes and their ingredient rows."""

    @staticmethod
    def list_recipes(
        db: Session,
        q: Optional[str] = None,
        cuisine: Optional[str] = None,
        page: int = 1,
        page_size: int = 20,
    ) -> Tuple[List[Dict[str, Any]], int]:
        skip = (max(page, 1) - 1) * page_size
        recipes, total = RecipeRepository(db).list_page(q=q, cuisine=cuisine, skip=skip, limit=page_size)
        return [recipe_summary(r) for r in recipes], total

    @staticmethod
    def get_recipe(db: Session, recipe_id: UUID) -> Recipe:
        recipe = RecipeRepository(db).get_with_ingredients(recipe_id)
        if recipe is None:
            raise NotFoundError(f"Recipe {recipe_id} not found")
        return recipe

    @staticmethod
    def _build_rows(db: Session, recipe_id: UUID, rows: List[RecipeIngredientRow]) -> List[RecipeIngredient]:
        wanted = {row.ingredient_id for row in rows}
        found = {i.ingredient_id: i for i in IngredientRepository(db).get_many(wanted)}
        missing = sorted(str(i) for i in wanted - set(found))
        if missing:
            raise NotFoundError("Ingredients not found", details={"ingredient_ids": missing})

        return [
            RecipeIngredient(
                recipe_id=recipe_id,
                ingredient_id=row.ingredient_id,
                ingredient=found[row.ingredient_id],
                grams_per_base=clamp_grams(row.grams_per_base),
                position=position,
            )
            for position, row in enumerate(rows)
        ]

    @staticmethod
    def _apply_fields(recipe: Recipe, data: RecipeCreate) -> None:
        recipe.name = data.title.strip()
        recipe.cuisine = (data.cuisine or "").strip() or None
        recipe.difficulty = data.difficulty.value if data.difficulty else None
        recipe.utensils = [u.strip() for u in data.utensils if u.strip()]
        recipe.base_servings = data.base_servings
        recipe.instructions = data.instructions

    @staticmethod
    def create_recipe(db: Session, data: RecipeCreate) -> Recipe:
        """Create a recipe and its ingredient rows in one transaction."""
        recipe = Recipe()
        RecipeService._apply_fields(recipe, data)
        try:
            db.add(recipe)
            db.flush()
            recipe.ingredients = RecipeService._build_rows(db, recipe.recipe_id, data.ingredients)
            db.commit()
        except Exception:
            db.rollback()
            raise
        logger.info("Created recipe %s '%s' with %d ingredients", recipe.recipe_id, recipe.name, len(data.ingredients))
        return RecipeService.get_recipe(db, recipe.recipe_id)

    @staticmethod
    def update_recipe(db: Session, recipe_id: UUID, data: RecipeCreate) -> Recipe:
        """
        Replace a recipe's fields and ingredient rows in one transaction.
        Meals using the recipe get their cached nutrition recomputed.
        """
        recipe = RecipeService.get_recipe(db, recipe_id)
        try:
            RecipeService._apply_fields(recipe, data)
            recipe.ingredients = RecipeService._build_rows(db, recipe_id, data.ingredients)
            db.flush()
            RecipeService._refresh_meal_snapshots(db, recipe)
            db.commit()
        except Exception:
            db.rollback()
            raise
        logger.info("Updated recipe %s", recipe_id)
        return RecipeService.get_recipe(db, recipe_id)

    @staticmethod
    def _refresh_meal_snapshots(db: Session, recipe: Recipe) -> None:
        for meal in RecipeRepository(db).meals_using(recipe.recipe_id):
            n = calc_nutrition(recipe, meal.servings)
            meal.kcal, meal.protein, meal.carbs, meal.fat = n.kcal, n.protein, n.carbs, n.fat

    @staticmethod
    def delete_recipe(db: Session, recipe_id: UUID) -> None:
        """Delete a recipe; meals that used it become empty slots with zero nutrition."""
        recipe = RecipeService.get_recipe(db, recipe_id)
        try:
            for meal in RecipeRepository(db).meals_using(recipe_id):
                meal.recipe = None
                meal.recipe_id = None
                meal.kcal = meal.protein = meal.carbs = meal.fat = 0.0
            db.delete(recipe)
            db.commit()
        except Exception:
            db.rollback()
            raise
        logger.info("Deleted recipe %s", recipe_id)

    @staticmethod
    def duplicate_recipe(db: Session, recipe_id: UUID) -> Recipe:
        original = RecipeService.get_recipe(db, recipe_id)
        data = RecipeCreate(
            title=f"{original.name} (copy)"[:120],
            cuisine=original.cuisine,
            difficulty=original.difficulty,
            utensils=list(original.utensils or []),
            base_servings=original.base_servings,
            instructions=original.instructions,
            ingredients=[
                RecipeIngredientRow(ingredient_id=row.ingredient_id, grams_per_base=row.grams_per_base)
                for row in original.ingredients
            ],
        )
        return RecipeService.create_recipe(db, data)

    @staticmethod
    def get_cuisines(db: Session) -> List[str]:
        return RecipeRepository(db).distinct_cuisines()
