"""
Nutrition calculator and serving scaler.

Recipe quantities are defined per base serving; every figure here is
derived from grams_per_base and the ingredient's per-100g values, so
nutrition is linear in servings.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, asdict
from typing import Any, Dict, Optional
from uuid import UUID

from sqlalchemy.orm import Session

from app.config import settings
from app.exceptions import NotFoundError, ServiceValidationError
from repositories.recipe_repository import RecipeRepository

logger = logging.getLogger("macroplan.nutrition")

KCAL_PER_G_PROTEIN = 4
KCAL_PER_G_CARBS = 4
KCAL_PER_G_FAT = 9


@dataclass(frozen=True)
class Nutrition:
    kcal: float = 0.0
    protein: float = 0.0
    carbs: float = 0.0
    fat: float = 0.0

    def __add__(self, other: "Nutrition") -> "Nutrition":
        return Nutrition(
            kcal=self.kcal + other.kcal,
            protein=self.protein + other.protein,
            carbs=self.carbs + other.carbs,
            fat=self.fat + other.fat,
        )

    def scaled(self, factor: float) -> "Nutrition":
        return Nutrition(
            kcal=self.kcal * factor,
            protein=self.protein * factor,
            carbs=self.carbs * factor,
            fat=self.fat * factor,
        )

    def to_dict(self) -> Dict[str, float]:
        return asdict(self)


ZERO = Nutrition()


def round_half_up(value: float, ndigits: int = 0) -> float:
    """Round halves away from zero for positive values (2.5 -> 3, not 2)."""
    factor = 10 ** ndigits
    return math.floor(value * factor + 0.5) / factor


def round_to_quarter(value: float) -> float:
    return math.floor(value * 4 + 0.5) / 4


def clamp(value: float, low: float, high: float) -> float:
    return max(low, min(high, value))


def practical_servings(servings: float) -> float:
    """Nearest quarter serving inside the configured serving range."""
    return clamp(round_to_quarter(servings), settings.min_servings, settings.max_servings)


# ---------- macro arithmetic ----------


def macro_energy(protein: float, carbs: float, fat: float) -> float:
    """kcal implied by macro grams (4/4/9 kcal per gram)."""
    return protein * KCAL_PER_G_PROTEIN + carbs * KCAL_PER_G_CARBS + fat * KCAL_PER_G_FAT


def sum_macros(*items: Nutrition) -> Nutrition:
    total = ZERO
    for item in items:
        total = total + item
    return total


def macro_percentages(protein: float, carbs: float, fat: float) -> Dict[str, int]:
    """Share of energy from each macro, as whole percentages."""
    total = macro_energy(protein, carbs, fat)
    if total == 0:
        return {"pct_protein": 0, "pct_carbs": 0, "pct_fat": 0}
    return {
        "pct_protein": int(round_half_up(protein * KCAL_PER_G_PROTEIN / total * 100)),
        "pct_carbs": int(round_half_up(carbs * KCAL_PER_G_CARBS / total * 100)),
        "pct_fat": int(round_half_up(fat * KCAL_PER_G_FAT / total * 100)),
    }


def is_within_tolerance(
    current: Nutrition,
    target: Nutrition,
    kcal_tolerance: Optional[float] = None,
    macro_tolerance: Optional[float] = None,
) -> Dict[str, bool]:
    """Compare current totals against targets using relative tolerances."""
    kcal_tol = settings.kcal_tolerance if kcal_tolerance is None else kcal_tolerance
    macro_tol = settings.macro_tolerance if macro_tolerance is None else macro_tolerance

    kcal_ok = abs(current.kcal - target.kcal) <= target.kcal * kcal_tol
    protein_ok = abs(current.protein - target.protein) <= target.protein * macro_tol
    carbs_ok = abs(current.carbs - target.carbs) <= target.carbs * macro_tol
    fat_ok = abs(current.fat - target.fat) <= target.fat * macro_tol

    return {
        "kcal": kcal_ok,
        "protein": protein_ok,
        "carbs": carbs_ok,
        "fat": fat_ok,
        "overall": kcal_ok and protein_ok and carbs_ok and fat_ok,
    }


def format_macros(nutrition: Nutrition) -> Dict[str, int]:
    """Whole-number macros for display"""
    return {
        "kcal": int(round_half_up(nutrition.kcal)),
        "protein": int(round_half_up(nutrition.protein)),
        "carbs": int(round_half_up(nutrition.carbs)),
        "fat": int(round_half_up(nutrition.fat)),
    }


# ---------- recipe nutrition ----------


def _ingredient_contribution(grams: float, ingredient: Any) -> Nutrition:
    factor = grams / 100
    return Nutrition(
        kcal=ingredient.kcal_per_100g * factor,
        protein=ingredient.protein_per_100g * factor,
        carbs=ingredient.carbs_per_100g * factor,
        fat=ingredient.fat_per_100g * factor,
    )


def calc_nutrition(recipe: Any, servings: float) -> Nutrition:
    """
    Total nutrition of a recipe cooked for `servings`.

    Each ingredient row contributes grams_per_base * servings / base_servings
    grams. A recipe without ingredient rows yields zero.

    Raises:
        NotFoundError: recipe is None
        ServiceValidationError: servings or base_servings not positive
    """
    if recipe is None:
        raise NotFoundError("Recipe not found")
    if servings is None or servings <= 0:
        raise ServiceValidationError(
            "Servings must be positive", details={"servings": servings}
        )
    if not recipe.base_servings or recipe.base_servings <= 0:
        raise ServiceValidationError(
            "Recipe base servings must be positive",
            details={"base_servings": recipe.base_servings},
        )

    ratio = servings / recipe.base_servings
    total = ZERO
    for row in recipe.ingredients or []:
        total = total + _ingredient_contribution(row.grams_per_base * ratio, row.ingredient)
    return total


def calc_recipe_per_serving(recipe: Any) -> Nutrition:
    return calc_nutrition(recipe, 1)


def scale_servings_for_target_kcal(recipe: Any, target_kcal: float) -> float:
    """
    Servings of `recipe` that deliver `target_kcal`, assuming nutrition is
    proportional to servings. The result is not rounded or clamped; use
    practical_servings() for a value to put on a plan.

    Raises:
        ServiceValidationError: target is not positive, or the recipe has no
            calories at its base serving count and cannot be scaled
    """
    if target_kcal is None or target_kcal <= 0:
        raise ServiceValidationError(
            "Target kcal must be positive", details={"target_kcal": target_kcal}
        )

    kcal_at_base = calc_nutrition(recipe, recipe.base_servings).kcal
    if kcal_at_base <= 0:
        raise ServiceValidationError(
            f"Recipe '{getattr(recipe, 'name', '')}' has no calories and cannot be scaled",
            details={"recipe_id": str(getattr(recipe, "recipe_id", ""))},
            code="ZERO_KCAL_RECIPE",
        )

    return target_kcal / kcal_at_base * recipe.base_servings


class NutritionService:
    """Recipe nutrition lookups by id."""

    @staticmethod
    def calc_recipe_nutrition(db: Session, recipe_id: UUID, servings: float) -> Nutrition:
        recipe = RecipeRepository(db).get_with_ingredients(recipe_id)
        if recipe is None:
            raise NotFoundError(f"Recipe {recipe_id} not found")
        return calc_nutrition(recipe, servings)

    @staticmethod
    def scale_recipe_to_kcal(db: Session, recipe_id: UUID, target_kcal: float) -> float:
        recipe = RecipeRepository(db).get_with_ingredients(recipe_id)
        if recipe is None:
            raise NotFoundError(f"Recipe {recipe_id} not found")
        servings = scale_servings_for_target_kcal(recipe, target_kcal)
        logger.debug("Recipe %s scales to %.3f servings for %s kcal", recipe_id, servings, target_kcal)
        return servings
