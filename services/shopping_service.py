"""Shopping list service"""

from __future__ import annotations

import logging
import re
import unicodedata
from dataclasses import dataclass, asdict
from typing import Any, Dict, Iterable, List
from uuid import UUID

from sqlalchemy.orm import Session

from app.exceptions import NotFoundError, ServiceValidationError
from repositories.plan_repository import PlanRepository
from services.nutrition_service import Nutrition, round_half_up

logger = logging.getLogger("macroplan.shopping")

_AMOUNT_RE = re.compile(r"^\s*(\d+(?:\.\d+)?)\s*(mg|g|kg)\s*$", re.IGNORECASE)
_UNIT_TO_GRAMS = {"mg": 0.001, "g": 1.0, "kg": 1000.0}


@dataclass
class ShoppingListItem:
    ingredient_id: UUID
    ingredient: str
    total_grams: float
    display_amount: str
    kcal_per_100g: float
    protein_per_100g: float
    carbs_per_100g: float
    fat_per_100g: float

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


def format_amount(grams: float) -> str:
    """
    Human-readable quantity for a gram total.

    < 1 g is shown in milligrams, < 1000 g in whole grams, anything larger
    in kilograms with one decimal. A value that rounds up to the next unit
    is shown in that unit ("1g" rather than "1000mg") so that parsing the
    output and formatting again gives the same string.
    """
    if grams < 0:
        raise ServiceValidationError("Amount cannot be negative", details={"grams": grams})

    if grams < 1:
        mg = int(round_half_up(grams * 1000))
        if mg < 1000:
            return f"{mg}mg"
        grams = 1.0

    if grams < 1000:
        whole = int(round_half_up(grams))
        if whole < 1000:
            return f"{whole}g"

    kg = round_half_up(grams / 100) / 10
    if kg.is_integer():
        return f"{int(kg)}kg"
    return f"{kg:.1f}kg"


def parse_amount(display: str) -> float:
    """Grams represented by a format_amount() string."""
    match = _AMOUNT_RE.match(display or "")
    if not match:
        raise ServiceValidationError("Unrecognised amount", details={"amount": display})
    value, unit = match.groups()
    return float(value) * _UNIT_TO_GRAMS[unit.lower()]


def _name_sort_key(name: str):
    # Accent- and case-insensitive first, raw name breaks ties
    folded = unicodedata.normalize("NFKD", name)
    base = "".join(ch for ch in folded if not unicodedata.combining(ch)).casefold()
    return (base, name.casefold(), name)


def aggregate_ingredients(meals: Iterable[Any]) -> List[ShoppingListItem]:
    """
    Sum the grams of every ingredient across meals.

    Each meal contributes grams_per_base * servings / base_servings of every
    ingredient row of its recipe. Totals are keyed by ingredient id, so the
    same ingredient used by several recipes accumulates into one line.
    Meals without a recipe contribute nothing.
    """
    totals: Dict[Any, Dict[str, Any]] = {}

    for meal in meals:
        recipe = meal.recipe
        if recipe is None:
            continue
        if not recipe.base_servings or recipe.base_servings <= 0:
            raise ServiceValidationError(
                "Recipe base servings must be positive",
                details={"recipe_id": str(getattr(recipe, "recipe_id", ""))},
            )

        ratio = meal.servings / recipe.base_servings
        for row in recipe.ingredients or []:
            ingredient = row.ingredient
            key = ingredient.ingredient_id
            scaled = row.grams_per_base * ratio
            if key in totals:
                totals[key]["grams"] += scaled
            else:
                totals[key] = {"grams": scaled, "ingredient": ingredient}

    items = []
    for key, data in totals.items():
        ingredient = data["ingredient"]
        total_grams = round_half_up(data["grams"], 1)
        items.append(
            ShoppingListItem(
                ingredient_id=key,
                ingredient=ingredient.name,
                total_grams=total_grams,
                display_amount=format_amount(total_grams),
                kcal_per_100g=ingredient.kcal_per_100g,
                protein_per_100g=ingredient.protein_per_100g,
                carbs_per_100g=ingredient.carbs_per_100g,
                fat_per_100g=ingredient.fat_per_100g,
            )
        )

    items.sort(key=lambda item: _name_sort_key(item.ingredient))
    return items


def calculate_shopping_list_nutrition(items: Iterable[ShoppingListItem]) -> Nutrition:
    """Total nutrition of everything on a shopping list"""
    total = Nutrition()
    for item in items:
        factor = item.total_grams / 100
        total = total + Nutrition(
            kcal=item.kcal_per_100g * factor,
            protein=item.protein_per_100g * factor,
            carbs=item.carbs_per_100g * factor,
            fat=item.fat_per_100g * factor,
        )
    return total


class ShoppingService:
    """Business logic for shopping list generation."""

    @staticmethod
    def compute_shopping_list(db: Session, plan_id: UUID) -> List[ShoppingListItem]:
        """
        Aggregate the ingredients needed for every meal of a plan.

        Args:
            db: Database session
            plan_id: Plan UUID

        Returns:
            Items sorted by ingredient name; empty when the plan has no meals

        Raises:
            NotFoundError: If the plan does not exist
        """
        plan = PlanRepository(db).get_with_meals(plan_id)
        if plan is None:
            raise NotFoundError(f"Plan {plan_id} not found")

        if not plan.meals:
            logger.info("Plan %s has no meals, shopping list is empty", plan_id)
            return []

        items = aggregate_ingredients(plan.meals)
        logger.info(
            "Shopping list for plan %s: %d meals, %d ingredients",
            plan_id,
            len(plan.meals),
            len(items),
        )
        return items
