"""Ingredient service - master ingredient data management."""

import logging
import re
from typing import Dict, List, Optional, Tuple
from uuid import UUID

from sqlalchemy.orm import Session

from app.exceptions import ConflictError, NotFoundError
from domain.models import Ingredient
from domain.schemas.ingredient_schemas import IngredientCreate
from repositories.ingredient_repository import IngredientRepository
from repositories.plan_repository import MealRepository
from services.nutrition_service import calc_nutrition

logger = logging.getLogger("macroplan.ingredient")

MATCH_CANDIDATES = 20
MATCH_LIMIT = 5

_PUNCTUATION_RE = re.compile(r"[^\w\s]")

# unit aliases -> canonical unit
_UNIT_ALIASES = {
    "g": "g", "gram": "g", "grams": "g",
    "ml": "ml", "milliliter": "ml", "milliliters": "ml",
    "tbsp": "tbsp", "tablespoon": "tbsp", "tablespoons": "tbsp",
    "tsp": "tsp", "teaspoon": "tsp", "teaspoons": "tsp",
    "cup": "cup", "cups": "cup",
    "fl oz": "fl oz", "fluid ounce": "fl oz", "fluid ounces": "fl oz",
    "oz": "oz", "ounce": "oz", "ounces": "oz",
    "lb": "lb", "lbs": "lb", "pound": "lb", "pounds": "lb",
    "piece": "piece", "pieces": "piece", "item": "piece", "items": "piece",
}

# (name keywords, grams per unit); first match wins, None keyword is the default
_GRAMS_PER_UNIT = {
    "tbsp": [(("oil", "butter"), 14), (("flour",), 8), (("sugar", "honey"), 20), (None, 15)],
    "tsp": [(("oil",), 4.5), (("salt",), 6), (("sugar",), 7), (None, 5)],
    "cup": [
        (("flour",), 125),
        (("sugar",), 200),
        (("rice",), 185),
        (("oats",), 80),
        (("nuts", "almond"), 140),
        (None, 240),
    ],
    "piece": [(("egg",), 50), (("banana",), 120), (("apple",), 180)],
}

_FIXED_GRAMS = {"fl oz": 30, "oz": 28.35, "lb": 453.592}


def tokenize(query: str) -> List[str]:
    """Lowercase words of a free-text query, punctuation and 1-char words dropped"""
    cleaned = _PUNCTUATION_RE.sub(" ", query.lower())
    return [t for t in cleaned.split() if len(t) > 1]


def match_score(name: str, query: str, tokens: List[str]) -> float:
    """
    Relevance of an ingredient name for a query: 100 for an exact match,
    80 when the name contains the whole query, otherwise 10 per token found
    at a word start, 5 per token found elsewhere, plus up to 20 for the
    share of tokens matched.
    """
    name_lower = name.lower()
    query_lower = query.lower()
    if name_lower == query_lower:
        return 100.0
    if query_lower in name_lower:
        return 80.0

    score = 0.0
    matched = 0
    for token in tokens:
        if token not in name_lower:
            continue
        matched += 1
        if name_lower.startswith(token) or f" {token}" in name_lower:
            score += 10
        else:
            score += 5
    if tokens:
        score += matched / len(tokens) * 20
    return score


def estimate_grams(qty: Optional[float], unit: Optional[str], name: Optional[str] = None) -> Dict:
    """
    Best-effort grams for a household quantity like "2 tbsp olive oil".

    Returns {"grams": ..., "approx": bool}, or {} when the unit is unknown
    or the quantity is missing. Only plain grams are exact.
    """
    if not qty or qty <= 0 or not unit:
        return {}

    canonical = _UNIT_ALIASES.get(unit.strip().lower())
    if canonical is None:
        return {}
    if canonical == "g":
        return {"grams": qty, "approx": False}
    if canonical == "ml":
        return {"grams": qty, "approx": True}
    if canonical in _FIXED_GRAMS:
        return {"grams": qty * _FIXED_GRAMS[canonical], "approx": True}

    name_lower = (name or "").lower()
    for keywords, grams in _GRAMS_PER_UNIT[canonical]:
        if keywords is None or any(k in name_lower for k in keywords):
            return {"grams": qty * grams, "approx": True}
    return {}


class IngredientService:
    """Business logic for ingredient master data management."""

    @staticmethod
    def list_ingredients(
        db: Session, search: Optional[str] = None, page: int = 1, page_size: int = 20
    ) -> Tuple[List[Ingredient], int]:
        skip = (max(page, 1) - 1) * page_size
        return IngredientRepository(db).list_page(search=search, skip=skip, limit=page_size)

    @staticmethod
    def get_ingredient(db: Session, ingredient_id: UUID) -> Ingredient:
        ingredient = IngredientRepository(db).get_by_id(ingredient_id)
        if ingredient is None:
            raise NotFoundError(f"Ingredient {ingredient_id} not found")
        return ingredient

    @staticmethod
    def _ensure_unique_name(repo: IngredientRepository, name: str, exclude_id: Optional[UUID] = None) -> None:
        if repo.get_by_name(name, exclude_id=exclude_id) is not None:
            raise ConflictError(f"Ingredient '{name}' already exists", details={"name": name})

    @staticmethod
    def create_ingredient(db: Session, data: IngredientCreate) -> Ingredient:
        """
        Create an ingredient.

        Raises:
            ConflictError: another ingredient has the same name (ignoring case)
        """
        repo = IngredientRepository(db)
        IngredientService._ensure_unique_name(repo, data.name)
        ingredient = repo.create(Ingredient(**data.model_dump()))
        logger.info("Created ingredient %s '%s'", ingredient.ingredient_id, ingredient.name)
        return ingredient

    @staticmethod
    def update_ingredient(db: Session, ingredient_id: UUID, data: IngredientCreate) -> Ingredient:
        """
        Replace an ingredient's fields. Meals whose recipe uses it get their
        cached nutrition recomputed in the same transaction.
        """
        repo = IngredientRepository(db)
        ingredient = IngredientService.get_ingredient(db, ingredient_id)
        IngredientService._ensure_unique_name(repo, data.name, exclude_id=ingredient_id)

        try:
            for field, value in data.model_dump().items():
                setattr(ingredient, field, value)
            db.flush()
            meals = MealRepository(db).using_ingredient(ingredient_id)
            for meal in meals:
                n = calc_nutrition(meal.recipe, meal.servings)
                meal.kcal, meal.protein, meal.carbs, meal.fat = n.kcal, n.protein, n.carbs, n.fat
            db.commit()
        except Exception:
            db.rollback()
            raise
        db.refresh(ingredient)
        logger.info("Updated ingredient %s (%d meal snapshots refreshed)", ingredient_id, len(meals))
        return ingredient

    @staticmethod
    def delete_ingredient(db: Session, ingredient_id: UUID) -> None:
        """
        Delete an ingredient that no recipe uses.

        Raises:
            NotFoundError: unknown id
            ConflictError: the ingredient is part of at least one recipe
        """
        repo = IngredientRepository(db)
        ingredient = IngredientService.get_ingredient(db, ingredient_id)
        usage = repo.count_recipe_usage(ingredient_id)
        if usage:
            raise ConflictError(
                f"Ingredient '{ingredient.name}' is used by {usage} recipe rows",
                details={"ingredient_id": str(ingredient_id), "recipe_rows": usage},
            )
        repo.delete(ingredient_id)
        logger.info("Deleted ingredient %s", ingredient_id)

    @staticmethod
    def suggest_matches(db: Session, query: str) -> List[Dict]:
        """Up to five scored ingredient suggestions for a free-text name."""
        if not query or len(query) < 2:
            return []
        tokens = tokenize(query)
        if not tokens:
            return []

        candidates = IngredientRepository(db).search_by_tokens(tokens, limit=MATCH_CANDIDATES)
        scored = [
            {"ingredient_id": i.ingredient_id, "name": i.name, "score": match_score(i.name, query, tokens)}
            for i in candidates
        ]
        scored = [s for s in scored if s["score"] > 0]
        scored.sort(key=lambda s: s["score"], reverse=True)
        return scored[:MATCH_LIMIT]
