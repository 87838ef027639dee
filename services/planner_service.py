from __future__ import annotations

import logging
import uuid
from typing import Any, Dict, Iterable, List, Optional

from sqlalchemy.orm import Session

from app.config import settings
from app.exceptions import NotFoundError, ServiceValidationError
from domain.enums import MealSlot
from domain.models import Meal, Plan
from repositories.plan_repository import MealRepository, PlanRepository
from repositories.recipe_repository import RecipeRepository
from services.macro_service import slot_targets
from services.nutrition_service import (
    ZERO,
    Nutrition,
    calc_nutrition,
    clamp,
    practical_servings,
    round_to_quarter,
    scale_servings_for_target_kcal,
    sum_macros,
)


logger = logging.getLogger("macroplan.planner")

DEFAULT_SLOTS = [MealSlot.BREAKFAST.value, MealSlot.LUNCH.value, MealSlot.DINNER.value]
AUTO_POPULATE_RECIPE_LIMIT = 20


def rebalance_servings(meals: Iterable[Any], target_kcal: float) -> Optional[List[float]]:
    """
    New servings that scale every meal by the same factor toward target_kcal.

    Each value is rounded to the nearest quarter and clamped to the
    configured serving range, so the resulting total can miss the target.
    Returns None when there is nothing to scale (no meals or zero kcal).
    """
    meals = list(meals)
    if not meals:
        return None

    current_total = sum(m.kcal or 0 for m in meals)
    if current_total == 0:
        return None

    factor = target_kcal / current_total
    return [
        clamp(round_to_quarter(m.servings * factor), settings.min_servings, settings.max_servings)
        for m in meals
    ]


def _slot_value(slot: Any) -> str:
    value = slot.value if isinstance(slot, MealSlot) else str(slot)
    try:
        return MealSlot(value).value
    except ValueError:
        raise ServiceValidationError(
            f"Unknown meal slot '{value}'",
            details={"allowed": [s.value for s in MealSlot]},
        )


class PlannerService:
    """
    Meal planning:
    - one meal per plan slot, each caching its recipe's nutrition
    - auto-population from the recipe library toward per-slot kcal targets
    - proportional rebalancing toward the plan's kcal target
    """

    def __init__(self, db: Session):
        self.db: Session = db
        self.plans = PlanRepository(db)
        self.meals = MealRepository(db)
        self.recipes = RecipeRepository(db)

    # ---------- queries ----------

    def get_plan(self, plan_id: uuid.UUID) -> Plan:
        plan = self.plans.get_with_meals(plan_id)
        if plan is None:
            raise NotFoundError(f"Plan {plan_id} not found")
        return plan

    @staticmethod
    def meal_snapshot(meal: Meal) -> Nutrition:
        return Nutrition(kcal=meal.kcal, protein=meal.protein, carbs=meal.carbs, fat=meal.fat)

    @staticmethod
    def plan_totals(plan: Plan) -> Nutrition:
        """Sum of the cached meal snapshots"""
        return sum_macros(*(PlannerService.meal_snapshot(m) for m in plan.meals))

    @staticmethod
    def plan_target(plan: Plan) -> Nutrition:
        return Nutrition(kcal=plan.kcal_target, protein=plan.protein_g, carbs=plan.carbs_g, fat=plan.fat_g)

    # ---------- meal writes ----------

    @staticmethod
    def _apply_snapshot(meal: Meal, nutrition: Nutrition) -> None:
        meal.kcal = nutrition.kcal
        meal.protein = nutrition.protein
        meal.carbs = nutrition.carbs
        meal.fat = nutrition.fat

    def _snapshot_for(self, recipe, servings: float) -> Nutrition:
        if recipe is None:
            return ZERO
        return calc_nutrition(recipe, servings)

    def _stage_meal(self, plan_id: uuid.UUID, slot: str, recipe, servings: float) -> Meal:
        """Create or update the meal in a slot without committing"""
        if servings is None or servings <= 0:
            raise ServiceValidationError("Servings must be positive", details={"servings": servings})

        nutrition = self._snapshot_for(recipe, servings)
        meal = self.meals.get_by_plan_and_slot(plan_id, slot)
        if meal is None:
            meal = Meal(plan_id=plan_id, slot=slot)
            self.db.add(meal)

        meal.recipe_id = recipe.recipe_id if recipe is not None else None
        meal.recipe = recipe
        meal.servings = servings
        self._apply_snapshot(meal, nutrition)
        return meal

    def upsert_meal(
        self,
        plan_id: uuid.UUID,
        slot: Any,
        recipe_id: Optional[uuid.UUID],
        servings: float,
    ) -> Meal:
        """Put a recipe (or nothing) in a plan slot and recompute its snapshot."""
        slot_name = _slot_value(slot)
        if self.plans.get_by_id(plan_id) is None:
            raise NotFoundError(f"Plan {plan_id} not found")

        recipe = None
        if recipe_id is not None:
            recipe = self.recipes.get_with_ingredients(recipe_id)
            if recipe is None:
                raise NotFoundError(f"Recipe {recipe_id} not found")

        try:
            meal = self._stage_meal(plan_id, slot_name, recipe, servings)
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise
        self.db.refresh(meal)

        logger.info(
            "Plan %s slot %s -> recipe=%s servings=%.2f kcal=%.1f",
            plan_id, slot_name, recipe_id, servings, meal.kcal,
        )
        return meal

    def delete_meal(self, meal_id: uuid.UUID) -> None:
        if not self.meals.delete(meal_id):
            raise NotFoundError(f"Meal {meal_id} not found")
        logger.info("Deleted meal %s", meal_id)

    def delete_plan(self, plan_id: uuid.UUID) -> None:
        """Delete a plan and every meal in it"""
        if not self.plans.delete(plan_id):
            raise NotFoundError(f"Plan {plan_id} not found")
        logger.info("Deleted plan %s", plan_id)

    # ---------- auto population ----------

    def auto_populate_meals(
        self,
        plan_id: uuid.UUID,
        slots: Optional[List[Any]] = None,
        slot_kcal_targets: Optional[Dict[Any, float]] = None,
    ) -> List[Meal]:
        """
        Fill slots round-robin from the recipe library, sizing each meal to
        its slot's kcal target (quarter servings, clamped).
        """
        plan = self.get_plan(plan_id)

        if not slots:
            slots = list(plan.client.include_meals or []) if plan.client else []
            slots = slots or list(DEFAULT_SLOTS)
        slot_names = list(dict.fromkeys(_slot_value(s) for s in slots))

        if slot_kcal_targets:
            targets = {_slot_value(k): float(v) for k, v in slot_kcal_targets.items()}
        else:
            even = slot_targets(plan.kcal_target, plan.protein_g, plan.carbs_g, plan.fat_g, slot_names)
            targets = {slot: t["kcal"] for slot, t in even.items()}

        missing = [s for s in slot_names if s not in targets]
        if missing:
            raise ServiceValidationError("Missing kcal target for slots", details={"slots": missing})

        recipes = self.recipes.list_for_planning(limit=AUTO_POPULATE_RECIPE_LIMIT)
        if not recipes:
            raise ServiceValidationError("No recipes available. Please seed some recipes first.")

        staged: List[Meal] = []
        try:
            for i, slot in enumerate(slot_names):
                recipe = recipes[i % len(recipes)]
                try:
                    servings = practical_servings(scale_servings_for_target_kcal(recipe, targets[slot]))
                except ServiceValidationError as e:
                    logger.warning("Slot %s: %s; using 1 serving", slot, e)
                    servings = 1.0
                staged.append(self._stage_meal(plan_id, slot, recipe, servings))
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise

        for meal in staged:
            self.db.refresh(meal)
        logger.info("Auto-populated %d meals for plan %s", len(staged), plan_id)
        return staged

    # ---------- rebalancing ----------

    def rebalance_plan(self, plan_id: uuid.UUID) -> List[Meal]:
        """
        Scale every meal's servings by target / current kcal in one pass.

        Servings are rounded to quarters and clamped, so the new total may
        not hit the target exactly. Plans with no meals or no calories are
        returned unchanged.
        """
        plan = self.get_plan(plan_id)
        meals = list(plan.meals)

        new_servings = rebalance_servings(meals, plan.kcal_target)
        if new_servings is None:
            logger.info("Plan %s has nothing to rebalance", plan_id)
            return meals

        try:
            for meal, servings in zip(meals, new_servings):
                meal.servings = servings
                self._apply_snapshot(meal, self._snapshot_for(meal.recipe, servings))
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise

        for meal in meals:
            self.db.refresh(meal)

        logger.info(
            "Rebalanced plan %s toward %.0f kcal: now %.1f kcal",
            plan_id, plan.kcal_target, sum(m.kcal for m in meals),
        )
        return meals
