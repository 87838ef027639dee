"""
Plan domain mappers.
Handles transformation between ORM plans/meals and their response DTOs.
"""

from typing import List

from domain.models import Meal, Plan
from domain.schemas.plan_schemas import MacroTotals, MealResponse, PlanResponse, ToleranceResponse
from domain.schemas.shopping_schemas import (
    ShoppingListItemResponse,
    ShoppingListNutrition,
    ShoppingListResponse,
)
from services.nutrition_service import is_within_tolerance
from services.planner_service import PlannerService
from services.shopping_service import ShoppingListItem, calculate_shopping_list_nutrition


class PlanMapper:
    """Mapper for plan, meal and shopping list transformations."""

    @staticmethod
    def meal_to_response(meal: Meal) -> MealResponse:
        return MealResponse(
            meal_id=meal.meal_id,
            slot=meal.slot,
            recipe_id=meal.recipe_id,
            recipe_name=meal.recipe.name if meal.recipe is not None else None,
            servings=meal.servings,
            kcal=meal.kcal,
            protein=meal.protein,
            carbs=meal.carbs,
            fat=meal.fat,
        )

    @staticmethod
    def to_response(plan: Plan) -> PlanResponse:
        """
        Convert ORM Plan to PlanResponse DTO.

        Totals are the sum of the meals' cached snapshots; the tolerance
        check compares them against the plan's targets.
        """
        totals = PlannerService.plan_totals(plan)
        tolerance = is_within_tolerance(totals, PlannerService.plan_target(plan))

        return PlanResponse(
            plan_id=plan.plan_id,
            client_id=plan.client_id,
            client_name=plan.client.full_name if plan.client is not None else None,
            kcal_target=plan.kcal_target,
            protein_g=plan.protein_g,
            carbs_g=plan.carbs_g,
            fat_g=plan.fat_g,
            split_type=plan.split_type,
            formula=plan.formula,
            meals=[PlanMapper.meal_to_response(m) for m in plan.meals],
            totals=MacroTotals(**totals.to_dict()),
            within_tolerance=ToleranceResponse(**tolerance),
        )

    @staticmethod
    def shopping_list_to_response(plan_id, items: List[ShoppingListItem]) -> ShoppingListResponse:
        nutrition = calculate_shopping_list_nutrition(items)
        return ShoppingListResponse(
            plan_id=plan_id,
            items=[ShoppingListItemResponse(**item.to_dict()) for item in items],
            total_items=len(items),
            nutrition=ShoppingListNutrition(**nutrition.to_dict()),
        )
