"""Plan export - a JSON-ready snapshot of a plan and its shopping list."""

import logging
from datetime import datetime, timezone
from typing import Any, Dict
from uuid import UUID

from sqlalchemy.orm import Session

from app.config import settings
from services.nutrition_service import format_macros, is_within_tolerance, macro_percentages
from services.planner_service import PlannerService
from services.shopping_service import aggregate_ingredients, calculate_shopping_list_nutrition

logger = logging.getLogger("macroplan.export")

EXPORT_VERSION = "1.0"


def export_plan(db: Session, plan_id: UUID) -> Dict[str, Any]:
    """
    Everything needed to print or archive a plan, as plain JSON types.

    Raises:
        NotFoundError: If the plan does not exist
    """
    planner = PlannerService(db)
    plan = planner.get_plan(plan_id)

    totals = planner.plan_totals(plan)
    target = planner.plan_target(plan)
    items = aggregate_ingredients(plan.meals)
    client = plan.client

    export = {
        "export_date": datetime.now(timezone.utc).isoformat(),
        "version": EXPORT_VERSION,
        "app": settings.app_name,
        "plan_id": str(plan.plan_id),
        "created_at": plan.created_at.isoformat() if plan.created_at else None,
        "client": {
            "client_id": str(client.client_id),
            "full_name": client.full_name,
            "gender": client.gender,
            "age": client.age,
            "height_cm": client.height_cm,
            "weight_kg": client.weight_kg,
            "activity": client.activity,
            "goal": client.goal,
            "allergies": list(client.allergies or []),
        } if client is not None else None,
        "targets": {
            "kcal": plan.kcal_target,
            "protein": plan.protein_g,
            "carbs": plan.carbs_g,
            "fat": plan.fat_g,
            "split_type": plan.split_type,
            "formula": plan.formula,
            **macro_percentages(plan.protein_g, plan.carbs_g, plan.fat_g),
        },
        "meals": [
            {
                "slot": meal.slot,
                "recipe_id": str(meal.recipe_id) if meal.recipe_id else None,
                "recipe": meal.recipe.name if meal.recipe is not None else None,
                "servings": meal.servings,
                **format_macros(planner.meal_snapshot(meal)),
            }
            for meal in plan.meals
        ],
        "totals": format_macros(totals),
        "within_tolerance": is_within_tolerance(totals, target),
        "shopping_list": [
            {
                "ingredient": item.ingredient,
                "total_grams": item.total_grams,
                "amount": item.display_amount,
            }
            for item in items
        ],
        "shopping_list_nutrition": format_macros(calculate_shopping_list_nutrition(items)),
    }

    logger.info("Exported plan %s: %d meals, %d shopping items", plan_id, len(plan.meals), len(items))
    return export
