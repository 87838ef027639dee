from __future__ import annotations

import logging
from typing import Any, Dict, Optional
from uuid import UUID

from fastapi import APIRouter, Body, Depends, status
from sqlalchemy.orm import Session

from api.responses import ERROR_RESPONSES
from domain.mappers import PlanMapper
from domain.models import get_db_session
from domain.schemas.plan_schemas import AutoPopulateRequest, MealResponse, MealUpsertRequest, PlanResponse
from domain.schemas.shopping_schemas import ShoppingListResponse
from services.export_service import export_plan
from services.planner_service import PlannerService
from services.shopping_service import ShoppingService

router = APIRouter(prefix="/plans", tags=["Meal Planning"], responses=ERROR_RESPONSES)
logger = logging.getLogger("macroplan.api.plans")


@router.get("/{plan_id}", response_model=PlanResponse)
def get_plan(plan_id: UUID, db: Session = Depends(get_db_session)):
    """Plan with its meals, totals and tolerance check"""
    return PlanMapper.to_response(PlannerService(db).get_plan(plan_id))


@router.delete("/{plan_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_plan(plan_id: UUID, db: Session = Depends(get_db_session)):
    PlannerService(db).delete_plan(plan_id)


@router.put("/{plan_id}/meals", response_model=MealResponse)
def upsert_meal(plan_id: UUID, body: MealUpsertRequest, db: Session = Depends(get_db_session)):
    """
    Put a recipe in a slot (replacing whatever was there).

    The meal's nutrition is always recomputed from the recipe and servings;
    a null recipe_id leaves the slot empty with zero nutrition.
    """
    meal = PlannerService(db).upsert_meal(plan_id, body.slot, body.recipe_id, body.servings)
    return PlanMapper.meal_to_response(meal)


@router.delete("/meals/{meal_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_meal(meal_id: UUID, db: Session = Depends(get_db_session)):
    PlannerService(db).delete_meal(meal_id)


@router.post("/{plan_id}/auto-populate", response_model=PlanResponse)
def auto_populate(
    plan_id: UUID,
    body: Optional[AutoPopulateRequest] = Body(default=None),
    db: Session = Depends(get_db_session),
):
    """Fill slots from the recipe library sized to each slot's kcal target"""
    body = body or AutoPopulateRequest()
    planner = PlannerService(db)
    planner.auto_populate_meals(
        plan_id,
        slots=body.slots,
        slot_kcal_targets=body.slot_kcal_targets,
    )
    return PlanMapper.to_response(planner.get_plan(plan_id))


@router.post("/{plan_id}/rebalance", response_model=PlanResponse)
def rebalance(plan_id: UUID, db: Session = Depends(get_db_session)):
    """Scale every meal's servings toward the plan's kcal target"""
    planner = PlannerService(db)
    planner.rebalance_plan(plan_id)
    return PlanMapper.to_response(planner.get_plan(plan_id))


@router.get("/{plan_id}/shopping-list", response_model=ShoppingListResponse)
def get_shopping_list(plan_id: UUID, db: Session = Depends(get_db_session)):
    """
    Aggregated ingredients for every meal of the plan.

    Returns:
        Items sorted by ingredient name, each with total grams and a display
        amount (e.g. "130g", "1.5kg"), plus the list's total nutrition
    """
    items = ShoppingService.compute_shopping_list(db, plan_id)
    return PlanMapper.shopping_list_to_response(plan_id, items)


@router.get("/{plan_id}/export", response_model=Dict[str, Any])
def export(plan_id: UUID, db: Session = Depends(get_db_session)):
    """JSON export of the plan, its totals and shopping list"""
    return export_plan(db, plan_id)
