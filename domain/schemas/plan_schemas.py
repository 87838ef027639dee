from __future__ import annotations

from typing import Dict, List, Optional
from uuid import UUID

from pydantic import BaseModel, Field

from domain.enums import MealSlot


class MealUpsertRequest(BaseModel):
    slot: MealSlot
    recipe_id: Optional[UUID] = None
    servings: float = Field(..., gt=0, le=20)


class AutoPopulateRequest(BaseModel):
    slots: Optional[List[MealSlot]] = Field(
        default=None, description="Slots to fill; defaults to the client's included meals"
    )
    slot_kcal_targets: Optional[Dict[MealSlot, float]] = Field(
        default=None, description="kcal per slot; defaults to an even split of the plan target"
    )


class MealResponse(BaseModel):
    meal_id: UUID
    slot: str
    recipe_id: Optional[UUID] = None
    recipe_name: Optional[str] = None
    servings: float
    kcal: float
    protein: float
    carbs: float
    fat: float


class MacroTotals(BaseModel):
    kcal: float
    protein: float
    carbs: float
    fat: float


class ToleranceResponse(BaseModel):
    kcal: bool
    protein: bool
    carbs: bool
    fat: bool
    overall: bool


class PlanResponse(BaseModel):
    plan_id: UUID
    client_id: UUID
    client_name: Optional[str] = None
    kcal_target: float
    protein_g: float
    carbs_g: float
    fat_g: float
    split_type: str
    formula: Optional[str] = None
    meals: List[MealResponse] = Field(default_factory=list)
    totals: MacroTotals
    within_tolerance: ToleranceResponse
