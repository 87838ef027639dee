"""Schemas for plan shopping lists"""

from typing import List
from uuid import UUID

from pydantic import BaseModel, Field


class ShoppingListItemResponse(BaseModel):
    """One aggregated ingredient with its display quantity"""

    ingredient_id: UUID
    ingredient: str
    total_grams: float = Field(..., description="Total grams across the plan, one decimal")
    display_amount: str = Field(..., description="Human-readable quantity, e.g. 130g or 1.5kg")
    kcal_per_100g: float
    protein_per_100g: float
    carbs_per_100g: float
    fat_per_100g: float

    model_config = {"from_attributes": True}


class ShoppingListNutrition(BaseModel):
    kcal: float
    protein: float
    carbs: float
    fat: float


class ShoppingListResponse(BaseModel):
    plan_id: UUID
    items: List[ShoppingListItemResponse] = Field(default_factory=list)
    total_items: int
    nutrition: ShoppingListNutrition
