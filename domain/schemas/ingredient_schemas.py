from __future__ import annotations

from datetime import datetime
from typing import List, Optional
from uuid import UUID

from pydantic import BaseModel, Field, field_validator


class IngredientCreate(BaseModel):
    name: str = Field(..., min_length=2, max_length=120)
    kcal_per_100g: float = Field(..., ge=0)
    protein_per_100g: float = Field(..., ge=0)
    carbs_per_100g: float = Field(..., ge=0)
    fat_per_100g: float = Field(..., ge=0)
    allergens: List[str] = Field(default_factory=list)

    @field_validator("name", mode="before")
    @classmethod
    def strip_name(cls, v):
        return v.strip() if isinstance(v, str) else v

    @field_validator("allergens")
    @classmethod
    def clean_allergens(cls, v):
        return [a.strip() for a in v if a and a.strip()]


class IngredientResponse(BaseModel):
    ingredient_id: UUID
    name: str
    kcal_per_100g: float
    protein_per_100g: float
    carbs_per_100g: float
    fat_per_100g: float
    allergens: List[str] = Field(default_factory=list)
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = {"from_attributes": True}


class IngredientMatch(BaseModel):
    """Scored name suggestion for free-text ingredient lookup"""

    ingredient_id: UUID
    name: str
    score: float


class GramEstimate(BaseModel):
    grams: Optional[float] = None
    approx: bool = False
