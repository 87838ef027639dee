from __future__ import annotations

from datetime import datetime
from typing import List, Optional
from uuid import UUID

from pydantic import BaseModel, Field

from domain.enums import MealSlot, SplitType


class ClientDraft(BaseModel):
    """
    Partial intake data. Every field is optional so the intake wizard can
    save after each step; only fields that are set are written on update.
    """

    full_name: Optional[str] = Field(default=None, max_length=80)
    gender: Optional[str] = None
    age: Optional[int] = Field(default=None, ge=0, le=120)
    height_cm: Optional[float] = Field(default=None, ge=0, le=300)
    weight_kg: Optional[float] = Field(default=None, ge=0, le=400)
    activity: Optional[str] = None
    goal: Optional[str] = None
    allergies: Optional[List[str]] = Field(default=None, max_length=30)
    cuisines: Optional[List[str]] = Field(default=None, max_length=30)
    dislikes: Optional[List[str]] = Field(default=None, max_length=50)
    include_meals: Optional[List[MealSlot]] = None


class ClientResponse(BaseModel):
    client_id: UUID
    full_name: str
    gender: str
    age: int
    height_cm: float
    weight_kg: float
    activity: str
    goal: str
    allergies: List[str] = Field(default_factory=list)
    cuisines: List[str] = Field(default_factory=list)
    dislikes: List[str] = Field(default_factory=list)
    include_meals: List[str] = Field(default_factory=list)
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = {"from_attributes": True}


class HeightUpdate(BaseModel):
    height_cm: float = Field(..., ge=100, le=250)


class CustomMacros(BaseModel):
    protein: float = Field(..., ge=0, le=500)
    carbs: float = Field(..., ge=0, le=800)
    fat: float = Field(..., ge=0, le=300)


class PlanCreate(BaseModel):
    kcal_target: float = Field(..., gt=0)
    protein_g: float = Field(..., ge=0)
    carbs_g: float = Field(..., ge=0)
    fat_g: float = Field(..., ge=0)
    split_type: SplitType = SplitType.BALANCED
    custom: Optional[CustomMacros] = None
    formula: Optional[str] = None
