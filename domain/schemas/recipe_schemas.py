"""Schemas for recipe management"""

from __future__ import annotations

from datetime import datetime
from typing import List, Optional
from uuid import UUID

from pydantic import BaseModel, Field

from domain.enums import Difficulty


class RecipeIngredientRow(BaseModel):
    """One ingredient line of a recipe form"""

    ingredient_id: UUID
    grams_per_base: float = Field(..., gt=0, description="Grams per base serving (clamped to 1-5000)")


class RecipeCreate(BaseModel):
    title: str = Field(..., min_length=2, max_length=120)
    cuisine: Optional[str] = Field(default=None, max_length=60)
    difficulty: Optional[Difficulty] = None
    utensils: List[str] = Field(default_factory=list, max_length=20)
    base_servings: float = Field(..., ge=0.5, le=20)
    instructions: str = Field(..., min_length=5)
    ingredients: List[RecipeIngredientRow] = Field(..., min_length=1)


class RecipeIngredientResponse(BaseModel):
    ingredient_id: UUID
    ingredient_name: str
    grams_per_base: float
    kcal_per_100g: float
    protein_per_100g: float
    carbs_per_100g: float
    fat_per_100g: float


class NutritionResponse(BaseModel):
    kcal: float
    protein: float
    carbs: float
    fat: float


class RecipeResponse(BaseModel):
    recipe_id: UUID
    name: str
    cuisine: Optional[str] = None
    difficulty: Optional[str] = None
    utensils: List[str] = Field(default_factory=list)
    base_servings: float
    instructions: str
    ingredients: List[RecipeIngredientResponse] = Field(default_factory=list)
    per_serving: NutritionResponse
    created_at: Optional[datetime] = None


class RecipeSummary(BaseModel):
    """List view of a recipe with rounded per-serving nutrition"""

    recipe_id: UUID
    name: str
    cuisine: Optional[str] = None
    difficulty: Optional[str] = None
    base_servings: float
    ingredient_count: int
    kcal_per_serving: int
    protein_per_serving: int
    carbs_per_serving: int
    fat_per_serving: int


class ServingScaleResponse(BaseModel):
    recipe_id: UUID
    target_kcal: float
    servings: float
    practical_servings: float
