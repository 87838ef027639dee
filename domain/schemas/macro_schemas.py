from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, Field, model_validator

from domain.enums import BmrFormula, SplitType


class MacroInput(BaseModel):
    sex: str = Field(..., pattern="^(male|female)$")
    age: int = Field(..., ge=10, le=100)
    height_cm: float = Field(..., ge=100, le=250)
    weight_kg: float = Field(..., ge=30, le=300)
    activity: str = Field(..., min_length=1)
    goal: str = Field(..., min_length=1)
    formula: BmrFormula = BmrFormula.MIFFLIN
    body_fat_pct: Optional[float] = Field(default=None, gt=0, lt=70)
    show_kj: bool = False

    @model_validator(mode="after")
    def katch_needs_body_fat(self):
        if self.formula == BmrFormula.KATCH and self.body_fat_pct is None:
            raise ValueError("body_fat_pct is required for the Katch-McArdle formula")
        return self


class MacroTargetsRequest(MacroInput):
    split_type: SplitType = SplitType.BALANCED
    custom_protein_g: Optional[float] = Field(default=None, ge=0, le=500)
    custom_carbs_g: Optional[float] = Field(default=None, ge=0, le=800)
    custom_fat_g: Optional[float] = Field(default=None, ge=0, le=300)


class MacroTargetsResponse(BaseModel):
    bmr: float
    tdee: float
    kcal_target: int
    kj_target: Optional[float] = None
    protein_g: int
    carbs_g: int
    fat_g: int
    split_type: SplitType
    formula: BmrFormula
