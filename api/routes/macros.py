"""Macro target calculator routes"""

from fastapi import APIRouter
import logging

from api.responses import ERROR_RESPONSES
from domain.enums import SplitType
from domain.schemas.macro_schemas import MacroTargetsRequest, MacroTargetsResponse
from services.macro_service import compute_targets, kcal_to_kj

router = APIRouter(prefix="/macros", tags=["Macros"], responses=ERROR_RESPONSES)
logger = logging.getLogger("macroplan.api.macros")


@router.post("/targets", response_model=MacroTargetsResponse)
def macro_targets(body: MacroTargetsRequest):
    """
    BMR, TDEE, daily kcal target and gram targets for a client's stats.

    For split_type=custom the custom gram targets are scaled so they supply
    exactly the kcal target.
    """
    custom = None
    if body.split_type == SplitType.CUSTOM:
        custom = {
            "protein": body.custom_protein_g,
            "carbs": body.custom_carbs_g,
            "fat": body.custom_fat_g,
        }

    targets = compute_targets(
        sex=body.sex,
        age=body.age,
        height_cm=body.height_cm,
        weight_kg=body.weight_kg,
        activity=body.activity,
        goal=body.goal,
        formula=body.formula,
        split_type=body.split_type,
        body_fat_pct=body.body_fat_pct,
        custom=custom,
    )

    return MacroTargetsResponse(
        bmr=targets.bmr,
        tdee=targets.tdee,
        kcal_target=targets.kcal_target,
        kj_target=round(kcal_to_kj(targets.kcal_target)) if body.show_kj else None,
        protein_g=targets.protein_g,
        carbs_g=targets.carbs_g,
        fat_g=targets.fat_g,
        split_type=targets.split_type,
        formula=targets.formula,
    )
