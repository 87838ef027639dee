"""
Macro target engine: BMR, TDEE, calorie targets and gram targets for a
macro split. Functions only, no persistence.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Dict, Iterable, Optional

from app.exceptions import ServiceValidationError
from domain.enums import ACTIVITY_LEVELS, GOALS, BmrFormula, SplitType
from services.nutrition_service import KCAL_PER_G_CARBS, KCAL_PER_G_FAT, KCAL_PER_G_PROTEIN, round_half_up

logger = logging.getLogger("macroplan.macros")

ACTIVITY_FACTORS: Dict[str, float] = dict(
    zip(ACTIVITY_LEVELS, (1.0, 1.2, 1.375, 1.55, 1.725, 1.9, 1.95))
)
DEFAULT_ACTIVITY_FACTOR = 1.2

GOAL_DELTAS: Dict[str, int] = dict(
    zip(GOALS, (0, -250, -500, -1000, 250, 500, 1000))
)
MAX_GOAL_DELTA = 1000

# carbs / protein / fat percentages of total energy
PRESETS: Dict[SplitType, Dict[str, int]] = {
    SplitType.BALANCED: {"carbs": 50, "protein": 25, "fat": 25},
    SplitType.LOW_FAT: {"carbs": 60, "protein": 25, "fat": 15},
    SplitType.LOW_CARB: {"carbs": 25, "protein": 40, "fat": 35},
    SplitType.HIGH_PROTEIN: {"carbs": 35, "protein": 40, "fat": 25},
}

_LEGACY_ACTIVITY = {
    "BMR": ACTIVITY_LEVELS[0],
    "Sedentary": ACTIVITY_LEVELS[1],
    "Light": ACTIVITY_LEVELS[2],
    "Moderate": ACTIVITY_LEVELS[3],
    "Active": ACTIVITY_LEVELS[4],
    "Very Active": ACTIVITY_LEVELS[5],
    "Extra Active": ACTIVITY_LEVELS[6],
}

_LEGACY_GOAL = {
    "Maintain": GOALS[0],
    "Mild loss": GOALS[1],
    "Loss": GOALS[2],
    "Extreme loss": GOALS[3],
    "Mild gain": GOALS[4],
    "Gain": GOALS[5],
    "Extreme gain": GOALS[6],
}

KJ_PER_KCAL = 4.184
CM_PER_INCH = 2.54


@dataclass(frozen=True)
class MacroGrams:
    protein: int
    carbs: int
    fat: int


@dataclass(frozen=True)
class MacroTargets:
    bmr: float
    tdee: float
    kcal_target: int
    protein_g: int
    carbs_g: int
    fat_g: int
    split_type: SplitType
    formula: BmrFormula


# ---------- BMR ----------


def bmr_mifflin_st_jeor(sex: str, age: float, height_cm: float, weight_kg: float) -> float:
    base = 10 * weight_kg + 6.25 * height_cm - 5 * age
    return base + 5 if sex.lower() == "male" else base - 161


def bmr_harris_benedict(sex: str, age: float, height_cm: float, weight_kg: float) -> float:
    """Revised Harris-Benedict equation"""
    if sex.lower() == "male":
        return 88.362 + 13.397 * weight_kg + 4.799 * height_cm - 5.677 * age
    return 447.593 + 9.247 * weight_kg + 3.098 * height_cm - 4.330 * age


def bmr_katch_mcardle(body_fat_pct: float, weight_kg: float) -> float:
    lean_mass = weight_kg * (1 - body_fat_pct / 100)
    return 370 + 21.6 * lean_mass


def bmr(
    formula: BmrFormula,
    sex: str,
    age: float,
    height_cm: float,
    weight_kg: float,
    body_fat_pct: Optional[float] = None,
) -> float:
    if formula == BmrFormula.MIFFLIN:
        return bmr_mifflin_st_jeor(sex, age, height_cm, weight_kg)
    if formula == BmrFormula.HARRIS:
        return bmr_harris_benedict(sex, age, height_cm, weight_kg)
    if body_fat_pct is None:
        raise ServiceValidationError("Katch-McArdle needs a body fat percentage")
    return bmr_katch_mcardle(body_fat_pct, weight_kg)


# ---------- energy expenditure ----------


def activity_factor(label: str) -> float:
    return ACTIVITY_FACTORS.get(label, DEFAULT_ACTIVITY_FACTOR)


def goal_delta_kcal(label: str) -> int:
    return GOAL_DELTAS.get(label, 0)


def tdee(bmr_kcal: float, activity_label: str) -> float:
    return bmr_kcal * activity_factor(activity_label)


def target_calories(tdee_kcal: float, goal_label: str) -> int:
    """TDEE plus the goal delta, never more than 1000 kcal away from TDEE."""
    target = tdee_kcal + goal_delta_kcal(goal_label)
    clamped = max(tdee_kcal - MAX_GOAL_DELTA, min(tdee_kcal + MAX_GOAL_DELTA, target))
    return int(round_half_up(clamped))


# ---------- macro splits ----------


def calc_macros_from_percents(kcal: float, pct_carbs: float, pct_protein: float, pct_fat: float) -> MacroGrams:
    if round(pct_carbs + pct_protein + pct_fat) != 100:
        raise ServiceValidationError(
            "Macro percentages must add up to 100",
            details={"carbs": pct_carbs, "protein": pct_protein, "fat": pct_fat},
        )
    return MacroGrams(
        protein=int(round_half_up(kcal * pct_protein / 100 / KCAL_PER_G_PROTEIN)),
        carbs=int(round_half_up(kcal * pct_carbs / 100 / KCAL_PER_G_CARBS)),
        fat=int(round_half_up(kcal * pct_fat / 100 / KCAL_PER_G_FAT)),
    )


def macros_for_split(kcal: float, split_type: SplitType) -> MacroGrams:
    preset = PRESETS.get(split_type)
    if preset is None:
        raise ServiceValidationError(f"No preset for split type '{split_type.value}'")
    return calc_macros_from_percents(kcal, preset["carbs"], preset["protein"], preset["fat"])


def scale_custom_grams_to_energy(kcal_target: float, protein: float, carbs: float, fat: float) -> MacroGrams:
    """
    Scale custom gram targets so they supply exactly kcal_target.
    All-zero grams fall back to the balanced split.
    """
    current = protein * KCAL_PER_G_PROTEIN + carbs * KCAL_PER_G_CARBS + fat * KCAL_PER_G_FAT
    if current == 0:
        return macros_for_split(kcal_target, SplitType.BALANCED)

    factor = kcal_target / current
    return MacroGrams(
        protein=int(round_half_up(protein * factor)),
        carbs=int(round_half_up(carbs * factor)),
        fat=int(round_half_up(fat * factor)),
    )


def compute_targets(
    sex: str,
    age: float,
    height_cm: float,
    weight_kg: float,
    activity: str,
    goal: str,
    formula: BmrFormula = BmrFormula.MIFFLIN,
    split_type: SplitType = SplitType.BALANCED,
    body_fat_pct: Optional[float] = None,
    custom: Optional[Dict[str, float]] = None,
) -> MacroTargets:
    """Full intake -> targets pipeline: BMR, TDEE, kcal target, gram split."""
    activity = map_to_canonical_activity(activity)
    goal = map_to_canonical_goal(goal)

    bmr_kcal = bmr(formula, sex, age, height_cm, weight_kg, body_fat_pct)
    tdee_kcal = tdee(bmr_kcal, activity)
    kcal = target_calories(tdee_kcal, goal)

    if split_type == SplitType.CUSTOM:
        custom = custom or {}
        grams = scale_custom_grams_to_energy(
            kcal,
            custom.get("protein", 0) or 0,
            custom.get("carbs", 0) or 0,
            custom.get("fat", 0) or 0,
        )
    else:
        grams = macros_for_split(kcal, split_type)

    logger.debug(
        "Targets: formula=%s bmr=%.1f tdee=%.1f kcal=%d split=%s",
        formula.value, bmr_kcal, tdee_kcal, kcal, split_type.value,
    )
    return MacroTargets(
        bmr=round_half_up(bmr_kcal, 1),
        tdee=round_half_up(tdee_kcal, 1),
        kcal_target=kcal,
        protein_g=grams.protein,
        carbs_g=grams.carbs,
        fat_g=grams.fat,
        split_type=split_type,
        formula=formula,
    )


def slot_targets(kcal: float, protein: float, carbs: float, fat: float, slots: Iterable[str]) -> Dict[str, Dict[str, float]]:
    """Even split of a plan's daily targets across meal slots"""
    slots = list(slots)
    if not slots:
        return {}
    n = len(slots)
    per_slot = {
        "kcal": round_half_up(kcal / n),
        "protein": round_half_up(protein / n, 1),
        "carbs": round_half_up(carbs / n, 1),
        "fat": round_half_up(fat / n, 1),
    }
    return {slot: dict(per_slot) for slot in slots}


# ---------- unit helpers ----------


def kcal_to_kj(kcal: float) -> float:
    return kcal * KJ_PER_KCAL


def feet_inches_to_cm(feet: float, inches: float) -> int:
    return int(round_half_up((feet * 12 + inches) * CM_PER_INCH))


def map_to_canonical_activity(label: str) -> str:
    return _LEGACY_ACTIVITY.get(label, label)


def map_to_canonical_goal(label: str) -> str:
    return _LEGACY_GOAL.get(label, label)
