"""
Tests for the macro target engine.

Reference client (Mifflin-St Jeor):
- female, 34 y, 168 cm, 64 kg -> BMR 1359 kcal
- moderate activity (x1.55)   -> TDEE 2106.45 kcal
- maintain weight             -> 2106 kcal target
- balanced 50/25/25           -> 263 g carbs, 132 g protein, 59 g fat
"""

import pytest

from app.exceptions import ServiceValidationError
from domain.enums import ACTIVITY_LEVELS, GOALS, BmrFormula, SplitType
from services.macro_service import (
    activity_factor,
    bmr,
    bmr_harris_benedict,
    bmr_katch_mcardle,
    bmr_mifflin_st_jeor,
    calc_macros_from_percents,
    compute_targets,
    feet_inches_to_cm,
    kcal_to_kj,
    macros_for_split,
    map_to_canonical_activity,
    map_to_canonical_goal,
    scale_custom_grams_to_energy,
    slot_targets,
    target_calories,
    tdee,
)
from test_fixtures import client, db_session

MODERATE = ACTIVITY_LEVELS[3]
MAINTAIN = GOALS[0]


def test_mifflin_st_jeor():
    assert bmr_mifflin_st_jeor("female", 34, 168, 64) == pytest.approx(1359)
    assert bmr_mifflin_st_jeor("male", 30, 180, 80) == pytest.approx(1780)


def test_harris_benedict():
    assert bmr_harris_benedict("male", 30, 180, 80) == pytest.approx(1853.632)


def test_katch_mcardle():
    assert bmr_katch_mcardle(20, 80) == pytest.approx(1752.4)


def test_katch_requires_body_fat():
    with pytest.raises(ServiceValidationError):
        bmr(BmrFormula.KATCH, "male", 30, 180, 80)
    assert bmr(BmrFormula.KATCH, "male", 30, 180, 80, body_fat_pct=20) == pytest.approx(1752.4)


def test_activity_and_goal_lookup():
    assert activity_factor(MODERATE) == 1.55
    assert activity_factor("couch") == 1.2
    assert tdee(1359, MODERATE) == pytest.approx(2106.45)
    assert target_calories(2106.45, MAINTAIN) == 2106
    assert target_calories(2000, "Extreme weight loss of 1 kg per week") == 1000
    assert target_calories(2000, "unknown goal") == 2000


def test_macros_from_percents():
    grams = calc_macros_from_percents(2000, pct_carbs=50, pct_protein=25, pct_fat=25)
    assert (grams.protein, grams.carbs, grams.fat) == (125, 250, 56)


def test_macro_percents_must_sum_to_100():
    with pytest.raises(ServiceValidationError):
        calc_macros_from_percents(2000, pct_carbs=50, pct_protein=30, pct_fat=30)


@pytest.mark.parametrize(
    "split,expected",
    [
        (SplitType.BALANCED, (125, 250, 56)),
        (SplitType.LOW_FAT, (125, 300, 33)),
        (SplitType.LOW_CARB, (200, 125, 78)),
        (SplitType.HIGH_PROTEIN, (200, 175, 56)),
    ],
)
def test_split_presets(split, expected):
    grams = macros_for_split(2000, split)
    assert (grams.protein, grams.carbs, grams.fat) == expected


def test_custom_split_has_no_preset():
    with pytest.raises(ServiceValidationError):
        macros_for_split(2000, SplitType.CUSTOM)


def test_custom_grams_scaled_to_energy():
    grams = scale_custom_grams_to_energy(2000, protein=100, carbs=100, fat=100)
    assert (grams.protein, grams.carbs, grams.fat) == (118, 118, 118)


def test_all_zero_custom_grams_fall_back_to_balanced():
    grams = scale_custom_grams_to_energy(2000, 0, 0, 0)
    assert (grams.protein, grams.carbs, grams.fat) == (125, 250, 56)


def test_compute_targets_reference_client():
    targets = compute_targets("female", 34, 168, 64, MODERATE, MAINTAIN)

    assert targets.bmr == pytest.approx(1359.0)
    assert targets.tdee == pytest.approx(2106.5, abs=0.11)
    assert targets.kcal_target == 2106
    assert (targets.protein_g, targets.carbs_g, targets.fat_g) == (132, 263, 59)
    assert targets.split_type == SplitType.BALANCED
    assert targets.formula == BmrFormula.MIFFLIN


def test_compute_targets_maps_legacy_labels():
    legacy = compute_targets("female", 34, 168, 64, "Moderate", "Maintain")
    canonical = compute_targets("female", 34, 168, 64, MODERATE, MAINTAIN)
    assert legacy == canonical


def test_compute_targets_custom_split():
    targets = compute_targets(
        "female", 34, 168, 64, MODERATE, MAINTAIN,
        split_type=SplitType.CUSTOM,
        custom={"protein": 150, "carbs": 200, "fat": 70},
    )
    energy = targets.protein_g * 4 + targets.carbs_g * 4 + targets.fat_g * 9
    assert energy == pytest.approx(targets.kcal_target, abs=10)


def test_slot_targets_even_split():
    split = slot_targets(2000, 150, 200, 67, ["Breakfast", "Lunch", "Dinner"])

    assert set(split) == {"Breakfast", "Lunch", "Dinner"}
    assert split["Lunch"] == {"kcal": 667, "protein": 50.0, "carbs": pytest.approx(66.7), "fat": pytest.approx(22.3)}
    assert slot_targets(2000, 150, 200, 67, []) == {}


def test_unit_helpers():
    assert kcal_to_kj(1000) == pytest.approx(4184)
    assert feet_inches_to_cm(5, 10) == 178
    assert map_to_canonical_activity("Very Active") == ACTIVITY_LEVELS[5]
    assert map_to_canonical_goal("Mild loss") == GOALS[1]
    assert map_to_canonical_goal(GOALS[2]) == GOALS[2]


# =============================================================================
# /macros/targets
# =============================================================================


def _request(**overrides):
    body = {
        "sex": "female",
        "age": 34,
        "height_cm": 168,
        "weight_kg": 64,
        "activity": MODERATE,
        "goal": MAINTAIN,
    }
    body.update(overrides)
    return body


def test_macro_targets_endpoint(client):
    response = client.post("/macros/targets", json=_request(show_kj=True))

    assert response.status_code == 200
    data = response.json()
    assert data["kcal_target"] == 2106
    assert (data["protein_g"], data["carbs_g"], data["fat_g"]) == (132, 263, 59)
    assert data["kj_target"] == pytest.approx(2106 * 4.184, abs=1)
    assert data["split_type"] == "balanced"


def test_macro_targets_katch_needs_body_fat(client):
    response = client.post("/macros/targets", json=_request(formula="katch"))
    assert response.status_code == 422


def test_macro_targets_rejects_unknown_split(client):
    response = client.post("/macros/targets", json=_request(split_type="fruitarian"))
    assert response.status_code == 422
