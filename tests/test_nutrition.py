"""
Tests for the nutrition calculator and serving scaler.

Worked example used throughout:
- Chicken Breast: 165 kcal, 31 g protein, 0 g carbs, 3.6 g fat per 100 g
- 150 g per base serving, base_servings = 1
- 1 serving -> 247.5 kcal, 46.5 g protein, 0 g carbs, 5.4 g fat
"""

import pytest

from app.exceptions import NotFoundError, ServiceValidationError
from services.nutrition_service import (
    ZERO,
    Nutrition,
    calc_nutrition,
    calc_recipe_per_serving,
    format_macros,
    is_within_tolerance,
    macro_energy,
    macro_percentages,
    practical_servings,
    round_half_up,
    round_to_quarter,
    scale_servings_for_target_kcal,
    sum_macros,
)
from test_fixtures import make_ingredient, make_recipe


@pytest.fixture
def chicken_recipe():
    return make_recipe([(make_ingredient("chicken"), 150)])


@pytest.fixture
def bowl_recipe():
    """Two base servings of chicken and rice"""
    return make_recipe(
        [(make_ingredient("chicken"), 300), (make_ingredient("rice"), 160)],
        base_servings=2,
    )


# =============================================================================
# calc_nutrition
# =============================================================================


def test_single_ingredient_one_serving(chicken_recipe):
    n = calc_nutrition(chicken_recipe, 1)

    assert n.kcal == pytest.approx(247.5)
    assert n.protein == pytest.approx(46.5)
    assert n.carbs == pytest.approx(0.0)
    assert n.fat == pytest.approx(5.4)


def test_servings_are_relative_to_base_servings(bowl_recipe):
    # 1 of 2 base servings -> 150 g chicken + 80 g rice
    n = calc_nutrition(bowl_recipe, 1)

    assert n.kcal == pytest.approx(247.5 + 292.0)
    assert n.protein == pytest.approx(46.5 + 5.68)
    assert n.carbs == pytest.approx(63.2)
    assert n.fat == pytest.approx(5.4 + 0.56)


@pytest.mark.parametrize("servings", [0.25, 0.5, 1, 1.75, 3, 7.5])
def test_nutrition_is_linear_in_servings(bowl_recipe, servings):
    at_base = calc_nutrition(bowl_recipe, bowl_recipe.base_servings)
    n = calc_nutrition(bowl_recipe, servings)

    ratio = servings / bowl_recipe.base_servings
    assert n.kcal == pytest.approx(ratio * at_base.kcal)
    assert n.protein == pytest.approx(ratio * at_base.protein)
    assert n.carbs == pytest.approx(ratio * at_base.carbs)
    assert n.fat == pytest.approx(ratio * at_base.fat)


def test_recipe_without_ingredients_is_zero():
    assert calc_nutrition(make_recipe([]), 2) == ZERO


def test_missing_recipe_raises_not_found():
    with pytest.raises(NotFoundError):
        calc_nutrition(None, 1)


@pytest.mark.parametrize("servings", [0, -1, None])
def test_non_positive_servings_rejected(chicken_recipe, servings):
    with pytest.raises(ServiceValidationError):
        calc_nutrition(chicken_recipe, servings)


def test_zero_base_servings_rejected(chicken_recipe):
    chicken_recipe.base_servings = 0
    with pytest.raises(ServiceValidationError):
        calc_nutrition(chicken_recipe, 1)


def test_per_serving_matches_one_serving(bowl_recipe):
    assert calc_recipe_per_serving(bowl_recipe) == calc_nutrition(bowl_recipe, 1)


# =============================================================================
# scale_servings_for_target_kcal
# =============================================================================


def test_scale_to_double_the_kcal(chicken_recipe):
    assert scale_servings_for_target_kcal(chicken_recipe, 495) == pytest.approx(2.0)


def test_scale_uses_base_serving_count(bowl_recipe):
    kcal_at_base = calc_nutrition(bowl_recipe, 2).kcal
    servings = scale_servings_for_target_kcal(bowl_recipe, kcal_at_base / 4)

    assert servings == pytest.approx(0.5)
    assert calc_nutrition(bowl_recipe, servings).kcal == pytest.approx(kcal_at_base / 4)


def test_scale_result_is_not_rounded(chicken_recipe):
    servings = scale_servings_for_target_kcal(chicken_recipe, 500)
    assert servings == pytest.approx(500 / 247.5)
    assert practical_servings(servings) == 2.0


def test_zero_kcal_recipe_cannot_be_scaled():
    recipe = make_recipe([(make_ingredient("water"), 250)], name="Glass of water")

    with pytest.raises(ServiceValidationError) as exc_info:
        scale_servings_for_target_kcal(recipe, 500)

    assert exc_info.value.code == "ZERO_KCAL_RECIPE"
    assert "Glass of water" in exc_info.value.message


def test_empty_recipe_cannot_be_scaled():
    with pytest.raises(ServiceValidationError):
        scale_servings_for_target_kcal(make_recipe([]), 500)


@pytest.mark.parametrize("target", [0, -100])
def test_non_positive_target_rejected(chicken_recipe, target):
    with pytest.raises(ServiceValidationError):
        scale_servings_for_target_kcal(chicken_recipe, target)


# =============================================================================
# Rounding helpers
# =============================================================================


@pytest.mark.parametrize(
    "value,expected",
    [(2.5, 3), (3.5, 4), (2.4, 2), (0.5, 1), (247.5, 248)],
)
def test_round_half_up(value, expected):
    assert round_half_up(value) == expected


def test_round_half_up_to_one_decimal():
    assert round_half_up(129.96, 1) == pytest.approx(130.0)
    assert round_half_up(12.34, 1) == pytest.approx(12.3)


@pytest.mark.parametrize(
    "value,expected",
    [(1.1, 1.0), (1.125, 1.25), (1.13, 1.25), (0.1, 0.0), (2.87, 2.75), (2.9, 3.0)],
)
def test_round_to_quarter(value, expected):
    assert round_to_quarter(value) == expected


@pytest.mark.parametrize("value,expected", [(0.05, 0.25), (10, 3.0), (1.6, 1.5), (2.2, 2.25)])
def test_practical_servings_stay_in_range(value, expected):
    assert practical_servings(value) == expected


# =============================================================================
# Macro arithmetic
# =============================================================================


def test_nutrition_addition_and_scaling():
    a = Nutrition(kcal=100, protein=10, carbs=5, fat=2)
    b = Nutrition(kcal=50, protein=1, carbs=1, fat=1)

    assert a + b == Nutrition(kcal=150, protein=11, carbs=6, fat=3)
    assert a.scaled(2) == Nutrition(kcal=200, protein=20, carbs=10, fat=4)
    assert sum_macros(a, b, ZERO) == a + b
    assert sum_macros() == ZERO


def test_macro_energy_uses_4_4_9():
    assert macro_energy(protein=10, carbs=10, fat=10) == 170


def test_macro_percentages():
    pct = macro_percentages(protein=150, carbs=200, fat=67)
    assert pct == {"pct_protein": 30, "pct_carbs": 40, "pct_fat": 30}


def test_macro_percentages_of_nothing():
    assert macro_percentages(0, 0, 0) == {"pct_protein": 0, "pct_carbs": 0, "pct_fat": 0}


def test_within_tolerance():
    target = Nutrition(kcal=2000, protein=150, carbs=200, fat=60)
    close = Nutrition(kcal=2090, protein=160, carbs=190, fat=62)
    far = Nutrition(kcal=2300, protein=150, carbs=200, fat=60)

    assert is_within_tolerance(close, target)["overall"] is True

    result = is_within_tolerance(far, target)
    assert result["kcal"] is False
    assert result["protein"] is True
    assert result["overall"] is False


def test_format_macros_rounds_half_up():
    assert format_macros(Nutrition(kcal=247.5, protein=46.5, carbs=0.4, fat=5.4)) == {
        "kcal": 248,
        "protein": 47,
        "carbs": 0,
        "fat": 5,
    }
