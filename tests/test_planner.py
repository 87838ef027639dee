"""
Tests for meal planning: snapshot upserts, auto-population and rebalancing.

Rebalance rule: every meal's servings are multiplied by
plan.kcal_target / current total kcal, rounded to the nearest quarter and
clamped to [0.25, 3.0]. One pass, so the new total can miss the target.
"""

import uuid

import pytest
from sqlalchemy.orm import Session

from app.exceptions import NotFoundError, ServiceValidationError
from domain.enums import MealSlot
from services.nutrition_service import calc_nutrition
from services.planner_service import PlannerService, rebalance_servings
from test_fixtures import (
    add_ingredient,
    add_meal,
    add_plan,
    add_recipe,
    db_session,
    make_meal,
)


@pytest.fixture
def chicken_bowl(db_session: Session):
    """247.5 kcal per serving"""
    chicken = add_ingredient(db_session, "chicken")
    return add_recipe(db_session, [(chicken, 150)], name="Chicken Bowl")


@pytest.fixture
def oat_bowl(db_session: Session):
    """389 kcal per serving"""
    oats = add_ingredient(db_session, "oats")
    return add_recipe(db_session, [(oats, 100)], name="Oat Bowl")


def assert_snapshot_matches(meal, recipe):
    expected = calc_nutrition(recipe, meal.servings)
    assert meal.kcal == pytest.approx(expected.kcal)
    assert meal.protein == pytest.approx(expected.protein)
    assert meal.carbs == pytest.approx(expected.carbs)
    assert meal.fat == pytest.approx(expected.fat)


# =============================================================================
# rebalance_servings (pure)
# =============================================================================


def test_rebalance_scales_proportionally():
    meals = [make_meal(servings=1, kcal=500), make_meal(servings=2, kcal=500)]
    assert rebalance_servings(meals, 2000) == [2.0, 3.0]


def test_rebalance_rounds_to_quarters():
    meals = [make_meal(servings=1, kcal=600)]
    # factor 1.3 -> 1.3 servings -> 1.25
    assert rebalance_servings(meals, 780) == [1.25]


@pytest.mark.parametrize("target", [1, 50, 400, 1800, 5000, 100000])
def test_rebalance_never_leaves_serving_range(target):
    meals = [
        make_meal(servings=0.25, kcal=80),
        make_meal(servings=1, kcal=450),
        make_meal(servings=3, kcal=1200),
    ]
    for servings in rebalance_servings(meals, target):
        assert 0.25 <= servings <= 3.0


def test_rebalance_nothing_to_scale():
    assert rebalance_servings([], 2000) is None
    assert rebalance_servings([make_meal(servings=1, kcal=0)], 2000) is None


# =============================================================================
# upsert_meal / delete_meal
# =============================================================================


def test_upsert_creates_meal_with_snapshot(db_session: Session, chicken_bowl):
    plan = add_plan(db_session)

    meal = PlannerService(db_session).upsert_meal(plan.plan_id, MealSlot.LUNCH, chicken_bowl.recipe_id, 2)

    assert meal.slot == "Lunch"
    assert meal.servings == 2
    assert meal.kcal == pytest.approx(495.0)
    assert_snapshot_matches(meal, chicken_bowl)


def test_upsert_replaces_meal_in_same_slot(db_session: Session, chicken_bowl, oat_bowl):
    plan = add_plan(db_session)
    planner = PlannerService(db_session)

    first = planner.upsert_meal(plan.plan_id, "Breakfast", chicken_bowl.recipe_id, 1)
    second = planner.upsert_meal(plan.plan_id, "Breakfast", oat_bowl.recipe_id, 0.5)

    assert second.meal_id == first.meal_id
    assert second.recipe_id == oat_bowl.recipe_id
    assert second.kcal == pytest.approx(194.5)
    assert len(planner.get_plan(plan.plan_id).meals) == 1


def test_upsert_without_recipe_has_zero_snapshot(db_session: Session, chicken_bowl):
    plan = add_plan(db_session)
    planner = PlannerService(db_session)
    planner.upsert_meal(plan.plan_id, "Dinner", chicken_bowl.recipe_id, 1)

    meal = planner.upsert_meal(plan.plan_id, "Dinner", None, 1)

    assert meal.recipe_id is None
    assert (meal.kcal, meal.protein, meal.carbs, meal.fat) == (0, 0, 0, 0)


def test_upsert_validation(db_session: Session, chicken_bowl):
    plan = add_plan(db_session)
    planner = PlannerService(db_session)

    with pytest.raises(ServiceValidationError):
        planner.upsert_meal(plan.plan_id, "Brunch", chicken_bowl.recipe_id, 1)
    with pytest.raises(ServiceValidationError):
        planner.upsert_meal(plan.plan_id, "Lunch", chicken_bowl.recipe_id, 0)
    with pytest.raises(NotFoundError):
        planner.upsert_meal(uuid.uuid4(), "Lunch", chicken_bowl.recipe_id, 1)
    with pytest.raises(NotFoundError):
        planner.upsert_meal(plan.plan_id, "Lunch", uuid.uuid4(), 1)


def test_delete_meal(db_session: Session, chicken_bowl):
    plan = add_plan(db_session)
    planner = PlannerService(db_session)
    meal = planner.upsert_meal(plan.plan_id, "Lunch", chicken_bowl.recipe_id, 1)

    planner.delete_meal(meal.meal_id)

    assert planner.get_plan(plan.plan_id).meals == []
    with pytest.raises(NotFoundError):
        planner.delete_meal(meal.meal_id)


# =============================================================================
# rebalance_plan
# =============================================================================


def test_rebalance_plan_updates_servings_and_snapshots(db_session: Session, chicken_bowl, oat_bowl):
    plan = add_plan(db_session, kcal_target=1600)
    planner = PlannerService(db_session)
    planner.upsert_meal(plan.plan_id, "Lunch", chicken_bowl.recipe_id, 1)
    planner.upsert_meal(plan.plan_id, "Breakfast", oat_bowl.recipe_id, 1)

    # current 636.5 kcal, factor ~2.514
    meals = planner.rebalance_plan(plan.plan_id)

    by_slot = {m.slot: m for m in meals}
    assert by_slot["Lunch"].servings == 2.5
    assert by_slot["Breakfast"].servings == 2.5
    assert_snapshot_matches(by_slot["Lunch"], chicken_bowl)
    assert_snapshot_matches(by_slot["Breakfast"], oat_bowl)


def test_rebalance_plan_clamps_and_may_miss_target(db_session: Session, chicken_bowl):
    plan = add_plan(db_session, kcal_target=5000)
    planner = PlannerService(db_session)
    planner.upsert_meal(plan.plan_id, "Lunch", chicken_bowl.recipe_id, 1)

    [meal] = planner.rebalance_plan(plan.plan_id)

    assert meal.servings == 3.0
    assert meal.kcal == pytest.approx(742.5)


def test_rebalance_plan_with_zero_kcal_is_unchanged(db_session: Session):
    water = add_ingredient(db_session, "water")
    recipe = add_recipe(db_session, [(water, 250)], name="Water")
    plan = add_plan(db_session)
    add_meal(db_session, plan, recipe, servings=1.5, slot="Shakes")

    [meal] = PlannerService(db_session).rebalance_plan(plan.plan_id)

    assert meal.servings == 1.5
    assert meal.kcal == 0


def test_rebalance_empty_plan(db_session: Session):
    plan = add_plan(db_session)
    assert PlannerService(db_session).rebalance_plan(plan.plan_id) == []


def test_rebalance_scales_meal_without_recipe(db_session: Session, chicken_bowl):
    plan = add_plan(db_session, kcal_target=990)
    add_meal(db_session, plan, chicken_bowl, servings=1, slot="Lunch", kcal=247.5)
    add_meal(db_session, plan, None, servings=1, slot="Snacks")

    meals = PlannerService(db_session).rebalance_plan(plan.plan_id)

    by_slot = {m.slot: m for m in meals}
    assert by_slot["Lunch"].servings == 3.0
    assert by_slot["Snacks"].servings == 3.0
    assert by_slot["Snacks"].kcal == 0


def test_rebalance_missing_plan(db_session: Session):
    with pytest.raises(NotFoundError):
        PlannerService(db_session).rebalance_plan(uuid.uuid4())


# =============================================================================
# auto_populate_meals
# =============================================================================


def test_auto_populate_uses_client_meals_and_even_split(db_session: Session, chicken_bowl, oat_bowl):
    plan = add_plan(db_session, kcal_target=1500)

    meals = PlannerService(db_session).auto_populate_meals(plan.plan_id)

    # client includes Breakfast, Lunch, Dinner -> 500 kcal each, recipes by name
    assert [m.slot for m in meals] == ["Breakfast", "Lunch", "Dinner"]
    assert [m.recipe_id for m in meals] == [chicken_bowl.recipe_id, oat_bowl.recipe_id, chicken_bowl.recipe_id]
    assert [m.servings for m in meals] == [2.0, 1.25, 2.0]
    for meal, recipe in zip(meals, [chicken_bowl, oat_bowl, chicken_bowl]):
        assert_snapshot_matches(meal, recipe)


def test_auto_populate_with_explicit_targets(db_session: Session, chicken_bowl):
    plan = add_plan(db_session)

    meals = PlannerService(db_session).auto_populate_meals(
        plan.plan_id,
        slots=["Snacks", "Snacks", "Shakes"],
        slot_kcal_targets={"Snacks": 124, MealSlot.SHAKES: 2000},
    )

    assert [(m.slot, m.servings) for m in meals] == [("Snacks", 0.5), ("Shakes", 3.0)]


def test_auto_populate_missing_target(db_session: Session, chicken_bowl):
    plan = add_plan(db_session)

    with pytest.raises(ServiceValidationError):
        PlannerService(db_session).auto_populate_meals(
            plan.plan_id, slots=["Lunch", "Dinner"], slot_kcal_targets={"Lunch": 500}
        )


def test_auto_populate_without_recipes(db_session: Session):
    plan = add_plan(db_session)

    with pytest.raises(ServiceValidationError):
        PlannerService(db_session).auto_populate_meals(plan.plan_id)


def test_auto_populate_zero_kcal_recipe_gets_one_serving(db_session: Session):
    water = add_ingredient(db_session, "water")
    add_recipe(db_session, [(water, 250)], name="Water")
    plan = add_plan(db_session)

    [meal] = PlannerService(db_session).auto_populate_meals(plan.plan_id, slots=["Shakes"])

    assert meal.servings == 1.0
    assert meal.kcal == 0
