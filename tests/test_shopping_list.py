"""
Tests for shopping list aggregation and amount formatting.

Aggregation example:
=====================
Meal A: 2 servings of a 1-serving recipe using 50 g of X
Meal B: 1 serving of a 1-serving recipe using 30 g of X and 100 g of Y

X = 2 * 50 + 1 * 30 = 130 g  -> "130g"
Y = 1 * 100          = 100 g  -> "100g"
"""

import itertools
import uuid

import pytest
from sqlalchemy.orm import Session

from app.exceptions import NotFoundError, ServiceValidationError
from services.shopping_service import (
    ShoppingService,
    aggregate_ingredients,
    calculate_shopping_list_nutrition,
    format_amount,
    parse_amount,
)
from test_fixtures import (
    add_ingredient,
    add_meal,
    add_plan,
    add_recipe,
    client,
    db_session,
    make_ingredient,
    make_meal,
    make_recipe,
)


@pytest.fixture
def two_meals():
    x = make_ingredient("chicken")
    y = make_ingredient("rice")
    meal_a = make_meal(make_recipe([(x, 50)]), servings=2, slot="Lunch")
    meal_b = make_meal(make_recipe([(x, 30), (y, 100)]), servings=1, slot="Dinner")
    return x, y, [meal_a, meal_b]


# =============================================================================
# format_amount
# =============================================================================


@pytest.mark.parametrize(
    "grams,expected",
    [
        (0.5, "500mg"),
        (0.0004, "0mg"),
        (0.0, "0mg"),
        (1, "1g"),
        (130, "130g"),
        (999, "999g"),
        (12.5, "13g"),
        (1000, "1kg"),
        (1500, "1.5kg"),
        (1049, "1kg"),
        (1050, "1.1kg"),
        (2345.6, "2.3kg"),
        (12000, "12kg"),
    ],
)
def test_format_amount(grams, expected):
    assert format_amount(grams) == expected


@pytest.mark.parametrize("grams,expected", [(0.9996, "1g"), (999.5, "1kg"), (999.4, "999g")])
def test_format_amount_promotes_at_unit_boundaries(grams, expected):
    assert format_amount(grams) == expected


@pytest.mark.parametrize(
    "grams", [0.0004, 0.5, 0.9996, 1, 12.5, 130, 999.4, 999.5, 1000, 1049, 1500, 2345.6, 12000]
)
def test_format_amount_is_stable_when_reparsed(grams):
    shown = format_amount(grams)
    assert format_amount(parse_amount(shown)) == shown


def test_format_amount_rejects_negative():
    with pytest.raises(ServiceValidationError):
        format_amount(-1)


@pytest.mark.parametrize("text,grams", [("500mg", 0.5), ("130g", 130), ("1.5kg", 1500), (" 2 KG ", 2000)])
def test_parse_amount(text, grams):
    assert parse_amount(text) == pytest.approx(grams)


@pytest.mark.parametrize("text", ["", "12 cups", "kg", "-1g"])
def test_parse_amount_rejects_garbage(text):
    with pytest.raises(ServiceValidationError):
        parse_amount(text)


# =============================================================================
# aggregate_ingredients (pure)
# =============================================================================


def test_aggregates_same_ingredient_across_meals(two_meals):
    x, y, meals = two_meals
    items = {item.ingredient_id: item for item in aggregate_ingredients(meals)}

    assert items[x.ingredient_id].total_grams == 130.0
    assert items[x.ingredient_id].display_amount == "130g"
    assert items[y.ingredient_id].total_grams == 100.0
    assert items[y.ingredient_id].display_amount == "100g"


def test_items_carry_per_100g_macros(two_meals):
    x, _, meals = two_meals
    item = next(i for i in aggregate_ingredients(meals) if i.ingredient_id == x.ingredient_id)

    assert item.ingredient == "Chicken Breast"
    assert item.kcal_per_100g == 165.0
    assert item.protein_per_100g == 31.0
    assert item.fat_per_100g == 3.6


def test_totals_do_not_depend_on_meal_order(two_meals):
    _, _, meals = two_meals
    meals.append(make_meal(make_recipe([(make_ingredient("oats"), 45.5)], base_servings=2), servings=3))

    expected = [i.to_dict() for i in aggregate_ingredients(meals)]
    for order in itertools.permutations(meals):
        assert [i.to_dict() for i in aggregate_ingredients(order)] == expected


def test_grams_scale_by_servings_over_base_servings():
    oats = make_ingredient("oats")
    meal = make_meal(make_recipe([(oats, 80)], base_servings=2), servings=0.75)

    [item] = aggregate_ingredients([meal])
    assert item.total_grams == 30.0


def test_total_grams_rounded_to_one_decimal():
    oats = make_ingredient("oats")
    meal = make_meal(make_recipe([(oats, 33.33)], base_servings=3), servings=1)

    [item] = aggregate_ingredients([meal])
    assert item.total_grams == 11.1


def test_same_name_different_ingredients_stay_separate():
    a = make_ingredient("rice")
    b = make_ingredient("rice")
    meals = [make_meal(make_recipe([(a, 100)])), make_meal(make_recipe([(b, 50)]))]

    items = aggregate_ingredients(meals)
    assert sorted(i.total_grams for i in items) == [50.0, 100.0]


def test_meal_without_recipe_contributes_nothing(two_meals):
    _, _, meals = two_meals
    meals.insert(1, make_meal(None, servings=1))

    assert len(aggregate_ingredients(meals)) == 2
    assert aggregate_ingredients([make_meal(None)]) == []


def test_sorted_by_name_ignoring_case_and_accents():
    names = ["zucchini", "Émmental", "apple", "Banana", "eggs"]
    meals = [
        make_meal(make_recipe([(make_ingredient("rice", name=n), 10)]))
        for n in names
    ]

    assert [i.ingredient for i in aggregate_ingredients(meals)] == [
        "apple",
        "Banana",
        "eggs",
        "Émmental",
        "zucchini",
    ]


def test_shopping_list_nutrition(two_meals):
    _, _, meals = two_meals
    n = calculate_shopping_list_nutrition(aggregate_ingredients(meals))

    # 130 g chicken + 100 g rice
    assert n.kcal == pytest.approx(1.3 * 165 + 365)
    assert n.protein == pytest.approx(1.3 * 31 + 7.1)
    assert n.carbs == pytest.approx(79.0)


# =============================================================================
# ShoppingService.compute_shopping_list (database)
# =============================================================================


def test_compute_for_plan(db_session: Session):
    x = add_ingredient(db_session, "chicken")
    y = add_ingredient(db_session, "rice")
    recipe_a = add_recipe(db_session, [(x, 50)], name="Plain Chicken")
    recipe_b = add_recipe(db_session, [(x, 30), (y, 100)], name="Chicken Rice")
    plan = add_plan(db_session)
    add_meal(db_session, plan, recipe_a, servings=2, slot="Lunch")
    add_meal(db_session, plan, recipe_b, servings=1, slot="Dinner")
    add_meal(db_session, plan, None, servings=1, slot="Snacks")

    items = ShoppingService.compute_shopping_list(db_session, plan.plan_id)

    assert [(i.ingredient, i.total_grams, i.display_amount) for i in items] == [
        ("Chicken Breast", 130.0, "130g"),
        ("Jasmine Rice", 100.0, "100g"),
    ]


def test_compute_for_empty_plan(db_session: Session):
    plan = add_plan(db_session)
    assert ShoppingService.compute_shopping_list(db_session, plan.plan_id) == []


def test_compute_for_missing_plan(db_session: Session):
    with pytest.raises(NotFoundError):
        ShoppingService.compute_shopping_list(db_session, uuid.uuid4())


def test_shopping_list_endpoint(client, db_session: Session):
    rice = add_ingredient(db_session, "rice")
    recipe = add_recipe(db_session, [(rice, 600)], name="Rice Pot")
    plan = add_plan(db_session)
    add_meal(db_session, plan, recipe, servings=2.5, slot="Dinner")

    response = client.get(f"/plans/{plan.plan_id}/shopping-list")

    assert response.status_code == 200
    data = response.json()
    assert data["plan_id"] == str(plan.plan_id)
    assert data["total_items"] == 1
    assert data["items"][0]["ingredient"] == "Jasmine Rice"
    assert data["items"][0]["total_grams"] == 1500.0
    assert data["items"][0]["display_amount"] == "1.5kg"
    assert data["nutrition"]["kcal"] == pytest.approx(15 * 365)


def test_shopping_list_endpoint_unknown_plan(client):
    response = client.get(f"/plans/{uuid.uuid4()}/shopping-list")

    assert response.status_code == 404
    assert response.json()["error"]["code"] == "NOT_FOUND"
