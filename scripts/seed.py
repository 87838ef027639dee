#!/usr/bin/env python3
"""
Seed the ingredient master table and a handful of demo recipes.
Safe to run repeatedly: existing ingredients are reused and recipes are
only created when the recipe table is empty.
"""

import sys
import logging
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

logging.basicConfig(
    level=logging.INFO, format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger("seed")

# name, kcal, protein, carbs, fat per 100 g, allergens
INGREDIENTS = [
    ("Rolled Oats", 389, 16.9, 66.3, 6.9, ["gluten"]),
    ("Whey Protein Powder", 400, 80.0, 8.0, 4.0, ["dairy"]),
    ("Chicken Breast", 165, 31.0, 0.0, 3.6, []),
    ("Jasmine Rice", 365, 7.1, 79.0, 0.7, []),
    ("Greek Yogurt", 97, 18.0, 3.6, 0.4, ["dairy"]),
    ("Mixed Berries", 57, 0.7, 14.5, 0.3, []),
    ("Beef Sirloin", 205, 31.0, 0.0, 8.2, []),
    ("Eggs", 155, 13.0, 1.1, 11.0, ["eggs"]),
    ("Whole Wheat Bread", 247, 13.0, 41.0, 4.2, ["gluten"]),
]

RECIPES = [
    {
        "title": "Protein Oatmeal",
        "cuisine": "American",
        "difficulty": "Easy",
        "instructions": "1. Cook oats with water. 2. Stir in protein powder when cool. 3. Serve hot.",
        "ingredients": [("Rolled Oats", 50), ("Whey Protein Powder", 30)],
    },
    {
        "title": "Chicken & Rice Bowl",
        "cuisine": "Asian",
        "difficulty": "Medium",
        "instructions": "1. Grill chicken breast. 2. Cook rice. 3. Combine and season. 4. Serve hot.",
        "ingredients": [("Chicken Breast", 150), ("Jasmine Rice", 80)],
    },
    {
        "title": "Greek Yogurt & Berries",
        "cuisine": "Mediterranean",
        "difficulty": "Easy",
        "instructions": "1. Place yogurt in bowl. 2. Top with berries. 3. Serve chilled.",
        "ingredients": [("Greek Yogurt", 200), ("Mixed Berries", 100)],
    },
    {
        "title": "Beef Stir-fry & Rice",
        "cuisine": "Asian",
        "difficulty": "Medium",
        "instructions": "1. Stir-fry beef strips. 2. Cook rice. 3. Combine and season. 4. Serve hot.",
        "ingredients": [("Beef Sirloin", 120), ("Jasmine Rice", 75)],
    },
    {
        "title": "Scrambled Eggs & Toast",
        "cuisine": "American",
        "difficulty": "Easy",
        "instructions": "1. Scramble eggs. 2. Toast bread. 3. Serve together.",
        "ingredients": [("Eggs", 120), ("Whole Wheat Bread", 60)],
    },
]


def seed_ingredients(db) -> dict:
    from domain.schemas.ingredient_schemas import IngredientCreate
    from repositories.ingredient_repository import IngredientRepository
    from services.ingredient_service import IngredientService

    repo = IngredientRepository(db)
    by_name = {}
    for name, kcal, protein, carbs, fat, allergens in INGREDIENTS:
        ingredient = repo.get_by_name(name)
        if ingredient is None:
            ingredient = IngredientService.create_ingredient(
                db,
                IngredientCreate(
                    name=name,
                    kcal_per_100g=kcal,
                    protein_per_100g=protein,
                    carbs_per_100g=carbs,
                    fat_per_100g=fat,
                    allergens=allergens,
                ),
            )
        by_name[name] = ingredient
    return by_name


def seed_recipes(db, ingredients: dict) -> int:
    from domain.schemas.recipe_schemas import RecipeCreate, RecipeIngredientRow
    from repositories.recipe_repository import RecipeRepository
    from services.recipe_service import RecipeService

    if RecipeRepository(db).count() > 0:
        logger.info("Recipes already exist, skipping recipe seed")
        return 0

    for data in RECIPES:
        rows = [
            RecipeIngredientRow(ingredient_id=ingredients[name].ingredient_id, grams_per_base=grams)
            for name, grams in data["ingredients"]
        ]
        recipe = RecipeService.create_recipe(
            db,
            RecipeCreate(
                title=data["title"],
                cuisine=data["cuisine"],
                difficulty=data["difficulty"],
                utensils=["pan", "spatula"],
                base_servings=1,
                instructions=data["instructions"],
                ingredients=rows,
            ),
        )
        logger.info("Created recipe: %s", recipe.name)
    return len(RECIPES)


def main() -> int:
    from domain.models.database import SessionLocal, init_database

    init_database()
    db = SessionLocal()
    try:
        ingredients = seed_ingredients(db)
        created = seed_recipes(db, ingredients)
    finally:
        db.close()

    logger.info("Seed complete: %d ingredients, %d new recipes", len(ingredients), created)
    return 0


if __name__ == "__main__":
    sys.exit(main())
