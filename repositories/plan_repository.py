"""
Plan Repository - Data access layer for plans and their meals
"""

from typing import List, Optional
from uuid import UUID
from sqlalchemy.orm import Session, selectinload

from domain.models import Plan, Meal, Recipe, RecipeIngredient
from repositories.base import BaseRepository


class PlanRepository(BaseRepository[Plan]):
    """Repository for plan data access"""

    def __init__(self, db: Session):
        super().__init__(db, Plan)

    def get_with_meals(self, plan_id: UUID) -> Optional[Plan]:
        """
        Load a plan with plan -> meals -> recipe -> ingredients -> ingredient
        in one pass so aggregation never lazy-loads per meal.
        """
        return (
            self.db.query(Plan)
            .options(
                selectinload(Plan.client),
                selectinload(Plan.meals)
                .selectinload(Meal.recipe)
                .selectinload(Recipe.ingredients)
                .selectinload(RecipeIngredient.ingredient),
            )
            .filter(Plan.plan_id == plan_id)
            .first()
        )

    def list_for_client(self, client_id: UUID) -> List[Plan]:
        return (
            self.db.query(Plan)
            .filter(Plan.client_id == client_id)
            .order_by(Plan.created_at.desc())
            .all()
        )


class MealRepository(BaseRepository[Meal]):
    """Repository for meal data access"""

    def __init__(self, db: Session):
        super().__init__(db, Meal)

    def get_by_plan_and_slot(self, plan_id: UUID, slot: str) -> Optional[Meal]:
        """The single meal occupying a slot of a plan"""
        return (
            self.db.query(Meal)
            .filter(Meal.plan_id == plan_id, Meal.slot == slot)
            .first()
        )

    def using_ingredient(self, ingredient_id: UUID) -> List[Meal]:
        """Meals whose recipe has at least one row for the ingredient"""
        return (
            self.db.query(Meal)
            .join(Recipe, Meal.recipe_id == Recipe.recipe_id)
            .filter(
                Recipe.ingredients.any(RecipeIngredient.ingredient_id == ingredient_id)
            )
            .all()
        )
