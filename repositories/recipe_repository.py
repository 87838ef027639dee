"""
Recipe Repository - Data access layer for recipes and their ingredient rows
"""

from typing import List, Optional, Tuple
from uuid import UUID
from sqlalchemy import func, or_
from sqlalchemy.orm import Session, selectinload

from domain.models import Recipe, RecipeIngredient, Meal
from repositories.base import LIKE_ESCAPE, BaseRepository, contains_pattern


class RecipeRepository(BaseRepository[Recipe]):
    """Repository for recipe data access"""

    def __init__(self, db: Session):
        super().__init__(db, Recipe)

    def get_with_ingredients(self, recipe_id: UUID) -> Optional[Recipe]:
        """Get recipe with ingredient rows and ingredients eagerly loaded"""
        return (
            self.db.query(Recipe)
            .options(selectinload(Recipe.ingredients).selectinload(RecipeIngredient.ingredient))
            .filter(Recipe.recipe_id == recipe_id)
            .first()
        )

    def list_page(
        self,
        q: Optional[str] = None,
        cuisine: Optional[str] = None,
        skip: int = 0,
        limit: int = 20,
    ) -> Tuple[List[Recipe], int]:
        """
        Recipes newest first. q matches name or cuisine, cuisine matches
        exactly; both ignore case.
        """
        query = self.db.query(Recipe)
        if q:
            pattern = contains_pattern(q)
            query = query.filter(
                or_(
                    func.lower(Recipe.name).like(pattern, escape=LIKE_ESCAPE),
                    func.lower(Recipe.cuisine).like(pattern, escape=LIKE_ESCAPE),
                )
            )
        if cuisine:
            query = query.filter(func.lower(Recipe.cuisine) == cuisine.lower().strip())
        total = query.count()
        items = (
            query.options(selectinload(Recipe.ingredients).selectinload(RecipeIngredient.ingredient))
            .order_by(Recipe.created_at.desc(), Recipe.name)
            .offset(skip)
            .limit(limit)
            .all()
        )
        return items, total

    def list_for_planning(self, limit: int = 20) -> List[Recipe]:
        """Recipes ordered by name, used for round-robin plan population"""
        return (
            self.db.query(Recipe)
            .options(selectinload(Recipe.ingredients).selectinload(RecipeIngredient.ingredient))
            .order_by(Recipe.name)
            .limit(limit)
            .all()
        )

    def distinct_cuisines(self) -> List[str]:
        rows = (
            self.db.query(Recipe.cuisine)
            .filter(Recipe.cuisine.isnot(None), Recipe.cuisine != "")
            .distinct()
            .order_by(Recipe.cuisine)
            .all()
        )
        return [r[0] for r in rows]

    def meals_using(self, recipe_id: UUID) -> List[Meal]:
        return self.db.query(Meal).filter(Meal.recipe_id == recipe_id).all()
