"""
Ingredient Repository - Data access layer for the ingredient master table
"""

from typing import Iterable, List, Optional, Tuple
from uuid import UUID
from sqlalchemy import func, or_
from sqlalchemy.orm import Session

from domain.models import Ingredient, RecipeIngredient
from repositories.base import LIKE_ESCAPE, BaseRepository, contains_pattern


class IngredientRepository(BaseRepository[Ingredient]):
    """Repository for ingredient master data"""

    def __init__(self, db: Session):
        super().__init__(db, Ingredient)

    def get_by_name(self, name: str, exclude_id: Optional[UUID] = None) -> Optional[Ingredient]:
        """Get ingredient by name (case-insensitive), optionally ignoring one row"""
        normalized_name = name.lower().strip()
        query = self.db.query(Ingredient).filter(func.lower(Ingredient.name) == normalized_name)
        if exclude_id is not None:
            query = query.filter(Ingredient.ingredient_id != exclude_id)
        return query.first()

    def get_many(self, ingredient_ids: Iterable[UUID]) -> List[Ingredient]:
        ids = list(ingredient_ids)
        if not ids:
            return []
        return self.db.query(Ingredient).filter(Ingredient.ingredient_id.in_(ids)).all()

    def list_page(self, search: Optional[str] = None, skip: int = 0, limit: int = 20) -> Tuple[List[Ingredient], int]:
        """Ingredients ordered by name, filtered by a case-insensitive substring"""
        query = self.db.query(Ingredient)
        if search:
            query = query.filter(func.lower(Ingredient.name).like(contains_pattern(search), escape=LIKE_ESCAPE))
        total = query.count()
        items = query.order_by(Ingredient.name).offset(skip).limit(limit).all()
        return items, total

    def search_by_tokens(self, tokens: List[str], limit: int = 20) -> List[Ingredient]:
        """Ingredients whose name contains any of the given lowercase tokens"""
        if not tokens:
            return []
        clauses = [func.lower(Ingredient.name).like(contains_pattern(t), escape=LIKE_ESCAPE) for t in tokens]
        return (
            self.db.query(Ingredient)
            .filter(or_(*clauses))
            .order_by(Ingredient.name)
            .limit(limit)
            .all()
        )

    def count_recipe_usage(self, ingredient_id: UUID) -> int:
        """Number of recipe rows referencing this ingredient"""
        return (
            self.db.query(RecipeIngredient)
            .filter(RecipeIngredient.ingredient_id == ingredient_id)
            .count()
        )
