"""
Ingredient model - Master ingredient table.
Macro values are stored per 100 g and feed every nutrition calculation.
"""

from sqlalchemy import Column, Text, Float, JSON, TIMESTAMP, Uuid, CheckConstraint
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
import uuid

from domain.models.database import Base


class Ingredient(Base):
    """
    Master ingredient table - single source of truth for macro values.

    Names are unique ignoring case; the service layer enforces that before
    insert so the check works on every backend.
    """

    __tablename__ = "ingredient"

    ingredient_id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    name = Column(Text, nullable=False, unique=True, index=True)
    kcal_per_100g = Column(Float, nullable=False, default=0.0)
    protein_per_100g = Column(Float, nullable=False, default=0.0)
    carbs_per_100g = Column(Float, nullable=False, default=0.0)
    fat_per_100g = Column(Float, nullable=False, default=0.0)
    allergens = Column(JSON, nullable=False, default=list)

    created_at = Column(TIMESTAMP(timezone=True), server_default=func.now())
    updated_at = Column(
        TIMESTAMP(timezone=True), server_default=func.now(), onupdate=func.now()
    )

    recipe_links = relationship("RecipeIngredient", back_populates="ingredient")

    __table_args__ = (
        CheckConstraint("kcal_per_100g >= 0", name="ck_ingredient_kcal_nonneg"),
        CheckConstraint("protein_per_100g >= 0", name="ck_ingredient_protein_nonneg"),
        CheckConstraint("carbs_per_100g >= 0", name="ck_ingredient_carbs_nonneg"),
        CheckConstraint("fat_per_100g >= 0", name="ck_ingredient_fat_nonneg"),
    )

    def __repr__(self):
        return f"<Ingredient(id={self.ingredient_id}, name='{self.name}')>"
