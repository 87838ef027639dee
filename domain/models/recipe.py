"""
Recipe models. Quantities are defined against the recipe's base serving
count; nutrition is always derived from the ingredient rows.
"""

from sqlalchemy import Column, Text, Float, Integer, JSON, TIMESTAMP, ForeignKey, Uuid, CheckConstraint
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
import uuid

from domain.models.database import Base


class Recipe(Base):
    """A recipe with an ordered list of ingredient quantities"""

    __tablename__ = "recipe"

    recipe_id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    name = Column(Text, nullable=False, index=True)
    cuisine = Column(Text)
    difficulty = Column(Text)
    utensils = Column(JSON, nullable=False, default=list)
    base_servings = Column(Float, nullable=False, default=1.0)
    instructions = Column(Text, nullable=False, default="")
    created_at = Column(TIMESTAMP(timezone=True), server_default=func.now())
    updated_at = Column(
        TIMESTAMP(timezone=True), server_default=func.now(), onupdate=func.now()
    )

    ingredients = relationship(
        "RecipeIngredient",
        back_populates="recipe",
        cascade="all, delete-orphan",
        order_by="RecipeIngredient.position",
    )

    __table_args__ = (
        CheckConstraint("base_servings > 0", name="ck_recipe_base_servings_pos"),
    )

    def __repr__(self):
        return f"<Recipe(id={self.recipe_id}, name='{self.name}')>"


class RecipeIngredient(Base):
    """Grams of one ingredient used per base serving of a recipe"""

    __tablename__ = "recipe_ingredient"

    recipe_ingredient_id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    recipe_id = Column(
        Uuid, ForeignKey("recipe.recipe_id", ondelete="CASCADE"), nullable=False, index=True
    )
    ingredient_id = Column(
        Uuid, ForeignKey("ingredient.ingredient_id"), nullable=False, index=True
    )
    grams_per_base = Column(Float, nullable=False)
    position = Column(Integer, nullable=False, default=0)

    recipe = relationship("Recipe", back_populates="ingredients")
    ingredient = relationship("Ingredient", back_populates="recipe_links")

    __table_args__ = (
        CheckConstraint("grams_per_base > 0", name="ck_recipe_ingredient_grams_pos"),
    )
