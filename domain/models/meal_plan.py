"""
Meal planning models.
"""

from sqlalchemy import Column, Text, Float, JSON, TIMESTAMP, ForeignKey, Uuid, UniqueConstraint, CheckConstraint
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
import uuid

from domain.models.database import Base


class Plan(Base):
    """A client's daily plan with macro targets"""

    __tablename__ = "plan"

    plan_id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    client_id = Column(
        Uuid, ForeignKey("client.client_id", ondelete="CASCADE"), nullable=False, index=True
    )
    kcal_target = Column(Float, nullable=False)
    protein_g = Column(Float, nullable=False)
    carbs_g = Column(Float, nullable=False)
    fat_g = Column(Float, nullable=False)
    split_type = Column(Text, nullable=False, default="balanced")
    custom = Column(JSON)
    formula = Column(Text)
    created_at = Column(TIMESTAMP(timezone=True), server_default=func.now())

    client = relationship("Client", back_populates="plans")
    meals = relationship(
        "Meal", back_populates="plan", cascade="all, delete-orphan", order_by="Meal.slot"
    )


class Meal(Base):
    """
    One slot of a plan. kcal/protein/carbs/fat are a cached snapshot of the
    recipe's nutrition at the stored servings and are rewritten on every save.
    """

    __tablename__ = "meal"

    meal_id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    plan_id = Column(
        Uuid, ForeignKey("plan.plan_id", ondelete="CASCADE"), nullable=False, index=True
    )
    slot = Column(Text, nullable=False)  # Breakfast, Lunch, Dinner, Snacks, Shakes
    recipe_id = Column(Uuid, ForeignKey("recipe.recipe_id", ondelete="SET NULL"), nullable=True)
    servings = Column(Float, nullable=False, default=1.0)
    kcal = Column(Float, nullable=False, default=0.0)
    protein = Column(Float, nullable=False, default=0.0)
    carbs = Column(Float, nullable=False, default=0.0)
    fat = Column(Float, nullable=False, default=0.0)

    plan = relationship("Plan", back_populates="meals")
    recipe = relationship("Recipe")

    __table_args__ = (
        UniqueConstraint("plan_id", "slot", name="uq_meal_plan_slot"),
        CheckConstraint("servings > 0", name="ck_meal_servings_pos"),
    )
