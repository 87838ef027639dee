"""
Client model - intake data a plan's macro targets are derived from.
"""

from sqlalchemy import Column, Text, Integer, Float, JSON, TIMESTAMP, Uuid
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
import uuid

from domain.models.database import Base


class Client(Base):
    """Coaching client captured by the intake form"""

    __tablename__ = "client"

    client_id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    full_name = Column(Text, nullable=False, default="")
    gender = Column(Text, nullable=False, default="")
    age = Column(Integer, nullable=False, default=0)
    height_cm = Column(Float, nullable=False, default=0.0)
    weight_kg = Column(Float, nullable=False, default=0.0)
    activity = Column(Text, nullable=False, default="")
    goal = Column(Text, nullable=False, default="")
    allergies = Column(JSON, nullable=False, default=list)
    cuisines = Column(JSON, nullable=False, default=list)
    dislikes = Column(JSON, nullable=False, default=list)
    include_meals = Column(JSON, nullable=False, default=list)

    created_at = Column(TIMESTAMP(timezone=True), server_default=func.now())
    updated_at = Column(
        TIMESTAMP(timezone=True), server_default=func.now(), onupdate=func.now()
    )

    plans = relationship("Plan", back_populates="client", cascade="all, delete-orphan")

    def __repr__(self):
        return f"<Client(id={self.client_id}, name='{self.full_name}')>"
