"""
Base repository for the data access layer.
Services talk to repositories; only repositories build queries.
"""

from typing import Generic, TypeVar, Optional, Type
from uuid import UUID
from sqlalchemy.orm import Session
from abc import ABC

ModelType = TypeVar("ModelType")

LIKE_ESCAPE = "\\"


def contains_pattern(text: str) -> str:
    """Case-folded LIKE pattern matching text anywhere, with wildcards escaped"""
    text = text.lower().strip()
    for char in (LIKE_ESCAPE, "%", "_"):
        text = text.replace(char, LIKE_ESCAPE + char)
    return f"%{text}%"


class BaseRepository(Generic[ModelType], ABC):
    """
    Primary-key CRUD shared by the ingredient, recipe, client, plan and
    meal repositories. Every model here has a single UUID primary key, so
    lookups go through Session.get().
    """

    def __init__(self, db: Session, model: Type[ModelType]):
        self.db = db
        self.model = model

    def get_by_id(self, entity_id: UUID) -> Optional[ModelType]:
        """
        Get entity by primary key.

        Args:
            entity_id: Entity UUID

        Returns:
            Entity or None if not found
        """
        return self.db.get(self.model, entity_id)

    def exists(self, entity_id: UUID) -> bool:
        return self.get_by_id(entity_id) is not None

    def count(self) -> int:
        return self.db.query(self.model).count()

    def create(self, entity: ModelType) -> ModelType:
        """Insert, commit and reload server defaults (created_at)"""
        self.db.add(entity)
        self.db.commit()
        self.db.refresh(entity)
        return entity

    def update(self, entity: ModelType) -> ModelType:
        """Commit pending attribute changes on an attached entity"""
        self.db.commit()
        self.db.refresh(entity)
        return entity

    def delete(self, entity_id: UUID) -> bool:
        """Delete by primary key; False when nothing matched"""
        entity = self.get_by_id(entity_id)
        if entity is None:
            return False
        self.db.delete(entity)
        self.db.commit()
        return True
