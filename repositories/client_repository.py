"""
Client Repository - Data access layer for coaching clients
"""

from typing import List
from sqlalchemy.orm import Session

from domain.models import Client
from repositories.base import BaseRepository


class ClientRepository(BaseRepository[Client]):
    """Repository for client data access"""

    def __init__(self, db: Session):
        super().__init__(db, Client)

    def list_recent(self, skip: int = 0, limit: int = 50) -> List[Client]:
        """Clients ordered by most recently created"""
        return (
            self.db.query(Client)
            .order_by(Client.created_at.desc(), Client.full_name)
            .offset(skip)
            .limit(limit)
            .all()
        )
