"""Client service - intake drafts and plan creation."""

import logging
from typing import List
from uuid import UUID

from sqlalchemy.orm import Session

from app.exceptions import NotFoundError
from domain.models import Client, Plan
from domain.schemas.client_schemas import ClientDraft, PlanCreate
from repositories.client_repository import ClientRepository
from repositories.plan_repository import PlanRepository
from services.macro_service import map_to_canonical_activity, map_to_canonical_goal

logger = logging.getLogger("macroplan.client")

_LIST_FIELDS = ("allergies", "cuisines", "dislikes", "include_meals")


def _clean_list(values) -> List[str]:
    cleaned = []
    for v in values or []:
        v = getattr(v, "value", v)
        v = str(v).strip()
        if v and v not in cleaned:
            cleaned.append(v)
    return cleaned


def _draft_values(draft: ClientDraft, only_set: bool) -> dict:
    data = draft.model_dump(exclude_unset=only_set)
    for field in _LIST_FIELDS:
        if field in data:
            data[field] = _clean_list(data[field])
    for field in ("age", "height_cm", "weight_kg"):
        if field in data and data[field] is None:
            data[field] = 0
    for field in ("full_name", "gender", "activity", "goal"):
        if field in data and data[field] is None:
            data[field] = ""
    return data


class ClientService:
    """Business logic for client intake."""

    @staticmethod
    def create_client(db: Session, draft: ClientDraft) -> Client:
        """Create a client from a partial draft; missing fields get empty defaults."""
        client = Client(
            full_name="", gender="", age=0, height_cm=0.0, weight_kg=0.0, activity="", goal="",
            allergies=[], cuisines=[], dislikes=[], include_meals=[],
        )
        for field, value in _draft_values(draft, only_set=False).items():
            setattr(client, field, value)
        client = ClientRepository(db).create(client)
        logger.info("Created client draft %s", client.client_id)
        return client

    @staticmethod
    def update_client(db: Session, client_id: UUID, draft: ClientDraft) -> Client:
        """Write only the fields present in the draft."""
        repo = ClientRepository(db)
        client = repo.get_by_id(client_id)
        if client is None:
            raise NotFoundError(f"Client {client_id} not found")

        for field, value in _draft_values(draft, only_set=True).items():
            setattr(client, field, value)
        return repo.update(client)

    @staticmethod
    def get_client(db: Session, client_id: UUID) -> Client:
        """
        Load a client. Legacy activity/goal labels are mapped to their
        canonical values and the mapping is saved.
        """
        repo = ClientRepository(db)
        client = repo.get_by_id(client_id)
        if client is None:
            raise NotFoundError(f"Client {client_id} not found")

        activity = map_to_canonical_activity(client.activity)
        goal = map_to_canonical_goal(client.goal)
        if activity != client.activity or goal != client.goal:
            logger.info("Client %s: mapping legacy labels %r/%r", client_id, client.activity, client.goal)
            client.activity = activity
            client.goal = goal
            client = repo.update(client)
        return client

    @staticmethod
    def update_height(db: Session, client_id: UUID, height_cm: float) -> Client:
        repo = ClientRepository(db)
        client = repo.get_by_id(client_id)
        if client is None:
            raise NotFoundError(f"Client {client_id} not found")
        client.height_cm = height_cm
        return repo.update(client)

    @staticmethod
    def list_clients(db: Session, skip: int = 0, limit: int = 50) -> List[Client]:
        return ClientRepository(db).list_recent(skip=skip, limit=limit)

    @staticmethod
    def create_plan(db: Session, client_id: UUID, data: PlanCreate) -> Plan:
        """Create an empty plan with the given daily targets."""
        if not ClientRepository(db).exists(client_id):
            raise NotFoundError(f"Client {client_id} not found")

        plan = Plan(
            client_id=client_id,
            kcal_target=data.kcal_target,
            protein_g=data.protein_g,
            carbs_g=data.carbs_g,
            fat_g=data.fat_g,
            split_type=data.split_type.value,
            custom=data.custom.model_dump() if data.custom is not None else None,
            formula=data.formula,
        )
        plan = PlanRepository(db).create(plan)
        logger.info("Created plan %s for client %s (%.0f kcal)", plan.plan_id, client_id, plan.kcal_target)
        return plan

    @staticmethod
    def list_plans(db: Session, client_id: UUID) -> List[Plan]:
        if not ClientRepository(db).exists(client_id):
            raise NotFoundError(f"Client {client_id} not found")
        return PlanRepository(db).list_for_client(client_id)

    @staticmethod
    def delete_client(db: Session, client_id: UUID) -> None:
        """Delete a client together with its plans and their meals."""
        if not ClientRepository(db).delete(client_id):
            raise NotFoundError(f"Client {client_id} not found")
        logger.info("Deleted client %s", client_id)
