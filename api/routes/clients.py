"""Client intake routes"""

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session
import logging
from typing import List
from uuid import UUID

from api.responses import ERROR_RESPONSES
from domain.mappers import PlanMapper
from domain.models import get_db_session
from domain.schemas.client_schemas import ClientDraft, ClientResponse, HeightUpdate, PlanCreate
from domain.schemas.plan_schemas import PlanResponse
from services.client_service import ClientService
from services.planner_service import PlannerService

router = APIRouter(prefix="/clients", tags=["Clients"], responses=ERROR_RESPONSES)
logger = logging.getLogger("macroplan.api.clients")


@router.get("", response_model=List[ClientResponse])
def list_clients(
    skip: int = Query(default=0, ge=0),
    limit: int = Query(default=50, ge=1, le=200),
    db: Session = Depends(get_db_session),
):
    """Clients, most recently created first"""
    return [ClientResponse.model_validate(c) for c in ClientService.list_clients(db, skip, limit)]


@router.post("", response_model=ClientResponse, status_code=status.HTTP_201_CREATED)
def create_client(draft: ClientDraft, db: Session = Depends(get_db_session)):
    """Save an intake draft; any field may be missing"""
    return ClientResponse.model_validate(ClientService.create_client(db, draft))


@router.get("/{client_id}", response_model=ClientResponse)
def get_client(client_id: UUID, db: Session = Depends(get_db_session)):
    return ClientResponse.model_validate(ClientService.get_client(db, client_id))


@router.patch("/{client_id}", response_model=ClientResponse)
def update_client(client_id: UUID, draft: ClientDraft, db: Session = Depends(get_db_session)):
    """Update only the fields sent in the body"""
    return ClientResponse.model_validate(ClientService.update_client(db, client_id, draft))


@router.delete("/{client_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_client(client_id: UUID, db: Session = Depends(get_db_session)):
    """Delete a client with all of its plans"""
    ClientService.delete_client(db, client_id)


@router.put("/{client_id}/height", response_model=ClientResponse)
def update_height(client_id: UUID, body: HeightUpdate, db: Session = Depends(get_db_session)):
    return ClientResponse.model_validate(ClientService.update_height(db, client_id, body.height_cm))


@router.post(
    "/{client_id}/plans", response_model=PlanResponse, status_code=status.HTTP_201_CREATED
)
def create_plan(client_id: UUID, body: PlanCreate, db: Session = Depends(get_db_session)):
    """Create an empty plan with daily macro targets"""
    plan = ClientService.create_plan(db, client_id, body)
    return PlanMapper.to_response(PlannerService(db).get_plan(plan.plan_id))


@router.get("/{client_id}/plans", response_model=List[PlanResponse])
def list_plans(client_id: UUID, db: Session = Depends(get_db_session)):
    planner = PlannerService(db)
    return [
        PlanMapper.to_response(planner.get_plan(p.plan_id))
        for p in ClientService.list_plans(db, client_id)
    ]
