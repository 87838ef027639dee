"""Ingredient master data routes"""

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session
import logging
from typing import List, Optional
from uuid import UUID

from api.responses import ERROR_RESPONSES, PaginatedResponse, paginated_response
from domain.models import get_db_session
from domain.schemas.ingredient_schemas import (
    GramEstimate,
    IngredientCreate,
    IngredientMatch,
    IngredientResponse,
)
from services.ingredient_service import IngredientService, estimate_grams

router = APIRouter(prefix="/ingredients", tags=["Ingredients"], responses=ERROR_RESPONSES)
logger = logging.getLogger("macroplan.api.ingredients")


@router.get("", response_model=PaginatedResponse[IngredientResponse])
def list_ingredients(
    search: Optional[str] = Query(default=None, description="Case-insensitive name filter"),
    page: int = Query(default=1, ge=1),
    page_size: int = Query(default=20, ge=1, le=100),
    db: Session = Depends(get_db_session),
):
    items, total = IngredientService.list_ingredients(db, search=search, page=page, page_size=page_size)
    return paginated_response(
        [IngredientResponse.model_validate(i) for i in items], total, page, page_size
    )


@router.get("/suggest", response_model=List[IngredientMatch])
def suggest_ingredients(
    q: str = Query(..., description="Free-text ingredient name"),
    db: Session = Depends(get_db_session),
):
    """Top five ingredient names matching a free-text query"""
    return IngredientService.suggest_matches(db, q)


@router.get("/estimate-grams", response_model=GramEstimate)
def estimate_ingredient_grams(
    qty: Optional[float] = Query(default=None),
    unit: Optional[str] = Query(default=None),
    name: Optional[str] = Query(default=None),
):
    """
    Convert a household measure to grams.

    - **qty**: amount, e.g. 2
    - **unit**: g, ml, tbsp, tsp, cup, fl oz, oz, lb, piece
    - **name**: ingredient name, used for density guesses
    """
    return GramEstimate(**estimate_grams(qty, unit, name))


@router.post("", response_model=IngredientResponse, status_code=status.HTTP_201_CREATED)
def create_ingredient(body: IngredientCreate, db: Session = Depends(get_db_session)):
    return IngredientResponse.model_validate(IngredientService.create_ingredient(db, body))


@router.get("/{ingredient_id}", response_model=IngredientResponse)
def get_ingredient(ingredient_id: UUID, db: Session = Depends(get_db_session)):
    return IngredientResponse.model_validate(IngredientService.get_ingredient(db, ingredient_id))


@router.put("/{ingredient_id}", response_model=IngredientResponse)
def update_ingredient(ingredient_id: UUID, body: IngredientCreate, db: Session = Depends(get_db_session)):
    return IngredientResponse.model_validate(
        IngredientService.update_ingredient(db, ingredient_id, body)
    )


@router.delete("/{ingredient_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_ingredient(ingredient_id: UUID, db: Session = Depends(get_db_session)):
    """Delete an ingredient; refused while any recipe uses it"""
    IngredientService.delete_ingredient(db, ingredient_id)
