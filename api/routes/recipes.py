"""
Recipe routes - recipe library and per-recipe nutrition.
"""

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session
import logging
from typing import List, Optional
from uuid import UUID

from api.responses import ERROR_RESPONSES, PaginatedResponse, paginated_response
from domain.mappers import RecipeMapper
from domain.models import get_db_session
from domain.schemas.recipe_schemas import (
    NutritionResponse,
    RecipeCreate,
    RecipeResponse,
    RecipeSummary,
    ServingScaleResponse,
)
from services.nutrition_service import NutritionService, practical_servings
from services.recipe_service import RecipeService

router = APIRouter(prefix="/recipes", tags=["Recipes"], responses=ERROR_RESPONSES)
logger = logging.getLogger("macroplan.api.recipes")


@router.get("", response_model=PaginatedResponse[RecipeSummary])
def list_recipes(
    q: Optional[str] = Query(default=None, description="Search in recipe names"),
    cuisine: Optional[str] = Query(default=None, description="Cuisine filter"),
    page: int = Query(default=1, ge=1),
    page_size: int = Query(default=20, ge=1, le=100),
    db: Session = Depends(get_db_session),
):
    """
    Recipes with rounded per-serving nutrition.

    - **q**: case-insensitive name search
    - **cuisine**: exact cuisine
    """
    items, total = RecipeService.list_recipes(db, q=q, cuisine=cuisine, page=page, page_size=page_size)
    return paginated_response(items, total, page, page_size)


@router.get("/cuisines", response_model=List[str])
def list_cuisines(db: Session = Depends(get_db_session)):
    return RecipeService.get_cuisines(db)


@router.post("", response_model=RecipeResponse, status_code=status.HTTP_201_CREATED)
def create_recipe(body: RecipeCreate, db: Session = Depends(get_db_session)):
    return RecipeMapper.to_response(RecipeService.create_recipe(db, body))


@router.get("/{recipe_id}", response_model=RecipeResponse)
def get_recipe(recipe_id: UUID, db: Session = Depends(get_db_session)):
    return RecipeMapper.to_response(RecipeService.get_recipe(db, recipe_id))


@router.put("/{recipe_id}", response_model=RecipeResponse)
def update_recipe(recipe_id: UUID, body: RecipeCreate, db: Session = Depends(get_db_session)):
    """Replace a recipe; meals using it get fresh nutrition snapshots"""
    return RecipeMapper.to_response(RecipeService.update_recipe(db, recipe_id, body))


@router.delete("/{recipe_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_recipe(recipe_id: UUID, db: Session = Depends(get_db_session)):
    RecipeService.delete_recipe(db, recipe_id)


@router.post(
    "/{recipe_id}/duplicate", response_model=RecipeResponse, status_code=status.HTTP_201_CREATED
)
def duplicate_recipe(recipe_id: UUID, db: Session = Depends(get_db_session)):
    return RecipeMapper.to_response(RecipeService.duplicate_recipe(db, recipe_id))


@router.get("/{recipe_id}/nutrition", response_model=NutritionResponse)
def recipe_nutrition(
    recipe_id: UUID,
    servings: float = Query(default=1.0, gt=0, description="Servings to cook"),
    db: Session = Depends(get_db_session),
):
    """Total nutrition of the recipe at the given servings, unrounded"""
    return NutritionResponse(**NutritionService.calc_recipe_nutrition(db, recipe_id, servings).to_dict())


@router.get("/{recipe_id}/scale", response_model=ServingScaleResponse)
def scale_recipe(
    recipe_id: UUID,
    target_kcal: float = Query(..., gt=0, description="kcal the meal should deliver"),
    db: Session = Depends(get_db_session),
):
    """Servings needed to hit a kcal target, exact and rounded to a practical amount"""
    servings = NutritionService.scale_recipe_to_kcal(db, recipe_id, target_kcal)
    return ServingScaleResponse(
        recipe_id=recipe_id,
        target_kcal=target_kcal,
        servings=servings,
        practical_servings=practical_servings(servings),
    )
