"""Ingredient master data routes"""

from typing import List

from fastapi import APIRouter, Depends, Request, Response, status
from sqlalchemy.orm import Session

from api.dependencies import get_db
from domain.schemas.ingredient_schemas import IngredientCreate, IngredientResponse
from services.ingredient_service import IngredientService

router = APIRouter(prefix="/ingredients", tags=["Ingredients"])


@router.get("", response_model=List[IngredientResponse])
def list_ingredients(db: Session = Depends(get_db)):
    return [IngredientResponse.model_validate(i) for i in IngredientService.list_ingredients(db)]


@router.get("/{ingredient_id}", response_model=IngredientResponse)
def get_ingredient(ingredient_id: int, db: Session = Depends(get_db)):
    return IngredientResponse.model_validate(IngredientService.get_ingredient(db, ingredient_id))


@router.post("", response_model=IngredientResponse, status_code=status.HTTP_201_CREATED)
def create_ingredient(
    data: IngredientCreate, request: Request, response: Response, db: Session = Depends(get_db)
):
    """Create an ingredient; names are unique regardless of case."""
    ingredient = IngredientService.create_ingredient(db, data)
    response.headers["Location"] = str(
        request.url_for("get_ingredient", ingredient_id=ingredient.id).path
    )
    return IngredientResponse.model_validate(ingredient)
