"""Meal plan routes"""

from typing import List

from fastapi import APIRouter, Depends, Request, Response, status
from sqlalchemy.orm import Session

from api.dependencies import get_db
from domain.schemas.plan_schemas import MealPlanCreate, MealPlanResponse
from services.planner_service import PlannerService

router = APIRouter(prefix="/mealplans", tags=["Meal Plans"])


@router.get("", response_model=List[MealPlanResponse])
def list_meal_plans(db: Session = Depends(get_db)):
    """All meal plans with their recipe links, most recent first."""
    return [MealPlanResponse.model_validate(p) for p in PlannerService(db).list_plans()]


@router.post("", response_model=MealPlanResponse, status_code=status.HTTP_201_CREATED)
def create_meal_plan(
    data: MealPlanCreate, request: Request, response: Response, db: Session = Depends(get_db)
):
    """Create a meal plan; every linked recipe must already exist."""
    plan = PlannerService(db).create_plan(data)
    response.headers["Location"] = str(request.url_for("get_meal_plan", plan_id=plan.id).path)
    return MealPlanResponse.model_validate(plan)


@router.get("/{plan_id}", response_model=MealPlanResponse)
def get_meal_plan(plan_id: int, db: Session = Depends(get_db)):
    return MealPlanResponse.model_validate(PlannerService(db).get_plan(plan_id))


@router.delete("/{plan_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_meal_plan(plan_id: int, db: Session = Depends(get_db)):
    """Delete a meal plan and its recipe links."""
    PlannerService(db).delete_plan(plan_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
