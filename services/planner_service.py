"""Meal plan service - plans and their recipe links."""

from typing import List
import logging

from sqlalchemy.orm import Session

from app.exceptions import NotFoundError
from domain.models import MealPlan, MealPlanRecipe, Recipe
from domain.schemas.plan_schemas import MealPlanCreate
from repositories import MealPlanRepository, MealPlanRecipeRepository

logger = logging.getLogger("mealplanner.planner")


class PlannerService:
    """Business logic for meal plans"""

    def __init__(self, db: Session):
        self.db = db
        self.plans = MealPlanRepository(db)
        self.links = MealPlanRecipeRepository(db)

    def list_plans(self) -> List[MealPlan]:
        return self.plans.get_all(limit=1000)

    def get_plan(self, plan_id: int) -> MealPlan:
        plan = self.plans.get_by_id(plan_id)
        if not plan:
            logger.warning("Meal plan %s not found", plan_id)
            raise NotFoundError(f"Meal plan {plan_id} not found")
        return plan

    def create_plan(self, data: MealPlanCreate) -> MealPlan:
        """
        Create a plan with its recipe links.

        Raises:
            NotFoundError: a linked recipe does not exist (nothing is written)
        """
        recipe_ids = [link.recipe_id for link in data.recipes]
        found = set()
        if recipe_ids:
            found = {
                r.id
                for r in self.db.query(Recipe.id).filter(Recipe.id.in_(recipe_ids)).all()
            }
        missing = [rid for rid in recipe_ids if rid not in found]
        if missing:
            raise NotFoundError("Linked recipes not found", details={"recipe_ids": missing})

        plan = MealPlan(date=data.date)
        plan.meal_plan_recipes = [
            MealPlanRecipe(recipe_id=link.recipe_id, meal_type=link.meal_type)
            for link in data.recipes
        ]
        created = self.plans.create(plan)
        logger.info(
            "Created meal plan %s for %s with %d recipes",
            created.id,
            created.date,
            len(recipe_ids),
        )
        return created

    def delete_plan(self, plan_id: int) -> None:
        """Delete a plan; its MealPlanRecipe rows are removed with it."""
        plan = self.get_plan(plan_id)
        self.db.delete(plan)
        self.db.commit()
        logger.info("Deleted meal plan %s", plan_id)

    def get_plan_links(self, plan_id: int) -> List[MealPlanRecipe]:
        return self.links.get_by_plan_id(plan_id)
