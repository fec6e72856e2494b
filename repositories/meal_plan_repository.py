"""
Meal Plan Repository - Data access layer for meal plan operations
"""

from typing import List, Optional

from sqlalchemy.orm import Session, selectinload

from domain.models import MealPlan, MealPlanRecipe
from repositories.base import BaseRepository


class MealPlanRepository(BaseRepository[MealPlan]):
    """Repository for meal plan data access"""

    def __init__(self, db: Session):
        super().__init__(db, MealPlan)

    def get_by_id(self, plan_id: int) -> Optional[MealPlan]:
        """Get meal plan by ID with recipe links loaded"""
        return (
            self.db.query(MealPlan)
            .options(selectinload(MealPlan.meal_plan_recipes))
            .filter(MealPlan.id == plan_id)
            .first()
        )

    def get_all(self, skip: int = 0, limit: int = 100) -> List[MealPlan]:
        """Get all meal plans, most recent date first"""
        return (
            self.db.query(MealPlan)
            .options(selectinload(MealPlan.meal_plan_recipes))
            .order_by(MealPlan.date.desc(), MealPlan.id)
            .offset(skip)
            .limit(limit)
            .all()
        )


class MealPlanRecipeRepository(BaseRepository[MealPlanRecipe]):
    """Repository for meal plan/recipe join rows"""

    def __init__(self, db: Session):
        super().__init__(db, MealPlanRecipe)

    def get_by_plan_id(self, plan_id: int) -> List[MealPlanRecipe]:
        """Get all recipe links for a plan"""
        return (
            self.db.query(MealPlanRecipe)
            .filter(MealPlanRecipe.meal_plan_id == plan_id)
            .all()
        )

    def get_by_recipe_id(self, recipe_id: int) -> List[MealPlanRecipe]:
        """Get all plan links for a recipe"""
        return (
            self.db.query(MealPlanRecipe)
            .filter(MealPlanRecipe.recipe_id == recipe_id)
            .all()
        )
