"""Services package - Business logic layer"""

from services.recipe_service import RecipeService
from services.ingredient_service import IngredientService
from services.planner_service import PlannerService
from services.recipe_file_service import RecipeFileService

__all__ = [
    "RecipeService",
    "IngredientService",
    "PlannerService",
    "RecipeFileService",
]
