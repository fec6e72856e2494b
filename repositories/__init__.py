"""
Repositories package - Data access layer.
"""

from repositories.base import BaseRepository
from repositories.recipe_repository import RecipeRepository, RecipeIngredientRepository
from repositories.ingredient_repository import IngredientRepository
from repositories.meal_plan_repository import MealPlanRepository, MealPlanRecipeRepository

__all__ = [
    "BaseRepository",
    "RecipeRepository",
    "RecipeIngredientRepository",
    "IngredientRepository",
    "MealPlanRepository",
    "MealPlanRecipeRepository",
]
