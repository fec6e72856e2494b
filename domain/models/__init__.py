"""
Domain models package - SQLAlchemy ORM models.
"""

from domain.models.database import (
    Base,
    engine,
    SessionLocal,
    init_database,
    get_db_session,
)
from domain.models.recipe import Recipe, RecipeIngredient
from domain.models.ingredient import Ingredient
from domain.models.meal_plan import MealPlan, MealPlanRecipe

__all__ = [
    # Database
    "Base",
    "engine",
    "SessionLocal",
    "init_database",
    "get_db_session",
    # Recipe models
    "Recipe",
    "RecipeIngredient",
    # Ingredient models
    "Ingredient",
    # Meal plan models
    "MealPlan",
    "MealPlanRecipe",
]
