"""
Domain schemas package - Pydantic models for validation.
"""

from domain.schemas.recipe_schemas import (
    RecipeIngredientLink,
    RecipeCreate,
    RecipeUpdate,
    RecipeDocumentLink,
    RecipeDocument,
    RecipeIngredientResponse,
    RecipeResponse,
)
from domain.schemas.ingredient_schemas import IngredientCreate, IngredientResponse
from domain.schemas.plan_schemas import (
    MealPlanRecipeLink,
    MealPlanCreate,
    MealPlanRecipeResponse,
    MealPlanResponse,
)

__all__ = [
    # Recipe schemas
    "RecipeIngredientLink",
    "RecipeCreate",
    "RecipeUpdate",
    "RecipeDocumentLink",
    "RecipeDocument",
    "RecipeIngredientResponse",
    "RecipeResponse",
    # Ingredient schemas
    "IngredientCreate",
    "IngredientResponse",
    # Meal plan schemas
    "MealPlanRecipeLink",
    "MealPlanCreate",
    "MealPlanRecipeResponse",
    "MealPlanResponse",
]
