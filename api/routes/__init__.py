"""API routes package"""

from . import recipes, ingredients, mealplans, recipe_files, health

__all__ = ["recipes", "ingredients", "mealplans", "recipe_files", "health"]
