"""
Domain enums for MealPlanner.
"""

import enum


class MealType(str, enum.Enum):
    """Meal slot a recipe fills within a plan"""

    BREAKFAST = "breakfast"
    LUNCH = "lunch"
    DINNER = "dinner"
