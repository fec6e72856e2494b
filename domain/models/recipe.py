"""
Recipe model and its ingredient join table.
"""

from sqlalchemy import Column, Integer, String, ForeignKey
from sqlalchemy.orm import relationship

from domain.models.database import Base


class Recipe(Base):
    """A named recipe with an optional description"""

    __tablename__ = "recipe"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(120), nullable=False, index=True)
    description = Column(String(500))

    # Join rows are jointly owned: deleting either parent deletes the link.
    # Links are edited through Recipe.ingredients and MealPlan.meal_plan_recipes,
    # so only those collections also treat de-associated rows as orphans.
    ingredients = relationship(
        "RecipeIngredient",
        back_populates="recipe",
        cascade="all, delete-orphan",
    )
    meal_plan_recipes = relationship(
        "MealPlanRecipe",
        back_populates="recipe",
        cascade="all",
    )

    def __repr__(self):
        return f"Recipe(id={self.id}, name={self.name!r})"


class RecipeIngredient(Base):
    """Join entity keyed by (recipe_id, ingredient_id)"""

    __tablename__ = "recipe_ingredient"

    recipe_id = Column(
        Integer, ForeignKey("recipe.id", ondelete="CASCADE"), primary_key=True
    )
    ingredient_id = Column(
        Integer, ForeignKey("ingredient.id", ondelete="CASCADE"), primary_key=True
    )

    recipe = relationship("Recipe", back_populates="ingredients")
    ingredient = relationship("Ingredient", back_populates="recipe_ingredients")
