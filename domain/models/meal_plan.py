"""
Meal planning models.
"""

from sqlalchemy import Column, Integer, Date, Enum, ForeignKey
from sqlalchemy.orm import relationship

from domain.enums import MealType
from domain.models.database import Base


class MealPlan(Base):
    """A dated meal plan"""

    __tablename__ = "meal_plan"

    id = Column(Integer, primary_key=True, autoincrement=True)
    date = Column(Date, nullable=False, index=True)

    meal_plan_recipes = relationship(
        "MealPlanRecipe",
        back_populates="meal_plan",
        cascade="all, delete-orphan",
    )


class MealPlanRecipe(Base):
    """Join entity keyed by (meal_plan_id, recipe_id) with an optional meal slot"""

    __tablename__ = "meal_plan_recipe"

    meal_plan_id = Column(
        Integer, ForeignKey("meal_plan.id", ondelete="CASCADE"), primary_key=True
    )
    recipe_id = Column(
        Integer, ForeignKey("recipe.id", ondelete="CASCADE"), primary_key=True
    )
    meal_type = Column(
        Enum(
            MealType,
            name="meal_type",
            native_enum=False,
            values_callable=lambda e: [m.value for m in e],
        ),
        nullable=True,
    )

    meal_plan = relationship("MealPlan", back_populates="meal_plan_recipes")
    recipe = relationship("Recipe", back_populates="meal_plan_recipes")
