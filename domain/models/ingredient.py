"""
Ingredient model - master ingredient table.
"""

from sqlalchemy import Column, Integer, String
from sqlalchemy.orm import relationship

from domain.models.database import Base


class Ingredient(Base):
    """
    Master ingredient table.

    Names are stored trimmed; uniqueness is checked case-insensitively by the
    repository before insert and enforced exactly by the unique constraint.
    """

    __tablename__ = "ingredient"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(100), nullable=False, unique=True, index=True)
    unit = Column(String(50))

    recipe_ingredients = relationship(
        "RecipeIngredient",
        back_populates="ingredient",
        cascade="all",
    )

    def __repr__(self):
        return f"Ingredient(id={self.id}, name={self.name!r})"
