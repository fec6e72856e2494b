"""
Recipe Repository - Data access layer for recipes and their ingredient links
"""

from typing import List, Optional

from sqlalchemy.orm import Session, selectinload

from domain.models import Recipe, RecipeIngredient
from repositories.base import BaseRepository
from security.query import bound_query


class RecipeRepository(BaseRepository[Recipe]):
    """Repository for recipe data access"""

    def __init__(self, db: Session):
        super().__init__(db, Recipe)

    def get_by_id(self, recipe_id: int) -> Optional[Recipe]:
        """Get recipe by ID with ingredient links loaded"""
        return (
            self.db.query(Recipe)
            .options(selectinload(Recipe.ingredients))
            .filter(Recipe.id == recipe_id)
            .first()
        )

    def get_all(self, skip: int = 0, limit: int = 100) -> List[Recipe]:
        """Get all recipes ordered by ID"""
        return (
            self.db.query(Recipe)
            .options(selectinload(Recipe.ingredients))
            .order_by(Recipe.id)
            .offset(skip)
            .limit(limit)
            .all()
        )

    def search_by_name(self, name: str) -> List[Recipe]:
        """
        Exact-name lookup through a raw parameterized statement.

        The name is only ever a bound parameter.
        """
        stmt = bound_query("SELECT id FROM recipe WHERE name = :name ORDER BY id", name=name)
        ids = [row.id for row in self.db.execute(stmt)]
        if not ids:
            return []
        return (
            self.db.query(Recipe)
            .options(selectinload(Recipe.ingredients))
            .filter(Recipe.id.in_(ids))
            .order_by(Recipe.id)
            .all()
        )


class RecipeIngredientRepository(BaseRepository[RecipeIngredient]):
    """Repository for recipe/ingredient join rows"""

    def __init__(self, db: Session):
        super().__init__(db, RecipeIngredient)

    def get_by_recipe_id(self, recipe_id: int) -> List[RecipeIngredient]:
        return (
            self.db.query(RecipeIngredient)
            .filter(RecipeIngredient.recipe_id == recipe_id)
            .all()
        )

    def get_by_ingredient_id(self, ingredient_id: int) -> List[RecipeIngredient]:
        return (
            self.db.query(RecipeIngredient)
            .filter(RecipeIngredient.ingredient_id == ingredient_id)
            .all()
        )
