"""
Ingredient Repository - Data access layer for the ingredient master table
"""

from typing import List, Optional

from sqlalchemy import func
from sqlalchemy.orm import Session

from domain.models import Ingredient
from repositories.base import BaseRepository


class IngredientRepository(BaseRepository[Ingredient]):
    """Repository for ingredient master data"""

    def __init__(self, db: Session):
        super().__init__(db, Ingredient)

    def get_by_name(self, name: str) -> Optional[Ingredient]:
        """Get ingredient by name (case-insensitive)"""
        normalized_name = name.strip().lower()
        return (
            self.db.query(Ingredient)
            .filter(func.lower(Ingredient.name) == normalized_name)
            .first()
        )

    def get_many(self, ingredient_ids: List[int]) -> List[Ingredient]:
        """Get every ingredient whose ID is in ingredient_ids"""
        if not ingredient_ids:
            return []
        return self.db.query(Ingredient).filter(Ingredient.id.in_(ingredient_ids)).all()

    def get_all(self, skip: int = 0, limit: int = 100) -> List[Ingredient]:
        """Get all ingredients ordered by name"""
        return (
            self.db.query(Ingredient)
            .order_by(Ingredient.name)
            .offset(skip)
            .limit(limit)
            .all()
        )
