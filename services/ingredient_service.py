"""Ingredient service - master ingredient data management."""

from typing import List
from sqlalchemy.orm import Session
from sqlalchemy.exc import IntegrityError
import logging

from app.exceptions import ConflictError, NotFoundError
from domain.models import Ingredient
from domain.schemas.ingredient_schemas import IngredientCreate
from domain.validators import (
    INGREDIENT_NAME_MAX,
    INGREDIENT_UNIT_MAX,
    require_text,
    optional_text,
)
from repositories import IngredientRepository
from security.log_sanitizer import sanitize_for_log

logger = logging.getLogger("mealplanner.ingredient")


class IngredientService:
    """Business logic for ingredient master data management."""

    @staticmethod
    def list_ingredients(db: Session) -> List[Ingredient]:
        return IngredientRepository(db).get_all(limit=1000)

    @staticmethod
    def get_ingredient(db: Session, ingredient_id: int) -> Ingredient:
        ingredient = IngredientRepository(db).get_by_id(ingredient_id)
        if not ingredient:
            raise NotFoundError(f"Ingredient {ingredient_id} not found")
        return ingredient

    @staticmethod
    def create_ingredient(db: Session, data: IngredientCreate) -> Ingredient:
        """
        Create an ingredient.

        Raises:
            ServiceValidationError: name/unit violate their limits
            ConflictError: an ingredient with the same name (any case) exists
        """
        name = require_text("name", data.name, INGREDIENT_NAME_MAX)
        unit = optional_text("unit", data.unit, INGREDIENT_UNIT_MAX)

        repo = IngredientRepository(db)
        if repo.get_by_name(name):
            logger.warning(f"ingredient_duplicate name={sanitize_for_log(name)}")
            raise ConflictError(f"Ingredient '{name}' already exists")

        try:
            ingredient = repo.create(Ingredient(name=name, unit=unit))
        except IntegrityError as exc:
            # Another request inserted the same name first
            db.rollback()
            raise ConflictError(f"Ingredient '{name}' already exists") from exc

        logger.info(f"ingredient_created ingredient_id={ingredient.id}")
        return ingredient
