"""Recipe service - recipe CRUD, import and HTML rendering."""

from typing import Iterable, List, Optional, Union
import logging

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.config import settings
from app.exceptions import NotFoundError, ServiceValidationError, UnsafeDeserializationError
from domain.models import Recipe, RecipeIngredient
from domain.schemas.recipe_schemas import RecipeCreate, RecipeDocument, RecipeUpdate
from domain.validators import (
    RECIPE_NAME_MAX,
    RECIPE_DESCRIPTION_MAX,
    require_text,
    optional_text,
)
from repositories import RecipeRepository, IngredientRepository
from security.log_sanitizer import sanitize_for_log
from security.output import render_recipe_card
from security.serialization import deserialize, model_from_xml

logger = logging.getLogger("mealplanner.recipe")

JSON_CONTENT_TYPES = ("application/json",)
XML_CONTENT_TYPES = ("application/xml", "text/xml")


class RecipeService:
    """Business logic for recipes"""

    @staticmethod
    def list_recipes(db: Session, name: Optional[str] = None) -> List[Recipe]:
        """Return all recipes, or those whose name equals ``name`` exactly."""
        repo = RecipeRepository(db)
        if name is not None:
            return repo.search_by_name(name)
        return repo.get_all(limit=1000)

    @staticmethod
    def get_recipe(db: Session, recipe_id: int) -> Recipe:
        recipe = RecipeRepository(db).get_by_id(recipe_id)
        if not recipe:
            logger.warning(f"recipe_not_found recipe_id={recipe_id}")
            raise NotFoundError(f"Recipe {recipe_id} not found")
        return recipe

    @staticmethod
    def _ingredient_ids(db: Session, data: Union[RecipeCreate, RecipeDocument]) -> List[int]:
        """Check every linked ingredient exists; return the IDs in request order."""
        ids = [link.ingredient_id for link in (data.ingredients or [])]
        if len(ids) != len(set(ids)):
            raise ServiceValidationError("ingredients must not repeat an ingredient_id")
        found = {i.id for i in IngredientRepository(db).get_many(ids)}
        missing = [i for i in ids if i not in found]
        if missing:
            raise NotFoundError(
                "Linked ingredients not found", details={"ingredient_ids": missing}
            )
        return ids

    @staticmethod
    def create_recipe(db: Session, data: Union[RecipeCreate, RecipeDocument]) -> Recipe:
        """
        Create a recipe and its ingredient links in one transaction.

        Raises:
            ServiceValidationError: name/description violate their limits
            NotFoundError: a linked ingredient does not exist
        """
        name = require_text("name", data.name, RECIPE_NAME_MAX)
        description = optional_text("description", data.description, RECIPE_DESCRIPTION_MAX)
        ingredient_ids = RecipeService._ingredient_ids(db, data)

        recipe = Recipe(name=name, description=description)
        recipe.ingredients = [RecipeIngredient(ingredient_id=i) for i in ingredient_ids]
        try:
            db.add(recipe)
            db.commit()
        except IntegrityError as exc:
            db.rollback()
            logger.warning(f"recipe_create_failed error={exc.orig}")
            raise ServiceValidationError("Recipe violates a data constraint") from exc
        db.refresh(recipe)

        logger.info(
            f"recipe_created recipe_id={recipe.id} name={sanitize_for_log(name)} "
            f"ingredients_count={len(ingredient_ids)}"
        )
        return recipe

    @staticmethod
    def update_recipe(db: Session, recipe_id: int, data: RecipeUpdate) -> Recipe:
        """Replace name, description and ingredient links of an existing recipe."""
        recipe = RecipeService.get_recipe(db, recipe_id)
        name = require_text("name", data.name, RECIPE_NAME_MAX)
        description = optional_text("description", data.description, RECIPE_DESCRIPTION_MAX)
        ingredient_ids = RecipeService._ingredient_ids(db, data)

        recipe.name = name
        recipe.description = description

        # Keep existing link objects so unchanged keys are not deleted and re-inserted
        existing = {link.ingredient_id: link for link in recipe.ingredients}
        recipe.ingredients = [
            existing.get(i) or RecipeIngredient(ingredient_id=i) for i in ingredient_ids
        ]
        try:
            db.commit()
        except IntegrityError as exc:
            db.rollback()
            raise ServiceValidationError("Recipe violates a data constraint") from exc
        db.refresh(recipe)

        logger.info(f"recipe_updated recipe_id={recipe_id}")
        return recipe

    @staticmethod
    def delete_recipe(db: Session, recipe_id: int) -> None:
        """Delete a recipe; its ingredient and meal-plan links go with it."""
        recipe = RecipeService.get_recipe(db, recipe_id)
        db.delete(recipe)
        db.commit()
        logger.info(f"recipe_deleted recipe_id={recipe_id}")

    @staticmethod
    def import_recipe(db: Session, payload: bytes, content_type: Optional[str]) -> Recipe:
        """
        Create a recipe from an uploaded JSON or XML document.

        The document is decoded into RecipeDocument only; anything else fails
        with UnsafeDeserializationError before the database is touched. Field
        limits are then applied by create_recipe (ServiceValidationError).
        """
        if len(payload) > settings.max_import_bytes:
            raise ServiceValidationError(
                "Import document too large", details={"limit": settings.max_import_bytes}
            )
        media_type = (content_type or "").split(";", 1)[0].strip().lower()
        if media_type in JSON_CONTENT_TYPES:
            data = deserialize(payload, RecipeDocument)
        elif media_type in XML_CONTENT_TYPES:
            data = model_from_xml(payload, RecipeDocument)
        else:
            raise UnsafeDeserializationError(
                "Unsupported import format", details={"content_type": sanitize_for_log(media_type, 80)}
            )
        logger.info(f"recipe_import_accepted format={media_type}")
        return RecipeService.create_recipe(db, data)

    @staticmethod
    def render_card(db: Session, recipe_id: int) -> str:
        """HTML card for a recipe with every stored value encoded."""
        recipe = RecipeService.get_recipe(db, recipe_id)
        names: Iterable[str] = [
            link.ingredient.name for link in recipe.ingredients if link.ingredient
        ]
        return render_recipe_card(recipe.name, recipe.description, names)
