"""Pydantic schemas for recipe requests and responses."""

from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from domain.validators import RECIPE_NAME_MAX, RECIPE_DESCRIPTION_MAX


class RecipeIngredientLink(BaseModel):
    """Reference to an existing ingredient."""

    model_config = ConfigDict(extra="forbid")

    ingredient_id: int = Field(..., ge=1)


class RecipeCreate(BaseModel):
    """Body for POST /recipes and recipe imports."""

    model_config = ConfigDict(extra="forbid", str_strip_whitespace=True)

    name: str = Field(..., min_length=1, max_length=RECIPE_NAME_MAX)
    description: Optional[str] = Field(default=None, max_length=RECIPE_DESCRIPTION_MAX)
    ingredients: List[RecipeIngredientLink] = Field(default_factory=list)

    @field_validator("ingredients")
    @classmethod
    def unique_ingredients(cls, v: List[RecipeIngredientLink]) -> List[RecipeIngredientLink]:
        ids = [link.ingredient_id for link in v]
        if len(ids) != len(set(ids)):
            raise ValueError("ingredients must not repeat an ingredient_id")
        return v


class RecipeUpdate(RecipeCreate):
    """Body for PUT /recipes/{id}: a full replacement of every field."""


class RecipeDocumentLink(BaseModel):
    model_config = ConfigDict(extra="forbid")

    ingredient_id: int


class RecipeDocument(BaseModel):
    """
    Shape of an imported recipe document.

    Only the structure is pinned here. Field limits are enforced by
    RecipeService so an over-long name is a validation error, not an
    unsafe payload.
    """

    model_config = ConfigDict(extra="forbid")

    name: Optional[str] = None
    description: Optional[str] = None
    ingredients: List[RecipeDocumentLink] = Field(default_factory=list)


class RecipeIngredientResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    ingredient_id: int


class RecipeResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    description: Optional[str] = None
    ingredients: List[RecipeIngredientResponse] = []
