"""Pydantic schemas for ingredient requests and responses."""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from domain.validators import INGREDIENT_NAME_MAX, INGREDIENT_UNIT_MAX


class IngredientCreate(BaseModel):
    model_config = ConfigDict(extra="forbid", str_strip_whitespace=True)

    name: str = Field(..., min_length=1, max_length=INGREDIENT_NAME_MAX)
    unit: Optional[str] = Field(default=None, max_length=INGREDIENT_UNIT_MAX)


class IngredientResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    unit: Optional[str] = None
