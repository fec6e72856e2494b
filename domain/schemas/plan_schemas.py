import datetime
from typing import List, Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator

from domain.enums import MealType


class MealPlanRecipeLink(BaseModel):
    model_config = ConfigDict(extra="forbid")

    recipe_id: int = Field(..., ge=1)
    meal_type: Optional[MealType] = None


class MealPlanCreate(BaseModel):
    model_config = ConfigDict(extra="forbid")

    date: datetime.date
    recipes: List[MealPlanRecipeLink] = Field(default_factory=list)

    @field_validator("recipes")
    @classmethod
    def unique_recipes(cls, v: List[MealPlanRecipeLink]) -> List[MealPlanRecipeLink]:
        ids = [link.recipe_id for link in v]
        if len(ids) != len(set(ids)):
            raise ValueError("recipes must not repeat a recipe_id")
        return v


class MealPlanRecipeResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    recipe_id: int
    meal_type: Optional[MealType] = None


class MealPlanResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    date: datetime.date
    recipes: List[MealPlanRecipeResponse] = Field(
        default_factory=list,
        validation_alias=AliasChoices("meal_plan_recipes", "recipes"),
    )
