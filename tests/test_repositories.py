"""
Tests for the repository classes against a real (in-memory SQLite) database.

- RecipeRepository: eager ingredient links, exact-name search through bound parameters
- IngredientRepository: case-insensitive lookup, bulk fetch, ordering
- MealPlanRepository / MealPlanRecipeRepository: ordering and join rows
- Foreign keys: ON DELETE CASCADE is enforced at the database level
"""

import datetime

import pytest
from sqlalchemy import text
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from domain.enums import MealType
from domain.models import Ingredient, MealPlan, MealPlanRecipe, Recipe, RecipeIngredient
from repositories import (
    IngredientRepository,
    MealPlanRecipeRepository,
    MealPlanRepository,
    RecipeIngredientRepository,
    RecipeRepository,
)
from test_fixtures import engine, db_session, make_ingredient, make_recipe  # noqa: F401


# =============================================================================
# RECIPE REPOSITORY TESTS
# =============================================================================


def test_recipe_repository_get_by_id_loads_links(db_session: Session):
    tomato = make_ingredient(db_session, "Tomato")
    basil = make_ingredient(db_session, "Basil")
    recipe = make_recipe(db_session, "Bruschetta", ingredients=[tomato, basil])

    found = RecipeRepository(db_session).get_by_id(recipe.id)

    assert found is not None
    assert sorted(link.ingredient_id for link in found.ingredients) == sorted([tomato.id, basil.id])
    assert RecipeRepository(db_session).get_by_id(9999) is None


def test_recipe_repository_search_by_name_is_exact(db_session: Session):
    make_recipe(db_session, "Soup")
    make_recipe(db_session, "Soup")
    make_recipe(db_session, "Soup of the day")

    repo = RecipeRepository(db_session)
    assert [r.name for r in repo.search_by_name("Soup")] == ["Soup", "Soup"]
    assert repo.search_by_name("soup") == []


def test_recipe_repository_search_treats_input_as_data(db_session: Session):
    make_recipe(db_session, "Soup")
    repo = RecipeRepository(db_session)

    assert repo.search_by_name("' OR '1'='1") == []
    assert repo.search_by_name("Soup'; DROP TABLE recipe; --") == []
    assert len(repo.get_all()) == 1


def test_recipe_ingredient_repository_lookups(db_session: Session):
    tomato = make_ingredient(db_session, "Tomato")
    first = make_recipe(db_session, "Sauce", ingredients=[tomato])
    second = make_recipe(db_session, "Salad", ingredients=[tomato])

    repo = RecipeIngredientRepository(db_session)
    assert [link.ingredient_id for link in repo.get_by_recipe_id(first.id)] == [tomato.id]
    assert {link.recipe_id for link in repo.get_by_ingredient_id(tomato.id)} == {first.id, second.id}
    assert repo.exists((first.id, tomato.id))


# =============================================================================
# INGREDIENT REPOSITORY TESTS
# =============================================================================


def test_ingredient_repository_get_by_name_case_insensitive(db_session: Session):
    make_ingredient(db_session, "Olive Oil", "ml")
    repo = IngredientRepository(db_session)

    assert repo.get_by_name("olive oil").unit == "ml"
    assert repo.get_by_name("  OLIVE OIL ").name == "Olive Oil"
    assert repo.get_by_name("Butter") is None


def test_ingredient_repository_get_many_and_order(db_session: Session):
    salt = make_ingredient(db_session, "Salt")
    apple = make_ingredient(db_session, "Apple")
    repo = IngredientRepository(db_session)

    assert {i.id for i in repo.get_many([salt.id, apple.id, 999])} == {salt.id, apple.id}
    assert repo.get_many([]) == []
    assert [i.name for i in repo.get_all()] == ["Apple", "Salt"]


def test_ingredient_name_unique_constraint(db_session: Session):
    make_ingredient(db_session, "Salt")
    db_session.add(Ingredient(name="Salt"))
    with pytest.raises(IntegrityError):
        db_session.commit()
    db_session.rollback()


# =============================================================================
# MEAL PLAN REPOSITORY TESTS
# =============================================================================


def test_meal_plan_repository_orders_most_recent_first(db_session: Session):
    recipe = make_recipe(db_session, "Oats")
    older = MealPlan(date=datetime.date(2024, 1, 1))
    newer = MealPlan(date=datetime.date(2024, 2, 1))
    newer.meal_plan_recipes = [MealPlanRecipe(recipe_id=recipe.id, meal_type=MealType.BREAKFAST)]
    repo = MealPlanRepository(db_session)
    repo.create(older)
    repo.create(newer)

    plans = repo.get_all()
    assert [p.date for p in plans] == [datetime.date(2024, 2, 1), datetime.date(2024, 1, 1)]
    assert plans[0].meal_plan_recipes[0].meal_type == MealType.BREAKFAST

    links = MealPlanRecipeRepository(db_session).get_by_recipe_id(recipe.id)
    assert [link.meal_plan_id for link in links] == [newer.id]


def test_meal_type_stored_as_value(db_session: Session):
    recipe = make_recipe(db_session, "Stew")
    plan = MealPlan(date=datetime.date(2024, 3, 1))
    plan.meal_plan_recipes = [MealPlanRecipe(recipe_id=recipe.id, meal_type=MealType.DINNER)]
    MealPlanRepository(db_session).create(plan)

    stored = db_session.execute(text("SELECT meal_type FROM meal_plan_recipe")).scalar()
    assert stored == "dinner"


# =============================================================================
# DATABASE-LEVEL CASCADE
# =============================================================================


def test_foreign_keys_enforced(db_session: Session):
    db_session.add(RecipeIngredient(recipe_id=1, ingredient_id=1))
    with pytest.raises(IntegrityError):
        db_session.commit()
    db_session.rollback()


def test_on_delete_cascade_without_orm(db_session: Session):
    tomato = make_ingredient(db_session, "Tomato")
    recipe = make_recipe(db_session, "Sauce", ingredients=[tomato])
    plan = MealPlan(date=datetime.date(2024, 4, 1))
    plan.meal_plan_recipes = [MealPlanRecipe(recipe_id=recipe.id)]
    MealPlanRepository(db_session).create(plan)
    recipe_id, tomato_id = recipe.id, tomato.id
    db_session.expunge_all()

    db_session.execute(text("DELETE FROM recipe WHERE id = :id"), {"id": recipe_id})
    db_session.commit()

    assert db_session.execute(text("SELECT COUNT(*) FROM recipe_ingredient")).scalar() == 0
    assert db_session.execute(text("SELECT COUNT(*) FROM meal_plan_recipe")).scalar() == 0
    assert db_session.execute(text("SELECT COUNT(*) FROM meal_plan")).scalar() == 1
    assert db_session.get(Ingredient, tomato_id) is not None
