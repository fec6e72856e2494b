"""
Service layer tests against an in-memory database.

Covers RecipeService, IngredientService, PlannerService and RecipeFileService,
including the cascade behaviour of both join entities.
"""

import datetime
import json
import os

import pytest
from sqlalchemy import func
from sqlalchemy.orm import Session

from app.config import settings
from app.exceptions import (
    ConflictError,
    NotFoundError,
    PathTraversalError,
    ServiceValidationError,
    UnsafeDeserializationError,
)
from domain.enums import MealType
from domain.models import Ingredient, MealPlan, MealPlanRecipe, Recipe, RecipeIngredient
from domain.schemas import IngredientCreate, MealPlanCreate, RecipeCreate, RecipeUpdate
from services import IngredientService, PlannerService, RecipeFileService, RecipeService
from test_fixtures import engine, db_session, make_ingredient, make_recipe  # noqa: F401


def count(db: Session, model) -> int:
    return db.query(func.count()).select_from(model).scalar()


# =============================================================================
# RECIPE SERVICE
# =============================================================================


def test_create_recipe_with_ingredient_links(db_session: Session):
    tomato = make_ingredient(db_session, "Tomato")
    data = RecipeCreate(
        name="  Tomato Soup ", description="Hot", ingredients=[{"ingredient_id": tomato.id}]
    )

    recipe = RecipeService.create_recipe(db_session, data)

    assert recipe.id is not None
    assert recipe.name == "Tomato Soup"
    assert [link.ingredient_id for link in recipe.ingredients] == [tomato.id]


def test_create_recipe_name_length_boundary(db_session: Session):
    accepted = RecipeService.create_recipe(db_session, RecipeCreate(name="a" * 120))
    assert len(accepted.name) == 120

    # model_construct skips schema validation so the service check is exercised
    too_long = RecipeCreate.model_construct(name="a" * 121, description=None, ingredients=[])
    with pytest.raises(ServiceValidationError) as exc_info:
        RecipeService.create_recipe(db_session, too_long)
    assert exc_info.value.details["reason"] == "max_length"
    assert count(db_session, Recipe) == 1


def test_create_recipe_blank_name_rejected(db_session: Session):
    blank = RecipeCreate.model_construct(name="   ", description=None, ingredients=[])
    with pytest.raises(ServiceValidationError):
        RecipeService.create_recipe(db_session, blank)


def test_create_recipe_missing_ingredient_writes_nothing(db_session: Session):
    data = RecipeCreate(name="Ghost Stew", ingredients=[{"ingredient_id": 404}])
    with pytest.raises(NotFoundError) as exc_info:
        RecipeService.create_recipe(db_session, data)
    assert exc_info.value.details == {"ingredient_ids": [404]}
    assert count(db_session, Recipe) == 0


def test_list_recipes_by_exact_name(db_session: Session):
    make_recipe(db_session, "Soup")
    make_recipe(db_session, "Salad")

    assert [r.name for r in RecipeService.list_recipes(db_session, name="Salad")] == ["Salad"]
    assert len(RecipeService.list_recipes(db_session)) == 2


def test_update_recipe_replaces_links(db_session: Session):
    tomato = make_ingredient(db_session, "Tomato")
    basil = make_ingredient(db_session, "Basil")
    garlic = make_ingredient(db_session, "Garlic")
    recipe = make_recipe(db_session, "Sauce", ingredients=[tomato, basil])

    updated = RecipeService.update_recipe(
        db_session,
        recipe.id,
        RecipeUpdate(
            name="Garlic Sauce",
            description=None,
            ingredients=[{"ingredient_id": tomato.id}, {"ingredient_id": garlic.id}],
        ),
    )

    assert updated.name == "Garlic Sauce"
    assert sorted(link.ingredient_id for link in updated.ingredients) == sorted([tomato.id, garlic.id])
    assert count(db_session, RecipeIngredient) == 2


def test_update_missing_recipe(db_session: Session):
    with pytest.raises(NotFoundError):
        RecipeService.update_recipe(db_session, 123, RecipeUpdate(name="x"))


def test_delete_recipe_cascades_join_rows(db_session: Session):
    tomato = make_ingredient(db_session, "Tomato")
    recipe = make_recipe(db_session, "Sauce", ingredients=[tomato])
    plan = PlannerService(db_session).create_plan(
        MealPlanCreate(date=datetime.date(2024, 5, 1), recipes=[{"recipe_id": recipe.id}])
    )
    plan_id = plan.id

    RecipeService.delete_recipe(db_session, recipe.id)

    assert count(db_session, Recipe) == 0
    assert count(db_session, RecipeIngredient) == 0
    assert count(db_session, MealPlanRecipe) == 0
    # Parents on the other side survive
    assert db_session.get(MealPlan, plan_id) is not None
    assert count(db_session, Ingredient) == 1


def test_delete_missing_recipe(db_session: Session):
    with pytest.raises(NotFoundError):
        RecipeService.delete_recipe(db_session, 42)


def test_import_recipe_json(db_session: Session):
    salt = make_ingredient(db_session, "Salt")
    payload = json.dumps({"name": "Fries", "ingredients": [{"ingredient_id": salt.id}]}).encode()

    recipe = RecipeService.import_recipe(db_session, payload, "application/json; charset=utf-8")

    assert recipe.name == "Fries"
    assert [link.ingredient_id for link in recipe.ingredients] == [salt.id]


def test_import_recipe_xml(db_session: Session):
    payload = b"<recipe><name>Toast</name><description>Crisp</description></recipe>"
    recipe = RecipeService.import_recipe(db_session, payload, "application/xml")
    assert (recipe.name, recipe.description) == ("Toast", "Crisp")


def test_import_recipe_xml_with_ingredients(db_session: Session):
    salt = make_ingredient(db_session, "Salt")
    pepper = make_ingredient(db_session, "Pepper")
    payload = (
        f"<recipe><name>Chips</name><ingredients>"
        f"<ingredient><ingredient_id>{salt.id}</ingredient_id></ingredient>"
        f"<ingredient><ingredient_id>{pepper.id}</ingredient_id></ingredient>"
        f"</ingredients></recipe>"
    ).encode()

    recipe = RecipeService.import_recipe(db_session, payload, "text/xml")

    assert [link.ingredient_id for link in recipe.ingredients] == [salt.id, pepper.id]


def test_import_recipe_field_limits_are_validation_errors(db_session: Session):
    too_long = json.dumps({"name": "a" * 121}).encode()
    with pytest.raises(ServiceValidationError) as exc_info:
        RecipeService.import_recipe(db_session, too_long, "application/json")
    assert exc_info.value.details["reason"] == "max_length"

    with pytest.raises(ServiceValidationError):
        RecipeService.import_recipe(
            db_session, b"<recipe><description>x</description></recipe>", "application/xml"
        )
    assert count(db_session, Recipe) == 0


@pytest.mark.parametrize(
    "payload, content_type",
    [
        (json.dumps({"$type": "Recipe", "name": "Soup"}).encode(), "application/json"),
        (b'<!DOCTYPE r [<!ENTITY x SYSTEM "file:///etc/passwd">]><recipe><name>&x;</name></recipe>', "text/xml"),
        (b"\x80\x04\x95", "application/octet-stream"),
        (b"name: Soup", "application/x-yaml"),
        (b"[" * 30000 + b"]" * 30000, "application/json"),
        (b"<recipe><name>Soup</name><name>Stew</name></recipe>", "application/xml"),
    ],
)
def test_import_recipe_rejects_unsafe_payloads(db_session: Session, payload, content_type):
    with pytest.raises(UnsafeDeserializationError):
        RecipeService.import_recipe(db_session, payload, content_type)
    assert count(db_session, Recipe) == 0


def test_import_recipe_size_limit(db_session: Session, monkeypatch):
    monkeypatch.setattr(settings, "max_import_bytes", 10)
    with pytest.raises(ServiceValidationError):
        RecipeService.import_recipe(db_session, b'{"name": "Long enough"}', "application/json")


def test_render_card_encodes_stored_values(db_session: Session):
    onion = make_ingredient(db_session, "<b>Onion</b>")
    recipe = make_recipe(
        db_session, "<script>alert(1)</script>", description="a & b", ingredients=[onion]
    )

    html = RecipeService.render_card(db_session, recipe.id)

    assert "<script>" not in html
    assert "&lt;script&gt;alert(1)&lt;/script&gt;" in html
    assert "<li>&lt;b&gt;Onion&lt;/b&gt;</li>" in html
    assert "a &amp; b" in html


# =============================================================================
# INGREDIENT SERVICE
# =============================================================================


def test_create_ingredient_and_duplicate(db_session: Session):
    created = IngredientService.create_ingredient(db_session, IngredientCreate(name="Flour", unit="g"))
    assert created.id is not None

    with pytest.raises(ConflictError):
        IngredientService.create_ingredient(db_session, IngredientCreate(name="FLOUR"))
    assert count(db_session, Ingredient) == 1


def test_create_ingredient_unit_limit(db_session: Session):
    data = IngredientCreate.model_construct(name="Flour", unit="u" * 51)
    with pytest.raises(ServiceValidationError):
        IngredientService.create_ingredient(db_session, data)


def test_list_and_get_ingredient(db_session: Session):
    make_ingredient(db_session, "Sugar")
    make_ingredient(db_session, "Butter")

    assert [i.name for i in IngredientService.list_ingredients(db_session)] == ["Butter", "Sugar"]
    with pytest.raises(NotFoundError):
        IngredientService.get_ingredient(db_session, 999)


# =============================================================================
# PLANNER SERVICE
# =============================================================================


def test_create_plan_with_meal_types(db_session: Session):
    oats = make_recipe(db_session, "Oats")
    stew = make_recipe(db_session, "Stew")
    planner = PlannerService(db_session)

    plan = planner.create_plan(
        MealPlanCreate(
            date=datetime.date(2024, 6, 1),
            recipes=[
                {"recipe_id": oats.id, "meal_type": "breakfast"},
                {"recipe_id": stew.id, "meal_type": MealType.DINNER},
            ],
        )
    )

    links = {link.recipe_id: link.meal_type for link in planner.get_plan(plan.id).meal_plan_recipes}
    assert links == {oats.id: MealType.BREAKFAST, stew.id: MealType.DINNER}


def test_create_plan_missing_recipe_writes_nothing(db_session: Session):
    with pytest.raises(NotFoundError) as exc_info:
        PlannerService(db_session).create_plan(
            MealPlanCreate(date=datetime.date(2024, 6, 1), recipes=[{"recipe_id": 77}])
        )
    assert exc_info.value.details == {"recipe_ids": [77]}
    assert count(db_session, MealPlan) == 0


def test_delete_plan_removes_meal_plan_recipes(db_session: Session):
    recipe = make_recipe(db_session, "Oats")
    planner = PlannerService(db_session)
    plan = planner.create_plan(
        MealPlanCreate(date=datetime.date(2024, 6, 2), recipes=[{"recipe_id": recipe.id}])
    )
    assert count(db_session, MealPlanRecipe) == 1

    planner.delete_plan(plan.id)

    assert count(db_session, MealPlan) == 0
    assert count(db_session, MealPlanRecipe) == 0
    assert count(db_session, Recipe) == 1


def test_get_missing_plan(db_session: Session):
    with pytest.raises(NotFoundError):
        PlannerService(db_session).get_plan(5)


# =============================================================================
# RECIPE FILE SERVICE
# =============================================================================


def test_read_recipe_file(tmp_path):
    (tmp_path / "lasagna.txt").write_text("Layer and bake.", encoding="utf-8")
    assert RecipeFileService.read_recipe_file("lasagna.txt", str(tmp_path)) == "Layer and bake."


def test_read_recipe_content_by_id(tmp_path, monkeypatch):
    (tmp_path / "recipe_7.txt").write_text("Seven", encoding="utf-8")
    monkeypatch.setattr(settings, "recipe_files_dir", str(tmp_path))
    assert RecipeFileService.read_recipe_content(7) == "Seven"


def test_read_recipe_file_traversal(tmp_path):
    with pytest.raises(PathTraversalError):
        RecipeFileService.read_recipe_file("../../etc/passwd", str(tmp_path))


def test_read_recipe_file_missing(tmp_path):
    with pytest.raises(NotFoundError):
        RecipeFileService.read_recipe_file("nope.txt", str(tmp_path))


@pytest.mark.skipif(not hasattr(os, "symlink"), reason="symlinks unavailable")
def test_read_recipe_file_symlink_escape(tmp_path):
    base = tmp_path / "recipes"
    base.mkdir()
    outside = tmp_path / "secret.txt"
    outside.write_text("top secret", encoding="utf-8")
    os.symlink(outside, base / "link.txt")

    with pytest.raises(PathTraversalError):
        RecipeFileService.read_recipe_file("link.txt", str(base))
