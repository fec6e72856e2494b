"""
Shared test fixtures and helpers for the MealPlanner test suite.

Every test gets a fresh in-memory SQLite database (foreign keys enabled by the
engine connect listener) and, for API tests, a TestClient whose database
dependency is bound to that same session.
"""

from typing import Generator

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from api.dependencies import get_db
from domain.models import Base, Ingredient, Recipe, RecipeIngredient
from main import app


@pytest.fixture(scope="function")
def engine():
    """In-memory SQLite shared across threads for the duration of one test."""
    test_engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=test_engine)
    try:
        yield test_engine
    finally:
        Base.metadata.drop_all(bind=test_engine)
        test_engine.dispose()


@pytest.fixture(scope="function")
def db_session(engine) -> Generator[Session, None, None]:
    """
    Create a database session for integration tests.

    Services commit, so isolation comes from the per-test database rather
    than from a rollback.
    """
    SessionLocal = sessionmaker(bind=engine, autoflush=False)
    session = SessionLocal()
    try:
        yield session
    finally:
        session.rollback()
        session.close()


@pytest.fixture(scope="function")
def client(db_session: Session) -> Generator[TestClient, None, None]:
    """TestClient with get_db overridden; the app lifespan is not started."""

    def _override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = _override_get_db
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.pop(get_db, None)


def make_ingredient(db: Session, name: str = "Tomato", unit: str = "g") -> Ingredient:
    ingredient = Ingredient(name=name, unit=unit)
    db.add(ingredient)
    db.commit()
    db.refresh(ingredient)
    return ingredient


def make_recipe(db: Session, name: str = "Lasagna", description: str = None, ingredients=()) -> Recipe:
    """Insert a recipe directly, linking the given Ingredient rows."""
    recipe = Recipe(name=name, description=description)
    recipe.ingredients = [RecipeIngredient(ingredient_id=i.id) for i in ingredients]
    db.add(recipe)
    db.commit()
    db.refresh(recipe)
    return recipe
