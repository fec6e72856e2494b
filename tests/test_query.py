"""Tests for security.query"""

import pytest
from sqlalchemy import text

from app.exceptions import ServiceValidationError
from domain.models import Recipe
from security.query import bound_query, placeholders
from test_fixtures import engine, db_session  # noqa: F401


def test_placeholders_ignore_postgres_casts():
    sql = "SELECT id::text FROM recipe WHERE name = :name AND id > :min_id"
    assert placeholders(sql) == {"name", "min_id"}


def test_bound_query_binds_values():
    stmt = bound_query("SELECT id FROM recipe WHERE name = :name", name="Soup")
    compiled = stmt.compile()
    assert compiled.params == {"name": "Soup"}
    assert "Soup" not in str(compiled)


def test_bound_query_missing_value():
    with pytest.raises(ServiceValidationError) as exc_info:
        bound_query("SELECT id FROM recipe WHERE name = :name")
    assert exc_info.value.details == {"missing": ["name"]}


def test_bound_query_unused_value():
    with pytest.raises(ServiceValidationError) as exc_info:
        bound_query("SELECT id FROM recipe", name="Soup")
    assert exc_info.value.details == {"unused": ["name"]}


def test_injection_payload_is_data_not_sql(db_session):
    db_session.add_all([Recipe(name="Soup"), Recipe(name="Salad")])
    db_session.commit()

    payload = "' OR '1'='1"
    rows = db_session.execute(
        bound_query("SELECT id FROM recipe WHERE name = :name", name=payload)
    ).all()
    assert rows == []

    # Table is intact after a destructive-looking value
    db_session.execute(
        bound_query("SELECT id FROM recipe WHERE name = :name", name="x'; DROP TABLE recipe; --")
    ).all()
    count = db_session.execute(text("SELECT COUNT(*) FROM recipe")).scalar()
    assert count == 2
