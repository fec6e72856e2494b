"""Tests for security.secret_source"""

import pytest

from app.exceptions import MissingConfigError
from security.secret_source import SecretSource


def test_get_returns_provider_value():
    source = SecretSource({"DATABASE_URL": "postgresql://db/mealplanner"})
    assert source.get("DATABASE_URL") == "postgresql://db/mealplanner"
    assert "DATABASE_URL" in source


@pytest.mark.parametrize("provider", [{}, {"API_KEY": ""}, {"API_KEY": "   "}])
def test_required_missing_or_blank_fails(provider):
    with pytest.raises(MissingConfigError) as exc_info:
        SecretSource(provider).get("API_KEY")
    assert exc_info.value.key == "API_KEY"
    assert "API_KEY" not in exc_info.value.to_dict()["message"]


def test_optional_missing_returns_default():
    source = SecretSource({})
    assert source.get("API_KEY", required=False) is None
    assert source.get("API_KEY", required=False, default="local") == "local"
    assert "API_KEY" not in source


def test_from_environment_layers_env_over_file(tmp_path, monkeypatch):
    env_file = tmp_path / ".env"
    env_file.write_text("MP_TEST_ONE=from-file\nMP_TEST_TWO=from-file\n")
    monkeypatch.setenv("MP_TEST_TWO", "from-env")

    source = SecretSource.from_environment(env_file=str(env_file))
    assert source.get("MP_TEST_ONE") == "from-file"
    assert source.get("MP_TEST_TWO") == "from-env"


def test_from_environment_copies_values(monkeypatch):
    monkeypatch.setenv("MP_TEST_COPY", "before")
    source = SecretSource.from_environment()
    monkeypatch.setenv("MP_TEST_COPY", "after")
    assert source.get("MP_TEST_COPY") == "before"


def test_from_environment_missing_file_is_ignored(tmp_path, monkeypatch):
    monkeypatch.delenv("MP_TEST_ABSENT", raising=False)
    source = SecretSource.from_environment(env_file=str(tmp_path / "missing.env"))
    with pytest.raises(MissingConfigError):
        source.get("MP_TEST_ABSENT")
