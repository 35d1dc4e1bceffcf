"""Tests for settings parsing and the database package surface."""

import surveydesk.db
from surveydesk.core.config import Settings


def test_store_list_from_comma_separated_env(monkeypatch):
    monkeypatch.setenv("STORES", "Fontanar, ANDINO")

    settings = Settings(_env_file=None)

    assert settings.stores == ["fontanar", "andino"]
    assert settings.accepted_stores == ["fontanar", "andino", "general"]


def test_store_list_from_json_env(monkeypatch):
    monkeypatch.setenv("STORES", '["unicentro", "calle90"]')

    assert Settings(_env_file=None).stores == ["unicentro", "calle90"]


def test_environment_flags(monkeypatch):
    monkeypatch.setenv("ENVIRONMENT", "production")

    settings = Settings(_env_file=None)

    assert settings.is_production
    assert not settings.is_development


def test_settings_only_declare_what_the_app_reads():
    assert {"debug", "api_host", "api_port"}.isdisjoint(Settings.model_fields)


def test_db_package_exports_connection_getters():
    assert surveydesk.db.__all__ == ["get_mongodb", "get_redis"]
    assert not hasattr(surveydesk.db, "mongodb_client")
