"""
Tests for configuration module
"""
import core.config
from core.config import Settings, InMemoryDbSettings, get_settings
from core.db import reset_engine


def test_settings_detection(monkeypatch):
    """Test that the correct settings class is used based on environment"""
    # When SETTINGS_MODE is set to test
    monkeypatch.setenv("SETTINGS_MODE", "test")
    # Clear any cached settings
    get_settings.cache_clear()
    reset_engine()

    settings = get_settings()
    assert isinstance(settings, InMemoryDbSettings)
    assert settings.TESTING is True
    assert settings.SQLALCHEMY_DATABASE_URI == "sqlite:///:memory:"

    # When SETTINGS_MODE is not test
    monkeypatch.setenv("SETTINGS_MODE", "production")
    get_settings.cache_clear()
    reset_engine()

    settings = get_settings()
    assert isinstance(settings, Settings)
    assert not isinstance(settings, InMemoryDbSettings)

    # Restore the cached test settings for the rest of the suite
    monkeypatch.setenv("SETTINGS_MODE", "test")
    get_settings.cache_clear()
    reset_engine()


def test_database_uri_from_environment(monkeypatch):
    """Test that SQLALCHEMY_DATABASE_URI can be set by env variable"""
    monkeypatch.setenv("SQLALCHEMY_DATABASE_URI", "postgresql://lib:secret@db/library")
    assert Settings().SQLALCHEMY_DATABASE_URI == "postgresql://lib:secret@db/library"


def test_database_uri_default(monkeypatch):
    """Test the sqlite default when nothing is configured"""
    monkeypatch.delenv("SQLALCHEMY_DATABASE_URI", raising=False)
    monkeypatch.delenv("ENV_SECRETS", raising=False)
    assert Settings().SQLALCHEMY_DATABASE_URI == "sqlite:///library.db"


def test_storage_defaults():
    """Test the blob storage defaults"""
    settings = InMemoryDbSettings()
    assert settings.STORAGE_BACKEND == "local"
    assert settings.STORAGE_PUBLIC_URL == "/storage"
    assert settings.IMPORT_MAX_ROWS == 5000


def test_override_settings_from_env(monkeypatch):
    """Test that settings values can be overridden"""
    monkeypatch.setenv("IMPORT_MAX_ROWS", "10")
    assert InMemoryDbSettings().IMPORT_MAX_ROWS == 10


def test_database_uri_from_secrets_manager(monkeypatch):
    """Test the AWS Secrets Manager fallback"""
    calls = []

    def fake_get_secret(secret_name, region_name):
        calls.append((secret_name, region_name))
        return {"SQLALCHEMY_DATABASE_URI": "mysql://lib:pw@db/library"}

    monkeypatch.delenv("SQLALCHEMY_DATABASE_URI", raising=False)
    monkeypatch.setenv("ENV_SECRETS", "library/prod")
    monkeypatch.setenv("AWS_REGION", "eu-west-1")
    monkeypatch.setattr(core.config, "get_secret", fake_get_secret)

    settings = Settings()
    assert settings.SQLALCHEMY_DATABASE_URI == "mysql://lib:pw@db/library"
    assert settings.SQLALCHEMY_DATABASE_URI == "mysql://lib:pw@db/library"
    assert calls == [("library/prod", "eu-west-1")]
