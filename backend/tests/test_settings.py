"""Tests for runtime settings, model settings files and their validation."""

import logging
from pathlib import Path

import pytest

from contentkit.errors import ConfigurationError, ValidationError
from contentkit.hierarchy.cache import LRUObjectCache, ProcessObjectCache, process_object_cache
from contentkit.metadata.loader import ModelSettings, ModelSettingsLoader
from contentkit.metadata.validator import validate_settings, validate_settings_file
from contentkit.persistence.memory import MemoryStore
from contentkit.persistence.sql import SQLStore
from contentkit.settings import Settings, configure_logging

from conftest import Page

ENV_VARS = (
    "CONTENTKIT_DATABASE_URL",
    "CONTENTKIT_DB_PATH",
    "CONTENTKIT_LOG_LEVEL",
    "CONTENTKIT_OBJECT_CACHE",
    "CONTENTKIT_OBJECT_CACHE_SIZE",
    "CONTENTKIT_MODEL_SETTINGS",
)

VALID_SETTINGS = """\
models:
  test/page:
    revision_enabled: false
    table: pages
    hierarchy:
      siblings: exclude-self
  test/article: {}
"""


@pytest.fixture
def clean_env(monkeypatch):
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def settings_file(tmp_path):
    def write(content: str) -> Path:
        path = tmp_path / "models.yaml"
        path.write_text(content)
        return path

    return write


# =============================================================================
# Settings
# =============================================================================


class TestSettings:
    def test_defaults(self, clean_env):
        settings = Settings.from_env()
        assert settings.database_url == "memory://"
        assert settings.log_level == "WARNING"
        assert settings.object_cache == "process"
        assert settings.object_cache_size == 1024
        assert settings.model_settings_path is None

    def test_environment_overrides(self, clean_env, monkeypatch, tmp_path):
        monkeypatch.setenv("CONTENTKIT_DB_PATH", str(tmp_path / "content.db"))
        monkeypatch.setenv("CONTENTKIT_LOG_LEVEL", "debug")
        monkeypatch.setenv("CONTENTKIT_OBJECT_CACHE", "LRU")
        monkeypatch.setenv("CONTENTKIT_OBJECT_CACHE_SIZE", "16")
        monkeypatch.setenv("CONTENTKIT_MODEL_SETTINGS", "config/models.yaml")

        settings = Settings.from_env()
        assert settings.database_url == f"sqlite:///{tmp_path / 'content.db'}"
        assert settings.log_level == "DEBUG"
        assert settings.object_cache == "lru"
        assert settings.object_cache_size == 16
        assert settings.model_settings_path == Path("config/models.yaml")

    def test_unknown_cache_policy(self):
        with pytest.raises(ConfigurationError, match="Unknown object cache policy"):
            Settings(database_url="memory://", object_cache="forever")

    def test_cache_size_must_be_integer(self, clean_env, monkeypatch):
        monkeypatch.setenv("CONTENTKIT_OBJECT_CACHE_SIZE", "lots")
        with pytest.raises(ConfigurationError):
            Settings.from_env()

    def test_object_cache_policies(self):
        assert Settings("memory://").build_object_cache() is process_object_cache

        request = Settings("memory://", object_cache="request")
        first, second = request.build_object_cache(), request.build_object_cache()
        assert isinstance(first, ProcessObjectCache)
        assert first is not second

        lru = Settings("memory://", object_cache="lru", object_cache_size=8).build_object_cache()
        assert isinstance(lru, LRUObjectCache)
        assert lru.maxsize == 8

    def test_build_dependencies(self):
        deps = Settings("memory://", object_cache="request").build_dependencies()
        assert isinstance(deps.store, MemoryStore)
        assert deps.factory.dependencies is deps
        assert deps.factory.is_registered("object/revision")

    def test_build_dependencies_applies_model_settings(self, settings_file, tmp_path):
        settings = Settings(
            f"sqlite:///{tmp_path / 'content.db'}",
            model_settings_path=settings_file(VALID_SETTINGS),
        )
        deps = settings.build_dependencies()
        try:
            assert isinstance(deps.store, SQLStore)
            assert deps.factory.table_names() == {"test/page": "pages"}
            assert deps.store._table_name("test/page") == "pages"
        finally:
            deps.store.close()

    def test_build_dependencies_with_invalid_model_settings(self, settings_file):
        settings = Settings("memory://", model_settings_path=settings_file("models: []\n"))
        with pytest.raises(ValidationError):
            settings.build_dependencies()


class TestConfigureLogging:
    def test_level_from_argument(self, monkeypatch):
        calls = []
        monkeypatch.setattr(logging, "basicConfig", lambda **kw: calls.append(kw))
        configure_logging("INFO")
        assert calls[0]["level"] == "INFO"

    def test_level_from_environment(self, monkeypatch, clean_env):
        calls = []
        monkeypatch.setattr(logging, "basicConfig", lambda **kw: calls.append(kw))
        monkeypatch.setenv("CONTENTKIT_LOG_LEVEL", "error")
        configure_logging()
        assert calls[0]["level"] == "ERROR"

    def test_default_level(self, monkeypatch, clean_env):
        calls = []
        monkeypatch.setattr(logging, "basicConfig", lambda **kw: calls.append(kw))
        configure_logging()
        assert calls[0]["level"] == "WARNING"


# =============================================================================
# Model settings loader
# =============================================================================


class TestModelSettingsLoader:
    def test_load(self, settings_file):
        models = ModelSettingsLoader(settings_file(VALID_SETTINGS)).load()

        page = models["test/page"]
        assert page == ModelSettings(
            tag="test/page", revision_enabled=False, table="pages",
            hierarchy=page.hierarchy,
        )
        assert page.hierarchy.siblings == "exclude-self"
        assert page.as_dict() == {
            "revision_enabled": False,
            "table": "pages",
            "hierarchy": {"siblings": "exclude-self"},
        }
        assert models["test/article"].as_dict() == {}

    def test_empty_file(self, settings_file):
        assert ModelSettingsLoader(settings_file("")).load() == {}

    def test_missing_file(self, tmp_path):
        with pytest.raises(ValidationError, match="Can not load model settings"):
            ModelSettingsLoader(tmp_path / "missing.yaml").load()

    def test_malformed_yaml(self, settings_file):
        with pytest.raises(ValidationError):
            ModelSettingsLoader(settings_file("models: [unclosed\n")).load()

    def test_schema_violations_are_listed(self, settings_file):
        path = settings_file(
            "models:\n"
            "  test/page:\n"
            "    table: 'bad name'\n"
            "    hierarchy:\n"
            "      siblings: random\n"
        )
        with pytest.raises(ValidationError) as excinfo:
            ModelSettingsLoader(path).load()

        message = str(excinfo.value)
        assert message.startswith(f"Invalid model settings in {path}:")
        assert "models/test/page/hierarchy/siblings" in message
        assert "models/test/page/table" in message

    def test_apply_configures_factory(self, settings_file, factory):
        loader = ModelSettingsLoader(settings_file(VALID_SETTINGS))
        loader.load()
        loader.apply(factory)

        page = factory.create("test/page")
        assert isinstance(page, Page)
        assert page.revision_enabled is False
        assert page.siblings_strategy == "exclude-self"
        assert factory.settings("test/article") == {}
        assert factory.table_names() == {"test/page": "pages"}


# =============================================================================
# Validator
# =============================================================================


class TestValidator:
    def test_valid_document(self, tmp_path):
        doc = {"models": {"a/b": {"revision_enabled": True}}}
        assert validate_settings(doc, tmp_path / "x.yaml") == []

    def test_models_is_required(self, tmp_path):
        issues = validate_settings({}, tmp_path / "x.yaml")
        assert len(issues) == 1
        assert "'models' is a required property" in issues[0].message

    def test_unknown_keys(self, tmp_path):
        issues = validate_settings(
            {"models": {"a/b": {"revisions": True}}, "extra": 1}, tmp_path / "x.yaml"
        )
        assert [issue.path for issue in issues] == ["", "models/a/b"]

    def test_issue_formatting(self, tmp_path):
        issues = validate_settings({"models": {"a/b": {"table": 5}}}, tmp_path / "x.yaml")
        assert str(issues[0]).startswith(f"[ERROR] {tmp_path / 'x.yaml'} at models/a/b/table:")

    def test_file_issues(self, settings_file, tmp_path):
        assert validate_settings_file(settings_file(VALID_SETTINGS)) == []

        empty = validate_settings_file(settings_file("   \n"))
        assert "empty" in empty[0].message

        broken = validate_settings_file(settings_file("models: {a\n"))
        assert "YAML parse error" in broken[0].message

        missing = validate_settings_file(tmp_path / "missing.yaml")
        assert "Can not read file" in missing[0].message
