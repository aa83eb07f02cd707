"""Tests for the model factory and model dependencies."""

import logging

import pytest

from contentkit.errors import ConfigurationError
from contentkit.hierarchy.cache import ProcessObjectCache
from contentkit.models import factory as factory_module
from contentkit.models.base import Field, ModelDependencies
from contentkit.models.content import Content
from contentkit.models.factory import BUILTIN_MODELS, ModelFactory, model_type
from contentkit.models.revision import REVISION_TYPE, ObjectRevision

from conftest import Article, Page


# =============================================================================
# Registry
# =============================================================================


class TestRegistry:
    def test_builtin_types_are_registered(self):
        factory = ModelFactory()
        for model in BUILTIN_MODELS:
            assert factory.is_registered(model.obj_type)
        assert factory.model_class(REVISION_TYPE) is ObjectRevision

    def test_register(self, factory):
        assert factory.is_registered("test/article")
        assert factory.model_class("test/article") is Article
        assert "test/article" in factory.list_registered()
        assert factory.list_registered() == sorted(factory.list_registered())

    def test_unknown_type(self, factory):
        with pytest.raises(ValueError, match="Model type 'test/missing' is not registered"):
            factory.model_class("test/missing")
        with pytest.raises(ValueError):
            factory.create("test/missing")

    def test_register_sets_missing_tag(self, factory):
        class Untagged(Content):
            pass

        factory.register("test/untagged", Untagged)
        assert Untagged.obj_type == "test/untagged"

    def test_model_type_decorator(self, monkeypatch):
        monkeypatch.setattr(factory_module, "_model_types", {})

        @model_type("test/decorated")
        class Decorated(Content):
            title = Field("string")

        assert Decorated.obj_type == "test/decorated"
        assert ModelFactory().model_class("test/decorated") is Decorated


# =============================================================================
# Instances
# =============================================================================


class TestInstances:
    def test_create_injects_dependencies(self, factory, deps):
        article = factory.create("test/article")
        assert isinstance(article, Article)
        assert article.dependencies is deps
        assert article.factory is factory
        assert article.id is None

    def test_from_record(self, factory):
        page = factory.from_record("test/page", {"id": "3", "title": "About", "master": "1"})
        assert isinstance(page, Page)
        assert (page.id, page.title, page.master) == (3, "About", 1)

    def test_prototype_is_shared(self, factory):
        assert factory.get("test/article") is factory.get("test/article")

    def test_configure_drops_prototype(self, factory):
        before = factory.get("test/article")
        factory.configure("test/article", {"revision_enabled": False})
        after = factory.get("test/article")
        assert after is not before
        assert after.revision_enabled is False

    def test_settings_are_copied(self, factory):
        factory.configure("test/page", {"table": "pages"})
        factory.settings("test/page")["table"] = "other"
        assert factory.table_names() == {"test/page": "pages"}


# =============================================================================
# Dependencies
# =============================================================================


class TestDependencies:
    def test_missing_store(self):
        article = Article()
        with pytest.raises(ConfigurationError, match='Storage is not defined for "Article"'):
            article.save()

    def test_missing_factory(self, store):
        page = Page(deps=ModelDependencies(store=store, object_cache=ProcessObjectCache()))
        page.master = 1
        with pytest.raises(ConfigurationError, match='Model Factory is not defined for "Page"'):
            page.hierarchy.parent()

    def test_lifecycle_service_is_created_once(self, deps):
        assert deps.lifecycle_service() is deps.lifecycle_service()

    def test_injected_logger(self, deps):
        custom = logging.getLogger("contentkit.tests.custom")
        deps.logger = custom
        assert Article(deps=deps).logger is custom
        assert Article().logger.name == Article.__module__
