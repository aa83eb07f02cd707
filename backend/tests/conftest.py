"""Shared fixtures and test models."""

import pytest

from contentkit.capabilities import Routable
from contentkit.core.clock import FrozenClock
from contentkit.hierarchy.cache import ProcessObjectCache
from contentkit.models.base import Field, ModelDependencies
from contentkit.models.content import Content, HierarchicalContent, SoftDeletableContent
from contentkit.models.factory import ModelFactory
from contentkit.persistence.memory import MemoryStore


class Article(Content):
    obj_type = "test/article"

    title = Field("string")


class Page(HierarchicalContent):
    obj_type = "test/page"

    title = Field("string")


class TrashableArticle(SoftDeletableContent):
    obj_type = "test/trashable"

    title = Field("string")


class RoutablePage(Content):
    obj_type = "test/routable"
    capabilities = Content.capabilities + (Routable(),)
    route_lang = "en"

    title = Field("string")


class FailingStore(MemoryStore):
    """MemoryStore whose writes can be switched off per method."""

    def __init__(self):
        super().__init__()
        self.failing: set[str] = set()

    def save(self, obj):
        if "save" in self.failing:
            return False
        return super().save(obj)

    def update_properties(self, obj, properties=None):
        if "update_properties" in self.failing:
            return False
        return super().update_properties(obj, properties)

    def delete(self, obj):
        if "delete" in self.failing:
            return False
        return super().delete(obj)


class CountingStore(MemoryStore):
    """MemoryStore that counts queries."""

    def __init__(self):
        super().__init__()
        self.queries = 0
        self.loads = 0

    def query(self, query):
        self.queries += 1
        return super().query(query)

    def load(self, obj_type, ident):
        self.loads += 1
        return super().load(obj_type, ident)


@pytest.fixture
def clock():
    return FrozenClock()


@pytest.fixture
def store():
    return FailingStore()


@pytest.fixture
def deps(store, clock):
    return ModelDependencies(store=store, clock=clock, object_cache=ProcessObjectCache())


@pytest.fixture
def factory(deps):
    factory = ModelFactory(deps)
    for model in (Article, Page, TrashableArticle, RoutablePage):
        factory.register(model.obj_type, model)
    return factory
