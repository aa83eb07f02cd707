"""Tests for queries, the memory store and store configuration."""

import pytest

from contentkit.errors import ValidationError
from contentkit.persistence import MemoryStore, Query, StorageFacade, StoreConfig, create_store
from contentkit.persistence.sql import SQLStore

from conftest import Article


# =============================================================================
# Query
# =============================================================================


class TestQuery:
    def test_builder_is_chainable(self):
        query = (
            Query(Article)
            .add_filter("active", True)
            .add_filter("position", [1, 2], "in")
            .add_order("position", "DESC")
            .set_page(2)
            .set_num_per_page(10)
        )
        assert query.obj_type == "test/article"
        assert query.limit == 10
        assert query.offset == 10
        assert query.to_filter() == {
            "operator": "and",
            "conditions": [
                {"field": "active", "operator": "eq", "value": True},
                {"field": "position", "operator": "in", "value": [1, 2]},
            ],
        }
        assert query.to_sort() == [{"field": "position", "direction": "desc"}]

    def test_property_types_come_from_model(self):
        assert Query(Article).property_types["title"] == "string"

    def test_no_page_size_means_no_offset(self):
        query = Query(Article).set_page(3)
        assert query.limit is None
        assert query.offset == 0

    def test_invalid_input_raises(self):
        with pytest.raises(ValidationError, match="Unsupported filter operator"):
            Query(Article).add_filter("title", "x", "like")
        with pytest.raises(ValidationError):
            Query(Article).add_order("title", "sideways")
        with pytest.raises(ValidationError):
            Query(Article).set_page(0)
        with pytest.raises(ValidationError):
            Query(Article).set_num_per_page(0)


# =============================================================================
# MemoryStore
# =============================================================================


@pytest.fixture
def memory():
    return MemoryStore()


def make_article(deps, **data):
    return Article(deps=deps, **data)


class TestMemoryStore:
    def test_implements_storage_facade(self, memory):
        assert isinstance(memory, StorageFacade)

    def test_save_assigns_sequential_ids(self, memory, deps):
        first = make_article(deps, title="one")
        second = make_article(deps, title="two")
        assert memory.save(first)
        assert memory.save(second)
        assert (first.id, second.id) == (1, 2)

    def test_save_with_explicit_id_replaces(self, memory, deps):
        memory.save(make_article(deps, id=5, title="first"))
        memory.save(make_article(deps, id=5, title="second"))
        assert memory.count("test/article") == 1
        assert memory.load("test/article", 5)["title"] == "second"

    def test_next_id_skips_existing(self, memory, deps):
        memory.save(make_article(deps, id=1, title="taken"))
        article = make_article(deps, title="new")
        memory.save(article)
        assert article.id == 2

    def test_load_returns_copies(self, memory, deps):
        article = make_article(deps, title="one")
        memory.save(article)
        record = memory.load("test/article", article.id)
        record["title"] = "changed"
        assert memory.load("test/article", article.id)["title"] == "one"

    def test_load_missing(self, memory):
        assert memory.load("test/article", 1) is None

    def test_update_properties_subset(self, memory, deps):
        article = make_article(deps, title="one", position=1)
        memory.save(article)
        article.title = "two"
        article.position = 9
        assert memory.update_properties(article, ["title"])
        record = memory.load("test/article", article.id)
        assert record["title"] == "two"
        assert record["position"] == 1

    def test_update_missing_record_fails(self, memory, deps):
        assert not memory.update_properties(make_article(deps, id=3))
        assert not memory.update_properties(make_article(deps))

    def test_delete(self, memory, deps):
        article = make_article(deps, title="one")
        memory.save(article)
        assert memory.delete(article)
        assert memory.load("test/article", article.id) is None
        assert not memory.delete(article)

    def test_query_filters_orders_and_pages(self, memory, deps):
        for title, position in [("c", 3), ("a", 1), ("b", 2), ("d", None)]:
            memory.save(make_article(deps, title=title, position=position))

        ordered = memory.query(Query(Article).add_order("position"))
        assert [r["title"] for r in ordered] == ["d", "a", "b", "c"]

        page = memory.query(
            Query(Article).add_filter("position", operator="isNotNull")
            .add_order("position", "desc").set_page(2).set_num_per_page(2)
        )
        assert [r["title"] for r in page] == ["a"]

        matched = memory.query(Query(Article).add_filter("title", ["a", "c"], "in"))
        assert sorted(r["title"] for r in matched) == ["a", "c"]

        assert len(memory.query(Query(Article).add_filter("title", "a", "neq"))) == 3
        assert len(memory.query(Query(Article).add_filter("position", operator="isNull"))) == 1

    def test_clear(self, memory, deps):
        memory.save(make_article(deps, title="one"))
        memory.clear()
        assert memory.count("test/article") == 0


# =============================================================================
# StoreConfig / create_store
# =============================================================================


class TestStoreConfig:
    def test_defaults_to_memory(self, monkeypatch):
        monkeypatch.delenv("CONTENTKIT_DATABASE_URL", raising=False)
        monkeypatch.delenv("CONTENTKIT_DB_PATH", raising=False)
        config = StoreConfig.from_env()
        assert config.is_memory
        assert isinstance(create_store(config), MemoryStore)

    def test_database_url_wins(self, monkeypatch):
        monkeypatch.setenv("CONTENTKIT_DATABASE_URL", "postgresql://u:p@host/db")
        monkeypatch.setenv("CONTENTKIT_DB_PATH", "/tmp/ignored.db")
        config = StoreConfig.from_env()
        assert config.is_postgresql
        assert config.sqlalchemy_url == "postgresql+psycopg://u:p@host/db"

    def test_db_path_becomes_sqlite_url(self, monkeypatch, tmp_path):
        monkeypatch.delenv("CONTENTKIT_DATABASE_URL", raising=False)
        monkeypatch.setenv("CONTENTKIT_DB_PATH", str(tmp_path / "content.db"))
        config = StoreConfig.from_env()
        assert config.is_sqlite
        assert config.url == f"sqlite:///{tmp_path / 'content.db'}"

    def test_sqlite_store(self, tmp_path):
        store = create_store(StoreConfig(f"sqlite:///{tmp_path / 'content.db'}"))
        try:
            assert isinstance(store, SQLStore)
        finally:
            store.close()

    def test_unsupported_scheme(self):
        with pytest.raises(ValueError, match="Unsupported database URL scheme"):
            create_store(StoreConfig("mysql://localhost/db"))
