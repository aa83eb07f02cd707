"""Tests for scheduled changes."""

import logging
from datetime import UTC, datetime, timedelta, timezone

import pytest

from contentkit.errors import ValidationError
from contentkit.models.schedule import SCHEDULE_TYPE, ObjectSchedule


@pytest.fixture
def article(factory):
    article = factory.create("test/article")
    article.title = "Draft"
    assert article.save()
    return article


@pytest.fixture
def schedule(factory):
    return factory.create(SCHEDULE_TYPE)


class TestProperties:
    def test_defaults(self, schedule):
        assert schedule.data_diff == {}
        assert schedule.processed is False
        assert schedule.processed_date is None

    @pytest.mark.parametrize("value", [False, "", 5, ["test/article"]])
    def test_target_type_must_be_non_empty_string(self, schedule, value):
        with pytest.raises(ValidationError):
            schedule.target_type = value

    def test_target_type_accepts_none(self, schedule):
        schedule.target_type = "test/article"
        schedule.target_type = None
        assert schedule.target_type is None

    def test_dates_are_parsed(self, schedule):
        schedule.scheduled_date = "2025-03-01T10:00:00+02:00"
        assert schedule.scheduled_date == datetime(
            2025, 3, 1, 10, 0, tzinfo=timezone(timedelta(hours=2))
        )
        schedule.scheduled_date = "2025-03-01 10:00:00"
        assert schedule.scheduled_date.tzinfo is UTC

    def test_now_token_uses_clock(self, schedule, clock):
        schedule.scheduled_date = "now"
        assert schedule.scheduled_date == clock.now()

    @pytest.mark.parametrize("value", ["next tuesday", 42])
    def test_invalid_dates(self, schedule, value):
        with pytest.raises(ValidationError):
            schedule.scheduled_date = value

    def test_empty_date_clears(self, schedule):
        schedule.processed_date = "2025-03-01"
        schedule.processed_date = ""
        assert schedule.processed_date is None

    def test_json_diff_from_string(self, schedule):
        schedule.data_diff = '{"title": "Published"}'
        assert schedule.data_diff == {"title": "Published"}


class TestProcess:
    def test_without_target_type(self, schedule):
        schedule.target_id = 1
        assert schedule.process() is False

    def test_without_target_id(self, schedule):
        schedule.target_type = "test/article"
        assert schedule.process() is False

    def test_missing_target(self, schedule):
        schedule.set_data({"target_type": "test/article", "target_id": 99})
        assert schedule.process() is False
        assert schedule.processed is False

    def test_unknown_target_type(self, schedule, caplog):
        schedule.set_data({"target_type": "test/unknown", "target_id": 1})
        with caplog.at_level(logging.WARNING):
            assert schedule.process() is False
        assert "unknown target type 'test/unknown'" in caplog.text

    def test_applies_diff_and_marks_processed(self, schedule, article, store, clock):
        schedule.set_data({
            "target_type": "test/article",
            "target_id": article.id,
            "data_diff": {"title": "Published", "not_a_property": 1},
            "scheduled_date": "2024-01-01",
        })
        assert schedule.save()
        clock.advance(hours=1)

        assert schedule.process() is True

        assert store.load("test/article", article.id)["title"] == "Published"
        assert schedule.processed is True
        assert schedule.processed_date == clock.now()
        record = store.load(SCHEDULE_TYPE, schedule.id)
        assert record["processed"] is True
        assert record["processed_date"] == clock.now()

    def test_process_creates_target_revision(self, schedule, article, factory):
        schedule.set_data({
            "target_type": "test/article",
            "target_id": article.id,
            "data_diff": {"title": "Published"},
        })
        assert schedule.process()

        target = factory.create("test/article").load(article.id)
        revision = target.latest_revision()
        assert revision.rev_num == 1
        assert revision.data_diff["title"] == ["Draft", "Published"]

    def test_unsaved_schedule_is_not_persisted(self, schedule, article, store):
        schedule.set_data({"target_type": "test/article", "target_id": article.id})
        assert schedule.process() is True
        assert schedule.processed is True
        assert store.count(SCHEDULE_TYPE) == 0

    def test_failed_target_update(self, schedule, article, store):
        schedule.set_data({
            "target_type": "test/article",
            "target_id": article.id,
            "data_diff": {"title": "Published"},
        })
        store.failing.add("update_properties")
        assert schedule.process() is False
        assert schedule.processed is False

    def test_failed_mark_as_processed(self, schedule, article, store, monkeypatch, caplog):
        schedule.set_data({
            "target_type": "test/article",
            "target_id": article.id,
            "data_diff": {"title": "Published"},
        })
        assert schedule.save()

        update_properties = store.update_properties

        def fail_for_schedules(obj, properties=None):
            if obj.obj_type == SCHEDULE_TYPE:
                return False
            return update_properties(obj, properties)

        monkeypatch.setattr(store, "update_properties", fail_for_schedules)
        with caplog.at_level(logging.ERROR):
            assert schedule.process() is False

        assert store.load("test/article", article.id)["title"] == "Published"
        assert store.load(SCHEDULE_TYPE, schedule.id)["processed"] is False
        assert "storage failed for ObjectSchedule" in caplog.text

    def test_blank_schedule(self, deps):
        schedule = ObjectSchedule(deps=deps)
        assert schedule.process() is False
