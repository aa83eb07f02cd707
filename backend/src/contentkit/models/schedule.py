"""Scheduled changes: a data diff to apply to a target object later."""

from __future__ import annotations

from typing import Any

from contentkit.core.clock import NOW
from contentkit.errors import ValidationError
from contentkit.models.base import Field, Model

SCHEDULE_TYPE = "object/schedule"


class TargetTypeField(Field):
    """A type tag: None or a non-empty string."""

    def __init__(self):
        super().__init__("string")

    def __set__(self, obj: Any, value: Any) -> None:
        if value is not None and (not isinstance(value, str) or not value):
            raise ValidationError("Target type must be a non-empty string")
        super().__set__(obj, value)


class ObjectSchedule(Model):
    obj_type = SCHEDULE_TYPE

    target_type = TargetTypeField()
    target_id = Field("id")
    data_diff = Field("json", default_factory=dict)
    processed = Field("boolean", default=False)
    scheduled_date = Field("datetime")
    processed_date = Field("datetime")

    def load_target(self) -> Model | None:
        if not self.target_type or not self.target_id:
            return None
        if not self.factory.is_registered(self.target_type):
            self.logger.warning(
                "Can not process schedule %s: unknown target type '%s'",
                self.id, self.target_type,
            )
            return None
        target = self.factory.create(self.target_type).load(self.target_id)
        return target if target.id else None

    def process(self) -> bool:
        """Apply data_diff to the target and mark this schedule processed.

        Returns False, without touching anything, when the target type or
        id is missing or the target can not be loaded. Also returns False
        when the target was updated but the schedule could not be marked.
        """
        target = self.load_target()
        if target is None:
            return False

        diff = dict(self.data_diff or {})
        target.set_data(diff)
        properties = [name for name in diff if name in target.property_names()]
        if not target.update(properties or None):
            return False

        self.processed = True
        self.processed_date = NOW
        if self.id is not None:
            return bool(self.update(["processed", "processed_date"]))
        return True
