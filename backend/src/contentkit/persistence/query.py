"""Filtered, ordered, paginated queries against a store.

A Query is built against a model (class or instance) so stores can find
the object type and the declared property types:

    query = (
        Query(ObjectRoute)
        .add_filter("active", True)
        .add_filter("slug", "about")
        .add_order("creation_date", "desc")
        .set_num_per_page(1)
    )
    records = store.query(query)
"""

from dataclasses import dataclass, field
from typing import Any

from contentkit.errors import ValidationError

OPERATORS = ("eq", "neq", "in", "isNull", "isNotNull")


@dataclass
class Filter:
    field: str
    value: Any = None
    operator: str = "eq"

    def to_dict(self) -> dict[str, Any]:
        return {"field": self.field, "operator": self.operator, "value": self.value}


@dataclass
class Order:
    field: str
    direction: str = "asc"

    @property
    def descending(self) -> bool:
        return self.direction == "desc"

    def to_dict(self) -> dict[str, str]:
        return {"field": self.field, "direction": self.direction}


@dataclass
class Query:
    """Query definition. Page numbers start at 1; no page size means no limit."""

    model: Any
    filters: list[Filter] = field(default_factory=list)
    orders: list[Order] = field(default_factory=list)
    page: int = 1
    num_per_page: int | None = None

    @property
    def obj_type(self) -> str:
        return self.model.obj_type

    @property
    def property_types(self) -> dict[str, str]:
        return self.model.property_types()

    def add_filter(self, field: str, value: Any = None, operator: str = "eq") -> "Query":
        if operator not in OPERATORS:
            raise ValidationError(
                f"Unsupported filter operator '{operator}'. "
                f"Allowed: {', '.join(OPERATORS)}"
            )
        self.filters.append(Filter(field, value, operator))
        return self

    def add_order(self, field: str, direction: str = "asc") -> "Query":
        direction = direction.lower()
        if direction not in ("asc", "desc"):
            raise ValidationError(f"Order direction must be asc or desc, got '{direction}'")
        self.orders.append(Order(field, direction))
        return self

    def set_page(self, page: int) -> "Query":
        if page < 1:
            raise ValidationError("Page must be 1 or greater")
        self.page = page
        return self

    def set_num_per_page(self, num: int | None) -> "Query":
        if num is not None and num < 1:
            raise ValidationError("Page size must be 1 or greater")
        self.num_per_page = num
        return self

    @property
    def limit(self) -> int | None:
        return self.num_per_page

    @property
    def offset(self) -> int:
        if not self.num_per_page:
            return 0
        return (self.page - 1) * self.num_per_page

    def to_filter(self) -> dict[str, Any]:
        return {"operator": "and", "conditions": [f.to_dict() for f in self.filters]}

    def to_sort(self) -> list[dict[str, str]]:
        return [o.to_dict() for o in self.orders]
