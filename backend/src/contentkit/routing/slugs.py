"""Slug uniqueness resolution for object routes.

A route's slug must be unique per language among active routes. When
the slug is taken by an unrelated route, ``-1``, ``-2``, ... is appended
to the original slug until a free one is found. When it is taken by a
route for the same target object and language, the route adopts that
route's id so saving it replaces the existing route instead of adding
a duplicate.

Resolution is check-then-act. Two processes creating the same slug at
once can both see it as free; a unique index in the store is the only
guard against that.
"""

import logging
from typing import Any

from contentkit.persistence.query import Query

logger = logging.getLogger(__name__)


class SlugResolver:
    """Finds a free slug for a route, querying the route's own store."""

    def latest_with_slug(self, route: Any) -> dict[str, Any] | None:
        """The most recently created active route using route's slug and lang."""
        query = (
            Query(route)
            .add_filter("active", True)
            .add_filter("slug", route.slug)
            .add_filter("lang", route.lang)
            .add_order("creation_date", "desc")
            .set_page(1)
            .set_num_per_page(1)
        )
        records = route.store.query(query)
        return records[0] if records else None

    def is_unique(self, route: Any) -> bool:
        """True if route may use its current slug.

        May assign the id of an existing route for the same target.
        """
        found = self.latest_with_slug(route)
        if found is None:
            return True

        existing = type(route)(deps=route.dependencies, **found)
        if not existing.id:
            return True
        if existing.id == route.id:
            return True
        if existing.same_target(route):
            logger.debug(
                "Route '%s' (%s) already exists for %s:%s, reusing id %s",
                route.slug, route.lang, route.route_obj_type, route.route_obj_id, existing.id,
            )
            route.id = existing.id
            return True
        return False

    def generate(self, route: Any) -> Any:
        """Suffix route's slug until it is unique. Returns the route."""
        original = None
        increment = 0
        while not self.is_unique(route):
            if original is None:
                original = route.slug
            increment += 1
            route.slug = f"{original}-{increment}"
        if original is not None:
            logger.info("Slug '%s' was taken, using '%s'", original, route.slug)
        return route
