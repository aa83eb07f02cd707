"""Routable capability: keeps an ObjectRoute in step with the object's slug.

After every create or update the object's slug is registered as an
active route for ``(obj_type, id, route_lang)``. If the slug was already
taken by another object the route gets a suffixed slug, which is copied
back onto the object.
"""

from typing import Any

from contentkit.capabilities.base import Capability
from contentkit.lifecycle import HookContext, Operation, Stage, hook
from contentkit.models.base import Field
from contentkit.models.route import ROUTE_TYPE, ObjectRoute
from contentkit.persistence.query import Query


def route_prototype(obj: Any) -> ObjectRoute:
    deps = obj.dependencies
    if deps.factory is not None and deps.factory.is_registered(ROUTE_TYPE):
        return deps.factory.create(ROUTE_TYPE)
    return ObjectRoute(deps=deps)


class Routable(Capability):
    name = "routable"

    def fields(self) -> dict[str, Field]:
        return {"slug": Field("string")}

    def current_route(self, obj: Any) -> ObjectRoute | None:
        """The latest active route pointing at obj in its route language."""
        route = route_prototype(obj)
        query = (
            Query(route)
            .add_filter("active", True)
            .add_filter("route_obj_type", obj.obj_type)
            .add_filter("route_obj_id", obj.id)
            .add_filter("lang", getattr(obj, "route_lang", None))
            .add_order("creation_date", "desc")
            .set_num_per_page(1)
        )
        records = obj.store.query(query)
        if not records:
            return None
        return route.set_data(records[0])

    @hook(Stage.POST, Operation.CREATE, Operation.UPDATE)
    def sync_route(self, ctx: HookContext) -> bool:
        obj = ctx.obj
        if not obj.slug or obj.id is None:
            return True

        current = self.current_route(obj)
        if current is not None and current.slug == obj.slug:
            return True

        route = route_prototype(obj)
        route.set_data({
            "slug": obj.slug,
            "lang": getattr(obj, "route_lang", None),
            "route_obj_type": obj.obj_type,
            "route_obj_id": obj.id,
            "route_template": getattr(obj, "route_template", None),
        })
        if not route.save(actor=ctx.actor):
            return False

        if route.slug != obj.slug:
            obj.slug = route.slug
            return obj.store.update_properties(obj, ["slug"])
        return True
