"""Object routes: a slug and language pointing at a target object."""

from __future__ import annotations

from contentkit.core.clock import NOW
from contentkit.lifecycle import HookContext, Operation, Stage, hook
from contentkit.models.base import Field, Model
from contentkit.routing.slugs import SlugResolver

ROUTE_TYPE = "object/route"


class ObjectRoute(Model):
    """Maps (slug, lang) to (route_obj_type, route_obj_id).

    The slug is made unique among active routes of the same language
    when the route is created.
    """

    obj_type = ROUTE_TYPE
    slug_resolver = SlugResolver()

    active = Field("boolean", default=True)
    slug = Field("string")
    lang = Field("string")
    creation_date = Field("datetime")
    last_modification_date = Field("datetime")
    route_obj_type = Field("string")
    route_obj_id = Field("id")
    route_template = Field("string")
    route_options = Field("json")
    route_options_ident = Field("string")

    def __str__(self) -> str:
        return self.slug or ""

    def same_target(self, other: ObjectRoute) -> bool:
        return (
            self.route_obj_id == other.route_obj_id
            and self.route_obj_type == other.route_obj_type
            and self.lang == other.lang
        )

    def is_slug_unique(self) -> bool:
        return self.slug_resolver.is_unique(self)

    def generate_unique_slug(self) -> ObjectRoute:
        return self.slug_resolver.generate(self)

    @hook(Stage.PRE, Operation.CREATE)
    def prepare_route(self, ctx: HookContext) -> bool:
        self.generate_unique_slug()
        self.creation_date = NOW
        self.last_modification_date = NOW
        return True

    @hook(Stage.PRE, Operation.UPDATE)
    def touch_route(self, ctx: HookContext) -> bool:
        self.last_modification_date = NOW
        if ctx.properties is not None and "last_modification_date" not in ctx.properties:
            ctx.properties.append("last_modification_date")
        return True
