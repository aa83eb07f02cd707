"""User-submitted data: where and when it came from."""

from __future__ import annotations

import os
import sys
from collections.abc import Mapping, Sequence

from contentkit.core.clock import NOW
from contentkit.lifecycle import HookContext, Operation, Stage, hook
from contentkit.models.base import Field, Model

USER_DATA_TYPE = "object/user-data"


def resolve_origin(
    argv: Sequence[str] | None = None,
    environ: Mapping[str, str] | None = None,
) -> str:
    """Describe where the current process was invoked from.

    Web requests (HTTP_HOST or REQUEST_URI in the environment) give the
    request URL; anything else gives the command line.
    """
    environ = os.environ if environ is None else environ
    host = environ.get("HTTP_HOST")
    uri = environ.get("REQUEST_URI")
    if host or uri:
        origin = ""
        if host:
            scheme = "https" if environ.get("HTTPS") == "on" else "http"
            origin = f"{scheme}://{host}"
        return origin + (uri or "")

    argv = sys.argv if argv is None else argv
    return " ".join(argv)


class UserData(Model):
    obj_type = USER_DATA_TYPE

    ip = Field("ip")
    lang = Field("string")
    origin = Field("string")
    ts = Field("datetime")

    @hook(Stage.PRE, Operation.CREATE)
    def stamp_request(self, ctx: HookContext) -> bool:
        self.ts = NOW
        remote_addr = os.environ.get("REMOTE_ADDR")
        if remote_addr:
            self.ip = remote_addr
        if self.origin is None:
            self.origin = resolve_origin()
        return True
