"""contentkit object lifecycle hook chain.

Every mutating store operation runs through three stages:
- pre: before the store call (can modify the object, can veto)
- execute: the store call itself
- post: after a successful store call (failure is reported, not rolled back)

Operations: create, update, delete, restore.

Usage:
    from contentkit.lifecycle import hook, HookContext, Operation, Stage

    class Article(Content):
        @hook(Stage.PRE, Operation.CREATE)
        def require_title(self, ctx: HookContext) -> bool:
            return bool(self.title)
"""

from contentkit.lifecycle.registry import HookChain, collect_hooks, hook
from contentkit.lifecycle.service import LifecycleService
from contentkit.lifecycle.types import (
    HookContext,
    HookDefinition,
    HookFn,
    Operation,
    OperationResult,
    Outcome,
    Stage,
    compute_changes,
)

__all__ = [
    "HookChain",
    "HookContext",
    "HookDefinition",
    "HookFn",
    "LifecycleService",
    "Operation",
    "OperationResult",
    "Outcome",
    "Stage",
    "collect_hooks",
    "compute_changes",
    "hook",
]
