"""Lifecycle execution service for contentkit.

Runs one mutating operation through its three stages:

    pre  -> any hook returning False vetoes; the store is never called
    execute -> the store call; a False result fails the operation
    post -> only after a successful store call; a False result is a
            partial failure, the data is already durable

Vetoes, store failures and post-hook failures are logged and reported
through OperationResult so batch callers can carry on. Exceptions raised
by hooks or the store propagate unchanged.
"""

import logging
from collections.abc import Callable

from contentkit.lifecycle.registry import HookChain
from contentkit.lifecycle.types import (
    HookContext,
    Operation,
    OperationResult,
    Outcome,
    Stage,
)

_PAST_TENSE = {
    Operation.CREATE: "Created",
    Operation.UPDATE: "Updated",
    Operation.DELETE: "Deleted",
    Operation.RESTORE: "Restored",
}


class LifecycleService:
    """Orchestrates the pre/execute/post stages of an operation.

    Hooks within a stage execute sequentially in chain order.
    """

    def __init__(self, logger: logging.Logger | None = None):
        self.logger = logger or logging.getLogger(__name__)

    def run(
        self,
        ctx: HookContext,
        chain: HookChain,
        execute: Callable[[], bool],
    ) -> OperationResult:
        """Run an operation.

        Args:
            ctx: The hook context (object, operation, properties, ...)
            chain: Hooks for the object's class
            execute: The store call; returns True on success

        Returns:
            OperationResult describing the outcome.
        """
        obj = ctx.obj
        op = ctx.operation.value
        class_name = type(obj).__name__

        for definition in chain.for_point(Stage.PRE, ctx.operation):
            if definition.fn(ctx) is False:
                message = (
                    f'Can not {op} object "{obj.obj_type}:{obj.id}"; '
                    f"cancelled by {class_name} pre-{op} hook '{definition.name}'"
                )
                self.logger.error(message)
                return self._result(ctx, Outcome.VETOED, message, definition.name)

        if not execute():
            message = (
                f'Can not {op} object "{obj.obj_type}:{obj.id}"; '
                f"storage failed for {class_name}"
            )
            self.logger.error(message)
            return self._result(ctx, Outcome.FAILED, message)

        for definition in chain.for_point(Stage.POST, ctx.operation):
            if definition.fn(ctx) is False:
                message = (
                    f'{_PAST_TENSE[ctx.operation]} object "{obj.obj_type}:{obj.id}" '
                    f"but {class_name} post-{op} hook '{definition.name}' failed"
                )
                self.logger.warning(message)
                return self._result(ctx, Outcome.PARTIAL_FAILURE, message, definition.name)

        return self._result(ctx, Outcome.SUCCESS)

    @staticmethod
    def _result(
        ctx: HookContext,
        outcome: Outcome,
        message: str = "",
        hook_name: str | None = None,
    ) -> OperationResult:
        return OperationResult(
            operation=ctx.operation,
            outcome=outcome,
            obj_type=ctx.obj.obj_type,
            obj_id=ctx.obj.id,
            hook=hook_name,
            message=message,
        )
