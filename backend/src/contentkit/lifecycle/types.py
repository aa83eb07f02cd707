"""Lifecycle hook types for contentkit.

Defines the core data structures for the object lifecycle hook chain:
- HookDefinition: metadata describing when a hook runs
- HookContext: runtime state passed to hook functions
- OperationResult: what a mutating operation reports back to its caller
"""

from collections.abc import Callable
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from contentkit.core.clock import Clock, system_clock


class Operation(Enum):
    """The mutating operation being run."""

    CREATE = "create"
    UPDATE = "update"
    DELETE = "delete"
    RESTORE = "restore"


class Stage(Enum):
    PRE = "pre"
    POST = "post"


class Outcome(Enum):
    """Result of a mutating operation.

    SUCCESS: pre hooks passed, store succeeded, post hooks passed
    VETOED: a pre hook returned False; the store was never called
    FAILED: the store reported failure
    PARTIAL_FAILURE: data was persisted but a post hook returned False
    """

    SUCCESS = "success"
    VETOED = "vetoed"
    FAILED = "failed"
    PARTIAL_FAILURE = "partial_failure"


@dataclass
class HookContext:
    """Runtime context passed to every hook function.

    Attributes:
        obj: The model being operated on
        operation: The current operation
        properties: Property subset being written (update/delete/restore), None for all
        force: True when a delete bypasses soft-delete semantics
        actor: Who triggered the operation, if known
        clock: Time source for "now"
        extra: Scratch space shared between hooks of one operation
    """

    obj: Any
    operation: Operation
    properties: list[str] | None = None
    force: bool = False
    actor: Any = None
    clock: Clock = system_clock
    extra: dict[str, Any] = field(default_factory=dict)


# Hook function signature: (HookContext) -> bool | None. Only False vetoes.
HookFn = Callable[[HookContext], bool | None]


@dataclass
class HookDefinition:
    """A hook registered in a chain.

    Attributes:
        name: Unique name within the chain (e.g., "timestampable.touch")
        stage: PRE or POST
        on: Operations this hook applies to
        fn: The hook function
        description: Human-readable description
    """

    name: str
    stage: Stage
    on: list[Operation]
    fn: HookFn
    description: str = ""

    def applies_to(self, stage: Stage, operation: Operation) -> bool:
        return self.stage == stage and operation in self.on


@dataclass
class OperationResult:
    """Return value of save/update/delete/restore.

    Truthy when the data reached the store (SUCCESS or PARTIAL_FAILURE).
    """

    operation: Operation
    outcome: Outcome
    obj_type: str = ""
    obj_id: Any = None
    hook: str | None = None
    message: str = ""

    @property
    def persisted(self) -> bool:
        return self.outcome in (Outcome.SUCCESS, Outcome.PARTIAL_FAILURE)

    def __bool__(self) -> bool:
        return self.persisted


def compute_changes(
    record: dict[str, Any], original: dict[str, Any] | None
) -> dict[str, Any] | None:
    """Compute a diff of changed fields between record and original.

    Returns None if original is None (create operations).
    Returns a dict of {field: new_value} for fields that differ.
    """
    if original is None:
        return None

    changes: dict[str, Any] = {}
    for key, value in record.items():
        if key in original and original[key] != value:
            changes[key] = value
        elif key not in original:
            changes[key] = value

    return changes
