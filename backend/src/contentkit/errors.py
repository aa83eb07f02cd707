"""Exception taxonomy for contentkit.

Validation and cycle errors are raised synchronously to the caller.
Hook vetoes and post-hook failures are never raised; they are reported
through OperationResult (see contentkit.lifecycle.types).
"""


class ContentError(Exception):
    """Base class for all contentkit errors."""


class ValidationError(ContentError, ValueError):
    """Malformed input to a setter (wrong type, bad timestamp, ...)."""


class InvalidReferenceError(ValidationError):
    """A reference is not a scalar, a record, or a node of the right type."""


class CycleError(ContentError):
    """A node was made its own parent or its own child."""


class SelfReferenceError(CycleError):
    """A node was added to its own children."""


class ConfigurationError(ContentError, RuntimeError):
    """A required collaborator (store, factory) was never supplied."""


class UnsupportedOperationError(ContentError, NotImplementedError):
    """The operation exists on the interface but has no implementation."""
