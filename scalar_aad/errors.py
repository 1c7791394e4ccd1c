# scalar_aad/errors.py
"""
Exception types raised by the AAD engine.

Every failure is raised synchronously at the point where it is detected and is
never recovered internally. The classes also derive from the matching builtin
(ValueError / TypeError / RuntimeError) so callers that only know the builtins
keep working.
"""


class AADError(Exception):
    """Base class for all scalar_aad errors."""


class NonFiniteValueError(AADError, ValueError):
    """A NaN or +/-inf was about to be stored in `data` or `grad`."""

    def __init__(self, value=None, field: str = "value"):
        self.value = value
        self.field = field
        super().__init__("Value must be a finite number")


class DomainError(AADError, ValueError):
    """An operation was invoked with operands outside its valid domain."""

    def __init__(self, message: str, op: str = ""):
        self.op = op
        super().__init__(message)


class InvalidOrderError(AADError, ValueError):
    """Derivative order below 1 passed to backward / higher-order query."""

    def __init__(self, order=None):
        self.order = order
        super().__init__("Order must be >= 1")


class UnsupportedInputError(AADError, TypeError):
    """Input cannot be coerced into a Value."""


class StaleNodeError(AADError, RuntimeError):
    """A tape index no longer points at the node that referenced it."""


class TapeMismatchError(AADError, ValueError):
    """Operands of one operation were recorded on different tapes."""
