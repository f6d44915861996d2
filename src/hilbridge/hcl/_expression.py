"""Interface shared by every expression implementation."""

__all__ = ["Expression"]

from typing import Protocol, runtime_checkable


@runtime_checkable
class Expression(Protocol):
    """An expression that can be evaluated against an `EvalContext`."""

    def value(self, ctx):
        """Evaluate the expression.

        Returns:
            (object, Diagnostics) Result value and any problems found
        """
        ...

    def variables(self):
        """Absolute traversals for every variable the expression refers to."""
        ...

    def range(self):
        """Source range covering the whole expression."""
        ...

    def start_range(self):
        """Source range used to point at the start of the expression."""
        ...
