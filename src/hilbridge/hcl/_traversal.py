"""Traversals through nested values.

A traversal is an ordered sequence of steps. An absolute traversal starts
with a `TraverseRoot` that names a variable in the evaluation context, and
each following step looks up an attribute or index in the value found so
far.
"""

__all__ = [
    "TraverseRoot",
    "TraverseAttr",
    "TraverseIndex",
    "Traversal",
    "index_value",
]

from dataclasses import dataclass

from ._diagnostic import Diagnostic, Diagnostics, Severity
from ._pos import Range
from ._value import DYNAMIC, Unknown, friendly_type_name


@dataclass(frozen=True)
class TraverseRoot:
    """Look up a variable by name in the evaluation context."""

    name: str
    src_range: Range = Range()


@dataclass(frozen=True)
class TraverseAttr:
    """Look up an attribute of an object by name."""

    name: str
    src_range: Range = Range()

    def traverse(self, value):
        return index_value(value, self.name, self.src_range)


@dataclass(frozen=True)
class TraverseIndex:
    """Look up an element of a collection by key."""

    key: object
    src_range: Range = Range()

    def traverse(self, value):
        return index_value(value, self.key, self.src_range)


class Traversal(tuple):
    """Sequence of traversal steps.

    Args:
        steps: (iterable) Steps in order; must not be empty
    """

    def __new__(cls, steps):
        steps = tuple(steps)
        if not steps:
            raise ValueError("Traversal requires at least one step")
        return super().__new__(cls, steps)

    @property
    def is_relative(self):
        return not isinstance(self[0], TraverseRoot)

    @property
    def root_name(self):
        if self.is_relative:
            raise ValueError("Relative traversal has no root name")
        return self[0].name

    def source_range(self):
        """Range covering from the first step to the last."""
        first, last = self[0].src_range, self[-1].src_range
        return Range(first.filename, first.start, last.end)

    def traverse_abs(self, ctx):
        """Apply an absolute traversal to an evaluation context.

        Args:
            ctx: (EvalContext | None) Context providing the root variable

        Returns:
            (object, Diagnostics) Value found, or DYNAMIC with diagnostics
        """
        if self.is_relative:
            raise ValueError("traverse_abs requires an absolute traversal")
        root = self[0]
        if ctx is None:
            return DYNAMIC, Diagnostics([
                Diagnostic(
                    Severity.ERROR,
                    "Variables not allowed",
                    "Variables may not be used here.",
                    subject=root.src_range,
                )
            ])
        try:
            value = ctx.lookup_variable(root.name)
        except KeyError:
            return DYNAMIC, Diagnostics([
                Diagnostic(
                    Severity.ERROR,
                    "Unknown variable",
                    f"There is no variable named {root.name!r}.",
                    subject=root.src_range,
                )
            ])

        for step in self[1:]:
            value, diags = step.traverse(value)
            if diags.has_errors():
                return DYNAMIC, diags
        return value, Diagnostics()

    def __repr__(self):
        return f"Traversal({list(self)!r})"


def index_value(collection, key, src_range=None):
    """Look up a single element of a collection.

    Maps are indexed by string key. Lists and tuples are indexed by whole
    number, and a string made only of decimal digits is accepted in place
    of a number.

    Returns:
        (object, Diagnostics) Element found, or DYNAMIC with diagnostics
    """
    if isinstance(collection, Unknown) or isinstance(key, Unknown):
        return DYNAMIC, Diagnostics()
    if collection is None:
        return DYNAMIC, _index_error(
            "Attempt to index null value",
            "This value is null, so it does not have any indices.",
            src_range,
        )

    if isinstance(collection, dict):
        if not isinstance(key, str):
            return DYNAMIC, _index_error(
                "Invalid index",
                f"A map can only be indexed by a string, not a {friendly_type_name(key)}.",
                src_range,
            )
        if key not in collection:
            return DYNAMIC, _index_error(
                "Missing map element",
                f"This map does not have an element with the key {key!r}.",
                src_range,
            )
        return collection[key], Diagnostics()

    if isinstance(collection, (list, tuple)):
        idx = _whole_number(key)
        if idx is None:
            return DYNAMIC, _index_error(
                "Invalid index",
                "The given key does not identify an element in this collection value.",
                src_range,
            )
        if not 0 <= idx < len(collection):
            return DYNAMIC, _index_error(
                "Invalid index",
                f"The given index {idx} is out of range for a list of {len(collection)} elements.",
                src_range,
            )
        return collection[idx], Diagnostics()

    return DYNAMIC, _index_error(
        "Invalid index",
        f"This value does not have any indices; it is a {friendly_type_name(collection)}.",
        src_range,
    )


def _whole_number(key):
    """Convert a key to a list index, or None if it is not one."""
    if isinstance(key, bool):
        return None
    if isinstance(key, int):
        return key
    if isinstance(key, float) and key.is_integer():
        return int(key)
    if isinstance(key, str) and key.isascii() and key.isdigit():
        return int(key)
    return None


def _index_error(summary, detail, src_range):
    return Diagnostics([
        Diagnostic(Severity.ERROR, summary, detail, subject=src_range)
    ])
