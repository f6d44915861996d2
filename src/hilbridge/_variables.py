"""Interpret template variable names as traversals.

Template variables are single strings that may contain dots, while
configuration expressions reach nested values with traversals through the
evaluation context. How a variable string maps to a traversal was always
left to the application, so the mapping used by `parse` can be replaced
with any callable that takes a name and a range and returns an expression.

The default, `variable_lookup_expr`, treats each dot as a step into a
nested value, and the context coerces steps made only of digits to list
indices. Splat references such as ``aws_instance.web.*.id`` are not
treated specially; applications needing them must supply their own
function.
"""

__all__ = [
    "VariableExprFunc",
    "VariableLookupExpr",
    "FailExpr",
    "variable_lookup_expr",
    "variable_traversal",
]

from collections.abc import Callable

from . import hcl

VariableExprFunc = Callable[[str, hcl.Range], hcl.Expression]


def variable_lookup_expr(name, rng):
    """Create an expression that reads a dotted variable from the context.

    Ranges for each step are derived from the given range, which is
    assumed to begin where the name begins in the source.

    Args:
        name: (str) Dot-separated variable name
        rng: (hcl.Range) Source range of the name

    Returns:
        (hcl.Expression) Lookup expression, or one that always fails with
        the diagnostics describing why the name is invalid
    """
    traversal, diags = variable_traversal(name, rng)
    if diags.has_errors():
        return FailExpr(diags, rng)
    return VariableLookupExpr(traversal)


def variable_traversal(name, rng):
    """Convert a dot-separated variable name into an absolute traversal.

    The first segment names the root variable. Every following segment is
    a string index step, even when it is made of digits.

    Args:
        name: (str) Dot-separated variable name
        rng: (hcl.Range) Source range of the name

    Returns:
        (hcl.Traversal | None, hcl.Diagnostics) Traversal, or None with
        diagnostics when the name is empty or has an empty segment
    """
    steps = []
    separator = None
    tokens = hcl.scan_ranges(name.encode("utf-8"), rng.filename, rng.start, _scan_attr_steps)
    for token, token_rng in tokens:
        if token == b".":
            if separator is not None or not steps:
                return None, _invalid_reference(token_rng)
            separator = token_rng
            continue

        segment = token.decode("utf-8")
        if not steps:
            # First step must always be a proper variable name, since it is
            # looked up in the context.
            steps.append(hcl.TraverseRoot(segment, token_rng))
        else:
            steps.append(hcl.TraverseIndex(segment, token_rng))
        separator = None

    if separator is not None:
        return None, _invalid_reference(separator)
    if not steps:
        return None, hcl.Diagnostics([
            hcl.Diagnostic(
                hcl.Severity.ERROR,
                "Empty variable reference",
                "There must be at least one character in a variable reference.",
                subject=rng,
            )
        ])
    return hcl.Traversal(steps), hcl.Diagnostics()


class VariableLookupExpr:
    """Expression that applies an absolute traversal to its context."""

    def __init__(self, traversal):
        self.traversal = traversal

    def value(self, ctx):
        return self.traversal.traverse_abs(ctx)

    def variables(self):
        return [self.traversal]

    def range(self):
        return self.traversal.source_range()

    def start_range(self):
        return self.traversal.source_range()

    def __repr__(self):
        return f"VariableLookupExpr({self.traversal!r})"


class FailExpr:
    """Expression that always returns the same diagnostics."""

    def __init__(self, diags, rng):
        self.diags = hcl.Diagnostics(diags)
        self.rng = rng

    def value(self, ctx):
        return hcl.DYNAMIC, hcl.Diagnostics(self.diags)

    def variables(self):
        return []

    def range(self):
        return self.rng

    def start_range(self):
        return self.rng


def _invalid_reference(rng):
    return hcl.Diagnostics([
        hcl.Diagnostic(
            hcl.Severity.ERROR,
            "Invalid variable reference",
            "A variable reference cannot contain an empty attribute name.",
            subject=rng,
        )
    ])


def _scan_attr_steps(data):
    """Split function producing names and the dots between them."""
    if data.startswith(b"."):
        return 1, data[:1]
    idx = data.find(b".")
    if idx < 0:
        return len(data), data
    return idx, data[:idx]
