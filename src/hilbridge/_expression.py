"""Expressions backed by interpolation templates."""

__all__ = ["parse", "Expression"]

import logging

import hilbridge

from . import hcl, hil

logger = logging.getLogger(__name__)


def parse(text, filename, start=hcl.INITIAL_POS, variable_expr=None):
    """Parse an interpolation template as a configuration expression.

    The filename and start position describe where the template was found.
    Every source range reported for the expression is relative to that
    start position.

    Args:
        text: (str) Template source
        filename: (str) File the template came from
        start: (hcl.Pos) Position of the first character of the template
        variable_expr: (VariableExprFunc | None) Interprets variable names,
            defaults to `variable_lookup_expr`

    Returns:
        (Expression | None, hcl.Diagnostics) The expression, or None with
        error diagnostics when the template is invalid
    """
    src = text.encode("utf-8")
    try:
        node = hil.parse(text, hilbridge.to_hil_pos(filename, start))
    except hil.ParseError as err:
        logger.debug("Failed to parse %s: %s", filename, err)
        return None, hilbridge.error_to_diagnostics(err, src, start)

    expr = Expression(node, src, start, variable_expr)
    return expr, hcl.Diagnostics()


class Expression:
    """Configuration expression that evaluates an interpolation template.

    Variable accesses and function calls in the template resolve against
    the `hcl.EvalContext` passed to `value`. Construct with `parse`.

    Args:
        node: (hil.Node) Parsed template, rewritten here before use
        src: (bytes) Source the template was parsed from
        start: (hcl.Pos) Position of the first byte of the source
        variable_expr: (VariableExprFunc | None) Interprets variable names
    """

    def __init__(self, node, src, start, variable_expr=None):
        self.src = bytes(src)
        self.start = start
        self.variable_expr = variable_expr or hilbridge.variable_lookup_expr
        self.node = hilbridge.rewrite(node, self)

    def value(self, ctx):
        """Evaluate the template against a context.

        Args:
            ctx: (hcl.EvalContext | None) Variables and functions to use

        Returns:
            (object, hcl.Diagnostics) Result, or DYNAMIC with diagnostics
            when evaluation fails
        """
        state = hilbridge.EvalState(ctx)
        # Variables and calls were replaced by adapter nodes, so this odd
        # single variable scope is all the template evaluator needs.
        config = hil.EvalConfig(global_scope=hilbridge.context_scope(state))
        try:
            result = hil.evaluate(self.node, config)
        except hil.EvalError as err:
            logger.debug("Failed to evaluate %s: %s", self.range(), err)
            return hcl.DYNAMIC, hilbridge.error_to_diagnostics(err, self.src, self.start)
        return hilbridge.to_hcl_value(result.value), state.diagnostics

    def variables(self):
        """Traversals for each variable the template refers to."""
        traversals = []
        for node in self.node.find_all(hilbridge.VariableAccessNode):
            lookup = self.variable_expr(node.name, node.name_range())
            traversals.extend(lookup.variables())
        return traversals

    def range(self):
        return self.node_range(self.node)

    def start_range(self):
        return self.range()

    def node_range(self, node):
        """Source range starting at a node of this expression's tree."""
        return hilbridge.to_hcl_range(node.position, self.src, self.start)

    def __repr__(self):
        return f"Expression({self.node!r})"
