"""Rewrite template trees to resolve names against an evaluation context.

Template variables and functions normally come from the template scope.
After parsing, every variable access and function call in the tree is
replaced by an adapter node that instead resolves against the
`hcl.EvalContext` given to `Expression.value`. The context reaches the
adapters through a scope holding a single reserved variable.
"""

__all__ = [
    "rewrite",
    "VariableAccessNode",
    "FunctionCallNode",
    "EvalState",
    "context_scope",
]

import inspect

import hilbridge

from . import hcl, hil

# Not a valid template variable name, so it cannot collide with one.
_CONTEXT_VAR = "<hcl eval context>"


def rewrite(node, expr):
    """Replace variable accesses and calls with context adapter nodes.

    Call arguments are rewritten before the call itself. Adapter nodes are
    never replaced again. The given tree is not modified.

    Args:
        node: (hil.Node) Root of the parsed tree
        expr: (Expression) Expression that will own the rewritten tree

    Returns:
        (hil.Node) Root of the rewritten tree
    """
    def visitor(node):
        match node:
            case hil.VariableAccess():
                return VariableAccessNode(node.name, node.position, expr)
            case hil.Call():
                return FunctionCallNode(node.func, node.kids, node.position, expr)
        return node

    return node.accept(visitor)


class EvalState:
    """Per-evaluation data shared with the adapter nodes.

    Attributes:
        ctx: (hcl.EvalContext | None) Context to resolve names against
        diagnostics: (hcl.Diagnostics) Warnings collected from lookups
    """

    def __init__(self, ctx):
        self.ctx = ctx
        self.diagnostics = hcl.Diagnostics()


def context_scope(state):
    """Build the template scope that carries an evaluation state."""
    return hil.BasicScope(var_map={
        _CONTEXT_VAR: hil.Variable(state, hil.Type.UNKNOWN),
    })


class VariableAccessNode(hil.Node):
    """Variable access that looks up its name in the evaluation context.

    Args:
        name: (str) Variable name as written in the template
        position: (hil.Pos) Where the name starts
        expr: (Expression) Expression owning the tree
    """

    def __init__(self, name, position, expr):
        self.name = name
        self.expr = expr
        super().__init__(position=position)

    def type(self, scope):
        return hil.Type.UNKNOWN

    def evaluate(self, frame):
        state = _eval_state(frame.scope)
        lookup = self.expr.variable_expr(self.name, self.name_range())
        value, diags = lookup.value(state.ctx)
        if diags.has_errors():
            raise hilbridge.ContextDiagnosticsError(diags)
        state.diagnostics.extend(diags)
        return hilbridge.to_hil_value(value)
        yield  # Make it a generator

    def name_range(self):
        """Source range covering the variable name."""
        rng = self.expr.node_range(self)
        if rng.start == hcl.Pos():
            return rng
        tokens = hcl.scan_ranges(
            self.name.encode("utf-8"), rng.filename, rng.start, _whole
        )
        return next(tokens)[1]

    def __repr__(self):
        return f"VariableAccessNode(name={self.name!r})"


class FunctionCallNode(hil.Node):
    """Function call that looks up its function in the evaluation context.

    Args:
        func: (str) Function name
        args: (list) Argument nodes, already rewritten
        position: (hil.Pos) Where the call starts
        expr: (Expression) Expression owning the tree
    """

    def __init__(self, func, args, position, expr):
        self.func = func
        self.expr = expr
        super().__init__(args, position)

    @property
    def args(self):
        return self.kids

    def type(self, scope):
        return hil.Type.UNKNOWN

    def evaluate(self, frame):
        args = []
        for kid in self.kids:
            value = yield hil.Compute(kid)
            args.append(value)

        state = _eval_state(frame.scope)
        rng = self.expr.node_range(self)
        if state.ctx is None:
            raise _call_error(
                "Function calls not allowed",
                "Functions may not be called here.",
                rng,
            )
        func = state.ctx.lookup_function(self.func)
        if func is None:
            raise _call_error(
                "Call to unknown function",
                f"There is no function named {self.func!r}.",
                rng,
            )

        call_args = [hilbridge.to_hcl_value(arg) for arg in args]
        if not _accepts(func, call_args):
            raise _call_error(
                "Wrong number of arguments",
                f"Function {self.func!r} does not accept {len(args)} arguments.",
                rng,
            )
        if not all(hcl.is_known(arg) for arg in call_args):
            return hil.UNKNOWN

        try:
            result = func(*call_args)
        except hcl.FunctionError as e:
            if e.arg_index is not None and 0 <= e.arg_index < len(self.kids):
                raise _call_error(
                    "Invalid function argument",
                    f"Invalid value for argument {e.arg_index + 1} of "
                    f"function {self.func!r}: {e.message}.",
                    self.expr.node_range(self.kids[e.arg_index]),
                ) from e
            raise _call_error(
                "Error in function call",
                f"Call to function {self.func!r} failed: {e.message}.",
                rng,
            ) from e
        return hilbridge.to_hil_value(result)

    def __repr__(self):
        return f"FunctionCallNode(func={self.func!r} *{len(self.kids)})"


def _eval_state(scope):
    variable = scope.lookup_var(_CONTEXT_VAR)
    if variable is None:
        raise hil.EvalError("no evaluation context is available in this scope")
    return variable.value


def _accepts(func, args):
    """Check whether a callable can be called with some positional args."""
    try:
        signature = inspect.signature(func)
    except (TypeError, ValueError):
        # No signature to check against; let the call decide.
        return True
    try:
        signature.bind(*args)
    except TypeError:
        return False
    return True


def _call_error(summary, detail, rng):
    return hilbridge.ContextDiagnosticsError([
        hcl.Diagnostic(hcl.Severity.ERROR, summary, detail, subject=rng)
    ])


def _whole(data):
    return len(data), data
