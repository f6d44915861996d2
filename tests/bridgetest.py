"""Helpers shared by the bridge tests."""

import hilbridge
from hilbridge import hcl, hil


def parse_ok(text, filename="test.tf", start=hcl.INITIAL_POS, **kwargs):
    """Parse a template that is expected to be valid."""
    expr, diags = hilbridge.parse(text, filename, start, **kwargs)
    assert not diags.has_errors(), str(diags)
    assert expr is not None
    return expr


def evaluate(text, variables=None, functions=None):
    """Parse and evaluate a template against a fresh context."""
    expr = parse_ok(text)
    return expr.value(hcl.EvalContext(variables, functions))


def summaries(diags):
    return [diag.summary for diag in diags]


def run_hil(text, variables=None, functions=None):
    """Parse and evaluate a template directly with the template language.

    Functions are given as plain callables taking their arguments.
    """
    var_map = {name: hil.Variable(value) for name, value in (variables or {}).items()}
    func_map = {}
    for name, func in (functions or {}).items():
        func_map[name] = hil.Function(
            lambda args, func=func: func(*args),
            arg_types=[hil.Type.ANY] * func.__code__.co_argcount,
        )
    scope = hil.BasicScope(var_map, func_map)
    tree = hil.parse(text)
    return hil.evaluate(tree, hil.EvalConfig(global_scope=scope)).value
