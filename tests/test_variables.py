"""
Dotted variable names converted to traversals and lookup expressions.
"""

import pytest

import hilbridge
from hilbridge import hcl

RANGE = hcl.Range("t.tf", hcl.Pos(1, 3, 2), hcl.Pos(1, 8, 7))


def _rng(start_col, end_col):
    return hcl.Range(
        "t.tf",
        hcl.Pos(1, start_col, start_col - 1),
        hcl.Pos(1, end_col, end_col - 1),
    )


def test_dotted_name_traversal():
    traversal, diags = hilbridge.variable_traversal("a.b.3", RANGE)
    assert not diags
    assert list(traversal) == [
        hcl.TraverseRoot("a", _rng(3, 4)),
        hcl.TraverseIndex("b", _rng(5, 6)),
        hcl.TraverseIndex("3", _rng(7, 8)),
    ]
    assert traversal.root_name == "a"
    assert traversal.source_range() == _rng(3, 8)


def test_single_name_traversal():
    traversal, diags = hilbridge.variable_traversal("count", RANGE)
    assert not diags
    assert list(traversal) == [hcl.TraverseRoot("count", _rng(3, 8))]


def test_multibyte_segment_ranges():
    start = hcl.Range("t.tf", hcl.INITIAL_POS, hcl.INITIAL_POS)
    traversal, diags = hilbridge.variable_traversal("\u00e4.b", start)
    assert not diags
    root, step = traversal
    assert root.src_range.end == hcl.Pos(1, 2, 2)
    assert step.src_range.start == hcl.Pos(1, 3, 3)


def test_empty_name_is_rejected():
    traversal, diags = hilbridge.variable_traversal("", RANGE)
    assert traversal is None
    assert len(diags) == 1
    assert diags[0].severity is hcl.Severity.ERROR
    assert diags[0].summary == "Empty variable reference"
    assert diags[0].subject == RANGE


@pytest.mark.parametrize("name, subject", [
    (".a", _rng(3, 4)),
    ("a..b", _rng(5, 6)),
    ("a.", _rng(4, 5)),
    (".", _rng(3, 4)),
])
def test_empty_segments_are_rejected(name, subject):
    traversal, diags = hilbridge.variable_traversal(name, RANGE)
    assert traversal is None
    assert [d.summary for d in diags] == ["Invalid variable reference"]
    assert diags[0].subject == subject


def test_lookup_expr_reads_context():
    expr = hilbridge.variable_lookup_expr("foo.bar", RANGE)
    ctx = hcl.EvalContext({"foo": {"bar": 42}})
    value, diags = expr.value(ctx)
    assert value == 42
    assert not diags.has_errors()


def test_lookup_expr_indexes_lists_by_digits():
    expr = hilbridge.variable_lookup_expr("items.1", RANGE)
    value, diags = expr.value(hcl.EvalContext({"items": ["x", "y"]}))
    assert value == "y"
    assert not diags


def test_lookup_expr_unknown_root():
    expr = hilbridge.variable_lookup_expr("nope.x", RANGE)
    value, diags = expr.value(hcl.EvalContext({"foo": 1}))
    assert value is hcl.DYNAMIC
    assert [d.summary for d in diags] == ["Unknown variable"]
    assert diags[0].subject == _rng(3, 7)


def test_lookup_expr_reports_traversal():
    expr = hilbridge.variable_lookup_expr("a.b", RANGE)
    traversal, _ = hilbridge.variable_traversal("a.b", RANGE)
    assert expr.variables() == [traversal]
    assert expr.range() == traversal.source_range()
    assert expr.start_range() == expr.range()


def test_failed_lookup_expr_ignores_context():
    expr = hilbridge.variable_lookup_expr("", RANGE)
    assert isinstance(expr, hilbridge.FailExpr)
    first = expr.value(hcl.EvalContext({"": 1}))
    second = expr.value(None)
    assert first[0] is hcl.DYNAMIC
    assert second[0] is hcl.DYNAMIC
    assert first[1] == second[1]
    assert first[1].has_errors()
    assert expr.variables() == []
    assert expr.range() == RANGE
    assert expr.start_range() == RANGE


def test_lookup_exprs_satisfy_expression_protocol():
    assert isinstance(hilbridge.variable_lookup_expr("a", RANGE), hcl.Expression)
    assert isinstance(hilbridge.variable_lookup_expr("", RANGE), hcl.Expression)
