"""
Template errors converted into diagnostics.
"""

import hilbridge
from hilbridge import hcl, hil

SRC = b"${foo bar}"


def test_no_error_no_diagnostics():
    diags = hilbridge.error_to_diagnostics(None, SRC, hcl.INITIAL_POS)
    assert diags == []
    assert not diags.has_errors()


def test_parse_error_has_subject():
    err = hil.ParseError("unexpected 'bar'", hil.Pos("t.tf", 1, 7))
    diags = hilbridge.error_to_diagnostics(err, SRC, hcl.INITIAL_POS)
    assert len(diags) == 1
    diag = diags[0]
    assert diag.severity is hcl.Severity.ERROR
    assert diag.summary == "Error during parsing"
    assert diag.detail == "Invalid syntax: unexpected 'bar'."
    assert diag.subject == hcl.Range("t.tf", hcl.Pos(1, 7, 6), hcl.Pos(1, 11, 10))


def test_parse_error_outside_source_uses_placeholder():
    err = hil.ParseError("oops", hil.Pos("t.tf", 9, 1))
    diags = hilbridge.error_to_diagnostics(err, SRC, hcl.INITIAL_POS)
    assert diags[0].subject == hcl.Range("t.tf", hcl.Pos(), hcl.Pos())


def test_eval_error_has_no_subject():
    err = hil.EvalError("divide by zero")
    diags = hilbridge.error_to_diagnostics(err, SRC, hcl.INITIAL_POS)
    assert len(diags) == 1
    assert diags[0].summary == "Invalid interpolation"
    assert diags[0].detail == "Failed: divide by zero."
    assert diags[0].subject is None


def test_other_errors_are_generic():
    diags = hilbridge.error_to_diagnostics(ValueError("odd"), SRC, hcl.INITIAL_POS)
    assert [d.summary for d in diags] == ["Invalid interpolation"]
    assert diags[0].detail == "Failed: odd."


def test_context_diagnostics_pass_through():
    original = hcl.Diagnostic(hcl.Severity.ERROR, "Unknown variable", "missing")
    err = hilbridge.ContextDiagnosticsError([original])
    assert isinstance(err, hil.EvalError)
    diags = hilbridge.error_to_diagnostics(err, SRC, hcl.INITIAL_POS)
    assert diags == [original]


def test_diagnostic_formatting():
    rng = hcl.Range("t.tf", hcl.Pos(1, 3, 2), hcl.Pos(1, 6, 5))
    diag = hcl.Diagnostic(hcl.Severity.ERROR, "Unknown variable", "Nope.", rng)
    assert str(diag) == "t.tf:1,3-6: Error: Unknown variable; Nope."
    warning = hcl.Diagnostic(hcl.Severity.WARNING, "Careful")
    assert str(warning) == "Warning: Careful"
