"""Convert template errors into diagnostics."""

__all__ = ["ContextDiagnosticsError", "error_to_diagnostics"]

import hilbridge

from . import hcl, hil


class ContextDiagnosticsError(hil.EvalError):
    """Evaluation failure already described by context diagnostics.

    Raised from inside template evaluation when a lookup against the
    evaluation context fails, so its diagnostics can pass back out through
    the template evaluator unchanged.

    Args:
        diagnostics: (hcl.Diagnostics) Problems reported by the context
    """

    def __init__(self, diagnostics):
        self.diagnostics = hcl.Diagnostics(diagnostics)
        super().__init__(str(self.diagnostics))


def error_to_diagnostics(err, src, src_pos):
    """Describe a template error as diagnostics.

    Args:
        err: (Exception | None) Error from parsing or evaluation
        src: (bytes) Source the template was parsed from
        src_pos: (hcl.Pos) Position of the first byte of the source

    Returns:
        (hcl.Diagnostics) Empty when there is no error
    """
    if err is None:
        return hcl.Diagnostics()

    match err:
        case ContextDiagnosticsError():
            return hcl.Diagnostics(err.diagnostics)
        case hil.ParseError():
            rng = hilbridge.to_hcl_range(err.pos, src, src_pos)
            return hcl.Diagnostics([
                hcl.Diagnostic(
                    hcl.Severity.ERROR,
                    "Error during parsing",
                    f"Invalid syntax: {err.message}.",
                    subject=rng,
                )
            ])
    return hcl.Diagnostics([
        hcl.Diagnostic(
            hcl.Severity.ERROR,
            "Invalid interpolation",
            f"Failed: {err}.",
        )
    ])
