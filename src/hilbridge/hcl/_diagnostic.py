"""Diagnostics reported by parsing and evaluation."""

__all__ = ["Severity", "Diagnostic", "Diagnostics"]

import enum
from dataclasses import dataclass

from ._pos import Range


class Severity(enum.Enum):
    ERROR = "error"
    WARNING = "warning"


@dataclass(frozen=True)
class Diagnostic:
    """A single problem report.

    Attributes:
        severity: (Severity) How serious the problem is
        summary: (str) Short description, suitable for a heading
        detail: (str) Full sentence describing the problem
        subject: (Range | None) Source range the problem applies to
    """

    severity: Severity
    summary: str
    detail: str = ""
    subject: Range | None = None

    def __str__(self) -> str:
        prefix = "Error" if self.severity is Severity.ERROR else "Warning"
        text = f"{prefix}: {self.summary}"
        if self.detail:
            text = f"{text}; {self.detail}"
        if self.subject is not None:
            text = f"{self.subject}: {text}"
        return text


class Diagnostics(list):
    """Ordered collection of diagnostics.

    A result accompanied by diagnostics is only usable when none of them
    have error severity. Warnings never invalidate a result.
    """

    def has_errors(self) -> bool:
        return any(diag.severity is Severity.ERROR for diag in self)

    def errors(self):
        """Only the error severity diagnostics, in order."""
        return Diagnostics(d for d in self if d.severity is Severity.ERROR)

    def __str__(self) -> str:
        return "\n".join(str(diag) for diag in self)

    def __repr__(self) -> str:
        return f"Diagnostics({list.__repr__(self)})"
