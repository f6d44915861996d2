"""Source positions and ranges."""

__all__ = ["Pos", "Range", "INITIAL_POS"]

from dataclasses import dataclass


@dataclass(frozen=True)
class Pos:
    """Position in a source file.

    Attributes:
        line: (int) 1-based line number
        column: (int) 1-based column, counted in grapheme clusters
        byte: (int) 0-based byte offset into the file
    """

    line: int = 0
    column: int = 0
    byte: int = 0

    def __str__(self) -> str:
        return f"{self.line},{self.column}"


INITIAL_POS = Pos(1, 1, 0)


@dataclass(frozen=True)
class Range:
    """Span of source between two positions in the same file."""

    filename: str = ""
    start: Pos = Pos()
    end: Pos = Pos()

    def __str__(self) -> str:
        if self.start.line == self.end.line:
            return (
                f"{self.filename}:{self.start.line},"
                f"{self.start.column}-{self.end.column}"
            )
        return f"{self.filename}:{self.start}-{self.end}"
