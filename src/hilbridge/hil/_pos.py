"""Source positions for template nodes."""

__all__ = ["Pos"]

import bisect
from dataclasses import dataclass


@dataclass(frozen=True)
class Pos:
    """Start position of a node.

    Attributes:
        filename: (str) Name of the file the template came from
        line: (int) 1-based line number
        column: (int) 1-based column, counted in bytes from the line start
    """

    filename: str = ""
    line: int = 0
    column: int = 0

    def __str__(self) -> str:
        if self.filename:
            return f"{self.filename}:{self.line}:{self.column}"
        return f"{self.line}:{self.column}"


class _Locator:
    """Convert character offsets in a template into positions.

    The first line of the template begins at the column of the start
    position; every later line begins at column 1.
    """

    def __init__(self, text, start):
        self.text = text
        self.start = start
        self.line_starts = [0]
        for idx, char in enumerate(text):
            if char == "\n":
                self.line_starts.append(idx + 1)

    def pos(self, offset):
        line = bisect.bisect_right(self.line_starts, offset) - 1
        line_start = self.line_starts[line]
        width = len(self.text[line_start:offset].encode("utf-8"))
        column = (self.start.column if line == 0 else 1) + width
        return Pos(self.start.filename, self.start.line + line, column)
