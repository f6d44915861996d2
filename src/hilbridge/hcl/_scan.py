"""Range scanning over source fragments.

A fragment is a slice of some larger file that begins at a known position.
Scanning splits the fragment into tokens and reports the source range of
each one, with columns counted in grapheme clusters and bytes counted as
offsets into the larger file.
"""

__all__ = ["scan_ranges", "scan_lines", "grapheme_count"]

import regex

from ._pos import Pos, Range

_GRAPHEME = regex.compile(r"\X")


def grapheme_count(data):
    """Count the grapheme clusters in a byte string.

    Byte sequences that are not valid UTF-8 each count as one cluster, so
    this always produces a count.

    Args:
        data: (bytes) Text to count

    Returns:
        (int) Number of grapheme clusters
    """
    text = data.decode("utf-8", errors="replace")
    return sum(1 for _ in _GRAPHEME.finditer(text))


def scan_lines(data):
    """Split function that produces one token per line.

    The line terminator is consumed but not included in the token, and a
    carriage return before it is dropped.

    Args:
        data: (bytes) Remaining unscanned input

    Returns:
        (int, bytes) Bytes to advance and the token
    """
    idx = data.find(b"\n")
    if idx < 0:
        advance, token = len(data), data
    else:
        advance, token = idx + 1, data[:idx]
    if token.endswith(b"\r"):
        token = token[:-1]
    return advance, token


def scan_ranges(src, filename, start, split=scan_lines):
    """Generate tokens from a source fragment along with their ranges.

    Args:
        src: (bytes) Source fragment
        filename: (str) Filename reported in each range
        start: (Pos) Position of the first byte of the fragment
        split: (callable) Split function taking the remaining bytes and
            returning how many bytes to advance and the token

    Yields:
        (bytes, Range) Each token and the range it covers
    """
    pos = start
    offset = 0
    while offset < len(src):
        advance, token = split(src[offset:])
        if advance <= 0:
            raise ValueError("split function must consume input")
        token_start = pos
        token_end = _advance(pos, token)
        yield token, Range(filename, token_start, token_end)
        pos = _advance(pos, src[offset:offset + advance])
        offset += advance


def _advance(pos, data):
    """Move a position forward over some bytes."""
    line, column = pos.line, pos.column
    text = data.decode("utf-8", errors="replace")
    for cluster in _GRAPHEME.findall(text):
        if cluster in ("\n", "\r\n"):
            line += 1
            column = 1
        else:
            column += 1
    return Pos(line, column, pos.byte + len(data))
