"""Translate between template positions and configuration ranges.

Template positions only track a line and a byte column. Configuration
positions also carry a byte offset, and count columns in grapheme clusters
rather than bytes. The original source text is used to reconcile the two.
"""

__all__ = ["to_hil_pos", "to_hcl_pos", "to_hcl_range"]

import logging

from . import hcl, hil

logger = logging.getLogger(__name__)


def to_hil_pos(filename, pos):
    """Project a configuration position onto a template position.

    Args:
        filename: (str) File the position belongs to
        pos: (hcl.Pos) Configuration position

    Returns:
        (hil.Pos) Position with the same line and column
    """
    return hil.Pos(filename, pos.line, pos.column)


def to_hcl_pos(pos, src, src_pos):
    """Convert a template position to a configuration position.

    This is the start of the range given by `to_hcl_range`.
    """
    return to_hcl_range(pos, src, src_pos).start


def to_hcl_range(pos, src, src_pos):
    """Convert a template position to a configuration range.

    The line containing the position is found by scanning the source, and
    the byte column is converted to a character column by counting grapheme
    clusters in the bytes before it. Templates only track where things
    start, so the range runs to the end of that line.

    If the position cannot be found in the source, a range with zeroed
    positions is returned instead.

    Args:
        pos: (hil.Pos) Template position
        src: (bytes) Source the template was parsed from
        src_pos: (hcl.Pos) Position of the first byte of the source

    Returns:
        (hcl.Range) Range beginning at the position
    """
    lines = hcl.scan_ranges(src, pos.filename, src_pos)
    for idx, (line_src, line_rng) in enumerate(lines):
        if line_rng.start.line < pos.line:
            continue
        if line_rng.start.line > pos.line:
            break

        # Template columns count bytes from the start of the line, except
        # that the first line of a fragment starts at the fragment's column.
        base = src_pos.column if idx == 0 else 1
        byte_ofs = pos.column - base
        if byte_ofs < 0 or byte_ofs > len(line_src):
            break
        cols = hcl.grapheme_count(line_src[:byte_ofs])
        start = hcl.Pos(
            line=line_rng.start.line,
            column=line_rng.start.column + cols,
            byte=line_rng.start.byte + byte_ofs,
        )
        return hcl.Range(pos.filename, start, line_rng.end)

    logger.debug("Position %s does not fit its source, using placeholder range", pos)
    return hcl.Range(pos.filename, hcl.Pos(), hcl.Pos())
