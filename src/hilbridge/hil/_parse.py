"""Parse templates into node trees.

A template is literal text with `${ expr }` interpolations. The template is
split into text and expression parts here, and each expression is parsed
with the Lark grammar in `lark/hil.lark`. String literals inside
expressions are templates themselves and are parsed the same way.
"""

__all__ = ["parse"]

import lark

from . import _ast, _error, _pos

_ESCAPES = {"n": "\n", "t": "\t", '"': '"', "\\": "\\"}


def parse(text, start=None):
    """Parse a template.

    Args:
        text: (str) Template source
        start: (Pos | None) Position of the first character of the text,
            defaults to line 1 column 1

    Returns:
        (Output) Root node of the tree

    Raises:
        ParseError: when the template is not valid
    """
    if start is None:
        start = _pos.Pos("", 1, 1)
    locator = _pos._Locator(text, start)
    return _parse_template(text, 0, len(text), locator)


def _parse_template(text, begin, end, locator):
    """Parse the template found in text[begin:end]."""
    parts = []
    literal = []
    literal_start = begin
    idx = begin
    while idx < end:
        if text.startswith("$${", idx):
            if not literal:
                literal_start = idx
            literal.append("${")
            idx += 3
        elif text.startswith("${", idx):
            if literal:
                parts.append(_literal("".join(literal), literal_start, locator))
                literal = []
            close = _find_close(text, idx + 2, end)
            if close < 0:
                raise _error.ParseError(
                    "unterminated interpolation sequence", locator.pos(idx)
                )
            parts.append(_parse_expr(text, idx + 2, close, locator))
            idx = close + 1
        else:
            if not literal:
                literal_start = idx
            literal.append(text[idx])
            idx += 1
    if literal:
        parts.append(_literal("".join(literal), literal_start, locator))
    return _ast.Output(parts, locator.pos(begin))


def _literal(value, offset, locator):
    return _ast.Literal(value, locator.pos(offset))


def _find_close(text, idx, end):
    """Find the brace closing an interpolation, skipping nested braces
    and string literals. Returns -1 when there is none."""
    depth = 0
    while idx < end:
        char = text[idx]
        if char == '"':
            idx += 1
            while idx < end and text[idx] != '"':
                idx += 2 if text[idx] == "\\" else 1
        elif char == "{":
            depth += 1
        elif char == "}":
            if depth == 0:
                return idx
            depth -= 1
        idx += 1
    return -1


def _parse_expr(text, begin, end, locator):
    """Parse the expression in text[begin:end] with the grammar."""
    source = text[begin:end]
    if not source.strip():
        raise _error.ParseError("empty interpolation sequence", locator.pos(begin))
    try:
        tree = _lark_parser().parse(source)
    except lark.UnexpectedEOF:
        raise _error.ParseError("unexpected end of expression", locator.pos(end)) from None
    except lark.UnexpectedInput as e:
        if isinstance(e, lark.UnexpectedToken) and e.token.type == "$END":
            offset = end
        else:
            offset = begin + (e.pos_in_stream or 0)
        raise _error.ParseError(_describe(e), locator.pos(offset)) from None
    return _convert_tree(tree, text, begin, locator)


def _describe(error):
    """Short message for a Lark parse failure."""
    match error:
        case lark.UnexpectedToken():
            if error.token.type == "$END":
                return "unexpected end of expression"
            return f"unexpected {error.token.value!r}"
        case lark.UnexpectedCharacters():
            return f"unexpected character {error.char!r}"
    return "invalid expression"


def _convert_tree(tree, text, base, locator):
    """Convert a Lark tree or token into a node.

    Args:
        tree: (lark.Tree | lark.Token) Lark Tree or Token to convert
        text: (str) Full template text
        base: (int) Offset of the parsed expression within text
        locator: (_Locator) Position lookup for the full template

    Returns:
        (Node) Converted node
    """
    def convert(kid):
        return _convert_tree(kid, text, base, locator)

    pos = locator.pos(base + _start_offset(tree))
    if isinstance(tree, lark.Token):
        raise ValueError(f"Unhandled grammar token: {tree}")

    kids = tree.children
    match tree.data:
        case "number":
            token = kids[0].value
            try:
                value = float(token) if "." in token else int(token)
            except ValueError:
                # Python refuses int conversion of very long digit strings
                raise _error.ParseError("invalid number literal", pos) from None
            return _ast.Literal(value, pos)
        case "boolean":
            return _ast.Literal(kids[0].value == "true", pos)
        case "string":
            token = kids[0]
            offset = base + token.start_pos
            return _parse_string(text, offset + 1, offset + len(token.value) - 1, locator)
        case "variable":
            return _ast.VariableAccess(kids[0].value, pos)
        case "call":
            args = [convert(kid) for kid in kids[1:] if kid is not None]
            return _ast.Call(kids[0].value, args, pos)
        case "binary":
            return _ast.Arithmetic(kids[1].value, [convert(kids[0]), convert(kids[2])], pos)
        case "unary":
            return _ast.Arithmetic(kids[0].value, [convert(kids[1])], pos)
        case "conditional":
            return _ast.Conditional(convert(kids[0]), convert(kids[1]), convert(kids[2]), pos)
        case "index":
            return _ast.Index(convert(kids[0]), convert(kids[1]), pos)
        case _:
            raise ValueError(f"Unhandled grammar rule: {tree.data}")


def _parse_string(text, begin, end, locator):
    """Parse the contents of a string literal as a template.

    A string without interpolations becomes a single literal.
    """
    output = _parse_template(text, begin, end, locator)
    for idx, part in enumerate(output.kids):
        if isinstance(part, _ast.Literal):
            output.kids[idx] = _ast.Literal(_unescape(part.value), part.position)
    if len(output.kids) == 1 and isinstance(output.kids[0], _ast.Literal):
        return output.kids[0]
    if not output.kids:
        return _ast.Literal("", output.position)
    return output


def _unescape(value):
    chars = []
    idx = 0
    while idx < len(value):
        char = value[idx]
        if char == "\\" and idx + 1 < len(value):
            nxt = value[idx + 1]
            chars.append(_ESCAPES.get(nxt, "\\" + nxt))
            idx += 2
        else:
            chars.append(char)
            idx += 1
    return "".join(chars)


def _start_offset(treetoken):
    """Character offset where a Lark Tree or Token begins."""
    if isinstance(treetoken, lark.Token):
        return treetoken.start_pos
    return treetoken.meta.start_pos


_parser = None


def _lark_parser():
    """Expression parser shared by every call, loaded on first use."""
    global _parser
    if _parser is None:
        _parser = lark.Lark.open(
            "lark/hil.lark", rel_to=__file__, parser="lalr", propagate_positions=True
        )
    return _parser
