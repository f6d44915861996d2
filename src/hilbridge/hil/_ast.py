"""Template syntax tree nodes.

Every node tracks the position it started at and its child nodes in
`kids`. Nodes evaluate through `evaluate` generators that yield `Compute`
requests for their children and receive each child's value back, in the
same way for every node type.
"""

__all__ = [
    "Node",
    "Output",
    "Literal",
    "VariableAccess",
    "Call",
    "Arithmetic",
    "Conditional",
    "Index",
    "UNARY_OPS",
    "BINARY_OPS",
]

import copy
import math
import operator

import regex

from . import _engine, _error, _pos, _types

UNARY_OPS = ("-", "!")
BINARY_OPS = (
    "+", "-", "*", "/", "%",
    "==", "!=", "<", "<=", ">", ">=",
    "&&", "||",
)

# Strings accepted where a number is expected
_NUMERIC = regex.compile(r"-?[0-9]+(\.[0-9]+)?")


class Node:
    """Base class for all template nodes.

    Args:
        kids: (list | None) Child nodes
        position: (Pos | None) Where the node starts in the source
    """

    def __init__(self, kids=None, position=None):
        self.kids = list(kids) if kids else []
        self.position = position if position is not None else _pos.Pos()

    def __repr__(self):
        """Compact representation showing type and key attributes."""
        attrs = []
        if self.kids:
            attrs.append(f"*{len(self.kids)}")
        for key, value in self.__dict__.items():
            if key not in ("kids", "position"):
                attrs.append(f"{key}={value!r}")
        return f"{self.__class__.__name__}({' '.join(attrs)})"

    def accept(self, visitor):
        """Rebuild this tree through a visitor.

        Children are visited first. The visitor receives a shallow copy of
        this node holding the visited children and returns the node to use
        in its place. The original tree is left untouched.

        Args:
            visitor: (callable) Takes a node and returns a node

        Returns:
            (Node) Root of the rebuilt tree
        """
        copied = copy.copy(self)
        copied.kids = [kid.accept(visitor) for kid in self.kids]
        return visitor(copied)

    def find_all(self, node_type):
        """Find all descendants of given type, including self."""
        results = [self] if isinstance(self, node_type) else []
        for kid in self.kids:
            results.extend(kid.find_all(node_type))
        return results

    def type(self, scope):
        """Static type this node will evaluate to in a scope."""
        raise NotImplementedError(f"{self.__class__.__name__}.type() not implemented")

    def evaluate(self, frame):
        """Evaluate this node to produce a value.

        Args:
            frame: (_Frame) Evaluation frame providing the scope

        Yields:
            (Compute) Requests to evaluate child nodes

        Receives:
            Values of the evaluated children

        Returns:
            Final value of the node
        """
        raise NotImplementedError(f"{self.__class__.__name__}.evaluate() not implemented")


class Output(Node):
    """Template made of literal text and interpolated expressions.

    A template with exactly one part evaluates to that part's value
    unchanged. Otherwise every part is converted to a string and joined.
    """

    def type(self, scope):
        if len(self.kids) == 1:
            return self.kids[0].type(scope)
        return _types.Type.STRING

    def evaluate(self, frame):
        values = []
        for kid in self.kids:
            value = yield _engine.Compute(kid)
            values.append(value)

        if len(values) == 1:
            return values[0]
        if any(isinstance(v, _types.Unknown) for v in values):
            return _types.UNKNOWN

        parts = []
        for idx, value in enumerate(values):
            kind = _types.type_of(value)
            if kind in (_types.Type.LIST, _types.Type.MAP, _types.Type.ANY):
                raise _error.EvalError(
                    "output of an interpolation must be a string, or a single "
                    f"list or map (argument {idx + 1} is {kind.value})"
                )
            parts.append(to_string(value))
        return "".join(parts)


class Literal(Node):
    """Constant string, number or bool."""

    def __init__(self, value, position=None):
        self.value = value
        super().__init__(position=position)

    def type(self, scope):
        return _types.type_of(self.value)

    def evaluate(self, frame):
        return self.value
        yield  # Make it a generator


class VariableAccess(Node):
    """Reference to a variable by its full dotted name."""

    def __init__(self, name, position=None):
        if not name:
            raise ValueError("Variable name cannot be empty")
        self.name = name
        super().__init__(position=position)

    def type(self, scope):
        return _lookup_var(scope, self.name).type

    def evaluate(self, frame):
        return _lookup_var(frame.scope, self.name).value
        yield  # Make it a generator


class Call(Node):
    """Function call; the kids are the arguments."""

    def __init__(self, func, args=None, position=None):
        if not func:
            raise ValueError("Function name cannot be empty")
        self.func = func
        super().__init__(args, position)

    @property
    def args(self):
        return self.kids

    def type(self, scope):
        return _lookup_func(scope, self.func).return_type

    def evaluate(self, frame):
        func = _lookup_func(frame.scope, self.func)
        args = []
        for kid in self.kids:
            value = yield _engine.Compute(kid)
            args.append(value)

        expected = len(func.arg_types)
        if len(args) < expected or (len(args) > expected and not func.variadic):
            raise _error.EvalError(
                f"{self.func}: expected {expected} arguments, got {len(args)}"
            )
        if any(isinstance(v, _types.Unknown) for v in args):
            return _types.UNKNOWN
        return func.callback(args)


class Arithmetic(Node):
    """Unary or binary operator applied to its kids."""

    def __init__(self, op, operands, position=None):
        operands = list(operands)
        if len(operands) == 1 and op not in UNARY_OPS:
            raise ValueError(f"Unknown unary operator {op!r}")
        if len(operands) == 2 and op not in BINARY_OPS:
            raise ValueError(f"Unknown binary operator {op!r}")
        if len(operands) not in (1, 2):
            raise ValueError("Arithmetic requires one or two operands")
        self.op = op
        super().__init__(operands, position)

    def type(self, scope):
        if self.op in ("!", "&&", "||", "==", "!=", "<", "<=", ">", ">="):
            return _types.Type.BOOL
        return self.kids[0].type(scope)

    def evaluate(self, frame):
        if self.op in ("&&", "||"):
            return (yield from self._logical())

        operands = []
        for kid in self.kids:
            value = yield _engine.Compute(kid)
            operands.append(value)
        if any(isinstance(v, _types.Unknown) for v in operands):
            return _types.UNKNOWN

        if len(operands) == 1:
            if self.op == "!":
                return not to_bool(operands[0])
            return -to_number(operands[0])

        left, right = operands
        match self.op:
            case "==":
                return _equal(left, right)
            case "!=":
                return not _equal(left, right)
            case "<" | "<=" | ">" | ">=":
                return _COMPARISONS[self.op](to_number(left), to_number(right))
        return _arithmetic(self.op, to_number(left), to_number(right))

    def _logical(self):
        left = yield _engine.Compute(self.kids[0])
        if isinstance(left, _types.Unknown):
            return _types.UNKNOWN
        left = to_bool(left)
        if left == (self.op == "||"):
            return left
        right = yield _engine.Compute(self.kids[1])
        if isinstance(right, _types.Unknown):
            return _types.UNKNOWN
        return to_bool(right)


class Conditional(Node):
    """Choose between two expressions: cond ? true : false"""

    def __init__(self, cond, true_expr, false_expr, position=None):
        super().__init__([cond, true_expr, false_expr], position)

    def type(self, scope):
        return self.kids[1].type(scope)

    def evaluate(self, frame):
        cond = yield _engine.Compute(self.kids[0])
        if isinstance(cond, _types.Unknown):
            return _types.UNKNOWN
        branch = self.kids[1] if to_bool(cond) else self.kids[2]
        return (yield _engine.Compute(branch))


class Index(Node):
    """Element lookup in a list or map: target[key]"""

    def __init__(self, target, key, position=None):
        super().__init__([target, key], position)

    def type(self, scope):
        return _types.Type.ANY

    def evaluate(self, frame):
        target = yield _engine.Compute(self.kids[0])
        key = yield _engine.Compute(self.kids[1])
        if isinstance(target, _types.Unknown) or isinstance(key, _types.Unknown):
            return _types.UNKNOWN

        match _types.type_of(target):
            case _types.Type.LIST:
                idx = to_number(key)
                if not isinstance(idx, int) or not 0 <= idx < len(target):
                    raise _error.EvalError(
                        f"index {key} out of range for list of length {len(target)}"
                    )
                return target[idx]
            case _types.Type.MAP:
                if not isinstance(key, str) or key not in target:
                    raise _error.EvalError(f"key {key!r} does not exist in map")
                return target[key]
        raise _error.EvalError(
            f"cannot index a value of type {_types.type_of(target).value}"
        )


def to_string(value):
    """Convert a primitive value to its template string form."""
    try:
        match value:
            case bool():
                return "true" if value else "false"
            case float() if value.is_integer():
                return str(int(value))
            case int() | float():
                return repr(value)
            case str():
                return value
    except ValueError:
        # Python refuses to convert very long integers to text
        raise _error.EvalError("number is too large to convert to string") from None
    raise _error.EvalError(f"cannot convert {_types.type_of(value).value} to string")


def to_number(value):
    """Convert a value to int or float.

    Strings are accepted when they hold a plain decimal number with an
    optional leading minus sign, such as "-3" or "1.5".
    """
    match value:
        case bool():
            raise _error.EvalError("cannot use a bool as a number")
        case int() | float():
            return value
        case str():
            match_ = _NUMERIC.fullmatch(value)
            if match_ is None:
                raise _error.EvalError(f"cannot parse {value!r} as a number")
            try:
                return float(value) if match_.group(1) else int(value)
            except ValueError:
                raise _error.EvalError(f"cannot parse {value!r} as a number") from None
    raise _error.EvalError(f"cannot use {_types.type_of(value).value} as a number")


def to_bool(value):
    """Convert a value to bool, accepting "true" and "false" strings."""
    if isinstance(value, bool):
        return value
    if value in ("true", "false"):
        return value == "true"
    raise _error.EvalError(f"cannot use {value!r} as a bool")


_COMPARISONS = {
    "<": operator.lt,
    "<=": operator.le,
    ">": operator.gt,
    ">=": operator.ge,
}


def _equal(left, right):
    """Equality without treating bools as numbers."""
    if isinstance(left, bool) != isinstance(right, bool):
        return False
    return left == right


def _arithmetic(op, left, right):
    """Apply a numeric operator. Integer division truncates toward zero."""
    match op:
        case "+":
            return left + right
        case "-":
            return left - right
        case "*":
            return left * right
    if right == 0:
        raise _error.EvalError("divide by zero")
    integers = isinstance(left, int) and isinstance(right, int)
    if op == "/":
        if integers:
            quotient = abs(left) // abs(right)
            return quotient if (left < 0) == (right < 0) else -quotient
        return left / right
    if integers:
        remainder = abs(left) % abs(right)
        return remainder if left >= 0 else -remainder
    return math.fmod(left, right)


def _lookup_var(scope, name):
    variable = scope.lookup_var(name)
    if variable is None:
        raise _error.EvalError(f"unknown variable accessed: {name}")
    return variable


def _lookup_func(scope, name):
    func = scope.lookup_func(name)
    if func is None:
        raise _error.EvalError(f"unknown function called: {name}")
    return func
