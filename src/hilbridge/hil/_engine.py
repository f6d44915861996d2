"""Engine for evaluating template nodes.

Nodes do their own work in `evaluate` generators. The engine only runs
those generators: each one yields `Compute` requests for child nodes, gets
the child's value sent back, and finally returns its own value.
"""

__all__ = ["Engine", "Compute", "EvalConfig", "EvaluationResult", "evaluate"]

from dataclasses import dataclass

from . import _scope, _types


class Compute:
    """Request to evaluate a child node.

    This is yielded from `Node.evaluate` when a child's value is needed.

    Args:
        node: (Node) Child node to evaluate
    """

    __slots__ = ("node",)

    def __init__(self, node):
        self.node = node

    def __repr__(self):
        return f"Compute({self.node!r})"


@dataclass
class EvalConfig:
    """Settings for one evaluation.

    Attributes:
        global_scope: (BasicScope | None) Variables and functions to use
    """

    global_scope: _scope.BasicScope | None = None


@dataclass
class EvaluationResult:
    """Value produced by evaluation along with its type."""

    type: _types.Type
    value: object


class Engine:
    """Evaluation engine for node generators.

    Args:
        scope: (BasicScope) Scope visible to every evaluated node
    """

    def __init__(self, scope):
        self.scope = scope

    def run(self, node):
        """Run a node and return its value.

        Evaluation errors raised by any node propagate out of this call.

        Args:
            node: (Node) Root node to evaluate

        Returns:
            Final value of the node
        """
        result = None
        newest = _Frame(node, None, self)
        current = newest

        while current:
            try:
                if current is newest:
                    request = next(current.gen)
                else:
                    request = current.gen.send(result)
                newest = _Frame(request.node, current, self)
                current = newest
            except StopIteration as e:
                result = e.value
                current = current.previous

        return result


class _Frame:
    """Execution frame for one node's generator."""

    __slots__ = ("node", "previous", "engine", "gen")

    def __init__(self, node, previous, engine):
        self.node = node
        self.previous = previous
        self.engine = engine
        self.gen = node.evaluate(self)

    @property
    def scope(self):
        return self.engine.scope

    def __repr__(self):
        return f"_Frame({self.node!r})"


def evaluate(node, config=None):
    """Evaluate a parsed template.

    Args:
        node: (Node) Root of the parsed template
        config: (EvalConfig | None) Scope to evaluate in

    Returns:
        (EvaluationResult) The value and its type

    Raises:
        EvalError: when evaluation fails
    """
    config = config or EvalConfig()
    scope = config.global_scope
    if scope is None:
        scope = _scope.BasicScope()
    value = Engine(scope).run(node)
    return EvaluationResult(_types.type_of(value), value)
