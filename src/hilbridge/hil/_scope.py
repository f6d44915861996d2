"""Scopes binding names to variables and functions."""

__all__ = ["Variable", "Function", "BasicScope"]

from dataclasses import dataclass, field

from . import _types


@dataclass
class Variable:
    """A named value in a scope.

    The type is derived from the value when not given.
    """

    value: object
    type: _types.Type | None = None

    def __post_init__(self):
        if self.type is None:
            self.type = _types.type_of(self.value)


@dataclass
class Function:
    """A callable available to templates.

    Attributes:
        callback: Called with the list of evaluated arguments
        arg_types: (list) Expected argument types, used for arity checks
        return_type: (Type) Type of the returned value
        variadic: (bool) Accept any number of extra arguments after arg_types
    """

    callback: object
    arg_types: list = field(default_factory=list)
    return_type: _types.Type = _types.Type.ANY
    variadic: bool = False


class BasicScope:
    """Scope backed by plain dictionaries.

    Args:
        var_map: (dict | None) Variables by name
        func_map: (dict | None) Functions by name
    """

    def __init__(self, var_map=None, func_map=None):
        self.var_map = dict(var_map or {})
        self.func_map = dict(func_map or {})

    def lookup_var(self, name):
        """Return the Variable bound to a name, or None."""
        return self.var_map.get(name)

    def lookup_func(self, name):
        """Return the Function bound to a name, or None."""
        return self.func_map.get(name)

    def __repr__(self):
        return f"BasicScope(vars={sorted(self.var_map)}, funcs={sorted(self.func_map)})"
