"""Evaluation context that expressions resolve names against."""

__all__ = ["EvalContext", "FunctionError"]


class FunctionError(Exception):
    """Raised by context functions to report a failed call.

    Args:
        message: (str) Description of the problem
        arg_index: (int | None) Index of the argument at fault, if any
    """

    def __init__(self, message, arg_index=None):
        self.message = message
        self.arg_index = arg_index
        super().__init__(message)


class EvalContext:
    """Variables and functions available to an expression.

    Contexts can be nested with `new_child`. Lookups that miss in a child
    continue in its parent.

    Args:
        variables: (dict | None) Variable values by name
        functions: (dict | None) Callables by name
        parent: (EvalContext | None) Context to fall back to for lookups
    """

    def __init__(self, variables=None, functions=None, parent=None):
        self.variables = dict(variables or {})
        self.functions = dict(functions or {})
        self.parent = parent

    def new_child(self, variables=None, functions=None):
        """Create a nested context that falls back to this one."""
        return EvalContext(variables, functions, self)

    def lookup_variable(self, name):
        """Find a variable value in this context or its ancestors.

        Raises:
            KeyError: when no context defines the name
        """
        ctx = self
        while ctx is not None:
            if name in ctx.variables:
                return ctx.variables[name]
            ctx = ctx.parent
        raise KeyError(name)

    def lookup_function(self, name):
        """Find a function in this context or its ancestors, or None."""
        ctx = self
        while ctx is not None:
            func = ctx.functions.get(name)
            if func is not None:
                return func
            ctx = ctx.parent
        return None

    def __repr__(self):
        names = ", ".join(sorted(self.variables))
        return f"EvalContext({names})"
