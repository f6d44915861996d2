"""Values produced by expression evaluation.

Known values are plain Python data: ``str``, ``int``, ``float``, ``bool``,
``None`` for null, ``list``/``tuple`` for sequences and ``dict`` for maps.
A value that cannot be determined yet is the ``DYNAMIC`` placeholder.
"""

__all__ = ["Unknown", "DYNAMIC", "is_known", "friendly_type_name"]


class Unknown:
    """Placeholder for a value of unknown type that is not yet known."""

    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self):
        return "DYNAMIC"


DYNAMIC = Unknown()


def is_known(value):
    """Check whether a value, and everything nested inside it, is known."""
    if value is DYNAMIC:
        return False
    if isinstance(value, dict):
        return all(is_known(item) for item in value.values())
    if isinstance(value, (list, tuple)):
        return all(is_known(item) for item in value)
    return True


def friendly_type_name(value):
    """Describe the type of a value for use in diagnostic messages."""
    match value:
        case None:
            return "null"
        case Unknown():
            return "dynamic value"
        case bool():
            return "bool"
        case int() | float():
            return "number"
        case str():
            return "string"
        case dict():
            return "map"
        case list() | tuple():
            return "list"
    return type(value).__name__
