"""Value types known to the evaluator."""

__all__ = ["Type", "Unknown", "UNKNOWN", "type_of"]

import enum


class Type(enum.Enum):
    STRING = "string"
    INT = "int"
    FLOAT = "float"
    BOOL = "bool"
    LIST = "list"
    MAP = "map"
    ANY = "any"
    UNKNOWN = "unknown"


class Unknown:
    """Value that is not known until a later evaluation."""

    def __repr__(self):
        return "UNKNOWN"


UNKNOWN = Unknown()


def type_of(value):
    """Determine the type of a runtime value."""
    match value:
        case Unknown():
            return Type.UNKNOWN
        case bool():
            return Type.BOOL
        case int():
            return Type.INT
        case float():
            return Type.FLOAT
        case str():
            return Type.STRING
        case list() | tuple():
            return Type.LIST
        case dict():
            return Type.MAP
    return Type.ANY
