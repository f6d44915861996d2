"""Convert values between the template and configuration value models.

Both models use plain Python data for known values and differ only in how
they spell an unknown value.
"""

__all__ = ["to_hil_value", "to_hcl_value"]

from . import hcl, hil


def to_hil_value(value):
    """Convert a configuration value for use during template evaluation."""
    match value:
        case hcl.Unknown():
            return hil.UNKNOWN
        case dict():
            return {key: to_hil_value(item) for key, item in value.items()}
        case list() | tuple():
            return [to_hil_value(item) for item in value]
    return value


def to_hcl_value(value):
    """Convert a template evaluation result into a configuration value."""
    match value:
        case hil.Unknown():
            return hcl.DYNAMIC
        case dict():
            return {key: to_hcl_value(item) for key, item in value.items()}
        case list() | tuple():
            return [to_hcl_value(item) for item in value]
    return value
