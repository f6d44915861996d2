"""Structured configuration expression protocol.

Source positions and ranges, diagnostics, absolute traversals and the
evaluation context that expressions are evaluated against.
"""

from ._pos import *
from ._scan import *
from ._diagnostic import *
from ._value import *
from ._context import *
from ._traversal import *
from ._expression import *
