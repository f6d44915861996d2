"""String interpolation template language.

Templates are parsed into node trees with `parse` and evaluated against a
scope of variables and functions with `evaluate`.
"""

from ._error import *
from ._pos import *
from ._types import *
from ._scope import *
from ._engine import *
from ._ast import *
from ._parse import *
