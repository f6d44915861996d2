"""Interpolation templates as configuration expressions.

Parses templates written in the older string interpolation language and
presents them as configuration expressions: they evaluate against an
`hcl.EvalContext`, report source ranges in configuration coordinates and
describe problems as `hcl.Diagnostics`.
"""

__version__ = "0.1.0"

from . import hcl
from . import hil

from ._position import *
from ._errors import *
from ._convert import *
from ._variables import *
from ._rewrite import *
from ._expression import *
