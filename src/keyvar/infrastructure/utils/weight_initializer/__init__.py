"""
Weight initialization public API.

Importing this package registers every built-in initializer (constant,
normal, uniform, Kaiming) into the `WeightInitializer` registry and
exposes the `init` bridge used by variable paths.
"""

from ._constants import *
from ._random import *
from ._kaiming import *
from ._base import WeightInitializer
from ._bridge import init

__all__ = [
    WeightInitializer.__name__,
    init.__name__,
]
