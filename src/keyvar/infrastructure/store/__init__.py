from ._variable import Variable
from ._path import Path
from ._var_store import VarStore

__all__ = [
    Variable.__name__,
    Path.__name__,
    VarStore.__name__,
]
