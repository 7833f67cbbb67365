"""Two-way diffing: operations, engines, the ``Diff`` facade and mapped diffs.

Modules:

- ``ops``      -- ``Copy``, ``Add``, ``Delete``, ``Change`` and ``ScriptBuilder``.
- ``engines``  -- ``NativeEngine``, ``RapidfuzzEngine`` and ``create_engine()``.
- ``patch``    -- ``StringEngine``: unified/context patch text to edit script.
- ``facade``   -- ``Diff``: counts, reverse and reconstruction.
- ``mapped``   -- ``MappedDiff``: compare a projection, emit real lines.
"""

from .engines import (
    AUTO_PRIORITY,
    DiffEngine,
    NativeEngine,
    RapidfuzzEngine,
    available_engines,
    create_engine,
    engine_names,
)
from .facade import Diff
from .mapped import MappedDiff
from .ops import (
    Add,
    Change,
    Copy,
    Delete,
    Operation,
    ScriptBuilder,
    coalesce,
    reverse_script,
)
from .patch import StringEngine

__all__ = [
    "AUTO_PRIORITY",
    "Add",
    "Change",
    "Copy",
    "Delete",
    "Diff",
    "DiffEngine",
    "MappedDiff",
    "NativeEngine",
    "Operation",
    "RapidfuzzEngine",
    "ScriptBuilder",
    "StringEngine",
    "available_engines",
    "coalesce",
    "create_engine",
    "engine_names",
    "reverse_script",
]
