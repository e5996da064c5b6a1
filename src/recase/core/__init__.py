# src/recase/core/__init__.py
"""Public facade for recase.core: re-export main classes from CamelCase modules.

Keeps Java-like file names (CaseTransform.py, CommandExecutor.py, ...),
but provides flat imports for convenience and stability.
"""

# Re-export classes/symbols from CamelCase modules
from .CaseTransform import CaseCommand, command_names, lower, swap, title, upper  # noqa: F401
from .CommandExecutor import (  # noqa: F401
    CaseCommander,
    CommandState,
    edit_transaction,
    run_case_command,
)
from .Errors import (  # noqa: F401
    BufferNotEditableError,
    CaseCommandError,
    InvalidRegionError,
    UnknownCommandError,
)
from .History import History  # noqa: F401
from .RegionResolver import OverlapStrategy, Region, resolve_regions  # noqa: F401


__all__ = [
    "CaseCommand",
    "CaseCommander",
    "CommandState",
    "History",
    "OverlapStrategy",
    "Region",
    "BufferNotEditableError",
    "CaseCommandError",
    "InvalidRegionError",
    "UnknownCommandError",
    "command_names",
    "edit_transaction",
    "lower",
    "resolve_regions",
    "run_case_command",
    "swap",
    "title",
    "upper",
]
