# src/recase/host/__init__.py
"""Public facade for recase.host, the in-memory reference host."""

from .MemoryBuffer import MemoryBuffer, MemoryTransaction, Selection  # noqa: F401


__all__ = [
    "MemoryBuffer",
    "MemoryTransaction",
    "Selection",
]
