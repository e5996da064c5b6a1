# recase/core/Errors.py
"""Error kinds raised by the case command layer.

All of them derive from `CaseCommandError`, so a host dispatch layer can catch
the base class and report `type(err).__name__` or `str(err)` to the user.
Nothing in the core retries: case transforms are deterministic, and running
the same command on the same input fails the same way.
"""

from typing import TYPE_CHECKING, Any, Optional, Union


if TYPE_CHECKING:
    from recase.core.RegionResolver import Region


class CaseCommandError(Exception):
    """Base class for every failure of a case command invocation."""

    def __init__(self, message: str, command: Optional[str] = None) -> None:
        super().__init__(message)
        self.command = command


class UnknownCommandError(CaseCommandError):
    """The command name is not one of the recognised case commands."""

    def __init__(self, command: str) -> None:
        super().__init__(f"Unknown case command: {command!r}", command=command)


class BufferNotEditableError(CaseCommandError):
    """The host refused to open an edit transaction on the buffer."""

    def __init__(self, command: Optional[str] = None, reason: str = "") -> None:
        message = "Buffer is not editable"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message, command=command)
        self.reason = reason


class InvalidRegionError(CaseCommandError):
    """A target region violates ``0 <= start <= end <= length``, or its bounds
    are not integers. In the latter case `region` is the value as the host
    supplied it."""

    def __init__(
        self, region: Union["Region", Any], length: int, command: Optional[str] = None
    ) -> None:
        if hasattr(region, "start") and hasattr(region, "end"):
            bounds = f"[{region.start}, {region.end})"
        else:
            bounds = repr(region)
        super().__init__(
            f"Invalid region {bounds} for buffer of length {length}",
            command=command,
        )
        self.region = region
        self.length = length
