# recase/core/CommandExecutor.py
"""CommandExecutor Module
======================
This module runs one case command against a host buffer. It is the only part
of the core that touches the host: it looks up the command, opens an edit
transaction, resolves the target regions, and writes each transformed region
back into the buffer.

Key Features:
-------------
- All-or-Nothing: Every mutation happens inside one edit transaction, acquired
  through the `edit_transaction` context manager. The transaction is committed
  on normal exit and rolled back on every error path, so a failing region
  never leaves earlier regions transformed.
- Minimal Writes: A region is replaced only if the transform actually changed
  its text.
- Borrowed Handles: The buffer, selection and transaction are used for the
  duration of one `run` call and never stored.
- Offset Stability: Transforms preserve length, so earlier replacements never
  shift later regions. A transform that breaks this raises `CaseCommandError`
  instead of corrupting the buffer.

Host contract:
--------------
- ``buffer.length() -> int``
- ``buffer.read_region(start, end) -> str``
- ``buffer.begin_edit() -> EditTransaction``
- ``transaction.replace_region(start, end, text)``
- ``transaction.commit()`` / ``transaction.rollback()``
- ``selection.regions() -> Sequence[Region | tuple[int, int]]``
"""

import enum
import logging
from contextlib import contextmanager
from typing import Any, Iterator, Optional, Protocol, Sequence, Union

from recase.core.CaseTransform import CaseCommand
from recase.core.Errors import (
    BufferNotEditableError,
    CaseCommandError,
    InvalidRegionError,
)
from recase.core.RegionResolver import (
    OverlapStrategy,
    Region,
    get_overlap_strategy,
    resolve_regions,
)
from recase.utils.logging_config import REGION_LOGGER
from recase.utils.utils import DEFAULT_CONFIG, deep_merge


logger = logging.getLogger("recase")


## ==================== Host Contract ====================
class EditTransaction(Protocol):
    def replace_region(self, start: int, end: int, text: str) -> None: ...

    def commit(self) -> None: ...

    def rollback(self) -> None: ...


class BufferHandle(Protocol):
    def length(self) -> int: ...

    def read_region(self, start: int, end: int) -> str: ...

    def begin_edit(self) -> Optional[EditTransaction]: ...


class SelectionSet(Protocol):
    def regions(self) -> Sequence[Union[Region, tuple[int, int]]]: ...


class CommandState(enum.Enum):
    IDLE = "idle"
    VALIDATING = "validating"
    APPLYING = "applying"
    COMMITTED = "committed"
    ABORTED = "aborted"


@contextmanager
def edit_transaction(
    buffer: BufferHandle, command: Optional[str] = None
) -> Iterator[EditTransaction]:
    """Opens an edit transaction and guarantees its release.

    The transaction is committed when the block exits normally and rolled back
    when it raises. If the host's `commit` itself raises, one rollback is
    attempted before the commit error propagates; a host whose rollback cannot
    run after a failed commit must leave the buffer consistent on its own.

    A host refusal, signalled by `BufferNotEditableError`, `PermissionError`
    or a ``None`` transaction, is raised as `BufferNotEditableError` before
    the block runs.

    Raises:
        BufferNotEditableError: If the host refuses to open the transaction.
    """
    try:
        transaction = buffer.begin_edit()
    except BufferNotEditableError:
        raise
    except PermissionError as e:
        raise BufferNotEditableError(command, reason=str(e)) from e
    if transaction is None:
        raise BufferNotEditableError(command, reason="host returned no transaction")

    try:
        yield transaction
    except BaseException:
        try:
            transaction.rollback()
            logger.debug(f"Transaction for {command!r} rolled back.")
        except Exception:
            logging.exception(f"Rollback failed for command {command!r}")
        raise
    else:
        try:
            transaction.commit()
        except Exception:
            logger.error(f"Commit failed for command {command!r}; rolling back.")
            try:
                transaction.rollback()
            except Exception:
                logging.exception(f"Rollback after failed commit of {command!r} failed")
            raise
        logger.debug(f"Transaction for {command!r} committed.")


## ==================== CaseCommander Class ====================
class CaseCommander:
    """Runs case commands against host buffers.

    A `CaseCommander` holds only its configuration and the state of the last
    invocation; it keeps no reference to any buffer or selection between
    calls.

    Attributes:
        config: The effective configuration (embedded defaults merged with the
            supplied overrides).
        overlap_strategy: How overlapping or unsorted selections are treated.
        state: The `CommandState` reached by the most recent `run` call.
    """

    def __init__(self, config: Optional[dict[str, Any]] = None) -> None:
        self.config = deep_merge(DEFAULT_CONFIG, config or {})
        self.overlap_strategy: OverlapStrategy = get_overlap_strategy(self.config)
        self.state = CommandState.IDLE

    def run(
        self,
        name: str,
        buffer: BufferHandle,
        selection: Optional[Union[SelectionSet, Sequence[Any]]] = None,
    ) -> bool:
        """Applies the case command `name` to the selected regions of `buffer`.

        An empty or missing selection targets the whole buffer. Regions are
        processed in resolver order inside a single edit transaction.

        Args:
            name: One of ``upper_case``, ``lower_case``, ``swap_case``,
                ``title_case``.
            buffer: The host buffer handle, borrowed for this call only.
            selection: The host selection, or None.

        Returns:
            True if any region's text changed, False if the buffer content is
            unchanged.

        Raises:
            UnknownCommandError: `name` is not recognised. No transaction is
                opened.
            BufferNotEditableError: The host refused the edit transaction.
            InvalidRegionError: A region is out of bounds. Every mutation of
                this call is rolled back.
        """
        self.state = CommandState.VALIDATING
        try:
            command = CaseCommand.from_name(name)
            with edit_transaction(buffer, name) as transaction:
                regions = resolve_regions(
                    selection, buffer.length(), self.overlap_strategy
                )
                logger.debug(f"Running {name!r} over {len(regions)} region(s).")
                self.state = CommandState.APPLYING
                changed = 0
                for region in regions:
                    if self._apply_region(command, buffer, transaction, region):
                        changed += 1
        except CaseCommandError as e:
            self.state = CommandState.ABORTED
            logger.warning(f"Case command {name!r} aborted: {e}")
            raise
        except Exception:
            self.state = CommandState.ABORTED
            logger.warning(f"Case command {name!r} aborted by host error.", exc_info=True)
            raise

        self.state = CommandState.COMMITTED
        logger.debug(f"Case command {name!r} committed; {changed} region(s) changed.")
        return changed > 0

    def _apply_region(
        self,
        command: CaseCommand,
        buffer: BufferHandle,
        transaction: EditTransaction,
        region: Region,
    ) -> bool:
        """Transforms one region in place. Returns True if its text changed."""
        length = buffer.length()
        if not region.is_valid_for(length):
            raise InvalidRegionError(region, length, command=command.value)
        if region.empty:
            return False

        original = buffer.read_region(region.start, region.end)
        transformed = command.apply(original)
        if len(transformed) != len(original):
            raise CaseCommandError(
                f"{command.value} changed the length of [{region.start}, {region.end})",
                command=command.value,
            )
        if transformed == original:
            REGION_LOGGER.debug(f"{command.value} [{region.start}, {region.end}): unchanged")
            return False

        transaction.replace_region(region.start, region.end, transformed)
        REGION_LOGGER.debug(
            f"{command.value} [{region.start}, {region.end}): {original!r} -> {transformed!r}"
        )
        return True


def run_case_command(
    name: str,
    buffer: BufferHandle,
    selection: Optional[Union[SelectionSet, Sequence[Any]]] = None,
    config: Optional[dict[str, Any]] = None,
) -> bool:
    """Runs one case command with a fresh `CaseCommander`.

    This is the entry point for host dispatch layers. See `CaseCommander.run`
    for arguments, return value and errors.
    """
    return CaseCommander(config).run(name, buffer, selection)
