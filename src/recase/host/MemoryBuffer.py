# recase/host/MemoryBuffer.py
"""MemoryBuffer Module
===================
An in-memory implementation of the host side of the case command contract.

Editors that embed recase provide their own buffer, selection and
transaction objects. This module provides plain ones for everything else:
tests, scripts, and embedders without a text model of their own.

Classes:
--------
- `MemoryBuffer`: Holds the text, hands out edit transactions and owns the
  undo `History`.
- `MemoryTransaction`: Applies replacements immediately and remembers the
  replaced text, so `rollback` can restore it and `commit` can record the
  whole transaction as one undo step.
- `Selection`: An ordered list of regions.

Offsets are Python `str` indices, i.e. codepoints.
"""

import logging
import threading
from typing import Any, Iterator, Optional, Sequence, Union

from recase.core.History import History
from recase.core.RegionResolver import Region


## ==================== Selection Class ====================
class Selection:
    """The user's current selection: an ordered list of regions."""

    def __init__(self, regions: Sequence[Union[Region, Sequence[int]]] = ()) -> None:
        self._regions: list[Region] = [Region.coerce(r) for r in regions]

    def regions(self) -> tuple[Region, ...]:
        return tuple(self._regions)

    def add(self, region: Union[Region, Sequence[int]]) -> None:
        self._regions.append(Region.coerce(region))

    def clear(self) -> None:
        self._regions.clear()

    def __len__(self) -> int:
        return len(self._regions)

    def __iter__(self) -> Iterator[Region]:
        return iter(self._regions)

    def __repr__(self) -> str:
        spans = ", ".join(f"[{r.start}, {r.end})" for r in self._regions)
        return f"Selection({spans})"


## ==================== MemoryBuffer Class ====================
class MemoryBuffer:
    """A text buffer kept in memory.

    Only one edit transaction may be open at a time. The open transaction
    holds the buffer's state lock, and every read takes the same lock, so
    other threads never see a half-applied transaction: they wait until it
    is committed or rolled back.

    Attributes:
        read_only (bool): If True, `begin_edit` refuses with `PermissionError`.
        modified (bool): Set once a transaction with changes is committed.
        history (History): Undo/redo stacks for committed transactions.
    """

    def __init__(
        self,
        text: str = "",
        read_only: bool = False,
        history: Optional[History] = None,
    ) -> None:
        self._text = text
        self.read_only = read_only
        self.modified = False
        self._state_lock = threading.RLock()
        self._active: Optional["MemoryTransaction"] = None
        self.history = history if history is not None else History(self)
        if history is not None:
            history.buffer = self

    @property
    def text(self) -> str:
        with self._state_lock:
            return self._text

    def length(self) -> int:
        with self._state_lock:
            return len(self._text)

    def read_region(self, start: int, end: int) -> str:
        """Returns the text of ``[start, end)``.

        Raises:
            IndexError: If the bounds are outside the buffer.
        """
        with self._state_lock:
            if not 0 <= start <= end <= len(self._text):
                raise IndexError(
                    f"read_region: [{start}, {end}) out of bounds for length {len(self._text)}"
                )
            return self._text[start:end]

    def begin_edit(self) -> "MemoryTransaction":
        """Opens an edit transaction.

        Raises:
            PermissionError: If the buffer is read-only or a transaction is
                already open on this thread.
        """
        if self.read_only:
            raise PermissionError("buffer is read-only")
        self._state_lock.acquire()
        if self._active is not None:
            self._state_lock.release()
            raise PermissionError("an edit transaction is already open")
        self._active = MemoryTransaction(self)
        logging.debug("MemoryBuffer: edit transaction opened.")
        return self._active

    def undo(self) -> bool:
        return self.history.undo()

    def redo(self) -> bool:
        return self.history.redo()

    def _splice(self, start: int, end: int, text: str) -> None:
        with self._state_lock:
            self._text = self._text[:start] + text + self._text[end:]

    def _release(self, transaction: "MemoryTransaction") -> None:
        if self._active is transaction:
            self._active = None
            self._state_lock.release()

    def __repr__(self) -> str:
        return f"MemoryBuffer({self._text!r})"


## ==================== MemoryTransaction Class ====================
class MemoryTransaction:
    """One batch of replacements on a `MemoryBuffer`.

    Replacements are applied to the buffer as soon as they are made, but other
    threads cannot read it until the transaction is released. The
    transaction keeps the original text of each so that `rollback` restores
    the buffer exactly. Both `commit` and `rollback` release the transaction;
    any further use raises `RuntimeError`.
    """

    def __init__(self, buffer: MemoryBuffer) -> None:
        self.buffer = buffer
        self._changes: list[dict[str, Any]] = []
        self._released = False

    @property
    def released(self) -> bool:
        return self._released

    @property
    def changes(self) -> list[dict[str, Any]]:
        return list(self._changes)

    def _check_open(self) -> None:
        if self._released:
            raise RuntimeError("edit transaction already released")

    def replace_region(self, start: int, end: int, text: str) -> None:
        """Replaces ``[start, end)`` with `text`, which must be equally long.

        Raises:
            RuntimeError: If the transaction was already released.
            IndexError: If the bounds are outside the buffer.
            ValueError: If `text` has a different length than the region.
        """
        self._check_open()
        original = self.buffer.read_region(start, end)
        if len(text) != end - start:
            raise ValueError(
                f"replace_region: replacement of length {len(text)} for region of length {end - start}"
            )
        self.buffer._splice(start, end, text)
        self._changes.append(
            {"type": "replace", "start": start, "original_text": original, "new_text": text}
        )

    def commit(self) -> None:
        """Makes the changes final and records them as one undo step."""
        self._check_open()
        try:
            if self._changes:
                history = self.buffer.history
                history.begin_compound_action()
                for change in self._changes:
                    history.add_action(change)
                history.end_compound_action()
                self.buffer.modified = True
            logging.debug(f"MemoryTransaction: committed {len(self._changes)} change(s).")
        finally:
            self._released = True
            self.buffer._release(self)

    def rollback(self) -> None:
        """Restores every replaced region, newest first."""
        self._check_open()
        try:
            for change in reversed(self._changes):
                start = change["start"]
                self.buffer._splice(
                    start, start + len(change["new_text"]), change["original_text"]
                )
            logging.debug(f"MemoryTransaction: rolled back {len(self._changes)} change(s).")
            self._changes.clear()
        finally:
            self._released = True
            self.buffer._release(self)
