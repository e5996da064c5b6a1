# recase/core/History.py
"""History Module
==============
This module provides the `History` class, which keeps the undo and redo stacks
for a buffer that case commands edit.

Key Features:
-------------
- Tracks a stack of replace actions, allowing multi-level undo and redo.
- Supports compound actions: every action added between
  `begin_compound_action` and `end_compound_action` is undone and redone as a
  single step. A committed edit transaction is recorded this way, so one case
  command over many regions is one undo step.
- Verifies, before restoring, that the buffer still holds the text the action
  produced; a mismatch is logged and the action is skipped rather than
  overwriting unrelated text.

Intended Usage:
---------------
The reference host buffer (`recase.host.MemoryBuffer`) owns one `History`.
The core never calls it directly: undo grouping is a host concern.

Action format::

    {"type": "replace", "start": 4, "original_text": "abc", "new_text": "ABC"}
    {"type": "compound", "actions": [<replace>, <replace>, ...]}
"""

import logging
from typing import TYPE_CHECKING, Any, Optional


if TYPE_CHECKING:
    from recase.host.MemoryBuffer import MemoryBuffer


## ==================== History Class (Undo/Redo) ====================
class History:
    """Manages the undo and redo action history for a buffer.

    Attributes:
        buffer (MemoryBuffer): The buffer this history restores.
        _action_history (list[dict[str, Any]]): Stack of performed actions for undo.
        _undone_actions (list[dict[str, Any]]): Stack of undone actions for redo.
        _compound (list[dict[str, Any]] | None): Actions collected by the
            compound action in progress, or None if there is none.
    """

    def __init__(self, buffer: "MemoryBuffer"):
        self.buffer = buffer
        self._action_history: list[dict[str, Any]] = []
        self._undone_actions: list[dict[str, Any]] = []
        self._compound: Optional[list[dict[str, Any]]] = None

    @property
    def can_undo(self) -> bool:
        return bool(self._action_history)

    @property
    def can_redo(self) -> bool:
        return bool(self._undone_actions)

    def begin_compound_action(self) -> None:
        """Starts a sequence of actions that should be undone/redone together."""
        if self._compound is not None:
            logging.warning("History: Nested compound action; continuing the open one.")
            return
        self._compound = []
        logging.debug("History: Beginning compound action.")

    def end_compound_action(self) -> None:
        """Ends a sequence of actions and records it as one undo step."""
        actions, self._compound = self._compound, None
        if actions is None:
            logging.warning("History: end_compound_action without begin.")
            return
        if not actions:
            logging.debug("History: Ended empty compound action; nothing recorded.")
            return
        self._push({"type": "compound", "actions": actions})
        logging.debug(
            f"History: Ended compound action with {len(actions)} change(s), cleared redo stack."
        )

    def add_action(self, action: dict[str, Any]) -> None:
        """Adds a new action to the history, or to the open compound action."""
        if not isinstance(action, dict) or "type" not in action:
            logging.warning(f"History: Attempted to add invalid action: {action}")
            return

        if self._compound is not None:
            self._compound.append(action)
            return
        self._push(action)

    def _push(self, action: dict[str, Any]) -> None:
        self._action_history.append(action)
        self._undone_actions.clear()
        logging.debug(
            f"History: Action '{action['type']}' added. History size: {len(self._action_history)}"
        )

    def clear(self) -> None:
        """Clears both undo and redo stacks."""
        self._action_history.clear()
        self._undone_actions.clear()
        self._compound = None
        logging.debug("History: Undo/Redo stacks cleared.")

    def undo(self) -> bool:
        """Undoes the last action.

        Returns:
            bool: True if the buffer text changed, False otherwise.
        """
        if not self._action_history:
            logging.debug("History: Nothing to undo.")
            return False

        with self.buffer._state_lock:
            action = self._action_history.pop()
            changed = self._revert(action)
            self._undone_actions.append(action)
        logging.debug(f"History: Undid '{action['type']}' (changed={changed}).")
        return changed

    def redo(self) -> bool:
        """Redoes the last undone action.

        Returns:
            bool: True if the buffer text changed, False otherwise.
        """
        if not self._undone_actions:
            logging.debug("History: Nothing to redo.")
            return False

        with self.buffer._state_lock:
            action = self._undone_actions.pop()
            changed = self._reapply(action)
            self._action_history.append(action)
        logging.debug(f"History: Redid '{action['type']}' (changed={changed}).")
        return changed

    def _revert(self, action: dict[str, Any]) -> bool:
        action_type = action.get("type")
        if action_type == "compound":
            changed = False
            # Restore in reverse order of application.
            for child in reversed(action.get("actions", [])):
                changed = self._revert(child) or changed
            return changed
        if action_type == "replace":
            return self._swap_text(
                action["start"], action["new_text"], action["original_text"]
            )
        logging.warning(f"History: Unknown action type '{action_type}' in undo. Skipped.")
        return False

    def _reapply(self, action: dict[str, Any]) -> bool:
        action_type = action.get("type")
        if action_type == "compound":
            changed = False
            for child in action.get("actions", []):
                changed = self._reapply(child) or changed
            return changed
        if action_type == "replace":
            return self._swap_text(
                action["start"], action["original_text"], action["new_text"]
            )
        logging.warning(f"History: Unknown action type '{action_type}' in redo. Skipped.")
        return False

    def _swap_text(self, start: int, expected: str, replacement: str) -> bool:
        """Replaces `expected` at `start` with `replacement` if it is still there."""
        end = start + len(expected)
        current = self.buffer.text[start:end]
        if end > self.buffer.length() or current != expected:
            logging.warning(
                f"History: Text mismatch at [{start}, {end}). Expected {expected!r}, found {current!r}. Skipped."
            )
            return False
        self.buffer._splice(start, end, replacement)
        return current != replacement
