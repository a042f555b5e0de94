# wee/core/History.py
"""History Module for the wee editor
==================================
This module provides the `History` class, the editor's undo/redo store. It
keeps a linear list of full-buffer snapshots with a movable "current" index.

Key Features:
-------------
- Snapshots deep-copy the rows, edit cursor, scroll offsets and selection, so
  restoring one needs no knowledge of the edit that followed it.
- Recording while "current" is not the newest snapshot discards the redo
  branch.
- Rapid edits are coalesced: a record request within the debounce window of
  the previous one is skipped.
- The list is capped at `max_snapshots`; the oldest snapshot is evicted first.
- Undo checkpoints unrecorded live changes before stepping back, so redo can
  return to the newest state.

Intended Usage:
---------------
The controller calls `record(description)` right before each mutating command
and binds `undo()`/`redo()` to keys. `clear()` is called when a different
document is loaded.

Classes:
--------
- Snapshot: Immutable copy of the editor state plus a label and timestamp.
- History: Manages the snapshot list and performs undo/redo.
"""
import logging
import time
from typing import Callable, Optional

from wee.core.State import EditorState, Mode


class Snapshot:
    """Class Snapshot
    ================
    Deep copy of the editor state at one point in time.

    Attributes:
        rows (tuple): Copies of the buffer rows.
        cursor (tuple[int, int]): Edit cursor `(cx, cy)`.
        offsets (tuple[int, int]): Scroll offsets `(rowoff, coloff)`.
        selection (tuple): `(anchor, cursor, active)` of the selection.
        description (str): Label shown on undo/redo.
        timestamp (float): When the snapshot was taken.
    """

    __slots__ = ("rows", "cursor", "offsets", "selection", "description", "timestamp")

    def __init__(self, state: EditorState, description: str, timestamp: float):
        self.rows = tuple(row.copy() for row in state.buffer.rows)
        self.cursor = (state.cx, state.cy)
        self.offsets = (state.rowoff, state.coloff)
        sel = state.selection
        self.selection = (sel.anchor, sel.cursor, sel.active)
        self.description = description
        self.timestamp = timestamp

    def texts(self) -> list[str]:
        return [row.text for row in self.rows]

    def restore(self, state: EditorState) -> None:
        """Replaces the live state with this snapshot's contents."""
        state.buffer.restore_rows(list(self.rows))
        state.cx, state.cy = self.cursor
        state.rowoff, state.coloff = self.offsets
        sel = state.selection
        sel.anchor, sel.cursor, sel.active = self.selection
        state.mode = Mode.SELECTING if sel.active else Mode.NORMAL
        state.clamp_cursor()

    def __repr__(self) -> str:
        return f"Snapshot({self.description!r}, rows={len(self.rows)})"


## ==================== History Class (Undo/Redo) ====================
class History:
    """Class History
    ===============
    Snapshot-based undo/redo for one editor state.

    Attributes:
        state (EditorState): The live state snapshots are taken from and restored into.
        max_snapshots (int): Retained history depth.
        debounce_seconds (float): Minimum spacing between recorded snapshots.
        clock (Callable[[], float]): Wall clock, injectable for tests.
        _snapshots (list[Snapshot]): Oldest first.
        _current_index (int): Index of the snapshot matching the live buffer, -1 when empty.
        _last_record_time (float): Time of the last recorded snapshot.

    Methods:
        record(description) -> bool:
            Takes a snapshot unless debounced; truncates redo history; evicts the oldest.
        undo() -> Optional[Snapshot]:
            Steps back one snapshot and restores it.
        redo() -> Optional[Snapshot]:
            Steps forward one snapshot and restores it.
        clear():
            Drops every snapshot.
    """

    def __init__(
        self,
        state: EditorState,
        max_snapshots: int = 50,
        debounce_seconds: float = 1.0,
        clock: Callable[[], float] = time.time,
    ):
        self.state = state
        self.max_snapshots = max(1, max_snapshots)
        self.debounce_seconds = debounce_seconds
        self.clock = clock
        self._snapshots: list[Snapshot] = []
        self._current_index = -1
        self._last_record_time = 0.0

    def __len__(self) -> int:
        return len(self._snapshots)

    @property
    def current(self) -> Optional[Snapshot]:
        if 0 <= self._current_index < len(self._snapshots):
            return self._snapshots[self._current_index]
        return None

    def can_undo(self) -> bool:
        return self.current is not None and (self._current_index > 0 or self._live_differs())

    def can_redo(self) -> bool:
        return 0 <= self._current_index < len(self._snapshots) - 1

    def _live_differs(self) -> bool:
        current = self.current
        return current is not None and current.texts() != self.state.buffer.lines()

    def _append(self, snapshot: Snapshot) -> None:
        """Links `snapshot` after current, dropping the redo branch and evicting the oldest."""
        del self._snapshots[self._current_index + 1:]
        self._snapshots.append(snapshot)
        self._current_index = len(self._snapshots) - 1
        while len(self._snapshots) > self.max_snapshots:
            self._snapshots.pop(0)
            self._current_index -= 1

    def record(self, description: str) -> bool:
        """Records the live state before a mutation.

        Returns:
            bool: True if a snapshot was stored, False if debounced.
        """
        now = self.clock()
        if self.current is not None and now - self._last_record_time < self.debounce_seconds:
            logging.debug(f"History: '{description}' coalesced into '{self.current.description}'")
            return False
        self._append(Snapshot(self.state, description, now))
        self._last_record_time = now
        logging.debug(
            f"History: recorded '{description}'. Snapshots: {len(self._snapshots)}, current: {self._current_index}"
        )
        return True

    def clear(self) -> None:
        self._snapshots.clear()
        self._current_index = -1
        self._last_record_time = 0.0
        logging.debug("History: snapshots cleared.")

    def undo(self) -> Optional[Snapshot]:
        """Restores the snapshot before current.

        Returns:
            Optional[Snapshot]: The snapshot applied, or None at the history boundary.
        """
        if self.current is None:
            self.state.set_status("Nothing to undo")
            return None
        if self._live_differs():
            # Keep the newest state reachable through redo.
            self._append(Snapshot(self.state, "Latest changes", self.clock()))
        if self._current_index <= 0:
            self.state.set_status("Nothing to undo")
            return None

        self._current_index -= 1
        snapshot = self._snapshots[self._current_index]
        snapshot.restore(self.state)
        self._last_record_time = 0.0
        self.state.set_status(f"Undo: {snapshot.description}")
        logging.debug(f"History: undo '{snapshot.description}', current: {self._current_index}")
        return snapshot

    def redo(self) -> Optional[Snapshot]:
        """Restores the snapshot after current."""
        if not self.can_redo():
            self.state.set_status("Nothing to redo")
            return None
        # A snapshot is labelled with the edit that followed it.
        redone = self._snapshots[self._current_index].description
        self._current_index += 1
        snapshot = self._snapshots[self._current_index]
        snapshot.restore(self.state)
        self._last_record_time = 0.0
        self.state.set_status(f"Redo: {redone}")
        logging.debug(f"History: redo '{redone}', current: {self._current_index}")
        return snapshot
