#!/usr/bin/env python
# -*- coding: utf-8 -*-
"""
Journal for managing command history
"""

from typing import Callable, List, Optional, Tuple
import logging
import sys
import threading
import time

from .command import Command
from .errors import AllocationFailure, JournalDisposed

logger = logging.getLogger(__name__)

DEFAULT_MAX_DEPTH = 100
DEFAULT_UPDATE_WINDOW_MS = 250


class Journal:
    """
    Bounded, linear undo/redo history of commands

    Commands handed to the journal are owned by it: they are destroyed when
    evicted, truncated, cleared or when the journal is disposed. All
    operations are serialized by a single lock. Command callbacks run while
    that lock is held and must not call back into the same journal.
    """

    def __init__(self, max_depth: int = DEFAULT_MAX_DEPTH,
                 update_window_ms: float = DEFAULT_UPDATE_WINDOW_MS,
                 clock: Callable[[], float] = time.monotonic,
                 on_change: Optional[Callable[[bool, bool], None]] = None):
        """
        Initialize Journal

        Args:
            max_depth: Maximum number of commands to keep in history
            update_window_ms: Window within which same-target edits are merged
            clock: Monotonic time source in seconds
            on_change: Called with (can_undo, can_redo) after every change

        Raises:
            ValueError: If max_depth is smaller than one
            AllocationFailure: If storage for max_depth entries cannot be reserved
        """
        if max_depth < 1:
            raise ValueError(f"max_depth must be at least 1, got {max_depth}")
        if max_depth > sys.maxsize:
            raise AllocationFailure(f"Cannot reserve {max_depth} journal entries")

        self._entries: Optional[List[Command]] = []
        self._max_depth = max_depth
        self._head: Optional[int] = None
        self._clock = clock
        self._last_append_time: Optional[float] = None
        self._lock = threading.Lock()
        self.update_window_ms = update_window_ms
        self.on_change = on_change

    @property
    def update_window_ms(self) -> float:
        """Coalescing window in milliseconds"""
        return self._update_window_ms

    @update_window_ms.setter
    def update_window_ms(self, value: float):
        if value < 0:
            raise ValueError(f"update_window_ms must not be negative, got {value}")
        self._update_window_ms = value

    @property
    def max_depth(self) -> int:
        return self._max_depth

    @property
    def head(self) -> Optional[int]:
        """Index of the most recently applied command, None before the first"""
        with self._lock:
            self._check_alive()
            return self._head

    @property
    def entries(self) -> Tuple[Command, ...]:
        """Snapshot of the history, oldest first"""
        with self._lock:
            self._check_alive()
            return tuple(self._entries)

    @property
    def last_append_time(self) -> Optional[float]:
        with self._lock:
            self._check_alive()
            return self._last_append_time

    def add(self, command: Command) -> None:
        """
        Add an already applied command to the history

        Anything after the head is discarded and the oldest entry is evicted
        when the journal is full. The command becomes the head.

        Args:
            command: Command to add, ownership passes to the journal

        Raises:
            AllocationFailure: If the history could not grow
        """
        with self._lock:
            self._check_alive()
            self._add(command)
        self._notify()

    def update_or_add(self, command: Command) -> bool:
        """
        Merge a command into the head if possible, add it otherwise

        The command is merged when it targets the same destination as the
        head command and arrives within update_window_ms of the previous
        append or merge. A merged command is destroyed, and entries after the
        head are discarded as with add().

        Args:
            command: Command to add or merge, ownership passes to the journal

        Returns:
            bool: True if merged into the head, False if appended
        """
        with self._lock:
            self._check_alive()
            merged = self._update_or_add(command)
        self._notify()
        return merged

    def execute(self, command: Command, merge: bool = False) -> bool:
        """
        Apply a command and record it in one step

        Args:
            command: Command to apply, ownership passes to the journal
            merge: Use the coalescing add instead of a plain add

        Returns:
            bool: True if merged into the head, False if appended
        """
        with self._lock:
            self._check_alive()
            self._call(command.do, command, "executing")
            if merge:
                merged = self._update_or_add(command)
            else:
                self._add(command)
                merged = False
        self._notify()
        return merged

    def undo(self) -> bool:
        """
        Undo the head command

        Returns:
            bool: True if a command was undone, False if there was nothing to undo
        """
        with self._lock:
            self._check_alive()
            if not self._entries or self._head is None:
                return False

            command = self._entries[self._head]
            self._call(command.undo, command, "undoing")
            self._head = self._head - 1 if self._head > 0 else None
            logger.debug(f"Undid command: {command.description}")
        self._notify()
        return True

    def redo(self) -> bool:
        """
        Re-apply the command after the head

        Returns:
            bool: True if a command was redone, False if already at the newest entry
        """
        with self._lock:
            self._check_alive()
            if not self._entries:
                return False

            next_index = 0 if self._head is None else self._head + 1
            if next_index >= len(self._entries):
                return False

            command = self._entries[next_index]
            self._call(command.do, command, "redoing")
            self._head = next_index
            logger.debug(f"Redid command: {command.description}")
        self._notify()
        return True

    def can_undo(self) -> bool:
        """
        Check if undo is possible

        Returns:
            bool: True if can undo, False otherwise
        """
        with self._lock:
            self._check_alive()
            return self._head is not None

    def can_redo(self) -> bool:
        """
        Check if redo is possible

        Returns:
            bool: True if can redo, False otherwise
        """
        with self._lock:
            self._check_alive()
            return self._can_redo()

    def head_command(self) -> Optional[Command]:
        """Get the most recently applied command, if any"""
        with self._lock:
            self._check_alive()
            if self._head is None:
                return None
            return self._entries[self._head]

    def truncate(self, index: Optional[int] = None) -> None:
        """
        Discard every entry after index and make index the head

        Args:
            index: Last entry to keep; None clears the journal. Indices
                outside the history are ignored.
        """
        with self._lock:
            self._check_alive()
            if index is None:
                self._clear()
            elif 0 <= index < len(self._entries):
                self._drop_after(index)
                self._head = index
                logger.debug(f"Truncated journal after entry {index}")
            else:
                logger.debug(f"Ignoring truncate to out-of-range entry {index}")
                return
        self._notify()

    def clear(self) -> None:
        """Clear all history"""
        with self._lock:
            self._check_alive()
            self._clear()
        self._notify()

    def dispose(self) -> None:
        """Clear all history and release the journal's storage"""
        with self._lock:
            if self._entries is None:
                return
            self._clear()
            self._entries = None
            logger.debug("Disposed journal")

    @property
    def disposed(self) -> bool:
        return self._entries is None

    def get_history_info(self) -> List[str]:
        """
        Get information about the history for debugging

        Returns:
            List[str]: List of command descriptions with the head marked
        """
        with self._lock:
            self._check_alive()
            info = []
            for i, cmd in enumerate(self._entries):
                marker = " <-- head" if i == self._head else ""
                info.append(f"{i}: {cmd.description}{marker}")
            return info

    def _add(self, command: Command):
        keep = 0 if self._head is None else self._head + 1
        try:
            self._entries.append(command)
        except MemoryError as e:
            raise AllocationFailure(f"Cannot grow journal: {e}") from e

        command.timestamp = time.time()
        self._last_append_time = self._clock()

        # Drop the abandoned redo branch between the head and the new command
        if keep < len(self._entries) - 1:
            abandoned = self._entries[keep:-1]
            del self._entries[keep:-1]
            for cmd in abandoned:
                cmd.destroy()
            logger.debug(f"Discarded {len(abandoned)} redo entries")

        if len(self._entries) > self._max_depth:
            evicted = self._entries.pop(0)
            evicted.destroy()
            logger.debug("Evicted oldest command")

        self._head = len(self._entries) - 1
        logger.debug(f"Added command: {command.description}")

    def _update_or_add(self, command: Command) -> bool:
        if self._can_merge(command):
            head_command = self._entries[self._head]
            self._call(lambda: head_command.merge(command), head_command, "merging")
            self._last_append_time = self._clock()
            command.destroy()
            # A merge after undo diverges from the redo branch
            if self._head < len(self._entries) - 1:
                self._drop_after(self._head)
                logger.debug("Discarded redo entries after merge")
            logger.debug(f"Merged into command: {head_command.description}")
            return True

        self._add(command)
        return False

    def _can_merge(self, command: Command) -> bool:
        if self._last_append_time is None or self._head is None:
            return False

        elapsed_ms = (self._clock() - self._last_append_time) * 1000
        if elapsed_ms > self._update_window_ms:
            return False

        return self._entries[self._head].can_merge_with(command)

    def _can_redo(self) -> bool:
        if not self._entries:
            return False
        if self._head is None:
            return True
        return self._head < len(self._entries) - 1

    def _drop_after(self, index: int):
        dropped = self._entries[index + 1:]
        del self._entries[index + 1:]
        for cmd in dropped:
            cmd.destroy()

    def _clear(self):
        for cmd in self._entries:
            cmd.destroy()
        self._entries.clear()
        self._head = None
        self._last_append_time = None
        logger.debug("Cleared journal")

    def _call(self, callback: Callable[[], None], command: Command, action: str):
        try:
            callback()
        except Exception as e:
            logger.error(f"Error {action} command {command!r}: {e}")
            raise

    def _check_alive(self):
        if self._entries is None:
            raise JournalDisposed("Journal has been disposed")

    def _notify(self):
        if self.on_change is None:
            return
        with self._lock:
            if self._entries is None:
                return
            state = (self._head is not None, self._can_redo())
        self.on_change(*state)

    def __len__(self):
        with self._lock:
            return len(self._entries) if self._entries is not None else 0

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_value, traceback):
        self.dispose()
        return False

    def __str__(self):
        """String representation"""
        return f"Journal(entries={len(self)}, head={self._head})"

    def __repr__(self):
        """Detailed representation"""
        return (f"Journal(entries={len(self)}, head={self._head}, "
                f"max_depth={self._max_depth}, update_window_ms={self._update_window_ms})")
