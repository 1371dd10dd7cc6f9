"""Bounded undo/redo history over scene trees.

History keeps three sequences: past (oldest first), the present tree, and
future (most recently undone last). Edits are tree functions applied to
the present; an edit that returns the very same root object is a no-op and
leaves history untouched.
"""

from __future__ import annotations

import logging
from collections import deque
from typing import Callable

from ..scene.node import Node

logger = logging.getLogger(__name__)

MAX_HISTORY = 100

TreeEdit = Callable[[Node | None], Node | None]


class History:
    """Undo/redo stack for a single editing session.

    Not thread-safe: callers with several edit sources must serialize
    calls to apply, undo, redo and replace.
    """

    def __init__(self, initial: Node | None, max_depth: int = MAX_HISTORY):
        """Initialize history.

        Args:
            initial: Starting tree
            max_depth: Maximum number of past states kept for undo

        Raises:
            ValueError: If max_depth is less than 1
        """
        if max_depth < 1:
            raise ValueError(f"max_depth must be at least 1, got {max_depth}")
        self.max_depth = max_depth
        self._past: deque[Node | None] = deque(maxlen=max_depth)
        self._present = initial
        self._future: list[Node | None] = []

    @property
    def present(self) -> Node | None:
        """The current tree."""
        return self._present

    @property
    def past(self) -> tuple[Node | None, ...]:
        """Undoable states, oldest first."""
        return tuple(self._past)

    @property
    def future(self) -> tuple[Node | None, ...]:
        """Redoable states; the next redo target is last."""
        return tuple(self._future)

    @property
    def can_undo(self) -> bool:
        return len(self._past) > 0

    @property
    def can_redo(self) -> bool:
        return len(self._future) > 0

    def apply(self, fn: TreeEdit) -> bool:
        """Apply an edit to the present tree.

        The oldest past state is dropped once max_depth is reached, and any
        pending redo states are discarded.

        Args:
            fn: Function mapping the present tree to the next tree

        Returns:
            True if the tree changed, False for a no-op edit
        """
        next_root = fn(self._present)
        if next_root is self._present:
            logger.debug("Edit was a no-op; history unchanged")
            return False

        if len(self._past) == self.max_depth:
            logger.debug("History full; dropping oldest state")
        self._past.append(self._present)
        self._present = next_root
        self._future.clear()
        return True

    def undo(self) -> bool:
        """Restore the previous tree. Returns False if there is nothing to undo."""
        if not self._past:
            return False
        self._future.append(self._present)
        self._present = self._past.pop()
        logger.debug(f"Undo ({len(self._past)} left)")
        return True

    def redo(self) -> bool:
        """Re-apply the last undone tree. Returns False if there is nothing to redo."""
        if not self._future:
            return False
        self._past.append(self._present)
        self._present = self._future.pop()
        logger.debug(f"Redo ({len(self._future)} left)")
        return True

    def replace(self, new_root: Node | None) -> None:
        """Reset history to a single present tree (e.g. after loading a document)."""
        self._past.clear()
        self._present = new_root
        self._future.clear()

    def __repr__(self) -> str:
        return f"History(past={len(self._past)}, future={len(self._future)})"
