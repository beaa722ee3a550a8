"""Undo history for the puzzle session."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, List, Optional, Tuple

if TYPE_CHECKING:  # pragma: no cover - import cycle guard
    from .game import Direction


class ActionKind(Enum):
    """Which committed action an undo entry reverses."""

    PRE_MOVE = "move"
    PRE_ROTATE_CARRIER = "rotate_carrier"
    PRE_ROTATE_BEAM = "rotate_beam"
    PRE_PICKUP = "pickup"
    PRE_DROP = "drop"


@dataclass(frozen=True)
class Snapshot:
    """Carrier and beam fields captured before an action is applied."""

    carrier_position: Tuple[int, int]
    carrier_facing: "Direction"
    carrying: bool
    beam_root: Tuple[int, int]
    beam_orientation: "Direction"


@dataclass(frozen=True)
class UndoEntry:
    kind: ActionKind
    snapshot: Snapshot


class UndoLog:
    """Last-in-first-out stack of :class:`UndoEntry` records.

    There is no redo: a popped entry is gone for good.
    """

    def __init__(self) -> None:
        self._entries: List[UndoEntry] = []

    def __len__(self) -> int:
        return len(self._entries)

    def push(self, kind: ActionKind, snapshot: Snapshot) -> UndoEntry:
        if kind is ActionKind.PRE_PICKUP and snapshot.carrying:
            raise ValueError("A pickup cannot start from a carrying state.")
        if kind in (ActionKind.PRE_DROP, ActionKind.PRE_ROTATE_BEAM) and not snapshot.carrying:
            raise ValueError(f"{kind.value} requires a carrying state.")
        entry = UndoEntry(kind=kind, snapshot=snapshot)
        self._entries.append(entry)
        return entry

    def pop(self) -> Optional[UndoEntry]:
        if not self._entries:
            return None
        return self._entries.pop()

    def peek(self) -> Optional[UndoEntry]:
        return self._entries[-1] if self._entries else None


__all__ = ["ActionKind", "Snapshot", "UndoEntry", "UndoLog"]
