"""Core rule engine for the beam courier puzzle."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, Dict, Iterable, List, Optional, Sequence, Tuple

from .undo import ActionKind, Snapshot, UndoEntry, UndoLog

logger = logging.getLogger(__name__)

Cell = Tuple[int, int]


class Direction(Enum):
    """Cardinal directions, listed in clockwise order. ``y`` grows northward."""

    NORTH = (0, 1)
    EAST = (1, 0)
    SOUTH = (0, -1)
    WEST = (-1, 0)

    @property
    def vector(self) -> Tuple[int, int]:
        return self.value

    @staticmethod
    def from_name(name: str) -> "Direction":
        if not isinstance(name, str):
            raise ValueError(f"Direction name must be a string, got {name!r}")
        name = name.strip().upper()
        name = _DIRECTION_ALIASES.get(name, name)
        try:
            return Direction[name]
        except KeyError as exc:
            raise ValueError(f"Unknown direction: {name}") from exc

    def turn_left(self) -> "Direction":
        mapping = {
            Direction.NORTH: Direction.WEST,
            Direction.WEST: Direction.SOUTH,
            Direction.SOUTH: Direction.EAST,
            Direction.EAST: Direction.NORTH,
        }
        return mapping[self]

    def turn_right(self) -> "Direction":
        mapping = {
            Direction.NORTH: Direction.EAST,
            Direction.EAST: Direction.SOUTH,
            Direction.SOUTH: Direction.WEST,
            Direction.WEST: Direction.NORTH,
        }
        return mapping[self]

    def rotated(self, clockwise: bool) -> "Direction":
        return self.turn_right() if clockwise else self.turn_left()

    def step(self, cell: Cell) -> Cell:
        return (cell[0] + self.value[0], cell[1] + self.value[1])


_DIRECTION_ALIASES: Dict[str, str] = {
    "UP": "NORTH",
    "RIGHT": "EAST",
    "DOWN": "SOUTH",
    "LEFT": "WEST",
}


class TileKind(Enum):
    OPEN = "open"
    GOAL = "goal"
    OBSTACLE = "obstacle"
    OUT_OF_PLAY = "out_of_play"

    @property
    def passable(self) -> bool:
        return self in (TileKind.OPEN, TileKind.GOAL)


class Board:
    """Static per-level grid of tile classifications.

    ``tiles`` is row-major: ``tiles[y][x]``. The board never changes after
    construction.
    """

    def __init__(self, width: int, height: int, tiles: Sequence[Sequence[TileKind]]):
        if width <= 0 or height <= 0:
            raise ValueError(f"Board dimensions must be positive, got {width}x{height}")
        if len(tiles) != height or any(len(row) != width for row in tiles):
            raise ValueError(f"Tile grid does not match board dimensions {width}x{height}")
        self.width = width
        self.height = height
        self._tiles: Tuple[Tuple[TileKind, ...], ...] = tuple(tuple(row) for row in tiles)

    def in_bounds(self, cell: Cell) -> bool:
        x, y = cell
        return 0 <= x < self.width and 0 <= y < self.height

    def classify(self, cell: Cell) -> TileKind:
        if not self.in_bounds(cell):
            raise IndexError(f"Cell {cell} is outside the {self.width}x{self.height} board")
        x, y = cell
        return self._tiles[y][x]

    def is_blocked(self, cell: Cell) -> bool:
        if not self.in_bounds(cell):
            return True
        return not self.classify(cell).passable

    def all_free(self, cells: Iterable[Cell]) -> bool:
        return all(not self.is_blocked(cell) for cell in cells)


@dataclass
class Carrier:
    """The mobile agent."""

    position: Cell
    facing: Direction
    carrying: Optional["Beam"] = field(default=None, repr=False, compare=False)

    @property
    def front(self) -> Cell:
        return self.facing.step(self.position)


@dataclass
class Beam:
    """Two-cell rigid item; occupies ``root`` and ``root + orientation``."""

    root: Cell
    orientation: Direction
    holder: Optional[Carrier] = field(default=None, repr=False, compare=False)

    @property
    def end(self) -> Cell:
        return self.orientation.step(self.root)

    @property
    def cells(self) -> Tuple[Cell, Cell]:
        return (self.root, self.end)

    def occupies(self, cell: Cell) -> bool:
        return cell in self.cells


@dataclass
class Level:
    """Structured level data handed to the engine by a loader."""

    name: str
    width: int
    height: int
    tiles: List[List[TileKind]]
    carrier_start: Cell
    carrier_facing: Direction
    beam_root: Cell
    beam_orientation: Direction
    difficulty: str = "Unknown"

    @property
    def metadata(self) -> Dict[str, object]:
        return {
            "name": self.name,
            "difficulty": self.difficulty,
            "dimensions": f"{self.width}x{self.height}",
        }


@dataclass
class PuzzleSession:
    """Everything one level instance owns."""

    board: Board
    carrier: Carrier
    beam: Beam
    undo_log: UndoLog = field(default_factory=UndoLog)

    @classmethod
    def from_level(cls, level: Level) -> "PuzzleSession":
        board = Board(level.width, level.height, level.tiles)
        carrier = Carrier(position=tuple(level.carrier_start), facing=level.carrier_facing)
        beam = Beam(root=tuple(level.beam_root), orientation=level.beam_orientation)
        if board.is_blocked(carrier.position):
            raise ValueError(f"Carrier starts on a blocked cell {carrier.position}")
        for cell in beam.cells:
            if board.is_blocked(cell):
                raise ValueError(f"Beam starts across a blocked cell {cell}")
        return cls(board=board, carrier=carrier, beam=beam)

    @property
    def holding(self) -> bool:
        return self.beam.holder is self.carrier

    def capture(self) -> Snapshot:
        return Snapshot(
            carrier_position=self.carrier.position,
            carrier_facing=self.carrier.facing,
            carrying=self.holding,
            beam_root=self.beam.root,
            beam_orientation=self.beam.orientation,
        )

    def attach(self) -> None:
        self.carrier.carrying = self.beam
        self.beam.holder = self.carrier

    def detach(self) -> None:
        self.carrier.carrying = None
        self.beam.holder = None


def is_win(session: PuzzleSession) -> bool:
    """The carrier holds the beam while standing on a goal tile."""

    if not session.holding:
        return False
    return session.board.classify(session.carrier.position) is TileKind.GOAL


WinListener = Callable[[PuzzleSession], None]


class WinEvaluator:
    """Edge-triggered wrapper around :func:`is_win`.

    Listeners run once per transition into a winning state; re-evaluating a
    state that is still winning does not notify them again.
    """

    def __init__(self) -> None:
        self.listeners: List[WinListener] = []
        self.winning = False

    def reset(self) -> None:
        self.winning = False

    def evaluate(self, session: PuzzleSession) -> bool:
        result = is_win(session)
        was_winning = self.winning
        # Set before dispatch so a listener that reloads can reset it.
        self.winning = result
        if result and not was_winning:
            logger.info("Level complete: carrier delivered the beam to %s", session.carrier.position)
            for listener in list(self.listeners):
                listener(session)
        return result


class EngineState(Enum):
    IDLE = "idle"
    BUSY = "busy"


class CommandResult(Enum):
    ACCEPTED = "accepted"
    REJECTED = "rejected"
    NO_OP = "no_op"

    def __bool__(self) -> bool:
        return self is CommandResult.ACCEPTED


class PuzzleEngine:
    """Command surface validating and applying player actions.

    Accepted moves and rotations commit immediately and then hold the engine
    in ``BUSY`` until :meth:`complete` reports that the presentation layer has
    finished playing them back. Commands issued while busy are rejected.
    """

    def __init__(
        self,
        level: Optional[Level] = None,
        *,
        auto_complete: bool = False,
        on_win: Optional[WinListener] = None,
    ) -> None:
        self.auto_complete = auto_complete
        self.level: Optional[Level] = None
        self.win_evaluator = WinEvaluator()
        if on_win is not None:
            self.add_win_listener(on_win)
        self._session: Optional[PuzzleSession] = None
        self.state = EngineState.IDLE
        if level is not None:
            self.load(level)

    # ------------------------------------------------------------------
    # Lifecycle
    def load(self, level: Level) -> PuzzleSession:
        session = PuzzleSession.from_level(level)
        self.level = level
        self._session = session
        self.state = EngineState.IDLE
        self.win_evaluator.reset()
        logger.info("Loaded level %r (%dx%d)", level.name, level.width, level.height)
        return session

    def restart(self) -> PuzzleSession:
        if self.level is None:
            raise RuntimeError("No level loaded")
        return self.load(self.level)

    def add_win_listener(self, listener: WinListener) -> None:
        self.win_evaluator.listeners.append(listener)

    @property
    def session(self) -> PuzzleSession:
        if self._session is None:
            raise RuntimeError("No level loaded")
        return self._session

    @property
    def board(self) -> Board:
        return self.session.board

    @property
    def carrier(self) -> Carrier:
        return self.session.carrier

    @property
    def beam(self) -> Beam:
        return self.session.beam

    @property
    def is_busy(self) -> bool:
        return self.state is EngineState.BUSY

    @property
    def history_size(self) -> int:
        return len(self.session.undo_log)

    def is_win(self) -> bool:
        return is_win(self.session)

    # ------------------------------------------------------------------
    # Commands
    def move(self, direction: Direction) -> CommandResult:
        session = self.session
        if self._reject_if_busy("move"):
            return CommandResult.REJECTED
        carrier, beam, board = session.carrier, session.beam, session.board
        target = direction.step(carrier.position)
        if board.is_blocked(target):
            logger.debug("Move %s blocked: target %s is not passable", direction.name, target)
            return CommandResult.REJECTED
        if session.holding:
            prospective = [direction.step(cell) for cell in beam.cells]
            if not board.all_free(prospective):
                logger.debug("Move %s blocked: beam would cover %s", direction.name, prospective)
                return CommandResult.REJECTED

        self._record(ActionKind.PRE_MOVE)
        carrier.position = target
        if session.holding:
            beam.root = direction.step(beam.root)
        logger.debug("Carrier moved %s to %s", direction.name, target)
        self._begin_busy()
        return CommandResult.ACCEPTED

    def rotate_carrier(self, clockwise: bool = True) -> CommandResult:
        session = self.session
        if self._reject_if_busy("rotate_carrier"):
            return CommandResult.REJECTED
        carrier = session.carrier
        new_facing = carrier.facing.rotated(clockwise)
        if session.holding:
            sweep = new_facing.step(carrier.position)
            if session.board.is_blocked(sweep):
                logger.debug("Carrier rotation blocked: beam would hit %s", sweep)
                return CommandResult.REJECTED

        self._record(ActionKind.PRE_ROTATE_CARRIER)
        carrier.facing = new_facing
        if session.holding:
            session.beam.orientation = new_facing
        logger.debug("Carrier now faces %s", new_facing.name)
        self._begin_busy()
        return CommandResult.ACCEPTED

    def rotate_beam(self, clockwise: bool = True) -> CommandResult:
        session = self.session
        if self._reject_if_busy("rotate_beam"):
            return CommandResult.REJECTED
        if not session.holding:
            logger.debug("Beam rotation rejected: carrier is not holding the beam")
            return CommandResult.REJECTED
        beam = session.beam
        new_orientation = beam.orientation.rotated(clockwise)
        end = new_orientation.step(beam.root)
        if session.board.is_blocked(end):
            logger.debug("Beam rotation blocked: end cell %s is not passable", end)
            return CommandResult.REJECTED

        self._record(ActionKind.PRE_ROTATE_BEAM)
        beam.orientation = new_orientation
        logger.debug("Beam now points %s", new_orientation.name)
        self._begin_busy()
        return CommandResult.ACCEPTED

    def toggle_pickup(self) -> CommandResult:
        session = self.session
        if self._reject_if_busy("toggle_pickup"):
            return CommandResult.REJECTED
        if session.holding:
            self._record(ActionKind.PRE_DROP)
            session.detach()
            logger.debug("Dropped beam at %s", session.beam.cells)
            self.win_evaluator.evaluate(session)
            return CommandResult.ACCEPTED

        carrier, beam = session.carrier, session.beam
        for cell in (carrier.front, carrier.position):
            if beam.holder is None and beam.occupies(cell):
                break
        else:
            logger.debug("No beam near %s or %s", carrier.position, carrier.front)
            return CommandResult.NO_OP

        self._record(ActionKind.PRE_PICKUP)
        session.attach()
        beam.root = carrier.position
        beam.orientation = carrier.facing
        logger.debug("Picked up beam: root=%s orientation=%s", beam.root, beam.orientation.name)
        self.win_evaluator.evaluate(session)
        return CommandResult.ACCEPTED

    def undo(self) -> CommandResult:
        session = self.session
        if self._reject_if_busy("undo"):
            return CommandResult.REJECTED
        entry = session.undo_log.pop()
        if entry is None:
            return CommandResult.NO_OP
        self._restore(entry)
        logger.debug("Undid %s", entry.kind.value)
        self.win_evaluator.evaluate(session)
        return CommandResult.ACCEPTED

    def complete(self) -> bool:
        """Presentation playback finished: return to idle and check for a win."""

        if self.state is not EngineState.BUSY:
            return False
        self.state = EngineState.IDLE
        self.win_evaluator.evaluate(self.session)
        return True

    # ------------------------------------------------------------------
    # Internals
    def _reject_if_busy(self, command: str) -> bool:
        if self.state is EngineState.BUSY:
            logger.debug("%s rejected: engine is busy", command)
            return True
        return False

    def _record(self, kind: ActionKind) -> None:
        session = self.session
        session.undo_log.push(kind, session.capture())

    def _begin_busy(self) -> None:
        self.state = EngineState.BUSY
        if self.auto_complete:
            self.complete()

    def _restore(self, entry: UndoEntry) -> None:
        session = self.session
        snapshot = entry.snapshot
        session.carrier.position = snapshot.carrier_position
        session.carrier.facing = snapshot.carrier_facing
        session.beam.root = snapshot.beam_root
        session.beam.orientation = snapshot.beam_orientation

        if entry.kind is ActionKind.PRE_PICKUP:
            session.detach()
        elif entry.kind is ActionKind.PRE_DROP:
            session.attach()
        elif entry.kind in (
            ActionKind.PRE_MOVE,
            ActionKind.PRE_ROTATE_CARRIER,
            ActionKind.PRE_ROTATE_BEAM,
        ):
            if snapshot.carrying:
                session.attach()
            else:
                session.detach()
        else:
            raise ValueError(f"Unknown undo entry kind: {entry.kind}")


__all__ = [
    "Beam",
    "Board",
    "Carrier",
    "Cell",
    "CommandResult",
    "Direction",
    "EngineState",
    "Level",
    "PuzzleEngine",
    "PuzzleSession",
    "TileKind",
    "WinEvaluator",
    "is_win",
]
