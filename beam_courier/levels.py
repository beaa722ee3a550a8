"""Level files and scripted solutions."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Tuple

from .game import CommandResult, Direction, Level, PuzzleEngine, TileKind

logger = logging.getLogger(__name__)

GROUND_KINDS: Dict[str, str] = {
    "": "open",
    "open": "open",
    "grass": "open",
    "goal": "goal",
    "void": "void",
}

OBJECT_KINDS: Dict[str, str] = {
    "": "",
    "obstacle": "obstacle",
    "tree": "obstacle",
    "carrier": "carrier",
    "dog": "carrier",
    "beam": "beam",
    "stick": "beam",
}


def classify_tile(ground: str, obj: str) -> TileKind:
    if ground == "void":
        return TileKind.OUT_OF_PLAY
    if obj == "obstacle":
        return TileKind.OBSTACLE
    if ground == "goal":
        return TileKind.GOAL
    return TileKind.OPEN


def _normalise(value: Optional[str], table: Dict[str, str], what: str, cell: Tuple[int, int]) -> str:
    if value is not None and not isinstance(value, str):
        raise ValueError(f"Expected a {what} name at {cell}, got {value!r}")
    key = (value or "").strip().lower()
    try:
        return table[key]
    except KeyError as exc:
        raise ValueError(f"Unknown {what} '{value}' at {cell}") from exc


def _is_grid(rows: object) -> bool:
    return isinstance(rows, list) and all(isinstance(row, list) for row in rows)


class LevelLoader:
    """Load level files stored as JSON."""

    def __init__(self, root: Path):
        self.root = Path(root)

    def names(self) -> List[str]:
        return sorted(path.stem for path in self.root.glob("*.json"))

    def load(self, name: str) -> Level:
        path = self.root / f"{name}.json"
        if not path.exists():
            raise FileNotFoundError(path)
        data = json.loads(path.read_text())
        level = self.parse_level(data, default_name=name)
        logger.info("Parsed level %s from %s", level.name, path)
        return level

    def parse_level(self, data: Dict, *, default_name: str = "Untitled") -> Level:
        try:
            width = int(data["width"])
            height = int(data["height"])
            ground = data["ground"]
            objects = data.get("objects") or [[""] * width for _ in range(height)]
            carrier_facing = Direction.from_name(data.get("carrier_facing", "east"))
            beam_orientation = Direction.from_name(data.get("beam_orientation", "east"))
        except KeyError as exc:
            raise ValueError(f"Level data is missing field {exc}") from exc
        except TypeError as exc:
            raise ValueError(f"Level data has a malformed field: {exc}") from exc

        if not _is_grid(ground) or not _is_grid(objects):
            raise ValueError("Level ground and objects must be lists of rows")
        if len(ground) != height or len(objects) != height:
            raise ValueError(f"Level rows do not match height {height}")

        tiles: List[List[TileKind]] = []
        carriers: List[Tuple[int, int]] = []
        beams: List[Tuple[int, int]] = []
        for y in range(height):
            if len(ground[y]) != width or len(objects[y]) != width:
                raise ValueError(f"Level row {y} does not match width {width}")
            row: List[TileKind] = []
            for x in range(width):
                ground_kind = _normalise(ground[y][x], GROUND_KINDS, "ground", (x, y))
                object_kind = _normalise(objects[y][x], OBJECT_KINDS, "object", (x, y))
                if object_kind == "carrier":
                    carriers.append((x, y))
                elif object_kind == "beam":
                    beams.append((x, y))
                row.append(classify_tile(ground_kind, object_kind))
            tiles.append(row)

        if len(carriers) != 1:
            raise ValueError(f"Expected exactly one carrier, found {len(carriers)}")
        if len(beams) != 1:
            raise ValueError(f"Expected exactly one beam, found {len(beams)}")

        return Level(
            name=data.get("name", default_name),
            difficulty=data.get("difficulty", "Unknown"),
            width=width,
            height=height,
            tiles=tiles,
            carrier_start=carriers[0],
            carrier_facing=carrier_facing,
            beam_root=beams[0],
            beam_orientation=beam_orientation,
        )


def _parse_rotation(argument: Optional[str]) -> bool:
    value = (argument or "cw").lower()
    if value in {"cw", "clockwise", "right"}:
        return True
    if value in {"ccw", "counterclockwise", "left"}:
        return False
    raise ValueError(f"Unknown rotation: {argument}")


def apply_command(engine: PuzzleEngine, command: str) -> CommandResult:
    """Run a single textual command such as ``"move east"`` on ``engine``."""

    tokens = command.split()
    if not tokens:
        raise ValueError("Empty command")
    verb = tokens[0].lower()
    argument = tokens[1] if len(tokens) > 1 else None
    if verb == "move":
        if argument is None:
            raise ValueError("move needs a direction")
        return engine.move(Direction.from_name(argument))
    if verb == "rotate_carrier":
        return engine.rotate_carrier(_parse_rotation(argument))
    if verb == "rotate_beam":
        return engine.rotate_beam(_parse_rotation(argument))
    if verb in {"pickup", "drop", "toggle_pickup"}:
        return engine.toggle_pickup()
    if verb == "undo":
        return engine.undo()
    raise ValueError(f"Unknown command: {command}")


class SolutionValidator:
    """Validate that a scripted solution delivers the beam to the goal."""

    def __init__(self, level_loader: LevelLoader, solutions_root: Path):
        self.level_loader = level_loader
        self.solutions_root = Path(solutions_root)

    def load_solution(self, name: str) -> Dict:
        path = self.solutions_root / f"{name}.json"
        if not path.exists():
            raise FileNotFoundError(path)
        return json.loads(path.read_text())

    def replay(self, level: Level, commands: Iterable[str]) -> Tuple[PuzzleEngine, List[CommandResult]]:
        engine = PuzzleEngine(level, auto_complete=True)
        results = [apply_command(engine, command) for command in commands]
        return engine, results

    def validate(self, level_name: str, solution_name: Optional[str] = None) -> bool:
        level = self.level_loader.load(level_name)
        solution = self.load_solution(solution_name or level_name)
        engine, results = self.replay(level, solution.get("commands", []))
        for command, result in zip(solution.get("commands", []), results):
            if result is not CommandResult.ACCEPTED:
                logger.warning("Solution step %r was %s", command, result.value)
                return False
        expected_carrier = solution.get("expected_carrier")
        if expected_carrier is not None and engine.carrier.position != tuple(expected_carrier):
            return False
        return engine.is_win() == bool(solution.get("expected_win", True))


__all__ = [
    "LevelLoader",
    "SolutionValidator",
    "apply_command",
    "classify_tile",
]
