"""Interactive pygame front end and command line launcher."""

from __future__ import annotations

import argparse
import logging
import os
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, List, Optional, Sequence

import pygame

from ..game import Level, PuzzleEngine, PuzzleSession
from ..levels import LevelLoader
from . import layout
from .toolkit import PuzzleUI

logger = logging.getLogger(__name__)

LEVEL_ENV_VAR = "BEAM_COURIER_LEVEL_ROOT"
SOLUTION_ENV_VAR = "BEAM_COURIER_SOLUTION_ROOT"


@dataclass(frozen=True)
class UIDirectories:
    """Bundle with resolved directories required by the UI."""

    level_root: Path
    solution_root: Path


def _default_level_root() -> Path:
    return Path(__file__).resolve().parents[1] / "levels"


def _default_solution_root() -> Path:
    return Path(__file__).resolve().parents[1] / "solutions"


def _read_directory(env_var: str, fallback: Path) -> Path:
    value = os.environ.get(env_var)
    if value:
        return Path(value).expanduser()
    return fallback


def resolve_directories(check_exists: bool = True) -> UIDirectories:
    """Resolve level and solution directories using environment variables.

    Parameters
    ----------
    check_exists:
        When *True*, raise :class:`FileNotFoundError` if a resolved directory does
        not exist on disk.
    """

    level_root = _read_directory(LEVEL_ENV_VAR, _default_level_root())
    solution_root = _read_directory(SOLUTION_ENV_VAR, _default_solution_root())

    if check_exists:
        missing = [path for path in (level_root, solution_root) if not path.exists()]
        if missing:
            missing_str = ", ".join(str(path) for path in missing)
            raise FileNotFoundError(
                f"Required resource directories do not exist: {missing_str}"
            )

    return UIDirectories(level_root=level_root, solution_root=solution_root)


def bootstrap_directories() -> UIDirectories:
    """Return resolved directories and print a short bootstrap message."""

    directories = resolve_directories()
    message = (
        "Beam Courier UI bootstrap\n"
        f"  levels: {directories.level_root}\n"
        f"  solutions: {directories.solution_root}\n"
        f"Set {LEVEL_ENV_VAR} / {SOLUTION_ENV_VAR} to point to custom directories if needed."
    )
    print(message)
    return directories


class BeamCourierApp:
    """Pygame window that plays the bundled levels in order."""

    def __init__(
        self,
        *,
        directories: Optional[UIDirectories] = None,
        start_level: Optional[str] = None,
    ) -> None:
        pygame.init()
        pygame.display.set_caption("Beam Courier")
        self.clock = pygame.time.Clock()
        self.font = pygame.font.Font(pygame.font.get_default_font(), 18)

        self.directories = directories or resolve_directories()
        self.level_loader = LevelLoader(self.directories.level_root)
        self.level_names: List[str] = self.level_loader.names()
        if not self.level_names:
            raise RuntimeError("No levels available to load.")
        if start_level is not None and start_level not in self.level_names:
            raise ValueError(f"Unknown level: {start_level}")

        self.engine = PuzzleEngine(on_win=self._on_win)
        self.completed_levels: Dict[str, bool] = {}
        self.advance_countdown = 0
        self.running = False
        self.level: Optional[Level] = None
        self.ui: Optional[PuzzleUI] = None
        self.geometry: Optional[layout.BoardGeometry] = None
        self.screen = None

        self.level_index = self.level_names.index(start_level) if start_level else 0
        self.load_level(self.level_index)

    @property
    def level_name(self) -> str:
        return self.level_names[self.level_index]

    def load_level(self, index: int) -> None:
        self.level_index = index % len(self.level_names)
        self.level = self.level_loader.load(self.level_name)
        self.engine.load(self.level)
        self.advance_countdown = 0
        self.geometry = layout.compute_geometry(self.level.width, self.level.height)
        self.screen = pygame.display.set_mode(self.geometry.window)
        board_size = self.geometry.board[2:]
        self.ui = PuzzleUI(
            self.engine,
            cell_size=layout.TILE_SIZE,
            surface=pygame.Surface(board_size),
        )

    def cycle_level(self, step: int) -> None:
        self.load_level(self.level_index + step)

    def _on_win(self, session: PuzzleSession) -> None:
        self.completed_levels[self.level_name] = True
        self.advance_countdown = layout.WIN_ADVANCE_FRAMES

    def handle_event(self, event: pygame.event.Event) -> None:
        if event.type == pygame.QUIT:
            self.running = False
        elif event.type == pygame.KEYDOWN and event.key == pygame.K_ESCAPE:
            self.running = False
        elif event.type == pygame.KEYDOWN and event.key == pygame.K_n:
            self.cycle_level(1)
        elif event.type == pygame.KEYDOWN and event.key == pygame.K_p:
            self.cycle_level(-1)
        else:
            self.ui.process_events([event])

    def update(self) -> None:
        self.ui.tick()
        if not self.advance_countdown:
            return
        if not self.engine.is_win():
            self.advance_countdown = 0
            return
        self.advance_countdown -= 1
        if self.advance_countdown == 0:
            if self.level_index + 1 < len(self.level_names):
                self.cycle_level(1)
            else:
                logger.info("All %d levels completed", len(self.level_names))

    def _status_text(self) -> str:
        if self.engine.is_win():
            if self.level_index + 1 < len(self.level_names):
                return "Delivered! Next level coming up."
            return "Delivered! All levels complete."
        held = "holding beam" if self.engine.session.holding else "beam on ground"
        return f"{self.level.name} ({self.level.difficulty})  moves: {self.engine.history_size}  {held}"

    def draw(self) -> None:
        self.screen.fill(layout.BACKGROUND_COLOR)
        board_rect = pygame.Rect(*self.geometry.board)
        self.screen.blit(self.ui.render(), board_rect.topleft)
        status_rect = pygame.Rect(*self.geometry.status)
        color = layout.WIN_COLOR if self.engine.is_win() else layout.TEXT_COLOR
        label = self.font.render(self._status_text(), True, color)
        self.screen.blit(label, label.get_rect(midleft=status_rect.midleft))
        pygame.display.flip()

    def run(self) -> None:
        self.running = True
        while self.running:
            for event in pygame.event.get():
                self.handle_event(event)
            self.update()
            self.draw()
            self.clock.tick(layout.FRAMES_PER_SECOND)
        pygame.quit()


def run(directories: Optional[UIDirectories] = None, level: Optional[str] = None) -> None:
    """Entry point helper that instantiates and runs the UI."""

    app = BeamCourierApp(directories=directories, start_level=level)
    app.run()


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Beam Courier launcher")
    parser.add_argument(
        "--info",
        action="store_true",
        help="Print resolved resource directories and exit without launching the UI.",
    )
    parser.add_argument(
        "--list-levels",
        action="store_true",
        help="List the levels found in the level directory and exit.",
    )
    parser.add_argument("--level", help="Name of the level to start with.")
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging.")
    return parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    try:
        if args.info:
            bootstrap_directories()
            return 0
        directories = resolve_directories()
    except FileNotFoundError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 1

    loader = LevelLoader(directories.level_root)
    if args.level is not None and args.level not in loader.names():
        print(f"error: unknown level '{args.level}'", file=sys.stderr)
        return 2

    if args.list_levels:
        print("Available levels:")
        for name in loader.names():
            metadata = loader.load(name).metadata
            print(f"  {name}: {metadata['name']} [{metadata['difficulty']}, {metadata['dimensions']}]")
        return 0

    run(directories, args.level)
    return 0


if __name__ == "__main__":  # pragma: no cover - manual invocation entry point
    raise SystemExit(main())
