"""Minimal pygame based UI helpers for headless testing.

This module keeps rendering deterministic so it can be exercised in automated
tests using the SDL ``dummy`` video driver. It is the presentation
collaborator of :class:`~beam_courier.game.PuzzleEngine`: it turns key presses
into commands, plays accepted moves back over a fixed number of frames and
reports completion to the engine when playback ends.
"""

from __future__ import annotations

import os
from typing import Dict, Iterable, Optional, Tuple

from ..game import CommandResult, Direction, PuzzleEngine
from ..undo import ActionKind
from . import layout


# Pygame is imported lazily in ``ensure_pygame`` so test environments can
# control the SDL configuration (e.g. select the ``dummy`` video driver).
_PYGAME = None


def ensure_pygame():
    global _PYGAME
    if _PYGAME is None:
        os.environ.setdefault("SDL_AUDIODRIVER", "dummy")
        _PYGAME = __import__("pygame")
        _PYGAME.display.init()
        _PYGAME.font.init()
    return _PYGAME


Binding = Tuple[str, object]


def key_bindings(pygame) -> Dict[int, Binding]:
    """Keyboard layout: WASD/arrows move, C/V turn the carrier, Q/E turn the beam."""

    return {
        pygame.K_w: ("move", Direction.NORTH),
        pygame.K_UP: ("move", Direction.NORTH),
        pygame.K_s: ("move", Direction.SOUTH),
        pygame.K_DOWN: ("move", Direction.SOUTH),
        pygame.K_a: ("move", Direction.WEST),
        pygame.K_LEFT: ("move", Direction.WEST),
        pygame.K_d: ("move", Direction.EAST),
        pygame.K_RIGHT: ("move", Direction.EAST),
        pygame.K_c: ("rotate_carrier", False),
        pygame.K_v: ("rotate_carrier", True),
        pygame.K_q: ("rotate_beam", False),
        pygame.K_e: ("rotate_beam", True),
        pygame.K_SPACE: ("toggle_pickup", None),
        pygame.K_x: ("undo", None),
        pygame.K_BACKSPACE: ("undo", None),
        pygame.K_r: ("restart", None),
    }


class PuzzleUI:
    """Very small pygame driven UI wrapper used for automated tests."""

    def __init__(
        self,
        engine: PuzzleEngine,
        *,
        cell_size: int = 32,
        surface=None,
        use_display: bool = False,
        animation_frames: int = layout.MOVE_ANIMATION_FRAMES,
    ) -> None:
        pygame = ensure_pygame()
        self.engine = engine
        self.cell_size = cell_size
        self.animation_frames = max(1, animation_frames)
        width = self.engine.board.width * cell_size
        height = self.engine.board.height * cell_size
        self.surface = surface or pygame.Surface((width, height))
        self.screen = None
        if use_display:
            self.screen = pygame.display.set_mode((width, height))
        self.bindings = key_bindings(pygame)
        self.animation_remaining = 0
        self.bump_remaining = 0
        self.last_result: Optional[CommandResult] = None

    @property
    def won(self) -> bool:
        return self.engine.win_evaluator.winning

    # ------------------------------------------------------------------
    # Input handling
    def process_events(self, events: Iterable[object]) -> None:
        pygame = ensure_pygame()
        for event in events:
            if event.type == pygame.KEYDOWN:
                self.handle_key(event.key)

    def handle_key(self, key: int) -> Optional[CommandResult]:
        binding = self.bindings.get(key)
        if binding is None:
            return None
        name, argument = binding
        return self.dispatch(name, argument)

    def dispatch(self, name: str, argument: object = None) -> CommandResult:
        if name == "move":
            result = self.engine.move(argument)
        elif name == "rotate_carrier":
            result = self.engine.rotate_carrier(bool(argument))
        elif name == "rotate_beam":
            result = self.engine.rotate_beam(bool(argument))
        elif name == "toggle_pickup":
            result = self.engine.toggle_pickup()
        elif name == "undo":
            result = self.engine.undo()
        elif name == "restart":
            self.engine.restart()
            self.animation_remaining = 0
            self.bump_remaining = 0
            result = CommandResult.ACCEPTED
        else:
            raise ValueError(f"Unknown UI command: {name}")

        self.last_result = result
        if result is CommandResult.REJECTED:
            self.bump_remaining = layout.BUMP_FEEDBACK_FRAMES
        if self.engine.is_busy:
            self.animation_remaining = self.animation_frames
        return result

    def tick(self) -> None:
        """Advance playback by one frame; completes the engine's busy window."""

        if self.bump_remaining > 0:
            self.bump_remaining -= 1
        if not self.engine.is_busy:
            self.animation_remaining = 0
            return
        self.animation_remaining -= 1
        if self.animation_remaining <= 0:
            self.animation_remaining = 0
            self.engine.complete()

    # ------------------------------------------------------------------
    # Rendering helpers
    def render(self):
        pygame = ensure_pygame()
        self.surface.fill(layout.BACKGROUND_COLOR)
        self._draw_tiles()
        self._draw_beam()
        self._draw_carrier()
        if self.screen:
            self.screen.blit(self.surface, (0, 0))
            pygame.display.flip()
        return self.surface

    def cell_to_topleft(self, cell: Tuple[float, float]) -> Tuple[int, int]:
        # North is drawn upward, so row 0 sits at the bottom of the surface.
        x, y = cell
        height = self.engine.board.height
        return (
            int(round(x * self.cell_size)),
            int(round((height - 1 - y) * self.cell_size)),
        )

    def cell_to_center(self, cell: Tuple[float, float]) -> Tuple[int, int]:
        left, top = self.cell_to_topleft(cell)
        return left + self.cell_size // 2, top + self.cell_size // 2

    def _progress(self) -> float:
        if not self.engine.is_busy:
            return 1.0
        return 1.0 - self.animation_remaining / self.animation_frames

    def _moving_from(self) -> Optional[Tuple[int, int]]:
        entry = self.engine.session.undo_log.peek()
        if not self.engine.is_busy or entry is None or entry.kind is not ActionKind.PRE_MOVE:
            return None
        return entry.snapshot.carrier_position

    def _interpolate(self, cell: Tuple[int, int]) -> Tuple[float, float]:
        start = self._moving_from()
        if start is None:
            return cell
        delta = (cell[0] - self.engine.carrier.position[0], cell[1] - self.engine.carrier.position[1])
        origin = (start[0] + delta[0], start[1] + delta[1])
        t = self._progress()
        return (origin[0] + (cell[0] - origin[0]) * t, origin[1] + (cell[1] - origin[1]) * t)

    def _draw_tiles(self) -> None:
        pygame = ensure_pygame()
        board = self.engine.board
        for y in range(board.height):
            for x in range(board.width):
                left, top = self.cell_to_topleft((x, y))
                rect = pygame.Rect(left, top, self.cell_size, self.cell_size)
                self.surface.fill(layout.TILE_COLORS[board.classify((x, y))], rect)
                pygame.draw.rect(self.surface, layout.GRID_LINE_COLOR, rect, 1)

    def _draw_beam(self) -> None:
        pygame = ensure_pygame()
        beam = self.engine.beam
        held = beam.holder is not None
        if held:
            root = self._interpolate(beam.root)
            end = self._interpolate(beam.end)
        else:
            root, end = beam.root, beam.end
        (ax, ay), (bx, by) = self.cell_to_center(root), self.cell_to_center(end)
        thickness = max(4, self.cell_size // 4)
        half = thickness // 2
        rect = pygame.Rect(
            min(ax, bx) - half,
            min(ay, by) - half,
            abs(ax - bx) + thickness,
            abs(ay - by) + thickness,
        )
        color = layout.BEAM_HELD_COLOR if held else layout.BEAM_COLOR
        self.surface.fill(color, rect)

    def _draw_carrier(self) -> None:
        pygame = ensure_pygame()
        carrier = self.engine.carrier
        center = self.cell_to_center(self._interpolate(carrier.position))
        radius = max(3, int(self.cell_size * 0.35))
        color = layout.BUMP_COLOR if self.bump_remaining else layout.CARRIER_COLOR
        pygame.draw.circle(self.surface, color, center, radius)
        dx, dy = carrier.facing.vector
        nose = (center[0] + int(dx * radius * 0.6), center[1] - int(dy * radius * 0.6))
        pygame.draw.circle(self.surface, layout.CARRIER_NOSE_COLOR, nose, max(2, radius // 4))


__all__ = ["PuzzleUI", "ensure_pygame", "key_bindings"]
