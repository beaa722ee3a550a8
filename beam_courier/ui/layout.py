"""Layout constants for the beam courier UI."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Tuple

from ..game import TileKind

# Tile metrics
TILE_SIZE: int = 72
BOARD_OUTER_PADDING: int = 32
STATUS_BAR_HEIGHT: int = 56

# Animation pacing, in rendered frames
MOVE_ANIMATION_FRAMES: int = 8
BUMP_FEEDBACK_FRAMES: int = 6
WIN_ADVANCE_FRAMES: int = 90
FRAMES_PER_SECOND: int = 60

# Colors expressed as RGB tuples
BACKGROUND_COLOR: Tuple[int, int, int] = (12, 14, 26)
GRID_LINE_COLOR: Tuple[int, int, int] = (58, 64, 96)
TEXT_COLOR: Tuple[int, int, int] = (232, 236, 244)
CARRIER_COLOR: Tuple[int, int, int] = (240, 190, 90)
CARRIER_NOSE_COLOR: Tuple[int, int, int] = (40, 30, 20)
BEAM_COLOR: Tuple[int, int, int] = (150, 95, 50)
BEAM_HELD_COLOR: Tuple[int, int, int] = (205, 135, 70)
BUMP_COLOR: Tuple[int, int, int] = (255, 70, 70)
WIN_COLOR: Tuple[int, int, int] = (140, 255, 180)

TILE_COLORS: Dict[TileKind, Tuple[int, int, int]] = {
    TileKind.OPEN: (60, 120, 70),
    TileKind.GOAL: (230, 200, 60),
    TileKind.OBSTACLE: (30, 70, 35),
    TileKind.OUT_OF_PLAY: (20, 24, 44),
}


@dataclass(frozen=True)
class BoardGeometry:
    """Pixel rectangles for the major UI regions."""

    board: Tuple[int, int, int, int]
    status: Tuple[int, int, int, int]
    window: Tuple[int, int]


def compute_geometry(level_width: int, level_height: int, tile_size: int = TILE_SIZE) -> BoardGeometry:
    """Compute useful rectangles for rendering the game window."""

    board_width = level_width * tile_size
    board_height = level_height * tile_size

    board_x = BOARD_OUTER_PADDING
    board_y = BOARD_OUTER_PADDING
    status_y = board_y + board_height + BOARD_OUTER_PADDING // 2

    window_width = board_x + board_width + BOARD_OUTER_PADDING
    window_height = status_y + STATUS_BAR_HEIGHT + BOARD_OUTER_PADDING // 2

    return BoardGeometry(
        board=(board_x, board_y, board_width, board_height),
        status=(board_x, status_y, board_width, STATUS_BAR_HEIGHT),
        window=(max(window_width, 360), window_height),
    )
