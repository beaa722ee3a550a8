"""Pixel sampling tests for the deterministic pygame rendering.

Boards are drawn with a fixed ``cell_size`` of 24 so every sampled
coordinate below falls well inside a single tile or sprite.
"""

from __future__ import annotations

from beam_courier.game import PuzzleEngine, TileKind
from beam_courier.ui import PuzzleUI
from beam_courier.ui import layout

CELL = 24


def rgb(surface, point):
    return tuple(surface.get_at(point))[:3]


def make_ui(pygame, level) -> PuzzleUI:
    engine = PuzzleEngine(level)
    surface = pygame.Surface((level.width * CELL, level.height * CELL))
    return PuzzleUI(engine, cell_size=CELL, surface=surface, animation_frames=4)


def test_initial_board_colours(pygame_module, make_level):
    level = make_level(3, 2, goals=[(2, 1)], obstacles=[(0, 1)])
    ui = make_ui(pygame_module, level)

    rendered = ui.render()

    assert rendered.get_size() == (3 * CELL, 2 * CELL)
    # Row 1 is the top row on screen.
    assert rgb(rendered, (2 * CELL + 4, 4)) == layout.TILE_COLORS[TileKind.GOAL]
    assert rgb(rendered, (4, 4)) == layout.TILE_COLORS[TileKind.OBSTACLE]
    assert rgb(rendered, (CELL + 4, 4)) == layout.TILE_COLORS[TileKind.OPEN]
    assert rgb(rendered, (0, 0)) == layout.GRID_LINE_COLOR
    assert rgb(rendered, (CELL // 2, CELL + CELL // 2)) == layout.CARRIER_COLOR
    assert rgb(rendered, (2 * CELL, CELL + CELL // 2)) == layout.BEAM_COLOR


def test_void_tiles_use_their_own_colour(pygame_module, make_level):
    ui = make_ui(pygame_module, make_level(3, 2, void=[(2, 1)]))

    rendered = ui.render()

    assert rgb(rendered, (2 * CELL + 4, 4)) == layout.TILE_COLORS[TileKind.OUT_OF_PLAY]


def test_held_beam_is_highlighted(pygame_module, make_level):
    ui = make_ui(pygame_module, make_level(3, 1, beam=(1, 0)))
    ui.engine.toggle_pickup()

    rendered = ui.render()

    assert rgb(rendered, (CELL + 6, CELL // 2)) == layout.BEAM_HELD_COLOR
    assert rgb(rendered, (2 * CELL + CELL // 2, CELL // 2)) == layout.TILE_COLORS[TileKind.OPEN]


def test_rejected_command_flashes_the_carrier(pygame_module, make_level):
    pygame = pygame_module
    ui = make_ui(pygame, make_level(3, 1, beam=(1, 0)))
    centre = ui.cell_to_center((0, 0))

    ui.process_events([pygame.event.Event(pygame.KEYDOWN, key=pygame.K_a)])
    assert rgb(ui.render(), centre) == layout.BUMP_COLOR

    for _ in range(layout.BUMP_FEEDBACK_FRAMES):
        ui.tick()
    assert rgb(ui.render(), centre) == layout.CARRIER_COLOR


def test_move_is_interpolated_between_cells(pygame_module, make_level):
    ui = make_ui(pygame_module, make_level(4, 1, beam=(2, 0)))
    start = ui.cell_to_center((0, 0))
    end = ui.cell_to_center((1, 0))

    ui.dispatch("move", ui.engine.carrier.facing)
    assert rgb(ui.render(), start) == layout.CARRIER_COLOR

    ui.tick()
    ui.tick()
    halfway = ((start[0] + end[0]) // 2, start[1])
    assert rgb(ui.render(), halfway) == layout.CARRIER_COLOR

    ui.tick()
    ui.tick()
    assert not ui.engine.is_busy
    assert rgb(ui.render(), end) == layout.CARRIER_COLOR
    assert rgb(ui.render(), (start[0] - 8, start[1])) == layout.TILE_COLORS[TileKind.OPEN]
