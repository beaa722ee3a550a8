"""Shared fixtures for the rule engine tests."""

from __future__ import annotations

import os
from typing import Callable, Iterable, Tuple

import pytest

from beam_courier.game import Direction, Level, TileKind

# Any test that ends up importing pygame must stay headless.
os.environ.setdefault("SDL_VIDEODRIVER", "dummy")
os.environ.setdefault("SDL_AUDIODRIVER", "dummy")

Cell = Tuple[int, int]


def build_level(
    width: int,
    height: int,
    *,
    carrier: Cell = (0, 0),
    facing: Direction = Direction.EAST,
    beam: Cell = (1, 0),
    orientation: Direction = Direction.EAST,
    goals: Iterable[Cell] = (),
    obstacles: Iterable[Cell] = (),
    void: Iterable[Cell] = (),
    name: str = "Test",
) -> Level:
    tiles = [[TileKind.OPEN for _ in range(width)] for _ in range(height)]
    for kind, cells in (
        (TileKind.GOAL, goals),
        (TileKind.OBSTACLE, obstacles),
        (TileKind.OUT_OF_PLAY, void),
    ):
        for x, y in cells:
            tiles[y][x] = kind
    return Level(
        name=name,
        width=width,
        height=height,
        tiles=tiles,
        carrier_start=carrier,
        carrier_facing=facing,
        beam_root=beam,
        beam_orientation=orientation,
    )


@pytest.fixture
def make_level() -> Callable[..., Level]:
    return build_level
