from dataclasses import FrozenInstanceError

import pytest

from beam_courier.game import Direction, PuzzleEngine
from beam_courier.undo import ActionKind, Snapshot, UndoLog


def snapshot(carrying: bool = False, position=(0, 0)) -> Snapshot:
    return Snapshot(
        carrier_position=position,
        carrier_facing=Direction.EAST,
        carrying=carrying,
        beam_root=(1, 0),
        beam_orientation=Direction.EAST,
    )


def test_log_is_last_in_first_out():
    log = UndoLog()
    first = log.push(ActionKind.PRE_MOVE, snapshot(position=(0, 0)))
    second = log.push(ActionKind.PRE_MOVE, snapshot(position=(1, 0)))

    assert len(log) == 2
    assert log.peek() is second
    assert log.pop() is second
    assert log.pop() is first
    assert log.pop() is None
    assert len(log) == 0


def test_entries_are_immutable():
    entry = UndoLog().push(ActionKind.PRE_MOVE, snapshot())
    with pytest.raises(FrozenInstanceError):
        entry.snapshot.carrier_position = (3, 3)
    with pytest.raises(FrozenInstanceError):
        entry.kind = ActionKind.PRE_DROP


@pytest.mark.parametrize(
    "kind,carrying",
    [
        (ActionKind.PRE_PICKUP, True),
        (ActionKind.PRE_DROP, False),
        (ActionKind.PRE_ROTATE_BEAM, False),
    ],
)
def test_push_rejects_inconsistent_carrying_flag(kind, carrying):
    log = UndoLog()
    with pytest.raises(ValueError):
        log.push(kind, snapshot(carrying=carrying))
    assert len(log) == 0


def test_engine_tags_each_action_kind(make_level):
    engine = PuzzleEngine(make_level(3, 3, carrier=(1, 1), beam=(2, 1), orientation=Direction.NORTH), auto_complete=True)
    log = engine.session.undo_log

    engine.move(Direction.NORTH)
    assert log.peek().kind is ActionKind.PRE_MOVE
    engine.move(Direction.SOUTH)
    engine.toggle_pickup()
    assert log.peek().kind is ActionKind.PRE_PICKUP
    assert log.peek().snapshot.carrying is False
    engine.rotate_carrier(True)
    assert log.peek().kind is ActionKind.PRE_ROTATE_CARRIER
    assert log.peek().snapshot.carrier_facing is Direction.EAST
    engine.rotate_beam(True)
    assert log.peek().kind is ActionKind.PRE_ROTATE_BEAM
    assert log.peek().snapshot.beam_orientation is Direction.SOUTH
    engine.toggle_pickup()
    assert log.peek().kind is ActionKind.PRE_DROP
    assert log.peek().snapshot.carrying is True
    assert len(log) == 6


def test_load_starts_with_empty_log(make_level):
    engine = PuzzleEngine(make_level(3, 1), auto_complete=True)
    engine.toggle_pickup()
    assert engine.history_size == 1

    engine.load(make_level(4, 1))
    assert engine.history_size == 0
    assert engine.undo().value == "no_op"
