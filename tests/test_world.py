"""Tests for the room grid."""

from dungeon.engine.actor import Position
from dungeon.engine.rooms import Room
from dungeon.engine.world import Direction, GameMap


def test_direction_parse():
    assert Direction.parse("w") is Direction.NORTH
    assert Direction.parse("East") is Direction.EAST
    assert Direction.parse(" a ") is Direction.WEST
    assert Direction.parse("up") is None


def test_direction_step_and_opposite():
    assert Direction.NORTH.step(Position(2, 2)) == Position(2, 1)
    assert Direction.EAST.opposite is Direction.WEST


def test_set_room_rejects_out_of_bounds():
    game_map = GameMap("Test", 3, 3)
    assert not game_map.set_room(3, 0, Room("Outside"))
    assert not game_map.set_room(-1, 0, Room("Outside"))
    assert game_map.set_room(2, 2, Room("Corner"))
    assert game_map.total_rooms == 1


def test_connect_rooms_links_neighbors():
    game_map = GameMap("Test", 3, 3)
    hall = Room("Hall")
    north = Room("North")
    far = Room("Far")
    game_map.set_room(1, 1, hall)
    game_map.set_room(1, 0, north)
    game_map.set_room(2, 2, far)
    game_map.connect_rooms()

    assert hall.exits == {Direction.NORTH: Position(1, 0)}
    assert north.exits == {Direction.SOUTH: Position(1, 1)}
    assert far.exits == {}


def test_remove_room():
    game_map = GameMap("Test", 2, 2)
    room = Room("Hall")
    game_map.set_room(0, 0, room)
    assert game_map.remove_room(0, 0) is room
    assert game_map.remove_room(0, 0) is None


def test_render_marks_player_and_visits():
    game_map = GameMap("Test", 3, 1)
    seen = Room("Seen")
    seen.mark_visited()
    game_map.set_room(0, 0, seen)
    game_map.set_room(1, 0, Room("Unseen"))

    lines = game_map.render(Position(1, 0))
    assert lines[0] == "Map: Test"
    assert lines[1] == "# @ ."
    assert lines[-1] == "Visited 1/2 rooms"
