"""The room grid of one tier.

Rooms are stored in an arena keyed by position; exits hold positions, never
references to other rooms.
"""

from enum import Enum
from typing import TYPE_CHECKING

from .actor import Position

if TYPE_CHECKING:
    from .rooms import Room


class Direction(Enum):
    """(dx, dy, keyboard command). North is up, so it decreases y."""

    NORTH = (0, -1, "w")
    SOUTH = (0, 1, "s")
    EAST = (1, 0, "d")
    WEST = (-1, 0, "a")

    @property
    def dx(self) -> int:
        return self.value[0]

    @property
    def dy(self) -> int:
        return self.value[1]

    @property
    def command(self) -> str:
        return self.value[2]

    @property
    def label(self) -> str:
        return self.name.lower()

    @property
    def opposite(self) -> "Direction":
        return _OPPOSITES[self]

    def step(self, position: Position) -> Position:
        return Position(position.x + self.dx, position.y + self.dy)

    @classmethod
    def parse(cls, text: str) -> "Direction | None":
        """Look up a direction by key (``w``) or by name (``north``)."""
        clean = text.strip().lower()
        for direction in cls:
            if clean in (direction.command, direction.label):
                return direction
        return None


_OPPOSITES = {
    Direction.NORTH: Direction.SOUTH,
    Direction.SOUTH: Direction.NORTH,
    Direction.EAST: Direction.WEST,
    Direction.WEST: Direction.EAST,
}


class GameMap:
    """A width x height grid, sparsely filled with rooms."""

    def __init__(self, name: str, width: int, height: int):
        self.name = name
        self.width = max(1, width)
        self.height = max(1, height)
        self._rooms: dict[Position, "Room"] = {}

    def __repr__(self) -> str:
        return f"GameMap({self.name!r}, {self.width}x{self.height}, rooms={len(self._rooms)})"

    def is_valid_position(self, x: int, y: int) -> bool:
        return 0 <= x < self.width and 0 <= y < self.height

    def room_at(self, x: int, y: int) -> "Room | None":
        return self._rooms.get(Position(x, y))

    def has_room(self, x: int, y: int) -> bool:
        return Position(x, y) in self._rooms

    def set_room(self, x: int, y: int, room: "Room") -> bool:
        if not self.is_valid_position(x, y):
            return False
        self._rooms[Position(x, y)] = room
        return True

    def remove_room(self, x: int, y: int) -> "Room | None":
        return self._rooms.pop(Position(x, y), None)

    def rooms(self) -> list[tuple[Position, "Room"]]:
        return sorted(self._rooms.items(), key=lambda pair: (pair[0].y, pair[0].x))

    @property
    def total_rooms(self) -> int:
        return len(self._rooms)

    @property
    def visited_rooms(self) -> int:
        return sum(1 for room in self._rooms.values() if room.visited)

    def neighbor(self, position: Position, direction: Direction) -> Position | None:
        """The position one step away, when a room exists there."""
        target = direction.step(position)
        if self.has_room(target.x, target.y):
            return target
        return None

    def connect_rooms(self) -> None:
        """Give every room an exit towards each existing orthogonal neighbor."""
        for position, room in self._rooms.items():
            room.exits.clear()
            for direction in Direction:
                target = self.neighbor(position, direction)
                if target is not None:
                    room.exits[direction] = target

    def render(self, current: Position | None = None) -> list[str]:
        """ASCII overview: @ player, # visited, ? unvisited, . empty cell."""
        lines = [f"Map: {self.name}"]
        for y in range(self.height):
            row = []
            for x in range(self.width):
                room = self.room_at(x, y)
                if current is not None and current == Position(x, y):
                    row.append("@")
                elif room is None:
                    row.append(".")
                elif room.visited:
                    row.append("#")
                else:
                    row.append("?")
            lines.append(" ".join(row))
        lines.append(f"Visited {self.visited_rooms}/{self.total_rooms} rooms")
        return lines
