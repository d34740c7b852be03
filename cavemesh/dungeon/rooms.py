import random
from dataclasses import dataclass
from typing import List, Tuple

from .config import DungeonConfig
from .grid import Grid
from .tiles import BOSS, ENTRANCE, NORMAL, OPEN, SHRINE, TREASURE


@dataclass
class Room:
    x: int
    y: int
    w: int
    h: int
    world_center: Tuple[float, float, float] = (0.0, 0.0, 0.0)
    tag: str = NORMAL

    def cells(self):
        for ix in range(self.x, self.x + self.w):
            for iy in range(self.y, self.y + self.h):
                yield ix, iy

    @property
    def center(self) -> Tuple[int, int]:
        return (self.x + self.w // 2, self.y + self.h // 2)

    def halo_intersects(self, other: "Room", halo: int = 1) -> bool:
        """True when ``other`` overlaps this room grown by ``halo`` cells (diagonals included)."""
        return (
            self.x - halo < other.x + other.w
            and self.x + self.w + halo > other.x
            and self.y - halo < other.y + other.h
            and self.y + self.h + halo > other.y
        )

    def to_dict(self):
        return {
            "x": self.x,
            "y": self.y,
            "width": self.w,
            "height": self.h,
            "center": list(self.center),
            "world_center": list(self.world_center),
            "tag": self.tag,
        }


def world_center_for(x: int, y: int, w: int, h: int, grid_width: int, grid_height: int) -> Tuple[float, float, float]:
    """Centered coordinates: the grid half-extent is an integer, the room half-extent is not."""
    return (-(grid_width // 2) + x + w / 2, 0.0, -(grid_height // 2) + y + h / 2)


def place_rooms(grid: Grid, config: DungeonConfig, rng: random.Random) -> List[Room]:
    """Attempt ``config.room_attempts`` placements of non-touching rectangular rooms.

    A rejected attempt is skipped, never retried, so a crowded grid simply yields
    fewer rooms. Accepted rooms are carved OPEN and marked protected.
    """
    rooms: List[Room] = []
    for _ in range(config.room_attempts):
        w = rng.randint(config.min_room_size, config.max_room_size)
        h = rng.randint(config.min_room_size, config.max_room_size)
        # room plus a one-cell margin stays strictly inside the border ring
        x = rng.randrange(1, grid.width - w - 1)
        y = rng.randrange(1, grid.height - h - 1)
        if _halo_overlaps_room(grid, x, y, w, h):
            continue
        for ix in range(x, x + w):
            for iy in range(y, y + h):
                grid.cells[ix][iy] = OPEN
                grid.protected[ix][iy] = True
        tag = pick_room_tag(rng, len(rooms))
        rooms.append(Room(x, y, w, h, world_center_for(x, y, w, h, grid.width, grid.height), tag))
    return rooms


def _halo_overlaps_room(grid: Grid, x: int, y: int, w: int, h: int) -> bool:
    for xx in range(x - 1, x + w + 1):
        for yy in range(y - 1, y + h + 1):
            if grid.in_bounds(xx, yy) and grid.protected[xx][yy]:
                return True
    return False


def pick_room_tag(rng: random.Random, index: int) -> str:
    """First room is always the entrance; later rooms roll an even four-way split."""
    if index == 0:
        return ENTRANCE
    roll = rng.random()
    if roll <= 0.25:
        return TREASURE
    if roll <= 0.50:
        return BOSS
    if roll <= 0.75:
        return SHRINE
    return NORMAL


__all__ = ["Room", "place_rooms", "pick_room_tag", "world_center_for"]
