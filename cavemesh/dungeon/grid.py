"""Two-layer cell grid: occupancy (OPEN/SOLID) plus a protected mask.

Storage is column-major (``cells[x][y]``) to match how every stage iterates.
Dimensions are fixed at creation; stages that need a double buffer (smoothing)
build a fresh ``Grid`` rather than mutating one across passes.
"""
from __future__ import annotations

from typing import Iterator, List, Tuple

from .tiles import CHAR_OPEN, CHAR_ROOM, CHAR_SOLID, OPEN, SOLID

Coord2D = Tuple[int, int]

ORTHOGONAL: Tuple[Coord2D, ...] = ((-1, 0), (1, 0), (0, -1), (0, 1))


class Grid:
    __slots__ = ("width", "height", "cells", "protected")

    def __init__(self, width: int, height: int, fill: int = SOLID):
        self.width = width
        self.height = height
        self.cells: List[List[int]] = [[fill for _ in range(height)] for _ in range(width)]
        self.protected: List[List[bool]] = [[False for _ in range(height)] for _ in range(width)]

    @classmethod
    def from_rows(cls, rows: List[str]) -> "Grid":
        """Build a grid from ASCII rows (row 0 is y == 0). ``#`` solid, ``R`` protected open."""
        height = len(rows)
        width = len(rows[0]) if rows else 0
        g = cls(width, height, fill=OPEN)
        for y, row in enumerate(rows):
            for x, ch in enumerate(row):
                g.cells[x][y] = SOLID if ch == CHAR_SOLID else OPEN
                g.protected[x][y] = ch == CHAR_ROOM
        return g

    def in_bounds(self, x: int, y: int) -> bool:
        return 0 <= x < self.width and 0 <= y < self.height

    def is_border(self, x: int, y: int) -> bool:
        return x == 0 or y == 0 or x == self.width - 1 or y == self.height - 1

    def count(self, value: int) -> int:
        return sum(col.count(value) for col in self.cells)

    def protected_cells(self) -> Iterator[Coord2D]:
        for x in range(self.width):
            for y in range(self.height):
                if self.protected[x][y]:
                    yield x, y

    def copy(self) -> "Grid":
        g = Grid.__new__(Grid)
        g.width = self.width
        g.height = self.height
        g.cells = [col[:] for col in self.cells]
        g.protected = [col[:] for col in self.protected]
        return g

    def bordered(self, border_size: int = 1) -> "Grid":
        """Return a copy surrounded by ``border_size`` rings of SOLID cells."""
        g = Grid(self.width + border_size * 2, self.height + border_size * 2, fill=SOLID)
        for x in range(self.width):
            for y in range(self.height):
                g.cells[x + border_size][y + border_size] = self.cells[x][y]
                g.protected[x + border_size][y + border_size] = self.protected[x][y]
        return g

    def to_rows(self) -> List[str]:
        rows = []
        for y in range(self.height):
            chars = []
            for x in range(self.width):
                if self.cells[x][y] == SOLID:
                    chars.append(CHAR_SOLID)
                elif self.protected[x][y]:
                    chars.append(CHAR_ROOM)
                else:
                    chars.append(CHAR_OPEN)
            rows.append("".join(chars))
        return rows

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Grid):
            return NotImplemented
        return (
            self.width == other.width
            and self.height == other.height
            and self.cells == other.cells
            and self.protected == other.protected
        )

    def __repr__(self) -> str:
        return f"<Grid {self.width}x{self.height} solid={self.count(SOLID)}>"


def solid_neighbour_count(grid: Grid, gx: int, gy: int) -> int:
    """Count SOLID cells in the 8-neighbourhood; out-of-bounds cells count as solid."""
    count = 0
    cells = grid.cells
    for nx in range(gx - 1, gx + 2):
        for ny in range(gy - 1, gy + 2):
            if nx == gx and ny == gy:
                continue
            if 0 <= nx < grid.width and 0 <= ny < grid.height:
                count += cells[nx][ny]
            else:
                count += 1
    return count


__all__ = ["Grid", "Coord2D", "ORTHOGONAL", "solid_neighbour_count"]
