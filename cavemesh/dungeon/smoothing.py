"""Cellular-automaton smoothing.

Each pass reads the previous grid and writes a fresh one, so every cell sees
the pre-pass neighbourhood. Protected cells (room interiors) never turn SOLID
and the border ring never turns OPEN.
"""
from __future__ import annotations

from .grid import Grid, solid_neighbour_count
from .tiles import OPEN, SOLID

# 8-neighbour solid counts: above FILL_ABOVE -> SOLID, below CLEAR_BELOW -> OPEN
FILL_ABOVE = 5
CLEAR_BELOW = 3


def smooth(grid: Grid) -> Grid:
    out = grid.copy()
    for x in range(grid.width):
        for y in range(grid.height):
            if grid.is_border(x, y):
                out.cells[x][y] = SOLID
                continue
            neighbours = solid_neighbour_count(grid, x, y)
            if neighbours > FILL_ABOVE:
                if not grid.protected[x][y]:
                    out.cells[x][y] = SOLID
            elif neighbours < CLEAR_BELOW:
                out.cells[x][y] = OPEN
    return out


def smooth_passes(grid: Grid, passes: int) -> Grid:
    for _ in range(passes):
        grid = smooth(grid)
    return grid


__all__ = ["smooth", "smooth_passes", "FILL_ABOVE", "CLEAR_BELOW"]
