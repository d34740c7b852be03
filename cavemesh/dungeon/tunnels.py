import random
from typing import Iterator, List, Sequence, Tuple

from .grid import Coord2D, Grid
from .rooms import Room
from .tiles import OPEN


def connect_rooms_with_tunnels(
    grid: Grid,
    rooms: Sequence[Room],
    rng: random.Random,
    radius_range: Tuple[int, int] = (2, 3),
) -> List[Tuple[int, int]]:
    """Carve a tunnel from each room to the next one in placement order.

    Only sequential pairs (i, i+1) are linked, so every room reaches its
    neighbour in the chain. Returns the list of linked index pairs; fewer than
    two rooms is a no-op.
    """
    links: List[Tuple[int, int]] = []
    if len(rooms) < 2:
        return links
    for i in range(len(rooms) - 1):
        radius = rng.randint(radius_range[0], radius_range[1])
        carve_tunnel_between(grid, rooms[i].center, rooms[i + 1].center, radius)
        links.append((i, i + 1))
    return links


def carve_tunnel_between(grid: Grid, a: Coord2D, b: Coord2D, radius: int) -> int:
    """Walk an integer Bresenham line from a to b carving a disc at every step.

    Returns the number of cells turned OPEN.
    """
    carved = 0
    for x, y in bresenham_line(a, b):
        carved += carve_disc(grid, x, y, radius)
    return carved


def bresenham_line(a: Coord2D, b: Coord2D) -> Iterator[Coord2D]:
    """Yield every cell on the integer line from a to b, both endpoints included."""
    x0, y0 = a
    x1, y1 = b
    dx = abs(x1 - x0)
    dy = abs(y1 - y0)
    sx = 1 if x0 < x1 else -1
    sy = 1 if y0 < y1 else -1
    err = dx - dy
    while True:
        yield x0, y0
        if x0 == x1 and y0 == y1:
            break
        e2 = 2 * err
        if e2 > -dy:
            err -= dy
            x0 += sx
        if e2 < dx:
            err += dx
            y0 += sy


def carve_disc(grid: Grid, cx: int, cy: int, r: int) -> int:
    """Open every interior cell within ``r`` of (cx, cy). The border ring is never carved."""
    carved = 0
    cells = grid.cells
    for dx in range(-r, r + 1):
        for dy in range(-r, r + 1):
            if dx * dx + dy * dy > r * r:
                continue
            wx, wy = cx + dx, cy + dy
            if 0 < wx < grid.width - 1 and 0 < wy < grid.height - 1 and cells[wx][wy] != OPEN:
                cells[wx][wy] = OPEN
                carved += 1
    return carved


__all__ = ["connect_rooms_with_tunnels", "carve_tunnel_between", "bresenham_line", "carve_disc"]
