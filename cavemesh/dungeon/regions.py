"""Region analysis: flood fill, undersized-region pruning and room classification.

Regions are 4-connected: the walk scans the 3x3 block around each cell but
only ever merges orthogonal neighbours. Room connectivity is an index-based
adjacency list (room id -> set of room ids); accessibility from the main room
is propagated with an iterative breadth-first walk over that graph.
"""
from __future__ import annotations

from collections import deque
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional, Set, Tuple

from .grid import ORTHOGONAL, Coord2D, Grid
from .tiles import OPEN, SOLID
from .tunnels import carve_tunnel_between

Region = List[Coord2D]


@dataclass
class CaveRoom:
    id: int
    tiles: Region
    edge_tiles: List[Coord2D] = field(default_factory=list)
    connected: Set[int] = field(default_factory=set)
    is_main_room: bool = False
    is_accessible_from_main_room: bool = False

    @property
    def size(self) -> int:
        return len(self.tiles)

    def is_connected(self, other: "CaveRoom") -> bool:
        return other.id in self.connected

    def to_dict(self):
        return {
            "id": self.id,
            "size": self.size,
            "edge_tiles": len(self.edge_tiles),
            "connected": sorted(self.connected),
            "is_main_room": self.is_main_room,
            "is_accessible_from_main_room": self.is_accessible_from_main_room,
        }


@dataclass
class PruneReport:
    wall_regions_pruned: int = 0
    room_regions_pruned: int = 0
    rooms: List[CaveRoom] = field(default_factory=list)


def flood_fill_region(grid: Grid, start_x: int, start_y: int, value: int, visited: List[List[bool]]) -> Region:
    tiles: Region = []
    cells = grid.cells
    q = deque([(start_x, start_y)])
    visited[start_x][start_y] = True
    while q:
        tx, ty = q.popleft()
        tiles.append((tx, ty))
        for x in range(tx - 1, tx + 2):
            for y in range(ty - 1, ty + 2):
                if not (0 <= x < grid.width and 0 <= y < grid.height):
                    continue
                # orthogonal only: diagonal neighbours never join a region
                if (x == tx or y == ty) and not visited[x][y] and cells[x][y] == value:
                    visited[x][y] = True
                    q.append((x, y))
    return tiles


def find_regions(grid: Grid, value: int) -> List[Region]:
    """Return every maximal 4-connected region of ``value`` cells, in scan order."""
    regions: List[Region] = []
    visited = [[False for _ in range(grid.height)] for _ in range(grid.width)]
    for x in range(grid.width):
        for y in range(grid.height):
            if not visited[x][y] and grid.cells[x][y] == value:
                regions.append(flood_fill_region(grid, x, y, value, visited))
    return regions


def edge_tiles_of(grid: Grid, tiles: Iterable[Coord2D]) -> List[Coord2D]:
    """Member cells with at least one orthogonally adjacent SOLID cell."""
    edges = []
    for tx, ty in tiles:
        for dx, dy in ORTHOGONAL:
            nx, ny = tx + dx, ty + dy
            if grid.in_bounds(nx, ny) and grid.cells[nx][ny] == SOLID:
                edges.append((tx, ty))
                break
    return edges


def prune_regions(grid: Grid, wall_threshold: int, room_threshold: int) -> PruneReport:
    """Remove undersized regions in place and return the surviving open rooms.

    * SOLID regions smaller than ``wall_threshold`` become OPEN unless they
      touch the border ring.
    * OPEN regions smaller than ``room_threshold`` become SOLID unless they hold
      a protected cell or are the largest open region.

    Survivors are returned as classified ``CaveRoom`` objects (largest first).
    """
    report = PruneReport()
    for region in find_regions(grid, SOLID):
        if len(region) >= wall_threshold:
            continue
        if any(grid.is_border(x, y) for x, y in region):
            continue
        for x, y in region:
            grid.cells[x][y] = OPEN
        report.wall_regions_pruned += 1

    open_regions = find_regions(grid, OPEN)
    largest = max(open_regions, key=len) if open_regions else None
    survivors: List[Region] = []
    for region in open_regions:
        keep = (
            len(region) >= room_threshold
            or region is largest
            or any(grid.protected[x][y] for x, y in region)
        )
        if keep:
            survivors.append(region)
            continue
        for x, y in region:
            grid.cells[x][y] = SOLID
        report.room_regions_pruned += 1

    report.rooms = build_cave_rooms(grid, survivors)
    classify_rooms(report.rooms)
    return report


def build_cave_rooms(grid: Grid, regions: List[Region]) -> List[CaveRoom]:
    # stable sort keeps scan order between equal sizes
    ordered = sorted(regions, key=len, reverse=True)
    return [CaveRoom(i, region, edge_tiles_of(grid, region)) for i, region in enumerate(ordered)]


def connect_rooms(a: CaveRoom, b: CaveRoom) -> None:
    a.connected.add(b.id)
    b.connected.add(a.id)


def adjacency(rooms: List[CaveRoom]) -> Dict[int, Set[int]]:
    return {r.id: set(r.connected) for r in rooms}


def classify_rooms(rooms: List[CaveRoom]) -> Optional[CaveRoom]:
    """Mark the largest room as main and propagate accessibility from it.

    Returns the main room, or None when there are no rooms.
    """
    if not rooms:
        return None
    main = max(rooms, key=lambda r: r.size)
    for r in rooms:
        r.is_main_room = r is main
        r.is_accessible_from_main_room = False
    propagate_accessibility(rooms, main.id)
    return main


def propagate_accessibility(rooms: List[CaveRoom], main_id: int) -> Set[int]:
    """Breadth-first transitive closure over the room graph starting at ``main_id``."""
    by_id = {r.id: r for r in rooms}
    graph = adjacency(rooms)
    reached = {main_id}
    q = deque([main_id])
    while q:
        rid = q.popleft()
        for nid in graph.get(rid, ()):
            if nid not in reached:
                reached.add(nid)
                q.append(nid)
    for rid in reached:
        by_id[rid].is_accessible_from_main_room = True
    return reached


def _closest_edge_pair(a: CaveRoom, b: CaveRoom) -> Tuple[int, Coord2D, Coord2D]:
    best = None
    for ax, ay in a.edge_tiles:
        for bx, by in b.edge_tiles:
            d = (ax - bx) ** 2 + (ay - by) ** 2
            if best is None or d < best[0]:
                best = (d, (ax, ay), (bx, by))
    if best is None:
        # rooms without edge tiles: fall back to first tiles
        (ax, ay), (bx, by) = a.tiles[0], b.tiles[0]
        best = ((ax - bx) ** 2 + (ay - by) ** 2, (ax, ay), (bx, by))
    return best


def connect_closest_rooms(grid: Grid, rooms: List[CaveRoom], radius: int = 1) -> List[Tuple[int, int]]:
    """Carve passages until every room is reachable from the main room.

    First each room is linked to its nearest neighbour (by edge-tile distance);
    then, while any room is still cut off, the closest (cut off, reachable)
    pair is linked. Returns the list of carved room id pairs.
    """
    links: List[Tuple[int, int]] = []
    if len(rooms) < 2:
        return links
    main = classify_rooms(rooms)

    for room in rooms:
        if room.connected:
            continue
        best = None
        for other in rooms:
            if other is room:
                continue
            candidate = _closest_edge_pair(room, other)
            if best is None or candidate[0] < best[0][0]:
                best = (candidate, other)
        (_, tile_a, tile_b), other = best
        if not room.is_connected(other):
            carve_tunnel_between(grid, tile_a, tile_b, radius)
            connect_rooms(room, other)
            links.append((room.id, other.id))

    propagate_accessibility(rooms, main.id)
    while True:
        cut_off = [r for r in rooms if not r.is_accessible_from_main_room]
        if not cut_off:
            break
        reachable = [r for r in rooms if r.is_accessible_from_main_room]
        best = None
        for a in cut_off:
            for b in reachable:
                candidate = _closest_edge_pair(a, b)
                if best is None or candidate[0] < best[0][0]:
                    best = (candidate, a, b)
        (_, tile_a, tile_b), a, b = best
        carve_tunnel_between(grid, tile_a, tile_b, radius)
        connect_rooms(a, b)
        links.append((a.id, b.id))
        propagate_accessibility(rooms, main.id)
    return links


__all__ = [
    "Region",
    "CaveRoom",
    "PruneReport",
    "flood_fill_region",
    "find_regions",
    "edge_tiles_of",
    "prune_regions",
    "build_cave_rooms",
    "connect_rooms",
    "adjacency",
    "classify_rooms",
    "propagate_accessibility",
    "connect_closest_rooms",
]
