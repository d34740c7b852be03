"""Marching-squares triangulation of a finished grid.

Every cell becomes a control node (``active`` when the cell is SOLID) with two
midpoint nodes: halfway to the node on its right and halfway to the node
above. Each 2x2 block of control nodes forms a square whose 4-bit
configuration ``8*tl + 4*tr + 2*br + 1*bl`` selects an ordered polygon from
``CONFIGURATION_POINTS``. Polygons are fan-triangulated from their first
point.

Squares with all four corners solid (configuration 15) mark their corners as
checked: those vertices are interior and never start an outline trace.
"""
from __future__ import annotations

from typing import Dict, List, Optional, Tuple

from .grid import Grid
from .mesh import ROOM_COLOR, WALL_COLOR, Mesh, MeshBuilder, Vec3, assign_uvs
from .tiles import SOLID


class Node:
    __slots__ = ("position", "vertex_index", "cell")

    def __init__(self, position: Vec3, cell: Tuple[int, int]):
        self.position = position
        self.vertex_index = -1
        self.cell = cell


class ControlNode(Node):
    __slots__ = ("active", "above", "right")

    def __init__(self, position: Vec3, active: bool, size: float, cell: Tuple[int, int]):
        super().__init__(position, cell)
        self.active = active
        x, y, z = position
        self.above = Node((x, y, z + size / 2), cell)
        self.right = Node((x + size / 2, y, z), cell)


class Square:
    __slots__ = (
        "top_left",
        "top_right",
        "bottom_right",
        "bottom_left",
        "centre_top",
        "centre_right",
        "centre_bottom",
        "centre_left",
        "configuration",
    )

    def __init__(self, top_left: ControlNode, top_right: ControlNode, bottom_right: ControlNode, bottom_left: ControlNode):
        self.top_left = top_left
        self.top_right = top_right
        self.bottom_right = bottom_right
        self.bottom_left = bottom_left
        self.centre_top = top_left.right
        self.centre_right = bottom_right.above
        self.centre_bottom = bottom_left.right
        self.centre_left = bottom_left.above
        self.configuration = (
            8 * top_left.active + 4 * top_right.active + 2 * bottom_right.active + 1 * bottom_left.active
        )


# configuration -> ordered polygon points (attribute names on Square)
CONFIGURATION_POINTS: Dict[int, Tuple[str, ...]] = {
    0: (),
    # 1 point
    1: ("centre_left", "centre_bottom", "bottom_left"),
    2: ("bottom_right", "centre_bottom", "centre_right"),
    4: ("top_right", "centre_right", "centre_top"),
    8: ("top_left", "centre_top", "centre_left"),
    # 2 points
    3: ("centre_right", "bottom_right", "bottom_left", "centre_left"),
    6: ("centre_top", "top_right", "bottom_right", "centre_bottom"),
    9: ("top_left", "centre_top", "centre_bottom", "bottom_left"),
    12: ("top_left", "top_right", "centre_right", "centre_left"),
    5: ("centre_top", "top_right", "centre_right", "centre_bottom", "bottom_left", "centre_left"),
    10: ("top_left", "centre_top", "centre_right", "bottom_right", "centre_bottom", "centre_left"),
    # 3 points
    7: ("centre_top", "top_right", "bottom_right", "bottom_left", "centre_left"),
    11: ("top_left", "centre_top", "centre_right", "bottom_right", "bottom_left"),
    13: ("top_left", "top_right", "centre_right", "centre_bottom", "bottom_left"),
    14: ("top_left", "top_right", "bottom_right", "centre_bottom", "centre_left"),
    # 4 points
    15: ("top_left", "top_right", "bottom_right", "bottom_left"),
}

FULL_SQUARE = 15


class SquareGrid:
    def __init__(self, grid: Grid, square_size: float = 1.0):
        node_count_x = grid.width
        node_count_y = grid.height
        map_width = node_count_x * square_size
        map_height = node_count_y * square_size
        self.has_open_cell = False

        control: List[List[ControlNode]] = []
        for x in range(node_count_x):
            column = []
            for y in range(node_count_y):
                pos = (
                    -map_width / 2 + x * square_size + square_size / 2,
                    0.0,
                    -map_height / 2 + y * square_size + square_size / 2,
                )
                active = grid.cells[x][y] == SOLID
                if not active:
                    self.has_open_cell = True
                column.append(ControlNode(pos, active, square_size, (x, y)))
            control.append(column)

        self.squares: List[List[Square]] = [
            [
                Square(control[x][y + 1], control[x + 1][y + 1], control[x + 1][y], control[x][y])
                for y in range(node_count_y - 1)
            ]
            for x in range(node_count_x - 1)
        ]


def triangulate_square(builder: MeshBuilder, square: Square) -> None:
    names = CONFIGURATION_POINTS[square.configuration]
    if not names:
        return
    points = [getattr(square, n) for n in names]
    builder.mesh_from_points(points)
    if square.configuration == FULL_SQUARE:
        builder.mark_checked(points)


def triangulate(
    grid: Grid,
    square_size: float = 1.0,
    uv_tiles: Optional[int] = 10,
) -> Mesh:
    """Triangulate ``grid`` into a floor-plane mesh of its SOLID area.

    Vertex colours mark vertices whose source cell is protected (room
    interior). A grid without a single OPEN cell has no boundary and
    yields an empty mesh.
    """
    square_grid = SquareGrid(grid, square_size)
    if not square_grid.has_open_cell:
        return Mesh()
    builder = MeshBuilder()
    for column in square_grid.squares:
        for square in column:
            triangulate_square(builder, square)
    mesh = builder.build()

    if uv_tiles:
        assign_uvs(mesh, grid.width, grid.height, square_size, uv_tiles)
    mesh.colors = [
        ROOM_COLOR if grid.protected[cx][cy] else WALL_COLOR for cx, cy in builder.sources
    ]
    return mesh


__all__ = [
    "Node",
    "ControlNode",
    "Square",
    "SquareGrid",
    "CONFIGURATION_POINTS",
    "FULL_SQUARE",
    "triangulate_square",
    "triangulate",
]
