"""Mesh value types, the builder used by the triangulator, and wall extrusion.

``MeshBuilder`` is owned by a single triangulation call; ``build()`` hands the
finished ``Mesh`` to the caller, who passes it on to the outline tracer.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterator, List, Optional, Sequence, Set, Tuple

from .errors import MeshInvariantError

Vec3 = Tuple[float, float, float]
Vec2 = Tuple[float, float]
Color = Tuple[float, float, float, float]
Triangle = Tuple[int, int, int]

ROOM_COLOR: Color = (1.0, 0.0, 0.0, 1.0)
WALL_COLOR: Color = (0.5, 0.5, 0.5, 1.0)


@dataclass
class Mesh:
    vertices: List[Vec3] = field(default_factory=list)
    triangles: List[int] = field(default_factory=list)
    checked_vertices: Set[int] = field(default_factory=set)
    uvs: List[Vec2] = field(default_factory=list)
    colors: List[Color] = field(default_factory=list)

    @property
    def triangle_count(self) -> int:
        return len(self.triangles) // 3

    def is_empty(self) -> bool:
        return not self.vertices

    def iter_triangles(self) -> Iterator[Triangle]:
        t = self.triangles
        for i in range(0, len(t), 3):
            yield (t[i], t[i + 1], t[i + 2])

    def to_dict(self, include_attributes: bool = False):
        d = {
            "vertices": [list(v) for v in self.vertices],
            "triangles": list(self.triangles),
        }
        if include_attributes:
            d["uvs"] = [list(uv) for uv in self.uvs]
            d["colors"] = [list(c) for c in self.colors]
        return d


@dataclass
class WallMesh:
    vertices: List[Vec3] = field(default_factory=list)
    triangles: List[int] = field(default_factory=list)

    @property
    def segment_count(self) -> int:
        return len(self.vertices) // 4

    def to_dict(self):
        return {"vertices": [list(v) for v in self.vertices], "triangles": list(self.triangles)}


class MeshBuilder:
    """Accumulates vertices and triangles for one triangulation pass.

    Nodes are deduplicated by identity: a node receives a vertex index the
    first time it is referenced and every later reference reuses it.
    """

    def __init__(self):
        self.vertices: List[Vec3] = []
        self.triangles: List[int] = []
        self.checked: Set[int] = set()
        # grid cell each vertex was derived from (for colour/UV attributes)
        self.sources: List[Tuple[int, int]] = []

    def assign_vertices(self, points: Sequence) -> None:
        for p in points:
            if p.vertex_index == -1:
                p.vertex_index = len(self.vertices)
                self.vertices.append(p.position)
                self.sources.append(p.cell)

    def add_triangle(self, a, b, c) -> None:
        for node in (a, b, c):
            if node.vertex_index < 0:
                raise MeshInvariantError(f"triangle references unindexed node at {node.position}")
        self.triangles.extend((a.vertex_index, b.vertex_index, c.vertex_index))

    def mesh_from_points(self, points: Sequence) -> None:
        """Fan-triangulate an ordered polygon from its first point."""
        self.assign_vertices(points)
        for i in range(1, len(points) - 1):
            self.add_triangle(points[0], points[i], points[i + 1])

    def mark_checked(self, points: Sequence) -> None:
        for p in points:
            self.checked.add(p.vertex_index)

    def build(self) -> Mesh:
        return Mesh(self.vertices, self.triangles, self.checked)


def inverse_lerp(a: float, b: float, value: float) -> float:
    if a == b:
        return 0.0
    return min(1.0, max(0.0, (value - a) / (b - a)))


def assign_uvs(mesh: Mesh, map_width: int, map_height: int, square_size: float, tiles: int) -> None:
    half_w = map_width / 2 * square_size
    half_h = map_height / 2 * square_size
    mesh.uvs = [
        (inverse_lerp(-half_w, half_w, x) * tiles, inverse_lerp(-half_h, half_h, z) * tiles)
        for x, _y, z in mesh.vertices
    ]


def extrude_walls(mesh: Mesh, outlines: Sequence[Sequence[int]], wall_height: float) -> WallMesh:
    """Build vertical wall quads hanging ``wall_height`` below each outline segment."""
    walls = WallMesh()
    verts = mesh.vertices
    for outline in outlines:
        for i in range(len(outline) - 1):
            start = len(walls.vertices)
            a = verts[outline[i]]
            b = verts[outline[i + 1]]
            walls.vertices.append(a)
            walls.vertices.append(b)
            walls.vertices.append((a[0], a[1] - wall_height, a[2]))
            walls.vertices.append((b[0], b[1] - wall_height, b[2]))
            walls.triangles.extend((start + 0, start + 2, start + 3))
            walls.triangles.extend((start + 3, start + 1, start + 0))
    return walls


def edge_paths(mesh: Mesh, outlines: Sequence[Sequence[int]]) -> List[List[Vec2]]:
    """Project each outline onto the floor plane as a 2D collider path (x, z)."""
    verts = mesh.vertices
    return [[(verts[i][0], verts[i][2]) for i in outline] for outline in outlines]


def orphan_vertices(mesh: Mesh) -> Optional[List[int]]:
    used = set(mesh.triangles)
    missing = [i for i in range(len(mesh.vertices)) if i not in used]
    return missing or None


__all__ = [
    "Mesh",
    "WallMesh",
    "MeshBuilder",
    "Vec3",
    "Vec2",
    "Color",
    "Triangle",
    "ROOM_COLOR",
    "WALL_COLOR",
    "inverse_lerp",
    "assign_uvs",
    "extrude_walls",
    "edge_paths",
    "orphan_vertices",
]
