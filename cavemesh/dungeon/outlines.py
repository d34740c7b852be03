"""Boundary tracing over a triangulated mesh.

An edge lies on the outline when exactly one triangle uses it. Outlines are
walked vertex to vertex along such edges, starting only from vertices the
triangulator did not mark as interior, and closed by repeating the start
vertex at the end.
"""
from __future__ import annotations

from collections import Counter
from typing import Dict, List, Optional, Set, Tuple

from .errors import MeshInvariantError
from .mesh import Mesh, Triangle, orphan_vertices

Outline = List[int]
TriangleIndex = Dict[int, List[Triangle]]


def build_triangle_index(mesh: Mesh) -> TriangleIndex:
    """Map each vertex index to the triangles that reference it."""
    index: TriangleIndex = {}
    for tri in mesh.iter_triangles():
        for v in tri:
            index.setdefault(v, []).append(tri)
    return index


def is_outline_edge(index: TriangleIndex, a: int, b: int) -> bool:
    shared = 0
    for tri in index.get(a, ()):
        if b in tri:
            shared += 1
            if shared > 1:
                return False
    return shared == 1


def next_outline_vertex(index: TriangleIndex, vertex: int, checked: Set[int]) -> Optional[int]:
    for tri in index.get(vertex, ()):
        for other in tri:
            if other != vertex and other not in checked and is_outline_edge(index, vertex, other):
                return other
    return None


def trace_outlines(mesh: Mesh) -> List[Outline]:
    """Return every closed outline of ``mesh`` (``outline[0] == outline[-1]``).

    The mesh's own checked set is left untouched; tracing works on a copy.
    Raises MeshInvariantError when a walk ends somewhere it cannot close.
    """
    if mesh.is_empty():
        return []
    index = build_triangle_index(mesh)
    checked = set(mesh.checked_vertices)
    outlines: List[Outline] = []
    for start in range(len(mesh.vertices)):
        if start in checked:
            continue
        nxt = next_outline_vertex(index, start, checked)
        if nxt is None:
            continue
        checked.add(start)
        outline = [start]
        while nxt is not None:
            outline.append(nxt)
            checked.add(nxt)
            nxt = next_outline_vertex(index, nxt, checked)
        if len(outline) < 3 or not is_outline_edge(index, outline[-1], start):
            raise MeshInvariantError(
                f"outline starting at vertex {start} did not close (ended at {outline[-1]})"
            )
        outline.append(start)
        outlines.append(outline)
    return outlines


def edge_use_counts(mesh: Mesh) -> Counter:
    """Count how many triangles use each undirected edge."""
    counts: Counter = Counter()
    for a, b, c in mesh.iter_triangles():
        for u, v in ((a, b), (b, c), (c, a)):
            counts[(u, v) if u < v else (v, u)] += 1
    return counts


def boundary_edges(mesh: Mesh) -> Set[Tuple[int, int]]:
    return {edge for edge, n in edge_use_counts(mesh).items() if n == 1}


def check_mesh(mesh: Mesh) -> None:
    """Raise MeshInvariantError unless ``mesh`` is well formed.

    Every triangle index must point at a vertex, every vertex must be used by
    some triangle and every edge must be shared by one or two triangles.
    """
    if len(mesh.triangles) % 3:
        raise MeshInvariantError(f"triangle list length {len(mesh.triangles)} is not a multiple of 3")
    n = len(mesh.vertices)
    bad = [i for i in mesh.triangles if not 0 <= i < n]
    if bad:
        raise MeshInvariantError(f"triangle indices out of range: {bad[:5]}")
    orphans = orphan_vertices(mesh)
    if orphans:
        raise MeshInvariantError(f"{len(orphans)} vertices are not referenced by any triangle")
    overused = [edge for edge, count in edge_use_counts(mesh).items() if count > 2]
    if overused:
        raise MeshInvariantError(f"edges shared by more than two triangles: {overused[:5]}")


__all__ = [
    "Outline",
    "TriangleIndex",
    "build_triangle_index",
    "is_outline_edge",
    "next_outline_vertex",
    "trace_outlines",
    "edge_use_counts",
    "boundary_edges",
    "check_mesh",
]
