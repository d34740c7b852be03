"""Serialisation helpers: JSON-ready dicts, ASCII grids and Wavefront OBJ files."""
from __future__ import annotations

import os
from typing import Any, Dict, List, Optional, TextIO

from .grid import Grid
from .mesh import Mesh, WallMesh


def grid_to_ascii(grid: Grid) -> str:
    """Rows top to bottom (highest y first) so the text reads like a map."""
    return "\n".join(reversed(grid.to_rows()))


def result_to_dict(result, include_mesh: bool = True, include_attributes: bool = False) -> Dict[str, Any]:
    d: Dict[str, Any] = {
        "seed": result.seed,
        "size": [result.width, result.height],
        "config": result.config.to_dict(),
        "grid": result.grid.to_rows(),
        "rooms": [r.to_dict() for r in result.rooms],
        "cave_rooms": [r.to_dict() for r in result.cave_rooms],
        "tunnels": [list(t) for t in result.tunnels],
        "passages": [list(p) for p in result.passages],
        "outlines": [list(o) for o in result.outlines],
        "metrics": result.metrics,
    }
    if include_mesh:
        d["mesh"] = result.mesh.to_dict(include_attributes=include_attributes)
        if result.walls is not None:
            d["walls"] = result.walls.to_dict()
        if result.edge_paths is not None:
            d["edge_paths"] = [[list(p) for p in path] for path in result.edge_paths]
    return d


def _write_faces(out: TextIO, triangles: List[int], offset: int, uv: bool) -> None:
    for i in range(0, len(triangles), 3):
        a, b, c = (triangles[i + k] + offset + 1 for k in range(3))
        if uv:
            out.write(f"f {a}/{a} {b}/{b} {c}/{c}\n")
        else:
            out.write(f"f {a} {b} {c}\n")


def write_obj(mesh: Mesh, path: str, walls: Optional[WallMesh] = None, name: str = "cave") -> str:
    """Write the floor mesh (and optional walls) as a Wavefront OBJ file.

    Face indices are 1-based. Floor faces reference their UVs when the mesh
    carries them; wall vertices follow the floor vertices in one shared list.
    Returns the path written.
    """
    directory = os.path.dirname(path)
    if directory:
        os.makedirs(directory, exist_ok=True)
    has_uv = len(mesh.uvs) == len(mesh.vertices) and bool(mesh.uvs)
    with open(path, "w", encoding="utf-8") as out:
        out.write(f"# cavemesh export: {len(mesh.vertices)} floor vertices, {mesh.triangle_count} triangles\n")
        out.write(f"o {name}\n")
        for x, y, z in mesh.vertices:
            out.write(f"v {x:.6f} {y:.6f} {z:.6f}\n")
        if has_uv:
            for u, v in mesh.uvs:
                out.write(f"vt {u:.6f} {v:.6f}\n")
        _write_faces(out, mesh.triangles, 0, has_uv)
        if walls is not None and walls.vertices:
            out.write(f"o {name}_walls\n")
            for x, y, z in walls.vertices:
                out.write(f"v {x:.6f} {y:.6f} {z:.6f}\n")
            _write_faces(out, walls.triangles, len(mesh.vertices), False)
    return path


__all__ = ["grid_to_ascii", "result_to_dict", "write_obj"]
