"""Public dungeon package interface.

Layout generation, marching-squares meshing and outline tracing. Most callers
need only ``DungeonConfig`` plus ``generate`` (or a ``DungeonGenerator``).
"""

from .config import DungeonConfig  # noqa: F401
from .errors import (  # noqa: F401
    ConfigError,
    DungeonError,
    GenerationBusyError,
    MeshInvariantError,
)
from .grid import Grid  # noqa: F401
from .mesh import Mesh, WallMesh, edge_paths, extrude_walls  # noqa: F401
from .outlines import trace_outlines  # noqa: F401
from .pipeline import (  # noqa: F401
    DungeonGenerator,
    GenerationResult,
    generate,
    regenerate_fill,
)
from .tiles import OPEN, SOLID  # noqa: F401

__all__ = [
    "DungeonConfig",
    "DungeonError",
    "ConfigError",
    "MeshInvariantError",
    "GenerationBusyError",
    "Grid",
    "Mesh",
    "WallMesh",
    "extrude_walls",
    "edge_paths",
    "trace_outlines",
    "DungeonGenerator",
    "GenerationResult",
    "generate",
    "regenerate_fill",
    "OPEN",
    "SOLID",
]
