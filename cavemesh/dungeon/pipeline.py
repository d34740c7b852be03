"""Pipeline orchestration for cave generation.

``generate`` runs one complete pass (layout, then mesh, then outlines) and
returns an immutable-by-convention ``GenerationResult``. ``regenerate_fill``
is the cheaper variant that keeps the previous rooms and only re-rolls the
cells around them. ``DungeonGenerator`` is the caller-owned controller that
serializes passes and publishes each finished result in one assignment.
"""
from __future__ import annotations

import threading
import time
from dataclasses import dataclass, field, replace
from typing import Any, Callable, Dict, List, Optional, Tuple

from ..logging_utils import get_logger
from .config import DungeonConfig
from .errors import ConfigError, DungeonError, GenerationBusyError
from .generator import LayoutOutputs, generate_layout, regenerate_layout
from .grid import Grid
from .marching import triangulate
from .mesh import Mesh, Vec2, WallMesh, edge_paths, extrude_walls
from .metrics import init_metrics
from .outlines import Outline, check_mesh, trace_outlines
from .regions import CaveRoom
from .rooms import Room
from .seeds import coerce_seed, make_rng

log = get_logger("cavemesh.dungeon")


@dataclass
class GenerationResult:
    config: DungeonConfig
    seed: int
    grid: Grid
    rooms: List[Room]
    cave_rooms: List[CaveRoom]
    mesh: Mesh
    outlines: List[Outline]
    walls: Optional[WallMesh] = None
    edge_paths: Optional[List[List[Vec2]]] = None
    tunnels: List[Tuple[int, int]] = field(default_factory=list)
    passages: List[Tuple[int, int]] = field(default_factory=list)
    metrics: Dict[str, Any] = field(default_factory=dict)

    @property
    def width(self) -> int:
        return self.grid.width

    @property
    def height(self) -> int:
        return self.grid.height

    @property
    def main_room(self) -> Optional[CaveRoom]:
        for room in self.cave_rooms:
            if room.is_main_room:
                return room
        return None


def resolve_seed(config: DungeonConfig) -> int:
    if config.use_random_seed:
        return coerce_seed(None)
    return coerce_seed(config.seed)


class _PhaseTimer:
    def __init__(self):
        self.start = time.perf_counter()
        self.phase_ms: Dict[str, int] = {}

    def __call__(self, label: str, fn: Callable, *a, **k):
        ps = time.perf_counter()
        r = fn(*a, **k)
        self.phase_ms[label] = int((time.perf_counter() - ps) * 1000)
        return r

    def total_ms(self) -> int:
        return int((time.perf_counter() - self.start) * 1000)


def generate(config: DungeonConfig) -> GenerationResult:
    """Run a full generation pass for ``config``.

    Raises ConfigError before doing any work when the config is unusable.
    The seed actually used is reported on the result (and in
    ``result.config.seed``) so a random-seed run can be reproduced.
    """
    config.validate()
    seed = resolve_seed(config)
    _phase = _PhaseTimer()
    rng = make_rng(seed)
    layout = _phase("layout", generate_layout, config, rng)
    return _finish(config, seed, layout, _phase)


def regenerate_fill(previous: GenerationResult, config: Optional[DungeonConfig] = None) -> GenerationResult:
    """Re-roll the non-room cells of ``previous`` and rebuild the mesh.

    Room rectangles and the protected mask carry over unchanged; the noise is
    drawn again from the previous seed with the (possibly new) fill percent.
    Grid dimensions cannot change.
    """
    cfg = config or previous.config
    cfg.validate()
    if (cfg.width, cfg.height) != (previous.width, previous.height):
        raise ConfigError(
            f"regenerate_fill cannot resize a {previous.width}x{previous.height} layout "
            f"to {cfg.width}x{cfg.height}"
        )
    seed = previous.seed
    _phase = _PhaseTimer()
    rng = make_rng(seed)
    layout = _phase("layout", regenerate_layout, cfg, rng, previous.rooms, previous.grid)
    return _finish(cfg, seed, layout, _phase)


def _finish(config: DungeonConfig, seed: int, layout: LayoutOutputs, _phase: _PhaseTimer) -> GenerationResult:
    grid = layout.grid
    bordered = _phase("border", grid.bordered, config.border_size)
    mesh = _phase("triangulate", triangulate, bordered, config.square_size, config.uv_tiles)
    _phase("check_mesh", check_mesh, mesh)
    outlines = _phase("outlines", trace_outlines, mesh)

    walls = None
    paths = None
    if config.is_2d:
        paths = _phase("edge_paths", edge_paths, mesh, outlines)
    else:
        walls = _phase("walls", extrude_walls, mesh, outlines, config.wall_height)

    metrics = init_metrics()
    metrics.update(
        rooms_attempted=config.room_attempts,
        rooms_placed=len(layout.rooms),
        tunnels_carved=len(layout.tunnels),
        passages_carved=len(layout.passages),
        wall_regions_pruned=layout.prune.wall_regions_pruned,
        room_regions_pruned=layout.prune.room_regions_pruned,
        cave_rooms=len(layout.cave_rooms),
        isolated_rooms=sum(1 for r in layout.cave_rooms if not r.is_accessible_from_main_room),
        vertices=len(mesh.vertices),
        triangles=mesh.triangle_count,
        outlines=len(outlines),
        wall_segments=walls.segment_count if walls is not None else 0,
    )
    metrics["runtime_ms"] = _phase.total_ms()
    metrics["phase_ms"] = _phase.phase_ms

    if mesh.is_empty():
        log.warn(event="empty_mesh", seed=seed, width=grid.width, height=grid.height, fill=config.fill_percent)
    log.debug(event="generation_phases", seed=seed, **{f"{k}_ms": v for k, v in _phase.phase_ms.items()})
    log.info(
        event="generation_complete",
        seed=seed,
        width=grid.width,
        height=grid.height,
        rooms=len(layout.rooms),
        cave_rooms=len(layout.cave_rooms),
        outlines=len(outlines),
        runtime_ms=metrics["runtime_ms"],
    )
    return GenerationResult(
        config=replace(config, seed=seed, use_random_seed=False),
        seed=seed,
        grid=grid,
        rooms=layout.rooms,
        cave_rooms=layout.cave_rooms,
        mesh=mesh,
        outlines=outlines,
        walls=walls,
        edge_paths=paths,
        tunnels=layout.tunnels,
        passages=layout.passages,
        metrics=metrics,
    )


class DungeonGenerator:
    """Caller-owned controller around ``generate`` / ``regenerate_fill``.

    Only one pass runs at a time; a second request while one is in flight is
    rejected with GenerationBusyError rather than queued. ``result`` always
    points at the last completed pass and ``ready`` is False while a pass runs.
    """

    def __init__(self, config: Optional[DungeonConfig] = None):
        self.config = config or DungeonConfig()
        self.result: Optional[GenerationResult] = None
        self.ready = False
        self._lock = threading.Lock()

    @property
    def busy(self) -> bool:
        return self._lock.locked()

    def generate(self, config: Optional[DungeonConfig] = None) -> GenerationResult:
        cfg = config or self.config
        return self._run(lambda: generate(cfg))

    def regenerate_fill(
        self, fill_percent: Optional[int] = None, previous: Optional[GenerationResult] = None
    ) -> GenerationResult:
        """Re-roll ``previous`` (default: the last published result) at a new fill."""
        previous = previous or self.result
        if previous is None:
            raise DungeonError("no layout to re-roll; call generate() first")
        cfg = previous.config
        if fill_percent is not None:
            cfg = replace(cfg, fill_percent=fill_percent)
        return self._run(lambda: regenerate_fill(previous, cfg))

    def _run(self, fn: Callable[[], GenerationResult]) -> GenerationResult:
        if not self._lock.acquire(blocking=False):
            raise GenerationBusyError("a generation pass is already running")
        try:
            self.ready = False
            result = fn()
            self.result = result
            return result
        finally:
            self.ready = self.result is not None
            self._lock.release()


__all__ = [
    "GenerationResult",
    "DungeonGenerator",
    "generate",
    "regenerate_fill",
    "resolve_seed",
]
