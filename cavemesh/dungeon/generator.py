"""Structural layout phases: noise fill, room placement, tunnels, smoothing, pruning."""
from __future__ import annotations

import random
from typing import List, NamedTuple, Optional, Tuple

from .config import DungeonConfig
from .grid import Grid
from .regions import CaveRoom, PruneReport, connect_closest_rooms, prune_regions
from .rooms import Room, place_rooms
from .seeds import roll_percent
from .smoothing import smooth_passes
from .tiles import OPEN, SOLID
from .tunnels import connect_rooms_with_tunnels


class LayoutOutputs(NamedTuple):
    grid: Grid
    rooms: List[Room]
    cave_rooms: List[CaveRoom]
    tunnels: List[Tuple[int, int]]
    passages: List[Tuple[int, int]]
    prune: PruneReport


def random_fill(grid: Grid, fill_percent: int, rng: random.Random) -> None:
    """Fill the interior with noise, one draw per cell in column-major order.

    Protected cells are left OPEN without consuming a draw, so a grid that
    already carries rooms can be re-rolled around them.
    """
    for x in range(grid.width):
        for y in range(grid.height):
            if grid.is_border(x, y):
                grid.cells[x][y] = SOLID
            elif grid.protected[x][y]:
                grid.cells[x][y] = OPEN
            else:
                grid.cells[x][y] = SOLID if roll_percent(rng) < fill_percent else OPEN


class Generator:
    def __init__(self, config: DungeonConfig, rng: random.Random):
        self.config = config
        self.rng = rng

    def init_grid(self) -> Grid:
        return Grid(self.config.width, self.config.height, fill=SOLID)

    def run(self, rooms: Optional[List[Room]] = None, grid: Optional[Grid] = None) -> LayoutOutputs:
        """Run every structural phase and return the finished layout.

        When ``rooms`` and the ``grid`` holding their protected mask are given,
        placement is skipped and only the non-room cells are re-rolled.
        """
        cfg = self.config
        if grid is None:
            grid = self.init_grid()
            random_fill(grid, cfg.fill_percent, self.rng)
            rooms = place_rooms(grid, cfg, self.rng)
        else:
            grid = grid.copy()
            random_fill(grid, cfg.fill_percent, self.rng)
            rooms = list(rooms or [])

        tunnels = connect_rooms_with_tunnels(grid, rooms, self.rng, cfg.tunnel_radius)
        grid = smooth_passes(grid, cfg.smooth_passes)
        report = prune_regions(grid, cfg.wall_threshold_size, cfg.room_threshold_size)

        if cfg.post_blend_smooths:
            grid = smooth_passes(grid, cfg.post_blend_smooths)
            report = _merge_reports(report, prune_regions(grid, cfg.wall_threshold_size, cfg.room_threshold_size))

        passages: List[Tuple[int, int]] = []
        if cfg.connect_regions and len(report.rooms) > 1:
            passages = connect_closest_rooms(grid, report.rooms)
            # passages can split walls into fragments; settle the grid again
            report = _merge_reports(report, prune_regions(grid, cfg.wall_threshold_size, cfg.room_threshold_size))

        return LayoutOutputs(grid, rooms, report.rooms, tunnels, passages, report)


def _merge_reports(first: PruneReport, second: PruneReport) -> PruneReport:
    return PruneReport(
        wall_regions_pruned=first.wall_regions_pruned + second.wall_regions_pruned,
        room_regions_pruned=first.room_regions_pruned + second.room_regions_pruned,
        rooms=second.rooms,
    )


def generate_layout(config: DungeonConfig, rng: random.Random) -> LayoutOutputs:
    return Generator(config, rng).run()


def regenerate_layout(
    config: DungeonConfig, rng: random.Random, rooms: List[Room], previous: Grid
) -> LayoutOutputs:
    """Re-roll every non-room cell of ``previous`` and rerun the later phases."""
    return Generator(config, rng).run(rooms=rooms, grid=previous)


__all__ = ["LayoutOutputs", "Generator", "random_fill", "generate_layout", "regenerate_layout"]
