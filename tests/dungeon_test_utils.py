from cavemesh.dungeon import DungeonConfig
from cavemesh.dungeon.outlines import boundary_edges
from cavemesh.dungeon.tiles import OPEN, SOLID


def small_config(**overrides):
    """A grid small enough to keep tests fast while still placing several rooms."""
    values = dict(
        width=40,
        height=30,
        seed=1234,
        min_room_size=4,
        max_room_size=8,
        room_attempts=6,
    )
    values.update(overrides)
    return DungeonConfig(**values)


def border_cells(grid):
    for x in range(grid.width):
        yield x, 0
        yield x, grid.height - 1
    for y in range(1, grid.height - 1):
        yield 0, y
        yield grid.width - 1, y


def assert_border_solid(grid):
    bad = [(x, y) for x, y in border_cells(grid) if grid.cells[x][y] != SOLID]
    assert not bad, f"border cells not solid: {bad[:5]}"


def assert_protected_open(grid):
    bad = [(x, y) for x, y in grid.protected_cells() if grid.cells[x][y] != OPEN]
    assert not bad, f"protected cells turned solid: {bad[:5]}"


def outline_edges(outline):
    for a, b in zip(outline, outline[1:]):
        yield (a, b) if a < b else (b, a)


def assert_outlines_well_formed(mesh, outlines):
    edges = boundary_edges(mesh)
    for outline in outlines:
        assert outline[0] == outline[-1], "outline not closed"
        assert len(outline) >= 4
        for edge in outline_edges(outline):
            assert edge in edges, f"outline step {edge} is not a boundary edge"
