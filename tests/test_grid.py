from cavemesh.dungeon.grid import Grid, solid_neighbour_count
from cavemesh.dungeon.tiles import OPEN, SOLID


def test_new_grid_is_column_major_and_solid():
    g = Grid(4, 3)
    assert len(g.cells) == 4 and len(g.cells[0]) == 3
    assert g.count(SOLID) == 12
    assert list(g.protected_cells()) == []


def test_rows_round_trip_marks_rooms():
    rows = ["#####", "#R..#", "#####"]
    g = Grid.from_rows(rows)
    assert (g.width, g.height) == (5, 3)
    assert g.cells[1][1] == OPEN and g.protected[1][1]
    assert g.cells[2][1] == OPEN and not g.protected[2][1]
    assert g.to_rows() == rows


def test_out_of_bounds_neighbours_count_as_solid():
    g = Grid(3, 3, fill=OPEN)
    assert solid_neighbour_count(g, 0, 0) == 5
    assert solid_neighbour_count(g, 1, 0) == 3
    assert solid_neighbour_count(g, 1, 1) == 0


def test_bordered_adds_solid_ring_and_shifts_protected():
    g = Grid.from_rows(["...", ".R.", "..."])
    b = g.bordered(1)
    assert (b.width, b.height) == (5, 5)
    assert b.to_rows() == ["#####", "#...#", "#.R.#", "#...#", "#####"]
    assert list(b.protected_cells()) == [(2, 2)]


def test_copy_is_independent():
    g = Grid(3, 3)
    c = g.copy()
    c.cells[1][1] = OPEN
    c.protected[1][1] = True
    assert g.cells[1][1] == SOLID and not g.protected[1][1]
    assert g != c

