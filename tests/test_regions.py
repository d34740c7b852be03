from cavemesh.dungeon.grid import Grid
from cavemesh.dungeon.regions import (
    CaveRoom,
    classify_rooms,
    connect_closest_rooms,
    connect_rooms,
    edge_tiles_of,
    find_regions,
    propagate_accessibility,
    prune_regions,
)
from cavemesh.dungeon.tiles import OPEN, SOLID

TWO_CAVES = [
    "##########",
    "#....##..#",
    "#....##..#",
    "#....#####",
    "##########",
]


def test_diagonal_cells_are_separate_regions():
    g = Grid.from_rows(["#####", "#.###", "##.##", "#####"])
    regions = find_regions(g, OPEN)
    assert len(regions) == 2
    assert all(len(r) == 1 for r in regions)


def test_regions_cover_every_cell_once():
    g = Grid.from_rows(TWO_CAVES)
    opens = find_regions(g, OPEN)
    solids = find_regions(g, SOLID)
    cells = [c for r in opens + solids for c in r]
    assert len(cells) == len(set(cells)) == g.width * g.height
    assert sorted(len(r) for r in opens) == [4, 12]
    assert len(solids) == 1


def test_small_wall_island_removed():
    rows = ["#######", "#.....#", "#.....#", "#..#..#", "#.....#", "#.....#", "#######"]
    g = Grid.from_rows(rows)
    report = prune_regions(g, wall_threshold=40, room_threshold=0)
    assert g.cells[3][3] == OPEN
    assert report.wall_regions_pruned == 1
    # the border ring is smaller than the threshold but is never removed
    assert g.cells[0][0] == SOLID


def test_small_cave_filled_but_largest_kept():
    g = Grid.from_rows(TWO_CAVES)
    report = prune_regions(g, wall_threshold=40, room_threshold=50)
    assert report.room_regions_pruned == 1
    assert g.cells[7][1] == SOLID and g.cells[8][2] == SOLID
    assert g.cells[1][1] == OPEN
    assert len(report.rooms) == 1
    main = report.rooms[0]
    assert main.is_main_room and main.is_accessible_from_main_room
    assert main.size == 12


def test_region_with_room_cell_survives():
    rows = list(TWO_CAVES)
    rows[1] = "#....##R.#"
    g = Grid.from_rows(rows)
    report = prune_regions(g, wall_threshold=40, room_threshold=50)
    assert report.room_regions_pruned == 0
    assert [r.size for r in report.rooms] == [12, 4]
    assert report.rooms[0].is_main_room
    assert not report.rooms[1].is_accessible_from_main_room


def test_pruning_is_idempotent():
    g = Grid.from_rows(TWO_CAVES)
    prune_regions(g, 40, 50)
    settled = g.copy()
    report = prune_regions(g, 40, 50)
    assert g == settled
    assert report.wall_regions_pruned == 0 and report.room_regions_pruned == 0


def test_edge_tiles_touch_solid():
    g = Grid.from_rows(TWO_CAVES)
    region = max(find_regions(g, OPEN), key=len)
    edges = set(edge_tiles_of(g, region))
    # every cell of the 4x3 block except the two middle cells of row y=2
    assert (2, 2) not in edges and (3, 2) not in edges
    assert len(edges) == 10


def test_accessibility_is_transitive():
    rooms = [CaveRoom(i, [(i, 0)]) for i in range(4)]
    connect_rooms(rooms[0], rooms[1])
    connect_rooms(rooms[1], rooms[2])
    reached = propagate_accessibility(rooms, 0)
    assert reached == {0, 1, 2}
    assert [r.is_accessible_from_main_room for r in rooms] == [True, True, True, False]
    assert rooms[2].is_connected(rooms[1]) and not rooms[3].is_connected(rooms[0])


def test_classify_picks_largest():
    rooms = [CaveRoom(0, [(0, 0)]), CaveRoom(1, [(1, 0), (2, 0)])]
    main = classify_rooms(rooms)
    assert main is rooms[1]
    assert rooms[1].is_main_room and not rooms[0].is_main_room
    assert classify_rooms([]) is None


def test_connect_closest_rooms_joins_every_cave():
    rows = list(TWO_CAVES)
    rows[1] = "#....##R.#"
    g = Grid.from_rows(rows)
    report = prune_regions(g, 40, 50)
    links = connect_closest_rooms(g, report.rooms)
    assert links
    assert all(r.is_accessible_from_main_room for r in report.rooms)
    assert len(find_regions(g, OPEN)) == 1
    assert g.cells[0][1] == SOLID and g.cells[5][0] == SOLID
