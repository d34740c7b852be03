from cavemesh.dungeon.grid import Grid
from cavemesh.dungeon.rooms import Room
from cavemesh.dungeon.seeds import make_rng
from cavemesh.dungeon.tiles import OPEN, SOLID
from cavemesh.dungeon.tunnels import bresenham_line, carve_disc, carve_tunnel_between, connect_rooms_with_tunnels
from tests.dungeon_test_utils import assert_border_solid


def test_bresenham_includes_both_endpoints():
    assert list(bresenham_line((0, 0), (3, 0))) == [(0, 0), (1, 0), (2, 0), (3, 0)]
    assert list(bresenham_line((0, 0), (2, 2))) == [(0, 0), (1, 1), (2, 2)]
    assert list(bresenham_line((4, 4), (4, 4))) == [(4, 4)]


def test_bresenham_steps_are_adjacent():
    pts = list(bresenham_line((9, 1), (1, 6)))
    assert pts[0] == (9, 1) and pts[-1] == (1, 6)
    for (ax, ay), (bx, by) in zip(pts, pts[1:]):
        assert max(abs(ax - bx), abs(ay - by)) == 1


def test_disc_shape():
    g = Grid(9, 9)
    assert carve_disc(g, 4, 4, 0) == 1
    g = Grid(9, 9)
    assert carve_disc(g, 4, 4, 1) == 5
    g = Grid(9, 9)
    # r=2: 13 cells with dx*dx + dy*dy <= 4
    assert carve_disc(g, 4, 4, 2) == 13


def test_disc_never_carves_border():
    g = Grid(6, 6)
    carve_disc(g, 1, 1, 3)
    assert_border_solid(g)
    assert g.cells[1][1] == OPEN


def test_tunnel_opens_path_between_points():
    g = Grid(20, 10)
    carve_tunnel_between(g, (2, 5), (17, 5), 1)
    assert all(g.cells[x][5] == OPEN for x in range(2, 18))
    assert g.cells[10][2] == SOLID


def test_fewer_than_two_rooms_is_noop():
    g = Grid(20, 20)
    assert connect_rooms_with_tunnels(g, [], make_rng(1)) == []
    assert connect_rooms_with_tunnels(g, [Room(2, 2, 4, 4)], make_rng(1)) == []
    assert g.count(OPEN) == 0


def test_rooms_linked_in_placement_order():
    g = Grid(40, 20)
    rooms = [Room(2, 2, 4, 4), Room(30, 3, 4, 4), Room(15, 12, 4, 4)]
    links = connect_rooms_with_tunnels(g, rooms, make_rng(3), (2, 3))
    assert links == [(0, 1), (1, 2)]
    for a, b in links:
        for x, y in bresenham_line(rooms[a].center, rooms[b].center):
            assert g.cells[x][y] == OPEN
    assert_border_solid(g)
