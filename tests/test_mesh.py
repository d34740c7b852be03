import pytest

from cavemesh.dungeon import MeshInvariantError
from cavemesh.dungeon.marching import Node
from cavemesh.dungeon.mesh import Mesh, MeshBuilder, edge_paths, extrude_walls, inverse_lerp, orphan_vertices


def test_builder_reuses_node_indices():
    a, b, c, d = (Node((float(i), 0.0, 0.0), (i, 0)) for i in range(4))
    builder = MeshBuilder()
    builder.mesh_from_points([a, b, c])
    builder.mesh_from_points([a, c, d])
    mesh = builder.build()
    assert len(mesh.vertices) == 4
    assert mesh.triangles == [0, 1, 2, 0, 2, 3]
    assert builder.sources == [(0, 0), (1, 0), (2, 0), (3, 0)]


def test_fan_triangulation_of_hexagon():
    nodes = [Node((float(i), 0.0, 0.0), (i, 0)) for i in range(6)]
    builder = MeshBuilder()
    builder.mesh_from_points(nodes)
    assert builder.build().triangle_count == 4
    assert builder.triangles[:3] == [0, 1, 2]
    assert builder.triangles[-3:] == [0, 4, 5]


def test_unindexed_node_rejected():
    a, b, c = (Node((float(i), 0.0, 0.0), (i, 0)) for i in range(3))
    builder = MeshBuilder()
    builder.assign_vertices([a, b])
    with pytest.raises(MeshInvariantError):
        builder.add_triangle(a, b, c)


def test_wall_extrusion():
    mesh = Mesh(vertices=[(0.0, 0.0, 0.0), (1.0, 0.0, 0.0), (0.0, 0.0, 1.0)], triangles=[0, 1, 2])
    walls = extrude_walls(mesh, [[0, 1, 2, 0]], 15.0)
    assert walls.segment_count == 3
    assert len(walls.vertices) == 12
    assert len(walls.triangles) == 18
    assert walls.vertices[:4] == [(0.0, 0.0, 0.0), (1.0, 0.0, 0.0), (0.0, -15.0, 0.0), (1.0, -15.0, 0.0)]
    assert walls.triangles[:6] == [0, 2, 3, 3, 1, 0]


def test_edge_paths_project_to_floor_plane():
    mesh = Mesh(vertices=[(0.0, 0.0, 0.0), (1.0, 0.0, 2.0), (3.0, 0.0, 4.0)], triangles=[0, 1, 2])
    assert edge_paths(mesh, [[0, 1, 2, 0]]) == [[(0.0, 0.0), (1.0, 2.0), (3.0, 4.0), (0.0, 0.0)]]


def test_inverse_lerp_clamps():
    assert inverse_lerp(0.0, 10.0, 5.0) == 0.5
    assert inverse_lerp(0.0, 10.0, -3.0) == 0.0
    assert inverse_lerp(0.0, 10.0, 30.0) == 1.0
    assert inverse_lerp(2.0, 2.0, 2.0) == 0.0


def test_orphan_vertices():
    mesh = Mesh(vertices=[(0.0, 0.0, 0.0)] * 4, triangles=[0, 1, 2])
    assert orphan_vertices(mesh) == [3]
    mesh.triangles = [0, 1, 2, 0, 2, 3]
    assert orphan_vertices(mesh) is None


def test_mesh_to_dict():
    mesh = Mesh(vertices=[(0.0, 0.0, 0.0)], triangles=[], uvs=[(0.0, 0.0)], colors=[(1.0, 0.0, 0.0, 1.0)])
    assert mesh.to_dict() == {"vertices": [[0.0, 0.0, 0.0]], "triangles": []}
    assert "uvs" in mesh.to_dict(include_attributes=True)
