import pytest

from msfvm.equations import Euler2D, LinearAdvection2D
from msfvm.geometry import Element, ElementType, Figure, Geometry, ReferenceGeometry
from msfvm.post import Post, PostFileType

TRI = ReferenceGeometry(Figure.TRIANGLE, 1)
QUAD = ReferenceGeometry(Figure.QUADRILATERAL, 1)


def _cell(reference, nodes, indexes):
    return Element(ElementType.CELL, Geometry(reference, nodes), indexes)


def _triangle():
    return _cell(TRI, [(0.0, 0.0), (1.0, 0.0), (0.0, 1.0)], [0, 1, 2])


def _lines(path):
    return path.read_text(encoding="utf-8").splitlines()


def _data_tokens(path):
    lines = _lines(path)
    start = next(i for i, line in enumerate(lines) if line.startswith("SolutionTime"))
    return " ".join(lines[start + 1 :]).split()


def test_grid_header(tmp_path):
    post = Post(LinearAdvection2D, tmp_path)
    grid_path = post.grid([_triangle()])
    lines = _lines(grid_path)
    assert grid_path == tmp_path / "grid.plt"
    assert lines[:10] == [
        "Title = Grid",
        "FileType = Grid",
        "Variables = X Y",
        "Zone T = Grid",
        "ZoneType = FETriangle",
        "Nodes = 3",
        "Elements = 1",
        "DataPacking = Block",
        "StrandID = 0",
        "SolutionTime = 0.0 ",
    ]


def test_grid_counts_quad_as_two_triangles(tmp_path):
    post = Post(LinearAdvection2D, tmp_path)
    quad = _cell(QUAD, [(0.0, 0.0), (1.0, 0.0), (1.0, 1.0), (0.0, 1.0)], [0, 1, 2, 3])
    post.grid([quad, _triangle()])
    assert post.num_node == 7
    assert post.num_element == 3
    assert post.num_post_points == [4, 3]


def test_grid_coordinates_round_trip(tmp_path):
    cells = [
        _cell(TRI, [(i, 0.0), (i + 1.0, 0.5), (i + 0.25, 1.0)], [3 * i, 3 * i + 1, 3 * i + 2])
        for i in range(4)
    ]
    post = Post(LinearAdvection2D, tmp_path)
    tokens = _data_tokens(post.grid(cells))
    nodes = [node for cell in cells for node in cell.geometry.vertex_nodes()]
    num = len(nodes)
    assert [float(t) for t in tokens[:num]] == [float(n[0]) for n in nodes]
    assert [float(t) for t in tokens[num : 2 * num]] == [float(n[1]) for n in nodes]
    connectivity = [int(t) for t in tokens[2 * num :]]
    assert connectivity == list(range(1, num + 1))


def test_solution_file_names_and_strands(tmp_path):
    post = Post(LinearAdvection2D, tmp_path)
    post.grid([_triangle()])
    first = post.solution([[0.5]], 0.25)
    second = post.solution([[0.7]], 0.5, "final")
    assert first == tmp_path / "solution_1.plt"
    assert second == tmp_path / "solution_2_final.plt"
    assert "StrandID = 1" in _lines(first)
    assert "StrandID = 2" in _lines(second)


def test_solution_title_carries_time(tmp_path):
    post = Post(LinearAdvection2D, tmp_path)
    post.grid([_triangle()])
    lines = _lines(post.solution([[0.5]], 0.125))
    assert lines[0].startswith("Title = Solution_at_")
    assert float(lines[0].removeprefix("Title = Solution_at_")) == 0.125
    assert lines[1] == "FileType = Solution"
    assert lines[2] == "Variables = q"


def test_scalar_solution_repeated_per_point(tmp_path):
    post = Post(LinearAdvection2D, tmp_path)
    post.grid([_triangle()])
    tokens = _data_tokens(post.solution([[0.5]], 0.0))
    assert [float(t) for t in tokens] == [0.5, 0.5, 0.5]


def test_euler_solution_round_trip(tmp_path):
    post = Post(Euler2D, tmp_path)
    post.grid([_triangle()])
    cvariable = [1.0, 0.5, 0.25, 2.5]
    path = post.solution([cvariable], 0.0)
    assert "Variables = rho rhou rhov rhoE u v p a" in _lines(path)
    tokens = [float(t) for t in _data_tokens(path)]
    assert len(tokens) == 8 * 3
    primitive = Euler2D.conservative_to_primitive(cvariable)
    expected = []
    for value in list(cvariable) + list(primitive):
        expected.extend([value] * 3)
    assert tokens == pytest.approx(expected)


def test_header_text_grid_does_not_advance_strand(tmp_path):
    post = Post(Euler2D, tmp_path)
    post.header_text(PostFileType.GRID)
    header = post.header_text(PostFileType.GRID)
    assert "StrandID = 0" in header
    assert header[-1] == "SolutionTime = 0.0 \n\n"


def test_unsupported_equation_raises(tmp_path):
    class ThreeEquations:
        NUM_EQUATION = 3
        SPACE_DIMENSION = 2

    with pytest.raises(ValueError):
        Post(ThreeEquations, tmp_path)


def test_solution_count_mismatch_raises(tmp_path):
    post = Post(LinearAdvection2D, tmp_path)
    post.grid([_triangle()])
    with pytest.raises(ValueError):
        post.solution([[0.5], [0.6]], 0.0)