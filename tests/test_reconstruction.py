import numpy as np
import pytest

from msfvm.geometry import Element, ElementType, Figure, Geometry, ReferenceGeometry
from msfvm.grid import Grid, GridConnectivity, GridElements, build_grid
from msfvm.reconstruction import (
    AILimiter,
    LinearReconstruction,
    MLPBase,
    MLPu1,
)


class _FixedGradients:
    NAME = "Fixed"

    def __init__(self, gradients):
        self.gradients = gradients

    def calculate_solution_gradients(self, solutions):
        return [np.array(g, dtype=float) for g in self.gradients]


def _quad_row_grid(num_cell):
    quad = ReferenceGeometry(Figure.QUADRILATERAL, 1)
    top = num_cell + 1
    cells = [
        Element(
            ElementType.CELL,
            Geometry(quad, [(k, 0), (k + 1, 0), (k + 1, 1), (k, 1)]),
            [k, k + 1, k + 1 + top, k + top],
        )
        for k in range(num_cell)
    ]
    return build_grid(GridElements(cell_elements=cells))


def _two_triangle_grid():
    tri = ReferenceGeometry(Figure.TRIANGLE, 1)
    cells = [
        Element(ElementType.CELL, Geometry(tri, [(0, 0), (1, 0), (0, 1)]), [0, 1, 2]),
        Element(ElementType.CELL, Geometry(tri, [(0, 0), (1, 0), (0, 1)]), [3, 4, 5]),
    ]
    share = {n: {0, 1} for n in range(6)}
    return Grid(GridElements(cell_elements=cells), GridConnectivity(vnode_index_to_share_cell_indexes=share))


def test_linear_reconstruction_passes_gradients_through():
    method = LinearReconstruction(_FixedGradients([[[1.0, 2.0]], [[3.0, 4.0]]]))
    result = method.reconstruct_solutions([[1.0], [2.0]])
    assert [s.tolist() for s in result.solutions] == [[1.0], [2.0]]
    assert [g.tolist() for g in result.solution_gradients] == [[[1.0, 2.0]], [[3.0, 4.0]]]
    assert method.name == "Linear_Reconstruction_Fixed"


@pytest.mark.parametrize(
    "delta, center, low, high, expected",
    [
        (-0.5, 0.0, -1.0, 1.0, 1.0),
        (0.5, 0.0, -1.0, 0.25, 0.5),
        (-1.0, 0.0, -0.25, 1.0, 0.25),
        (0.0, 0.0, 0.0, 0.0, 1.0),
    ],
)
def test_mlp_u1_limit(delta, center, low, high, expected):
    limiter = MLPu1(_quad_row_grid(1), _FixedGradients([[[0.0, 0.0]]]))
    assert limiter.limit(delta, center, low, high) == pytest.approx(expected)


def test_mlp_base_is_abstract():
    with pytest.raises(TypeError):
        MLPBase(_quad_row_grid(1), _FixedGradients([[[0.0, 0.0]]]))


def test_min_max_solution_per_vertex():
    limiter = MLPu1(_quad_row_grid(3), _FixedGradients([[[0.0, 0.0]]] * 3))
    min_max = limiter.calculate_vertex_node_index_to_min_max_solution([[0.0], [1.0], [2.0]])
    low, high = min_max[1]
    assert low.tolist() == [0.0]
    assert high.tolist() == [1.0]
    low, high = min_max[0]
    assert low.tolist() == [0.0] and high.tolist() == [0.0]


def test_mlp_u1_limits_gradients():
    limiter = MLPu1(_quad_row_grid(3), _FixedGradients([[[4.0, 0.0]]] * 3))
    result = limiter.reconstruct_solutions([[0.0], [1.0], [2.0]])
    gradients = [g.tolist() for g in result.solution_gradients]
    assert gradients[1] == [[2.0, 0.0]]
    assert np.allclose(gradients[0], [[0.0, 0.0]])
    assert np.allclose(gradients[2], [[0.0, 0.0]])


def test_mlp_u1_keeps_small_gradient():
    limiter = MLPu1(_quad_row_grid(3), _FixedGradients([[[0.0, 0.0]], [[1.0, 0.0]], [[0.0, 0.0]]]))
    result = limiter.reconstruct_solutions([[0.0], [1.0], [2.0]])
    assert result.solution_gradients[1].tolist() == [[1.0, 0.0]]


def test_ai_limiter_constructor_text():
    limiter = AILimiter(_two_triangle_grid(), _FixedGradients([[[0.0, 0.0]]] * 2))
    assert limiter.ai_limiter_text_set[0] == [
        "#########################",
        "@nodeNumber\n2",
        "@nodeIndexOrder\n0\t1\t",
        "@edgeNumber\n1",
        "@connectivity\n0\t1\t",
    ]
    assert limiter.ai_limiter_text_set[1][2] == "@nodeIndexOrder\n1\t0\t"
    assert limiter.vertex_share_cell_indexes_set == [[0, 1], [1, 0]]


def test_ai_limiter_requires_unique_face_neighbour():
    tri = ReferenceGeometry(Figure.TRIANGLE, 1)
    cells = [Element(ElementType.CELL, Geometry(tri, [(0, 0), (1, 0), (0, 1)]), [0, 1, 2])]
    grid = Grid(
        GridElements(cell_elements=cells),
        GridConnectivity(vnode_index_to_share_cell_indexes={n: {0} for n in range(3)}),
    )
    with pytest.raises(ValueError):
        AILimiter(grid, _FixedGradients([[[0.0, 0.0]]]))


def test_ai_limiter_records_and_restores_text():
    limiter = AILimiter(_two_triangle_grid(), _FixedGradients([[[0.0, 0.0]]] * 2))
    limiter.record_solution_datas([[0.0], [1.0]], [[[0.0, 0.0]], [[0.0, 0.0]]])
    assert limiter.target_cell_indexes == [0, 1]
    assert limiter.ai_limiter_text_set[0][-2].startswith("@cellAverage\n")
    assert len(limiter.ai_limiter_text_set[0][-2].split("\n")) == 3
    assert limiter.ai_limiter_text_set[0][-1].startswith("@cellGradient\n")

    text = limiter.make_ai_limiter_str()
    assert text.count("@cellAverage") == 2
    assert text.count("#########################") == 2
    assert limiter.target_cell_indexes == []
    assert len(limiter.ai_limiter_text_set[0]) == 5


def test_ai_limiter_skips_smooth_stencils():
    limiter = AILimiter(_two_triangle_grid(), _FixedGradients([[[0.0, 0.0]]] * 2))
    limiter.record_solution_datas([[0.0], [0.001]], [[[0.0, 0.0]], [[0.0, 0.0]]])
    assert limiter.target_cell_indexes == []
    assert limiter.make_ai_limiter_str() == ""


def test_ai_limiter_rejects_wrong_data_count():
    limiter = AILimiter(_two_triangle_grid(), _FixedGradients([[[0.0, 0.0]]] * 2))
    with pytest.raises(ValueError):
        limiter.record_solution_datas([[0.0]], [[[0.0, 0.0]]])


def test_ai_limiter_reconstruct_returns_unlimited_gradients():
    limiter = AILimiter(_two_triangle_grid(), _FixedGradients([[[5.0, -1.0]], [[2.0, 3.0]]]))
    result = limiter.reconstruct_solutions([[0.0], [1.0]])
    assert [g.tolist() for g in result.solution_gradients] == [[[5.0, -1.0]], [[2.0, 3.0]]]
    assert "@cellGradient" in limiter.last_ai_limiter_str
    assert len(limiter.ai_limiter_text_set[1]) == 5