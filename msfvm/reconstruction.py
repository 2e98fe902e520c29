"""Solution reconstruction: constant, linear, MLP-limited and AI-limiter data recording."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field

import numpy as np

from msfvm.grid import Grid


def _gradient_method_name(gradient_method) -> str:
    return getattr(gradient_method, "NAME", type(gradient_method).__name__)


def _as_solutions(solutions) -> list[np.ndarray]:
    return [np.asarray(solution, dtype=float).reshape(-1) for solution in solutions]


def _as_gradients(solution_gradients, solutions: list[np.ndarray]) -> list[np.ndarray]:
    return [
        np.array(gradient, dtype=float).reshape(solution.size, -1)
        for gradient, solution in zip(solution_gradients, solutions)
    ]


def _format_value(value: float) -> str:
    return f"{value:+.15e}"


@dataclass
class LinearReconstructedSolution:
    """Cell averages together with one gradient matrix (equation x dimension) per cell."""

    solutions: list[np.ndarray]
    solution_gradients: list[np.ndarray] = field(default_factory=list)


class ConstantReconstruction:
    """Piecewise constant states: the cell averages are used as they are."""

    NAME = "Constant_Reconstruction"

    def __init__(self, grid: Grid | None = None) -> None:
        self.grid = grid

    @property
    def name(self) -> str:
        return self.NAME


class LinearReconstruction:
    """Unlimited linear reconstruction from a gradient method."""

    def __init__(self, gradient_method) -> None:
        self.gradient_method = gradient_method

    @property
    def name(self) -> str:
        return "Linear_Reconstruction_" + _gradient_method_name(self.gradient_method)

    def reconstruct_solutions(self, solutions) -> LinearReconstructedSolution:
        cell_solutions = _as_solutions(solutions)
        gradients = self.gradient_method.calculate_solution_gradients(cell_solutions)
        return LinearReconstructedSolution(
            cell_solutions, _as_gradients(gradients, cell_solutions)
        )


class MLPBase(ABC):
    """Multi-dimensional limiting: gradients are scaled so vertex values stay bounded."""

    def __init__(self, grid: Grid, gradient_method) -> None:
        self.gradient_method = gradient_method
        self.vnode_index_to_share_cell_indexes = grid.connectivity.vnode_index_to_share_cell_indexes

        self.vnode_indexes_set: list[list[int]] = []
        self.center_to_vertex_matrixes: list[np.ndarray] = []
        for element in grid.elements.cell_elements:
            geometry = element.geometry
            self.vnode_indexes_set.append(element.vertex_node_indexes())
            center = geometry.center_node()
            # columns are the vectors from the center to each vertex
            self.center_to_vertex_matrixes.append(
                np.stack([vertex - center for vertex in geometry.vertex_nodes()], axis=1)
            )

    def calculate_vertex_node_index_to_min_max_solution(
        self, solutions
    ) -> dict[int, tuple[np.ndarray, np.ndarray]]:
        """Equation-wise minimum and maximum over the cells sharing each vertex."""
        cell_solutions = _as_solutions(solutions)
        min_max: dict[int, tuple[np.ndarray, np.ndarray]] = {}
        for vnode_index, share_cell_indexes in self.vnode_index_to_share_cell_indexes.items():
            shared = np.stack([cell_solutions[cell_index] for cell_index in sorted(share_cell_indexes)])
            min_max[vnode_index] = (shared.min(axis=0), shared.max(axis=0))
        return min_max

    def reconstruct_solutions(self, solutions) -> LinearReconstructedSolution:
        cell_solutions = _as_solutions(solutions)
        gradients = _as_gradients(
            self.gradient_method.calculate_solution_gradients(cell_solutions), cell_solutions
        )
        min_max = self.calculate_vertex_node_index_to_min_max_solution(cell_solutions)

        for solution, gradient, vnode_indexes, center_to_vertex in zip(
            cell_solutions, gradients, self.vnode_indexes_set, self.center_to_vertex_matrixes
        ):
            vertex_deltas = gradient @ center_to_vertex
            limiting_values = [1.0] * solution.size

            for vnode_index, deltas in zip(vnode_indexes, vertex_deltas.T):
                min_solution, max_solution = min_max[vnode_index]
                for e, (delta, center, low, high) in enumerate(
                    zip(deltas, solution, min_solution, max_solution)
                ):
                    value = self.limit(float(delta), float(center), float(low), float(high))
                    limiting_values[e] = min(limiting_values[e], value)

            gradient *= np.asarray(limiting_values)[:, None]

        return LinearReconstructedSolution(cell_solutions, gradients)

    @abstractmethod
    def limit(
        self, vertex_solution_delta: float, center_solution: float, min_solution: float, max_solution: float
    ) -> float:
        """Limiting factor for one vertex and one equation."""


class MLPu1(MLPBase):
    """MLP limiter with the u1 limiting function."""

    @property
    def name(self) -> str:
        return "MLP_u1_" + _gradient_method_name(self.gradient_method)

    def limit(
        self, vertex_solution_delta: float, center_solution: float, min_solution: float, max_solution: float
    ) -> float:
        if vertex_solution_delta == 0:
            return 1.0
        if vertex_solution_delta < 0:
            ratio = (min_solution - center_solution) / vertex_solution_delta
        else:
            ratio = (max_solution - center_solution) / vertex_solution_delta
        return ratio if ratio < 1 else 1.0


class AILimiter:
    """Records stencil data of cells near discontinuities; gradients are left unlimited."""

    SOLUTION_DIFFERENCE_THRESHOLD = 0.01
    _NUM_SOLUTION_STR = 2

    def __init__(self, grid: Grid, gradient_method) -> None:
        self.gradient_method = gradient_method
        share = grid.connectivity.vnode_index_to_share_cell_indexes
        cell_elements = grid.elements.cell_elements

        self.num_data = len(cell_elements)
        self.ai_limiter_text_set: list[list[str]] = [[] for _ in cell_elements]
        self.vertex_share_cell_indexes_set: list[list[int]] = []
        self.target_cell_indexes: list[int] = []
        self.last_ai_limiter_str = ""

        face_share_cell_indexes_set = self._face_share_cell_indexes_set(grid)

        for i, (element, text) in enumerate(zip(cell_elements, self.ai_limiter_text_set)):
            chunk: set[int] = set()
            for vnode_index in element.vertex_node_indexes():
                chunk |= share[vnode_index]

            edges: set[tuple[int, int]] = set()
            for chunk_cell_index in chunk:
                for neighbor in chunk & face_share_cell_indexes_set[chunk_cell_index]:
                    edges.add(tuple(sorted({chunk_cell_index, neighbor})))

            vertex_share_cell_indexes = [i] + sorted(chunk - {i})

            text.append("#########################")
            text.append(f"@nodeNumber\n{len(vertex_share_cell_indexes)}")
            text.append(
                "@nodeIndexOrder\n" + "".join(f"{index}\t" for index in vertex_share_cell_indexes)
            )
            text.append(f"@edgeNumber\n{len(edges)}")
            connectivity = "@connectivity\n" + "".join(
                "".join(f"{index}\t" for index in edge) + "\n" for edge in sorted(edges)
            )
            text.append(connectivity[:-1])

            self.vertex_share_cell_indexes_set.append(vertex_share_cell_indexes)

    @property
    def name(self) -> str:
        return "AI_Reconstruction_" + _gradient_method_name(self.gradient_method)

    @staticmethod
    def _face_share_cell_indexes_set(grid: Grid) -> list[set[int]]:
        share = grid.connectivity.vnode_index_to_share_cell_indexes
        face_share_set: list[set[int]] = []
        for i, element in enumerate(grid.elements.cell_elements):
            face_share: set[int] = set()
            for face_vnode_indexes in element.face_vertex_node_indexes_set():
                cells = set(share[face_vnode_indexes[0]])
                for vnode_index in face_vnode_indexes[1:]:
                    cells &= share[vnode_index]
                if i not in cells:
                    raise ValueError("my index should be included in this face share cell indexes")
                cells.discard(i)
                if len(cells) != 1:
                    raise ValueError("face share cell should be unique")
                face_share |= cells
            face_share_set.append(face_share)
        return face_share_set

    def record_solution_datas(self, solutions, solution_gradients) -> None:
        """Append average and gradient data of the cells whose stencil varies enough."""
        cell_solutions = _as_solutions(solutions)
        if len(cell_solutions) != self.num_data:
            raise ValueError("number of solution should be same with number of data")
        if len(solution_gradients) != self.num_data:
            raise ValueError("number of solution gradient should be same with number of data")
        gradients = _as_gradients(solution_gradients, cell_solutions)

        solution_strings = [
            "".join(_format_value(float(v)) + "\t" for v in solution) for solution in cell_solutions
        ]
        gradient_strings = [
            "".join(_format_value(float(v)) + "\t" for v in gradient.ravel()) for gradient in gradients
        ]

        for i, indexes in enumerate(self.vertex_share_cell_indexes_set):
            values = [float(cell_solutions[index][0]) for index in indexes]
            if max(values) - min(values) < self.SOLUTION_DIFFERENCE_THRESHOLD:
                continue

            self.target_cell_indexes.append(i)
            average = "@cellAverage\n" + "\n".join(solution_strings[index] for index in indexes)
            gradient = "@cellGradient\n" + "\n".join(gradient_strings[index] for index in indexes)
            self.ai_limiter_text_set[i].extend([average, gradient])

    def make_ai_limiter_str(self) -> str:
        """Text of every target cell; their solution data is then dropped."""
        parts: list[str] = []
        for target in self.target_cell_indexes:
            text = self.ai_limiter_text_set[target]
            parts.extend(line + "\n" for line in text)
            del text[-self._NUM_SOLUTION_STR:]
        self.target_cell_indexes.clear()
        return "".join(parts)

    def reconstruct_solutions(self, solutions) -> LinearReconstructedSolution:
        cell_solutions = _as_solutions(solutions)
        gradients = _as_gradients(
            self.gradient_method.calculate_solution_gradients(cell_solutions), cell_solutions
        )
        self.record_solution_datas(cell_solutions, gradients)
        self.last_ai_limiter_str = self.make_ai_limiter_str()
        return LinearReconstructedSolution(cell_solutions, gradients)