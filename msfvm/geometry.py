"""Reference geometries, physical geometries and mesh elements."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Iterable, Sequence

import numpy as np

_AXIS_TOLERANCE = 1.0e-12


class Figure(Enum):
    """Shape of an element."""

    POINT = auto()
    LINE = auto()
    TRIANGLE = auto()
    QUADRILATERAL = auto()
    TETRAHEDRAL = auto()
    HEXAHEDRAL = auto()
    PRISM = auto()
    PYRAMID = auto()
    NOT_IN_LIST = auto()


class ElementType(Enum):
    """Role an element plays in the grid."""

    CELL = auto()
    FACE = auto()
    SLIP_WALL_2D = auto()
    SUPERSONIC_OUTLET_2D = auto()
    X_PERIODIC = auto()
    Y_PERIODIC = auto()
    NOT_IN_LIST = auto()


_PERIODIC_AXIS = {ElementType.X_PERIODIC: 0, ElementType.Y_PERIODIC: 1}


def _as_vector(node: Iterable[float]) -> np.ndarray:
    return np.asarray(node, dtype=float)


def is_axis_translation(node, other, axis_tag: int) -> bool:
    """True if ``other`` differs from ``node`` only along the axis ``axis_tag``."""
    a = _as_vector(node)
    b = _as_vector(other)
    if a.shape != b.shape:
        raise ValueError("nodes should have the same dimension")
    if not 0 <= axis_tag < a.size:
        raise ValueError(f"axis tag {axis_tag} is out of range")
    rest_a = np.delete(a, axis_tag)
    rest_b = np.delete(b, axis_tag)
    return bool(np.all(np.abs(rest_a - rest_b) <= _AXIS_TOLERANCE))


def _require_node_count(nodes: Sequence, count: int, message: str) -> None:
    if len(nodes) != count:
        raise ValueError(message)


def _half_parallelogram_area(a: np.ndarray, b: np.ndarray) -> float:
    aa = float(a @ b * 0 + a @ a)
    bb = float(b @ b)
    ab = float(a @ b)
    return 0.5 * float(np.sqrt(max(0.0, aa * bb - ab * ab)))


@dataclass(frozen=True)
class ReferenceGeometry:
    """Figure and polynomial order of an element, independent of its position."""

    figure: Figure
    figure_order: int

    def _unsupported(self) -> ValueError:
        return ValueError(f"wrong element figure: {self.figure.name.lower()}")

    def num_vertex(self) -> int:
        counts = {Figure.LINE: 2, Figure.TRIANGLE: 3, Figure.QUADRILATERAL: 4}
        try:
            return counts[self.figure]
        except KeyError:
            raise self._unsupported() from None

    def vertex_node_index_orders(self) -> list[int]:
        return list(range(self.num_vertex()))

    def _face_vertex_orders(self) -> list[list[int]]:
        if self.figure is Figure.LINE:
            return [[0], [1]]
        if self.figure is Figure.TRIANGLE:
            return [[0, 1], [1, 2], [2, 0]]
        if self.figure is Figure.QUADRILATERAL:
            return [[0, 1], [1, 2], [2, 3], [3, 0]]
        raise self._unsupported()

    def face_vertex_node_index_orders_set(self) -> list[list[int]]:
        return self._face_vertex_orders()

    def face_node_index_orders_set(self) -> list[list[int]]:
        orders = self._face_vertex_orders()
        if self.figure is Figure.LINE or self.figure_order <= 1:
            return orders

        num_additional_point = self.figure_order - 1
        next_index = len(orders)
        for face_orders in orders:
            face_orders.extend(range(next_index, next_index + num_additional_point))
            next_index += num_additional_point
        return orders

    def faces_reference_geometry(self) -> list[ReferenceGeometry]:
        if self.figure is Figure.LINE:
            face_figure = Figure.POINT
        elif self.figure in (Figure.TRIANGLE, Figure.QUADRILATERAL):
            face_figure = Figure.LINE
        else:
            raise ValueError(f"not supported figure: {self.figure.name.lower()}")
        num_face = len(self._face_vertex_orders())
        return [ReferenceGeometry(face_figure, self.figure_order) for _ in range(num_face)]

    def local_connectivities(self) -> list[list[int]]:
        if self.figure is Figure.TRIANGLE:
            return [[0, 1, 2]]
        if self.figure is Figure.QUADRILATERAL:
            return [[0, 1, 2], [0, 2, 3]]
        raise self._unsupported()

    def calculate_normal(self, nodes: Sequence) -> np.ndarray:
        """Unit normal of a line, the tangent rotated by a quarter turn."""
        if self.figure is not Figure.LINE:
            raise ValueError(f"not supported element figure: {self.figure.name.lower()}")
        _require_node_count(nodes, 2, "line should have two vertex")
        rotation = np.array([[0.0, -1.0], [1.0, 0.0]])
        tangent = _as_vector(nodes[1]) - _as_vector(nodes[0])
        rotated = rotation @ tangent
        return rotated / np.linalg.norm(rotated)

    def calculate_volume(self, nodes: Sequence) -> float:
        """Length, area of a triangle, or area of a quadrilateral."""
        points = [_as_vector(node) for node in nodes]
        if self.figure is Figure.LINE:
            _require_node_count(points, 2, "line should have two vertex")
            return float(np.linalg.norm(points[1] - points[0]))
        if self.figure is Figure.TRIANGLE:
            _require_node_count(points, 3, "triangle should have three vertex")
            return _half_parallelogram_area(points[1] - points[0], points[2] - points[0])
        if self.figure is Figure.QUADRILATERAL:
            _require_node_count(points, 4, "quadrilateral should have four vertex")
            a = points[0] - points[1]
            b = points[2] - points[1]
            c = points[2] - points[3]
            d = points[0] - points[3]
            return _half_parallelogram_area(a, b) + _half_parallelogram_area(c, d)
        raise self._unsupported()


@dataclass(eq=False)
class Geometry:
    """A reference geometry placed at concrete nodes."""

    reference_geometry: ReferenceGeometry
    nodes: list = field(default_factory=list)

    def __post_init__(self) -> None:
        self.nodes = [_as_vector(node) for node in self.nodes]

    def center_node(self) -> np.ndarray:
        return np.mean(np.stack(self.nodes), axis=0)

    def normal_vector(self, owner_cell_center) -> np.ndarray:
        """Unit normal pointing away from the owner cell's center."""
        normal = self.reference_geometry.calculate_normal(self.nodes)
        outward = self.center_node() - _as_vector(owner_cell_center)
        if float(normal @ outward) > 0:
            return normal
        return -1 * normal

    def volume(self) -> float:
        return self.reference_geometry.calculate_volume(self.nodes)

    def coordinate_projected_volume(self) -> tuple[float, float]:
        """Half the summed face extents along x and along y."""
        if any(node.size != 2 for node in self.nodes):
            raise ValueError("not supported dimension")
        x_projected = 0.0
        y_projected = 0.0
        for face_nodes in self.calculate_faces_nodes():
            delta = face_nodes[1] - face_nodes[0]
            x_projected += abs(float(delta[0]))
            y_projected += abs(float(delta[1]))
        return 0.5 * x_projected, 0.5 * y_projected

    def faces_geometry(self) -> list[Geometry]:
        references = self.reference_geometry.faces_reference_geometry()
        orders_set = self.reference_geometry.face_node_index_orders_set()
        return [
            Geometry(reference, [self.nodes[j] for j in orders])
            for reference, orders in zip(references, orders_set)
        ]

    def vertex_nodes(self) -> list[np.ndarray]:
        return [self.nodes[i] for i in self.reference_geometry.vertex_node_index_orders()]

    def is_axis_parallel(self, other: Geometry, axis_tag: int) -> bool:
        if self.reference_geometry != other.reference_geometry:
            return False
        if len(self.nodes) != len(other.nodes):
            return False
        return all(self.is_axis_parallel_node(node, axis_tag) for node in other.nodes)

    def calculate_faces_nodes(self) -> list[list[np.ndarray]]:
        return [
            [self.nodes[j] for j in orders]
            for orders in self.reference_geometry.face_node_index_orders_set()
        ]

    def is_axis_parallel_node(self, node, axis_tag: int) -> bool:
        return any(is_axis_translation(my_node, node, axis_tag) for my_node in self.nodes)


@dataclass(eq=False)
class Element:
    """A geometry together with its role and global node indexes."""

    element_type: ElementType
    geometry: Geometry
    node_indexes: list[int] = field(default_factory=list)

    def __post_init__(self) -> None:
        self.node_indexes = list(self.node_indexes)

    def vertex_node_indexes(self) -> list[int]:
        num_vertex = self.geometry.reference_geometry.num_vertex()
        return self.node_indexes[:num_vertex]

    def make_face_elements(self) -> list[Element]:
        if self.element_type is not ElementType.CELL:
            raise ValueError("make inner face elements should be called from cell element")
        return [
            Element(ElementType.FACE, face_geometry, face_indexes)
            for face_geometry, face_indexes in zip(
                self.geometry.faces_geometry(), self.face_node_indexes_set()
            )
        ]

    def is_periodic_pair(self, other: Element) -> bool:
        if not (self.is_periodic_boundary() and other.is_periodic_boundary()):
            raise ValueError("both elements should be periodic boundary")
        if self.element_type is not other.element_type:
            return False
        axis_tag = _PERIODIC_AXIS[self.element_type]
        return self.geometry.is_axis_parallel(other.geometry, axis_tag)

    def find_periodic_vnode_index_pairs(self, other: Element) -> list[tuple[int, int]]:
        """Pair each vertex node index with its periodic image on ``other``."""
        this_indexes = self.vertex_node_indexes()
        other_indexes = other.vertex_node_indexes()
        this_vnodes = self.geometry.vertex_nodes()
        other_vnodes = other.geometry.vertex_nodes()

        if len(this_indexes) != len(other_indexes):
            raise ValueError("periodic pair should have same number of vertex node")
        if self.element_type not in _PERIODIC_AXIS:
            raise ValueError("wrong element type")
        if self.element_type is not other.element_type:
            raise ValueError("periodic pair should have same element type")
        axis_tag = _PERIODIC_AXIS[self.element_type]

        matched: set[int] = set()
        pairs: list[tuple[int, int]] = []
        for this_vnode, this_index in zip(this_vnodes, this_indexes):
            for other_vnode, other_index in zip(other_vnodes, other_indexes):
                if other_index in matched:
                    continue
                if is_axis_translation(this_vnode, other_vnode, axis_tag):
                    pairs.append((this_index, other_index))
                    matched.add(other_index)

        if len(pairs) != len(this_indexes):
            raise ValueError("every vnode should have pair")
        return pairs

    def _indexes_for(self, orders_set: list[list[int]]) -> list[list[int]]:
        return [[self.node_indexes[j] for j in orders] for orders in orders_set]

    def face_node_indexes_set(self) -> list[list[int]]:
        return self._indexes_for(self.geometry.reference_geometry.face_node_index_orders_set())

    def face_vertex_node_indexes_set(self) -> list[list[int]]:
        return self._indexes_for(
            self.geometry.reference_geometry.face_vertex_node_index_orders_set()
        )

    def is_periodic_boundary(self) -> bool:
        return self.element_type in _PERIODIC_AXIS