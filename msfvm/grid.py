"""Grid elements and the connectivity between cells, faces and boundaries."""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field

import numpy as np

from msfvm.geometry import Element

logger = logging.getLogger(__name__)


@dataclass
class GridElements:
    """Every element of a grid, grouped by role."""

    cell_elements: list[Element] = field(default_factory=list)
    boundary_elements: list[Element] = field(default_factory=list)
    periodic_boundary_element_pairs: list[tuple[Element, Element]] = field(default_factory=list)
    inner_face_elements: list[Element] = field(default_factory=list)


@dataclass
class GridConnectivity:
    """Owner and neighbour cells and outward normals of every face."""

    vnode_index_to_share_cell_indexes: dict[int, set[int]] = field(default_factory=dict)
    boundary_oc_indexes: list[int] = field(default_factory=list)
    boundary_normals: list[np.ndarray] = field(default_factory=list)
    periodic_boundary_oc_nc_index_pairs: list[tuple[int, int]] = field(default_factory=list)
    periodic_boundary_normals: list[np.ndarray] = field(default_factory=list)
    inner_face_oc_nc_index_pairs: list[tuple[int, int]] = field(default_factory=list)
    inner_face_normals: list[np.ndarray] = field(default_factory=list)


@dataclass
class Grid:
    """Grid elements together with their connectivity."""

    elements: GridElements
    connectivity: GridConnectivity


def build_grid(grid_elements: GridElements) -> Grid:
    """Work out the connectivity of ``grid_elements`` and bundle both."""
    return Grid(grid_elements, make_grid_connectivity(grid_elements))


def find_cell_indexes_have_these_vnodes(
    vnode_index_to_share_cell_indexes: dict[int, set[int]], face_node_indexes
) -> list[int]:
    """Sorted indexes of the cells holding both of the first two face nodes."""
    start_cells = vnode_index_to_share_cell_indexes[face_node_indexes[0]]
    end_cells = vnode_index_to_share_cell_indexes[face_node_indexes[1]]
    return sorted(start_cells & end_cells)


def _owner_normal(face: Element, owner: Element) -> np.ndarray:
    return face.geometry.normal_vector(owner.geometry.center_node())


def make_grid_connectivity(grid_elements: GridElements) -> GridConnectivity:
    """Find owner/neighbour cells and outward normals of every face."""
    started = time.perf_counter()
    cells = grid_elements.cell_elements
    element_pairs = grid_elements.periodic_boundary_element_pairs

    share: dict[int, set[int]] = {}
    for cell_index, cell in enumerate(cells):
        for vnode_index in cell.vertex_node_indexes():
            share.setdefault(vnode_index, set()).add(cell_index)

    boundary_oc_indexes: list[int] = []
    boundary_normals: list[np.ndarray] = []
    for boundary in grid_elements.boundary_elements:
        oc_indexes = find_cell_indexes_have_these_vnodes(share, boundary.vertex_node_indexes())
        if len(oc_indexes) != 1:
            raise ValueError("boundary should have unique owner cell")
        oc_index = oc_indexes[0]
        boundary_oc_indexes.append(oc_index)
        boundary_normals.append(_owner_normal(boundary, cells[oc_index]))

    periodic_pairs: list[tuple[int, int]] = []
    periodic_normals: list[np.ndarray] = []
    for oc_side, nc_side in element_pairs:
        oc_cells = find_cell_indexes_have_these_vnodes(share, oc_side.vertex_node_indexes())
        nc_cells = find_cell_indexes_have_these_vnodes(share, nc_side.vertex_node_indexes())
        if len(oc_cells) != 1:
            raise ValueError("periodic boundary should have unique owner cell")
        if len(nc_cells) != 1:
            raise ValueError("periodic boundary should have unique neighbor cell")
        oc_index, nc_index = oc_cells[0], nc_cells[0]
        periodic_pairs.append((oc_index, nc_index))
        periodic_normals.append(_owner_normal(oc_side, cells[oc_index]))

    for (oc_index, nc_index), (oc_side, nc_side) in zip(periodic_pairs, element_pairs):
        for vnode_index in oc_side.vertex_node_indexes():
            share[vnode_index].add(nc_index)
        for vnode_index in nc_side.vertex_node_indexes():
            share[vnode_index].add(oc_index)

    for oc_side, nc_side in element_pairs:
        for i_vnode, j_vnode in oc_side.find_periodic_vnode_index_pairs(nc_side):
            i_cells = share[i_vnode]
            j_cells = share[j_vnode]
            if i_cells != j_cells:
                merged = i_cells | j_cells
                i_cells.update(merged)
                j_cells.update(merged)

    inner_pairs: list[tuple[int, int]] = []
    inner_normals: list[np.ndarray] = []
    for face in grid_elements.inner_face_elements:
        cell_indexes = find_cell_indexes_have_these_vnodes(share, face.vertex_node_indexes())
        if len(cell_indexes) != 2:
            raise ValueError("inner face should have owner cell and neighbor cell")
        oc_index, nc_index = cell_indexes
        inner_pairs.append((oc_index, nc_index))
        inner_normals.append(_owner_normal(face, cells[oc_index]))

    logger.debug("figured out connectivity in %.6fs", time.perf_counter() - started)

    return GridConnectivity(
        vnode_index_to_share_cell_indexes=share,
        boundary_oc_indexes=boundary_oc_indexes,
        boundary_normals=boundary_normals,
        periodic_boundary_oc_nc_index_pairs=periodic_pairs,
        periodic_boundary_normals=periodic_normals,
        inner_face_oc_nc_index_pairs=inner_pairs,
        inner_face_normals=inner_normals,
    )