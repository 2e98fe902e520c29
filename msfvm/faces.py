"""Inner faces and periodic boundaries: their contribution to the residual."""

from __future__ import annotations

import logging
import time as _time

import numpy as np

from msfvm.grid import Grid

logger = logging.getLogger(__name__)


def _accumulate(rhs, oc_nc_index_pairs, areas, numerical_fluxes) -> np.ndarray:
    """Copy of ``rhs`` with each face flux taken from its owner and given to its neighbour."""
    result = np.array(rhs, dtype=float, copy=True)
    for (oc_index, nc_index), area, flux in zip(oc_nc_index_pairs, areas, numerical_fluxes):
        delta = area * np.asarray(flux, dtype=float)
        result[oc_index] -= delta
        result[nc_index] += delta
    return result


def _side_state(solution, gradient, to_face_vector) -> np.ndarray:
    return np.asarray(solution, dtype=float).reshape(-1) + np.asarray(gradient, dtype=float) @ to_face_vector


class _FacesBase:
    """Normals, areas and owner/neighbour cell pairs of a set of faces."""

    def __init__(self, normals, oc_nc_index_pairs, areas) -> None:
        self.normals = [np.asarray(normal, dtype=float) for normal in normals]
        self.oc_nc_index_pairs = [tuple(pair) for pair in oc_nc_index_pairs]
        self.areas = np.asarray(areas, dtype=float)
        self.num_face = len(self.areas)

    def _constant_rhs(self, numerical_flux_function, rhs, solutions) -> np.ndarray:
        fluxes = numerical_flux_function.calculate(solutions, self.normals, self.oc_nc_index_pairs)
        return _accumulate(rhs, self.oc_nc_index_pairs, self.areas, fluxes)

    def _linear_rhs(self, numerical_flux_function, rhs, reconstructed_solution, to_face_vector_pairs):
        solutions = reconstructed_solution.solutions
        gradients = reconstructed_solution.solution_gradients
        fluxes = []
        for (oc_index, nc_index), (oc_vector, nc_vector), normal in zip(
            self.oc_nc_index_pairs, to_face_vector_pairs, self.normals
        ):
            oc_side = _side_state(solutions[oc_index], gradients[oc_index], oc_vector)
            nc_side = _side_state(solutions[nc_index], gradients[nc_index], nc_vector)
            fluxes.append(numerical_flux_function.calculate_pair(oc_side, nc_side, normal))
        return _accumulate(rhs, self.oc_nc_index_pairs, self.areas, fluxes)


class _InnerFacesBase(_FacesBase):
    def __init__(self, grid: Grid) -> None:
        started = _time.perf_counter()
        faces = grid.elements.inner_face_elements
        super().__init__(
            grid.connectivity.inner_face_normals,
            grid.connectivity.inner_face_oc_nc_index_pairs,
            [face.geometry.volume() for face in faces],
        )
        logger.debug("inner faces FVM base precalculation in %.6fs", _time.perf_counter() - started)


class InnerFacesConstant(_InnerFacesBase):
    """Inner faces with piecewise constant states."""

    def calculate_rhs(self, numerical_flux_function, rhs, solutions) -> np.ndarray:
        """``rhs`` plus the inner face fluxes of the cell averages ``solutions``."""
        return self._constant_rhs(numerical_flux_function, rhs, solutions)


class InnerFacesLinear(_InnerFacesBase):
    """Inner faces with linearly reconstructed states."""

    def __init__(self, grid: Grid) -> None:
        super().__init__(grid)
        started = _time.perf_counter()
        cells = grid.elements.cell_elements
        faces = grid.elements.inner_face_elements
        self.oc_nc_to_face_vector_pairs: list[tuple[np.ndarray, np.ndarray]] = []
        for (oc_index, nc_index), face in zip(self.oc_nc_index_pairs, faces):
            face_center = face.geometry.center_node()
            self.oc_nc_to_face_vector_pairs.append(
                (
                    face_center - cells[oc_index].geometry.center_node(),
                    face_center - cells[nc_index].geometry.center_node(),
                )
            )
        logger.debug("inner faces FVM linear precalculation in %.6fs", _time.perf_counter() - started)

    def calculate_rhs(self, numerical_flux_function, rhs, reconstructed_solution) -> np.ndarray:
        """``rhs`` plus the inner face fluxes of the reconstructed face states."""
        return self._linear_rhs(
            numerical_flux_function, rhs, reconstructed_solution, self.oc_nc_to_face_vector_pairs
        )


class _PeriodicBoundariesBase(_FacesBase):
    def __init__(self, grid: Grid) -> None:
        started = _time.perf_counter()
        element_pairs = grid.elements.periodic_boundary_element_pairs
        super().__init__(
            grid.connectivity.periodic_boundary_normals,
            grid.connectivity.periodic_boundary_oc_nc_index_pairs,
            [oc_side.geometry.volume() for oc_side, _ in element_pairs],
        )
        logger.debug(
            "periodic boundaries FVM base precalculation in %.6fs", _time.perf_counter() - started
        )


class PeriodicBoundariesConstant(_PeriodicBoundariesBase):
    """Periodic boundary pairs with piecewise constant states."""

    def calculate_rhs(self, numerical_flux_function, rhs, solutions) -> np.ndarray:
        """``rhs`` plus the periodic boundary fluxes of the cell averages ``solutions``."""
        return self._constant_rhs(numerical_flux_function, rhs, solutions)


class PeriodicBoundariesLinear(_PeriodicBoundariesBase):
    """Periodic boundary pairs with linearly reconstructed states."""

    def __init__(self, grid: Grid) -> None:
        super().__init__(grid)
        started = _time.perf_counter()
        cells = grid.elements.cell_elements
        element_pairs = grid.elements.periodic_boundary_element_pairs
        self.oc_nc_to_oc_nc_side_face_vector_pairs: list[tuple[np.ndarray, np.ndarray]] = []
        for (oc_index, nc_index), (oc_side, nc_side) in zip(self.oc_nc_index_pairs, element_pairs):
            self.oc_nc_to_oc_nc_side_face_vector_pairs.append(
                (
                    oc_side.geometry.center_node() - cells[oc_index].geometry.center_node(),
                    nc_side.geometry.center_node() - cells[nc_index].geometry.center_node(),
                )
            )
        logger.debug(
            "periodic boundaries FVM linear precalculation in %.6fs", _time.perf_counter() - started
        )

    def calculate_rhs(self, numerical_flux_function, rhs, reconstructed_solution) -> np.ndarray:
        """``rhs`` plus the periodic boundary fluxes of the reconstructed side states."""
        return self._linear_rhs(
            numerical_flux_function,
            rhs,
            reconstructed_solution,
            self.oc_nc_to_oc_nc_side_face_vector_pairs,
        )