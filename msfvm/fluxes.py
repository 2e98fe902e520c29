"""Numerical flux functions for inner faces and boundary flux functions."""

from __future__ import annotations

from abc import ABC, abstractmethod

import numpy as np

from msfvm.equations import Euler2D
from msfvm.geometry import ElementType


def _as_vector(values) -> np.ndarray:
    return np.asarray(values, dtype=float).reshape(-1)


def _is_scalar_2d(governing_equation) -> bool:
    return governing_equation.NUM_EQUATION == 1 and governing_equation.SPACE_DIMENSION == 2


class LLF:
    """Local Lax-Friedrichs numerical flux for a governing equation."""

    def __init__(self, governing_equation) -> None:
        self.governing_equation = governing_equation

    def _maximum_lambda(self, oc_solution, nc_solution, normal) -> float:
        equation = self.governing_equation
        to_primitive = getattr(equation, "conservative_to_primitive", None)
        if to_primitive is not None:
            oc_solution = to_primitive(oc_solution)
            nc_solution = to_primitive(nc_solution)
        return equation.inner_face_maximum_lambda(oc_solution, nc_solution, normal)

    def _flux(self, oc_flux, nc_flux, oc_solution, nc_solution, normal) -> np.ndarray:
        maximum_lambda = self._maximum_lambda(oc_solution, nc_solution, normal)
        return 0.5 * ((oc_flux + nc_flux) @ normal + maximum_lambda * (oc_solution - nc_solution))

    def calculate(self, solutions, normals, oc_nc_index_pairs) -> np.ndarray:
        """Fluxes of every face, given cell solutions and owner/neighbour pairs."""
        num_equation = self.governing_equation.NUM_EQUATION
        if len(normals) == 0:
            return np.empty((0, num_equation))

        cell_solutions = np.stack([_as_vector(solution) for solution in solutions])
        physical_fluxes = self.governing_equation.physical_fluxes(cell_solutions)

        numerical_fluxes = [
            self._flux(
                physical_fluxes[oc_index],
                physical_fluxes[nc_index],
                cell_solutions[oc_index],
                cell_solutions[nc_index],
                _as_vector(normal),
            )
            for (oc_index, nc_index), normal in zip(oc_nc_index_pairs, normals)
        ]
        return np.stack(numerical_fluxes)

    def calculate_pair(self, oc_side_solution, nc_side_solution, normal) -> np.ndarray:
        """Flux through one face between two reconstructed states."""
        oc_solution = _as_vector(oc_side_solution)
        nc_solution = _as_vector(nc_side_solution)
        equation = self.governing_equation
        return self._flux(
            equation.physical_flux(oc_solution),
            equation.physical_flux(nc_solution),
            oc_solution,
            nc_solution,
            _as_vector(normal),
        )


class BoundaryFluxFunction(ABC):
    """Flux through a boundary face given the owner cell's solution."""

    @abstractmethod
    def calculate(self, solution, normal) -> np.ndarray:
        """Boundary flux along the outward ``normal``."""


class SupersonicOutlet2D(BoundaryFluxFunction):
    """Everything flows out: the flux is the interior physical flux."""

    def __init__(self, governing_equation) -> None:
        self.governing_equation = governing_equation

    def calculate(self, solution, normal) -> np.ndarray:
        physical_flux = self.governing_equation.physical_flux(_as_vector(solution))
        return physical_flux @ _as_vector(normal)


class SlipWall2D(BoundaryFluxFunction):
    """Inviscid wall for the Euler equations: only pressure acts on it."""

    def calculate(self, solution, normal) -> np.ndarray:
        primitive = Euler2D.conservative_to_primitive(solution)
        p = float(primitive[2])
        nx, ny = (float(x) for x in _as_vector(normal))
        return np.array([0.0, p * nx, p * ny, 0.0])


def make_boundary_flux_function(governing_equation, boundary_type: ElementType) -> BoundaryFluxFunction:
    """Boundary flux function for ``boundary_type`` under ``governing_equation``."""
    if boundary_type is ElementType.SUPERSONIC_OUTLET_2D:
        return SupersonicOutlet2D(governing_equation)
    if boundary_type is ElementType.SLIP_WALL_2D and not _is_scalar_2d(governing_equation):
        return SlipWall2D()
    raise ValueError(f"wrong element type: {boundary_type.name.lower()}")