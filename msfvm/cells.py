"""Per-cell quantities used by the finite volume method."""

from __future__ import annotations

import logging
import time as _time
from dataclasses import dataclass

import numpy as np

from msfvm.equations import LinearAdvection2D
from msfvm.grid import Grid

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ErrorNorms:
    """Global error norms of a computed solution."""

    l1: float
    l2: float
    linf: float


class Cells:
    """Centers, volumes and projected volumes of every cell of a grid."""

    def __init__(self, grid: Grid) -> None:
        started = _time.perf_counter()
        cell_elements = grid.elements.cell_elements
        self.num_cell = len(cell_elements)

        geometries = [element.geometry for element in cell_elements]
        self.centers = [geometry.center_node() for geometry in geometries]
        self.volumes = np.array([geometry.volume() for geometry in geometries], dtype=float)
        self.coordinate_projected_volumes = np.array(
            [geometry.coordinate_projected_volume() for geometry in geometries], dtype=float
        ).reshape(-1, 2)
        self.residual_scale_factors = 1.0 / self.volumes

        logger.debug("cells FVM precalculation in %.6fs", _time.perf_counter() - started)

    def calculate_time_step(self, coordinate_projected_maximum_lambdas, cfl: float) -> float:
        """Smallest stable local time step over all cells."""
        if self.num_cell == 0:
            raise ValueError("there are no cells")
        lambdas = np.asarray(coordinate_projected_maximum_lambdas, dtype=float).reshape(-1, 2)
        radii = (self.coordinate_projected_volumes * lambdas[: self.num_cell]).sum(axis=1)
        local_time_steps = cfl * self.volumes / radii
        return float(local_time_steps.min())

    def scale_rhs(self, rhs) -> np.ndarray:
        """Residuals divided by the volume of their cell."""
        residuals = np.asarray(rhs, dtype=float)
        factors = self.residual_scale_factors.reshape((-1,) + (1,) * (residuals.ndim - 1))
        return residuals * factors

    def calculate_initial_solutions(self, initial_condition) -> np.ndarray:
        return initial_condition.calculate_solutions(self.centers)

    def estimate_error(
        self, initial_condition, governing_equation, computed_solutions, time: float
    ) -> ErrorNorms | None:
        """Error norms against the exact solution, or None when none is known."""
        if governing_equation is not LinearAdvection2D:
            logger.info("%s does not provide error analysis result.", governing_equation.NAME)
            return None

        exact = np.asarray(
            initial_condition.calculate_exact_solutions(governing_equation, self.centers, time),
            dtype=float,
        )
        computed = np.asarray(computed_solutions, dtype=float).reshape(len(computed_solutions), -1)
        local_errors = np.abs(exact[: len(computed)] - computed).sum(axis=1)

        norms = ErrorNorms(
            l1=float(local_errors.mean()),
            l2=float(np.sqrt((local_errors * local_errors).mean())),
            linf=float(max(0.0, local_errors.max())),
        )
        logger.info("L1 error %.16e  L2 error %.16e  Linf error %.16e", norms.l1, norms.l2, norms.linf)
        return norms