"""Initial conditions and, where known, exact solutions."""

from __future__ import annotations

import math

import numpy as np

from msfvm.equations import Euler2D, LinearAdvection2D


def _centers(cell_centers) -> np.ndarray:
    return np.asarray(cell_centers, dtype=float).reshape(-1, 2)


def _require_linear_advection(governing_equation) -> None:
    if governing_equation is not LinearAdvection2D:
        name = getattr(governing_equation, "NAME", repr(governing_equation))
        raise ValueError(f"no exact solution is known for {name}")


def _fractional(value: float) -> float:
    return value - int(value)


class SineWave2D:
    """sin(2 pi x) sin(2 pi y)."""

    NAME = "Sine_Wave_2D"
    NUM_EQUATION = 1

    @staticmethod
    def calculate_solutions(cell_centers) -> np.ndarray:
        centers = _centers(cell_centers)
        x, y = centers[:, 0], centers[:, 1]
        return (np.sin(2 * math.pi * x) * np.sin(2 * math.pi * y))[:, None]

    @staticmethod
    def calculate_exact_solutions(governing_equation, cell_centers, end_time: float) -> np.ndarray:
        """The initial wave advected for ``end_time``."""
        _require_linear_advection(governing_equation)
        x_speed, y_speed = governing_equation.advection_speed()
        centers = _centers(cell_centers)
        x, y = centers[:, 0], centers[:, 1]
        values = np.sin(2 * math.pi * (x - x_speed * end_time)) * np.sin(
            2 * math.pi * (y - y_speed * end_time)
        )
        return values[:, None]


class SquareWave2D:
    """One on [0.25, 0.75] x [0.25, 0.75], zero elsewhere."""

    NAME = "Square_Wave_2D"
    NUM_EQUATION = 1

    @staticmethod
    def _indicator(centers: np.ndarray, x_start, x_end, y_start, y_end) -> np.ndarray:
        x, y = centers[:, 0], centers[:, 1]
        inside = (x_start <= x) & (x <= x_end) & (y_start <= y) & (y <= y_end)
        return inside.astype(float)[:, None]

    @staticmethod
    def calculate_solutions(cell_centers) -> np.ndarray:
        return SquareWave2D._indicator(_centers(cell_centers), 0.25, 0.75, 0.25, 0.75)

    @staticmethod
    def calculate_exact_solutions(governing_equation, cell_centers, end_time: float) -> np.ndarray:
        """The square advected for ``end_time`` on the periodic unit square."""
        _require_linear_advection(governing_equation)
        x_speed, y_speed = governing_equation.advection_speed()
        x_shift = x_speed * end_time
        y_shift = y_speed * end_time
        return SquareWave2D._indicator(
            _centers(cell_centers),
            _fractional(0.25 + x_shift),
            _fractional(0.75 + x_shift),
            _fractional(0.25 + y_shift),
            _fractional(0.75 + y_shift),
        )


class ModifiedSod2D:
    """Shock tube with the diaphragm at x = 0.3 and a moving left state."""

    NAME = "Modifid_SOD"
    NUM_EQUATION = 4

    @staticmethod
    def _conservative(rho: float, u: float, v: float, p: float) -> list[float]:
        c = 1 / (Euler2D.GAMMA - 1)
        rhou = rho * u
        rhov = rho * v
        rho_e = p * c + 0.5 * (rhou * u + rhov * v)
        return [rho, rhou, rhov, rho_e]

    @staticmethod
    def calculate_solutions(cell_centers) -> np.ndarray:
        left = ModifiedSod2D._conservative(1.0, 0.75, 0.0, 1.0)
        right = ModifiedSod2D._conservative(0.125, 0.0, 0.0, 0.1)
        centers = _centers(cell_centers)
        rows = [left if x <= 0.3 else right for x in centers[:, 0]]
        if not rows:
            return np.empty((0, ModifiedSod2D.NUM_EQUATION))
        return np.array(rows)