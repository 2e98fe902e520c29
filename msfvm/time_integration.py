"""Explicit time integration."""

from __future__ import annotations

import numpy as np


class SSPRK33:
    """Three-stage, third-order strong-stability-preserving Runge-Kutta."""

    @staticmethod
    def update_solutions(semi_discrete_equation, solutions, time_step: float) -> np.ndarray:
        """Solutions advanced by one step of ``time_step``.

        ``semi_discrete_equation.calculate_rhs(solutions)`` gives the time
        derivative of every solution. The input is left unchanged.
        """
        initial = np.array(solutions, dtype=float)

        stage1 = initial + time_step * np.asarray(semi_discrete_equation.calculate_rhs(initial))
        stage2 = 0.25 * (
            3 * initial + stage1 + time_step * np.asarray(semi_discrete_equation.calculate_rhs(stage1))
        )
        return (1.0 / 3.0) * (
            initial
            + 2 * stage2
            + 2 * time_step * np.asarray(semi_discrete_equation.calculate_rhs(stage2))
        )