"""Governing equations: linear advection, Burgers and Euler in two dimensions."""

from __future__ import annotations

import numpy as np


def _as_vector(values) -> np.ndarray:
    return np.asarray(values, dtype=float)


class LinearAdvection2D:
    """Scalar advection with constant speeds along x and y."""

    NAME = "Linear_Advection_2D"
    SPACE_DIMENSION = 2
    NUM_EQUATION = 1
    ADVECTION_SPEEDS = (1.0, 0.5)

    @staticmethod
    def advection_speed() -> tuple[float, float]:
        return LinearAdvection2D.ADVECTION_SPEEDS

    @staticmethod
    def physical_flux(solution) -> np.ndarray:
        """Flux matrix of shape (1, 2)."""
        x_speed, y_speed = LinearAdvection2D.ADVECTION_SPEEDS
        value = float(_as_vector(solution)[0])
        return np.array([[x_speed * value, y_speed * value]])

    @staticmethod
    def physical_fluxes(solutions) -> np.ndarray:
        """Flux matrices of shape (n, 1, 2)."""
        values = _as_vector(solutions).reshape(-1, LinearAdvection2D.NUM_EQUATION)[:, 0]
        speeds = np.asarray(LinearAdvection2D.ADVECTION_SPEEDS)
        return (values[:, None] * speeds[None, :])[:, None, :]

    @staticmethod
    def coordinate_projected_maximum_lambdas(solutions) -> np.ndarray:
        num_solution = len(solutions)
        speeds = np.abs(np.asarray(LinearAdvection2D.ADVECTION_SPEEDS))
        return np.tile(speeds, (num_solution, 1))

    @staticmethod
    def inner_face_maximum_lambda(solution_o, solution_n, normal) -> float:
        speeds = np.asarray(LinearAdvection2D.ADVECTION_SPEEDS)
        return abs(float(_as_vector(normal) @ speeds))


class Burgers2D:
    """Inviscid Burgers equation with the same flux along x and y."""

    NAME = "Burgers_2D"
    SPACE_DIMENSION = 2
    NUM_EQUATION = 1

    @staticmethod
    def physical_flux(solution) -> np.ndarray:
        value = float(_as_vector(solution)[0])
        half_square = 0.5 * value * value
        return np.array([[half_square, half_square]])

    @staticmethod
    def physical_fluxes(solutions) -> np.ndarray:
        values = _as_vector(solutions).reshape(-1, Burgers2D.NUM_EQUATION)[:, 0]
        half_square = 0.5 * values * values
        return np.stack([half_square, half_square], axis=1)[:, None, :]

    @staticmethod
    def coordinate_projected_maximum_lambdas(solutions) -> np.ndarray:
        values = np.abs(_as_vector(solutions).reshape(-1, Burgers2D.NUM_EQUATION)[:, 0])
        return np.stack([values, values], axis=1)

    @staticmethod
    def inner_face_maximum_lambda(solution_o, solution_n, normal) -> float:
        n = _as_vector(normal)
        normal_component_sum = float(n[0] + n[1])
        return max(
            abs(float(_as_vector(solution_o)[0]) * normal_component_sum),
            abs(float(_as_vector(solution_n)[0]) * normal_component_sum),
        )


class Euler2D:
    """Compressible Euler equations for an ideal gas."""

    NAME = "Euler_2D"
    SPACE_DIMENSION = 2
    NUM_EQUATION = 4
    GAMMA = 1.4

    @staticmethod
    def conservative_to_primitive(conservative_variable) -> np.ndarray:
        """Map (rho, rhou, rhov, rhoE) to (u, v, p, a)."""
        rho, rhou, rhov, rho_e = (float(x) for x in _as_vector(conservative_variable))
        one_over_rho = 1.0 / rho
        u = rhou * one_over_rho
        v = rhov * one_over_rho
        p = (rho_e - 0.5 * (rhou * u + rhov * v)) * (Euler2D.GAMMA - 1)
        a = float(np.sqrt(Euler2D.GAMMA * p * one_over_rho))
        return np.array([u, v, p, a])

    @staticmethod
    def physical_flux(conservative_variable, primitive_variable=None) -> np.ndarray:
        """Flux matrix of shape (4, 2); primitives are derived when not given."""
        if primitive_variable is None:
            primitive_variable = Euler2D.conservative_to_primitive(conservative_variable)
        rho, rhou, rhov, rho_e = (float(x) for x in _as_vector(conservative_variable))
        u, v, p, _ = (float(x) for x in _as_vector(primitive_variable))
        rhouv = rhou * v
        return np.array(
            [
                [rhou, rhov],
                [rhou * u + p, rhouv],
                [rhouv, rhov * v + p],
                [(rho_e + p) * u, (rho_e + p) * v],
            ]
        )

    @staticmethod
    def physical_fluxes(conservative_variables, primitive_variables=None) -> np.ndarray:
        if primitive_variables is None:
            primitive_variables = [
                Euler2D.conservative_to_primitive(cv) for cv in conservative_variables
            ]
        fluxes = [
            Euler2D.physical_flux(cv, pv)
            for cv, pv in zip(conservative_variables, primitive_variables)
        ]
        if not fluxes:
            return np.empty((0, Euler2D.NUM_EQUATION, Euler2D.SPACE_DIMENSION))
        return np.stack(fluxes)

    @staticmethod
    def coordinate_projected_maximum_lambdas(primitive_variables) -> np.ndarray:
        pv = _as_vector(primitive_variables).reshape(-1, Euler2D.NUM_EQUATION)
        u, v, a = pv[:, 0], pv[:, 1], pv[:, 3]
        return np.stack([np.abs(u) + a, np.abs(v) + a], axis=1)

    @staticmethod
    def inner_face_maximum_lambda(oc_primitive_variable, nc_primitive_variable, normal) -> float:
        n = _as_vector(normal)

        def side_lambda(primitive) -> float:
            u, v, _, a = (float(x) for x in _as_vector(primitive))
            return abs(u * n[0] + v * n[1]) + a

        return max(side_lambda(oc_primitive_variable), side_lambda(nc_primitive_variable))