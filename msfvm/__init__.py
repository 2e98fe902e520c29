"""Finite volume building blocks for 2D conservation laws on unstructured grids."""

__version__ = "0.1.0"