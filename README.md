# msfvm

Building blocks for cell-centred finite volume solvers on unstructured 2D
grids. It supports linear advection, the Burgers equation and the Euler
equations. The package is a library of parts that you put together yourself.

## Modules

- `msfvm.geometry` has `Figure`, `ElementType`, `ReferenceGeometry`, `Geometry` and `Element`.
  - The supported figures are lines, triangles and quadrilaterals.
  - `Geometry` computes volumes, centres, coordinate-projected volumes and outward normals of lines. It also extracts faces and tests axis-parallel periodic matching.
  - `Element` gives vertex and face node indexes, makes face elements from a cell, and pairs the vertex nodes of periodic boundaries.
- `msfvm.gmsh` maps a Gmsh element type number (`GmshFigureType`) to its figure and its polynomial order. It does this through `figure_type_index_to_element_figure` and `figure_type_index_to_figure_order`.
- `msfvm.grid` defines `GridElements`, `GridConnectivity` and `Grid`.
  - `make_grid_connectivity`, or `build_grid`, works out which cells share each vertex.
  - It also finds the owner cell and normal of each boundary face, the owner and neighbour cells of each periodic pair, and the owner and neighbour cells of each inner face.
- `msfvm.equations` holds the physical fluxes and wave speeds of `LinearAdvection2D`, `Burgers2D` and `Euler2D`.
  - `LinearAdvection2D` uses advection speeds of (1.0, 0.5).
  - `Euler2D` uses γ = 1.4.
- `msfvm.fluxes` provides the local Lax–Friedrichs flux `LLF`.
  - `LLF.calculate` takes cell averages and owner/neighbour pairs.
  - `LLF.calculate_pair` takes two reconstructed states.
  - The boundary fluxes are `SupersonicOutlet2D` and `SlipWall2D`. `make_boundary_flux_function` chooses one of them. A slip wall is only available for the Euler equations.
- `msfvm.initial_conditions` provides `SineWave2D`, `SquareWave2D` and `ModifiedSod2D`.
  - The two waves also give exact solutions under `LinearAdvection2D`.
- `msfvm.time_integration` provides the `SSPRK33` scheme.
  - `SSPRK33.update_solutions` calls `calculate_rhs(solutions)` on the object you pass in.
  - It returns the advanced solutions and leaves its input unchanged.
- `msfvm.cells` provides `Cells`, which holds cell centres and volumes. It computes:
  - the CFL time step;
  - residuals scaled by 1/volume;
  - initial solutions;
  - L1, L2 and L∞ error norms (`ErrorNorms`) against an exact solution, for linear advection only.
- `msfvm.reconstruction` provides `ConstantReconstruction`, `LinearReconstruction`, the MLP-u1 limiter (`MLPu1`) and `AILimiter`.
  - `AILimiter` records stencil data of cells near discontinuities and leaves their gradients unlimited.
  - Each of these returns a `LinearReconstructedSolution`.
- `msfvm.faces` accumulates residual contributions over inner faces and periodic boundaries. It does this for constant states (`InnerFacesConstant`, `PeriodicBoundariesConstant`) and for linearly reconstructed states (`InnerFacesLinear`, `PeriodicBoundariesLinear`).
  - `calculate_rhs` returns a new residual array.
- `msfvm.post` writes Tecplot ASCII files through `Post`.
  - `Post.grid` writes `grid.plt`.
  - `Post.solution` writes numbered `solution_<n>[_<comment>].plt` files.

## Installation

```
pip install .
```

To run the tests:

```
pip install .[test]
pytest
```

## Example

```python
from msfvm.geometry import Figure, ReferenceGeometry, Geometry

quad = Geometry(ReferenceGeometry(Figure.QUADRILATERAL, 1),
                [(1, 1), (2, 1), (4, 2), (1, 2)])
quad.volume()                       # 2.0
quad.center_node()                  # array([2. , 1.5])
quad.coordinate_projected_volume()  # (3.0, 1.0)
```

```python
from msfvm.equations import Euler2D
from msfvm.fluxes import make_boundary_flux_function
from msfvm.geometry import ElementType

outlet = make_boundary_flux_function(Euler2D, ElementType.SUPERSONIC_OUTLET_2D)
outlet.calculate([1, 0, 0, 1], [1, 0])   # approximately [0, 0.4, 0, 0]
```

## What the package does not do

- It does not read mesh files. You build `Element` objects and a `GridElements` yourself. `msfvm.gmsh` only translates Gmsh element type numbers.
- It has no gradient method. `LinearReconstruction`, `MLPu1` and `AILimiter` take any object whose `calculate_solution_gradients(solutions)` returns one gradient matrix per cell. Each matrix has one row per equation and one column per dimension.
- It has no solver driver and no command-line program.
- It has no assembly of boundary-face residuals. You combine the parts into a semi-discrete equation and a time loop yourself.