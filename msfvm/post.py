"""Tecplot ASCII output of grids and solutions."""

from __future__ import annotations

from enum import Enum, auto
from pathlib import Path

from msfvm.equations import Euler2D

_TOKENS_PER_LINE = 10


class PostFileType(Enum):
    """Kind of output file."""

    GRID = auto()
    SOLUTION = auto()


def _double_to_string(value: float) -> str:
    return repr(float(value))


def _write_lines(path: Path, lines, mode: str) -> None:
    with open(path, mode, encoding="utf-8") as stream:
        for line in lines:
            stream.write(line + "\n")


class _TokenColumns:
    """Text blocks filled token by token, with a line break every ten tokens overall."""

    def __init__(self, num_block: int) -> None:
        self.blocks = [""] * num_block
        self._str_per_line = 1

    def add(self, block: int, value: float) -> None:
        self.blocks[block] += _double_to_string(value) + " "
        if self._str_per_line == _TOKENS_PER_LINE:
            self.blocks[block] += "\n"
            self._str_per_line = 1
        self._str_per_line += 1


class Post:
    """Writes a grid file and numbered solution files for one governing equation."""

    def __init__(self, governing_equation, path=".") -> None:
        self.governing_equation = governing_equation
        self.path = Path(path)
        is_scalar_2d = (
            governing_equation.NUM_EQUATION == 1 and governing_equation.SPACE_DIMENSION == 2
        )
        if is_scalar_2d:
            self.grid_variable_str = "Variables = X Y"
            self.solution_variable_str = "Variables = q"
            self.zone_type_str = "ZoneType = FETriangle"
        elif governing_equation is Euler2D:
            self.grid_variable_str = "Variables = X Y"
            self.solution_variable_str = "Variables = rho rhou rhov rhoE u v p a"
            self.zone_type_str = "ZoneType = FETriangle"
        else:
            raise ValueError("wrong post initialize")
        self._is_scalar_2d = is_scalar_2d

        self.num_post_points: list[int] = []
        self.num_element = 0
        self.num_node = 0
        self._solution_count = 0
        self._strand_id = 0

    def grid(self, cell_elements) -> Path:
        """Write the grid file of ``cell_elements`` and return its path."""
        dimension = self.governing_equation.SPACE_DIMENSION
        columns = _TokenColumns(dimension)
        connectivity_lines: list[str] = []
        self.num_post_points = []
        connectivity_start_index = 1

        for element in cell_elements:
            geometry = element.geometry
            post_nodes = geometry.vertex_nodes()
            num_points = len(post_nodes)
            self.num_post_points.append(num_points)
            for node in post_nodes:
                for axis in range(dimension):
                    columns.add(axis, node[axis])

            local_connectivities = geometry.reference_geometry.local_connectivities()
            for local_connectivity in local_connectivities:
                connectivity_lines.append(
                    "".join(f"{connectivity_start_index + index} " for index in local_connectivity)
                )

            connectivity_start_index += num_points
            self.num_node += num_points
            self.num_element += len(local_connectivities)

        grid_path = self.path / "grid.plt"
        _write_lines(grid_path, self.header_text(PostFileType.GRID), "w")
        _write_lines(grid_path, columns.blocks + connectivity_lines, "a")
        return grid_path

    def solution(self, solutions, time: float = 0.0, comment: str = "") -> Path:
        """Write the next numbered solution file and return its path."""
        if len(solutions) != len(self.num_post_points):
            raise ValueError("number of solution should be same with number of post cells")

        self._solution_count += 1
        name = f"solution_{self._solution_count}"
        if comment:
            name += "_" + comment
        solution_path = self.path / (name + ".plt")

        _write_lines(solution_path, self.header_text(PostFileType.SOLUTION, time), "w")

        if self._is_scalar_2d:
            columns = _TokenColumns(self.governing_equation.NUM_EQUATION)
            for solution, num_points in zip(solutions, self.num_post_points):
                for _ in range(num_points):
                    columns.add(0, solution[0])
        else:
            num_equation = self.governing_equation.NUM_EQUATION
            columns = _TokenColumns(2 * num_equation)
            for cvariable, num_points in zip(solutions, self.num_post_points):
                pvariable = Euler2D.conservative_to_primitive(cvariable)
                for _ in range(num_points):
                    for k in range(num_equation):
                        columns.add(k, cvariable[k])
                    for k in range(num_equation):
                        columns.add(k + num_equation, pvariable[k])

        _write_lines(solution_path, columns.blocks, "a")
        return solution_path

    def header_text(self, file_type: PostFileType, time: float = 0.0) -> list[str]:
        """Header lines of a grid or solution file."""
        if file_type is PostFileType.GRID:
            header = ["Title = Grid", "FileType = Grid", self.grid_variable_str, "Zone T = Grid"]
        else:
            time_str = _double_to_string(time)
            self._strand_id += 1
            header = [
                "Title = Solution_at_" + time_str,
                "FileType = Solution",
                self.solution_variable_str,
                "Zone T = Solution_at_" + time_str,
            ]

        header.extend(
            [
                self.zone_type_str,
                f"Nodes = {self.num_node}",
                f"Elements = {self.num_element}",
                "DataPacking = Block",
                f"StrandID = {self._strand_id}",
            ]
        )
        if file_type is PostFileType.GRID:
            header.append("SolutionTime = 0.0 \n\n")
        else:
            header.append("SolutionTime = " + _double_to_string(time) + "\n\n")
        return header