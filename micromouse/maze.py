"""Grid maze with per-cell walls, kept consistent between neighbouring cells."""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum

DEFAULT_SIZE = 6


class Direction(IntEnum):
    """Heading of the mouse, also used to name the four sides of a cell."""

    UP = 0
    RIGHT = 1
    DOWN = 2
    LEFT = 3

    @property
    def offset(self) -> tuple[int, int]:
        """Row and column change when stepping one cell in this direction."""
        return _OFFSETS[self]

    @property
    def opposite(self) -> Direction:
        return Direction((self + 2) % 4)


_OFFSETS = {
    Direction.UP: (-1, 0),
    Direction.RIGHT: (0, 1),
    Direction.DOWN: (1, 0),
    Direction.LEFT: (0, -1),
}

_SIDE_ATTR = {
    Direction.UP: "top",
    Direction.RIGHT: "right",
    Direction.DOWN: "bottom",
    Direction.LEFT: "left",
}


@dataclass
class Cell:
    """The four walls around one cell."""

    top: bool = False
    right: bool = False
    bottom: bool = False
    left: bool = False


class Maze:
    """A square grid of cells addressed by (row, column)."""

    def __init__(self, size: int = DEFAULT_SIZE) -> None:
        if size < 1:
            raise ValueError(f"maze size must be positive, got {size}")
        self.size = size
        self.cells = [[Cell() for _ in range(size)] for _ in range(size)]

    def _contains(self, row: int, col: int) -> bool:
        return 0 <= row < self.size and 0 <= col < self.size

    def cell(self, row: int, col: int) -> Cell:
        """Return the cell at (row, col)."""
        if not self._contains(row, col):
            raise IndexError(f"cell ({row}, {col}) is outside a {self.size}x{self.size} maze")
        return self.cells[row][col]

    def add_borders(self) -> None:
        """Close the outer boundary of the maze."""
        last = self.size - 1
        for i in range(self.size):
            self.cells[0][i].top = True
            self.cells[last][i].bottom = True
            self.cells[i][0].left = True
            self.cells[i][last].right = True

    def add_sample_walls(self) -> None:
        """Add the fixed set of inner walls of the reference 6x6 maze."""
        if self.size < DEFAULT_SIZE:
            raise ValueError(f"the sample walls need a maze of at least {DEFAULT_SIZE}x{DEFAULT_SIZE}")
        # (x, y, length) runs, addressed as column x and row y.
        vertical = [(0, 4, 2), (1, 2, 2), (3, 2, 1)]
        horizontal = [(0, 2, 1), (2, 3, 2), (2, 1, 2)]
        for x, y, length in vertical:
            for i in range(length):
                self.set_wall(y + i, x, Direction.RIGHT)
        for x, y, length in horizontal:
            for i in range(length):
                self.set_wall(y, x + i, Direction.DOWN)

    def set_wall(self, row: int, col: int, side: Direction) -> None:
        """Put a wall on one side of a cell and mirror it on the neighbour."""
        side = Direction(side)
        setattr(self.cell(row, col), _SIDE_ATTR[side], True)
        d_row, d_col = side.offset
        n_row, n_col = row + d_row, col + d_col
        if self._contains(n_row, n_col):
            setattr(self.cells[n_row][n_col], _SIDE_ATTR[side.opposite], True)

    def has_wall(self, row: int, col: int, side: Direction) -> bool:
        """Whether a cell has a wall on the given side."""
        return getattr(self.cell(row, col), _SIDE_ATTR[Direction(side)])

    def render(self, row: int | None = None, col: int | None = None, marker: str = " ") -> str:
        """Draw the maze as ASCII art, with ``marker`` in cell (row, col)."""
        lines = []
        for i, cells in enumerate(self.cells):
            lines.append("".join("+---" if c.top else "+   " for c in cells) + "+")
            parts = []
            for j, c in enumerate(cells):
                parts.append("|" if c.left else " ")
                parts.append(f" {marker} " if (i, j) == (row, col) else "   ")
            parts.append("|" if cells[-1].right else " ")
            lines.append("".join(parts))
        lines.append("".join("+---" if c.bottom else "+   " for c in self.cells[-1]) + "+")
        return "\n".join(lines) + "\n"