"""Flood-fill mouse that keeps its own map of the maze and plans moves."""

from __future__ import annotations

from collections import deque
from enum import IntEnum

from micromouse.maze import DEFAULT_SIZE, Direction, Maze

_MARKERS = "^>v<"


class Status(IntEnum):
    """Outcome of one planning step."""

    OK = 0
    REPLAN = 1
    TARGET = 2
    FAIL = 3


class Mouse:
    """Mouse position, heading, known walls, distances and recorded turns.

    Each entry of ``commands`` is the turn taken before a one-cell move:
    ``Direction.LEFT``, ``Direction.RIGHT`` or ``None`` for no turn.
    """

    def __init__(self, row: int, col: int, direction: Direction, size: int = DEFAULT_SIZE) -> None:
        self.maze = Maze(size)
        self.maze.add_borders()
        self.maze.cell(row, col)
        self.row = row
        self.col = col
        self.direction = Direction(direction)
        self.targets: list[tuple[int, int]] = []
        self.commands: list[Direction | None] = []
        self.distances = [[-1] * size for _ in range(size)]

    def add_target(self, row: int, col: int) -> None:
        """Mark a cell as part of the goal region."""
        self.maze.cell(row, col)
        self.targets.append((row, col))

    def fill_distances(self) -> None:
        """Breadth-first flood fill of distances from the targets; -1 if unreachable."""
        size = self.maze.size
        self.distances = [[-1] * size for _ in range(size)]
        queue: deque[tuple[int, int]] = deque()
        for row, col in self.targets:
            self.distances[row][col] = 0
            queue.append((row, col))
        while queue:
            row, col = queue.popleft()
            dist = self.distances[row][col]
            for side in Direction:
                d_row, d_col = side.offset
                n_row, n_col = row + d_row, col + d_col
                if not (0 <= n_row < size and 0 <= n_col < size):
                    continue
                if self.maze.has_wall(row, col, side) or self.distances[n_row][n_col] != -1:
                    continue
                self.distances[n_row][n_col] = dist + 1
                queue.append((n_row, n_col))

    def _open_neighbours(self):
        size = self.maze.size
        for side in Direction:
            d_row, d_col = side.offset
            n_row, n_col = self.row + d_row, self.col + d_col
            if 0 <= n_row < size and 0 <= n_col < size and not self.maze.has_wall(self.row, self.col, side):
                yield n_row, n_col

    def move_next(self) -> Status:
        """Step to the first open neighbour closer to the target, recording the turn."""
        row, col = self.row, self.col
        current = self.distances[row][col]
        neighbours = list(self._open_neighbours())
        if not neighbours:
            return Status.FAIL

        best = current
        choice = None
        for n_row, n_col in neighbours:
            if self.distances[n_row][n_col] < best:
                best = self.distances[n_row][n_col]
                choice = (n_row, n_col)
        if choice is None:
            return Status.REPLAN

        next_row, next_col = choice
        turn: Direction | None = None
        heading = self.direction
        if heading is Direction.UP:
            if next_row == row - 1:
                heading = Direction.UP
            elif next_col == col + 1:
                heading, turn = Direction.RIGHT, Direction.RIGHT
            elif next_col == col - 1:
                heading, turn = Direction.LEFT, Direction.LEFT
        elif heading is Direction.RIGHT:
            if next_row == row - 1:
                heading, turn = Direction.UP, Direction.LEFT
            elif next_col == col + 1:
                heading = Direction.RIGHT
            elif next_row == row + 1:
                heading, turn = Direction.DOWN, Direction.RIGHT
        elif heading is Direction.DOWN:
            if next_col == col + 1:
                heading, turn = Direction.RIGHT, Direction.RIGHT
            elif next_col == col - 1:
                heading, turn = Direction.LEFT, Direction.LEFT
            elif next_row == row + 1:
                heading = Direction.DOWN
        else:
            if next_row == row - 1:
                heading, turn = Direction.UP, Direction.RIGHT
            elif next_row == row + 1:
                heading, turn = Direction.DOWN, Direction.LEFT
            elif next_col == col - 1:
                heading = Direction.LEFT

        self.direction = heading
        self.row, self.col = next_row, next_col
        self.commands.append(turn)
        return Status.TARGET if best == 0 else Status.OK

    def render_maze(self) -> str:
        """Draw the known maze with the mouse's heading in its cell."""
        return self.maze.render(self.row, self.col, _MARKERS[self.direction])

    def render_distances(self) -> str:
        """Format the distance grid, three columns per value."""
        return "".join("".join(f"{d:3d} " for d in row) + "\n" for row in self.distances)