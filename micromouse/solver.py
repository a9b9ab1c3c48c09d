"""Maze solver for the robot: explore, return to start, then run the best known route."""

from __future__ import annotations

from collections import deque
from dataclasses import dataclass
from enum import IntEnum

from micromouse.maze import DEFAULT_SIZE, Direction, Maze
from micromouse.mouse import Status

MAX_STEPS = 100
MAX_TARGETS = 4
UNVISITED_DISTANCE = 100

START_ROW = 5
START_COL = 0
START_DIRECTION = Direction.UP
TARGET_CELLS = ((2, 2), (3, 2), (2, 3), (3, 3))


class Turn(IntEnum):
    """Turn taken before moving forward."""

    NONE = -1
    LEFT = 0
    RIGHT = 1
    BACK = 2


# Turn needed for a change of heading, keyed by (new - old) mod 4.
_TURN_BY_DELTA = {0: Turn.NONE, 1: Turn.RIGHT, 2: Turn.BACK, 3: Turn.LEFT}


@dataclass
class Command:
    """Turn, then drive ``cells`` cells forward, ending with heading ``direction``."""

    direction: Direction
    cells: int
    turn: Turn


class Robot:
    """A robot driving through a known maze, logging every action it performs."""

    def __init__(self, maze: Maze, row: int, col: int, direction: Direction) -> None:
        maze.cell(row, col)
        self.maze = maze
        self.row = row
        self.col = col
        self.direction = Direction(direction)
        self.actions: list[tuple[str, int]] = []

    def wall_front(self) -> bool:
        """Whether there is a wall straight ahead."""
        return self.maze.has_wall(self.row, self.col, self.direction)

    def wall_right(self) -> bool:
        """Whether there is a wall on the right-hand side."""
        return self.maze.has_wall(self.row, self.col, Direction((self.direction + 1) % 4))

    def wall_left(self) -> bool:
        """Whether there is a wall on the left-hand side."""
        return self.maze.has_wall(self.row, self.col, Direction((self.direction + 3) % 4))

    def _rotate(self, quarter_turns: int, name: str) -> None:
        self.direction = Direction((self.direction + quarter_turns) % 4)
        self.actions.append((name, 1))

    def turn_left(self) -> None:
        """Turn 90 degrees counter-clockwise in place."""
        self._rotate(3, "turn_left")

    def turn_right(self) -> None:
        """Turn 90 degrees clockwise in place."""
        self._rotate(1, "turn_right")

    def escape_dead_end(self) -> None:
        """Turn around to leave a dead end."""
        self._rotate(2, "escape_dead_end")

    def turn_around(self) -> None:
        """Turn 180 degrees in place."""
        self._rotate(2, "turn_around")

    def move_forward(self, cells: int = 1) -> None:
        """Drive forward the given number of cells; a wall in the way is an error."""
        if cells < 0:
            raise ValueError(f"cannot move a negative number of cells: {cells}")
        d_row, d_col = self.direction.offset
        for _ in range(cells):
            n_row, n_col = self.row + d_row, self.col + d_col
            blocked = self.maze.has_wall(self.row, self.col, self.direction)
            if blocked or not (0 <= n_row < self.maze.size and 0 <= n_col < self.maze.size):
                raise RuntimeError(
                    f"robot at ({self.row}, {self.col}) heading {self.direction.name} hit a wall"
                )
            self.row, self.col = n_row, n_col
        self.actions.append(("forward", cells))


def _perform_turn(robot: Robot, turn: Turn) -> None:
    if turn is Turn.LEFT:
        robot.turn_left()
    elif turn is Turn.RIGHT:
        robot.turn_right()
    elif turn is Turn.BACK:
        robot.escape_dead_end()


class SolverMouse:
    """The robot's model of the maze, its position and its planned commands."""

    def __init__(self, row: int, col: int, direction: Direction) -> None:
        self.maze = Maze(DEFAULT_SIZE)
        self.maze.add_borders()
        self.maze.cell(row, col)
        self.row = row
        self.col = col
        self.direction = Direction(direction)
        self.targets: list[tuple[int, int]] = []
        self.commands: list[Command] = []
        size = self.maze.size
        self.distances = [[-1] * size for _ in range(size)]
        self.visited = [[False] * size for _ in range(size)]

    def add_target(self, row: int, col: int) -> None:
        """Add a cell to the goal region."""
        if len(self.targets) >= MAX_TARGETS:
            raise ValueError(f"at most {MAX_TARGETS} target cells are supported")
        self.maze.cell(row, col)
        self.targets.append((row, col))

    def _flood(self, unknown: int, visited_only: bool) -> None:
        size = self.maze.size
        self.distances = [[unknown] * size for _ in range(size)]
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
                if self.maze.has_wall(row, col, side) or self.distances[n_row][n_col] != unknown:
                    continue
                if visited_only and not self.visited[n_row][n_col]:
                    continue
                self.distances[n_row][n_col] = dist + 1
                queue.append((n_row, n_col))

    def fill_distances(self) -> None:
        """Flood-fill distances to the targets over known walls; -1 if unreachable."""
        self._flood(-1, visited_only=False)

    def final_distances(self) -> None:
        """Flood-fill distances through visited cells only; others stay at 100."""
        self._flood(UNVISITED_DISTANCE, visited_only=True)

    def plan_next(self) -> Status:
        """Step to the first open neighbour closer to the target and record the command."""
        row, col = self.row, self.col
        current = self.distances[row][col]
        size = self.maze.size
        neighbours = []
        for side in Direction:
            d_row, d_col = side.offset
            n_row, n_col = row + d_row, col + d_col
            if 0 <= n_row < size and 0 <= n_col < size and not self.maze.has_wall(row, col, side):
                neighbours.append((side, n_row, n_col))
        if not neighbours:
            return Status.FAIL

        best = current
        choice = None
        for side, n_row, n_col in neighbours:
            if self.distances[n_row][n_col] < best:
                best = self.distances[n_row][n_col]
                choice = (side, n_row, n_col)
        if choice is None:
            return Status.REPLAN

        side, next_row, next_col = choice
        turn = _TURN_BY_DELTA[(side - self.direction) % 4]
        self.direction = side
        self.row, self.col = next_row, next_col

        if len(self.commands) >= MAX_STEPS:
            return Status.FAIL
        self.commands.append(Command(direction=side, cells=1, turn=turn))
        return Status.TARGET if best == 0 else Status.OK

    def move_next(self, robot: Robot) -> Status:
        """Plan one step and drive the robot through it."""
        status = self.plan_next()
        if status in (Status.OK, Status.TARGET):
            _perform_turn(robot, self.commands[-1].turn)
            robot.move_forward(1)
        return status

    def discover_step(self, robot: Robot) -> Status:
        """Record the walls the robot senses, then take one step or replan."""
        heading = self.direction
        readings = (
            (robot.wall_front(), heading),
            (robot.wall_right(), Direction((heading + 1) % 4)),
            (robot.wall_left(), Direction((heading + 3) % 4)),
        )
        for seen, side in readings:
            if seen:
                self.maze.set_wall(self.row, self.col, side)

        status = self.move_next(robot)
        if status is Status.REPLAN:
            self.fill_distances()
        return status

    def discover(self, robot: Robot) -> Status:
        """Explore until the target is reached, planning fails, or the step limit runs out."""
        steps = 0
        while True:
            self.visited[self.row][self.col] = True
            status = self.discover_step(robot)
            if status in (Status.TARGET, Status.FAIL):
                break
            within_limit = steps < MAX_STEPS
            steps += 1
            if not within_limit:
                break
        return status

    def plan_run(self) -> Status:
        """Plan the whole route without moving, then merge straight runs."""
        steps = 0
        while True:
            status = self.plan_next()
            if status in (Status.TARGET, Status.FAIL):
                break
            within_limit = steps < MAX_STEPS
            steps += 1
            if not within_limit:
                break
        if status is Status.TARGET:
            merged: list[Command] = []
            for command in self.commands:
                if command.turn is Turn.NONE and merged and merged[-1].turn is not Turn.BACK:
                    merged[-1].cells += command.cells
                else:
                    merged.append(command)
            self.commands = merged
        return status

    def run(self, robot: Robot) -> None:
        """Drive the robot through the planned commands."""
        for command in self.commands:
            _perform_turn(robot, command.turn)
            robot.move_forward(command.cells)

    def go_back(self, robot: Robot) -> None:
        """Retrace the recorded commands back to the start, ending with the start heading."""
        robot.turn_around()
        for command in reversed(self.commands):
            robot.move_forward(command.cells)
            if command.turn is Turn.LEFT:
                robot.turn_right()
            elif command.turn is Turn.RIGHT:
                robot.turn_left()
            elif command.turn is Turn.BACK:
                robot.escape_dead_end()
        robot.escape_dead_end()


def solve_maze(robot: Robot) -> bool:
    """Explore the maze, return to the start, then run the best route found.

    Returns True when the final run reached the target.
    """
    mouse = SolverMouse(START_ROW, START_COL, START_DIRECTION)
    for row, col in TARGET_CELLS:
        mouse.add_target(row, col)
    mouse.fill_distances()

    if mouse.discover(robot) is not Status.TARGET:
        return False

    mouse.go_back(robot)

    mouse.commands = []
    mouse.row, mouse.col = START_ROW, START_COL
    mouse.direction = START_DIRECTION
    mouse.final_distances()
    if mouse.plan_run() is not Status.TARGET:
        return False
    mouse.run(robot)
    return True