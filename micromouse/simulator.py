"""Run the flood-fill mouse through a simulated maze and report its progress."""

from __future__ import annotations

import argparse
import sys
from typing import TextIO

from micromouse.maze import Direction, Maze
from micromouse.mouse import Mouse, Status

DISCOVERY_STEP_LIMIT = 20

START_ROW = 5
START_COL = 0
TARGET_CELLS = ((2, 2), (3, 2), (2, 3), (3, 3))


def _right_of(direction: Direction) -> Direction:
    return Direction((direction + 1) % 4)


def _left_of(direction: Direction) -> Direction:
    return Direction((direction + 3) % 4)


def sensor_has_wall_front(maze: Maze, row: int, col: int, direction: Direction) -> bool:
    """Whether the real maze has a wall ahead of a mouse heading ``direction``."""
    return maze.has_wall(row, col, Direction(direction))


def sensor_has_wall_right(maze: Maze, row: int, col: int, direction: Direction) -> bool:
    """Whether the real maze has a wall on the mouse's right-hand side."""
    return maze.has_wall(row, col, _right_of(Direction(direction)))


def sensor_has_wall_left(maze: Maze, row: int, col: int, direction: Direction) -> bool:
    """Whether the real maze has a wall on the mouse's left-hand side."""
    return maze.has_wall(row, col, _left_of(Direction(direction)))


def discover_maze_step(mouse: Mouse, maze: Maze, out: TextIO | None = None) -> Status:
    """Sense walls around the mouse, record them, and take one planned step."""
    if out is None:
        out = sys.stdout
    heading = mouse.direction
    readings = (
        (sensor_has_wall_front(maze, mouse.row, mouse.col, heading), heading),
        (sensor_has_wall_right(maze, mouse.row, mouse.col, heading), _right_of(heading)),
        (sensor_has_wall_left(maze, mouse.row, mouse.col, heading), _left_of(heading)),
    )
    for seen, side in readings:
        if seen:
            mouse.maze.set_wall(mouse.row, mouse.col, side)

    status = mouse.move_next()
    print(f"status: {int(status)}", file=out)
    if status is Status.REPLAN:
        mouse.fill_distances()
    return status


def discover_maze(mouse: Mouse, maze: Maze, out: TextIO | None = None) -> Status:
    """Explore until the target is reached, planning fails, or the step limit runs out."""
    if out is None:
        out = sys.stdout
    steps = 0
    while True:
        status = discover_maze_step(mouse, maze, out)
        out.write(mouse.render_maze())
        out.write(mouse.render_distances())
        if status in (Status.TARGET, Status.FAIL):
            break
        within_limit = steps < DISCOVERY_STEP_LIMIT
        steps += 1
        if not within_limit:
            break
    print(f"discovery status: {int(status)}, steps: {steps}", file=out)
    return status


def run_commands(mouse: Mouse, out: TextIO | None = None) -> None:
    """Print the recorded turns and moves as a list of steps."""
    if out is None:
        out = sys.stdout
    for index, turn in enumerate(mouse.commands):
        out.write(f"step: {index}")
        if turn is Direction.LEFT:
            out.write(" turn left\n")
        elif turn is Direction.RIGHT:
            out.write(" turn right\n")
        out.write(" move forward\n")


def main(argv: list[str] | None = None) -> int:
    """Explore the reference maze from the start cell and print the route."""
    parser = argparse.ArgumentParser(
        prog="micromouse-sim",
        description="Explore the reference 6x6 maze with a flood-fill mouse.",
    )
    parser.parse_args(argv)

    maze = Maze()
    maze.add_borders()
    maze.add_sample_walls()
    sys.stdout.write(maze.render())

    mouse = Mouse(START_ROW, START_COL, Direction.UP)
    for row, col in TARGET_CELLS:
        mouse.add_target(row, col)
    mouse.fill_distances()
    sys.stdout.write(mouse.render_maze())
    sys.stdout.write(mouse.render_distances())

    status = discover_maze(mouse, maze)
    if status is Status.TARGET:
        run_commands(mouse)
    return 0


if __name__ == "__main__":
    sys.exit(main())