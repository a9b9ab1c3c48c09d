import io

import pytest

from micromouse.maze import Direction, Maze
from micromouse.mouse import Mouse, Status
from micromouse.simulator import (
    TARGET_CELLS,
    discover_maze,
    discover_maze_step,
    main,
    run_commands,
    sensor_has_wall_front,
    sensor_has_wall_left,
    sensor_has_wall_right,
)


def _sample_maze():
    maze = Maze()
    maze.add_borders()
    maze.add_sample_walls()
    return maze


def _start_mouse():
    mouse = Mouse(5, 0, Direction.UP)
    for row, col in TARGET_CELLS:
        mouse.add_target(row, col)
    mouse.fill_distances()
    return mouse


def _known_walls_are_real(mouse, maze):
    for row in range(maze.size):
        for col in range(maze.size):
            for side in Direction:
                if mouse.maze.has_wall(row, col, side) and not maze.has_wall(row, col, side):
                    return False
    return True


@pytest.mark.parametrize("side", list(Direction))
def test_sensors_see_single_wall_from_each_heading(side):
    maze = Maze()
    maze.set_wall(2, 2, side)
    assert sensor_has_wall_front(maze, 2, 2, side) is True
    assert sensor_has_wall_right(maze, 2, 2, Direction((side - 1) % 4)) is True
    assert sensor_has_wall_left(maze, 2, 2, Direction((side + 1) % 4)) is True
    assert sensor_has_wall_front(maze, 2, 2, side.opposite) is False


def test_sensors_on_empty_cell_see_nothing():
    maze = Maze()
    for heading in Direction:
        assert not sensor_has_wall_front(maze, 3, 3, heading)
        assert not sensor_has_wall_right(maze, 3, 3, heading)
        assert not sensor_has_wall_left(maze, 3, 3, heading)


def test_single_step_records_only_real_walls_and_moves_one_cell():
    maze = _sample_maze()
    mouse = _start_mouse()
    out = io.StringIO()
    status = discover_maze_step(mouse, maze, out)
    assert status is Status.OK
    assert out.getvalue() == "status: 0\n"
    assert abs(mouse.row - 5) + abs(mouse.col - 0) == 1
    assert mouse.maze.has_wall(5, 0, Direction.RIGHT)
    assert _known_walls_are_real(mouse, maze)


def test_discovery_reaches_target():
    maze = _sample_maze()
    mouse = _start_mouse()
    out = io.StringIO()
    status = discover_maze(mouse, maze, out)
    assert status is Status.TARGET
    assert (mouse.row, mouse.col) in TARGET_CELLS
    assert _known_walls_are_real(mouse, maze)
    assert out.getvalue().endswith("discovery status: 2, steps: 15\n")
    assert len(mouse.commands) == 11


def test_discovery_output_contains_map_with_heading_marker():
    maze = _sample_maze()
    mouse = _start_mouse()
    out = io.StringIO()
    discover_maze(mouse, maze, out)
    assert mouse.render_maze() in out.getvalue()
    assert mouse.render_distances() in out.getvalue()


def test_run_commands_format():
    mouse = Mouse(5, 0, Direction.UP)
    mouse.commands = [None, Direction.LEFT, Direction.RIGHT]
    out = io.StringIO()
    run_commands(mouse, out)
    assert out.getvalue() == (
        "step: 0 move forward\n"
        "step: 1 turn left\n move forward\n"
        "step: 2 turn right\n move forward\n"
    )


def test_run_commands_one_move_per_command():
    maze = _sample_maze()
    mouse = _start_mouse()
    discover_maze(mouse, maze, io.StringIO())
    out = io.StringIO()
    run_commands(mouse, out)
    text = out.getvalue()
    assert text.count("move forward") == len(mouse.commands)
    assert text.count("turn left") == mouse.commands.count(Direction.LEFT)
    assert text.count("turn right") == mouse.commands.count(Direction.RIGHT)


def test_main_prints_discovery_and_route(capsys):
    assert main([]) == 0
    captured = capsys.readouterr().out
    assert _sample_maze().render() in captured
    assert "discovery status: 2" in captured
    assert "step: 0" in captured