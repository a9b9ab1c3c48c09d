import pytest

from micromouse.maze import Cell, Direction, Maze


def test_new_maze_has_no_walls():
    maze = Maze(4)
    assert all(c == Cell() for row in maze.cells for c in row)


def test_invalid_size():
    with pytest.raises(ValueError):
        Maze(0)


def test_cell_out_of_range():
    maze = Maze(3)
    with pytest.raises(IndexError):
        maze.cell(3, 0)
    with pytest.raises(IndexError):
        maze.cell(0, -1)


def test_borders_close_outside():
    maze = Maze(5)
    maze.add_borders()
    for i in range(5):
        assert maze.has_wall(0, i, Direction.UP)
        assert maze.has_wall(4, i, Direction.DOWN)
        assert maze.has_wall(i, 0, Direction.LEFT)
        assert maze.has_wall(i, 4, Direction.RIGHT)
    assert not maze.has_wall(2, 2, Direction.UP)


@pytest.mark.parametrize("side", list(Direction))
def test_set_wall_mirrors_on_neighbour(side):
    maze = Maze(3)
    maze.set_wall(1, 1, side)
    d_row, d_col = side.offset
    assert maze.has_wall(1, 1, side)
    assert maze.has_wall(1 + d_row, 1 + d_col, side.opposite)


def test_set_wall_on_edge_has_no_neighbour():
    maze = Maze(2)
    maze.set_wall(0, 0, Direction.UP)
    assert maze.has_wall(0, 0, Direction.UP)
    assert not maze.has_wall(1, 0, Direction.UP)


def test_sample_walls_are_consistent():
    maze = Maze(6)
    maze.add_sample_walls()
    assert maze.has_wall(4, 0, Direction.RIGHT)
    assert maze.has_wall(5, 1, Direction.LEFT)
    assert maze.has_wall(3, 2, Direction.DOWN)
    for row in range(6):
        for col in range(5):
            assert maze.has_wall(row, col, Direction.RIGHT) == maze.has_wall(row, col + 1, Direction.LEFT)
    for row in range(5):
        for col in range(6):
            assert maze.has_wall(row, col, Direction.DOWN) == maze.has_wall(row + 1, col, Direction.UP)


def test_sample_walls_need_full_size():
    with pytest.raises(ValueError):
        Maze(4).add_sample_walls()


def test_render_bordered_maze():
    maze = Maze(2)
    maze.add_borders()
    assert maze.render() == (
        "+---+---+\n"
        "|       |\n"
        "+   +   +\n"
        "|       |\n"
        "+---+---+\n"
    )


def test_render_marker():
    maze = Maze(2)
    maze.add_borders()
    lines = maze.render(1, 1, "x").splitlines()
    assert lines[3] == "|     x |"
    assert "x" not in lines[1]


def test_render_shape():
    maze = Maze(6)
    lines = maze.render().splitlines()
    assert len(lines) == 2 * 6 + 1
    assert all(len(line) == 4 * 6 + 1 for line in lines)