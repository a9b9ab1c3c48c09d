# micromouse

The decision-making core of a small maze-solving robot. It is plain Python and
needs no third-party packages.

## Modules

- `micromouse.maze`: a square grid of cells with walls. It provides `Maze`,
  `Cell` and `Direction`. `Maze.set_wall` also marks the matching wall on the
  neighbouring cell. `Maze.add_sample_walls` adds the walls of a fixed 6x6
  reference maze, and `Maze.render` draws the maze as ASCII art.
- `micromouse.mouse`: a flood-fill mouse (`Mouse`, `Status`). It keeps its own
  map of walls. `Mouse.fill_distances` computes the breadth-first distance from
  each cell to the target cells. `Mouse.move_next` steps to the closest open
  neighbour and records the turn it made. `render_maze` and `render_distances`
  format its state as text.
- `micromouse.simulator`: runs a `Mouse` through a known `Maze` with simulated
  wall sensors. It has `sensor_has_wall_front`, `sensor_has_wall_right`,
  `sensor_has_wall_left`, `discover_maze_step`, `discover_maze` and
  `run_commands`, and the command-line entry point `main`.
- `micromouse.solver`: the full solving run.
  1. `SolverMouse.discover` explores until the target is reached.
  2. `SolverMouse.go_back` retraces the route to the start.
  3. `SolverMouse.final_distances` and `SolverMouse.plan_run` plan the shortest
     route through visited cells only, merging straight runs into single
     multi-cell `Command`s.
  4. `SolverMouse.run` drives that route.

  `solve_maze(robot)` does all four steps and returns `True` if the final run
  reached the target. The `Robot` class drives through a known `Maze`. It senses
  walls with `wall_front`, `wall_left` and `wall_right`, and moves with
  `turn_left`, `turn_right`, `turn_around`, `escape_dead_end` and
  `move_forward`. It logs each action in `Robot.actions`. `move_forward` raises
  `RuntimeError` if a wall is in the way.
- `micromouse.i2c`: a queued I2C master state machine. `I2CMaster.service`
  advances the current transaction by one step. `I2CMaster.submit` queues a
  transaction with an optional completion callback. `I2CMaster.transfer` runs a
  transaction to completion and raises `I2CError` on a missing acknowledge.
  Transactions run against a `SimulatedBus` with register-file `I2CDevice`s
  attached.
- `micromouse.encoders`: encoder and drive kinematics.
  - `QuadratureCounter` extends a 16-bit counter with a rollover count.
  - `VelocityEstimator` is a PLL-style position and velocity tracker.
  - `EncoderGeometry` holds the tick conversion factors, and
    `EncoderGeometry.from_wheel` derives them from wheel dimensions.
  - `WheelEncoders` gives per-wheel velocities, linear velocity, yaw rate and
    average distance.
- `micromouse.telemetry`: framed little-endian binary records. A frame is a
  start marker, the packed fields, then an end marker; the default markers are
  `0x03` and `0xFC` (`FrameMarkers`). `build_frame` packs a frame from fields.
  `sensor_frame`, `encoder_frame`, `rotation_frame`, `velocity_frame`,
  `imu_frame` and `odometry_frame` build the specific records, and
  `parse_frame` checks a frame and unpacks it.

## Install

    pip install .

## Command line

To run the flood-fill mouse through the built-in 6x6 sample maze:

    micromouse-sim

The output is, in order:

1. the maze;
2. the mouse's status, map and distance table after every step;
3. the discovery status;
4. the list of steps it took, if it reached the target.

## Library use

```python
from micromouse.maze import Direction, Maze
from micromouse.mouse import Mouse, Status
from micromouse.simulator import discover_maze

maze = Maze(6)
maze.add_borders()
maze.add_sample_walls()

mouse = Mouse(5, 0, Direction.UP, 6)
for row, col in [(2, 2), (3, 2), (2, 3), (3, 3)]:
    mouse.add_target(row, col)
mouse.fill_distances()

status = discover_maze(mouse, maze)
print(status is Status.TARGET)
```

The full solver uses a `Robot` driving through a known maze. `solve_maze`
always starts at row 5, column 0, facing up, and aims for the four centre cells.

```python
from micromouse.maze import Direction, Maze
from micromouse.solver import Robot, solve_maze

maze = Maze()
maze.add_borders()
maze.add_sample_walls()

robot = Robot(maze, 5, 0, Direction.UP)
print(solve_maze(robot), robot.actions[:3])
```

## What this package does not do

- It does not talk to hardware. There are no motor, sensor, IMU or display
  drivers, and no timers or interrupts.
- The I2C master only runs over `SimulatedBus`.
- Telemetry frames are returned as `bytes`; nothing sends them over a serial
  port.
- The encoder classes take counts and times that you supply; they do not read
  a clock.

## Tests

    pip install .[test]
    pytest