"""Maze solving, I2C transactions, wheel encoders and telemetry frames for a micromouse robot."""

__version__ = "0.1.0"