"""Binary telemetry frames: fixed start and end markers around packed little-endian fields."""

from __future__ import annotations

import math
import struct
from collections.abc import Iterable, Sequence
from dataclasses import dataclass

RAD2DEG = 180.0 / math.pi

# Field codes accepted in a frame: unsigned/signed 32-bit, signed 16-bit, 32-bit float.
_FIELD_CODES = frozenset("IihHf")

SENSOR_LAYOUT = "III"
ENCODER_LAYOUT = "iifff"
ROTATION_LAYOUT = "fff"
VELOCITY_LAYOUT = "fffff"
IMU_FLOAT_LAYOUT = "f" * 10
IMU_RAW_LAYOUT = "h" * 10
ODOMETRY_LAYOUT = "f" * 15


@dataclass(frozen=True)
class FrameMarkers:
    """The bytes that open and close every frame."""

    start: int = 0x03
    end: int = 0xFC

    def __post_init__(self) -> None:
        for name, value in (("start", self.start), ("end", self.end)):
            if not 0 <= value <= 0xFF:
                raise ValueError(f"{name} marker must be a byte, got {value}")


DEFAULT_MARKERS = FrameMarkers()


def _check_layout(layout: str) -> None:
    unknown = set(layout) - _FIELD_CODES
    if unknown:
        raise ValueError(f"unsupported field codes in layout: {''.join(sorted(unknown))}")


def build_frame(
    fields: Iterable[tuple[str, float]], markers: FrameMarkers = DEFAULT_MARKERS
) -> bytes:
    """Pack ``(code, value)`` pairs between the start and end markers."""
    pairs = list(fields)
    layout = "".join(code for code, _ in pairs)
    _check_layout(layout)
    try:
        body = struct.pack("<" + layout, *(value for _, value in pairs))
    except struct.error as exc:
        raise ValueError(f"cannot pack frame fields: {exc}") from None
    return bytes([markers.start]) + body + bytes([markers.end])


def _vector(name: str, values: Sequence[float]) -> list[float]:
    values = list(values)
    if len(values) != 3:
        raise ValueError(f"{name} needs 3 axes, got {len(values)}")
    return values


def sensor_frame(
    left: int, front: int, right: int, markers: FrameMarkers = DEFAULT_MARKERS
) -> bytes:
    """Distance readings of the left, front and right sensors in micrometres."""
    return build_frame(zip(SENSOR_LAYOUT, (left, front, right)), markers)


def encoder_frame(
    left_ticks: int,
    right_ticks: int,
    dist_per_tick_um: float,
    average_um: float,
    markers: FrameMarkers = DEFAULT_MARKERS,
) -> bytes:
    """Tick counts of both wheels, their distances in micrometres and the mean distance."""
    values = (
        left_ticks,
        right_ticks,
        left_ticks * dist_per_tick_um,
        right_ticks * dist_per_tick_um,
        average_um,
    )
    return build_frame(zip(ENCODER_LAYOUT, values), markers)


def rotation_frame(
    yaw_rate: float,
    power_left: float,
    power_right: float,
    markers: FrameMarkers = DEFAULT_MARKERS,
) -> bytes:
    """Measured yaw rate together with the motor power of each wheel."""
    return build_frame(zip(ROTATION_LAYOUT, (yaw_rate, power_left, power_right)), markers)


def velocity_frame(
    left: float,
    right: float,
    mouse: float,
    power_left: float,
    power_right: float,
    markers: FrameMarkers = DEFAULT_MARKERS,
) -> bytes:
    """Wheel and body velocities followed by the motor powers."""
    values = (left, right, mouse, power_left, power_right)
    return build_frame(zip(VELOCITY_LAYOUT, values), markers)


def imu_frame(
    gyro: Sequence[float],
    accel: Sequence[float],
    mag: Sequence[float],
    temperature: float,
    as_float: bool = True,
    markers: FrameMarkers = DEFAULT_MARKERS,
) -> bytes:
    """Three axes of gyro, accelerometer and magnetometer plus temperature.

    Values go out as 32-bit floats, or as raw 16-bit integers when ``as_float`` is false.
    """
    values = [*_vector("gyro", gyro), *_vector("accel", accel), *_vector("mag", mag), temperature]
    if as_float:
        layout = IMU_FLOAT_LAYOUT
    else:
        layout = IMU_RAW_LAYOUT
        if any(int(v) != v for v in values):
            raise ValueError("raw IMU values must be integers")
        values = [int(v) for v in values]
    return build_frame(zip(layout, values), markers)


def odometry_frame(
    angles: Sequence[float],
    accel_pitch: float,
    accel_roll: float,
    mag_yaw: float,
    velocity: Sequence[float],
    position: Sequence[float],
    markers: FrameMarkers = DEFAULT_MARKERS,
) -> bytes:
    """Attitude in degrees (from radians), then velocity and position per axis."""
    values = [
        *(a * RAD2DEG for a in _vector("angles", angles)),
        accel_pitch * RAD2DEG,
        accel_roll * RAD2DEG,
        mag_yaw * RAD2DEG,
        *_vector("velocity", velocity),
        *_vector("position", position),
    ]
    return build_frame(zip(ODOMETRY_LAYOUT, values), markers)


def parse_frame(
    data: bytes, layout: str, markers: FrameMarkers = DEFAULT_MARKERS
) -> tuple[float, ...]:
    """Check the markers and length of a frame and unpack its fields."""
    _check_layout(layout)
    data = bytes(data)
    expected = struct.calcsize("<" + layout) + 2
    if len(data) != expected:
        raise ValueError(f"frame is {len(data)} bytes, expected {expected}")
    if data[0] != markers.start:
        raise ValueError(f"bad start marker 0x{data[0]:02X}")
    if data[-1] != markers.end:
        raise ValueError(f"bad end marker 0x{data[-1]:02X}")
    return struct.unpack("<" + layout, data[1:-1])