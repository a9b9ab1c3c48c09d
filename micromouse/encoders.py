"""Wheel encoder bookkeeping: roll-over counting, PLL velocity estimation and
conversion of tick counts to angles, distances and drive velocities."""

from __future__ import annotations

import math
from dataclasses import dataclass
from enum import IntEnum

ENC_MAX_VALUE = 0x10000
_ROLLOVER_THRESHOLD = 0x8000

ENC_PLL_KP = 2.0 * 50.0
ENC_PLL_KI = 0.25 * ENC_PLL_KP * ENC_PLL_KP

RAD2DEG = 180.0 / math.pi


class Side(IntEnum):
    """Which wheel an encoder belongs to."""

    LEFT = 0
    RIGHT = 1


@dataclass(frozen=True)
class EncoderGeometry:
    """Conversion factors between encoder ticks and physical quantities."""

    dist_per_tick_mm: float
    ticks_to_rad: float
    wheel_separation_mm: float

    def __post_init__(self) -> None:
        if self.dist_per_tick_mm <= 0:
            raise ValueError(f"distance per tick must be positive, got {self.dist_per_tick_mm}")
        if self.ticks_to_rad <= 0:
            raise ValueError(f"radians per tick must be positive, got {self.ticks_to_rad}")
        if self.wheel_separation_mm <= 0:
            raise ValueError(f"wheel separation must be positive, got {self.wheel_separation_mm}")

    @classmethod
    def from_wheel(
        cls, ticks_per_revolution: float, wheel_diameter_mm: float, wheel_separation_mm: float
    ) -> EncoderGeometry:
        """Derive the conversion factors from the wheel and encoder dimensions."""
        if ticks_per_revolution <= 0:
            raise ValueError(f"ticks per revolution must be positive, got {ticks_per_revolution}")
        return cls(
            dist_per_tick_mm=math.pi * wheel_diameter_mm / ticks_per_revolution,
            ticks_to_rad=2.0 * math.pi / ticks_per_revolution,
            wheel_separation_mm=wheel_separation_mm,
        )

    @property
    def dist_per_tick_um(self) -> float:
        return self.dist_per_tick_mm * 1000.0

    @property
    def ticks_to_deg(self) -> float:
        return self.ticks_to_rad * RAD2DEG


def _check_raw(raw: int) -> int:
    if not 0 <= raw < ENC_MAX_VALUE:
        raise ValueError(f"raw counter value out of range: {raw}")
    return raw


class QuadratureCounter:
    """Extends a 16-bit hardware position counter with a software roll-over count."""

    def __init__(self, start: int = 0) -> None:
        self.raw = _check_raw(start)
        self.rotations = 0

    def on_rollover(self, raw: int) -> None:
        """Account for a wrap of the hardware counter, given its value after the wrap."""
        self.raw = _check_raw(raw)
        if raw < _ROLLOVER_THRESHOLD:
            self.rotations += ENC_MAX_VALUE
        else:
            self.rotations -= ENC_MAX_VALUE

    def count(self, raw: int | None = None) -> int:
        """Total tick count for the given (or last seen) hardware counter value."""
        if raw is not None:
            self.raw = _check_raw(raw)
        return self.rotations + self.raw


class VelocityEstimator:
    """Phase-locked-loop tracker of encoder position and velocity, in ticks."""

    def __init__(self, kp: float = ENC_PLL_KP, ki: float = ENC_PLL_KI) -> None:
        self.kp = kp
        self.ki = ki
        self.position = 0.0
        self.velocity = 0.0

    def update(self, position: int, dt: float) -> float:
        """Fold in a measured position after ``dt`` seconds; return velocity in ticks/s."""
        if dt < 0:
            raise ValueError(f"time step must not be negative, got {dt}")
        self.position += self.velocity * dt
        delta = float(position - math.floor(self.position))
        self.position += self.kp * delta * dt
        self.velocity += self.ki * delta * dt
        if abs(self.velocity) < 0.5 * dt * self.ki:
            self.velocity = 0.0
        return self.velocity


class WheelEncoders:
    """Velocity state of both wheels and conversions derived from it."""

    def __init__(self, geometry: EncoderGeometry) -> None:
        self.geometry = geometry
        self.estimators = {side: VelocityEstimator() for side in Side}
        self._rad_per_sec = {side: 0.0 for side in Side}
        self._mm_per_sec = {side: 0.0 for side in Side}
        self._last_time_us = 0
        self._last_counts = {side: 0 for side in Side}
        self._initialized = False

    def update(self, left_count: int, right_count: int, time_us: int) -> None:
        """Run the velocity trackers on counts sampled at ``time_us``."""
        if time_us < self._last_time_us:
            raise ValueError(f"time went backwards: {time_us} < {self._last_time_us}")
        dt = (time_us - self._last_time_us) * 1e-6
        self._last_time_us = time_us
        counts = {Side.LEFT: left_count, Side.RIGHT: right_count}

        if not self._initialized:
            for side, count in counts.items():
                self.estimators[side].position = float(count)
            self._initialized = True
            return

        for side, count in counts.items():
            velocity = self.estimators[side].update(count, dt)
            self._rad_per_sec[side] = velocity * self.geometry.ticks_to_rad
            self._mm_per_sec[side] = velocity * self.geometry.dist_per_tick_mm

    def update_naive(self, left_count: int, right_count: int, hz: float) -> None:
        """Velocity from the count difference since the previous call, sampled at ``hz``."""
        counts = {Side.LEFT: left_count, Side.RIGHT: right_count}
        deltas = {side: counts[side] - self._last_counts[side] for side in Side}
        self._last_counts = counts

        if not self._initialized:
            self._initialized = True
            return

        for side, delta in deltas.items():
            self._mm_per_sec[side] = delta * self.geometry.dist_per_tick_mm * hz

    def position_rad(self, side: Side, count: int) -> float:
        """Wheel angle in radians for a tick count."""
        Side(side)
        return count * self.geometry.ticks_to_rad

    def position_deg(self, side: Side, count: int) -> float:
        """Wheel angle in degrees for a tick count."""
        Side(side)
        return count * self.geometry.ticks_to_deg

    def velocity_rad_per_sec(self, side: Side) -> float:
        return self._rad_per_sec[Side(side)]

    def velocity_deg_per_sec(self, side: Side) -> float:
        return self._rad_per_sec[Side(side)] * RAD2DEG

    def velocity_mm_per_sec(self, side: Side) -> float:
        return self._mm_per_sec[Side(side)]

    def yaw_rate(self) -> float:
        """Yaw rate in rad/s from the differential drive model, left minus right."""
        left = self._mm_per_sec[Side.LEFT]
        right = self._mm_per_sec[Side.RIGHT]
        return (left - right) / self.geometry.wheel_separation_mm

    def linear_velocity(self) -> float:
        """Forward velocity in mm/s."""
        return (self._mm_per_sec[Side.LEFT] + self._mm_per_sec[Side.RIGHT]) * 0.5

    def linear_velocity_and_yaw_rate(self) -> tuple[float, float]:
        """Forward velocity in mm/s and yaw rate in rad/s, right minus left."""
        left = self._mm_per_sec[Side.LEFT]
        right = self._mm_per_sec[Side.RIGHT]
        return (left + right) * 0.5, (right - left) / self.geometry.wheel_separation_mm

    def average_distance_mm(self, left_count: int, right_count: int) -> float:
        """Mean distance travelled by the two wheels, in millimetres."""
        d = self.geometry.dist_per_tick_mm
        return (left_count * d + right_count * d) * 0.5

    def average_distance_um(self, left_count: int, right_count: int) -> float:
        """Mean distance travelled by the two wheels, in micrometres."""
        d = self.geometry.dist_per_tick_um
        return (left_count * d + right_count * d) * 0.5