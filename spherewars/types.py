"""Core value types shared by the game client and server."""

from __future__ import annotations

import math
from dataclasses import dataclass
from enum import Enum
from typing import Any


def _as_float(value: Any) -> float:
    """Return ``value`` as a float, rejecting booleans and non-numbers."""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise TypeError(f"expected a number, got {value!r}")
    return float(value)


def _as_uint(value: Any) -> int:
    """Return ``value`` as a non-negative integer."""
    if isinstance(value, bool) or not isinstance(value, int):
        raise TypeError(f"expected an unsigned integer, got {value!r}")
    if value < 0:
        raise ValueError(f"expected an unsigned integer, got {value!r}")
    return value


def _as_bool(value: Any) -> bool:
    if not isinstance(value, bool):
        raise TypeError(f"expected a boolean, got {value!r}")
    return value


def _numbers(data: Any, count: int, kind: str) -> list[float]:
    if not isinstance(data, (list, tuple)) or len(data) != count:
        raise ValueError(f"{kind} expects a sequence of {count} numbers, got {data!r}")
    return [_as_float(item) for item in data]


@dataclass(frozen=True)
class Vec3:
    """A point or direction in world space."""

    x: float = 0.0
    y: float = 0.0
    z: float = 0.0

    def __add__(self, other: Vec3) -> Vec3:
        if not isinstance(other, Vec3):
            return NotImplemented
        return Vec3(self.x + other.x, self.y + other.y, self.z + other.z)

    def __sub__(self, other: Vec3) -> Vec3:
        if not isinstance(other, Vec3):
            return NotImplemented
        return Vec3(self.x - other.x, self.y - other.y, self.z - other.z)

    def __mul__(self, scalar: float) -> Vec3:
        if isinstance(scalar, bool) or not isinstance(scalar, (int, float)):
            return NotImplemented
        return Vec3(self.x * scalar, self.y * scalar, self.z * scalar)

    __rmul__ = __mul__

    def length(self) -> float:
        return math.sqrt(self.x * self.x + self.y * self.y + self.z * self.z)

    def distance(self, other: Vec3) -> float:
        """Euclidean distance to ``other``."""
        return (self - other).length()

    def normalize(self) -> Vec3:
        """Unit vector in the same direction; a zero vector has none."""
        length = self.length()
        if length == 0.0 or not math.isfinite(length):
            raise ValueError(f"cannot normalize {self!r}")
        return Vec3(self.x / length, self.y / length, self.z / length)

    def to_json(self) -> list[float]:
        return [self.x, self.y, self.z]

    @classmethod
    def from_json(cls, data: Any) -> Vec3:
        return cls(*_numbers(data, 3, "Vec3"))


@dataclass(frozen=True)
class Quat:
    """A rotation quaternion; the default is the identity rotation."""

    x: float = 0.0
    y: float = 0.0
    z: float = 0.0
    w: float = 1.0

    @classmethod
    def from_rotation_y(cls, angle: float) -> Quat:
        """Rotation of ``angle`` radians about the vertical axis."""
        half = angle * 0.5
        return cls(0.0, math.sin(half), 0.0, math.cos(half))

    def to_json(self) -> list[float]:
        return [self.x, self.y, self.z, self.w]

    @classmethod
    def from_json(cls, data: Any) -> Quat:
        return cls(*_numbers(data, 4, "Quat"))


class GameState(Enum):
    WAITING_FOR_PLAYERS = "WaitingForPlayers"
    GAME_STARTED = "GameStarted"
    GAME_OVER = "GameOver"


@dataclass(frozen=True)
class WeaponConfig:
    damage: float = 50.0
    range: float = 100.0
    fire_rate: float = 4.0  # shots per second


@dataclass
class HitscanResult:
    """Outcome of a single hitscan shot."""

    hit: bool
    hit_position: Vec3 | None
    hit_player_id: str | None
    distance: float

    def to_json(self) -> dict[str, Any]:
        return {
            "hit": self.hit,
            "hit_position": None if self.hit_position is None else self.hit_position.to_json(),
            "hit_player_id": self.hit_player_id,
            "distance": self.distance,
        }

    @classmethod
    def from_json(cls, data: Any) -> HitscanResult:
        if not isinstance(data, dict):
            raise TypeError(f"HitscanResult expects an object, got {data!r}")
        position = data.get("hit_position")
        player_id = data.get("hit_player_id")
        if player_id is not None and not isinstance(player_id, str):
            raise TypeError(f"hit_player_id must be a string, got {player_id!r}")
        return cls(
            hit=_as_bool(data["hit"]),
            hit_position=None if position is None else Vec3.from_json(position),
            hit_player_id=player_id,
            distance=_as_float(data["distance"]),
        )