"""Player state tracked by the server and mirrored on clients."""

from __future__ import annotations

import random
from dataclasses import dataclass
from typing import Any

from .types import Quat, Vec3, _as_bool, _as_float, _as_uint

DEFAULT_POSITION = Vec3(48.0, 2.5, 48.0)
RESPAWN_POSITION = Vec3(96.0, 2.5, 96.0)


def _optional(data: dict, key: str, convert):
    value = data.get(key)
    return None if value is None else convert(value)


def _text(value: Any) -> str:
    if not isinstance(value, str):
        raise TypeError(f"expected a string, got {value!r}")
    return value


@dataclass
class Player:
    id: str
    name: str
    color: tuple[float, float, float]
    position: Vec3 = DEFAULT_POSITION
    rotation: Quat = Quat()
    health: float = 100.0
    max_health: float = 100.0
    kills: int = 0
    deaths: int = 0
    is_alive: bool = True
    last_shot_time: float = 0.0
    death_time: float | None = None
    last_damage_time: float | None = None
    last_damage_by: int | None = None

    @classmethod
    def create(cls, id: str, name: str, rng: random.Random | None = None) -> Player:
        """New player at the default position with a random, not too dark colour."""
        rng = rng if rng is not None else random.Random()
        color = tuple(0.3 + rng.random() * 0.7 for _ in range(3))
        return cls(id=id, name=name, color=color)

    def respawn(self) -> None:
        self.health = self.max_health
        self.is_alive = True
        self.position = RESPAWN_POSITION
        self.death_time = None
        self.last_damage_time = None
        self.last_damage_by = None

    def take_damage(self, damage: float) -> bool:
        """Apply damage; return True if this hit killed the player."""
        if not self.is_alive:
            return False
        self.health -= damage
        if self.health <= 0.0:
            self.health = 0.0
            self.is_alive = False
            self.deaths += 1
            return True
        return False

    def to_json(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "position": self.position.to_json(),
            "rotation": self.rotation.to_json(),
            "health": self.health,
            "max_health": self.max_health,
            "kills": self.kills,
            "deaths": self.deaths,
            "is_alive": self.is_alive,
            "last_shot_time": self.last_shot_time,
            "death_time": self.death_time,
            "last_damage_time": self.last_damage_time,
            "last_damage_by": self.last_damage_by,
            "color": list(self.color),
        }

    @classmethod
    def from_json(cls, data: Any) -> Player:
        if not isinstance(data, dict):
            raise TypeError(f"Player expects an object, got {data!r}")
        color = data["color"]
        if not isinstance(color, (list, tuple)) or len(color) != 3:
            raise ValueError(f"color expects three numbers, got {color!r}")
        return cls(
            id=_text(data["id"]),
            name=_text(data["name"]),
            color=tuple(_as_float(c) for c in color),
            position=Vec3.from_json(data["position"]),
            rotation=Quat.from_json(data["rotation"]),
            health=_as_float(data["health"]),
            max_health=_as_float(data["max_health"]),
            kills=_as_uint(data["kills"]),
            deaths=_as_uint(data["deaths"]),
            is_alive=_as_bool(data["is_alive"]),
            last_shot_time=_as_float(data["last_shot_time"]),
            death_time=_optional(data, "death_time", _as_float),
            last_damage_time=_optional(data, "last_damage_time", _as_float),
            last_damage_by=_optional(data, "last_damage_by", _as_uint),
        )