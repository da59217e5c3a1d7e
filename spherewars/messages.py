"""Wire messages exchanged between client and server as JSON text."""

from __future__ import annotations

import json
from dataclasses import dataclass, field, fields
from typing import Any, Callable, ClassVar, NamedTuple

from .player import Player
from .types import GameState, HitscanResult, Quat, Vec3, _as_float, _as_uint


class MessageError(ValueError):
    """Raised when a message cannot be decoded."""


class _Codec(NamedTuple):
    encode: Callable[[Any], Any]
    decode: Callable[[Any], Any]
    optional: bool = False


def _identity(value: Any) -> Any:
    return value


def _text(value: Any) -> str:
    if not isinstance(value, str):
        raise TypeError(f"expected a string, got {value!r}")
    return value


def _players(data: Any) -> dict[str, Player]:
    if not isinstance(data, dict):
        raise TypeError(f"expected an object of players, got {data!r}")
    return {_text(key): Player.from_json(value) for key, value in data.items()}


def _game_state(data: Any) -> GameState:
    return GameState(_text(data))


def _opt(codec: _Codec) -> _Codec:
    return _Codec(
        lambda v: None if v is None else codec.encode(v),
        lambda d: None if d is None else codec.decode(d),
        True,
    )


_STR = _Codec(_identity, _text)
_F32 = _Codec(float, _as_float)
_F64 = _Codec(float, _as_float)
_UINT = _Codec(int, _as_uint)
_VEC3 = _Codec(lambda v: v.to_json(), Vec3.from_json)
_QUAT = _Codec(lambda q: q.to_json(), Quat.from_json)
_PLAYER = _Codec(lambda p: p.to_json(), Player.from_json)
_PLAYERS = _Codec(lambda ps: {k: p.to_json() for k, p in ps.items()}, _players)
_HITSCAN = _Codec(lambda h: h.to_json(), HitscanResult.from_json)
_STATE = _Codec(lambda s: s.value, _game_state)


def _f(codec: _Codec) -> Any:
    return field(metadata={"codec": codec})


_CLIENT: dict[str, type] = {}
_SERVER: dict[str, type] = {}


def _variant(registry: dict[str, type], tag: str | None = None):
    def register(cls: type) -> type:
        cls.tag = tag or cls.__name__
        registry[cls.tag] = cls
        return cls

    return register


# Client to server


@_variant(_CLIENT)
@dataclass(frozen=True)
class TestHealth:
    __test__: ClassVar[bool] = False


@_variant(_CLIENT)
@dataclass(frozen=True)
class JoinGame:
    player_name: str = _f(_STR)


@_variant(_CLIENT)
@dataclass(frozen=True)
class LeaveGame:
    pass


@_variant(_CLIENT)
@dataclass(frozen=True)
class PlayerMove:
    position: Vec3 = _f(_VEC3)
    rotation: Quat = _f(_QUAT)


@_variant(_CLIENT)
@dataclass(frozen=True)
class PlayerShoot:
    origin: Vec3 = _f(_VEC3)
    direction: Vec3 = _f(_VEC3)


@_variant(_CLIENT)
@dataclass(frozen=True)
class Respawn:
    pass


# Server to client


@_variant(_SERVER)
@dataclass(frozen=True)
class GameJoined:
    player_id: str = _f(_STR)


@_variant(_SERVER, "GameState")
@dataclass(frozen=True)
class GameStateUpdate:
    players: dict[str, Player] = _f(_PLAYERS)
    state: GameState = _f(_STATE)
    game_start_time: float | None = _f(_opt(_F64))


@_variant(_SERVER)
@dataclass(frozen=True)
class PlayerUpdate:
    player: Player = _f(_PLAYER)


@_variant(_SERVER)
@dataclass(frozen=True)
class PlayerJoined:
    player: Player = _f(_PLAYER)


@_variant(_SERVER)
@dataclass(frozen=True)
class PlayerLeft:
    player_id: str = _f(_STR)


@_variant(_SERVER)
@dataclass(frozen=True)
class PlayerKilled:
    killer_id: str = _f(_STR)
    victim_id: str = _f(_STR)


@_variant(_SERVER)
@dataclass(frozen=True)
class PlayerRespawned:
    player_id: str = _f(_STR)
    position: Vec3 = _f(_VEC3)


@_variant(_SERVER)
@dataclass(frozen=True)
class PlayerMoved:
    player_id: str = _f(_STR)
    position: Vec3 = _f(_VEC3)
    rotation: Quat = _f(_QUAT)


@_variant(_SERVER)
@dataclass(frozen=True)
class PlayerShot:
    player_id: str = _f(_STR)
    origin: Vec3 = _f(_VEC3)
    direction: Vec3 = _f(_VEC3)
    hit_result: HitscanResult = _f(_HITSCAN)


@_variant(_SERVER)
@dataclass(frozen=True)
class PlayerDied:
    player_id: str = _f(_STR)
    killer_id: str | None = _f(_opt(_STR))


@_variant(_SERVER)
@dataclass(frozen=True)
class PlayerDamaged:
    player_id: str = _f(_STR)
    damage: float = _f(_F32)
    health: float = _f(_F32)
    damage_by: str = _f(_STR)


@_variant(_SERVER)
@dataclass(frozen=True)
class ShotFired:
    shooter_id: str = _f(_STR)
    hit_position: Vec3 = _f(_VEC3)
    hit_player: str | None = _f(_opt(_STR))


@_variant(_SERVER)
@dataclass(frozen=True)
class GameStarted:
    seed: int = _f(_UINT)
    width: int = _f(_UINT)
    height: int = _f(_UINT)
    difficulty: str = _f(_STR)


@_variant(_SERVER, "Error")
@dataclass(frozen=True)
class ErrorMessage:
    message: str = _f(_STR)


@_variant(_SERVER)
@dataclass(frozen=True)
class NameAlreadyTaken:
    pass


@_variant(_SERVER)
@dataclass(frozen=True)
class HealthCheck:
    pass


@_variant(_SERVER)
@dataclass(frozen=True)
class GameEnded:
    reason: str = _f(_STR)


def _encode(registry: dict[str, type], message: Any, side: str) -> str:
    cls = type(message)
    if registry.get(getattr(cls, "tag", None)) is not cls:
        raise TypeError(f"{cls.__name__} is not a {side} message")
    message_fields = fields(message)
    if not message_fields:
        payload: Any = cls.tag
    else:
        payload = {
            cls.tag: {
                f.name: f.metadata["codec"].encode(getattr(message, f.name))
                for f in message_fields
            }
        }
    return json.dumps(payload, separators=(",", ":"))


def _decode(registry: dict[str, type], text: str | bytes) -> Any:
    if isinstance(text, (bytes, bytearray)):
        text = bytes(text).decode("utf-8", errors="replace")
    try:
        data = json.loads(text)
    except json.JSONDecodeError as exc:
        raise MessageError(f"invalid JSON: {exc}") from exc

    if isinstance(data, str):
        tag, payload, has_payload = data, None, False
    elif isinstance(data, dict) and len(data) == 1:
        ((tag, payload),) = data.items()
        has_payload = True
    else:
        raise MessageError("expected a message variant name or single-key object")

    cls = registry.get(tag)
    if cls is None:
        raise MessageError(f"unknown variant `{tag}`")

    message_fields = fields(cls)
    if not message_fields:
        if has_payload and payload is not None:
            raise MessageError(f"variant `{tag}` takes no data")
        return cls()
    if not isinstance(payload, dict):
        raise MessageError(f"variant `{tag}` expects an object")

    values = {}
    for f in message_fields:
        codec: _Codec = f.metadata["codec"]
        if f.name not in payload:
            if codec.optional:
                values[f.name] = None
                continue
            raise MessageError(f"missing field `{f.name}` in `{tag}`")
        try:
            values[f.name] = codec.decode(payload[f.name])
        except (TypeError, ValueError, KeyError) as exc:
            raise MessageError(f"invalid field `{f.name}` in `{tag}`: {exc}") from exc
    return cls(**values)


def encode_client_message(message: Any) -> str:
    """Serialise a client-to-server message as JSON text."""
    return _encode(_CLIENT, message, "client")


def decode_client_message(text: str | bytes) -> Any:
    """Parse a client-to-server message; raise MessageError if malformed."""
    return _decode(_CLIENT, text)


def encode_server_message(message: Any) -> str:
    """Serialise a server-to-client message as JSON text."""
    return _encode(_SERVER, message, "server")


def decode_server_message(text: str | bytes) -> Any:
    """Parse a server-to-client message; raise MessageError if malformed."""
    return _decode(_SERVER, text)