"""Authoritative UDP game server: players, maze, shooting and respawns."""

from __future__ import annotations

import asyncio
import math
import random
import time
import uuid
from typing import Any, Callable

from .maze import MazeConfig, MazeData, SpawnPoint, generate_maze_from_config
from .messages import (
    ErrorMessage,
    GameEnded,
    GameJoined,
    GameStarted,
    GameStateUpdate,
    HealthCheck,
    JoinGame,
    LeaveGame,
    MessageError,
    NameAlreadyTaken,
    PlayerDamaged,
    PlayerDied,
    PlayerJoined,
    PlayerLeft,
    PlayerMove,
    PlayerMoved,
    PlayerRespawned,
    PlayerShoot,
    PlayerShot,
    Respawn,
    TestHealth,
    decode_client_message,
    encode_server_message,
)
from .player import DEFAULT_POSITION, Player
from .types import GameState, HitscanResult, Quat, Vec3, WeaponConfig
from .utils import log_info

Address = Any

MAZE_SIZE = 12
RESPAWN_DELAY = 3.0
_BUFFER_SIZE = 1024
_TILE_SIZE = 4.0
_PLAYER_RADIUS = 0.8
_RAY_STEP = 0.2
_SPAWN_MATCH_DISTANCE = 2.0


class _ServerProtocol(asyncio.DatagramProtocol):
    def __init__(self, server: GameServer) -> None:
        self._server = server

    def datagram_received(self, data: bytes, addr: Address) -> None:
        self._server.handle_datagram(addr, data[:_BUFFER_SIZE])

    def error_received(self, exc: Exception) -> None:
        # Unreachable peers must not stop the server.
        pass


class GameServer:
    """Holds the game state and answers client datagrams."""

    def __init__(
        self,
        sock: Any,
        difficulty: str = "medium",
        *,
        rng: random.Random | None = None,
        clock: Callable[[], float] = time.monotonic,
        wall_clock: Callable[[], float] = time.time,
        shutdown_delay: float = 0.5,
    ) -> None:
        self._sock = sock
        self._sendto: Callable[[bytes, Address], Any] = sock.sendto
        self._rng = rng if rng is not None else random.Random()
        self._clock = clock
        self._wall_clock = wall_clock
        self._shutdown_delay = shutdown_delay
        self.difficulty = difficulty
        self.players: dict[str, Player] = {}
        self.addr_to_id: dict[Address, str] = {}
        self.state = GameState.WAITING_FOR_PLAYERS
        self.game_start_time: float | None = None
        self.maze_seed: int | None = None
        self.maze_data: MazeData | None = None
        self.used_spawn_points: list[int] = []
        self.pending_respawns: dict[str, float] = {}

    # Transport

    def _send(self, addr: Address, message: Any) -> None:
        self._sendto(encode_server_message(message).encode(), addr)

    def _broadcast(self, message: Any, exclude: Address | None = None) -> None:
        data = encode_server_message(message).encode()
        for addr in list(self.addr_to_id):
            if exclude is None or addr != exclude:
                self._sendto(data, addr)

    async def listen_and_serve(self) -> None:
        """Serve datagrams on the socket until cancelled."""
        loop = asyncio.get_running_loop()
        transport, _ = await loop.create_datagram_endpoint(
            lambda: _ServerProtocol(self), sock=self._sock
        )
        self._sendto = transport.sendto
        try:
            await loop.create_future()
        finally:
            transport.close()

    def handle_datagram(self, addr: Address, data: bytes | str) -> None:
        """Decode one client datagram and act on it."""
        try:
            message = decode_client_message(data)
        except MessageError as exc:
            self._send(addr, ErrorMessage(message=f"Invalid message format: {exc}"))
            return

        match message:
            case TestHealth():
                self._send(addr, HealthCheck())
            case JoinGame(player_name=name):
                self._handle_join_game(addr, name)
            case LeaveGame():
                self._handle_leave_game(addr)
            case PlayerMove(position=position, rotation=rotation):
                self._handle_player_move(addr, position, rotation)
            case PlayerShoot(origin=origin, direction=direction):
                self._handle_player_shoot(addr, origin, direction)
            case Respawn():
                self._handle_respawn(addr)

    # Spawn points

    def _take_random_spawn_point(self) -> SpawnPoint | None:
        if self.maze_data is None:
            return None
        available = [
            i for i in range(len(self.maze_data.spawn_points)) if i not in self.used_spawn_points
        ]
        if not available:
            return None
        chosen = self._rng.choice(available)
        self.used_spawn_points.append(chosen)
        return self.maze_data.spawn_points[chosen]

    def _release_spawn_point(self, position: Vec3) -> None:
        if self.maze_data is None:
            return
        for idx, spawn in enumerate(self.maze_data.spawn_points):
            if spawn.position.distance(position) < _SPAWN_MATCH_DISTANCE:
                self.used_spawn_points = [i for i in self.used_spawn_points if i != idx]
                break

    # Handlers

    def _game_started_message(self) -> GameStarted:
        return GameStarted(
            seed=self.maze_seed, width=MAZE_SIZE, height=MAZE_SIZE, difficulty=self.difficulty
        )

    def _handle_join_game(self, addr: Address, name: str) -> None:
        log_info(f"Player {name} joined")
        if addr in self.addr_to_id:
            self._send(addr, ErrorMessage(message="Player already in game"))
            return
        if any(p.name == name for p in self.players.values()):
            self._send(addr, NameAlreadyTaken())
            return

        player_id = str(uuid.uuid4())
        player = Player.create(player_id, name, self._rng)

        if self.maze_data is None:
            if self.maze_seed is None:
                self.maze_seed = int(self._wall_clock())
            config = MazeConfig(self.maze_seed, MAZE_SIZE, MAZE_SIZE, self.difficulty)
            self.maze_data = generate_maze_from_config(config)

        spawn = self._take_random_spawn_point()
        if spawn is not None:
            player.position = spawn.position
            player.rotation = spawn.rotation

        log_info(f"Player {name} joined")
        self.players[player_id] = player
        self.addr_to_id[addr] = player_id

        log_info(f"sending GameJoined to {name}")
        self._send(addr, GameJoined(player_id=player_id))

        log_info(f"sending PlayerJoined to {name}")
        self._broadcast(PlayerJoined(player=player), exclude=addr)

        log_info(f"sending GameState to {name}")
        self._send(
            addr,
            GameStateUpdate(
                players=dict(self.players),
                state=self.state,
                game_start_time=self.game_start_time,
            ),
        )

        if self.state is GameState.GAME_STARTED and self.maze_seed is not None:
            self._send(addr, self._game_started_message())

        if len(self.players) >= 1:
            self.state = GameState.GAME_STARTED
            self.game_start_time = self._wall_clock()
            self._broadcast(self._game_started_message())

    def _handle_leave_game(self, addr: Address) -> None:
        player_id = self.addr_to_id.pop(addr, None)
        if player_id is None:
            return
        player = self.players.pop(player_id, None)
        if player is None:
            return
        self._release_spawn_point(player.position)
        self._broadcast(PlayerLeft(player_id=player.id))

    def _handle_player_move(self, addr: Address, position: Vec3, rotation: Quat) -> None:
        player_id = self.addr_to_id.get(addr)
        player = self.players.get(player_id) if player_id is not None else None
        if player is None:
            return
        player.position = position
        player.rotation = rotation
        self._broadcast(
            PlayerMoved(player_id=player_id, position=position, rotation=rotation), exclude=addr
        )

    def ray_intersects_wall(self, origin: Vec3, target: Vec3) -> bool:
        """True if a maze wall at chest height lies between ``origin`` and ``target``."""
        if self.maze_data is None:
            return False
        grid = self.maze_data.grid
        grid_height = len(grid)
        grid_width = len(grid[0]) if grid_height else 0
        if grid_width == 0 or grid_height == 0:
            return False

        offset_x = -grid_width * _TILE_SIZE / 2.0 + _TILE_SIZE / 2.0
        offset_z = -grid_height * _TILE_SIZE / 2.0 + _TILE_SIZE / 2.0

        num_steps = int(origin.distance(target) / _RAY_STEP)
        if num_steps <= 1:
            return False
        direction = (target - origin).normalize()

        for i in range(1, num_steps):
            pos = origin + direction * (i * _RAY_STEP)
            if pos.y < 1.0 or pos.y > 3.0:
                continue
            gx = math.floor((pos.x - offset_x) / _TILE_SIZE)
            gz = math.floor((pos.z - offset_z) / _TILE_SIZE)
            if (
                0 <= gx < grid_width
                and 0 <= gz < grid_height
                and grid[gz][gx]
                and pos.distance(target) > _PLAYER_RADIUS
            ):
                return True
        return False

    def _handle_player_shoot(self, addr: Address, origin: Vec3, direction: Vec3) -> None:
        shooter_id = self.addr_to_id.get(addr)
        if shooter_id is None or shooter_id not in self.players:
            return
        weapon = WeaponConfig()
        result = HitscanResult(
            hit=False, hit_position=None, hit_player_id=None, distance=weapon.range
        )

        for other_id, other in self.players.items():
            if other_id == shooter_id or not other.is_alive:
                continue
            distance = origin.distance(other.position)
            if (
                distance <= weapon.range
                and distance < result.distance
                and not self.ray_intersects_wall(origin, other.position)
            ):
                result.hit = True
                result.hit_position = other.position
                result.hit_player_id = other_id
                result.distance = distance

        victim_id = result.hit_player_id
        victim = self.players.get(victim_id) if victim_id is not None else None
        if victim is not None:
            died = victim.take_damage(weapon.damage)
            self._broadcast(
                PlayerDamaged(
                    player_id=victim_id,
                    damage=weapon.damage,
                    health=victim.health,
                    damage_by=shooter_id,
                )
            )
            if died:
                self.players[shooter_id].kills += 1
                self._broadcast(PlayerDied(player_id=victim_id, killer_id=shooter_id))
                self.pending_respawns[victim_id] = self._clock()

        self._broadcast(
            PlayerShot(
                player_id=shooter_id, origin=origin, direction=direction, hit_result=result
            )
        )

    def _handle_respawn(self, addr: Address) -> None:
        player_id = self.addr_to_id.get(addr)
        player = self.players.get(player_id) if player_id is not None else None
        if player is None or player.is_alive:
            return
        started = self.pending_respawns.get(player_id)
        if started is None:
            return

        elapsed = self._clock() - started
        if elapsed < RESPAWN_DELAY:
            remaining = RESPAWN_DELAY - elapsed
            self._send(addr, ErrorMessage(message=f"Respawn in {remaining:.1f} seconds"))
            return

        spawn = self._take_random_spawn_point()
        if spawn is not None:
            player.position = spawn.position
            player.rotation = spawn.rotation
        else:
            player.position = DEFAULT_POSITION
        player.health = player.max_health
        player.is_alive = True
        player.death_time = None
        player.last_damage_time = None
        player.last_damage_by = None

        self._broadcast(PlayerRespawned(player_id=player_id, position=player.position))
        del self.pending_respawns[player_id]

    async def shutdown_gracefully(self) -> None:
        """Tell every client the game is over, then give the datagrams time to leave."""
        count = len(self.players)
        print(f"Sending shutdown notification to {count} client{'' if count == 1 else 's'}...")
        self._broadcast(GameEnded(reason="Server is shutting down"))
        await asyncio.sleep(self._shutdown_delay)
        print("Shutdown complete.")