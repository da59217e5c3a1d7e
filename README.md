# spherewars

The networking and game-logic core of a multiplayer arena shooter played in a
generated maze. Players are spheres; the server is authoritative for movement,
hitscan shots, damage, deaths and respawns.

The package provides:

- an asyncio UDP game server (`spherewars.server.GameServer`) and the
  `spherewars-server` command that starts it (`spherewars.serve`),
- deterministic, seeded maze generation with spawn points
  (`spherewars.maze`), so every side builds the same maze from a seed,
- the JSON message protocol between client and server (`spherewars.messages`),
- player state and damage rules (`spherewars.player.Player`) and the shared
  value types `Vec3`, `Quat`, `GameState`, `WeaponConfig` and `HitscanResult`
  (`spherewars.types`),
- a non-blocking client (`spherewars.network.NetworkClient`) and helpers that
  check a server's health and whether a username is free
  (`spherewars.connection`).

## Installing

```
pip install .
```

For running the tests:

```
pip install ".[test]"
pytest
```

## Running a server

```
spherewars-server --host 127.0.0.1 --port 8080 --difficulty medium
```

Options:

- `--host` – address to bind (default `127.0.0.1`)
- `-p`, `--port` – UDP port, 0–65535 (default `8080`)
- `-d`, `--difficulty` – `easy`, `medium` or `hard` (default `medium`);
  any other value prints an error and exits with status 1
  - easy: 25% extra connections, 40% dead end removal
  - medium: 15% extra connections, 20% dead end removal
  - hard: 5% extra connections, no dead end removal
- `-l`, `--local` – bind to the address of the interface this machine uses to
  reach the internet instead of `--host`

If the port cannot be bound, the likely cause (port in use, permission denied
or another network error) is printed and the command exits with status 1.

The maze is 12×12 nodes and is generated when the first player joins, seeded
from the current time in whole seconds. Each joining player is placed on a
free spawn point. A player hit by a shot loses 50 health; at 0 the player dies
and may ask to respawn after 3 seconds (earlier requests are answered with an
`Error` message saying how long remains). Press Ctrl+C to stop; every
connected client is sent a `GameEnded` message before the server exits.

`GameServer` can also be driven without the network: give it any object with a
`sendto(data, addr)` method and feed datagrams to `handle_datagram(addr, data)`.

## Generating a maze

```python
from spherewars.maze import MazeConfig, generate_maze_from_config

data = generate_maze_from_config(MazeConfig(seed=42, width=12, height=12, difficulty="hard"))
print(len(data.grid), len(data.grid[0]))   # 38 38
print(len(data.spawn_points))
```

`grid[y][x]` is `True` for a wall; the outer border is always wall. Unknown
difficulties are treated as `medium`. The same config always gives the same
maze and spawn points. `generate_maze_with_seed(width, height, difficulty,
seed)` returns the grid alone.

## Talking to a server

```python
from spherewars.network import NetworkClient
from spherewars.types import Vec3, Quat

with NetworkClient("127.0.0.1", 8080, "alice") as client:
    client.join_game()
    client.send_move(Vec3(1.0, 2.0, 3.0), Quat.from_rotation_y(0.5))
    message = client.try_recv()   # a server message, or None if nothing valid is waiting
    client.send_leave_game()
```

`NetworkClient` takes an IP address (IPv4 or IPv6), not a host name. Sending
never raises on network errors.

Before joining, `spherewars.connection` can check the server:

- `check_server_health(host, port, timeout=5.0)` – `True` if the server
  answers a health probe,
- `check_username_availability(host, port, username, timeout=5.0)` – returns
  `UsernameStatus.AVAILABLE` or `UsernameStatus.TAKEN`, and raises
  `ConnectionFailed` if the check itself fails; a successful trial join is
  undone with a leave message,
- `ConnectionInfo.prompt_user()` – asks for address, port and username on the
  terminal, runs both checks and returns a `ConnectionInfo`, or raises
  `ConnectionFailed`. Usernames must not be blank and may be at most 20 bytes
  (`validate_username`).

Messages are encoded and decoded with `encode_client_message`,
`decode_client_message`, `encode_server_message` and `decode_server_message`
in `spherewars.messages`; malformed input raises `MessageError`.

## What this package does not do

There is no playable game client here: no window, 3D rendering, camera,
keyboard or mouse handling, movement physics, minimap or heads-up display.
The package offers the server, the protocol, the maze and the client-side
networking that such a client would build on.