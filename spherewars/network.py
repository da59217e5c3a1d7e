"""Non-blocking UDP client used by the running game."""

from __future__ import annotations

import ipaddress
import socket
from typing import Any

from .messages import (
    JoinGame,
    LeaveGame,
    MessageError,
    PlayerMove,
    PlayerShoot,
    Respawn,
    decode_server_message,
    encode_client_message,
)
from .types import Quat, Vec3

_BUFFER_SIZE = 1024


class NetworkClient:
    """Sends game actions to the server and polls for its messages."""

    def __init__(self, host: str, port: int, player_name: str) -> None:
        address = ipaddress.ip_address(host)
        if not 0 <= port <= 65535:
            raise ValueError(f"invalid port: {port!r}")
        if address.version == 6:
            family, local = socket.AF_INET6, "::"
        else:
            family, local = socket.AF_INET, "0.0.0.0"
        self.server_addr = (str(address), port)
        self.player_name = player_name
        self._socket = socket.socket(family, socket.SOCK_DGRAM)
        try:
            self._socket.bind((local, 0))
            self._socket.setblocking(False)
        except OSError:
            self._socket.close()
            raise

    def __enter__(self) -> NetworkClient:
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    def _send(self, message: Any) -> None:
        try:
            self._socket.sendto(encode_client_message(message).encode(), self.server_addr)
        except OSError:
            pass

    def join_game(self) -> None:
        self._send(JoinGame(player_name=self.player_name))

    def try_recv(self) -> Any | None:
        """Next server message, or None if nothing valid is waiting."""
        try:
            data, _ = self._socket.recvfrom(_BUFFER_SIZE)
        except OSError:
            return None
        try:
            return decode_server_message(data)
        except MessageError:
            return None

    def send_move(self, position: Vec3, rotation: Quat) -> None:
        self._send(PlayerMove(position=position, rotation=rotation))

    def send_shoot(self, origin: Vec3, direction: Vec3) -> None:
        self._send(PlayerShoot(origin=origin, direction=direction))

    def send_respawn(self) -> None:
        self._send(Respawn())

    def send_leave_game(self) -> None:
        self._send(LeaveGame())

    def close(self) -> None:
        self._socket.close()