"""Interactive connection setup: server check and username check."""

from __future__ import annotations

import socket
from dataclasses import dataclass
from enum import Enum
from typing import Callable, TypeVar

from .messages import (
    GameJoined,
    JoinGame,
    LeaveGame,
    MessageError,
    NameAlreadyTaken,
    TestHealth,
    decode_server_message,
    encode_client_message,
)

_T = TypeVar("_T")
_BUFFER_SIZE = 1024
DEFAULT_TIMEOUT = 5.0


class ConnectionFailed(Exception):
    """Raised when the client cannot get ready to join the server."""


class UsernameStatus(Enum):
    AVAILABLE = "available"
    TAKEN = "taken"


def validate_username(name: str) -> str:
    """Return ``name`` if usable; raise ValueError otherwise."""
    if not name.strip():
        raise ValueError("Username cannot be empty")
    if len(name.encode("utf-8")) > 20:
        raise ValueError("Username must be 20 characters or less")
    return name


def _parse_port(text: str) -> int:
    if not (text.isascii() and text.isdigit()) or int(text) > 65535:
        raise ValueError(f"invalid port: {text!r}")
    return int(text)


def _client_socket() -> socket.socket:
    sock = socket.socket(socket.AF_INET, socket.SOCK_DGRAM)
    try:
        sock.bind(("0.0.0.0", 0))
    except OSError:
        sock.close()
        raise
    return sock


def check_server_health(host: str, port: int, timeout: float = DEFAULT_TIMEOUT) -> bool:
    """True if the server answers a health probe with any valid message."""
    if timeout <= 0:
        return False
    try:
        with _client_socket() as sock:
            sock.settimeout(timeout)
            sock.sendto(encode_client_message(TestHealth()).encode(), (host, port))
            data, _ = sock.recvfrom(_BUFFER_SIZE)
    except OSError:
        return False
    try:
        decode_server_message(data)
    except MessageError:
        return False
    return True


def check_username_availability(
    host: str, port: int, username: str, timeout: float = DEFAULT_TIMEOUT
) -> UsernameStatus:
    """Ask the server whether ``username`` is free.

    A successful trial join is undone with a leave message. Raises
    ConnectionFailed when the check itself fails.
    """
    try:
        sock = _client_socket()
    except OSError as exc:
        raise ConnectionFailed(f"Failed to create socket: {exc}") from exc

    with sock:
        if timeout <= 0:
            raise ConnectionFailed(f"Failed to set timeout: invalid timeout {timeout!r}")
        sock.settimeout(timeout)
        server = (host, port)
        try:
            sock.sendto(encode_client_message(JoinGame(player_name=username)).encode(), server)
        except OSError as exc:
            raise ConnectionFailed(f"Failed to send message: {exc}") from exc
        try:
            data, _ = sock.recvfrom(_BUFFER_SIZE)
        except OSError as exc:
            raise ConnectionFailed(f"No response from server: {exc}") from exc
        try:
            reply = decode_server_message(data)
        except MessageError as exc:
            raise ConnectionFailed(f"Invalid server response: {exc}") from exc

        if isinstance(reply, NameAlreadyTaken):
            return UsernameStatus.TAKEN
        if isinstance(reply, GameJoined):
            try:
                sock.sendto(encode_client_message(LeaveGame()).encode(), server)
            except OSError:
                pass
        return UsernameStatus.AVAILABLE


def _ask_until_valid(
    ask: Callable[[str], str],
    label: str,
    default: str | None,
    convert: Callable[[str], _T],
) -> _T:
    prompt = f"{label} [{default}]: " if default is not None else f"{label}: "
    while True:
        try:
            answer = ask(prompt)
        except EOFError as exc:
            raise ConnectionFailed("input closed") from exc
        if answer == "" and default is not None:
            answer = default
        try:
            return convert(answer)
        except ValueError as exc:
            print(f"✘ {exc}")


@dataclass
class ConnectionInfo:
    host: str
    port: int
    username: str

    @classmethod
    def prompt_user(cls, ask: Callable[[str], str] | None = None) -> ConnectionInfo:
        """Ask for server, port and username, checking each against the server."""
        ask = ask if ask is not None else input
        print("🎮 Welcome to Sphere Wars!")
        print("=============================")

        host = _ask_until_valid(ask, "Server address", "127.0.0.1", str)
        port = _ask_until_valid(ask, "Server port", "8080", _parse_port)

        print(f"🔍 Testing connection to {host}:{port}...")
        if not check_server_health(host, port):
            raise ConnectionFailed(
                "❌ Cannot connect to server. Please check the address and port."
            )
        print("✅ Server connection successful!")

        username = _ask_until_valid(ask, "Enter your username", None, validate_username)

        print("🔍 Checking username availability...")
        try:
            status = check_username_availability(host, port, username)
        except ConnectionFailed as exc:
            raise ConnectionFailed(f"❌ Error checking username: {exc}") from exc
        if status is UsernameStatus.TAKEN:
            raise ConnectionFailed(
                "❌ Username is already taken. Please restart and try a different name."
            )
        print(f"✅ Username '{username}' is available!")
        return cls(host=host, port=port, username=username)