"""Console output and socket helpers for the game server."""

from __future__ import annotations

import errno
import socket
import sys
from typing import Any

GREEN = "\x1b[32m"
YELLOW = "\x1b[33m"
RED = "\x1b[31m"
RESET = "\x1b[0m"

_DIFFICULTY_INFO = {
    "easy": "Easy (More connections, fewer dead ends)",
    "medium": "Medium (Balanced maze complexity)",
    "hard": "Hard (Minimal connections, more dead ends)",
}


def print_info(args: Any) -> None:
    """Print the server banner for ``args`` (anything with host, port and difficulty)."""
    print("🎮 Sphere Wars UDP Server")
    print(f"Host: {args.host}")
    print(f"Port: {args.port}")
    info = _DIFFICULTY_INFO.get(args.difficulty, "Unknown")
    print(f"Difficulty: {args.difficulty} - {info}")
    print("Maze Size: 12x12 with randomized spawn points")
    print("=====================================")


def _bind_udp(host: str, port: int) -> socket.socket:
    family, kind, proto, _, sockaddr = socket.getaddrinfo(host, port, type=socket.SOCK_DGRAM)[0]
    sock = socket.socket(family, kind, proto)
    try:
        sock.bind(sockaddr)
    except OSError:
        sock.close()
        raise
    return sock


def _report_bind_failure(addr: str, port: int, exc: OSError) -> None:
    def err(line: str) -> None:
        print(line, file=sys.stderr)

    err(f"❌ Failed to bind to {addr}: {exc}")
    if exc.errno == errno.EADDRINUSE:
        err(f"💡 Port {port} is already in use. Please:")
        err("   1. Stop any existing server instances")
        err("   2. Wait a few seconds for the port to be released")
        err("   3. Try a different port with: --port <PORT>")
        err(f"   4. Check what's using the port with: lsof -i :{port}")
    elif isinstance(exc, PermissionError) or exc.errno == errno.EACCES:
        err("💡 Permission denied. Try:")
        err(f"   1. Using a port above 1024 (current: {port})")
        err("   2. Running with appropriate permissions")
    else:
        err(f"💡 Network error: {exc}")


def create_udp_server_socket(host: str, port: int) -> socket.socket:
    """Bind a UDP socket to ``host:port``.

    On failure, explains the likely cause on stderr and exits with status 1.
    """
    addr = f"{host}:{port}"
    try:
        sock = _bind_udp(host, port)
    except OSError as exc:
        _report_bind_failure(addr, port, exc)
        raise SystemExit(1) from exc
    print(f"✅ Successfully bound to {addr}")
    return sock


def log_info(msg: str) -> None:
    print(f"{GREEN}{msg}{RESET}")


def log_warning(msg: str) -> None:
    print(f"{YELLOW}{msg}{RESET}")


def log_error(msg: str) -> None:
    print(f"{RED}{msg}{RESET}")


def get_local_ip() -> str:
    """Address of the interface used to reach the public internet."""
    with socket.socket(socket.AF_INET, socket.SOCK_DGRAM) as sock:
        sock.bind(("0.0.0.0", 0))
        sock.connect(("8.8.8.8", 80))
        return sock.getsockname()[0]