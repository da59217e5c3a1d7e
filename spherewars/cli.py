"""Command-line options for the game server."""

from __future__ import annotations

import argparse
from dataclasses import dataclass

from .utils import get_local_ip

DIFFICULTIES = ("easy", "medium", "hard")

_DIFFICULTY_HELP = (
    "Maze difficulty affects maze complexity:\n"
    "  easy   - More connections, fewer dead ends "
    "(25% extra connections, 40% dead end removal)\n"
    "  medium - Balanced maze (15% extra connections, 20% dead end removal)\n"
    "  hard   - Minimal connections, more dead ends "
    "(5% extra connections, no dead end removal)"
)


@dataclass
class ServerArgs:
    host: str = "127.0.0.1"
    port: int = 8080
    difficulty: str = "medium"
    local: bool = False

    def validate(self) -> None:
        """Raise ValueError if the difficulty is not one of the known levels."""
        if self.difficulty not in DIFFICULTIES:
            raise ValueError(
                f"Invalid difficulty '{self.difficulty}'. "
                "Valid options are: easy, medium, hard"
            )

    def resolve_host(self) -> str:
        """Host to bind to; with ``local`` set, the machine's LAN address."""
        if self.local:
            self.host = get_local_ip()
        return self.host


def _port(text: str) -> int:
    if not (text.isascii() and text.isdigit()) or int(text) > 65535:
        raise argparse.ArgumentTypeError(f"invalid port: {text!r}")
    return int(text)


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="server",
        epilog=_DIFFICULTY_HELP,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("--host", default="127.0.0.1", help="Server host address")
    parser.add_argument("-p", "--port", type=_port, default=8080, help="Server port")
    parser.add_argument(
        "-d", "--difficulty", default="medium", help="Maze difficulty level"
    )
    parser.add_argument("-l", "--local", action="store_true", help="Host on local IP")
    return parser


def parse_args(argv: list[str] | None = None) -> ServerArgs:
    """Parse server options; exits on malformed arguments as argparse does."""
    ns = _build_parser().parse_args(argv)
    return ServerArgs(host=ns.host, port=ns.port, difficulty=ns.difficulty, local=ns.local)