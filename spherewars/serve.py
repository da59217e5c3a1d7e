"""Entry point that runs the game server until interrupted."""

from __future__ import annotations

import asyncio
import contextlib
import signal
import sys

from .cli import ServerArgs, parse_args
from .server import GameServer
from .utils import create_udp_server_socket, print_info


async def run(args: ServerArgs) -> None:
    """Validate ``args``, bind the socket and serve until SIGINT."""
    host = args.resolve_host()
    try:
        args.validate()
    except ValueError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        raise SystemExit(1) from exc

    print_info(args)
    sock = create_udp_server_socket(host, args.port)
    server = GameServer(sock, args.difficulty)

    loop = asyncio.get_running_loop()
    stop = asyncio.Event()
    try:
        previous = signal.signal(
            signal.SIGINT, lambda *_: loop.call_soon_threadsafe(stop.set)
        )
    except ValueError:
        previous = None

    serve_task = asyncio.create_task(server.listen_and_serve())
    stop_task = asyncio.create_task(stop.wait())
    try:
        done, _ = await asyncio.wait(
            {serve_task, stop_task}, return_when=asyncio.FIRST_COMPLETED
        )
        if serve_task in done:
            serve_task.result()
            print("Server stopped normally")
        else:
            print("Received shutdown signal, notifying clients...")
            await server.shutdown_gracefully()
    finally:
        if previous is not None:
            signal.signal(signal.SIGINT, previous)
        for task in (serve_task, stop_task):
            task.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await task
        sock.close()


def main(argv: list[str] | None = None) -> None:
    asyncio.run(run(parse_args(argv)))