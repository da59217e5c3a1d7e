"""UDP game server, message protocol, seeded maze generation and client networking for a multiplayer sphere arena shooter."""

__version__ = "0.1.0"