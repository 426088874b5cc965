"""A multiplayer battleship-style TCP game server."""

__version__ = "0.1.0"

__all__ = ["buffer", "game", "player", "parser", "server"]