"""Connected players and the roster that holds them."""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterator
from typing import Protocol

from .buffer import LineBuffer
from .game import Ship

log = logging.getLogger(__name__)


class Connection(Protocol):
    def send(self, data: bytes) -> int: ...

    def close(self) -> None: ...


class Player:
    """A client connection together with its game state."""

    def __init__(self, fd: int, connection: Connection) -> None:
        self.fd = fd
        self.connection = connection
        self.name = ""
        self.buffer = LineBuffer()
        self.ship: Ship | None = None
        self.registered = False
        self.disconnected = False

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Player):
            return NotImplemented
        return self.fd == other.fd

    def __hash__(self) -> int:
        return hash(self.fd)

    def __repr__(self) -> str:
        return f"Player(fd={self.fd}, name={self.name!r}, registered={self.registered})"

    def setup(self, name: str, ship: Ship) -> None:
        """Register the player under ``name`` with ``ship``."""
        self.name = name
        self.ship = ship
        self.registered = True

    def tell(self, msg: str) -> None:
        """Send ``msg``; a full or broken connection marks the player disconnected."""
        try:
            self.connection.send(msg.encode())
        except (BlockingIOError, BrokenPipeError):
            self.disconnected = True
        except OSError as exc:
            log.error("send to fd %d failed: %s", self.fd, exc)

    def close(self) -> None:
        try:
            self.connection.close()
        except OSError as exc:
            log.error("close of fd %d failed: %s", self.fd, exc)


class Roster:
    """Players in connection order, newest first."""

    def __init__(self, on_remove: Callable[[Player], None] | None = None) -> None:
        self._players: list[Player] = []
        self._on_remove = on_remove

    def __iter__(self) -> Iterator[Player]:
        return iter(tuple(self._players))

    def __len__(self) -> int:
        return len(self._players)

    def add(self, fd: int, connection: Connection) -> Player:
        player = Player(fd, connection)
        self._players.insert(0, player)
        return player

    def _discard(self, player: Player) -> None:
        self._players.remove(player)
        if self._on_remove is not None:
            self._on_remove(player)
        player.close()

    def remove(self, fd: int) -> Player | None:
        """Drop the player on ``fd`` and close it; return it, or None if absent."""
        player = self.find(fd)
        if player is not None:
            self._discard(player)
        return player

    def cleanup(self) -> list[Player]:
        """Remove registered players that are sunk or disconnected, announcing each."""
        removed = []
        for player in tuple(self._players):
            if not player.registered:
                continue
            sunk = player.ship is not None and player.ship.is_sunk()
            if sunk or player.disconnected:
                log.info("cleanup: removing player %s", player.name)
                self.broadcast(f"GG {player.name}\n")
                self._discard(player)
                removed.append(player)
        return removed

    def find(self, fd: int) -> Player | None:
        return next((p for p in self._players if p.fd == fd), None)

    def find_by_name(self, name: str) -> Player | None:
        return next((p for p in self._players if p.name == name), None)

    def broadcast(self, msg: str) -> None:
        for player in tuple(self._players):
            player.tell(msg)

    def close_all(self) -> None:
        for player in self._players:
            player.close()
        self._players.clear()