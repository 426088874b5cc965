"""TCP game server: accepts players and feeds their lines to the parser."""

from __future__ import annotations

import logging
import re
import selectors
import socket
import sys
from types import TracebackType

from .buffer import MAX_MSG_LEN
from .parser import handle_command
from .player import Player, Roster

MAX_QUEUE_SIZE = 10
MIN_PORT = 1024  # exclusive
MAX_PORT = 65535

_ATOI = re.compile(r"[ \t\n\v\f\r]*([+-]?[0-9]+)")

log = logging.getLogger(__name__)


def create_listener(port: int) -> socket.socket:
    """Open a TCP socket listening on all interfaces at ``port``."""
    sock = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
    try:
        sock.bind(("", port))
        sock.listen(MAX_QUEUE_SIZE)
    except OSError:
        sock.close()
        raise
    return sock


class GameServer:
    """Multiplexes the listening socket and every player connection."""

    def __init__(self, listener: socket.socket) -> None:
        self.listener = listener
        self._selector = selectors.DefaultSelector()
        self._selector.register(listener, selectors.EVENT_READ)
        self.roster = Roster(on_remove=self._forget)

    def __enter__(self) -> GameServer:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()

    def _forget(self, player: Player) -> None:
        try:
            self._selector.unregister(player.connection)
        except (KeyError, ValueError):
            pass

    def serve_forever(self) -> None:
        """Handle events until polling fails."""
        while True:
            try:
                self.poll_once(None)
            except OSError as exc:
                log.error("poll: %s", exc)
                break

    def poll_once(self, timeout: float | None) -> int:
        """Wait up to ``timeout`` seconds and handle what is ready; return the event count."""
        events = self._selector.select(timeout)
        for key, _ in events:
            if key.fileobj is self.listener:
                self.handle_connection()
            else:
                self.handle_client(key.fd)
        return len(events)

    def handle_connection(self) -> None:
        """Accept one pending client and add it to the roster."""
        try:
            conn, (host, port) = self.listener.accept()
        except OSError as exc:
            log.error("accept: %s", exc)
            return

        try:
            conn.setblocking(False)
            self._selector.register(conn, selectors.EVENT_READ)
        except (OSError, ValueError, KeyError) as exc:
            log.error("registering client failed: %s", exc)
            conn.close()
            return

        player = self.roster.add(conn.fileno(), conn)
        log.info("New connection from %s:%d (fd=%d)", host, port, player.fd)

    def _drop(self, player: Player) -> None:
        if player.registered:
            self.roster.broadcast(f"GG {player.name}\n")
        self.roster.remove(player.fd)

    def handle_client(self, fd: int) -> None:
        """Read from the client on ``fd`` and run at most one complete line."""
        player = self.roster.find(fd)
        if player is None:
            log.warning("No player found for fd=%d", fd)
            try:
                key = self._selector.unregister(fd)
            except (KeyError, ValueError):
                return
            key.fileobj.close()
            return

        if player.disconnected:
            self._drop(player)
            return

        try:
            data = player.connection.recv(MAX_MSG_LEN)
        except BlockingIOError:
            return
        except OSError as exc:
            log.error("read from fd %d: %s", fd, exc)
            data = b""
        else:
            if not data:
                log.info("Client fd=%d disconnected", fd)

        if not data:
            self._drop(player)
            return

        buffer = player.buffer
        if buffer.append(data) > 0 or (buffer.is_full() and buffer.newline_index() is None):
            log.warning("Client %d buffer overflow. Disconnecting...", fd)
            self.roster.remove(fd)
            return

        line = buffer.pop_line()
        if line is not None:
            handle_command(player, line.decode("latin-1"), self.roster)

    def close(self) -> None:
        """Release the selector, every player connection and the listener."""
        self._selector.close()
        self.roster.close_all()
        self.listener.close()


def parse_port(text: str) -> int:
    """Read a leading integer from ``text`` and check it is a usable port."""
    match = _ATOI.match(text)
    port = int(match.group(1)) if match else 0
    if not MIN_PORT < port <= MAX_PORT:
        raise ValueError(f"invalid port: {port}")
    return port


def main(argv: list[str] | None = None) -> int:
    """Run the server on the port given as the only argument."""
    args = sys.argv[1:] if argv is None else argv
    if len(args) != 1:
        print("One positional argument (the port) expected", file=sys.stderr)
        return 1

    try:
        port = parse_port(args[0])
    except ValueError as exc:
        print(f"main: {exc}", file=sys.stderr)
        return 1

    logging.basicConfig(level=logging.INFO, format="[log] %(message)s")
    try:
        listener = create_listener(port)
    except OSError as exc:
        print(f"main: {exc}", file=sys.stderr)
        return 1

    log.info("main: listening on port %d...", port)
    with GameServer(listener) as server:
        try:
            server.serve_forever()
        except KeyboardInterrupt:
            pass
    return 0


if __name__ == "__main__":
    sys.exit(main())