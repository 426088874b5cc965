"""Parsing of client commands and the game actions they trigger."""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from enum import Enum, auto

from .game import PlacementError, Ship
from .player import Player, Roster

MAX_NAME_LEN = 20
MSG_INVALID = "INVALID\n"

_WHITESPACE = " \t\n\v\f\r"
_SKIP = re.compile(f"[{_WHITESPACE}]*")
_WORD = re.compile(f"[^{_WHITESPACE}]{{1,{MAX_NAME_LEN}}}")
_INT = re.compile(r"[+-]?[0-9]+")

log = logging.getLogger(__name__)


class CommandError(ValueError):
    """Raised when a line is not a recognised command."""


class CommandType(Enum):
    UNKNOWN = auto()
    REG = auto()
    BOMB = auto()


@dataclass(frozen=True)
class Command:
    type: CommandType
    name: str = ""
    x: int = 0
    y: int = 0
    direction: str = ""


class _Scanner:
    """Reads fields from the front of a line without backtracking."""

    def __init__(self, text: str) -> None:
        self.text = text
        self.pos = 0

    def literal(self, word: str) -> bool:
        if self.text.startswith(word, self.pos):
            self.pos += len(word)
            return True
        return False

    def _skip(self) -> None:
        self.pos = _SKIP.match(self.text, self.pos).end()

    def token(self, pattern: re.Pattern[str]) -> str | None:
        self._skip()
        match = pattern.match(self.text, self.pos)
        if match is None:
            return None
        self.pos = match.end()
        return match.group()

    def integer(self) -> int | None:
        token = self.token(_INT)
        return None if token is None else int(token)

    def char(self) -> str | None:
        self._skip()
        if self.pos >= len(self.text):
            return None
        found = self.text[self.pos]
        self.pos += 1
        return found


def _scan_reg(text: str) -> Command | None:
    scanner = _Scanner(text)
    if not scanner.literal("REG"):
        return None
    name = scanner.token(_WORD)
    if name is None:
        return None
    x = scanner.integer()
    if x is None:
        return None
    y = scanner.integer()
    if y is None:
        return None
    direction = scanner.char()
    if direction is None:
        return None
    return Command(CommandType.REG, name, x, y, direction)


def _scan_bomb(text: str) -> Command | None:
    scanner = _Scanner(text)
    if not scanner.literal("BOMB"):
        return None
    x = scanner.integer()
    if x is None:
        return None
    y = scanner.integer()
    if y is None:
        return None
    return Command(CommandType.BOMB, x=x, y=y)


def _clip(msg: str, size: int) -> str:
    """Limit a message to what fits in a fixed buffer of ``size`` bytes."""
    return msg[: size - 1]


def validate_name(name: str) -> bool:
    """A name is 1 to 20 ASCII letters, digits or hyphens."""
    if not 0 < len(name) <= MAX_NAME_LEN:
        return False
    return all(c == "-" or (c.isascii() and c.isalnum()) for c in name)


def parse_command(line: str) -> Command:
    """Parse a ``REG name x y dir`` or ``BOMB x y`` line."""
    text = line.split("\0", 1)[0]
    command = _scan_reg(text) or _scan_bomb(text)
    if command is None:
        raise CommandError(f"unrecognised command: {line!r}")
    return command


def handle_command(player: Player, line: str, roster: Roster) -> None:
    """Parse ``line`` from ``player`` and carry it out."""
    try:
        command = parse_command(line)
    except CommandError:
        log.warning("handle_command: invalid command from %d", player.fd)
        player.tell(MSG_INVALID)
        return

    if command.type is CommandType.REG:
        register_player(player, command, roster)
    elif command.type is CommandType.BOMB:
        log.info("handle_command: bombing attempt by %d", player.fd)
        bomb_player(player, command, roster)
    else:
        player.tell(MSG_INVALID)


def register_player(player: Player, command: Command, roster: Roster) -> None:
    """Register ``player`` under the command's name with a freshly placed ship."""
    if player.registered:
        log.warning("register_player: already registered (%d)", player.fd)
        player.tell(MSG_INVALID)
        return

    if not validate_name(command.name):
        log.warning("register_player: invalid name (%d)", player.fd)
        player.tell(MSG_INVALID)
        return

    if roster.find_by_name(command.name) is not None:
        log.warning("register_player: name taken (%d)", player.fd)
        player.tell("TAKEN\n")
        return

    try:
        ship = Ship.place(command.x, command.y, command.direction)
    except PlacementError:
        log.warning("register_player: invalid ship coords (%d)", player.fd)
        player.tell(MSG_INVALID)
        return

    player.setup(command.name, ship)
    player.tell("WELCOME\n")
    roster.broadcast(_clip(f"JOIN {player.name}\n", 30))


def bomb_player(player: Player, command: Command, roster: Roster) -> None:
    """Drop a bomb on (x, y), announce hits or a miss, then remove finished players."""
    x, y = command.x, command.y
    hit = False

    for victim in roster:
        if not victim.registered or victim.ship is None:
            log.debug("bomb_player: unregistered player")
            continue
        if victim.ship.attack(x, y):
            hit = True
            roster.broadcast(_clip(f"HIT {player.name} {x} {y} {victim.name}\n", 60))

    if not hit:
        roster.broadcast(_clip(f"MISS {player.name} {x} {y}\n", 40))

    roster.cleanup()