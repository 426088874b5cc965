"""Ships on the game board and attacks against them."""

from __future__ import annotations

from dataclasses import dataclass, field

BOARD_MIN = 0
BOARD_MAX = 10  # the game takes place on BOARD_MIN <= coordinate < BOARD_MAX
SHIP_SIZE = 5

HORIZONTAL = "-"
VERTICAL = "|"


class PlacementError(ValueError):
    """Raised when a ship would not lie entirely on the board."""


@dataclass
class Tile:
    x: int
    y: int
    is_hit: bool = False


@dataclass
class Ship:
    body: list[Tile] = field(default_factory=list)

    @classmethod
    def place(cls, x: int, y: int, direction: str) -> Ship:
        """Build a ship centred on (x, y); '-' runs along x, '|' along y."""
        offset = SHIP_SIZE // 2
        body = []
        for step in range(SHIP_SIZE):
            tile_x = x - offset + step if direction == HORIZONTAL else x
            tile_y = y - offset + step if direction == VERTICAL else y
            if not (BOARD_MIN <= tile_x < BOARD_MAX and BOARD_MIN <= tile_y < BOARD_MAX):
                raise PlacementError(
                    f"ship at ({x}, {y}) {direction!r} leaves the board at ({tile_x}, {tile_y})"
                )
            body.append(Tile(tile_x, tile_y))
        return cls(body)

    def attack(self, x: int, y: int) -> bool:
        """Mark the first tile at (x, y) as hit; return whether any tile was there."""
        for tile in self.body:
            if tile.x == x and tile.y == y:
                tile.is_hit = True
                return True
        return False

    def is_sunk(self) -> bool:
        return all(tile.is_hit for tile in self.body)